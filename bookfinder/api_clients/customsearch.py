import httpx
from typing import Dict, Any, List, Optional

class CustomSearchClient:
    """Client for the Google Programmable Search Engine (Custom Search JSON API)"""
    BASE_URL = "https://www.googleapis.com/customsearch/v1"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport

    async def search(
        self,
        api_key: str,
        cx: str,
        query: str,
        num: int = 5,
        exact_terms: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        async with httpx.AsyncClient(transport=self.transport, timeout=15) as client:
            params = {
                "key": api_key,
                "cx": cx,
                "q": query,
                "num": num,
                "safe": "off",
            }
            if exact_terms:
                params["exactTerms"] = exact_terms
            response = await client.get(self.BASE_URL, params=params)
            response.raise_for_status()
            data = response.json()
            items = data.get("items") if isinstance(data, dict) else None
            if not isinstance(items, list):
                return []
            return [item for item in items if isinstance(item, dict)]

# Global instance
customsearch_client = CustomSearchClient()
