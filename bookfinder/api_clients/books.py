import httpx
from typing import Dict, Any, List, Optional

class GoogleBooksClient:
    BASE_URL = "https://www.googleapis.com/books/v1/volumes"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport

    async def search_book(self, title: str, author: str, max_results: int = 5) -> List[Dict[str, Any]]:
        """Returns the volume items; malformed entries are dropped."""
        async with httpx.AsyncClient(transport=self.transport, timeout=10) as client:
            params = {
                "q": f'intitle:"{title}" inauthor:"{author}"',
                "maxResults": max_results,
                "printType": "books",
            }
            response = await client.get(self.BASE_URL, params=params)
            response.raise_for_status()
            data = response.json()
            items = data.get("items") if isinstance(data, dict) else None
            if not isinstance(items, list):
                return []
            return [item for item in items if isinstance(item, dict)]

books_client = GoogleBooksClient()
