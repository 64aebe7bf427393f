import httpx
from typing import Dict, Any, List, Optional

class OpenLibraryClient:
    """Client for the Open Library search API and cover CDN"""
    BASE_URL = "https://openlibrary.org/search.json"
    COVER_ID_URL = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"
    COVER_ISBN_URL = "https://covers.openlibrary.org/b/isbn/{isbn}-L.jpg"
    SEARCH_FIELDS = "key,title,author_name,cover_i,isbn,edition_count"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport

    async def search(self, title: str, author: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Search by title and author. Returns the document records; anything that isn't one is dropped."""
        async with httpx.AsyncClient(transport=self.transport, timeout=10) as client:
            params = {
                "q": f'title:"{title}" author:"{author}"',
                "limit": limit,
                "fields": self.SEARCH_FIELDS,
            }
            response = await client.get(self.BASE_URL, params=params)
            response.raise_for_status()
            data = response.json()
            docs = data.get("docs") if isinstance(data, dict) else None
            if not isinstance(docs, list):
                return []
            return [doc for doc in docs if isinstance(doc, dict)]

    async def cover_exists(self, url: str) -> bool:
        """HEAD check for a cover image. The CDN serves a blank image unless default=false."""
        async with httpx.AsyncClient(transport=self.transport, timeout=5, follow_redirects=True) as client:
            response = await client.head(url, params={"default": "false"})
            return response.is_success

# Global instance
openlibrary_client = OpenLibraryClient()
