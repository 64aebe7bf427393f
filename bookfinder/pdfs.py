import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from bookfinder.api_clients.customsearch import CustomSearchClient, customsearch_client
from bookfinder.config import config

logger = logging.getLogger(__name__)

def _text(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    return value if isinstance(value, str) else ""

def pick_pdf_link(items: List[Dict[str, Any]]) -> Optional[str]:
    """
    First link ending in .pdf wins; otherwise the first result that mentions
    pdf in its link, display domain or snippet.
    """
    results = [item for item in items if isinstance(item, dict) and _text(item, "link")]

    for item in results:
        link = _text(item, "link")
        if link.lower().endswith(".pdf"):
            return link

    for item in results:
        link = _text(item, "link")
        if (
            ".pdf" in link.lower()
            or "pdf" in _text(item, "displayLink").lower()
            or "pdf" in _text(item, "snippet").lower()
        ):
            return link
    return None

class PdfLocator:
    def __init__(
        self,
        client: Optional[CustomSearchClient] = None,
        api_key: Optional[str] = None,
        cx: Optional[str] = None,
    ):
        self.client = client or customsearch_client
        self._api_key = api_key
        self._cx = cx

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key or config.GOOGLE_API_KEY

    @property
    def cx(self) -> Optional[str]:
        return self._cx or config.GOOGLE_CX

    async def locate(self, title: str, author: str) -> Optional[str]:
        if not self.api_key or not self.cx:
            logger.warning("Google Programmable Search Engine credentials not configured")
            return None

        clean_title = re.sub(r"[^\w\s]", "", title).strip()
        clean_author = re.sub(r"[^\w\s]", "", author).strip()
        query = f'"{clean_title}" "{clean_author}" filetype:pdf'
        logger.debug(f"Searching for PDF: {query}")

        try:
            items = await self.client.search(self.api_key, self.cx, query, num=5, exact_terms=clean_title)
        except httpx.HTTPStatusError as e:
            logger.error(f"PDF search error for '{title}': HTTP {e.response.status_code}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"PDF search error for '{title}': {e}")
            return None

        link = pick_pdf_link(items)
        if link:
            logger.info(f"Found PDF for '{title}': {link}")
        else:
            logger.info(f"No PDF found for '{title}'")
        return link

# Global instance
pdf_locator = PdfLocator()
