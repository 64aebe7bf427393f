import logging
import re
from typing import Optional
from urllib.parse import quote

import httpx

from bookfinder.api_clients.books import GoogleBooksClient, books_client
from bookfinder.api_clients.openlibrary import OpenLibraryClient, openlibrary_client

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://via.placeholder.com/400x600/1e293b/f8fafc?text={title}+by+{author}"

# Preference order for Google Books image variants
IMAGE_VARIANTS = ("large", "medium", "thumbnail")

def clean_for_search(text: str) -> str:
    return re.sub(r"[^\w\s]", "", text).strip().lower()

def placeholder_url(title: str, author: str) -> str:
    return PLACEHOLDER_URL.format(
        title=quote(title[:30], safe=""),
        author=quote(author[:20], safe=""),
    )

class CoverResolver:
    """
    Turns a title/author pair into a displayable image URL.
    Open Library, then Google Books, then a generated placeholder. Never raises.
    """

    def __init__(
        self,
        openlibrary: Optional[OpenLibraryClient] = None,
        google_books: Optional[GoogleBooksClient] = None,
    ):
        self.openlibrary = openlibrary or openlibrary_client
        self.google_books = google_books or books_client

    async def from_openlibrary(self, title: str, author: str) -> Optional[str]:
        try:
            docs = await self.openlibrary.search(clean_for_search(title), clean_for_search(author))
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.warning(f"Open Library search error for '{title}': {e}")
            return None

        for doc in docs:
            if doc.get("cover_i"):
                url = self.openlibrary.COVER_ID_URL.format(cover_id=doc["cover_i"])
                logger.info(f"Found cover for '{title}': {url}")
                return url

        # No cover id in the results; try an ISBN cover
        isbn = next(
            (doc["isbn"][0] for doc in docs if isinstance(doc.get("isbn"), list) and doc["isbn"]),
            None,
        )
        if isbn:
            url = self.openlibrary.COVER_ISBN_URL.format(isbn=isbn)
            logger.debug(f"Trying ISBN cover for '{title}': {url}")
            try:
                if await self.openlibrary.cover_exists(url):
                    return url
            except httpx.HTTPError as e:
                logger.debug(f"ISBN cover check failed for '{title}': {e}")
            logger.info(f"ISBN cover not available for '{title}'")

        logger.info(f"No cover found in Open Library for '{title}'")
        return None

    async def from_google_books(self, title: str, author: str) -> Optional[str]:
        try:
            items = await self.google_books.search_book(title, author)
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.warning(f"Google Books API error for '{title}': {e}")
            return None

        for item in items:
            info = item.get("volumeInfo")
            links = info.get("imageLinks") if isinstance(info, dict) else None
            if not isinstance(links, dict):
                continue
            for variant in IMAGE_VARIANTS:
                if isinstance(links.get(variant), str) and links[variant]:
                    logger.info(f"Found {variant} cover from Google Books for '{title}'")
                    return links[variant]

        logger.info(f"No cover found in Google Books for '{title}'")
        return None

    async def resolve(self, title: str, author: str) -> str:
        url = await self.from_openlibrary(title, author)
        if not url:
            url = await self.from_google_books(title, author)
        if not url:
            logger.info(f"Using placeholder cover for '{title}'")
            url = placeholder_url(title, author)
        return url

# Global instance
cover_resolver = CoverResolver()
