import asyncio
import logging
import re
from typing import List, Optional, Tuple

from bookfinder.covers import CoverResolver, cover_resolver
from bookfinder.models import Book, BookSource
from bookfinder.pdfs import PdfLocator, pdf_locator

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown Author"
ID_PREFIX = "ai-rec-"

TITLE_BY_AUTHOR = re.compile(r"^(.*?)\s+by\s+(.*)$", re.IGNORECASE)
# e.g. "Thomas Cormen (MIT Press, 2009)"
PUBLICATION_NOTE = re.compile(r"\s*\([^()]*\)\s*$")
# e.g. "The Norton Anthology edited" from "... edited by Stephen Greenblatt"
EDITOR_ROLE = re.compile(r"[\s,]+(?:edited|translated|compiled)(?:\s+and\s+(?:edited|translated))?$", re.IGNORECASE)

def parse_recommendation(text: str) -> Tuple[str, List[str], str]:
    """
    Splits "Title by Author, Author" into (title, authors, author_string).
    Without a "by" separator the whole text is the title. A role word left
    in front of the separator ("edited by", "translated by") is not part of it.
    """
    match = TITLE_BY_AUTHOR.match(text.strip())
    if not match:
        return text.strip(), [UNKNOWN_AUTHOR], UNKNOWN_AUTHOR

    title = EDITOR_ROLE.sub("", match.group(1)).strip()
    author_string = PUBLICATION_NOTE.sub("", match.group(2)).strip() or UNKNOWN_AUTHOR
    authors = [a.strip() for a in author_string.split(",") if a.strip()] or [UNKNOWN_AUTHOR]
    return title, authors, author_string

class BookConverter:
    def __init__(self, covers: Optional[CoverResolver] = None, pdfs: Optional[PdfLocator] = None):
        self.covers = covers or cover_resolver
        self.pdfs = pdfs or pdf_locator

    async def convert(self, recommendation: str, index: int, original_query: str) -> Book:
        title, authors, author_string = parse_recommendation(recommendation)

        # Both lookups are independent
        download_url, cover_url = await asyncio.gather(
            self.pdfs.locate(title, author_string),
            self.covers.resolve(title, author_string),
        )

        return Book(
            id=f"{ID_PREFIX}{index}",
            title=title,
            author=authors,
            subjects=[f"AI recommended for: {original_query}"],
            source=BookSource.AI_RECOMMENDATION,
            is_ai_recommendation=True,
            download_url=download_url,
            cover_url=cover_url,
        )

# Global instance
book_converter = BookConverter()
