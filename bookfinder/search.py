import asyncio
import logging
from typing import Optional

from bookfinder.api_clients.openrouter import OpenRouterClient, openrouter_client
from bookfinder.config import config
from bookfinder.converter import BookConverter, book_converter
from bookfinder.exceptions import UpstreamError
from bookfinder.fallback import fallback_recommendation
from bookfinder.models import SearchResult

logger = logging.getLogger(__name__)

class BookSearch:
    """
    Public entry point: query in, UI-ready SearchResult out.
    Upstream failures never escape; they become an empty result.
    """

    def __init__(
        self,
        recommender: Optional[OpenRouterClient] = None,
        converter: Optional[BookConverter] = None,
        use_static_fallback: Optional[bool] = None,
    ):
        self.recommender = recommender or openrouter_client
        self.converter = converter or book_converter
        self._use_static_fallback = use_static_fallback

    @property
    def use_static_fallback(self) -> bool:
        if self._use_static_fallback is not None:
            return self._use_static_fallback
        return config.USE_STATIC_FALLBACK

    async def search(self, query: str) -> SearchResult:
        try:
            return await self._search(query)
        except Exception as e:
            logger.error(f"Search failed for '{query}': {e}", exc_info=True)
            return SearchResult.empty(query)

    async def _search(self, query: str) -> SearchResult:
        try:
            recommendation = await self.recommender.fetch(query)
        except UpstreamError as e:
            if not self.use_static_fallback:
                logger.error(f"AI search error for '{query}': {e}")
                return SearchResult.empty(query)
            logger.warning(f"AI search error for '{query}', using static recommendations: {e}")
            recommendation = fallback_recommendation(query)

        books = await asyncio.gather(*[
            self.converter.convert(rec, index, query)
            for index, rec in enumerate(recommendation.recommendations)
        ])

        with_pdf = [b for b in books if b.has_pdf]
        without_pdf = [b for b in books if not b.has_pdf]
        ordered = with_pdf + without_pdf

        logger.info(f"Search '{query}': {len(ordered)} books, {len(with_pdf)} with PDFs")
        return SearchResult(
            books=ordered,
            total_results=len(ordered),
            query=query,
            enhanced_query=recommendation.enhanced_query,
            search_terms=recommendation.search_terms,
            ai_recommendations_count=len(books),
            pdf_found_count=len(with_pdf),
            books_without_pdfs=len(without_pdf),
        )

# Global instance
book_search = BookSearch()
