"""
Data shapes shared by the search pipeline and the REST layer.
Field names are snake_case in Python and camelCase on the wire.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Recommendation(CamelModel):
    enhanced_query: str
    recommendations: List[str]
    search_terms: List[str] = Field(default_factory=list)


class BookSource(str, Enum):
    AI_RECOMMENDATION = "ai-recommendation"


class Book(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, use_enum_values=True
    )

    id: str
    title: str
    author: List[str]
    subjects: List[str] = Field(default_factory=list)
    source: BookSource = BookSource.AI_RECOMMENDATION
    is_ai_recommendation: bool = Field(True, alias="isAIRecommendation")
    download_url: Optional[str] = None
    cover_url: str

    @property
    def has_pdf(self) -> bool:
        return bool(self.download_url)


class SearchResult(CamelModel):
    books: List[Book] = Field(default_factory=list)
    total_results: int = 0
    query: str
    enhanced_query: Optional[str] = None
    search_terms: Optional[List[str]] = None
    ai_recommendations_count: int = 0
    pdf_found_count: int = 0
    books_without_pdfs: Optional[int] = Field(None, alias="booksWithoutPDFs")

    @classmethod
    def empty(cls, query: str) -> "SearchResult":
        return cls(query=query)

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys; unset optional fields are left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
