import asyncio
import json
import logging
import re
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from bookfinder.cache import RecommendationCache, recommendation_cache
from bookfinder.config import config
from bookfinder.exceptions import MissingCredentialsError, ParseError, UpstreamError
from bookfinder.models import Recommendation

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an academic librarian specializing in scholarly literature. "
    "Given a search query, provide ONLY academic book recommendations including textbooks, "
    "research monographs, scholarly publications, and peer-reviewed academic works. "
    "Do NOT recommend popular fiction, self-help, or general interest books. "
    "Focus on books published by academic presses, used in university courses, "
    "or written by scholars for academic audiences. "
    'Respond with valid JSON only: {"enhancedQuery": "improved academic search query", '
    '"recommendations": ["Academic Book Title by Scholar/Author (Publisher, Year)", '
    '"Academic Book Title by Scholar/Author (Publisher, Year)", '
    '"Academic Book Title by Scholar/Author (Publisher, Year)"], '
    '"searchTerms": ["academic_term1", "scholarly_term2", "research_term3"]}'
)

USER_PROMPT = 'Recommend academic books and scholarly works for: "{query}"'

JSON_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def extract_json(content: str) -> Any:
    """
    Parses the model reply. Uses the first fenced code block when there is one,
    otherwise the whole text.
    """
    match = JSON_FENCE.search(content)
    payload = match.group(1) if match else content
    try:
        return json.loads(payload.strip())
    except ValueError as e:
        raise ParseError(f"Model reply is not valid JSON: {e}") from e


class OpenRouterClient:
    """Client for the OpenRouter chat-completion API"""
    BASE_URL = "https://openrouter.ai/api/v1/chat/completions"

    def __init__(
        self,
        cache: Optional[RecommendationCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.cache = cache if cache is not None else recommendation_cache
        self.transport = transport
        # None means "read from config at call time"
        self._api_key = api_key
        self._model = model
        self._timeout = timeout

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key or config.OPENROUTER_API_KEY

    @property
    def model(self) -> str:
        return self._model or config.LLM_MODEL

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else config.LLM_TIMEOUT

    def build_payload(self, query: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": USER_PROMPT.format(query=query)},
            ],
            "temperature": 0.3,
            "max_tokens": 200,
            "top_p": 0.9,
        }

    async def _post(self, query: str, timeout: float) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "localhost",
            "X-Title": "Academic Book Recommendation App",
        }
        async with httpx.AsyncClient(transport=self.transport, timeout=timeout) as client:
            response = await client.post(self.BASE_URL, json=self.build_payload(query), headers=headers)
            response.raise_for_status()
            return response.json()

    async def fetch(self, query: str) -> Recommendation:
        cached = self.cache.get(query)
        if cached is not None:
            logger.info(f"Returning cached recommendations for '{query}'")
            return cached

        if not self.api_key:
            raise MissingCredentialsError("OPENROUTER_API_KEY is not configured")

        timeout = self.timeout
        logger.info(f"Requesting recommendations from {self.model} for '{query}'")
        try:
            data = await asyncio.wait_for(self._post(query, timeout), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamError(f"Recommendation request timed out after {timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"Recommendation request failed with HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Recommendation request failed: {e}") from e
        except ValueError as e:
            # response body was not JSON
            raise UpstreamError(f"Recommendation service returned a non-JSON body: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ParseError("Recommendation response carries no message content") from e
        if not content:
            raise ParseError("Recommendation response carries no message content")

        try:
            result = Recommendation.model_validate(extract_json(content))
        except ValidationError as e:
            raise ParseError(f"Model reply does not match the recommendation shape: {e}") from e

        logger.info(f"Got {len(result.recommendations)} recommendations from {self.model}")
        self.cache.put(query, result)
        return result

# Global instance
openrouter_client = OpenRouterClient()
