"""Knowledge-base answers with a web search fallback."""

import logging
from dataclasses import dataclass
from typing import Protocol

from artbot.domain.knowledge import RankedAnswer, SearchResult
from artbot.errors import KnowledgeLookupError

_logger = logging.getLogger(__name__)

IMAGE_MARKER = "![Image]"


class KnowledgeBaseClient(Protocol):
    """Interface for question answering over a curated knowledge base."""

    async def get_answers(self, question: str, top: int = 1) -> list[RankedAnswer]:
        """Return candidate answers, possibly none."""


class WebSearchClient(Protocol):
    """Interface for web search."""

    async def search(self, query: str, count: int = 3) -> list[SearchResult]:
        """Return web results for query."""


@dataclass(frozen=True)
class ImageAnswer:
    """Answer whose first line references an image."""

    image_url: str
    text: str


@dataclass
class KnowledgeService:
    """Service for knowledge lookups and search fallback."""

    knowledge_base: KnowledgeBaseClient
    web_search: WebSearchClient
    score_threshold: float = 0.3
    search_limit: int = 3

    async def answer(self, question: str) -> RankedAnswer | None:
        """Return the best answer above the threshold, or None."""
        try:
            answers = await self.knowledge_base.get_answers(question)
        except KnowledgeLookupError as exc:
            _logger.warning("Knowledge base lookup failed: %s", exc)
            return None
        ranked = sorted(
            (answer for answer in answers if answer.score >= self.score_threshold),
            key=lambda answer: answer.score,
            reverse=True,
        )
        if not ranked:
            _logger.info("Knowledge base has no answer for %r", question)
            return None
        return ranked[0]

    async def search(self, query: str) -> list[SearchResult]:
        """Return at most search_limit web results; raises SearchError."""
        results = await self.web_search.search(query, count=self.search_limit)
        return results[: self.search_limit]


def split_image_answer(answer: str) -> ImageAnswer | None:
    """Split '![Image](url)' on the first line from the rest of the answer."""
    first_line, _, rest = answer.partition("\n")
    if not first_line.startswith(IMAGE_MARKER):
        return None
    start = first_line.find("(", len(IMAGE_MARKER))
    end = first_line.find(")", start + 1)
    if start == -1 or end == -1:
        return None
    image_url = first_line[start + 1 : end].strip()
    if not image_url:
        return None
    return ImageAnswer(image_url=image_url, text=rest.strip())
