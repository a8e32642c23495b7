"""Domain models for knowledge-base answers and web search."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RankedAnswer:
    """Best answer returned by the knowledge base."""

    answer: str
    score: float


@dataclass(frozen=True)
class SearchResult:
    """Single web search hit."""

    name: str
    url: str
