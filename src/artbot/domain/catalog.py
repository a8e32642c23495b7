"""Domain models for the painting catalog."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogRecord:
    """A painting assembled from its per-tag catalog rows."""

    paintid: int
    title: str
    author: str
    year: str
    style: str
    technique: str
    url: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchResult:
    """Outcome of scoring catalog records against a tag set."""

    record_id: int | None
    score: int

    @property
    def matched(self) -> bool:
        return self.record_id is not None
