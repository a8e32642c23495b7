"""Tag-overlap matching of an image against the painting catalog.

Every strategy scores candidate ids in ``[1, catalog_size)`` by the number of
catalog tag rows whose tag appears in the detected tag set, then reduces the
scores with :func:`select_best_match`: ids are visited in ascending order and
the incumbent is only replaced by a strictly greater score, so ties resolve
to the lowest id.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from artbot.domain.catalog import MatchResult
from artbot.services.catalog import CatalogRepository

_logger = logging.getLogger(__name__)

NO_MATCH = MatchResult(record_id=None, score=0)


class RecordMatcher(Protocol):
    """Interface for finding the best catalog record for a tag set."""

    async def match(self, tag_names: Sequence[str]) -> MatchResult:
        """Return the best match, or a result without record_id."""


def select_best_match(scores: Iterable[tuple[int, int]]) -> MatchResult:
    """Reduce (record_id, score) pairs to the best match.

    A record only wins with a score above zero; an all-zero scan yields
    ``NO_MATCH`` instead of defaulting to the first id.
    """
    best = NO_MATCH
    for record_id, score in sorted(scores):
        if score > best.score:
            best = MatchResult(record_id=record_id, score=score)
    return best


@dataclass
class SequentialRecordMatcher(RecordMatcher):
    """Baseline: one COUNT query per candidate id, awaited in order."""

    repository: CatalogRepository
    catalog_size: int

    async def match(self, tag_names: Sequence[str]) -> MatchResult:
        names = _distinct(tag_names)
        if not names:
            return NO_MATCH
        scores: list[tuple[int, int]] = []
        for record_id in range(1, self.catalog_size):
            count = await asyncio.to_thread(
                self.repository.count_tag_matches, record_id, names
            )
            scores.append((record_id, count))
        result = select_best_match(scores)
        _log_result("sequential", names, result)
        return result


@dataclass
class ConcurrentRecordMatcher(RecordMatcher):
    """Per-id COUNT queries with bounded concurrency.

    All scores are collected before reducing, so completion order does not
    affect tie-breaking.
    """

    repository: CatalogRepository
    catalog_size: int
    concurrency: int = 8

    async def match(self, tag_names: Sequence[str]) -> MatchResult:
        names = _distinct(tag_names)
        if not names:
            return NO_MATCH
        semaphore = asyncio.Semaphore(max(1, self.concurrency))

        async def score(record_id: int) -> tuple[int, int]:
            async with semaphore:
                count = await asyncio.to_thread(
                    self.repository.count_tag_matches, record_id, names
                )
            return record_id, count

        scores = await asyncio.gather(
            *(score(record_id) for record_id in range(1, self.catalog_size))
        )
        result = select_best_match(scores)
        _log_result("concurrent", names, result)
        return result


@dataclass
class AggregateRecordMatcher(RecordMatcher):
    """Single query for all matching tag rows, counted in memory."""

    repository: CatalogRepository
    catalog_size: int

    async def match(self, tag_names: Sequence[str]) -> MatchResult:
        names = _distinct(tag_names)
        if not names:
            return NO_MATCH
        record_ids = await asyncio.to_thread(self.repository.list_tag_matches, names)
        counts = Counter(
            record_id
            for record_id in record_ids
            if 1 <= record_id < self.catalog_size
        )
        result = select_best_match(counts.items())
        _log_result("aggregate", names, result)
        return result


def build_matcher(
    strategy: str,
    repository: CatalogRepository,
    catalog_size: int,
    concurrency: int = 8,
) -> RecordMatcher:
    """Return the matcher implementation for a configured strategy name."""
    if strategy == "concurrent":
        return ConcurrentRecordMatcher(
            repository=repository,
            catalog_size=catalog_size,
            concurrency=concurrency,
        )
    if strategy == "aggregate":
        return AggregateRecordMatcher(repository=repository, catalog_size=catalog_size)
    return SequentialRecordMatcher(repository=repository, catalog_size=catalog_size)


def _distinct(tag_names: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(name for name in tag_names if name))


def _log_result(strategy: str, names: list[str], result: MatchResult) -> None:
    _logger.info(
        "Catalog match (%s): tags=%s record_id=%s score=%s",
        strategy,
        len(names),
        result.record_id,
        result.score,
    )
