"""Read access to the painting catalog."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from artbot.domain.catalog import CatalogRecord
from artbot.services.cache import Cache

_logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Query interface over catalog rows, one row per (painting, tag)."""

    def count_tag_matches(self, record_id: int, tag_names: list[str]) -> int:
        """Count the record's tag rows whose tag is one of tag_names."""

    def list_tag_matches(self, tag_names: list[str]) -> list[int]:
        """Return the paintid of every tag row whose tag is one of tag_names."""

    def get_record(self, record_id: int) -> CatalogRecord | None:
        """Return the full record with all of its tags, if present."""


@dataclass
class CatalogService:
    """Cached record lookups; catalog records are never written by the bot."""

    repository: CatalogRepository
    cache: Cache
    record_ttl_seconds: int = 86400

    async def get_record(self, record_id: int) -> CatalogRecord | None:
        """Fetch a record by id, serving repeats from the cache."""
        cache_key = f"catalog:record:{record_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, CatalogRecord):
            return cached

        record = await asyncio.to_thread(self.repository.get_record, record_id)
        if record is None:
            _logger.warning("Catalog record %s not found", record_id)
            return None
        self.cache.set(cache_key, record, ttl_seconds=self.record_ttl_seconds)
        return record
