"""Supabase-backed painting catalog repository."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from artbot.domain.catalog import CatalogRecord
from artbot.errors import StoreQueryError
from artbot.services.catalog import CatalogRepository

_RECORD_COLUMNS = "paintid, tag, title, author, year, style, technique, url"


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase implementation over a table with one row per (painting, tag)."""

    client: Client
    table: str = "paintings"

    def count_tag_matches(self, record_id: int, tag_names: list[str]) -> int:
        """Count the record's rows whose tag is in tag_names."""
        try:
            response = (
                self.client.table(self.table)
                .select("paintid", count="exact")
                .eq("paintid", record_id)
                .in_("tag", tag_names)
                .execute()
            )
        except APIError as exc:
            raise StoreQueryError(f"Catalog count failed: {exc}") from exc
        if response.count is not None:
            return response.count
        return len(response.data or [])

    def list_tag_matches(self, tag_names: list[str]) -> list[int]:
        """Return the paintid of every row whose tag is in tag_names."""
        try:
            response = (
                self.client.table(self.table)
                .select("paintid")
                .in_("tag", tag_names)
                .execute()
            )
        except APIError as exc:
            raise StoreQueryError(f"Catalog scan failed: {exc}") from exc
        return [int(row["paintid"]) for row in response.data or []]

    def get_record(self, record_id: int) -> CatalogRecord | None:
        """Return a record with all of its tags, if present."""
        try:
            response = (
                self.client.table(self.table)
                .select(_RECORD_COLUMNS)
                .eq("paintid", record_id)
                .execute()
            )
        except APIError as exc:
            raise StoreQueryError(f"Catalog lookup failed: {exc}") from exc
        rows = response.data or []
        if not rows:
            return None
        row = rows[0]
        return CatalogRecord(
            paintid=int(row["paintid"]),
            title=str(row["title"]),
            author=str(row["author"]),
            year=str(row["year"]),
            style=str(row["style"]),
            technique=str(row["technique"]),
            url=str(row["url"]),
            tags=tuple(str(entry["tag"]) for entry in rows if entry.get("tag")),
        )
