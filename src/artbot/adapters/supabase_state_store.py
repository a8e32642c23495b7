"""Supabase-backed session state store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from postgrest.exceptions import APIError
from supabase import Client

from artbot.errors import StoreQueryError
from artbot.services.state import StateStore


@dataclass
class SupabaseStateStore(StateStore):
    """Keyed JSON documents in a single table."""

    client: Client
    table: str = "bot_state"

    def load(self, key: str) -> dict[str, object] | None:
        """Return the document stored under key, if present."""
        try:
            response = (
                self.client.table(self.table)
                .select("document")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise StoreQueryError(f"State load failed for {key}: {exc}") from exc
        if not response.data:
            return None
        document = response.data[0].get("document")
        return document if isinstance(document, dict) else None

    def save(self, key: str, document: dict[str, object]) -> None:
        """Upsert the document under key."""
        try:
            self.client.table(self.table).upsert(
                {
                    "key": key,
                    "document": document,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="key",
            ).execute()
        except APIError as exc:
            raise StoreQueryError(f"State save failed for {key}: {exc}") from exc
