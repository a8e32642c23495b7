"""Supabase Storage adapter for uploaded photos."""

from dataclasses import dataclass

from supabase import Client

from artbot.errors import StorageError
from artbot.services.uploads import BlobStorage


@dataclass
class SupabaseBlobStorage(BlobStorage):
    """Public bucket holding user photos."""

    client: Client
    bucket: str = "paintings"

    def upload(self, name: str, data: bytes, content_type: str) -> str:
        """Upload data under name and return its public URL."""
        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(name, data, {"content-type": content_type})
            url = bucket.get_public_url(name)
        except Exception as exc:  # noqa: BLE001
            raise StorageError(f"Blob upload failed for {name}: {exc}") from exc
        return str(url).rstrip("?")
