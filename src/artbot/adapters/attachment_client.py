"""Attachment download client."""

from dataclasses import dataclass

import httpx

from artbot.errors import StorageError
from artbot.services.uploads import AttachmentDownloader


@dataclass
class HttpxAttachmentDownloader(AttachmentDownloader):
    """Download attachment content with httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 20.0

    @classmethod
    def create(cls, timeout: float = 20.0) -> "HttpxAttachmentDownloader":
        """Create a downloader with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True), timeout=timeout
        )

    async def download(self, url: str) -> tuple[bytes, str | None]:
        """Fetch the attachment bytes and their content type."""
        try:
            response = await self.http_client.get(url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError(f"Attachment download failed: {exc}") from exc
        return response.content, response.headers.get("content-type")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
