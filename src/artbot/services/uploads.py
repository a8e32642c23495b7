"""Persisting inbound attachments to blob storage."""

import asyncio
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from artbot.domain.activities import Attachment
from artbot.errors import StorageError

_logger = logging.getLogger(__name__)


class AttachmentDownloader(Protocol):
    """Interface for fetching attachment content."""

    async def download(self, url: str) -> tuple[bytes, str | None]:
        """Return the content bytes and content type at url."""


class BlobStorage(Protocol):
    """Interface for durable blob storage with public URLs."""

    def upload(self, name: str, data: bytes, content_type: str) -> str:
        """Store data under name and return its public URL."""


@dataclass(frozen=True)
class SavedAttachment:
    """Attachment copied to blob storage."""

    file_name: str
    url: str


@dataclass
class AttachmentUploadService:
    """Copy attachments into blob storage so downstream services can fetch them."""

    downloader: AttachmentDownloader
    storage: BlobStorage
    name_prefix: str = "paintings"

    async def save(self, attachment: Attachment) -> SavedAttachment | None:
        """Upload one attachment; returns None when it could not be saved."""
        if not attachment.content_url:
            _logger.warning("Attachment has no content URL")
            return None
        file_name = f"{self.name_prefix}{uuid.uuid1()}.jpg"
        try:
            content, content_type = await self.downloader.download(
                attachment.content_url
            )
            url = await asyncio.to_thread(
                self.storage.upload,
                file_name,
                content,
                content_type or attachment.content_type or "image/jpeg",
            )
        except StorageError as exc:
            _logger.warning("Attachment upload failed for %s: %s", file_name, exc)
            return None
        _logger.info("Attachment uploaded: %s", file_name)
        return SavedAttachment(file_name=file_name, url=url)

    async def save_all(
        self, attachments: Sequence[Attachment]
    ) -> list[SavedAttachment | None]:
        """Upload attachments concurrently, keeping input order."""
        return list(
            await asyncio.gather(*(self.save(attachment) for attachment in attachments))
        )
