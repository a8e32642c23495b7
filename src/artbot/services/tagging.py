"""Image tagging service backed by a vision model."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from artbot.domain.tags import ImageTag, TagExtract
from artbot.errors import ClassificationError

_logger = logging.getLogger(__name__)

TAG_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "tags": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                },
                "required": ["name", "confidence"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["tags"],
    "additionalProperties": False,
}

TAG_PROMPT = (
    "List the visual features of this image as tags. "
    "Use short lowercase English nouns or adjectives such as "
    "'outdoor', 'sky', 'tree', 'person', 'water', 'painting'. "
    "Give each tag a confidence between 0 and 1 and order them by confidence."
)


class ImageTagClient(Protocol):
    """Interface for vision-model tag extraction."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured tag data for the image at image_url."""


@dataclass
class ImageTagService:
    """Service that requests tags for an image and validates them."""

    client: ImageTagClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(self, image_url: str) -> list[ImageTag] | None:
        """Return detected tags, or None when the image service failed.

        An empty list means the service answered but saw nothing; None means
        there is no classification result at all.
        """
        try:
            raw = await self.client.extract(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                image_url=image_url,
                schema=TAG_SCHEMA,
                prompt=TAG_PROMPT,
            )
            extract = TagExtract.model_validate(raw)
        except (ClassificationError, ValidationError) as exc:
            _logger.warning("Image tagging failed for %s: %s", image_url, exc)
            return None

        tags = _normalize_tags(extract.tags)
        _logger.info("Tags: %s", format_tags(tags))
        return tags


def format_tags(tags: list[ImageTag]) -> str:
    """Format tags as 'name (0.90), ...' for logs."""
    return ", ".join(f"{tag.name} ({tag.confidence:.2f})" for tag in tags)


def _normalize_tags(tags: list[ImageTag]) -> list[ImageTag]:
    """Lowercase and de-duplicate tag names, keeping the first occurrence."""
    seen: set[str] = set()
    normalized: list[ImageTag] = []
    for tag in tags:
        name = tag.name.strip().lower()
        if not name or name in seen:
            continue
        seen.add(name)
        normalized.append(ImageTag(name=name, confidence=tag.confidence))
    return normalized
