"""Models for image tagging results."""

from pydantic import BaseModel, Field


class ImageTag(BaseModel):
    """Single label detected in an image."""

    name: str
    confidence: float = Field(ge=0.0, le=1.0)


class TagExtract(BaseModel):
    """Structured output for image tagging."""

    tags: list[ImageTag]
