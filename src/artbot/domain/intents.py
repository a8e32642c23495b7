"""Intent labels produced by the dispatch model."""

from dataclasses import dataclass, field
from enum import Enum


class DispatchIntent(Enum):
    """Top-level intents of the dispatch model."""

    STRUCTURED_QUERY = "art_luis"
    KNOWLEDGE_LOOKUP = "art_qna"

    @classmethod
    def from_label(cls, label: str | None) -> "DispatchIntent | None":
        """Return the intent for a label, or None for anything unrecognized."""
        for intent in cls:
            if intent.value == label:
                return intent
        return None


class PaintingAttribute(Enum):
    """Sub-intents asking for one attribute of the current painting."""

    AUTHOR = "paintingAuthor"
    DATE = "paintingDate"
    NAME = "paintingName"
    STYLE = "paintingStyle"
    TECHNIQUE = "paintingTechnique"

    @classmethod
    def from_label(cls, label: str | None) -> "PaintingAttribute | None":
        for attribute in cls:
            if attribute.value == label:
                return attribute
        return None


@dataclass(frozen=True)
class RecognizerResult:
    """Dispatch model output for one utterance."""

    top_intent: str
    scores: dict[str, float] = field(default_factory=dict)
    sub_intent: str | None = None
