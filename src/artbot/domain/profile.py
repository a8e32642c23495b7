"""Session documents persisted across turns."""

from dataclasses import dataclass, field

from artbot.domain.catalog import CatalogRecord

DEFAULT_PIVOT_LANGUAGE = "en"


@dataclass
class UserProfile:
    """Per-user session document.

    The painting attributes are either all unset or all copied from the same
    catalog record; only the identification path writes them.
    """

    language: str = DEFAULT_PIVOT_LANGUAGE
    painting_id: int | None = None
    painting_title: str | None = None
    painting_author: str | None = None
    painting_year: str | None = None
    painting_style: str | None = None
    painting_technique: str | None = None

    @property
    def has_painting(self) -> bool:
        """Return True once an identification has completed."""
        return self.painting_id is not None

    def remember_painting(self, record: CatalogRecord) -> None:
        """Overwrite the current painting with a catalog record."""
        self.painting_id = record.paintid
        self.painting_title = record.title
        self.painting_author = record.author
        self.painting_year = record.year
        self.painting_style = record.style
        self.painting_technique = record.technique

    def to_document(self) -> dict[str, object]:
        """Serialize to the stored document shape."""
        document: dict[str, object] = {"language": self.language}
        if self.painting_id is not None:
            document.update(
                {
                    "paintingID": self.painting_id,
                    "paintingTitle": self.painting_title,
                    "paintingAuthor": self.painting_author,
                    "paintingYear": self.painting_year,
                    "paintingStyle": self.painting_style,
                    "paintingTechnique": self.painting_technique,
                }
            )
        return document

    @classmethod
    def from_document(
        cls,
        document: dict[str, object] | None,
        pivot_language: str = DEFAULT_PIVOT_LANGUAGE,
    ) -> "UserProfile":
        """Build a profile from a stored document, applying defaults."""
        if not document:
            return cls(language=pivot_language)
        language = document.get("language")
        painting_id = _parse_painting_id(document.get("paintingID"))
        if painting_id is None:
            return cls(language=str(language) if language else pivot_language)
        return cls(
            language=str(language) if language else pivot_language,
            painting_id=painting_id,
            painting_title=_optional_str(document.get("paintingTitle")),
            painting_author=_optional_str(document.get("paintingAuthor")),
            painting_year=_optional_str(document.get("paintingYear")),
            painting_style=_optional_str(document.get("paintingStyle")),
            painting_technique=_optional_str(document.get("paintingTechnique")),
        )


@dataclass
class ConversationData:
    """Per-conversation scratch document, unused by the current flows."""

    values: dict[str, object] = field(default_factory=dict)

    def to_document(self) -> dict[str, object]:
        return dict(self.values)

    @classmethod
    def from_document(cls, document: dict[str, object] | None) -> "ConversationData":
        return cls(values=dict(document or {}))


@dataclass
class TurnState:
    """Mutable view of both session documents for one turn."""

    profile: UserProfile
    conversation_data: ConversationData


def _parse_painting_id(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def _optional_str(raw: object) -> str | None:
    if raw is None:
        return None
    return str(raw)
