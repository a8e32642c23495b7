"""Loading and saving the per-turn session documents."""

import logging
from dataclasses import dataclass
from typing import Protocol

from artbot.domain.activities import Activity
from artbot.domain.profile import (
    DEFAULT_PIVOT_LANGUAGE,
    ConversationData,
    TurnState,
    UserProfile,
)

_logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Persistence interface for keyed JSON documents."""

    def load(self, key: str) -> dict[str, object] | None:
        """Return the document stored under key, if present."""

    def save(self, key: str, document: dict[str, object]) -> None:
        """Store a document under key, replacing any previous version."""


def conversation_key(activity: Activity) -> str:
    """Storage key of the conversation document."""
    return f"{activity.channel_id}/conversations/{activity.conversation.id}"


def user_key(activity: Activity) -> str:
    """Storage key of the user profile document."""
    return f"{activity.channel_id}/users/{activity.from_account.id}"


@dataclass
class SessionStateService:
    """Service that maps stored documents to typed turn state."""

    store: StateStore
    pivot_language: str = DEFAULT_PIVOT_LANGUAGE

    def load(self, activity: Activity) -> TurnState:
        """Load both documents, applying defaults for missing fields."""
        profile = UserProfile.from_document(
            self.store.load(user_key(activity)), self.pivot_language
        )
        conversation_data = ConversationData.from_document(
            self.store.load(conversation_key(activity))
        )
        return TurnState(profile=profile, conversation_data=conversation_data)

    def save(self, activity: Activity, state: TurnState) -> None:
        """Write both documents back; the last write wins."""
        self.store.save(
            conversation_key(activity), state.conversation_data.to_document()
        )
        self.store.save(user_key(activity), state.profile.to_document())
        _logger.debug("Saved session state for %s", user_key(activity))
