"""Dispatch of utterances to a top-level intent."""

import logging
from dataclasses import dataclass
from typing import Protocol

from artbot.domain.intents import DispatchIntent, RecognizerResult

_logger = logging.getLogger(__name__)


class LanguageUnderstandingClient(Protocol):
    """Interface for the dispatch language model."""

    async def recognize(self, utterance: str) -> RecognizerResult:
        """Return the top intent and scores for an utterance."""


@dataclass(frozen=True)
class RoutedUtterance:
    """Recognizer output paired with the intent it maps to."""

    intent: DispatchIntent | None
    result: RecognizerResult


@dataclass
class IntentRouter:
    """Service that classifies utterances with the dispatch model."""

    client: LanguageUnderstandingClient

    async def route(self, utterance: str) -> RoutedUtterance:
        """Recognize an utterance; raises IntentRecognitionError on failure."""
        result = await self.client.recognize(utterance)
        intent = DispatchIntent.from_label(result.top_intent)
        _logger.info(
            "Dispatch top intent: %s (sub-intent: %s)",
            result.top_intent,
            result.sub_intent,
        )
        return RoutedUtterance(intent=intent, result=result)
