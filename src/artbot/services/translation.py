"""Language bridge that routes every utterance through a pivot language."""

import logging
from dataclasses import dataclass
from typing import Protocol

from artbot.domain.profile import DEFAULT_PIVOT_LANGUAGE, UserProfile
from artbot.errors import TranslationError

_logger = logging.getLogger(__name__)


class Translator(Protocol):
    """Interface for machine translation."""

    async def detect_language(self, text: str) -> str:
        """Return the language code detected for text."""

    async def translate(self, text: str, source: str, target: str) -> str:
        """Translate text from source to target language."""


@dataclass
class LanguageBridge:
    """Translate inbound text to the pivot language and replies back.

    Neither operation raises: translator failures are logged and the text is
    returned unchanged, so the user gets a pivot-language reply instead of none.
    """

    translator: Translator
    pivot_language: str = DEFAULT_PIVOT_LANGUAGE

    async def translate_to_pivot(self, text: str, profile: UserProfile) -> str:
        """Detect the source language, record it on the profile, and translate."""
        if not text.strip():
            return text
        try:
            detected = await self.translator.detect_language(text)
        except TranslationError as exc:
            _logger.warning(
                "Language detection failed; keeping %s: %s", profile.language, exc
            )
            return text

        if detected == self.pivot_language:
            profile.language = self.pivot_language
            return text

        profile.language = detected
        try:
            return await self.translator.translate(
                text, source=detected, target=self.pivot_language
            )
        except TranslationError as exc:
            _logger.warning("Inbound translation from %s failed: %s", detected, exc)
            return text

    async def translate_from_pivot(self, text: str, profile: UserProfile) -> str:
        """Translate a pivot-language reply into the profile's language."""
        if profile.language == self.pivot_language or not text.strip():
            return text
        try:
            return await self.translator.translate(
                text, source=self.pivot_language, target=profile.language
            )
        except TranslationError as exc:
            _logger.warning(
                "Outbound translation to %s failed: %s", profile.language, exc
            )
            return text
