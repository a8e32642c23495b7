"""Turn handling for inbound activities.

Each inbound message takes exactly one path, chosen in this order:
attachments, a bare image URL, or free text sent through the dispatch model.
"""

import asyncio
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from artbot.domain.activities import (
    CONVERSATION_UPDATE,
    MESSAGE,
    Activity,
    Attachment,
    Reply,
)
from artbot.domain.intents import DispatchIntent, RecognizerResult
from artbot.domain.profile import ConversationData, UserProfile
from artbot.errors import IntentRecognitionError, SearchError, StoreQueryError
from artbot.services.catalog import CatalogService
from artbot.services.intents import IntentRouter
from artbot.services.knowledge import KnowledgeService, split_image_answer
from artbot.services.matching import RecordMatcher
from artbot.services.state import SessionStateService
from artbot.services.sub_intents import describe_painting_attribute
from artbot.services.tagging import ImageTagService
from artbot.services.translation import LanguageBridge
from artbot.services.uploads import AttachmentUploadService

_logger = logging.getLogger(__name__)

UPLOAD_HINT = "You may upload your photo through this website: https://img.onl/"

GREETING = (
    "Hello world! I am ART-ificial Intelligent Chatbot!",
    "I love everything about ART!!! You can ask me any question!",
    "Send me a URL of real world photo and I'll find the most-related "
    "masterpiece for you!",
    UPLOAD_HINT,
)
SEND_URL_FIRST = "Send me a URL first before you ask for the details!"
PHOTO_RECEIVED = "I received your photo!"
FEATURES_PREFIX = "Hmm... I see these features in your photo: "
PAINTING_FOUND = "Aha! I got you your masterpiece!"
DETAILS_HINT = "You can ask me for more details such as author, date, and so on ..."
CLASSIFICATION_FAILED = "Sorry, I couldn't analyze that photo. Please try another one."
NO_FEATURES = "Sorry, I couldn't see any features in your photo."
NO_MATCH = "Sorry, I couldn't find a painting that matches your photo."
ATTACHMENT_NOT_SAVED = "Attachment was not successfully saved to storage."
CATALOG_UNAVAILABLE = (
    "Sorry, I can't reach my painting collection right now. Please try again later."
)
SERVICE_UNAVAILABLE = (
    "Sorry, I'm having trouble understanding right now. Please try again later."
)
SEARCH_UNAVAILABLE = (
    "Sorry, I don't know that and I couldn't search for it right now."
)

_URL_PATTERN = re.compile(
    r"(https?://)?"
    r"((?:[a-z\d](?:[a-z\d-]*[a-z\d])?\.)+[a-z]{2,}"
    r"|(?:\d{1,3}\.){3}\d{1,3})"
    r"(:\d+)?"
    r"(/[-a-z\d%_.~+]*)*"
    r"(\?[;&a-z\d%_.~+=-]*)?"
    r"(#[-a-z\d_]*)?",
    re.IGNORECASE,
)


def is_image_url(text: str) -> bool:
    """Return True when the whole text is a URL (scheme optional)."""
    return bool(text) and _URL_PATTERN.fullmatch(text) is not None


def format_features(tag_names: Sequence[str]) -> str:
    """Render detected tag names as the features sentence."""
    quoted = ", ".join(f'"{name}"' for name in tag_names)
    return f"{FEATURES_PREFIX}{quoted}"


@dataclass
class TurnController:
    """Single entry point invoked once per inbound activity."""

    state_service: SessionStateService
    language_bridge: LanguageBridge
    tag_service: ImageTagService
    matcher: RecordMatcher
    catalog_service: CatalogService
    intent_router: IntentRouter
    knowledge_service: KnowledgeService
    upload_service: AttachmentUploadService

    async def run(self, activity: Activity) -> list[Reply]:
        """Load state, handle the activity, and save state unconditionally."""
        try:
            state = await asyncio.to_thread(self.state_service.load, activity)
        except StoreQueryError:
            _logger.exception(
                "Failed to load session state",
                extra={"conversation_id": activity.conversation.id},
            )
            return [Reply.message(SERVICE_UNAVAILABLE)]

        if activity.type == CONVERSATION_UPDATE:
            replies = self.greet(activity)
        elif activity.type == MESSAGE:
            replies = await self.handle_turn(
                activity, state.profile, state.conversation_data
            )
        else:
            replies = []

        try:
            await asyncio.to_thread(self.state_service.save, activity, state)
        except StoreQueryError:
            _logger.exception(
                "Failed to save session state",
                extra={"conversation_id": activity.conversation.id},
            )
        return replies

    def greet(self, activity: Activity) -> list[Reply]:
        """Greet every added member other than the bot itself."""
        bot_id = activity.recipient.id if activity.recipient else None
        replies: list[Reply] = []
        for member in activity.members_added or []:
            if member.id != bot_id:
                replies.extend(Reply.message(text) for text in GREETING)
        return replies

    async def handle_turn(
        self,
        activity: Activity,
        profile: UserProfile,
        conversation_data: ConversationData,
    ) -> list[Reply]:
        """Compute the replies for one inbound message.

        ``conversation_data`` is part of the turn contract but no current
        flow reads or writes it.
        """
        if activity.attachments:
            return await self._handle_attachments(activity.attachments, profile)

        text = (activity.text or "").strip()
        if not text:
            return []
        if is_image_url(text):
            return await self._identify(text, profile, echo_image=True)
        return await self._handle_text(text, profile)

    async def _handle_attachments(
        self, attachments: Sequence[Attachment], profile: UserProfile
    ) -> list[Reply]:
        saved = await self.upload_service.save_all(attachments)
        first = next((entry for entry in saved if entry is not None), None)
        if first is None:
            return [await self._translated(ATTACHMENT_NOT_SAVED, profile)]
        if len(attachments) > 1:
            _logger.info(
                "Identifying %s; ignoring %s other attachment(s)",
                first.file_name,
                len(attachments) - 1,
            )
        return await self._identify(first.url, profile, echo_image=False)

    async def _identify(
        self, image_url: str, profile: UserProfile, *, echo_image: bool
    ) -> list[Reply]:
        tags = await self.tag_service.analyze(image_url)
        if tags is None:
            return [await self._translated(CLASSIFICATION_FAILED, profile)]
        if not tags:
            return [await self._translated(NO_FEATURES, profile)]

        tag_names = [tag.name for tag in tags]
        try:
            match = await self.matcher.match(tag_names)
            record = (
                await self.catalog_service.get_record(match.record_id)
                if match.record_id is not None
                else None
            )
        except StoreQueryError:
            _logger.exception("Catalog query failed", extra={"image_url": image_url})
            return [await self._translated(CATALOG_UNAVAILABLE, profile)]

        replies = [await self._translated(PHOTO_RECEIVED, profile)]
        if echo_image:
            replies.append(Reply.image(image_url))
        replies.append(await self._translated(format_features(tag_names), profile))
        if record is None:
            replies.append(await self._translated(NO_MATCH, profile))
            return replies

        profile.remember_painting(record)
        replies.extend(
            [
                await self._translated(PAINTING_FOUND, profile),
                Reply.image(record.url),
                await self._translated(DETAILS_HINT, profile),
            ]
        )
        return replies

    async def _handle_text(self, text: str, profile: UserProfile) -> list[Reply]:
        utterance = await self.language_bridge.translate_to_pivot(text, profile)
        try:
            routed = await self.intent_router.route(utterance)
        except IntentRecognitionError:
            _logger.exception("Dispatch recognition failed")
            return [await self._translated(SERVICE_UNAVAILABLE, profile)]

        if routed.intent is DispatchIntent.STRUCTURED_QUERY:
            return await self._answer_painting_question(routed.result, profile)
        if routed.intent is DispatchIntent.KNOWLEDGE_LOOKUP:
            return await self._answer_from_knowledge(utterance, profile)
        _logger.info("Dispatch unrecognized intent: %s", routed.result.top_intent)
        return [
            Reply.message(
                f"Dispatch unrecognized intent: {routed.result.top_intent}."
            )
        ]

    async def _answer_painting_question(
        self, result: RecognizerResult, profile: UserProfile
    ) -> list[Reply]:
        if not profile.has_painting:
            return [Reply.message(SEND_URL_FIRST), Reply.message(UPLOAD_HINT)]
        answer = describe_painting_attribute(result.sub_intent, profile)
        return [await self._translated(answer, profile)]

    async def _answer_from_knowledge(
        self, question: str, profile: UserProfile
    ) -> list[Reply]:
        answer = await self.knowledge_service.answer(question)
        if answer is None:
            return await self._search_fallback(question, profile)

        image_answer = split_image_answer(answer.answer)
        if image_answer is None:
            return [await self._translated(answer.answer, profile)]
        replies = [Reply.image(image_answer.image_url)]
        if image_answer.text:
            replies.append(await self._translated(image_answer.text, profile))
        return replies

    async def _search_fallback(
        self, question: str, profile: UserProfile
    ) -> list[Reply]:
        try:
            results = await self.knowledge_service.search(question)
        except SearchError:
            _logger.exception("Web search fallback failed")
            return [await self._translated(SEARCH_UNAVAILABLE, profile)]

        apology = f"Sorry, I don't know {question}, but I searched it for you!"
        replies = [Reply.message(apology)]
        replies.extend(
            Reply.message(f"{result.name}\n{result.url}") for result in results
        )
        return replies

    async def _translated(self, text: str, profile: UserProfile) -> Reply:
        return Reply.message(
            await self.language_bridge.translate_from_pivot(text, profile)
        )
