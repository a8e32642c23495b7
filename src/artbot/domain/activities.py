"""Models for Bot Framework activities."""

import mimetypes
from dataclasses import dataclass
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

MESSAGE = "message"
DEFAULT_IMAGE_TYPE = "image/jpeg"
CONVERSATION_UPDATE = "conversationUpdate"


class ChannelAccount(BaseModel):
    """Participant in a conversation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None


class ConversationAccount(BaseModel):
    """Conversation reference."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    is_group: bool | None = Field(default=None, alias="isGroup")


class Attachment(BaseModel):
    """File or media attached to an activity."""

    model_config = ConfigDict(populate_by_name=True)

    content_type: str | None = Field(default=None, alias="contentType")
    content_url: str | None = Field(default=None, alias="contentUrl")
    name: str | None = None


class Activity(BaseModel):
    """Inbound activity payload."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    id: str | None = None
    channel_id: str = Field(default="unknown", alias="channelId")
    service_url: str | None = Field(default=None, alias="serviceUrl")
    from_account: ChannelAccount = Field(alias="from")
    recipient: ChannelAccount | None = None
    conversation: ConversationAccount
    text: str | None = None
    locale: str | None = None
    attachments: list[Attachment] | None = None
    members_added: list[ChannelAccount] | None = Field(
        default=None, alias="membersAdded"
    )


@dataclass(frozen=True)
class Reply:
    """Outgoing message: either text or a single image attachment."""

    text: str | None = None
    image_url: str | None = None

    @classmethod
    def message(cls, text: str) -> "Reply":
        return cls(text=text)

    @classmethod
    def image(cls, url: str) -> "Reply":
        return cls(image_url=url)

    def to_payload(self) -> dict[str, object]:
        """Return the activity body sent to the connector."""
        payload: dict[str, object] = {"type": MESSAGE}
        if self.text is not None:
            payload["text"] = self.text
        if self.image_url is not None:
            payload["attachments"] = [
                {
                    "contentType": image_content_type(self.image_url),
                    "contentUrl": self.image_url,
                }
            ]
        return payload


def image_content_type(url: str) -> str:
    """Guess an image media type from the URL path, defaulting to JPEG."""
    guessed, _ = mimetypes.guess_type(urlsplit(url).path)
    if guessed and guessed.startswith("image/"):
        return guessed
    return DEFAULT_IMAGE_TYPE
