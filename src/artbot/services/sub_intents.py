"""Answers about the attributes of the current painting."""

from artbot.domain.intents import PaintingAttribute
from artbot.domain.profile import UserProfile

UNKNOWN_SUB_INTENT_REPLY = "Sorry, I didn't get that."

_TEMPLATES: dict[PaintingAttribute, str] = {
    PaintingAttribute.AUTHOR: "Author of the painting is {profile.painting_author}.",
    PaintingAttribute.DATE: "Year of the painting is {profile.painting_year}.",
    PaintingAttribute.NAME: "Name of the painting is {profile.painting_title}.",
    PaintingAttribute.STYLE: "Style of the painting is {profile.painting_style}.",
    PaintingAttribute.TECHNIQUE: (
        "Technique of the painting is {profile.painting_technique}."
    ),
}


def describe_painting_attribute(sub_intent: str | None, profile: UserProfile) -> str:
    """Return the sentence for a sub-intent label about the current painting."""
    attribute = PaintingAttribute.from_label(sub_intent)
    if attribute is None:
        return UNKNOWN_SUB_INTENT_REPLY
    return _TEMPLATES[attribute].format(profile=profile)
