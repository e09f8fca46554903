"""
Structured chat messages.

The chat backend only stores plain text, so messages that carry context (the
room being offered, the roommate post an application belongs to) embed that
context in the content itself:

    ::STRUCTURED::{"type":"roommate_application_approved",...,"message":"..."}::END::

Clients that understand the envelope render a rich card; everyone else can
still show get_display_text(content).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

STRUCTURED_MESSAGE_PREFIX = "::STRUCTURED::"
STRUCTURED_MESSAGE_SUFFIX = "::END::"

StructuredMessageType = Literal[
    "invitation",
    "request",
    "roommate_application",
    "roommate_application_approved",
    "roommate_application_rejected",
]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RoomMetadata(_CamelModel):
    room_id: str = Field(alias="roomId")
    room_name: str = Field(alias="roomName")
    room_slug: Optional[str] = Field(default=None, alias="roomSlug")
    room_image: Optional[str] = Field(default=None, alias="roomImage")
    room_price: Optional[str] = Field(default=None, alias="roomPrice")
    room_location: Optional[str] = Field(default=None, alias="roomLocation")


class RoomSeekingMetadata(_CamelModel):
    room_seeking_post_id: str = Field(alias="roomSeekingPostId")
    room_seeking_title: str = Field(alias="roomSeekingTitle")
    room_seeking_budget: Optional[str] = Field(default=None, alias="roomSeekingBudget")
    room_seeking_location: Optional[str] = Field(default=None, alias="roomSeekingLocation")


class RoommateSeekingMetadata(_CamelModel):
    roommate_seeking_post_id: str = Field(alias="roommateSeekingPostId")
    roommate_seeking_post_title: str = Field(default="", alias="roommateSeekingPostTitle")
    roommate_seeking_post_budget: Optional[str] = Field(default=None, alias="roommateSeekingPostBudget")
    roommate_seeking_post_location: Optional[str] = Field(default=None, alias="roommateSeekingPostLocation")


class StructuredMessage(_CamelModel):
    type: StructuredMessageType
    message: str
    room: Optional[RoomMetadata] = None
    room_seeking: Optional[RoomSeekingMetadata] = Field(default=None, alias="roomSeeking")
    roommate_seeking: Optional[RoommateSeekingMetadata] = Field(default=None, alias="roommateSeeking")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def encode_structured_message(data: Union[StructuredMessage, Dict[str, Any]]) -> str:
    """Wrap a structured message into chat content."""
    message = data if isinstance(data, StructuredMessage) else StructuredMessage.model_validate(data)
    body = json.dumps(message.to_wire(), ensure_ascii=False, separators=(",", ":"))
    return f"{STRUCTURED_MESSAGE_PREFIX}{body}{STRUCTURED_MESSAGE_SUFFIX}"


def is_structured_message(content: Optional[str]) -> bool:
    return bool(content) and content.startswith(STRUCTURED_MESSAGE_PREFIX)


def decode_structured_message(content: Optional[str]) -> Optional[StructuredMessage]:
    """
    Unwrap chat content. Returns None for plain messages, a missing end marker
    or a payload that is not a valid structured message.
    """
    if not is_structured_message(content):
        return None

    start = len(STRUCTURED_MESSAGE_PREFIX)
    end = content.find(STRUCTURED_MESSAGE_SUFFIX, start)
    if end < start:
        return None

    try:
        return StructuredMessage.model_validate(json.loads(content[start:end]))
    except (ValueError, ValidationError) as exc:
        logger.warning("Failed to decode structured message: %s", exc)
        return None


def get_display_text(content: Optional[str]) -> str:
    structured = decode_structured_message(content)
    return structured.message if structured else (content or "")
