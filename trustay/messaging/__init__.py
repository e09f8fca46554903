"""Structured chat messages, message metadata and roommate notifications."""

from .constants import MESSAGE_CONTENT_MAP, SYSTEM_MESSAGE_TYPES, MessageType, is_system_message
from .encoder import (
    STRUCTURED_MESSAGE_PREFIX,
    STRUCTURED_MESSAGE_SUFFIX,
    RoommateSeekingMetadata,
    RoomMetadata,
    RoomSeekingMetadata,
    StructuredMessage,
    decode_structured_message,
    encode_structured_message,
    get_display_text,
    is_structured_message,
)
from .roommate_notifications import RoommateNotifier

__all__ = [
    "MESSAGE_CONTENT_MAP", "SYSTEM_MESSAGE_TYPES", "MessageType", "is_system_message",
    "STRUCTURED_MESSAGE_PREFIX", "STRUCTURED_MESSAGE_SUFFIX",
    "RoommateSeekingMetadata", "RoomMetadata", "RoomSeekingMetadata", "StructuredMessage",
    "decode_structured_message", "encode_structured_message", "get_display_text", "is_structured_message",
    "RoommateNotifier",
]
