"""Chat message types and the system-message texts shown for them."""

from enum import Enum


class MessageType(str, Enum):
    TEXT = "text"
    INVITATION = "invitation"
    REQUEST = "request"
    REQUEST_ACCEPTED = "request_accepted"
    REQUEST_REJECTED = "request_rejected"
    REQUEST_CANCELLED = "request_cancelled"
    INVITATION_ACCEPTED = "invitation_accepted"
    INVITATION_REJECTED = "invitation_rejected"
    INVITATION_CANCELLED = "invitation_cancelled"


SYSTEM_MESSAGE_TYPES = frozenset(t.value for t in MessageType if t is not MessageType.TEXT)

MESSAGE_CONTENT_MAP = {
    MessageType.INVITATION.value: "Chủ trọ đã gửi lời mời thuê trọ đến cho bạn",
    MessageType.REQUEST.value: "Người thuê gửi yêu cầu thuê trọ đến cho bạn",
    MessageType.REQUEST_ACCEPTED.value: "Chủ trọ đã đồng ý yêu cầu thuê",
    MessageType.REQUEST_REJECTED.value: "Chủ trọ đã từ chối yêu cầu thuê",
    MessageType.REQUEST_CANCELLED.value: "Người thuê đã huỷ yêu cầu thuê",
    MessageType.INVITATION_ACCEPTED.value: "Người thuê đã đồng ý lời mời thuê trọ",
    MessageType.INVITATION_REJECTED.value: "Người thuê đã từ chối lời mời thuê trọ",
    MessageType.INVITATION_CANCELLED.value: "Chủ trọ đã huỷ lời mời thuê trọ",
}


def is_system_message(message_type) -> bool:
    return getattr(message_type, "value", message_type) in SYSTEM_MESSAGE_TYPES


def system_message_text(message_type, fallback: str = "") -> str:
    return MESSAGE_CONTENT_MAP.get(getattr(message_type, "value", message_type), fallback)
