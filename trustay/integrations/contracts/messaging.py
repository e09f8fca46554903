"""
Chat and notification request contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SendMessageRequest:
    content: str
    type: str = "text"
    recipient_id: Optional[str] = None
    conversation_id: Optional[str] = None
    attachment_urls: List[str] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"content": self.content, "type": self.type}
        if self.recipient_id:
            payload["recipientId"] = self.recipient_id
        if self.conversation_id:
            payload["conversationId"] = self.conversation_id
        if self.attachment_urls:
            payload["attachmentUrls"] = list(self.attachment_urls)
        return payload


@dataclass
class CreateNotificationRequest:
    user_id: str
    type: str
    title: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "userId": self.user_id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
        }
        if self.data:
            payload["data"] = dict(self.data)
        return payload


def validate_send_message_request(request: SendMessageRequest) -> List[str]:
    errors: List[str] = []
    if not request.recipient_id and not request.conversation_id:
        errors.append("recipient_id or conversation_id is required")
    if not request.content and not request.attachment_urls:
        errors.append("content is required")
    return errors
