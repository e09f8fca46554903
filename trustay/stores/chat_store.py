"""
Chat store: conversations, message history per conversation and sending.

Context that the backend does not keep (room cards, room-seeking posts) is
saved in the message metadata store and re-attached by message id.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from trustay.integrations.contracts.interfaces import ChatClient, ChatMessage, ConversationSummary
from trustay.integrations.contracts.messaging import SendMessageRequest, validate_send_message_request
from trustay.messaging.constants import MessageType, is_system_message, system_message_text
from trustay.messaging.encoder import StructuredMessage, encode_structured_message, get_display_text
from trustay.stores.base import BaseStore

logger = logging.getLogger(__name__)

MSG_SEND_FAILED = "Không thể gửi tin nhắn"


class ChatStore(BaseStore):
    def __init__(self, client: ChatClient, metadata_store=None) -> None:
        self.client = client
        self.metadata_store = metadata_store

        self.conversations: List[ConversationSummary] = []
        self.messages: Dict[str, List[ChatMessage]] = {}

        self.loading_conversations = False
        self.loading_messages = False
        self.sending = False

        self.error: Optional[str] = None
        self.send_error: Optional[str] = None

    async def load_conversations(self) -> bool:
        ok, conversations = await self._guard("loading_conversations", "error", self.client.list_conversations)
        if ok:
            self.conversations = conversations
        return ok

    async def load_messages(self, conversation_id: str, cursor: Optional[str] = None, limit: Optional[int] = None) -> bool:
        """Load the newest page, or with `cursor` the page before it (prepended)."""
        ok, page = await self._guard(
            "loading_messages", "error", lambda: self.client.get_messages(conversation_id, cursor=cursor, limit=limit)
        )
        if not ok:
            return False
        if cursor:
            existing = self.messages.get(conversation_id, [])
            existing_ids = {m.id for m in existing}
            self.messages[conversation_id] = [m for m in page if m.id not in existing_ids] + existing
        else:
            self.messages[conversation_id] = list(page)
        return True

    async def send_message(
        self,
        content: str = "",
        recipient_id: Optional[str] = None,
        conversation_id: Optional[str] = None,
        structured: Optional[StructuredMessage] = None,
        metadata: Optional[Dict[str, Any]] = None,
        message_type: str = MessageType.TEXT.value,
        attachment_urls: Optional[List[str]] = None,
    ) -> Optional[ChatMessage]:
        if structured is not None:
            content = encode_structured_message(structured)
        request = SendMessageRequest(
            content=content,
            type=message_type,
            recipient_id=recipient_id,
            conversation_id=conversation_id,
            attachment_urls=list(attachment_urls or []),
        )
        errors = validate_send_message_request(request)
        if errors:
            self._reject("send_error", errors)
            return None

        temp_key = None
        if metadata and self.metadata_store is not None:
            temp_key = self.metadata_store.save(conversation_id or "", metadata)

        ok, message = await self._guard("sending", "send_error", lambda: self.client.send_message(request), MSG_SEND_FAILED)
        if not ok:
            return None

        if temp_key is not None:
            if message.conversation_id != (conversation_id or ""):
                self.metadata_store.save(message.conversation_id, metadata, temp_key=temp_key)
            self.metadata_store.promote(temp_key, message.id)

        self.messages.setdefault(message.conversation_id, []).append(message)
        return message

    async def mark_all_read(self, conversation_id: str) -> bool:
        ok, _ = await self._guard("loading_messages", "error", lambda: self.client.mark_all_read(conversation_id))
        if ok:
            for conversation in self.conversations:
                if conversation.conversation_id == conversation_id:
                    conversation.unread_count = 0
        return ok

    def display_text(self, message: ChatMessage) -> str:
        if is_system_message(message.type):
            return system_message_text(message.type, get_display_text(message.content))
        return get_display_text(message.content)

    def metadata_for(self, message: ChatMessage) -> Optional[Dict[str, Any]]:
        if self.metadata_store is None:
            return None
        return self.metadata_store.get(message.id)
