"""
Mock Chat Client.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from trustay.integrations.clients.mocks.backend import MockClientBase, bad_request, forbidden
from trustay.integrations.contracts.interfaces import ChatClient, ChatMessage, ConversationSummary
from trustay.integrations.contracts.messaging import SendMessageRequest, validate_send_message_request

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


def conversation_id_for(user_a: str, user_b: str) -> str:
    first, second = sorted((user_a, user_b))
    return f"conv_{first}__{second}"


class MockChatClient(MockClientBase, ChatClient):

    def _conversation(self, conversation_id: str) -> Dict[str, Any]:
        conversation = self.backend.require(self.backend.conversations, conversation_id, "Conversation")
        if self.user_id not in conversation["participants"]:
            raise forbidden("You are not part of this conversation")
        return conversation

    def _open_conversation(self, recipient_id: str) -> Dict[str, Any]:
        if recipient_id == self.user_id:
            raise bad_request("You cannot message yourself")
        conversation_id = conversation_id_for(self.user_id, recipient_id)
        conversation = self.backend.conversations.get(conversation_id)
        if conversation is None:
            conversation = {
                "id": conversation_id,
                "participants": [self.user_id, recipient_id],
                "createdAt": self.backend.now(),
            }
            self.backend.conversations[conversation_id] = conversation
            self.backend.messages[conversation_id] = []
        return conversation

    async def send_message(self, request: SendMessageRequest) -> ChatMessage:
        errors = validate_send_message_request(request)
        if errors:
            raise bad_request(errors)
        if request.conversation_id:
            conversation = self._conversation(request.conversation_id)
        else:
            conversation = self._open_conversation(request.recipient_id)

        message = {
            "id": self.backend.new_id("msg"),
            "conversationId": conversation["id"],
            "senderId": self.user_id,
            "content": request.content,
            "type": request.type,
            "attachments": [{"url": url} for url in request.attachment_urls],
            "isEdited": False,
            "sentAt": self.backend.now(),
            "readAt": None,
        }
        self.backend.messages[conversation["id"]].append(message)
        logger.info("[CHAT MOCK] %s -> conversation %s (%s)", self.user_id, conversation["id"], request.type)
        return ChatMessage.from_api(copy.deepcopy(message))

    async def get_messages(self, conversation_id: str, cursor: Optional[str] = None,
                           limit: Optional[int] = None) -> List[ChatMessage]:
        self._conversation(conversation_id)
        messages = self.backend.messages.get(conversation_id, [])
        end = len(messages)
        if cursor:
            # cursor = id of the oldest message already loaded
            ids = [m["id"] for m in messages]
            end = ids.index(cursor) if cursor in ids else 0
        size = limit or DEFAULT_PAGE_SIZE
        window = messages[max(end - size, 0):end]
        return [ChatMessage.from_api(copy.deepcopy(m)) for m in window]

    async def mark_all_read(self, conversation_id: str) -> None:
        self._conversation(conversation_id)
        now = self.backend.now()
        for message in self.backend.messages.get(conversation_id, []):
            if message["senderId"] != self.user_id and not message.get("readAt"):
                message["readAt"] = now

    async def list_conversations(self) -> List[ConversationSummary]:
        summaries: List[ConversationSummary] = []
        for conversation in self.backend.conversations.values():
            if self.user_id not in conversation["participants"]:
                continue
            messages = self.backend.messages.get(conversation["id"], [])
            counterpart = next((p for p in conversation["participants"] if p != self.user_id), None)
            summaries.append(ConversationSummary.from_api({
                "conversationId": conversation["id"],
                "counterpart": self.backend.user_summary(counterpart),
                "lastMessage": copy.deepcopy(messages[-1]) if messages else {},
                "unreadCount": sum(1 for m in messages if m["senderId"] != self.user_id and not m.get("readAt")),
            }))
        summaries.sort(key=lambda s: s.last_message.get("sentAt") or "", reverse=True)
        return summaries
