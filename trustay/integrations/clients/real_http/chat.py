"""
Real Chat HTTP Client.
"""

from __future__ import annotations

from typing import List, Optional

from trustay.integrations.clients.real_http.base import BackendHttpClient
from trustay.integrations.contracts.interfaces import ChatClient, ChatMessage, ConversationSummary
from trustay.integrations.contracts.messaging import SendMessageRequest
from trustay.integrations.policy.response_wrappers import normalize_entity_response, normalize_list_response


class RealChatClient(ChatClient):
    def __init__(self, http: BackendHttpClient) -> None:
        self.http = http

    async def send_message(self, request: SendMessageRequest) -> ChatMessage:
        raw = await self.http.post("/api/chat/messages", json=request.to_payload())
        return normalize_entity_response(raw, ChatMessage.from_api)

    async def get_messages(self, conversation_id: str, cursor: Optional[str] = None,
                           limit: Optional[int] = None) -> List[ChatMessage]:
        raw = await self.http.get(
            f"/api/chat/conversations/{conversation_id}/messages",
            params={"cursor": cursor, "limit": limit},
        )
        return normalize_list_response(raw, ChatMessage.from_api)

    async def mark_all_read(self, conversation_id: str) -> None:
        await self.http.post(f"/api/chat/conversations/{conversation_id}/read-all")

    async def list_conversations(self) -> List[ConversationSummary]:
        raw = await self.http.get("/api/chat/conversations")
        return normalize_list_response(raw, ConversationSummary.from_api)
