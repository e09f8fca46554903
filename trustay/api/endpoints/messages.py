from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from trustay.api.dependencies import get_chat_store
from trustay.messaging.encoder import decode_structured_message, get_display_text, is_structured_message
from trustay.stores import ChatStore

api = APIRouter()
messages_api = api

MSG_LOAD_FAILED = "Không thể tải tin nhắn"


@api.get("/decode", tags=["Messages"])
async def decode_message(content: str = Query(default="")):
    """Decode chat content; plain text comes back with `structured: false`."""
    structured = decode_structured_message(content)
    return {
        "success": True,
        "structured": structured is not None,
        "malformed": structured is None and is_structured_message(content),
        "message": structured.to_wire() if structured else None,
        "display_text": get_display_text(content),
    }


@api.get("/conversations/{conversation_id}", tags=["Messages"])
async def list_conversation_messages(
    conversation_id: str,
    cursor: Optional[str] = Query(default=None, description="Id of the oldest message already loaded"),
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    store: ChatStore = Depends(get_chat_store),
):
    """Message history with display text and any saved room or post context."""
    if not await store.load_messages(conversation_id, cursor=cursor, limit=limit):
        return JSONResponse(
            status_code=store.last_error_status or 502,
            content={"success": False, "toast": {"level": "error", "message": MSG_LOAD_FAILED}, "error": store.error},
        )

    messages = []
    for message in store.messages.get(conversation_id, []):
        structured = decode_structured_message(message.content)
        messages.append({
            "id": message.id,
            "sender_id": message.sender_id,
            "type": message.type,
            "sent_at": message.sent_at,
            "display_text": store.display_text(message),
            "structured": structured.to_wire() if structured else None,
            "metadata": store.metadata_for(message),
        })
    return {"success": True, "conversation_id": conversation_id, "messages": messages}
