"""
In-memory message metadata store.

The chat backend does not return the room / room-seeking context a message was
sent with, so it is kept here: saved under a temporary key before the message
is sent, then promoted to the real message id once the backend replies.

trustay.messaging.metadata_redis implements the same interface on Redis.
"""

from __future__ import annotations

import copy
import logging
import random
import time
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_DAYS = 30


def _now_ms() -> int:
    return int(time.time() * 1000)


def make_temp_key(now_ms: int) -> str:
    return f"temp_{now_ms}_{random.random()}"


class MessageMetadataStore:
    def __init__(self, expiry_days: int = DEFAULT_EXPIRY_DAYS, clock: Optional[Callable[[], int]] = None) -> None:
        # key (message id or temp key) -> {messageId?, conversationId, timestamp, data}
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._expiry_ms = expiry_days * 24 * 60 * 60 * 1000
        self._clock = clock or _now_ms

    def _live_entries(self) -> Dict[str, Dict[str, Any]]:
        now = self._clock()
        expired = [k for k, meta in self._entries.items() if now - meta["timestamp"] >= self._expiry_ms]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Dropped %d expired message metadata entries", len(expired))
        return self._entries

    def save(self, conversation_id: str, data: Dict[str, Any], temp_key: Optional[str] = None) -> str:
        """Store metadata for a message that is about to be sent. Returns the key it was stored under."""
        entries = self._live_entries()
        now = self._clock()
        key = temp_key or make_temp_key(now)
        entries[key] = {"conversationId": conversation_id, "timestamp": now, "data": dict(data)}
        return key

    def promote(self, temp_key: str, message_id: str) -> bool:
        """Re-key a saved entry under the id the backend assigned. Unknown keys are ignored."""
        entries = self._live_entries()
        meta = entries.pop(temp_key, None)
        if meta is None:
            return False
        entries[message_id] = {**meta, "messageId": message_id}
        return True

    def get(self, message_id: str) -> Optional[Dict[str, Any]]:
        meta = self._live_entries().get(message_id)
        return copy.deepcopy(meta["data"]) if meta else None

    def for_conversation(self, conversation_id: str) -> Dict[str, Dict[str, Any]]:
        # Only entries that have been promoted to a real message id
        return {
            key: copy.deepcopy(meta["data"])
            for key, meta in self._live_entries().items()
            if meta["conversationId"] == conversation_id and meta.get("messageId")
        }

    def clear(self) -> None:
        self._entries.clear()

    def ping(self) -> bool:
        return True
