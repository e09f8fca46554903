"""
Redis-backed message metadata store, used when REDIS_URL is set.
Implements the same interface as trustay.messaging.metadata (in-memory).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

import redis

from trustay.messaging.metadata import DEFAULT_EXPIRY_DAYS, _now_ms, make_temp_key

logger = logging.getLogger(__name__)


class MessageMetadataStore:
    """
    One Redis string per entry under `<key_prefix>:<key>`, expiring through
    SETEX so Redis drops old metadata on its own.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key_prefix: str = "trustay_message_metadata",
        expiry_days: int = DEFAULT_EXPIRY_DAYS,
        clock: Optional[Callable[[], int]] = None,
        client: Any = None,
    ) -> None:
        if client is None and not url:
            raise ValueError("Either url or client is required")
        self._client = client if client is not None else redis.from_url(url, decode_responses=True)
        self._prefix = key_prefix
        self._expiry_ms = expiry_days * 24 * 60 * 60 * 1000
        self._clock = clock or _now_ms

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def _read(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._client.get(self._key(key))
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable message metadata at %s", key)
            return None

    def _write(self, key: str, meta: Dict[str, Any]) -> None:
        remaining_ms = meta["timestamp"] + self._expiry_ms - self._clock()
        if remaining_ms <= 0:
            return
        ttl = max(1, -(-remaining_ms // 1000))
        self._client.setex(self._key(key), ttl, json.dumps(meta, default=str))

    def save(self, conversation_id: str, data: Dict[str, Any], temp_key: Optional[str] = None) -> str:
        now = self._clock()
        key = temp_key or make_temp_key(now)
        self._write(key, {"conversationId": conversation_id, "timestamp": now, "data": dict(data)})
        return key

    def promote(self, temp_key: str, message_id: str) -> bool:
        meta = self._read(temp_key)
        if meta is None:
            return False
        self._client.delete(self._key(temp_key))
        self._write(message_id, {**meta, "messageId": message_id})
        return True

    def get(self, message_id: str) -> Optional[Dict[str, Any]]:
        meta = self._read(message_id)
        return meta.get("data") if meta else None

    def for_conversation(self, conversation_id: str) -> Dict[str, Dict[str, Any]]:
        result: Dict[str, Dict[str, Any]] = {}
        start = len(self._prefix) + 1
        for redis_key in self._client.scan_iter(match=self._key("*")):
            key = redis_key[start:]
            meta = self._read(key)
            if meta and meta.get("conversationId") == conversation_id and meta.get("messageId"):
                result[key] = meta.get("data") or {}
        return result

    def clear(self) -> None:
        keys = list(self._client.scan_iter(match=self._key("*")))
        if keys:
            self._client.delete(*keys)

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False
