"""Notification store: the current user's notifications and unread counter."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from trustay.integrations.contracts.interfaces import Notification, NotificationsClient, PageMeta
from trustay.stores.base import BaseStore

logger = logging.getLogger(__name__)


class NotificationStore(BaseStore):
    def __init__(self, client: NotificationsClient) -> None:
        self.client = client
        self.items: List[Notification] = []
        self.meta: Optional[PageMeta] = None
        self.unread = 0
        self.is_loading = False
        self.error: Optional[str] = None

    async def load(self, params: Optional[Dict[str, Any]] = None) -> bool:
        ok, page = await self._guard("is_loading", "error", lambda: self.client.list_notifications(params))
        if ok:
            self.items = page.items
            self.meta = page.meta
        return ok

    async def load_unread_count(self) -> Optional[int]:
        ok, count = await self._guard("is_loading", "error", self.client.unread_count)
        if ok:
            self.unread = count
        return count

    async def mark_read(self, notification_id: str) -> bool:
        ok, _ = await self._guard("is_loading", "error", lambda: self.client.mark_read(notification_id))
        if not ok:
            return False
        for notification in self.items:
            if notification.id == notification_id and not notification.is_read:
                notification.is_read = True
                self.unread = max(0, self.unread - 1)
        return True

    async def mark_all_read(self) -> bool:
        ok, _ = await self._guard("is_loading", "error", self.client.mark_all_read)
        if ok:
            for notification in self.items:
                notification.is_read = True
            self.unread = 0
        return ok

    async def delete(self, notification_id: str) -> bool:
        ok, _ = await self._guard("is_loading", "error", lambda: self.client.delete(notification_id))
        if ok:
            removed = [n for n in self.items if n.id == notification_id]
            self.items = [n for n in self.items if n.id != notification_id]
            if removed and not removed[0].is_read:
                self.unread = max(0, self.unread - 1)
        return ok

    def add_incoming(self, notification: Notification) -> bool:
        """Push a notification received in real time. Duplicates (same id) are ignored."""
        if any(n.id == notification.id for n in self.items):
            logger.debug("Ignoring duplicate notification %s", notification.id)
            return False
        self.items = [notification] + self.items
        if not notification.is_read:
            self.unread += 1
        return True
