"""
Mock Notifications Client.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from trustay.integrations.clients.mocks.backend import MockClientBase, bad_request, forbidden, paginate
from trustay.integrations.contracts.interfaces import Notification, NotificationsClient, Page
from trustay.integrations.contracts.messaging import CreateNotificationRequest
from trustay.integrations.policy.response_wrappers import normalize_page


class MockNotificationsClient(MockClientBase, NotificationsClient):

    def _mine(self) -> List[Dict[str, Any]]:
        return [n for n in self.backend.notifications.values() if n["userId"] == self.user_id]

    def _get(self, notification_id: str) -> Dict[str, Any]:
        notification = self.backend.require(self.backend.notifications, notification_id, "Notification")
        if notification["userId"] != self.user_id:
            raise forbidden("You cannot access this notification")
        return notification

    async def list_notifications(self, params: Optional[Dict[str, Any]] = None) -> Page[Notification]:
        params = dict(params or {})
        items = self._mine()
        is_read = params.get("is_read", params.get("isRead"))
        if is_read is not None:
            wanted = is_read if isinstance(is_read, bool) else str(is_read).lower() == "true"
            items = [n for n in items if n["isRead"] == wanted]
        kind = params.get("notification_type") or params.get("notificationType")
        if kind:
            items = [n for n in items if n["type"] == kind]
        items.sort(key=lambda n: n["createdAt"], reverse=True)
        return normalize_page(paginate(items, params, default_limit=20), Notification.from_api)

    async def unread_count(self) -> int:
        return sum(1 for n in self._mine() if not n["isRead"])

    async def mark_read(self, notification_id: str) -> None:
        notification = self._get(notification_id)
        notification["isRead"] = True
        notification["updatedAt"] = self.backend.now()

    async def mark_all_read(self) -> None:
        now = self.backend.now()
        for notification in self._mine():
            notification["isRead"] = True
            notification["updatedAt"] = now

    async def delete(self, notification_id: str) -> None:
        self._get(notification_id)
        del self.backend.notifications[notification_id]

    async def create(self, request: CreateNotificationRequest) -> Notification:
        if not request.user_id or not request.title:
            raise bad_request(["userId and title are required"])
        notification = {
            "id": self.backend.new_id("notif"),
            "userId": request.user_id,
            "type": request.type,
            "title": request.title,
            "message": request.message,
            "data": dict(request.data),
            "isRead": False,
            "createdAt": self.backend.now(),
            "updatedAt": self.backend.now(),
        }
        self.backend.notifications[notification["id"]] = notification
        return Notification.from_api(copy.deepcopy(notification))
