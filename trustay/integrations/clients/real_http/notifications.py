"""
Real Notifications HTTP Client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from trustay.integrations.clients.real_http.base import BackendHttpClient
from trustay.integrations.contracts.interfaces import Notification, NotificationsClient, Page
from trustay.integrations.contracts.messaging import CreateNotificationRequest
from trustay.integrations.policy.response_wrappers import normalize_entity_response, normalize_page, unwrap_entity

_PARAM_NAMES = {"is_read": "isRead", "notification_type": "notificationType"}


class RealNotificationsClient(NotificationsClient):
    def __init__(self, http: BackendHttpClient) -> None:
        self.http = http

    async def list_notifications(self, params: Optional[Dict[str, Any]] = None) -> Page[Notification]:
        query = {_PARAM_NAMES.get(k, k): v for k, v in (params or {}).items()}
        if isinstance(query.get("isRead"), bool):
            query["isRead"] = "true" if query["isRead"] else "false"
        raw = await self.http.get("/api/notifications", params=query)
        return normalize_page(raw, Notification.from_api)

    async def unread_count(self) -> int:
        raw = unwrap_entity(await self.http.get("/api/notifications/count"))
        if isinstance(raw, dict):
            return int(raw.get("count") or raw.get("unreadCount") or 0)
        return int(raw or 0)

    async def mark_read(self, notification_id: str) -> None:
        await self.http.patch(f"/api/notifications/{notification_id}/read")

    async def mark_all_read(self) -> None:
        await self.http.patch("/api/notifications/mark-all-read")

    async def delete(self, notification_id: str) -> None:
        await self.http.delete(f"/api/notifications/{notification_id}")

    async def create(self, request: CreateNotificationRequest) -> Notification:
        raw = await self.http.post("/api/notifications", json=request.to_payload())
        return normalize_entity_response(raw, Notification.from_api)
