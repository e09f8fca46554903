"""
Real Roommate Applications HTTP Client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from trustay.integrations.clients.real_http.base import BackendHttpClient
from trustay.integrations.contracts.interfaces import (
    ApplicationStatistics,
    Page,
    RoommateApplication,
    RoommateApplicationsClient,
)
from trustay.integrations.contracts.roommates import (
    BulkRespondRequest,
    CreateRoommateApplicationRequest,
    RespondToApplicationRequest,
    UpdateRoommateApplicationRequest,
)
from trustay.integrations.policy.response_wrappers import normalize_entity_response, normalize_page, unwrap_entity

BASE = "/api/roommate-applications"
_STATISTICS_SCOPES = {"my-applications", "for-my-posts"}


class RealRoommateApplicationsClient(RoommateApplicationsClient):
    def __init__(self, http: BackendHttpClient) -> None:
        self.http = http

    async def create_application(self, request: CreateRoommateApplicationRequest) -> RoommateApplication:
        raw = await self.http.post(BASE, json=request.to_payload())
        return normalize_entity_response(raw, RoommateApplication.from_api)

    async def get_application(self, application_id: str) -> RoommateApplication:
        raw = await self.http.get(f"{BASE}/{application_id}")
        return normalize_entity_response(raw, RoommateApplication.from_api)

    async def list_my_applications(self, params: Optional[Dict[str, Any]] = None) -> Page[RoommateApplication]:
        raw = await self.http.get(f"{BASE}/my-applications", params=params)
        return normalize_page(raw, RoommateApplication.from_api)

    async def list_for_my_posts(self, params: Optional[Dict[str, Any]] = None) -> Page[RoommateApplication]:
        raw = await self.http.get(f"{BASE}/for-my-posts", params=params)
        return normalize_page(raw, RoommateApplication.from_api)

    async def update_application(self, application_id: str,
                                 request: UpdateRoommateApplicationRequest) -> RoommateApplication:
        raw = await self.http.patch(f"{BASE}/{application_id}", json=request.to_payload())
        return normalize_entity_response(raw, RoommateApplication.from_api)

    async def respond(self, application_id: str, request: RespondToApplicationRequest) -> RoommateApplication:
        raw = await self.http.patch(f"{BASE}/{application_id}/respond", json=request.to_payload())
        return normalize_entity_response(raw, RoommateApplication.from_api)

    async def confirm(self, application_id: str) -> RoommateApplication:
        raw = await self.http.patch(f"{BASE}/{application_id}/confirm")
        return normalize_entity_response(raw, RoommateApplication.from_api)

    async def cancel(self, application_id: str) -> RoommateApplication:
        raw = await self.http.patch(f"{BASE}/{application_id}/cancel")
        return normalize_entity_response(raw, RoommateApplication.from_api)

    async def bulk_respond(self, request: BulkRespondRequest) -> Dict[str, Any]:
        raw = await self.http.post(f"{BASE}/bulk-respond", json=request.to_payload())
        return unwrap_entity(raw) or {}

    async def statistics(self, scope: str = "my-applications") -> ApplicationStatistics:
        if scope not in _STATISTICS_SCOPES:
            raise ValueError(f"Unknown statistics scope '{scope}'")
        raw = await self.http.get(f"{BASE}/statistics/{scope}")
        return normalize_entity_response(raw, ApplicationStatistics.from_api)
