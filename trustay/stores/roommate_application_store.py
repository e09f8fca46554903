"""
Roommate application store.

Applicants see `my_applications`; post owners (tenants looking for a roommate,
and landlords for platform rooms) see `applications_for_my_posts`. Every
fetched application is also cached by id in `applications`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from trustay.integrations.contracts.interfaces import (
    ApplicationStatistics,
    PageMeta,
    RoommateApplication,
    RoommateApplicationsClient,
)
from trustay.integrations.contracts.roommates import (
    BulkRespondRequest,
    CreateRoommateApplicationRequest,
    RespondToApplicationRequest,
    UpdateRoommateApplicationRequest,
    platform_room_applications,
    search_applications,
    validate_application_request,
)
from trustay.stores.base import BaseStore

MSG_FETCH_FAILED = "Không thể tải đơn ứng tuyển"
MSG_CREATE_FAILED = "Không thể gửi đơn ứng tuyển"
MSG_UPDATE_FAILED = "Không thể cập nhật đơn ứng tuyển"
MSG_RESPOND_FAILED = "Không thể phản hồi đơn ứng tuyển"
MSG_CONFIRM_FAILED = "Không thể xác nhận đơn ứng tuyển"
MSG_CANCEL_FAILED = "Không thể hủy đơn ứng tuyển"
MSG_BULK_FAILED = "Không thể phản hồi hàng loạt đơn ứng tuyển"
MSG_STATISTICS_FAILED = "Không thể tải thống kê đơn ứng tuyển"


class RoommateApplicationStore(BaseStore):
    def __init__(self, client: RoommateApplicationsClient) -> None:
        self.client = client

        self.applications: Dict[str, RoommateApplication] = {}
        self.my_applications: List[RoommateApplication] = []
        self.applications_for_my_posts: List[RoommateApplication] = []
        self.current_application: Optional[RoommateApplication] = None
        self.my_statistics: Optional[ApplicationStatistics] = None
        self.my_posts_statistics: Optional[ApplicationStatistics] = None
        self.pagination: Optional[PageMeta] = None

        self.is_loading = False
        self.error: Optional[str] = None

    async def _run(self, operation, default_error: str):
        return await self._guard("is_loading", "error", operation, default_error)

    def _remember(self, application: RoommateApplication) -> None:
        self.applications[application.id] = application
        self.my_applications = [application if a.id == application.id else a for a in self.my_applications]
        self.applications_for_my_posts = [
            application if a.id == application.id else a for a in self.applications_for_my_posts
        ]
        if self.current_application is not None and self.current_application.id == application.id:
            self.current_application = application

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def fetch_application_by_id(self, application_id: str) -> Optional[RoommateApplication]:
        ok, application = await self._run(lambda: self.client.get_application(application_id), MSG_FETCH_FAILED)
        if ok:
            self.applications[application.id] = application
            self.current_application = application
        return application

    async def fetch_my_applications(self, params: Optional[Dict[str, Any]] = None) -> bool:
        ok, page = await self._run(lambda: self.client.list_my_applications(params), MSG_FETCH_FAILED)
        if ok:
            self.my_applications = page.items
            self.pagination = page.meta
            self.applications.update({a.id: a for a in page.items})
        return ok

    async def fetch_applications_for_my_posts(self, params: Optional[Dict[str, Any]] = None) -> bool:
        ok, page = await self._run(lambda: self.client.list_for_my_posts(params), MSG_FETCH_FAILED)
        if ok:
            self.applications_for_my_posts = page.items
            self.pagination = page.meta
            self.applications.update({a.id: a for a in page.items})
        return ok

    async def fetch_my_statistics(self) -> Optional[ApplicationStatistics]:
        ok, stats = await self._run(lambda: self.client.statistics("my-applications"), MSG_STATISTICS_FAILED)
        if ok:
            self.my_statistics = stats
        return stats

    async def fetch_my_posts_statistics(self) -> Optional[ApplicationStatistics]:
        ok, stats = await self._run(lambda: self.client.statistics("for-my-posts"), MSG_STATISTICS_FAILED)
        if ok:
            self.my_posts_statistics = stats
        return stats

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, request: CreateRoommateApplicationRequest) -> Optional[RoommateApplication]:
        errors = validate_application_request(request)
        if errors:
            self._reject("error", errors)
            return None
        ok, application = await self._run(lambda: self.client.create_application(request), MSG_CREATE_FAILED)
        if ok:
            self.applications[application.id] = application
            self.my_applications = [application] + self.my_applications
        return application

    async def update(self, application_id: str, request: UpdateRoommateApplicationRequest) -> bool:
        ok, application = await self._run(
            lambda: self.client.update_application(application_id, request), MSG_UPDATE_FAILED
        )
        if ok:
            self._remember(application)
        return ok

    async def respond(self, application_id: str, request: RespondToApplicationRequest) -> Optional[RoommateApplication]:
        ok, application = await self._run(lambda: self.client.respond(application_id, request), MSG_RESPOND_FAILED)
        if ok:
            self._remember(application)
        return application

    async def confirm(self, application_id: str) -> Optional[RoommateApplication]:
        ok, application = await self._run(lambda: self.client.confirm(application_id), MSG_CONFIRM_FAILED)
        if ok:
            self._remember(application)
        return application

    async def cancel(self, application_id: str) -> bool:
        ok, application = await self._run(lambda: self.client.cancel(application_id), MSG_CANCEL_FAILED)
        if ok:
            self._remember(application)
        return ok

    async def bulk_respond(self, request: BulkRespondRequest) -> Optional[Dict[str, Any]]:
        ok, result = await self._run(lambda: self.client.bulk_respond(request), MSG_BULK_FAILED)
        if ok:
            await self.fetch_applications_for_my_posts()
        return result

    # ------------------------------------------------------------------
    # Local helpers
    # ------------------------------------------------------------------

    def platform_room_applications(self, term: str = "") -> List[RoommateApplication]:
        """Applications for posts attached to a platform room, optionally filtered by a search term."""
        applications = platform_room_applications(self.applications_for_my_posts)
        return search_applications(applications, term) if term else applications

    def search(self, term: str) -> List[RoommateApplication]:
        return search_applications(self.applications_for_my_posts, term)

    def clear_error(self) -> None:
        self.error = None
