"""
Mock Roommate Applications Client.

Decision flow mirrored from the backend:
- pending -> approved_by_tenant / rejected_by_tenant (the post's tenant decides)
- for platform rooms: approved_by_tenant -> approved_by_landlord / rejected_by_landlord
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from trustay.error_handler import ApiError
from trustay.integrations.clients.mocks.backend import (
    MockClientBase,
    bad_request,
    conflict,
    forbidden,
)
from trustay.integrations.contracts.interfaces import (
    ApplicationStatistics,
    Page,
    RoommateApplication,
    RoommateApplicationsClient,
    RoommateApplicationStatus as Status,
)
from trustay.integrations.contracts.roommates import (
    BulkRespondRequest,
    CreateRoommateApplicationRequest,
    RespondToApplicationRequest,
    UpdateRoommateApplicationRequest,
    compute_statistics,
    validate_application_request,
)
from trustay.integrations.policy.response_wrappers import normalize_page

logger = logging.getLogger(__name__)

_TENANT_DECISIONS = {Status.APPROVED_BY_TENANT.value, Status.REJECTED_BY_TENANT.value}
_LANDLORD_DECISIONS = {Status.APPROVED_BY_LANDLORD.value, Status.REJECTED_BY_LANDLORD.value}
_CANCELLABLE = {Status.PENDING.value, Status.APPROVED_BY_TENANT.value}


class MockRoommateApplicationsClient(MockClientBase, RoommateApplicationsClient):

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _post_of(self, application: Dict[str, Any]) -> Dict[str, Any]:
        return self.backend.roommate_posts.get(application["roommateSeekingPostId"]) or {}

    def _is_platform(self, application: Dict[str, Any]) -> bool:
        return self._post_of(application).get("roomInstanceId") is not None

    def _get(self, application_id: str) -> Dict[str, Any]:
        application = self.backend.require(self.backend.applications, application_id, "Roommate application")
        post = self._post_of(application)
        if self.user_id not in (application["applicantId"], post.get("tenantId"), post.get("landlordId")):
            raise forbidden("You cannot access this application")
        return application

    def _visible_for_my_posts(self, application: Dict[str, Any]) -> bool:
        post = self._post_of(application)
        if post.get("tenantId") == self.user_id:
            return True
        # landlords see applications once the tenant approved, plus their own decisions
        return post.get("landlordId") == self.user_id and application["status"] in (
            _LANDLORD_DECISIONS | {Status.APPROVED_BY_TENANT.value}
        )

    def _my_applications(self) -> List[Dict[str, Any]]:
        return [a for a in self.backend.applications.values() if a["applicantId"] == self.user_id]

    def _for_my_posts(self) -> List[Dict[str, Any]]:
        return [a for a in self.backend.applications.values() if self._visible_for_my_posts(a)]

    @staticmethod
    def _filter(items: List[Dict[str, Any]], params: Dict[str, Any]) -> List[Dict[str, Any]]:
        if params.get("status"):
            items = [a for a in items if a["status"] == params["status"]]
        items.sort(key=lambda a: a.get("createdAt") or "", reverse=True)
        return items

    def _to_model(self, application: Dict[str, Any]) -> RoommateApplication:
        return RoommateApplication.from_api(copy.deepcopy(application))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_application(self, application_id: str) -> RoommateApplication:
        return self._to_model(self._get(application_id))

    async def list_my_applications(self, params: Optional[Dict[str, Any]] = None) -> Page[RoommateApplication]:
        params = dict(params or {})
        items = self._filter(self._my_applications(), params)
        return normalize_page(self._page(items, params), RoommateApplication.from_api)

    async def list_for_my_posts(self, params: Optional[Dict[str, Any]] = None) -> Page[RoommateApplication]:
        params = dict(params or {})
        items = self._filter(self._for_my_posts(), params)
        return normalize_page(self._page(items, params), RoommateApplication.from_api)

    async def statistics(self, scope: str = "my-applications") -> ApplicationStatistics:
        if scope == "my-applications":
            items = self._my_applications()
        elif scope == "for-my-posts":
            items = self._for_my_posts()
        else:
            raise bad_request(f"Unknown statistics scope {scope}")
        return compute_statistics(RoommateApplication.from_api(a) for a in items)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_application(self, request: CreateRoommateApplicationRequest) -> RoommateApplication:
        errors = validate_application_request(request)
        if errors:
            raise bad_request(errors)
        post = self.backend.require(self.backend.roommate_posts, request.roommate_seeking_post_id,
                                    "Roommate seeking post")
        if post["tenantId"] == self.user_id:
            raise bad_request("You cannot apply to your own post")
        for existing in self._my_applications():
            if existing["roommateSeekingPostId"] == post["id"] and existing["status"] == Status.PENDING.value:
                raise conflict("You already have a pending application for this post")

        payload = request.to_payload()
        payload.pop("roommateSeekingPostId")
        application = self.backend.add_application(self.backend.new_id("application"), post["id"],
                                                   self.user_id, **payload)
        logger.info("[ROOMMATES MOCK] Application %s created for post %s", application["id"], post["id"])
        return self._to_model(application)

    async def update_application(self, application_id: str,
                                 request: UpdateRoommateApplicationRequest) -> RoommateApplication:
        application = self._get(application_id)
        if application["applicantId"] != self.user_id:
            raise forbidden("Only the applicant can edit this application")
        if application["status"] != Status.PENDING.value:
            raise conflict("Only pending applications can be edited")
        application.update(request.to_payload())
        application["updatedAt"] = self.backend.now()
        return self._to_model(application)

    async def respond(self, application_id: str, request: RespondToApplicationRequest) -> RoommateApplication:
        application = self._get(application_id)
        post = self._post_of(application)
        decision = request.status.value
        now = self.backend.now()

        if application["status"] == Status.PENDING.value:
            if post.get("tenantId") != self.user_id:
                raise forbidden("Only the tenant who posted can respond to this application")
            if decision not in _TENANT_DECISIONS:
                raise bad_request(f"Invalid tenant decision {decision}")
            application["tenantResponse"] = request.response_message
            application["tenantRespondedAt"] = now
        elif application["status"] == Status.APPROVED_BY_TENANT.value and self._is_platform(application):
            if post.get("landlordId") != self.user_id:
                raise forbidden("Only the landlord can respond at this stage")
            if decision not in _LANDLORD_DECISIONS:
                raise bad_request(f"Invalid landlord decision {decision}")
            application["landlordResponse"] = request.response_message
            application["landlordRespondedAt"] = now
        else:
            raise conflict(f"Application in status {application['status']} cannot be responded to")

        application["status"] = decision
        application["responseMessage"] = request.response_message
        application["updatedAt"] = now
        logger.info("[ROOMMATES MOCK] Application %s -> %s", application_id, decision)
        return self._to_model(application)

    async def confirm(self, application_id: str) -> RoommateApplication:
        application = self._get(application_id)
        platform = self._is_platform(application)
        final_approval = Status.APPROVED_BY_LANDLORD.value if platform else Status.APPROVED_BY_TENANT.value
        if application["status"] != final_approval:
            raise conflict(f"Application in status {application['status']} cannot be confirmed")

        # the post owner confirms first; the landlord closes platform-room applications
        post = self._post_of(application)
        if self.user_id == post.get("tenantId"):
            application["isConfirmedByTenant"] = True
        elif platform and self.user_id == post.get("landlordId"):
            if not application["isConfirmedByTenant"]:
                raise conflict("The tenant must confirm the application first")
            application["isConfirmedByLandlord"] = True
        else:
            raise forbidden("Only the post owner or the landlord can confirm")

        fully_confirmed = application["isConfirmedByTenant"] and (application["isConfirmedByLandlord"] or not platform)
        if fully_confirmed and not application.get("confirmedAt"):
            application["confirmedAt"] = self.backend.now()
        application["updatedAt"] = self.backend.now()
        return self._to_model(application)

    async def cancel(self, application_id: str) -> RoommateApplication:
        application = self._get(application_id)
        if application["applicantId"] != self.user_id:
            raise forbidden("Only the applicant can cancel this application")
        if application["status"] not in _CANCELLABLE:
            raise conflict(f"Application in status {application['status']} cannot be cancelled")
        application["status"] = Status.CANCELLED.value
        application["updatedAt"] = self.backend.now()
        return self._to_model(application)

    async def bulk_respond(self, request: BulkRespondRequest) -> Dict[str, Any]:
        processed: List[str] = []
        errors: List[Dict[str, Any]] = []
        for application_id in request.application_ids:
            try:
                application = self._get(application_id)
                as_landlord = self._post_of(application).get("landlordId") == self.user_id \
                    and application["status"] == Status.APPROVED_BY_TENANT.value
                await self.respond(
                    application_id,
                    RespondToApplicationRequest.decision(request.approve, as_landlord, request.message),
                )
                processed.append(application_id)
            except ApiError as exc:
                errors.append({"applicationId": application_id, "error": exc.message})
        return {
            "successCount": len(processed),
            "failureCount": len(errors),
            "processedApplications": processed,
            "errors": errors,
        }
