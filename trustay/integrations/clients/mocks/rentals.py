"""
Mock Rentals Client.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Optional

from trustay.integrations.clients.mocks.backend import (
    MockClientBase,
    bad_request,
    conflict,
    forbidden,
)
from trustay.integrations.contracts.interfaces import Page, Rental, RentalsClient, RentalStatus
from trustay.integrations.contracts.rentals import (
    CreateRentalRequest,
    UpdateRentalRequest,
    validate_create_rental_request,
)
from trustay.integrations.policy.response_wrappers import normalize_page

logger = logging.getLogger(__name__)


class MockRentalsClient(MockClientBase, RentalsClient):

    def _get(self, rental_id: str) -> Dict[str, Any]:
        rental = self.backend.require(self.backend.rentals, rental_id, "Rental")
        if self.user_id not in (rental.get("ownerId"), rental.get("tenantId")):
            raise forbidden("You cannot access this rental")
        return rental

    def _get_owned(self, rental_id: str) -> Dict[str, Any]:
        rental = self._get(rental_id)
        if rental.get("ownerId") != self.user_id:
            raise forbidden("Only the landlord can change this rental")
        return rental

    async def create_rental(self, request: CreateRentalRequest) -> Rental:
        errors = validate_create_rental_request(request)
        if errors:
            raise bad_request(errors)
        rental = self.backend.add_rental(
            self.backend.new_id("rental"),
            request.room_instance_id,
            self.user_id,
            request.tenant_id,
            float(request.monthly_rent),
            request.contract_start_date,
            request.contract_end_date,
        )
        rental["depositPaid"] = request.deposit_paid
        rental["bookingRequestId"] = request.booking_request_id
        rental["invitationId"] = request.invitation_id
        rental["contractDocumentUrl"] = request.contract_document_url
        logger.info("[RENTALS MOCK] Rental %s created for room %s", rental["id"], request.room_instance_id)
        return Rental.from_api(copy.deepcopy(rental))

    async def list_rentals(self, params: Optional[Dict[str, Any]] = None, scope: str = "all") -> Page[Rental]:
        params = dict(params or {})

        def visible(r: Dict[str, Any]) -> bool:
            if scope == "landlord":
                return r.get("ownerId") == self.user_id
            if scope == "tenant":
                return r.get("tenantId") == self.user_id
            return self.user_id in (r.get("ownerId"), r.get("tenantId"))

        items = [r for r in self.backend.rentals.values() if visible(r)]
        if params.get("status"):
            items = [r for r in items if r["status"] == params["status"]]
        return normalize_page(self._page(items, params), Rental.from_api)

    async def get_rental(self, rental_id: str) -> Rental:
        return Rental.from_api(copy.deepcopy(self._get(rental_id)))

    async def update_rental(self, rental_id: str, request: UpdateRentalRequest) -> Rental:
        rental = self._get_owned(rental_id)
        rental.update(request.to_payload())
        rental["updatedAt"] = self.backend.now()
        return Rental.from_api(copy.deepcopy(rental))

    async def terminate_rental(self, rental_id: str, reason: str) -> Rental:
        rental = self._get_owned(rental_id)
        if rental["status"] != RentalStatus.ACTIVE.value:
            raise conflict(f"Rental in status {rental['status']} cannot be terminated")
        if not (reason or "").strip():
            raise bad_request(["reason is required"])
        rental["status"] = RentalStatus.TERMINATED.value
        rental["terminationReason"] = reason
        rental["terminationNoticeDate"] = self.backend.now()
        rental["updatedAt"] = self.backend.now()
        return Rental.from_api(copy.deepcopy(rental))

    async def renew_rental(self, rental_id: str, new_end_date: str) -> Rental:
        rental = self._get_owned(rental_id)
        if rental["status"] == RentalStatus.TERMINATED.value:
            raise conflict("Terminated rentals cannot be renewed")
        current_end = rental.get("contractEndDate")
        if current_end and new_end_date <= current_end:
            raise bad_request(["newEndDate must be after the current end date"])
        rental["contractEndDate"] = new_end_date
        rental["status"] = RentalStatus.ACTIVE.value
        rental["updatedAt"] = self.backend.now()
        return Rental.from_api(copy.deepcopy(rental))
