"""
Rental contract: rental request shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .interfaces import RentalStatus


@dataclass
class CreateRentalRequest:
    room_instance_id: str
    tenant_id: str
    contract_start_date: str
    monthly_rent: str
    deposit_paid: str
    contract_end_date: Optional[str] = None
    booking_request_id: Optional[str] = None
    invitation_id: Optional[str] = None
    contract_document_url: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "roomInstanceId": self.room_instance_id,
            "tenantId": self.tenant_id,
            "contractStartDate": self.contract_start_date,
            "monthlyRent": self.monthly_rent,
            "depositPaid": self.deposit_paid,
        }
        optional = {
            "contractEndDate": self.contract_end_date,
            "bookingRequestId": self.booking_request_id,
            "invitationId": self.invitation_id,
            "contractDocumentUrl": self.contract_document_url,
        }
        payload.update({k: v for k, v in optional.items() if v})
        return payload


@dataclass
class UpdateRentalRequest:
    contract_end_date: Optional[str] = None
    monthly_rent: Optional[str] = None
    status: Optional[RentalStatus] = None
    contract_document_url: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.contract_end_date is not None:
            payload["contractEndDate"] = self.contract_end_date
        if self.monthly_rent is not None:
            payload["monthlyRent"] = self.monthly_rent
        if self.status is not None:
            payload["status"] = getattr(self.status, "value", self.status)
        if self.contract_document_url is not None:
            payload["contractDocumentUrl"] = self.contract_document_url
        return payload


def validate_create_rental_request(request: CreateRentalRequest) -> List[str]:
    errors: List[str] = []
    if not request.room_instance_id:
        errors.append("room_instance_id is required")
    if not request.tenant_id:
        errors.append("tenant_id is required")
    if not request.contract_start_date:
        errors.append("contract_start_date is required")
    if request.contract_end_date and request.contract_end_date < request.contract_start_date:
        errors.append("contract_end_date must not be before contract_start_date")
    try:
        if float(request.monthly_rent) <= 0:
            errors.append("monthly_rent must be greater than zero")
    except (TypeError, ValueError):
        errors.append(f"monthly_rent '{request.monthly_rent}' is not a number")
    return errors
