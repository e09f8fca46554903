"""
Contract (lease) request contracts and signing validation helpers.

These shapes are shared by:
- clients/mocks/backend.py (in-memory backend used for development/testing)
- clients/real_http/contracts.py (real API calls)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .interfaces import ContractStatus, ContractType

OTP_LENGTH = 6

_OTP_RE = re.compile(r"^\d{6}$")

SIGNABLE_STATUSES = frozenset({
    ContractStatus.DRAFT.value,
    ContractStatus.PENDING_SIGNATURES.value,
    ContractStatus.PARTIALLY_SIGNED.value,
})

TERMINAL_STATUSES = frozenset({
    ContractStatus.EXPIRED.value,
    ContractStatus.TERMINATED.value,
    ContractStatus.CANCELLED.value,
})


@dataclass
class ContractData:
    monthly_rent: float
    deposit_amount: float
    additional_terms: Optional[str] = None
    rules: List[str] = field(default_factory=list)
    amenities: List[str] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "monthlyRent": self.monthly_rent,
            "depositAmount": self.deposit_amount,
        }
        if self.additional_terms:
            payload["additionalTerms"] = self.additional_terms
        if self.rules:
            payload["rules"] = list(self.rules)
        if self.amenities:
            payload["amenities"] = list(self.amenities)
        return payload


@dataclass
class CreateContractRequest:
    landlord_id: str
    tenant_id: str
    room_instance_id: str
    start_date: str                                # ISO format: YYYY-MM-DD
    contract_data: ContractData
    contract_type: ContractType = ContractType.MONTHLY_RENTAL
    end_date: Optional[str] = None
    rental_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "landlordId": self.landlord_id,
            "tenantId": self.tenant_id,
            "roomInstanceId": self.room_instance_id,
            "contractType": getattr(self.contract_type, "value", self.contract_type),
            "startDate": self.start_date,
            "contractData": self.contract_data.to_payload(),
        }
        if self.end_date:
            payload["endDate"] = self.end_date
        if self.rental_id:
            payload["rentalId"] = self.rental_id
        return payload


@dataclass
class SignContractRequest:
    signature_image: str                           # base64 PNG from the signature pad
    otp_code: str                                  # 6-digit OTP

    def to_payload(self) -> Dict[str, Any]:
        return {"signatureImage": self.signature_image, "otpCode": self.otp_code}


@dataclass
class GeneratePdfRequest:
    include_signatures: bool = True
    format: str = "A4"                             # A4 / A3 / Letter
    print_background: bool = True
    margin: Optional[Dict[str, str]] = None

    def to_payload(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"format": self.format, "printBackground": self.print_background}
        if self.margin:
            options["margin"] = dict(self.margin)
        return {"includeSignatures": self.include_signatures, "options": options}


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def is_valid_otp(code: Optional[str]) -> bool:
    return bool(code) and bool(_OTP_RE.match(code))


def sanitize_otp_input(raw: Optional[str]) -> str:
    """Keep digits only, truncated to the OTP length."""
    return re.sub(r"\D", "", raw or "")[:OTP_LENGTH]


def validate_sign_request(request: SignContractRequest) -> List[str]:
    """
    Return a list of validation errors.
    Empty list means the request is valid.
    """
    errors: List[str] = []
    if not request.signature_image:
        errors.append("signature_image is required")
    if not is_valid_otp(request.otp_code):
        errors.append("otp_code must be exactly 6 digits")
    return errors


def validate_create_contract_request(request: CreateContractRequest) -> List[str]:
    errors: List[str] = []
    if not request.landlord_id:
        errors.append("landlord_id is required")
    if not request.tenant_id:
        errors.append("tenant_id is required")
    if request.landlord_id and request.landlord_id == request.tenant_id:
        errors.append("landlord and tenant must be different users")
    if not request.room_instance_id:
        errors.append("room_instance_id is required")
    if not request.start_date:
        errors.append("start_date is required")
    if request.end_date and request.start_date and request.end_date < request.start_date:
        errors.append("end_date must not be before start_date")
    if request.contract_data.monthly_rent <= 0:
        errors.append("monthly_rent must be greater than zero")
    if request.contract_data.deposit_amount < 0:
        errors.append("deposit_amount must not be negative")
    return errors


def is_signable_status(status: Union[ContractStatus, str]) -> bool:
    return getattr(status, "value", status) in SIGNABLE_STATUSES


def is_terminal_status(status: Union[ContractStatus, str]) -> bool:
    """Return True if the contract has reached a final, non-changeable state."""
    return getattr(status, "value", status) in TERMINAL_STATUSES
