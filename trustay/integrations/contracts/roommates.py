"""
Roommate application contract: request shapes, status groups and list helpers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .interfaces import ApplicationStatistics, RoommateApplication, RoommateApplicationStatus

_PHONE_RE = re.compile(r"^(\+84|84|0)\d{9,10}$")

APPROVED_STATUSES = frozenset({
    RoommateApplicationStatus.APPROVED_BY_TENANT.value,
    RoommateApplicationStatus.APPROVED_BY_LANDLORD.value,
})

REJECTED_STATUSES = frozenset({
    RoommateApplicationStatus.REJECTED_BY_TENANT.value,
    RoommateApplicationStatus.REJECTED_BY_LANDLORD.value,
})


@dataclass
class CreateRoommateApplicationRequest:
    roommate_seeking_post_id: str
    full_name: str
    occupation: str
    phone_number: str
    move_in_date: str
    intended_stay_months: int
    application_message: str
    is_urgent: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "roommateSeekingPostId": self.roommate_seeking_post_id,
            "fullName": self.full_name,
            "occupation": self.occupation,
            "phoneNumber": self.phone_number,
            "moveInDate": self.move_in_date,
            "intendedStayMonths": self.intended_stay_months,
            "applicationMessage": self.application_message,
            "isUrgent": self.is_urgent,
        }


@dataclass
class UpdateRoommateApplicationRequest:
    full_name: Optional[str] = None
    occupation: Optional[str] = None
    phone_number: Optional[str] = None
    move_in_date: Optional[str] = None
    intended_stay_months: Optional[int] = None
    application_message: Optional[str] = None
    is_urgent: Optional[bool] = None

    def to_payload(self) -> Dict[str, Any]:
        mapping = {
            "fullName": self.full_name,
            "occupation": self.occupation,
            "phoneNumber": self.phone_number,
            "moveInDate": self.move_in_date,
            "intendedStayMonths": self.intended_stay_months,
            "applicationMessage": self.application_message,
            "isUrgent": self.is_urgent,
        }
        return {k: v for k, v in mapping.items() if v is not None}


@dataclass
class RespondToApplicationRequest:
    status: RoommateApplicationStatus
    response_message: Optional[str] = None

    @classmethod
    def decision(cls, approve: bool, as_landlord: bool, response_message: Optional[str] = None) -> "RespondToApplicationRequest":
        if as_landlord:
            status = RoommateApplicationStatus.APPROVED_BY_LANDLORD if approve else RoommateApplicationStatus.REJECTED_BY_LANDLORD
        else:
            status = RoommateApplicationStatus.APPROVED_BY_TENANT if approve else RoommateApplicationStatus.REJECTED_BY_TENANT
        return cls(status=status, response_message=response_message)

    @property
    def approve(self) -> bool:
        return self.status.value in APPROVED_STATUSES

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": self.status.value}
        if self.response_message:
            payload["responseMessage"] = self.response_message
        return payload


@dataclass
class BulkRespondRequest:
    application_ids: List[str]
    approve: bool
    message: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"applicationIds": list(self.application_ids), "approve": self.approve}
        if self.message:
            payload["message"] = self.message
        return payload


# ---------------------------------------------------------------------------
# Validation / list helpers
# ---------------------------------------------------------------------------

def validate_application_request(request: CreateRoommateApplicationRequest) -> List[str]:
    """
    Return a list of validation errors.
    Empty list means the request is valid.
    """
    errors: List[str] = []
    if not request.roommate_seeking_post_id:
        errors.append("roommate_seeking_post_id is required")
    if not (request.full_name or "").strip():
        errors.append("full_name is required")
    if not (request.occupation or "").strip():
        errors.append("occupation is required")
    phone = re.sub(r"[\s.-]", "", request.phone_number or "")
    if not _PHONE_RE.match(phone):
        errors.append(f"phone_number '{request.phone_number}' does not look valid")
    if not request.move_in_date:
        errors.append("move_in_date is required")
    if request.intended_stay_months < 1:
        errors.append("intended_stay_months must be at least 1")
    if not (request.application_message or "").strip():
        errors.append("application_message is required")
    return errors


def is_approved(status: Union[RoommateApplicationStatus, str]) -> bool:
    return getattr(status, "value", status) in APPROVED_STATUSES


def is_rejected(status: Union[RoommateApplicationStatus, str]) -> bool:
    return getattr(status, "value", status) in REJECTED_STATUSES


def platform_room_applications(applications: Iterable[RoommateApplication]) -> List[RoommateApplication]:
    """Applications whose post is attached to a room managed on the platform."""
    return [a for a in applications if a.is_platform_room]


def search_applications(applications: Iterable[RoommateApplication], term: str) -> List[RoommateApplication]:
    """Case-insensitive match on applicant name, phone number or occupation."""
    needle = (term or "").strip().lower()
    items = list(applications)
    if not needle:
        return items
    return [
        a for a in items
        if needle in a.full_name.lower() or needle in a.phone_number.lower() or needle in a.occupation.lower()
    ]


def compute_statistics(applications: Iterable[RoommateApplication]) -> ApplicationStatistics:
    stats = ApplicationStatistics()
    for app in applications:
        stats.total += 1
        status = getattr(app.status, "value", app.status)
        if status == RoommateApplicationStatus.PENDING.value:
            stats.pending += 1
        elif status in APPROVED_STATUSES:
            stats.approved += 1
        elif status in REJECTED_STATUSES:
            stats.rejected += 1
        elif status == RoommateApplicationStatus.CANCELLED.value:
            stats.cancelled += 1
        elif status == RoommateApplicationStatus.EXPIRED.value:
            stats.expired += 1
    return stats
