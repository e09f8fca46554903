"""
In-memory Trustay backend (mock state).

⚠️  This is a mock implementation for development and testing.
    It keeps every entity as the camelCase JSON the real backend would return,
    so the mock clients go through the same from_api / response-wrapper path
    as the real HTTP clients.
"""

from __future__ import annotations

import copy
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from trustay.error_handler import ApiError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryBackend:
    """
    Shared state behind every mock client.

    Parameters
    ----------
    clock : callable
        Returns the current time; tests pass a fixed clock.
    otp_generator : callable
        Returns a 6-digit code; defaults to a random one.
    page_size : int
        Page size for list calls that do not pass `limit`.
    """

    def __init__(self, clock: Optional[Clock] = None, otp_generator: Optional[Callable[[], str]] = None,
                 page_size: int = 12) -> None:
        self._clock = clock or _utcnow
        self._otp_generator = otp_generator or (lambda: f"{random.randint(0, 999999):06d}")
        self.page_size = page_size

        # In-memory stores (reset on restart)
        self.users: Dict[str, Dict[str, Any]] = {}
        self.contracts: Dict[str, Dict[str, Any]] = {}
        self.bills: Dict[str, Dict[str, Any]] = {}
        self.rentals: Dict[str, Dict[str, Any]] = {}
        self.room_costs: Dict[str, Dict[str, Any]] = {}
        self.roommate_posts: Dict[str, Dict[str, Any]] = {}
        self.applications: Dict[str, Dict[str, Any]] = {}
        self.conversations: Dict[str, Dict[str, Any]] = {}
        self.messages: Dict[str, List[Dict[str, Any]]] = {}
        self.notifications: Dict[str, Dict[str, Any]] = {}

        # (contract_id, user_id) -> latest OTP
        self.issued_otps: Dict[Tuple[str, str], str] = {}

        logger.info("[BACKEND MOCK] In-memory backend initialised")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def now(self) -> str:
        return self._clock().isoformat()

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex[:12]}"

    def issue_otp(self, contract_id: str, user_id: str) -> str:
        code = self._otp_generator()
        self.issued_otps[(contract_id, user_id)] = code
        logger.info("[BACKEND MOCK] OTP issued for contract=%s user=%s", contract_id, user_id)
        return code

    def consume_otp(self, contract_id: str, user_id: str, code: str) -> bool:
        expected = self.issued_otps.get((contract_id, user_id))
        if expected is None or expected != code:
            return False
        del self.issued_otps[(contract_id, user_id)]
        return True

    def user_summary(self, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not user_id:
            return None
        return copy.deepcopy(self.users.get(user_id) or {"id": user_id, "email": ""})

    def require(self, table: Dict[str, Dict[str, Any]], entity_id: str, label: str) -> Dict[str, Any]:
        entity = table.get(entity_id)
        if entity is None:
            raise not_found(f"{label} not found")
        return entity

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_user(self, user_id: str, full_name: str, email: str = "", phone: str = "") -> Dict[str, Any]:
        user = {"id": user_id, "fullName": full_name, "email": email or f"{user_id}@trustay.local", "phone": phone}
        self.users[user_id] = user
        return user

    def add_room_cost(self, room_cost_id: str, name: str, unit_price: float, unit: str = "kWh") -> Dict[str, Any]:
        cost = {"id": room_cost_id, "name": name, "unitPrice": unit_price, "unit": unit}
        self.room_costs[room_cost_id] = cost
        return cost

    def add_rental(self, rental_id: str, room_instance_id: str, owner_id: str, tenant_id: str,
                   monthly_rent: float, start_date: str, end_date: Optional[str] = None,
                   room_name: str = "") -> Dict[str, Any]:
        rental = {
            "id": rental_id,
            "roomInstanceId": room_instance_id,
            "ownerId": owner_id,
            "tenantId": tenant_id,
            "monthlyRent": str(monthly_rent),
            "depositPaid": str(monthly_rent),
            "contractStartDate": start_date,
            "contractEndDate": end_date,
            "status": "active",
            "owner": self.user_summary(owner_id),
            "tenant": self.user_summary(tenant_id),
            "roomInstance": {"id": room_instance_id, "room": {"name": room_name}},
            "createdAt": self.now(),
            "updatedAt": self.now(),
        }
        self.rentals[rental_id] = rental
        return rental

    def add_contract(self, contract_id: str, landlord_id: str, tenant_id: str, status: str = "pending_signatures",
                     monthly_rent: float = 3_000_000, deposit: float = 3_000_000,
                     start_date: str = "2025-01-01", end_date: Optional[str] = "2025-12-31",
                     room_instance_id: Optional[str] = None, rental_id: Optional[str] = None) -> Dict[str, Any]:
        contract = {
            "id": contract_id,
            "contractCode": f"HD-{contract_id.upper()[-6:]}",
            "status": status,
            "contractType": "monthly_rental",
            "landlordId": landlord_id,
            "tenantId": tenant_id,
            "landlord": self.user_summary(landlord_id),
            "tenant": self.user_summary(tenant_id),
            "roomInstanceId": room_instance_id,
            "rentalId": rental_id,
            "room": {},
            "contractData": {"monthlyRent": monthly_rent, "depositAmount": deposit},
            "startDate": start_date,
            "endDate": end_date,
            "signatures": [],
            "amendments": [],
            "createdAt": self.now(),
            "updatedAt": self.now(),
        }
        self.contracts[contract_id] = contract
        return contract

    def add_roommate_post(self, post_id: str, tenant_id: str, title: str = "",
                          room_instance_id: Optional[str] = None, external_address: Optional[str] = None,
                          landlord_id: Optional[str] = None) -> Dict[str, Any]:
        post = {
            "id": post_id,
            "tenantId": tenant_id,
            "title": title,
            "roomInstanceId": room_instance_id,
            "externalAddress": external_address,
            "landlordId": landlord_id,
        }
        self.roommate_posts[post_id] = post
        return post

    def add_application(self, application_id: str, post_id: str, applicant_id: str,
                        status: str = "pending", **fields: Any) -> Dict[str, Any]:
        post = self.require(self.roommate_posts, post_id, "Roommate seeking post")
        applicant = self.users.get(applicant_id) or {}
        application = {
            "id": application_id,
            "roommateSeekingPostId": post_id,
            "applicantId": applicant_id,
            "fullName": fields.get("fullName") or applicant.get("fullName") or "",
            "occupation": fields.get("occupation", ""),
            "phoneNumber": fields.get("phoneNumber") or applicant.get("phone") or "",
            "moveInDate": fields.get("moveInDate"),
            "intendedStayMonths": fields.get("intendedStayMonths", 6),
            "applicationMessage": fields.get("applicationMessage", ""),
            "isUrgent": bool(fields.get("isUrgent", False)),
            "status": status,
            "isConfirmedByTenant": False,
            "isConfirmedByLandlord": False,
            "roommateSeekingPost": public_post(post),
            "createdAt": self.now(),
            "updatedAt": self.now(),
        }
        self.applications[application_id] = application
        return application

    @classmethod
    def with_demo_data(cls, **kwargs: Any) -> "InMemoryBackend":
        """A backend holding one landlord, one tenant, one applicant and matching records."""
        backend = cls(**kwargs)
        backend.add_user("landlord-1", "Nguyễn Văn Chủ", "landlord@trustay.local", "0901000001")
        backend.add_user("tenant-1", "Trần Thị Thuê", "tenant@trustay.local", "0901000002")
        backend.add_user("applicant-1", "Lê Văn Ở Ghép", "applicant@trustay.local", "0901000003")
        backend.add_room_cost("cost-electric", "Điện", 3500, "kWh")
        backend.add_room_cost("cost-water", "Nước", 20000, "m3")
        backend.add_rental("rental-1", "room-101", "landlord-1", "tenant-1", 3_500_000, "2025-01-01",
                           "2025-12-31", room_name="Phòng 101")
        backend.add_contract("contract-1", "landlord-1", "tenant-1", status="pending_signatures",
                             monthly_rent=3_500_000, deposit=3_500_000,
                             room_instance_id="room-101", rental_id="rental-1")
        backend.add_roommate_post("post-1", "tenant-1", "Tìm bạn ở ghép phòng 101",
                                  room_instance_id="room-101", landlord_id="landlord-1")
        backend.add_application("application-1", "post-1", "applicant-1", occupation="Sinh viên",
                                moveInDate="2025-02-01", applicationMessage="Mình muốn ở ghép ạ")
        return backend


def public_post(post: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": post["id"],
        "tenantId": post["tenantId"],
        "title": post.get("title") or "",
        "roomInstanceId": post.get("roomInstanceId"),
        "externalAddress": post.get("externalAddress"),
    }


def paginate(items: List[Dict[str, Any]], params: Optional[Dict[str, Any]] = None,
             default_limit: int = 12) -> Dict[str, Any]:
    """Backend-shaped page: {data, meta}."""
    params = params or {}
    page = max(int(params.get("page") or 1), 1)
    limit = max(int(params.get("limit") or default_limit), 1)
    total = len(items)
    start = (page - 1) * limit
    return {
        "data": copy.deepcopy(items[start:start + limit]),
        "meta": {"page": page, "limit": limit, "total": total, "totalPages": (total + limit - 1) // limit},
    }


def api_error(status: int, message: Any) -> ApiError:
    text = message if isinstance(message, str) else "Validation failed"
    return ApiError(text, status=status, payload={"message": message, "statusCode": status})


def not_found(message: str) -> ApiError:
    return api_error(404, message)


def forbidden(message: str = "Forbidden") -> ApiError:
    return api_error(403, message)


def conflict(message: str) -> ApiError:
    return api_error(409, message)


def bad_request(message: Any) -> ApiError:
    return api_error(400, message)


class MockClientBase:
    """Common plumbing: every mock client acts on behalf of one user."""

    def __init__(self, backend: InMemoryBackend, user_id: str) -> None:
        self.backend = backend
        self.user_id = user_id

    def _page(self, items: List[Dict[str, Any]], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return paginate(items, params, default_limit=self.backend.page_size)
