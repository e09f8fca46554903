from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Generic, List, Optional, Type, TypeVar, Union

if TYPE_CHECKING:  # pragma: no cover
    from .billing import CreateBillRequest, UpdateBillRequest
    from .messaging import CreateNotificationRequest, SendMessageRequest
    from .rentals import CreateRentalRequest, UpdateRentalRequest
    from .roommates import (
        BulkRespondRequest,
        CreateRoommateApplicationRequest,
        RespondToApplicationRequest,
        UpdateRoommateApplicationRequest,
    )
    from .signing import CreateContractRequest, GeneratePdfRequest, SignContractRequest


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ContractStatus(str, Enum):
    DRAFT = "draft"
    PENDING_SIGNATURES = "pending_signatures"
    PARTIALLY_SIGNED = "partially_signed"
    FULLY_SIGNED = "fully_signed"
    SIGNED = "signed"
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"
    CANCELLED = "cancelled"


class ContractType(str, Enum):
    MONTHLY_RENTAL = "monthly_rental"
    FIXED_TERM_RENTAL = "fixed_term_rental"
    SHORT_TERM_RENTAL = "short_term_rental"


class SignerRole(str, Enum):
    LANDLORD = "landlord"
    TENANT = "tenant"


class BillStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class RentalStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"
    UNAVAILABLE = "unavailable"


class RoommateApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED_BY_TENANT = "approved_by_tenant"
    REJECTED_BY_TENANT = "rejected_by_tenant"
    APPROVED_BY_LANDLORD = "approved_by_landlord"
    REJECTED_BY_LANDLORD = "rejected_by_landlord"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------

E = TypeVar("E", bound=Enum)


def first_present(payload: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key whose value is not None/empty string."""
    for key in keys:
        value = payload.get(key)
        if value is not None and value != "":
            return value
    return default


def coerce_enum(enum_cls: Type[E], value: Any, default: Any = None) -> Union[E, str, None]:
    """Map a backend value onto the enum; unknown values are kept as-is."""
    if value is None or value == "":
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value))
    except ValueError:
        return str(value)


def as_float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass
class UserSummary:
    id: str
    email: str = ""
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> Optional["UserSummary"]:
        if not payload:
            return None
        return cls(
            id=str(payload.get("id", "")),
            email=payload.get("email") or "",
            full_name=payload.get("fullName"),
            first_name=payload.get("firstName"),
            last_name=payload.get("lastName"),
            phone=payload.get("phone") or payload.get("phoneNumber"),
            avatar_url=payload.get("avatarUrl"),
        )

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        joined = " ".join(p for p in (self.last_name, self.first_name) if p)
        return joined or self.email


@dataclass
class ContractSignature:
    signature_data: str
    signed_at: Optional[str] = None
    signed_by: Optional[str] = None
    signer_role: Optional[SignerRole] = None
    signature_method: str = "canvas"              # canvas / upload
    is_valid: bool = True
    ip_address: Optional[str] = None
    device_info: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Union[str, Dict[str, Any], None]) -> Optional["ContractSignature"]:
        if not payload:
            return None
        if isinstance(payload, str):
            # older API versions return only the signature image
            return cls(signature_data=payload)
        return cls(
            signature_data=payload.get("signatureData") or payload.get("signatureImage") or "",
            signed_at=payload.get("signedAt"),
            signed_by=payload.get("signedBy"),
            signer_role=coerce_enum(SignerRole, payload.get("signerRole")),
            signature_method=payload.get("signatureMethod") or "canvas",
            is_valid=bool(payload.get("isValid", True)),
            ip_address=payload.get("ipAddress"),
            device_info=payload.get("deviceInfo"),
        )


@dataclass
class Contract:
    id: str
    status: Union[ContractStatus, str]
    contract_type: Union[ContractType, str] = ContractType.MONTHLY_RENTAL
    contract_code: Optional[str] = None
    landlord: Optional[UserSummary] = None
    tenant: Optional[UserSummary] = None
    room: Dict[str, Any] = field(default_factory=dict)
    contract_data: Dict[str, Any] = field(default_factory=dict)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    signed_at: Optional[str] = None
    pdf_url: Optional[str] = None
    signatures: List[ContractSignature] = field(default_factory=list)
    landlord_signature: Optional[ContractSignature] = None
    tenant_signature: Optional[ContractSignature] = None
    landlord_signed_at: Optional[str] = None
    tenant_signed_at: Optional[str] = None
    fully_signed_at: Optional[str] = None
    rental_id: Optional[str] = None
    room_instance_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)
    _landlord_id: Optional[str] = None
    _tenant_id: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Contract":
        return cls(
            id=str(payload.get("id", "")),
            status=coerce_enum(ContractStatus, payload.get("status"), ContractStatus.DRAFT),
            contract_type=coerce_enum(ContractType, payload.get("contractType"), ContractType.MONTHLY_RENTAL),
            contract_code=payload.get("contractCode"),
            landlord=UserSummary.from_api(payload.get("landlord")),
            tenant=UserSummary.from_api(payload.get("tenant")),
            room=payload.get("room") or {},
            contract_data=payload.get("contractData") or {},
            start_date=payload.get("startDate"),
            end_date=payload.get("endDate"),
            signed_at=payload.get("signedAt"),
            pdf_url=payload.get("pdfUrl"),
            signatures=[s for s in (ContractSignature.from_api(x) for x in payload.get("signatures") or []) if s],
            landlord_signature=ContractSignature.from_api(payload.get("landlordSignature")),
            tenant_signature=ContractSignature.from_api(payload.get("tenantSignature")),
            landlord_signed_at=payload.get("landlordSignedAt"),
            tenant_signed_at=payload.get("tenantSignedAt"),
            fully_signed_at=payload.get("fullySignedAt"),
            rental_id=payload.get("rentalId"),
            room_instance_id=payload.get("roomInstanceId"),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
            raw=payload,
            _landlord_id=payload.get("landlordId"),
            _tenant_id=payload.get("tenantId"),
        )

    @property
    def landlord_id(self) -> Optional[str]:
        return self.landlord.id if self.landlord else self._landlord_id

    @property
    def tenant_id(self) -> Optional[str]:
        return self.tenant.id if self.tenant else self._tenant_id

    @property
    def monthly_rent(self) -> float:
        financial = self.contract_data.get("financial") or {}
        return as_float(first_present(financial, "monthlyRent") or self.contract_data.get("monthlyRent")
                        or self.raw.get("monthlyRent"))

    @property
    def room_label(self) -> str:
        name = self.room.get("roomName") or self.room.get("name") or self.contract_data.get("roomName") or ""
        building = self.room.get("buildingName") or self.contract_data.get("buildingName") or ""
        return " - ".join(p for p in (building, name) if p)


@dataclass
class ContractStatusResponse:
    contract_id: str
    status: Union[ContractStatus, str]
    landlord_signed: bool
    tenant_signed: bool
    landlord_signed_at: Optional[str] = None
    tenant_signed_at: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ContractStatusResponse":
        return cls(
            contract_id=str(first_present(payload, "contractId", "id", default="")),
            status=coerce_enum(ContractStatus, payload.get("status"), ContractStatus.DRAFT),
            landlord_signed=bool(payload.get("landlordSigned")),
            tenant_signed=bool(payload.get("tenantSigned")),
            landlord_signed_at=payload.get("landlordSignedAt"),
            tenant_signed_at=payload.get("tenantSignedAt"),
        )


@dataclass
class PdfDocument:
    """Result of generate / download / verify PDF calls."""
    url: Optional[str] = None
    content: Optional[bytes] = None
    content_type: str = "application/pdf"
    hash: Optional[str] = None
    size: Optional[int] = None
    valid: Optional[bool] = None


@dataclass
class BillItem:
    id: str
    item_type: str                         # rent / electric / water / service
    item_name: str
    amount: float
    currency: str = "VND"
    bill_id: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None
    notes: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "BillItem":
        return cls(
            id=str(payload.get("id", "")),
            item_type=payload.get("itemType") or "service",
            item_name=payload.get("itemName") or "",
            amount=as_float(payload.get("amount")),
            currency=payload.get("currency") or "VND",
            bill_id=payload.get("billId"),
            description=payload.get("description"),
            quantity=payload.get("quantity"),
            unit_price=payload.get("unitPrice"),
            notes=payload.get("notes"),
        )


@dataclass
class Bill:
    id: str
    rental_id: str
    room_instance_id: str
    billing_period: str                    # YYYY-MM
    billing_month: int
    billing_year: int
    status: Union[BillStatus, str]
    due_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    subtotal: float = 0.0
    discount_amount: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0
    paid_amount: float = 0.0
    remaining_amount: float = 0.0
    paid_date: Optional[str] = None
    notes: Optional[str] = None
    bill_items: List[BillItem] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Bill":
        period = payload.get("billingPeriod") or ""
        year, _, month = period.partition("-")
        return cls(
            id=str(payload.get("id", "")),
            rental_id=payload.get("rentalId") or "",
            room_instance_id=payload.get("roomInstanceId") or "",
            billing_period=period,
            billing_month=int(payload.get("billingMonth") or (month or 0)),
            billing_year=int(payload.get("billingYear") or (year or 0)),
            status=coerce_enum(BillStatus, payload.get("status"), BillStatus.DRAFT),
            due_date=payload.get("dueDate"),
            period_start=payload.get("periodStart"),
            period_end=payload.get("periodEnd"),
            subtotal=as_float(payload.get("subtotal")),
            discount_amount=as_float(payload.get("discountAmount")),
            tax_amount=as_float(payload.get("taxAmount")),
            total_amount=as_float(payload.get("totalAmount")),
            paid_amount=as_float(payload.get("paidAmount")),
            remaining_amount=as_float(payload.get("remainingAmount")),
            paid_date=payload.get("paidDate"),
            notes=payload.get("notes"),
            bill_items=[BillItem.from_api(i) for i in payload.get("billItems") or []],
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
            raw=payload,
        )


@dataclass
class MeterReading:
    room_cost_id: str
    current_reading: float
    last_reading: float

    def to_payload(self) -> Dict[str, Any]:
        return {
            "roomCostId": self.room_cost_id,
            "currentReading": self.current_reading,
            "lastReading": self.last_reading,
        }


@dataclass
class Rental:
    id: str
    room_instance_id: str
    tenant_id: str
    owner_id: str
    status: Union[RentalStatus, str]
    monthly_rent: str = "0"
    deposit_paid: str = "0"
    contract_start_date: Optional[str] = None
    contract_end_date: Optional[str] = None
    booking_request_id: Optional[str] = None
    invitation_id: Optional[str] = None
    contract_document_url: Optional[str] = None
    termination_notice_date: Optional[str] = None
    termination_reason: Optional[str] = None
    tenant: Optional[UserSummary] = None
    owner: Optional[UserSummary] = None
    room_instance: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Rental":
        return cls(
            id=str(payload.get("id", "")),
            room_instance_id=payload.get("roomInstanceId") or "",
            tenant_id=payload.get("tenantId") or "",
            owner_id=payload.get("ownerId") or "",
            status=coerce_enum(RentalStatus, payload.get("status"), RentalStatus.PENDING),
            monthly_rent=str(payload.get("monthlyRent") or "0"),
            deposit_paid=str(payload.get("depositPaid") or "0"),
            contract_start_date=first_present(payload, "contractStartDate", "startDate"),
            contract_end_date=first_present(payload, "contractEndDate", "endDate"),
            booking_request_id=payload.get("bookingRequestId"),
            invitation_id=payload.get("invitationId"),
            contract_document_url=payload.get("contractDocumentUrl"),
            termination_notice_date=payload.get("terminationNoticeDate"),
            termination_reason=payload.get("terminationReason"),
            tenant=UserSummary.from_api(payload.get("tenant")),
            owner=UserSummary.from_api(payload.get("owner") or payload.get("landlord")),
            room_instance=payload.get("roomInstance") or {},
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
            raw=payload,
        )

    @property
    def room_name(self) -> str:
        room = self.room_instance.get("room") or self.raw.get("room") or {}
        return room.get("name") or ""


@dataclass
class RoommateSeekingPostRef:
    tenant_id: str
    room_instance_id: Optional[str] = None
    external_address: Optional[str] = None
    title: str = ""


@dataclass
class RoommateApplication:
    id: str
    roommate_seeking_post_id: str
    applicant_id: str
    full_name: str
    status: Union[RoommateApplicationStatus, str]
    occupation: str = ""
    phone_number: str = ""
    move_in_date: Optional[str] = None
    intended_stay_months: int = 0
    application_message: str = ""
    is_urgent: bool = False
    response_message: Optional[str] = None
    is_confirmed_by_tenant: bool = False
    is_confirmed_by_landlord: bool = False
    confirmed_at: Optional[str] = None
    tenant_response: Optional[str] = None
    tenant_responded_at: Optional[str] = None
    landlord_response: Optional[str] = None
    landlord_responded_at: Optional[str] = None
    post: Optional[RoommateSeekingPostRef] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "RoommateApplication":
        post = payload.get("roommateSeekingPost")
        return cls(
            id=str(payload.get("id", "")),
            roommate_seeking_post_id=payload.get("roommateSeekingPostId") or "",
            applicant_id=payload.get("applicantId") or "",
            full_name=payload.get("fullName") or "",
            status=coerce_enum(RoommateApplicationStatus, payload.get("status"), RoommateApplicationStatus.PENDING),
            occupation=payload.get("occupation") or "",
            phone_number=payload.get("phoneNumber") or "",
            move_in_date=payload.get("moveInDate"),
            intended_stay_months=int(payload.get("intendedStayMonths") or 0),
            application_message=payload.get("applicationMessage") or "",
            is_urgent=bool(payload.get("isUrgent")),
            response_message=payload.get("responseMessage"),
            is_confirmed_by_tenant=bool(payload.get("isConfirmedByTenant")),
            is_confirmed_by_landlord=bool(payload.get("isConfirmedByLandlord")),
            confirmed_at=payload.get("confirmedAt"),
            tenant_response=payload.get("tenantResponse"),
            tenant_responded_at=payload.get("tenantRespondedAt"),
            landlord_response=payload.get("landlordResponse"),
            landlord_responded_at=payload.get("landlordRespondedAt"),
            post=RoommateSeekingPostRef(
                tenant_id=post.get("tenantId") or "",
                room_instance_id=post.get("roomInstanceId"),
                external_address=post.get("externalAddress"),
                title=post.get("title") or "",
            ) if post else None,
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
            raw=payload,
        )

    @property
    def is_platform_room(self) -> bool:
        return bool(self.post and self.post.room_instance_id is not None)


@dataclass
class ApplicationStatistics:
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    cancelled: int = 0
    expired: int = 0

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ApplicationStatistics":
        return cls(**{k: int(payload.get(k) or 0) for k in cls.__dataclass_fields__})


@dataclass
class Notification:
    id: str
    type: str
    title: str
    message: str
    user_id: str = ""
    is_read: bool = False
    data: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Notification":
        return cls(
            id=str(payload.get("id", "")),
            type=first_present(payload, "type", "notificationType", default=""),
            title=payload.get("title") or "",
            message=payload.get("message") or "",
            user_id=payload.get("userId") or "",
            is_read=bool(payload.get("isRead")),
            data=payload.get("data") or {},
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
        )


@dataclass
class ChatMessage:
    id: str
    conversation_id: str
    sender_id: str
    content: str
    type: str = "text"
    attachments: List[Dict[str, Any]] = field(default_factory=list)
    is_edited: bool = False
    sent_at: Optional[str] = None
    read_at: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ChatMessage":
        return cls(
            id=str(payload.get("id", "")),
            conversation_id=payload.get("conversationId") or "",
            sender_id=payload.get("senderId") or "",
            content=payload.get("content") or "",
            type=payload.get("type") or "text",
            attachments=payload.get("attachments") or [],
            is_edited=bool(payload.get("isEdited")),
            sent_at=payload.get("sentAt"),
            read_at=payload.get("readAt"),
        )


@dataclass
class ConversationSummary:
    conversation_id: str
    counterpart: Optional[UserSummary] = None
    last_message: Dict[str, Any] = field(default_factory=dict)
    unread_count: int = 0

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ConversationSummary":
        return cls(
            conversation_id=str(first_present(payload, "conversationId", "id", default="")),
            counterpart=UserSummary.from_api(payload.get("counterpart")),
            last_message=payload.get("lastMessage") or {},
            unread_count=int(payload.get("unreadCount") or 0),
        )


T = TypeVar("T")


@dataclass
class PageMeta:
    page: int = 1
    limit: int = 0
    total: int = 0
    total_pages: int = 0


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    meta: PageMeta = field(default_factory=PageMeta)
    next_cursor: Optional[str] = None


# ---------------------------------------------------------------------------
# Abstract client interfaces
# ---------------------------------------------------------------------------

class ContractsClient(ABC):
    """Every contracts client (mock or real HTTP) must implement this interface."""

    @abstractmethod
    async def list_contracts(self, page: Optional[int] = None, limit: Optional[int] = None,
                             status: Optional[str] = None, scope: str = "all") -> Page[Contract]:
        """List contracts. scope: all / landlord / tenant."""

    @abstractmethod
    async def get_contract(self, contract_id: str) -> Contract:
        """Fetch one contract."""

    @abstractmethod
    async def create_contract(self, request: "CreateContractRequest") -> Contract:
        """Create a contract manually (landlord)."""

    @abstractmethod
    async def auto_generate(self, rental_id: str, additional_data: Optional[Dict[str, Any]] = None) -> Contract:
        """Generate a contract from a rental (landlord)."""

    @abstractmethod
    async def update_contract(self, contract_id: str, updates: Dict[str, Any]) -> Contract:
        """Update contract fields (landlord)."""

    @abstractmethod
    async def delete_contract(self, contract_id: str) -> None:
        """Delete a draft contract."""

    @abstractmethod
    async def get_status(self, contract_id: str) -> ContractStatusResponse:
        """Signature status summary."""

    @abstractmethod
    async def request_signing_otp(self, contract_id: str) -> None:
        """Ask the backend to e-mail a signing OTP to the current user."""

    @abstractmethod
    async def sign(self, contract_id: str, request: "SignContractRequest") -> Contract:
        """Submit the current user's signature with an OTP."""

    @abstractmethod
    async def activate(self, contract_id: str) -> Contract:
        """Activate a fully signed contract."""

    @abstractmethod
    async def create_amendment(self, contract_id: str, amendment: Dict[str, Any]) -> Dict[str, Any]:
        """Attach an amendment."""

    @abstractmethod
    async def generate_pdf(self, contract_id: str, request: "GeneratePdfRequest") -> PdfDocument:
        """Render the contract PDF."""

    @abstractmethod
    async def download_pdf(self, contract_id: str) -> PdfDocument:
        """Download the rendered PDF."""

    @abstractmethod
    async def verify_pdf(self, contract_id: str) -> PdfDocument:
        """Verify the stored PDF hash."""


class BillsClient(ABC):

    @abstractmethod
    async def create_for_room(self, request: "CreateBillRequest") -> Bill:
        """Create a bill for one room instance."""

    @abstractmethod
    async def list_bills(self, params: Optional[Dict[str, Any]] = None, scope: str = "all") -> Page[Bill]:
        """List bills. scope: all / tenant / landlord_by_month."""

    @abstractmethod
    async def get_bill(self, bill_id: str) -> Bill:
        """Fetch one bill."""

    @abstractmethod
    async def update_bill(self, bill_id: str, request: "UpdateBillRequest") -> Bill:
        """Update due date / notes / status."""

    @abstractmethod
    async def delete_bill(self, bill_id: str) -> None:
        """Delete a bill."""

    @abstractmethod
    async def mark_paid(self, bill_id: str) -> Bill:
        """Mark a bill as paid."""

    @abstractmethod
    async def update_meter_data(self, bill_id: str, readings: List[MeterReading], occupancy_count: Optional[int] = None) -> Bill:
        """Finalize a draft bill with meter readings."""


class RentalsClient(ABC):

    @abstractmethod
    async def create_rental(self, request: "CreateRentalRequest") -> Rental:
        """Create a rental."""

    @abstractmethod
    async def list_rentals(self, params: Optional[Dict[str, Any]] = None, scope: str = "all") -> Page[Rental]:
        """List rentals. scope: all / landlord / tenant."""

    @abstractmethod
    async def get_rental(self, rental_id: str) -> Rental:
        """Fetch one rental."""

    @abstractmethod
    async def update_rental(self, rental_id: str, request: "UpdateRentalRequest") -> Rental:
        """Update a rental."""

    @abstractmethod
    async def terminate_rental(self, rental_id: str, reason: str) -> Rental:
        """Terminate a rental."""

    @abstractmethod
    async def renew_rental(self, rental_id: str, new_end_date: str) -> Rental:
        """Extend a rental."""


class RoommateApplicationsClient(ABC):

    @abstractmethod
    async def create_application(self, request: "CreateRoommateApplicationRequest") -> RoommateApplication:
        """Apply to a roommate-seeking post."""

    @abstractmethod
    async def get_application(self, application_id: str) -> RoommateApplication:
        """Fetch one application."""

    @abstractmethod
    async def list_my_applications(self, params: Optional[Dict[str, Any]] = None) -> Page[RoommateApplication]:
        """Applications submitted by the current user."""

    @abstractmethod
    async def list_for_my_posts(self, params: Optional[Dict[str, Any]] = None) -> Page[RoommateApplication]:
        """Applications received on the current user's posts (or managed rooms)."""

    @abstractmethod
    async def update_application(self, application_id: str, request: "UpdateRoommateApplicationRequest") -> RoommateApplication:
        """Edit a pending application."""

    @abstractmethod
    async def respond(self, application_id: str, request: "RespondToApplicationRequest") -> RoommateApplication:
        """Tenant or landlord decision."""

    @abstractmethod
    async def confirm(self, application_id: str) -> RoommateApplication:
        """Confirm an approved application."""

    @abstractmethod
    async def cancel(self, application_id: str) -> RoommateApplication:
        """Applicant withdraws."""

    @abstractmethod
    async def bulk_respond(self, request: "BulkRespondRequest") -> Dict[str, Any]:
        """Respond to several applications at once."""

    @abstractmethod
    async def statistics(self, scope: str = "my-applications") -> ApplicationStatistics:
        """scope: my-applications / for-my-posts."""


class ChatClient(ABC):

    @abstractmethod
    async def send_message(self, request: "SendMessageRequest") -> ChatMessage:
        """Send a chat message."""

    @abstractmethod
    async def get_messages(self, conversation_id: str, cursor: Optional[str] = None, limit: Optional[int] = None) -> List[ChatMessage]:
        """Messages of one conversation."""

    @abstractmethod
    async def mark_all_read(self, conversation_id: str) -> None:
        """Mark every message of a conversation as read."""

    @abstractmethod
    async def list_conversations(self) -> List[ConversationSummary]:
        """Conversations of the current user."""


class NotificationsClient(ABC):

    @abstractmethod
    async def list_notifications(self, params: Optional[Dict[str, Any]] = None) -> Page[Notification]:
        """Notifications of the current user."""

    @abstractmethod
    async def unread_count(self) -> int:
        """Unread notification count."""

    @abstractmethod
    async def mark_read(self, notification_id: str) -> None:
        """Mark one notification read."""

    @abstractmethod
    async def mark_all_read(self) -> None:
        """Mark every notification read."""

    @abstractmethod
    async def delete(self, notification_id: str) -> None:
        """Delete one notification."""

    @abstractmethod
    async def create(self, request: "CreateNotificationRequest") -> Notification:
        """Create a notification for a user."""
