"""
Dual-party contract signing.

The backend owns OTP verification, signature storage and status transitions.
This module decides what the current user may do with a contract and drives
the signing steps (request OTP -> draw signature + enter OTP -> submit) against
a contract store, reporting every outcome as a toast.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Protocol, Union

from trustay.integrations.contracts.interfaces import Contract, ContractStatus, SignerRole
from trustay.integrations.contracts.signing import OTP_LENGTH, is_signable_status, sanitize_otp_input
from trustay.toasts import ToastQueue

logger = logging.getLogger(__name__)

MSG_OTP_SENT = "Mã OTP đã được gửi đến email của bạn"
MSG_OTP_SEND_FAILED = "Không thể gửi mã OTP"
MSG_OTP_RESENT = "Mã OTP đã được gửi lại"
MSG_OTP_RESEND_FAILED = "Không thể gửi lại mã OTP"
MSG_SIGNATURE_REQUIRED = "Vui lòng ký vào khung chữ ký"
MSG_OTP_REQUIRED = "Vui lòng nhập mã OTP (6 chữ số)"
MSG_SIGN_SUCCESS = "Ký hợp đồng thành công!"
MSG_SIGN_FAILED = "Không thể ký hợp đồng"
MSG_SIGN_UNEXPECTED = "Đã có lỗi xảy ra khi ký hợp đồng"


class SigningPhase(str, Enum):
    IDLE = "idle"
    AWAITING_SIGNATURE = "awaiting_signature"
    CONFIRMING = "confirming"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SignatureStatus:
    landlord_signed: bool
    tenant_signed: bool

    @property
    def fully_signed(self) -> bool:
        return self.landlord_signed and self.tenant_signed

    def has_signed(self, role: Union[SignerRole, str]) -> bool:
        role_value = getattr(role, "value", role)
        return self.landlord_signed if role_value == SignerRole.LANDLORD.value else self.tenant_signed

    def to_dict(self) -> Dict[str, bool]:
        return {
            "landlord_signed": self.landlord_signed,
            "tenant_signed": self.tenant_signed,
            "fully_signed": self.fully_signed,
        }


class SigningStore(Protocol):
    otp_error: Optional[str]
    sign_error: Optional[str]

    async def request_otp(self, contract_id: str) -> bool: ...

    async def sign(self, contract_id: str, signature_data: str, otp_code: str) -> bool: ...


def _role_in_signatures(contract: Contract, role: str) -> bool:
    return any(getattr(s.signer_role, "value", s.signer_role) == role for s in contract.signatures)


def signature_status(contract: Contract) -> SignatureStatus:
    """A party has signed when its dedicated field is set or the signature list holds its role."""
    return SignatureStatus(
        landlord_signed=bool(contract.landlord_signature) or _role_in_signatures(contract, SignerRole.LANDLORD.value),
        tenant_signed=bool(contract.tenant_signature) or _role_in_signatures(contract, SignerRole.TENANT.value),
    )


def can_sign(contract: Contract, role: Union[SignerRole, str]) -> bool:
    return is_signable_status(contract.status) and not signature_status(contract).has_signed(role)


def next_status_after_signature(
    status: Union[ContractStatus, str], landlord_signed: bool, tenant_signed: bool
) -> ContractStatus:
    """Status a contract moves to once its signature set changes."""
    if not is_signable_status(status):
        raise ValueError(f"Contract in status '{getattr(status, 'value', status)}' cannot be signed")
    if landlord_signed and tenant_signed:
        return ContractStatus.FULLY_SIGNED
    if landlord_signed or tenant_signed:
        return ContractStatus.PARTIALLY_SIGNED
    return ContractStatus.PENDING_SIGNATURES


class ContractSigningWorkflow:
    def __init__(
        self,
        contract: Contract,
        role: Union[SignerRole, str],
        store: SigningStore,
        toasts: Optional[ToastQueue] = None,
        on_complete: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.contract = contract
        self.role = SignerRole(getattr(role, "value", role))
        self.store = store
        self.toasts = toasts or ToastQueue()
        self.on_complete = on_complete
        self.phase = SigningPhase.IDLE
        self.otp_code = ""
        self.signature_data: Optional[str] = None

    @property
    def status(self) -> SignatureStatus:
        return signature_status(self.contract)

    @property
    def can_sign(self) -> bool:
        return can_sign(self.contract, self.role)

    def open(self) -> bool:
        """Show the signature step without requesting an OTP (one was already sent)."""
        if not self.can_sign:
            logger.info("Contract %s cannot be signed by %s", self.contract.id, self.role.value)
            return False
        self.phase = SigningPhase.AWAITING_SIGNATURE
        return True

    async def start_signing(self) -> bool:
        if not self.open():
            return False
        if await self.store.request_otp(self.contract.id):
            self.toasts.success(MSG_OTP_SENT)
            return True
        self.toasts.error(self.store.otp_error or MSG_OTP_SEND_FAILED)
        return False

    async def resend_otp(self) -> bool:
        if await self.store.request_otp(self.contract.id):
            self.toasts.success(MSG_OTP_RESENT)
            return True
        self.toasts.error(self.store.otp_error or MSG_OTP_RESEND_FAILED)
        return False

    def cancel(self) -> None:
        self.phase = SigningPhase.IDLE
        self.otp_code = ""
        self.signature_data = None

    def set_otp(self, raw: str) -> str:
        self.otp_code = sanitize_otp_input(raw)
        return self.otp_code

    async def confirm(self, signature_data: Optional[str]) -> bool:
        if self.phase != SigningPhase.AWAITING_SIGNATURE:
            logger.debug("Ignoring confirm for contract %s in phase %s", self.contract.id, self.phase.value)
            return False

        if not signature_data:
            self.toasts.error(MSG_SIGNATURE_REQUIRED)
            return False
        if len(self.otp_code) != OTP_LENGTH:
            self.toasts.error(MSG_OTP_REQUIRED)
            return False

        self.signature_data = signature_data
        self.phase = SigningPhase.CONFIRMING
        try:
            success = await self.store.sign(self.contract.id, signature_data, self.otp_code)
        except Exception as exc:
            logger.error("Signing contract %s failed unexpectedly: %s", self.contract.id, exc, exc_info=True)
            self.toasts.error(MSG_SIGN_UNEXPECTED)
            self.phase = SigningPhase.AWAITING_SIGNATURE
            return False

        if not success:
            self.toasts.error(self.store.sign_error or MSG_SIGN_FAILED)
            self.phase = SigningPhase.AWAITING_SIGNATURE
            return False

        self.toasts.success(MSG_SIGN_SUCCESS)
        self.phase = SigningPhase.COMPLETED
        self.otp_code = ""
        current = getattr(self.store, "current", None)
        if isinstance(current, Contract) and current.id == self.contract.id:
            self.contract = current
        if self.on_complete is not None:
            self.on_complete()
        return True

    def snapshot(self) -> Dict[str, Any]:
        return {
            "contract_id": self.contract.id,
            "contract_status": getattr(self.contract.status, "value", self.contract.status),
            "role": self.role.value,
            "phase": self.phase.value,
            "can_sign": self.can_sign,
            **self.status.to_dict(),
        }
