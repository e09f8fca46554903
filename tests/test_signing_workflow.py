import asyncio

import pytest

from trustay.integrations.contracts.interfaces import Contract, ContractSignature, ContractStatus, SignerRole
from trustay.integrations.contracts.signing import (
    SignContractRequest,
    is_terminal_status,
    is_valid_otp,
    sanitize_otp_input,
    validate_sign_request,
)
from trustay.signing import ContractSigningWorkflow, SigningPhase, can_sign, next_status_after_signature, signature_status
from trustay.signing.workflow import (
    MSG_OTP_REQUIRED,
    MSG_OTP_SENT,
    MSG_SIGN_SUCCESS,
    MSG_SIGN_UNEXPECTED,
    MSG_SIGNATURE_REQUIRED,
)

SIGNATURE = "data:image/png;base64,abc"


class FakeStore:
    def __init__(self, otp_ok=True, sign_ok=True, sign_raises=None, signed_contract=None, gate=None):
        self.otp_ok = otp_ok
        self.sign_ok = sign_ok
        self.sign_raises = sign_raises
        self.signed_contract = signed_contract
        self.gate = gate
        self.otp_error = None
        self.sign_error = None
        self.current = None
        self.otp_requests = []
        self.sign_calls = []

    async def request_otp(self, contract_id):
        self.otp_requests.append(contract_id)
        if not self.otp_ok:
            self.otp_error = "Không thể gửi email"
        return self.otp_ok

    async def sign(self, contract_id, signature_data, otp_code):
        self.sign_calls.append((contract_id, signature_data, otp_code))
        if self.gate is not None:
            await self.gate.wait()
        if self.sign_raises:
            raise self.sign_raises
        if not self.sign_ok:
            self.sign_error = "Mã OTP không hợp lệ hoặc đã hết hạn"
            return False
        self.current = self.signed_contract
        return True


def make_contract(status=ContractStatus.PENDING_SIGNATURES, landlord_signed=False, tenant_signed=False):
    return Contract(
        id="contract-1",
        status=status,
        landlord_signature=ContractSignature(signature_data=SIGNATURE) if landlord_signed else None,
        tenant_signature=ContractSignature(signature_data=SIGNATURE) if tenant_signed else None,
    )


def test_signature_status_reads_dedicated_fields_and_signature_list():
    contract = make_contract(landlord_signed=True)
    contract.signatures = [ContractSignature(signature_data=SIGNATURE, signer_role=SignerRole.TENANT)]

    status = signature_status(contract)

    assert status.landlord_signed and status.tenant_signed
    assert status.fully_signed
    assert status.has_signed("tenant")


def test_can_sign_depends_on_status_and_own_signature():
    assert can_sign(make_contract(), SignerRole.LANDLORD)
    assert can_sign(make_contract(status=ContractStatus.DRAFT), "tenant")
    assert not can_sign(make_contract(landlord_signed=True), "landlord")
    assert can_sign(make_contract(status=ContractStatus.PARTIALLY_SIGNED, landlord_signed=True), "tenant")
    assert not can_sign(make_contract(status=ContractStatus.ACTIVE), "tenant")
    # unknown backend status
    assert not can_sign(make_contract(status="archived"), "tenant")


def test_next_status_after_signature():
    assert next_status_after_signature("pending_signatures", True, False) == ContractStatus.PARTIALLY_SIGNED
    assert next_status_after_signature(ContractStatus.PARTIALLY_SIGNED, True, True) == ContractStatus.FULLY_SIGNED
    assert next_status_after_signature(ContractStatus.DRAFT, False, False) == ContractStatus.PENDING_SIGNATURES
    with pytest.raises(ValueError):
        next_status_after_signature(ContractStatus.ACTIVE, True, True)


def test_otp_helpers():
    assert sanitize_otp_input(" 12-34 56 78") == "123456"
    assert sanitize_otp_input(None) == ""
    assert is_valid_otp("654321")
    assert not is_valid_otp("65432a")
    assert validate_sign_request(SignContractRequest(signature_image="", otp_code="12")) == [
        "signature_image is required",
        "otp_code must be exactly 6 digits",
    ]
    assert is_terminal_status("cancelled")
    assert not is_terminal_status(ContractStatus.ACTIVE)


@pytest.mark.asyncio
async def test_start_signing_requests_otp_and_awaits_signature():
    store = FakeStore()
    workflow = ContractSigningWorkflow(make_contract(), "landlord", store)

    assert await workflow.start_signing() is True

    assert store.otp_requests == ["contract-1"]
    assert workflow.phase == SigningPhase.AWAITING_SIGNATURE
    assert workflow.toasts.last.message == MSG_OTP_SENT


@pytest.mark.asyncio
async def test_start_signing_refuses_when_already_signed():
    store = FakeStore()
    workflow = ContractSigningWorkflow(make_contract(landlord_signed=True), "landlord", store)

    assert await workflow.start_signing() is False
    assert store.otp_requests == []
    assert workflow.phase == SigningPhase.IDLE


@pytest.mark.asyncio
async def test_otp_failure_surfaces_store_error():
    store = FakeStore(otp_ok=False)
    workflow = ContractSigningWorkflow(make_contract(), "tenant", store)

    assert await workflow.start_signing() is False
    assert workflow.toasts.last.level == "error"
    assert workflow.toasts.last.message == "Không thể gửi email"


@pytest.mark.asyncio
async def test_confirm_validates_signature_then_otp_before_calling_store():
    store = FakeStore()
    workflow = ContractSigningWorkflow(make_contract(), "tenant", store)
    workflow.open()

    assert await workflow.confirm("") is False
    assert workflow.toasts.last.message == MSG_SIGNATURE_REQUIRED

    workflow.set_otp("12a3")
    assert await workflow.confirm(SIGNATURE) is False
    assert workflow.toasts.last.message == MSG_OTP_REQUIRED
    assert store.sign_calls == []
    assert workflow.phase == SigningPhase.AWAITING_SIGNATURE


@pytest.mark.asyncio
async def test_confirm_success_completes_and_adopts_updated_contract():
    signed = make_contract(status=ContractStatus.PARTIALLY_SIGNED, tenant_signed=True)
    store = FakeStore(signed_contract=signed)
    completed = []
    workflow = ContractSigningWorkflow(make_contract(), "tenant", store, on_complete=lambda: completed.append(True))
    workflow.open()
    workflow.set_otp("123456")

    assert await workflow.confirm(SIGNATURE) is True

    assert store.sign_calls == [("contract-1", SIGNATURE, "123456")]
    assert workflow.phase == SigningPhase.COMPLETED
    assert workflow.otp_code == ""
    assert workflow.toasts.last.message == MSG_SIGN_SUCCESS
    assert completed == [True]
    snapshot = workflow.snapshot()
    assert snapshot["contract_status"] == "partially_signed"
    assert snapshot["tenant_signed"] is True
    assert snapshot["can_sign"] is False


@pytest.mark.asyncio
async def test_confirm_backend_rejection_allows_retry():
    store = FakeStore(sign_ok=False)
    workflow = ContractSigningWorkflow(make_contract(), "tenant", store)
    workflow.open()
    workflow.set_otp("000000")

    assert await workflow.confirm(SIGNATURE) is False
    assert workflow.phase == SigningPhase.AWAITING_SIGNATURE
    assert workflow.toasts.last.message == "Mã OTP không hợp lệ hoặc đã hết hạn"

    store.sign_ok = True
    store.signed_contract = make_contract(status=ContractStatus.PARTIALLY_SIGNED, tenant_signed=True)
    assert await workflow.confirm(SIGNATURE) is True


@pytest.mark.asyncio
async def test_confirm_unexpected_exception_is_reported():
    store = FakeStore(sign_raises=RuntimeError("boom"))
    workflow = ContractSigningWorkflow(make_contract(), "landlord", store)
    workflow.open()
    workflow.set_otp("123456")

    assert await workflow.confirm(SIGNATURE) is False
    assert workflow.toasts.last.message == MSG_SIGN_UNEXPECTED
    assert workflow.phase == SigningPhase.AWAITING_SIGNATURE


@pytest.mark.asyncio
async def test_second_confirm_while_signing_is_ignored():
    gate = asyncio.Event()
    store = FakeStore(gate=gate, signed_contract=make_contract(status=ContractStatus.PARTIALLY_SIGNED, tenant_signed=True))
    workflow = ContractSigningWorkflow(make_contract(), "tenant", store)
    workflow.open()
    workflow.set_otp("123456")

    async def submit_again_then_release():
        await asyncio.sleep(0)
        assert workflow.phase == SigningPhase.CONFIRMING
        result = await workflow.confirm(SIGNATURE)
        gate.set()
        return result

    first, second = await asyncio.gather(workflow.confirm(SIGNATURE), submit_again_then_release())

    assert first is True
    assert second is False
    assert len(store.sign_calls) == 1
    assert workflow.phase == SigningPhase.COMPLETED


@pytest.mark.asyncio
async def test_confirm_outside_signature_step_is_ignored():
    store = FakeStore()
    workflow = ContractSigningWorkflow(make_contract(), "landlord", store)
    workflow.set_otp("123456")

    assert await workflow.confirm(SIGNATURE) is False
    assert store.sign_calls == []
    assert len(workflow.toasts) == 0


def test_cancel_resets_the_dialog():
    workflow = ContractSigningWorkflow(make_contract(), "landlord", FakeStore())
    workflow.open()
    workflow.set_otp("123")

    workflow.cancel()

    assert workflow.phase == SigningPhase.IDLE
    assert workflow.otp_code == ""
