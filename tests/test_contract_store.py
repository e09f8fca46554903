import pytest

from trustay.error_handler import ApiError
from trustay.integrations.contracts.interfaces import ContractStatus
from trustay.integrations.contracts.signing import ContractData, CreateContractRequest
from trustay.stores import ContractStore

DEMO_OTP = "123456"
SIGNATURE = "data:image/png;base64,iVBORw0KGgo="


@pytest.mark.asyncio
async def test_load_contracts_filters_by_scope(landlord, tenant):
    landlord_view = ContractStore(landlord.contracts, scope="landlord")
    tenant_as_landlord = ContractStore(tenant.contracts, scope="landlord")

    assert await landlord_view.load_contracts() is True
    assert await tenant_as_landlord.load_contracts() is True

    assert [c.id for c in landlord_view.contracts] == ["contract-1"]
    assert landlord_view.meta.total == 1
    assert tenant_as_landlord.contracts == []


@pytest.mark.asyncio
async def test_load_by_id_sets_current_and_reports_missing(landlord):
    store = ContractStore(landlord.contracts)

    assert await store.load_by_id("contract-1") is True
    assert store.current.status == ContractStatus.PENDING_SIGNATURES
    assert store.current.monthly_rent == 3_500_000

    assert await store.load_by_id("contract-missing") is False
    assert store.error_current == "Không tìm thấy hợp đồng"
    assert store.last_error_status == 404
    assert store.loading_current is False


@pytest.mark.asyncio
async def test_non_party_gets_forbidden_message(applicant):
    store = ContractStore(applicant.contracts)

    assert await store.load_contract_by_id("contract-1") is None
    assert store.error == "Bạn không có quyền thực hiện thao tác này"


@pytest.mark.asyncio
async def test_both_parties_sign_then_activate(backend, landlord, tenant):
    landlord_store = ContractStore(landlord.contracts)
    tenant_store = ContractStore(tenant.contracts)

    assert await landlord_store.request_otp("contract-1") is True
    assert backend.issued_otps[("contract-1", "landlord-1")] == DEMO_OTP
    assert await landlord_store.sign("contract-1", SIGNATURE, DEMO_OTP) is True
    assert landlord_store.current.status == ContractStatus.PARTIALLY_SIGNED

    # landlord cannot activate before the tenant signs
    assert await landlord_store.activate("contract-1") is False
    assert landlord_store.submit_error == "Trạng thái hợp đồng không hợp lệ"

    await tenant_store.request_otp("contract-1")
    assert await tenant_store.sign("contract-1", SIGNATURE, DEMO_OTP) is True
    assert tenant_store.current.status == ContractStatus.FULLY_SIGNED
    assert tenant_store.current.fully_signed_at is not None

    assert await landlord_store.activate("contract-1") is True
    assert landlord_store.current.status == ContractStatus.ACTIVE
    assert landlord_store.contracts[0].status == ContractStatus.ACTIVE


@pytest.mark.asyncio
async def test_sign_with_wrong_otp_keeps_backend_message(landlord):
    store = ContractStore(landlord.contracts)
    await store.request_otp("contract-1")

    assert await store.sign("contract-1", SIGNATURE, "000000") is False
    assert store.sign_error == "Mã OTP không hợp lệ hoặc đã hết hạn"
    assert store.last_error_status == 400
    assert store.signing is False


@pytest.mark.asyncio
async def test_get_status_summarises_signatures(landlord):
    store = ContractStore(landlord.contracts)
    await store.request_otp("contract-1")
    await store.sign("contract-1", SIGNATURE, DEMO_OTP)

    status = await store.get_status("contract-1")

    assert status.landlord_signed is True
    assert status.tenant_signed is False
    assert store.contract_status is status


@pytest.mark.asyncio
async def test_create_validation_errors_are_listed(landlord):
    store = ContractStore(landlord.contracts)
    request = CreateContractRequest(
        landlord_id="landlord-1",
        tenant_id="landlord-1",
        room_instance_id="room-101",
        start_date="2025-03-01",
        contract_data=ContractData(monthly_rent=0, deposit_amount=0),
    )

    assert await store.create(request) is False
    assert store.submit_error == (
        "Dữ liệu không hợp lệ:\n"
        "landlord and tenant must be different users\n"
        "monthly_rent must be greater than zero"
    )


@pytest.mark.asyncio
async def test_auto_generate_and_delete_draft(landlord):
    store = ContractStore(landlord.contracts)

    assert await store.auto_generate("rental-1") is True
    draft = store.current
    assert draft.status == ContractStatus.DRAFT
    assert draft.rental_id == "rental-1"
    assert len(store.contracts) == 2

    assert await store.delete(draft.id) is True
    assert store.current is None
    assert [c.id for c in store.contracts] == ["contract-1"]

    # pending contracts cannot be deleted
    assert await store.delete("contract-1") is False
    assert store.delete_error == "Trạng thái hợp đồng không hợp lệ"


@pytest.mark.asyncio
async def test_download_generates_missing_pdf_first(landlord):
    store = ContractStore(landlord.contracts)

    document = await store.download_pdf("contract-1")

    assert document is not None
    assert document.content.startswith(b"%PDF-1.4")
    assert store.download_error is None

    integrity = await store.verify_pdf("contract-1")
    assert integrity.valid is True
    assert store.pdf_integrity is integrity


@pytest.mark.asyncio
async def test_verify_without_pdf_fails(landlord):
    store = ContractStore(landlord.contracts)

    assert await store.verify_pdf("contract-1") is None
    assert store.verify_error == "Không tìm thấy hợp đồng"


@pytest.mark.asyncio
async def test_generate_pdf_sets_preview_url(landlord):
    store = ContractStore(landlord.contracts)

    document = await store.generate_pdf("contract-1")

    assert store.pdf_preview_url == "https://files.trustay.local/contracts/contract-1.pdf"
    assert document.hash


class FlakyPdfClient:
    """Download fails with a configurable status; records generate calls."""

    def __init__(self, status):
        self.status = status
        self.generated = []

    async def download_pdf(self, contract_id):
        raise ApiError("boom", status=self.status, payload={"message": "boom"})

    async def generate_pdf(self, contract_id, request):
        self.generated.append((contract_id, request.include_signatures, request.format))


@pytest.mark.asyncio
async def test_download_does_not_regenerate_on_other_errors():
    client = FlakyPdfClient(status=500)
    store = ContractStore(client)

    assert await store.download_pdf("contract-1") is None
    assert client.generated == []
    assert store.download_error == "boom"
    assert store.last_error_status == 500


@pytest.mark.asyncio
async def test_download_retries_once_after_generating():
    client = FlakyPdfClient(status=404)
    store = ContractStore(client)

    assert await store.download_pdf("contract-1") is None
    assert client.generated == [("contract-1", True, "A4")]
    assert store.download_error == "Không tìm thấy hợp đồng"


def test_clear_errors_and_current():
    store = ContractStore(client=None)
    store.sign_error = "x"
    store.otp_error = "y"
    store.pdf_preview_url = "url"

    store.clear_errors()
    store.clear_current()

    assert store.sign_error is None and store.otp_error is None
    assert store.pdf_preview_url is None
