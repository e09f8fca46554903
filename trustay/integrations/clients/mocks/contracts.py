"""
Mock Contracts Client.

Enforces the signing rules the real backend applies so the signing workflow
can be exercised end to end without network access.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
from typing import Any, Dict, Optional

from trustay.integrations.clients.mocks.backend import (
    MockClientBase,
    bad_request,
    conflict,
    forbidden,
    not_found,
)
from trustay.integrations.contracts.interfaces import (
    Contract,
    ContractsClient,
    ContractStatus,
    ContractStatusResponse,
    Page,
    PdfDocument,
    SignerRole,
)
from trustay.integrations.contracts.signing import (
    CreateContractRequest,
    GeneratePdfRequest,
    SignContractRequest,
    is_signable_status,
    is_terminal_status,
    validate_create_contract_request,
    validate_sign_request,
)
from trustay.integrations.policy.response_wrappers import normalize_entity_response, normalize_page
from trustay.signing.workflow import next_status_after_signature

logger = logging.getLogger(__name__)

_ACTIVATABLE = {ContractStatus.FULLY_SIGNED.value, ContractStatus.SIGNED.value}
_EDITABLE = {ContractStatus.DRAFT.value, ContractStatus.PENDING_SIGNATURES.value}


class MockContractsClient(MockClientBase, ContractsClient):

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get(self, contract_id: str) -> Dict[str, Any]:
        return self.backend.require(self.backend.contracts, contract_id, "Contract")

    def _role_of(self, contract: Dict[str, Any]) -> SignerRole:
        if contract.get("landlordId") == self.user_id:
            return SignerRole.LANDLORD
        if contract.get("tenantId") == self.user_id:
            return SignerRole.TENANT
        raise forbidden("You are not a party to this contract")

    def _touch(self, contract: Dict[str, Any]) -> None:
        contract["updatedAt"] = self.backend.now()

    @staticmethod
    def _to_contract(contract: Dict[str, Any]) -> Contract:
        return normalize_entity_response({"data": copy.deepcopy(contract)}, Contract.from_api)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_contracts(self, page: Optional[int] = None, limit: Optional[int] = None,
                             status: Optional[str] = None, scope: str = "all") -> Page[Contract]:
        def visible(c: Dict[str, Any]) -> bool:
            if scope == "landlord":
                return c.get("landlordId") == self.user_id
            if scope == "tenant":
                return c.get("tenantId") == self.user_id
            return self.user_id in (c.get("landlordId"), c.get("tenantId"))

        items = [c for c in self.backend.contracts.values() if visible(c) and (not status or c["status"] == status)]
        items.sort(key=lambda c: c.get("createdAt") or "", reverse=True)
        return normalize_page(self._page(items, {"page": page, "limit": limit}), Contract.from_api)

    async def get_contract(self, contract_id: str) -> Contract:
        contract = self._get(contract_id)
        self._role_of(contract)
        return self._to_contract(contract)

    async def get_status(self, contract_id: str) -> ContractStatusResponse:
        contract = self._get(contract_id)
        self._role_of(contract)
        return ContractStatusResponse.from_api({
            "contractId": contract_id,
            "status": contract["status"],
            "landlordSigned": bool(contract.get("landlordSignature")),
            "tenantSigned": bool(contract.get("tenantSignature")),
            "landlordSignedAt": contract.get("landlordSignedAt"),
            "tenantSignedAt": contract.get("tenantSignedAt"),
        })

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_contract(self, request: CreateContractRequest) -> Contract:
        errors = validate_create_contract_request(request)
        if errors:
            raise bad_request(errors)
        if request.landlord_id != self.user_id:
            raise forbidden("Only the landlord can create this contract")

        contract_id = self.backend.new_id("contract")
        contract = self.backend.add_contract(
            contract_id,
            request.landlord_id,
            request.tenant_id,
            status=ContractStatus.DRAFT.value,
            monthly_rent=request.contract_data.monthly_rent,
            deposit=request.contract_data.deposit_amount,
            start_date=request.start_date,
            end_date=request.end_date,
            room_instance_id=request.room_instance_id,
            rental_id=request.rental_id,
        )
        contract["contractType"] = getattr(request.contract_type, "value", request.contract_type)
        contract["contractData"] = request.contract_data.to_payload()
        logger.info("[CONTRACTS MOCK] Contract %s created by %s", contract_id, self.user_id)
        return self._to_contract(contract)

    async def auto_generate(self, rental_id: str, additional_data: Optional[Dict[str, Any]] = None) -> Contract:
        rental = self.backend.require(self.backend.rentals, rental_id, "Rental")
        if rental.get("ownerId") != self.user_id:
            raise forbidden("Only the landlord of this rental can generate a contract")

        monthly_rent = float(rental.get("monthlyRent") or 0)
        contract = self.backend.add_contract(
            self.backend.new_id("contract"),
            rental["ownerId"],
            rental["tenantId"],
            status=ContractStatus.DRAFT.value,
            monthly_rent=monthly_rent,
            deposit=float(rental.get("depositPaid") or monthly_rent),
            start_date=rental.get("contractStartDate") or "",
            end_date=rental.get("contractEndDate"),
            room_instance_id=rental.get("roomInstanceId"),
            rental_id=rental_id,
        )
        if additional_data:
            contract["contractData"].update(additional_data)
        contract["room"] = copy.deepcopy(rental.get("roomInstance", {}).get("room") or {})
        logger.info("[CONTRACTS MOCK] Contract %s generated from rental %s", contract["id"], rental_id)
        return self._to_contract(contract)

    async def update_contract(self, contract_id: str, updates: Dict[str, Any]) -> Contract:
        contract = self._get(contract_id)
        if self._role_of(contract) != SignerRole.LANDLORD:
            raise forbidden("Only the landlord can update this contract")
        if contract["status"] not in _EDITABLE:
            raise conflict(f"Contract in status {contract['status']} cannot be edited")

        for key in ("startDate", "endDate", "contractType"):
            if key in updates:
                contract[key] = updates[key]
        if isinstance(updates.get("contractData"), dict):
            contract["contractData"].update(updates["contractData"])
        self._touch(contract)
        return self._to_contract(contract)

    async def delete_contract(self, contract_id: str) -> None:
        contract = self._get(contract_id)
        if self._role_of(contract) != SignerRole.LANDLORD:
            raise forbidden("Only the landlord can delete this contract")
        if contract["status"] != ContractStatus.DRAFT.value:
            raise conflict("Only draft contracts can be deleted")
        del self.backend.contracts[contract_id]
        logger.info("[CONTRACTS MOCK] Contract %s deleted", contract_id)

    async def request_signing_otp(self, contract_id: str) -> None:
        contract = self._get(contract_id)
        self._role_of(contract)
        if not is_signable_status(contract["status"]):
            raise conflict(f"Contract in status {contract['status']} cannot be signed")
        self.backend.issue_otp(contract_id, self.user_id)

    async def sign(self, contract_id: str, request: SignContractRequest) -> Contract:
        contract = self._get(contract_id)
        role = self._role_of(contract)

        errors = validate_sign_request(request)
        if errors:
            raise bad_request(errors)

        # the code is spent even when the signature is refused below
        if not self.backend.consume_otp(contract_id, self.user_id, request.otp_code):
            raise bad_request("Mã OTP không hợp lệ hoặc đã hết hạn")

        signature_field = f"{role.value}Signature"
        if not is_signable_status(contract["status"]) or contract.get(signature_field):
            raise conflict(f"Contract in status {contract['status']} cannot be signed by the {role.value}")

        signed_at = self.backend.now()
        signature = {
            "signatureData": request.signature_image,
            "signedAt": signed_at,
            "signedBy": self.user_id,
            "signerRole": role.value,
            "signatureMethod": "canvas",
            "isValid": True,
        }
        contract["signatures"].append(signature)
        contract[signature_field] = dict(signature)
        contract[f"{role.value}SignedAt"] = signed_at

        contract["status"] = next_status_after_signature(
            contract["status"],
            landlord_signed=bool(contract.get("landlordSignature")),
            tenant_signed=bool(contract.get("tenantSignature")),
        ).value
        if contract["status"] == ContractStatus.FULLY_SIGNED.value:
            contract["fullySignedAt"] = signed_at
            contract["signedAt"] = signed_at
        self._touch(contract)
        logger.info("[CONTRACTS MOCK] Contract %s signed by %s -> %s", contract_id, role.value, contract["status"])
        return self._to_contract(contract)

    async def activate(self, contract_id: str) -> Contract:
        contract = self._get(contract_id)
        self._role_of(contract)
        if contract["status"] not in _ACTIVATABLE:
            raise conflict("Contract must be fully signed before activation")
        contract["status"] = ContractStatus.ACTIVE.value
        contract["activatedAt"] = self.backend.now()
        self._touch(contract)
        return self._to_contract(contract)

    async def create_amendment(self, contract_id: str, amendment: Dict[str, Any]) -> Dict[str, Any]:
        contract = self._get(contract_id)
        if self._role_of(contract) != SignerRole.LANDLORD:
            raise forbidden("Only the landlord can amend this contract")
        if is_terminal_status(contract["status"]):
            raise conflict(f"Contract in status {contract['status']} cannot be amended")
        contract["amendments"].append({**amendment, "createdAt": self.backend.now(), "createdBy": self.user_id})
        self._touch(contract)
        return {"message": "Amendment created"}

    async def generate_pdf(self, contract_id: str, request: GeneratePdfRequest) -> PdfDocument:
        contract = self._get(contract_id)
        self._role_of(contract)
        body = json.dumps(
            {k: contract.get(k) for k in ("id", "contractData", "status", "startDate", "endDate")},
            sort_keys=True, default=str,
        )
        if request.include_signatures:
            body += json.dumps([s["signedAt"] for s in contract["signatures"]])
        content = f"%PDF-1.4 mock {request.format}\n{body}".encode("utf-8")
        contract["pdfUrl"] = f"https://files.trustay.local/contracts/{contract_id}.pdf"
        contract["pdfHash"] = hashlib.sha256(content).hexdigest()
        contract["pdfContent"] = content.decode("utf-8")
        return PdfDocument(url=contract["pdfUrl"], hash=contract["pdfHash"], size=len(content))

    async def download_pdf(self, contract_id: str) -> PdfDocument:
        contract = self._get(contract_id)
        self._role_of(contract)
        if not contract.get("pdfContent"):
            raise not_found("PDF not found for this contract")
        content = contract["pdfContent"].encode("utf-8")
        return PdfDocument(url=contract.get("pdfUrl"), content=content, size=len(content), hash=contract.get("pdfHash"))

    async def verify_pdf(self, contract_id: str) -> PdfDocument:
        contract = self._get(contract_id)
        self._role_of(contract)
        if not contract.get("pdfContent"):
            raise not_found("PDF not found for this contract")
        digest = hashlib.sha256(contract["pdfContent"].encode("utf-8")).hexdigest()
        return PdfDocument(hash=digest, valid=digest == contract.get("pdfHash"))

