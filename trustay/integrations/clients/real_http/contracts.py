"""
Real Contracts HTTP Client.

Used when the Trustay backend is reachable (INTEGRATIONS_MODE=real or TRUSTAY_API_URL set).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from trustay.integrations.clients.real_http.base import BackendHttpClient
from trustay.integrations.contracts.interfaces import (
    Contract,
    ContractsClient,
    ContractStatusResponse,
    Page,
    PdfDocument,
)
from trustay.integrations.contracts.signing import CreateContractRequest, GeneratePdfRequest, SignContractRequest
from trustay.integrations.policy.response_wrappers import normalize_entity_response, normalize_page, unwrap_entity

logger = logging.getLogger(__name__)

_LIST_PATHS = {
    "all": "/api/contracts",
    "landlord": "/api/contracts/my-contracts",
    "tenant": "/api/contracts/as-tenant",
}


class RealContractsClient(ContractsClient):
    def __init__(self, http: BackendHttpClient) -> None:
        self.http = http

    async def list_contracts(self, page: Optional[int] = None, limit: Optional[int] = None,
                             status: Optional[str] = None, scope: str = "all") -> Page[Contract]:
        path = _LIST_PATHS.get(scope)
        if path is None:
            raise ValueError(f"Unknown contract list scope '{scope}'")
        raw = await self.http.get(path, params={"page": page, "limit": limit, "status": status})
        return normalize_page(raw, Contract.from_api)

    async def get_contract(self, contract_id: str) -> Contract:
        raw = await self.http.get(f"/api/contracts/{contract_id}")
        return normalize_entity_response(raw, Contract.from_api)

    async def create_contract(self, request: CreateContractRequest) -> Contract:
        raw = await self.http.post("/api/contracts", json=request.to_payload())
        return normalize_entity_response(raw, Contract.from_api)

    async def auto_generate(self, rental_id: str, additional_data: Optional[Dict[str, Any]] = None) -> Contract:
        raw = await self.http.post(f"/api/contracts/auto-generate/{rental_id}", json=additional_data or {})
        return normalize_entity_response(raw, Contract.from_api)

    async def update_contract(self, contract_id: str, updates: Dict[str, Any]) -> Contract:
        raw = await self.http.put(f"/api/contracts/{contract_id}", json=updates)
        return normalize_entity_response(raw, Contract.from_api)

    async def delete_contract(self, contract_id: str) -> None:
        await self.http.delete(f"/api/contracts/{contract_id}")

    async def get_status(self, contract_id: str) -> ContractStatusResponse:
        raw = await self.http.get(f"/api/contracts/{contract_id}/status")
        return normalize_entity_response(raw, ContractStatusResponse.from_api)

    async def request_signing_otp(self, contract_id: str) -> None:
        await self.http.post(f"/api/contracts/{contract_id}/request-signing-otp")
        logger.info("Signing OTP requested for contract %s", contract_id)

    async def sign(self, contract_id: str, request: SignContractRequest) -> Contract:
        raw = await self.http.post(f"/api/contracts/{contract_id}/sign", json=request.to_payload())
        return normalize_entity_response(raw, Contract.from_api)

    async def activate(self, contract_id: str) -> Contract:
        raw = await self.http.post(f"/api/contracts/{contract_id}/activate")
        return normalize_entity_response(raw, Contract.from_api)

    async def create_amendment(self, contract_id: str, amendment: Dict[str, Any]) -> Dict[str, Any]:
        raw = await self.http.post(f"/api/contracts/{contract_id}/amendments", json=amendment)
        return unwrap_entity(raw) or {}

    async def generate_pdf(self, contract_id: str, request: GeneratePdfRequest) -> PdfDocument:
        raw = unwrap_entity(await self.http.post(f"/api/contracts/{contract_id}/pdf", json=request.to_payload())) or {}
        return PdfDocument(
            url=raw.get("pdfUrl") or raw.get("url"),
            hash=raw.get("hash") or raw.get("pdfHash"),
            size=raw.get("size"),
        )

    async def download_pdf(self, contract_id: str) -> PdfDocument:
        response = await self.http.get(f"/api/contracts/{contract_id}/download", raw=True)
        return PdfDocument(
            content=response.content,
            content_type=response.headers.get("content-type", "application/pdf"),
            size=len(response.content),
        )

    async def verify_pdf(self, contract_id: str) -> PdfDocument:
        raw = unwrap_entity(await self.http.get(f"/api/contracts/{contract_id}/verify-pdf")) or {}
        return PdfDocument(hash=raw.get("hash"), valid=bool(raw.get("isValid", raw.get("valid"))))
