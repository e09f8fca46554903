"""
Contract store: contract lists, the contract being viewed, PDF handling and
signing. Satisfies trustay.signing.SigningStore.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from trustay.error_handler import ApiError, extract_contract_error_message
from trustay.integrations.contracts.interfaces import (
    Contract,
    ContractsClient,
    ContractStatusResponse,
    PageMeta,
    PdfDocument,
)
from trustay.integrations.contracts.signing import CreateContractRequest, GeneratePdfRequest, SignContractRequest
from trustay.stores.base import BaseStore

logger = logging.getLogger(__name__)


class ContractStore(BaseStore):
    error_message = staticmethod(extract_contract_error_message)

    def __init__(self, client: ContractsClient, scope: str = "all") -> None:
        self.client = client
        self.scope = scope

        self.contracts: List[Contract] = []
        self.meta: Optional[PageMeta] = None
        self.current: Optional[Contract] = None
        self.contract_status: Optional[ContractStatusResponse] = None
        self.pdf_preview_url: Optional[str] = None
        self.pdf_integrity: Optional[PdfDocument] = None

        self.loading = False
        self.loading_current = False
        self.submitting = False
        self.downloading = False
        self.generating = False
        self.signing = False
        self.verifying = False
        self.requesting_otp = False
        self.deleting = False

        self.error: Optional[str] = None
        self.error_current: Optional[str] = None
        self.submit_error: Optional[str] = None
        self.download_error: Optional[str] = None
        self.generate_error: Optional[str] = None
        self.sign_error: Optional[str] = None
        self.verify_error: Optional[str] = None
        self.otp_error: Optional[str] = None
        self.delete_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_contracts(self, page: Optional[int] = None, limit: Optional[int] = None,
                             status: Optional[str] = None) -> bool:
        ok, result = await self._guard(
            "loading", "error",
            lambda: self.client.list_contracts(page=page, limit=limit, status=status, scope=self.scope),
        )
        if ok:
            self.contracts = result.items
            self.meta = result.meta
        return ok

    async def load_all(self) -> bool:
        return await self.load_contracts()

    async def load_by_id(self, contract_id: str) -> bool:
        ok, contract = await self._guard("loading_current", "error_current", lambda: self.client.get_contract(contract_id))
        if ok:
            self.current = contract
        return ok

    async def load_contract_by_id(self, contract_id: str) -> Optional[Contract]:
        """Fetch a contract without touching `current`."""
        _, contract = await self._guard("loading", "error", lambda: self.client.get_contract(contract_id))
        return contract

    async def get_status(self, contract_id: str) -> Optional[ContractStatusResponse]:
        ok, status = await self._guard("loading", "error", lambda: self.client.get_status(contract_id))
        if ok:
            self.contract_status = status
        return status

    # ------------------------------------------------------------------
    # Mutations (each successful one reloads the list)
    # ------------------------------------------------------------------

    async def _after_mutation(self, contract: Optional[Contract]) -> None:
        if contract is not None:
            self.current = contract
        await self.load_contracts()

    async def create(self, request: CreateContractRequest) -> bool:
        ok, contract = await self._guard("submitting", "submit_error", lambda: self.client.create_contract(request))
        if ok:
            await self._after_mutation(contract)
        return ok

    async def auto_generate(self, rental_id: str, additional_data: Optional[Dict[str, Any]] = None) -> bool:
        ok, contract = await self._guard(
            "submitting", "submit_error", lambda: self.client.auto_generate(rental_id, additional_data)
        )
        if ok:
            await self._after_mutation(contract)
        return ok

    async def request_otp(self, contract_id: str) -> bool:
        ok, _ = await self._guard("requesting_otp", "otp_error", lambda: self.client.request_signing_otp(contract_id))
        return ok

    async def sign(self, contract_id: str, signature_data: str, otp_code: str) -> bool:
        request = SignContractRequest(signature_image=signature_data, otp_code=otp_code)
        ok, contract = await self._guard("signing", "sign_error", lambda: self.client.sign(contract_id, request))
        if ok:
            logger.info("Contract %s signed", contract_id)
            await self._after_mutation(contract)
        return ok

    async def activate(self, contract_id: str) -> bool:
        ok, contract = await self._guard("submitting", "submit_error", lambda: self.client.activate(contract_id))
        if ok:
            await self._after_mutation(contract)
        return ok

    async def delete(self, contract_id: str) -> bool:
        ok, _ = await self._guard("deleting", "delete_error", lambda: self.client.delete_contract(contract_id))
        if ok:
            if self.current is not None and self.current.id == contract_id:
                self.current = None
            await self.load_contracts()
        return ok

    # ------------------------------------------------------------------
    # PDF
    # ------------------------------------------------------------------

    async def generate_pdf(self, contract_id: str, request: Optional[GeneratePdfRequest] = None) -> Optional[PdfDocument]:
        request = request or GeneratePdfRequest()
        ok, document = await self._guard("generating", "generate_error", lambda: self.client.generate_pdf(contract_id, request))
        if ok and document.url:
            self.pdf_preview_url = document.url
        return document

    async def _download_or_generate(self, contract_id: str) -> PdfDocument:
        try:
            return await self.client.download_pdf(contract_id)
        except ApiError as exc:
            if exc.status != 404:
                raise
        logger.info("PDF for contract %s not found, generating it first", contract_id)
        await self.client.generate_pdf(
            contract_id, GeneratePdfRequest(include_signatures=True, format="A4", print_background=True)
        )
        return await self.client.download_pdf(contract_id)

    async def download_pdf(self, contract_id: str) -> Optional[PdfDocument]:
        _, document = await self._guard("downloading", "download_error", lambda: self._download_or_generate(contract_id))
        return document

    async def verify_pdf(self, contract_id: str) -> Optional[PdfDocument]:
        ok, integrity = await self._guard("verifying", "verify_error", lambda: self.client.verify_pdf(contract_id))
        if ok:
            self.pdf_integrity = integrity
        return integrity

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def clear_current(self) -> None:
        self.current = None
        self.error_current = None
        self.contract_status = None
        self.pdf_preview_url = None
        self.pdf_integrity = None

    def clear_errors(self) -> None:
        self.error = None
        self.error_current = None
        self.submit_error = None
        self.download_error = None
        self.generate_error = None
        self.sign_error = None
        self.verify_error = None
        self.otp_error = None
        self.delete_error = None
