"""
Contract signing endpoints.

The caller says which party it signs as; the backend remains the authority on
whether that is true.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from trustay.api.dependencies import get_contract_store
from trustay.integrations.contracts.interfaces import SignerRole
from trustay.signing import ContractSigningWorkflow
from trustay.signing.workflow import MSG_OTP_REQUIRED, MSG_SIGNATURE_REQUIRED
from trustay.stores import ContractStore
from trustay.toasts import ToastQueue

logger = logging.getLogger(__name__)

api = APIRouter()
contracts_api = api

MSG_CANNOT_SIGN = "Bạn không thể ký hợp đồng này ở trạng thái hiện tại"
_LOCAL_VALIDATION_MESSAGES = {MSG_SIGNATURE_REQUIRED, MSG_OTP_REQUIRED}


class RequestOtpBody(BaseModel):
    role: SignerRole


class SignBody(BaseModel):
    role: SignerRole
    signature_data: str = Field(default="", description="Base64 PNG drawn on the signature pad")
    otp_code: str = Field(default="", description="6-digit OTP received by email")


def _failure(status_code: int, toasts: ToastQueue, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "toasts": [t.to_dict() for t in toasts.drain()], **extra},
    )


def _store_failure(store: ContractStore, message: str) -> JSONResponse:
    toasts = ToastQueue()
    toasts.error(message)
    return _failure(store.last_error_status or 502, toasts)


async def _load_workflow(contract_id: str, role: SignerRole, store: ContractStore, toasts: ToastQueue):
    if not await store.load_by_id(contract_id):
        return None
    return ContractSigningWorkflow(store.current, role, store, toasts=toasts)


@api.get("/{contract_id}/signing-state", tags=["Contracts"])
async def get_signing_state(
    contract_id: str,
    role: SignerRole = Query(...),
    store: ContractStore = Depends(get_contract_store),
):
    workflow = await _load_workflow(contract_id, role, store, ToastQueue())
    if workflow is None:
        return _store_failure(store, store.error_current)
    return {"success": True, **workflow.snapshot()}


@api.post("/{contract_id}/request-otp", tags=["Contracts"])
async def request_otp(
    contract_id: str,
    body: RequestOtpBody,
    store: ContractStore = Depends(get_contract_store),
):
    toasts = ToastQueue()
    workflow = await _load_workflow(contract_id, body.role, store, toasts)
    if workflow is None:
        return _store_failure(store, store.error_current)
    if not workflow.can_sign:
        toasts.error(MSG_CANNOT_SIGN)
        return _failure(409, toasts, **workflow.snapshot())

    if not await workflow.start_signing():
        return _failure(store.last_error_status or 502, toasts, **workflow.snapshot())
    return {"success": True, "toasts": [t.to_dict() for t in toasts.drain()], **workflow.snapshot()}


@api.post("/{contract_id}/sign", tags=["Contracts"])
async def sign_contract(
    contract_id: str,
    body: SignBody,
    store: ContractStore = Depends(get_contract_store),
):
    toasts = ToastQueue()
    workflow = await _load_workflow(contract_id, body.role, store, toasts)
    if workflow is None:
        return _store_failure(store, store.error_current)
    if not workflow.open():
        toasts.error(MSG_CANNOT_SIGN)
        return _failure(409, toasts, **workflow.snapshot())

    workflow.set_otp(body.otp_code)
    if await workflow.confirm(body.signature_data):
        return {"success": True, "toasts": [t.to_dict() for t in toasts.drain()], **workflow.snapshot()}

    last = toasts.last
    if last is not None and last.message in _LOCAL_VALIDATION_MESSAGES:
        return _failure(422, toasts, **workflow.snapshot())
    logger.info("Signing contract %s as %s was rejected: %s", contract_id, body.role.value, store.sign_error)
    return _failure(store.last_error_status or 400, toasts, **workflow.snapshot())
