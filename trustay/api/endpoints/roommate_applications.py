"""
Roommate application decisions.

A decision is saved first; the chat notification to the applicant is best
effort and reported separately as `notification_sent`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from trustay.api.dependencies import get_notifier, get_roommate_store
from trustay.integrations.contracts.interfaces import RoommateApplication
from trustay.integrations.contracts.roommates import RespondToApplicationRequest
from trustay.messaging.roommate_notifications import RoommateNotifier
from trustay.stores import RoommateApplicationStore

logger = logging.getLogger(__name__)

api = APIRouter()
roommate_applications_api = api

MSG_APPROVED = "Đã chấp nhận đơn ứng tuyển"
MSG_REJECTED = "Đã từ chối đơn ứng tuyển"
MSG_RESPOND_FAILED = "Không thể phản hồi đơn ứng tuyển"
MSG_CONFIRMED = "Đã xác nhận đơn ứng tuyển"
MSG_CONFIRMED_CONTRACT = "Đã xác nhận đơn ứng tuyển. Hợp đồng sẽ được tạo tự động."
MSG_CONFIRM_FAILED = "Không thể xác nhận đơn ứng tuyển"
MSG_CANCELLED = "Đã hủy đơn ứng tuyển"
MSG_CANCEL_FAILED = "Không thể hủy đơn ứng tuyển"


class RespondBody(BaseModel):
    approve: bool
    response_message: Optional[str] = Field(default="", max_length=1000)
    as_landlord: bool = Field(default=False, description="Landlord decision on a platform room application")


class ConfirmBody(BaseModel):
    notify_applicant: bool = True
    as_landlord: bool = Field(default=False, description="Landlord closing a platform room application")


def _application_payload(application: RoommateApplication) -> Dict[str, Any]:
    return jsonable_encoder(application, exclude={"raw"})


def _ok(message: str, application: Optional[RoommateApplication], **extra: Any) -> Dict[str, Any]:
    return {
        "success": True,
        "toast": {"level": "success", "message": message},
        "application": _application_payload(application) if application else None,
        **extra,
    }


def _failed(store: RoommateApplicationStore, fallback: str) -> JSONResponse:
    # The toast wording stays fixed; the backend's reason travels as `error`
    return JSONResponse(
        status_code=store.last_error_status or 400,
        content={
            "success": False,
            "toast": {"level": "error", "message": fallback},
            "error": store.error,
        },
    )


@api.patch("/{application_id}/respond", tags=["Roommate Applications"])
async def respond_to_application(
    application_id: str,
    body: RespondBody,
    store: RoommateApplicationStore = Depends(get_roommate_store),
    notifier: RoommateNotifier = Depends(get_notifier),
):
    request = RespondToApplicationRequest.decision(
        approve=body.approve, as_landlord=body.as_landlord, response_message=body.response_message or None
    )
    application = await store.respond(application_id, request)
    if application is None:
        return _failed(store, MSG_RESPOND_FAILED)

    sent = await notifier.notify_response(application, body.approve, body.response_message)
    return _ok(MSG_APPROVED if body.approve else MSG_REJECTED, application, notification_sent=sent)


@api.patch("/{application_id}/confirm", tags=["Roommate Applications"])
async def confirm_application(
    application_id: str,
    body: Optional[ConfirmBody] = None,
    store: RoommateApplicationStore = Depends(get_roommate_store),
    notifier: RoommateNotifier = Depends(get_notifier),
):
    body = body or ConfirmBody()
    application = await store.confirm(application_id)
    if application is None:
        return _failed(store, MSG_CONFIRM_FAILED)

    sent = False
    if body.notify_applicant:
        sent = await notifier.notify_confirmation(application, by_landlord=body.as_landlord)
    return _ok(MSG_CONFIRMED_CONTRACT if body.as_landlord else MSG_CONFIRMED, application, notification_sent=sent)


@api.patch("/{application_id}/cancel", tags=["Roommate Applications"])
async def cancel_application(
    application_id: str,
    store: RoommateApplicationStore = Depends(get_roommate_store),
):
    if not await store.cancel(application_id):
        return _failed(store, MSG_CANCEL_FAILED)
    return _ok(MSG_CANCELLED, store.applications.get(application_id))
