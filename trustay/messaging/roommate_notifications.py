"""
Chat notifications sent to an applicant when their roommate application is
answered or confirmed.

The notification is a side effect of the decision: a failed send is logged and
reported as False, the decision itself already went through.
"""

from __future__ import annotations

import logging
from typing import Optional

from trustay.integrations.contracts.interfaces import ChatClient, RoommateApplication
from trustay.integrations.contracts.messaging import SendMessageRequest
from trustay.messaging.constants import MessageType
from trustay.messaging.encoder import RoommateSeekingMetadata, StructuredMessage, encode_structured_message

logger = logging.getLogger(__name__)

MSG_APPROVED_DEFAULT = "Đơn ứng tuyển của bạn đã được chấp nhận!"
MSG_REJECTED_DEFAULT = "Rất tiếc, đơn ứng tuyển của bạn không được chấp nhận."
MSG_CONFIRMED_BY_TENANT = "Tenant đã xác nhận đơn ứng tuyển của bạn!"
MSG_CONFIRMED_BY_LANDLORD = "Chủ trọ đã xác nhận đơn ứng tuyển. Hợp đồng đã được tạo!"


def build_application_message(application: RoommateApplication, approve: bool, message: str) -> StructuredMessage:
    title = application.post.title if application.post else ""
    return StructuredMessage(
        type="roommate_application_approved" if approve else "roommate_application_rejected",
        message=message,
        roommate_seeking=RoommateSeekingMetadata(
            roommate_seeking_post_id=application.roommate_seeking_post_id,
            roommate_seeking_post_title=title or "",
        ),
    )


class RoommateNotifier:
    def __init__(self, chat_client: ChatClient) -> None:
        self.chat_client = chat_client

    async def _send(self, application: RoommateApplication, structured: StructuredMessage) -> bool:
        if not application.applicant_id:
            logger.info("Application %s has no applicant id, skipping chat notification", application.id)
            return False

        request = SendMessageRequest(
            content=encode_structured_message(structured),
            type=MessageType.TEXT.value,
            recipient_id=application.applicant_id,
        )
        try:
            await self.chat_client.send_message(request)
        except Exception as e:
            logger.error("Failed to send roommate notification for application %s: %s", application.id, e)
            return False

        logger.info("Sent %s notification to applicant %s", structured.type, application.applicant_id)
        return True

    async def notify_response(
        self, application: RoommateApplication, approve: bool, response_message: Optional[str] = ""
    ) -> bool:
        message = (response_message or "").strip() or (MSG_APPROVED_DEFAULT if approve else MSG_REJECTED_DEFAULT)
        return await self._send(application, build_application_message(application, approve, message))

    async def notify_confirmation(self, application: RoommateApplication, by_landlord: bool = False) -> bool:
        message = MSG_CONFIRMED_BY_LANDLORD if by_landlord else MSG_CONFIRMED_BY_TENANT
        return await self._send(application, build_application_message(application, True, message))
