import pytest

from trustay.integrations.contracts.interfaces import RoommateApplication
from trustay.messaging import decode_structured_message
from trustay.messaging.roommate_notifications import (
    MSG_APPROVED_DEFAULT,
    MSG_CONFIRMED_BY_LANDLORD,
    MSG_CONFIRMED_BY_TENANT,
    MSG_REJECTED_DEFAULT,
    RoommateNotifier,
)


class FakeChat:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def send_message(self, request):
        if self.fail:
            raise RuntimeError("chat down")
        self.sent.append(request)
        return request


def application(applicant_id="applicant-1", title="Tìm bạn ở ghép phòng 101"):
    return RoommateApplication.from_api({
        "id": "application-1",
        "roommateSeekingPostId": "post-1",
        "applicantId": applicant_id,
        "status": "approved_by_tenant",
        "roommateSeekingPost": {"tenantId": "tenant-1", "title": title, "roomInstanceId": "room-101"},
    })


@pytest.mark.asyncio
async def test_approval_is_sent_to_applicant_as_structured_text():
    chat = FakeChat()

    assert await RoommateNotifier(chat).notify_response(application(), approve=True) is True

    request = chat.sent[0]
    assert request.recipient_id == "applicant-1"
    assert request.type == "text"
    message = decode_structured_message(request.content)
    assert message.type == "roommate_application_approved"
    assert message.message == MSG_APPROVED_DEFAULT
    assert message.roommate_seeking.roommate_seeking_post_id == "post-1"
    assert message.roommate_seeking.roommate_seeking_post_title == "Tìm bạn ở ghép phòng 101"


@pytest.mark.asyncio
async def test_rejection_uses_custom_message_when_given():
    chat = FakeChat()
    notifier = RoommateNotifier(chat)

    await notifier.notify_response(application(), approve=False, response_message="  Phòng đã đủ người  ")
    await notifier.notify_response(application(), approve=False, response_message="   ")

    first, second = (decode_structured_message(r.content) for r in chat.sent)
    assert first.type == "roommate_application_rejected"
    assert first.message == "Phòng đã đủ người"
    assert second.message == MSG_REJECTED_DEFAULT


@pytest.mark.asyncio
async def test_confirmation_text_depends_on_who_confirmed():
    chat = FakeChat()
    notifier = RoommateNotifier(chat)

    assert await notifier.notify_confirmation(application(title="")) is True
    assert await notifier.notify_confirmation(application(), by_landlord=True) is True

    by_tenant, by_landlord = (decode_structured_message(r.content) for r in chat.sent)
    assert by_tenant.type == "roommate_application_approved"
    assert by_tenant.message == MSG_CONFIRMED_BY_TENANT
    assert by_tenant.roommate_seeking.roommate_seeking_post_title == ""
    assert by_landlord.message == MSG_CONFIRMED_BY_LANDLORD


@pytest.mark.asyncio
async def test_missing_applicant_skips_sending():
    chat = FakeChat()

    assert await RoommateNotifier(chat).notify_response(application(applicant_id=""), approve=True) is False
    assert chat.sent == []


@pytest.mark.asyncio
async def test_chat_failure_is_reported_not_raised():
    assert await RoommateNotifier(FakeChat(fail=True)).notify_response(application(), approve=True) is False


@pytest.mark.asyncio
async def test_notification_reaches_applicant_inbox(backend, tenant, applicant):
    app = await tenant.roommate_applications.get_application("application-1")

    assert await RoommateNotifier(tenant.chat).notify_response(app, approve=True) is True

    conversations = await applicant.chat.list_conversations()
    messages = await applicant.chat.get_messages(conversations[0].conversation_id)
    assert messages[-1].sender_id == "tenant-1"
    assert decode_structured_message(messages[-1].content).message == MSG_APPROVED_DEFAULT
