import pytest

from trustay.integrations.contracts.billing import CreateBillRequest
from trustay.integrations.contracts.interfaces import (
    BillStatus,
    MeterReading,
    Notification,
    RentalStatus,
    RoommateApplicationStatus as Status,
)
from trustay.integrations.contracts.messaging import CreateNotificationRequest
from trustay.integrations.contracts.rentals import CreateRentalRequest
from trustay.integrations.contracts.roommates import (
    BulkRespondRequest,
    CreateRoommateApplicationRequest,
    RespondToApplicationRequest,
)
from trustay.messaging.encoder import RoomMetadata, StructuredMessage
from trustay.messaging.metadata import MessageMetadataStore
from trustay.stores import BillStore, ChatStore, NotificationStore, RentalStore, RoommateApplicationStore
from trustay.stores.base import BaseStore


class FailingStore(BaseStore):
    def __init__(self):
        self.busy = False
        self.error = None


@pytest.mark.asyncio
async def test_guard_records_plain_exceptions_and_resets_loading():
    store = FailingStore()

    async def boom():
        raise RuntimeError("mất kết nối")

    ok, value = await store._guard("busy", "error", boom)

    assert (ok, value) == (False, None)
    assert store.error == "mất kết nối"
    assert store.busy is False
    assert store.last_error_status is None


# ---------------------------------------------------------------------------
# Bills
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_bill_store_create_validates_locally(landlord):
    store = BillStore(landlord.bills)
    request = CreateBillRequest.for_month("room-101", 2025, 3, 0)

    assert await store.create_for_room(request) is None
    assert store.submit_error == "Dữ liệu không hợp lệ:\noccupancy_count must be at least 1"
    assert store.bills == []


@pytest.mark.asyncio
async def test_bill_store_draft_to_paid(landlord):
    store = BillStore(landlord.bills)

    bill = await store.create_for_room(CreateBillRequest.for_month("room-101", 2025, 3, 1))
    assert bill.status == BillStatus.DRAFT
    assert store.bills == [bill]

    assert await store.mark_paid(bill.id) is False
    assert store.mark_paid_error == "Meter readings are required before payment"
    assert store.last_error_status == 409

    bad_readings = [MeterReading(room_cost_id="cost-water", current_reading=5, last_reading=9)]
    assert await store.update_meter_data(bill.id, bad_readings) is False
    assert store.meter_error == "Dữ liệu không hợp lệ:\ncurrent reading for 'cost-water' is below the last reading"

    readings = [MeterReading(room_cost_id="cost-water", current_reading=12, last_reading=9)]
    assert await store.update_meter_data(bill.id, readings) is True
    assert store.bills[0].status == BillStatus.PENDING
    assert store.bills[0].total_amount == 3_500_000 + 3 * 20_000

    assert await store.mark_paid(bill.id) is True
    assert store.bills[0].status == BillStatus.PAID


@pytest.mark.asyncio
async def test_bill_store_landlord_month_view_and_delete(landlord):
    store = BillStore(landlord.bills)
    bill = await store.create_for_room(CreateBillRequest.for_month("room-101", 2025, 5, 1))

    assert await store.load_landlord_bills_by_month(2025, 5) is True
    assert [b.id for b in store.bills] == [bill.id]
    assert await store.load_landlord_bills_by_month(2025, 6) is True
    assert store.bills == []

    await store.load_by_id(bill.id)
    assert await store.delete(bill.id) is True
    assert store.current is None


@pytest.mark.asyncio
async def test_tenant_bill_view(landlord, tenant):
    await BillStore(landlord.bills).create_for_room(CreateBillRequest.for_month("room-101", 2025, 3, 1))
    store = BillStore(tenant.bills)

    assert await store.load_tenant_bills() is True
    assert len(store.bills) == 1
    assert store.meta.total == 1


# ---------------------------------------------------------------------------
# Rentals
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_rental_store_lists_per_role(landlord, tenant):
    landlord_store = RentalStore(landlord.rentals)
    tenant_store = RentalStore(tenant.rentals)

    await landlord_store.load_landlord_rentals()
    await tenant_store.load_landlord_rentals()
    await tenant_store.load_tenant_rentals()

    assert [r.id for r in landlord_store.landlord_rentals] == ["rental-1"]
    assert tenant_store.landlord_rentals == []
    assert tenant_store.tenant_rentals[0].room_name == "Phòng 101"


@pytest.mark.asyncio
async def test_rental_store_create_and_terminate(landlord):
    store = RentalStore(landlord.rentals)
    await store.load_landlord_rentals()

    invalid = CreateRentalRequest(room_instance_id="room-202", tenant_id="tenant-1",
                                  contract_start_date="2025-04-01", monthly_rent="abc", deposit_paid="0")
    assert await store.create(invalid) is False
    assert store.submit_error == "Dữ liệu không hợp lệ:\nmonthly_rent 'abc' is not a number"

    request = CreateRentalRequest(room_instance_id="room-202", tenant_id="applicant-1",
                                  contract_start_date="2025-04-01", monthly_rent="2800000", deposit_paid="2800000")
    assert await store.create(request) is True
    assert len(store.landlord_rentals) == 2

    new_id = store.current.id
    assert await store.terminate(new_id, "Khách chuyển đi") is True
    assert store.current.status == RentalStatus.TERMINATED
    assert store.landlord_rentals[0].status == RentalStatus.TERMINATED


@pytest.mark.asyncio
async def test_rental_store_renew_error_uses_backend_message(tenant):
    store = RentalStore(tenant.rentals)

    assert await store.renew("rental-1", "2026-12-31") is False
    assert store.submit_error == "Only the landlord can change this rental"
    assert store.last_error_status == 403


# ---------------------------------------------------------------------------
# Roommate applications
# ---------------------------------------------------------------------------

def application_request(**overrides):
    fields = dict(
        roommate_seeking_post_id="post-1",
        full_name="Phạm Minh",
        occupation="Kỹ sư",
        phone_number="0912 345 678",
        move_in_date="2025-04-01",
        intended_stay_months=12,
        application_message="Mình sạch sẽ, đi làm giờ hành chính",
    )
    fields.update(overrides)
    return CreateRoommateApplicationRequest(**fields)


@pytest.mark.asyncio
async def test_roommate_store_create_validates_and_conflicts(applicant):
    store = RoommateApplicationStore(applicant.roommate_applications)

    assert await store.create(application_request(phone_number="123")) is None
    assert store.error == "Dữ liệu không hợp lệ:\nphone_number '123' does not look valid"

    # application-1 for post-1 is still pending
    assert await store.create(application_request()) is None
    assert store.error == "You already have a pending application for this post"
    assert store.last_error_status == 409


@pytest.mark.asyncio
async def test_roommate_store_respond_updates_cached_lists(tenant):
    store = RoommateApplicationStore(tenant.roommate_applications)
    assert await store.fetch_applications_for_my_posts() is True
    assert store.pagination.total == 1

    app = await store.respond("application-1", RespondToApplicationRequest.decision(False, False, "Xin lỗi bạn"))

    assert app.status == Status.REJECTED_BY_TENANT
    assert store.applications_for_my_posts[0].status == Status.REJECTED_BY_TENANT
    assert store.applications["application-1"].response_message == "Xin lỗi bạn"
    stats = await store.fetch_my_posts_statistics()
    assert stats.rejected == 1


@pytest.mark.asyncio
async def test_roommate_store_respond_failure_returns_none(applicant):
    store = RoommateApplicationStore(applicant.roommate_applications)

    assert await store.respond("application-1", RespondToApplicationRequest.decision(True, False)) is None
    assert store.error == "Only the tenant who posted can respond to this application"
    assert store.is_loading is False


@pytest.mark.asyncio
async def test_roommate_store_cancel_and_fetch(applicant):
    store = RoommateApplicationStore(applicant.roommate_applications)
    await store.fetch_my_applications()

    assert await store.cancel("application-1") is True
    assert store.my_applications[0].status == Status.CANCELLED

    app = await store.fetch_application_by_id("application-1")
    assert store.current_application is app
    assert (await store.fetch_my_statistics()).cancelled == 1


@pytest.mark.asyncio
async def test_roommate_store_bulk_respond_refreshes(backend, tenant):
    backend.add_application("application-2", "post-1", "applicant-1", fullName="Võ Thị Hoa",
                            occupation="Nhân viên văn phòng", phoneNumber="0987654321")
    store = RoommateApplicationStore(tenant.roommate_applications)

    result = await store.bulk_respond(BulkRespondRequest(application_ids=["application-1", "application-2"],
                                                         approve=True))

    assert result["successCount"] == 2
    assert {a.status for a in store.applications_for_my_posts} == {Status.APPROVED_BY_TENANT}


@pytest.mark.asyncio
async def test_roommate_store_search_and_platform_filter(backend, tenant):
    backend.add_roommate_post("post-2", "tenant-1", "Nhà riêng", external_address="12 Lê Lợi")
    backend.add_application("application-2", "post-2", "applicant-1", fullName="Võ Thị Hoa",
                            occupation="Nhân viên văn phòng", phoneNumber="0987654321")
    store = RoommateApplicationStore(tenant.roommate_applications)
    await store.fetch_applications_for_my_posts()

    assert [a.id for a in store.platform_room_applications()] == ["application-1"]
    assert store.platform_room_applications("hoa") == []
    assert [a.id for a in store.search("hoa")] == ["application-2"]
    assert [a.id for a in store.search("sinh viên")] == ["application-1"]
    assert len(store.search("  ")) == 2


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_notification_store_counts(landlord, tenant):
    for title in ("Hoá đơn mới", "Hợp đồng chờ ký"):
        await landlord.notifications.create(CreateNotificationRequest(
            user_id="tenant-1", type="info", title=title, message=title
        ))
    store = NotificationStore(tenant.notifications)

    await store.load()
    assert await store.load_unread_count() == 2

    first = store.items[0].id
    assert await store.mark_read(first) is True
    assert store.unread == 1
    # marking again does not decrement twice
    await store.mark_read(first)
    assert store.unread == 1

    assert await store.delete(store.items[1].id) is True
    assert store.unread == 0
    assert len(store.items) == 1


@pytest.mark.asyncio
async def test_notification_store_mark_all_and_incoming(tenant):
    store = NotificationStore(tenant.notifications)
    incoming = Notification(id="n-1", type="info", title="Xin chào", message="")

    assert store.add_incoming(incoming) is True
    assert store.add_incoming(incoming) is False
    assert store.unread == 1

    assert await store.mark_all_read() is True
    assert store.unread == 0
    assert store.items[0].is_read is True


@pytest.mark.asyncio
async def test_notification_store_delete_missing(tenant):
    store = NotificationStore(tenant.notifications)

    assert await store.delete("missing") is False
    assert store.error == "Notification not found"


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_chat_store_structured_message_with_metadata(landlord, tenant):
    metadata = MessageMetadataStore()
    store = ChatStore(landlord.chat, metadata_store=metadata)
    invitation = StructuredMessage(
        type="invitation",
        message="Mời bạn thuê phòng 101",
        room=RoomMetadata(room_id="room-101", room_name="Phòng 101"),
    )
    room_card = {"room": {"roomId": "room-101", "roomName": "Phòng 101", "roomPrice": "3500000"}}

    sent = await store.send_message(recipient_id="tenant-1", structured=invitation, metadata=room_card)

    assert sent is not None
    assert store.display_text(sent) == "Mời bạn thuê phòng 101"
    assert store.metadata_for(sent) == room_card
    assert metadata.for_conversation(sent.conversation_id) == {sent.id: room_card}

    tenant_chat = ChatStore(tenant.chat)
    await tenant_chat.load_conversations()
    await tenant_chat.load_messages(sent.conversation_id)
    received = tenant_chat.messages[sent.conversation_id][0]
    assert tenant_chat.display_text(received) == "Mời bạn thuê phòng 101"
    assert tenant_chat.metadata_for(received) is None


@pytest.mark.asyncio
async def test_chat_store_system_message_text(landlord):
    store = ChatStore(landlord.chat)

    sent = await store.send_message(content="accepted", recipient_id="tenant-1", message_type="request_accepted")

    assert store.display_text(sent) == "Chủ trọ đã đồng ý yêu cầu thuê"


@pytest.mark.asyncio
async def test_chat_store_rejects_empty_message(landlord):
    store = ChatStore(landlord.chat)

    assert await store.send_message(recipient_id="tenant-1") is None
    assert store.send_error == "Dữ liệu không hợp lệ:\ncontent is required"


@pytest.mark.asyncio
async def test_chat_store_older_page_is_prepended(landlord, tenant):
    sender = ChatStore(landlord.chat)
    for i in range(4):
        sent = await sender.send_message(content=f"tin {i}", recipient_id="tenant-1")
    store = ChatStore(tenant.chat)

    await store.load_messages(sent.conversation_id, limit=2)
    oldest = store.messages[sent.conversation_id][0].id
    await store.load_messages(sent.conversation_id, cursor=oldest, limit=2)

    assert [m.content for m in store.messages[sent.conversation_id]] == ["tin 0", "tin 1", "tin 2", "tin 3"]


@pytest.mark.asyncio
async def test_chat_store_mark_all_read_zeroes_counter(landlord, tenant):
    sent = await ChatStore(landlord.chat).send_message(content="Chào bạn", recipient_id="tenant-1")
    store = ChatStore(tenant.chat)
    await store.load_conversations()
    assert store.conversations[0].unread_count == 1

    assert await store.mark_all_read(sent.conversation_id) is True
    assert store.conversations[0].unread_count == 0
