from datetime import date

import pytest

from trustay.integrations.contracts.interfaces import Bill, BillItem, BillStatus, ContractStatus
from trustay.utils.formatters import (
    calculate_bill_total,
    calculate_proration_percentage,
    days_until_due,
    format_billing_period,
    format_currency,
    format_currency_compact,
    is_bill_overdue,
    parse_date,
    translate_bill_status,
    translate_contract_status,
    translate_contract_type,
    translate_room_status,
)


def test_status_labels():
    assert translate_contract_status(ContractStatus.PENDING_SIGNATURES) == "Chờ ký"
    assert translate_contract_status("archived") == "archived"
    assert translate_bill_status("paid") == "Đã thanh toán"
    assert translate_bill_status(BillStatus.DRAFT) == "Nháp"
    assert translate_contract_status(ContractStatus.DRAFT) == "Bản nháp"
    assert translate_room_status("occupied") == "Đã cho thuê"
    assert translate_contract_type("monthly_rental") == "Thuê theo tháng"


def test_currency_uses_vietnamese_grouping():
    assert format_currency(3_500_000) == "3.500.000 ₫"
    assert format_currency(1234.5, "USD") == "1.234,50 USD"
    assert format_currency_compact(5_000_000) == "5.0tr"
    assert format_currency_compact(10_000) == "10k"
    assert format_currency_compact(500) == "500"


def test_billing_period_and_dates():
    assert format_billing_period("2025-01") == "Tháng 1/2025"
    assert parse_date("2025-03-31T17:00:00.000Z") == date(2025, 3, 31)
    assert parse_date("2025-03-31") == date(2025, 3, 31)
    assert parse_date("") is None
    assert days_until_due("2025-03-31", today=date(2025, 3, 25)) == 6


def test_bill_overdue_ignores_paid_bills():
    bill = Bill(id="b1", rental_id="r1", room_instance_id="room-101", billing_period="2025-03",
                billing_month=3, billing_year=2025, status=BillStatus.PENDING, due_date="2025-03-31")

    assert is_bill_overdue(bill, today=date(2025, 4, 1))
    assert not is_bill_overdue(bill, today=date(2025, 3, 31))
    bill.status = BillStatus.PAID
    assert not is_bill_overdue(bill, today=date(2025, 4, 1))


def test_bill_total_and_proration():
    items = [
        BillItem(id="i1", item_type="rent", item_name="Tiền phòng", amount=3_500_000),
        BillItem(id="i2", item_type="utility", item_name="Điện", amount=175_000),
    ]
    assert calculate_bill_total(items) == 3_675_000

    assert calculate_proration_percentage(None, None, "2025-03-01", "2025-03-31") == 100.0
    assert calculate_proration_percentage("2025-03-10", "2025-03-31", "2025-03-01", "2025-03-31") == pytest.approx(
        22 / 31 * 100
    )
