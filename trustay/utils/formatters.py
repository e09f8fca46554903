"""
Display helpers: Vietnamese status labels, billing periods, currency and bill dates.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Union

DateLike = Union[str, date, datetime]

CONTRACT_STATUS_LABELS = {
    "draft": "Bản nháp",
    "pending_signatures": "Chờ ký",
    "partially_signed": "Đã ký một phần",
    "fully_signed": "Đã ký đầy đủ",
    "signed": "Đã ký",
    "active": "Đang hoạt động",
    "expired": "Hết hạn",
    "terminated": "Đã chấm dứt",
    "cancelled": "Đã hủy",
}

RENTAL_STATUS_LABELS = {
    "active": "Đang hoạt động",
    "pending": "Chờ xử lý",
    "expired": "Hết hạn",
    "terminated": "Đã chấm dứt",
}

BILL_STATUS_LABELS = {
    "draft": "Nháp",
    "pending": "Chờ thanh toán",
    "paid": "Đã thanh toán",
    "overdue": "Quá hạn",
    "cancelled": "Đã hủy",
}

ROOM_STATUS_LABELS = {
    "available": "Còn trống",
    "occupied": "Đã cho thuê",
    "maintenance": "Bảo trì",
    "reserved": "Đã đặt trước",
    "unavailable": "Không khả dụng",
}

CONTRACT_TYPE_LABELS = {
    "monthly_rental": "Thuê theo tháng",
    "fixed_term_rental": "Thuê có thời hạn",
    "short_term_rental": "Thuê ngắn hạn",
}


def _value(status) -> str:
    return getattr(status, "value", status) or ""


def translate_contract_status(status) -> str:
    key = _value(status)
    return CONTRACT_STATUS_LABELS.get(key, key)


def translate_rental_status(status) -> str:
    key = _value(status)
    return RENTAL_STATUS_LABELS.get(key, key)


def translate_bill_status(status) -> str:
    key = _value(status)
    return BILL_STATUS_LABELS.get(key, key)


def translate_room_status(status) -> str:
    key = _value(status)
    return ROOM_STATUS_LABELS.get(key, key)


def translate_contract_type(contract_type) -> str:
    key = _value(contract_type)
    return CONTRACT_TYPE_LABELS.get(key, key)


def parse_date(value: Optional[DateLike]) -> Optional[date]:
    """Parse an ISO date / datetime string (or object) into a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return date.fromisoformat(text[:10])


def format_billing_period(period: str) -> str:
    """2025-01 -> Tháng 1/2025"""
    year, month = period.split("-")[:2]
    return f"Tháng {int(month)}/{year}"


def _group_thousands(amount: float, decimals: int) -> str:
    text = f"{amount:,.{decimals}f}"
    # vi-VN: "." groups thousands, "," marks decimals
    return text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def format_currency(amount: float, currency: str = "VND") -> str:
    if currency == "VND":
        return f"{_group_thousands(round(amount), 0)} ₫"
    return f"{_group_thousands(amount, 2)} {currency}"


def format_currency_compact(amount: float) -> str:
    """5000000 -> 5.0tr, 10000 -> 10k"""
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.1f}tr"
    if amount >= 1000:
        return f"{amount / 1000:.0f}k"
    return f"{amount:g}"


def is_bill_overdue(bill, today: Optional[date] = None) -> bool:
    if _value(bill.status) == "paid":
        return False
    due = parse_date(bill.due_date)
    if due is None:
        return False
    return due < (today or date.today())


def days_until_due(due_date: DateLike, today: Optional[date] = None) -> int:
    due = parse_date(due_date)
    return (due - (today or date.today())).days


def calculate_bill_total(items: Iterable) -> float:
    return sum(float(item.amount) for item in items)


def calculate_proration_percentage(
    rental_start: Optional[DateLike],
    rental_end: Optional[DateLike],
    period_start: DateLike,
    period_end: DateLike,
) -> float:
    """Share of the billing period covered by the rental, in percent."""
    if not rental_start or not rental_end:
        return 100.0

    total_days = (parse_date(period_end) - parse_date(period_start)).days + 1
    rental_days = (parse_date(rental_end) - parse_date(rental_start)).days + 1
    return rental_days / total_days * 100
