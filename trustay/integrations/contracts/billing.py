"""
Billing contract: bill request shapes and meter-reading validation.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .interfaces import BillStatus, MeterReading

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


@dataclass
class CreateBillRequest:
    room_instance_id: str
    billing_period: str                    # YYYY-MM
    billing_month: int
    billing_year: int
    period_start: str                      # YYYY-MM-DD
    period_end: str
    occupancy_count: int
    meter_readings: List[MeterReading] = field(default_factory=list)
    notes: Optional[str] = None

    @classmethod
    def for_month(cls, room_instance_id: str, year: int, month: int, occupancy_count: int,
                  meter_readings: Optional[List[MeterReading]] = None,
                  notes: Optional[str] = None) -> "CreateBillRequest":
        """Build a request covering a whole calendar month."""
        last_day = calendar.monthrange(year, month)[1]
        return cls(
            room_instance_id=room_instance_id,
            billing_period=f"{year:04d}-{month:02d}",
            billing_month=month,
            billing_year=year,
            period_start=f"{year:04d}-{month:02d}-01",
            period_end=f"{year:04d}-{month:02d}-{last_day:02d}",
            occupancy_count=occupancy_count,
            meter_readings=list(meter_readings or []),
            notes=notes,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "roomInstanceId": self.room_instance_id,
            "billingPeriod": self.billing_period,
            "billingMonth": self.billing_month,
            "billingYear": self.billing_year,
            "periodStart": self.period_start,
            "periodEnd": self.period_end,
            "occupancyCount": self.occupancy_count,
            "meterReadings": [r.to_payload() for r in self.meter_readings],
        }
        if self.notes:
            payload["notes"] = self.notes
        return payload


@dataclass
class UpdateBillRequest:
    due_date: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[BillStatus] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.due_date is not None:
            payload["dueDate"] = self.due_date
        if self.notes is not None:
            payload["notes"] = self.notes
        if self.status is not None:
            payload["status"] = getattr(self.status, "value", self.status)
        return payload


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def validate_meter_readings(readings: List[MeterReading]) -> List[str]:
    errors: List[str] = []
    seen = set()
    for reading in readings:
        if not reading.room_cost_id:
            errors.append("room_cost_id is required")
            continue
        if reading.room_cost_id in seen:
            errors.append(f"duplicate reading for room cost '{reading.room_cost_id}'")
        seen.add(reading.room_cost_id)
        if reading.last_reading < 0 or reading.current_reading < 0:
            errors.append(f"readings for '{reading.room_cost_id}' must not be negative")
        elif reading.current_reading < reading.last_reading:
            errors.append(f"current reading for '{reading.room_cost_id}' is below the last reading")
    return errors


def validate_create_bill_request(request: CreateBillRequest) -> List[str]:
    """
    Return a list of validation errors.
    Empty list means the request is valid.
    """
    errors: List[str] = []

    if not request.room_instance_id:
        errors.append("room_instance_id is required")
    if not _PERIOD_RE.match(request.billing_period or ""):
        errors.append(f"billing_period '{request.billing_period}' must use YYYY-MM")
    elif request.billing_period != f"{request.billing_year:04d}-{request.billing_month:02d}":
        errors.append("billing_period does not match billing_month / billing_year")
    if request.period_end and request.period_start and request.period_end < request.period_start:
        errors.append("period_end must not be before period_start")
    if request.occupancy_count < 1:
        errors.append("occupancy_count must be at least 1")

    errors.extend(validate_meter_readings(request.meter_readings))
    return errors


def consumption(reading: MeterReading) -> float:
    return reading.current_reading - reading.last_reading
