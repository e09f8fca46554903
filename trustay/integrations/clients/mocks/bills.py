"""
Mock Bills Client.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from trustay.integrations.clients.mocks.backend import (
    MockClientBase,
    bad_request,
    conflict,
    forbidden,
)
from trustay.integrations.contracts.billing import (
    CreateBillRequest,
    UpdateBillRequest,
    consumption,
    validate_create_bill_request,
    validate_meter_readings,
)
from trustay.integrations.contracts.interfaces import Bill, BillsClient, BillStatus, MeterReading, Page
from trustay.integrations.policy.response_wrappers import normalize_page

logger = logging.getLogger(__name__)


class MockBillsClient(MockClientBase, BillsClient):

    def _rental_for_room(self, room_instance_id: str) -> Dict[str, Any]:
        for rental in self.backend.rentals.values():
            if rental.get("roomInstanceId") == room_instance_id and rental.get("status") == "active":
                return rental
        raise bad_request(f"No active rental for room instance {room_instance_id}")

    def _get(self, bill_id: str) -> Dict[str, Any]:
        bill = self.backend.require(self.backend.bills, bill_id, "Bill")
        rental = self.backend.rentals.get(bill["rentalId"]) or {}
        if self.user_id not in (rental.get("ownerId"), rental.get("tenantId")):
            raise forbidden("You cannot access this bill")
        return bill

    def _require_owner(self, bill: Dict[str, Any]) -> None:
        rental = self.backend.rentals.get(bill["rentalId"]) or {}
        if rental.get("ownerId") != self.user_id:
            raise forbidden("Only the landlord can change this bill")

    def _build_items(self, rental: Dict[str, Any], readings: List[MeterReading], bill_id: str) -> List[Dict[str, Any]]:
        items = [{
            "id": self.backend.new_id("item"),
            "billId": bill_id,
            "itemType": "rent",
            "itemName": "Tiền phòng",
            "amount": float(rental.get("monthlyRent") or 0),
            "currency": "VND",
        }]
        for reading in readings:
            cost = self.backend.room_costs.get(reading.room_cost_id)
            if cost is None:
                raise bad_request(f"Unknown room cost {reading.room_cost_id}")
            quantity = consumption(reading)
            items.append({
                "id": self.backend.new_id("item"),
                "billId": bill_id,
                "itemType": "utility",
                "itemName": cost["name"],
                "quantity": quantity,
                "unitPrice": cost["unitPrice"],
                "amount": quantity * cost["unitPrice"],
                "currency": "VND",
            })
        return items

    @staticmethod
    def _recalculate(bill: Dict[str, Any]) -> None:
        subtotal = sum(float(i["amount"]) for i in bill["billItems"])
        total = subtotal - float(bill.get("discountAmount") or 0) + float(bill.get("taxAmount") or 0)
        bill["subtotal"] = subtotal
        bill["totalAmount"] = total
        bill["remainingAmount"] = total - float(bill.get("paidAmount") or 0)

    async def create_for_room(self, request: CreateBillRequest) -> Bill:
        errors = validate_create_bill_request(request)
        if errors:
            raise bad_request(errors)
        rental = self._rental_for_room(request.room_instance_id)
        if rental.get("ownerId") != self.user_id:
            raise forbidden("Only the landlord can create bills for this room")
        for existing in self.backend.bills.values():
            if existing["rentalId"] == rental["id"] and existing["billingPeriod"] == request.billing_period:
                raise conflict(f"A bill for {request.billing_period} already exists")

        bill_id = self.backend.new_id("bill")
        bill = {
            "id": bill_id,
            "rentalId": rental["id"],
            "roomInstanceId": request.room_instance_id,
            "billingPeriod": request.billing_period,
            "billingMonth": request.billing_month,
            "billingYear": request.billing_year,
            "periodStart": request.period_start,
            "periodEnd": request.period_end,
            "dueDate": request.period_end,
            "status": (BillStatus.PENDING if request.meter_readings else BillStatus.DRAFT).value,
            "discountAmount": 0.0,
            "taxAmount": 0.0,
            "paidAmount": 0.0,
            "occupancyCount": request.occupancy_count,
            "notes": request.notes,
            "billItems": self._build_items(rental, request.meter_readings, bill_id),
            "createdAt": self.backend.now(),
            "updatedAt": self.backend.now(),
        }
        self._recalculate(bill)
        self.backend.bills[bill_id] = bill
        logger.info("[BILLS MOCK] Bill %s created for %s (%s)", bill_id, request.room_instance_id, bill["status"])
        return Bill.from_api(copy.deepcopy(bill))

    async def list_bills(self, params: Optional[Dict[str, Any]] = None, scope: str = "all") -> Page[Bill]:
        params = dict(params or {})

        def visible(bill: Dict[str, Any]) -> bool:
            rental = self.backend.rentals.get(bill["rentalId"]) or {}
            if scope == "tenant":
                return rental.get("tenantId") == self.user_id
            if scope == "landlord_by_month":
                if rental.get("ownerId") != self.user_id:
                    return False
                if params.get("billingPeriod") and bill["billingPeriod"] != params["billingPeriod"]:
                    return False
                if params.get("month") and int(params["month"]) != bill["billingMonth"]:
                    return False
                if params.get("year") and int(params["year"]) != bill["billingYear"]:
                    return False
                return True
            return self.user_id in (rental.get("ownerId"), rental.get("tenantId"))

        items = [b for b in self.backend.bills.values() if visible(b)]
        if params.get("status"):
            items = [b for b in items if b["status"] == params["status"]]
        if params.get("rentalId"):
            items = [b for b in items if b["rentalId"] == params["rentalId"]]
        items.sort(key=lambda b: b["billingPeriod"], reverse=True)
        return normalize_page(self._page(items, params), Bill.from_api)

    async def get_bill(self, bill_id: str) -> Bill:
        return Bill.from_api(copy.deepcopy(self._get(bill_id)))

    async def update_bill(self, bill_id: str, request: UpdateBillRequest) -> Bill:
        bill = self._get(bill_id)
        self._require_owner(bill)
        if bill["status"] == BillStatus.PAID.value:
            raise conflict("Paid bills cannot be edited")
        bill.update(request.to_payload())
        bill["updatedAt"] = self.backend.now()
        return Bill.from_api(copy.deepcopy(bill))

    async def delete_bill(self, bill_id: str) -> None:
        bill = self._get(bill_id)
        self._require_owner(bill)
        if bill["status"] == BillStatus.PAID.value:
            raise conflict("Paid bills cannot be deleted")
        del self.backend.bills[bill_id]

    async def mark_paid(self, bill_id: str) -> Bill:
        bill = self._get(bill_id)
        self._require_owner(bill)
        if bill["status"] in (BillStatus.PAID.value, BillStatus.CANCELLED.value):
            raise conflict(f"Bill in status {bill['status']} cannot be marked paid")
        if bill["status"] == BillStatus.DRAFT.value:
            raise conflict("Meter readings are required before payment")
        bill["status"] = BillStatus.PAID.value
        bill["paidAmount"] = bill["totalAmount"]
        bill["remainingAmount"] = 0.0
        bill["paidDate"] = self.backend.now()
        bill["updatedAt"] = self.backend.now()
        return Bill.from_api(copy.deepcopy(bill))

    async def update_meter_data(self, bill_id: str, readings: List[MeterReading],
                                occupancy_count: Optional[int] = None) -> Bill:
        bill = self._get(bill_id)
        self._require_owner(bill)
        if bill["status"] != BillStatus.DRAFT.value:
            raise conflict("Only draft bills accept meter readings")
        errors = validate_meter_readings(readings)
        if not readings:
            errors.append("at least one meter reading is required")
        if errors:
            raise bad_request(errors)

        rental = self.backend.rentals[bill["rentalId"]]
        bill["billItems"] = self._build_items(rental, readings, bill_id)
        if occupancy_count is not None:
            bill["occupancyCount"] = occupancy_count
        bill["status"] = BillStatus.PENDING.value
        self._recalculate(bill)
        bill["updatedAt"] = self.backend.now()
        return Bill.from_api(copy.deepcopy(bill))
