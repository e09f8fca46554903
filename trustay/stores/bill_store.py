"""Bill store: tenant / landlord bill lists, bill creation and payment."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from trustay.integrations.contracts.billing import (
    CreateBillRequest,
    UpdateBillRequest,
    validate_create_bill_request,
    validate_meter_readings,
)
from trustay.integrations.contracts.interfaces import Bill, BillsClient, MeterReading, PageMeta
from trustay.stores.base import BaseStore

logger = logging.getLogger(__name__)


class BillStore(BaseStore):
    def __init__(self, client: BillsClient) -> None:
        self.client = client

        self.bills: List[Bill] = []
        self.meta: Optional[PageMeta] = None
        self.current: Optional[Bill] = None

        self.loading = False
        self.loading_current = False
        self.submitting = False
        self.deleting = False
        self.marking_paid = False
        self.updating_meter = False

        self.error: Optional[str] = None
        self.error_current: Optional[str] = None
        self.submit_error: Optional[str] = None
        self.delete_error: Optional[str] = None
        self.mark_paid_error: Optional[str] = None
        self.meter_error: Optional[str] = None

    def _replace(self, bill: Bill) -> None:
        self.bills = [bill if b.id == bill.id else b for b in self.bills]
        if self.current is not None and self.current.id == bill.id:
            self.current = bill

    async def _load(self, params: Optional[Dict[str, Any]], scope: str) -> bool:
        ok, page = await self._guard("loading", "error", lambda: self.client.list_bills(params, scope=scope))
        if ok:
            self.bills = page.items
            self.meta = page.meta
        return ok

    async def load_bills(self, params: Optional[Dict[str, Any]] = None) -> bool:
        return await self._load(params, "all")

    async def load_tenant_bills(self, params: Optional[Dict[str, Any]] = None) -> bool:
        return await self._load(params, "tenant")

    async def load_landlord_bills_by_month(self, year: int, month: int, params: Optional[Dict[str, Any]] = None) -> bool:
        query = {"billingPeriod": f"{year:04d}-{month:02d}", **(params or {})}
        return await self._load(query, "landlord_by_month")

    async def load_by_id(self, bill_id: str) -> bool:
        ok, bill = await self._guard("loading_current", "error_current", lambda: self.client.get_bill(bill_id))
        if ok:
            self.current = bill
        return ok

    async def create_for_room(self, request: CreateBillRequest) -> Optional[Bill]:
        errors = validate_create_bill_request(request)
        if errors:
            self._reject("submit_error", errors)
            return None
        ok, bill = await self._guard("submitting", "submit_error", lambda: self.client.create_for_room(request))
        if ok:
            self.current = bill
            self.bills = [bill] + [b for b in self.bills if b.id != bill.id]
        return bill

    async def update(self, bill_id: str, request: UpdateBillRequest) -> bool:
        ok, bill = await self._guard("submitting", "submit_error", lambda: self.client.update_bill(bill_id, request))
        if ok:
            self._replace(bill)
        return ok

    async def update_meter_data(self, bill_id: str, readings: List[MeterReading],
                                occupancy_count: Optional[int] = None) -> bool:
        errors = validate_meter_readings(readings)
        if errors:
            return self._reject("meter_error", errors)
        ok, bill = await self._guard(
            "updating_meter", "meter_error",
            lambda: self.client.update_meter_data(bill_id, readings, occupancy_count),
        )
        if ok:
            self._replace(bill)
        return ok

    async def mark_paid(self, bill_id: str) -> bool:
        ok, bill = await self._guard("marking_paid", "mark_paid_error", lambda: self.client.mark_paid(bill_id))
        if ok:
            logger.info("Bill %s marked as paid", bill_id)
            self._replace(bill)
        return ok

    async def delete(self, bill_id: str) -> bool:
        ok, _ = await self._guard("deleting", "delete_error", lambda: self.client.delete_bill(bill_id))
        if ok:
            self.bills = [b for b in self.bills if b.id != bill_id]
            if self.current is not None and self.current.id == bill_id:
                self.current = None
        return ok

    def clear_errors(self) -> None:
        self.error = None
        self.error_current = None
        self.submit_error = None
        self.delete_error = None
        self.mark_paid_error = None
        self.meter_error = None
