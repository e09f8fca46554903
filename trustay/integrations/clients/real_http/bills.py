"""
Real Bills HTTP Client.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from trustay.integrations.clients.real_http.base import BackendHttpClient
from trustay.integrations.contracts.billing import CreateBillRequest, UpdateBillRequest
from trustay.integrations.contracts.interfaces import Bill, BillsClient, MeterReading, Page
from trustay.integrations.policy.response_wrappers import normalize_entity_response, normalize_page

_LIST_PATHS = {
    "all": "/api/bills",
    "tenant": "/api/bills/tenant/my-bills",
    "landlord_by_month": "/api/bills/landlord/by-month",
}


class RealBillsClient(BillsClient):
    def __init__(self, http: BackendHttpClient) -> None:
        self.http = http

    async def create_for_room(self, request: CreateBillRequest) -> Bill:
        raw = await self.http.post("/api/bills/create-for-room", json=request.to_payload())
        return normalize_entity_response(raw, Bill.from_api)

    async def list_bills(self, params: Optional[Dict[str, Any]] = None, scope: str = "all") -> Page[Bill]:
        path = _LIST_PATHS.get(scope)
        if path is None:
            raise ValueError(f"Unknown bill list scope '{scope}'")
        raw = await self.http.get(path, params=params)
        return normalize_page(raw, Bill.from_api)

    async def get_bill(self, bill_id: str) -> Bill:
        raw = await self.http.get(f"/api/bills/{bill_id}")
        return normalize_entity_response(raw, Bill.from_api)

    async def update_bill(self, bill_id: str, request: UpdateBillRequest) -> Bill:
        raw = await self.http.put(f"/api/bills/{bill_id}", json=request.to_payload())
        return normalize_entity_response(raw, Bill.from_api)

    async def delete_bill(self, bill_id: str) -> None:
        await self.http.delete(f"/api/bills/{bill_id}")

    async def mark_paid(self, bill_id: str) -> Bill:
        raw = await self.http.post(f"/api/bills/{bill_id}/mark-paid")
        return normalize_entity_response(raw, Bill.from_api)

    async def update_meter_data(self, bill_id: str, readings: List[MeterReading],
                                occupancy_count: Optional[int] = None) -> Bill:
        payload: Dict[str, Any] = {"billId": bill_id, "meterData": [r.to_payload() for r in readings]}
        if occupancy_count is not None:
            payload["occupancyCount"] = occupancy_count
        raw = await self.http.post("/api/bills/update-with-meter-data", json=payload)
        return normalize_entity_response(raw, Bill.from_api)
