"""
Real Rentals HTTP Client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from trustay.integrations.clients.real_http.base import BackendHttpClient
from trustay.integrations.contracts.interfaces import Page, Rental, RentalsClient
from trustay.integrations.contracts.rentals import CreateRentalRequest, UpdateRentalRequest
from trustay.integrations.policy.response_wrappers import normalize_entity_response, normalize_page

_LIST_PATHS = {
    "all": "/api/rentals",
    "landlord": "/api/rentals/as-landlord",
    "tenant": "/api/rentals/as-tenant",
}


class RealRentalsClient(RentalsClient):
    def __init__(self, http: BackendHttpClient) -> None:
        self.http = http

    async def create_rental(self, request: CreateRentalRequest) -> Rental:
        raw = await self.http.post("/api/rentals", json=request.to_payload())
        return normalize_entity_response(raw, Rental.from_api)

    async def list_rentals(self, params: Optional[Dict[str, Any]] = None, scope: str = "all") -> Page[Rental]:
        path = _LIST_PATHS.get(scope)
        if path is None:
            raise ValueError(f"Unknown rental list scope '{scope}'")
        raw = await self.http.get(path, params=params)
        return normalize_page(raw, Rental.from_api)

    async def get_rental(self, rental_id: str) -> Rental:
        raw = await self.http.get(f"/api/rentals/{rental_id}")
        return normalize_entity_response(raw, Rental.from_api)

    async def update_rental(self, rental_id: str, request: UpdateRentalRequest) -> Rental:
        raw = await self.http.put(f"/api/rentals/{rental_id}", json=request.to_payload())
        return normalize_entity_response(raw, Rental.from_api)

    async def terminate_rental(self, rental_id: str, reason: str) -> Rental:
        raw = await self.http.post(f"/api/rentals/{rental_id}/terminate", json={"reason": reason})
        return normalize_entity_response(raw, Rental.from_api)

    async def renew_rental(self, rental_id: str, new_end_date: str) -> Rental:
        raw = await self.http.post(f"/api/rentals/{rental_id}/renew", json={"newEndDate": new_end_date})
        return normalize_entity_response(raw, Rental.from_api)
