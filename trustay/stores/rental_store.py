"""Rental store."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from trustay.integrations.contracts.interfaces import PageMeta, Rental, RentalsClient
from trustay.integrations.contracts.rentals import CreateRentalRequest, UpdateRentalRequest, validate_create_rental_request
from trustay.stores.base import BaseStore


class RentalStore(BaseStore):
    def __init__(self, client: RentalsClient) -> None:
        self.client = client

        self.rentals: List[Rental] = []
        self.landlord_rentals: List[Rental] = []
        self.tenant_rentals: List[Rental] = []
        self.meta: Optional[PageMeta] = None
        self.current: Optional[Rental] = None

        self.loading = False
        self.loading_landlord = False
        self.loading_tenant = False
        self.loading_current = False
        self.submitting = False

        self.error: Optional[str] = None
        self.error_landlord: Optional[str] = None
        self.error_tenant: Optional[str] = None
        self.error_current: Optional[str] = None
        self.submit_error: Optional[str] = None

    async def load_rentals(self, params: Optional[Dict[str, Any]] = None) -> bool:
        ok, page = await self._guard("loading", "error", lambda: self.client.list_rentals(params, scope="all"))
        if ok:
            self.rentals = page.items
            self.meta = page.meta
        return ok

    async def load_landlord_rentals(self, params: Optional[Dict[str, Any]] = None) -> bool:
        ok, page = await self._guard(
            "loading_landlord", "error_landlord", lambda: self.client.list_rentals(params, scope="landlord")
        )
        if ok:
            self.landlord_rentals = page.items
        return ok

    async def load_tenant_rentals(self, params: Optional[Dict[str, Any]] = None) -> bool:
        ok, page = await self._guard(
            "loading_tenant", "error_tenant", lambda: self.client.list_rentals(params, scope="tenant")
        )
        if ok:
            self.tenant_rentals = page.items
        return ok

    async def load_by_id(self, rental_id: str) -> bool:
        ok, rental = await self._guard("loading_current", "error_current", lambda: self.client.get_rental(rental_id))
        if ok:
            self.current = rental
        return ok

    def _replace(self, rental: Rental) -> None:
        for attr in ("rentals", "landlord_rentals", "tenant_rentals"):
            setattr(self, attr, [rental if r.id == rental.id else r for r in getattr(self, attr)])
        self.current = rental

    async def create(self, request: CreateRentalRequest) -> bool:
        errors = validate_create_rental_request(request)
        if errors:
            return self._reject("submit_error", errors)
        ok, rental = await self._guard("submitting", "submit_error", lambda: self.client.create_rental(request))
        if ok:
            self.current = rental
            self.landlord_rentals = [rental] + self.landlord_rentals
        return ok

    async def update(self, rental_id: str, request: UpdateRentalRequest) -> bool:
        ok, rental = await self._guard("submitting", "submit_error", lambda: self.client.update_rental(rental_id, request))
        if ok:
            self._replace(rental)
        return ok

    async def terminate(self, rental_id: str, reason: str) -> bool:
        ok, rental = await self._guard("submitting", "submit_error", lambda: self.client.terminate_rental(rental_id, reason))
        if ok:
            self._replace(rental)
        return ok

    async def renew(self, rental_id: str, new_end_date: str) -> bool:
        ok, rental = await self._guard("submitting", "submit_error", lambda: self.client.renew_rental(rental_id, new_end_date))
        if ok:
            self._replace(rental)
        return ok
