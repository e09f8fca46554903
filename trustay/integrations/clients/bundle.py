from __future__ import annotations

from dataclasses import dataclass

from trustay.integrations.contracts.interfaces import (
    BillsClient,
    ChatClient,
    ContractsClient,
    NotificationsClient,
    RentalsClient,
    RoommateApplicationsClient,
)


@dataclass
class BackendClients:
    """Every resource client for one signed-in user, mock or real."""
    contracts: ContractsClient
    bills: BillsClient
    rentals: RentalsClient
    roommate_applications: RoommateApplicationsClient
    chat: ChatClient
    notifications: NotificationsClient
