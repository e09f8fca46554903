"""
Mock integration clients.

These clients return realistic responses from an in-memory backend without calling any external API.
They are used when:
- The Trustay backend is not reachable (local development)
- We want to test stores, the signing workflow and the API end-to-end without network access

Important:
- Mock clients follow the SAME interfaces as the real HTTP clients.
- Mock clients return data shaped according to trustay/integrations/contracts/*

Switching to real:
trustay.integrations.clients.select_backend picks real_http/* implementations when configured.
"""

from trustay.integrations.clients.bundle import BackendClients

from .backend import InMemoryBackend
from .bills import MockBillsClient
from .chat import MockChatClient
from .contracts import MockContractsClient
from .notifications import MockNotificationsClient
from .rentals import MockRentalsClient
from .roommate_applications import MockRoommateApplicationsClient


def mock_clients(backend: InMemoryBackend, user_id: str) -> BackendClients:
    """Clients acting as `user_id` against a shared in-memory backend."""
    return BackendClients(
        contracts=MockContractsClient(backend, user_id),
        bills=MockBillsClient(backend, user_id),
        rentals=MockRentalsClient(backend, user_id),
        roommate_applications=MockRoommateApplicationsClient(backend, user_id),
        chat=MockChatClient(backend, user_id),
        notifications=MockNotificationsClient(backend, user_id),
    )


__all__ = [
    "InMemoryBackend", "mock_clients",
    "MockBillsClient", "MockChatClient", "MockContractsClient",
    "MockNotificationsClient", "MockRentalsClient", "MockRoommateApplicationsClient",
]
