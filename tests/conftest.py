"""Pytest fixtures: a seeded in-memory backend, per-user mock clients and the API test client."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from trustay.integrations.clients.mocks import InMemoryBackend, mock_clients
from trustay.messaging.metadata import MessageMetadataStore
from trustay.utils.config_loader import AppConfig, IntegrationsConfig

FIXED_NOW = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
DEMO_OTP = "123456"
SIGNATURE = "data:image/png;base64,iVBORw0KGgo="


@pytest.fixture
def backend():
    """Demo data with a fixed clock and a predictable OTP."""
    return InMemoryBackend.with_demo_data(clock=lambda: FIXED_NOW, otp_generator=lambda: DEMO_OTP)


@pytest.fixture
def landlord(backend):
    return mock_clients(backend, "landlord-1")


@pytest.fixture
def tenant(backend):
    return mock_clients(backend, "tenant-1")


@pytest.fixture
def applicant(backend):
    return mock_clients(backend, "applicant-1")


@pytest.fixture
def metadata_store():
    return MessageMetadataStore()


@pytest.fixture
def api_client(backend, metadata_store):
    from trustay.api.dependencies import get_config, get_metadata_store, get_mock_backend
    from trustay.api.main import app

    app.dependency_overrides[get_config] = lambda: AppConfig(integrations=IntegrationsConfig(mode="mock"))
    app.dependency_overrides[get_mock_backend] = lambda: backend
    app.dependency_overrides[get_metadata_store] = lambda: metadata_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
