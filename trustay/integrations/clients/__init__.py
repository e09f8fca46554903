"""
Integration clients: mock (in-memory) and real HTTP implementations.

select_backend() is the ONLY place that decides between the two.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import httpx

from trustay.integrations.clients.bundle import BackendClients
from trustay.utils.config_loader import AppConfig

logger = logging.getLogger(__name__)


def should_use_real_integrations(config: AppConfig) -> bool:
    mode = config.integrations.mode
    if mode == "real":
        return True
    if mode == "mock":
        return False
    return bool(os.getenv("TRUSTAY_API_URL"))


def select_backend(
    config: AppConfig,
    access_token: Optional[str] = None,
    refresh_token: Optional[str] = None,
    mock_backend=None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BackendClients:
    """
    Build the resource clients for one request.

    Real mode: every client shares one BackendHttpClient carrying the tokens.
    Mock mode: the access token is taken as the acting user id on `mock_backend`.
    """
    if should_use_real_integrations(config):
        from trustay.integrations.clients.real_http import (
            BackendHttpClient,
            RealBillsClient,
            RealChatClient,
            RealContractsClient,
            RealNotificationsClient,
            RealRentalsClient,
            RealRoommateApplicationsClient,
            TokenStore,
        )

        http = BackendHttpClient.from_config(
            config, tokens=TokenStore(access_token=access_token, refresh_token=refresh_token), transport=transport
        )
        return BackendClients(
            contracts=RealContractsClient(http),
            bills=RealBillsClient(http),
            rentals=RealRentalsClient(http),
            roommate_applications=RealRoommateApplicationsClient(http),
            chat=RealChatClient(http),
            notifications=RealNotificationsClient(http),
        )

    from trustay.integrations.clients.mocks import InMemoryBackend, mock_clients

    if mock_backend is None:
        logger.info("No mock backend supplied, starting one with demo data")
        mock_backend = InMemoryBackend.with_demo_data()
    return mock_clients(mock_backend, access_token or "")


__all__ = ["BackendClients", "select_backend", "should_use_real_integrations"]
