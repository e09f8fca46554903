"""
Request-scoped dependencies for the BFF routers.

Process-wide objects (config, the in-memory mock backend, the message metadata
store) are created lazily once; tests swap them through
app.dependency_overrides.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, Request

from trustay.integrations.clients import BackendClients, select_backend
from trustay.integrations.clients.mocks import InMemoryBackend
from trustay.messaging.roommate_notifications import RoommateNotifier
from trustay.stores import ChatStore, ContractStore, RoommateApplicationStore
from trustay.utils.config_loader import AppConfig, load_app_config

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_app_config()


@lru_cache(maxsize=1)
def get_mock_backend() -> InMemoryBackend:
    logger.info("Starting in-memory backend with demo data")
    return InMemoryBackend.with_demo_data(page_size=get_config().pagination.default_limit)


@lru_cache(maxsize=1)
def get_metadata_store():
    """Redis-backed when REDIS_URL is configured, in-memory otherwise."""
    settings = get_config().message_metadata
    if settings.redis_url:
        from trustay.messaging.metadata_redis import MessageMetadataStore

        logger.info("Using Redis message metadata store")
        return MessageMetadataStore(
            url=settings.redis_url, key_prefix=settings.key_prefix, expiry_days=settings.expiry_days
        )

    from trustay.messaging.metadata import MessageMetadataStore

    return MessageMetadataStore(expiry_days=settings.expiry_days)


def get_access_token(request: Request, authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the accessToken cookie."""
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
        if token:
            return token
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


def get_refresh_token(request: Request) -> Optional[str]:
    return request.cookies.get(REFRESH_TOKEN_COOKIE) or None


def get_clients(
    access_token: Optional[str] = Depends(get_access_token),
    refresh_token: Optional[str] = Depends(get_refresh_token),
    config: AppConfig = Depends(get_config),
    mock_backend: InMemoryBackend = Depends(get_mock_backend),
) -> BackendClients:
    return select_backend(config, access_token=access_token, refresh_token=refresh_token, mock_backend=mock_backend)


def get_contract_store(clients: BackendClients = Depends(get_clients)) -> ContractStore:
    return ContractStore(clients.contracts)


def get_roommate_store(clients: BackendClients = Depends(get_clients)) -> RoommateApplicationStore:
    return RoommateApplicationStore(clients.roommate_applications)


def get_chat_store(clients: BackendClients = Depends(get_clients), metadata_store=Depends(get_metadata_store)) -> ChatStore:
    return ChatStore(clients.chat, metadata_store=metadata_store)


def get_notifier(clients: BackendClients = Depends(get_clients)) -> RoommateNotifier:
    return RoommateNotifier(clients.chat)
