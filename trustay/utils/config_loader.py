"""
Application configuration loader (backend API, integrations mode, message metadata).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class BackendApiConfig(BaseModel):
    base_url: str = "http://localhost:3000"
    timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    user_agent: str = "Trustay-Frontend/1.0"


class IntegrationsConfig(BaseModel):
    mode: Literal["auto", "mock", "real"] = "auto"


class MessageMetadataConfig(BaseModel):
    expiry_days: int = Field(default=30, ge=1, le=365)
    redis_url: Optional[str] = None
    key_prefix: str = "trustay_message_metadata"


class PaginationConfig(BaseModel):
    default_limit: int = Field(default=12, ge=1, le=100)


class AppConfig(BaseModel):
    api: BackendApiConfig = Field(default_factory=BackendApiConfig)
    integrations: IntegrationsConfig = Field(default_factory=IntegrationsConfig)
    message_metadata: MessageMetadataConfig = Field(default_factory=MessageMetadataConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)


def _apply_env_overrides(data: dict) -> dict:
    api = data.setdefault("api", {})
    if os.getenv("TRUSTAY_API_URL"):
        api["base_url"] = os.environ["TRUSTAY_API_URL"].rstrip("/")
    if os.getenv("TRUSTAY_API_TIMEOUT"):
        api["timeout_seconds"] = os.environ["TRUSTAY_API_TIMEOUT"]

    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    if mode:
        data.setdefault("integrations", {})["mode"] = mode

    if os.getenv("REDIS_URL"):
        data.setdefault("message_metadata", {})["redis_url"] = os.environ["REDIS_URL"]
    return data


def load_app_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load and validate application configuration.

    Values come from config/trustay.yml (when present) and are overridden by
    environment variables (TRUSTAY_API_URL, TRUSTAY_API_TIMEOUT,
    INTEGRATIONS_MODE, REDIS_URL).

    Raises:
        ValidationError: If the merged config doesn't match the schema
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "trustay.yml"

    data: dict = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info("Config file %s not found, using defaults", config_path)

    data = _apply_env_overrides(data)

    try:
        cfg = AppConfig(**data)
        logger.info("Loaded app config (api=%s, mode=%s)", cfg.api.base_url, cfg.integrations.mode)
        return cfg
    except ValidationError as e:
        logger.error("App config validation failed: %s", e)
        raise
