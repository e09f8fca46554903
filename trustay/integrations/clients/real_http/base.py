"""
Shared transport for every real HTTP client.

One BackendHttpClient holds the base URL, timeout and the current user's tokens.
Resource clients (contracts, bills, ...) only build paths and payloads and hand
the parsed JSON to the response wrappers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from trustay.error_handler import ApiError
from trustay.utils.config_loader import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_USER_AGENT = "Trustay-Frontend/1.0"
REFRESH_PATH = "/api/auth/refresh"


@dataclass
class TokenStore:
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None


class BackendHttpClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        tokens: Optional[TokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("TRUSTAY_API_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.tokens = tokens or TokenStore()
        self._transport = transport

    @classmethod
    def from_config(cls, config: AppConfig, tokens: Optional[TokenStore] = None,
                    transport: Optional[httpx.AsyncBaseTransport] = None) -> "BackendHttpClient":
        return cls(
            base_url=config.api.base_url,
            timeout_seconds=config.api.timeout_seconds,
            user_agent=config.api.user_agent,
            tokens=tokens,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "User-Agent": self.user_agent}
        if self.tokens.access_token:
            headers["Authorization"] = f"Bearer {self.tokens.access_token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_seconds, transport=self._transport)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        raw: bool = False,
    ) -> Any:
        """
        Perform a request and return the decoded JSON body (None when empty).
        With raw=True the httpx.Response is returned instead, for binary downloads.
        """
        clean_params = {k: v for k, v in (params or {}).items() if v is not None and v != ""}
        response = await self._send(method, path, json=json, params=clean_params)

        if response.status_code == 401 and self.tokens.refresh_token:
            if await self._refresh_tokens():
                response = await self._send(method, path, json=json, params=clean_params)

        if response.is_error:
            raise _api_error_from_response(response)
        if raw:
            return response
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, raw: bool = False) -> Any:
        return await self.request("GET", path, params=params, raw=raw)

    async def post(self, path: str, json: Any = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, json=json, params=params)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def _send(self, method: str, path: str, *, json: Any, params: Dict[str, Any]) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, path, json=json, params=params or None, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("Backend request failed: %s %s (%s)", method, path, exc)
            raise ApiError(str(exc) or "Network error", status=None) from exc

    async def _refresh_tokens(self) -> bool:
        """One refresh attempt; on failure tokens are cleared and the original 401 stands."""
        try:
            async with self._client() as client:
                response = await client.post(
                    REFRESH_PATH,
                    json={"refreshToken": self.tokens.refresh_token},
                    headers={"Content-Type": "application/json", "User-Agent": self.user_agent},
                )
        except httpx.HTTPError as exc:
            logger.warning("Token refresh failed: %s", exc)
            self.tokens.clear()
            return False

        if response.is_error:
            logger.info("Token refresh rejected with status %s", response.status_code)
            self.tokens.clear()
            return False

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.warning("Token refresh returned an unreadable body")
            self.tokens.clear()
            return False
        access_token = data.get("access_token") or data.get("accessToken")
        if not access_token:
            self.tokens.clear()
            return False
        self.tokens.access_token = access_token
        refresh_token = data.get("refresh_token") or data.get("refreshToken")
        if refresh_token:
            self.tokens.refresh_token = refresh_token
        logger.info("Access token refreshed")
        return True


def _api_error_from_response(response: httpx.Response) -> ApiError:
    payload: Any
    try:
        payload = response.json()
    except ValueError:
        payload = response.text or None

    message = ""
    if isinstance(payload, str):
        message = payload
    elif isinstance(payload, dict):
        candidate = payload.get("message") or payload.get("error") or payload.get("msg")
        if isinstance(candidate, str):
            message = candidate
    if not message:
        message = f"Request failed with status code {response.status_code}"

    logger.info(
        "Backend error: status=%s url=%s message=%s",
        response.status_code, response.request.url, message,
    )
    return ApiError(message, status=response.status_code, payload=payload)
