"""Async HTTP client for the Saturday API.

Session state lives in the client's cookie jar: the server sets the
``auth_token`` cookie on login/register and clears it on logout or when it
rejects a token.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from typing import Any, Optional

import httpx

from saturday.models.enums import AvailabilityState

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


def _default_timeout() -> float:
    return max(float(os.getenv("CLIENT_TIMEOUT_SECONDS") or 10.0), 0.5)


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Any) -> None:
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class AuthenticationRequired(ApiError):
    """The server refused the session (missing, expired or invalid cookie)."""


def _detail(response: httpx.Response) -> Any:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict) and "detail" in payload:
        return payload["detail"]
    return payload


class SaturdayClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout if timeout is not None else _default_timeout(),
        )

    async def __aenter__(self) -> "SaturdayClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        response = await self._client.request(method, path, json=body, params=params)
        if response.status_code == 401:
            raise AuthenticationRequired(response.status_code, _detail(response))
        if response.status_code >= 400:
            logger.warning("saturday_request_failed status=%s method=%s path=%s", response.status_code, method, path)
            raise ApiError(response.status_code, _detail(response))
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("saturday_invalid_body status=%s method=%s path=%s", response.status_code, method, path)
            raise ApiError(response.status_code, "Invalid JSON response") from exc

    # Auth

    async def register(self, **fields: Any) -> dict[str, Any]:
        return await self._request("POST", "/api/auth/register", body=fields)

    async def login(self, login: str, password: str) -> dict[str, Any]:
        return await self._request("POST", "/api/auth/login", body={"email": login, "password": password})

    async def logout(self) -> None:
        await self._request("POST", "/api/auth/logout")

    async def me(self) -> dict[str, Any]:
        return await self._request("GET", "/api/auth/me")

    # Availability

    async def list_availability(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        if start is not None:
            params["startDate"] = start.isoformat()
        if end is not None:
            params["endDate"] = end.isoformat()
        return await self._request("GET", "/api/availability", params=params or None)

    async def set_availability(self, day: date, state: AvailabilityState) -> dict[str, Any]:
        return await self._request("PATCH", f"/api/availability/{day.isoformat()}", body={"state": state.value})

    async def clear_availability(self, day: date) -> None:
        await self._request("DELETE", f"/api/availability/{day.isoformat()}")

    # Directory

    async def school_users(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/api/users/school")
