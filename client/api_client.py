"""Async client for the StaffDesk API.

Calls that come back 401 while a session is held share one refresh request;
each call is then retried once with the new access token.
"""
import asyncio
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger("staffdesk.client")


class ApiError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return response.reason_phrase


class ApiClient:
    def __init__(self, base_url: str, *, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 30.0):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.access_token: Optional[str] = None
        self.user: Optional[dict] = None
        self._refresh_task: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---- session ----

    def _store_session(self, payload: dict) -> None:
        self.access_token = payload["access_token"]
        self.user = payload.get("user")

    def clear_session(self) -> None:
        self.access_token = None
        self.user = None
        self._http.cookies.clear()

    async def login(self, email: str, password: str) -> dict:
        response = await self._http.post("/auth/login", json={"email": email, "password": password})
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        payload = response.json()
        self._store_session(payload)
        return payload

    async def logout(self) -> None:
        try:
            await self._http.post("/auth/logout")
        finally:
            self.clear_session()

    async def _do_refresh(self) -> bool:
        response = await self._http.post("/auth/refresh")
        if response.is_error:
            logger.info("token refresh failed with %s, clearing session", response.status_code)
            self.clear_session()
            return False
        self._store_session(response.json())
        return True

    async def refresh(self) -> bool:
        """Refresh the access token; concurrent callers await the same request."""
        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._do_refresh())
            self._refresh_task.add_done_callback(self._refresh_done)
        return await asyncio.shield(self._refresh_task)

    def _refresh_done(self, task: asyncio.Task) -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    # ---- requests ----

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return await self._http.request(method, url, headers=headers, **kwargs)

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        held_token = self.access_token
        response = await self._send(method, url, **kwargs)
        if response.status_code == 401 and held_token:
            # someone else may have refreshed while this call was in flight
            if self.access_token == held_token and not await self.refresh():
                raise ApiError(401, _error_message(response))
            if self.access_token is None:
                raise ApiError(401, _error_message(response))
            response = await self._send(method, url, **kwargs)
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response

    async def get(self, url: str, **kwargs) -> Any:
        return (await self.request("GET", url, **kwargs)).json()

    async def post(self, url: str, **kwargs) -> Any:
        response = await self.request("POST", url, **kwargs)
        return response.json() if response.content else None

    async def patch(self, url: str, **kwargs) -> Any:
        return (await self.request("PATCH", url, **kwargs)).json()

    async def put(self, url: str, **kwargs) -> Any:
        return (await self.request("PUT", url, **kwargs)).json()

    async def delete(self, url: str, **kwargs) -> None:
        await self.request("DELETE", url, **kwargs)

    async def download(self, url: str, method: str = "GET", **kwargs) -> bytes:
        return (await self.request(method, url, **kwargs)).content
