# foody/client/api.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .storage import MemoryStorage

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class ApiError(Exception):
    """A failed API call.

    ``status_code`` is None when the server was never reached; ``message``
    is the server's ``{"message": ...}`` text when it sent one.
    """

    def __init__(self, status_code: Optional[int], message: Optional[str] = None):
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message


class FoodyApi:
    def __init__(
        self,
        base_url: str,
        storage=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.storage = storage if storage is not None else MemoryStorage()
        self._transport = transport

    # -------------------
    # Session token
    # -------------------
    @property
    def token(self) -> Optional[str]:
        result = self.storage.get_item(TOKEN_KEY)
        if not result.ok:
            logger.warning("Failed to read session token: %s", result.error)
            return None
        return result.value

    def save_token(self, token: str) -> None:
        result = self.storage.set_item(TOKEN_KEY, token)
        if not result.ok:
            logger.warning("Failed to save session token: %s", result.error)

    def logout(self) -> None:
        self.storage.remove_item(TOKEN_KEY)

    # -------------------
    # Transport
    # -------------------
    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        auth: bool = False,
    ) -> Any:
        headers: Dict[str, str] = {}
        if auth:
            token = self.token
            if token:
                headers["Authorization"] = f"Bearer {token}"

        try:
            async with httpx.AsyncClient(base_url=self.base_url, transport=self._transport) as client:
                resp = await client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(None) from e

        if resp.is_error:
            message = None
            try:
                body = resp.json()
                if isinstance(body, dict):
                    message = body.get("message")
            except ValueError:
                pass
            raise ApiError(resp.status_code, message)

        try:
            return resp.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise ApiError(resp.status_code) from e

    # -------------------
    # Auth
    # -------------------
    async def register(self, username: str, password: str) -> str:
        body = await self._request("POST", "/auth/register", json={"username": username, "password": password})
        return body.get("message") or "User registered successfully"

    async def login(self, username: str, password: str) -> str:
        body = await self._request("POST", "/auth/login", json={"username": username, "password": password})
        token = body["token"]
        self.save_token(token)
        return token

    # -------------------
    # Catalog / orders / profile
    # -------------------
    async def list_foods(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/foods")

    async def place_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/orders", json=payload, auth=True)

    async def my_orders(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/orders/my-orders", auth=True)

    async def profile(self) -> Dict[str, Any]:
        return await self._request("GET", "/users/profile", auth=True)

    async def stats(self) -> Dict[str, Any]:
        return await self._request("GET", "/users/stats", auth=True)
