"""Authentication providers for the Tenable API.

A provider is prepared once against the base URL and transport, then asked
to add its headers to every outgoing request, retries included.
"""

from typing import Protocol, runtime_checkable

import httpx
from loguru import logger

from tenacious.utils.http_client import HTTPClientError


class AuthError(HTTPClientError):
    """Authentication could not be set up."""


@runtime_checkable
class AuthProvider(Protocol):
    async def prepare(self, base_url: str, client: httpx.AsyncClient) -> None: ...

    def add_auth_headers(self, request: httpx.Request) -> None: ...


class APIKeyAuth:
    """Tenable.io API key authentication (``X-ApiKeys`` header)."""

    def __init__(self, access_key: str, secret_key: str):
        self.access_key = access_key
        self.secret_key = secret_key

    async def prepare(self, base_url: str, client: httpx.AsyncClient) -> None:
        if not self.access_key or not self.secret_key:
            raise AuthError("Both access key and secret key are required")

    def add_auth_headers(self, request: httpx.Request) -> None:
        request.headers["X-ApiKeys"] = f"accessKey={self.access_key};secretKey={self.secret_key}"


class SessionAuth:
    """Nessus username/password authentication.

    ``prepare`` opens a session and keeps its token; every request then
    carries it in the ``X-Cookie`` header.
    """

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password
        self.token: str | None = None

    async def prepare(self, base_url: str, client: httpx.AsyncClient) -> None:
        """Open a session against ``base_url``.

        Raises:
            AuthError: If the session cannot be created.
        """
        logger.debug(f"Opening session at {base_url}/session as {self.username}")
        try:
            response = await client.post(
                f"{base_url}/session",
                json={"username": self.username, "password": self.password},
            )
        except httpx.RequestError as e:
            raise AuthError(f"Failed to open session: {e}") from e

        if response.status_code >= 300:
            raise AuthError(
                f"Failed to open session: HTTP {response.status_code}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AuthError(f"Failed to read session response: {e}", response.status_code) from e
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AuthError("Session response carried no token", response.status_code)
        self.token = token

    def add_auth_headers(self, request: httpx.Request) -> None:
        if self.token is None:
            raise AuthError("Session auth used before prepare()")
        request.headers["X-Cookie"] = f"token={self.token}"
