"""Tenable API client.

Owns the HTTP transport and the auth provider, and exposes the endpoint
services. Use it as an async context manager::

    async with TenableClient(get_settings()) as client:
        scans = await client.scans.get_scans()
"""

from contextlib import AsyncExitStack
from types import TracebackType

import httpx
from loguru import logger

from tenacious import __version__
from tenacious.auth import APIKeyAuth, AuthError, AuthProvider, SessionAuth
from tenacious.config import Settings, TenableSettings
from tenacious.services import AssetService, PluginService, ScanService
from tenacious.utils.http_client import RequestExecutor, RetryPolicy, create_http_client


def auth_from_settings(settings: TenableSettings) -> AuthProvider:
    """Pick an auth provider from the configured credentials.

    API keys take precedence over username/password.

    Raises:
        AuthError: If no credentials are configured.
    """
    access_key, secret_key = settings.access_key, settings.secret_key
    if access_key is not None and secret_key is not None:
        return APIKeyAuth(access_key, secret_key.get_secret_value())

    username, password = settings.username, settings.password
    if username is not None and password is not None:
        return SessionAuth(username, password.get_secret_value())

    raise AuthError(
        "No credentials configured: set TENABLE_ACCESS_KEY/TENABLE_SECRET_KEY "
        "or TENABLE_USERNAME/TENABLE_PASSWORD"
    )


class TenableClient:
    """Entry point for the Tenable.io / Nessus API."""

    scans: ScanService
    plugins: PluginService
    assets: AssetService

    def __init__(
        self,
        settings: Settings,
        auth: AuthProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Application settings.
            auth: Auth provider; derived from settings if omitted.
            transport: Custom httpx transport (mostly for tests).
        """
        self.settings = settings
        self.base_url = settings.tenable.base_url
        self.auth = auth or auth_from_settings(settings.tenable)
        self.policy = RetryPolicy.from_settings(settings.retry)
        self._transport = transport
        self._stack: AsyncExitStack | None = None

    async def __aenter__(self) -> "TenableClient":
        stack = AsyncExitStack()
        http = await stack.enter_async_context(
            create_http_client(
                timeout=self.settings.tenable.timeout,
                verify=self.settings.tenable.verify_ssl,
                transport=self._transport,
                headers={"User-Agent": f"tenacious/{__version__}"},
            )
        )

        try:
            await self.auth.prepare(self.base_url, http)
        except BaseException:
            await stack.aclose()
            raise

        executor = RequestExecutor(http, self.auth, self.policy)
        self.scans = ScanService(executor, self.base_url)
        self.plugins = PluginService(executor, self.base_url)
        self.assets = AssetService(executor, self.base_url)
        self._stack = stack

        logger.debug(f"Connected to {self.base_url}")
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._stack is not None:
            await self._stack.aclose()
            self._stack = None
