"""Tests for authentication providers and client setup."""

import httpx
import pytest

from tenacious.auth import APIKeyAuth, AuthError, AuthProvider, SessionAuth
from tenacious.client import TenableClient, auth_from_settings
from tenacious.config import Settings, TenableSettings

BASE_URL = "https://nessus.test:8834"


class TestAPIKeyAuth:
    """Tests for APIKeyAuth."""

    def test_adds_header(self):
        """Test the X-ApiKeys header format."""
        request = httpx.Request("GET", f"{BASE_URL}/scans")

        APIKeyAuth("access", "secret").add_auth_headers(request)

        assert request.headers["X-ApiKeys"] == "accessKey=access;secretKey=secret"

    @pytest.mark.asyncio
    async def test_prepare_requires_both_keys(self):
        """Test missing keys are rejected during prepare."""
        async with httpx.AsyncClient() as client:
            with pytest.raises(AuthError):
                await APIKeyAuth("access", "").prepare(BASE_URL, client)

    def test_is_auth_provider(self):
        """Test providers satisfy the AuthProvider protocol."""
        assert isinstance(APIKeyAuth("a", "b"), AuthProvider)
        assert isinstance(SessionAuth("u", "p"), AuthProvider)


class TestSessionAuth:
    """Tests for SessionAuth."""

    @pytest.mark.asyncio
    async def test_session_token_used_on_requests(self, settings):
        """Test prepare opens a session and later requests carry its token."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path == "/session":
                return httpx.Response(200, json={"token": "tok-123"})
            return httpx.Response(200, json={"scans": []})

        auth = SessionAuth("admin", "hunter2")
        client = TenableClient(settings, auth=auth, transport=httpx.MockTransport(handler))
        async with client:
            await client.scans.get_scans()

        assert seen[0].method == "POST"
        assert seen[0].url.path == "/session"
        assert seen[1].headers["X-Cookie"] == "token=tok-123"

    @pytest.mark.asyncio
    async def test_prepare_failure(self, settings):
        """Test a rejected login fails entering the client."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "Invalid Credentials"})

        auth = SessionAuth("admin", "wrong")
        client = TenableClient(settings, auth=auth, transport=httpx.MockTransport(handler))

        with pytest.raises(AuthError) as exc_info:
            async with client:
                pass

        assert exc_info.value.status_code == 401

    def test_headers_before_prepare(self):
        """Test using the provider before prepare is an error."""
        with pytest.raises(AuthError):
            SessionAuth("u", "p").add_auth_headers(httpx.Request("GET", BASE_URL))


class TestAuthFromSettings:
    """Tests for auth provider selection."""

    def test_api_keys_preferred(self):
        """Test API keys win over username/password."""
        tenable = TenableSettings(
            access_key="ak", secret_key="sk", username="admin", password="pw"
        )

        auth = auth_from_settings(tenable)

        assert isinstance(auth, APIKeyAuth)
        assert auth.secret_key == "sk"

    def test_session_credentials(self):
        """Test username/password selects session auth."""
        auth = auth_from_settings(TenableSettings(username="admin", password="pw"))

        assert isinstance(auth, SessionAuth)

    def test_incomplete_api_keys_fall_back_to_session(self, monkeypatch):
        """Test an access key without a secret key is not used."""
        monkeypatch.delenv("TENABLE_SECRET_KEY", raising=False)

        auth = auth_from_settings(
            TenableSettings(access_key="ak", username="admin", password="pw")
        )

        assert isinstance(auth, SessionAuth)

    def test_no_credentials(self, monkeypatch):
        """Test missing credentials are reported."""
        for var in ("TENABLE_ACCESS_KEY", "TENABLE_SECRET_KEY", "TENABLE_USERNAME"):
            monkeypatch.delenv(var, raising=False)

        with pytest.raises(AuthError):
            TenableClient(Settings(tenable=TenableSettings(access_key=None, username=None)))
