"""Pytest configuration and fixtures for tenacious tests."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from tenacious.auth import APIKeyAuth
from tenacious.client import TenableClient
from tenacious.config import Settings
from tenacious.utils.http_client import CallContext, RequestExecutor, RetryPolicy

BASE_URL = "https://tenable.test"

Handler = Callable[[httpx.Request], Any]


class RecordingContext(CallContext):
    """Call context that records waits instead of sleeping."""

    def __init__(self) -> None:
        super().__init__()
        self.waits: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.waits.append(seconds)


@pytest.fixture
def recording_ctx():
    """Call context capturing retry waits."""
    return RecordingContext()


@pytest_asyncio.fixture
async def make_executor():
    """Factory building an executor over a mock transport.

    Clients opened by the factory are closed when the test ends.
    """
    clients: list[httpx.AsyncClient] = []

    def _make(
        handler: Handler,
        policy: RetryPolicy | None = None,
        auth: Any = None,
    ) -> RequestExecutor:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return RequestExecutor(client, auth or APIKeyAuth("ak", "sk"), policy or RetryPolicy())

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def settings():
    """Settings pointing at a fake API with fast retries."""
    return Settings(
        log_level="DEBUG",
        tenable={"base_url": BASE_URL, "access_key": "ak", "secret_key": "sk"},
        retry={"max_attempts": 10, "min_backoff": 0.001, "max_backoff": 0.01, "jitter": False},
    )


@pytest.fixture
def make_client(settings):
    """Factory building a TenableClient over a mock transport."""

    def _make(handler: Handler, auth: Any = None) -> TenableClient:
        return TenableClient(settings, auth=auth, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def sample_finding():
    """Sample finding from the v3 findings search API."""
    return {
        "output": "The remote host is running OpenSSH 7.4",
        "id": "f-0001",
        "severity": 3,
        "port": 22,
        "protocol": "TCP",
        "service": "ssh",
        "definition": {
            "id": 187201,
            "name": "OpenSSH < 9.6 Multiple Vulnerabilities",
            "description": "The version of OpenSSH installed is affected by multiple issues.",
            "synopsis": "The SSH server is affected by multiple vulnerabilities.",
            "solution": "Upgrade to OpenSSH 9.6 or later.",
            "cvss3": {"base_score": 6.5},
            "cvss2": {"base_score": 5.0},
            "cwe": ["CWE-354"],
            "see_also": ["https://www.openssh.com/txt/release-9.6"],
        },
    }


@pytest.fixture
def sample_asset():
    """Sample asset from the v3 assets search API."""
    return {
        "id": "0f6c1a3e-2b7d-4c1e-9a5b-1c2d3e4f5a6b",
        "name": "web-01",
        "types": ["host"],
        "sources": ["NESSUS_SCAN"],
        "created": "2024-01-10T08:00:00.000Z",
        "observation_sources": [
            {
                "first_observed": "2024-01-10T08:00:00.000Z",
                "last_observed": "2024-03-01T12:30:00.000Z",
                "name": "NESSUS_SCAN",
            }
        ],
        "is_licensed": True,
        "fqdns": ["web-01.example.com"],
        "tags": [{"id": "t1", "category": "Env", "value": "prod", "type": "static"}],
        "network": {"id": "00000000-0000-0000-0000-000000000000", "name": "Default"},
        "first_observed": "2024-01-10T08:00:00.000Z",
        "display_fqdn": "web-01.example.com",
        "is_deleted": False,
        "last_observed": "2024-03-01T12:30:00.000Z",
        "updated": "2024-03-01T12:30:00.000Z",
    }


@pytest.fixture
def sample_scan_detail():
    """Sample scan detail response."""
    return {
        "info": {"status": "completed"},
        "hosts": [{"host_id": 2, "hostname": "10.0.0.5"}],
        "vulnerabilities": [
            {
                "vuln_index": 0,
                "severity": 1,
                "plugin_name": "SSL Certificate Expiry",
                "count": 1,
                "plugin_id": 15901,
                "plugin_family": "General",
            },
            {
                "vuln_index": 1,
                "severity": 4,
                "plugin_name": "Apache Log4j RCE",
                "count": 2,
                "plugin_id": 156014,
                "plugin_family": "Misc.",
            },
        ],
    }
