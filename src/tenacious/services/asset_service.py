"""Asset and findings service (Tenable.io v3 API).

Search endpoints take a filter body and return paginated results; see
:mod:`tenacious.utils.pagination`.
"""

from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

from tenacious.models.asset import Asset
from tenacious.models.finding import FINDING_FIELDS, Finding
from tenacious.models.pagination import Pagination
from tenacious.utils.http_client import (
    CallContext,
    HTTPClientError,
    PreparedRequest,
    RequestExecutor,
)
from tenacious.utils.pagination import collect_pages, next_page_body

# The v3 search endpoints reject requests without an explicit Accept header.
JSON_HEADERS = {"Accept": "application/json"}


class AssetNotFoundError(HTTPClientError):
    """No asset matched the requested name."""


class AmbiguousAssetError(HTTPClientError):
    """More than one asset matched the requested name."""


class _AssetsEnvelope(BaseModel):
    assets: list[Asset] | None = None


class _FindingsEnvelope(BaseModel):
    findings: list[Finding] | None = None
    pagination: Pagination = Field(default_factory=Pagination)


def _name_filter(prop: str, name: str) -> dict[str, Any]:
    return {"and": [{"property": prop, "operator": "eq", "value": name}]}


class AssetService:
    """Service for asset lookup and host findings."""

    def __init__(self, executor: RequestExecutor, base_url: str):
        """Initialize asset service.

        Args:
            executor: Request executor shared by the client.
            base_url: API base URL without trailing slash.
        """
        self.executor = executor
        self.base_url = base_url

    async def get_by_name(self, name: str, *, ctx: CallContext | None = None) -> Asset:
        """Get the single asset with the given name.

        Args:
            name: Asset name.
            ctx: Cancellation and deadline for the call.

        Returns:
            The matching asset.

        Raises:
            AssetNotFoundError: If no asset matches.
            AmbiguousAssetError: If more than one asset matches.
        """
        request = PreparedRequest.build(
            "POST",
            f"{self.base_url}/api/v3/assets/search",
            payload={"filter": _name_filter("name", name)},
            headers=JSON_HEADERS,
        )
        data = await self.executor.execute(request, _AssetsEnvelope, ctx=ctx)
        assets = data.assets or []

        if not assets:
            raise AssetNotFoundError(f"No assets matching name: {name}")
        if len(assets) > 1:
            raise AmbiguousAssetError(f"More than one asset matching name: {name} ({len(assets)})")
        return assets[0]

    async def get_findings(self, name: str, *, ctx: CallContext | None = None) -> list[Finding]:
        """Get every finding for the asset with the given name.

        Pages are fetched in order until the API returns an empty cursor.
        A failure on any page fails the whole call.

        Args:
            name: Asset name.
            ctx: Cancellation and deadline for the call.

        Returns:
            All findings, in the order the API returned them.
        """
        first = PreparedRequest.build(
            "POST",
            f"{self.base_url}/api/v3/findings/vulnerabilities/host/search",
            payload={"filter": _name_filter("asset.name", name), "fields": FINDING_FIELDS},
            headers=JSON_HEADERS,
        )

        async def fetch_page(cursor: str | None) -> tuple[list[Finding], str]:
            # Follow-up pages replace the filter with the cursor alone.
            request = first if cursor is None else first.with_body(next_page_body(cursor))
            data = await self.executor.execute(request, _FindingsEnvelope, ctx=ctx)
            return data.findings or [], data.pagination.next

        findings = await collect_pages(fetch_page)
        logger.info(f"Fetched {len(findings)} findings for asset {name}")
        return findings
