"""Scan management service.

Covers scan templates, scan lifecycle (create, launch, stop, delete),
scan listing and details, and scan policies.
"""

from loguru import logger
from pydantic import BaseModel

from tenacious.models.scan import PersistedScan, Policy, Scan, ScanDetail, ScanTemplate
from tenacious.utils.http_client import CallContext, PreparedRequest, RequestExecutor


class _TemplatesEnvelope(BaseModel):
    templates: list[ScanTemplate] | None = None


class _ScansEnvelope(BaseModel):
    scans: list[PersistedScan] | None = None


class _ScanEnvelope(BaseModel):
    scan: PersistedScan


class ScanService:
    """Service for the scans, scan editor and policies endpoints."""

    def __init__(self, executor: RequestExecutor, base_url: str):
        """Initialize scan service.

        Args:
            executor: Request executor shared by the client.
            base_url: API base URL without trailing slash.
        """
        self.executor = executor
        self.base_url = base_url

    async def get_templates(self, *, ctx: CallContext | None = None) -> list[ScanTemplate]:
        """Get the scan templates available to the account."""
        request = PreparedRequest.build("GET", f"{self.base_url}/editor/scan/templates")
        data = await self.executor.execute(request, _TemplatesEnvelope, ctx=ctx)
        return data.templates or []

    async def launch(self, scan_id: int, *, ctx: CallContext | None = None) -> None:
        """Launch the scan with the given ID."""
        logger.info(f"Launching scan {scan_id}")
        request = PreparedRequest.build("POST", f"{self.base_url}/scans/{scan_id}/launch")
        await self.executor.execute(request, ctx=ctx)

    async def stop(self, scan_id: int, *, ctx: CallContext | None = None) -> None:
        """Stop the scan with the given ID."""
        logger.info(f"Stopping scan {scan_id}")
        request = PreparedRequest.build("POST", f"{self.base_url}/scans/{scan_id}/stop")
        await self.executor.execute(request, ctx=ctx)

    async def delete(self, scan_id: int, *, ctx: CallContext | None = None) -> None:
        """Delete the scan with the given ID."""
        logger.info(f"Deleting scan {scan_id}")
        request = PreparedRequest.build("DELETE", f"{self.base_url}/scans/{scan_id}")
        await self.executor.execute(request, ctx=ctx)

    async def create(self, scan: Scan, *, ctx: CallContext | None = None) -> PersistedScan:
        """Create a scan.

        Args:
            scan: Scan definition.
            ctx: Cancellation and deadline for the call.

        Returns:
            The scan as persisted by the API.
        """
        request = PreparedRequest.build(
            "POST",
            f"{self.base_url}/scans",
            payload=scan.to_payload(),
        )
        data = await self.executor.execute(request, _ScanEnvelope, ctx=ctx)
        logger.info(f"Created scan {data.scan.id} ({data.scan.name})")
        return data.scan

    async def get_scans(
        self,
        last_modification_date: int = 0,
        *,
        ctx: CallContext | None = None,
    ) -> list[PersistedScan]:
        """List scans.

        Args:
            last_modification_date: Only scans modified after this Unix time; 0 for all.
            ctx: Cancellation and deadline for the call.

        Returns:
            Matching scans.
        """
        params = {}
        if last_modification_date > 0:
            params["last_modification_date"] = str(last_modification_date)

        request = PreparedRequest.build("GET", f"{self.base_url}/scans", params=params)
        data = await self.executor.execute(request, _ScansEnvelope, ctx=ctx)
        return data.scans or []

    async def get(self, scan_id: int, *, ctx: CallContext | None = None) -> ScanDetail:
        """Get scan details by ID."""
        request = PreparedRequest.build("GET", f"{self.base_url}/scans/{scan_id}")
        detail: ScanDetail = await self.executor.execute(request, ScanDetail, ctx=ctx)
        detail.id = scan_id
        return detail

    async def get_policy(self, policy_id: int, *, ctx: CallContext | None = None) -> Policy:
        """Get a scan policy by ID."""
        request = PreparedRequest.build("GET", f"{self.base_url}/policies/{policy_id}")
        policy: Policy = await self.executor.execute(request, Policy, ctx=ctx)
        policy.id = policy_id
        return policy
