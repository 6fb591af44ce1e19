"""Plugin lookup service."""

from tenacious.models.plugin import Plugin, PluginOutputResponse
from tenacious.utils.http_client import CallContext, PreparedRequest, RequestExecutor


class PluginService:
    """Service for plugin details and per-host plugin output."""

    def __init__(self, executor: RequestExecutor, base_url: str):
        self.executor = executor
        self.base_url = base_url

    async def get(self, plugin_id: int, *, ctx: CallContext | None = None) -> Plugin:
        """Get a plugin by ID."""
        request = PreparedRequest.build("GET", f"{self.base_url}/plugins/plugin/{plugin_id}")
        return await self.executor.execute(request, Plugin, ctx=ctx)

    async def get_output(
        self,
        scan_id: int,
        host_id: int,
        plugin_id: int,
        *,
        ctx: CallContext | None = None,
    ) -> PluginOutputResponse:
        """Get the output of a plugin run against a scan host.

        Args:
            scan_id: Scan ID.
            host_id: Host ID within the scan.
            plugin_id: Plugin ID.
            ctx: Cancellation and deadline for the call.

        Returns:
            Plugin outputs for the host.
        """
        path = f"/scans/{scan_id}/hosts/{host_id}/plugins/{plugin_id}"
        request = PreparedRequest.build("GET", f"{self.base_url}{path}")
        return await self.executor.execute(request, PluginOutputResponse, ctx=ctx)
