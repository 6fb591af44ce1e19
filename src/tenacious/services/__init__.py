"""Services for the Tenable API endpoints."""

from tenacious.services.asset_service import AmbiguousAssetError, AssetNotFoundError, AssetService
from tenacious.services.plugin_service import PluginService
from tenacious.services.scan_service import ScanService

__all__ = [
    "AmbiguousAssetError",
    "AssetNotFoundError",
    "AssetService",
    "PluginService",
    "ScanService",
]
