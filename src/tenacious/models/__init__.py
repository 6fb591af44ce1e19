"""Data models for tenacious."""

from tenacious.models.asset import Asset, AssetNetwork, AssetTag, ObservationSource
from tenacious.models.finding import FINDING_FIELDS, CVSSScore, Finding, FindingDefinition
from tenacious.models.pagination import Pagination
from tenacious.models.plugin import Plugin, PluginAttribute, PluginOutput, PluginOutputResponse
from tenacious.models.scan import (
    Host,
    PersistedScan,
    Policy,
    PolicySettings,
    Scan,
    ScanDetail,
    ScanInfo,
    ScanSettings,
    ScanTemplate,
    Vulnerability,
)

__all__ = [
    "FINDING_FIELDS",
    "CVSSScore",
    "Asset",
    "AssetNetwork",
    "AssetTag",
    "Finding",
    "FindingDefinition",
    "Host",
    "ObservationSource",
    "Pagination",
    "PersistedScan",
    "Plugin",
    "PluginAttribute",
    "PluginOutput",
    "PluginOutputResponse",
    "Policy",
    "PolicySettings",
    "Scan",
    "ScanDetail",
    "ScanInfo",
    "ScanSettings",
    "ScanTemplate",
    "Vulnerability",
]
