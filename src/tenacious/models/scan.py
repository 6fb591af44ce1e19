"""Scan, scan template and policy models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PersistedScan(BaseModel):
    """Scan as stored by the API."""

    id: int = Field(..., description="Scan ID")
    uuid: str = Field(default="", description="Scan UUID")
    name: str = Field(default="", description="Scan name")
    status: str = Field(default="", description="Current scan status")
    creation_date: int = Field(default=0, description="Creation time (Unix seconds)")
    last_modification_date: int = Field(
        default=0,
        description="Last modification time (Unix seconds)",
    )
    owner: str = Field(default="", description="Scan owner")


class Vulnerability(BaseModel):
    """Per-plugin vulnerability summary inside a scan."""

    model_config = ConfigDict(populate_by_name=True)

    vulnerability_index: int = Field(default=0, alias="vuln_index")
    severity: int = Field(default=0, ge=0, le=4, description="Severity (0 info - 4 critical)")
    plugin_name: str = Field(default="")
    count: int = Field(default=0, description="Number of occurrences")
    plugin_id: int = Field(default=0)
    plugin_family: str = Field(default="")


class ScanInfo(BaseModel):
    """Scan status information."""

    status: str = Field(default="", description="Scan status")


class Host(BaseModel):
    """Host targeted by a scan."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., alias="host_id", description="Host ID within the scan")
    hostname: str = Field(default="")


class ScanDetail(BaseModel):
    """Detailed scan results."""

    id: int = Field(default=0, description="Scan ID (set by the client)")
    info: ScanInfo = Field(default_factory=ScanInfo)
    hosts: list[Host] = Field(default_factory=list)
    vulnerabilities: list[Vulnerability] = Field(default_factory=list)

    @property
    def is_running(self) -> bool:
        """Check if the scan is still in progress."""
        return self.info.status in ("running", "pending", "processing")

    def vulnerabilities_by_severity(self, minimum: int = 0) -> list[Vulnerability]:
        """Get vulnerabilities at or above a severity, most severe first.

        Args:
            minimum: Lowest severity to include.

        Returns:
            Sorted list of vulnerabilities.
        """
        return sorted(
            (v for v in self.vulnerabilities if v.severity >= minimum),
            key=lambda v: v.severity,
            reverse=True,
        )


class ScanSettings(BaseModel):
    """Settings for a scan to be created."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Scan name")
    enabled: bool = Field(default=True)
    targets: str = Field(..., alias="text_targets", description="Comma separated targets")
    policy_id: int | None = Field(default=None, description="Policy to scan with")


class Scan(BaseModel):
    """Scan definition posted to the API."""

    model_config = ConfigDict(populate_by_name=True)

    template_uuid: str = Field(..., alias="uuid", description="Scan template UUID")
    settings: ScanSettings

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the API's JSON shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ScanTemplate(BaseModel):
    """Scan template offered by the scan editor."""

    model_config = ConfigDict(populate_by_name=True)

    uuid: str = Field(..., description="Template UUID")
    name: str = Field(default="")
    title: str = Field(default="")
    description: str | None = Field(default=None)
    cloud_only: bool = Field(default=False)
    subscription_only: bool = Field(default=False)
    is_agent: bool | None = Field(default=None)
    info: str | None = Field(default=None, alias="more_info")


class PolicySettings(BaseModel):
    """Policy settings."""

    name: str = Field(default="")


class Policy(BaseModel):
    """Scan policy."""

    id: int = Field(default=0, description="Policy ID (set by the client)")
    uuid: str = Field(default="")
    settings: PolicySettings = Field(default_factory=PolicySettings)
