"""Asset models (Tenable.io v3 assets API)."""

from datetime import datetime

from pydantic import BaseModel, Field


class ObservationSource(BaseModel):
    """Source that observed an asset."""

    first_observed: datetime | None = None
    last_observed: datetime | None = None
    name: str = ""


class AssetTag(BaseModel):
    """Tag applied to an asset."""

    id: str = ""
    category: str = ""
    value: str = ""
    type: str = ""


class AssetNetwork(BaseModel):
    """Network an asset belongs to."""

    id: str = ""
    name: str = ""


class Asset(BaseModel):
    """Asset entity.

    More attributes are available at
    https://developer.tenable.com/docs/common-asset-attributes.
    """

    id: str = Field(..., description="Asset UUID")
    name: str = Field(default="", description="Asset name")
    types: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    created: datetime | None = None
    observation_sources: list[ObservationSource] = Field(default_factory=list)
    is_licensed: bool = False
    fqdns: list[str] = Field(default_factory=list)
    tags: list[AssetTag] = Field(default_factory=list)
    network: AssetNetwork = Field(default_factory=AssetNetwork)
    first_observed: datetime | None = None
    display_fqdn: str = ""
    is_deleted: bool = False
    last_observed: datetime | None = None
    updated: datetime | None = None
