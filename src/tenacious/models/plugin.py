"""Plugin and plugin output models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PluginAttribute(BaseModel):
    """Name/value attribute attached to a plugin."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="attribute_name")
    value: str = Field(default="", alias="attribute_value")


class Plugin(BaseModel):
    """Nessus plugin."""

    id: int = Field(..., description="Plugin ID")
    name: str = Field(default="")
    family_name: str = Field(default="")
    attributes: list[PluginAttribute] = Field(default_factory=list)

    def get_attribute(self, name: str) -> str | None:
        """Get the first attribute value with the given name.

        Args:
            name: Attribute name, e.g. ``cvss3_base_score``.

        Returns:
            Attribute value if present, None otherwise.
        """
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return None

    @property
    def cves(self) -> list[str]:
        """CVE identifiers referenced by the plugin."""
        return [a.value.upper() for a in self.attributes if a.name == "cve"]


class PluginOutput(BaseModel):
    """Output of one plugin on one host."""

    model_config = ConfigDict(populate_by_name=True)

    hosts: str = Field(default="")
    ports: Any = Field(default=None)
    output: str = Field(default="", alias="plugin_output")
    severity: int = Field(default=0)


class PluginOutputResponse(BaseModel):
    """Plugin outputs for a scan host."""

    model_config = ConfigDict(populate_by_name=True)

    output: list[PluginOutput] = Field(default_factory=list, alias="outputs")
