"""Finding models (Tenable.io v3 findings API).

More info available at https://developer.tenable.com/docs/tenable-plugin-attributes.
"""

from pydantic import BaseModel, Field

# Fields requested from the findings search endpoint.
FINDING_FIELDS = [
    "output",
    "id",
    "severity",
    "port",
    "protocol",
    "service",
    "plugin_id",
    "name",
    "description",
    "synopsis",
    "cvss3_base_score",
    "cvss2_base_score",
    "cwe",
    "see_also",
]


class CVSSScore(BaseModel):
    base_score: float | None = Field(default=None, ge=0, le=10)


class FindingDefinition(BaseModel):
    """Plugin definition attached to a finding."""

    id: int = Field(default=0, description="Plugin ID")
    name: str = ""
    description: str = ""
    synopsis: str = ""
    solution: str = ""
    cvss3: CVSSScore = Field(default_factory=CVSSScore)
    cvss2: CVSSScore = Field(default_factory=CVSSScore)
    cwe: list[str] = Field(default_factory=list)
    see_also: list[str] = Field(default_factory=list)


class Finding(BaseModel):
    """Vulnerability finding on a host."""

    output: str = ""
    id: str = Field(..., description="Finding ID")
    severity: int = Field(default=0, ge=0, le=4)
    port: int = 0
    protocol: str = ""
    service: str = ""
    definition: FindingDefinition = Field(default_factory=FindingDefinition)

    @property
    def base_score(self) -> float | None:
        """Best available CVSS base score, preferring v3."""
        if self.definition.cvss3.base_score is not None:
            return self.definition.cvss3.base_score
        return self.definition.cvss2.base_score
