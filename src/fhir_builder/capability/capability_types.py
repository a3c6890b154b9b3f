"""
Capability Data Types

Typed view of a FHIR CapabilityStatement and the analysis derived from it.
"""

from dataclasses import dataclass, field
from typing import Any


def _as_list(value: Any) -> list[Any]:
    """Return value if it is a list, otherwise an empty list."""
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str | None:
    """Return value if it is a string, otherwise None."""
    return value if isinstance(value, str) else None


@dataclass
class SearchParam:
    """A search parameter declared for a resource type."""

    name: str | None = None
    type: str | None = None
    documentation: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchParam":
        """Create from dictionary."""
        return cls(
            name=_as_str(data.get("name")),
            type=_as_str(data.get("type")),
            documentation=_as_str(data.get("documentation")),
        )


@dataclass
class ResourceCapability:
    """Capabilities declared for a single resource type."""

    type: str | None = None
    interactions: list[str | None] = field(default_factory=list)
    search_params: list[SearchParam] = field(default_factory=list)

    @property
    def interaction_codes(self) -> list[str]:
        """Declared interaction codes, skipping entries without a code."""
        return [code for code in self.interactions if code]

    @property
    def search_param_names(self) -> list[str]:
        """Declared search parameter names, skipping unnamed entries."""
        return [p.name for p in self.search_params if p.name]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResourceCapability":
        """Create from dictionary."""
        return cls(
            type=_as_str(data.get("type")),
            interactions=[
                _as_str(_as_dict(i).get("code"))
                for i in _as_list(data.get("interaction"))
            ],
            search_params=[
                SearchParam.from_dict(p)
                for p in _as_list(data.get("searchParam"))
                if isinstance(p, dict)
            ],
        )


@dataclass
class RestCapability:
    """A REST capability block."""

    mode: str | None = None
    resources: list[ResourceCapability] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RestCapability":
        """Create from dictionary."""
        return cls(
            mode=_as_str(data.get("mode")),
            resources=[
                ResourceCapability.from_dict(r)
                for r in _as_list(data.get("resource"))
                if isinstance(r, dict)
            ],
        )


@dataclass
class CapabilityStatement:
    """A parsed CapabilityStatement document."""

    fhir_version: str | None = None
    implementation_url: str | None = None
    implementation_description: str | None = None
    rest: list[RestCapability] = field(default_factory=list)

    @property
    def server_rest(self) -> RestCapability | None:
        """First REST block in server mode, if any."""
        for block in self.rest:
            if block.mode == "server":
                return block
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CapabilityStatement":
        """Create from dictionary.

        The resourceType discriminator is checked by the analyzer before
        this is called.
        """
        implementation = _as_dict(data.get("implementation"))
        return cls(
            fhir_version=_as_str(data.get("fhirVersion")),
            implementation_url=_as_str(implementation.get("url")),
            implementation_description=_as_str(implementation.get("description")),
            rest=[
                RestCapability.from_dict(r)
                for r in _as_list(data.get("rest"))
                if isinstance(r, dict)
            ],
        )


@dataclass(frozen=True)
class CapabilityAnalysis:
    """Normalized summary of what a FHIR server supports."""

    server_url: str
    version: str
    supported_resources: list[str] = field(default_factory=list)
    interactions: dict[str, list[str]] = field(default_factory=dict)
    search_parameters: dict[str, list[str]] = field(default_factory=dict)
    recommended_resources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary used on the wire."""
        return {
            "serverUrl": self.server_url,
            "version": self.version,
            "supportedResources": list(self.supported_resources),
            "interactions": {k: list(v) for k, v in self.interactions.items()},
            "searchParameters": {
                k: list(v) for k, v in self.search_parameters.items()
            },
            "recommendedResources": list(self.recommended_resources),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CapabilityAnalysis":
        """Create from a camelCase dictionary."""
        return cls(
            server_url=data["serverUrl"],
            version=data.get("version", "Unknown"),
            supported_resources=list(data.get("supportedResources", [])),
            interactions=dict(data.get("interactions", {})),
            search_parameters=dict(data.get("searchParameters", {})),
            recommended_resources=list(data.get("recommendedResources", [])),
        )
