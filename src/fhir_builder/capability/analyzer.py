"""
Capability Statement Analyzer

Extract supported resources, interactions and search parameters from a
FHIR CapabilityStatement.
"""

import logging
import re
from typing import Any, Sequence

from fhir_builder.capability.capability_types import (
    CapabilityAnalysis,
    CapabilityStatement,
)
from fhir_builder.errors import InvalidDocumentKind

log = logging.getLogger(__name__)

PLACEHOLDER_SERVER_URL = "https://your-fhir-server.com/fhir"

# Common resources that are useful for most applications, in priority order
PRIORITY_RESOURCES = (
    "Patient",
    "Observation",
    "Condition",
    "MedicationRequest",
    "Encounter",
    "Practitioner",
    "Organization",
    "Location",
    "Appointment",
    "DiagnosticReport",
)

_METADATA_SUFFIX = re.compile(r"/metadata/?$")


class CapabilityAnalyzer:
    """Analyze FHIR CapabilityStatement documents."""

    def __init__(
        self,
        priority_resources: Sequence[str] = PRIORITY_RESOURCES,
        max_recommended: int = 8,
        fallback_count: int = 5,
    ):
        self.priority_resources = tuple(priority_resources)
        self.max_recommended = max_recommended
        self.fallback_count = fallback_count

    def analyze(self, document: Any) -> CapabilityAnalysis:
        """Analyze a raw CapabilityStatement document."""
        resource_type = document.get("resourceType") if isinstance(document, dict) else None
        if resource_type != "CapabilityStatement":
            raise InvalidDocumentKind(resource_type)

        statement = CapabilityStatement.from_dict(document)
        log.info(
            "Analyzing FHIR Capability Statement (fhirVersion=%s)",
            statement.fhir_version,
        )

        supported, interactions, search_parameters = self._extract_rest(statement)

        analysis = CapabilityAnalysis(
            server_url=self.resolve_server_url(statement.implementation_url),
            version=statement.fhir_version or "Unknown",
            supported_resources=supported,
            interactions=interactions,
            search_parameters=search_parameters,
            recommended_resources=self.recommend(supported),
        )

        log.info(
            "Capability Statement analysis completed: %d supported, %d recommended",
            len(analysis.supported_resources),
            len(analysis.recommended_resources),
        )
        return analysis

    @staticmethod
    def resolve_server_url(implementation_url: str | None) -> str:
        """Strip a trailing /metadata segment, or fall back to a placeholder."""
        if implementation_url:
            return _METADATA_SUFFIX.sub("", implementation_url)
        return PLACEHOLDER_SERVER_URL

    def _extract_rest(
        self, statement: CapabilityStatement
    ) -> tuple[list[str], dict[str, list[str]], dict[str, list[str]]]:
        supported: list[str] = []
        interactions: dict[str, list[str]] = {}
        search_parameters: dict[str, list[str]] = {}

        server_rest = statement.server_rest
        if server_rest is None:
            log.warning("No server REST capabilities found in Capability Statement")
            return supported, interactions, search_parameters

        for resource in server_rest.resources:
            # Malformed entry, tolerate rather than reject the document
            if not resource.type:
                continue

            supported.append(resource.type)

            codes = resource.interaction_codes
            if codes:
                interactions[resource.type] = codes

            names = resource.search_param_names
            if names:
                search_parameters[resource.type] = names

        return supported, interactions, search_parameters

    def recommend(self, supported_resources: Sequence[str]) -> list[str]:
        """Pick the recommended subset of supported resources."""
        recommended = [r for r in self.priority_resources if r in supported_resources]

        if not recommended:
            return list(supported_resources[: self.fallback_count])

        return recommended[: self.max_recommended]
