"""
Resource Support Validators

Check requested resources against server capabilities and estimate
implementation complexity.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from fhir_builder.capability.tables import DEFAULT_TABLES, ResourceTables


class Complexity(str, Enum):
    """Implementation complexity bands."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


BASE_HOURS = 4
HOURS_PER_WEIGHT = 0.5
SIMPLE_MAX_WEIGHT = 6
MODERATE_MAX_WEIGHT = 15
COMPLEX_RESOURCE_WEIGHT = 4


@dataclass
class ResourceSupportCheck:
    """Result of checking requested resources against a server."""

    valid: bool
    unsupported_resources: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "unsupportedResources": list(self.unsupported_resources),
            "suggestions": list(self.suggestions),
        }


@dataclass
class ComplexityEstimate:
    """Estimated implementation effort for a resource set."""

    complexity: Complexity
    estimated_hours: int
    factors: list[str] = field(default_factory=list)
    total_weight: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "complexity": self.complexity.value,
            "estimatedHours": self.estimated_hours,
            "factors": list(self.factors),
        }


class ResourceSupportValidator:
    """Validate resource support and estimate complexity."""

    def __init__(self, tables: ResourceTables = DEFAULT_TABLES):
        self.tables = tables

    def validate(
        self, requested: Sequence[str], supported: Sequence[str]
    ) -> ResourceSupportCheck:
        """Find requested resources the server does not support.

        Never raises; the caller decides whether unsupported resources
        are fatal.
        """
        supported_set = set(supported)
        unsupported = [r for r in requested if r not in supported_set]

        return ResourceSupportCheck(
            valid=len(unsupported) == 0,
            unsupported_resources=unsupported,
            suggestions=self.suggest_alternatives(unsupported, supported),
        )

    def suggest_alternatives(
        self, unsupported: Sequence[str], supported: Sequence[str]
    ) -> list[str]:
        """Supported alternatives for unsupported resources, deduplicated."""
        supported_set = set(supported)
        suggestions: list[str] = []

        for resource in unsupported:
            for alternative in self.tables.alternatives_for(resource):
                if alternative in supported_set and alternative not in suggestions:
                    suggestions.append(alternative)

        return suggestions

    def estimate_complexity(self, resources: Sequence[str]) -> ComplexityEstimate:
        """Estimate the effort of implementing the given resources."""
        factors: list[str] = []
        total_weight = 0

        for resource in resources:
            weight = self.tables.weight_for(resource)
            total_weight += weight

            if weight >= COMPLEX_RESOURCE_WEIGHT:
                factors.append(
                    f"{resource} is a complex resource requiring additional development time"
                )

        if total_weight <= SIMPLE_MAX_WEIGHT:
            complexity = Complexity.SIMPLE
        elif total_weight <= MODERATE_MAX_WEIGHT:
            complexity = Complexity.MODERATE
        else:
            complexity = Complexity.COMPLEX
            factors.append("Large number of resources increases integration complexity")

        return ComplexityEstimate(
            complexity=complexity,
            estimated_hours=math.ceil(BASE_HOURS + total_weight * HOURS_PER_WEIGHT),
            factors=factors,
            total_weight=total_weight,
        )
