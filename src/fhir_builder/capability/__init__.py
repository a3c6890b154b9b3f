"""
Capability Module

Analyze FHIR CapabilityStatements and check resource support.
"""

from fhir_builder.capability.analyzer import CapabilityAnalyzer
from fhir_builder.capability.capability_types import (
    CapabilityAnalysis,
    CapabilityStatement,
)
from fhir_builder.capability.tables import DEFAULT_TABLES, ResourceTables, load_tables
from fhir_builder.capability.validators import (
    Complexity,
    ComplexityEstimate,
    ResourceSupportCheck,
    ResourceSupportValidator,
)

__all__ = [
    "CapabilityAnalyzer",
    "CapabilityAnalysis",
    "CapabilityStatement",
    "DEFAULT_TABLES",
    "ResourceTables",
    "load_tables",
    "Complexity",
    "ComplexityEstimate",
    "ResourceSupportCheck",
    "ResourceSupportValidator",
]
