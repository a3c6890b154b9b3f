"""
FHIR Builder

FHIR CapabilityStatement analyzer and application scaffold generator.

Usage:
    from fhir_builder import BuildOrchestrator, BuildRequest

    orchestrator = BuildOrchestrator.from_config("configs/builder.yaml")
    record = orchestrator.create_build(
        BuildRequest(
            capability_statement_url="https://hapi.fhir.org/baseR4/metadata",
            resources=["Patient", "Observation"],
        )
    )
    archive = orchestrator.get_build(record.build_id)

Author: Cleansheet LLC
License: CC BY 4.0
"""

from fhir_builder.builder.config import BuilderConfig
from fhir_builder.builder.models import BuildRequest
from fhir_builder.builder.orchestrator import BuildOrchestrator
from fhir_builder.capability.analyzer import CapabilityAnalyzer

__version__ = "0.1.0"
__author__ = "Cleansheet LLC"
__license__ = "CC BY 4.0"

__all__ = [
    "BuildOrchestrator",
    "BuildRequest",
    "BuilderConfig",
    "CapabilityAnalyzer",
    "__version__",
]
