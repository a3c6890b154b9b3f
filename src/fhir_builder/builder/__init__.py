"""
Builder Module

Build orchestration, capability fetching, artifact storage and configuration.
"""

from fhir_builder.builder.config import BuilderConfig, load_config
from fhir_builder.builder.fetcher import CapabilityFetcher
from fhir_builder.builder.models import BuildRecord, BuildRequest, BuildStatus
from fhir_builder.builder.orchestrator import BuildOrchestrator
from fhir_builder.builder.storage import BuildStore

__all__ = [
    "BuilderConfig",
    "load_config",
    "CapabilityFetcher",
    "BuildRecord",
    "BuildRequest",
    "BuildStatus",
    "BuildOrchestrator",
    "BuildStore",
]
