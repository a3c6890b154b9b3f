"""
Pytest Configuration and Shared Fixtures

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import yaml

from fhir_builder.builder.config import BuilderConfig
from fhir_builder.builder.fetcher import CapabilityFetcher
from fhir_builder.builder.orchestrator import BuildOrchestrator
from fhir_builder.capability.capability_types import CapabilityAnalysis


# =============================================================================
# CAPABILITY STATEMENT FIXTURES
# =============================================================================


@pytest.fixture
def capability_statement() -> dict[str, Any]:
    """CapabilityStatement resembling a public R4 test server."""
    return {
        "resourceType": "CapabilityStatement",
        "status": "active",
        "fhirVersion": "4.0.1",
        "implementation": {
            "description": "Test FHIR Server",
            "url": "https://fhir.example.org/r4/metadata",
        },
        "rest": [
            {
                "mode": "server",
                "resource": [
                    {
                        "type": "Patient",
                        "interaction": [
                            {"code": "read"},
                            {"code": "search-type"},
                            {"code": "create"},
                        ],
                        "searchParam": [
                            {"name": "name", "type": "string"},
                            {"name": "birthdate", "type": "date"},
                        ],
                    },
                    {
                        "type": "Observation",
                        "interaction": [{"code": "read"}, {"code": "search-type"}],
                        "searchParam": [
                            {"name": "patient", "type": "reference"},
                            {"name": "code", "type": "token"},
                        ],
                    },
                    {
                        "type": "Condition",
                        "interaction": [{"code": "read"}],
                    },
                    {
                        "type": "MedicationRequest",
                        "interaction": [{"code": "read"}, {"code": "search-type"}],
                    },
                    {"type": "CarePlan"},
                    {"type": "Goal"},
                ],
            }
        ],
    }


@pytest.fixture
def minimal_statement() -> dict[str, Any]:
    """Two resources, only one declaring interactions."""
    return {
        "resourceType": "CapabilityStatement",
        "fhirVersion": "4.0.1",
        "implementation": {"url": "https://ex.org/fhir/metadata"},
        "rest": [
            {
                "mode": "server",
                "resource": [
                    {"type": "Patient", "interaction": [{"code": "read"}]},
                    {"type": "Observation"},
                ],
            }
        ],
    }


@pytest.fixture
def patient_document() -> dict[str, Any]:
    """A FHIR document that is not a CapabilityStatement."""
    return {"resourceType": "Patient", "id": "example"}


@pytest.fixture
def sample_analysis() -> CapabilityAnalysis:
    """Analysis used to drive scaffold generation."""
    return CapabilityAnalysis(
        server_url="https://fhir.example.org/r4",
        version="4.0.1",
        supported_resources=["Patient", "Observation", "MedicationRequest"],
        interactions={
            "Patient": ["read", "search-type", "create"],
            "Observation": ["read", "search-type"],
        },
        search_parameters={"Patient": ["name", "birthdate"]},
        recommended_resources=["Patient", "Observation", "MedicationRequest"],
    )


# =============================================================================
# BUILDER FIXTURES
# =============================================================================


@pytest.fixture
def builder_config(tmp_path: Path) -> BuilderConfig:
    """Config writing builds into a temporary directory."""
    config = BuilderConfig()
    config.storage.builds_dir = str(tmp_path / "builds")
    config.storage.sweep_interval_minutes = 0
    return config


@pytest.fixture
def mock_fetcher(capability_statement: dict[str, Any]) -> MagicMock:
    """Fetcher returning the sample capability statement."""
    fetcher = MagicMock(spec=CapabilityFetcher)
    fetcher.fetch.return_value = capability_statement
    return fetcher


@pytest.fixture
def orchestrator(builder_config: BuilderConfig, mock_fetcher: MagicMock) -> BuildOrchestrator:
    """Orchestrator with a mocked fetcher and temporary storage."""
    return BuildOrchestrator(builder_config, fetcher=mock_fetcher)


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Create a temporary builder config file."""
    config_data = {
        "name": "test-builder",
        "log_level": "DEBUG",
        "fetch": {"timeout_seconds": 5, "user_agent": "test-agent/0.1"},
        "storage": {
            "builds_dir": str(tmp_path / "yaml-builds"),
            "expiry_hours": 2,
            "sweep_interval_minutes": 0,
        },
        "generator": {"default_app_name": "Test App", "compression_level": 6},
        "server": {
            "port": 8080,
            "environment": "production",
            "allowed_origins": ["https://app.example.org"],
        },
    }

    config_file = tmp_path / "builder.yaml"
    with open(config_file, "w") as f:
        yaml.dump(config_data, f)

    return config_file
