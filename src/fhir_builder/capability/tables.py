"""
Resource Lookup Tables

Static alternative-resource and complexity-weight tables used by the
resource support validator.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml


# Superseded/renamed resources and their plausible successors
DEFAULT_ALTERNATIVES: dict[str, tuple[str, ...]] = {
    "MedicationRequest": ("MedicationOrder", "MedicationStatement"),
    "MedicationOrder": ("MedicationRequest", "MedicationStatement"),
    "DiagnosticOrder": ("ServiceRequest", "DiagnosticReport"),
    "ServiceRequest": ("DiagnosticOrder", "ProcedureRequest"),
    "ProcedureRequest": ("ServiceRequest", "Procedure"),
    "DocumentReference": ("Binary", "Media"),
    "ImagingStudy": ("DiagnosticReport", "Media"),
    "CarePlan": ("Goal", "Task"),
    "CareTeam": ("Practitioner", "Organization"),
}

DEFAULT_WEIGHTS: dict[str, int] = {
    "Patient": 1,
    "Observation": 2,
    "Condition": 2,
    "MedicationRequest": 3,
    "Encounter": 3,
    "DiagnosticReport": 4,
    "ImagingStudy": 5,
    "Procedure": 3,
    "CarePlan": 4,
    "CareTeam": 3,
    "Questionnaire": 5,
    "QuestionnaireResponse": 4,
    "Subscription": 6,
    "Consent": 5,
}


@dataclass(frozen=True)
class ResourceTables:
    """Immutable lookup tables for alternatives and complexity weights."""

    alternatives: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_ALTERNATIVES))
    )
    weights: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_WEIGHTS))
    )
    default_weight: int = 2

    def __post_init__(self) -> None:
        # Freeze whatever mappings were passed in
        object.__setattr__(
            self,
            "alternatives",
            MappingProxyType({k: tuple(v) for k, v in self.alternatives.items()}),
        )
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    def alternatives_for(self, resource: str) -> tuple[str, ...]:
        return self.alternatives.get(resource, ())

    def weight_for(self, resource: str) -> int:
        return self.weights.get(resource, self.default_weight)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResourceTables":
        """Create tables from a dictionary, keeping defaults for omitted keys."""
        return cls(
            alternatives=data.get("alternatives", DEFAULT_ALTERNATIVES),
            weights=data.get("weights", DEFAULT_WEIGHTS),
            default_weight=data.get("default_weight", 2),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert tables to dictionary."""
        return {
            "alternatives": {k: list(v) for k, v in self.alternatives.items()},
            "weights": dict(self.weights),
            "default_weight": self.default_weight,
        }


DEFAULT_TABLES = ResourceTables()


def load_tables(tables_path: str | Path) -> ResourceTables:
    """Load lookup tables from a YAML file."""
    path = Path(tables_path)

    if not path.exists():
        raise FileNotFoundError(f"Resource tables file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return ResourceTables.from_dict(data)
