"""
Scaffold Stacks

Target technology stacks and the template set structure shared by them.
"""

from dataclasses import dataclass, field
from enum import Enum


class Stack(str, Enum):
    """Supported scaffold stacks. The first member is the default."""

    NODE_HAPI = "node_hapi"
    NEXT_FHIR = "next_fhir"
    PYTHON_FLASK = "python_flask"


DEFAULT_STACK = Stack.NODE_HAPI


@dataclass(frozen=True)
class TemplateSet:
    """Jinja2 templates that make up one stack's scaffold.

    Keys are output paths relative to the scaffold root and are themselves
    rendered as templates. ``per_resource`` entries are rendered once per
    requested resource with ``resource`` bound; ``feature_files`` entries
    are only emitted when their feature flag is requested.
    """

    name: str
    description: str
    files: dict[str, str] = field(default_factory=dict)
    per_resource: dict[str, str] = field(default_factory=dict)
    feature_files: dict[str, dict[str, str]] = field(default_factory=dict)
