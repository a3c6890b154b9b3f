"""
Scaffold Module

Render stack template sets and package the result as a zip archive.
"""

from fhir_builder.scaffold.generator import ScaffoldGenerator
from fhir_builder.scaffold.packager import ArchivePackager
from fhir_builder.scaffold.stacks import DEFAULT_STACK, Stack, TemplateSet

__all__ = [
    "ScaffoldGenerator",
    "ArchivePackager",
    "DEFAULT_STACK",
    "Stack",
    "TemplateSet",
]
