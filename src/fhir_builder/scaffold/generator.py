"""
Scaffold Generator

Render a stack's template set into a directory tree, parameterized by the
capability analysis and the build request.
"""

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, StrictUndefined, TemplateError

from fhir_builder.capability.capability_types import CapabilityAnalysis
from fhir_builder.errors import TemplateRenderError, UnsupportedStackError
from fhir_builder.scaffold.stacks import Stack, TemplateSet
from fhir_builder.scaffold.templates import DEFAULT_TEMPLATE_SETS

if TYPE_CHECKING:
    from fhir_builder.builder.models import BuildRequest

log = logging.getLogger(__name__)

REQUIRED_PARAMETERS = ("server_url", "resources", "app_name")


def kebab(value: str) -> str:
    """MedicationRequest -> medication-request"""
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", value).lower()


def snake(value: str) -> str:
    """MedicationRequest -> medication_request"""
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", value).lower()


def slugify(value: str) -> str:
    """Package-name friendly slug of an app name."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "fhir-app"


class ScaffoldGenerator:
    """Generate stack-specific application scaffolds."""

    def __init__(
        self,
        registry: dict[Stack, TemplateSet] | None = None,
        default_app_name: str = "FHIR App",
    ):
        self.registry: dict[Stack, TemplateSet] = dict(
            DEFAULT_TEMPLATE_SETS if registry is None else registry
        )
        self.default_app_name = default_app_name

        self._env = Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )
        self._env.filters["kebab"] = kebab
        self._env.filters["snake"] = snake

    def register(self, stack: Stack, template_set: TemplateSet) -> None:
        """Register or replace the template set for a stack."""
        self.registry[stack] = template_set

    @property
    def stacks(self) -> list[Stack]:
        return list(self.registry)

    def template_set_for(self, stack: Stack | str) -> TemplateSet:
        """Look up the template set for a stack identifier."""
        try:
            key = Stack(stack)
        except ValueError:
            raise UnsupportedStackError(stack) from None

        if key not in self.registry:
            raise UnsupportedStackError(key.value)
        return self.registry[key]

    def build_context(
        self, request: "BuildRequest", analysis: CapabilityAnalysis
    ) -> dict[str, Any]:
        """Substitution context shared by every stack."""
        app_name = request.app_name or self.default_app_name
        return {
            "server_url": analysis.server_url,
            "fhir_version": analysis.version,
            "supported_resources": list(analysis.supported_resources),
            "interactions": dict(analysis.interactions),
            "search_parameters": dict(analysis.search_parameters),
            "resources": list(request.resources),
            "app_name": app_name,
            "app_slug": slugify(app_name),
            "description": request.description or "",
            "features": list(request.features or []),
            "stack": Stack(request.stack).value,
        }

    def generate(
        self,
        output_root: str | Path,
        request: "BuildRequest",
        analysis: CapabilityAnalysis,
    ) -> list[Path]:
        """Render the scaffold under output_root and return the files written."""
        template_set = self.template_set_for(request.stack)
        context = self.build_context(request, analysis)

        missing = [name for name in REQUIRED_PARAMETERS if not context.get(name)]
        if missing:
            raise TemplateRenderError(
                f"Missing required template parameters: {', '.join(missing)}"
            )

        root = Path(output_root)
        root.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []

        for path_template, body in template_set.files.items():
            written.append(self._render_file(root, path_template, body, context))

        for path_template, body in template_set.per_resource.items():
            for resource in context["resources"]:
                resource_context = dict(context, resource=resource)
                written.append(
                    self._render_file(root, path_template, body, resource_context)
                )

        for feature in context["features"]:
            for path_template, body in template_set.feature_files.get(feature, {}).items():
                written.append(self._render_file(root, path_template, body, context))

        log.info(
            "Application structure generated: stack=%s files=%d",
            template_set.name,
            len(written),
        )
        return written

    def _render(self, source: str, context: dict[str, Any], template_name: str) -> str:
        try:
            return self._env.from_string(source).render(**context)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Failed to render template {template_name}: {e}",
                template=template_name,
            ) from e

    def _render_file(
        self, root: Path, path_template: str, body: str, context: dict[str, Any]
    ) -> Path:
        relative = self._render(path_template, context, path_template).strip()
        target = (root / relative).resolve()

        if not relative or not target.is_relative_to(root.resolve()):
            raise TemplateRenderError(
                f"Template path escapes the scaffold root: {relative!r}",
                template=path_template,
            )

        content = self._render(body, context, relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        return target
