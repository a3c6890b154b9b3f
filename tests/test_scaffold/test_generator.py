"""
Tests for scaffold generation.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

import json
from pathlib import Path

import pytest

from fhir_builder.builder.models import BuildRequest
from fhir_builder.capability.capability_types import CapabilityAnalysis
from fhir_builder.errors import TemplateRenderError, UnsupportedStackError
from fhir_builder.scaffold.generator import ScaffoldGenerator, kebab, slugify, snake
from fhir_builder.scaffold.stacks import Stack, TemplateSet


def _request(**overrides) -> BuildRequest:
    data = {
        "capabilityStatementUrl": "https://fhir.example.org/r4/metadata",
        "resources": ["Patient", "MedicationRequest"],
        "appName": "Clinic Dashboard",
    }
    data.update(overrides)
    return BuildRequest(**data)


def _relative(root: Path, written: list[Path]) -> set[str]:
    resolved = root.resolve()
    return {p.relative_to(resolved).as_posix() for p in written}


@pytest.fixture
def generator() -> ScaffoldGenerator:
    return ScaffoldGenerator()


class TestNameFilters:
    """Tests for naming helpers."""

    def test_kebab(self):
        assert kebab("MedicationRequest") == "medication-request"
        assert kebab("Patient") == "patient"

    def test_snake(self):
        assert snake("QuestionnaireResponse") == "questionnaire_response"

    def test_slugify(self):
        assert slugify("Clinic Dashboard!") == "clinic-dashboard"
        assert slugify("***") == "fhir-app"


class TestNodeHapiStack:
    """Tests for the default Node.js stack."""

    def test_files(self, generator: ScaffoldGenerator, tmp_path: Path, sample_analysis):
        """Test the expected tree is produced."""
        written = generator.generate(tmp_path, _request(), sample_analysis)

        assert _relative(tmp_path, written) == {
            "README.md",
            "package.json",
            ".env.example",
            "src/config.js",
            "src/fhirClient.js",
            "src/server.js",
            "src/routes/patient.js",
            "src/routes/medication-request.js",
        }

    def test_package_json_is_valid(
        self, generator: ScaffoldGenerator, tmp_path: Path, sample_analysis
    ):
        """Test the rendered package.json parses and uses the app slug."""
        generator.generate(tmp_path, _request(features=["tests"]), sample_analysis)

        package = json.loads((tmp_path / "package.json").read_text())

        assert package["name"] == "clinic-dashboard"
        assert "test" in package["scripts"]

    def test_server_url_substituted(
        self, generator: ScaffoldGenerator, tmp_path: Path, sample_analysis
    ):
        """Test the analyzed server URL reaches the generated config."""
        generator.generate(tmp_path, _request(), sample_analysis)

        assert "https://fhir.example.org/r4" in (tmp_path / ".env.example").read_text()

    def test_feature_files(self, generator: ScaffoldGenerator, tmp_path: Path, sample_analysis):
        """Test docker and tests features add their files."""
        written = generator.generate(
            tmp_path, _request(features=["docker", "tests", "unknown"]), sample_analysis
        )
        paths = _relative(tmp_path, written)

        assert {"Dockerfile", ".dockerignore", "test/config.test.js"} <= paths


class TestOtherStacks:
    """Tests for the Next.js and Flask stacks."""

    def test_next_fhir(self, generator: ScaffoldGenerator, tmp_path: Path, sample_analysis):
        written = generator.generate(
            tmp_path, _request(stack="next_fhir", features=["docker"]), sample_analysis
        )
        paths = _relative(tmp_path, written)

        assert "pages/index.js" in paths
        assert "pages/medication-request.js" in paths
        assert "lib/fhir.js" in paths
        assert "Dockerfile" in paths
        json.loads((tmp_path / "package.json").read_text())

    def test_python_flask(self, generator: ScaffoldGenerator, tmp_path: Path, sample_analysis):
        written = generator.generate(
            tmp_path, _request(stack="python_flask", features=["tests"]), sample_analysis
        )
        paths = _relative(tmp_path, written)

        assert {
            "app.py",
            "config.py",
            "fhir_client.py",
            "requirements.txt",
            "resources/__init__.py",
            "resources/patient.py",
            "resources/medication_request.py",
            "tests/test_app.py",
        } <= paths

        patient = (tmp_path / "resources" / "patient.py").read_text()
        assert 'RESOURCE_TYPE = "Patient"' in patient
        assert '["name", "birthdate"]' in patient
        assert "def create():" in patient

        medication = (tmp_path / "resources" / "medication_request.py").read_text()
        assert "def read(resource_id):" in medication
        assert "def create():" not in medication

        assert "pytest" in (tmp_path / "requirements.txt").read_text()

    def test_app_registers_blueprints(
        self, generator: ScaffoldGenerator, tmp_path: Path, sample_analysis
    ):
        generator.generate(tmp_path, _request(stack="python_flask"), sample_analysis)

        app = (tmp_path / "app.py").read_text()

        assert "from resources.medication_request import blueprint" in app
        assert 'url_prefix="/api/medication-request"' in app


class TestGeneratorErrors:
    """Tests for generator failure modes."""

    def test_unregistered_stack(self, tmp_path: Path, sample_analysis: CapabilityAnalysis):
        """Test a stack missing from the registry is rejected."""
        generator = ScaffoldGenerator(registry={})

        with pytest.raises(UnsupportedStackError):
            generator.generate(tmp_path, _request(), sample_analysis)

    def test_unknown_stack_identifier(self, generator: ScaffoldGenerator):
        with pytest.raises(UnsupportedStackError):
            generator.template_set_for("rails_fhir")

    def test_missing_server_url(self, generator: ScaffoldGenerator, tmp_path: Path):
        """Test a required parameter missing from the context fails."""
        analysis = CapabilityAnalysis(server_url="", version="4.0.1")

        with pytest.raises(TemplateRenderError) as exc_info:
            generator.generate(tmp_path, _request(), analysis)

        assert "server_url" in exc_info.value.user_message

    def test_undefined_variable(self, tmp_path: Path, sample_analysis: CapabilityAnalysis):
        """Test templates referencing unknown variables fail loudly."""
        generator = ScaffoldGenerator(
            registry={
                Stack.NODE_HAPI: TemplateSet(
                    name="broken",
                    description="",
                    files={"README.md": "{{ no_such_variable }}"},
                )
            }
        )

        with pytest.raises(TemplateRenderError) as exc_info:
            generator.generate(tmp_path, _request(), sample_analysis)

        assert exc_info.value.template == "README.md"

    def test_path_escape(self, tmp_path: Path, sample_analysis: CapabilityAnalysis):
        """Test rendered paths cannot leave the scaffold root."""
        generator = ScaffoldGenerator(
            registry={
                Stack.NODE_HAPI: TemplateSet(
                    name="escape", description="", files={"../outside.txt": "x"}
                )
            }
        )

        with pytest.raises(TemplateRenderError):
            generator.generate(tmp_path / "root", _request(), sample_analysis)

        assert not (tmp_path / "outside.txt").exists()


class TestRegistry:
    """Tests for stack registration."""

    def test_default_stacks(self, generator: ScaffoldGenerator):
        assert generator.stacks == [Stack.NODE_HAPI, Stack.NEXT_FHIR, Stack.PYTHON_FLASK]

    def test_register_replaces(self, tmp_path: Path, sample_analysis: CapabilityAnalysis):
        """Test a registered set replaces the default for its stack."""
        generator = ScaffoldGenerator()
        generator.register(
            Stack.NEXT_FHIR,
            TemplateSet(
                name="custom",
                description="",
                files={"APP.txt": "{{ app_name }} on {{ fhir_version }}"},
            ),
        )

        written = generator.generate(tmp_path, _request(stack="next_fhir"), sample_analysis)

        assert len(written) == 1
        assert (tmp_path / "APP.txt").read_text() == "Clinic Dashboard on 4.0.1"

    def test_default_app_name(self, tmp_path: Path, sample_analysis: CapabilityAnalysis):
        """Test the default app name is used when none is requested."""
        generator = ScaffoldGenerator(
            registry={
                Stack.NODE_HAPI: TemplateSet(
                    name="n", description="", files={"name.txt": "{{ app_slug }}"}
                )
            },
            default_app_name="My FHIR Tool",
        )
        request = BuildRequest(
            capabilityStatementUrl="https://fhir.example.org/metadata",
            resources=["Patient"],
        )

        generator.generate(tmp_path, request, sample_analysis)

        assert (tmp_path / "name.txt").read_text() == "my-fhir-tool"
