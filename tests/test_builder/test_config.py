"""
Tests for builder configuration.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

from pathlib import Path

import pytest

from fhir_builder.builder.config import (
    BuilderConfig,
    FetchConfig,
    ServerConfig,
    StorageConfig,
    load_config,
)


class TestDefaults:
    """Tests for default configuration values."""

    def test_fetch_defaults(self):
        config = FetchConfig()

        assert config.timeout_seconds == 10.0
        assert config.user_agent == "FHIR-IQ-Builder/1.0"
        assert "application/fhir+json" in config.accept

    def test_storage_defaults(self):
        config = StorageConfig()

        assert config.builds_dir == "builds"
        assert config.expiry_hours == 24.0

    def test_server_defaults(self):
        config = ServerConfig()

        assert config.port == 3001
        assert config.allowed_origins == ["http://localhost:3000"]
        assert config.min_build_id_length == 10

    def test_builder_defaults(self):
        config = BuilderConfig()

        assert config.log_level == "INFO"
        assert config.is_production is False
        assert config.builds_path == Path("builds")


class TestFromDict:
    """Tests for BuilderConfig.from_dict."""

    def test_partial_sections(self):
        """Test omitted keys keep their defaults."""
        config = BuilderConfig.from_dict(
            {"storage": {"expiry_hours": 1}, "server": {"environment": "production"}}
        )

        assert config.storage.expiry_hours == 1
        assert config.storage.builds_dir == "builds"
        assert config.server.port == 3001
        assert config.is_production is True
        assert config.fetch.timeout_seconds == 10.0

    def test_round_trip(self):
        """Test to_dict output loads back to an equal config."""
        config = BuilderConfig()
        config.generator.tables_path = "tables.yaml"
        config.server.allowed_origins = ["*"]

        assert BuilderConfig.from_dict(config.to_dict()) == config


class TestFromEnv:
    """Tests for environment configuration."""

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BUILDS_DIR", "/var/builds")
        monkeypatch.setenv("BUILD_EXPIRY_HOURS", "6")
        monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")

        config = BuilderConfig.from_env()

        assert config.storage.builds_dir == "/var/builds"
        assert config.storage.expiry_hours == 6.0
        assert config.fetch.timeout_seconds == 2.5
        assert config.server.port == 9000
        assert config.is_production is True
        assert config.log_level == "DEBUG"
        assert config.server.allowed_origins == ["https://a.example", "https://b.example"]

    def test_env_defaults(self, monkeypatch: pytest.MonkeyPatch):
        for name in (
            "BUILDS_DIR",
            "BUILD_EXPIRY_HOURS",
            "FETCH_TIMEOUT_SECONDS",
            "PORT",
            "ENVIRONMENT",
            "LOG_LEVEL",
            "ALLOWED_ORIGINS",
            "RESOURCE_TABLES_PATH",
        ):
            monkeypatch.delenv(name, raising=False)

        assert BuilderConfig.from_env() == BuilderConfig()


class TestLoadConfig:
    """Tests for YAML config loading."""

    def test_load(self, temp_config_file: Path):
        config = load_config(temp_config_file)

        assert config.name == "test-builder"
        assert config.log_level == "DEBUG"
        assert config.fetch.timeout_seconds == 5
        assert config.fetch.user_agent == "test-agent/0.1"
        assert config.storage.expiry_hours == 2
        assert config.generator.default_app_name == "Test App"
        assert config.generator.compression_level == 6
        assert config.server.port == 8080
        assert config.server.allowed_origins == ["https://app.example.org"]
        assert config.is_production is True

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == BuilderConfig()
