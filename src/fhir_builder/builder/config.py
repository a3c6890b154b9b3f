"""
Builder Configuration

Configuration management for the builder service.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class FetchConfig:
    """Capability statement fetch configuration."""

    timeout_seconds: float = 10.0
    user_agent: str = "FHIR-IQ-Builder/1.0"
    accept: str = "application/fhir+json, application/json"


@dataclass
class StorageConfig:
    """Build artifact storage configuration."""

    builds_dir: str = "builds"
    expiry_hours: float = 24.0
    sweep_interval_minutes: float = 60.0  # 0 disables the background sweep


@dataclass
class GeneratorConfig:
    """Scaffold generation configuration."""

    default_app_name: str = "FHIR App"
    compression_level: int = 9
    tables_path: str | None = None  # YAML override for resource tables


@dataclass
class ServerConfig:
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 3001
    allowed_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000"]
    )
    environment: str = "development"  # development, production
    min_build_id_length: int = 10
    download_prefix: str = "/api/builder/download"


@dataclass
class BuilderConfig:
    """Complete builder service configuration."""

    name: str = "fhir-builder"
    log_level: str = "INFO"

    fetch: FetchConfig = field(default_factory=FetchConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuilderConfig":
        """Create config from dictionary."""
        config = cls()

        if "name" in data:
            config.name = data["name"]
        if "log_level" in data:
            config.log_level = data["log_level"]

        if "fetch" in data:
            fetch = data["fetch"]
            config.fetch = FetchConfig(
                timeout_seconds=fetch.get("timeout_seconds", 10.0),
                user_agent=fetch.get("user_agent", "FHIR-IQ-Builder/1.0"),
                accept=fetch.get("accept", "application/fhir+json, application/json"),
            )

        if "storage" in data:
            storage = data["storage"]
            config.storage = StorageConfig(
                builds_dir=storage.get("builds_dir", "builds"),
                expiry_hours=storage.get("expiry_hours", 24.0),
                sweep_interval_minutes=storage.get("sweep_interval_minutes", 60.0),
            )

        if "generator" in data:
            gen = data["generator"]
            config.generator = GeneratorConfig(
                default_app_name=gen.get("default_app_name", "FHIR App"),
                compression_level=gen.get("compression_level", 9),
                tables_path=gen.get("tables_path"),
            )

        if "server" in data:
            srv = data["server"]
            config.server = ServerConfig(
                host=srv.get("host", "0.0.0.0"),
                port=srv.get("port", 3001),
                allowed_origins=srv.get("allowed_origins", ["http://localhost:3000"]),
                environment=srv.get("environment", "development"),
                min_build_id_length=srv.get("min_build_id_length", 10),
                download_prefix=srv.get("download_prefix", "/api/builder/download"),
            )

        return config

    @classmethod
    def from_env(cls) -> "BuilderConfig":
        """Create configuration from environment variables."""
        config = cls()

        config.log_level = os.environ.get("LOG_LEVEL", config.log_level).upper()
        config.storage.builds_dir = os.environ.get("BUILDS_DIR", config.storage.builds_dir)
        config.storage.expiry_hours = float(
            os.environ.get("BUILD_EXPIRY_HOURS", config.storage.expiry_hours)
        )
        config.fetch.timeout_seconds = float(
            os.environ.get("FETCH_TIMEOUT_SECONDS", config.fetch.timeout_seconds)
        )
        config.server.port = int(os.environ.get("PORT", config.server.port))
        config.server.environment = os.environ.get(
            "ENVIRONMENT", config.server.environment
        )
        config.generator.tables_path = os.environ.get(
            "RESOURCE_TABLES_PATH", config.generator.tables_path
        )

        origins = os.environ.get("ALLOWED_ORIGINS")
        if origins:
            config.server.allowed_origins = [
                o.strip() for o in origins.split(",") if o.strip()
            ]

        return config

    @property
    def builds_path(self) -> Path:
        return Path(self.storage.builds_dir)

    @property
    def is_production(self) -> bool:
        return self.server.environment == "production"

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "name": self.name,
            "log_level": self.log_level,
            "fetch": {
                "timeout_seconds": self.fetch.timeout_seconds,
                "user_agent": self.fetch.user_agent,
                "accept": self.fetch.accept,
            },
            "storage": {
                "builds_dir": self.storage.builds_dir,
                "expiry_hours": self.storage.expiry_hours,
                "sweep_interval_minutes": self.storage.sweep_interval_minutes,
            },
            "generator": {
                "default_app_name": self.generator.default_app_name,
                "compression_level": self.generator.compression_level,
                "tables_path": self.generator.tables_path,
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "allowed_origins": list(self.server.allowed_origins),
                "environment": self.server.environment,
                "min_build_id_length": self.server.min_build_id_length,
                "download_prefix": self.server.download_prefix,
            },
        }


def load_config(config_path: str | Path) -> BuilderConfig:
    """Load configuration from YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return BuilderConfig.from_dict(data)


def configure_logging(level: str = "INFO") -> None:
    """Install the service log format on the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
