"""
Build Data Types

Build request and build record models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fhir_builder.scaffold.stacks import DEFAULT_STACK, Stack


def check_capability_url(value: str) -> str:
    """Require an absolute http(s) URL."""
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Must be a valid URL")
    return value


class BuildRequest(BaseModel):
    """Request to generate an application scaffold."""

    model_config = ConfigDict(populate_by_name=True)

    capability_statement_url: str = Field(alias="capabilityStatementUrl")
    stack: Stack = DEFAULT_STACK
    resources: list[str] = Field(min_length=1)
    app_name: str | None = Field(default=None, alias="appName", min_length=1)
    description: str | None = None
    features: list[str] | None = None

    @field_validator("capability_statement_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return check_capability_url(value)


class BuildStatus(str, Enum):
    """Build lifecycle states."""

    PENDING = "pending"
    CAPABILITY_FETCHED = "capability_fetched"
    VALIDATED = "validated"
    GENERATED = "generated"
    PACKAGED = "packaged"
    READY = "ready"
    EXPIRED = "expired"
    DELETED_ON_ERROR = "deleted_on_error"


@dataclass
class BuildRecord:
    """A generated scaffold and its download handle."""

    build_id: str
    download_url: str
    created_at: datetime
    expires_at: datetime
    stack: Stack = DEFAULT_STACK
    resources: list[str] = field(default_factory=list)
    status: BuildStatus = BuildStatus.PENDING
    size_bytes: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "buildId": self.build_id,
            "downloadUrl": self.download_url,
            "createdAt": self.created_at.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
            "stack": self.stack.value,
            "resources": list(self.resources),
            "status": self.status.value,
            "sizeBytes": self.size_bytes,
        }
