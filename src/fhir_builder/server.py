"""
FHIR Builder FastAPI Server

REST API for capability analysis and scaffold generation.

Usage:
    uvicorn fhir_builder.server:app --reload --port 3001

Endpoints:
    POST /api/builder/generate              - Generate a scaffold build
    GET  /api/builder/download/{build_id}   - Download a generated scaffold
    GET  /api/builder/capability-statement  - Analyze a capability statement
    POST /api/builder/check                 - Check resource support and complexity
    GET  /health                            - Health check

Author: Cleansheet LLC
License: CC BY 4.0
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, field_validator

from fhir_builder import __version__
from fhir_builder.builder.config import BuilderConfig, configure_logging
from fhir_builder.builder.models import BuildRequest, check_capability_url
from fhir_builder.builder.orchestrator import BuildOrchestrator
from fhir_builder.errors import BuilderError, UnsupportedResourcesError

log = logging.getLogger(__name__)


def _timestamp(value: datetime | None = None) -> str:
    value = value or datetime.now(timezone.utc)
    return value.isoformat().replace("+00:00", "Z")


# =============================================================================
# Request/Response Models
# =============================================================================

class ResourceCheckRequest(BaseModel):
    """Request body for resource support checks."""

    model_config = ConfigDict(populate_by_name=True)

    capability_statement_url: str = Field(alias="capabilityStatementUrl")
    resources: list[str] = Field(min_length=1)

    @field_validator("capability_statement_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return check_capability_url(value)


class BuildMetadata(BaseModel):
    stack: str
    resources: list[str]
    generatedAt: str


class GenerateResponse(BaseModel):
    """Response from the generate endpoint."""

    success: bool
    buildId: str
    downloadUrl: str
    expiresAt: str
    metadata: BuildMetadata


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    version: str


# =============================================================================
# Error Responses
# =============================================================================

def error_response(
    status_code: int, error: str, message: str, **extra: Any
) -> JSONResponse:
    """JSON error body shared by every endpoint."""
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "timestamp": _timestamp(), **extra},
    )


def builder_error_response(exc: BuilderError) -> JSONResponse:
    extra: dict[str, Any] = {}
    if isinstance(exc, UnsupportedResourcesError):
        extra = {
            "unsupportedResources": exc.unsupported,
            "supportedResources": exc.supported,
            "suggestions": exc.suggestions,
        }
    return error_response(exc.status_code, exc.error, exc.user_message, **extra)


def unexpected_error_response(
    config: BuilderConfig, error: str, exc: Exception, fallback: Optional[str] = None
) -> JSONResponse:
    """500 response; hides raw exception text in production."""
    if config.is_production:
        message = fallback or "An unexpected error occurred"
    else:
        message = str(exc) or fallback or "An unexpected error occurred"
    return error_response(500, error, message)


# =============================================================================
# Routes
# =============================================================================

router = APIRouter(prefix="/api/builder")


def get_orchestrator(request: Request) -> BuildOrchestrator:
    return request.app.state.orchestrator


@router.post("/generate", response_model=GenerateResponse)
def generate(
    build_request: BuildRequest,
    orchestrator: BuildOrchestrator = Depends(get_orchestrator),
):
    """Generate a FHIR application scaffold."""
    log.info(
        "Received build request: url=%s stack=%s resources=%d",
        build_request.capability_statement_url,
        build_request.stack.value,
        len(build_request.resources),
    )

    try:
        record = orchestrator.create_build(build_request)
    except BuilderError as e:
        return builder_error_response(e)
    except Exception as e:
        log.exception("Build generation failed")
        return unexpected_error_response(
            orchestrator.config, "Build Generation Failed", e
        )

    return GenerateResponse(
        success=True,
        buildId=record.build_id,
        downloadUrl=record.download_url,
        expiresAt=_timestamp(record.expires_at),
        metadata=BuildMetadata(
            stack=build_request.stack.value,
            resources=build_request.resources,
            generatedAt=_timestamp(),
        ),
    )


@router.get("/download/{build_id}")
def download(
    build_id: str,
    orchestrator: BuildOrchestrator = Depends(get_orchestrator),
):
    """Download a generated scaffold archive."""
    try:
        data = orchestrator.get_build(build_id)
    except BuilderError as e:
        return builder_error_response(e)
    except Exception as e:
        log.exception("Download failed for %s", build_id)
        return unexpected_error_response(
            orchestrator.config,
            "Download Failed",
            e,
            fallback="Unable to retrieve the scaffold. Please try generating again.",
        )

    return Response(
        content=data,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="fhir-app-{build_id}.zip"',
        },
    )


@router.get("/capability-statement")
def capability_statement(
    url: Optional[str] = None,
    orchestrator: BuildOrchestrator = Depends(get_orchestrator),
):
    """Fetch and analyze a capability statement for client-side preview."""
    if not url:
        return error_response(
            400, "Missing URL", "Capability Statement URL is required"
        )

    try:
        analysis = orchestrator.analyze_url(url)
    except BuilderError as e:
        return error_response(500, "Analysis Failed", e.user_message)
    except Exception as e:
        log.exception("Capability statement analysis failed for %s", url)
        return unexpected_error_response(
            orchestrator.config,
            "Analysis Failed",
            e,
            fallback="Unable to analyze the capability statement. Please check the URL and try again.",
        )

    return {
        "success": True,
        "url": url,
        "analysis": analysis.to_dict(),
        "timestamp": _timestamp(),
    }


@router.post("/check")
def check_resources(
    check_request: ResourceCheckRequest,
    orchestrator: BuildOrchestrator = Depends(get_orchestrator),
):
    """Check requested resources against a server and estimate complexity."""
    try:
        analysis, check, estimate = orchestrator.check_resources(
            check_request.capability_statement_url, check_request.resources
        )
    except BuilderError as e:
        return builder_error_response(e)
    except Exception as e:
        log.exception("Resource check failed")
        return unexpected_error_response(orchestrator.config, "Check Failed", e)

    return {
        "success": True,
        **check.to_dict(),
        "recommendedResources": list(analysis.recommended_resources),
        "complexity": estimate.to_dict(),
        "timestamp": _timestamp(),
    }


# =============================================================================
# App Factory
# =============================================================================

async def _sweep_periodically(orchestrator: BuildOrchestrator, interval_seconds: float):
    while True:
        await asyncio.sleep(interval_seconds)
        deleted = await asyncio.to_thread(orchestrator.sweep_expired)
        if deleted:
            log.info("Swept %d expired builds", len(deleted))


def create_app(
    orchestrator: Optional[BuildOrchestrator] = None,
    config: Optional[BuilderConfig] = None,
) -> FastAPI:
    """Create the FastAPI application."""
    if orchestrator is None:
        orchestrator = BuildOrchestrator(config or BuilderConfig.from_env())
    config = orchestrator.config
    configure_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = None
        interval = config.storage.sweep_interval_minutes * 60
        if interval > 0:
            task = asyncio.create_task(_sweep_periodically(orchestrator, interval))
        log.info("FHIR Builder Service started (environment: %s)", config.server.environment)
        yield
        if task is not None:
            task.cancel()

    app = FastAPI(
        title="FHIR Builder API",
        description="FHIR capability analysis and application scaffold generation",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allowed_origins,
        allow_credentials=config.server.allowed_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation Error",
                "details": jsonable_encoder(exc.errors()),
                "timestamp": _timestamp(),
            },
        )

    app.include_router(router)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="healthy", timestamp=_timestamp(), version=__version__)

    return app


app = create_app()
