"""
Build Orchestrator

End-to-end orchestration of capability fetch, analysis, validation,
scaffold generation, packaging and build persistence.
"""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

from fhir_builder.builder.config import BuilderConfig, load_config
from fhir_builder.builder.fetcher import CapabilityFetcher
from fhir_builder.builder.models import BuildRecord, BuildRequest, BuildStatus
from fhir_builder.builder.storage import BuildStore, is_valid_build_id
from fhir_builder.capability.analyzer import CapabilityAnalyzer
from fhir_builder.capability.capability_types import CapabilityAnalysis
from fhir_builder.capability.tables import DEFAULT_TABLES, load_tables
from fhir_builder.capability.validators import (
    ComplexityEstimate,
    ResourceSupportCheck,
    ResourceSupportValidator,
)
from fhir_builder.errors import (
    BuildNotFoundError,
    InvalidBuildIdError,
    PackagingError,
    UnsupportedResourcesError,
)
from fhir_builder.scaffold.generator import ScaffoldGenerator
from fhir_builder.scaffold.packager import ArchivePackager

log = logging.getLogger(__name__)


class BuildOrchestrator:
    """Coordinates scaffold builds and owns their lifecycle."""

    def __init__(
        self,
        config: BuilderConfig | None = None,
        fetcher: CapabilityFetcher | None = None,
        analyzer: CapabilityAnalyzer | None = None,
        validator: ResourceSupportValidator | None = None,
        generator: ScaffoldGenerator | None = None,
        packager: ArchivePackager | None = None,
        store: BuildStore | None = None,
    ):
        """Initialize orchestrator; components not given are created lazily."""
        self.config = config or BuilderConfig()

        self._fetcher = fetcher
        self._analyzer = analyzer
        self._validator = validator
        self._generator = generator
        self._packager = packager
        self._store = store

    @classmethod
    def from_config(cls, config_path: str | Path) -> "BuildOrchestrator":
        """Create orchestrator from config file."""
        return cls(load_config(config_path))

    @property
    def fetcher(self) -> CapabilityFetcher:
        if self._fetcher is None:
            self._fetcher = CapabilityFetcher(self.config.fetch)
        return self._fetcher

    @property
    def analyzer(self) -> CapabilityAnalyzer:
        if self._analyzer is None:
            self._analyzer = CapabilityAnalyzer()
        return self._analyzer

    @property
    def validator(self) -> ResourceSupportValidator:
        if self._validator is None:
            tables_path = self.config.generator.tables_path
            tables = load_tables(tables_path) if tables_path else DEFAULT_TABLES
            self._validator = ResourceSupportValidator(tables)
        return self._validator

    @property
    def generator(self) -> ScaffoldGenerator:
        if self._generator is None:
            self._generator = ScaffoldGenerator(
                default_app_name=self.config.generator.default_app_name
            )
        return self._generator

    @property
    def packager(self) -> ArchivePackager:
        if self._packager is None:
            self._packager = ArchivePackager(self.config.generator.compression_level)
        return self._packager

    @property
    def store(self) -> BuildStore:
        if self._store is None:
            self._store = BuildStore(self.config.builds_path)
            self._store.ensure_directory()
        return self._store

    @property
    def expiry(self) -> timedelta:
        return timedelta(hours=self.config.storage.expiry_hours)

    def analyze_url(self, url: str) -> CapabilityAnalysis:
        """Fetch and analyze the capability statement at url."""
        document = self.fetcher.fetch(url)
        return self.analyzer.analyze(document)

    def check_resources(
        self, url: str, resources: list[str]
    ) -> tuple[CapabilityAnalysis, ResourceSupportCheck, ComplexityEstimate]:
        """Preview whether a resource set can be built against a server."""
        analysis = self.analyze_url(url)
        check = self.validator.validate(resources, analysis.supported_resources)
        estimate = self.validator.estimate_complexity(resources)
        return analysis, check, estimate

    def create_build(self, request: BuildRequest) -> BuildRecord:
        """Generate, package and persist a scaffold for request."""
        build_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        record = BuildRecord(
            build_id=build_id,
            download_url=f"{self.config.server.download_prefix}/{build_id}",
            created_at=now,
            expires_at=now + self.expiry,
            stack=request.stack,
            resources=list(request.resources),
        )

        log.info(
            "Starting scaffold generation %s: url=%s stack=%s resources=%d",
            build_id,
            request.capability_statement_url,
            request.stack.value,
            len(request.resources),
        )

        try:
            document = self.fetcher.fetch(request.capability_statement_url)
            self._advance(record, BuildStatus.CAPABILITY_FETCHED)

            analysis = self.analyzer.analyze(document)
            check = self.validator.validate(
                request.resources, analysis.supported_resources
            )
            if not check.valid:
                raise UnsupportedResourcesError(
                    check.unsupported_resources,
                    analysis.supported_resources,
                    check.suggestions,
                )
            self._advance(record, BuildStatus.VALIDATED)

            scratch = self.store.scratch_dir(build_id)
            self.generator.generate(scratch, request, analysis)
            self._advance(record, BuildStatus.GENERATED)

            data = self.packager.pack(scratch)
            self._advance(record, BuildStatus.PACKAGED)

            try:
                self.store.save(build_id, data)
            except OSError as e:
                raise PackagingError(f"Failed to store build archive: {e}") from e

            record.created_at = datetime.now(timezone.utc)
            record.expires_at = record.created_at + self.expiry
            record.size_bytes = len(data)
            self._advance(record, BuildStatus.READY)

        except Exception as e:
            record.status = BuildStatus.DELETED_ON_ERROR
            log.error("Scaffold generation failed %s: %s", build_id, e)
            raise

        finally:
            self._cleanup_scratch(build_id)

        log.info(
            "Scaffold generation completed %s: %d bytes, expires %s",
            build_id,
            record.size_bytes,
            record.expires_at.isoformat(),
        )
        return record

    def get_build(self, build_id: str) -> bytes:
        """Return a build's archive bytes.

        Expiry is not checked here; an archive is servable until swept.
        """
        if not is_valid_build_id(build_id, self.config.server.min_build_id_length):
            raise InvalidBuildIdError(build_id)

        data = self.store.load(build_id)
        if data is None:
            log.warning("Build archive not found: %s", build_id)
            raise BuildNotFoundError(build_id)
        return data

    def build_status(self, build_id: str, now: float | None = None) -> BuildStatus:
        """Status of a persisted build: ready, or expired but not yet swept."""
        if not is_valid_build_id(build_id, self.config.server.min_build_id_length):
            raise InvalidBuildIdError(build_id)

        try:
            modified = self.store.archive_path(build_id).stat().st_mtime
        except FileNotFoundError:
            raise BuildNotFoundError(build_id) from None

        now = time.time() if now is None else now
        if now - modified > self.expiry.total_seconds():
            return BuildStatus.EXPIRED
        return BuildStatus.READY

    def sweep_expired(self, now: float | None = None) -> list[str]:
        """Delete archives older than the expiry window.

        Scratch directories and partial archive writes left by interrupted
        builds are removed once they are older than the same window.
        Returns the ids of deleted builds. Individual failures are logged
        and skipped.
        """
        now = time.time() if now is None else now
        max_age = self.expiry.total_seconds()
        deleted: list[str] = []

        try:
            archives = self.store.archives()
            leftovers = self.store.leftovers()
        except OSError as e:
            log.error("Failed to list builds for cleanup: %s", e)
            return deleted

        for path in archives:
            try:
                if now - path.stat().st_mtime > max_age:
                    self.store.delete(path.stem)
                    deleted.append(path.stem)
                    log.info("Cleaned up expired build: %s", path.name)
            except OSError as e:
                log.warning("Failed to clean up build %s: %s", path.name, e)

        for path in leftovers:
            try:
                if now - path.stat().st_mtime > max_age:
                    self.store.remove(path)
                    log.info("Cleaned up abandoned build output: %s", path.name)
            except OSError as e:
                log.warning("Failed to clean up %s: %s", path.name, e)

        return deleted

    def _advance(self, record: BuildRecord, status: BuildStatus) -> None:
        record.status = status
        log.debug("Build %s -> %s", record.build_id, status.value)

    def _cleanup_scratch(self, build_id: str) -> None:
        try:
            self.store.remove_scratch(build_id)
        except OSError as e:
            log.warning("Failed to clean up build directory %s: %s", build_id, e)
