"""
Build Storage

Filesystem storage for scratch directories and packaged build archives.
"""

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"
TEMP_SUFFIX = ".tmp"
_BUILD_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def is_valid_build_id(build_id: str | None, min_length: int = 10) -> bool:
    """Check a build id is long enough and safe to use as a file name."""
    return (
        bool(build_id)
        and len(build_id) >= min_length
        and _BUILD_ID_PATTERN.match(build_id) is not None
    )


class BuildStore:
    """Stores build archives as ``<build_id>.zip`` under a builds directory.

    Scratch directories for in-progress builds live beside the archives as
    ``<build_id>/``. Archives are written to a temporary file first and then
    renamed into place, so readers and the sweep never see a partial file.
    """

    def __init__(self, builds_dir: str | Path = "builds"):
        self.builds_dir = Path(builds_dir)

    def ensure_directory(self) -> None:
        if not self.builds_dir.exists():
            self.builds_dir.mkdir(parents=True, exist_ok=True)
            log.info("Created builds directory: %s", self.builds_dir)

    def scratch_dir(self, build_id: str) -> Path:
        return self.builds_dir / build_id

    def archive_path(self, build_id: str) -> Path:
        return self.builds_dir / f"{build_id}{ARCHIVE_SUFFIX}"

    def remove_scratch(self, build_id: str) -> None:
        """Remove a build's scratch directory if it exists."""
        scratch = self.scratch_dir(build_id)
        if scratch.exists():
            shutil.rmtree(scratch)

    def save(self, build_id: str, data: bytes) -> Path:
        """Atomically persist an archive."""
        self.ensure_directory()
        target = self.archive_path(build_id)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{build_id}.", suffix=TEMP_SUFFIX, dir=self.builds_dir
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, target)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        return target

    def load(self, build_id: str) -> bytes | None:
        """Read an archive, or None if it does not exist."""
        path = self.archive_path(build_id)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def exists(self, build_id: str) -> bool:
        return self.archive_path(build_id).is_file()

    def delete(self, build_id: str) -> None:
        self.archive_path(build_id).unlink()

    def archives(self) -> list[Path]:
        """All persisted archives."""
        if not self.builds_dir.is_dir():
            return []
        return sorted(
            p for p in self.builds_dir.iterdir()
            if p.is_file() and p.suffix == ARCHIVE_SUFFIX
        )

    def leftovers(self) -> list[Path]:
        """Scratch directories and partial archive writes left by interrupted builds."""
        if not self.builds_dir.is_dir():
            return []
        return sorted(
            p for p in self.builds_dir.iterdir()
            if p.is_dir()
            or (p.is_file() and p.name.startswith(".") and p.suffix == TEMP_SUFFIX)
        )

    def remove(self, path: Path) -> None:
        """Remove a leftover directory tree or file."""
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
