"""
Archive Packager

Serialize a generated scaffold directory into a zip archive buffer.
"""

import io
import logging
import os
import zipfile
from pathlib import Path

from fhir_builder.errors import PackagingError

log = logging.getLogger(__name__)

# Fixed entry timestamp so identical trees produce identical archives
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


class ArchivePackager:
    """Pack directory trees into deflated zip archives."""

    def __init__(self, compression_level: int = 9):
        self.compression_level = compression_level

    def pack(self, directory_root: str | Path) -> bytes:
        """Zip every file under directory_root, paths relative to the root."""
        root = Path(directory_root)

        if not root.is_dir():
            raise PackagingError(f"Scaffold directory not found: {root}")

        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(
                buffer,
                "w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compression_level,
            ) as archive:
                for path in self._walk(root):
                    info = zipfile.ZipInfo(path.relative_to(root).as_posix(), ZIP_EPOCH)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    info.external_attr = 0o644 << 16
                    archive.writestr(
                        info,
                        path.read_bytes(),
                        compresslevel=self.compression_level,
                    )
        except OSError as e:
            raise PackagingError(f"Failed to archive scaffold: {e}") from e

        data = buffer.getvalue()
        log.info("Packed %s into %d bytes", root, len(data))
        return data

    @staticmethod
    def _walk(root: Path) -> list[Path]:
        def on_error(error: OSError) -> None:
            raise error

        files: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            dirnames.sort()
            for name in sorted(filenames):
                files.append(Path(dirpath) / name)
        return files
