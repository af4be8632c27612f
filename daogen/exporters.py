# File: daogen/exporters.py
"""
daogen - Artifact Writer (File-System Manager)
===============================================

Responsible for:
    1. Creating (and optionally wiping) the package directories up front.
    2. Writing each generated source file atomically (temp file + rename).
    3. Keeping a ``FileRecord`` per written file (size, lines, SHA-256).

A failed write raises ``OutputWriteError`` for that one file; files
written before it stay in place.  In dry-run mode nothing touches the disk
but records are still produced, so the run summary shows what *would*
have been written.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from daogen.errors import OutputWriteError
from daogen.utils import clean_directory, count_lines, ensure_directory, sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.exporters")


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single written (or dry-run) file."""

    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str
    written: bool = True


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """All files produced by one run, in write order."""

    output_directory: str = ""
    files: List[FileRecord] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)


# ---------------------------------------------------------------------------
# ArtifactWriter class
# ---------------------------------------------------------------------------


class ArtifactWriter:
    """
    Writes generated artifacts below one output root.

    Usage::

        writer = ArtifactWriter(Path("generated"))
        writer.prepare(["com/example/model", "com/example/dao"], clean=False)
        record = writer.write("com/example/model/CustomerData.java", source)

    Not thread-safe; one writer per run.
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        dry_run: bool = False,
        atomic_writes: bool = True,
        encoding: str = "utf-8",
    ) -> None:
        self._output_dir: Path = Path(output_dir).resolve()
        self._dry_run: bool = dry_run
        self._atomic_writes: bool = atomic_writes
        self._encoding: str = encoding
        self._manifest: ExportManifest = ExportManifest(
            output_directory=str(self._output_dir)
        )

        logger.debug(
            "ArtifactWriter initialised: output_dir=%s, dry_run=%s, atomic=%s.",
            self._output_dir,
            dry_run,
            atomic_writes,
        )

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    @property
    def manifest(self) -> ExportManifest:
        return self._manifest

    def prepare(self, package_dirs: Sequence[str], *, clean: bool = False) -> List[str]:
        """
        Create each package directory under the output root.

        With *clean*, existing package directories are emptied first.
        Returns warnings for entries that could not be removed.

        Raises:
            OutputWriteError: If a directory cannot be created.
        """
        warnings: List[str] = []
        for rel_dir in package_dirs:
            dir_path: Path = self._output_dir / rel_dir
            if self._dry_run:
                logger.info("[dry run] Would prepare directory %s.", dir_path)
                continue

            if clean and dir_path.exists():
                logger.info("Cleaning output directory: %s", dir_path)
                problems: List[str] = clean_directory(dir_path)
                for problem in problems:
                    logger.warning(problem)
                warnings.extend(problems)

            try:
                ensure_directory(dir_path)
            except OSError as exc:
                raise OutputWriteError(
                    f"Failed to create directory {dir_path}: {exc}"
                ) from exc
        return warnings

    def write(self, relative_path: str, content: str) -> FileRecord:
        """
        Write *content* to ``<output_dir>/<relative_path>``.

        Raises:
            OutputWriteError: If the directory or file cannot be written.
        """
        full_path: Path = self._output_dir / relative_path
        encoded: bytes = content.encode(self._encoding)

        if self._dry_run:
            logger.info("[dry run] Would write %s (%d bytes).", relative_path, len(encoded))
        else:
            try:
                ensure_directory(full_path.parent)
                if self._atomic_writes:
                    self._atomic_write(full_path, encoded)
                else:
                    full_path.write_bytes(encoded)
            except OSError as exc:
                raise OutputWriteError(f"Failed to write {full_path}: {exc}") from exc

        record: FileRecord = FileRecord(
            relative_path=relative_path,
            absolute_path=str(full_path),
            size_bytes=len(encoded),
            line_count=count_lines(content),
            sha256=sha256_hex(content),
            written=not self._dry_run,
        )
        self._manifest.files.append(record)

        logger.debug(
            "Wrote file: %s (%d bytes, %d lines).",
            relative_path,
            record.size_bytes,
            record.line_count,
        )
        return record

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    @staticmethod
    def _atomic_write(target_path: Path, data: bytes) -> None:
        """
        Write to a temp file in the target's directory, then ``os.replace``.

        The temp file lives next to the target so the rename never crosses
        file systems.
        """
        fd: int
        tmp_path: str
        fd, tmp_path = tempfile.mkstemp(
            dir=str(target_path.parent),
            prefix=f".{target_path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, target_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


__all__: List[str] = [
    "FileRecord",
    "ExportManifest",
    "ArtifactWriter",
]

logger.debug("daogen.exporters loaded.")
