# File: daogen/utils.py
"""
daogen - Shared Helpers
========================
File-system, checksum and timing helpers used by the exporter and the
orchestrator.  Standard library only.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
import time
from pathlib import Path
from typing import FrozenSet, List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("daogen.utils")

# Entries ``clean_directory`` never removes.
_PRESERVED_ENTRIES: FrozenSet[str] = frozenset({".git", ".gitignore", ".gitkeep"})


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create *path* and its parents if missing."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def clean_directory(path: Path) -> List[str]:
    """
    Remove everything inside *path*, keeping *path* itself and VCS markers.

    Returns one message per entry that could not be removed.
    """
    problems: List[str] = []
    if not path.is_dir():
        return problems

    for item in path.iterdir():
        if item.name in _PRESERVED_ENTRIES:
            continue
        try:
            if item.is_dir() and not item.is_symlink():
                shutil.rmtree(item)
            else:
                item.unlink()
        except OSError as exc:
            problems.append(f"Could not remove {item}: {exc}")

    logger.debug("Cleaned directory: %s (%d problem(s))", path, len(problems))
    return problems


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """SHA-256 hex digest of *content* encoded as UTF-8."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Number of lines; a trailing newline does not start a new one."""
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context-manager stopwatch.

    Usage:
        with Timer("table customer") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


__all__: List[str] = [
    "ensure_directory",
    "clean_directory",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("daogen.utils loaded — %d public symbols.", len(__all__))
