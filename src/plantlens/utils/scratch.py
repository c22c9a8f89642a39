"""Request-scoped scratch files with guaranteed cleanup."""
from __future__ import annotations

import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..errors import CleanupFailed
from .logger import get_logger

logger = get_logger(__name__)


def scratch_path(directory: str | Path, suffix: str = "") -> Path:
    """Return a collision-free path inside ``directory``, creating it if needed."""
    base = Path(directory)
    base.mkdir(parents=True, exist_ok=True)
    return base / f"{uuid.uuid4().hex}{suffix}"


def remove_scratch(path: str | Path) -> None:
    """Delete a scratch file, logging instead of raising when that fails."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as exc:
        error = CleanupFailed(f"Could not remove scratch file {path}: {exc}")
        logger.error("Scratch cleanup failed: {error}", error=error.detail)


@contextmanager
def scratch_file(directory: str | Path, suffix: str = "") -> Iterator[Path]:
    path = scratch_path(directory, suffix)
    try:
        yield path
    finally:
        remove_scratch(path)
