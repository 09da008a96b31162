"""Filesystem helpers for destination directories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from .exceptions import DirectoryError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".jpg"


def ensure_directory(path: Union[str, Path]) -> Path:
    """Create ``path`` (and parents) if missing. Existing directories are fine."""
    directory = Path(path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryError(f"Cannot create directory: {exc}", directory) from exc
    return directory


def clean_directory(path: Union[str, Path]) -> int:
    """
    Delete every file below ``path``, keeping the directory tree itself.

    Creates ``path`` when it does not exist yet.

    Returns:
        Number of files removed
    """
    directory = Path(path)
    if not directory.exists():
        ensure_directory(directory)
        logger.info("Created empty directory %s", directory)
        return 0
    if not directory.is_dir():
        raise DirectoryError(f"Not a directory: {directory}", directory)

    removed = 0
    try:
        for entry in list(directory.rglob("*")):
            if entry.is_file() or entry.is_symlink():
                entry.unlink()
                removed += 1
    except OSError as exc:
        raise DirectoryError(f"Cannot clean directory: {exc}", directory) from exc

    logger.info("Removed %d file(s) from %s", removed, directory)
    return removed


def output_path_for(
    dest_dir: Union[str, Path], base_name: str, extension: str = DEFAULT_EXTENSION
) -> Path:
    """Build the output file path for an image, ignoring its source extension."""
    return Path(dest_dir) / f"{base_name}{extension}"
