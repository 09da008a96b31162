"""Discovery of source images below a directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Sequence, Union

from .exceptions import DirectoryError

logger = logging.getLogger(__name__)

IMAGE_PATTERNS: Sequence[str] = ("*.png", "*.jpg", "*.jpeg")


def find_images(
    source_dir: Union[str, Path], patterns: Sequence[str] = IMAGE_PATTERNS
) -> List[Path]:
    """
    Recursively collect image files below ``source_dir``.

    Files are grouped by pattern in the order given (all PNGs, then JPGs,
    then JPEGs). Pattern matching follows the platform's filesystem case
    rules, so ``PHOTO.JPG`` is found on Windows but not on Linux.

    Args:
        source_dir: Directory to scan
        patterns: Glob patterns to match, applied recursively

    Returns:
        List of matching file paths

    Raises:
        DirectoryError: If ``source_dir`` does not exist or cannot be read
    """
    source = Path(source_dir)
    if not source.is_dir():
        raise DirectoryError(f"Source directory not found: {source}", source)

    files: List[Path] = []
    try:
        # rglob skips unreadable directories silently
        with os.scandir(source):
            pass
        for pattern in patterns:
            files.extend(p for p in source.rglob(pattern) if p.is_file())
    except OSError as exc:
        raise DirectoryError(f"Cannot read source directory: {exc}", source) from exc

    logger.debug("Found %d image(s) under %s", len(files), source)
    return files
