"""
Error types raised by the image resizing pipeline.

Every stage failure carries the file it was working on and the stage
name, so a failed batch can be diagnosed without re-running it.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Union

PathLike = Union[str, Path]


class ResizerError(Exception):
    """Base class for all resizer failures."""

    stage: Optional[str] = None

    def __init__(self, message: str, path: Optional[PathLike] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        message = super().__str__()
        if self.path is None:
            return message
        return f"{message} [{self.stage or 'batch'}: {self.path}]"


class DirectoryError(ResizerError, OSError):
    """Raised when a source directory is missing or a destination cannot be created."""

    stage = "directory"


class DecodeError(ResizerError):
    """Raised when a file cannot be read or is not a decodable image."""

    stage = "decode"


class TransformError(ResizerError):
    """Raised when resizing or encoding a decoded raster fails."""

    stage = "transform"


class WriteError(ResizerError):
    """Raised when an encoded image cannot be persisted."""

    stage = "write"


class BatchError(ResizerError):
    """
    Raised by the concurrent pipeline after a generation barrier.

    Holds every error collected from the failed generation, in the
    order the work items were submitted.
    """

    def __init__(self, stage: str, errors: Sequence[ResizerError]):
        self.stage = stage
        self.errors: List[ResizerError] = list(errors)
        super().__init__(
            f"{len(self.errors)} item(s) failed during {stage}: "
            + "; ".join(str(error) for error in self.errors)
        )

    @property
    def first(self) -> Optional[ResizerError]:
        return self.errors[0] if self.errors else None

    @classmethod
    def for_stage(cls, stage: str, errors: Sequence[ResizerError]) -> "BatchError":
        """Build the batch error matching ``stage``, falling back to BatchError."""
        return _BATCH_ERRORS.get(stage, cls)(stage, errors)


class DecodeBatchError(BatchError, DecodeError):
    """A decode generation failed; also catchable as DecodeError."""


class TransformBatchError(BatchError, TransformError):
    """A transform generation failed; also catchable as TransformError."""


class WriteBatchError(BatchError, WriteError):
    """A write generation failed; also catchable as WriteError."""


_BATCH_ERRORS = {
    "decode": DecodeBatchError,
    "transform": TransformBatchError,
    "write": WriteBatchError,
}


__all__ = [
    "ResizerError",
    "DirectoryError",
    "DecodeError",
    "TransformError",
    "WriteError",
    "BatchError",
    "DecodeBatchError",
    "TransformBatchError",
    "WriteBatchError",
]
