"""Work items handed between the stages of the resize pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

import numpy as np
import numpy.typing as npt

Raster = npt.NDArray[np.uint8]
Size = Tuple[int, int]


@dataclass(frozen=True)
class ImageTask:
    """One source file scheduled for resizing."""

    source_path: Path
    base_name: str
    target_dir: Path

    @classmethod
    def from_path(cls, source_path: Path, target_dir: Path) -> "ImageTask":
        source_path = Path(source_path)
        return cls(
            source_path=source_path,
            base_name=source_path.stem,
            target_dir=Path(target_dir),
        )


@dataclass(eq=False)
class DecodedImage:
    """Fully decoded raster, owned by the pipeline until it is transformed."""

    pixels: Raster = field(repr=False)
    width: int
    height: int
    base_name: str
    source_path: Path

    @property
    def size(self) -> Size:
        return self.width, self.height


@dataclass(eq=False)
class EncodedArtifact:
    """Compressed output image waiting to be written to disk."""

    data: bytes = field(repr=False)
    base_name: str
    source_path: Path
    width: int
    height: int
    format: str = "JPEG"
    quality: int = 100

    @property
    def size(self) -> Size:
        return self.width, self.height


__all__ = [
    "Raster",
    "Size",
    "ImageTask",
    "DecodedImage",
    "EncodedArtifact",
]
