"""
Pillow-backed implementation of the ImageCodec interface.
"""

from __future__ import annotations

import io
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..types import Raster
from .base import RESAMPLE_FILTERS, ImageCodec

logger = logging.getLogger(__name__)

_RESAMPLE = {
    "lanczos": Image.Resampling.LANCZOS,
    "bicubic": Image.Resampling.BICUBIC,
}


class PillowCodec(ImageCodec):
    """
    Codec using Pillow for format detection, resampling and encoding.

    Rasters are exchanged as uint8 RGB numpy arrays. Alpha and palette
    images are flattened to RGB at decode time.
    """

    @property
    def codec_name(self) -> str:
        return "pillow"

    def decode(self, data: bytes) -> Raster:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return np.array(img.convert("RGB"), dtype=np.uint8)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
        ) as exc:
            raise ValueError(f"Cannot decode image data: {exc}") from exc

    def resize(self, pixels: Raster, width: int, height: int, resample: str) -> Raster:
        if resample not in _RESAMPLE:
            raise ValueError(
                f"Unsupported resample filter {resample!r}, expected one of {RESAMPLE_FILTERS}"
            )
        image = Image.fromarray(pixels)
        resized = image.resize((width, height), _RESAMPLE[resample])
        return np.array(resized, dtype=np.uint8)

    def encode(self, pixels: Raster, fmt: str, quality: int) -> bytes:
        buffer = io.BytesIO()
        image = Image.fromarray(pixels)
        if fmt.upper() in {"JPEG", "JPG"}:
            # 4:4:4 chroma
            image.save(buffer, format="JPEG", quality=quality, subsampling=0)
        else:
            image.save(buffer, format=fmt, quality=quality)
        return buffer.getvalue()
