"""
Base interface for image codecs.

The pipeline never touches an image library directly; it goes through
an ImageCodec so that any conformant backend can decode, resize and
encode rasters for it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..types import Raster

RESAMPLE_FILTERS = ("lanczos", "bicubic")


class ImageCodec(ABC):
    """
    Abstract base class for raster codecs.

    Implementations must be safe to call from several worker threads at
    once, as long as each call works on its own raster.
    """

    @property
    @abstractmethod
    def codec_name(self) -> str:
        """Get the name of this codec."""
        pass

    @abstractmethod
    def decode(self, data: bytes) -> Raster:
        """
        Decode an encoded image, detecting its format from the content.

        Args:
            data: Complete file content

        Returns:
            Raster of shape (height, width, channels)

        Raises:
            ValueError: If the content is not a decodable image
        """
        pass

    @abstractmethod
    def resize(self, pixels: Raster, width: int, height: int, resample: str) -> Raster:
        """
        Resize a raster to exactly ``width`` x ``height`` pixels.

        Args:
            pixels: Source raster
            width: Target width in pixels
            height: Target height in pixels
            resample: Name of the interpolation filter (see RESAMPLE_FILTERS)

        Returns:
            Resized raster
        """
        pass

    @abstractmethod
    def encode(self, pixels: Raster, fmt: str, quality: int) -> bytes:
        """
        Encode a raster into a compressed in-memory buffer.

        Args:
            pixels: Raster to encode
            fmt: Target format name, e.g. "JPEG"
            quality: Quality setting on a 1-100 scale

        Returns:
            Encoded bytes
        """
        pass
