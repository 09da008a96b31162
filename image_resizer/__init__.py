"""
Batch image resizing.

Scales every PNG/JPEG image in a directory tree and writes JPEG copies
into a destination directory, either sequentially or as concurrent
decode, transform and write generations.
"""

from .codecs import ImageCodec, PillowCodec
from .config import ResizeConfig
from .exceptions import (
    BatchError,
    DecodeBatchError,
    DecodeError,
    DirectoryError,
    ResizerError,
    TransformBatchError,
    TransformError,
    WriteBatchError,
    WriteError,
)
from .locator import find_images
from .pipeline import ImageResizer, clean, resize_images, resize_images_async
from .report import BatchReport, OutputRecord
from .types import DecodedImage, EncodedArtifact, ImageTask

__all__ = [
    "ImageResizer",
    "ResizeConfig",
    "ImageCodec",
    "PillowCodec",
    "BatchReport",
    "OutputRecord",
    "ImageTask",
    "DecodedImage",
    "EncodedArtifact",
    "ResizerError",
    "DirectoryError",
    "DecodeError",
    "TransformError",
    "WriteError",
    "BatchError",
    "DecodeBatchError",
    "TransformBatchError",
    "WriteBatchError",
    "find_images",
    "resize_images",
    "resize_images_async",
    "clean",
]
