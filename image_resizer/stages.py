"""
The three stages of the resize pipeline.

Each stage takes ownership of one work item and returns the next one:

    ImageTask --decode--> DecodedImage --transform--> EncodedArtifact --write--> Path

Stages are plain functions with no shared state, so the orchestrator
can run them on the calling thread or on worker threads unchanged.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Union

from .codecs.base import ImageCodec
from .exceptions import DecodeError, TransformError, WriteError
from .storage import DEFAULT_EXTENSION, output_path_for
from .types import DecodedImage, EncodedArtifact, ImageTask, Size

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "JPEG"
DEFAULT_QUALITY = 100
DEFAULT_RESAMPLE = "lanczos"


def compute_target_size(width: int, height: int, scale: float) -> Size:
    """
    Scale natural dimensions, truncating toward zero.

    >>> compute_target_size(100, 50, 0.5)
    (50, 25)
    >>> compute_target_size(101, 51, 0.5)
    (50, 25)
    """
    return math.floor(width * scale), math.floor(height * scale)


def decode_image(task: ImageTask, codec: ImageCodec) -> DecodedImage:
    """
    Read and decode a source file.

    Raises:
        DecodeError: If the file cannot be read or decoded
    """
    try:
        data = task.source_path.read_bytes()
    except OSError as exc:
        raise DecodeError(f"Cannot read image file: {exc}", task.source_path) from exc

    try:
        pixels = codec.decode(data)
    except ValueError as exc:
        raise DecodeError(str(exc), task.source_path) from exc

    height, width = pixels.shape[:2]
    logger.debug("Decoded %s (%dx%d)", task.source_path, width, height)
    return DecodedImage(
        pixels=pixels,
        width=int(width),
        height=int(height),
        base_name=task.base_name,
        source_path=task.source_path,
    )


def transform_image(
    decoded: DecodedImage,
    scale: float,
    codec: ImageCodec,
    output_format: str = DEFAULT_FORMAT,
    quality: int = DEFAULT_QUALITY,
    resample: str = DEFAULT_RESAMPLE,
) -> EncodedArtifact:
    """
    Resize a decoded raster by ``scale`` and encode it.

    Raises:
        TransformError: If the target size is empty or the codec fails
    """
    width, height = compute_target_size(decoded.width, decoded.height, scale)
    if width < 1 or height < 1:
        raise TransformError(
            f"Scale {scale} reduces {decoded.width}x{decoded.height} to an empty "
            f"{width}x{height} image",
            decoded.source_path,
        )

    try:
        resized = codec.resize(decoded.pixels, width, height, resample)
        data = codec.encode(resized, output_format, quality)
    except Exception as exc:
        raise TransformError(
            f"Cannot resize/encode to {width}x{height}: {exc}", decoded.source_path
        ) from exc

    logger.debug(
        "Transformed %s %dx%d -> %dx%d (%d bytes)",
        decoded.source_path,
        decoded.width,
        decoded.height,
        width,
        height,
        len(data),
    )
    return EncodedArtifact(
        data=data,
        base_name=decoded.base_name,
        source_path=decoded.source_path,
        width=width,
        height=height,
        format=output_format,
        quality=quality,
    )


def write_artifact(
    artifact: EncodedArtifact,
    dest_dir: Union[str, Path],
    extension: str = DEFAULT_EXTENSION,
) -> Path:
    """
    Persist an encoded image as ``dest_dir/<base_name><extension>``.

    An existing file with the same name is overwritten.

    Raises:
        WriteError: On any I/O failure
    """
    output_path = output_path_for(dest_dir, artifact.base_name, extension)
    try:
        with open(output_path, "wb") as f:
            f.write(artifact.data)
    except OSError as exc:
        raise WriteError(f"Cannot write output file: {exc}", output_path) from exc

    logger.debug("Wrote %s", output_path)
    return output_path
