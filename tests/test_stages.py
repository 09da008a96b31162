"""Tests for the decode, transform and write stages."""

import io
import os
from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from image_resizer.codecs import PillowCodec
from image_resizer.exceptions import DecodeError, TransformError, WriteError
from image_resizer.stages import (
    compute_target_size,
    decode_image,
    transform_image,
    write_artifact,
)
from image_resizer.types import DecodedImage, EncodedArtifact, ImageTask
from tests.test_fixtures import RecordingCodec


@pytest.fixture
def codec():
    return PillowCodec()


def _decoded(width: int, height: int, name: str = "sample") -> DecodedImage:
    return DecodedImage(
        pixels=np.full((height, width, 3), 128, dtype=np.uint8),
        width=width,
        height=height,
        base_name=name,
        source_path=Path(f"/src/{name}.png"),
    )


class TestComputeTargetSize:
    """Target dimensions truncate instead of rounding."""

    @pytest.mark.parametrize(
        "size, scale, expected",
        [
            ((100, 50), 0.5, (50, 25)),
            ((200, 200), 0.5, (100, 100)),
            ((101, 51), 0.5, (50, 25)),
            ((99, 99), 0.333, (32, 32)),
            ((10, 10), 1.99, (19, 19)),
            ((640, 480), 2.0, (1280, 960)),
        ],
    )
    def test_floor_of_scaled_dimensions(self, size, scale, expected):
        assert compute_target_size(*size, scale) == expected

    def test_tiny_scale_yields_zero(self):
        assert compute_target_size(3, 3, 0.1) == (0, 0)


class TestDecodeImage:
    """Test cases for decode_image."""

    def test_captures_natural_dimensions(self, tmp_path, make_image, codec):
        path = make_image(tmp_path / "wide.png", (100, 50))
        task = ImageTask.from_path(path, tmp_path / "out")

        decoded = decode_image(task, codec)

        assert (decoded.width, decoded.height) == (100, 50)
        assert decoded.pixels.shape == (50, 100, 3)
        assert decoded.pixels.dtype == np.uint8
        assert decoded.base_name == "wide"
        assert decoded.source_path == path

    def test_detects_format_from_content(self, tmp_path, codec):
        """A JPEG saved with a .png name still decodes."""
        path = tmp_path / "misnamed.png"
        Image.new("RGB", (12, 8), color=(1, 2, 3)).save(path, format="JPEG")

        decoded = decode_image(ImageTask.from_path(path, tmp_path), codec)

        assert decoded.size == (12, 8)

    def test_flattens_alpha_to_rgb(self, tmp_path, codec):
        path = tmp_path / "alpha.png"
        Image.new("RGBA", (6, 4), color=(255, 0, 0, 128)).save(path)

        decoded = decode_image(ImageTask.from_path(path, tmp_path), codec)

        assert decoded.pixels.shape == (4, 6, 3)

    def test_corrupted_file_raises_decode_error(self, tmp_path, codec):
        path = tmp_path / "broken.png"
        path.write_bytes(b"\x89PNG\r\n\x1a\n this is not really a png")

        with pytest.raises(DecodeError) as excinfo:
            decode_image(ImageTask.from_path(path, tmp_path), codec)

        assert excinfo.value.path == path
        assert excinfo.value.stage == "decode"
        assert "broken.png" in str(excinfo.value)

    def test_unreadable_file_raises_decode_error(self, tmp_path, codec):
        missing = tmp_path / "gone.jpg"

        with pytest.raises(DecodeError, match="Cannot read image file"):
            decode_image(ImageTask.from_path(missing, tmp_path), codec)


class TestTransformImage:
    """Test cases for transform_image."""

    def test_resizes_and_encodes_jpeg(self, codec):
        artifact = transform_image(_decoded(100, 50, "a"), 0.5, codec)

        assert artifact.size == (50, 25)
        assert artifact.base_name == "a"
        assert artifact.format == "JPEG"
        assert artifact.quality == 100
        with Image.open(io.BytesIO(artifact.data)) as img:
            assert img.format == "JPEG"
            assert img.size == (50, 25)

    def test_upscaling(self, codec):
        artifact = transform_image(_decoded(10, 20), 2.5, codec)
        assert artifact.size == (25, 50)

    def test_bicubic_filter(self, codec):
        artifact = transform_image(_decoded(40, 40), 0.5, codec, resample="bicubic")
        assert artifact.size == (20, 20)

    def test_custom_format_and_quality(self, codec):
        artifact = transform_image(
            _decoded(40, 20), 0.5, codec, output_format="PNG", quality=80
        )

        assert artifact.format == "PNG"
        assert artifact.quality == 80
        with Image.open(io.BytesIO(artifact.data)) as img:
            assert img.format == "PNG"

    def test_empty_target_raises_transform_error(self, codec):
        with pytest.raises(TransformError, match="empty 0x0 image"):
            transform_image(_decoded(3, 3), 0.1, codec)

    def test_codec_failure_raises_transform_error(self):
        codec = RecordingCodec(fail_encode_for={(5, 5)})

        with pytest.raises(TransformError) as excinfo:
            transform_image(_decoded(10, 10, "bad"), 0.5, codec)

        assert excinfo.value.stage == "transform"
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert excinfo.value.path == Path("/src/bad.png")

    def test_unknown_resample_filter_raises_transform_error(self, codec):
        with pytest.raises(TransformError, match="Unsupported resample filter"):
            transform_image(_decoded(10, 10), 0.5, codec, resample="nearest")


class TestWriteArtifact:
    """Test cases for write_artifact."""

    def _artifact(self, name: str, data: bytes = b"jpeg-bytes") -> EncodedArtifact:
        return EncodedArtifact(
            data=data,
            base_name=name,
            source_path=Path(f"/src/{name}.png"),
            width=1,
            height=1,
        )

    def test_writes_with_jpg_extension(self, tmp_path):
        output = write_artifact(self._artifact("photo"), tmp_path)

        assert output == tmp_path / "photo.jpg"
        assert output.read_bytes() == b"jpeg-bytes"

    def test_custom_extension(self, tmp_path):
        output = write_artifact(self._artifact("photo"), tmp_path, extension=".png")
        assert output.name == "photo.png"

    def test_overwrites_existing_file_completely(self, tmp_path):
        """A shorter artifact must not leave stale trailing bytes behind."""
        existing = tmp_path / "photo.jpg"
        existing.write_bytes(b"x" * 100)

        write_artifact(self._artifact("photo", b"new"), tmp_path)

        assert existing.read_bytes() == b"new"

    def test_missing_directory_raises_write_error(self, tmp_path):
        with pytest.raises(WriteError) as excinfo:
            write_artifact(self._artifact("photo"), tmp_path / "missing")

        assert excinfo.value.path == tmp_path / "missing" / "photo.jpg"

    def test_io_failure_raises_write_error(self, tmp_path):
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(WriteError, match="denied"):
                write_artifact(self._artifact("photo"), tmp_path)

    @pytest.mark.skipif(
        os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_read_only_directory_raises_write_error(self, tmp_path):
        read_only = tmp_path / "ro"
        read_only.mkdir()
        read_only.chmod(0o500)
        try:
            with pytest.raises(WriteError):
                write_artifact(self._artifact("photo"), read_only)
        finally:
            read_only.chmod(0o700)
