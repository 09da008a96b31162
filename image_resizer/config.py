"""
Configuration management for the image resizer.

This module provides a structured configuration class for resize batches
with validation and type safety.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from .codecs.base import RESAMPLE_FILTERS
from .stages import DEFAULT_FORMAT, DEFAULT_QUALITY, DEFAULT_RESAMPLE
from .storage import DEFAULT_EXTENSION

ENV_PREFIX = "IMAGE_RESIZER_"


def validate_scale(scale: float) -> float:
    """Check that ``scale`` is a finite positive number and return it as float."""
    if isinstance(scale, bool) or not isinstance(scale, (int, float)):
        raise ValueError(f"scale must be a number, got {scale!r}")
    if not math.isfinite(scale) or scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    return float(scale)


@dataclass
class ResizeConfig:
    """
    Complete configuration for a resize batch.

    Defaults reproduce the reference behavior: JPEG output at maximum
    quality, Lanczos resampling, sequential execution and one worker per
    image when running concurrently.
    """

    scale: float = 1.0
    concurrent: bool = False

    # Output encoding
    output_format: str = DEFAULT_FORMAT
    output_extension: str = DEFAULT_EXTENSION
    quality: int = DEFAULT_QUALITY
    resample: str = DEFAULT_RESAMPLE

    # None means one worker per image in a generation
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate and normalize configuration."""
        self.scale = validate_scale(self.scale)

        if not (1 <= self.quality <= 100):
            raise ValueError(f"quality must be between 1 and 100, got {self.quality}")

        self.resample = self.resample.lower()
        if self.resample not in RESAMPLE_FILTERS:
            raise ValueError(
                f"Unsupported resample filter: {self.resample} "
                f"(expected one of {', '.join(RESAMPLE_FILTERS)})"
            )

        if not self.output_extension.startswith("."):
            self.output_extension = f".{self.output_extension}"

        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, object] | None) -> "ResizeConfig":
        """
        Create configuration from dictionary.

        Args:
            config_dict: Configuration mapping (can be None)

        Returns:
            ResizeConfig instance
        """
        if not config_dict:
            return cls()

        config_data: Dict[str, Any] = dict(config_dict)

        allowed = {
            "scale",
            "concurrent",
            "output_format",
            "output_extension",
            "quality",
            "resample",
            "max_workers",
        }
        unexpected = set(config_data) - allowed
        if unexpected:
            raise ValueError(
                f"Unsupported configuration keys provided: {sorted(unexpected)}"
            )

        return cls(**config_data)

    @classmethod
    def from_env(
        cls, overrides: Mapping[str, object] | None = None, prefix: str = ENV_PREFIX
    ) -> "ResizeConfig":
        """
        Create configuration from ``IMAGE_RESIZER_*`` environment variables.

        A ``.env`` file in the working directory is loaded first. Values in
        ``overrides`` win over the environment.
        """
        load_dotenv()

        config_data: Dict[str, object] = {}
        quality = os.getenv(f"{prefix}QUALITY")
        if quality:
            config_data["quality"] = _parse_int(f"{prefix}QUALITY", quality)
        max_workers = os.getenv(f"{prefix}MAX_WORKERS")
        if max_workers:
            config_data["max_workers"] = _parse_int(f"{prefix}MAX_WORKERS", max_workers)
        resample = os.getenv(f"{prefix}RESAMPLE")
        if resample:
            config_data["resample"] = resample

        if overrides:
            config_data.update(
                {key: value for key, value in overrides.items() if value is not None}
            )

        return cls.from_dict(config_data)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration
        """
        return {
            "scale": self.scale,
            "concurrent": self.concurrent,
            "output_format": self.output_format,
            "output_extension": self.output_extension,
            "quality": self.quality,
            "resample": self.resample,
            "max_workers": self.max_workers,
        }


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
