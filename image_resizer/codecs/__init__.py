"""
Image codecs backing the resize pipeline.

This module provides the codec interface and the default Pillow
implementation.
"""

from .base import RESAMPLE_FILTERS, ImageCodec
from .pillow_codec import PillowCodec

__all__ = ["ImageCodec", "PillowCodec", "RESAMPLE_FILTERS"]
