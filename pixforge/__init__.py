"""
Public package interface for pixforge.

pixforge generates resized and cropped derivative images whose transform
parameters are encoded in the target filename, e.g.
``photo__w320h240-csmart_1a2b3c.jpg``.
"""

from __future__ import annotations

from pixforge.domain.exceptions import (
    CapabilityUnavailable,
    DecodeFailure,
    EncodeFailure,
    ImageGeneratorError,
    InvalidCornerCode,
    InvalidParameters,
    InvalidUrl,
    SourceNotFound,
    TargetExists,
    UndefinedBreakpoint,
    UnsupportedFormat,
)
from pixforge.domain.types.crop import CropRect, MaxCropSize
from pixforge.domain.types.request import ScaleMode, TransformRequest
from pixforge.io.formats import is_valid_image
from pixforge.io.settings import GeneratorSettings
from pixforge.io.url import decode_filename, encode_filename
from pixforge.ops.pipeline import GenerationResult, ImageGenerator, Stage
from pixforge.ops.transforms.registry import Strategy

__all__ = [
    "ImageGenerator",
    "GenerationResult",
    "GeneratorSettings",
    "Stage",
    "Strategy",
    "TransformRequest",
    "ScaleMode",
    "MaxCropSize",
    "CropRect",
    "encode_filename",
    "decode_filename",
    "is_valid_image",
    "ImageGeneratorError",
    "InvalidParameters",
    "InvalidUrl",
    "InvalidCornerCode",
    "UnsupportedFormat",
    "CapabilityUnavailable",
    "UndefinedBreakpoint",
    "SourceNotFound",
    "TargetExists",
    "DecodeFailure",
    "EncodeFailure",
]
