"""
Error taxonomy for derivative image generation.

Input construction errors are fatal and surface to the caller. Corrupt image
bytes found at a validation checkpoint never surface: the pipeline degrades to
a placeholder instead.
"""

from __future__ import annotations


class ImageGeneratorError(Exception):
    """Base class for every error raised by pixforge."""


class InvalidParameters(ImageGeneratorError, ValueError):
    """Transform parameters are missing or malformed."""


class InvalidUrl(ImageGeneratorError, ValueError):
    """A filename cannot be split into prefix, basename and suffix."""


class InvalidCornerCode(ImageGeneratorError, ValueError):
    """Corner code is not one of [tmb][lcr]."""


class UnsupportedFormat(ImageGeneratorError, ValueError):
    """An explicitly declared image format is not supported."""


class CapabilityUnavailable(ImageGeneratorError, RuntimeError):
    """The runtime cannot decode a supported format (missing codec)."""


class UndefinedBreakpoint(ImageGeneratorError, ValueError):
    """No crop rectangle is registered for the selected breakpoint."""


class SourceNotFound(ImageGeneratorError, FileNotFoundError):
    """The source image path does not exist."""


class TargetExists(ImageGeneratorError, FileExistsError):
    """The target path already exists and will not be overwritten."""


class DecodeFailure(ImageGeneratorError, OSError):
    """Image bytes could not be decoded."""


class EncodeFailure(ImageGeneratorError, OSError):
    """Image could not be encoded to disk."""


__all__ = [
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
