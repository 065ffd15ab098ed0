"""
Mutable image handle over a Pillow image.

The handle mirrors the operations the transform strategies need: integer
``width``/``height``, in-place ``crop`` and ``resize`` that return the handle
for chaining, and load/save with decode and encode failures mapped onto the
pixforge error taxonomy.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image
from PIL.Image import Resampling

from pixforge.domain.exceptions import DecodeFailure, EncodeFailure
from pixforge.io.fs import get_file_ext
from pixforge.ops.transforms.geometry import ResizeMode, calculate_cutout, calculate_size, round_half_up

logger = logging.getLogger(__name__)

_EXT_TO_FORMAT = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".gif": "GIF",
}


class ImageHandle:
    def __init__(self, image: Image.Image, format: Optional[str] = None):
        self.image = image
        self.format = format or image.format

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ImageHandle":
        try:
            with Image.open(path) as img:
                img.load()
                fmt = img.format
                image = img.copy()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeFailure(f"Unable to decode image {path}: {e}") from e
        return cls(image, fmt)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def crop(self, left: int, top: int, width: int, height: int) -> "ImageHandle":
        rect = calculate_cutout(self.width, self.height, left, top, width, height)
        self.image = self.image.crop((rect.left, rect.top, rect.left + rect.width, rect.top + rect.height))
        return self

    def resize(self, width: Optional[int], height: Optional[int], mode: ResizeMode = ResizeMode.FIT) -> "ImageHandle":
        new_width, new_height = calculate_size(self.width, self.height, width, height, mode)
        if (new_width, new_height) != (self.width, self.height):
            self.image = self.image.resize((new_width, new_height), Resampling.LANCZOS)
        if mode is ResizeMode.EXACT:
            left = round_half_up((self.width - width) / 2)
            top = round_half_up((self.height - height) / 2)
            self.crop(left, top, width, height)
        return self

    def save(self, path: Union[str, Path], quality: Optional[int] = None) -> None:
        """
        Encode to ``path``. The format follows the file extension, falling
        back to the format the image was decoded from.
        """
        fmt = _EXT_TO_FORMAT.get(get_file_ext(str(path)).lower(), self.format)
        image = self.image
        params = {}
        if fmt == "JPEG":
            if image.mode not in ("RGB", "L", "CMYK"):
                image = image.convert("RGB")
            params = {"quality": quality or 95, "optimize": True}
        elif fmt == "PNG":
            params = {"optimize": True}
        try:
            image.save(path, format=fmt, **params)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeFailure(f"Unable to encode image {path}: {e}") from e

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"{self.__class__.__name__}({self.width}x{self.height}, format={self.format})"
