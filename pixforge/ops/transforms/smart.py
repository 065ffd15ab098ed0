"""
Smart crop.

The engine only loads the image and hands path, size and handle to a
:class:`SmartCrop` implementation, which crops and saves on its own.
:class:`SaliencySmartCrop` is the default: it cover-resizes to the requested
box and keeps the window with the most gradient energy along the overflowing
axis.
"""

from __future__ import annotations

import logging
from typing import Protocol, Tuple

import numpy as np
from PIL import Image

from pixforge.domain.types.request import TransformRequest
from pixforge.ops.image import ImageHandle
from pixforge.ops.transforms.geometry import ResizeMode
from pixforge.ops.transforms.registry import Strategy, TransformContext, register_transform

logger = logging.getLogger(__name__)


class SmartCrop(Protocol):
    def crop(self, path: str, width: int, height: int, image: ImageHandle) -> None: ...


class SaliencySmartCrop:
    def crop(self, path: str, width: int, height: int, image: ImageHandle) -> None:
        image.resize(width, height, ResizeMode.FILL)
        left, top = self.find_window(image.image, width, height)
        logger.debug(f"Smart crop window for {path}: ({left}, {top}, {width}, {height})")
        image.crop(left, top, width, height)
        image.save(path)

    @staticmethod
    def energy(img: Image.Image) -> np.ndarray:
        gray = np.asarray(img.convert("L"), dtype=np.float32)
        if min(gray.shape) < 2:
            return np.zeros_like(gray)
        gy, gx = np.gradient(gray)
        return np.hypot(gx, gy)

    @staticmethod
    def _best_offset(profile: np.ndarray, window: int) -> int:
        cumulative = np.concatenate(([0.0], np.cumsum(profile, dtype=np.float64)))
        sums = cumulative[window:] - cumulative[:-window]
        if np.ptp(sums) < 1e-6:
            return (len(profile) - window) // 2
        return int(np.argmax(sums))

    def find_window(self, img: Image.Image, width: int, height: int) -> Tuple[int, int]:
        energy = self.energy(img)
        rows, cols = energy.shape
        left = self._best_offset(energy.sum(axis=0), width) if cols > width else 0
        top = self._best_offset(energy.sum(axis=1), height) if rows > height else 0
        return left, top


@register_transform(Strategy.SMART_CROP)
def smart_transform(path: str, request: TransformRequest, context: TransformContext) -> None:
    smart_crop = context.smart_crop or SaliencySmartCrop()
    image = ImageHandle.from_file(path)
    smart_crop.crop(path, request.width, request.height, image)
