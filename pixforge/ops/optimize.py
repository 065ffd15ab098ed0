"""
Lossy re-compression of a finished derivative.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

from pixforge.ops.image import ImageHandle

logger = logging.getLogger(__name__)


class Optimizer(Protocol):
    def optimize(self, path: str, quality: int) -> None: ...


class NoopOptimizer:
    def optimize(self, path: str, quality: int) -> None:
        return None


class DefaultOptimizer:
    """Re-encode in place with Pillow; JPEG gets the quality hint, PNG is optimized losslessly."""

    def optimize(self, path: str, quality: int) -> None:
        before = os.path.getsize(path)
        image = ImageHandle.from_file(path)
        if image.format == "GIF":
            return
        image.save(path, quality=quality)
        logger.debug(f"Optimized {path} at quality {quality}: {before} -> {os.path.getsize(path)} bytes")
