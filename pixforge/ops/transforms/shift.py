"""
Focal (percentage shift) crop.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pixforge.domain.types.request import TransformRequest
from pixforge.ops.image import ImageHandle
from pixforge.ops.transforms.geometry import ResizeMode, shift_offsets
from pixforge.ops.transforms.registry import Strategy, TransformContext, register_transform


def percentages_shift(
    image: ImageHandle,
    needle: Tuple[int, int],
    px: Optional[int] = None,
    py: Optional[int] = None,
) -> ImageHandle:
    """
    Cover-resize towards ``needle`` and, when a focal point is given, crop the
    overflow biased by ``px`` (wide images) or ``py`` (everything else).
    Only one axis is ever shifted.
    """
    needle_width, needle_height = needle
    image.resize(needle_width, needle_height, ResizeMode.FILL)
    if px is None and py is None:
        return image

    left, top = shift_offsets((image.width, image.height), needle, px, py)
    return image.crop(left, top, needle_width, needle_height)


@register_transform(Strategy.PERCENTAGE_SHIFT)
def shift_transform(path: str, request: TransformRequest, context: TransformContext) -> None:
    image = ImageHandle.from_file(path)
    percentages_shift(image, request.size, request.px, request.py)
    image.save(path)
