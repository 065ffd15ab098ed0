"""
Corner crop: cut the largest box with the requested aspect ratio anchored at
one of nine points, then resize it to the requested size.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from pixforge.domain.types.request import TransformRequest
from pixforge.ops.image import ImageHandle
from pixforge.ops.transforms.geometry import ResizeMode, corner_offsets, max_crop_size, parse_corner
from pixforge.ops.transforms.registry import Strategy, TransformContext, register_transform

logger = logging.getLogger(__name__)


def crop_by_corner(
    image: ImageHandle,
    corner: str,
    needle: Tuple[Optional[int], Optional[int]],
    legacy_anchor: bool = False,
) -> ImageHandle:
    """
    Crop ``image`` in place. Requests larger than the source on either axis
    leave the image untouched.

    :raises InvalidCornerCode: unless ``corner`` is one of ``[tmb][lcr]``.
    """
    parse_corner(corner)
    original = (image.width, image.height)
    needle_width, needle_height = needle
    box = max_crop_size(original, needle)

    if (needle_width is not None and needle_width > image.width) or (
        needle_height is not None and needle_height > image.height
    ):
        logger.debug(f"Corner crop skipped, {needle} exceeds source {original}")
        return image

    left, top = corner_offsets(
        corner, original, (box.needle_width, box.needle_height), legacy_anchor=legacy_anchor
    )
    image.crop(left, top, box.needle_width, box.needle_height)
    mode = ResizeMode.EXACT if needle_width and needle_height else ResizeMode.FIT
    return image.resize(needle_width, needle_height, mode)


@register_transform(Strategy.CORNER_CROP)
def corner_transform(path: str, request: TransformRequest, context: TransformContext) -> None:
    image = ImageHandle.from_file(path)
    crop_by_corner(image, request.crop, request.size, legacy_anchor=context.legacy_corner_anchor)
    image.save(path)
