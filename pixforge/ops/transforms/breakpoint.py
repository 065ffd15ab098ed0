"""
Breakpoint crop: cut a configured absolute rectangle chosen by the
requested width.

    +----------------> X
    |  (x1, y1)
    |    *=================+
    Y    |                 |
    |    +=================*
    |                  (x2, y2)
"""

from __future__ import annotations

import logging
from typing import Dict

from pixforge.domain.exceptions import UndefinedBreakpoint
from pixforge.domain.types.crop import CropPoints, CropRect
from pixforge.domain.types.request import TransformRequest
from pixforge.ops.image import ImageHandle
from pixforge.ops.transforms.geometry import select_breakpoint
from pixforge.ops.transforms.registry import Strategy, TransformContext, register_transform

logger = logging.getLogger(__name__)


def crop_by_breakpoint(image: ImageHandle, width: int, crop_points: Dict[int, CropPoints]) -> ImageHandle:
    """
    :raises UndefinedBreakpoint: if no rectangle is registered for the selected breakpoint.
    """
    key = select_breakpoint(width, crop_points.keys())
    if key not in crop_points:
        possible = ", ".join(str(p) for p in sorted({0, *crop_points}))
        raise UndefinedBreakpoint(
            f'Undefined breakpoint. Possible values: "{possible}". Did you register some points?'
        )
    rect = CropRect.from_points(crop_points[key])
    logger.debug(f"Breakpoint {key} selected for width {width}: {rect}")
    return image.crop(rect.left, rect.top, rect.width, rect.height)


@register_transform(Strategy.BREAKPOINT)
def breakpoint_transform(path: str, request: TransformRequest, context: TransformContext) -> None:
    crop_points = context.breakpoints.get_crop_points() if context.breakpoints is not None else {}
    image = ImageHandle.from_file(path)
    crop_by_breakpoint(image, request.width, crop_points)
    image.save(path)
