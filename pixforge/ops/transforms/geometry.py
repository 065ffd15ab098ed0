"""
Pure geometry for the transform strategies.

Nothing in here touches pixels; every function takes and returns plain
integers so the rounding behaviour can be tested in isolation.
"""

from __future__ import annotations

import enum
import math
from typing import Iterable, List, Optional, Tuple

from pixforge.domain.exceptions import InvalidCornerCode, InvalidParameters
from pixforge.domain.types.crop import CropRect, MaxCropSize

Size = Tuple[int, int]
OptionalSize = Tuple[Optional[int], Optional[int]]

# growth factor at which a ratio scale stops resizing
RATIO_GROWTH_LIMIT = 1.3

VERTICAL_ANCHORS = "tmb"
HORIZONTAL_ANCHORS = "lcr"


class ResizeMode(str, enum.Enum):
    FIT = "fit"  # proportional, fit within the box
    FILL = "fill"  # proportional, cover the box (one axis may overflow)
    EXACT = "exact"  # FILL, then crop the overflow around the centre
    STRETCH = "stretch"  # exact box, aspect ignored
    SHRINK_STRETCH = "shrink_stretch"  # exact box, aspect ignored, never enlarge


def round_half_up(value: float) -> int:
    """Round half away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def calculate_size(src_width: int, src_height: int, width: Optional[int], height: Optional[int], mode: ResizeMode) -> Size:
    """Target size for resizing ``src`` into the ``width x height`` box."""
    if mode in (ResizeMode.STRETCH, ResizeMode.SHRINK_STRETCH):
        if not width or not height:
            raise InvalidParameters("For stretching must be both width and height specified.")
        if mode is ResizeMode.SHRINK_STRETCH:
            width = round_half_up(src_width * min(1, width / src_width))
            height = round_half_up(src_height * min(1, height / src_height))
    else:
        if not width and not height:
            raise InvalidParameters("At least width or height must be specified.")
        scales = []
        if width:
            scales.append(width / src_width)
        if height:
            scales.append(height / src_height)
        if mode in (ResizeMode.FILL, ResizeMode.EXACT):
            scales = [max(scales)]
        scale = min(scales)
        width = round_half_up(src_width * scale)
        height = round_half_up(src_height * scale)
    return max(width, 1), max(height, 1)


def calculate_cutout(src_width: int, src_height: int, left: int, top: int, width: int, height: int) -> CropRect:
    """
    Clamp a crop box to the source image.

    A negative offset shrinks the box by the same amount; a box reaching past
    the right or bottom edge is cut at the edge.
    """
    if left < 0:
        width += left
        left = 0
    if top < 0:
        height += top
        top = 0
    left = min(left, src_width - 1)
    top = min(top, src_height - 1)
    width = min(width, src_width - left)
    height = min(height, src_height - top)
    return CropRect(left=left, top=top, width=max(width, 1), height=max(height, 1))


def select_breakpoint(width: int, thresholds: Iterable[int]) -> int:
    """
    Breakpoint key for ``width``.

    The smallest threshold strictly greater than ``width`` wins; past the
    last threshold the largest one is used. ``0`` is always a threshold.

    >>> select_breakpoint(600, [400, 800])
    800
    >>> select_breakpoint(900, [400, 800])
    800
    """
    points: List[int] = sorted({0, *thresholds})
    for index, before in enumerate(points):
        if index + 1 == len(points):
            return before
        after = points[index + 1]
        if before <= width < after:
            return after
    return points[-1]


def max_crop_size(original: Size, needle: OptionalSize) -> MaxCropSize:
    """
    Largest box with the needle aspect ratio that fits into ``original``.

    The box grows one pixel at a time on the larger needle side (the other
    side by the aspect ratio) until it touches the original bounds, then any
    overshoot is clamped. The stepwise growth is intentional: the float
    accumulation decides the final pixel values.
    """
    original_width, original_height = original
    needle_width, needle_height = needle

    if needle_width is None and needle_height is None:
        raise InvalidParameters("At least width or height must be specified.")

    if needle_width is None or needle_height is None:
        if needle_width is None:
            ratio = original_width / original_height
            width, height = float(int(ratio * needle_height)), float(needle_height)
        else:
            ratio = original_height / original_width
            width, height = float(needle_width), float(int(ratio * needle_width))
    else:
        width_is_larger = needle_width >= needle_height
        ratio = needle_height / needle_width if width_is_larger else needle_width / needle_height
        width, height = float(needle_width), float(needle_height)
        while width < original_width and height < original_height:
            if width_is_larger:
                width += 1
                height += ratio
            else:
                height += 1
                width += ratio

    if width > original_width:
        width = float(original_width)
    if height > original_height:
        height = float(original_height)

    return MaxCropSize(needle_width=int(width), needle_height=int(height), needle_ratio=float(ratio))


def parse_corner(code: str) -> Tuple[str, str]:
    """
    Split a corner code into ``(vertical, horizontal)`` anchors.

    :raises InvalidCornerCode: unless ``code`` is one of ``[tmb][lcr]``.
    """
    corner = code.lower()
    if len(corner) != 2 or corner[0] not in VERTICAL_ANCHORS or corner[1] not in HORIZONTAL_ANCHORS:
        raise InvalidCornerCode(f'Corner "{code}" is not in valid format.')
    return corner[0], corner[1]


def corner_offsets(code: str, original: Size, crop: Size, legacy_anchor: bool = False) -> Tuple[int, int]:
    """
    ``(left, top)`` of a ``crop`` sized box anchored at ``code``.

    With ``legacy_anchor`` the anchors are read from the wrong positions of
    the code, as the first releases did, so every corner resolves to the
    top-left.
    """
    vertical, horizontal = parse_corner(code)
    if legacy_anchor:
        vertical, horizontal = code.lower(), vertical

    original_width, original_height = original
    crop_width, crop_height = crop

    if vertical == "m":
        top = round_half_up((original_height - crop_height) / 2)
    elif vertical == "b":
        top = original_height - crop_height
    else:
        top = 0

    if horizontal == "c":
        left = round_half_up((original_width - crop_width) / 2)
    elif horizontal == "r":
        left = original_width - crop_width
    else:
        left = 0

    return left, top


def ratio_target(original: Size, needle: OptionalSize) -> Size:
    """Fill in a missing needle side from the original aspect ratio."""
    original_width, original_height = original
    width, height = needle
    if width is None and height is None:
        raise InvalidParameters("At least width or height must be specified.")
    if width is None:
        width = int(original_width / original_height * height)
    if height is None:
        height = int(original_height / original_width * width)
    return width, height


def should_resize_by_ratio(original: Size, target: Size) -> bool:
    """
    Whether a ratio scale resizes at all.

    Growth of 1.3x or more on either axis is refused, as is an enlargement
    where one side already equals the source.
    """
    original_width, original_height = original
    width, height = target
    if width / original_width >= RATIO_GROWTH_LIMIT or height / original_height >= RATIO_GROWTH_LIMIT:
        return False
    single_axis_growth = (width == original_width and height >= original_height) or (
        height == original_height and width >= original_width
    )
    return not single_axis_growth


def shift_offsets(resized: Size, needle: Size, px: Optional[int], py: Optional[int]) -> Tuple[int, int]:
    """
    ``(left, top)`` for a focal crop of a FILL-resized image.

    Wide images (``height * 2 < width``) shift horizontally by ``px``,
    everything else vertically by ``py``.

    The slack terms come out negative for a FILL-resized image, and
    ``round(slack * p)`` would give a negative offset that shrinks the crop.
    The magnitude of the slack is used instead and the offset is clamped to
    ``[0, resized - needle]``, so the box always has the requested size.
    """
    resized_width, resized_height = resized
    needle_width, needle_height = needle
    fx = (px or 0) / 100
    fy = (py or 0) / 100

    if resized_height * 2 < resized_width:
        slack = (needle_width * resized_height - resized_width * needle_height) / needle_height
        left = round_half_up(abs(slack) * fx)
        return min(left, max(resized_width - needle_width, 0)), 0

    slack = (resized_width * needle_height - needle_width * resized_height) / resized_width
    top = round_half_up(abs(slack) * fy)
    return 0, min(top, max(resized_height - needle_height, 0))
