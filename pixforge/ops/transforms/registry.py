"""
Registry for transform strategies (breakpoint, scale, corner, shift, smart).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional

from pixforge.domain.types.request import TransformRequest

if TYPE_CHECKING:
    from pixforge.domain.types.crop import BreakpointSource
    from pixforge.ops.transforms.smart import SmartCrop


class Strategy(str, enum.Enum):
    BREAKPOINT = "breakpoint"
    SCALE = "scale"
    SMART_CROP = "smart_crop"
    CORNER_CROP = "corner_crop"
    PERCENTAGE_SHIFT = "percentage_shift"


@dataclass
class TransformContext:
    """Collaborators a strategy may need besides the request."""

    breakpoints: Optional["BreakpointSource"] = None
    smart_crop: Optional["SmartCrop"] = None
    legacy_corner_anchor: bool = False


# strategy -> callable(path, request, context); populated by the strategy modules
TRANSFORMS: Dict[Strategy, Callable[[str, TransformRequest, TransformContext], None]] = {}


def register_transform(strategy: Strategy):
    def decorator(fn):
        TRANSFORMS[strategy] = fn
        return fn

    return decorator


def select_strategy(request: TransformRequest) -> Strategy:
    """
    Exactly one strategy per request, by priority: breakpoint, explicit scale,
    explicit crop (smart or corner), focal shift, then smart crop.
    """
    if request.break_point:
        return Strategy.BREAKPOINT
    if request.scale is not None:
        return Strategy.SCALE
    if request.crop_is_explicit:
        return Strategy.SMART_CROP if request.is_smart_crop else Strategy.CORNER_CROP
    if request.has_focal_point:
        return Strategy.PERCENTAGE_SHIFT
    return Strategy.SMART_CROP


def apply_transform(path: str, request: TransformRequest, context: TransformContext) -> Strategy:
    """Run the selected strategy on the file at ``path`` in place."""
    # strategy modules register themselves on import
    from pixforge.ops.transforms import breakpoint, corner, scale, shift, smart  # noqa: F401

    strategy = select_strategy(request)
    TRANSFORMS[strategy](path, request, context)
    return strategy
