"""
Value types produced by the geometry engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol, Tuple

# x1, y1, x2, y2 in source pixel coordinates
CropPoints = Tuple[int, int, int, int]


@dataclass(frozen=True)
class MaxCropSize:
    """Largest crop box at the requested aspect ratio that fits the source."""

    needle_width: int
    needle_height: int
    needle_ratio: float


@dataclass(frozen=True)
class CropRect:
    left: int
    top: int
    width: int
    height: int

    @classmethod
    def from_points(cls, points: CropPoints) -> "CropRect":
        x1, y1, x2, y2 = points
        return cls(left=x1, top=y1, width=abs(x2 - x1), height=abs(y2 - y1))


class BreakpointSource(Protocol):
    """Read-only breakpoint table: width threshold -> crop points."""

    def get_crop_points(self) -> Dict[int, CropPoints]: ...
