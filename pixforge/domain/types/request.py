"""
Transform request model.

A request is built once per generation call, either from a key/value map or
from the compact string grammar embedded in derivative filenames
(``w320h240-scc-ctl-px40``).
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import Field, ValidationError, model_validator

from pixforge.domain.exceptions import InvalidParameters
from pixforge.domain.types.base import BaseInfo

logger = logging.getLogger(__name__)

MIN_SIZE = 16
MAX_SIZE = 3000

SMART_CROP = "smart"
# "smt" is the short form seen in generated URLs (w320h240-csmt)
SMART_CROP_ALIASES = ("smart", "smt")

_WIDTH_RE = re.compile(r"^w(\d+)", re.IGNORECASE)
_HEIGHT_RE = re.compile(r"^(w\d+)?h(\d+)", re.IGNORECASE)
_SCALE_RE = re.compile(r"-sc([rca])", re.IGNORECASE)
_CROP_RE = re.compile(r"-c([a-z]{2,5})")
_PX_RE = re.compile(r"-px(\d+)", re.IGNORECASE)
_PY_RE = re.compile(r"-py(\d+)", re.IGNORECASE)


class ScaleMode(str, enum.Enum):
    """Scale strategies, keyed by their one-letter filename token."""

    RATIO = "r"
    COVER = "c"
    ABSOLUTE = "a"

    @classmethod
    def parse(cls, value: Union[str, "ScaleMode"]) -> "ScaleMode":
        if isinstance(value, cls):
            return value
        token = str(value).strip().lower()
        for mode in cls:
            if token in (mode.value, mode.name.lower()):
                return mode
        raise InvalidParameters(f"Unknown scale mode {value!r}; use one of r, c, a.")


class TransformRequest(BaseInfo):
    """
    Normalized transform parameters. Immutable after construction.

    Build requests with :meth:`from_map`, :meth:`from_string` or
    :meth:`from_params`. Direct construction and ``model_validate`` report bad
    values as :class:`InvalidParameters` as well.
    """

    width: int
    height: int
    break_point: bool = False
    scale: Optional[ScaleMode] = None
    crop: str = Field(default=SMART_CROP, description="'smart' or a corner code such as 'tl'")
    px: Optional[int] = Field(default=None, ge=0, le=100)
    py: Optional[int] = Field(default=None, ge=0, le=100)
    advisories: Tuple[str, ...] = Field(default=(), exclude=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidParameters(str(e)) from e

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> "TransformRequest":
        try:
            return super().model_validate(obj, **kwargs)
        except ValidationError as e:
            raise InvalidParameters(str(e)) from e

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, values: Any) -> Any:
        """Drop unset keys, clamp dimensions to the floor and collect advisories."""
        if not isinstance(values, Mapping):
            return values
        values = {k: v for k, v in values.items() if v is not None}
        advisories = []

        for name in ("width", "height"):
            if name not in values:
                continue
            try:
                size = int(values[name])
            except (TypeError, ValueError):
                continue
            if size < MIN_SIZE:
                advisories.append(f"Minimal mandatory {name} is {MIN_SIZE}px, but {size} given.")
                size = MIN_SIZE
            if size > MAX_SIZE:
                # flagged only, never clamped
                advisories.append(
                    f"Image is so large. Maximal {name} is {MAX_SIZE}px, but {size} given."
                )
            values[name] = size

        if "scale" in values:
            values["scale"] = ScaleMode.parse(values["scale"])
        if "crop" in values:
            crop = str(values["crop"]).strip().lower()
            values["crop"] = SMART_CROP if crop in SMART_CROP_ALIASES else crop

        for message in advisories:
            logger.warning(message)
        values["advisories"] = tuple(values.get("advisories", ())) + tuple(advisories)
        return values

    @property
    def crop_is_explicit(self) -> bool:
        return "crop" in self.model_fields_set

    @property
    def is_smart_crop(self) -> bool:
        return self.crop == SMART_CROP

    @property
    def has_focal_point(self) -> bool:
        return self.px is not None or self.py is not None

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def size_token(self) -> str:
        return f"w{self.width}h{self.height}"

    @classmethod
    def from_map(cls, params: Mapping[str, Any]) -> "TransformRequest":
        """
        Build a request from a key/value map.

        Keys may use either the field names (``break_point``) or their camel
        case aliases (``breakPoint``). ``width`` and ``height`` are required.

        :raises InvalidParameters: if width or height is missing or any value is malformed.
        """
        if params.get("width") is None or params.get("height") is None:
            raise InvalidParameters("Width or height params are required.")
        return cls.model_validate(dict(params))

    @classmethod
    def from_string(cls, params: str) -> "TransformRequest":
        """
        Parse the compact filename grammar.

        ``w<digits>`` must lead the string and ``h<digits>`` must lead it or
        follow the width token. The remaining tokens (``-br``, ``-sc[rca]``,
        ``-c<code>``, ``-px<digits>``, ``-py<digits>``) may appear in any
        order. Unmatched text is ignored.
        """
        parsed: Dict[str, Any] = {}
        width = _WIDTH_RE.search(params)
        height = _HEIGHT_RE.search(params)
        parsed["width"] = int(width.group(1)) if width else None
        parsed["height"] = int(height.group(2)) if height else None
        parsed["break_point"] = "-br" in params

        scale = _SCALE_RE.search(params)
        if scale:
            parsed["scale"] = scale.group(1).lower()
        crop = _CROP_RE.search(params)
        if crop:
            parsed["crop"] = crop.group(1)
        px = _PX_RE.search(params)
        if px:
            parsed["px"] = int(px.group(1))
        py = _PY_RE.search(params)
        if py:
            parsed["py"] = int(py.group(1))

        return cls.from_map(parsed)

    @classmethod
    def from_params(cls, params: Union[str, Mapping[str, Any]]) -> "TransformRequest":
        if isinstance(params, str):
            return cls.from_string(params)
        return cls.from_map(params)

    def to_params(self) -> Dict[str, Any]:
        """Explicit parameters in the shape accepted by :meth:`from_map`."""
        params: Dict[str, Any] = {"width": self.width, "height": self.height}
        if self.break_point:
            params["break_point"] = True
        if self.scale is not None:
            params["scale"] = self.scale.value
        if self.crop_is_explicit:
            params["crop"] = self.crop
        if self.px is not None:
            params["px"] = self.px
        if self.py is not None:
            params["py"] = self.py
        return params
