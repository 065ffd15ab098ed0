"""
Filename parameter codec.

A derivative URL carries its transform parameters in the filename::

    <prefix><basename>__<params>_<hash6><.suffix>
    /img/photo__w320h240-csmart_1a2b3c.jpg

The six character hash only disambiguates cache entries; it is not a
security boundary.
"""

from __future__ import annotations

import hashlib
import logging
import re
from typing import Any, Mapping, Optional, Tuple, Union

from pixforge.domain.exceptions import InvalidParameters, InvalidUrl
from pixforge.domain.types.request import ScaleMode, TransformRequest

logger = logging.getLogger(__name__)

INVALID_IMAGE = "#INVALID_IMAGE#"
HASH_LENGTH = 6

_ENCODED_RE = re.compile(
    r"^(?P<prefix>.*/)?(?P<filename>.+?)__(?P<params>[^_]*?)_(?P<hash>[a-z0-9]{6})(?P<suffix>\.[^./]+)$"
)
_URL_RE = re.compile(r"^(?P<prefix>.*/)?(?P<filename>[\w.-]+)\.(?P<suffix>[^./]+)$")

# accepted spellings of each parameter key
_KEYS = {
    "width": ("width", "w"),
    "height": ("height", "h"),
    "break_point": ("break_point", "breakPoint", "br"),
    "scale": ("scale", "sc"),
    "crop": ("crop", "c"),
    "px": ("px",),
    "py": ("py",),
}


def _lookup(params: Mapping[str, Any], name: str) -> Any:
    for key in _KEYS[name]:
        if params.get(key) is not None:
            return params[key]
    return None


def params_to_string(params: Union[TransformRequest, Mapping[str, Any]]) -> str:
    """
    Canonical, deterministic parameter string.

    Tokens are always emitted in the order ``w h -br -sc -c -px -py`` so that
    equal parameter sets produce equal filenames.
    """
    if isinstance(params, TransformRequest):
        params = params.to_params()

    known = {key for spellings in _KEYS.values() for key in spellings}
    unknown = sorted(set(params) - known)
    if unknown:
        logger.debug(f"Ignoring unknown image parameters: {', '.join(unknown)}")

    tokens = []
    width = _lookup(params, "width")
    height = _lookup(params, "height")
    if width is not None:
        tokens.append(f"w{int(width)}")
    if height is not None:
        tokens.append(f"h{int(height)}")
    if _lookup(params, "break_point"):
        tokens.append("-br")
    scale = _lookup(params, "scale")
    if scale is not None:
        tokens.append(f"-sc{ScaleMode.parse(scale).value}")
    crop = _lookup(params, "crop")
    if crop is not None:
        crop = str(crop).lower()
        if not re.fullmatch(r"[a-z]{2,5}", crop):
            raise InvalidParameters(f"Crop mode {crop!r} must be 2 to 5 letters.")
        tokens.append(f"-c{crop}")
    for name in ("px", "py"):
        value = _lookup(params, name)
        if value is not None:
            tokens.append(f"-{name}{int(value)}")
    return "".join(tokens)


def generate_hash(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def split_encoded(url: str) -> Optional[Tuple[str, str, str]]:
    """
    Split an encoded URL into ``(clean_url, params, hash)``.

    Returns ``None`` when the URL carries no encoded block.
    """
    match = _ENCODED_RE.match(url)
    if match is None:
        return None
    clean = (match.group("prefix") or "") + match.group("filename") + match.group("suffix")
    return clean, match.group("params"), match.group("hash")


def source_url(url: str) -> str:
    """URL with any encoded parameter block removed."""
    parts = split_encoded(url)
    return parts[0] if parts is not None else url


def extract_params(url: str, verify: bool = True) -> Optional[str]:
    """
    Parameter string embedded in ``url``, or ``None`` if there is none.

    :raises InvalidUrl: if ``verify`` is set and the hash does not match.
    """
    parts = split_encoded(url)
    if parts is None:
        return None
    _, params, digest = parts
    if verify and generate_hash(params) != digest:
        raise InvalidUrl(f'Hash "{digest}" does not match parameters "{params}" in "{url}".')
    return params


def encode_filename(
    url: Optional[str],
    params: Union[TransformRequest, Mapping[str, Any]],
    base_url: str = "",
    placeholder_name: str = "placeholder.png",
) -> str:
    """
    Embed ``params`` into the filename of ``url``.

    Any previously embedded block is stripped first, so encoding is
    idempotent. An empty URL or the ``#INVALID_IMAGE#`` sentinel is replaced
    by ``placeholder_name`` under ``base_url``.

    :raises InvalidUrl: if the filename cannot be split into prefix, basename and suffix.
    """
    if not url or url == INVALID_IMAGE:
        url = f"{base_url.rstrip('/')}/{placeholder_name}"
    url = source_url(url)

    match = _URL_RE.match(url)
    if match is None:
        raise InvalidUrl(f'Invalid URL "{url}" given.')

    param = params_to_string(params)
    encoded = f"__{param}_{generate_hash(param)}" if param else ""
    return f"{match.group('prefix') or ''}{match.group('filename')}{encoded}.{match.group('suffix')}"


def decode_filename(value: str, verify: bool = True) -> TransformRequest:
    """
    Build a request from an encoded URL or from a bare parameter string.
    """
    params = extract_params(value, verify=verify)
    return TransformRequest.from_string(params if params is not None else value)
