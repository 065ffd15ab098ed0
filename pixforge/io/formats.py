"""
Raster format validation.

A file is only accepted when its content identifies as GIF, PNG or JPEG and
it fully decodes in that format. This catches truncated files and files whose
extension lies about their content.
"""

from __future__ import annotations

import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError, features

from pixforge.domain.exceptions import CapabilityUnavailable, UnsupportedFormat

logger = logging.getLogger(__name__)

CONTENT_TYPE_TO_FORMAT = {
    "image/gif": "gif",
    "image/png": "png",
    "image/jpeg": "jpeg",
    # multi-picture JPEG from cameras and phones; the primary frame is plain JPEG
    "image/mpo": "jpeg",
}

# declared format -> Pillow plugin name
SUPPORTED_FORMATS = {
    "gif": "GIF",
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
}

# Pillow plugin -> codec that must be compiled in to decode it
_REQUIRED_CODECS = {
    "GIF": None,
    "PNG": "zlib",
    "JPEG": "jpg",
}


def sniff_content_type(path: str) -> Optional[str]:
    """Content type identified from the file bytes, or ``None``."""
    try:
        with Image.open(path) as img:
            return Image.MIME.get(img.format)
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError):
        return None


def ensure_decoder(pil_format: str) -> None:
    """
    :raises CapabilityUnavailable: if this Pillow build cannot decode ``pil_format``.
    """
    Image.init()
    codec = _REQUIRED_CODECS.get(pil_format)
    if pil_format not in Image.OPEN or (codec is not None and not features.check_codec(codec)):
        raise CapabilityUnavailable(f'Decoder for "{pil_format}" is not available now.')


def is_valid_image(path: str, declared_format: Optional[str] = None) -> bool:
    """
    Check that ``path`` is a decodable GIF, PNG or JPEG.

    Without ``declared_format`` the format is sniffed from the content and
    unknown content types yield ``False``.

    :raises UnsupportedFormat: if ``declared_format`` is not gif, png, jpg or jpeg.
    :raises CapabilityUnavailable: if the runtime lacks the decoder.
    """
    if declared_format is None:
        content_type = sniff_content_type(path)
        if content_type not in CONTENT_TYPE_TO_FORMAT:
            logger.debug(f"Unsupported content type {content_type!r} for {path}")
            return False
        declared_format = CONTENT_TYPE_TO_FORMAT[content_type]

    declared_format = declared_format.lower()
    if declared_format not in SUPPORTED_FORMATS:
        raise UnsupportedFormat(
            f'Format "{declared_format}" is not supported. Did you mean "'
            + '", "'.join(SUPPORTED_FORMATS)
            + '"?'
        )
    pil_format = SUPPORTED_FORMATS[declared_format]
    ensure_decoder(pil_format)

    try:
        with Image.open(path, formats=[pil_format]) as img:
            img.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        logger.debug(f"{path} does not decode as {pil_format}: {e}")
        return False
    return True
