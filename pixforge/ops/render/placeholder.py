import re
from pathlib import Path
from typing import Optional, Protocol, Tuple

from PIL import Image, ImageDraw

_SIZE_RE = re.compile(r"^w(\d+)h(\d+)$", re.IGNORECASE)

BACKGROUND = (204, 204, 204)
FOREGROUND = (128, 128, 128)


class PlaceholderRenderer(Protocol):
    def render(self, size_token: str): ...


def parse_size_token(size_token: str) -> Tuple[int, int]:
    """``"w320h240"`` -> ``(320, 240)``"""
    match = _SIZE_RE.match(size_token)
    if match is None:
        raise ValueError(f"Invalid placeholder size {size_token!r}, expected w<width>h<height>.")
    return int(match.group(1)), int(match.group(2))


class DefaultPlaceholderRenderer:
    """Grey box labelled with its size; optionally written to ``save_dir``."""

    def __init__(self, save_dir: Optional[str] = None):
        self.save_dir = save_dir

    def render(self, size_token: str) -> Image.Image:
        width, height = parse_size_token(size_token)
        img = Image.new("RGB", (width, height), BACKGROUND)
        draw = ImageDraw.Draw(img)
        label = f"{width}x{height}"
        left, top, right, bottom = draw.textbbox((0, 0), label)
        draw.text(((width - (right - left)) / 2, (height - (bottom - top)) / 2), label, fill=FOREGROUND)
        draw.rectangle((0, 0, width - 1, height - 1), outline=FOREGROUND)

        if self.save_dir is not None:
            Path(self.save_dir).mkdir(parents=True, exist_ok=True)
            img.save(Path(self.save_dir) / f"placeholder_{size_token}.png")
        return img
