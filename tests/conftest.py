import numpy as np
import pytest
from PIL import Image


def _noise_image(size, seed=0):
    rng = np.random.default_rng(seed)
    width, height = size
    return Image.fromarray(rng.integers(0, 256, (height, width, 3), dtype=np.uint8), "RGB")


@pytest.fixture
def make_image(tmp_path):
    """Factory writing an image to ``tmp_path``; format follows the extension."""

    def _make(name="source.jpg", size=(800, 600), color=None, image=None):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if image is None:
            image = Image.new("RGB", size, color) if color is not None else _noise_image(size)
        if path.suffix.lower() == ".gif":
            image = image.convert("P")
        image.save(path)
        return str(path)

    return _make


@pytest.fixture
def jpeg_source(make_image):
    return make_image("source.jpg", size=(800, 600))


@pytest.fixture
def fake_jpeg(tmp_path):
    """A text file pretending to be a JPEG."""
    path = tmp_path / "fake.jpg"
    path.write_text("this is definitely not an image\n")
    return str(path)


def bands(size, colors):
    """Image split into equal vertical bands of ``colors``."""
    width, height = size
    img = Image.new("RGB", size)
    band = width // len(colors)
    for index, color in enumerate(colors):
        img.paste(color, (index * band, 0, (index + 1) * band, height))
    return img


@pytest.fixture
def mpo_source(tmp_path):
    """Two-frame multi-picture JPEG, as written by many cameras and phones."""
    path = tmp_path / "camera.jpg"
    first = _noise_image((160, 120), seed=1)
    second = _noise_image((160, 120), seed=2)
    first.save(path, format="MPO", save_all=True, append_images=[second])
    return str(path)
