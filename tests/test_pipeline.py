"""
End-to-end tests for the generation pipeline.
"""

import os

import pytest
from PIL import Image

from pixforge.domain.exceptions import InvalidCornerCode, SourceNotFound, TargetExists, UndefinedBreakpoint
from pixforge.domain.types.request import TransformRequest
from pixforge.io.formats import is_valid_image
from pixforge.io.settings import GeneratorSettings
from pixforge.ops.optimize import NoopOptimizer
from pixforge.ops.pipeline import ImageGenerator, Stage
from pixforge.ops.transforms.registry import Strategy


class RecordingOptimizer:
    def __init__(self):
        self.calls = []

    def optimize(self, path, quality):
        self.calls.append((path, quality))


class CorruptingOptimizer:
    def optimize(self, path, quality):
        with open(path, "wb") as f:
            f.write(b"\xff\xd8\xff garbage")


class BrokenPlaceholder:
    def render(self, size_token):
        raise RuntimeError("renderer down")


@pytest.fixture
def target(tmp_path):
    return str(tmp_path / "cache" / "photo__w320h240-csmart_abc123.jpg")


@pytest.fixture
def generator():
    return ImageGenerator(settings=GeneratorSettings(_env_file=None))


def test_smart_crop_end_to_end(generator, jpeg_source, target):
    result = generator.generate(TransformRequest.from_string("w320h240-csmt"), jpeg_source, target)

    assert result.ok
    assert result.strategy is Strategy.SMART_CROP
    assert result.stages[-1] is Stage.COMMIT
    assert os.path.isfile(target)
    assert is_valid_image(target, "jpeg")
    with Image.open(target) as img:
        assert img.format == "JPEG"
        assert img.size == (320, 240)
    assert not os.path.exists(target.replace(".jpg", "_temp.jpg"))


def test_source_is_left_untouched(generator, jpeg_source, target):
    before = open(jpeg_source, "rb").read()
    generator.generate(TransformRequest.from_string("w100h100-scc"), jpeg_source, target)
    assert open(jpeg_source, "rb").read() == before


def test_fake_source_falls_back_to_placeholder(generator, fake_jpeg, target):
    result = generator.generate(TransformRequest.from_string("w320h240-csmt"), fake_jpeg, target)

    assert not result.ok
    assert result.stages == [Stage.VALIDATE_SOURCE, Stage.FALLBACK]
    assert result.placeholder.size == (320, 240)
    assert not os.path.exists(target)
    assert not os.path.exists(target.replace(".jpg", "_temp.jpg"))


def test_missing_source(generator, tmp_path, target):
    with pytest.raises(SourceNotFound):
        generator.generate(TransformRequest.from_string("w320h240"), str(tmp_path / "missing.jpg"), target)


def test_existing_target(generator, jpeg_source, make_image):
    existing = make_image("cache/existing.jpg", size=(10, 10))
    with pytest.raises(TargetExists):
        generator.generate(TransformRequest.from_string("w320h240"), jpeg_source, existing)


@pytest.mark.parametrize("params, quality", [("w800h600-scc", 85), ("w320h240-scc", 95), ("w600h800-sca", 85)])
def test_optimizer_quality_hint(jpeg_source, target, params, quality):
    optimizer = RecordingOptimizer()
    generator = ImageGenerator(settings=GeneratorSettings(_env_file=None), optimizer=optimizer)
    generator.generate(TransformRequest.from_string(params), jpeg_source, target)
    assert optimizer.calls == [(target.replace(".jpg", "_temp.jpg"), quality)]


def test_corrupt_output_falls_back(jpeg_source, target):
    generator = ImageGenerator(settings=GeneratorSettings(_env_file=None), optimizer=CorruptingOptimizer())
    result = generator.generate(TransformRequest.from_string("w320h240-scc"), jpeg_source, target)

    assert not result.ok
    assert result.stages[-2:] == [Stage.VALIDATE_OUTPUT, Stage.FALLBACK]
    assert not os.path.exists(target)
    assert not os.path.exists(target.replace(".jpg", "_temp.jpg"))


def test_placeholder_failure_never_raises(fake_jpeg, target):
    generator = ImageGenerator(settings=GeneratorSettings(_env_file=None), placeholder=BrokenPlaceholder())
    result = generator.generate(TransformRequest.from_string("w320h240"), fake_jpeg, target)
    assert not result.ok
    assert result.placeholder is None


def test_invalid_corner_code_is_fatal_and_cleans_up(generator, jpeg_source, target):
    with pytest.raises(InvalidCornerCode):
        generator.generate(TransformRequest.from_string("w320h240-cxy"), jpeg_source, target)
    assert not os.path.exists(target)
    assert not os.path.exists(target.replace(".jpg", "_temp.jpg"))


def test_undefined_breakpoint_is_fatal(generator, jpeg_source, target):
    with pytest.raises(UndefinedBreakpoint):
        generator.generate(TransformRequest.from_string("w320h240-br"), jpeg_source, target)


def test_breakpoint_from_settings(jpeg_source, target):
    settings = GeneratorSettings(_env_file=None, crop_points={400: (0, 0, 300, 200), 1200: (100, 100, 600, 400)})
    generator = ImageGenerator(settings=settings, optimizer=NoopOptimizer())
    result = generator.generate(TransformRequest.from_string("w500h100-br"), jpeg_source, target)

    assert result.strategy is Strategy.BREAKPOINT
    with Image.open(target) as img:
        assert img.size == (500, 300)


def test_corner_crop_end_to_end(generator, make_image, target):
    source = make_image("wide.png", size=(1000, 500))
    result = generator.generate(TransformRequest.from_string("w200h200-cbr"), source, target)
    assert result.strategy is Strategy.CORNER_CROP
    with Image.open(target) as img:
        assert img.size == (200, 200)


def test_percentage_shift_end_to_end(generator, make_image, target):
    source = make_image("pano.gif", size=(900, 300))
    result = generator.generate(TransformRequest.from_string("w100h100-px30"), source, target)
    assert result.strategy is Strategy.PERCENTAGE_SHIFT
    with Image.open(target) as img:
        assert img.size == (100, 100)


def test_advisories_are_reported(generator, jpeg_source, target):
    result = generator.generate(TransformRequest.from_string("w8h240"), jpeg_source, target)
    assert result.ok
    assert len(result.advisories) == 1


def test_crop_by_corner_file(generator, make_image):
    path = make_image("c.png", size=(1000, 500))
    generator.crop_by_corner_file(path, "tl", (100, 50))
    with Image.open(path) as img:
        assert img.size == (100, 50)


def test_from_url(generator):
    url = generator.from_url("/img/photo.jpg", {"width": 320, "height": 240})
    assert url.startswith("/img/photo__w320h240_")


def test_from_url_uses_configured_placeholder():
    settings = GeneratorSettings(_env_file=None, base_url="https://cdn.example.com/", placeholder_name="blank.png")
    url = ImageGenerator(settings=settings).from_url(None, {"width": 50, "height": 50})
    assert url.startswith("https://cdn.example.com/blank__w50h50_")
    assert url.endswith(".png")


def test_multi_picture_jpeg_source_is_generated(generator, mpo_source, target):
    result = generator.generate(TransformRequest.from_string("w32h32"), mpo_source, target)

    assert result.ok
    assert Stage.FALLBACK not in result.stages
    with Image.open(target) as img:
        assert img.size == (32, 32)
