"""
Tests for raster format validation.
"""

import pytest

from pixforge.domain.exceptions import CapabilityUnavailable, UnsupportedFormat
from pixforge.io import formats
from pixforge.io.formats import is_valid_image, sniff_content_type


@pytest.mark.parametrize("name, content_type", [("a.jpg", "image/jpeg"), ("a.png", "image/png"), ("a.gif", "image/gif")])
def test_supported_formats_are_valid(make_image, name, content_type):
    path = make_image(name, size=(64, 48))
    assert sniff_content_type(path) == content_type
    assert is_valid_image(path) is True


def test_text_file_with_image_extension(fake_jpeg):
    assert sniff_content_type(fake_jpeg) is None
    assert is_valid_image(fake_jpeg) is False


def test_unknown_content_type_is_not_an_error(make_image):
    path = make_image("a.bmp", size=(32, 32))
    assert is_valid_image(path) is False


def test_truncated_jpeg(make_image, tmp_path):
    path = make_image("full.jpg", size=(400, 300))
    data = open(path, "rb").read()
    truncated = tmp_path / "truncated.jpg"
    truncated.write_bytes(data[: len(data) // 2])
    assert is_valid_image(str(truncated)) is False


def test_declared_format_must_match_content(make_image):
    path = make_image("really_png.jpg.png", size=(32, 32))
    assert is_valid_image(path, "png") is True
    assert is_valid_image(path, "JPG") is False
    assert is_valid_image(path, "jpeg") is False


def test_declared_unsupported_format(make_image):
    path = make_image("a.png", size=(32, 32))
    with pytest.raises(UnsupportedFormat):
        is_valid_image(path, "bmp")


def test_missing_decoder(make_image, monkeypatch):
    path = make_image("a.jpg", size=(32, 32))
    monkeypatch.setattr(formats.features, "check_codec", lambda codec: False)
    with pytest.raises(CapabilityUnavailable):
        is_valid_image(path)


def test_multi_picture_jpeg_is_valid(mpo_source):
    assert sniff_content_type(mpo_source) == "image/mpo"
    assert is_valid_image(mpo_source)
    assert is_valid_image(mpo_source, "jpg")
