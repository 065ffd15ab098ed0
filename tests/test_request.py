"""
Tests for the transform request model and its string grammar.
"""

import logging

import pytest
from pydantic import ValidationError

from pixforge.domain.exceptions import InvalidParameters
from pixforge.domain.types.request import MAX_SIZE, MIN_SIZE, SMART_CROP, ScaleMode, TransformRequest


@pytest.mark.parametrize("size", [-5, 0, 1, 15])
def test_dimensions_below_floor_are_clamped(size):
    request = TransformRequest.from_map({"width": size, "height": size})
    assert request.width == MIN_SIZE
    assert request.height == MIN_SIZE
    assert len(request.advisories) == 2


@pytest.mark.parametrize("size", [3001, 4500, 10000])
def test_oversize_dimensions_are_flagged_not_clamped(size):
    request = TransformRequest.from_map({"width": size, "height": 200})
    assert request.width == size
    assert request.height == 200
    assert len(request.advisories) == 1
    assert str(MAX_SIZE) in request.advisories[0]


def test_advisories_are_logged(caplog):
    with caplog.at_level(logging.WARNING):
        TransformRequest.from_map({"width": 8, "height": 5000})
    messages = [r.getMessage() for r in caplog.records]
    assert any("Minimal mandatory width" in m for m in messages)
    assert any("Maximal height" in m for m in messages)


def test_boundaries_are_untouched():
    request = TransformRequest.from_map({"width": 16, "height": 3000})
    assert request.size == (16, 3000)
    assert request.advisories == ()


@pytest.mark.parametrize(
    "params", [{}, {"width": 100}, {"height": 100}, {"width": None, "height": 100}]
)
def test_missing_dimensions_fail(params):
    with pytest.raises(InvalidParameters):
        TransformRequest.from_map(params)


def test_defaults():
    request = TransformRequest.from_map({"width": 320, "height": 240})
    assert request.break_point is False
    assert request.scale is None
    assert request.crop == SMART_CROP
    assert request.crop_is_explicit is False
    assert request.px is None and request.py is None


def test_map_accepts_aliases_and_strings():
    request = TransformRequest.from_map(
        {"width": "320", "height": "240", "breakPoint": True, "scale": "cover", "crop": "TL"}
    )
    assert request.size == (320, 240)
    assert request.break_point is True
    assert request.scale is ScaleMode.COVER
    assert request.crop == "tl"
    assert request.crop_is_explicit


@pytest.mark.parametrize("params", [{"px": 101}, {"py": -1}, {"scale": "x"}, {"width": "wide"}])
def test_malformed_values_fail(params):
    with pytest.raises(InvalidParameters):
        TransformRequest.from_map({"width": 100, "height": 100, **params})


def test_request_is_immutable():
    request = TransformRequest.from_map({"width": 320, "height": 240})
    with pytest.raises(ValidationError):
        request.width = 640


def test_from_string_full_grammar():
    request = TransformRequest.from_string("w320h240-br-scc-ctl-px40-py60")
    assert request.size == (320, 240)
    assert request.break_point is True
    assert request.scale is ScaleMode.COVER
    assert request.crop == "tl"
    assert request.px == 40
    assert request.py == 60


def test_from_string_tokens_in_any_order():
    a = TransformRequest.from_string("w100h50-py10-sca-br")
    b = TransformRequest.from_string("w100h50-br-sca-py10")
    assert a.model_dump() == b.model_dump()


@pytest.mark.parametrize("value", ["-csmart", "-csmt"])
def test_from_string_smart_crop(value):
    request = TransformRequest.from_string(f"w320h240{value}")
    assert request.crop == SMART_CROP
    assert request.crop_is_explicit
    assert request.is_smart_crop


def test_from_string_scale_is_case_insensitive():
    assert TransformRequest.from_string("W100H100-SCR").scale is ScaleMode.RATIO


def test_from_string_ignores_unknown_tokens():
    request = TransformRequest.from_string("w100h100-zoom3-foo")
    assert request.size == (100, 100)
    assert request.scale is None
    assert request.crop_is_explicit is False


def test_from_string_height_only_after_width():
    with pytest.raises(InvalidParameters):
        TransformRequest.from_string("h80")  # width missing
    with pytest.raises(InvalidParameters):
        TransformRequest.from_string("x-w100h80")


def test_from_params_dispatches_on_type():
    assert TransformRequest.from_params("w64h32").size == (64, 32)
    assert TransformRequest.from_params({"width": 64, "height": 32}).size == (64, 32)


def test_to_params_contains_only_explicit_values():
    request = TransformRequest.from_string("w320h240-scr-px10")
    assert request.to_params() == {"width": 320, "height": 240, "scale": "r", "px": 10}


def test_direct_construction_raises_invalid_parameters():
    with pytest.raises(InvalidParameters):
        TransformRequest(width=100, height=100, px=150)
    with pytest.raises(InvalidParameters):
        TransformRequest.model_validate({"width": "wide", "height": 100})
    assert TransformRequest(width=8, height=100).width == 16
