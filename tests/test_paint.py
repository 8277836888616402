from __future__ import annotations

import logging

import pytest

from scenearchive import (
    BlendMode,
    Blob,
    Color,
    ColorSpaceTag,
    ColorStop,
    Compose,
    CustomPaint,
    Extend,
    Gradient,
    LinearGradient,
    Mix,
    Point,
    RadialGradient,
    StrokeStyle,
    SweepGradient,
)
from scenearchive.paint import FillRule, paint_to_brush, style_from_payload, style_to_payload


def _stops() -> list[ColorStop]:
    return [
        ColorStop(0.0, Color.from_rgb8(255, 0, 0)),
        ColorStop(1.0, Color.from_rgba8(0, 0, 255, 128)),
    ]


@pytest.mark.parametrize(
    "kind",
    [
        LinearGradient(Point(0, 0), Point(100, 0)),
        RadialGradient(Point(5, 5), 0.0, Point(5, 5), 10.0),
        SweepGradient(Point(5, 5), 0.0, 3.14),
    ],
)
def test_gradient_payload_round_trip(kind: object) -> None:
    gradient = Gradient(
        kind=kind,  # type: ignore[arg-type]
        stops=_stops(),
        extend=Extend.REFLECT,
        interpolation_cs=ColorSpaceTag.OKLAB,
    )

    assert Gradient.from_payload(gradient.to_payload()) == gradient


def test_unknown_interpolation_color_space_falls_back_to_srgb(
    caplog: pytest.LogCaptureFixture,
) -> None:
    payload = Gradient(LinearGradient(Point(0, 0), Point(1, 0)), _stops()).to_payload()
    payload["interpolation_cs"] = "Cmyk"

    with caplog.at_level(logging.DEBUG, logger="scenearchive.paint"):
        gradient = Gradient.from_payload(payload)

    assert gradient.interpolation_cs is ColorSpaceTag.SRGB
    assert "Cmyk" in caplog.text


def test_gradient_rejects_unknown_kind() -> None:
    payload = Gradient(LinearGradient(Point(0, 0), Point(1, 0))).to_payload()
    payload["kind"] = {"Conic": {}}

    with pytest.raises(ValueError):
        Gradient.from_payload(payload)


def test_custom_paint_collapses_to_transparent_color() -> None:
    brush = paint_to_brush(CustomPaint(source_id=7, width=10, height=10))

    assert brush == Color(0.0, 0.0, 0.0, 0.0)
    assert paint_to_brush(Color.BLACK) is Color.BLACK  # type: ignore[attr-defined]


def test_blob_identity_is_unique_and_shared_by_clones() -> None:
    first = Blob(b"payload")
    second = Blob(b"payload")

    assert first.id != second.id
    assert first == second
    assert Blob(first.data, first.id).id == first.id
    with pytest.raises(TypeError):
        Blob("text")  # type: ignore[arg-type]


def test_style_payloads() -> None:
    stroke = StrokeStyle(width=2.5, dash_pattern=[4, 2], dash_offset=1)

    assert style_to_payload(FillRule.EVEN_ODD) == {"Fill": "EvenOdd"}
    assert style_from_payload(style_to_payload(FillRule.EVEN_ODD)) is FillRule.EVEN_ODD
    assert style_from_payload(style_to_payload(stroke)) == stroke
    with pytest.raises(ValueError):
        style_from_payload({"Hatch": {}})


def test_blend_mode_coercion() -> None:
    assert BlendMode.coerce(Mix.MULTIPLY) == BlendMode(Mix.MULTIPLY, Compose.SRC_OVER)
    assert BlendMode.coerce(Compose.XOR) == BlendMode(Mix.NORMAL, Compose.XOR)
    assert BlendMode.from_payload({"mix": "Screen", "compose": "Plus"}) == BlendMode(
        Mix.SCREEN, Compose.PLUS
    )
    with pytest.raises(TypeError):
        BlendMode.coerce("Normal")  # type: ignore[arg-type]
