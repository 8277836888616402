"""Test configuration for the scene archive project."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from io import BytesIO
from typing import Any

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTCollection, TTFont

from scenearchive import (
    Blob,
    FontData,
    ImageAlphaType,
    ImageData,
    ImageFormat,
    RecordingRenderContext,
    Scene,
)

GLYPH_COUNT = 100


def build_test_font(family: str = "Archive Sans", glyph_count: int = GLYPH_COUNT) -> bytes:
    """Return a TrueType font whose glyphs are all distinct filled boxes."""

    glyph_order = [".notdef"] + [f"glyph{index:05d}" for index in range(1, glyph_count)]
    builder = FontBuilder(unitsPerEm=1000, isTTF=True)
    builder.setupGlyphOrder(glyph_order)
    builder.setupCharacterMap(
        {0x41 + offset: name for offset, name in enumerate(glyph_order[1:27])}
    )

    glyphs = {}
    for index, name in enumerate(glyph_order):
        pen = TTGlyphPen(None)
        inset = (index % 10) * 10
        pen.moveTo((100 + inset, 0))
        pen.lineTo((100 + inset, 700))
        pen.lineTo((500, 700))
        pen.lineTo((500, 0))
        pen.closePath()
        glyphs[name] = pen.glyph()
    builder.setupGlyf(glyphs)

    builder.setupHorizontalMetrics(
        {name: (600, 100 + (index % 10) * 10) for index, name in enumerate(glyph_order)}
    )
    builder.setupHorizontalHeader(ascent=800, descent=-200)
    builder.setupNameTable({"familyName": family, "styleName": "Regular"})
    builder.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    builder.setupPost()

    output = BytesIO()
    builder.save(output)
    return output.getvalue()


def build_test_collection(*fonts: bytes) -> bytes:
    collection = TTCollection()
    collection.fonts = [TTFont(BytesIO(data)) for data in fonts]
    output = BytesIO()
    collection.save(output)
    return output.getvalue()


def make_image(
    pixels: bytes,
    width: int,
    height: int,
    image_format: ImageFormat = ImageFormat.RGBA8,
    alpha_type: ImageAlphaType = ImageAlphaType.ALPHA,
) -> ImageData:
    return ImageData(
        data=Blob(pixels),
        format=image_format,
        alpha_type=alpha_type,
        width=width,
        height=height,
    )


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    return build_test_font()


@pytest.fixture(scope="session")
def collection_bytes() -> bytes:
    return build_test_collection(
        build_test_font("Archive Sans"), build_test_font("Archive Serif")
    )


@pytest.fixture()
def font(font_bytes: bytes) -> FontData:
    return FontData(Blob(font_bytes), 0)


@pytest.fixture()
def ctx() -> RecordingRenderContext:
    return RecordingRenderContext()


@pytest.fixture()
def scene() -> Scene:
    return Scene()


@pytest.fixture()
def checkerboard() -> ImageData:
    """A 2x2 RGBA8 image with four distinct pixels."""

    return make_image(
        bytes(
            [
                255, 0, 0, 255,
                0, 255, 0, 255,
                0, 0, 255, 255,
                255, 255, 255, 128,
            ]
        ),
        2,
        2,
    )


@pytest.fixture()
def make_image_data() -> Any:
    """Factory fixture for building :class:`ImageData` instances."""

    return make_image


__all__ = [
    "GLYPH_COUNT",
    "build_test_collection",
    "build_test_font",
    "checkerboard",
    "collection_bytes",
    "ctx",
    "font",
    "font_bytes",
    "make_image",
    "make_image_data",
    "scene",
]
