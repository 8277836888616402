from __future__ import annotations

from io import BytesIO

import pytest
from fontTools.ttLib import TTFont

from conftest import GLYPH_COUNT
from scenearchive import Blob, FontData, FontProcessingError, Glyph, SerializeConfig
from scenearchive.fonts import (
    WOFF2_MAGIC,
    FontWriter,
    decode_font,
    encode_woff2,
    sha256_hex,
    subset_font,
)


def _contours(data: bytes, glyph_id: int) -> int:
    font = TTFont(BytesIO(data))
    try:
        name = font.getGlyphOrder()[glyph_id]
        return font["glyf"][name].numberOfContours
    finally:
        font.close()


def test_subsetting_retains_glyph_ids(font_bytes: bytes) -> None:
    subset = subset_font(font_bytes, 0, {43, 44})

    assert len(subset) < len(font_bytes)
    font = TTFont(BytesIO(subset))
    try:
        # Trailing unused glyphs may be dropped, never renumbered.
        assert 45 <= len(font.getGlyphOrder()) <= GLYPH_COUNT
    finally:
        font.close()
    assert _contours(subset, 43) > 0
    assert _contours(subset, 44) > 0
    assert _contours(subset, 42) == 0
    assert _contours(subset, 10) == 0
    assert _contours(font_bytes, 42) > 0


def test_subsetting_with_no_glyphs_is_valid(font_bytes: bytes) -> None:
    subset = subset_font(font_bytes, 0, set())

    font = TTFont(BytesIO(subset))
    try:
        assert ".notdef" in font.getGlyphOrder()
        assert len(font.getGlyphOrder()) <= GLYPH_COUNT
    finally:
        font.close()
    assert len(subset) < len(font_bytes)


def test_subsetting_extracts_a_collection_face(collection_bytes: bytes) -> None:
    subset = subset_font(collection_bytes, 1, {5})

    font = TTFont(BytesIO(subset))
    try:
        assert font["name"].getDebugName(1) == "Archive Serif"
    finally:
        font.close()


def test_malformed_font_data_raises() -> None:
    with pytest.raises(FontProcessingError, match="Failed to parse font"):
        subset_font(b"not a font at all", 0, {1})


def test_woff2_round_trip(font_bytes: bytes) -> None:
    compressed = encode_woff2(font_bytes)

    assert compressed.startswith(WOFF2_MAGIC)
    decoded = decode_font(compressed)
    assert _contours(decoded, 43) > 0
    assert decode_font(font_bytes) == font_bytes


def test_corrupt_woff2_raises() -> None:
    with pytest.raises(FontProcessingError, match="WOFF2 decoding failed"):
        decode_font(WOFF2_MAGIC + b"\x00" * 32)


def test_font_writer_keys_faces_only_when_subsetting(collection_bytes: bytes) -> None:
    blob = Blob(collection_bytes)
    regular, serif = FontData(blob, 0), FontData(blob, 1)

    plain = FontWriter(SerializeConfig())
    assert plain.register(regular) == plain.register(serif) == 0
    assert plain.face_index(serif) == 1

    subsetting = FontWriter(SerializeConfig(subset_fonts=True))
    assert subsetting.register(regular) == 0
    assert subsetting.register(serif) == 1
    assert subsetting.face_index(serif) == 0
    assert len(subsetting) == 2


def test_font_writer_processes_fonts_in_id_order(font_bytes: bytes) -> None:
    writer = FontWriter(SerializeConfig(subset_fonts=True, woff2_fonts=True))
    font = FontData(Blob(font_bytes))
    resource_id = writer.register(font)
    writer.record_glyphs(resource_id, [Glyph(43, 0, 0)])
    writer.record_glyphs(resource_id, [Glyph(7, 10, 0)])

    (processed,) = list(writer.process())

    assert processed.stored_data.startswith(WOFF2_MAGIC)
    assert processed.hash == sha256_hex(processed.stored_data)
    assert processed.path == f"fonts/{processed.hash}.woff2"
    raw = decode_font(processed.stored_data)
    assert _contours(raw, 7) > 0
    assert _contours(raw, 43) > 0
    assert _contours(raw, 8) == 0


def test_font_writer_keeps_raw_bytes_without_subsetting(font_bytes: bytes) -> None:
    writer = FontWriter(SerializeConfig())
    writer.register(FontData(Blob(font_bytes)))

    (processed,) = list(writer.process())

    assert processed.stored_data == font_bytes
    assert processed.raw_size == len(font_bytes)
    assert processed.path == f"fonts/{sha256_hex(font_bytes)}.ttf"
