from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from scenearchive import ArchiveFormatError, ImageFormat, InvalidFormatError
from scenearchive.images import decode_png, encode_png, from_canonical, to_canonical


def test_bgra_conversion_swaps_red_and_blue() -> None:
    bgra = bytes([10, 20, 30, 40, 50, 60, 70, 80])

    rgba = to_canonical(bgra, ImageFormat.BGRA8)

    assert rgba == bytes([30, 20, 10, 40, 70, 60, 50, 80])
    assert from_canonical(rgba, ImageFormat.BGRA8) == bgra


def test_rgba_is_left_untouched() -> None:
    data = bytes(range(8))

    assert to_canonical(data, ImageFormat.RGBA8) == data
    assert from_canonical(data, ImageFormat.RGBA8) == data


@pytest.mark.parametrize("image_format", [ImageFormat.RGB8, ImageFormat.GRAY8])
def test_other_formats_are_rejected(image_format: ImageFormat) -> None:
    with pytest.raises(InvalidFormatError, match="Unsupported image format"):
        to_canonical(b"\x00" * 4, image_format)
    with pytest.raises(InvalidFormatError):
        from_canonical(b"\x00" * 4, image_format)


def test_png_round_trip_preserves_pixels() -> None:
    rgba = bytes([255, 0, 0, 255, 0, 255, 0, 128, 0, 0, 255, 0, 1, 2, 3, 4])

    png = encode_png(rgba, 2, 2)

    assert png.startswith(b"\x89PNG")
    with Image.open(BytesIO(png)) as image:
        assert image.size == (2, 2)
        assert image.mode == "RGBA"
    assert decode_png(png, 2, 2) == rgba


def test_encode_rejects_buffers_of_the_wrong_size() -> None:
    with pytest.raises(InvalidFormatError):
        encode_png(b"\x00" * 12, 2, 2)
    with pytest.raises(InvalidFormatError):
        encode_png(b"", 0, 0)


def test_decode_rejects_non_png_data() -> None:
    with pytest.raises(ArchiveFormatError):
        decode_png(b"definitely not a png", 1, 1)


def test_decode_rejects_unexpected_dimensions() -> None:
    rgba = bytes(range(16))
    png = encode_png(rgba, 4, 1)

    with pytest.raises(ArchiveFormatError, match="PNG is 4x1, expected 2x2"):
        decode_png(png, 2, 2)


def test_decompression_bomb_is_a_format_error(monkeypatch: pytest.MonkeyPatch) -> None:
    png = encode_png(b"\x00" * 64 * 64 * 4, 64, 64)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

    with pytest.raises(ArchiveFormatError, match="Invalid PNG data"):
        decode_png(png, 64, 64)
