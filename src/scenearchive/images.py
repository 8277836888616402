"""Image normalisation to the canonical RGBA8 layout and PNG encoding."""

from __future__ import annotations

from io import BytesIO

from PIL import Image

from .errors import ArchiveFormatError, InvalidFormatError
from .paint import ImageFormat

CANONICAL_FORMAT = ImageFormat.RGBA8


def _swap_red_blue(data: bytes) -> bytes:
    swapped = bytearray(data)
    end = len(swapped) - len(swapped) % 4
    swapped[0:end:4], swapped[2:end:4] = swapped[2:end:4], swapped[0:end:4]
    return bytes(swapped)


def to_canonical(data: bytes, image_format: ImageFormat) -> bytes:
    """Convert pixels in ``image_format`` to RGBA8."""

    if image_format is ImageFormat.RGBA8:
        return data
    if image_format is ImageFormat.BGRA8:
        return _swap_red_blue(data)
    raise InvalidFormatError(f"Unsupported image format: {image_format.value}")


def from_canonical(data: bytes, image_format: ImageFormat) -> bytes:
    """Convert RGBA8 pixels back to ``image_format``."""

    if image_format is ImageFormat.RGBA8:
        return data
    if image_format is ImageFormat.BGRA8:
        return _swap_red_blue(data)
    raise InvalidFormatError(f"Unsupported image format: {image_format.value}")


def encode_png(rgba: bytes, width: int, height: int) -> bytes:
    expected = width * height * 4
    if width <= 0 or height <= 0 or len(rgba) != expected:
        raise InvalidFormatError(
            f"Failed to create image buffer: {width}x{height} RGBA8 needs "
            f"{expected} bytes, got {len(rgba)}"
        )

    try:
        image = Image.frombytes("RGBA", (width, height), rgba)
    except ValueError as exc:
        raise InvalidFormatError(f"Failed to create image buffer: {exc}") from exc

    output = BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


def decode_png(data: bytes, width: int, height: int) -> bytes:
    """Decode PNG ``data`` and return its pixels as RGBA8 bytes.

    The header must declare exactly ``width`` x ``height`` pixels; the pixel
    data is only decoded once that matches.
    """

    try:
        with Image.open(BytesIO(data), formats=["PNG"]) as image:
            if image.size != (width, height):
                raise ArchiveFormatError(
                    f"PNG is {image.size[0]}x{image.size[1]}, expected {width}x{height}"
                )
            return image.convert("RGBA").tobytes()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise ArchiveFormatError(f"Invalid PNG data: {exc}") from exc


__all__ = [
    "CANONICAL_FORMAT",
    "decode_png",
    "encode_png",
    "from_canonical",
    "to_canonical",
]
