"""Write-side font processing: collection, deduplication, subsetting and encoding."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, Iterator

from fontTools import subset as ftsubset
from fontTools.ttLib import TTFont
from fontTools.ttLib import woff2

from .config import SerializeConfig
from .errors import FontProcessingError
from .identity import ResourceIdAssigner
from .paint import FontData
from .scene import Glyph

LOGGER = logging.getLogger(__name__)

WOFF2_MAGIC = b"wOF2"


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class ProcessedFont:
    """A font ready to be written into an archive."""

    raw_size: int
    stored_data: bytes
    hash: str
    path: str


def subset_font(data: bytes, index: int, glyph_ids: Iterable[int]) -> bytes:
    """Extract face ``index`` from ``data`` keeping only ``glyph_ids``.

    Glyph ids are retained: glyphs outside the set become empty slots instead
    of being renumbered, so draw commands stay valid without rewriting.
    """

    try:
        font = TTFont(BytesIO(data), fontNumber=index, lazy=False)
    except Exception as exc:
        raise FontProcessingError(f"Failed to parse font: {exc}") from exc

    # notdef_outline=True keeps the white box of the .notdef glyph
    options = ftsubset.Options(
        retain_gids=True,
        notdef_outline=True,
        name_IDs=["*"],
        name_languages=["*"],
    )
    subsetter = ftsubset.Subsetter(options)
    output = BytesIO()
    try:
        subsetter.populate(gids=sorted(glyph_ids))
        subsetter.subset(font)
        font.save(output)
    except Exception as exc:
        raise FontProcessingError(f"Font subsetting failed: {exc}") from exc
    finally:
        font.close()
    return output.getvalue()


def encode_woff2(data: bytes) -> bytes:
    output = BytesIO()
    try:
        woff2.compress(BytesIO(data), output)
    except Exception as exc:
        raise FontProcessingError(f"WOFF2 encoding failed: {exc}") from exc
    return output.getvalue()


def decode_font(data: bytes) -> bytes:
    """Return TrueType/OpenType bytes for stored font ``data``.

    WOFF2 payloads are recognised by their magic bytes and decompressed; any
    other data is returned unchanged.
    """

    if not data.startswith(WOFF2_MAGIC):
        return data

    output = BytesIO()
    try:
        woff2.decompress(BytesIO(data), output)
    except Exception as exc:
        raise FontProcessingError(f"WOFF2 decoding failed: {exc}") from exc
    return output.getvalue()


class FontWriter:
    """Collect, deduplicate and process the fonts referenced by a scene.

    With subsetting enabled every ``(blob, face index)`` pair is its own
    resource, because each face is extracted into a standalone font. Without
    subsetting fonts are deduplicated by blob alone so that the faces of one
    collection share a single stored file.
    """

    def __init__(self, config: SerializeConfig) -> None:
        self.config = config
        self._fonts: ResourceIdAssigner[tuple[int, int], FontData] = ResourceIdAssigner()
        self._glyph_ids: list[set[int]] = []

    def __len__(self) -> int:
        return len(self._fonts)

    def register(self, font: FontData) -> int:
        """Register ``font`` and return its archive font id."""

        index = font.index if self.config.subset_fonts else 0
        resource_id = self._fonts.register((font.data.id, index), font)
        if resource_id == len(self._glyph_ids):
            self._glyph_ids.append(set())
        return resource_id

    def record_glyphs(self, resource_id: int, glyphs: Iterable[Glyph]) -> None:
        """Remember the glyph ids drawn with a font (only needed for subsetting)."""

        if self.config.subset_fonts:
            self._glyph_ids[resource_id].update(glyph.id for glyph in glyphs)

    def face_index(self, font: FontData) -> int:
        """Face index to store in a serialized font reference.

        Subsetted faces become standalone fonts, so the index is always zero;
        otherwise the original index into the collection is kept.
        """

        return 0 if self.config.subset_fonts else font.index

    def process(self) -> Iterator[ProcessedFont]:
        """Yield the processed fonts in id order."""

        extension = self.config.font_extension
        for resource_id, font in enumerate(self._fonts):
            if self.config.subset_fonts:
                glyph_ids = self._glyph_ids[resource_id]
                raw_data = subset_font(font.data.data, font.index, glyph_ids)
                LOGGER.debug(
                    "Subsetted font %d to %d glyph(s): %d -> %d bytes",
                    resource_id,
                    len(glyph_ids),
                    len(font.data),
                    len(raw_data),
                )
            else:
                raw_data = font.data.data

            stored_data = encode_woff2(raw_data) if self.config.woff2_fonts else raw_data
            digest = sha256_hex(stored_data)
            yield ProcessedFont(
                raw_size=len(raw_data),
                stored_data=stored_data,
                hash=digest,
                path=f"fonts/{digest}.{extension}",
            )


__all__ = [
    "WOFF2_MAGIC",
    "FontWriter",
    "ProcessedFont",
    "decode_font",
    "encode_woff2",
    "sha256_hex",
    "subset_font",
]
