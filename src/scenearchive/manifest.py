"""The versioned resource manifest stored as ``resources.json``."""

from __future__ import annotations

import json
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ArchiveFormatError, UnsupportedVersionError
from .paint import ImageAlphaType, ImageFormat

_SHA256_PATTERN = r"^[0-9a-f]{64}$"


class ResourceKind(str, Enum):
    """The type of a resource stored in the archive."""

    IMAGE = "image"
    FONT = "font"


class ResourceEntry(BaseModel):
    """Metadata shared by every stored resource."""

    id: int = Field(..., ge=0)
    kind: ResourceKind
    # Size of the raw (decompressed) resource data in bytes.
    size: int = Field(..., ge=0)
    # SHA-256 of the bytes stored in the archive.
    sha256_hash: str = Field(..., pattern=_SHA256_PATTERN)
    path: str


class ImageMetadata(ResourceEntry):
    """Metadata for an image.

    Images are always stored as RGBA8; ``format`` records the original layout
    so that it can be restored when the scene is rebuilt.
    """

    format: ImageFormat
    alpha_type: ImageAlphaType
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)


class FontMetadata(ResourceEntry):
    """Metadata for a font, optionally subsetted and/or WOFF2-compressed."""


def image_path(digest: str) -> str:
    return f"images/{digest}.png"


def font_path(digest: str, extension: str) -> str:
    return f"fonts/{digest}.{extension}"


class ResourceManifest(BaseModel):
    """Describes every resource stored in an archive, in id order."""

    CURRENT_VERSION: ClassVar[int] = 1

    version: int = CURRENT_VERSION
    # Scene tolerance used for path flattening.
    tolerance: float
    images: list[ImageMetadata] = Field(default_factory=list)
    fonts: list[FontMetadata] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_entries(self) -> "ResourceManifest":
        for expected_kind, entries in (
            (ResourceKind.IMAGE, self.images),
            (ResourceKind.FONT, self.fonts),
        ):
            for position, entry in enumerate(entries):
                if entry.kind is not expected_kind:
                    raise ValueError(
                        f"{expected_kind.value} entry {position} has kind {entry.kind.value!r}"
                    )
                if entry.id != position:
                    raise ValueError(
                        f"{expected_kind.value} entry {position} has id {entry.id}; "
                        "ids must be dense and ordered"
                    )

        for image in self.images:
            if image.path != image_path(image.sha256_hash):
                raise ValueError(f"Unexpected image path {image.path!r}")
        for font in self.fonts:
            allowed = {font_path(font.sha256_hash, ext) for ext in ("woff2", "ttf")}
            if font.path not in allowed:
                raise ValueError(f"Unexpected font path {font.path!r}")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, text: str | bytes) -> "ResourceManifest":
        """Parse and validate a manifest.

        The version is checked before anything else so that archives written
        by a newer format are rejected instead of being misread.

        Raises:
            ArchiveFormatError: If the JSON is malformed or does not match the schema.
            UnsupportedVersionError: If ``version`` differs from :attr:`CURRENT_VERSION`.
        """

        try:
            payload = json.loads(text)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ArchiveFormatError(f"Invalid resources.json: {exc}") from exc
        if not isinstance(payload, dict):
            raise ArchiveFormatError("Invalid resources.json: expected an object")

        version = payload.get("version")
        if isinstance(version, bool) or not isinstance(version, int):
            raise ArchiveFormatError(
                f"Invalid resources.json: version must be an integer, got {version!r}"
            )
        if version != cls.CURRENT_VERSION:
            raise UnsupportedVersionError(version)

        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise ArchiveFormatError(f"Invalid resources.json: {exc}") from exc


__all__ = [
    "FontMetadata",
    "ImageMetadata",
    "ResourceEntry",
    "ResourceKind",
    "ResourceManifest",
    "font_path",
    "image_path",
]
