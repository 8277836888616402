"""Zip container holding the manifest, the command stream and resource payloads."""

from __future__ import annotations

import json
import logging
import zipfile
import zlib
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import IO, Sequence, Union

from .errors import ArchiveFormatError, ArchiveIOError, HashMismatchError
from .fonts import sha256_hex
from .images import CANONICAL_FORMAT, decode_png, encode_png
from .json_format import dumps_depth_limited
from .manifest import ResourceManifest
from .paint import Blob, ImageData
from .scene import RenderCommand
from .stream import commands_from_payload, commands_to_payload

LOGGER = logging.getLogger(__name__)

MANIFEST_ENTRY = "resources.json"
COMMANDS_ENTRY = "draw_commands.json"
COMMANDS_JSON_DEPTH = 3

ZipTarget = Union[str, "PathLike[str]", IO[bytes]]


@dataclass
class ContainerContents:
    """Everything read from or written to an archive container.

    ``images`` hold canonical RGBA8 pixels and ``fonts`` the stored (possibly
    WOFF2-compressed) font bytes, both in manifest id order.
    """

    manifest: ResourceManifest
    commands: list[RenderCommand] = field(default_factory=list)
    images: list[ImageData] = field(default_factory=list)
    fonts: list[bytes] = field(default_factory=list)


def write_container(target: ZipTarget, contents: ContainerContents) -> None:
    """Write ``contents`` into a new zip archive at ``target``.

    Entries whose path was already written are skipped: content addressing
    means identical pixels or font bytes always map to the same path. Every
    entry is encoded before ``target`` is opened, and a partially written
    file is removed, so a failed write never leaves an archive behind.

    Raises:
        ArchiveFormatError: If the manifest and payload lists differ in length.
        InvalidFormatError: If an image buffer cannot be encoded as PNG.
        ArchiveIOError: If the archive cannot be written.
    """

    entries = _encode_entries(contents)

    try:
        with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, data in entries.items():
                archive.writestr(name, data)
    except OSError as exc:
        if isinstance(target, (str, PathLike)):
            Path(target).unlink(missing_ok=True)
        raise ArchiveIOError(f"Failed to write archive: {exc}") from exc

    LOGGER.debug(
        "Wrote archive with %d command(s), %d image(s) and %d font(s)",
        len(contents.commands),
        len(contents.manifest.images),
        len(contents.manifest.fonts),
    )


def _encode_entries(contents: ContainerContents) -> dict[str, Union[str, bytes]]:
    manifest = contents.manifest
    if len(manifest.images) != len(contents.images):
        raise ArchiveFormatError("Manifest and image payloads are out of sync")
    if len(manifest.fonts) != len(contents.fonts):
        raise ArchiveFormatError("Manifest and font payloads are out of sync")

    entries: dict[str, Union[str, bytes]] = {
        MANIFEST_ENTRY: manifest.to_json(),
        COMMANDS_ENTRY: serialize_commands(contents.commands),
    }
    for meta, image in zip(manifest.images, contents.images):
        if meta.path not in entries:
            entries[meta.path] = encode_png(image.data.data, image.width, image.height)
    for meta, font in zip(manifest.fonts, contents.fonts):
        if meta.path not in entries:
            entries[meta.path] = font
    return entries


def _read_entry(archive: zipfile.ZipFile, name: str) -> bytes:
    try:
        return archive.read(name)
    except KeyError as exc:
        raise ArchiveFormatError(f"Missing archive entry: {name}") from exc
    except (zipfile.BadZipFile, zlib.error) as exc:
        raise ArchiveFormatError(f"Corrupt archive entry {name}: {exc}") from exc
    except NotImplementedError as exc:
        raise ArchiveFormatError(
            f"Unsupported compression for archive entry {name}: {exc}"
        ) from exc
    except RuntimeError as exc:
        # encrypted entries
        raise ArchiveFormatError(f"Unreadable archive entry {name}: {exc}") from exc


def _read_commands(data: bytes) -> list[RenderCommand]:
    try:
        payload = json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ArchiveFormatError(f"Invalid {COMMANDS_ENTRY}: {exc}") from exc
    try:
        return commands_from_payload(payload)
    except (ValueError, TypeError) as exc:
        raise ArchiveFormatError(f"Invalid {COMMANDS_ENTRY}: {exc}") from exc


def _verify(path: str, expected: str, data: bytes) -> None:
    actual = sha256_hex(data)
    if actual != expected:
        raise HashMismatchError(path, expected, actual)


def read_container(source: ZipTarget) -> ContainerContents:
    """Read and verify an archive.

    The manifest is parsed first so that unsupported versions are rejected
    before anything else is touched. Every resource listed in the manifest
    must be present and hash to its recorded digest.

    Raises:
        ArchiveIOError: If the archive cannot be opened or read.
        ArchiveFormatError: If the zip, an entry or a payload is malformed or missing.
        UnsupportedVersionError: If the manifest version is not supported.
        HashMismatchError: If a resource does not match its digest.
    """

    try:
        with zipfile.ZipFile(source, "r") as archive:
            manifest = ResourceManifest.from_json(_read_entry(archive, MANIFEST_ENTRY))
            commands = _read_commands(_read_entry(archive, COMMANDS_ENTRY))

            images: list[ImageData] = []
            for meta in manifest.images:
                rgba = decode_png(
                    _read_entry(archive, meta.path), meta.width, meta.height
                )
                _verify(meta.path, meta.sha256_hash, rgba)
                images.append(
                    ImageData(
                        data=Blob(rgba),
                        format=CANONICAL_FORMAT,
                        alpha_type=meta.alpha_type,
                        width=meta.width,
                        height=meta.height,
                    )
                )

            fonts: list[bytes] = []
            for meta in manifest.fonts:
                stored = _read_entry(archive, meta.path)
                _verify(meta.path, meta.sha256_hash, stored)
                fonts.append(stored)
    except zipfile.BadZipFile as exc:
        raise ArchiveFormatError(f"Invalid zip archive: {exc}") from exc
    except OSError as exc:
        raise ArchiveIOError(f"Failed to read archive: {exc}") from exc

    LOGGER.debug(
        "Read archive version %d with %d command(s), %d image(s) and %d font(s)",
        manifest.version,
        len(commands),
        len(images),
        len(fonts),
    )
    return ContainerContents(
        manifest=manifest, commands=commands, images=images, fonts=fonts
    )


def serialize_commands(commands: Sequence[RenderCommand]) -> str:
    """Return the ``draw_commands.json`` text for ``commands``."""

    return dumps_depth_limited(commands_to_payload(commands), COMMANDS_JSON_DEPTH)


__all__ = [
    "COMMANDS_ENTRY",
    "MANIFEST_ENTRY",
    "ContainerContents",
    "read_container",
    "serialize_commands",
    "write_container",
]
