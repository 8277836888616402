"""High level entry point for converting scenes to and from archives."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from os import PathLike
from pathlib import Path
from typing import IO, Union

from .config import SerializeConfig
from .container import ContainerContents, read_container, write_container
from .fonts import decode_font, sha256_hex
from .images import CANONICAL_FORMAT, from_canonical, to_canonical
from .manifest import (
    FontMetadata,
    ImageMetadata,
    ResourceKind,
    ResourceManifest,
    image_path,
)
from .paint import Blob, ImageData
from .rewriter import ResourceCollector, ResourceReconstructor
from .scene import RecordingRenderContext, RenderCommand, Scene

LOGGER = logging.getLogger(__name__)

PathType = Union[str, "PathLike[str]"]


@dataclass
class SceneArchive:
    """A scene with its resources split out, ready to be written as a zip.

    ``commands`` reference images and fonts by archive id. ``images`` hold
    canonical RGBA8 pixels and ``fonts`` the stored font bytes, both in the
    order of the manifest entries describing them.
    """

    manifest: ResourceManifest
    commands: list[RenderCommand] = field(default_factory=list)
    fonts: list[bytes] = field(default_factory=list)
    images: list[ImageData] = field(default_factory=list)

    @classmethod
    def from_scene(
        cls,
        ctx: RecordingRenderContext,
        scene: Scene,
        config: SerializeConfig | None = None,
    ) -> "SceneArchive":
        """Build an archive from a recorded ``scene``.

        Image handles are resolved through ``ctx``. Resources are numbered in
        the order they are first referenced by the command list.

        Raises:
            ResourceNotFoundError: If a brush references an image unknown to ``ctx``.
            InvalidFormatError: If an image uses an unsupported pixel format.
            FontProcessingError: If a font cannot be subsetted or compressed.
        """

        config = config or SerializeConfig()
        collector = ResourceCollector(ctx, config)
        commands = [collector.convert_command(command) for command in scene.commands]

        images: list[ImageData] = []
        image_entries: list[ImageMetadata] = []
        for resource_id, original in enumerate(collector.images):
            rgba = to_canonical(original.data.data, original.format)
            digest = sha256_hex(rgba)
            images.append(
                ImageData(
                    data=Blob(rgba),
                    format=CANONICAL_FORMAT,
                    alpha_type=original.alpha_type,
                    width=original.width,
                    height=original.height,
                )
            )
            image_entries.append(
                ImageMetadata(
                    id=resource_id,
                    kind=ResourceKind.IMAGE,
                    size=len(rgba),
                    sha256_hash=digest,
                    path=image_path(digest),
                    format=original.format,
                    alpha_type=original.alpha_type,
                    width=original.width,
                    height=original.height,
                )
            )

        fonts: list[bytes] = []
        font_entries: list[FontMetadata] = []
        for resource_id, font in enumerate(collector.fonts.process()):
            fonts.append(font.stored_data)
            font_entries.append(
                FontMetadata(
                    id=resource_id,
                    kind=ResourceKind.FONT,
                    size=font.raw_size,
                    sha256_hash=font.hash,
                    path=font.path,
                )
            )

        manifest = ResourceManifest(
            tolerance=scene.tolerance, images=image_entries, fonts=font_entries
        )
        LOGGER.debug(
            "Built archive from %d command(s): %d image(s), %d font(s)",
            len(commands),
            len(images),
            len(fonts),
        )
        return cls(manifest=manifest, commands=commands, fonts=fonts, images=images)

    def to_scene(self, ctx: RecordingRenderContext) -> Scene:
        """Rebuild the scene, registering its images with ``ctx``.

        Images are converted back to the pixel format they were recorded in
        and WOFF2 fonts are decompressed.

        Raises:
            ResourceNotFoundError: If a command references a missing resource.
            FontProcessingError: If a stored font cannot be decoded.
        """

        images = [
            ImageData(
                data=Blob(from_canonical(image.data.data, meta.format)),
                format=meta.format,
                alpha_type=image.alpha_type,
                width=image.width,
                height=image.height,
            )
            for image, meta in zip(self.images, self.manifest.images)
        ]
        fonts = [decode_font(data) for data in self.fonts]

        reconstructor = ResourceReconstructor(ctx, fonts, images)
        commands = [reconstructor.convert_command(command) for command in self.commands]
        return Scene(tolerance=self.manifest.tolerance, commands=commands)

    def _contents(self) -> ContainerContents:
        return ContainerContents(
            manifest=self.manifest,
            commands=self.commands,
            images=self.images,
            fonts=self.fonts,
        )

    @classmethod
    def _from_contents(cls, contents: ContainerContents) -> "SceneArchive":
        return cls(
            manifest=contents.manifest,
            commands=contents.commands,
            fonts=contents.fonts,
            images=contents.images,
        )

    def serialize(self, writer: IO[bytes]) -> None:
        """Write the archive as a zip into the binary stream ``writer``."""

        write_container(writer, self._contents())

    @classmethod
    def deserialize(cls, reader: IO[bytes]) -> "SceneArchive":
        """Read and verify an archive from the binary stream ``reader``."""

        return cls._from_contents(read_container(reader))

    def to_bytes(self) -> bytes:
        buffer = BytesIO()
        self.serialize(buffer)
        return buffer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> "SceneArchive":
        return cls.deserialize(BytesIO(data))

    def write(self, path: PathType) -> Path:
        """Write the archive to ``path`` and return it."""

        archive_path = Path(path)
        write_container(archive_path, self._contents())
        return archive_path

    @classmethod
    def read(cls, path: PathType) -> "SceneArchive":
        return cls._from_contents(read_container(Path(path)))


__all__ = ["SceneArchive"]
