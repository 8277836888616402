"""Rewriting of drawing commands between live resource handles and archive ids."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from .config import SerializeConfig
from .errors import ResourceNotFoundError
from .fonts import FontWriter
from .identity import ResourceIdAssigner
from .paint import (
    Blob,
    Brush,
    Color,
    FontData,
    Gradient,
    ImageBrush,
    ImageData,
    ImageResource,
)
from .scene import (
    FillCommand,
    GlyphRunCommand,
    RecordingRenderContext,
    RenderCommand,
    StrokeCommand,
)
from .stream import FontResourceRef

LOGGER = logging.getLogger(__name__)


class ResourceCollector:
    """Collect and deduplicate the resources referenced by a scene.

    Images are keyed by the id of the handle issued by the render context, so
    every brush pointing at the same handle shares one archive image. Fonts
    are delegated to :class:`~scenearchive.fonts.FontWriter`.
    """

    def __init__(self, ctx: RecordingRenderContext, config: SerializeConfig) -> None:
        self.ctx = ctx
        self.fonts = FontWriter(config)
        self._images: ResourceIdAssigner[int, ImageData] = ResourceIdAssigner()

    @property
    def images(self) -> list[ImageData]:
        """Image data in archive id order."""

        return self._images.resources

    def register_image(self, resource: ImageResource) -> int:
        existing = self._images.get(resource.id)
        if existing is not None:
            return existing

        try:
            image = self.ctx.image_data[resource.id]
        except KeyError as exc:
            raise ResourceNotFoundError(resource.id, "image") from exc
        return self._images.register(resource.id, image)

    def convert_brush(self, brush: Brush) -> Brush:
        if isinstance(brush, (Color, Gradient)):
            return brush
        if isinstance(brush, ImageBrush):
            return ImageBrush(image=self.register_image(brush.image), sampler=brush.sampler)
        raise TypeError(f"Unsupported brush type {type(brush)!r}")

    def convert_command(self, command: RenderCommand) -> RenderCommand:
        """Return ``command`` with resource handles replaced by archive ids."""

        if isinstance(command, GlyphRunCommand):
            font: FontData = command.font_data
            resource_id = self.fonts.register(font)
            self.fonts.record_glyphs(resource_id, command.glyphs)
            return replace(
                command,
                font_data=FontResourceRef(resource_id, self.fonts.face_index(font)),
                brush=self.convert_brush(command.brush),
            )
        if isinstance(command, (StrokeCommand, FillCommand)):
            return replace(command, brush=self.convert_brush(command.brush))
        return command


class ResourceReconstructor:
    """Rebind archive ids to resources registered with a render context.

    Images are registered in archive id order. Each decoded font is wrapped in
    a single :class:`~scenearchive.paint.Blob` shared by every glyph run that
    references it.

    Every image is registered with ``ctx`` on construction, before any command
    is converted. Those registrations stay in ``ctx`` even when a later
    conversion raises :class:`~scenearchive.errors.ResourceNotFoundError`, so
    pass a fresh context if a failed rebuild must leave no trace.
    """

    def __init__(
        self,
        ctx: RecordingRenderContext,
        fonts: Sequence[bytes],
        images: Sequence[ImageData],
    ) -> None:
        self.fonts = [Blob(data) for data in fonts]
        self.image_resources = [ctx.register_image(image) for image in images]
        LOGGER.debug(
            "Registered %d image(s) and %d font(s) for reconstruction",
            len(self.image_resources),
            len(self.fonts),
        )

    def get_font(self, resource_id: int) -> Blob:
        if 0 <= resource_id < len(self.fonts):
            return self.fonts[resource_id]
        raise ResourceNotFoundError(resource_id, "font")

    def get_image_resource(self, resource_id: int) -> ImageResource:
        if 0 <= resource_id < len(self.image_resources):
            return self.image_resources[resource_id]
        raise ResourceNotFoundError(resource_id, "image")

    def convert_brush(self, brush: Brush) -> Brush:
        if isinstance(brush, (Color, Gradient)):
            return brush
        if isinstance(brush, ImageBrush):
            return ImageBrush(
                image=self.get_image_resource(brush.image), sampler=brush.sampler
            )
        raise TypeError(f"Unsupported brush type {type(brush)!r}")

    def convert_command(self, command: RenderCommand) -> RenderCommand:
        """Return ``command`` with archive ids replaced by live resources."""

        if isinstance(command, GlyphRunCommand):
            reference: FontResourceRef = command.font_data
            return replace(
                command,
                font_data=FontData(self.get_font(reference.resource_id), reference.index),
                brush=self.convert_brush(command.brush),
            )
        if isinstance(command, (StrokeCommand, FillCommand)):
            return replace(command, brush=self.convert_brush(command.brush))
        return command


__all__ = ["ResourceCollector", "ResourceReconstructor"]
