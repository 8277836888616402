"""Recorded scenes: an ordered list of drawing commands plus a flattening tolerance."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Iterable, Protocol, Sequence, Union

from .geometry import IDENTITY, Affine, BezPath, Rect
from .paint import (
    BlendMode,
    Brush,
    Color,
    Compose,
    FillRule,
    FontData,
    ImageBrush,
    ImageData,
    ImageResource,
    Mix,
    Paint,
    Style,
    StrokeStyle,
    paint_to_brush,
)

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from .stream import FontResourceRef

DEFAULT_TOLERANCE = 0.1


class Shape(Protocol):
    def to_path(self, tolerance: float = ...) -> BezPath: ...


@dataclass(frozen=True)
class Glyph:
    """A positioned glyph."""

    id: int
    x: float
    y: float


@dataclass(frozen=True)
class PushLayer:
    """Push a layer clipped by ``clip`` and composed with ``blend``.

    Every command until the matching :class:`PopLayer` is clipped by the shape;
    transforms are not saved or modified by the layer stack.
    """

    blend: BlendMode
    alpha: float
    transform: Affine
    clip: BezPath


@dataclass(frozen=True)
class PushClipLayer:
    transform: Affine
    clip: BezPath


@dataclass(frozen=True)
class PopLayer:
    pass


@dataclass(frozen=True)
class StrokeCommand:
    style: StrokeStyle
    transform: Affine
    brush: Brush
    brush_transform: Affine | None
    shape: BezPath


@dataclass(frozen=True)
class FillCommand:
    fill: FillRule
    transform: Affine
    brush: Brush
    brush_transform: Affine | None
    shape: BezPath


@dataclass(frozen=True)
class GlyphRunCommand:
    """Draw a run of glyphs.

    ``font_data`` holds a :class:`~scenearchive.paint.FontData` in a live scene
    and a font reference once the command has been rewritten for an archive.
    """

    font_data: Union[FontData, FontResourceRef]
    font_size: float
    hint: bool
    normalized_coords: tuple[int, ...]
    style: Style
    brush: Brush
    brush_alpha: float
    transform: Affine
    glyph_transform: Affine | None
    glyphs: tuple[Glyph, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "normalized_coords", tuple(self.normalized_coords))
        object.__setattr__(self, "glyphs", tuple(self.glyphs))


@dataclass(frozen=True)
class BoxShadowCommand:
    """Draw a rounded rectangle blurred with a gaussian filter."""

    transform: Affine
    rect: Rect
    brush: Color
    radius: float
    std_dev: float


RenderCommand = Union[
    PushLayer,
    PushClipLayer,
    PopLayer,
    StrokeCommand,
    FillCommand,
    GlyphRunCommand,
    BoxShadowCommand,
]


def apply_transform(command: RenderCommand, transform: Affine) -> RenderCommand:
    """Return ``command`` with ``transform`` prepended to its own transform."""

    if isinstance(command, PopLayer):
        return command
    return replace(command, transform=transform * command.transform)


@dataclass
class Scene:
    """A recording of drawing commands stored as plain data.

    The painting methods mirror what a rendering backend accepts; shapes are
    flattened into :class:`~scenearchive.geometry.BezPath` instances and paints
    are converted into brushes as they are recorded.
    """

    tolerance: float = DEFAULT_TOLERANCE
    commands: list[RenderCommand] = field(default_factory=list)

    def reset(self) -> None:
        self.commands.clear()

    def push_layer(
        self,
        blend: BlendMode | Mix | Compose,
        alpha: float,
        transform: Affine,
        clip: Shape,
    ) -> None:
        self.commands.append(
            PushLayer(
                blend=BlendMode.coerce(blend),
                alpha=alpha,
                transform=transform,
                clip=clip.to_path(self.tolerance),
            )
        )

    def push_clip_layer(self, transform: Affine, clip: Shape) -> None:
        self.commands.append(
            PushClipLayer(transform=transform, clip=clip.to_path(self.tolerance))
        )

    def pop_layer(self) -> None:
        self.commands.append(PopLayer())

    def stroke(
        self,
        style: StrokeStyle,
        transform: Affine,
        paint: Paint,
        brush_transform: Affine | None,
        shape: Shape,
    ) -> None:
        self.commands.append(
            StrokeCommand(
                style=style,
                transform=transform,
                brush=paint_to_brush(paint),
                brush_transform=brush_transform,
                shape=shape.to_path(self.tolerance),
            )
        )

    def fill(
        self,
        style: FillRule,
        transform: Affine,
        paint: Paint,
        brush_transform: Affine | None,
        shape: Shape,
    ) -> None:
        self.commands.append(
            FillCommand(
                fill=style,
                transform=transform,
                brush=paint_to_brush(paint),
                brush_transform=brush_transform,
                shape=shape.to_path(self.tolerance),
            )
        )

    def draw_glyphs(
        self,
        font: FontData,
        font_size: float,
        hint: bool,
        normalized_coords: Sequence[int],
        style: Style,
        paint: Paint,
        brush_alpha: float,
        transform: Affine,
        glyph_transform: Affine | None,
        glyphs: Iterable[Glyph],
    ) -> None:
        self.commands.append(
            GlyphRunCommand(
                font_data=font,
                font_size=font_size,
                hint=hint,
                normalized_coords=tuple(normalized_coords),
                style=style,
                brush=paint_to_brush(paint),
                brush_alpha=brush_alpha,
                transform=transform,
                glyph_transform=glyph_transform,
                glyphs=tuple(glyphs),
            )
        )

    def draw_box_shadow(
        self,
        transform: Affine,
        rect: Rect,
        brush: Color,
        radius: float,
        std_dev: float,
    ) -> None:
        self.commands.append(
            BoxShadowCommand(
                transform=transform,
                rect=rect,
                brush=brush,
                radius=radius,
                std_dev=std_dev,
            )
        )

    def draw_image(self, image: ImageBrush, transform: Affine = IDENTITY) -> None:
        """Draw an image at its natural size."""

        resource: ImageResource = image.image
        self.fill(
            FillRule.NON_ZERO,
            transform,
            image,
            None,
            Rect(0.0, 0.0, float(resource.width), float(resource.height)),
        )

    def append_scene(self, scene: "Scene", transform: Affine = IDENTITY) -> None:
        """Append the commands of ``scene``, each prefixed by ``transform``."""

        self.commands.extend(
            apply_transform(command, transform) for command in scene.commands
        )


class RecordingRenderContext:
    """Resource registry used while recording scenes.

    Images are assigned sequential ids starting at zero and their pixel data is
    kept so that recorded scenes can later be archived or replayed.
    """

    def __init__(self) -> None:
        self._image_data: dict[int, ImageData] = {}
        self._next_resource_id = 0

    @property
    def image_data(self) -> dict[int, ImageData]:
        return self._image_data

    def register_image(self, image: ImageData) -> ImageResource:
        resource_id = self._next_resource_id
        self._next_resource_id += 1
        self._image_data[resource_id] = image
        return ImageResource(id=resource_id, width=image.width, height=image.height)

    def unregister_resource(self, resource_id: int) -> None:
        self._image_data.pop(resource_id, None)


__all__ = [
    "DEFAULT_TOLERANCE",
    "BoxShadowCommand",
    "FillCommand",
    "Glyph",
    "GlyphRunCommand",
    "PopLayer",
    "PushClipLayer",
    "PushLayer",
    "RecordingRenderContext",
    "RenderCommand",
    "Scene",
    "StrokeCommand",
    "apply_transform",
]
