"""JSON payloads for the serialized command stream stored in ``draw_commands.json``.

Commands use external tagging: unit variants are plain strings (``"PopLayer"``)
and every other variant is a single-key object naming the variant. Image
brushes carry archive image ids and glyph runs carry :class:`FontResourceRef`
values; live resource handles never reach this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .geometry import (
    Affine,
    BezPath,
    Rect,
    _coerce_float,
    optional_affine_from_payload,
    optional_affine_payload,
)
from .paint import (
    BlendMode,
    Brush,
    Color,
    FillRule,
    Gradient,
    ImageBrush,
    ImageSampler,
    StrokeStyle,
    _enum_from_payload,
    _require_key,
    _require_mapping,
    _single_variant,
    style_from_payload,
    style_to_payload,
)
from .scene import (
    BoxShadowCommand,
    FillCommand,
    Glyph,
    GlyphRunCommand,
    PopLayer,
    PushClipLayer,
    PushLayer,
    RenderCommand,
    StrokeCommand,
)


@dataclass(frozen=True)
class FontResourceRef:
    """Reference from a glyph run to an archived font face."""

    resource_id: int
    index: int = 0

    def to_payload(self) -> dict[str, int]:
        return {"resource_id": self.resource_id, "index": self.index}

    @classmethod
    def from_payload(cls, payload: object) -> "FontResourceRef":
        mapping = _require_mapping(payload, what="font reference")
        return cls(
            resource_id=_coerce_index(
                _require_key(mapping, "resource_id", what="font reference"),
                field_name="resource_id",
            ),
            index=_coerce_index(mapping.get("index", 0), field_name="index"),
        )


def _coerce_index(value: object, *, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{field_name} must be a non-negative integer, got {value!r}")
    return value


def brush_to_payload(brush: Brush) -> dict[str, Any]:
    if isinstance(brush, Color):
        return {"Solid": brush.to_payload()}
    if isinstance(brush, Gradient):
        return {"Gradient": brush.to_payload()}
    if isinstance(brush, ImageBrush):
        if isinstance(brush.image, bool) or not isinstance(brush.image, int):
            raise TypeError(
                f"Image brushes must reference an archive image id, got {brush.image!r}"
            )
        return {"Image": {"image": brush.image, "sampler": brush.sampler.to_payload()}}
    raise TypeError(f"Unsupported brush type {type(brush)!r}")


def brush_from_payload(payload: object) -> Brush:
    tag, value = _single_variant(payload, what="brush")
    if tag == "Solid":
        return Color.from_payload(value)
    if tag == "Gradient":
        return Gradient.from_payload(value)
    if tag == "Image":
        mapping = _require_mapping(value, what="image brush")
        return ImageBrush(
            image=_coerce_index(
                _require_key(mapping, "image", what="image brush"), field_name="image"
            ),
            sampler=ImageSampler.from_payload(mapping.get("sampler", {})),
        )
    raise ValueError(f"Unknown brush variant {tag!r}")


def _path_from_payload(payload: object) -> BezPath:
    return BezPath.from_svg(payload)  # type: ignore[arg-type]


def _glyph_from_payload(payload: object) -> Glyph:
    mapping = _require_mapping(payload, what="glyph")
    return Glyph(
        id=_coerce_index(_require_key(mapping, "id", what="glyph"), field_name="glyph id"),
        x=_coerce_float(_require_key(mapping, "x", what="glyph"), field_name="glyph x"),
        y=_coerce_float(_require_key(mapping, "y", what="glyph"), field_name="glyph y"),
    )


def command_to_payload(command: RenderCommand) -> Any:
    if isinstance(command, PopLayer):
        return "PopLayer"
    if isinstance(command, PushLayer):
        return {
            "PushLayer": {
                "blend": command.blend.to_payload(),
                "alpha": command.alpha,
                "transform": command.transform.to_payload(),
                "clip": command.clip.to_svg(),
            }
        }
    if isinstance(command, PushClipLayer):
        return {
            "PushClipLayer": {
                "transform": command.transform.to_payload(),
                "clip": command.clip.to_svg(),
            }
        }
    if isinstance(command, StrokeCommand):
        return {
            "Stroke": {
                "style": command.style.to_payload(),
                "transform": command.transform.to_payload(),
                "brush": brush_to_payload(command.brush),
                "brush_transform": optional_affine_payload(command.brush_transform),
                "shape": command.shape.to_svg(),
            }
        }
    if isinstance(command, FillCommand):
        return {
            "Fill": {
                "fill": command.fill.value,
                "transform": command.transform.to_payload(),
                "brush": brush_to_payload(command.brush),
                "brush_transform": optional_affine_payload(command.brush_transform),
                "shape": command.shape.to_svg(),
            }
        }
    if isinstance(command, GlyphRunCommand):
        if not isinstance(command.font_data, FontResourceRef):
            raise TypeError(
                "Glyph runs must reference an archived font, got "
                f"{type(command.font_data)!r}"
            )
        return {
            "GlyphRun": {
                "font_data": command.font_data.to_payload(),
                "font_size": command.font_size,
                "hint": command.hint,
                "normalized_coords": list(command.normalized_coords),
                "style": style_to_payload(command.style),
                "brush": brush_to_payload(command.brush),
                "brush_alpha": command.brush_alpha,
                "transform": command.transform.to_payload(),
                "glyph_transform": optional_affine_payload(command.glyph_transform),
                "glyphs": [
                    {"id": glyph.id, "x": glyph.x, "y": glyph.y}
                    for glyph in command.glyphs
                ],
            }
        }
    if isinstance(command, BoxShadowCommand):
        return {
            "BoxShadow": {
                "transform": command.transform.to_payload(),
                "rect": command.rect.to_payload(),
                "brush": command.brush.to_payload(),
                "radius": command.radius,
                "std_dev": command.std_dev,
            }
        }
    raise TypeError(f"Unsupported command type {type(command)!r}")


def _push_layer(fields: dict[str, Any]) -> PushLayer:
    return PushLayer(
        blend=BlendMode.from_payload(_require_key(fields, "blend", what="PushLayer")),
        alpha=_coerce_float(_require_key(fields, "alpha", what="PushLayer"), field_name="alpha"),
        transform=Affine.from_payload(_require_key(fields, "transform", what="PushLayer")),
        clip=_path_from_payload(_require_key(fields, "clip", what="PushLayer")),
    )


def _push_clip_layer(fields: dict[str, Any]) -> PushClipLayer:
    return PushClipLayer(
        transform=Affine.from_payload(
            _require_key(fields, "transform", what="PushClipLayer")
        ),
        clip=_path_from_payload(_require_key(fields, "clip", what="PushClipLayer")),
    )


def _stroke(fields: dict[str, Any]) -> StrokeCommand:
    return StrokeCommand(
        style=StrokeStyle.from_payload(_require_key(fields, "style", what="Stroke")),
        transform=Affine.from_payload(_require_key(fields, "transform", what="Stroke")),
        brush=brush_from_payload(_require_key(fields, "brush", what="Stroke")),
        brush_transform=optional_affine_from_payload(fields.get("brush_transform")),
        shape=_path_from_payload(_require_key(fields, "shape", what="Stroke")),
    )


def _fill(fields: dict[str, Any]) -> FillCommand:
    return FillCommand(
        fill=_enum_from_payload(
            FillRule, _require_key(fields, "fill", what="Fill"), field_name="fill rule"
        ),
        transform=Affine.from_payload(_require_key(fields, "transform", what="Fill")),
        brush=brush_from_payload(_require_key(fields, "brush", what="Fill")),
        brush_transform=optional_affine_from_payload(fields.get("brush_transform")),
        shape=_path_from_payload(_require_key(fields, "shape", what="Fill")),
    )


def _glyph_run(fields: dict[str, Any]) -> GlyphRunCommand:
    coords = fields.get("normalized_coords", [])
    glyphs = _require_key(fields, "glyphs", what="GlyphRun")
    if not isinstance(coords, list) or not isinstance(glyphs, list):
        raise ValueError("Invalid GlyphRun payload: expected arrays")
    for coord in coords:
        if isinstance(coord, bool) or not isinstance(coord, int):
            raise ValueError(f"normalized coordinates must be integers, got {coord!r}")
    hint = fields.get("hint", False)
    if not isinstance(hint, bool):
        raise ValueError(f"hint must be a boolean, got {hint!r}")

    return GlyphRunCommand(
        font_data=FontResourceRef.from_payload(
            _require_key(fields, "font_data", what="GlyphRun")
        ),
        font_size=_coerce_float(
            _require_key(fields, "font_size", what="GlyphRun"), field_name="font_size"
        ),
        hint=hint,
        normalized_coords=tuple(coords),
        style=style_from_payload(_require_key(fields, "style", what="GlyphRun")),
        brush=brush_from_payload(_require_key(fields, "brush", what="GlyphRun")),
        brush_alpha=_coerce_float(fields.get("brush_alpha", 1.0), field_name="brush_alpha"),
        transform=Affine.from_payload(_require_key(fields, "transform", what="GlyphRun")),
        glyph_transform=optional_affine_from_payload(fields.get("glyph_transform")),
        glyphs=tuple(_glyph_from_payload(glyph) for glyph in glyphs),
    )


def _box_shadow(fields: dict[str, Any]) -> BoxShadowCommand:
    return BoxShadowCommand(
        transform=Affine.from_payload(_require_key(fields, "transform", what="BoxShadow")),
        rect=Rect.from_payload(_require_key(fields, "rect", what="BoxShadow")),
        brush=Color.from_payload(_require_key(fields, "brush", what="BoxShadow")),
        radius=_coerce_float(_require_key(fields, "radius", what="BoxShadow"), field_name="radius"),
        std_dev=_coerce_float(
            _require_key(fields, "std_dev", what="BoxShadow"), field_name="std_dev"
        ),
    )


_COMMAND_PARSERS: dict[str, Callable[[dict[str, Any]], RenderCommand]] = {
    "PushLayer": _push_layer,
    "PushClipLayer": _push_clip_layer,
    "Stroke": _stroke,
    "Fill": _fill,
    "GlyphRun": _glyph_run,
    "BoxShadow": _box_shadow,
}


def command_from_payload(payload: object) -> RenderCommand:
    if payload == "PopLayer":
        return PopLayer()
    tag, value = _single_variant(payload, what="command")
    parser = _COMMAND_PARSERS.get(tag)
    if parser is None:
        raise ValueError(f"Unknown command variant {tag!r}")
    return parser(_require_mapping(value, what=tag))


def commands_to_payload(commands: Iterable[RenderCommand]) -> list[Any]:
    return [command_to_payload(command) for command in commands]


def commands_from_payload(payload: object) -> list[RenderCommand]:
    """Parse a serialized command stream.

    Raises:
        ValueError: If the payload does not describe a valid command list.
    """

    if not isinstance(payload, list):
        raise ValueError("Invalid command stream: expected an array")
    return [command_from_payload(item) for item in payload]


__all__ = [
    "FontResourceRef",
    "brush_from_payload",
    "brush_to_payload",
    "command_from_payload",
    "command_to_payload",
    "commands_from_payload",
    "commands_to_payload",
]
