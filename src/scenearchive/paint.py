"""Paint, style and resource types referenced by recorded drawing commands."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence, Union

from .geometry import Point, _coerce_float, number_list

LOGGER = logging.getLogger(__name__)

_BLOB_IDS = itertools.count()


def _enum_from_payload(enum_type: type[Enum], value: object, *, field_name: str) -> Any:
    try:
        return enum_type(value)
    except ValueError as exc:
        raise ValueError(f"Invalid {field_name}: {value!r}") from exc


def _require_mapping(payload: object, *, what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"Invalid {what} payload: expected an object")
    return payload


def _require_key(payload: dict[str, Any], key: str, *, what: str) -> Any:
    try:
        return payload[key]
    except KeyError as exc:
        raise ValueError(f"Invalid {what} payload: missing {key!r}") from exc


def _single_variant(payload: object, *, what: str) -> tuple[str, Any]:
    if not isinstance(payload, dict) or len(payload) != 1:
        raise ValueError(f"Invalid {what} payload: expected a single-key object")
    ((tag, value),) = payload.items()
    return tag, value


@dataclass(frozen=True)
class Color:
    """An sRGB color with straight alpha; components are floats in ``0..1``."""

    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_rgb8(cls, r: int, g: int, b: int) -> "Color":
        return cls.from_rgba8(r, g, b, 255)

    @classmethod
    def from_rgba8(cls, r: int, g: int, b: int, a: int) -> "Color":
        return cls(r / 255.0, g / 255.0, b / 255.0, a / 255.0)

    def to_payload(self) -> list[float]:
        return [self.r, self.g, self.b, self.a]

    @classmethod
    def from_payload(cls, payload: object) -> "Color":
        if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
            raise ValueError("Invalid color payload: expected four components")
        if len(payload) != 4:
            raise ValueError("Invalid color payload: expected four components")
        return cls(*number_list(payload, field_name="color component"))


Color.TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)  # type: ignore[attr-defined]
Color.BLACK = Color(0.0, 0.0, 0.0, 1.0)  # type: ignore[attr-defined]
Color.WHITE = Color(1.0, 1.0, 1.0, 1.0)  # type: ignore[attr-defined]


class Extend(str, Enum):
    """How a gradient or image is extended beyond its bounds."""

    PAD = "Pad"
    REPEAT = "Repeat"
    REFLECT = "Reflect"


class ColorSpaceTag(str, Enum):
    """Color spaces a gradient may interpolate in."""

    SRGB = "Srgb"
    LINEAR_SRGB = "LinearSrgb"
    LAB = "Lab"
    LCH = "Lch"
    HSL = "Hsl"
    HWB = "Hwb"
    OKLAB = "Oklab"
    OKLCH = "Oklch"
    DISPLAY_P3 = "DisplayP3"
    A98_RGB = "A98Rgb"
    PROPHOTO_RGB = "ProphotoRgb"
    REC2020 = "Rec2020"
    XYZ_D50 = "XyzD50"
    XYZ_D65 = "XyzD65"

    @classmethod
    def parse(cls, value: object) -> "ColorSpaceTag":
        """Return the tag for ``value``, falling back to sRGB for unknown tags."""

        try:
            return cls(value)
        except ValueError:
            LOGGER.debug("Unknown interpolation color space %r, using Srgb", value)
            return cls.SRGB


class HueDirection(str, Enum):
    SHORTER = "Shorter"
    LONGER = "Longer"
    INCREASING = "Increasing"
    DECREASING = "Decreasing"


@dataclass(frozen=True)
class ColorStop:
    offset: float
    color: Color

    def to_payload(self) -> dict[str, Any]:
        return {"offset": self.offset, "color": self.color.to_payload()}

    @classmethod
    def from_payload(cls, payload: object) -> "ColorStop":
        mapping = _require_mapping(payload, what="color stop")
        return cls(
            offset=_coerce_float(
                _require_key(mapping, "offset", what="color stop"),
                field_name="color stop offset",
            ),
            color=Color.from_payload(_require_key(mapping, "color", what="color stop")),
        )


@dataclass(frozen=True)
class LinearGradient:
    start: Point
    end: Point

    def to_payload(self) -> dict[str, Any]:
        return {"Linear": {"start": self.start.to_payload(), "end": self.end.to_payload()}}


@dataclass(frozen=True)
class RadialGradient:
    start_center: Point
    start_radius: float
    end_center: Point
    end_radius: float

    def to_payload(self) -> dict[str, Any]:
        return {
            "Radial": {
                "start_center": self.start_center.to_payload(),
                "start_radius": self.start_radius,
                "end_center": self.end_center.to_payload(),
                "end_radius": self.end_radius,
            }
        }


@dataclass(frozen=True)
class SweepGradient:
    center: Point
    start_angle: float
    end_angle: float

    def to_payload(self) -> dict[str, Any]:
        return {
            "Sweep": {
                "center": self.center.to_payload(),
                "start_angle": self.start_angle,
                "end_angle": self.end_angle,
            }
        }


GradientKind = Union[LinearGradient, RadialGradient, SweepGradient]


def _gradient_kind_from_payload(payload: object) -> GradientKind:
    tag, value = _single_variant(payload, what="gradient kind")
    mapping = _require_mapping(value, what="gradient kind")

    def point(key: str) -> Point:
        return Point.from_payload(_require_key(mapping, key, what="gradient kind"))

    def number(key: str) -> float:
        return _coerce_float(
            _require_key(mapping, key, what="gradient kind"), field_name=key
        )

    if tag == "Linear":
        return LinearGradient(start=point("start"), end=point("end"))
    if tag == "Radial":
        return RadialGradient(
            start_center=point("start_center"),
            start_radius=number("start_radius"),
            end_center=point("end_center"),
            end_radius=number("end_radius"),
        )
    if tag == "Sweep":
        return SweepGradient(
            center=point("center"),
            start_angle=number("start_angle"),
            end_angle=number("end_angle"),
        )
    raise ValueError(f"Unknown gradient kind {tag!r}")


@dataclass(frozen=True)
class Gradient:
    """A gradient brush definition."""

    kind: GradientKind
    stops: tuple[ColorStop, ...] = ()
    extend: Extend = Extend.PAD
    interpolation_cs: ColorSpaceTag = ColorSpaceTag.SRGB
    hue_direction: HueDirection = HueDirection.SHORTER

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", tuple(self.stops))

    def to_payload(self) -> dict[str, Any]:
        return {
            "kind": self.kind.to_payload(),
            "extend": self.extend.value,
            "interpolation_cs": self.interpolation_cs.value,
            "hue_direction": self.hue_direction.value,
            "stops": [stop.to_payload() for stop in self.stops],
        }

    @classmethod
    def from_payload(cls, payload: object) -> "Gradient":
        mapping = _require_mapping(payload, what="gradient")
        stops = _require_key(mapping, "stops", what="gradient")
        if not isinstance(stops, list):
            raise ValueError("Invalid gradient payload: stops must be an array")
        return cls(
            kind=_gradient_kind_from_payload(_require_key(mapping, "kind", what="gradient")),
            stops=tuple(ColorStop.from_payload(stop) for stop in stops),
            extend=_enum_from_payload(
                Extend, mapping.get("extend", Extend.PAD.value), field_name="extend"
            ),
            interpolation_cs=ColorSpaceTag.parse(
                mapping.get("interpolation_cs", ColorSpaceTag.SRGB.value)
            ),
            hue_direction=_enum_from_payload(
                HueDirection,
                mapping.get("hue_direction", HueDirection.SHORTER.value),
                field_name="hue direction",
            ),
        )


class ImageFormat(str, Enum):
    """Pixel layouts an image buffer may use."""

    RGBA8 = "Rgba8"
    BGRA8 = "Bgra8"
    RGB8 = "Rgb8"
    GRAY8 = "Gray8"


class ImageAlphaType(str, Enum):
    ALPHA = "Alpha"
    ALPHA_PREMULTIPLIED = "AlphaPremultiplied"


class ImageQuality(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True, eq=False)
class Blob:
    """Immutable bytes with a stable identity assigned at creation time.

    Two blobs compare equal when their bytes match; :attr:`id` is what resource
    deduplication keys on, so clones of the same blob share it while separately
    created blobs never do.
    """

    data: bytes
    id: int = field(default_factory=lambda: next(_BLOB_IDS))

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Blob data must be bytes, got {type(self.data)!r}")
        object.__setattr__(self, "data", bytes(self.data))

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return self.id == other.id or self.data == other.data

    def __hash__(self) -> int:
        return hash(self.data)

    def __repr__(self) -> str:
        return f"Blob(id={self.id}, len={len(self.data)})"


@dataclass(frozen=True)
class ImageData:
    """Raw pixel data together with its layout description."""

    data: Blob
    format: ImageFormat
    alpha_type: ImageAlphaType
    width: int
    height: int


@dataclass(frozen=True)
class FontData:
    """A font blob plus the index of the face within it (for collections)."""

    data: Blob
    index: int = 0


@dataclass(frozen=True)
class ImageResource:
    """Live handle to an image registered with a render context."""

    id: int
    width: int
    height: int


@dataclass(frozen=True)
class ImageSampler:
    x_extend: Extend = Extend.PAD
    y_extend: Extend = Extend.PAD
    quality: ImageQuality = ImageQuality.MEDIUM
    alpha: float = 1.0

    def to_payload(self) -> dict[str, Any]:
        return {
            "x_extend": self.x_extend.value,
            "y_extend": self.y_extend.value,
            "quality": self.quality.value,
            "alpha": self.alpha,
        }

    @classmethod
    def from_payload(cls, payload: object) -> "ImageSampler":
        mapping = _require_mapping(payload, what="image sampler")
        return cls(
            x_extend=_enum_from_payload(
                Extend, mapping.get("x_extend", "Pad"), field_name="x_extend"
            ),
            y_extend=_enum_from_payload(
                Extend, mapping.get("y_extend", "Pad"), field_name="y_extend"
            ),
            quality=_enum_from_payload(
                ImageQuality, mapping.get("quality", "Medium"), field_name="quality"
            ),
            alpha=_coerce_float(mapping.get("alpha", 1.0), field_name="alpha"),
        )


@dataclass(frozen=True)
class ImageBrush:
    """An image paint; ``image`` is a live handle or an archive image id."""

    image: Union[ImageResource, int]
    sampler: ImageSampler = field(default_factory=ImageSampler)


@dataclass(frozen=True)
class CustomPaint:
    """Backend specific paint that cannot be represented portably."""

    source_id: int
    width: int
    height: int
    scale: float = 1.0


Brush = Union[Color, Gradient, ImageBrush]
Paint = Union[Color, Gradient, ImageBrush, CustomPaint]


def paint_to_brush(paint: Paint) -> Brush:
    """Convert a paint into a recordable brush.

    Custom paints are collapsed to a fully transparent solid color since they
    have no portable representation.
    """

    if isinstance(paint, (Color, Gradient, ImageBrush)):
        return paint
    if isinstance(paint, CustomPaint):
        return Color.TRANSPARENT  # type: ignore[attr-defined]
    raise TypeError(f"Unsupported paint type {type(paint)!r}")


class Join(str, Enum):
    BEVEL = "Bevel"
    MITER = "Miter"
    ROUND = "Round"


class Cap(str, Enum):
    BUTT = "Butt"
    SQUARE = "Square"
    ROUND = "Round"


@dataclass(frozen=True)
class StrokeStyle:
    """Parameters describing how a path is stroked."""

    width: float = 1.0
    join: Join = Join.ROUND
    miter_limit: float = 4.0
    start_cap: Cap = Cap.ROUND
    end_cap: Cap = Cap.ROUND
    dash_pattern: tuple[float, ...] = ()
    dash_offset: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "dash_pattern", tuple(self.dash_pattern))

    def to_payload(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "join": self.join.value,
            "miter_limit": self.miter_limit,
            "start_cap": self.start_cap.value,
            "end_cap": self.end_cap.value,
            "dash_pattern": list(self.dash_pattern),
            "dash_offset": self.dash_offset,
        }

    @classmethod
    def from_payload(cls, payload: object) -> "StrokeStyle":
        mapping = _require_mapping(payload, what="stroke")
        dashes = mapping.get("dash_pattern", [])
        if not isinstance(dashes, list):
            raise ValueError("Invalid stroke payload: dash_pattern must be an array")
        return cls(
            width=_coerce_float(
                _require_key(mapping, "width", what="stroke"), field_name="width"
            ),
            join=_enum_from_payload(Join, mapping.get("join", "Round"), field_name="join"),
            miter_limit=_coerce_float(
                mapping.get("miter_limit", 4.0), field_name="miter_limit"
            ),
            start_cap=_enum_from_payload(
                Cap, mapping.get("start_cap", "Round"), field_name="start_cap"
            ),
            end_cap=_enum_from_payload(
                Cap, mapping.get("end_cap", "Round"), field_name="end_cap"
            ),
            dash_pattern=tuple(number_list(dashes, field_name="dash")),
            dash_offset=_coerce_float(
                mapping.get("dash_offset", 0.0), field_name="dash_offset"
            ),
        )


class FillRule(str, Enum):
    NON_ZERO = "NonZero"
    EVEN_ODD = "EvenOdd"


Style = Union[FillRule, StrokeStyle]


def style_to_payload(style: Style) -> dict[str, Any]:
    if isinstance(style, FillRule):
        return {"Fill": style.value}
    return {"Stroke": style.to_payload()}


def style_from_payload(payload: object) -> Style:
    tag, value = _single_variant(payload, what="style")
    if tag == "Fill":
        return _enum_from_payload(FillRule, value, field_name="fill rule")
    if tag == "Stroke":
        return StrokeStyle.from_payload(value)
    raise ValueError(f"Unknown style variant {tag!r}")


class Mix(str, Enum):
    NORMAL = "Normal"
    MULTIPLY = "Multiply"
    SCREEN = "Screen"
    OVERLAY = "Overlay"
    DARKEN = "Darken"
    LIGHTEN = "Lighten"
    COLOR_DODGE = "ColorDodge"
    COLOR_BURN = "ColorBurn"
    HARD_LIGHT = "HardLight"
    SOFT_LIGHT = "SoftLight"
    DIFFERENCE = "Difference"
    EXCLUSION = "Exclusion"
    HUE = "Hue"
    SATURATION = "Saturation"
    COLOR = "Color"
    LUMINOSITY = "Luminosity"
    CLIP = "Clip"


class Compose(str, Enum):
    CLEAR = "Clear"
    COPY = "Copy"
    DEST = "Dest"
    SRC_OVER = "SrcOver"
    DEST_OVER = "DestOver"
    SRC_IN = "SrcIn"
    DEST_IN = "DestIn"
    SRC_OUT = "SrcOut"
    DEST_OUT = "DestOut"
    SRC_ATOP = "SrcAtop"
    DEST_ATOP = "DestAtop"
    XOR = "Xor"
    PLUS = "Plus"
    PLUS_LIGHTER = "PlusLighter"


@dataclass(frozen=True)
class BlendMode:
    mix: Mix = Mix.NORMAL
    compose: Compose = Compose.SRC_OVER

    @classmethod
    def coerce(cls, value: "BlendMode | Mix | Compose") -> "BlendMode":
        if isinstance(value, BlendMode):
            return value
        if isinstance(value, Mix):
            return cls(mix=value)
        if isinstance(value, Compose):
            return cls(compose=value)
        raise TypeError(f"Cannot build a blend mode from {value!r}")

    def to_payload(self) -> dict[str, str]:
        return {"mix": self.mix.value, "compose": self.compose.value}

    @classmethod
    def from_payload(cls, payload: object) -> "BlendMode":
        mapping = _require_mapping(payload, what="blend mode")
        return cls(
            mix=_enum_from_payload(Mix, mapping.get("mix", "Normal"), field_name="mix"),
            compose=_enum_from_payload(
                Compose, mapping.get("compose", "SrcOver"), field_name="compose"
            ),
        )


__all__ = [
    "BlendMode",
    "Blob",
    "Brush",
    "Cap",
    "Color",
    "ColorSpaceTag",
    "ColorStop",
    "Compose",
    "CustomPaint",
    "Extend",
    "FillRule",
    "FontData",
    "Gradient",
    "HueDirection",
    "ImageAlphaType",
    "ImageBrush",
    "ImageData",
    "ImageFormat",
    "ImageQuality",
    "ImageResource",
    "ImageSampler",
    "Join",
    "LinearGradient",
    "Mix",
    "Paint",
    "RadialGradient",
    "StrokeStyle",
    "Style",
    "SweepGradient",
    "paint_to_brush",
    "style_from_payload",
    "style_to_payload",
]
