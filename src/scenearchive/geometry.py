"""Geometry primitives used by recorded scenes: transforms, rectangles and paths."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

# Magic constant for approximating a quarter circle with a cubic Bézier.
_ARC_KAPPA = 0.5522847498307936

_SVG_TOKEN = re.compile(r"[MLQCZmlqcz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _coerce_float(value: object, *, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    return float(value)


def _format_number(value: float) -> str:
    value = float(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Point:
    """A point in 2D space."""

    x: float
    y: float

    def to_payload(self) -> list[float]:
        return [self.x, self.y]

    @classmethod
    def from_payload(cls, payload: object) -> "Point":
        if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
            raise ValueError("Invalid point payload: expected a two-element array")
        if len(payload) != 2:
            raise ValueError("Invalid point payload: expected a two-element array")
        return cls(
            _coerce_float(payload[0], field_name="point.x"),
            _coerce_float(payload[1], field_name="point.y"),
        )


@dataclass(frozen=True)
class Affine:
    """A 2D affine transform stored as the coefficients ``[a, b, c, d, e, f]``.

    The coefficients describe the matrix::

        | a c e |
        | b d f |
        | 0 0 1 |

    Multiplying two transforms with ``*`` composes them so that the right-hand
    transform is applied first, matching the usual matrix convention.
    """

    coeffs: tuple[float, float, float, float, float, float] = (
        1.0,
        0.0,
        0.0,
        1.0,
        0.0,
        0.0,
    )

    def __post_init__(self) -> None:
        if len(self.coeffs) != 6:
            raise ValueError("Affine transforms require exactly six coefficients")
        object.__setattr__(self, "coeffs", tuple(float(value) for value in self.coeffs))

    @classmethod
    def identity(cls) -> "Affine":
        return cls()

    @classmethod
    def translate(cls, x: float, y: float) -> "Affine":
        return cls((1.0, 0.0, 0.0, 1.0, x, y))

    @classmethod
    def scale(cls, sx: float, sy: float | None = None) -> "Affine":
        return cls((sx, 0.0, 0.0, sx if sy is None else sy, 0.0, 0.0))

    @classmethod
    def rotate(cls, theta: float) -> "Affine":
        cos, sin = math.cos(theta), math.sin(theta)
        return cls((cos, sin, -sin, cos, 0.0, 0.0))

    def __mul__(self, other: "Affine") -> "Affine":
        if not isinstance(other, Affine):
            return NotImplemented
        a0, b0, c0, d0, e0, f0 = self.coeffs
        a1, b1, c1, d1, e1, f1 = other.coeffs
        return Affine(
            (
                a0 * a1 + c0 * b1,
                b0 * a1 + d0 * b1,
                a0 * c1 + c0 * d1,
                b0 * c1 + d0 * d1,
                a0 * e1 + c0 * f1 + e0,
                b0 * e1 + d0 * f1 + f0,
            )
        )

    def apply(self, point: Point) -> Point:
        a, b, c, d, e, f = self.coeffs
        return Point(a * point.x + c * point.y + e, b * point.x + d * point.y + f)

    def to_payload(self) -> list[float]:
        return list(self.coeffs)

    @classmethod
    def from_payload(cls, payload: object) -> "Affine":
        if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
            raise ValueError("Invalid transform payload: expected an array of six numbers")
        if len(payload) != 6:
            raise ValueError("Invalid transform payload: expected an array of six numbers")
        coeffs = tuple(
            _coerce_float(value, field_name="transform coefficient") for value in payload
        )
        return cls(coeffs)  # type: ignore[arg-type]


IDENTITY = Affine()


@dataclass(frozen=True)
class PathElement:
    """A single path verb together with its points."""

    verb: str
    points: tuple[Point, ...] = ()


_VERB_ARITY = {"M": 1, "L": 1, "Q": 2, "C": 3, "Z": 0}


@dataclass(frozen=True)
class BezPath:
    """A Bézier path made of move, line, quadratic, cubic and close elements."""

    elements: tuple[PathElement, ...] = ()

    def __post_init__(self) -> None:
        for element in self.elements:
            arity = _VERB_ARITY.get(element.verb)
            if arity is None:
                raise ValueError(f"Unknown path verb {element.verb!r}")
            if len(element.points) != arity:
                raise ValueError(
                    f"Path verb {element.verb!r} expects {arity} point(s), "
                    f"got {len(element.points)}"
                )

    def __len__(self) -> int:
        return len(self.elements)

    def to_path(self, tolerance: float = 0.1) -> "BezPath":
        del tolerance
        return self

    def to_svg(self) -> str:
        parts: list[str] = []
        for element in self.elements:
            coords = " ".join(
                f"{_format_number(point.x)} {_format_number(point.y)}"
                for point in element.points
            )
            parts.append(f"{element.verb}{coords}")
        return "".join(parts)

    @classmethod
    def from_svg(cls, text: str) -> "BezPath":
        """Parse the absolute SVG path subset produced by :meth:`to_svg`."""

        if not isinstance(text, str):
            raise ValueError(f"Path data must be a string, got {type(text)!r}")

        tokens = _SVG_TOKEN.findall(text)
        if "".join(tokens) != re.sub(r"[\s,]+", "", text):
            raise ValueError(f"Invalid SVG path data: {text!r}")

        builder = PathBuilder()
        index = 0
        while index < len(tokens):
            verb = tokens[index]
            if verb.upper() != verb:
                raise ValueError(f"Relative SVG path commands are not supported: {verb!r}")
            arity = _VERB_ARITY.get(verb)
            if arity is None:
                raise ValueError(f"Expected a path command, got {verb!r}")
            numbers = tokens[index + 1 : index + 1 + arity * 2]
            if len(numbers) != arity * 2 or any(n in _VERB_ARITY for n in numbers):
                raise ValueError(f"Path command {verb!r} is missing coordinates")
            values = [float(number) for number in numbers]
            points = tuple(
                Point(values[offset], values[offset + 1])
                for offset in range(0, len(values), 2)
            )
            builder.elements.append(PathElement(verb, points))
            index += 1 + arity * 2
        return builder.build()


class PathBuilder:
    """Incrementally assemble a :class:`BezPath`."""

    def __init__(self) -> None:
        self.elements: list[PathElement] = []

    def move_to(self, x: float, y: float) -> "PathBuilder":
        self.elements.append(PathElement("M", (Point(x, y),)))
        return self

    def line_to(self, x: float, y: float) -> "PathBuilder":
        self.elements.append(PathElement("L", (Point(x, y),)))
        return self

    def quad_to(self, x1: float, y1: float, x: float, y: float) -> "PathBuilder":
        self.elements.append(PathElement("Q", (Point(x1, y1), Point(x, y))))
        return self

    def curve_to(
        self, x1: float, y1: float, x2: float, y2: float, x: float, y: float
    ) -> "PathBuilder":
        self.elements.append(
            PathElement("C", (Point(x1, y1), Point(x2, y2), Point(x, y)))
        )
        return self

    def close(self) -> "PathBuilder":
        self.elements.append(PathElement("Z"))
        return self

    def build(self) -> BezPath:
        return BezPath(tuple(self.elements))


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by two corners."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    def to_path(self, tolerance: float = 0.1) -> BezPath:
        del tolerance
        return (
            PathBuilder()
            .move_to(self.x0, self.y0)
            .line_to(self.x1, self.y0)
            .line_to(self.x1, self.y1)
            .line_to(self.x0, self.y1)
            .close()
            .build()
        )

    def to_payload(self) -> dict[str, float]:
        return {"x0": self.x0, "y0": self.y0, "x1": self.x1, "y1": self.y1}

    @classmethod
    def from_payload(cls, payload: object) -> "Rect":
        if not isinstance(payload, dict):
            raise ValueError("Invalid rect payload: expected an object")
        try:
            return cls(
                *(
                    _coerce_float(payload[key], field_name=f"rect.{key}")
                    for key in ("x0", "y0", "x1", "y1")
                )
            )
        except KeyError as exc:
            raise ValueError(f"Invalid rect payload: missing {exc.args[0]!r}") from exc


@dataclass(frozen=True)
class RoundedRect:
    """A rectangle with uniformly rounded corners."""

    rect: Rect
    radius: float

    def to_path(self, tolerance: float = 0.1) -> BezPath:
        del tolerance
        x0, y0, x1, y1 = self.rect.x0, self.rect.y0, self.rect.x1, self.rect.y1
        r = max(0.0, min(self.radius, abs(x1 - x0) / 2, abs(y1 - y0) / 2))
        k = r * _ARC_KAPPA
        return (
            PathBuilder()
            .move_to(x0 + r, y0)
            .line_to(x1 - r, y0)
            .curve_to(x1 - r + k, y0, x1, y0 + r - k, x1, y0 + r)
            .line_to(x1, y1 - r)
            .curve_to(x1, y1 - r + k, x1 - r + k, y1, x1 - r, y1)
            .line_to(x0 + r, y1)
            .curve_to(x0 + r - k, y1, x0, y1 - r + k, x0, y1 - r)
            .line_to(x0, y0 + r)
            .curve_to(x0, y0 + r - k, x0 + r - k, y0, x0 + r, y0)
            .close()
            .build()
        )


@dataclass(frozen=True)
class Circle:
    """A circle given by its center and radius."""

    center: Point
    radius: float

    def to_path(self, tolerance: float = 0.1) -> BezPath:
        del tolerance
        cx, cy, r = self.center.x, self.center.y, self.radius
        k = r * _ARC_KAPPA
        return (
            PathBuilder()
            .move_to(cx + r, cy)
            .curve_to(cx + r, cy + k, cx + k, cy + r, cx, cy + r)
            .curve_to(cx - k, cy + r, cx - r, cy + k, cx - r, cy)
            .curve_to(cx - r, cy - k, cx - k, cy - r, cx, cy - r)
            .curve_to(cx + k, cy - r, cx + r, cy - k, cx + r, cy)
            .close()
            .build()
        )


def optional_affine_payload(transform: Affine | None) -> list[float] | None:
    return None if transform is None else transform.to_payload()


def optional_affine_from_payload(payload: object) -> Affine | None:
    return None if payload is None else Affine.from_payload(payload)


def number_list(values: Iterable[object], *, field_name: str) -> list[float]:
    return [_coerce_float(value, field_name=field_name) for value in values]


__all__ = [
    "IDENTITY",
    "Affine",
    "BezPath",
    "Circle",
    "PathBuilder",
    "PathElement",
    "Point",
    "Rect",
    "RoundedRect",
    "number_list",
    "optional_affine_from_payload",
    "optional_affine_payload",
]
