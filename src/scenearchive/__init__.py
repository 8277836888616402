"""Content-addressed archives for recorded 2D scenes."""

from .archive import SceneArchive
from .config import SerializeConfig
from .errors import (
    ArchiveError,
    ArchiveFormatError,
    ArchiveIOError,
    FontProcessingError,
    HashMismatchError,
    InvalidFormatError,
    ResourceNotFoundError,
    UnsupportedVersionError,
)
from .geometry import (
    IDENTITY,
    Affine,
    BezPath,
    Circle,
    PathBuilder,
    Point,
    Rect,
    RoundedRect,
)
from .manifest import FontMetadata, ImageMetadata, ResourceKind, ResourceManifest
from .paint import (
    BlendMode,
    Blob,
    Cap,
    Color,
    ColorSpaceTag,
    ColorStop,
    Compose,
    CustomPaint,
    Extend,
    FillRule,
    FontData,
    Gradient,
    HueDirection,
    ImageAlphaType,
    ImageBrush,
    ImageData,
    ImageFormat,
    ImageQuality,
    ImageResource,
    ImageSampler,
    Join,
    LinearGradient,
    Mix,
    RadialGradient,
    StrokeStyle,
    SweepGradient,
)
from .scene import (
    BoxShadowCommand,
    FillCommand,
    Glyph,
    GlyphRunCommand,
    PopLayer,
    PushClipLayer,
    PushLayer,
    RecordingRenderContext,
    Scene,
    StrokeCommand,
)
from .stream import FontResourceRef

__all__ = [
    "SceneArchive",
    "SerializeConfig",
    "ResourceManifest",
    "ImageMetadata",
    "FontMetadata",
    "ResourceKind",
    "FontResourceRef",
    "ArchiveError",
    "ArchiveFormatError",
    "ArchiveIOError",
    "FontProcessingError",
    "HashMismatchError",
    "InvalidFormatError",
    "ResourceNotFoundError",
    "UnsupportedVersionError",
    "Scene",
    "RecordingRenderContext",
    "PushLayer",
    "PushClipLayer",
    "PopLayer",
    "StrokeCommand",
    "FillCommand",
    "GlyphRunCommand",
    "BoxShadowCommand",
    "Glyph",
    "IDENTITY",
    "Affine",
    "BezPath",
    "Circle",
    "PathBuilder",
    "Point",
    "Rect",
    "RoundedRect",
    "BlendMode",
    "Blob",
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
    "RadialGradient",
    "StrokeStyle",
    "SweepGradient",
]
