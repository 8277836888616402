"""Options controlling how resources are encoded into a scene archive."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _parse_flag(value: str | None, *, name: str, default: bool) -> bool:
    if value is None:
        return default

    trimmed = value.strip().lower()
    if not trimmed:
        return default
    if trimmed in _TRUE_VALUES:
        return True
    if trimmed in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean value (true/false), got {value!r}.")


@dataclass(frozen=True)
class SerializeConfig:
    """Font encoding options used when building an archive.

    ``subset_fonts`` reduces every font to the glyphs drawn by the scene while
    keeping the original glyph ids, extracting collection faces into standalone
    fonts. ``woff2_fonts`` stores fonts WOFF2-compressed.
    """

    subset_fonts: bool = False
    woff2_fonts: bool = False

    def with_subset_fonts(self, subset_fonts: bool) -> "SerializeConfig":
        return replace(self, subset_fonts=subset_fonts)

    def with_woff2_fonts(self, woff2_fonts: bool) -> "SerializeConfig":
        return replace(self, woff2_fonts=woff2_fonts)

    @property
    def font_extension(self) -> str:
        return "woff2" if self.woff2_fonts else "ttf"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SerializeConfig":
        """Return a configuration populated from ``environ``.

        Args:
            environ: Optional mapping of environment variables. When omitted,
                :data:`os.environ` is used.

        Raises:
            ValueError: If a variable is set to something other than a boolean.
        """

        source = environ if environ is not None else os.environ

        return cls(
            subset_fonts=_parse_flag(
                source.get("SCENEARCHIVE_SUBSET_FONTS"),
                name="SCENEARCHIVE_SUBSET_FONTS",
                default=False,
            ),
            woff2_fonts=_parse_flag(
                source.get("SCENEARCHIVE_WOFF2_FONTS"),
                name="SCENEARCHIVE_WOFF2_FONTS",
                default=False,
            ),
        )


__all__ = ["SerializeConfig"]
