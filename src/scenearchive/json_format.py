"""JSON output whose pretty-printing stops at a fixed nesting depth."""

from __future__ import annotations

import json
from typing import Any

_COMPACT_SEPARATORS = (",", ":")


def dumps_depth_limited(value: Any, max_depth: int, *, indent: int = 2) -> str:
    """Serialise ``value`` indenting only the outermost ``max_depth`` levels.

    Containers nested deeper than ``max_depth`` are written on a single line,
    which keeps long coordinate arrays and small records from exploding into
    one line per number. The output is regular JSON and parses back to
    ``value``.
    """

    if max_depth < 0:
        raise ValueError("max_depth must be zero or greater")
    return _encode(value, 0, max_depth, indent)


def _encode(value: Any, depth: int, max_depth: int, indent: int) -> str:
    if depth >= max_depth or not isinstance(value, (dict, list)) or not value:
        return json.dumps(value, separators=_COMPACT_SEPARATORS, ensure_ascii=False)

    inner = " " * (indent * (depth + 1))
    outer = " " * (indent * depth)
    if isinstance(value, dict):
        items = [
            f"{inner}{json.dumps(str(key), ensure_ascii=False)}: "
            f"{_encode(item, depth + 1, max_depth, indent)}"
            for key, item in value.items()
        ]
        return "{\n" + ",\n".join(items) + "\n" + outer + "}"

    items = [f"{inner}{_encode(item, depth + 1, max_depth, indent)}" for item in value]
    return "[\n" + ",\n".join(items) + "\n" + outer + "]"


__all__ = ["dumps_depth_limited"]
