from __future__ import annotations

import json

import pytest

from scenearchive.json_format import dumps_depth_limited


def test_nesting_beyond_the_limit_is_written_inline() -> None:
    value = [{"Fill": {"transform": [1, 0, 0, 1, 0, 0], "brush": {"Solid": [1, 0, 0, 1]}}}]

    text = dumps_depth_limited(value, 3)

    assert json.loads(text) == value
    assert '"transform": [1,0,0,1,0,0]' in text
    assert '"brush": {"Solid":[1,0,0,1]}' in text
    assert text.splitlines()[0] == "["
    assert text.splitlines()[1] == "  {"
    assert text.splitlines()[2] == '    "Fill": {'


def test_depth_zero_is_fully_compact() -> None:
    assert dumps_depth_limited({"a": [1, 2]}, 0) == '{"a":[1,2]}'


def test_empty_containers_and_scalars() -> None:
    assert dumps_depth_limited([], 3) == "[]"
    assert dumps_depth_limited({"a": {}}, 3) == '{\n  "a": {}\n}'
    assert dumps_depth_limited("PopLayer", 3) == '"PopLayer"'


def test_negative_depth_is_rejected() -> None:
    with pytest.raises(ValueError):
        dumps_depth_limited([], -1)
