from __future__ import annotations

from scenearchive.identity import ResourceIdAssigner


def test_ids_are_dense_and_follow_first_registration() -> None:
    assigner: ResourceIdAssigner[str, str] = ResourceIdAssigner()

    assert assigner.register("b", "second-letter") == 0
    assert assigner.register("a", "first-letter") == 1
    assert assigner.register("b", "ignored") == 0

    assert len(assigner) == 2
    assert assigner.resources == ["second-letter", "first-letter"]
    assert assigner.resource(1) == "first-letter"
    assert list(assigner) == ["second-letter", "first-letter"]


def test_get_reports_unknown_keys() -> None:
    assigner: ResourceIdAssigner[tuple[int, int], object] = ResourceIdAssigner()
    assigner.register((1, 0), object())

    assert assigner.get((1, 0)) == 0
    assert assigner.get((1, 1)) is None
