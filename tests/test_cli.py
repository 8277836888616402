"""Smoke tests for the command-line interface."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from conftest import make_image
from scenearchive import (
    Affine,
    Color,
    FillRule,
    FontData,
    Glyph,
    ImageBrush,
    RecordingRenderContext,
    Scene,
    SceneArchive,
)
from scenearchive.cli import main


@pytest.fixture()
def archive_path(tmp_path: Path, font: FontData) -> Path:
    ctx = RecordingRenderContext()
    scene = Scene()
    scene.draw_image(ImageBrush(ctx.register_image(make_image(bytes([1, 2, 3, 4]), 1, 1))))
    scene.draw_glyphs(
        font, 14.0, False, [], FillRule.NON_ZERO, Color.BLACK, 1.0,  # type: ignore[attr-defined]
        Affine.identity(), None, [Glyph(43, 0, 0), Glyph(44, 9, 0)],
    )
    return SceneArchive.from_scene(ctx, scene).write(tmp_path / "scene.zip")


def test_inspect_prints_manifest(archive_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["inspect", str(archive_path)]) == 0

    output = capsys.readouterr().out
    assert "version: 1" in output
    assert "commands: 2" in output
    assert "images: 1" in output
    assert "1x1 Rgba8 Alpha" in output
    assert "fonts: 1" in output
    assert ".ttf" in output


def test_verify_reports_success(archive_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["verify", str(archive_path)]) == 0

    assert capsys.readouterr().out.startswith("OK: ")


def test_verify_reports_corruption(
    tmp_path: Path, archive_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    corrupted = tmp_path / "corrupted.zip"
    with zipfile.ZipFile(archive_path) as source, zipfile.ZipFile(corrupted, "w") as target:
        for name in source.namelist():
            data = source.read(name)
            if name.startswith("fonts/"):
                data = data[:-1] + bytes([data[-1] ^ 0xFF])
            target.writestr(name, data)

    assert main(["verify", str(corrupted)]) == 1

    assert capsys.readouterr().err.startswith("error: Hash mismatch for fonts/")


def test_repack_applies_font_options(
    tmp_path: Path, archive_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output = tmp_path / "repacked.zip"

    assert main(["repack", str(archive_path), str(output), "--subset-fonts", "--woff2-fonts"]) == 0

    repacked = SceneArchive.read(output)
    original = SceneArchive.read(archive_path)
    assert repacked.manifest.fonts[0].path.endswith(".woff2")
    assert len(repacked.fonts[0]) < len(original.fonts[0])
    assert len(repacked.commands) == len(original.commands)
    assert "subset_fonts=True" in capsys.readouterr().out


def test_missing_archive_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["inspect", str(tmp_path / "nope.zip")]) == 1

    assert capsys.readouterr().err.startswith("error: Failed to read archive")


def test_invalid_environment_flag_is_reported(
    archive_path: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("SCENEARCHIVE_WOFF2_FONTS", "maybe")

    assert main(["repack", str(archive_path), str(tmp_path / "out.zip")]) == 1

    assert "SCENEARCHIVE_WOFF2_FONTS" in capsys.readouterr().err


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        main([])
