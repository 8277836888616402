"""Command-line tool for inspecting, verifying and repacking scene archives."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from .archive import SceneArchive
from .config import SerializeConfig
from .errors import ArchiveError
from .scene import RecordingRenderContext

__all__ = ["main"]


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for working with scene archives."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    try:
        return args.handler(args)
    except (ArchiveError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _inspect(args: argparse.Namespace) -> int:
    archive = SceneArchive.read(args.archive)
    manifest = archive.manifest
    print(f"version: {manifest.version}")
    print(f"tolerance: {manifest.tolerance}")
    print(f"commands: {len(archive.commands)}")
    print(f"images: {len(manifest.images)}")
    for image in manifest.images:
        print(
            f"  [{image.id}] {image.path} {image.width}x{image.height} "
            f"{image.format.value} {image.alpha_type.value} ({image.size} bytes)"
        )
    print(f"fonts: {len(manifest.fonts)}")
    for font in manifest.fonts:
        print(f"  [{font.id}] {font.path} ({font.size} bytes)")
    return 0


def _verify(args: argparse.Namespace) -> int:
    archive = SceneArchive.read(args.archive)
    archive.to_scene(RecordingRenderContext())
    print(
        f"OK: {args.archive} ({len(archive.commands)} commands, "
        f"{len(archive.manifest.images)} images, {len(archive.manifest.fonts)} fonts)"
    )
    return 0


def _repack(args: argparse.Namespace) -> int:
    config = SerializeConfig.from_env()
    if args.subset_fonts:
        config = config.with_subset_fonts(True)
    if args.woff2_fonts:
        config = config.with_woff2_fonts(True)

    source = SceneArchive.read(args.archive)
    ctx = RecordingRenderContext()
    scene = source.to_scene(ctx)
    output = SceneArchive.from_scene(ctx, scene, config).write(args.output)

    print(
        f"Wrote {len(scene.commands)} commands to {Path(output).name} "
        f"(subset_fonts={config.subset_fonts}, woff2_fonts={config.woff2_fonts})"
    )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scenearchive",
        description="Inspect, verify and repack scene archives.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser(
        "inspect", help="Print the manifest of an archive."
    )
    inspect_parser.add_argument("archive", type=Path, help="Archive to inspect.")
    inspect_parser.set_defaults(handler=_inspect)

    verify_parser = subparsers.add_parser(
        "verify",
        help="Read an archive, checking every resource hash and reference.",
    )
    verify_parser.add_argument("archive", type=Path, help="Archive to verify.")
    verify_parser.set_defaults(handler=_verify)

    repack_parser = subparsers.add_parser(
        "repack", help="Rewrite an archive with different font options."
    )
    repack_parser.add_argument("archive", type=Path, help="Archive to read.")
    repack_parser.add_argument("output", type=Path, help="Path of the new archive.")
    repack_parser.add_argument(
        "--subset-fonts",
        action="store_true",
        help="Subset fonts to the glyphs the scene draws.",
    )
    repack_parser.add_argument(
        "--woff2-fonts",
        action="store_true",
        help="Store fonts WOFF2-compressed.",
    )
    repack_parser.set_defaults(handler=_repack)
    return parser


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
