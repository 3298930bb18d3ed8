"""Command line interface for chapter-split."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .chapterer import parse_chapter_file
from .errors import ChapterSplitError
from .handler import process_batch
from .models import ChapterFile, SplitConfig
from .timestamps import format_timestamp


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chapter-split",
        description="Parse hand-written chapter timestamp files and split videos by chapter.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print warnings and errors")
    parser.add_argument("--version", action="version", version=f"chapter-split {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser("parse", help="Parse a chapter file and print its volumes")
    parse_parser.add_argument("chapter_file", type=Path, help="Chapter timestamp text file")
    parse_parser.add_argument(
        "--single",
        action="store_true",
        help="Treat the whole file as one volume (ignore volume headers)",
    )

    split_parser = subparsers.add_parser("split", help="Split every video in one or more course folders")
    split_parser.add_argument("folders", nargs="+", type=Path, help="Course folders (videos + one .txt file)")
    split_parser.add_argument("-o", "--output", type=Path, required=True, help="Export directory")
    split_parser.add_argument("--single", action="store_true", help="Ignore volume headers")
    split_parser.add_argument("--dry-run", action="store_true", help="Parse and match only, write nothing")
    split_parser.add_argument("--reencode", action="store_true", help="Re-encode for exact cut points")
    split_parser.add_argument("--no-manifest", action="store_true", help="Do not write manifest.json")
    return parser


def configure_logging(verbose: bool, quiet: bool) -> None:
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def format_chapter_file(parsed: ChapterFile) -> str:
    lines: list[str] = []
    for volume in parsed.volumes:
        lines.append(volume.name or "(unnamed volume)")
        for chapter in volume.chapters:
            lines.append(f"  {format_timestamp(chapter.start_seconds):>8}  {chapter.title}")
    for issue in parsed.issues:
        lines.append(f"! {issue.message}: {issue.text!r}")
    return "\n".join(lines)


def _run_parse(args: argparse.Namespace) -> int:
    parsed = parse_chapter_file(args.chapter_file, single_volume=args.single)
    if parsed.is_empty:
        logging.error("No chapters found in %s", args.chapter_file)
        return 1
    print(format_chapter_file(parsed))
    return 0


def _run_split(args: argparse.Namespace) -> int:
    config = SplitConfig(
        export_dir=args.output,
        reencode=args.reencode,
        dry_run=args.dry_run,
        write_manifest=not args.no_manifest,
    )
    summary = process_batch(args.folders, config, single_volume=args.single)
    for result in summary.failed:
        logging.error("%s: %s", result.folder, result.error)
    return 1 if summary.failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        if args.command == "parse":
            return _run_parse(args)
        return _run_split(args)
    except (ChapterSplitError, RuntimeError) as exc:
        logging.error("%s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
