"""Command-line argument definitions."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

_VERSION = "0.1.0"


def _count(text: str) -> int:
    """Parse a non-negative integer argument."""
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid non-negative value: {text!r}")
    return value


def _global_options(*, with_output: bool = True) -> argparse.ArgumentParser:
    """Options accepted after any subcommand; they never override earlier values."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
        help="Enable verbose logging",
    )
    if with_output:
        parent.add_argument(
            "-o", "--output", type=Path, default=argparse.SUPPRESS,
            help="Output directory (default: current directory)",
        )
    return parent


def _add_format_and_quality(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f", "--format", default="mp3",
        help="Output format (mp3, mp4, flac, aac, ogg, webm)",
    )
    parser.add_argument(
        "-q", "--quality", default="256",
        help="Quality (audio: 128, 192, 256, 320; video: 720p, 1080p, 1440p, 4k)",
    )


def _add_convert(subparsers, parents) -> None:
    parser = subparsers.add_parser("convert", parents=parents, help="Convert a single video")
    parser.add_argument("url", help="YouTube video URL")
    _add_format_and_quality(parser)
    parser.add_argument("-n", "--name", help="Output filename (without extension)")
    parser.add_argument(
        "--preserve", action="store_true",
        help="Preserve original quality (no re-encoding when possible)",
    )
    parser.add_argument("--hardware", action="store_true", help="Use hardware acceleration")
    parser.add_argument("-t", "--threads", type=_count, help="Number of threads for conversion")


def _add_playlist(subparsers, parents) -> None:
    parser = subparsers.add_parser("playlist", parents=parents, help="Convert a playlist")
    parser.add_argument("url", help="YouTube playlist URL")
    _add_format_and_quality(parser)
    parser.add_argument("-l", "--limit", type=_count, help="Download only first N videos")
    parser.add_argument("--start", type=_count, default=1, help="Start from video number N")
    parser.add_argument("-p", "--parallel", type=_count, default=3, help="Parallel downloads")


def _add_batch(subparsers, parents) -> None:
    parser = subparsers.add_parser(
        "batch", parents=parents, help="Batch convert with multiple formats"
    )
    parser.add_argument("url", help="YouTube playlist URL")
    parser.add_argument(
        "-f", "--formats", default="mp3",
        help="Output formats (comma-separated: mp3,mp4,flac)",
    )
    parser.add_argument(
        "-q", "--qualities",
        help="Quality for each format, e.g. mp3:320,mp4:1080p,flac:best",
    )
    parser.add_argument(
        "-j", "--jobs", type=_count, default=3, help="Maximum concurrent downloads"
    )
    parser.add_argument("--skip-existing", action="store_true", help="Skip existing files")
    parser.add_argument(
        "--create-subdirs", action="store_true", default=True,
        help="Create subdirectories for each format",
    )
    parser.add_argument(
        "--add-index", action="store_true", default=True,
        help="Add index prefix to filenames (001-filename.ext)",
    )
    parser.add_argument("-l", "--limit", type=_count, help="Download only first N videos")
    parser.add_argument("--start", type=_count, default=1, help="Start from video number N")
    parser.add_argument("--thumbnails", action="store_true", help="Download thumbnails")
    parser.add_argument(
        "--auto-download", action="store_true", help="Auto-download after conversion"
    )


def _add_download(subparsers, parents) -> None:
    parser = subparsers.add_parser(
        "download", parents=parents, help="Download manager for converted files"
    )
    actions = parser.add_subparsers(dest="action", metavar="ACTION")
    actions.required = True
    verbose_only = [_global_options(with_output=False)]

    actions.add_parser("list", parents=parents, help="List all completed conversions")

    get = actions.add_parser("get", parents=verbose_only, help="Download specific files by ID")
    get.add_argument("ids", nargs="*", help="Job/Task IDs to download")
    get.add_argument("-o", "--output", dest="download_dir", type=Path, help="Download directory")

    batch = actions.add_parser(
        "batch", parents=verbose_only, help="Download all files from a batch job"
    )
    batch.add_argument("job_id", help="Batch job ID")
    batch.add_argument(
        "-o", "--output", dest="download_dir", type=Path, help="Download directory"
    )

    clean = actions.add_parser("clean", parents=parents, help="Clean up old conversion files")
    clean.add_argument(
        "--days", type=_count, default=7, help="Delete files older than N days"
    )


def _add_info(subparsers, parents) -> None:
    parser = subparsers.add_parser("info", parents=parents, help="Get video information")
    parser.add_argument("url", help="YouTube video URL")
    parser.add_argument("--format", default="table", help="Output format (json, yaml, table)")


def _add_quality(subparsers, parents) -> None:
    parser = subparsers.add_parser("quality", parents=parents, help="List available qualities")
    parser.add_argument("url", help="YouTube video URL")
    parser.add_argument("--audio-only", action="store_true", help="Show only audio qualities")
    parser.add_argument("--video-only", action="store_true", help="Show only video qualities")


def _add_config(subparsers, parents) -> None:
    parser = subparsers.add_parser("config", parents=parents, help="Download configuration")
    actions = parser.add_subparsers(dest="action", metavar="ACTION")
    actions.required = True
    actions.add_parser("show", parents=parents, help="Show current configuration")
    set_parser = actions.add_parser("set", parents=parents, help="Set configuration value")
    set_parser.add_argument("key", help="Configuration key")
    set_parser.add_argument("value", help="Configuration value")
    actions.add_parser("reset", parents=parents, help="Reset configuration to defaults")


def build_parser() -> argparse.ArgumentParser:
    """Return the parser for the ``ezp3`` command."""
    parser = argparse.ArgumentParser(
        prog="ezp3", description="Ultra-fast YouTube video converter"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output directory (default: current directory)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True
    parents = [_global_options()]
    for add in (
        _add_convert, _add_playlist, _add_batch, _add_download,
        _add_info, _add_quality, _add_config,
    ):
        add(subparsers, parents)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments; exits with usage on invalid input."""
    return build_parser().parse_args(argv)