"""The ``ezp3`` command."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import os
import shutil
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Sequence

from .args import parse_args
from .batch import (
    BatchFormat,
    BatchOptions,
    BatchProcessor,
    BatchTaskStatus,
    TaskFormatStatus,
)
from .converter import ConversionProgress, parse_output_format
from .pipeline import EzP3
from .quality import QualityOptions, format_file_size

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = ("mp3", "mp4", "flac", "aac", "ogg", "webm")
_INVALID_FILENAME_CHARS = str.maketrans({c: "_" for c in '<>:"/\\|?*'})
_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")
_RULE = "━" * 50


class CliError(Exception):
    """A command failed; the message is shown to the user."""


def parse_quality_for_format(qualities: str, format_name: str) -> str | None:
    """Find the quality given for ``format_name`` in ``fmt:quality,...``."""
    for pair in qualities.split(","):
        fmt, sep, quality = pair.partition(":")
        if sep and fmt.strip() == format_name:
            return quality.strip()
    return None


def default_quality_for_format(format_name: str) -> str:
    """The quality used when none is given for a format."""
    if format_name in ("mp3", "aac"):
        return "256"
    if format_name in ("mp4", "webm"):
        return "1080p"
    if format_name == "flac":
        return "best"
    if format_name == "ogg":
        return "5"
    return "default"


def _is_youtube_url(url: str) -> bool:
    return "youtube.com" in url or "youtu.be" in url


def _require_youtube_url(url: str) -> None:
    if not _is_youtube_url(url):
        raise CliError(f"Invalid YouTube URL: {url}")


def _safe_filename(name: str) -> str:
    return name.translate(_INVALID_FILENAME_CHARS)


def _format_duration(seconds: int) -> str:
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02}:{secs:02}"
    return f"{minutes}:{secs:02}"


def _format_bytes(size: int) -> str:
    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(_BYTE_UNITS) - 1:
        value /= 1024.0
        unit += 1
    return f"{value:.1f} {_BYTE_UNITS[unit]}"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )


def _show_progress(progress: ConversionProgress) -> None:
    print(
        f"\r{int(progress.percentage):3d}% Speed: {progress.speed} | ETA: {progress.eta}",
        end="",
        flush=True,
    )


async def _convert_video(ezp3: EzP3, args: argparse.Namespace, output_dir: Path) -> None:
    print("🎵 Starting video conversion...")
    _require_youtube_url(args.url)

    info = await ezp3.get_video_info(args.url)
    print(f"📹 {info.title}")
    print(f"⏱️  Duration: {_format_duration(info.duration)}")
    print(f"👤 Uploader: {info.uploader}")

    filename = args.name if args.name is not None else _safe_filename(info.title)
    if args.format not in _SUPPORTED_FORMATS:
        logger.error("Unsupported format: %s", args.format)
        raise CliError(f"Unsupported format: {args.format}")
    output_path = output_dir / f"{filename}.{args.format}"
    output_format = parse_output_format(args.format, args.quality)

    print(f"🎯 Converting to: {args.format.upper()} ({args.quality})")
    print(f"📁 Output: {output_path}")

    await ezp3.convert_video(args.url, output_path, output_format, args.quality, _show_progress)
    print()
    print("✅ Conversion completed!")
    print(f"🎉 Saved to: {output_path}")


async def _convert_playlist(ezp3: EzP3, args: argparse.Namespace, output_dir: Path) -> None:
    print("🎵 Starting playlist conversion...")
    _require_youtube_url(args.url)
    output_format = parse_output_format(args.format, args.quality)
    print(f"🎯 Converting to: {args.format.upper()} ({args.quality})")

    def report(index: int, progress: ConversionProgress) -> None:
        print(f"Video {index + 1}: {int(progress.percentage)}% (Speed: {progress.speed})")

    results = await ezp3.convert_playlist(
        args.url, output_dir, output_format, args.quality, report
    )
    successful = sum(1 for result in results if result is None)
    print(f"✅ Completed: {successful} successful, {len(results) - successful} failed")


def _display_video_info(info) -> None:
    print(f"Title:       {info.title}")
    print(f"ID:          {info.id}")
    print(f"Uploader:    {info.uploader}")
    print(f"Duration:    {_format_duration(info.duration)}")
    print(f"Uploaded:    {info.upload_date}")
    if info.view_count is not None:
        print(f"Views:       {info.view_count}")
    print(f"Formats:     {len(info.formats)}")


async def _show_video_info(ezp3: EzP3, args: argparse.Namespace) -> None:
    _require_youtube_url(args.url)
    info = await ezp3.get_video_info(args.url)
    if args.format == "json":
        print(json.dumps(dataclasses.asdict(info), indent=2, ensure_ascii=False))
    else:
        _display_video_info(info)


def _display_quality_options(
    qualities: QualityOptions, audio_only: bool, video_only: bool
) -> None:
    if not video_only:
        print("Audio qualities:")
        for audio in qualities.audio_qualities:
            size = f"  {format_file_size(audio.file_size)}" if audio.file_size else ""
            print(f"  {audio.bitrate} kbps  {audio.format} ({audio.codec}){size}")
    if not audio_only:
        print("Video qualities:")
        for video in qualities.video_qualities:
            size = f"  {format_file_size(video.file_size)}" if video.file_size else ""
            print(f"  {video.resolution}  {video.width}x{video.height}  {video.codec}{size}")


async def _show_quality_options(ezp3: EzP3, args: argparse.Namespace) -> None:
    _require_youtube_url(args.url)
    qualities = await ezp3.get_available_qualities(args.url)
    _display_quality_options(qualities, args.audio_only, args.video_only)


async def _batch_convert(ezp3: EzP3, args: argparse.Namespace, output_dir: Path) -> None:
    print("🎵 Starting batch conversion...")
    _require_youtube_url(args.url)

    playlist = await ezp3.get_playlist_info(args.url)
    print(f"📋 Playlist: {playlist.title}")
    print(f"👤 Uploader: {playlist.uploader}")
    print(f"🎬 Videos: {playlist.video_count}")

    batch_formats: list[BatchFormat] = []
    for name in (part.strip() for part in args.formats.split(",")):
        quality = None
        if args.qualities is not None:
            quality = parse_quality_for_format(args.qualities, name)
        if quality is None:
            quality = default_quality_for_format(name)
        try:
            output_format = parse_output_format(name, quality)
        except ValueError:
            logger.warning("Unsupported format: %s, skipping", name)
            continue
        batch_formats.append(BatchFormat(format=output_format, quality=quality, enabled=True))

    if not batch_formats:
        raise CliError("No valid formats specified")

    BatchOptions(
        max_concurrent=args.jobs,
        skip_existing=args.skip_existing,
        create_subdirs=args.create_subdirs,
        add_index_prefix=args.add_index,
        video_limit=args.limit,
        start_index=max(args.start - 1, 0),
        download_thumbnails=args.thumbnails,
        create_playlist_file=True,
    )
    print(f"🚀 Starting batch conversion with {len(batch_formats)} formats")
    print(f"📁 Output directory: {output_dir}")

    def report(index: int, progress: ConversionProgress) -> None:
        print(f"Processing video {index + 1} - {int(progress.percentage)}%")

    first = batch_formats[0]
    results = await ezp3.convert_playlist(
        args.url, output_dir, first.format, first.quality, report
    )
    print("✅ Batch conversion completed!")

    completed = sum(1 for result in results if result is None)
    print()
    print("📊 Conversion Summary:")
    print(f"   ✅ Completed: {completed}")
    print(f"   ❌ Failed: {len(results) - completed}")
    print(f"   📁 Output: {output_dir}")
    if args.auto_download:
        print("\n💾 Auto-downloading files...")
        print(f"Files are already saved to: {output_dir}")
    else:
        print(f"\n💡 Files saved to: {output_dir}")


def _list_completed_jobs(directory: Path) -> list[Path]:
    """Print the converted files found in ``directory`` and return them."""
    print("📋 Completed Conversion Jobs")
    print(_RULE)

    found: list[Path] = []
    if directory.is_dir():
        found = sorted(
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix.lower().lstrip(".") in _SUPPORTED_FORMATS
        )
    for path in found:
        print(f"   🎵 {path.name}  ({_format_bytes(path.stat().st_size)})")
    if found:
        print(f"   {len(found)} converted files in {directory}")
    else:
        print(f"   No converted files in {directory}")

    print("💡 Use the web interface or desktop app to see detailed job history")
    print("   Web: Start with 'ezp3-web-backend' and open http://localhost:3001")
    print("   Desktop: Run the desktop application")
    return found


def _download_specific_files(ids: list[str], download_dir: Path | None) -> None:
    target = download_dir if download_dir is not None else Path.cwd() / "downloads"
    print(f"💾 Downloading files to: {target}")
    for file_id in ids:
        print(f"📥 Would download file with ID: {file_id}")


def _clean_old_files(days: int) -> None:
    print(f"🧹 Cleaning files older than {days} days...")
    _cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    cleaned_count = 0
    cleaned_size = 0
    print(f"✅ Cleaned {cleaned_count} files ({_format_bytes(cleaned_size)} freed)")


def _handle_download(args: argparse.Namespace, output_dir: Path) -> None:
    if args.action == "list":
        _list_completed_jobs(output_dir)
    elif args.action == "get":
        _download_specific_files(args.ids, args.download_dir)
    elif args.action == "batch":
        print(f"Batch download for job: {args.job_id}")
        print("This feature requires the web backend or desktop app for full functionality")
    elif args.action == "clean":
        _clean_old_files(args.days)


def download_batch_files(
    job_id: str, batch_processor: BatchProcessor, output_dir: str | Path | None = None
) -> list[Path]:
    """Copy the completed outputs of a batch job; return the copied paths."""
    download_dir = Path(output_dir) if output_dir is not None else Path.cwd() / "downloads"
    completed = [
        task for task in batch_processor.get_job_tasks(job_id)
        if task.status is BatchTaskStatus.COMPLETED
    ]
    if not completed:
        print("No completed files to download")
        return []

    download_dir.mkdir(parents=True, exist_ok=True)
    print(f"💾 Downloading {len(completed)} files to {download_dir}")

    copied: list[Path] = []
    for task in completed:
        for fmt in task.formats:
            if fmt.status is not TaskFormatStatus.COMPLETED:
                continue
            source = Path(fmt.output_path)
            name = source.name or "unknown"
            if source.exists():
                destination = download_dir / name
                shutil.copy(source, destination)
                print(f"   ✅ {name}")
                copied.append(destination)
    print("🎉 Download completed!")
    return copied


def _config_path() -> Path:
    override = os.environ.get("EZP3_CONFIG_FILE")
    if override:
        return Path(override)
    return Path.home() / ".config" / "ezp3" / "config.json"


def _load_config() -> dict[str, str]:
    path = _config_path()
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


def _handle_config(args: argparse.Namespace) -> None:
    path = _config_path()
    if args.action == "show":
        config = _load_config()
        if not config:
            print("No configuration values set")
        for key in sorted(config):
            print(f"{key} = {config[key]}")
    elif args.action == "set":
        config = _load_config()
        config[args.key] = args.value
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config, indent=2), encoding="utf-8")
        print(f"Set {args.key} = {args.value}")
    elif args.action == "reset":
        path.unlink(missing_ok=True)
        print("Configuration reset to defaults")


async def _run(args: argparse.Namespace) -> None:
    ezp3 = EzP3()
    output_dir = args.output if args.output is not None else Path.cwd()
    command = args.command
    if command == "convert":
        await _convert_video(ezp3, args, output_dir)
    elif command == "playlist":
        await _convert_playlist(ezp3, args, output_dir)
    elif command == "batch":
        await _batch_convert(ezp3, args, output_dir)
    elif command == "download":
        _handle_download(args, Path(output_dir))
    elif command == "info":
        await _show_video_info(ezp3, args)
    elif command == "quality":
        await _show_quality_options(ezp3, args)
    elif command == "config":
        _handle_config(args)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``ezp3`` command; return the exit status."""
    args = parse_args(argv)
    _setup_logging(args.verbose)
    try:
        asyncio.run(_run(args))
    except (CliError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())