"""Filename, duration, URL and size helpers."""

from __future__ import annotations

import os
import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path

_INVALID_CHARS = re.compile(r'[<>:"/\\|?*]')
_EDGE_JUNK = re.compile(r"^[\s.]+|[\s.]+$")
_UNSIGNED = re.compile(r"\+?[0-9]+")
_MAX_FILENAME_BYTES = 200

_YOUTUBE_PATTERNS = [
    re.compile(p)
    for p in (
        r"^https?://(www\.)?youtube\.com/watch\?v=[\w-]+",
        r"^https?://(www\.)?youtu\.be/[\w-]+",
        r"^https?://(www\.)?youtube\.com/playlist\?list=[\w-]+",
        r"^https?://(www\.)?youtube\.com/channel/[\w-]+",
        r"^https?://(www\.)?youtube\.com/@[\w-]+",
    )
]
_WATCH_ID = re.compile(r"[?&]v=([^&]+)")
_SHORT_ID = re.compile(r"youtu\.be/([^?]+)")

_UNITS = ("B", "KB", "MB", "GB", "TB")
_VIDEO_EXTENSIONS = frozenset({"mp4", "avi", "mkv", "mov", "wmv", "flv", "webm"})
_AUDIO_EXTENSIONS = frozenset({"mp3", "flac", "aac", "ogg", "wav", "m4a"})


def sanitize_filename(name: str) -> str:
    """Make ``name`` safe to use as a file name."""
    cleaned = _EDGE_JUNK.sub("", _INVALID_CHARS.sub("_", name))
    encoded = cleaned.encode("utf-8")
    if len(encoded) > _MAX_FILENAME_BYTES:
        cleaned = encoded[:_MAX_FILENAME_BYTES].decode("utf-8", errors="ignore")
    return cleaned or "untitled"


def format_duration(seconds: int) -> str:
    """Format seconds as ``MM:SS`` or ``HH:MM:SS``."""
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02}:{minutes:02}:{secs:02}"
    return f"{minutes:02}:{secs:02}"


def parse_duration(duration_str: str) -> int | None:
    """Parse ``MM:SS`` or ``HH:MM:SS`` into seconds; None if malformed."""
    parts = duration_str.split(":")
    if len(parts) not in (2, 3) or not all(_UNSIGNED.fullmatch(p) for p in parts):
        return None
    total = 0
    for part in parts:
        total = total * 60 + int(part)
    return total


def generate_output_filename(title: str, extension: str, add_timestamp: bool) -> str:
    """Build an output file name from a title, optionally with a UTC timestamp."""
    clean_title = sanitize_filename(title)
    if add_timestamp:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        return f"{clean_title}_{stamp}.{extension}"
    return f"{clean_title}.{extension}"


def check_ffmpeg_available() -> bool:
    """Return True if ``ffmpeg -version`` runs successfully."""
    try:
        result = subprocess.run(["ffmpeg", "-version"], capture_output=True, check=False)
    except OSError:
        return False
    return result.returncode == 0


def get_optimal_thread_count() -> int:
    """Three quarters of the CPU cores, between 1 and 8."""
    cpu_count = os.cpu_count() or 1
    return min(max(cpu_count * 3 // 4, 1), 8)


def is_valid_youtube_url(url: str) -> bool:
    """Return True if ``url`` looks like a YouTube video, playlist or channel URL."""
    return any(pattern.match(url) for pattern in _YOUTUBE_PATTERNS)


def extract_video_id(url: str) -> str | None:
    """Return the video id in a YouTube URL, or None."""
    for pattern in (_WATCH_ID, _SHORT_ID):
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def format_bytes(size: int) -> str:
    """Format a byte count with binary units."""
    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(_UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return f"{int(value)} {_UNITS[0]}"
    return f"{value:.1f} {_UNITS[unit]}"


def calculate_speed(size: int, duration_secs: float) -> str:
    """Format the transfer rate of ``size`` bytes over ``duration_secs``."""
    if duration_secs <= 0.0:
        return "0 B/s"
    return f"{format_bytes(int(size / duration_secs))}/s"


def estimate_eta(total_bytes: int, downloaded_bytes: int, speed_bytes_per_sec: float) -> str:
    """Estimate the remaining time of a transfer."""
    if speed_bytes_per_sec <= 0.0 or downloaded_bytes >= total_bytes:
        return "Unknown"
    eta = (total_bytes - downloaded_bytes) / speed_bytes_per_sec
    if eta > 3600.0:
        return f"{eta / 3600.0:.0f}h {(eta % 3600.0) / 60.0:.0f}m"
    if eta > 60.0:
        return f"{eta / 60.0:.0f}m {eta % 60.0:.0f}s"
    return f"{eta:.0f}s"


def ensure_directory_exists(path: str | os.PathLike) -> None:
    """Create ``path`` and its parents if it does not exist."""
    path = Path(path)
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)


def get_file_extension(path: str | os.PathLike) -> str | None:
    """Return the lower-cased extension of ``path`` without the dot, or None."""
    suffix = Path(path).suffix
    return suffix[1:].lower() if suffix else None


def is_video_file(path: str | os.PathLike) -> bool:
    """Return True if ``path`` has a known video extension."""
    return get_file_extension(path) in _VIDEO_EXTENSIONS


def is_audio_file(path: str | os.PathLike) -> bool:
    """Return True if ``path`` has a known audio extension."""
    return get_file_extension(path) in _AUDIO_EXTENSIONS