"""Quality analysis, presets and size estimates for video streams."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from itertools import groupby
from typing import Callable, Iterable, TypeVar

from .extractor import FormatInfo, VideoInfo
from .utils import format_bytes

_T = TypeVar("_T")

_AUDIO_FORMAT_NAMES = {
    "mp3": "MP3",
    "libmp3lame": "MP3",
    "aac": "AAC",
    "libfdk_aac": "AAC",
    "flac": "FLAC",
    "vorbis": "OGG",
    "libvorbis": "OGG",
    "opus": "Opus",
    "libopus": "Opus",
}
_DEFAULT_AUDIO_BITRATE = 128.0

# Checked in order: the first marker contained in the resolution wins.
_VIDEO_BITRATES = (
    (("2160", "4K"), 15000),
    (("1440",), 8000),
    (("1080",), 4000),
    (("720",), 2000),
    (("480",), 1000),
)
_FALLBACK_VIDEO_BITRATE = 500


@dataclass
class AudioQuality:
    """An available audio quality."""

    bitrate: int
    format: str
    codec: str
    sample_rate: int | None = None
    channels: int | None = None
    file_size: int | None = None


@dataclass
class VideoQuality:
    """An available video quality."""

    resolution: str
    width: int
    height: int
    fps: float | None = None
    codec: str = ""
    bitrate: int | None = None
    file_size: int | None = None


@dataclass
class QualityOptions:
    """All qualities available for a video, best first."""

    audio_qualities: list[AudioQuality] = field(default_factory=list)
    video_qualities: list[VideoQuality] = field(default_factory=list)
    best_audio: AudioQuality | None = None
    best_video: VideoQuality | None = None


class QualityPreset(enum.Enum):
    """Named quality presets for quick selection."""

    BEST = "best"
    GOOD = "good"
    STANDARD = "standard"
    LOW = "low"


@dataclass(frozen=True)
class CustomPreset:
    """A preset with explicitly chosen audio bitrate and video resolution."""

    audio_bitrate: int | None = None
    video_resolution: str | None = None


def _dedup(items: Iterable[_T], key: Callable[[_T], object]) -> list[_T]:
    """Drop consecutive items with the same key, keeping the first."""
    return [next(group) for _, group in groupby(items, key=key)]


def _to_unsigned(value: float) -> int:
    return max(0, int(value))


def _parse_audio_quality(fmt: FormatInfo) -> AudioQuality | None:
    if fmt.acodec is None:
        return None
    abr = _DEFAULT_AUDIO_BITRATE if fmt.abr is None else fmt.abr
    return AudioQuality(
        bitrate=_to_unsigned(abr),
        format=_AUDIO_FORMAT_NAMES.get(fmt.acodec, "Unknown"),
        codec=fmt.acodec,
        file_size=fmt.filesize,
    )


def _parse_video_quality(fmt: FormatInfo) -> VideoQuality | None:
    if fmt.width is None or fmt.height is None or fmt.vcodec is None:
        return None
    resolution = "4K (2160p)" if fmt.height == 2160 else f"{fmt.height}p"
    return VideoQuality(
        resolution=resolution,
        width=fmt.width,
        height=fmt.height,
        fps=fmt.fps,
        codec=fmt.vcodec,
        bitrate=None if fmt.vbr is None else _to_unsigned(fmt.vbr),
        file_size=fmt.filesize,
    )


def analyze_available_qualities(info: VideoInfo) -> QualityOptions:
    """Collect the distinct audio and video qualities of ``info``, best first."""
    audio = [
        quality
        for fmt in info.formats
        if fmt.acodec is not None and fmt.vcodec is None
        if (quality := _parse_audio_quality(fmt)) is not None
    ]
    video = [
        quality
        for fmt in info.formats
        if fmt.vcodec is not None and fmt.width is not None and fmt.height is not None
        if (quality := _parse_video_quality(fmt)) is not None
    ]

    audio.sort(key=lambda a: a.bitrate, reverse=True)
    video.sort(key=lambda v: v.width * v.height, reverse=True)

    audio = _dedup(audio, key=lambda a: (a.bitrate, a.codec))
    video = _dedup(video, key=lambda v: (v.width, v.height))

    return QualityOptions(
        audio_qualities=audio,
        video_qualities=video,
        best_audio=audio[0] if audio else None,
        best_video=video[0] if video else None,
    )


def _first_video_at_most(available: QualityOptions, height: int) -> str | None:
    return next(
        (v.resolution for v in available.video_qualities if v.height <= height), None
    )


def _first_audio_at_most(available: QualityOptions, bitrate: int) -> int | None:
    return next(
        (a.bitrate for a in available.audio_qualities if a.bitrate <= bitrate), None
    )


def get_preset_settings(
    preset: QualityPreset | CustomPreset, available: QualityOptions
) -> tuple[int | None, str | None]:
    """Return the ``(audio_bitrate, video_resolution)`` a preset selects."""
    if isinstance(preset, CustomPreset):
        return preset.audio_bitrate, preset.video_resolution

    if preset is QualityPreset.BEST:
        audio = available.best_audio.bitrate if available.best_audio else None
        video = available.best_video.resolution if available.best_video else None
        return audio, video

    if preset is QualityPreset.GOOD:
        audio = _first_audio_at_most(available, 256)
        if audio is None and len(available.audio_qualities) > 1:
            audio = available.audio_qualities[1].bitrate
        return audio, _first_video_at_most(available, 1080)

    if preset is QualityPreset.STANDARD:
        audio = _first_audio_at_most(available, 192)
        video = _first_video_at_most(available, 720)
        return (
            192 if audio is None else audio,
            "720p" if video is None else video,
        )

    if preset is QualityPreset.LOW:
        video = _first_video_at_most(available, 480)
        return 128, "480p" if video is None else video

    raise ValueError(f"Unknown quality preset: {preset!r}")


def estimate_file_size(
    duration_seconds: int, audio_bitrate: int | None, video_resolution: str | None
) -> int:
    """Estimate the size in bytes of a file with the given qualities."""
    total_kbps = audio_bitrate or 0
    if video_resolution is not None:
        total_kbps += next(
            (
                rate
                for markers, rate in _VIDEO_BITRATES
                if any(marker in video_resolution for marker in markers)
            ),
            _FALLBACK_VIDEO_BITRATE,
        )
    return total_kbps * duration_seconds * 1000 // 8


def format_file_size(size: int) -> str:
    """Return a human-readable file size."""
    return format_bytes(size)