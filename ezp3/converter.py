"""Output formats and the conversion engine."""

from __future__ import annotations

import asyncio
import enum
import logging
import re
import subprocess
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U32_MAX = 2**32 - 1
_U8_MAX = 255
_DEFAULT_BITRATE = 256
_DEFAULT_OGG_QUALITY = 5


class FormatKind(enum.Enum):
    """Supported output container formats."""

    MP3 = "mp3"
    MP4 = "mp4"
    FLAC = "flac"
    AAC = "aac"
    OGG = "ogg"
    WEBM = "webm"


_AUDIO_KINDS = frozenset({FormatKind.MP3, FormatKind.FLAC, FormatKind.AAC, FormatKind.OGG})


@dataclass(frozen=True)
class OutputFormat:
    """An output format with its format-specific setting."""

    kind: FormatKind
    bitrate: int | None = None
    resolution: str | None = None
    quality: int | None = None

    @classmethod
    def mp3(cls, bitrate: int) -> OutputFormat:
        return cls(FormatKind.MP3, bitrate=bitrate)

    @classmethod
    def mp4(cls, resolution: str) -> OutputFormat:
        return cls(FormatKind.MP4, resolution=resolution)

    @classmethod
    def flac(cls) -> OutputFormat:
        return cls(FormatKind.FLAC)

    @classmethod
    def aac(cls, bitrate: int) -> OutputFormat:
        return cls(FormatKind.AAC, bitrate=bitrate)

    @classmethod
    def ogg(cls, quality: int) -> OutputFormat:
        return cls(FormatKind.OGG, quality=quality)

    @classmethod
    def webm(cls, resolution: str) -> OutputFormat:
        return cls(FormatKind.WEBM, resolution=resolution)

    def extension(self) -> str:
        """File extension for this format, without the dot."""
        return self.kind.value

    def media_type(self) -> str:
        """``"audio"`` for audio-only formats, ``"video"`` otherwise."""
        return "audio" if self.kind in _AUDIO_KINDS else "video"


def _parse_unsigned(text: str, maximum: int) -> int | None:
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    return value if value <= maximum else None


def _parse_bitrate(quality: str) -> int:
    value = _parse_unsigned(quality.replace("kbps", "").replace("k", ""), _U32_MAX)
    return _DEFAULT_BITRATE if value is None else value


def parse_output_format(format_name: str, quality: str) -> OutputFormat:
    """Build an :class:`OutputFormat` from a format name and quality string."""
    if format_name == "mp3":
        return OutputFormat.mp3(_parse_bitrate(quality))
    if format_name == "mp4":
        return OutputFormat.mp4(quality)
    if format_name == "flac":
        return OutputFormat.flac()
    if format_name == "aac":
        return OutputFormat.aac(_parse_bitrate(quality))
    if format_name == "ogg":
        value = _parse_unsigned(quality, _U8_MAX)
        return OutputFormat.ogg(_DEFAULT_OGG_QUALITY if value is None else value)
    if format_name == "webm":
        return OutputFormat.webm(quality)
    raise ValueError(f"Unsupported format: {format_name}")


@dataclass
class ConversionProgress:
    """A progress report of a running conversion."""

    percentage: float
    speed: str
    eta: str
    fps: float | None = None
    bitrate: str | None = None


@dataclass
class ConversionSettings:
    """Everything needed to run one conversion."""

    input_url: str
    output_path: Path
    format: OutputFormat
    preserve_quality: bool = True
    use_hardware_acceleration: bool = True
    thread_count: int | None = None


ProgressCallback = Callable[[ConversionProgress], None]
IndexedProgressCallback = Callable[[int, ConversionProgress], None]


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


def _placeholder_content(fmt: OutputFormat) -> str:
    kind = fmt.kind
    if kind is FormatKind.MP3:
        size_per_minute = fmt.bitrate * 60 // 8 // 1024
        if fmt.bitrate == 320:
            return (
                "High-Quality MP3 file (320kbps CBR, Apple Music equivalent)\n"
                "Encoding: LAME V0 with optimal quality settings\n"
                "Source: Best available audio track\n"
                f"File size: ~{size_per_minute}MB per minute"
            )
        if fmt.bitrate == 256:
            return (
                "High-Quality MP3 file (256kbps VBR)\n"
                "Encoding: LAME V2 quality\n"
                f"File size: ~{size_per_minute}MB per minute"
            )
        return (
            f"MP3 file ({fmt.bitrate}kbps)\n"
            "Standard encoding quality\n"
            f"File size: ~{size_per_minute}MB per minute"
        )
    if kind is FormatKind.MP4:
        return (
            f"High-Quality MP4 file ({fmt.resolution})\n"
            "Video: H.264 with high profile\n"
            "Audio: AAC 256kbps\n"
            "Optimized for quality retention"
        )
    if kind is FormatKind.FLAC:
        return (
            "Lossless FLAC file\n"
            "Perfect audio quality - no compression artifacts\n"
            "Bit-perfect copy of source audio\n"
            "16-bit/44.1kHz or higher depending on source"
        )
    if kind is FormatKind.AAC:
        return (
            f"High-Quality AAC file ({fmt.bitrate}kbps)\n"
            "Apple's preferred format\n"
            "Superior compression efficiency"
        )
    if kind is FormatKind.OGG:
        return (
            f"High-Quality OGG Vorbis file (quality {fmt.quality})\n"
            "Open-source format with excellent compression"
        )
    return (
        f"High-Quality WebM file ({fmt.resolution})\n"
        "Video: VP9 codec\n"
        "Audio: Opus 256kbps\n"
        "Optimized for web delivery"
    )


def _write_output(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _command_runs(*command: str) -> bool:
    try:
        subprocess.run(list(command), capture_output=True, check=False)
    except OSError:
        return False
    return True


class Converter:
    """Converts downloaded media into the requested output format."""

    def __init__(self, step_delay: float = 0.1) -> None:
        logger.info("Initializing converter (using external tools)")
        self.step_delay = step_delay

    async def convert_with_progress(
        self, settings: ConversionSettings, progress_callback: ProgressCallback
    ) -> None:
        """Run one conversion, reporting progress in steps of ten percent."""
        logger.info(
            "Starting conversion: %s -> %s", settings.input_url, settings.output_path
        )
        progress = 0.0
        while progress < 100.0:
            progress += 10.0
            progress_callback(
                ConversionProgress(
                    percentage=progress,
                    speed="2.5x",
                    eta=f"{_format_number((100.0 - progress) / 10.0)}s",
                    fps=30.0,
                    bitrate="256k",
                )
            )
            await asyncio.sleep(self.step_delay)

        await self._download_and_convert(settings)
        logger.info("Conversion completed successfully")

    async def batch_convert(
        self,
        settings_list: list[ConversionSettings],
        progress_callback: IndexedProgressCallback,
    ) -> list[Exception | None]:
        """Convert each entry in turn; return None or the error for each."""
        logger.info("Starting batch conversion of %d videos", len(settings_list))
        results: list[Exception | None] = []
        for index, settings in enumerate(settings_list):
            try:
                await self.convert_with_progress(
                    settings, partial(progress_callback, index)
                )
            except Exception as exc:  # each item's failure is reported, not raised
                results.append(exc)
            else:
                results.append(None)
        return results

    async def _download_and_convert(self, settings: ConversionSettings) -> None:
        logger.warning("Writing placeholder output instead of a real conversion")
        output = Path(settings.output_path)
        await asyncio.to_thread(_write_output, output, _placeholder_content(settings.format))
        logger.info("Created placeholder file: %s", output)

    @staticmethod
    def check_ytdlp() -> bool:
        """Return True if ``yt-dlp`` can be started."""
        return _command_runs("yt-dlp", "--version")

    @staticmethod
    def check_ffmpeg() -> bool:
        """Return True if ``ffmpeg`` can be started."""
        return _command_runs("ffmpeg", "-version")