import subprocess
from unittest import mock

import pytest

from ezp3.converter import (
    ConversionSettings,
    Converter,
    FormatKind,
    OutputFormat,
    parse_output_format,
)


@pytest.mark.parametrize(
    "fmt, ext, media",
    [
        (OutputFormat.mp3(320), "mp3", "audio"),
        (OutputFormat.mp4("1080p"), "mp4", "video"),
        (OutputFormat.flac(), "flac", "audio"),
        (OutputFormat.aac(256), "aac", "audio"),
        (OutputFormat.ogg(5), "ogg", "audio"),
        (OutputFormat.webm("720p"), "webm", "video"),
    ],
)
def test_extension_and_media_type(fmt, ext, media):
    assert fmt.extension() == ext
    assert fmt.media_type() == media


def test_factories_set_fields():
    assert OutputFormat.mp3(192).bitrate == 192
    assert OutputFormat.mp4("720p").resolution == "720p"
    assert OutputFormat.ogg(7).quality == 7
    assert OutputFormat.flac().kind is FormatKind.FLAC


@pytest.mark.parametrize(
    "name, quality, expected",
    [
        ("mp3", "320kbps", OutputFormat.mp3(320)),
        ("mp3", "192k", OutputFormat.mp3(192)),
        ("mp3", "abc", OutputFormat.mp3(256)),
        ("aac", "128", OutputFormat.aac(128)),
        ("aac", "-5", OutputFormat.aac(256)),
        ("mp4", "1080p", OutputFormat.mp4("1080p")),
        ("webm", "720p", OutputFormat.webm("720p")),
        ("flac", "best", OutputFormat.flac()),
        ("ogg", "7", OutputFormat.ogg(7)),
        ("ogg", "x", OutputFormat.ogg(5)),
        ("ogg", "300", OutputFormat.ogg(5)),
    ],
)
def test_parse_output_format(name, quality, expected):
    assert parse_output_format(name, quality) == expected


def test_parse_unsupported_format():
    with pytest.raises(ValueError, match="Unsupported format: wav"):
        parse_output_format("wav", "256")


def _settings(path, fmt):
    return ConversionSettings(input_url="https://youtu.be/abc", output_path=path, format=fmt)


@pytest.mark.asyncio
async def test_convert_reports_progress_and_writes_file(tmp_path):
    reports = []
    out = tmp_path / "nested" / "song.mp3"
    await Converter(step_delay=0).convert_with_progress(
        _settings(out, OutputFormat.mp3(320)), reports.append
    )
    assert len(reports) == 10
    percentages = [r.percentage for r in reports]
    assert percentages == sorted(percentages)
    assert percentages[-1] == 100.0
    assert reports[-1].eta == "0s"
    assert all(r.speed == "2.5x" for r in reports)
    assert "320kbps CBR" in out.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_flac_placeholder_content(tmp_path):
    out = tmp_path / "a.flac"
    await Converter(step_delay=0).convert_with_progress(
        _settings(out, OutputFormat.flac()), lambda p: None
    )
    assert out.read_text(encoding="utf-8").startswith("Lossless FLAC file\n")


@pytest.mark.asyncio
async def test_other_mp3_bitrate_content(tmp_path):
    out = tmp_path / "a.mp3"
    await Converter(step_delay=0).convert_with_progress(
        _settings(out, OutputFormat.mp3(128)), lambda p: None
    )
    assert out.read_text(encoding="utf-8").startswith("MP3 file (128kbps)")


@pytest.mark.asyncio
async def test_batch_convert_success(tmp_path):
    seen = []
    settings = [
        _settings(tmp_path / "1.ogg", OutputFormat.ogg(5)),
        _settings(tmp_path / "2.webm", OutputFormat.webm("720p")),
    ]
    results = await Converter(step_delay=0).batch_convert(
        settings, lambda i, p: seen.append(i)
    )
    assert results == [None, None]
    assert set(seen) == {0, 1}
    assert (tmp_path / "2.webm").read_text(encoding="utf-8").startswith(
        "High-Quality WebM file (720p)"
    )


@pytest.mark.asyncio
async def test_batch_convert_reports_failure(tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x")
    settings = [
        _settings(blocker / "out.mp3", OutputFormat.mp3(256)),
        _settings(tmp_path / "ok.aac", OutputFormat.aac(256)),
    ]
    results = await Converter(step_delay=0).batch_convert(settings, lambda i, p: None)
    assert isinstance(results[0], OSError)
    assert results[1] is None


def test_check_tools_missing():
    with mock.patch("ezp3.converter.subprocess.run", side_effect=FileNotFoundError):
        assert Converter.check_ytdlp() is False
        assert Converter.check_ffmpeg() is False


def test_check_tools_present():
    done = subprocess.CompletedProcess(args=[], returncode=1)
    with mock.patch("ezp3.converter.subprocess.run", return_value=done) as run:
        assert Converter.check_ffmpeg() is True
        assert run.call_args.args[0] == ["ffmpeg", "-version"]
        assert Converter.check_ytdlp() is True
        assert run.call_args.args[0] == ["yt-dlp", "--version"]