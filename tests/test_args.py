from pathlib import Path

import pytest

from ezp3.args import build_parser, parse_args

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def test_convert_defaults():
    args = parse_args(["convert", URL])
    assert args.command == "convert"
    assert args.url == URL
    assert args.format == "mp3"
    assert args.quality == "256"
    assert args.name is None
    assert args.preserve is False
    assert args.hardware is False
    assert args.threads is None
    assert args.verbose is False
    assert args.output is None


def test_convert_options():
    args = parse_args(["convert", URL, "-f", "mp4", "-q", "1080p", "-n", "clip", "-t", "4"])
    assert (args.format, args.quality, args.name, args.threads) == ("mp4", "1080p", "clip", 4)


def test_global_options_before_and_after_subcommand():
    before = parse_args(["-v", "-o", "out", "info", URL])
    after = parse_args(["info", URL, "--verbose", "--output", "out"])
    assert before.verbose is True and after.verbose is True
    assert before.output == Path("out") == after.output


def test_global_output_not_overridden_by_subparser_default():
    args = parse_args(["-o", "somewhere", "convert", URL])
    assert args.output == Path("somewhere")


def test_playlist_defaults():
    args = parse_args(["playlist", URL])
    assert args.start == 1
    assert args.parallel == 3
    assert args.limit is None


def test_batch_defaults():
    args = parse_args(["batch", URL])
    assert args.formats == "mp3"
    assert args.qualities is None
    assert args.jobs == 3
    assert args.skip_existing is False
    assert args.create_subdirs is True
    assert args.add_index is True
    assert args.start == 1
    assert args.thumbnails is False
    assert args.auto_download is False


def test_batch_options():
    args = parse_args(["batch", URL, "-f", "mp3,flac", "-q", "mp3:320", "-j", "5", "-l", "2"])
    assert (args.formats, args.qualities, args.jobs, args.limit) == ("mp3,flac", "mp3:320", 5, 2)


def test_download_actions():
    assert parse_args(["download", "list"]).action == "list"
    get = parse_args(["download", "get", "a", "b", "-o", "dl"])
    assert get.ids == ["a", "b"]
    assert get.download_dir == Path("dl")
    batch = parse_args(["download", "batch", "job-1"])
    assert batch.job_id == "job-1"
    assert batch.download_dir is None
    assert parse_args(["download", "clean"]).days == 7


def test_info_and_quality():
    info = parse_args(["info", URL])
    assert info.format == "table"
    quality = parse_args(["quality", URL, "--audio-only"])
    assert quality.audio_only is True
    assert quality.video_only is False


def test_config_actions():
    set_args = parse_args(["config", "set", "format", "flac"])
    assert (set_args.command, set_args.action) == ("config", "set")
    assert (set_args.key, set_args.value) == ("format", "flac")
    assert parse_args(["config", "reset"]).action == "reset"


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["convert"],
        ["playlist", URL, "--limit", "-1"],
        ["download", "clean", "--days", "many"],
        ["config"],
        ["unknown"],
    ],
)
def test_invalid_arguments_exit(argv):
    with pytest.raises(SystemExit) as excinfo:
        parse_args(argv)
    assert excinfo.value.code == 2


def test_parser_prog_name():
    assert build_parser().prog == "ezp3"