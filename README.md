# ezp3

A conversion pipeline for YouTube videos and playlists, usable from the
command line or as an asyncio library. It looks up video and playlist
information, analyses the audio and video qualities on offer, converts to
MP3, MP4, FLAC, AAC, OGG or WebM with progress reporting, and organises
playlist conversions into batch jobs.

Please read "What it does not do" below before relying on the output files.

## Installation

```
pip install .
```

Python 3.10 or later is required. There are no runtime dependencies beyond
the standard library.

## Command line

```
ezp3 convert URL [-f FORMAT] [-q QUALITY] [-n NAME] [--preserve] [--hardware] [-t THREADS]
ezp3 playlist URL [-f FORMAT] [-q QUALITY] [-l LIMIT] [--start N] [-p PARALLEL]
ezp3 batch URL [-f mp3,mp4,flac] [-q mp3:320,mp4:1080p] [-j JOBS] [-l LIMIT] [--start N]
           [--skip-existing] [--thumbnails] [--auto-download]
ezp3 info URL [--format json|table]
ezp3 quality URL [--audio-only] [--video-only]
ezp3 download list
ezp3 download get [IDS ...] [-o DIR]
ezp3 download batch JOB_ID [-o DIR]
ezp3 download clean [--days N]
ezp3 config show
ezp3 config set KEY VALUE
ezp3 config reset
```

Global options, accepted before or after the command:

- `-v/--verbose` turns on debug logging.
- `-o/--output DIR` chooses the output directory (default: the current
  directory). After `download get` and `download batch`, `-o` names the
  download directory instead.

Formats are `mp3`, `mp4`, `flac`, `aac`, `ogg` and `webm`; the default is
`mp3` at quality `256`. For mp3 and aac the quality is a bitrate (`320`,
`320k` and `320kbps` all work; anything unreadable becomes 256). For ogg it
is a number from 0 to 255 (default 5). For mp4 and webm it is a resolution
such as `720p` or `1080p`.

A URL is accepted when it contains `youtube.com` or `youtu.be`; otherwise
the command fails with `Error: Invalid YouTube URL: ...` and exit status 1.

When `batch` is given no quality for a format, these defaults apply: `256`
for mp3 and aac, `1080p` for mp4 and webm, `best` for flac and `5` for ogg.
Unknown formats in the list are skipped with a warning; if none remain, the
command fails.

`config set` stores values as JSON in `~/.config/ezp3/config.json`, or in
the file named by the `EZP3_CONFIG_FILE` environment variable. `config show`
prints them and `config reset` deletes the file.

`download list` prints the files in the output directory whose extension is
one of the supported formats, with their sizes.

Examples:

```
ezp3 convert "https://www.youtube.com/watch?v=dQw4w9WgXcQ" -f mp3 -q 320
ezp3 info "https://youtu.be/dQw4w9WgXcQ" --format json
ezp3 quality "https://www.youtube.com/watch?v=dQw4w9WgXcQ" --audio-only
ezp3 -o music batch "https://www.youtube.com/playlist?list=PL123" -f mp3,flac
```

## Library use

```python
import asyncio
from pathlib import Path

from ezp3.converter import OutputFormat
from ezp3.pipeline import EzP3

async def run():
    ezp3 = EzP3()
    info = await ezp3.get_video_info("https://youtu.be/dQw4w9WgXcQ")
    print(info.title, info.duration)
    await ezp3.convert_video(
        "https://youtu.be/dQw4w9WgXcQ",
        Path("song.mp3"),
        OutputFormat.mp3(320),
        "320",
        lambda progress: print(progress.percentage),
    )

asyncio.run(run())
```

Modules:

- `ezp3.pipeline`: `EzP3`, with `get_video_info`, `get_playlist_info`,
  `get_available_qualities`, `convert_video`, `convert_playlist` (returns
  one entry per video: `None` on success or the exception raised) and
  `create_batch_processor`.
- `ezp3.extractor`: `YouTubeExtractor`, `VideoInfo`, `FormatInfo`,
  `Thumbnail`, `PlaylistInfo`, `PlaylistVideo`, `ExtractionError`.
  `get_best_format(info, "audio" | "video", quality)` picks the
  highest-bitrate audio stream or the video stream closest to the
  requested height.
- `ezp3.quality`: `analyze_available_qualities`, `get_preset_settings` with
  `QualityPreset` (`BEST`, `GOOD`, `STANDARD`, `LOW`) or `CustomPreset`,
  `estimate_file_size` and `format_file_size`.
- `ezp3.converter`: `OutputFormat` (built with `OutputFormat.mp3(...)`,
  `.mp4(...)`, `.flac()`, `.aac(...)`, `.ogg(...)`, `.webm(...)`),
  `FormatKind`, `parse_output_format`, `ConversionSettings`,
  `ConversionProgress` and `Converter` (with `check_ytdlp` and
  `check_ffmpeg`, which report whether those programs can be started).
- `ezp3.batch`: `BatchProcessor`, `BatchFormat`, `BatchOptions`, `BatchJob`,
  `BatchTask`, `BatchTaskFormat`, `BatchProgress` and the status enums.
  `create_batch_job` makes one task per selected video with an output path
  such as `001-Title.mp3` for each enabled format.
- `ezp3.utils`: `sanitize_filename`, `format_duration`, `parse_duration`,
  `generate_output_filename`, `is_valid_youtube_url`, `extract_video_id`,
  `format_bytes`, `calculate_speed`, `estimate_eta`,
  `get_optimal_thread_count`, `check_ffmpeg_available`,
  `ensure_directory_exists`, `get_file_extension`, `is_video_file` and
  `is_audio_file`.
- `ezp3.cli`: `main`, plus `parse_quality_for_format`,
  `default_quality_for_format` and `download_batch_files`, which copies the
  completed outputs of a batch job into a directory.

## What it does not do

- No network access: `YouTubeExtractor` returns fixed sample information
  (a title chosen from the video id, a 3-minute duration, one 720p and one
  audio-only stream; playlists with two sample videos).
- No real media conversion: `Converter` reports progress in ten steps and
  then writes a short text file describing the requested format at the
  output path. ffmpeg and yt-dlp are only checked for, never run.
- `convert_playlist` converts the given URL as a single item rather than
  expanding the playlist.
- The `batch` command converts only in the first listed format; `--jobs`,
  `--limit`, `--start`, `--skip-existing`, `--thumbnails` and the playlist's
  `-p/--parallel` and `--limit` options are read but have no effect.
- `BatchProcessor.start_batch` marks a job running and then completed after
  a short delay without converting anything, and jobs live only in memory.
- `download get` and `download batch` only print what they would fetch,
  `download clean` deletes nothing, and there is no stored job history.
- `info --format yaml` prints the table view.

## Running the tests

```
pip install ".[test]"
pytest
```