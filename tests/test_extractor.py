import pytest

from ezp3.extractor import (
    ExtractionError,
    FormatInfo,
    VideoInfo,
    YouTubeExtractor,
)


@pytest.fixture
def extractor():
    return YouTubeExtractor()


def _video(formats):
    return VideoInfo(
        id="x",
        title="t",
        duration=1,
        uploader="u",
        upload_date="d",
        formats=formats,
    )


def test_extract_video_id_watch(extractor):
    assert extractor.extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=10") == "dQw4w9WgXcQ"


def test_extract_video_id_short(extractor):
    assert extractor.extract_video_id("https://youtu.be/dQw4w9WgXcQ?t=5") == "dQw4w9WgXcQ"


def test_extract_video_id_invalid(extractor):
    with pytest.raises(ExtractionError):
        extractor.extract_video_id("https://example.com/video")


def test_extract_video_id_watch_without_v(extractor):
    with pytest.raises(ExtractionError):
        extractor.extract_video_id("https://www.youtube.com/watch?list=abc")


@pytest.mark.asyncio
async def test_extract_info_known_title(extractor):
    info = await extractor.extract_info("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    assert info.id == "dQw4w9WgXcQ"
    assert info.title == "Rick Astley - Never Gonna Give You Up (Official Video)"
    assert info.duration == 180


@pytest.mark.asyncio
async def test_extract_info_unknown_url(extractor):
    info = await extractor.extract_info("https://example.com/nothing")
    assert info.id == "unknown"
    assert info.title == "Sample YouTube Video - Test Audio"
    assert all(f.url == "https://example.com/nothing" for f in info.formats)


@pytest.mark.asyncio
async def test_extract_playlist_info(extractor):
    url = "https://www.youtube.com/playlist?list=abc"
    info = await extractor.extract_playlist_info(url)
    assert info.title == f"Test Playlist from {url}"
    assert [v.url for v in info.videos] == [url, url]
    assert info.video_count == 5


@pytest.mark.asyncio
async def test_best_format_audio_and_video(extractor):
    info = await extractor.extract_info("https://youtu.be/abc")
    assert extractor.get_best_format(info, "audio", "256").format_id == "140"
    assert extractor.get_best_format(info, "video", "1080p").format_id == "22"


def test_best_format_video_closest_height(extractor):
    low = FormatInfo("a", "u", "mp4", vcodec="v", height=360)
    high = FormatInfo("b", "u", "mp4", vcodec="v", height=1080)
    info = _video([low, high])
    assert extractor.get_best_format(info, "video", "1080p") is high
    assert extractor.get_best_format(info, "video", "480p") is low


def test_best_format_audio_highest_bitrate(extractor):
    weak = FormatInfo("a", "u", "m4a", acodec="aac", abr=64.0)
    strong = FormatInfo("b", "u", "m4a", acodec="aac", abr=160.0)
    mixed = FormatInfo("c", "u", "mp4", acodec="aac", vcodec="v", abr=320.0)
    info = _video([weak, strong, mixed])
    assert extractor.get_best_format(info, "audio", "") is strong


def test_best_format_other_type_and_empty(extractor):
    first = FormatInfo("a", "u", "mp4")
    assert extractor.get_best_format(_video([first]), "other", "") is first
    assert extractor.get_best_format(_video([]), "audio", "") is None
    assert extractor.get_best_format(_video([]), "video", "720p") is None