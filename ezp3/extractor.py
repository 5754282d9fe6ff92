"""Video and playlist metadata extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

_KNOWN_TITLES = {
    "dQw4w9WgXcQ": "Rick Astley - Never Gonna Give You Up (Official Video)",
    "9bZkp7q19f0": "PSY - GANGNAM STYLE(강남스타일) M/V",
    "MHsI8hJmggI": "Sample Music Video - High Quality Audio Test",
    "kJQP7kiw5Fk": "Luis Fonsi - Despacito ft. Daddy Yankee",
    "fJ9rUzIMcZQ": "Queen - Bohemian Rhapsody (Official Video)",
    "hTWKbfoikeg": "Nirvana - Smells Like Teen Spirit (Official Music Video)",
}
_DEFAULT_TITLE = "Sample YouTube Video - Test Audio"

_TARGET_HEIGHTS = {
    "144p": 144,
    "240p": 240,
    "360p": 360,
    "480p": 480,
    "720p": 720,
    "1080p": 1080,
    "1440p": 1440,
    "2160p": 2160,
}
_DEFAULT_TARGET_HEIGHT = 720


class ExtractionError(ValueError):
    """Raised when information cannot be extracted from a URL."""


@dataclass
class FormatInfo:
    """A single downloadable audio or video stream."""

    format_id: str
    url: str
    ext: str
    format_note: str | None = None
    acodec: str | None = None
    vcodec: str | None = None
    width: int | None = None
    height: int | None = None
    fps: float | None = None
    abr: float | None = None
    vbr: float | None = None
    filesize: int | None = None
    quality: int = 0


@dataclass
class Thumbnail:
    """A thumbnail image of a video."""

    url: str
    width: int | None = None
    height: int | None = None


@dataclass
class VideoInfo:
    """Metadata of a single video."""

    id: str
    title: str
    duration: int
    uploader: str
    upload_date: str
    view_count: int | None = None
    formats: list[FormatInfo] = field(default_factory=list)
    thumbnails: list[Thumbnail] = field(default_factory=list)


@dataclass
class PlaylistVideo:
    """One entry of a playlist."""

    id: str
    title: str
    url: str
    duration: int | None
    uploader: str


@dataclass
class PlaylistInfo:
    """Metadata of a playlist."""

    id: str
    title: str
    uploader: str
    video_count: int
    videos: list[PlaylistVideo] = field(default_factory=list)


class YouTubeExtractor:
    """Extracts video and playlist information from YouTube URLs."""

    def __init__(self, user_agent: str = USER_AGENT) -> None:
        self.user_agent = user_agent

    async def extract_info(self, url: str) -> VideoInfo:
        """Return video information for ``url``."""
        logger.info("Extracting video info for: %s", url)
        logger.warning("Using placeholder video info")
        try:
            video_id = self.extract_video_id(url)
        except ExtractionError:
            video_id = "unknown"
        title = _KNOWN_TITLES.get(video_id, _DEFAULT_TITLE)
        return VideoInfo(
            id=video_id,
            title=title,
            duration=180,
            uploader="Test Channel",
            upload_date="2024-01-01",
            view_count=1_000_000,
            formats=[
                FormatInfo(
                    format_id="22",
                    url=url,
                    ext="mp4",
                    format_note="720p",
                    acodec="aac",
                    vcodec="avc1",
                    width=1280,
                    height=720,
                    fps=30.0,
                    abr=128.0,
                    vbr=1000.0,
                    filesize=50_000_000,
                    quality=720,
                ),
                FormatInfo(
                    format_id="140",
                    url=url,
                    ext="m4a",
                    format_note="audio only",
                    acodec="aac",
                    abr=128.0,
                    filesize=5_000_000,
                    quality=0,
                ),
            ],
            thumbnails=[
                Thumbnail(url="https://example.com/thumb.jpg", width=1280, height=720)
            ],
        )

    async def extract_playlist_info(self, url: str) -> PlaylistInfo:
        """Return playlist information for ``url``."""
        logger.info("Extracting playlist info for: %s", url)
        logger.warning("Using placeholder playlist info")
        return PlaylistInfo(
            id="dummy_playlist_id",
            title=f"Test Playlist from {url}",
            uploader="Test Channel",
            video_count=5,
            videos=[
                PlaylistVideo("video1", "Test Video 1", url, 180, "Test Channel"),
                PlaylistVideo("video2", "Test Video 2", url, 240, "Test Channel"),
            ],
        )

    def get_best_format(
        self, video_info: VideoInfo, format_type: str, quality: str
    ) -> FormatInfo | None:
        """Pick the most suitable stream for ``format_type`` and ``quality``."""
        formats = video_info.formats
        if format_type == "audio":
            candidates = [f for f in formats if f.vcodec is None and f.acodec is not None]
            if not candidates:
                return None
            # On ties the last candidate wins.
            return max(reversed(candidates), key=lambda f: int(f.abr or 0.0))
        if format_type == "video":
            target = _TARGET_HEIGHTS.get(quality, _DEFAULT_TARGET_HEIGHT)
            candidates = [f for f in formats if f.vcodec is not None and f.height is not None]
            if not candidates:
                return None
            return min(candidates, key=lambda f: abs(f.height - target))
        return formats[0] if formats else None

    def extract_video_id(self, url: str) -> str:
        """Return the video id embedded in ``url``."""
        if "youtube.com/watch" in url:
            start = url.find("v=")
            if start != -1:
                return url[start + 2:].split("&", 1)[0]
        elif "youtu.be/" in url:
            start = url.find("youtu.be/")
            return url[start + len("youtu.be/"):].split("?", 1)[0]
        raise ExtractionError(f"Could not extract video ID from URL: {url}")