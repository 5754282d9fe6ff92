"""The extraction and conversion pipeline."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .batch import BatchProcessor
from .converter import (
    ConversionSettings,
    Converter,
    IndexedProgressCallback,
    OutputFormat,
    ProgressCallback,
)
from .extractor import PlaylistInfo, VideoInfo, YouTubeExtractor
from .quality import QualityOptions, analyze_available_qualities
from .utils import sanitize_filename

logger = logging.getLogger(__name__)


class EzP3:
    """Extracts videos and converts them into the requested formats."""

    def __init__(self) -> None:
        self.extractor = YouTubeExtractor()
        self.converter = Converter()

    def create_batch_processor(self) -> BatchProcessor:
        """Return a batch processor bound to this pipeline."""
        return BatchProcessor(self)

    async def convert_video(
        self,
        url: str,
        output_path: str | Path,
        format: OutputFormat,
        quality: str,
        progress_callback: ProgressCallback,
    ) -> None:
        """Convert the video at ``url`` into ``output_path``."""
        output_path = Path(output_path)
        logger.info("Starting conversion: %s -> %s", url, output_path)

        video_info = await self.extractor.extract_info(url)
        logger.info("Extracted video info: %s", video_info.title)

        best = self.extractor.get_best_format(video_info, format.media_type(), quality)
        if best is None:
            raise ValueError(f"No suitable format found for quality: {quality}")
        logger.info("Selected format: %s (%s)", best.format_id, best.ext)

        settings = ConversionSettings(
            input_url=best.url,
            output_path=output_path,
            format=format,
            preserve_quality=True,
            use_hardware_acceleration=True,
            thread_count=os.cpu_count(),
        )
        await self.converter.convert_with_progress(settings, progress_callback)
        logger.info("Conversion completed successfully")

    async def convert_playlist(
        self,
        playlist_url: str,
        output_dir: str | Path,
        format: OutputFormat,
        quality: str,
        progress_callback: IndexedProgressCallback,
    ) -> list[Exception | None]:
        """Convert every video of a playlist; return None or the error for each."""
        logger.info("Converting playlist: %s", playlist_url)
        output_dir = Path(output_dir)
        video_urls = [playlist_url]

        settings_list: list[ConversionSettings] = []
        for index, url in enumerate(video_urls):
            video_info = await self.extractor.extract_info(url)
            safe_title = sanitize_filename(video_info.title)
            output_path = output_dir / f"{index + 1:03}-{safe_title}.{format.extension()}"
            best = self.extractor.get_best_format(video_info, format.media_type(), quality)
            if best is not None:
                settings_list.append(
                    ConversionSettings(
                        input_url=best.url,
                        output_path=output_path,
                        format=format,
                        preserve_quality=True,
                        use_hardware_acceleration=True,
                        thread_count=os.cpu_count(),
                    )
                )

        return await self.converter.batch_convert(settings_list, progress_callback)

    async def get_video_info(self, url: str) -> VideoInfo:
        """Return information about a video without converting it."""
        return await self.extractor.extract_info(url)

    async def get_playlist_info(self, url: str) -> PlaylistInfo:
        """Return information about a playlist."""
        return await self.extractor.extract_playlist_info(url)

    async def get_available_qualities(self, url: str) -> QualityOptions:
        """Return the qualities available for a video."""
        info = await self.extractor.extract_info(url)
        return analyze_available_qualities(info)