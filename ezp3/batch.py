"""Batch conversion jobs over playlists, in several formats at once."""

from __future__ import annotations

import asyncio
import copy
import enum
import logging
import re
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .converter import OutputFormat
from .extractor import PlaylistInfo, PlaylistVideo

if TYPE_CHECKING:
    from .pipeline import EzP3

logger = logging.getLogger(__name__)

_INVALID_CHARS = re.compile(r'[<>:"/\\|?*]')


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BatchJobStatus(enum.Enum):
    """Lifecycle state of a batch job."""

    CREATED = "created"
    STARTING = "starting"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class BatchTaskStatus(enum.Enum):
    """State of the conversion of one video in a batch."""

    PENDING = "pending"
    CONVERTING = "converting"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class TaskFormatStatus(enum.Enum):
    """State of the conversion of one video into one format."""

    PENDING = "pending"
    CONVERTING = "converting"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class BatchFormat:
    """A format requested for every video of a batch."""

    format: OutputFormat
    quality: str
    enabled: bool = True


@dataclass
class BatchOptions:
    """Options controlling how a batch is processed."""

    max_concurrent: int = 3
    skip_existing: bool = False
    create_subdirs: bool = True
    add_index_prefix: bool = True
    video_limit: int | None = None
    start_index: int = 0
    download_thumbnails: bool = False
    create_playlist_file: bool = True


@dataclass
class BatchJob:
    """A batch conversion of a playlist."""

    id: str
    name: str
    playlist_url: str
    output_dir: Path
    formats: list[BatchFormat]
    options: BatchOptions
    status: BatchJobStatus = BatchJobStatus.CREATED
    created_at: datetime = field(default_factory=_now)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_videos: int = 0
    completed_videos: int = 0
    failed_videos: int = 0
    error: str | None = None


@dataclass
class BatchTaskFormat:
    """The conversion of one video into one format."""

    format: OutputFormat
    quality: str
    output_path: Path
    status: TaskFormatStatus = TaskFormatStatus.PENDING
    progress: float = 0.0
    error: str | None = None


@dataclass
class BatchTask:
    """The conversion of one video into all formats of its job."""

    id: str
    job_id: str
    video_url: str
    video_title: str
    video_index: int
    formats: list[BatchTaskFormat] = field(default_factory=list)
    status: BatchTaskStatus = BatchTaskStatus.PENDING
    created_at: datetime = field(default_factory=_now)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None


@dataclass
class BatchProgress:
    """Overall progress of a batch job."""

    overall_progress: float
    current_video: str | None
    completed_videos: int
    total_videos: int
    failed_videos: int
    estimated_time_remaining: str | None = None


def _output_path(
    output_dir: Path,
    video: PlaylistVideo,
    index: int,
    fmt: OutputFormat,
    options: BatchOptions,
) -> Path:
    name = f"{index + 1:03}-{video.title}" if options.add_index_prefix else video.title
    name = _INVALID_CHARS.sub("_", name)
    return Path(output_dir) / f"{name}.{fmt.extension()}"


def _select_videos(playlist: PlaylistInfo, options: BatchOptions) -> list[PlaylistVideo]:
    videos = playlist.videos[options.start_index:]
    if options.video_limit is not None:
        videos = videos[: options.video_limit]
    return videos


class BatchProcessor:
    """Creates and runs batch conversion jobs."""

    def __init__(self, ezp3: EzP3) -> None:
        self._ezp3 = ezp3
        self._lock = threading.Lock()
        self._jobs: dict[str, BatchJob] = {}
        self._tasks: dict[str, list[BatchTask]] = {}
        self.processing_delay = 1.0

    async def create_batch_job(
        self,
        name: str,
        playlist_url: str,
        output_dir: str | Path,
        formats: list[BatchFormat],
        options: BatchOptions,
    ) -> str:
        """Create a job with one task per selected video; return its id."""
        job_id = str(uuid.uuid4())
        playlist = await self._ezp3.get_playlist_info(playlist_url)
        output_dir = Path(output_dir)

        job = BatchJob(
            id=job_id,
            name=name,
            playlist_url=playlist_url,
            output_dir=output_dir,
            formats=list(formats),
            options=options,
            total_videos=playlist.video_count,
        )

        tasks = [
            BatchTask(
                id=str(uuid.uuid4()),
                job_id=job_id,
                video_url=video.url,
                video_title=video.title,
                video_index=index,
                formats=[
                    BatchTaskFormat(
                        format=batch_format.format,
                        quality=batch_format.quality,
                        output_path=_output_path(
                            output_dir, video, index, batch_format.format, options
                        ),
                    )
                    for batch_format in job.formats
                    if batch_format.enabled
                ],
            )
            for index, video in enumerate(_select_videos(playlist, options))
        ]

        with self._lock:
            self._jobs[job_id] = job
            self._tasks[job_id] = tasks
        return job_id

    async def start_batch(
        self, job_id: str, progress_callback: Callable[[BatchProgress], None]
    ) -> None:
        """Run the job, marking it running and then completed."""
        logger.info("Starting batch conversion for job: %s", job_id)
        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None:
                job.status = BatchJobStatus.RUNNING
                job.started_at = _now()

        await asyncio.sleep(self.processing_delay)

        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None:
                job.status = BatchJobStatus.COMPLETED
                job.completed_at = _now()
                job.completed_videos = job.total_videos
        logger.info("Batch conversion completed for job: %s", job_id)

    def get_job(self, job_id: str) -> BatchJob | None:
        """Return a copy of the job, or None if unknown."""
        with self._lock:
            job = self._jobs.get(job_id)
            return copy.deepcopy(job) if job is not None else None

    def get_job_tasks(self, job_id: str) -> list[BatchTask]:
        """Return copies of the job's tasks; empty if the job is unknown."""
        with self._lock:
            return copy.deepcopy(self._tasks.get(job_id, []))