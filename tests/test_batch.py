from pathlib import Path

import pytest

from ezp3.batch import (
    BatchFormat,
    BatchJobStatus,
    BatchOptions,
    BatchProcessor,
    BatchTaskStatus,
    TaskFormatStatus,
)
from ezp3.converter import OutputFormat
from ezp3.pipeline import EzP3

PLAYLIST_URL = "https://www.youtube.com/playlist?list=PLabc"


def _processor() -> BatchProcessor:
    processor = EzP3().create_batch_processor()
    processor.processing_delay = 0
    return processor


def _formats():
    return [
        BatchFormat(OutputFormat.mp3(320), "320"),
        BatchFormat(OutputFormat.flac(), "best"),
        BatchFormat(OutputFormat.mp4("1080p"), "1080p", enabled=False),
    ]


@pytest.mark.asyncio
async def test_create_job_stores_job(tmp_path):
    processor = _processor()
    job_id = await processor.create_batch_job(
        "my batch", PLAYLIST_URL, tmp_path, _formats(), BatchOptions()
    )
    job = processor.get_job(job_id)
    assert job.id == job_id
    assert job.name == "my batch"
    assert job.playlist_url == PLAYLIST_URL
    assert job.status is BatchJobStatus.CREATED
    assert job.total_videos == 5
    assert job.completed_videos == 0
    assert job.started_at is None


@pytest.mark.asyncio
async def test_tasks_cover_enabled_formats(tmp_path):
    processor = _processor()
    job_id = await processor.create_batch_job(
        "b", PLAYLIST_URL, tmp_path, _formats(), BatchOptions()
    )
    tasks = processor.get_job_tasks(job_id)
    assert [t.video_title for t in tasks] == ["Test Video 1", "Test Video 2"]
    assert [t.video_index for t in tasks] == [0, 1]
    for task in tasks:
        assert task.job_id == job_id
        assert task.status is BatchTaskStatus.PENDING
        assert [f.format.extension() for f in task.formats] == ["mp3", "flac"]
        assert all(f.status is TaskFormatStatus.PENDING for f in task.formats)
        assert all(f.progress == 0.0 for f in task.formats)


@pytest.mark.asyncio
async def test_output_paths_with_index_prefix(tmp_path):
    processor = _processor()
    job_id = await processor.create_batch_job(
        "b", PLAYLIST_URL, tmp_path, _formats(), BatchOptions()
    )
    first = processor.get_job_tasks(job_id)[0]
    assert first.formats[0].output_path == tmp_path / "001-Test Video 1.mp3"


@pytest.mark.asyncio
async def test_output_paths_without_index_prefix(tmp_path):
    processor = _processor()
    job_id = await processor.create_batch_job(
        "b", PLAYLIST_URL, tmp_path, _formats(), BatchOptions(add_index_prefix=False)
    )
    tasks = processor.get_job_tasks(job_id)
    names = [f.output_path.name for t in tasks for f in t.formats]
    assert all(Path(name).stem in {"Test Video 1", "Test Video 2"} for name in names)
    assert all(f.output_path.parent == tmp_path for t in tasks for f in t.formats)


@pytest.mark.asyncio
async def test_start_index_and_limit(tmp_path):
    processor = _processor()
    skipped = await processor.create_batch_job(
        "b", PLAYLIST_URL, tmp_path, _formats(), BatchOptions(start_index=1)
    )
    tasks = processor.get_job_tasks(skipped)
    assert [t.video_title for t in tasks] == ["Test Video 2"]
    assert tasks[0].video_index == 0

    limited = await processor.create_batch_job(
        "b", PLAYLIST_URL, tmp_path, _formats(), BatchOptions(video_limit=1)
    )
    assert [t.video_title for t in processor.get_job_tasks(limited)] == ["Test Video 1"]


@pytest.mark.asyncio
async def test_start_batch_completes_job(tmp_path):
    processor = _processor()
    job_id = await processor.create_batch_job(
        "b", PLAYLIST_URL, tmp_path, _formats(), BatchOptions()
    )
    seen = []
    await processor.start_batch(job_id, seen.append)
    job = processor.get_job(job_id)
    assert job.status is BatchJobStatus.COMPLETED
    assert job.completed_videos == job.total_videos
    assert job.started_at <= job.completed_at


@pytest.mark.asyncio
async def test_start_unknown_job_does_not_create_it():
    processor = _processor()
    await processor.start_batch("missing", lambda progress: None)
    assert processor.get_job("missing") is None


def test_unknown_job_lookups():
    processor = _processor()
    assert processor.get_job("nope") is None
    assert processor.get_job_tasks("nope") == []


@pytest.mark.asyncio
async def test_returned_job_is_a_copy(tmp_path):
    processor = _processor()
    job_id = await processor.create_batch_job(
        "b", PLAYLIST_URL, tmp_path, _formats(), BatchOptions()
    )
    job = processor.get_job(job_id)
    job.status = BatchJobStatus.CANCELLED
    job.formats.clear()
    stored = processor.get_job(job_id)
    assert stored.status is BatchJobStatus.CREATED
    assert len(stored.formats) == 3