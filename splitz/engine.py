"""Orchestrator — probes, plans and extracts the clips of a SplitJob."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from splitz import planner
from splitz.errors import (
    DirectoryError,
    ExtractionFailedError,
    InvalidJobError,
    ProbeFailedError,
    SplitCancelledError,
)
from splitz.ffutil import FFmpegTools, MediaToolRunner
from splitz.manifest import SplitJob, job_for
from splitz.models import ClipSpec, MediaInfo, SplitProgress

logger = logging.getLogger(__name__)


@dataclass
class SplitResult:
    """Outcome of a finished split.

    ``total_clips`` is the planned count; ``clips`` lists the files that were
    actually written, which is one shorter when the empty tail was dropped.
    """

    total_clips: int
    output_dir: Path
    clips: list[Path] = field(default_factory=list)
    skipped_tail: bool = False
    source: MediaInfo | None = None


def _is_empty(path: Path) -> bool:
    try:
        return path.stat().st_size == 0
    except FileNotFoundError:
        return True


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)


def _probe(tools: MediaToolRunner, path: Path, retries: int) -> MediaInfo:
    for attempt in range(retries + 1):
        try:
            return tools.probe(path)
        except ProbeFailedError as e:
            if attempt == retries:
                raise
            logger.warning("Probe of %s failed (attempt %d/%d): %s", path, attempt + 1, retries + 1, e)
    raise AssertionError("unreachable")


def _extract(
    tools: MediaToolRunner,
    input_path: Path,
    spec: ClipSpec,
    total: int,
    retries: int,
) -> bool:
    """Extract one clip. Returns False if it was the benign empty tail."""
    for attempt in range(retries + 1):
        try:
            tools.extract(input_path, spec.start_offset, spec.duration, spec.output_path)
            return True
        except ExtractionFailedError as e:
            # The last window may start at or past the end of the source;
            # ffmpeg then fails with nothing written.
            if spec.index == total and _is_empty(spec.output_path):
                logger.info("Clip %d is past the end of the source, skipping", spec.index)
                _discard(spec.output_path)
                return False
            if attempt == retries:
                _discard(spec.output_path)
                raise ExtractionFailedError(e.diagnostic, clip_index=spec.index) from e
            logger.warning(
                "Clip %d failed (attempt %d/%d), retrying", spec.index, attempt + 1, retries + 1
            )
    raise AssertionError("unreachable")


def _validate(job: SplitJob) -> float:
    # Path("") normalises to "."; neither names a media file.
    if job.input == Path(""):
        raise InvalidJobError("Input path is empty")
    if job.workers < 1:
        raise InvalidJobError(f"workers must be >= 1, got {job.workers}")
    if job.retries < 0:
        raise InvalidJobError(f"retries must be >= 0, got {job.retries}")
    return planner.validate_duration(job.clip_duration)


def _run_sequential(
    tools: MediaToolRunner,
    job: SplitJob,
    plan: list[ClipSpec],
    report: Callable[[int], None],
    cancel: threading.Event | None,
) -> list[bool]:
    done: list[bool] = []
    for spec in plan:
        if cancel is not None and cancel.is_set():
            raise SplitCancelledError(len(done), len(plan))
        done.append(_extract(tools, job.input, spec, len(plan), job.retries))
        report(len(done))
    return done


def _run_pooled(
    tools: MediaToolRunner,
    job: SplitJob,
    plan: list[ClipSpec],
    report: Callable[[int], None],
    cancel: threading.Event | None,
) -> list[bool]:
    """Run clips on a bounded pool.

    After a failure, only clips above the lowest failed index are skipped;
    everything below it still runs. The error raised is therefore the one
    the sequential loop would have hit first.
    """
    lock = threading.Lock()
    completed = 0
    first_failed = len(plan) + 1

    def work(spec: ClipSpec) -> bool | None:
        nonlocal completed, first_failed
        if cancel is not None and cancel.is_set():
            return None
        with lock:
            if spec.index > first_failed:
                return None
        try:
            written = _extract(tools, job.input, spec, len(plan), job.retries)
        except Exception:
            with lock:
                first_failed = min(first_failed, spec.index)
            raise
        with lock:
            completed += 1
            report(completed)
        return written

    with ThreadPoolExecutor(max_workers=job.workers) as pool:
        futures = [pool.submit(work, spec) for spec in plan]

    for future in futures:
        exc = future.exception()
        if exc is not None:
            raise exc

    results = [future.result() for future in futures]
    if None in results:
        raise SplitCancelledError(completed, len(plan))
    return results


def process(
    job: SplitJob,
    tools: MediaToolRunner | None = None,
    on_progress: Callable[[SplitProgress], None] | None = None,
    cancel: threading.Event | None = None,
) -> SplitResult:
    """Split ``job.input`` into clips of ``job.clip_duration`` seconds.

    Args:
        job: Validated split job.
        tools: Media tool backend; defaults to FFmpegTools from ``job.tools``.
        on_progress: Optional callback invoked after each clip completes.
        cancel: Optional event checked between clips.

    Fails fast: the first hard extraction error aborts the batch and no
    partial result is returned.
    """
    clip_duration = _validate(job)
    if tools is None:
        tools = FFmpegTools(ffmpeg=job.tools.ffmpeg, ffprobe=job.tools.ffprobe)

    info = _probe(tools, job.input, job.retries)
    logger.info("Probed %s: %.2fs, %d bytes", job.input, info.duration, info.size)

    plan = planner.build_clip_plan(
        job.input, job.output_dir, job.prefix, job.suffix, clip_duration, info.duration
    )
    logger.info("Splitting into %d clips of %ss", len(plan), clip_duration)

    try:
        job.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryError(job.output_dir, str(e)) from e

    def report(current: int) -> None:
        if on_progress:
            on_progress(SplitProgress.of(current, len(plan)))

    if job.workers > 1:
        written = _run_pooled(tools, job, plan, report, cancel)
    else:
        written = _run_sequential(tools, job, plan, report, cancel)

    clips = [spec.output_path for spec, ok in zip(plan, written) if ok]
    return SplitResult(
        total_clips=len(plan),
        output_dir=job.output_dir,
        clips=clips,
        skipped_tail=not all(written),
        source=info,
    )


def split(
    input_path: Path | str,
    output_dir: Path | str,
    prefix: str,
    suffix: str,
    clip_duration_seconds: float,
    tools: MediaToolRunner | None = None,
    on_progress: Callable[[SplitProgress], None] | None = None,
    cancel: threading.Event | None = None,
) -> int:
    """Split a file and return the planned clip count."""
    # Checked on the raw values, Path("") would silently become "."
    if not str(input_path).strip():
        raise InvalidJobError("Input path is empty")
    if not str(output_dir).strip():
        raise InvalidJobError("Output directory is empty")
    job = job_for(
        Path(input_path),
        clip_duration=clip_duration_seconds,
        output_dir=Path(output_dir),
        prefix=prefix,
        suffix=suffix,
    )
    return process(job, tools=tools, on_progress=on_progress, cancel=cancel).total_clips
