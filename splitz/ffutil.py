"""FFmpeg/ffprobe subprocess helpers."""

import logging
import math
import subprocess
from pathlib import Path
from typing import Protocol

from splitz.errors import (
    ExtractionFailedError,
    FileAccessError,
    MalformedOutputError,
    ProbeFailedError,
    ToolUnavailableError,
)
from splitz.models import MediaInfo

logger = logging.getLogger(__name__)


def format_seconds(value: float) -> str:
    """Render a seconds value for the ffmpeg command line (``60``, ``12.5``).

    Keeps full float precision so ``(i - 1) * d`` reaches ffmpeg unrounded.
    ffmpeg does not parse exponents, so tiny values are spelled out.
    """
    text = repr(float(value))
    if "e" in text or "E" in text:
        text = f"{value:.20f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def probe(input_path: Path, ffprobe: str = "ffprobe") -> MediaInfo:
    """Read the container duration via ffprobe and the size via stat()."""
    cmd = [
        ffprobe,
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(input_path),
    ]
    logger.debug("Running ffprobe: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ToolUnavailableError(ffprobe, str(e)) from e

    if result.returncode != 0:
        raise ProbeFailedError(input_path, result.stderr or f"exit code {result.returncode}")

    token = result.stdout.strip()
    try:
        duration = float(token)
    except ValueError:
        raise MalformedOutputError(ffprobe, token) from None
    # float() happily accepts "nan" and "inf"
    if not math.isfinite(duration) or duration < 0:
        raise MalformedOutputError(ffprobe, token)

    try:
        size = Path(input_path).stat().st_size
    except OSError as e:
        raise FileAccessError(input_path, str(e)) from e

    return MediaInfo(duration=duration, size=size)


def extract_clip(
    input_path: Path,
    start: float,
    duration: float,
    output_path: Path,
    ffmpeg: str = "ffmpeg",
) -> None:
    """Copy ``[start, start + duration)`` of *input_path* to *output_path*.

    Streams are copied without re-encoding, an existing output is
    overwritten and timestamps are shifted so the clip starts at zero.
    """
    cmd = [
        ffmpeg, "-y",
        "-ss", format_seconds(start),
        "-i", str(input_path),
        "-t", format_seconds(duration),
        "-c", "copy",
        "-avoid_negative_ts", "make_zero",
        str(output_path),
    ]
    logger.debug("Running ffmpeg: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ToolUnavailableError(ffmpeg, str(e)) from e

    if result.returncode != 0:
        raise ExtractionFailedError(result.stderr or f"exit code {result.returncode}")


def is_ffmpeg_available(ffmpeg: str = "ffmpeg") -> bool:
    """True if ``ffmpeg -version`` runs and exits cleanly. Never raises."""
    try:
        result = subprocess.run([ffmpeg, "-version"], capture_output=True, text=True)
    except (OSError, subprocess.SubprocessError):
        return False
    return result.returncode == 0


class MediaToolRunner(Protocol):
    """What the engine needs from the media tools."""

    def probe(self, path: Path) -> MediaInfo: ...

    def extract(
        self, input_path: Path, start: float, duration: float, output_path: Path
    ) -> None: ...

    def is_available(self) -> bool: ...


class FFmpegTools:
    """MediaToolRunner backed by the ffmpeg and ffprobe binaries."""

    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe") -> None:
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe

    def probe(self, path: Path) -> MediaInfo:
        return probe(path, ffprobe=self.ffprobe)

    def extract(
        self, input_path: Path, start: float, duration: float, output_path: Path
    ) -> None:
        extract_clip(input_path, start, duration, output_path, ffmpeg=self.ffmpeg)

    def is_available(self) -> bool:
        return is_ffmpeg_available(self.ffmpeg)
