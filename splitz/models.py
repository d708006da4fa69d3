"""Shared data types used across Splitz."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class MediaInfo:
    """Container duration (seconds) and file size (bytes) of a media file."""

    duration: float
    size: int


@dataclass(frozen=True)
class ClipSpec:
    """One planned clip: where it starts in the source and where it is written."""

    index: int
    start_offset: float
    duration: float
    output_path: Path


@dataclass
class SplitProgress:
    """Snapshot reported after each clip finishes."""

    current_clip: int
    total_clips: int
    percentage: float = 0.0

    @classmethod
    def of(cls, current_clip: int, total_clips: int) -> "SplitProgress":
        pct = current_clip / total_clips * 100 if total_clips else 0.0
        return cls(current_clip=current_clip, total_clips=total_clips, percentage=pct)
