"""Clip planning — how many clips, where each starts, what each is called.

Everything here is pure: no subprocesses, no filesystem access.
"""

import math
import re
from pathlib import Path

from splitz.errors import InvalidDurationError
from splitz.models import ClipSpec

DEFAULT_EXTENSION = "mp4"

_TIMECODE_RE = re.compile(r"^\d+(?::\d+){0,2}(?:\.\d+)?$")


def validate_duration(value: float, name: str = "clip duration") -> float:
    """Return *value* as a float, or raise InvalidDurationError.

    Rejects non-numbers, NaN, infinities and anything <= 0.
    """
    if isinstance(value, bool):
        raise InvalidDurationError(value, name)
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise InvalidDurationError(value, name) from None
    if not math.isfinite(seconds) or seconds <= 0:
        raise InvalidDurationError(value, name)
    return seconds


def plan_clip_count(total_duration: float, clip_duration: float) -> int:
    """Number of clips needed to cover *total_duration*.

    A non-multiple tail still gets its own clip; the final window is allowed
    to run past the end of the source.
    """
    total = validate_duration(total_duration, "media duration")
    clip = validate_duration(clip_duration)
    return math.ceil(total / clip)


def start_offset(index: int, clip_duration: float) -> float:
    """Seek position of the 1-based clip *index*."""
    if index < 1:
        raise ValueError(f"Clip index is 1-based, got {index}")
    return (index - 1) * clip_duration


def clip_filename(prefix: str, index: int, suffix: str, extension: str) -> str:
    return f"{prefix}{index:03d}{suffix}.{extension}"


def output_extension(input_path: Path | str) -> str:
    """Extension of the input file without the dot, or DEFAULT_EXTENSION."""
    ext = Path(input_path).suffix.lstrip(".")
    return ext or DEFAULT_EXTENSION


def build_clip_plan(
    input_path: Path,
    output_dir: Path,
    prefix: str,
    suffix: str,
    clip_duration: float,
    total_duration: float,
) -> list[ClipSpec]:
    """Ordered ClipSpecs for splitting *input_path* into *output_dir*."""
    count = plan_clip_count(total_duration, clip_duration)
    extension = output_extension(input_path)
    return [
        ClipSpec(
            index=i,
            start_offset=start_offset(i, clip_duration),
            duration=clip_duration,
            output_path=Path(output_dir) / clip_filename(prefix, i, suffix, extension),
        )
        for i in range(1, count + 1)
    ]


def parse_timecode(text: str) -> float:
    """Parse ``HH:MM:SS``, ``MM:SS`` or plain seconds into seconds.

    The last field may carry a fraction (``00:01:30.5``). Raises
    InvalidDurationError for anything else, including a zero duration.
    """
    value = text.strip()
    if not _TIMECODE_RE.match(value):
        raise InvalidDurationError(text)

    seconds = 0.0
    for part in value.split(":"):
        seconds = seconds * 60 + float(part)
    return validate_duration(seconds)


def format_timecode(seconds: float) -> str:
    """Render seconds as ``HH:MM:SS`` (fractions are truncated)."""
    whole = int(seconds)
    h, rem = divmod(whole, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_size(num_bytes: int) -> str:
    """Human-readable file size (``0 B``, ``1.5 MB``) in powers of 1024."""
    size = float(num_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
