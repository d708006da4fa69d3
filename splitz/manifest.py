"""JSON manifest schema — the contract between CLI/API and engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from splitz.errors import InvalidJobError
from splitz.planner import parse_timecode, validate_duration

DEFAULT_CLIP_DURATION = "00:05:00"


@dataclass
class ToolConfig:
    """Names or paths of the external binaries."""

    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"


@dataclass
class SplitJob:
    """Top-level split request."""

    input: Path
    output_dir: Path
    clip_duration: float
    prefix: str = ""
    suffix: str = ""
    version: str = "1"
    workers: int = 1
    retries: int = 0
    tools: ToolConfig = field(default_factory=ToolConfig)


def default_prefix(input_path: Path) -> str:
    """``movie.mp4`` -> ``movie_``."""
    return f"{Path(input_path).stem}_"


def coerce_clip_duration(value: float | int | str) -> float:
    """Accept seconds as a number or a timecode string like ``00:05:00``."""
    if isinstance(value, str):
        return parse_timecode(value)
    return validate_duration(value)


def job_for(
    input_path: Path,
    clip_duration: float | int | str = DEFAULT_CLIP_DURATION,
    output_dir: Path | None = None,
    prefix: str | None = None,
    suffix: str = "",
    **kwargs,
) -> SplitJob:
    """Build a SplitJob, filling output dir and prefix from the input path."""
    input_path = Path(input_path)
    return SplitJob(
        input=input_path,
        output_dir=Path(output_dir) if output_dir is not None else input_path.parent,
        clip_duration=coerce_clip_duration(clip_duration),
        prefix=default_prefix(input_path) if prefix is None else prefix,
        suffix=suffix,
        **kwargs,
    )


def coerce_count(value: object, name: str) -> int:
    """Integer job setting such as ``workers``; bad input is an InvalidJobError."""
    if isinstance(value, bool):
        raise InvalidJobError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidJobError(f"{name} must be an integer, got {value!r}") from None


def load_manifest(path: str | Path) -> SplitJob:
    """Load and validate a split job from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if "input" not in data or "clip_duration" not in data:
        raise ValueError("Manifest must contain 'input' and 'clip_duration' fields")
    # Path("") would silently mean the current directory
    if not str(data["input"]).strip():
        raise InvalidJobError("Manifest 'input' is empty")
    if "output_dir" in data and not str(data["output_dir"]).strip():
        raise InvalidJobError("Manifest 'output_dir' is empty")

    tools = ToolConfig(**data["tools"]) if "tools" in data else ToolConfig()

    return job_for(
        Path(data["input"]),
        clip_duration=data["clip_duration"],
        output_dir=Path(data["output_dir"]) if "output_dir" in data else None,
        prefix=data.get("prefix"),
        suffix=data.get("suffix", ""),
        version=data.get("version", "1"),
        workers=coerce_count(data.get("workers", 1), "workers"),
        retries=coerce_count(data.get("retries", 0), "retries"),
        tools=tools,
    )
