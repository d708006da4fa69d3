"""Error taxonomy shared by the probe, planner, extractor and engine."""

from pathlib import Path


class SplitzError(RuntimeError):
    """Base class for every failure surfaced to a caller.

    ``code`` is a stable machine-readable identifier and ``status`` the HTTP
    status the web host answers with.
    """

    code = "splitz.error"
    status = 500


class ToolUnavailableError(SplitzError):
    """The ffmpeg/ffprobe binary could not be launched."""

    code = "splitz.tool_unavailable"
    status = 503

    def __init__(self, tool: str, reason: str = "") -> None:
        message = f"{tool} could not be started. Is FFmpeg installed and on PATH?"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.tool = tool


class ProbeFailedError(SplitzError):
    code = "splitz.probe_failed"
    status = 422

    def __init__(self, path: Path | str, diagnostic: str) -> None:
        super().__init__(f"ffprobe failed for {path}: {diagnostic.strip()}")
        self.path = Path(path)
        self.diagnostic = diagnostic


class ExtractionFailedError(SplitzError):
    """ffmpeg exited non-zero while copying a clip.

    ``clip_index`` is None when raised by the extractor itself; the engine
    re-raises with the index of the clip that failed.
    """

    code = "splitz.extraction_failed"
    status = 500

    def __init__(self, diagnostic: str, clip_index: int | None = None) -> None:
        if clip_index is None:
            message = f"ffmpeg failed: {diagnostic.strip()}"
        else:
            message = f"ffmpeg failed for clip {clip_index}: {diagnostic.strip()}"
        super().__init__(message)
        self.diagnostic = diagnostic
        self.clip_index = clip_index


class MalformedOutputError(SplitzError):
    """The tool ran but printed something we could not parse."""

    code = "splitz.malformed_output"
    status = 422

    def __init__(self, tool: str, output: str) -> None:
        super().__init__(f"Could not parse {tool} output: {output.strip()!r}")
        self.tool = tool
        self.output = output


class InvalidDurationError(SplitzError, ValueError):
    code = "splitz.invalid_duration"
    status = 400

    def __init__(self, value: object, name: str = "duration") -> None:
        super().__init__(f"Invalid {name}: {value!r} (must be a positive, finite number of seconds)")
        self.value = value


class InvalidJobError(SplitzError, ValueError):
    code = "splitz.invalid_job"
    status = 400


class FileAccessError(SplitzError):
    code = "splitz.file_access"
    status = 404

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Failed to read file info for {path}: {reason}")
        self.path = Path(path)


class DirectoryError(SplitzError):
    code = "splitz.directory"
    status = 500

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Failed to create output directory {path}: {reason}")
        self.path = Path(path)


class SplitCancelledError(SplitzError):
    code = "splitz.cancelled"
    status = 409

    def __init__(self, completed: int, total: int) -> None:
        super().__init__(f"Split cancelled after {completed} of {total} clips")
        self.completed = completed
        self.total = total
