"""Shared test fixtures."""

from pathlib import Path

import pytest

from splitz.errors import ExtractionFailedError, ProbeFailedError
from splitz.models import MediaInfo

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


class FakeTools:
    """In-memory MediaToolRunner.

    ``fail`` maps output filenames to the diagnostic ffmpeg should report.
    ``empty`` lists filenames written as zero bytes before failing, the way
    ffmpeg leaves a window that starts past the end of the source.
    """

    def __init__(
        self,
        duration: float = 125.0,
        size: int = 4096,
        fail: dict[str, str] | None = None,
        empty: set[str] | None = None,
        probe_error: Exception | None = None,
        probe_failures: int = 0,
        available: bool = True,
    ):
        self.duration = duration
        self.size = size
        self.fail = fail or {}
        self.empty = empty or set()
        self.probe_error = probe_error
        self.probe_failures = probe_failures
        self.available = available
        self.probe_calls: list[Path] = []
        self.calls: list[tuple[float, float, str]] = []

    def probe(self, path: Path) -> MediaInfo:
        self.probe_calls.append(path)
        if self.probe_error is not None:
            raise self.probe_error
        if len(self.probe_calls) <= self.probe_failures:
            raise ProbeFailedError(path, "Resource temporarily unavailable")
        return MediaInfo(duration=self.duration, size=self.size)

    def extract(self, input_path: Path, start: float, duration: float, output_path: Path) -> None:
        self.calls.append((start, duration, output_path.name))
        if output_path.name in self.empty:
            output_path.write_bytes(b"")
            raise ExtractionFailedError("Output file is empty, nothing was encoded")
        if output_path.name in self.fail:
            output_path.write_bytes(b"partial")
            raise ExtractionFailedError(self.fail[output_path.name])
        output_path.write_bytes(b"clip")

    def is_available(self) -> bool:
        return self.available


@pytest.fixture
def fake_tools() -> FakeTools:
    return FakeTools()
