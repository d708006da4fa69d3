#!/usr/bin/env python3
"""Generate a synthetic test video for trying out Splitz.

Produces a test-pattern video with a 440 Hz tone. The default length of
125 seconds splits into 60 s + 60 s + 5 s with ``--duration 00:01:00``.

    python scripts/generate_test_video.py tests/fixtures/synthetic.mp4 125
"""

import subprocess
import sys
from pathlib import Path


def generate_test_video(output: Path, seconds: float = 125.0) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", f"testsrc=size=320x240:rate=30:duration={seconds}",
        "-f", "lavfi", "-i", f"sine=frequency=440:duration={seconds}",
        "-c:v", "libx264",
        "-g", "30",  # keyframe every second so stream-copy cuts land close
        "-c:a", "aac",
        "-shortest",
        str(output),
    ]
    subprocess.run(cmd, check=True)
    print(f"Generated: {output} ({seconds}s)")


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic.mp4")
    length = float(sys.argv[2]) if len(sys.argv) > 2 else 125.0
    generate_test_video(out, length)
