"""Tests for clip planning, naming and timecode parsing."""

import math
from pathlib import Path

import pytest

from splitz.errors import InvalidDurationError
from splitz.planner import (
    DEFAULT_EXTENSION,
    build_clip_plan,
    clip_filename,
    format_size,
    format_timecode,
    output_extension,
    parse_timecode,
    plan_clip_count,
    start_offset,
)


class TestPlanClipCount:
    @pytest.mark.parametrize(
        "total, clip, expected",
        [
            (125.0, 60.0, 3),
            (60.0, 60.0, 1),
            (59.9, 60.0, 1),
            (0.1, 300.0, 1),
            (3600.0, 300.0, 12),
            (3600.5, 300.0, 13),
        ],
    )
    def test_counts(self, total, clip, expected):
        assert plan_clip_count(total, clip) == expected

    @pytest.mark.parametrize("total, clip", [(1.1, 0.1), (7.3, 2.0), (1e6, 7.0), (0.001, 0.0007)])
    def test_matches_ceil_and_is_at_least_one(self, total, clip):
        count = plan_clip_count(total, clip)
        assert count == math.ceil(total / clip)
        assert count >= 1

    @pytest.mark.parametrize("clip", [0, -1.0, float("nan"), float("inf"), "abc", None, True])
    def test_rejects_bad_clip_duration(self, clip):
        with pytest.raises(InvalidDurationError):
            plan_clip_count(100.0, clip)

    @pytest.mark.parametrize("total", [0.0, -5.0, float("nan"), float("inf")])
    def test_rejects_bad_total_duration(self, total):
        with pytest.raises(InvalidDurationError):
            plan_clip_count(total, 60.0)


class TestStartOffset:
    @pytest.mark.parametrize("d", [0.5, 1.0, 60.0, 299.97])
    def test_first_clip_starts_at_zero(self, d):
        assert start_offset(1, d) == 0

    def test_later_clips(self):
        assert start_offset(2, 60.0) == 60.0
        assert start_offset(3, 60.0) == 120.0
        assert start_offset(10, 2.5) == 22.5

    def test_index_is_one_based(self):
        with pytest.raises(ValueError, match="1-based"):
            start_offset(0, 60.0)


class TestNaming:
    def test_zero_padded(self):
        assert clip_filename("movie_", 7, "", "mp4") == "movie_007.mp4"
        assert clip_filename("", 42, "_part", "mkv") == "042_part.mkv"
        assert clip_filename("a", 999, "b", "mov") == "a999b.mov"

    def test_lexicographic_order_matches_numeric(self):
        names = [clip_filename("x_", i, "", "mp4") for i in range(1, 1000)]
        assert sorted(names) == names

    def test_extension_from_input(self):
        assert output_extension(Path("clip.MKV")) == "MKV"
        assert output_extension("dir/archive.tar.webm") == "webm"

    def test_extension_fallback(self):
        assert output_extension(Path("noext")) == DEFAULT_EXTENSION
        assert output_extension(Path(".hidden")) == DEFAULT_EXTENSION


class TestBuildClipPlan:
    def test_scenario_125_by_60(self, tmp_path):
        plan = build_clip_plan(Path("talk.mov"), tmp_path, "talk_", "", 60.0, 125.0)
        assert [s.index for s in plan] == [1, 2, 3]
        assert [s.start_offset for s in plan] == [0.0, 60.0, 120.0]
        assert all(s.duration == 60.0 for s in plan)
        assert [s.output_path.name for s in plan] == ["talk_001.mov", "talk_002.mov", "talk_003.mov"]
        assert all(s.output_path.parent == tmp_path for s in plan)

    def test_exact_multiple_single_clip(self, tmp_path):
        plan = build_clip_plan(Path("a.mp4"), tmp_path, "", "", 60.0, 60.0)
        assert len(plan) == 1
        assert plan[0].start_offset == 0

    def test_deterministic(self, tmp_path):
        first = build_clip_plan(Path("a.mp4"), tmp_path, "p", "s", 30.0, 200.0)
        second = build_clip_plan(Path("a.mp4"), tmp_path, "p", "s", 30.0, 200.0)
        assert first == second


class TestTimecode:
    @pytest.mark.parametrize(
        "text, seconds",
        [
            ("00:05:00", 300.0),
            ("01:00:00", 3600.0),
            ("1:30", 90.0),
            ("45", 45.0),
            ("00:00:02.5", 2.5),
            (" 00:01:00 ", 60.0),
        ],
    )
    def test_parse(self, text, seconds):
        assert parse_timecode(text) == seconds

    @pytest.mark.parametrize("text", ["", "00:00:00", "abc", "1:2:3:4", "-5", "1::2"])
    def test_parse_rejects(self, text):
        with pytest.raises(InvalidDurationError):
            parse_timecode(text)

    def test_format(self):
        assert format_timecode(0) == "00:00:00"
        assert format_timecode(125.04) == "00:02:05"
        assert format_timecode(3661) == "01:01:01"


class TestFormatSize:
    @pytest.mark.parametrize(
        "num_bytes, label",
        [
            (0, "0 B"),
            (1000, "1000 B"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024 ** 3, "3.0 GB"),
            (2 * 1024 ** 4, "2.0 TB"),
        ],
    )
    def test_labels(self, num_bytes, label):
        assert format_size(num_bytes) == label
