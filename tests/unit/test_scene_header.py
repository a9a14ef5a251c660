"""
Unit tests for scene header parsing and scene building.
"""

import pytest

from scenarist.models import EngineLine, SceneHeaderParts
from scenarist.parsers.scene_header import (
    MAX_HEADER_LINES,
    cleanup_remainder,
    extract_scene_header,
    format_scene_header,
    normalize_separators,
    parse_scene_header_line,
)
from scenarist.parsers.scenes import build_scenes


class TestParseSceneHeaderLine:
    """Test single-line heading parsing."""

    def test_full_heading(self):
        """Number, setting, time and location on one line."""
        parts = parse_scene_header_line("مشهد ٣ - داخلي - ليل - بيت أحمد")
        assert parts.scene_number == "مشهد 3"
        assert parts.interior
        assert not parts.exterior
        assert parts.time == "ليل"
        assert parts.location == "بيت أحمد"

    def test_bare_number(self):
        """A bare prefix leaves the other fields empty."""
        parts = parse_scene_header_line("مشهد 12")
        assert parts == SceneHeaderParts("مشهد 12")

    def test_abbreviated_prefix(self):
        """The short prefix normalizes to the full one."""
        assert parse_scene_header_line("م. 5").scene_number == "مشهد 5"

    def test_abbreviated_parts(self):
        """Dotted setting and time abbreviations are expanded."""
        parts = parse_scene_header_line("مشهد 2 - د. - ل.")
        assert parts.interior
        assert parts.time == "ليل"
        assert parts.location is None

    def test_dash_variants(self):
        """En and em dashes separate fields like hyphens."""
        parts = parse_scene_header_line("مشهد 4 — خارجي – نهار")
        assert parts.exterior
        assert parts.time == "نهار"
        assert parts.location is None

    def test_time_with_article(self):
        """Time words keep their article."""
        assert parse_scene_header_line("مشهد 1 - خارجي - الليل").time == "الليل"

    def test_photomontage(self):
        """The montage marker is a flag, not location text."""
        parts = parse_scene_header_line("مشهد 5 - خارجي - نهار (فوتو مونتاج)")
        assert parts.photomontage
        assert parts.exterior
        assert parts.location is None

    def test_not_a_heading(self):
        """Lines without the scene prefix are rejected."""
        assert parse_scene_header_line("يدخل أحمد.") is None
        assert parse_scene_header_line("") is None


class TestExtractSceneHeader:
    """Test multi-line heading parsing."""

    def test_continuation_lines(self):
        """Setting, location and leftover text each fill their field."""
        lines = ["مشهد 2", "خارجي - نهار", "حديقة المنزل", "يجري الأطفال"]
        parts, consumed = extract_scene_header(lines, 0)
        assert consumed == 4
        assert parts.exterior
        assert parts.time == "نهار"
        assert parts.location == "حديقة المنزل"
        assert parts.remainder == "يجري الأطفال"

    def test_blank_line_stops(self):
        """A blank line ends the heading."""
        parts, consumed = extract_scene_header(["مشهد 2", "داخلي", "", "المطبخ"], 0)
        assert consumed == 2
        assert parts.interior
        assert parts.location is None

    def test_next_prefix_stops(self):
        """Another scene prefix is not a continuation."""
        _parts, consumed = extract_scene_header(["مشهد 2", "مشهد 3"], 0)
        assert consumed == 1

    def test_line_limit(self):
        """At most MAX_HEADER_LINES lines are consumed."""
        lines = ["مشهد 2", "المطبخ", "سطر", "سطر", "سطر", "سطر", "سطر"]
        _parts, consumed = extract_scene_header(lines, 0)
        assert consumed == MAX_HEADER_LINES

    def test_start_offset(self):
        """Parsing can start in the middle of a document."""
        parts, consumed = extract_scene_header(["قطع", "مشهد 9", "المسجد"], 1)
        assert parts.scene_number == "مشهد 9"
        assert parts.location == "المسجد"
        assert consumed == 2

    @pytest.mark.parametrize("start", [0, 5, -1])
    def test_rejects_non_headings(self, start):
        """Non-heading lines and bad indices give None."""
        assert extract_scene_header(["أحمد:"], start) is None


class TestFormatting:
    """Test separator cleanup and rendering."""

    def test_normalize_separators(self):
        """Dashes fold and whitespace collapses."""
        assert normalize_separators("داخلي  —   ليل") == "داخلي - ليل"

    def test_cleanup_remainder(self):
        """Doubled and edge separators are dropped."""
        assert cleanup_remainder(" - - بيت أحمد - ") == "بيت أحمد"

    def test_format_scene_header(self):
        """Fields render in a fixed order."""
        parts = SceneHeaderParts(
            "مشهد 2", exterior=True, location="حديقة", time="نهار", photomontage=True
        )
        assert format_scene_header(parts) == "مشهد 2 - خارجي - حديقة - نهار (فوتو مونتاج)"

    def test_format_bare(self):
        """Only the number when nothing else is known."""
        assert format_scene_header(SceneHeaderParts("مشهد 1")) == "مشهد 1"


class TestBuildScenes:
    """Test grouping classified lines into scenes."""

    @pytest.fixture
    def classified(self):
        return [
            EngineLine("بسم الله الرحمن الرحيم", "basmala"),
            EngineLine("مشهد 1 - داخلي - ليل", "scene-header-top-line"),
            EngineLine("بيت أحمد", "scene-header-3"),
            EngineLine("يدخل أحمد.", "action"),
            EngineLine("قطع", "transition"),
            EngineLine("مشهد 2", "scene-header-top-line"),
            EngineLine("خارجي - نهار", "scene-header-2"),
            EngineLine("يجري الأطفال.", "action"),
        ]

    def test_scene_spans(self, classified):
        """Transitions and EOF close scenes; preamble is outside."""
        scenes = build_scenes(classified)
        assert [(s.start, s.end) for s in scenes] == [(1, 3), (5, 7)]

    def test_header_metadata(self, classified):
        """Continuation headings feed the scene fields."""
        first, second = build_scenes(classified)
        assert first.number == "مشهد 1"
        assert first.location == "بيت أحمد"
        assert first.time == "ليل"
        assert second.number == "مشهد 2"
        assert second.time == "نهار"
        assert second.location is None

    def test_header_closes_previous_scene(self):
        """A new heading ends the scene before it."""
        lines = [
            EngineLine("مشهد 1", "scene-header-top-line"),
            EngineLine("يدخل أحمد.", "action"),
            EngineLine("مشهد 2", "scene-header-top-line"),
        ]
        assert [(s.start, s.end) for s in build_scenes(lines)] == [(0, 1), (2, 2)]

    def test_unparsable_heading_still_opens_scene(self):
        """A heading the parser cannot read opens a scene without a number."""
        scenes = build_scenes([EngineLine("SCENE ONE", "scene-header-top-line")])
        assert len(scenes) == 1
        assert scenes[0].number is None

    def test_no_headings(self):
        """Without headings there are no scenes."""
        assert build_scenes([EngineLine("يدخل أحمد.", "action")]) == []
