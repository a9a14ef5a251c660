"""
Scene header parsing.

Recovers the structured fields of an Arabic scene heading:

    مشهد 3 - داخلي - ليل
    بيت أحمد - المطبخ

becomes scene number "مشهد 3", interior, time "ليل" and location
"بيت أحمد - المطبخ". A heading may span several lines; continuation
lines are consumed until a blank line, another scene prefix, or the
line limit.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from scenarist.classifiers.patterns import SCENE_PREFIX_PATTERN
from scenarist.models import SceneHeaderParts
from scenarist.normalizers.text import CONTROL_MARK_PATTERN, is_blank, to_western_digits

logger = logging.getLogger(__name__)

# =============================================================================
# PATTERNS
# =============================================================================

MAX_HEADER_LINES = 5

INTERIOR_PART = r"(?:داخلي|د\.|interior|int\.)"
EXTERIOR_PART = r"(?:خارجي|خ\.|exterior|ext\.)"
INOUT_PART = rf"(?:{INTERIOR_PART}|{EXTERIOR_PART})"
TIME_PART = (
    r"(?:(?:ال)?(?:ليل|نهار|صباح|مساء|فجر|ظهر|عصر|مغرب|عشاء|غروب)"
    r"|ل\.|ن\.|morning|evening|day|night)"
)
HEADER_PART = rf"(?:{INOUT_PART}|{TIME_PART})"

# Whole-word matches; a dot-terminated abbreviation is its own boundary
INTERIOR_RE = re.compile(rf"(?<!\w){INTERIOR_PART}(?!\w)", re.IGNORECASE)
EXTERIOR_RE = re.compile(rf"(?<!\w){EXTERIOR_PART}(?!\w)", re.IGNORECASE)
TIME_RE = re.compile(rf"(?<!\w){TIME_PART}(?!\w)", re.IGNORECASE)

# A line made only of setting/time parts: "داخلي - ليل", "ليل", "د./ن."
HEADER_PARTS_ONLY_RE = re.compile(
    rf"^\s*{HEADER_PART}(?:\s*[-/&]\s*{HEADER_PART})*\s*$", re.IGNORECASE
)

PHOTOMONTAGE_RE = re.compile(r"[()]*\s*(?:فوتو\s*مونتاج|photomontage)\s*[()]*", re.IGNORECASE)

DASH_VARIANTS_RE = re.compile(r"[-–—]")
REPEATED_SEPARATOR_RE = re.compile(r"\s*-\s*(?:-\s*)+")
EDGE_SEPARATOR_RE = re.compile(r"^[\s\-:،,/&]+|[\s\-:،,/&]+$")

TIME_ABBREVIATIONS = {"ل.": "ليل", "ن.": "نهار"}


# =============================================================================
# HELPERS
# =============================================================================


def normalize_separators(text: str) -> str:
    """Fold dash variants to "-", drop control marks, collapse whitespace."""
    cleaned = CONTROL_MARK_PATTERN.sub("", text or "")
    cleaned = DASH_VARIANTS_RE.sub("-", cleaned)
    return " ".join(cleaned.split())


def cleanup_remainder(text: str) -> str:
    """Remove doubled and edge separators left after field extraction."""
    cleaned = REPEATED_SEPARATOR_RE.sub(" - ", normalize_separators(text))
    return EDGE_SEPARATOR_RE.sub("", cleaned).strip()


def _time_word(match: re.Match[str]) -> str:
    word = match.group(0)
    return TIME_ABBREVIATIONS.get(word, word)


def _absorb_header_parts(parts: SceneHeaderParts, text: str) -> None:
    """Set setting and time flags found in ``text``."""
    if INTERIOR_RE.search(text):
        parts.interior = True
    if EXTERIOR_RE.search(text):
        parts.exterior = True
    if parts.time is None:
        time_match = TIME_RE.search(text)
        if time_match:
            parts.time = _time_word(time_match)


# =============================================================================
# PARSING
# =============================================================================


def parse_scene_header_line(line: str) -> SceneHeaderParts | None:
    """Parse a single scene heading line.

    Returns:
        SceneHeaderParts, or None when the line has no scene prefix.

    Example:
        >>> parts = parse_scene_header_line("مشهد ٣ - داخلي - ليل - بيت أحمد")
        >>> parts.scene_number, parts.interior, parts.time, parts.location
        ('مشهد 3', True, 'ليل', 'بيت أحمد')
    """
    cleaned = normalize_separators(line)
    match = SCENE_PREFIX_PATTERN.match(cleaned)
    if not match:
        return None

    parts = SceneHeaderParts(scene_number=f"مشهد {to_western_digits(match.group(1))}")
    rest = match.group(2) or ""

    if PHOTOMONTAGE_RE.search(rest):
        parts.photomontage = True
        rest = PHOTOMONTAGE_RE.sub(" ", rest)

    _absorb_header_parts(parts, rest)

    location = INTERIOR_RE.sub(" ", rest)
    location = EXTERIOR_RE.sub(" ", location)
    location = TIME_RE.sub(" ", location)
    parts.location = cleanup_remainder(location) or None
    return parts


def extract_scene_header(
    lines: Sequence[str],
    start: int,
) -> tuple[SceneHeaderParts, int] | None:
    """Parse a heading that may continue over the following lines.

    Continuation lines fill the first missing field: a setting/time line
    sets the flags and time, the first free-text line becomes the
    location, a line carrying a time word sets a missing time, and
    anything else accumulates in ``remainder``.

    Args:
        lines: Document lines.
        start: Index of the scene prefix line.

    Returns:
        Tuple of (parts, consumed line count), or None when
        ``lines[start]`` is not a scene heading. At most
        ``MAX_HEADER_LINES`` lines are consumed.
    """
    if not 0 <= start < len(lines):
        return None
    parts = parse_scene_header_line(lines[start])
    if parts is None:
        return None

    consumed = 1
    for raw in lines[start + 1 :]:
        if consumed >= MAX_HEADER_LINES or is_blank(raw):
            break
        line = normalize_separators(raw)
        if SCENE_PREFIX_PATTERN.match(line):
            break
        consumed += 1

        if PHOTOMONTAGE_RE.search(line):
            parts.photomontage = True
            line = cleanup_remainder(PHOTOMONTAGE_RE.sub(" ", line))
            if not line:
                continue

        text = line[1:-1].strip() if line.startswith("(") and line.endswith(")") else line

        if HEADER_PARTS_ONLY_RE.match(text):
            _absorb_header_parts(parts, text)
        elif parts.location is None and parts.remainder is None:
            parts.location = cleanup_remainder(text) or None
        elif parts.time is None and TIME_RE.search(text):
            _absorb_header_parts(parts, text)
        else:
            parts.remainder = f"{parts.remainder} {text}" if parts.remainder else text

    logger.debug("Scene header %s spans %d line(s)", parts.scene_number, consumed)
    return parts, consumed


def format_scene_header(parts: SceneHeaderParts) -> str:
    """Render parts back to a single heading line.

    Example:
        >>> format_scene_header(SceneHeaderParts("مشهد 1", interior=True, time="ليل"))
        'مشهد 1 - داخلي - ليل'
    """
    elements = []
    if parts.interior:
        elements.append("داخلي")
    if parts.exterior:
        elements.append("خارجي")
    if parts.location:
        elements.append(parts.location)
    if parts.time:
        elements.append(parts.time)

    result = parts.scene_number
    if elements:
        result += " - " + " - ".join(elements)
    if parts.photomontage:
        result += " (فوتو مونتاج)"
    if parts.remainder:
        result += " " + parts.remainder
    return result
