"""
Line context for the scoring classifier.

Collects up to ``window`` non-blank neighbours on each side of a line,
with their types where already known, plus a few shape statistics. The
scorers read this instead of re-scanning the document.
"""

from __future__ import annotations

from collections.abc import Sequence

from scenarist.models import BLANK, LineContext, LineStats
from scenarist.normalizers.text import (
    has_sentence_punctuation,
    is_blank,
    normalize_line,
    strip_leading_bullet,
    word_count,
)

UNKNOWN_TYPE = "unknown"
DEFAULT_WINDOW = 3


def build_line_context(
    line: str,
    index: int,
    all_lines: Sequence[str],
    previous_types: Sequence[str | None] | None = None,
    window: int = DEFAULT_WINDOW,
) -> LineContext:
    """Build the neighbour window and shape statistics for one line.

    Args:
        line: The line being classified.
        index: Its position in ``all_lines``.
        all_lines: Every line of the document.
        previous_types: Types assigned so far, aligned with ``all_lines``.
        window: Non-blank neighbours to collect on each side.

    Returns:
        LineContext with previous lines oldest first and next lines
        nearest first. ``next_line`` is the nearest non-blank line after
        the current one, even beyond the window.
    """
    previous_types = previous_types or []
    previous_lines: list[tuple[str, str]] = []
    next_lines: list[tuple[str, str]] = []
    next_line: str | None = None

    for i in range(index - 1, -1, -1):
        if len(previous_lines) >= window:
            break
        text = all_lines[i]
        line_type = previous_types[i] if i < len(previous_types) and previous_types[i] else UNKNOWN_TYPE
        if line_type == BLANK or is_blank(text):
            continue
        previous_lines.insert(0, (text, line_type))

    for i in range(index + 1, len(all_lines)):
        text = all_lines[i]
        if is_blank(text):
            continue
        if next_line is None:
            next_line = text
        next_lines.append((text, UNKNOWN_TYPE))
        if len(next_lines) >= window:
            break

    analysed = strip_leading_bullet(line)
    stats = LineStats(
        current_line_length=len(analysed),
        current_word_count=word_count(analysed),
        has_punctuation=has_sentence_punctuation(analysed),
    )
    if next_line is not None:
        stats.next_line_length = len(next_line)
        stats.next_word_count = word_count(normalize_line(next_line))
        stats.next_has_punctuation = has_sentence_punctuation(next_line)

    return LineContext(
        previous_lines=previous_lines,
        next_lines=next_lines,
        next_line=next_line,
        stats=stats,
    )
