"""
Line normalization for Arabic screenplay text.

Pure functions, no state. Classifiers evaluate the raw (trimmed) line;
these helpers produce the cleaned form used for shape statistics, verb
matching and name lookups:

- strip_tashkeel: remove Arabic diacritics (harakat, tanween, dagger alif)
- normalize_line: strip diacritics and bidi/control marks, collapse whitespace
- normalize_for_analysis: additionally strip leading bullets and edge punctuation
- to_western_digits: fold Arabic-Indic and Eastern Arabic-Indic digits
"""

from __future__ import annotations

import re

# =============================================================================
# CONSTANTS
# =============================================================================

TASHKEEL_PATTERN = re.compile(r"[\u064B-\u065F\u0670]")

# LRM, RLM, ALM, BOM and tabs
CONTROL_MARK_PATTERN = re.compile(r"[\u200E\u200F\u061C\uFEFF\t]")

WHITESPACE_PATTERN = re.compile(r"\s+")

LEADING_BULLET_PATTERN = re.compile(
    r"^[\s\u200E\u200F\u061C\uFEFF]*[\u2022\u00B7\u2219\u22C5\u25CF\u25CB\u25E6\u25A0\u25A1\u25AA\u25AB\u25C6\u25C7]+\s*"
)

EDGE_PUNCTUATION_LEADING = re.compile(r"^[\-–—:،.()\[\]\n\r]+")
EDGE_PUNCTUATION_TRAILING = re.compile(r"[\-–—:،.()\[\]\n\r]+$")

# Sentence-final punctuation, Arabic question mark included
SENTENCE_PUNCTUATION_PATTERN = re.compile(r"[.!?؟…]|\.\.\.")

DASH_START_PATTERN = re.compile(r"^\s*[-–—−‒―]")
DASH_STRIP_PATTERN = re.compile(r"^\s*[-–—−‒―]\s*")

TRAILING_NAME_PUNCTUATION = re.compile(r"[:：\s]+$")

ARABIC_INDIC_DIGITS = str.maketrans("٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹", "01234567890123456789")


# =============================================================================
# NORMALIZATION
# =============================================================================


def strip_tashkeel(text: str) -> str:
    """Remove Arabic diacritics from text.

    Example:
        >>> strip_tashkeel("مرحباً")
        'مرحبا'
    """
    return TASHKEEL_PATTERN.sub("", text)


def normalize_line(text: str) -> str:
    """Strip diacritics and control marks and collapse whitespace.

    Args:
        text: Raw line text (may be None-ish empty).

    Returns:
        Cleaned, trimmed line.
    """
    cleaned = strip_tashkeel(text or "")
    cleaned = CONTROL_MARK_PATTERN.sub("", cleaned)
    return WHITESPACE_PATTERN.sub(" ", cleaned).strip()


def strip_leading_bullet(text: str) -> str:
    """Normalize and drop a leading bullet glyph, keeping punctuation."""
    return LEADING_BULLET_PATTERN.sub("", normalize_line(text)).strip()


def normalize_for_analysis(text: str) -> str:
    """Normalize and strip leading bullets plus edge punctuation.

    Used for name lookups and shape comparisons, where a trailing colon or
    a leading dash should not count as content.
    """
    cleaned = strip_leading_bullet(text)
    cleaned = EDGE_PUNCTUATION_LEADING.sub("", cleaned)
    cleaned = EDGE_PUNCTUATION_TRAILING.sub("", cleaned)
    return cleaned.strip()


def normalize_name(name: str) -> str:
    """Trim a character/place name and drop trailing colons and spaces."""
    return TRAILING_NAME_PUNCTUATION.sub("", (name or "").strip())


def to_western_digits(text: str) -> str:
    """Fold Arabic-Indic digits to ASCII digits.

    Example:
        >>> to_western_digits("مشهد ١٢")
        'مشهد 12'
    """
    return text.translate(ARABIC_INDIC_DIGITS)


# =============================================================================
# SHAPE HELPERS
# =============================================================================


def is_blank(line: str | None) -> bool:
    """True for empty or whitespace-only lines."""
    return not line or not line.strip()


def word_count(text: str) -> int:
    """Number of whitespace-separated words."""
    stripped = (text or "").strip()
    return len(stripped.split()) if stripped else 0


def has_sentence_punctuation(text: str) -> bool:
    """True if the text contains sentence-final punctuation."""
    return bool(SENTENCE_PUNCTUATION_PATTERN.search(text or ""))


def starts_with_dash(line: str) -> bool:
    """True if the line (after leading whitespace) starts with any dash."""
    return bool(DASH_START_PATTERN.match(line or ""))


def strip_leading_dash(line: str) -> str:
    """Remove a leading dash and the whitespace after it."""
    return DASH_STRIP_PATTERN.sub("", line or "").strip()


def split_lines(text: str) -> list[str]:
    """Split document text on LF or CRLF, keeping empty lines."""
    return re.split(r"\r?\n", text or "")
