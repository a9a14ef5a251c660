"""
Normalizers for raw screenplay lines and classified output.

- text: diacritic and control-mark stripping, whitespace collapsing,
  digit folding and the shape helpers every classifier shares
- spacing: blank-separator rules applied after classification
"""

from scenarist.normalizers.spacing import (
    SPACING_RULES,
    apply_enter_spacing_rules,
    get_enter_spacing_rule,
    is_scene_header_1,
)
from scenarist.normalizers.text import (
    has_sentence_punctuation,
    is_blank,
    normalize_for_analysis,
    normalize_line,
    normalize_name,
    split_lines,
    starts_with_dash,
    strip_leading_bullet,
    strip_leading_dash,
    strip_tashkeel,
    to_western_digits,
    word_count,
)

__all__ = [
    # Line normalization
    "strip_tashkeel",
    "normalize_line",
    "normalize_for_analysis",
    "normalize_name",
    "to_western_digits",
    "split_lines",
    # Shape helpers
    "is_blank",
    "word_count",
    "has_sentence_punctuation",
    "starts_with_dash",
    "strip_leading_bullet",
    "strip_leading_dash",
    # Spacing
    "SPACING_RULES",
    "get_enter_spacing_rule",
    "apply_enter_spacing_rules",
    "is_scene_header_1",
]
