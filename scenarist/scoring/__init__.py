"""
Scoring classifier with doubt detection.

- context: neighbour windows and shape statistics
- scorers: per-type 0-100 scores
- doubt: ambiguity measure, top-2 candidates and smart fallback
- classifier: ScoringClassifier and batch review helpers
"""

from scenarist.scoring.classifier import (
    ScoringClassifier,
    get_doubt_statistics,
    get_reviewable_lines,
    quick_classify,
)
from scenarist.scoring.context import build_line_context
from scenarist.scoring.doubt import (
    adjust_doubt_for_dash,
    apply_smart_fallback,
    calculate_doubt_score,
    extract_top2_candidates,
)
from scenarist.scoring.scorers import (
    score_as_action,
    score_as_character,
    score_as_dialogue,
    score_as_parenthetical,
    score_as_scene_header,
)

__all__ = [
    # Classifier
    "ScoringClassifier",
    "quick_classify",
    "get_reviewable_lines",
    "get_doubt_statistics",
    # Context
    "build_line_context",
    # Scorers
    "score_as_character",
    "score_as_dialogue",
    "score_as_action",
    "score_as_parenthetical",
    "score_as_scene_header",
    # Doubt
    "calculate_doubt_score",
    "adjust_doubt_for_dash",
    "extract_top2_candidates",
    "apply_smart_fallback",
]
