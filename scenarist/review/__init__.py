"""
Rule-based review of classified lines.
"""

from scenarist.review.reviewer import AutoReviewer, ReviewResult, RuleStats, build_review_contexts
from scenarist.review.rules import (
    ActionVerbRule,
    CharacterFormatRule,
    DialogueDashRule,
    LowConfidenceRule,
    ParentheticalContextRule,
    ReviewAction,
    ReviewContext,
    ReviewRule,
    SceneHeaderPositionRule,
    TransitionPositionRule,
    default_rules,
)

__all__ = [
    # Reviewer
    "AutoReviewer",
    "ReviewResult",
    "RuleStats",
    "build_review_contexts",
    # Rules
    "ReviewRule",
    "ReviewContext",
    "ReviewAction",
    "default_rules",
    "CharacterFormatRule",
    "DialogueDashRule",
    "ActionVerbRule",
    "ParentheticalContextRule",
    "SceneHeaderPositionRule",
    "TransitionPositionRule",
    "LowConfidenceRule",
]
