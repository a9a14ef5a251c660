"""
Doubt detection and smart fallback.

Doubt is a 0-100 measure of how ambiguous a line's scores are: a small
gap between the two best types, a weak winner, ties and low confidence
all raise it. Lines at or above the review threshold are flagged, and a
small rule set over the adjacent lines may then swap the winner for the
runner-up.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from scenarist.classifiers.lexicon import VERB_PATTERN, is_scene_header_start, is_transition_cue
from scenarist.classifiers.patterns import ends_with_cue_colon
from scenarist.config import ScoringConfig
from scenarist.models import (
    ACTION,
    CHARACTER,
    DIALOGUE,
    PARENTHETICAL,
    CandidateType,
    ClassificationScore,
    FallbackDecision,
    LineContext,
)
from scenarist.normalizers.text import normalize_line, word_count

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

DASH_SPLIT_PATTERN = re.compile(r"[-–—]")

# (gap upper bound, doubt added), first match wins
GAP_PENALTIES: tuple[tuple[float, float], ...] = ((15, 50), (25, 30), (35, 15))

# (top score upper bound, doubt added), first match wins
LOW_SCORE_PENALTIES: tuple[tuple[float, float], ...] = ((40, 30), (55, 15))

TIE_PENALTY = 20
CONFIDENCE_PENALTIES = {"low": 20, "medium": 10, "high": 0}

MAX_DOUBT = 100.0


def _ranked(scores: Mapping[str, ClassificationScore]) -> list[tuple[str, ClassificationScore]]:
    # Stable sort keeps insertion order among equal scores
    return sorted(scores.items(), key=lambda item: item[1].score, reverse=True)


# =============================================================================
# DOUBT
# =============================================================================


def adjust_doubt_for_dash(text: str, current_doubt: float) -> float:
    """Shift doubt for lines containing a dash.

    Nothing after the dash lowers doubt by 10; a non-verb continuation
    (usually a place qualifier) lowers it by 15; an action verb after the
    dash raises it by 25.
    """
    if not DASH_SPLIT_PATTERN.search(text):
        return current_doubt

    parts = [part.strip() for part in DASH_SPLIT_PATTERN.split(text)]
    after_dash = " ".join(parts[1:]).strip()

    if not after_dash:
        return max(0.0, current_doubt - 10)
    if not VERB_PATTERN.search(after_dash):
        return max(0.0, current_doubt - 15)
    return current_doubt + 25


def calculate_doubt_score(
    scores: Mapping[str, ClassificationScore],
    line_text: str | None = None,
    config: ScoringConfig | None = None,
) -> tuple[float, bool]:
    """Compute the doubt score for a set of per-type scores.

    Args:
        scores: Scores keyed by line type.
        line_text: Raw line, enables the dash adjustment when given.
        config: Thresholds (defaults to ScoringConfig()).

    Returns:
        Tuple of (doubt score capped at 100, needs_review flag).

    Example:
        >>> scores = {
        ...     "action": ClassificationScore(50, "medium"),
        ...     "dialogue": ClassificationScore(48, "medium"),
        ... }
        >>> calculate_doubt_score(scores)
        (95.0, True)
    """
    config = config or ScoringConfig()
    ranked = _ranked(scores)
    if not ranked:
        return 0.0, False

    top_type, top = ranked[0]
    gap = top.score - ranked[1][1].score if len(ranked) > 1 else top.score

    doubt = 0.0
    for bound, penalty in GAP_PENALTIES:
        if gap < bound:
            doubt += penalty
            break

    for bound, penalty in LOW_SCORE_PENALTIES:
        if top.score < bound:
            doubt += penalty
            break

    ties = sum(1 for _, s in ranked if abs(s.score - top.score) < config.score_tie_threshold)
    if ties > 1:
        doubt += TIE_PENALTY

    doubt += CONFIDENCE_PENALTIES.get(top.confidence, 0)

    if line_text:
        doubt = adjust_doubt_for_dash(line_text, doubt)

    doubt = min(MAX_DOUBT, doubt)
    return doubt, doubt >= config.needs_review_threshold


def extract_top2_candidates(
    scores: Mapping[str, ClassificationScore],
) -> tuple[CandidateType, CandidateType] | None:
    """Return the two best-scoring types, best first, or None if fewer than two."""
    ranked = _ranked(scores)
    if len(ranked) < 2:
        return None
    first, second = ranked[0], ranked[1]
    return (
        CandidateType(first[0], first[1].score, first[1].confidence, list(first[1].reasons)),
        CandidateType(second[0], second[1].score, second[1].confidence, list(second[1].reasons)),
    )


# =============================================================================
# SMART FALLBACK
# =============================================================================


def _next_reads_as_speech(next_line: str | None) -> bool:
    if not next_line or is_scene_header_start(next_line) or is_transition_cue(next_line):
        return False
    return 1 < word_count(normalize_line(next_line)) <= 30


def apply_smart_fallback(
    top2: tuple[CandidateType, CandidateType],
    ctx: LineContext,
    previous_type: str | None,
    next_line: str | None,
    current_line: str,
    config: ScoringConfig | None = None,
) -> FallbackDecision | None:
    """Break a near-tie between the two best types using adjacent lines.

    Rules by candidate pair:

    - character vs action: character when the next line reads as speech,
      otherwise action
    - dialogue vs action: dialogue after a character, parenthetical or
      dialogue line, otherwise action
    - parenthetical vs action: parenthetical after a character or
      dialogue line, otherwise action
    - character vs dialogue: dialogue after a character, character when
      the line ends with a colon

    Returns:
        FallbackDecision naming the preferred type, or None when the gap
        reaches ``fallback_max_gap`` or no rule applies. ``original_type``
        is the top candidate; the caller decides whether to apply it.
    """
    config = config or ScoringConfig()
    first, second = top2
    if first.score - second.score >= config.fallback_max_gap:
        return None

    pair = tuple(sorted((first.type, second.type)))

    def decide(line_type: str, reason: str) -> FallbackDecision:
        return FallbackDecision(original_type=first.type, fallback_type=line_type, reason=reason)

    if pair == (ACTION, CHARACTER):
        if _next_reads_as_speech(next_line):
            return decide(CHARACTER, "next line reads as speech")
        return decide(ACTION, "no speech follows")

    if pair == (ACTION, DIALOGUE):
        if previous_type in (CHARACTER, PARENTHETICAL):
            return decide(DIALOGUE, "follows character or parenthetical")
        if previous_type == DIALOGUE:
            return decide(DIALOGUE, "continues dialogue")
        return decide(ACTION, "no dialogue context")

    if pair == (ACTION, PARENTHETICAL):
        if previous_type in (CHARACTER, DIALOGUE):
            return decide(PARENTHETICAL, "follows character or dialogue")
        return decide(ACTION, "outside dialogue context")

    if pair == (CHARACTER, DIALOGUE):
        if previous_type == CHARACTER:
            return decide(DIALOGUE, "follows character")
        if ends_with_cue_colon(current_line):
            return decide(CHARACTER, "ends with colon")

    return None
