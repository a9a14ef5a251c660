"""
Scoring classifier.

Alternative to the fixed cascade: every candidate type is scored, the
scores are reweighted from user corrections, and the winner is checked
for doubt. Doubtful lines may be resolved by the smart fallback and are
flagged for review either way.

Pipeline per line:
1. Quick path for fixed shapes (basmala, scene header, transition,
   parenthetical): score 100, no doubt
2. Score character, dialogue, action and parenthetical
3. Cross-type adjustments (action verbs, action after a cue, long lines)
4. Adaptive reweighting by ``previous -> type``
5. Top-2 and doubt
6. Scene header continuation overrides (time/location, place)
7. Smart fallback when the line needs review
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import TYPE_CHECKING

from scenarist.classifiers.lexicon import (
    INTERIOR_EXTERIOR_PATTERN,
    KNOWN_PLACES_PATTERN,
    LOCATION_PREFIX_PATTERN,
    TIME_WORDS,
    is_action_verb_start,
    matches_action_start_pattern,
)
from scenarist.classifiers.patterns import (
    ends_with_cue_colon,
    is_basmala,
    is_parenthetical,
    is_scene_header,
    is_transition,
)
from scenarist.config import ScoringConfig
from scenarist.flow.state import get_dialogue_block_info, get_last_non_blank_type
from scenarist.models import (
    ACTION,
    BASMALA,
    BLANK,
    CHARACTER,
    DIALOGUE,
    FALLBACK_TYPE,
    PARENTHETICAL,
    SCENE_HEADER_1,
    SCENE_HEADER_2,
    SCENE_HEADER_3,
    SCENE_HEADER_TOP_LINE,
    TRANSITION,
    BatchClassificationResult,
    ClassificationResult,
    ClassificationScore,
    DoubtStatistics,
    LineContext,
    ReviewableLine,
)
from scenarist.normalizers.text import (
    has_sentence_punctuation,
    is_blank,
    normalize_line,
    normalize_name,
    split_lines,
)
from scenarist.scoring.context import build_line_context
from scenarist.scoring.doubt import (
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

if TYPE_CHECKING:
    from scenarist.classifiers.lexicon import ArabicLexicon
    from scenarist.memory.adaptive import AdaptiveClassificationSystem
    from scenarist.memory.document import DocumentMemory

logger = logging.getLogger(__name__)

# Types after which a time/location or place line continues the heading
HEADING_LEAD_TYPES = frozenset({SCENE_HEADER_TOP_LINE, SCENE_HEADER_1, SCENE_HEADER_2})
HEADING_TYPES = HEADING_LEAD_TYPES | {SCENE_HEADER_3}

PLACE_OVERRIDE_SCORE = 85.0
TIME_LOCATION_MIN_SCORE = 70.0
LONG_LINE_CHARS = 50
TOP_AMBIGUOUS_PAIRS = 5


def _has_time_token(normalized: str) -> bool:
    # Whole words only: "ظهر" must not match inside "يظهر"
    tokens = normalized.replace("-", " ").split()
    words = set(tokens) | {token.removeprefix("ال") for token in tokens}
    return any(word in words for word in TIME_WORDS)


def _quick_result(line_type: str, reason: str) -> ClassificationResult:
    return ClassificationResult(
        type=line_type,
        confidence="high",
        scores={line_type: ClassificationScore(100.0, "high", [reason])},
        context=LineContext(),
    )


def quick_classify(line: str) -> ClassificationResult | None:
    """Classify fixed-shape lines without scoring, or return None."""
    if is_basmala(line):
        return _quick_result(BASMALA, "basmala phrase")
    if is_scene_header(line):
        return _quick_result(SCENE_HEADER_TOP_LINE, "scene number prefix")
    if is_transition(line):
        return _quick_result(TRANSITION, "transition phrase")
    if is_parenthetical(line):
        return _quick_result(PARENTHETICAL, "wrapped in parentheses")
    return None


class ScoringClassifier:
    """Multi-factor line classifier with doubt detection.

    Holds references to the document memory, the adaptive system and the
    lexicon; it reads them while classifying and only writes to the memory
    when asked to learn.

    Usage:
        classifier = ScoringClassifier(memory=DocumentMemory())
        results = classifier.classify_batch_detailed(text)
        for line in get_reviewable_lines(results):
            print(line.line_index, line.current_type, line.doubt_score)
    """

    def __init__(
        self,
        *,
        config: ScoringConfig | None = None,
        memory: DocumentMemory | None = None,
        adaptive: AdaptiveClassificationSystem | None = None,
        lexicon: ArabicLexicon | None = None,
    ):
        """Initialize the classifier.

        Args:
            config: Thresholds (default ScoringConfig()).
            memory: Document memory for known names (optional).
            adaptive: Correction weights (optional).
            lexicon: Arabic dictionary for the name hint (optional).
        """
        self.config = config or ScoringConfig()
        self.memory = memory
        self.adaptive = adaptive
        self.lexicon = lexicon if self.config.use_dictionary else None

    def classify_with_scoring(
        self,
        line: str,
        index: int,
        all_lines: Sequence[str],
        previous_types: Sequence[str | None] | None = None,
        *,
        learn: bool = False,
    ) -> ClassificationResult:
        """Classify one line by scoring every candidate type.

        Args:
            line: The line to classify.
            index: Its position in ``all_lines``.
            all_lines: Every line of the document (used for context).
            previous_types: Types assigned to earlier lines.
            learn: Record the line in document memory when it wins as a
                character cue.

        Returns:
            ClassificationResult with scores, doubt and any fallback.
        """
        quick = quick_classify(line)
        if quick is not None:
            logger.debug("Line %d quick-classified as %s", index, quick.type)
            return quick

        previous_types = previous_types or []
        ctx = build_line_context(line, index, all_lines, previous_types, self.config.context_window)
        normalized = normalize_line(line)
        block_info = get_dialogue_block_info(previous_types, index)
        previous_type = get_last_non_blank_type(previous_types, index)

        character = score_as_character(line, normalized, ctx, self.memory, self.lexicon)
        dialogue = score_as_dialogue(line, normalized, ctx, self.memory, block_info)
        action = score_as_action(line, normalized, ctx, self.memory, block_info)
        parenthetical = score_as_parenthetical(line, normalized, ctx, block_info)

        verb_start = is_action_verb_start(normalized)
        if verb_start:
            action.score += 30
            action.confidence = "high"
            action.reasons.append("strong action verb start")

        if previous_type == CHARACTER and (verb_start or matches_action_start_pattern(normalized)):
            dialogue.score -= 55
            dialogue.reasons.append("action line after character")
            action.score += 25
            action.reasons.append("action line after character")

        if len(line) > LONG_LINE_CHARS and has_sentence_punctuation(normalized):
            action.score += 20
            action.reasons.append("long punctuated line")

        scores: dict[str, ClassificationScore] = {
            CHARACTER: character,
            DIALOGUE: dialogue,
            ACTION: action,
            PARENTHETICAL: parenthetical,
        }

        if self.adaptive is not None:
            for line_type, score in scores.items():
                score.score = self.adaptive.improve_classification_score(
                    line_type, previous_type or BLANK, line.strip(), score.score
                )

        top2 = extract_top2_candidates(scores)
        doubt, needs_review = calculate_doubt_score(scores, line, self.config)

        best_type = FALLBACK_TYPE
        best_score = 0.0
        for line_type, score in scores.items():
            if score.score > best_score:
                best_type, best_score = line_type, score.score

        best_type = self._apply_heading_overrides(best_type, line, normalized, ctx, previous_type, scores)

        fallback = None
        if needs_review and top2 is not None and best_type not in HEADING_TYPES:
            adjacent = all_lines[index + 1] if index + 1 < len(all_lines) else None
            if adjacent is not None and not adjacent.strip():
                adjacent = None
            decision = apply_smart_fallback(top2, ctx, previous_type, adjacent, line, self.config)
            if decision is not None and decision.fallback_type != best_type:
                decision.original_type = best_type
                fallback = decision
                logger.debug(
                    "Line %d fallback %s -> %s (%s)",
                    index,
                    best_type,
                    decision.fallback_type,
                    decision.reason,
                )
                best_type = decision.fallback_type

        if learn and self.memory is not None and best_type == CHARACTER:
            tier = "high" if ends_with_cue_colon(line) else "medium"
            self.memory.add_character(normalize_name(line), tier)

        return ClassificationResult(
            type=best_type,
            confidence=scores[best_type].confidence,
            scores=scores,
            context=ctx,
            doubt_score=doubt,
            needs_review=needs_review,
            top2_candidates=top2,
            fallback_applied=fallback,
        )

    def _apply_heading_overrides(
        self,
        best_type: str,
        line: str,
        normalized: str,
        ctx: LineContext,
        previous_type: str | None,
        scores: dict[str, ClassificationScore],
    ) -> str:
        """Turn lines that continue a scene heading into heading types."""
        if previous_type not in HEADING_LEAD_TYPES:
            return best_type

        if previous_type != SCENE_HEADER_2 and (
            INTERIOR_EXTERIOR_PATTERN.search(normalized) or _has_time_token(normalized)
        ):
            heading = score_as_scene_header(line, ctx)
            if heading.score >= TIME_LOCATION_MIN_SCORE:
                scores[SCENE_HEADER_2] = heading
                return SCENE_HEADER_2

        learned_place = self.memory is not None and self.memory.is_known_place(normalize_name(line))
        if learned_place or (
            best_type == CHARACTER
            and (KNOWN_PLACES_PATTERN.search(normalized) or LOCATION_PREFIX_PATTERN.match(normalized))
        ):
            existing = scores.get(SCENE_HEADER_3)
            if existing is None:
                scores[SCENE_HEADER_3] = ClassificationScore(
                    PLACE_OVERRIDE_SCORE, "high", ["known place after scene header"]
                )
            else:
                existing.score = max(existing.score, PLACE_OVERRIDE_SCORE)
                existing.reasons.append("known place after scene header")
            return SCENE_HEADER_3

        return best_type

    def classify_batch_detailed(
        self,
        text: str,
        use_context: bool = True,
        *,
        learn: bool = False,
    ) -> list[BatchClassificationResult]:
        """Classify every line of a document.

        Blank lines are typed ``blank``. With ``use_context=False`` every
        non-blank line is reported as medium-confidence ``action``.
        """
        lines = split_lines(text)
        results: list[BatchClassificationResult] = []
        previous_types: list[str] = []

        for index, raw_line in enumerate(lines):
            if is_blank(raw_line):
                results.append(BatchClassificationResult(text=raw_line, type=BLANK, confidence="high"))
                previous_types.append(BLANK)
                continue

            if not use_context:
                results.append(BatchClassificationResult(text=raw_line, type=ACTION, confidence="medium"))
                previous_types.append(ACTION)
                continue

            result = self.classify_with_scoring(raw_line, index, lines, previous_types, learn=learn)
            results.append(
                BatchClassificationResult(
                    text=raw_line,
                    type=result.type,
                    confidence=result.confidence,
                    doubt_score=result.doubt_score,
                    needs_review=result.needs_review,
                    top2_candidates=result.top2_candidates,
                    fallback_applied=result.fallback_applied,
                )
            )
            previous_types.append(result.type)

        flagged = sum(1 for r in results if r.needs_review)
        logger.debug("Classified %d lines, %d flagged for review", len(results), flagged)
        return results


# =============================================================================
# REVIEW HELPERS
# =============================================================================


def get_reviewable_lines(results: Sequence[BatchClassificationResult]) -> list[ReviewableLine]:
    """Lines flagged for review, with their top-2 candidates as suggestions."""
    return [
        ReviewableLine(
            line_index=index,
            text=result.text,
            current_type=result.type,
            doubt_score=result.doubt_score,
            suggested_types=list(result.top2_candidates) if result.top2_candidates else [],
            fallback_applied=result.fallback_applied,
        )
        for index, result in enumerate(results)
        if result.needs_review
    ]


def get_doubt_statistics(results: Sequence[BatchClassificationResult]) -> DoubtStatistics:
    """Summarize how many lines need review and which type pairs are confused.

    ``total_lines`` counts non-empty lines only; the percentage is rounded
    to the nearest integer. Pairs are reported as ``"a vs b"`` with the two
    types in alphabetical order, five most frequent first.
    """
    flagged = [r for r in results if r.needs_review]
    pairs: Counter[str] = Counter()
    for result in flagged:
        if result.top2_candidates:
            first, second = result.top2_candidates
            pairs[" vs ".join(sorted((first.type, second.type)))] += 1

    non_empty = sum(1 for r in results if r.text.strip())
    return DoubtStatistics(
        total_lines=non_empty,
        needs_review_count=len(flagged),
        needs_review_percentage=round(len(flagged) / max(1, non_empty) * 100),
        top_ambiguous_pairs=pairs.most_common(TOP_AMBIGUOUS_PAIRS),
    )
