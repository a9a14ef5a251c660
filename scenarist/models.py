"""
Data models for Scenarist.

Line types are plain strings drawn from a closed set (see ``LINE_TYPES``)
so they serialize to JSON and compare against user-supplied values without
conversion. The dataclasses below carry classification results between
the cascade, the scoring classifier, the spacing pass and the scene
builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, NamedTuple

# =============================================================================
# LINE TYPES
# =============================================================================

BASMALA = "basmala"
SCENE_HEADER_TOP_LINE = "scene-header-top-line"
SCENE_HEADER_1 = "scene-header-1"
SCENE_HEADER_2 = "scene-header-2"
SCENE_HEADER_3 = "scene-header-3"
TRANSITION = "transition"
PARENTHETICAL = "parenthetical"
CHARACTER = "character"
DIALOGUE = "dialogue"
ACTION = "action"
BLANK = "blank"

LineType = Literal[
    "basmala",
    "scene-header-top-line",
    "scene-header-1",
    "scene-header-2",
    "scene-header-3",
    "transition",
    "parenthetical",
    "character",
    "dialogue",
    "action",
    "blank",
]

LINE_TYPES: tuple[str, ...] = (
    BASMALA,
    SCENE_HEADER_TOP_LINE,
    SCENE_HEADER_1,
    SCENE_HEADER_2,
    SCENE_HEADER_3,
    TRANSITION,
    PARENTHETICAL,
    CHARACTER,
    DIALOGUE,
    ACTION,
    BLANK,
)

SCENE_HEADER_TYPES = frozenset(
    {SCENE_HEADER_TOP_LINE, SCENE_HEADER_1, SCENE_HEADER_2, SCENE_HEADER_3}
)

# Types that unconditionally end a dialogue block when met walking backward
BLOCK_BREAKER_TYPES = SCENE_HEADER_TYPES | {TRANSITION, BASMALA}

# Types that extend a dialogue block without resolving it
DIALOGUE_BLOCK_TYPES = frozenset({CHARACTER, DIALOGUE, PARENTHETICAL})

FALLBACK_TYPE = ACTION

Confidence = Literal["low", "medium", "high"]


def is_line_type(value: Any) -> bool:
    """Return True if value names one of the closed set of line types."""
    return isinstance(value, str) and value in LINE_TYPES


def confidence_for(score: float) -> Confidence:
    """Map a 0-100 score to a confidence tier."""
    if score >= 70:
        return "high"
    if score >= 40:
        return "medium"
    return "low"


# =============================================================================
# CLASSIFICATION
# =============================================================================


@dataclass(frozen=True)
class DialogueBlockInfo:
    """Whether a line sits inside a character's dialogue block.

    Recomputed for every line from the flow state; never cached.
    """

    is_in_dialogue_block: bool
    block_start_type: str | None = None
    distance_from_character: int = -1  # -1 when not in a block

    @classmethod
    def outside(cls) -> DialogueBlockInfo:
        """The "not in a dialogue block" value."""
        return cls(is_in_dialogue_block=False, block_start_type=None, distance_from_character=-1)


@dataclass
class ClassificationScore:
    """Score for one candidate type, with the reasons that produced it."""

    score: float
    confidence: Confidence
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"score": self.score, "confidence": self.confidence, "reasons": list(self.reasons)}


@dataclass
class CandidateType:
    """One of the two best-scoring types for a line."""

    type: str
    score: float
    confidence: Confidence
    reasons: list[str] = field(default_factory=list)


@dataclass
class FallbackDecision:
    """Record of a smart-fallback override."""

    original_type: str
    fallback_type: str
    reason: str


@dataclass
class LineStats:
    """Shape statistics for the current line and its next neighbour."""

    current_line_length: int = 0
    current_word_count: int = 0
    has_punctuation: bool = False
    next_line_length: int | None = None
    next_word_count: int | None = None
    next_has_punctuation: bool | None = None


@dataclass
class LineContext:
    """Window of non-blank neighbours around a line.

    ``previous_lines`` is ordered oldest first; ``next_lines`` nearest first.
    Each entry is a ``(text, type)`` pair; following lines have type
    ``"unknown"`` since they are not classified yet.
    """

    previous_lines: list[tuple[str, str]] = field(default_factory=list)
    next_lines: list[tuple[str, str]] = field(default_factory=list)
    next_line: str | None = None
    stats: LineStats = field(default_factory=LineStats)

    @property
    def previous(self) -> tuple[str, str] | None:
        """Nearest previous non-blank (text, type), if any."""
        return self.previous_lines[-1] if self.previous_lines else None

    @property
    def previous_type(self) -> str | None:
        prev = self.previous
        return prev[1] if prev else None


@dataclass
class ClassificationResult:
    """Full scoring result for a single line."""

    type: str
    confidence: Confidence
    scores: dict[str, ClassificationScore]
    context: LineContext
    doubt_score: float = 0.0
    needs_review: bool = False
    top2_candidates: tuple[CandidateType, CandidateType] | None = None
    fallback_applied: FallbackDecision | None = None


@dataclass
class BatchClassificationResult:
    """Per-line result of a batch classification pass."""

    text: str
    type: str
    confidence: Confidence
    doubt_score: float = 0.0
    needs_review: bool = False
    top2_candidates: tuple[CandidateType, CandidateType] | None = None
    fallback_applied: FallbackDecision | None = None


@dataclass
class ReviewableLine:
    """A line flagged for manual review, with the suggested alternatives."""

    line_index: int
    text: str
    current_type: str
    doubt_score: float
    suggested_types: list[CandidateType] = field(default_factory=list)
    fallback_applied: FallbackDecision | None = None


@dataclass
class DoubtStatistics:
    """Aggregate review statistics for a batch."""

    total_lines: int
    needs_review_count: int
    needs_review_percentage: int
    top_ambiguous_pairs: list[tuple[str, int]] = field(default_factory=list)


# =============================================================================
# ENGINE OUTPUT
# =============================================================================


class EngineLine(NamedTuple):
    """A classified line as emitted by the engine."""

    text: str
    type: str


@dataclass
class SceneHeaderParts:
    """Fields recovered from a (possibly multi-line) scene header.

    Optional fields stay None when the header does not resolve them.
    """

    scene_number: str
    interior: bool = False
    exterior: bool = False
    location: str | None = None
    time: str | None = None
    photomontage: bool = False
    remainder: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using the external field names."""
        return {
            "sceneNumber": self.scene_number,
            "interior": self.interior,
            "exterior": self.exterior,
            "location": self.location,
            "time": self.time,
            "photomontage": self.photomontage,
            "remainder": self.remainder,
        }


@dataclass
class SceneBlock:
    """A scene span over classified lines (inclusive line indices)."""

    start: int
    end: int | None = None
    number: str | None = None
    location: str | None = None
    time: str | None = None
    photomontage: bool = False
    remaining_action: str | None = None
