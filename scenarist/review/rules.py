"""
Review rules for classified lines.

Each rule inspects one classified line in its neighbourhood and may
return an action: replace the type, flag an issue, or suggest a change.
Rules never raise; a rule that does not apply returns None.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal

from scenarist.classifiers.lexicon import ACTION_VERBS
from scenarist.classifiers.patterns import ARABIC_LETTER_PATTERN, CUE_COLONS
from scenarist.models import (
    ACTION,
    BASMALA,
    BLANK,
    CHARACTER,
    DIALOGUE,
    DIALOGUE_BLOCK_TYPES,
    PARENTHETICAL,
    SCENE_HEADER_TYPES,
    TRANSITION,
)
from scenarist.normalizers.text import starts_with_dash

ActionKind = Literal["replace", "flag", "suggest"]

RECENT_WINDOW = 3
LOW_CONFIDENCE = 0.7


@dataclass
class ReviewContext:
    """A classified line with the types around it.

    ``previous_types`` is in document order (nearest last) and
    ``next_types`` nearest first; blanks may appear in either and are
    skipped by the rules.
    """

    line: str
    current_type: str
    previous_types: list[str] = field(default_factory=list)
    next_types: list[str] = field(default_factory=list)
    index: int = 0
    confidence: float = 1.0  # 0.0 to 1.0

    def recent_types(self, count: int = RECENT_WINDOW) -> list[str]:
        """The last ``count`` non-blank previous types, oldest first."""
        non_blank = [t for t in self.previous_types if t and t != BLANK]
        return non_blank[-count:]

    @property
    def previous_type(self) -> str | None:
        recent = self.recent_types(1)
        return recent[0] if recent else None

    @property
    def next_type(self) -> str | None:
        for line_type in self.next_types:
            if line_type and line_type != BLANK:
                return line_type
        return None


@dataclass
class ReviewAction:
    """What a rule wants done with a line."""

    type: ActionKind
    rule: str
    message: str
    new_type: str | None = None
    confidence: float | None = None


class ReviewRule(ABC):
    """Abstract base for review rules."""

    name: str = "base"
    description: str = ""
    priority: int = 0  # higher runs first

    @abstractmethod
    def check(self, ctx: ReviewContext) -> ReviewAction | None:
        """Return an action for the line, or None if the rule does not apply."""
        pass

    def _action(self, kind: ActionKind, message: str, **kwargs) -> ReviewAction:
        return ReviewAction(type=kind, rule=self.name, message=message, **kwargs)


def _in_dialogue_context(ctx: ReviewContext) -> bool:
    return any(t in DIALOGUE_BLOCK_TYPES for t in ctx.recent_types())


# =============================================================================
# DEFAULT RULES
# =============================================================================


class CharacterFormatRule(ReviewRule):
    """Character cues are short Arabic names or end with a colon."""

    name = "character-format"
    description = "Character lines should have colons or be short Arabic names"
    priority = 10

    def check(self, ctx: ReviewContext) -> ReviewAction | None:
        if ctx.current_type != CHARACTER:
            return None
        line = ctx.line.strip()
        has_colon = any(colon in line for colon in CUE_COLONS)
        too_long = len(line.split()) > 3
        if not has_colon and (too_long or not ARABIC_LETTER_PATTERN.search(line)):
            return self._action("suggest", self.description)
        return None


class DialogueDashRule(ReviewRule):
    """A dash line with no dialogue nearby is stage direction."""

    name = "dialogue-dash-check"
    description = "Line starting with dash outside dialogue block should be action"
    priority = 9

    def check(self, ctx: ReviewContext) -> ReviewAction | None:
        if ctx.current_type != DIALOGUE or not starts_with_dash(ctx.line):
            return None
        if _in_dialogue_context(ctx):
            return None
        return self._action("replace", self.description, new_type=ACTION, confidence=0.9)


class ActionVerbRule(ReviewRule):
    name = "action-verb-check"
    description = "Line starting with action verb should be action"
    priority = 8

    def check(self, ctx: ReviewContext) -> ReviewAction | None:
        if ctx.current_type == ACTION:
            return None
        words = ctx.line.split()
        if words and words[0] in ACTION_VERBS:
            return self._action("replace", self.description, new_type=ACTION, confidence=0.85)
        return None


class ParentheticalContextRule(ReviewRule):
    name = "parenthetical-context"
    description = "Parenthetical outside dialogue block might be incorrect"
    priority = 7

    def check(self, ctx: ReviewContext) -> ReviewAction | None:
        if ctx.current_type == PARENTHETICAL and not _in_dialogue_context(ctx):
            return self._action("suggest", self.description)
        return None


class SceneHeaderPositionRule(ReviewRule):
    """Scene headers open the document or follow a transition."""

    name = "scene-header-position"
    description = "Scene header in unusual position"
    priority = 6

    def check(self, ctx: ReviewContext) -> ReviewAction | None:
        if ctx.current_type not in SCENE_HEADER_TYPES or ctx.index == 0:
            return None
        previous = ctx.previous_type
        if previous is None or previous in SCENE_HEADER_TYPES or previous in (TRANSITION, BASMALA):
            return None
        return self._action("flag", self.description)


class TransitionPositionRule(ReviewRule):
    """Transitions close a scene: a header or the document end follows."""

    name = "transition-position"
    description = "Transition should be at end of scene"
    priority = 5

    def check(self, ctx: ReviewContext) -> ReviewAction | None:
        if ctx.current_type != TRANSITION:
            return None
        following = ctx.next_type
        if following is None or following in SCENE_HEADER_TYPES:
            return None
        return self._action("suggest", self.description)


class LowConfidenceRule(ReviewRule):
    name = "low-confidence"
    description = "Low confidence classification"
    priority = 1

    def __init__(self, threshold: float = LOW_CONFIDENCE):
        self.threshold = threshold

    def check(self, ctx: ReviewContext) -> ReviewAction | None:
        if ctx.confidence < self.threshold:
            return self._action("flag", self.description)
        return None


def default_rules() -> list[ReviewRule]:
    """Fresh instances of the built-in rules."""
    return [
        CharacterFormatRule(),
        DialogueDashRule(),
        ActionVerbRule(),
        ParentheticalContextRule(),
        SceneHeaderPositionRule(),
        TransitionPositionRule(),
        LowConfidenceRule(),
    ]
