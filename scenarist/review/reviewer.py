"""
Rule-based automatic reviewer.

Runs the enabled review rules over classified lines, highest priority
first. A ``replace`` action changes the reviewed type (later replacements
win over earlier ones only if they also fire), ``flag`` records an issue
and ``suggest`` records a suggestion. Reviewing never changes the
classifier's own state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from scenarist.models import EngineLine
from scenarist.review.rules import ReviewAction, ReviewContext, ReviewRule, default_rules

logger = logging.getLogger(__name__)


@dataclass
class ReviewResult:
    """Outcome of reviewing one line."""

    original_type: str
    reviewed_type: str
    actions: list[ReviewAction] = field(default_factory=list)
    confidence: float = 1.0
    issues: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.reviewed_type != self.original_type


@dataclass
class RuleStats:
    total: int
    enabled: int
    disabled: int


class AutoReviewer:
    """Applies review rules to classified lines.

    Usage:
        reviewer = AutoReviewer()
        reviewer.disable_rule("low-confidence")
        for result in reviewer.review_lines(engine.run(text)):
            if result.issues:
                print(result.issues)
    """

    def __init__(self, rules: list[ReviewRule] | None = None):
        """Initialize with rules (default: the built-in set, all enabled)."""
        self.rules: list[ReviewRule] = rules if rules is not None else default_rules()
        self.enabled: set[str] = {rule.name for rule in self.rules}

    # -------------------------------------------------------------------------
    # Rule management
    # -------------------------------------------------------------------------

    def add_rule(self, rule: ReviewRule, enabled: bool = True) -> None:
        self.rules.append(rule)
        if enabled:
            self.enabled.add(rule.name)

    def enable_rule(self, name: str) -> None:
        self.enabled.add(name)

    def disable_rule(self, name: str) -> None:
        self.enabled.discard(name)

    def enable_all_rules(self) -> None:
        self.enabled = {rule.name for rule in self.rules}

    def disable_all_rules(self) -> None:
        self.enabled.clear()

    def get_rule_stats(self) -> RuleStats:
        total = len(self.rules)
        enabled = sum(1 for rule in self.rules if rule.name in self.enabled)
        return RuleStats(total=total, enabled=enabled, disabled=total - enabled)

    # -------------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------------

    def review(self, ctx: ReviewContext) -> ReviewResult:
        """Review one classified line."""
        result = ReviewResult(
            original_type=ctx.current_type,
            reviewed_type=ctx.current_type,
            confidence=ctx.confidence,
        )

        active = sorted(
            (rule for rule in self.rules if rule.name in self.enabled),
            key=lambda rule: rule.priority,
            reverse=True,
        )
        for rule in active:
            action = self._check_safely(rule, ctx)
            if action is None:
                continue
            result.actions.append(action)
            if action.type == "replace" and action.new_type:
                result.reviewed_type = action.new_type
                if action.confidence is not None:
                    result.confidence = action.confidence
            elif action.type == "flag":
                result.issues.append(action.message or f"Flagged by rule: {rule.name}")
            elif action.type == "suggest":
                result.issues.append(f"Suggestion: {action.message or rule.name}")

        if result.changed:
            logger.debug(
                "Line %d reviewed %s -> %s",
                ctx.index,
                result.original_type,
                result.reviewed_type,
            )
        return result

    def review_batch(self, contexts: Sequence[ReviewContext]) -> list[ReviewResult]:
        return [self.review(ctx) for ctx in contexts]

    def review_lines(
        self,
        lines: Sequence[EngineLine],
        confidences: Sequence[float] | None = None,
    ) -> list[ReviewResult]:
        """Review engine output, building each line's context from its neighbours."""
        return self.review_batch(build_review_contexts(lines, confidences))

    def _check_safely(self, rule: ReviewRule, ctx: ReviewContext) -> ReviewAction | None:
        """Run a rule, skipping it if it fails."""
        try:
            return rule.check(ctx)
        except Exception as e:
            logger.warning("Review rule %s failed on line %d: %s", rule.name, ctx.index, e)
            return None


def build_review_contexts(
    lines: Sequence[EngineLine],
    confidences: Sequence[float] | None = None,
) -> list[ReviewContext]:
    """Review contexts for every line of engine output.

    Args:
        lines: ``(text, type)`` pairs in document order.
        confidences: Optional per-line confidence (0.0 to 1.0), aligned
            with ``lines``. Lines without one get 1.0.
    """
    types = [line.type for line in lines]
    contexts = []
    for index, line in enumerate(lines):
        confidence = 1.0
        if confidences is not None and index < len(confidences):
            confidence = confidences[index]
        contexts.append(
            ReviewContext(
                line=line.text,
                current_type=line.type,
                previous_types=types[:index],
                next_types=types[index + 1 :],
                index=index,
                confidence=confidence,
            )
        )
    return contexts
