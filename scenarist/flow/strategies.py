"""
Interchangeable classification strategies.

The engine drives one strategy per document:
- CascadeStrategy: fixed pattern cascade, no context beyond prior types
- ScoringStrategy: multi-factor scoring with doubt detection

Both answer the same question (the type of line ``index`` given the types
already assigned) so either can be swapped in through EngineConfig.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

from scenarist.flow.cascade import classify_line

if TYPE_CHECKING:
    from scenarist.scoring.classifier import ScoringClassifier


class ClassificationStrategy(ABC):
    """Abstract base for line classification strategies."""

    name: str = "base"

    @abstractmethod
    def classify(
        self,
        line: str,
        index: int,
        all_lines: Sequence[str],
        previous_types: Sequence[str | None],
    ) -> str:
        """Return the type of ``line``.

        Must never raise for any input line; unmatched lines get a
        fallback type.
        """
        pass


class CascadeStrategy(ClassificationStrategy):
    """Fixed-priority pattern cascade."""

    name = "cascade"

    def classify(
        self,
        line: str,
        index: int,
        all_lines: Sequence[str],
        previous_types: Sequence[str | None],
    ) -> str:
        return classify_line(line, previous_types, index)


class ScoringStrategy(ClassificationStrategy):
    """Scoring classifier; keeps the last detailed result for inspection."""

    name = "scoring"

    def __init__(self, classifier: ScoringClassifier, learn: bool = False):
        """Initialize with a configured classifier.

        Args:
            classifier: Classifier holding memory, adaptive weights and lexicon.
            learn: Record winning character cues into document memory.
        """
        self.classifier = classifier
        self.learn = learn
        self.last_result = None

    def classify(
        self,
        line: str,
        index: int,
        all_lines: Sequence[str],
        previous_types: Sequence[str | None],
    ) -> str:
        result = self.classifier.classify_with_scoring(
            line, index, all_lines, previous_types, learn=self.learn
        )
        self.last_result = result
        return result.type
