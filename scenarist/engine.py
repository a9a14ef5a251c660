"""
Engine orchestrator.

The only top-level control loop: splits a document into lines, hands
each non-blank line to the configured strategy with the types assigned
so far, and passes blank lines through. Formatting then applies the
blank-line spacing rules and the scene builder groups the result.

    engine = Engine()
    lines = engine.format(text)
    for scene in engine.build_scenes(lines):
        print(scene.number, scene.location, scene.start, scene.end)

All mutable state (document memory, adaptive weights, the lexicon) lives
on an explicit EngineContext; there are no module-level singletons.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from scenarist.classifiers.lexicon import ArabicLexicon
from scenarist.config import EngineConfig
from scenarist.flow.cascade import get_fallback_type
from scenarist.flow.state import FlowState, get_last_non_blank_type
from scenarist.flow.strategies import CascadeStrategy, ClassificationStrategy, ScoringStrategy
from scenarist.memory.adaptive import AdaptiveClassificationSystem
from scenarist.memory.document import DocumentMemory
from scenarist.models import (
    BLANK,
    BatchClassificationResult,
    Confidence,
    EngineLine,
    SceneBlock,
)
from scenarist.normalizers.spacing import apply_enter_spacing_rules
from scenarist.normalizers.text import is_blank, split_lines
from scenarist.parsers.scenes import build_scenes
from scenarist.review.reviewer import AutoReviewer, ReviewResult
from scenarist.scoring.classifier import ScoringClassifier

logger = logging.getLogger(__name__)


# =============================================================================
# CONTEXT
# =============================================================================


@dataclass
class EngineContext:
    """
    Explicit state shared by one engine (or several engines on one document).

    Mutations made through the context methods are serialized by ``lock``.
    Classification itself only reads the memory and weights, except when
    a scoring engine is created with ``learn=True``.

    Attributes:
        config: Engine configuration.
        memory: Known character and place names.
        adaptive: Correction history and transition weights.
        lexicon: Arabic word list for the scorers' name hint.
    """

    config: EngineConfig = field(default_factory=EngineConfig)
    memory: DocumentMemory | None = None
    adaptive: AdaptiveClassificationSystem | None = None
    lexicon: ArabicLexicon | None = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.memory is None:
            self.memory = DocumentMemory(config=self.config.memory)
            self.memory.load()
        if self.adaptive is None:
            self.adaptive = AdaptiveClassificationSystem(config=self.config.adaptive)
        if self.lexicon is None:
            self.lexicon = ArabicLexicon(enabled=self.config.scoring.use_dictionary)

    def scoring_classifier(self) -> ScoringClassifier:
        """A scoring classifier wired to this context's state."""
        return ScoringClassifier(
            config=self.config.scoring,
            memory=self.memory,
            adaptive=self.adaptive,
            lexicon=self.lexicon,
        )

    def record_correction(
        self,
        line_text: str,
        original_type: str,
        corrected_type: str,
        previous_type: str | None = None,
    ) -> bool:
        """Record a user correction; True when an error keeps repeating."""
        with self.lock:
            return self.adaptive.record_correction(
                line_text, original_type, corrected_type, previous_type
            )

    def observe_character(self, name: str, confidence: Confidence = "medium") -> None:
        with self.lock:
            self.memory.add_character(name, confidence)

    def observe_place(self, name: str) -> None:
        with self.lock:
            self.memory.add_place(name)

    def reset(self) -> None:
        """Forget learned names, corrections and weights."""
        with self.lock:
            self.memory.clear()
            self.adaptive.reset()

    def save(self, memory_path: str | Path | None = None, corrections_path: str | Path | None = None) -> None:
        """
        Persist memory and corrections to their configured (or given) paths.

        Raises:
            PersistenceError: If a file cannot be written.
        """
        with self.lock:
            self.memory.save(memory_path)
            self.adaptive.save(corrections_path)


# =============================================================================
# ENGINE
# =============================================================================


class Engine:
    """Classifies whole documents line by line.

    Usage:
        engine = Engine(EngineConfig(strategy="scoring"))
        for text, line_type in engine.run(document_text):
            print(line_type, text)
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        context: EngineContext | None = None,
        strategy: ClassificationStrategy | None = None,
        learn: bool = False,
    ):
        """Initialize the engine.

        Args:
            config: Engine configuration (ignored when ``context`` is given).
            context: Shared state (default: a fresh context for ``config``).
            strategy: Strategy override (default: from ``config.strategy``).
            learn: For the scoring strategy, record winning character cues
                into document memory.
        """
        self.context = context or EngineContext(config=config or EngineConfig())
        self.config = self.context.config
        self.strategy = strategy or self._make_strategy(learn)
        self.reviewer = AutoReviewer()

    def _make_strategy(self, learn: bool) -> ClassificationStrategy:
        if self.config.strategy == "scoring":
            return ScoringStrategy(self.context.scoring_classifier(), learn=learn)
        return CascadeStrategy()

    def run(self, document_text: str) -> list[EngineLine]:
        """Classify every line of a document.

        Blank lines are typed ``blank`` and kept where they are.

        Returns:
            One ``(text, type)`` pair per input line, in order.
        """
        lines = split_lines(document_text)
        state = FlowState()
        output: list[EngineLine] = []
        pending: list[EngineLine] = []

        for index, raw_line in enumerate(lines):
            if is_blank(raw_line):
                pending.append(EngineLine(raw_line, BLANK))
                state.append(BLANK)
                continue

            output.extend(pending)
            pending.clear()

            line_type = self._classify_safely(raw_line, index, lines, state)
            state.append(line_type)
            output.append(EngineLine(raw_line, line_type))

        output.extend(pending)
        logger.debug("Engine (%s) classified %d lines", self.strategy.name, len(output))
        return output

    def _classify_safely(self, line: str, index: int, lines: list[str], state: FlowState) -> str:
        """Classify with the strategy, falling back if it fails."""
        try:
            return self.strategy.classify(line, index, lines, state.previous_types)
        except Exception as e:
            fallback = get_fallback_type()
            logger.warning(
                "Strategy %s failed on line %d, using %s: %s",
                self.strategy.name,
                index,
                fallback,
                e,
            )
            return fallback

    def format(self, document_text: str) -> list[EngineLine]:
        """Classify, then normalize blank lines between elements.

        Spacing is skipped when ``config.apply_spacing`` is False.
        """
        lines = self.run(document_text)
        if not self.config.apply_spacing:
            return lines
        return apply_enter_spacing_rules(lines)

    def format_text(self, document_text: str) -> str:
        """Formatted document as text."""
        return "\n".join(line.text for line in self.format(document_text))

    def build_scenes(self, lines: Sequence[EngineLine]) -> list[SceneBlock]:
        return build_scenes(lines)

    def classify_detailed(
        self,
        document_text: str,
        use_context: bool = True,
        learn: bool = False,
    ) -> list[BatchClassificationResult]:
        """Scoring results with doubt and review flags for every line."""
        classifier = self.context.scoring_classifier()
        return classifier.classify_batch_detailed(document_text, use_context, learn=learn)

    def review(self, lines: Sequence[EngineLine]) -> list[ReviewResult]:
        """Run the auto reviewer over classified lines."""
        return self.reviewer.review_lines(lines)

    def record_correction(self, lines: Sequence[EngineLine], index: int, corrected_type: str) -> bool:
        """Record that line ``index`` should have been ``corrected_type``.

        The previous type is taken from the nearest non-blank line before it.
        """
        line = lines[index]
        previous = get_last_non_blank_type([entry.type for entry in lines], index)
        return self.context.record_correction(line.text, line.type, corrected_type, previous)
