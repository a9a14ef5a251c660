"""
Learning from user corrections.

Every correction is kept. After each new one the full set of error
patterns is recomputed, keyed by (previous type, wrongly assigned type),
and every pattern seen more than once reweights two transitions:

    "{previous} -> {wrong}"    *= error_decay   (0.7)
    "{previous} -> {correct}"  *= correct_boost (1.3)

The multiplication happens on every recomputation, so weights compound
and are unbounded. Treat them as relative multipliers, not probabilities.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from scenarist.config import AdaptiveConfig
from scenarist.exceptions import PersistenceError
from scenarist.models import BLANK

logger = logging.getLogger(__name__)

# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class UserCorrection:
    """One user correction of a line type."""

    original_type: str
    corrected_type: str
    previous_type: str
    line_text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    weight: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase snapshot shape."""
        return {
            "originalType": self.original_type,
            "correctedType": self.corrected_type,
            "context": {"previousType": self.previous_type, "lineText": self.line_text},
            "timestamp": self.timestamp.isoformat(),
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserCorrection:
        """Create from the camelCase snapshot shape.

        Raises:
            ValueError: On missing or mistyped fields.
        """
        if not isinstance(data, dict):
            raise ValueError(f"correction must be an object, got {type(data).__name__}")
        context = data.get("context") or {}
        original = data.get("originalType")
        corrected = data.get("correctedType")
        previous = context.get("previousType", BLANK) if isinstance(context, dict) else None
        text = context.get("lineText", "") if isinstance(context, dict) else None
        if not all(isinstance(v, str) for v in (original, corrected, previous, text)):
            raise ValueError(f"malformed correction: {data!r}")

        raw_timestamp = data.get("timestamp")
        timestamp = datetime.now(timezone.utc)
        if isinstance(raw_timestamp, str):
            timestamp = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))

        weight = data.get("weight", 1.0)
        if not isinstance(weight, (int, float)):
            raise ValueError(f"correction weight must be a number, got {weight!r}")

        return cls(
            original_type=original,
            corrected_type=corrected,
            previous_type=previous,
            line_text=text,
            timestamp=timestamp,
            weight=float(weight),
        )


@dataclass
class ErrorPattern:
    """A (previous type, wrong type) mistake seen more than once."""

    transition: str  # previous type
    wrong_type: str
    correct_type: str  # from the first correction with this key
    frequency: int = 0


@dataclass
class CommonError:
    pattern: str  # "{previous} ➜ {wrong}"
    frequency: int
    suggestion: str


@dataclass
class AdaptiveStatistics:
    total_corrections: int
    unique_patterns: int
    most_common_error: CommonError | None
    average_weight: float


# =============================================================================
# ADAPTIVE SYSTEM
# =============================================================================


def weight_key(previous_type: str, line_type: str) -> str:
    """Key into the pattern weight table."""
    return f"{previous_type} -> {line_type}"


@dataclass
class AdaptiveClassificationSystem:
    """
    Records corrections and turns repeated mistakes into score weights.

    Attributes:
        config: Decay/boost factors and the repeat alert threshold.
        corrections: Every recorded correction, oldest first.
        pattern_weights: ``"prev -> type"`` -> multiplier (default 1.0).

    Example:
        >>> adaptive = AdaptiveClassificationSystem()
        >>> for _ in range(4):
        ...     repeated = adaptive.record_correction("أحمد", "action", "character", "blank")
        >>> repeated
        True
        >>> adaptive.get_common_errors()[0].pattern
        'blank ➜ action'
    """

    config: AdaptiveConfig = field(default_factory=AdaptiveConfig)
    corrections: list[UserCorrection] = field(default_factory=list)
    pattern_weights: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Load persisted corrections when a path is configured."""
        path = self.config.persistence_path
        if path is not None and Path(path).exists():
            self.load(path)

    def record_correction(
        self,
        line_text: str,
        original_type: str,
        corrected_type: str,
        previous_type: str | None = None,
    ) -> bool:
        """Record a correction and update the pattern weights.

        Args:
            line_text: Text of the corrected line.
            original_type: Type the classifier assigned.
            corrected_type: Type the user chose.
            previous_type: Type of the previous non-blank line (``blank``
                when there is none).

        Returns:
            True when some error pattern has now been seen more often than
            ``repeat_alert_threshold``.
        """
        self.corrections.append(
            UserCorrection(
                original_type=original_type,
                corrected_type=corrected_type,
                previous_type=previous_type or BLANK,
                line_text=line_text,
            )
        )
        self._update_weights()
        return self._check_repeating_patterns()

    def _identify_error_patterns(self) -> list[ErrorPattern]:
        patterns: dict[str, ErrorPattern] = {}
        for correction in self.corrections:
            key = f"{correction.previous_type}|{correction.original_type}"
            if key not in patterns:
                patterns[key] = ErrorPattern(
                    transition=correction.previous_type,
                    wrong_type=correction.original_type,
                    correct_type=correction.corrected_type,
                )
            patterns[key].frequency += 1
        return [p for p in patterns.values() if p.frequency > 1]

    def _update_weights(self) -> None:
        for pattern in self._identify_error_patterns():
            wrong = weight_key(pattern.transition, pattern.wrong_type)
            right = weight_key(pattern.transition, pattern.correct_type)
            self.pattern_weights[wrong] = self.pattern_weights.get(wrong, 1.0) * self.config.error_decay
            self.pattern_weights[right] = self.pattern_weights.get(right, 1.0) * self.config.correct_boost

    def _check_repeating_patterns(self) -> bool:
        repeated = False
        for pattern in self._identify_error_patterns():
            if pattern.frequency > self.config.repeat_alert_threshold:
                logger.warning(
                    "Repeated classification error: %s -> %s seen %d times (correct: %s)",
                    pattern.transition,
                    pattern.wrong_type,
                    pattern.frequency,
                    pattern.correct_type,
                )
                repeated = True
        return repeated

    def improve_classification_score(
        self,
        line_type: str,
        previous_type: str | None,
        line_text: str,
        base_score: float,
    ) -> float:
        """Scale a score by the learned weight for ``previous -> type``."""
        return base_score * self.pattern_weights.get(weight_key(previous_type or BLANK, line_type), 1.0)

    def get_common_errors(self) -> list[CommonError]:
        """Error patterns seen more than once, most frequent first."""
        patterns = sorted(self._identify_error_patterns(), key=lambda p: p.frequency, reverse=True)
        return [
            CommonError(
                pattern=f"{p.transition} ➜ {p.wrong_type}",
                frequency=p.frequency,
                suggestion=f"should be: {p.correct_type}",
            )
            for p in patterns
        ]

    def get_correction_count(self) -> int:
        return len(self.corrections)

    def get_statistics(self) -> AdaptiveStatistics:
        common = self.get_common_errors()
        weights = list(self.pattern_weights.values())
        return AdaptiveStatistics(
            total_corrections=len(self.corrections),
            unique_patterns=len(self.pattern_weights),
            most_common_error=common[0] if common else None,
            average_weight=sum(weights) / len(weights) if weights else 1.0,
        )

    def reset(self) -> None:
        """Forget all corrections and weights."""
        self.corrections = []
        self.pattern_weights = {}
        logger.info("Reset adaptive classification system")

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def export_data(self) -> str:
        """Serialize corrections and weights to the JSON snapshot format."""
        data = {
            "corrections": [c.to_dict() for c in self.corrections],
            "weights": dict(self.pattern_weights),
            "exportedAt": datetime.now(timezone.utc).isoformat(),
        }
        return json.dumps(data, ensure_ascii=False, indent=2)

    def import_data(self, json_data: str) -> bool:
        """Replace corrections and weights with a JSON snapshot.

        The snapshot is fully parsed and validated before anything is
        replaced; on any error the current state is kept.

        Returns:
            True on success, False on malformed input.
        """
        try:
            data = json.loads(json_data)
            if not isinstance(data, dict):
                raise ValueError("snapshot must be a JSON object")

            corrections = self.corrections
            raw_corrections = data.get("corrections")
            if raw_corrections is not None:
                if not isinstance(raw_corrections, list):
                    raise ValueError("'corrections' must be a list")
                corrections = [UserCorrection.from_dict(c) for c in raw_corrections]

            weights = self.pattern_weights
            raw_weights = data.get("weights")
            if raw_weights is not None:
                if not isinstance(raw_weights, dict):
                    raise ValueError("'weights' must be an object")
                if not all(
                    isinstance(k, str) and isinstance(v, (int, float)) for k, v in raw_weights.items()
                ):
                    raise ValueError("'weights' must map strings to numbers")
                weights = {k: float(v) for k, v in raw_weights.items()}
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning("Failed to import adaptive data: %s", e)
            return False

        self.corrections = corrections
        self.pattern_weights = weights
        logger.info("Imported %d corrections", len(self.corrections))
        return True

    def save(self, path: str | Path | None = None) -> None:
        """
        Write the snapshot to disk.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        target = Path(path) if path is not None else self.config.persistence_path
        if target is None:
            logger.debug("No persistence path set; skipping save")
            return
        try:
            target = Path(target)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.export_data(), encoding="utf-8")
            logger.info("Saved %d corrections to %s", len(self.corrections), target)
        except OSError as e:
            logger.error("Failed to save corrections: %s", e)
            raise PersistenceError(f"Cannot write corrections to {target}: {e}") from e

    def load(self, path: str | Path | None = None) -> bool:
        """Load a snapshot from disk; False (state untouched) on failure."""
        source = Path(path) if path is not None else self.config.persistence_path
        if source is None:
            return False
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Failed to read corrections from %s: %s", source, e)
            return False
        return self.import_data(text)
