"""
Configuration for Scenarist line classification.

All thresholds default to the values the classifier was tuned with.
Create a config only if you need to customize behavior.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from scenarist.exceptions import ConfigurationError


@dataclass
class ScoringConfig:
    """
    Configuration for the scoring classifier.

    Example:
        >>> config = EngineConfig(
        ...     strategy="scoring",
        ...     scoring=ScoringConfig(needs_review_threshold=50),
        ... )
    """

    # Doubt detection
    needs_review_threshold: float = 60.0  # doubt >= this flags the line
    score_tie_threshold: float = 5.0  # scores closer than this count as tied

    # Smart fallback is skipped when the top-2 gap reaches this
    fallback_max_gap: float = 40.0

    # Number of non-blank neighbours collected on each side
    context_window: int = 3

    # Consult the Arabic word list for name-vs-word hints
    use_dictionary: bool = True

    def __post_init__(self):
        """Validate configuration."""
        if not 0.0 <= self.needs_review_threshold <= 100.0:
            raise ConfigurationError(
                f"needs_review_threshold must be between 0 and 100, "
                f"got {self.needs_review_threshold}"
            )
        if self.score_tie_threshold < 0:
            raise ConfigurationError(
                f"score_tie_threshold must be >= 0, got {self.score_tie_threshold}"
            )
        if self.fallback_max_gap < 0:
            raise ConfigurationError(
                f"fallback_max_gap must be >= 0, got {self.fallback_max_gap}"
            )
        if self.context_window < 1:
            raise ConfigurationError(f"context_window must be >= 1, got {self.context_window}")


@dataclass
class MemoryConfig:
    """Configuration for the document-local name memory."""

    min_name_length: int = 2
    high_points: int = 2  # points added by a high-confidence observation
    medium_points: int = 1
    high_tier_at: int = 3  # points needed for the high tier

    # Optional path for persisting learned names between sessions
    persistence_path: Path | None = None

    def __post_init__(self):
        """Validate configuration."""
        if self.min_name_length < 1:
            raise ConfigurationError(f"min_name_length must be >= 1, got {self.min_name_length}")
        if self.high_points < 1 or self.medium_points < 1:
            raise ConfigurationError("observation points must be positive")
        if self.high_tier_at < 1:
            raise ConfigurationError(f"high_tier_at must be >= 1, got {self.high_tier_at}")


@dataclass
class AdaptiveConfig:
    """
    Configuration for learning from user corrections.

    Weights are multiplicative and unbounded: every recomputation
    multiplies the wrong transition by ``error_decay`` and the corrected
    one by ``correct_boost``.
    """

    error_decay: float = 0.7
    correct_boost: float = 1.3
    repeat_alert_threshold: int = 3  # signal once a pattern is seen more often than this

    # Optional path for persisting corrections between sessions
    persistence_path: Path | None = None

    def __post_init__(self):
        """Validate configuration."""
        if not 0.0 < self.error_decay <= 1.0:
            raise ConfigurationError(
                f"error_decay must be in (0, 1], got {self.error_decay}"
            )
        if self.correct_boost < 1.0:
            raise ConfigurationError(f"correct_boost must be >= 1, got {self.correct_boost}")
        if self.repeat_alert_threshold < 1:
            raise ConfigurationError(
                f"repeat_alert_threshold must be >= 1, got {self.repeat_alert_threshold}"
            )


@dataclass
class EngineConfig:
    """
    Configuration for the engine orchestrator.

    Example:
        >>> config = EngineConfig(strategy="scoring", apply_spacing=True)
        >>> engine = Engine(config=config)
    """

    # Which classifier strategy drives Engine.run()
    strategy: Literal["cascade", "scoring"] = "cascade"

    # Apply the blank-line spacing rules in Engine.format()
    apply_spacing: bool = True

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    adaptive: AdaptiveConfig = field(default_factory=AdaptiveConfig)

    def __post_init__(self):
        """Validate configuration."""
        valid_strategies = ("cascade", "scoring")
        if self.strategy not in valid_strategies:
            raise ConfigurationError(
                f"strategy must be one of {valid_strategies}, got {self.strategy!r}"
            )
