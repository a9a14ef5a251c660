"""
Classification flow: the type log, dialogue block tracking, the cascade
and the strategy interface the engine drives.
"""

from scenarist.flow.cascade import CASCADE, classify_line, get_fallback_type
from scenarist.flow.state import FlowState, get_dialogue_block_info, get_last_non_blank_type
from scenarist.flow.strategies import CascadeStrategy, ClassificationStrategy, ScoringStrategy

__all__ = [
    # State
    "FlowState",
    "get_dialogue_block_info",
    "get_last_non_blank_type",
    # Cascade
    "CASCADE",
    "classify_line",
    "get_fallback_type",
    # Strategies
    "ClassificationStrategy",
    "CascadeStrategy",
    "ScoringStrategy",
]
