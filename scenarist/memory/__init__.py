"""
Mutable per-document state consulted by the scoring classifier.

- DocumentMemory: character/place names with confidence tiers
- AdaptiveClassificationSystem: user corrections and transition weights
"""

from scenarist.memory.adaptive import (
    AdaptiveClassificationSystem,
    AdaptiveStatistics,
    CommonError,
    ErrorPattern,
    UserCorrection,
)
from scenarist.memory.document import DocumentMemory

__all__ = [
    "DocumentMemory",
    "AdaptiveClassificationSystem",
    "AdaptiveStatistics",
    "CommonError",
    "ErrorPattern",
    "UserCorrection",
]
