"""
Scenarist: classify the lines of Arabic screenplays.

Every line of a script gets one of a closed set of types (basmala, scene
header, transition, parenthetical, character, dialogue, action, blank),
either through a fixed pattern cascade or through a scoring classifier
that flags doubtful lines for review and learns from user corrections.

Example:
    >>> import scenarist
    >>> engine = scenarist.Engine()
    >>> [line.type for line in engine.run("بسم الله الرحمن الرحيم\\nمشهد 1\\nأحمد:\\nمرحباً")]
    ['basmala', 'scene-header-top-line', 'character', 'dialogue']

    >>> # Scoring with doubt detection
    >>> engine = scenarist.Engine(scenarist.EngineConfig(strategy="scoring"))
    >>> results = engine.classify_detailed(text)
    >>> scenarist.get_doubt_statistics(results).needs_review_percentage
"""

from scenarist.config import AdaptiveConfig, EngineConfig, MemoryConfig, ScoringConfig
from scenarist.editing import rename_character, replace_in_lines
from scenarist.engine import Engine, EngineContext
from scenarist.exceptions import ConfigurationError, PersistenceError, ScenaristError
from scenarist.flow import (
    CascadeStrategy,
    ClassificationStrategy,
    FlowState,
    ScoringStrategy,
    classify_line,
    get_dialogue_block_info,
)
from scenarist.memory import AdaptiveClassificationSystem, DocumentMemory
from scenarist.models import (
    # Line types
    ACTION,
    BASMALA,
    BLANK,
    CHARACTER,
    DIALOGUE,
    LINE_TYPES,
    PARENTHETICAL,
    SCENE_HEADER_1,
    SCENE_HEADER_2,
    SCENE_HEADER_3,
    SCENE_HEADER_TOP_LINE,
    TRANSITION,
    # Results
    BatchClassificationResult,
    CandidateType,
    ClassificationResult,
    ClassificationScore,
    DialogueBlockInfo,
    DoubtStatistics,
    EngineLine,
    FallbackDecision,
    LineContext,
    ReviewableLine,
    SceneBlock,
    SceneHeaderParts,
    is_line_type,
)
from scenarist.normalizers import apply_enter_spacing_rules, get_enter_spacing_rule
from scenarist.parsers import build_scenes, extract_scene_header, parse_scene_header_line
from scenarist.review import AutoReviewer, ReviewContext, ReviewResult, ReviewRule
from scenarist.scoring import ScoringClassifier, get_doubt_statistics, get_reviewable_lines

__version__ = "0.1.0"
__all__ = [
    # Main API
    "Engine",
    "EngineContext",
    # Configuration
    "EngineConfig",
    "ScoringConfig",
    "MemoryConfig",
    "AdaptiveConfig",
    # Line types
    "BASMALA",
    "SCENE_HEADER_TOP_LINE",
    "SCENE_HEADER_1",
    "SCENE_HEADER_2",
    "SCENE_HEADER_3",
    "TRANSITION",
    "PARENTHETICAL",
    "CHARACTER",
    "DIALOGUE",
    "ACTION",
    "BLANK",
    "LINE_TYPES",
    "is_line_type",
    # Classification
    "classify_line",
    "get_dialogue_block_info",
    "FlowState",
    "ClassificationStrategy",
    "CascadeStrategy",
    "ScoringStrategy",
    "ScoringClassifier",
    "get_reviewable_lines",
    "get_doubt_statistics",
    # Results
    "EngineLine",
    "DialogueBlockInfo",
    "ClassificationScore",
    "ClassificationResult",
    "BatchClassificationResult",
    "CandidateType",
    "FallbackDecision",
    "LineContext",
    "ReviewableLine",
    "DoubtStatistics",
    # Memory
    "DocumentMemory",
    "AdaptiveClassificationSystem",
    # Spacing
    "get_enter_spacing_rule",
    "apply_enter_spacing_rules",
    # Scenes
    "SceneHeaderParts",
    "SceneBlock",
    "parse_scene_header_line",
    "extract_scene_header",
    "build_scenes",
    # Review
    "AutoReviewer",
    "ReviewRule",
    "ReviewContext",
    "ReviewResult",
    # Editing
    "replace_in_lines",
    "rename_character",
    # Exceptions
    "ScenaristError",
    "ConfigurationError",
    "PersistenceError",
]
