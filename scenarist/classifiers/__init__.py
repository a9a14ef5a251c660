"""
Line classifiers.

- patterns: stateless predicates run by the cascade, plus loose shape
  checks used by the scorers
- lexicon: Arabic verb, place, time and cue word lists, and the
  pyspellchecker-backed ArabicLexicon
"""

from scenarist.classifiers.lexicon import (
    ACTION_VERBS,
    KNOWN_PLACES,
    TIME_WORDS,
    ArabicLexicon,
    contains_action_verb,
    is_action_verb_start,
    is_place_like,
    is_scene_header_start,
    is_transition_cue,
    matches_action_start_pattern,
)
from scenarist.classifiers.patterns import (
    SCENE_PREFIX_PATTERN,
    is_action,
    is_basmala,
    is_character,
    is_character_like,
    is_dialogue,
    is_likely_action,
    is_parenthetical,
    is_scene_header,
    is_transition,
)

__all__ = [
    # Cascade predicates
    "is_basmala",
    "is_scene_header",
    "is_transition",
    "is_parenthetical",
    "is_character",
    "is_dialogue",
    "is_action",
    "SCENE_PREFIX_PATTERN",
    # Shape checks
    "is_character_like",
    "is_likely_action",
    # Lexicon
    "ACTION_VERBS",
    "KNOWN_PLACES",
    "TIME_WORDS",
    "ArabicLexicon",
    "contains_action_verb",
    "is_action_verb_start",
    "is_place_like",
    "is_scene_header_start",
    "is_transition_cue",
    "matches_action_start_pattern",
]
