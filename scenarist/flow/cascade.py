"""
Cascading line classifier.

Runs the pattern predicates in fixed priority order and returns the first
match, falling back to ``action``:

1. Basmala
2. Scene header (top line)
3. Transition
4. Parenthetical
5. Character (block aware)
6. Dialogue (block aware)
7. Action (dash outside a block)
8. Fallback: action

No scoring, no learning and no lookahead: the result depends only on the
line and the types assigned before it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from scenarist.classifiers.patterns import (
    is_action,
    is_basmala,
    is_character,
    is_dialogue,
    is_parenthetical,
    is_scene_header,
    is_transition,
)
from scenarist.flow.state import get_dialogue_block_info, get_last_non_blank_type
from scenarist.models import (
    ACTION,
    BASMALA,
    CHARACTER,
    DIALOGUE,
    FALLBACK_TYPE,
    PARENTHETICAL,
    SCENE_HEADER_TOP_LINE,
    TRANSITION,
    DialogueBlockInfo,
)

logger = logging.getLogger(__name__)

# (line, block_info, last_non_blank_type) -> bool
Predicate = Callable[[str, DialogueBlockInfo, "str | None"], bool]

CASCADE: tuple[tuple[str, Predicate], ...] = (
    (BASMALA, lambda line, _info, _last: is_basmala(line)),
    (SCENE_HEADER_TOP_LINE, lambda line, _info, _last: is_scene_header(line)),
    (TRANSITION, lambda line, _info, _last: is_transition(line)),
    (PARENTHETICAL, lambda line, _info, _last: is_parenthetical(line)),
    (CHARACTER, lambda line, info, last: is_character(line, info, last)),
    (DIALOGUE, lambda line, info, _last: is_dialogue(line, info)),
    (ACTION, lambda line, info, _last: is_action(line, info)),
)


def get_fallback_type() -> str:
    """Type assigned when no predicate matches."""
    return FALLBACK_TYPE


def classify_line(raw_line: str, previous_types: Sequence[str | None], index: int) -> str:
    """Classify one line with the fixed cascade.

    Args:
        raw_line: The line as it appears in the document.
        previous_types: Types assigned to the lines before it.
        index: Position of the line; normally ``len(previous_types)``.

    Returns:
        The first matching type, or ``action``.

    Example:
        >>> classify_line("أحمد:", ["basmala", "scene-header-top-line"], 2)
        'character'
    """
    block_info = get_dialogue_block_info(previous_types, index)
    last_type = get_last_non_blank_type(previous_types, index)

    for line_type, predicate in CASCADE:
        if predicate(raw_line, block_info, last_type):
            logger.debug("Line %d classified as %s", index, line_type)
            return line_type

    fallback = get_fallback_type()
    logger.debug("Line %d matched no pattern; falling back to %s", index, fallback)
    return fallback
