"""
Blank-line spacing rules between classified lines.

Runs after classification. Consecutive blank lines are buffered and, when
the next non-blank line arrives, the rule for the ordered pair
(previous non-blank type, current type) decides what happens to them:

- True: keep exactly one blank separator (reuse a buffered one or add one)
- False: drop every buffered blank
- None: no rule, pass the buffered blanks through unchanged
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from scenarist.models import (
    ACTION,
    BASMALA,
    BLANK,
    CHARACTER,
    DIALOGUE,
    SCENE_HEADER_1,
    SCENE_HEADER_3,
    SCENE_HEADER_TOP_LINE,
    TRANSITION,
    EngineLine,
)
from scenarist.normalizers.text import is_blank

logger = logging.getLogger(__name__)

# =============================================================================
# RULE TABLE
# =============================================================================

SPACING_RULES: dict[tuple[str, str], bool] = {
    (BASMALA, SCENE_HEADER_1): True,
    (BASMALA, SCENE_HEADER_TOP_LINE): True,
    (SCENE_HEADER_3, ACTION): True,
    (ACTION, ACTION): True,
    (ACTION, CHARACTER): True,
    (CHARACTER, DIALOGUE): False,
    (DIALOGUE, CHARACTER): True,
    (DIALOGUE, ACTION): True,
    (DIALOGUE, TRANSITION): True,
    (ACTION, TRANSITION): True,
    (TRANSITION, SCENE_HEADER_1): True,
    (TRANSITION, SCENE_HEADER_TOP_LINE): True,
}

SCENE_HEADER_1_PATTERN = re.compile(r"^\s*(?:مشهد|م\.|scene)\s*[0-9٠-٩]+\s*$", re.IGNORECASE)


def get_enter_spacing_rule(prev_type: str, next_type: str) -> bool | None:
    """Return the spacing rule for an ordered pair of line types.

    Args:
        prev_type: Type of the previous non-blank line.
        next_type: Type of the line being placed.

    Returns:
        True to require one blank separator, False to forbid one, None when
        the table has no opinion. Any pair involving ``blank`` is None.

    Example:
        >>> get_enter_spacing_rule("character", "dialogue")
        False
        >>> get_enter_spacing_rule("dialogue", "character")
        True
    """
    if prev_type == BLANK or next_type == BLANK:
        return None
    return SPACING_RULES.get((prev_type, next_type))


def is_scene_header_1(line: str) -> bool:
    """True for a bare scene number line such as ``مشهد 3``."""
    return bool(SCENE_HEADER_1_PATTERN.match(line or ""))


# =============================================================================
# APPLICATION
# =============================================================================


def _is_blank_line(line: EngineLine) -> bool:
    return line.type == BLANK or is_blank(line.text)


def apply_enter_spacing_rules(lines: Iterable[EngineLine]) -> list[EngineLine]:
    """Insert or remove blank separators according to the rule table.

    Blank lines before the first non-blank line pass through unchanged,
    as do blank lines left over at the end of input. Synthesized separators
    have empty text and type ``blank``.

    Args:
        lines: Classified ``(text, type)`` pairs in document order.

    Returns:
        New list of lines with spacing normalized.
    """
    result: list[EngineLine] = []
    pending: list[EngineLine] = []
    prev_type: str | None = None
    inserted = dropped = 0

    for line in lines:
        line = EngineLine(*line)
        if _is_blank_line(line):
            pending.append(line)
            continue

        if prev_type is None:
            result.extend(pending)
        else:
            rule = get_enter_spacing_rule(prev_type, line.type)
            if rule is True:
                if pending:
                    result.append(pending[0])
                    dropped += len(pending) - 1
                else:
                    result.append(EngineLine("", BLANK))
                    inserted += 1
            elif rule is False:
                dropped += len(pending)
            else:
                result.extend(pending)

        pending = []
        result.append(line)
        prev_type = line.type

    result.extend(pending)

    if inserted or dropped:
        logger.debug("Spacing rules inserted %d and dropped %d blank lines", inserted, dropped)
    return result
