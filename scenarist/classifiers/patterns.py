"""
Pattern classifiers for single screenplay lines.

Each predicate looks at one trimmed line and answers yes or no. Empty
lines always answer no. Character, dialogue and action also take the
DialogueBlockInfo computed by the flow layer; none of them compute or
mutate state themselves.

Cascade order, most to least specific:
basmala, scene header, transition, parenthetical, character, dialogue, action.

The second half of the module holds looser shape checks the scorers use
when inspecting neighbouring lines.
"""

from __future__ import annotations

import re

from scenarist.models import CHARACTER, DialogueBlockInfo

# =============================================================================
# PATTERNS
# =============================================================================

BASMALA_PATTERN = re.compile(
    r"^\s*[\(\[\{]*\s*بسم\s+الله\s+الرحمن\s+الرحيم\s*[\)\]\}]*\s*$"
)

# Group 1 is the scene number (Western or Arabic-Indic), group 2 the remainder
SCENE_PREFIX_PATTERN = re.compile(
    r"^\s*(?:مشهد|م\.|scene)\s*([0-9٠-٩]+)\s*(?:[-–—:،]\s*)?(.*)$", re.IGNORECASE
)

TRANSITION_PATTERN = re.compile(
    r"^\s*(?:قطع|قطع\s+إلى|إلى|مزج|ذوبان|خارج\s+المشهد"
    r"|CUT TO:|FADE IN:|FADE OUT:|DISSOLVE TO:)\s*$",
    re.IGNORECASE,
)

PARENTHETICAL_PATTERN = re.compile(r"^\s*\(.*?\)\s*$")

ARABIC_LETTER_PATTERN = re.compile(r"[\u0600-\u06FF]")

CHARACTER_PATTERN = re.compile(
    r"^\s*(?:صوت\s+)?[\u0600-\u06FF][\u0600-\u06FF\s]{0,30}:?\s*$"
)

MAX_CHARACTER_WORDS = 7
MAX_DIALOGUE_DISTANCE = 3

DASH_START_PATTERN = re.compile(r"^\s*[-–—−‒―]")
ELLIPSIS_START_PATTERN = re.compile(r"^\s*(?:\.\.\.|…)")
QUOTE_START_PATTERN = re.compile(r"^\s*[\"«“]")

CUE_COLONS = (":", "：")


def _trimmed(line: str | None) -> str:
    return (line or "").strip()


def ends_with_cue_colon(line: str) -> bool:
    """True if the trimmed line ends with an ASCII or full-width colon."""
    return _trimmed(line).endswith(CUE_COLONS)


# =============================================================================
# CASCADE PREDICATES
# =============================================================================


def is_basmala(line: str) -> bool:
    """Match the opening invocation, optionally bracketed.

    Example:
        >>> is_basmala("{ بسم الله الرحمن الرحيم }")
        True
    """
    trimmed = _trimmed(line)
    return bool(trimmed) and bool(BASMALA_PATTERN.match(trimmed))


def is_scene_header(line: str) -> bool:
    """Match a numbered scene line: ``مشهد``, ``م.`` or ``scene`` plus a number."""
    trimmed = _trimmed(line)
    return bool(trimmed) and bool(SCENE_PREFIX_PATTERN.match(trimmed))


def is_transition(line: str) -> bool:
    """Match a whole-line transition from the closed cut/fade/dissolve list."""
    trimmed = _trimmed(line)
    return bool(trimmed) and bool(TRANSITION_PATTERN.match(trimmed))


def is_parenthetical(line: str) -> bool:
    """Match a line wrapped entirely in parentheses."""
    trimmed = _trimmed(line)
    return bool(trimmed) and bool(PARENTHETICAL_PATTERN.match(trimmed))


def is_character(
    line: str,
    block_info: DialogueBlockInfo,
    last_non_blank_type: str | None,
) -> bool:
    """Match a speaker cue.

    Requires Arabic letters, at most seven words and the cue shape
    (optional ``صوت`` prefix, letters, optional trailing colon).

    Inside a dialogue block a new cue is only accepted directly after
    another cue, and then only with its colon, so that ``أحمد:`` followed
    by a one-word reply still yields a cue/speech pair.
    """
    trimmed = _trimmed(line)
    if not trimmed:
        return False
    if not ARABIC_LETTER_PATTERN.search(trimmed):
        return False
    if len(trimmed.split()) > MAX_CHARACTER_WORDS:
        return False
    if block_info.is_in_dialogue_block:
        if last_non_blank_type != CHARACTER:
            return False
        if not ends_with_cue_colon(trimmed):
            return False
    return bool(CHARACTER_PATTERN.match(trimmed))


def is_dialogue(line: str, block_info: DialogueBlockInfo) -> bool:
    """Match speech inside a dialogue block.

    Accepts dash, ellipsis and quote openers, or any line within three
    entries of the block's character cue.
    """
    if not _trimmed(line) or not block_info.is_in_dialogue_block:
        return False
    if DASH_START_PATTERN.match(line):
        return True
    if ELLIPSIS_START_PATTERN.match(line):
        return True
    if QUOTE_START_PATTERN.match(line):
        return True
    return 0 < block_info.distance_from_character <= MAX_DIALOGUE_DISTANCE


def is_action(line: str, block_info: DialogueBlockInfo) -> bool:
    """Match dash-led lines outside a dialogue block.

    A dash inside a block belongs to dialogue; lines without a dash are
    left to the fallback.
    """
    if not _trimmed(line):
        return False
    if DASH_START_PATTERN.match(line):
        return not block_info.is_in_dialogue_block
    return False


# =============================================================================
# SHAPE CHECKS (scoring helpers)
# =============================================================================

NAME_LETTERS_PATTERN = re.compile(
    r"^[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFFa-zA-Z\s]+$"
)
ARABIC_ONLY_PATTERN = re.compile(
    r"^[\s\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF:：]+$"
)
TRAILING_CUE_PATTERN = re.compile(r"[:：\s]+$")


def is_character_like(line: str) -> bool:
    """Loose name shape: 1-20 letters once the trailing colon is removed."""
    name = TRAILING_CUE_PATTERN.sub("", _trimmed(line))
    if not 1 <= len(name) <= 20:
        return False
    return bool(NAME_LETTERS_PATTERN.match(name))


def is_likely_action(line: str) -> bool:
    """Loose action shape: longer than ten characters and not a short cue."""
    trimmed = _trimmed(line)
    if not trimmed:
        return False
    if len(trimmed) <= 20 and trimmed.endswith(CUE_COLONS):
        return False
    return len(trimmed) > 10


def is_arabic_only(line: str) -> bool:
    return bool(ARABIC_ONLY_PATTERN.match(_trimmed(line)))
