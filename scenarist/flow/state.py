"""
Flow state and dialogue block tracking.

FlowState is the append-only log of types assigned so far, one entry per
processed line (blanks included). Dialogue block membership is derived
from it on demand by scanning backward from the current index; nothing
is cached between lines.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from scenarist.models import (
    ACTION,
    BLANK,
    BLOCK_BREAKER_TYPES,
    CHARACTER,
    DIALOGUE_BLOCK_TYPES,
    DialogueBlockInfo,
)

logger = logging.getLogger(__name__)


def get_dialogue_block_info(
    previous_types: Sequence[str | None],
    current_index: int,
) -> DialogueBlockInfo:
    """Decide whether the line at ``current_index`` sits in a dialogue block.

    Walks ``previous_types[current_index - 1]`` down to index 0, skipping
    blanks and missing entries. The first resolving type wins:

    - a breaker (scene header, transition, basmala) or ``action``: outside
    - ``character``: inside, with ``distance = current_index - i``
    - ``dialogue`` / ``parenthetical``: keep scanning

    Reaching the start of history means outside, distance -1.

    Args:
        previous_types: Types assigned to earlier lines.
        current_index: Index of the line being classified.

    Returns:
        DialogueBlockInfo for the current line.
    """
    start = min(current_index, len(previous_types)) - 1
    for i in range(start, -1, -1):
        line_type = previous_types[i]
        if line_type is None or line_type == BLANK:
            continue
        if line_type in BLOCK_BREAKER_TYPES:
            return DialogueBlockInfo.outside()
        if line_type == CHARACTER:
            return DialogueBlockInfo(
                is_in_dialogue_block=True,
                block_start_type=CHARACTER,
                distance_from_character=current_index - i,
            )
        if line_type in DIALOGUE_BLOCK_TYPES:
            continue
        if line_type == ACTION:
            return DialogueBlockInfo.outside()
    return DialogueBlockInfo.outside()


def get_last_non_blank_type(
    previous_types: Sequence[str | None],
    current_index: int | None = None,
) -> str | None:
    """Most recent non-blank type before ``current_index`` (default: the end)."""
    end = len(previous_types) if current_index is None else min(current_index, len(previous_types))
    for i in range(end - 1, -1, -1):
        line_type = previous_types[i]
        if line_type and line_type != BLANK:
            return line_type
    return None


@dataclass
class FlowState:
    """Append-only record of assigned line types.

    Example:
        >>> state = FlowState()
        >>> state.append("character")
        >>> state.append("blank")
        >>> state.last_non_blank()
        'character'
        >>> state.dialogue_block_info().distance_from_character
        2
    """

    previous_types: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.previous_types)

    def append(self, line_type: str) -> None:
        """Record the type assigned to the next line."""
        self.previous_types.append(line_type)

    def last_non_blank(self) -> str | None:
        return get_last_non_blank_type(self.previous_types)

    def dialogue_block_info(self, current_index: int | None = None) -> DialogueBlockInfo:
        """Block info for the line at ``current_index`` (default: the next line)."""
        index = len(self.previous_types) if current_index is None else current_index
        return get_dialogue_block_info(self.previous_types, index)
