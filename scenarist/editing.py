"""
Text editing helpers for screenplay lines.

Both helpers work on a list of line strings and return a new list plus
the number of replacements made; the input list is never modified.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

logger = logging.getLogger(__name__)


def replace_in_lines(
    lines: Sequence[str],
    pattern: str,
    replacement: str,
    *,
    regex: bool = False,
    replace_all: bool = True,
    case_sensitive: bool = False,
) -> tuple[list[str], int]:
    """Find and replace across lines.

    Args:
        lines: Document lines.
        pattern: Text to find, or a regular expression when ``regex``.
        replacement: Replacement text (may use group references when
            ``regex``).
        regex: Treat ``pattern`` as a regular expression.
        replace_all: Replace every occurrence; otherwise only the first
            one in the document.
        case_sensitive: Match case exactly.

    Returns:
        Tuple of (new lines, replacement count). A pattern that fails to
        compile logs a warning and returns the lines unchanged with 0.

    Example:
        >>> replace_in_lines(["قطع", "قطع إلى"], "قطع", "مزج")
        (['مزج', 'مزج إلى'], 2)
    """
    if not pattern:
        return list(lines), 0

    flags = 0 if case_sensitive else re.IGNORECASE
    source = pattern if regex else re.escape(pattern)
    if not regex:
        # Literal replacement text, no group references
        replacement = replacement.replace("\\", "\\\\")
    try:
        compiled = re.compile(source, flags)
    except re.error as e:
        logger.warning("Invalid search pattern %r: %s", pattern, e)
        return list(lines), 0

    result: list[str] = []
    total = 0
    for line in lines:
        if not replace_all and total:
            result.append(line)
            continue
        try:
            new_line, count = compiled.subn(replacement, line, count=0 if replace_all else 1)
        except re.error as e:
            logger.warning("Invalid replacement %r: %s", replacement, e)
            return list(lines), 0
        result.append(new_line)
        total += count

    logger.debug("Replaced %d occurrence(s) of %r", total, pattern)
    return result, total


def rename_character(lines: Sequence[str], old_name: str, new_name: str) -> tuple[list[str], int]:
    """Rename a character cue wherever it stands alone on a line.

    Only whole-line cues are renamed (``"أحمد"`` or ``"أحمد:"``); the
    name inside dialogue or action text is left alone. A trailing colon
    is kept.

    Returns:
        Tuple of (new lines, number of cues renamed).
    """
    old_name, new_name = old_name.strip(), new_name.strip()
    if not old_name or not new_name:
        return list(lines), 0

    cue = re.compile(rf"^\s*{re.escape(old_name)}\s*([:：]?)\s*$", re.IGNORECASE)
    result: list[str] = []
    renamed = 0
    for line in lines:
        match = cue.match(line)
        if match:
            result.append(new_name + match.group(1))
            renamed += 1
        else:
            result.append(line)

    if renamed:
        logger.info("Renamed character %r to %r in %d line(s)", old_name, new_name, renamed)
    else:
        logger.debug("Character %r not found", old_name)
    return result, renamed
