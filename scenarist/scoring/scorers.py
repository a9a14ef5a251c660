"""
Per-type scorers.

Each scorer adds and subtracts points from independent heuristics and
returns a ClassificationScore clamped to 0..100 with the reasons that
fired, in evaluation order. Point values were tuned together; changing
one shifts the balance between types.

Heuristics by family:
- shape: colon, word count, punctuation, parentheses, dash
- vocabulary: action verbs, cue words, places, time words
- document memory: names already seen as character cues
- position: type of the previous line, shape of the next line
- dialogue block: dash meaning flips inside a block
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from scenarist.classifiers.lexicon import (
    DESCRIPTIVE_WORDS,
    INTERIOR_EXTERIOR_PATTERN,
    KNOWN_PLACES,
    PARENTHETICAL_DASH_WORDS,
    PARENTHETICAL_WORDS,
    SCENE_NUMBER_START_PATTERN,
    TIME_WORDS,
    ArabicLexicon,
    is_action_verb_start,
    is_scene_header_start,
    is_transition_cue,
    matches_action_start_pattern,
)
from scenarist.classifiers.patterns import (
    PARENTHETICAL_PATTERN,
    ends_with_cue_colon,
    is_arabic_only,
    is_character_like,
    is_likely_action,
)
from scenarist.models import (
    ACTION,
    CHARACTER,
    DIALOGUE,
    PARENTHETICAL,
    SCENE_HEADER_TYPES,
    TRANSITION,
    ClassificationScore,
    DialogueBlockInfo,
    LineContext,
    confidence_for,
)
from scenarist.normalizers.text import (
    normalize_line,
    normalize_name,
    starts_with_dash,
    strip_leading_dash,
)

if TYPE_CHECKING:
    from scenarist.memory.document import DocumentMemory

SENTENCE_END_PATTERN = re.compile(r"[.!؟?]$|\.\.\.|…")
MULTI_COLON_PATTERN = re.compile(r"^[^:：]+[:：].+[:：]")
ELLIPSIS_OPEN_PATTERN = re.compile(r"^\s*(?:\.\.\.|…)")
QUOTE_OPEN_PATTERN = re.compile(r"^\s*[\"«“]")


def _finish(score: float, reasons: list[str]) -> ClassificationScore:
    clamped = max(0.0, min(100.0, float(score)))
    return ClassificationScore(score=clamped, confidence=confidence_for(clamped), reasons=reasons)


def _looks_like_action(normalized: str) -> bool:
    return is_action_verb_start(normalized) or matches_action_start_pattern(normalized)


# =============================================================================
# CHARACTER
# =============================================================================


def score_as_character(
    raw_line: str,
    normalized: str,
    ctx: LineContext,
    memory: DocumentMemory | None = None,
    lexicon: ArabicLexicon | None = None,
) -> ClassificationScore:
    """Score a line as a speaker cue."""
    score = 0.0
    reasons: list[str] = []
    trimmed = raw_line.strip()
    name = normalize_name(trimmed)
    words = ctx.stats.current_word_count
    known = memory.is_known_character(name) if memory is not None else None

    if known == "high":
        score += 60
        reasons.append("known character (high)")
    elif known == "medium":
        score += 40
        reasons.append("known character (medium)")
    elif memory is not None and memory.is_known_place(name):
        score -= 30
        reasons.append("known place")

    looks_like_action = _looks_like_action(normalized)
    if looks_like_action:
        if known:
            score -= 15
            reasons.append("action shape but known character")
        else:
            score -= 45
            reasons.append("action shape")

    has_colon = ends_with_cue_colon(trimmed)
    if has_colon:
        score += 50
        reasons.append("ends with colon")
    elif ":" in trimmed or "：" in trimmed:
        score += 25
        reasons.append("contains colon")

    if words <= 3:
        score += 20
        reasons.append(f"{words} words (<=3)")
    elif words <= 5:
        score += 10
        reasons.append(f"{words} words (<=5)")

    if not ctx.stats.has_punctuation:
        score += 15
        reasons.append("no sentence punctuation")

    if SENTENCE_END_PATTERN.search(trimmed) and not has_colon:
        score -= 35
        reasons.append("sentence punctuation")

    next_text = ctx.next_lines[0][0] if ctx.next_lines else None
    if next_text and not is_scene_header_start(next_text) and not is_transition_cue(next_text):
        next_words = ctx.stats.next_word_count or 0
        if 1 < next_words <= 30:
            score += 25
            reasons.append("next line reads as speech")

    if looks_like_action:
        score -= 20
        reasons.append("starts like action")

    if is_arabic_only(trimmed):
        score += 10
        reasons.append("arabic letters only")

    previous_type = ctx.previous_type
    if previous_type is not None and previous_type != CHARACTER:
        score += 5
        reasons.append("previous line is not a character")

    if normalized.startswith("صوت") and not has_colon:
        score -= 10
        reasons.append("voice prefix without colon")

    if lexicon is not None and 0 < words <= 3 and not has_colon:
        name_hint = lexicon.looks_like_name(name)
        if name_hint is True:
            score += 5
            reasons.append("not a dictionary word")
        elif name_hint is False:
            score -= 5
            reasons.append("common dictionary word")

    return _finish(score, reasons)


# =============================================================================
# DIALOGUE
# =============================================================================


def score_as_dialogue(
    raw_line: str,
    normalized: str,
    ctx: LineContext,
    memory: DocumentMemory | None = None,
    block_info: DialogueBlockInfo | None = None,
) -> ClassificationScore:
    """Score a line as speech."""
    score = 0.0
    reasons: list[str] = []
    words = ctx.stats.current_word_count
    previous_type = ctx.previous_type
    in_block = block_info is not None and block_info.is_in_dialogue_block

    prev_character = previous_type == CHARACTER
    prev_parenthetical = previous_type == PARENTHETICAL
    prev_dialogue = previous_type == DIALOGUE

    if prev_character:
        score += 40
        reasons.append("follows character")

    if starts_with_dash(raw_line):
        if in_block:
            score += 35
            reasons.append("dash inside dialogue block")
            if block_info.distance_from_character <= 3:
                score += 15
                reasons.append("near character cue")
        else:
            score -= 15
            reasons.append("dash outside dialogue block")

    if in_block:
        if ELLIPSIS_OPEN_PATTERN.match(raw_line):
            score += 25
            reasons.append("opens with ellipsis")
        if QUOTE_OPEN_PATTERN.match(raw_line):
            score += 20
            reasons.append("opens with quote")

    if not (prev_character or prev_parenthetical or prev_dialogue):
        score -= 60
        reasons.append("no dialogue context")
        if _looks_like_action(normalized):
            score -= 20
            reasons.append("action shape without dialogue context")

    if prev_character:
        score += 60
        reasons.append("directly after character")
    if prev_parenthetical:
        score += 50
        reasons.append("follows parenthetical")
    if prev_dialogue:
        score += 35
        reasons.append("continues dialogue")

    if ctx.stats.has_punctuation:
        score += 15
        reasons.append("has sentence punctuation")

    if 2 <= words <= 50:
        score += 15
        reasons.append(f"{words} words (speech length)")
    elif 1 <= words <= 60:
        score += 8
        reasons.append(f"{words} words (acceptable length)")

    if _looks_like_action(normalized):
        score -= 25
        reasons.append("starts like action")

    if is_scene_header_start(normalized):
        score -= 20
        reasons.append("looks like scene header")

    next_text = ctx.next_lines[0][0] if ctx.next_lines else None
    if next_text and not is_character_like(next_text):
        score += 10
        reasons.append("next line is not a character")

    if ":" not in normalized and "：" not in normalized:
        score += 10
        reasons.append("no colon")
    elif MULTI_COLON_PATTERN.match(normalized):
        score -= 10
        reasons.append("several colons")

    if words == 1 and not prev_character and not prev_parenthetical:
        score -= 5
        reasons.append("single word without cue")

    return _finish(score, reasons)


# =============================================================================
# ACTION
# =============================================================================


def score_as_action(
    raw_line: str,
    normalized: str,
    ctx: LineContext,
    memory: DocumentMemory | None = None,
    block_info: DialogueBlockInfo | None = None,
) -> ClassificationScore:
    """Score a line as scene description."""
    score = 0.0
    reasons: list[str] = []
    words = ctx.stats.current_word_count
    in_block = block_info is not None and block_info.is_in_dialogue_block

    if memory is not None:
        known = memory.is_known_character(normalize_name(raw_line))
        if known == "high":
            score -= 50
            reasons.append("known character name (high)")
        elif known == "medium":
            score -= 30
            reasons.append("known character name (medium)")
        elif memory.is_known_place(normalize_name(raw_line)):
            score += 15
            reasons.append("known place")

    if is_action_verb_start(normalized):
        if words == 1:
            score += 20
            reasons.append("single action verb")
        else:
            score += 50
            reasons.append("starts with action verb")

    if matches_action_start_pattern(normalized):
        score += 40
        reasons.append("action start pattern")

    previous_type = ctx.previous_type
    if previous_type in SCENE_HEADER_TYPES:
        score += 30
        reasons.append("follows scene header")

    next_text = ctx.next_lines[0][0] if ctx.next_lines else None
    if next_text and is_likely_action(next_text):
        score += 10
        reasons.append("next line looks like action")

    dashed = starts_with_dash(raw_line)
    if dashed:
        if in_block:
            score -= 20
            reasons.append("dash inside dialogue block")
        else:
            score += 25
            reasons.append("dash outside dialogue block")
            if is_action_verb_start(strip_leading_dash(raw_line)):
                score += 30
                reasons.append("dash followed by action verb")

    if words > 5:
        score += 10
        reasons.append(f"{words} words (description length)")

    if previous_type == ACTION:
        score += 10
        reasons.append("follows action")

    if is_character_like(normalized):
        score -= 20
        reasons.append("looks like a character name")

    if not ends_with_cue_colon(normalized):
        score += 5
        reasons.append("no trailing colon")

    if any(word in normalized for word in DESCRIPTIVE_WORDS):
        score += 5
        reasons.append("descriptive wording")

    return _finish(score, reasons)


# =============================================================================
# PARENTHETICAL
# =============================================================================


def score_as_parenthetical(
    raw_line: str,
    normalized: str,
    ctx: LineContext,
    block_info: DialogueBlockInfo | None = None,
) -> ClassificationScore:
    """Score a line as a delivery note."""
    score = 0.0
    reasons: list[str] = []
    trimmed = raw_line.strip()
    words = ctx.stats.current_word_count

    if PARENTHETICAL_PATTERN.match(trimmed):
        score += 60
        reasons.append("wrapped in parentheses")
    else:
        score -= 70
        reasons.append("not wrapped in parentheses")

    previous_type = ctx.previous_type
    if previous_type == CHARACTER:
        score += 40
        reasons.append("follows character")
    if previous_type == DIALOGUE:
        score += 30
        reasons.append("follows dialogue")

    if 1 <= words <= 5:
        score += 15
        reasons.append(f"{words} words (short)")
    elif words <= 10:
        score += 8
        reasons.append(f"{words} words (medium)")

    if not is_action_verb_start(normalized):
        score += 10
        reasons.append("no action verb")

    if starts_with_dash(raw_line) and block_info is not None and block_info.is_in_dialogue_block:
        aside = strip_leading_dash(raw_line)
        if len(aside) < 30 and aside.startswith(PARENTHETICAL_DASH_WORDS):
            score += 40
            reasons.append("dash with delivery cue inside dialogue block")

    if any(word in normalized for word in PARENTHETICAL_WORDS):
        score += 10
        reasons.append("delivery cue word")

    if not ctx.stats.has_punctuation:
        score += 5
        reasons.append("no sentence punctuation")

    return _finish(score, reasons)


# =============================================================================
# SCENE HEADER
# =============================================================================


def score_as_scene_header(line: str, ctx: LineContext) -> ClassificationScore:
    """Score a line as part of a scene heading."""
    score = 0.0
    reasons: list[str] = []
    normalized = normalize_line(line)

    if is_scene_header_start(normalized):
        score += 70
        reasons.append("scene header shape")

    if SCENE_NUMBER_START_PATTERN.match(normalized):
        score += 50
        reasons.append("scene number prefix")

    has_place = any(place in normalized for place in KNOWN_PLACES)
    if has_place:
        score += 30
        reasons.append("known place")

    if any(word in normalized for word in TIME_WORDS):
        score += 25
        reasons.append("time of day")

    if INTERIOR_EXTERIOR_PATTERN.search(normalized):
        score += 20
        reasons.append("interior/exterior marker")

    previous = ctx.previous
    if previous is None or previous[1] == TRANSITION or not previous[0].strip():
        score += 15
        reasons.append("follows transition or document start")

    next_text = ctx.next_lines[0][0] if ctx.next_lines else None
    if next_text and has_place and next_text.strip():
        if not is_character_like(next_text) and not is_transition_cue(next_text):
            score += 10
            reasons.append("next line reads as description")

    return _finish(score, reasons)
