"""
Arabic screenplay vocabulary.

Word lists the classifiers and scorers match against:

- ACTION_VERBS: present-tense verbs that open action lines
- KNOWN_PLACES / LOCATION_PREFIXES: place nouns and locative prepositions
- TIME_WORDS / INTERIOR_EXTERIOR: scene-header time and setting markers
- PARENTHETICAL_WORDS: delivery cues found inside parentheticals

ArabicLexicon wraps pyspellchecker's Arabic word list. The scorers use it
as a weak hint that a short line is a proper name rather than a common word.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from scenarist.normalizers.text import normalize_line, normalize_name

if TYPE_CHECKING:
    from spellchecker import SpellChecker

logger = logging.getLogger(__name__)

# =============================================================================
# VERBS
# =============================================================================

ACTION_VERBS: tuple[str, ...] = (
    "يدخل", "يخرج", "يقف", "يجلس", "ينظر", "يتحرك", "يقترب", "يبتعد",
    "يركض", "يمشي", "يتحدث", "يصرخ", "يرفع", "ينهض", "يميل", "يلتفت",
    "يسقط", "يرتمي", "يستيقظ", "ينام", "يفتح", "يغلق", "يبدأ", "ينتهي",
    "يتجه", "يعود", "يغادر", "يبكي", "يضحك", "يريد", "يفكر", "يتذكر",
    "يأتي", "ينزل", "يصعد", "يستلقي",
    "تدخل", "تخرج", "تقف", "تجلس", "تنظر", "تتحرك", "تقترب", "تبتعد",
    "تركض", "تمشي", "تتحدث", "تصرخ", "ترفع", "تنهض", "تلتفت", "تفتح",
    "تغلق", "تعود", "تغادر", "تبكي", "تضحك",
    "نسير", "نرى", "نسمع", "نشاهد", "نلاحظ", "ننتقل", "نتابع",
)

# Verbs anywhere in a line; used after a leading dash
VERB_PATTERN = re.compile(r"\b(?:" + "|".join(ACTION_VERBS) + r")\b")

DASH_START_PATTERN = re.compile(r"^\s*[-–—−‒―]")

# =============================================================================
# PLACES AND TIMES
# =============================================================================

KNOWN_PLACES: tuple[str, ...] = (
    "مسجد", "بيت", "منزل", "شارع", "حديقة", "مدرسة", "جامعة", "مكتب",
    "محل", "مستشفى", "مطعم", "فندق", "سيارة", "غرفة", "قاعة", "ممر",
    "سطح", "ساحة", "مقبرة", "مخبز", "مكتبة", "نهر", "بحر", "جبل",
    "غابة", "سوق", "مصنع", "بنك", "محكمة", "سجن", "موقف", "محطة",
    "مطار", "ميناء", "كوبرى", "نفق", "مبنى", "قصر", "نادي", "ملعب",
    "ملهى", "بار", "كازينو", "متحف", "مسرح", "سينما", "معرض", "مزرعة",
    "مختبر", "مستودع", "كهف", "مقهى", "كوافير", "صالون", "حلاق",
)

KNOWN_PLACES_PATTERN = re.compile(
    r"(?:^|\b)(?:ال)?(?:" + "|".join(KNOWN_PLACES) + r")(?:\b|$)", re.IGNORECASE
)

LOCATION_PREFIXES: tuple[str, ...] = (
    "داخل", "في", "أمام", "خلف", "بجوار", "على", "تحت", "فوق", "عند",
)

LOCATION_PREFIX_PATTERN = re.compile(r"^(?:" + "|".join(LOCATION_PREFIXES) + r")\s+")

TIME_WORDS: tuple[str, ...] = (
    "ليل", "نهار", "صباح", "مساء", "فجر", "ظهر", "عصر", "مغرب", "عشاء", "الغروب",
)

INTERIOR_EXTERIOR_PATTERN = re.compile(r"داخلي|خارجي|د\.|خ\.", re.IGNORECASE)

SCENE_NUMBER_START_PATTERN = re.compile(r"^(?:مشهد|م\.|scene)\s*[0-9٠-٩]+", re.IGNORECASE)
INTERIOR_EXTERIOR_START_PATTERN = re.compile(r"^(?:داخلي|خارجي|د\.|خ\.)", re.IGNORECASE)

# =============================================================================
# DELIVERY CUES
# =============================================================================

PARENTHETICAL_WORDS: tuple[str, ...] = (
    "همساً", "بصوت", "صوت", "مبتسماً", "باحتقار", "بحزن", "بغضب", "بفرح",
    "بطريقة", "بنظرة", "بتحديق", "بسرعة", "ببطء", "فجأة", "فوراً", "وهو",
    "وهي", "مبتسما", "مبتسم",
)

# Cues that mark a dash line inside a dialogue block as a parenthetical aside
PARENTHETICAL_DASH_WORDS: tuple[str, ...] = (
    "همساً", "بصوت", "مبتسماً", "باحتقار", "بحزن", "بغضب", "بفرح", "بنظرة",
    "ساخراً", "متعجباً", "بحدة", "بهدوء",
)

DESCRIPTIVE_WORDS: tuple[str, ...] = ("بطيء", "سريع", "فجأة", "ببطء", "بسرعة", "هدوء", "صمت")

TRANSITION_CUE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(?:إلى|من)\s+", re.IGNORECASE),
    re.compile(r"^(?:متابعة|المتابعة)", re.IGNORECASE),
    re.compile(r"^CUT\s*TO:?$", re.IGNORECASE),
    re.compile(r"^FADE\s*(?:IN|OUT):?$", re.IGNORECASE),
    re.compile(r"^DISSOLVE\s*TO:?$", re.IGNORECASE),
    re.compile(r"^IRIS\s*(?:IN|OUT)$", re.IGNORECASE),
    re.compile(r"^WIPE\s*TO:?$", re.IGNORECASE),
    re.compile(r"^(?:JUMP|SMASH)\s*CUT\s*TO:?$", re.IGNORECASE),
)


# =============================================================================
# LOOKUPS
# =============================================================================


def is_action_verb_start(text: str) -> bool:
    """True if the normalized line opens with an action verb.

    Example:
        >>> is_action_verb_start("يدخل أحمد الغرفة")
        True
    """
    normalized = normalize_line(text)
    return any(normalized.startswith(verb) for verb in ACTION_VERBS)


def matches_action_start_pattern(text: str) -> bool:
    """True if the line opens with a dash, the action bullet of Arabic scripts."""
    return bool(DASH_START_PATTERN.match(text or ""))


def contains_action_verb(text: str) -> bool:
    """True if any action verb appears as a whole word."""
    return bool(VERB_PATTERN.search(text or ""))


def is_place_like(text: str) -> bool:
    """True for a known place noun or a line opening with a locative preposition."""
    normalized = normalize_line(text)
    return bool(KNOWN_PLACES_PATTERN.search(normalized) or LOCATION_PREFIX_PATTERN.match(normalized))


def contains_known_place(text: str) -> bool:
    normalized = normalize_line(text)
    return any(place in normalized for place in KNOWN_PLACES)


def contains_time_word(text: str) -> bool:
    normalized = normalize_line(text)
    return any(word in normalized for word in TIME_WORDS)


def is_scene_header_start(text: str) -> bool:
    """Loose scene-header check used by the scorers.

    Matches a numbered scene prefix, an interior/exterior opener, or any
    time-of-day word. Deliberately broader than the cascade predicate.
    """
    normalized = normalize_line(text)
    if SCENE_NUMBER_START_PATTERN.match(normalized):
        return True
    if INTERIOR_EXTERIOR_START_PATTERN.match(normalized):
        return True
    return contains_time_word(normalized)


def is_transition_cue(text: str) -> bool:
    """Broad transition check used when looking at a neighbouring line."""
    trimmed = (text or "").strip()
    return any(pattern.search(trimmed) for pattern in TRANSITION_CUE_PATTERNS)


# =============================================================================
# ARABIC DICTIONARY
# =============================================================================


@dataclass
class ArabicLexicon:
    """
    Arabic word list backed by pyspellchecker.

    The spellchecker is built on first lookup, so constructing an engine
    stays cheap. With ``enabled=False`` every lookup reports "unknown"
    and the scorers skip the dictionary hint entirely.

    Attributes:
        base_spell: Optional SpellChecker instance (built lazily if None).
        enabled: Consult the word list at all.

    Example:
        >>> lexicon = ArabicLexicon()
        >>> lexicon.is_known_word("باب")
        True
    """

    base_spell: SpellChecker | None = None
    enabled: bool = True
    _loaded: bool = field(default=False, init=False, repr=False)

    def _spell(self) -> SpellChecker | None:
        if not self.enabled:
            return None
        if self.base_spell is None and not self._loaded:
            from spellchecker import SpellChecker

            self.base_spell = SpellChecker(language="ar")
            logger.debug("Initialized Arabic spellchecker")
        self._loaded = True
        return self.base_spell

    def is_known_word(self, word: str) -> bool:
        """True if the word is in the Arabic dictionary."""
        spell = self._spell()
        if spell is None:
            return False
        cleaned = normalize_name(normalize_line(word))
        return bool(cleaned) and cleaned in spell

    def looks_like_name(self, text: str) -> bool | None:
        """Guess whether a short line is a proper name.

        Returns:
            True when no word of the line is a dictionary word, False when
            every word is, None when the dictionary is disabled or the line
            is empty.
        """
        if self._spell() is None:
            return None
        words = normalize_name(normalize_line(text)).split()
        if not words:
            return None
        known = [self.is_known_word(w) for w in words]
        if not any(known):
            return True
        if all(known):
            return False
        return None
