"""
Unit tests for the scoring classifier: context, scorers, doubt and fallback.
"""

import pytest

from scenarist.config import ScoringConfig
from scenarist.memory.adaptive import AdaptiveClassificationSystem
from scenarist.memory.document import DocumentMemory
from scenarist.models import (
    BatchClassificationResult,
    CandidateType,
    ClassificationScore,
    FallbackDecision,
    LineContext,
)
from scenarist.scoring import classifier as classifier_module
from scenarist.scoring.classifier import (
    ScoringClassifier,
    get_doubt_statistics,
    get_reviewable_lines,
    quick_classify,
)
from scenarist.scoring.context import build_line_context
from scenarist.scoring.doubt import (
    adjust_doubt_for_dash,
    apply_smart_fallback,
    calculate_doubt_score,
    extract_top2_candidates,
)
from scenarist.scoring.scorers import score_as_action, score_as_character, score_as_scene_header

SCENE = [
    "مشهد 1 - داخلي - ليل",
    "يدخل أحمد إلى الغرفة ببطء.",
    "أحمد:",
    "كيف حالك يا سارة؟",
]


def _scores(**values):
    return {name: ClassificationScore(score, conf) for name, (score, conf) in values.items()}


def _pair(first, second, gap=10.0):
    return (
        CandidateType(first, 50.0 + gap, "medium"),
        CandidateType(second, 50.0, "medium"),
    )


class TestLineContext:
    """Test the neighbour window."""

    def test_window_skips_blanks(self):
        """Blank lines are not neighbours."""
        lines = ["مشهد 1", "", "أحمد:", "", "مرحباً", "سارة:"]
        ctx = build_line_context("أحمد:", 2, lines, ["scene-header-top-line", "blank"])
        assert ctx.previous_lines == [("مشهد 1", "scene-header-top-line")]
        assert ctx.next_lines == [("مرحباً", "unknown"), ("سارة:", "unknown")]
        assert ctx.next_line == "مرحباً"
        assert ctx.previous_type == "scene-header-top-line"

    def test_window_size(self):
        """At most ``window`` neighbours on each side."""
        lines = [f"سطر {i}" for i in range(10)]
        ctx = build_line_context(lines[5], 5, lines, ["action"] * 5, window=2)
        assert [text for text, _ in ctx.previous_lines] == ["سطر 3", "سطر 4"]
        assert len(ctx.next_lines) == 2

    def test_stats(self):
        """Shape statistics for the line and the next one."""
        ctx = build_line_context("كيف حالك؟", 0, ["كيف حالك؟", "بخير والحمد لله"])
        assert ctx.stats.current_word_count == 2
        assert ctx.stats.has_punctuation
        assert ctx.stats.next_word_count == 3


class TestScorers:
    """Test individual scorers."""

    def test_scores_are_clamped(self):
        """Scores stay within 0..100."""
        ctx = build_line_context(SCENE[2], 2, SCENE, ["scene-header-top-line", "action"])
        score = score_as_character(SCENE[2], "أحمد:", ctx)
        assert score.score == 100
        assert score.confidence == "high"
        assert "ends with colon" in score.reasons

    def test_known_character_raises_score(self):
        """Memory of the name adds to the character score."""
        memory = DocumentMemory()
        memory.add_character("سارة", "high")
        memory.add_character("سارة", "high")
        lines = ["يدخل أحمد الغرفة.", "سارة"]
        ctx = build_line_context("سارة", 1, lines, ["action"])
        with_memory = score_as_character("سارة", "سارة", ctx, memory)
        without_memory = score_as_character("سارة", "سارة", ctx)
        assert with_memory.score > without_memory.score
        assert "known character (high)" in with_memory.reasons

    def test_known_place_lowers_character_score(self):
        """A learned place name scores lower as a cue."""
        memory = DocumentMemory()
        lines = ["مشهد 1", "ديوان العمدة"]
        ctx = build_line_context(lines[1], 1, lines, ["scene-header-top-line"])
        before = score_as_character(lines[1], lines[1], ctx, memory)
        memory.add_place("ديوان العمدة")
        after = score_as_character(lines[1], lines[1], ctx, memory)
        assert after.score < before.score
        assert "known place" in after.reasons

    def test_known_place_raises_action_score(self):
        """A learned place name scores higher as description."""
        memory = DocumentMemory()
        lines = ["مشهد 1", "ديوان العمدة"]
        ctx = build_line_context(lines[1], 1, lines, ["scene-header-top-line"])
        before = score_as_action(lines[1], lines[1], ctx, memory)
        memory.add_place("ديوان العمدة")
        after = score_as_action(lines[1], lines[1], ctx, memory)
        assert after.score > before.score
        assert "known place" in after.reasons

    def test_dictionary_hint(self):
        """A common word loses a few character points."""
        from scenarist.classifiers.lexicon import ArabicLexicon

        lines = ["يدخل أحمد الغرفة.", "باب"]
        ctx = build_line_context("باب", 1, lines, ["action"])
        plain = score_as_character("باب", "باب", ctx)
        hinted = score_as_character("باب", "باب", ctx, lexicon=ArabicLexicon(base_spell={"باب"}))
        assert plain.score - hinted.score == 5

    def test_scene_header_score(self):
        """Setting and time markers score as a heading."""
        score = score_as_scene_header("داخلي - ليل", LineContext())
        assert score.score >= 70


class TestDoubt:
    """Test doubt calculation."""

    def test_near_tie_needs_review(self):
        """Close medium scores are doubtful."""
        doubt, needs_review = calculate_doubt_score(
            _scores(action=(50, "medium"), dialogue=(48, "medium"))
        )
        assert doubt == 95
        assert needs_review

    def test_clear_winner_has_no_doubt(self):
        """A wide gap with a high score is certain."""
        doubt, needs_review = calculate_doubt_score(
            _scores(character=(100, "high"), action=(10, "low"))
        )
        assert doubt == 0
        assert not needs_review

    def test_empty_scores(self):
        """No candidates means no doubt."""
        assert calculate_doubt_score({}) == (0.0, False)

    def test_doubt_capped(self):
        """Doubt never exceeds 100."""
        doubt, _ = calculate_doubt_score(
            _scores(action=(20, "low"), dialogue=(19, "low")), "- يدخل"
        )
        assert doubt == 100

    def test_threshold_configurable(self):
        """The review threshold comes from the config."""
        scores = _scores(action=(60, "medium"), dialogue=(40, "medium"))
        assert calculate_doubt_score(scores)[1] is False
        assert calculate_doubt_score(scores, config=ScoringConfig(needs_review_threshold=30))[1]

    def test_dash_adjustments(self):
        """Dash content shifts doubt."""
        assert adjust_doubt_for_dash("بيت أحمد -", 50) == 40
        assert adjust_doubt_for_dash("بيت أحمد - المطبخ", 50) == 35
        assert adjust_doubt_for_dash("بيت أحمد - يدخل سعيد", 50) == 75
        assert adjust_doubt_for_dash("بلا شرطة", 50) == 50

    def test_top2(self):
        """The two best types, best first."""
        top2 = extract_top2_candidates(
            _scores(action=(30, "low"), character=(80, "high"), dialogue=(50, "medium"))
        )
        assert [c.type for c in top2] == ["character", "dialogue"]
        assert extract_top2_candidates(_scores(action=(30, "low"))) is None


class TestSmartFallback:
    """Test the near-tie resolution rules."""

    def test_gap_too_wide(self):
        """No decision when the gap exceeds the bound."""
        top2 = _pair("character", "action", gap=41)
        assert apply_smart_fallback(top2, LineContext(), None, "مرحباً يا صديقي", "أحمد") is None

    def test_gap_at_bound(self):
        """A gap equal to the bound also disables the fallback."""
        top2 = _pair("character", "action", gap=40)
        assert apply_smart_fallback(top2, LineContext(), None, "مرحباً يا صديقي", "أحمد") is None

    def test_gap_below_bound(self):
        """Just under the bound the rules still apply."""
        top2 = _pair("character", "action", gap=39)
        decision = apply_smart_fallback(top2, LineContext(), None, "مرحباً يا صديقي", "أحمد")
        assert decision.fallback_type == "character"

    def test_character_before_speech(self):
        """A speech-like next line favours character."""
        decision = apply_smart_fallback(
            _pair("action", "character"), LineContext(), "action", "كيف حالك اليوم", "أحمد"
        )
        assert decision == FallbackDecision("action", "character", "next line reads as speech")

    def test_character_without_speech(self):
        """Without speech after it the line is action."""
        decision = apply_smart_fallback(
            _pair("character", "action"), LineContext(), "action", "مشهد 2", "أحمد"
        )
        assert decision.fallback_type == "action"

    def test_dialogue_after_character(self):
        """After a cue, dialogue wins over action."""
        decision = apply_smart_fallback(
            _pair("action", "dialogue"), LineContext(), "character", None, "نعم"
        )
        assert decision.fallback_type == "dialogue"

    def test_dialogue_without_context(self):
        """Without a cue, action wins over dialogue."""
        decision = apply_smart_fallback(
            _pair("dialogue", "action"), LineContext(), "action", None, "نعم"
        )
        assert decision.fallback_type == "action"

    def test_parenthetical_in_dialogue(self):
        """Asides inside speech stay parenthetical."""
        decision = apply_smart_fallback(
            _pair("action", "parenthetical"), LineContext(), "dialogue", None, "(بهدوء)"
        )
        assert decision.fallback_type == "parenthetical"

    def test_character_vs_dialogue_colon(self):
        """A trailing colon resolves toward character."""
        decision = apply_smart_fallback(
            _pair("dialogue", "character"), LineContext(), "dialogue", None, "سارة:"
        )
        assert decision.fallback_type == "character"

    def test_unhandled_pair(self):
        """Pairs without a rule get no decision."""
        assert apply_smart_fallback(_pair("character", "parenthetical"), LineContext(), None, None, "x") is None


class TestQuickClassify:
    """Test the fixed-shape shortcut."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("بسم الله الرحمن الرحيم", "basmala"),
            ("مشهد 3 - خارجي - نهار", "scene-header-top-line"),
            ("قطع إلى", "transition"),
            ("(ساخراً)", "parenthetical"),
        ],
    )
    def test_fixed_shapes(self, line, expected):
        """Fixed shapes score 100 with no doubt."""
        result = quick_classify(line)
        assert result.type == expected
        assert result.confidence == "high"
        assert result.doubt_score == 0
        assert not result.needs_review

    def test_free_text_not_quick(self):
        """Anything else goes through scoring."""
        assert quick_classify("أحمد:") is None


class TestScoringClassifier:
    """Test full line classification with scoring."""

    def test_scene_sequence(self, scoring_config):
        """Heading, description, cue and speech."""
        classifier = ScoringClassifier(config=scoring_config)
        types = [r.type for r in classifier.classify_batch_detailed("\n".join(SCENE))]
        assert types == ["scene-header-top-line", "action", "character", "dialogue"]

    def test_blank_lines_typed_blank(self, scoring_config):
        """Blank lines keep their position as ``blank``."""
        classifier = ScoringClassifier(config=scoring_config)
        results = classifier.classify_batch_detailed("مشهد 1\n\nأحمد:")
        assert [r.type for r in results] == ["scene-header-top-line", "blank", "character"]

    def test_without_context(self, scoring_config):
        """Without context every non-blank line is medium action."""
        classifier = ScoringClassifier(config=scoring_config)
        results = classifier.classify_batch_detailed("أحمد:\n\nمرحباً", use_context=False)
        assert [(r.type, r.confidence) for r in results] == [
            ("action", "medium"),
            ("blank", "high"),
            ("action", "medium"),
        ]

    def test_memory_not_mutated_by_default(self, scoring_config):
        """Classification alone never records names."""
        memory = DocumentMemory()
        ScoringClassifier(config=scoring_config, memory=memory).classify_batch_detailed(
            "\n".join(SCENE)
        )
        assert memory.get_all_characters() == []

    def test_learn_records_character(self, scoring_config):
        """With learn=True winning cues are remembered."""
        memory = DocumentMemory()
        classifier = ScoringClassifier(config=scoring_config, memory=memory)
        classifier.classify_batch_detailed("\n".join(SCENE), learn=True)
        assert memory.is_known_character("أحمد") == "medium"

    def test_time_location_line_after_heading(self, scoring_config):
        """A setting/time line after the scene number continues the heading."""
        classifier = ScoringClassifier(config=scoring_config)
        results = classifier.classify_batch_detailed("مشهد 4\nداخلي - نهار")
        assert results[1].type == "scene-header-2"

    def test_place_after_heading(self, scoring_config):
        """A short place name after the heading is scene-header-3."""
        classifier = ScoringClassifier(config=scoring_config)
        results = classifier.classify_batch_detailed("مشهد 4 - داخلي - نهار\nالمسجد\nيدخل أحمد.")
        assert results[1].type == "scene-header-3"

    def test_learned_place_after_heading(self, scoring_config):
        """A place recorded in memory continues the heading."""
        memory = DocumentMemory()
        classifier = ScoringClassifier(config=scoring_config, memory=memory)
        text = "مشهد 4 - داخلي - نهار\nديوان العمدة\nيدخل أحمد."
        assert classifier.classify_batch_detailed(text)[1].type != "scene-header-3"

        memory.add_place("ديوان العمدة")
        assert classifier.classify_batch_detailed(text)[1].type == "scene-header-3"

    def test_verb_in_place_of_time_word(self, scoring_config):
        """A verb containing a time word is not a heading line."""
        classifier = ScoringClassifier(config=scoring_config)
        results = classifier.classify_batch_detailed("مشهد 4\nيظهر رجل غريب عند الباب ويطرقه بعنف.")
        assert results[1].type == "action"

    def test_adaptive_weights_applied(self, scoring_config):
        """Learned weights scale the candidate scores."""
        adaptive = AdaptiveClassificationSystem()
        adaptive.pattern_weights["action -> character"] = 0.5
        classifier = ScoringClassifier(config=scoring_config, adaptive=adaptive)
        lines = SCENE
        plain = ScoringClassifier(config=scoring_config).classify_with_scoring(
            lines[2], 2, lines, ["scene-header-top-line", "action"]
        )
        weighted = classifier.classify_with_scoring(lines[2], 2, lines, ["scene-header-top-line", "action"])
        assert weighted.scores["character"].score == pytest.approx(plain.scores["character"].score * 0.5)


class TestReviewHelpers:
    """Test batch review summaries."""

    def _results(self):
        top2 = (
            CandidateType("action", 50, "medium"),
            CandidateType("dialogue", 45, "medium"),
        )
        swapped = (
            CandidateType("dialogue", 52, "medium"),
            CandidateType("action", 49, "medium"),
        )
        return [
            BatchClassificationResult("أحمد:", "character", "high"),
            BatchClassificationResult("", "blank", "high"),
            BatchClassificationResult("نعم", "action", "medium", 80, True, top2),
            BatchClassificationResult("لا", "dialogue", "medium", 90, True, swapped),
        ]

    def test_reviewable_lines(self):
        """Flagged lines carry their index and suggestions."""
        reviewable = get_reviewable_lines(self._results())
        assert [r.line_index for r in reviewable] == [2, 3]
        assert [c.type for c in reviewable[0].suggested_types] == ["action", "dialogue"]

    def test_doubt_statistics(self):
        """Counts, rounded percentage and ordered pairs."""
        stats = get_doubt_statistics(self._results())
        assert stats.total_lines == 3
        assert stats.needs_review_count == 2
        assert stats.needs_review_percentage == 67
        assert stats.top_ambiguous_pairs == [("action vs dialogue", 2)]

    def test_statistics_on_empty_batch(self):
        """No lines, no division error."""
        stats = get_doubt_statistics([])
        assert stats.total_lines == 0
        assert stats.needs_review_percentage == 0


class TestFallbackNeighbour:
    """Test which following line the smart fallback sees."""

    @pytest.fixture
    def seen(self, monkeypatch):
        calls = []
        real = classifier_module.apply_smart_fallback

        def recording(top2, ctx, previous_type, next_line, current_line, config=None):
            calls.append(next_line)
            return real(top2, ctx, previous_type, next_line, current_line, config)

        monkeypatch.setattr(classifier_module, "apply_smart_fallback", recording)
        return calls

    @pytest.fixture
    def classifier(self):
        return ScoringClassifier(config=ScoringConfig(needs_review_threshold=0, use_dictionary=False))

    def test_blank_neighbour_means_no_speech(self, seen, classifier):
        """Speech separated by blank lines does not count as following."""
        lines = ["مشهد 1", "سارة", "", "", "", "كيف حالك يا أحمد اليوم"]
        classifier.classify_with_scoring(lines[1], 1, lines, ["scene-header-top-line"])
        assert seen == [None]

    def test_adjacent_neighbour_is_passed(self, seen, classifier):
        """The line right after the cue is what the fallback reads."""
        lines = ["مشهد 1", "سارة", "كيف حالك يا أحمد اليوم"]
        classifier.classify_with_scoring(lines[1], 1, lines, ["scene-header-top-line"])
        assert seen == ["كيف حالك يا أحمد اليوم"]

    def test_last_line_has_no_neighbour(self, seen, classifier):
        """The final line of a document has nothing after it."""
        lines = ["مشهد 1", "سارة"]
        classifier.classify_with_scoring(lines[1], 1, lines, ["scene-header-top-line"])
        assert seen == [None]
