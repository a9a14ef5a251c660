"""
Integration tests for the Engine orchestrator.

These run whole documents through classification, spacing, scene
building, review and correction recording.
"""

import logging

import pytest

from scenarist import (
    AdaptiveConfig,
    ClassificationStrategy,
    Engine,
    EngineConfig,
    EngineContext,
    EngineLine,
    MemoryConfig,
    ScoringConfig,
)

LONG_ACTION = "يدخل أحمد إلى الغرفة الكبيرة ببطء شديد وهو يحمل حقيبة ثقيلة"


def _types(lines):
    return [line.type for line in lines]


class _ExplodingStrategy(ClassificationStrategy):
    name = "exploding"

    def classify(self, line, index, all_lines, previous_types):
        raise ValueError("cannot classify")


class TestRun:
    """Test line-by-line classification of whole documents."""

    def test_opening_sequence(self, short_script):
        """Basmala, heading, cue and speech."""
        assert _types(Engine().run(short_script)) == [
            "basmala",
            "scene-header-top-line",
            "character",
            "dialogue",
        ]

    def test_one_entry_per_line(self, scene_script):
        """Output keeps the input lines and their order."""
        lines = Engine().run(scene_script)
        assert [line.text for line in lines] == scene_script.split("\n")

    def test_scene_with_cascade(self, scene_script):
        """Heading, description, cue and speech."""
        assert _types(Engine().run(scene_script)) == [
            "scene-header-top-line",
            "action",
            "character",
            "dialogue",
        ]

    def test_scene_with_scoring(self, scoring_engine, scene_script):
        """The scoring strategy agrees on a plain scene."""
        assert _types(scoring_engine.run(scene_script)) == [
            "scene-header-top-line",
            "action",
            "character",
            "dialogue",
        ]

    def test_blank_lines_pass_through(self):
        """Blank lines are typed blank and stay in place."""
        lines = Engine().run("مشهد 1\n\n  \nأحمد:")
        assert lines == [
            EngineLine("مشهد 1", "scene-header-top-line"),
            EngineLine("", "blank"),
            EngineLine("  ", "blank"),
            EngineLine("أحمد:", "character"),
        ]

    def test_empty_document(self):
        """An empty document is one blank line."""
        assert Engine().run("") == [EngineLine("", "blank")]

    def test_crlf(self):
        """Windows line endings are accepted."""
        assert _types(Engine().run("مشهد 1\r\nقطع")) == ["scene-header-top-line", "transition"]

    @pytest.mark.parametrize("previous", ["أحمد:", "مرحباً يا سارة", "قطع"])
    def test_basmala_in_any_context(self, previous):
        """Basmala is recognized whatever precedes it."""
        lines = Engine().run(f"{previous}\nبسم الله الرحمن الرحيم")
        assert lines[-1].type == "basmala"

    def test_failing_strategy_falls_back(self, caplog):
        """A strategy error types the line as action and is logged."""
        engine = Engine(strategy=_ExplodingStrategy())
        with caplog.at_level(logging.WARNING):
            lines = engine.run("أحمد:")
        assert lines == [EngineLine("أحمد:", "action")]
        assert "Strategy exploding failed" in caplog.text


class TestFormat:
    """Test spacing normalization through the engine."""

    @pytest.fixture
    def document(self):
        return f"مشهد 1\n{LONG_ACTION}\nأحمد:\n\nمرحباً"

    def test_spacing_applied(self, document):
        """A blank is added before the cue and removed after it."""
        lines = Engine().format(document)
        assert _types(lines) == [
            "scene-header-top-line",
            "action",
            "blank",
            "character",
            "dialogue",
        ]

    def test_format_is_idempotent(self, document):
        """Re-formatting changes nothing when no blank run sits inside a dialogue block."""
        engine = Engine()
        once = engine.format_text(document)
        assert engine.format_text(once) == once

    def test_spacing_disabled(self, document):
        """Without spacing, format is run."""
        engine = Engine(EngineConfig(apply_spacing=False))
        assert engine.format(document) == engine.run(document)


class TestScenesAndReview:
    """Test scene building and review on engine output."""

    def test_build_scenes(self):
        """Transitions close scenes and headings open them."""
        engine = Engine()
        lines = engine.run(f"مشهد 1 - داخلي - ليل\n{LONG_ACTION}\nقطع\nمشهد 2\n{LONG_ACTION}")
        scenes = engine.build_scenes(lines)
        assert [(s.start, s.end) for s in scenes] == [(0, 1), (3, 4)]
        assert scenes[0].number == "مشهد 1"
        assert scenes[0].time == "ليل"
        assert scenes[1].number == "مشهد 2"

    def test_review_clean_scene(self, scene_script):
        """A well-formed scene has nothing to change."""
        engine = Engine()
        results = engine.review(engine.run(scene_script))
        assert len(results) == 4
        assert not any(result.changed for result in results)

    def test_review_flags_misplaced_transition(self):
        """A transition followed by description gets a suggestion."""
        engine = Engine()
        results = engine.review(engine.run(f"مشهد 1\nقطع\n{LONG_ACTION}"))
        assert results[1].issues == ["Suggestion: Transition should be at end of scene"]


class TestDetailedClassification:
    """Test scored batch results through the engine."""

    def test_detailed_results(self, scoring_engine, scene_script):
        """Every line gets a type, confidence and doubt."""
        results = scoring_engine.classify_detailed(scene_script)
        assert len(results) == 4
        assert results[0].type == "scene-header-top-line"
        assert results[0].confidence == "high"

    def test_blank_lines_in_detail(self, scoring_engine):
        """Blank lines are blank with high confidence."""
        results = scoring_engine.classify_detailed("مشهد 1\n\nأحمد:")
        assert results[1].type == "blank"
        assert results[1].confidence == "high"

    def test_without_context(self, scoring_engine):
        """Without context, text lines are medium-confidence action."""
        results = scoring_engine.classify_detailed("أحمد:\nمرحباً", use_context=False)
        assert [(r.type, r.confidence) for r in results] == [("action", "medium"), ("action", "medium")]


class TestLearning:
    """Test memory, corrections and shared context."""

    def test_record_correction(self):
        """Corrections use the nearest non-blank previous type."""
        engine = Engine()
        lines = engine.run("مشهد 1\n\nأحمد:")
        assert engine.record_correction(lines, 2, "action") is False
        correction = engine.context.adaptive.corrections[0]
        assert correction.previous_type == "scene-header-top-line"
        assert correction.original_type == "character"
        assert correction.corrected_type == "action"

    def test_learning_engine_remembers_cues(self, scene_script):
        """A learning scoring engine records character cues."""
        config = EngineConfig(strategy="scoring", scoring=ScoringConfig(use_dictionary=False))
        engine = Engine(config, learn=True)
        engine.run(scene_script)
        assert engine.context.memory.is_known_character("أحمد") == "medium"

    def test_default_engine_does_not_learn(self, scoring_engine, scene_script):
        """Classification alone leaves memory empty."""
        scoring_engine.run(scene_script)
        assert scoring_engine.context.memory.get_all_characters() == []

    def test_shared_context(self):
        """Engines built on one context share its memory."""
        context = EngineContext(EngineConfig(strategy="scoring", scoring=ScoringConfig(use_dictionary=False)))
        first, second = Engine(context=context), Engine(context=context)
        context.observe_character("سارة", "high")
        context.observe_character("سارة", "high")
        assert first.context.memory is second.context.memory
        assert second.context.memory.is_known_character("سارة") == "high"

    def test_save_and_reset(self, tmp_path):
        """Context state is written to disk and can be cleared."""
        context = EngineContext()
        context.observe_place("المسجد")
        context.record_correction("أحمد", "action", "character", "blank")
        context.save(tmp_path / "memory.json", tmp_path / "corrections.json")
        assert (tmp_path / "memory.json").exists()
        assert (tmp_path / "corrections.json").exists()

        context.reset()
        assert not context.memory.is_known_place("المسجد")
        assert context.adaptive.get_correction_count() == 0

    def test_save_to_configured_paths(self, tmp_path):
        """Configured paths are written without arguments and reloaded."""
        config = EngineConfig(
            memory=MemoryConfig(persistence_path=tmp_path / "memory.json"),
            adaptive=AdaptiveConfig(persistence_path=tmp_path / "corrections.json"),
        )
        context = EngineContext(config)
        context.observe_place("المسجد")
        context.record_correction("أحمد", "action", "character", "blank")
        context.save()
        assert (tmp_path / "memory.json").exists()
        assert (tmp_path / "corrections.json").exists()

        restored = EngineContext(config)
        assert restored.memory.is_known_place("المسجد")
        assert restored.adaptive.get_correction_count() == 1
