"""
Pytest configuration and fixtures for Scenarist tests.
"""

import pytest


@pytest.fixture(scope="session")
def short_script() -> str:
    """Opening of a script: basmala, scene number, one cue and its line."""
    return "بسم الله الرحمن الرحيم\nمشهد 1\nأحمد:\nمرحباً"


@pytest.fixture(scope="session")
def scene_script() -> str:
    """A scene with a heading, one line of description and one exchange."""
    return "\n".join(
        [
            "مشهد 1 - داخلي - ليل",
            "يدخل أحمد إلى الغرفة ببطء.",
            "أحمد:",
            "كيف حالك يا سارة؟",
        ]
    )


@pytest.fixture
def scoring_config():
    """Scoring config without the dictionary hint, for deterministic scores."""
    from scenarist import ScoringConfig

    return ScoringConfig(use_dictionary=False)


@pytest.fixture
def scoring_engine(scoring_config):
    """Engine driven by the scoring strategy."""
    from scenarist import Engine, EngineConfig

    return Engine(EngineConfig(strategy="scoring", scoring=scoring_config))


@pytest.fixture
def memory():
    """Empty document memory."""
    from scenarist import DocumentMemory

    return DocumentMemory()
