#!/usr/bin/env python3
"""
Basic Scenarist Usage Example

This example walks through the core workflow:
1. Classify a screenplay line by line
2. Normalize blank lines and group scenes
3. Inspect scores and lines flagged for review
4. Record corrections and persist what was learned
"""

from pathlib import Path

from scenarist import Engine, EngineConfig, ScoringConfig, get_doubt_statistics

SCRIPT = """بسم الله الرحمن الرحيم
مشهد 1 - داخلي - ليل
بيت أحمد
يدخل أحمد إلى الغرفة ببطء.
أحمد:

(بهدوء)
كيف حالك يا سارة؟
قطع
مشهد 2 - خارجي - نهار
يجري الأطفال في الحديقة."""


def main():
    # ─────────────────────────────────────────────────────────────────────────
    # 1. Classification
    # ─────────────────────────────────────────────────────────────────────────

    engine = Engine()
    for text, line_type in engine.run(SCRIPT):
        print(f"{line_type:>22}  {text}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Spacing and scenes
    # ─────────────────────────────────────────────────────────────────────────

    lines = engine.format(SCRIPT)
    print(engine.format_text(SCRIPT))

    for scene in engine.build_scenes(lines):
        print(f"{scene.number}: lines {scene.start}-{scene.end}, {scene.location or '?'} / {scene.time or '?'}")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Scoring and review
    # ─────────────────────────────────────────────────────────────────────────

    config = EngineConfig(
        strategy="scoring",
        scoring=ScoringConfig(needs_review_threshold=50),  # Flag more lines
    )
    scoring_engine = Engine(config, learn=True)

    detailed = scoring_engine.classify_detailed(SCRIPT)
    stats = get_doubt_statistics(detailed)
    print(f"Needs review: {stats.needs_review_count} of {stats.total_lines} ({stats.needs_review_percentage}%)")

    for result in scoring_engine.review(scoring_engine.run(SCRIPT)):
        if result.issues:
            print(result.original_type, "->", result.reviewed_type, result.issues)

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Corrections and persistence
    # ─────────────────────────────────────────────────────────────────────────

    lines = scoring_engine.run(SCRIPT)
    scoring_engine.record_correction(lines, 2, "scene-header-3")

    out_dir = Path("scenarist_state")
    scoring_engine.context.save(out_dir / "memory.json", out_dir / "corrections.json")
    print(scoring_engine.context.adaptive.export_data())


if __name__ == "__main__":
    main()
