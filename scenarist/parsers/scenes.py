"""
Scene builder.

Groups classified lines into scene spans. A scene opens on each top-line
scene header and closes on the next header, on a transition, or at the
end of the document. Heading continuation lines (scene-header-1/2/3)
directly after the top line are folded into the scene's metadata.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from scenarist.models import (
    SCENE_HEADER_1,
    SCENE_HEADER_2,
    SCENE_HEADER_3,
    SCENE_HEADER_TOP_LINE,
    TRANSITION,
    EngineLine,
    SceneBlock,
)
from scenarist.parsers.scene_header import extract_scene_header

logger = logging.getLogger(__name__)

CONTINUATION_TYPES = frozenset({SCENE_HEADER_1, SCENE_HEADER_2, SCENE_HEADER_3})


def _close(scene: SceneBlock, end: int, scenes: list[SceneBlock]) -> None:
    if scene.end is None:
        scene.end = end
    scenes.append(scene)


def _open_scene(lines: Sequence[EngineLine], index: int) -> SceneBlock:
    header_texts = [lines[index].text]
    for line in lines[index + 1 :]:
        if line.type not in CONTINUATION_TYPES:
            break
        header_texts.append(line.text)

    scene = SceneBlock(start=index)
    parsed = extract_scene_header(header_texts, 0)
    if parsed is None:
        # Classified as a header by a looser rule than the parser's prefix
        logger.debug("Line %d opens a scene without a parsable prefix", index)
        return scene

    parts, _consumed = parsed
    scene.number = parts.scene_number
    scene.location = parts.location
    scene.time = parts.time
    scene.photomontage = parts.photomontage
    scene.remaining_action = (parts.remainder or "").strip() or None
    return scene


def build_scenes(lines: Sequence[EngineLine]) -> list[SceneBlock]:
    """Split classified lines into scenes.

    Args:
        lines: Engine output, ``(text, type)`` pairs in document order.

    Returns:
        Scenes in order, each with inclusive ``start``/``end`` indices.
        Lines before the first header, or between a transition and the
        next header, belong to no scene.
    """
    scenes: list[SceneBlock] = []
    current: SceneBlock | None = None

    for index, line in enumerate(lines):
        if line.type == SCENE_HEADER_TOP_LINE:
            if current is not None:
                _close(current, index - 1, scenes)
            current = _open_scene(lines, index)
        elif line.type == TRANSITION and current is not None:
            _close(current, index - 1, scenes)
            current = None

    if current is not None:
        _close(current, len(lines) - 1, scenes)

    logger.debug("Built %d scenes from %d lines", len(scenes), len(lines))
    return scenes
