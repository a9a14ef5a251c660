"""
Structural parsers over classified output.

- scene_header: fields of a (multi-line) scene heading
- scenes: scene spans over engine output
"""

from scenarist.parsers.scene_header import (
    MAX_HEADER_LINES,
    cleanup_remainder,
    extract_scene_header,
    format_scene_header,
    normalize_separators,
    parse_scene_header_line,
)
from scenarist.parsers.scenes import build_scenes

__all__ = [
    "parse_scene_header_line",
    "extract_scene_header",
    "format_scene_header",
    "cleanup_remainder",
    "normalize_separators",
    "MAX_HEADER_LINES",
    "build_scenes",
]
