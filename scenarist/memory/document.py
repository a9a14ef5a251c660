"""
Document-local memory of character and place names.

Names observed as character cues accumulate points; the point total
decides the confidence tier the scorers see. Places are remembered as
plain presence. Lookups never mutate the tables: only explicit
``add_character`` / ``add_place`` calls (or loading a snapshot) do.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from scenarist.config import MemoryConfig
from scenarist.exceptions import PersistenceError
from scenarist.models import Confidence
from scenarist.normalizers.text import normalize_name

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"


@dataclass
class DocumentMemory:
    """
    Learned character and place names for one document.

    Tiers:
        - high: 3 points or more (two high-confidence observations)
        - medium: 1 or 2 points
        - unknown: absent

    Attributes:
        config: Point values and tier thresholds.
        characters: Normalized name -> accumulated points.
        places: Normalized place names.
        persistence_path: Optional JSON file for save()/load().

    Example:
        >>> memory = DocumentMemory()
        >>> memory.add_character("أحمد:", "high")
        >>> memory.add_character("أحمد", "high")
        >>> memory.is_known_character("أحمد")
        'high'
    """

    config: MemoryConfig = field(default_factory=MemoryConfig)
    characters: dict[str, int] = field(default_factory=dict)
    places: set[str] = field(default_factory=set)
    persistence_path: Path | None = None

    def _normalize(self, name: str) -> str | None:
        normalized = normalize_name(name)
        if len(normalized) < self.config.min_name_length:
            return None
        return normalized

    # -------------------------------------------------------------------------
    # Characters
    # -------------------------------------------------------------------------

    def add_character(self, name: str, confidence: Confidence = "medium") -> None:
        """Record one observation of a character name.

        High-confidence observations add ``high_points``, anything else adds
        ``medium_points``. Names shorter than ``min_name_length`` after
        trimming are ignored.
        """
        normalized = self._normalize(name)
        if normalized is None:
            logger.debug("Ignoring character name %r: too short", name)
            return
        points = self.config.high_points if confidence == "high" else self.config.medium_points
        self.characters[normalized] = self.characters.get(normalized, 0) + points
        logger.debug(
            "Character %r observed (%s): %d points",
            normalized,
            confidence,
            self.characters[normalized],
        )

    def is_known_character(self, name: str) -> Confidence | None:
        """Return the confidence tier for a name, or None if unknown."""
        normalized = self._normalize(name)
        if normalized is None:
            return None
        points = self.characters.get(normalized, 0)
        if points >= self.config.high_tier_at:
            return "high"
        if points >= 1:
            return "medium"
        return None

    def get_all_characters(self) -> list[str]:
        """Stored character names in first-seen order."""
        return list(self.characters)

    # -------------------------------------------------------------------------
    # Places
    # -------------------------------------------------------------------------

    def add_place(self, name: str) -> None:
        normalized = self._normalize(name)
        if normalized is None:
            return
        self.places.add(normalized)

    def is_known_place(self, name: str) -> bool:
        normalized = self._normalize(name)
        return normalized is not None and normalized in self.places

    def clear(self) -> None:
        """Forget every character and place."""
        self.characters.clear()
        self.places.clear()
        logger.info("Cleared document memory")

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "characters": dict(self.characters),
            "places": sorted(self.places),
            "version": SNAPSHOT_VERSION,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], config: MemoryConfig | None = None) -> DocumentMemory:
        """Create from dictionary.

        Raises:
            ValueError: If the data does not have the snapshot shape.
        """
        characters = data.get("characters", {})
        places = data.get("places", [])
        if not isinstance(characters, dict) or not isinstance(places, list):
            raise ValueError("memory snapshot must have a 'characters' mapping and a 'places' list")
        memory = cls(config=config or MemoryConfig())
        for name, points in characters.items():
            if not isinstance(name, str) or not isinstance(points, int) or points < 0:
                raise ValueError(f"invalid character entry: {name!r} -> {points!r}")
            memory.characters[name] = points
        memory.places = {p for p in places if isinstance(p, str)}
        return memory

    def _default_path(self) -> Path | None:
        return self.persistence_path or self.config.persistence_path

    def save(self, path: str | Path | None = None) -> None:
        """
        Persist the memory as JSON.

        Args:
            path: Target file (defaults to ``persistence_path``, then
                ``config.persistence_path``). Without any, this method does
                nothing.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        target = path if path is not None else self._default_path()
        if target is None:
            logger.debug("No persistence path set; skipping save")
            return

        try:
            target = Path(target)
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
            logger.info("Saved %d characters to %s", len(self.characters), target)
        except OSError as e:
            logger.error("Failed to save document memory: %s", e)
            raise PersistenceError(f"Cannot write document memory to {target}: {e}") from e

    def load(self, path: str | Path | None = None) -> bool:
        """
        Replace the tables with a saved snapshot.

        Returns:
            True on success. False (state untouched) when the file is
            missing, unreadable or malformed.
        """
        source = path if path is not None else self._default_path()
        if source is None or not Path(source).exists():
            return False

        try:
            with open(source, encoding="utf-8") as f:
                loaded = DocumentMemory.from_dict(json.load(f), config=self.config)
        except (json.JSONDecodeError, OSError, ValueError, AttributeError) as e:
            logger.warning("Failed to load document memory: %s", e)
            return False

        self.characters = loaded.characters
        self.places = loaded.places
        logger.info("Loaded %d characters from %s", len(self.characters), source)
        return True
