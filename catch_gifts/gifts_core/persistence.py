"""
Best Score Persistence
======================

Stores a single integer best score in a small JSON file. Every failure is
treated as "no best score recorded"; nothing here raises into the game loop.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from catch_gifts.gifts_core.config_loader import GameConfig


class BestScoreStore:
    """
    Best-effort best score storage.

    Args:
        path: JSON file location. None keeps the value in memory only.
        key: Name of the integer entry inside the file.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, key: str = "best_score"):
        self._path = Path(path).expanduser() if path is not None else None
        self._key = key
        self._best: int = self.load()

    @classmethod
    def from_config(cls, config: GameConfig) -> "BestScoreStore":
        return cls(config.persistence.path, config.persistence.key)

    @property
    def best(self) -> int:
        return self._best

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def load(self) -> int:
        """Read the stored value; 0 if absent, unreadable, invalid or negative."""
        if self._path is None:
            return 0
        try:
            if not self._path.exists():
                return 0
            data = json.loads(self._path.read_text(encoding="utf-8"))
            value = int(data[self._key])
        except (OSError, ValueError, TypeError, KeyError, OverflowError):
            return 0
        return value if value >= 0 else 0

    def record(self, score: int) -> bool:
        """
        Raise the best score if `score` beats it, and write it out.

        Returns:
            True if the best score improved.
        """
        if score <= self._best:
            return False
        self._best = int(score)
        self._save()
        return True

    def _save(self) -> None:
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps({self._key: self._best}, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError):
            pass  # Persistence is optional; gameplay continues without it
