"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from catch_gifts.gifts_core.config_loader import GameConfig, get_config
from catch_gifts.gifts_core.entities import FallingObject, ObjectKind, Player
from catch_gifts.gifts_core.rules import SessionPhase

# Type ids used in obj_kind; empty slots hold -1
KIND_IDS = {ObjectKind.GIFT: 0, ObjectKind.CHARCOAL: 1}

PHASE_IDS = {
    SessionPhase.NOT_STARTED: 0,
    SessionPhase.PLAYING: 1,
    SessionPhase.GAME_OVER: 2,
}


@dataclass
class GameSnapshot:
    """
    Game state snapshot.

    All arrays are fixed-size with masking for variable object counts.
    """
    # Core state
    phase: int                        # 0 not started, 1 playing, 2 game over
    score: int
    lives: int
    best_score: int
    invulnerable: bool
    elapsed: float                    # Difficulty clock (ms)
    spawn_interval: float
    objects_count: int

    # Viewport info (for normalization)
    viewport_width: float
    viewport_height: float

    # Player
    player_x: float
    player_y: float

    # Object arrays (fixed size, padded)
    obj_kind: np.ndarray              # (MAX_OBJ,) int8
    obj_x: np.ndarray                 # (MAX_OBJ,) float32
    obj_y: np.ndarray                 # (MAX_OBJ,) float32
    obj_speed: np.ndarray             # (MAX_OBJ,) float32
    obj_mask: np.ndarray              # (MAX_OBJ,) bool

    # Optional image
    frame_rgb: Optional[np.ndarray] = None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "phase": np.array(self.phase, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "lives": np.array(self.lives, dtype=np.int32),
            "best_score": np.array(self.best_score, dtype=np.int64),
            "invulnerable": np.array(self.invulnerable, dtype=np.int8),
            "elapsed": np.array(self.elapsed, dtype=np.float32),
            "spawn_interval": np.array(self.spawn_interval, dtype=np.float32),
            "objects_count": np.array(self.objects_count, dtype=np.int32),

            "viewport_width": np.array(self.viewport_width, dtype=np.float32),
            "viewport_height": np.array(self.viewport_height, dtype=np.float32),

            "player_x": np.array(self.player_x, dtype=np.float32),
            "player_y": np.array(self.player_y, dtype=np.float32),

            "obj_kind": self.obj_kind,
            "obj_x": self.obj_x,
            "obj_y": self.obj_y,
            "obj_speed": self.obj_speed,
            "obj_mask": self.obj_mask,
        }

        if self.frame_rgb is not None:
            obs["frame_rgb"] = self.frame_rgb

        return obs


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_objects = config.observation.max_objects

        self._obj_kind = np.zeros(self._max_objects, dtype=np.int8)
        self._obj_x = np.zeros(self._max_objects, dtype=np.float32)
        self._obj_y = np.zeros(self._max_objects, dtype=np.float32)
        self._obj_speed = np.zeros(self._max_objects, dtype=np.float32)
        self._obj_mask = np.zeros(self._max_objects, dtype=bool)

    @property
    def max_objects(self) -> int:
        return self._max_objects

    def build(
        self,
        phase: SessionPhase,
        player: Player,
        objects: Sequence[FallingObject],
        score: int,
        lives: int,
        best_score: int,
        invulnerable: bool,
        elapsed: float,
        spawn_interval: float,
        viewport: Sequence[float],
        frame_rgb: Optional[np.ndarray] = None
    ) -> GameSnapshot:
        """Build a snapshot from current game state."""
        self._obj_kind.fill(-1)
        self._obj_x.fill(0)
        self._obj_y.fill(0)
        self._obj_speed.fill(0)
        self._obj_mask.fill(False)

        live: List[FallingObject] = list(objects)
        count = min(len(live), self._max_objects)
        for i in range(count):
            obj = live[i]
            self._obj_kind[i] = KIND_IDS[obj.kind]
            self._obj_x[i] = obj.x
            self._obj_y[i] = obj.y
            self._obj_speed[i] = obj.speed
            self._obj_mask[i] = True

        return GameSnapshot(
            phase=PHASE_IDS[phase],
            score=score,
            lives=lives,
            best_score=best_score,
            invulnerable=invulnerable,
            elapsed=elapsed,
            spawn_interval=spawn_interval,
            objects_count=count,
            viewport_width=float(viewport[0]),
            viewport_height=float(viewport[1]),
            player_x=player.x,
            player_y=player.y,
            obj_kind=self._obj_kind.copy(),
            obj_x=self._obj_x.copy(),
            obj_y=self._obj_y.copy(),
            obj_speed=self._obj_speed.copy(),
            obj_mask=self._obj_mask.copy(),
            frame_rgb=frame_rgb
        )
