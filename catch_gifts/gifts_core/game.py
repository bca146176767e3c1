"""
Core Game
=========

Main game orchestrator combining spawning, player motion, collisions,
scoring, the session state machine and best score persistence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from catch_gifts.gifts_core.assets import SilentAssets
from catch_gifts.gifts_core.collision import hitboxes_overlap
from catch_gifts.gifts_core.config_loader import GameConfig, get_config
from catch_gifts.gifts_core.effects import ParticleSystem, ScreenShake
from catch_gifts.gifts_core.entities import FallingObject, ObjectKind, Player
from catch_gifts.gifts_core.persistence import BestScoreStore
from catch_gifts.gifts_core.player_motion import PlayerController
from catch_gifts.gifts_core.rules import GameRules, SessionPhase
from catch_gifts.gifts_core.scoring import ScoreEvent, ScoreTracker
from catch_gifts.gifts_core.spawner import SpawnScheduler
from catch_gifts.gifts_core.state_snapshot import GameSnapshot, SnapshotBuilder


@dataclass
class StepResult:
    """Result of a single fixed step."""
    phase: SessionPhase
    terminated: bool
    termination_reason: str
    delta_score: int
    lives_lost: int
    events: List[ScoreEvent] = field(default_factory=list)
    spawned: Optional[FallingObject] = None


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Spawn scheduling and difficulty ramp
    - Player motion from keyboard and pointer intents
    - Collision resolution, scoring and lives
    - Session phases (not started, playing, game over) and the loading gate
    - Cosmetic effects
    - Best score persistence

    The host calls tick() once per displayed frame with the real elapsed time;
    the simulation itself always advances in fixed steps.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        assets: Optional[Any] = None,
        store: Optional[BestScoreStore] = None,
        debug: bool = False
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            assets: Asset provider (AssetProvider or SilentAssets). Silent if None.
            store: Best score store. In-memory if None.
            debug: If True, print state transitions to stdout.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._debug = debug
        self._assets = assets if assets is not None else SilentAssets()
        self._store = store if store is not None else BestScoreStore(None, config.persistence.key)

        # Initialize subsystems
        self._rules = GameRules(config)
        self._scorer = ScoreTracker(config)
        self._scheduler = SpawnScheduler(config, seed)
        self._controller = PlayerController(config)
        self._particles = ParticleSystem(config, seed)
        self._shake = ScreenShake(config)
        self._snapshot_builder = SnapshotBuilder(config)

        self._viewport_width: float = float(config.viewport.width)
        self._viewport_height: float = float(config.viewport.height)
        self._player = Player(
            x=0.0,
            y=0.0,
            width=config.player.width,
            height=config.player.height,
            max_speed=config.player.max_speed
        )
        self._layout_player()

        # Game state
        self._objects: List[FallingObject] = []
        self._accumulator: float = 0.0
        self._now: float = 0.0
        self._termination_reason: str = ""

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def assets(self) -> Any:
        return self._assets

    @property
    def phase(self) -> SessionPhase:
        return self._rules.phase

    @property
    def is_loading(self) -> bool:
        """True while the asset provider is still loading."""
        return not self._assets.ready

    @property
    def is_over(self) -> bool:
        """True if the session has ended."""
        return self._rules.phase is SessionPhase.GAME_OVER

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination_reason

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def lives(self) -> int:
        return self._scorer.lives

    @property
    def best_score(self) -> int:
        return self._store.best

    @property
    def milestone_reached(self) -> bool:
        return self._scorer.milestone_reached

    @property
    def player(self) -> Player:
        return self._player

    @property
    def controller(self) -> PlayerController:
        return self._controller

    @property
    def objects(self) -> List[FallingObject]:
        """Live falling objects in spawn order."""
        return self._objects

    @property
    def particles(self) -> ParticleSystem:
        return self._particles

    @property
    def shake(self) -> ScreenShake:
        return self._shake

    @property
    def scorer(self) -> ScoreTracker:
        return self._scorer

    @property
    def elapsed(self) -> float:
        """Difficulty clock in milliseconds."""
        return self._scheduler.elapsed

    @property
    def now(self) -> float:
        """Simulation clock in milliseconds."""
        return self._now

    @property
    def viewport(self) -> Tuple[float, float]:
        return (self._viewport_width, self._viewport_height)

    @property
    def is_invulnerable(self) -> bool:
        return self._scorer.is_invulnerable(self._now)

    def _layout_player(self) -> None:
        self._player.layout(
            self._viewport_width,
            self._viewport_height,
            self._config.viewport.ground_fraction
        )
        self._player.clamp_to(self._viewport_width)

    def set_viewport(self, width: float, height: float) -> None:
        """Resize the logical drawing area and re-lay-out the player."""
        self._viewport_width = float(width)
        self._viewport_height = float(height)
        self._layout_player()

    # --- Input ---

    def set_keys(self, left_held: bool, right_held: bool) -> None:
        if self.is_over:
            return
        self._controller.set_keys(left_held, right_held)

    def press_pointer(self, pointer_x: float) -> None:
        if self.is_over:
            return
        self._controller.press_pointer(pointer_x, self._player)

    def release_pointer(self) -> None:
        self._controller.release_pointer()

    # --- Session transitions ---

    def start(self) -> bool:
        """
        Begin play from NotStarted.

        Returns:
            True if the session started.
        """
        if self.is_loading or self._rules.phase is not SessionPhase.NOT_STARTED:
            return False

        if not self._assets.audio_unlocked:
            self._assets.unlock_audio()

        self._rules.begin()
        self._scheduler.restart_clocks()

        if self._debug:
            print(f"[DEBUG] Session started (best={self._store.best})")
        return True

    def restart(self) -> bool:
        """
        Reset every session-scoped value and return to NotStarted.

        Returns:
            False while assets are still loading, True otherwise.
        """
        if self.is_loading:
            return False

        self._assets.stop("gameover")
        self._store.record(self._scorer.score)

        self._scorer.reset()
        self._rules.reset()
        self._scheduler.restart_clocks()
        self._controller.clear()
        self._particles.clear()
        self._shake.clear()
        self._objects = []
        self._accumulator = 0.0
        self._termination_reason = ""
        self._layout_player()

        if self._debug:
            print("[DEBUG] Session reset")
        return True

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Restart and reseed.

        Args:
            seed: New random seed. Uses previous if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed
        self._scheduler.reset(self._seed)
        self._particles = ParticleSystem(self._config, self._seed)
        self._now = 0.0
        self.restart()
        return self.build_snapshot()

    def handle_confirm(self) -> bool:
        """
        Tap, click or Enter: start when NotStarted, restart when GameOver.

        Returns:
            True if a transition happened.
        """
        phase = self._rules.phase
        if phase is SessionPhase.NOT_STARTED:
            return self.start()
        if phase is SessionPhase.GAME_OVER:
            return self.restart()
        return False

    def _finish(self, reason: str) -> None:
        """Playing -> GameOver."""
        self._rules.end()
        self._termination_reason = reason
        improved = self._store.record(self._scorer.score)
        self._assets.play("gameover", self._config.assets.volume("gameover"))
        self._controller.clear()

        if self._debug:
            print(f"[DEBUG] GAME OVER: {reason} score={self._scorer.score} "
                  f"best={self._store.best}{' (new)' if improved else ''}")

    # --- Simulation ---

    def spawn_object(
        self,
        kind: Optional[ObjectKind] = None,
        x: Optional[float] = None,
        y: Optional[float] = None,
        speed: Optional[float] = None
    ) -> Optional[FallingObject]:
        """
        Add a falling object.

        Without arguments the kind, x and speed are rolled from the seeded RNG.
        Explicit values place the object exactly.

        Returns:
            The new object, or None if the collection is full or the viewport
            cannot hold an object.
        """
        if len(self._objects) >= self._config.spawn.max_objects:
            return None

        x_range = self._rules.spawn.get_spawn_x_range(self._viewport_width, self._viewport_height)
        if x_range is None:
            return None

        spawn_y = self._rules.spawn.spawn_y if y is None else y
        if kind is None and x is None and speed is None:
            obj = self._scheduler.roll_object(x_range, spawn_y)
        else:
            objects = self._config.objects
            obj = self._scheduler.make_object(
                kind=kind if kind is not None else self._scheduler.choose_kind(),
                x=x if x is not None else x_range[0],
                y=spawn_y,
                speed=speed if speed is not None else (objects.speed_min + objects.speed_max) / 2,
            )

        self._objects.append(obj)
        if self._debug:
            print(f"[DEBUG] Spawned {obj!r} speed={obj.speed:.2f}")
        return obj

    def tick(self, frame_dt: float) -> int:
        """
        Advance by one displayed frame.

        Args:
            frame_dt: Real time since the previous frame in milliseconds.

        Returns:
            Number of fixed steps executed.
        """
        if self.is_loading:
            self._accumulator = 0.0
            return 0

        timing = self._config.timing
        self._accumulator += max(0.0, min(frame_dt, timing.max_frame))

        steps = 0
        while self._accumulator >= timing.fixed_step:
            self.step()
            self._accumulator -= timing.fixed_step
            steps += 1
        return steps

    def step(self, dt: Optional[float] = None) -> StepResult:
        """
        Execute one fixed step.

        Args:
            dt: Step duration in milliseconds. Uses timing.fixed_step if None.

        Returns:
            StepResult describing what happened.
        """
        phase = self._rules.phase
        if self.is_loading:
            return StepResult(phase, self.is_over, self._termination_reason, 0, 0)

        if dt is None:
            dt = self._config.timing.fixed_step
        ratio = dt / self._config.timing.reference_frame

        self._now += dt
        self._particles.update(dt, ratio)
        self._shake.update(dt)

        if phase is not SessionPhase.PLAYING:
            return StepResult(phase, self.is_over, self._termination_reason, 0, 0)

        self._controller.apply(self._player, ratio, self._viewport_width)

        spawned = None
        if self._scheduler.update(dt):
            spawned = self.spawn_object()

        events = self._update_objects(ratio)
        delta_score = sum(e.points for e in events)
        lives_lost = sum(e.lives_lost for e in events)

        term = self._rules.termination.check_termination(self._scorer.lives)
        if term.terminated:
            self._finish(term.reason)

        return StepResult(
            phase=self._rules.phase,
            terminated=term.terminated,
            termination_reason=self._termination_reason,
            delta_score=delta_score,
            lives_lost=lives_lost,
            events=events,
            spawned=spawned
        )

    def _update_objects(self, ratio: float) -> List[ScoreEvent]:
        """Move every object once and resolve at most one outcome for each."""
        player_shrink = self._config.player.hitbox_shrink
        object_shrink = self._config.objects.hitbox_shrink
        player_box = self._player.box

        events: List[ScoreEvent] = []
        survivors: List[FallingObject] = []
        for obj in self._objects:
            obj.advance(ratio)

            if obj.is_below(self._viewport_height):
                continue

            if hitboxes_overlap(player_box, obj.box, player_shrink, object_shrink):
                events.append(self._resolve_contact(obj))
                continue

            survivors.append(obj)

        self._objects = survivors
        return events

    def _resolve_contact(self, obj: FallingObject) -> ScoreEvent:
        colors = self._config.colors
        cx, cy = obj.center

        if obj.kind is ObjectKind.GIFT:
            event = self._scorer.apply_catch()
            self._assets.play("catch", self._config.assets.volume("catch"))
            self._particles.burst(cx, cy, colors.gift_burst)
            if event.milestone_reached and self._debug:
                print(f"[DEBUG] Milestone reached at score {self._scorer.score}")
            return event

        if obj.kind is ObjectKind.CHARCOAL:
            event = self._scorer.apply_hit(self._now)
            self._particles.burst(cx, cy, colors.charcoal_burst)
            # Sound and shake mark only a hit that costs a life
            if event.lives_lost:
                self._assets.play("hit", self._config.assets.volume("hit"))
                self._shake.trigger()
            return event

        raise ValueError(f"Unknown object kind: {obj.kind}")

    # --- Read-only views ---

    def build_snapshot(self, frame_rgb: Optional[np.ndarray] = None) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            phase=self._rules.phase,
            player=self._player,
            objects=self._objects,
            score=self._scorer.score,
            lives=self._scorer.lives,
            best_score=self._store.best,
            invulnerable=self.is_invulnerable,
            elapsed=self._scheduler.elapsed,
            spawn_interval=self._scheduler.current_interval,
            viewport=self.viewport,
            frame_rgb=frame_rgb
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "lives": self._scorer.lives,
            "best_score": self._store.best,
            "phase": self._rules.phase.value,
            "catches": self._scorer.catches,
            "objects_count": len(self._objects),
            "elapsed": self._scheduler.elapsed,
            "spawn_interval": self._scheduler.current_interval,
            "invulnerable": self.is_invulnerable,
            "milestone_reached": self._scorer.milestone_reached,
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with viewport, entity, effect and UI values.
        """
        objects_data = [
            {
                "uid": obj.uid,
                "kind": obj.kind.value,
                "x": obj.x,
                "y": obj.y,
                "width": obj.width,
                "height": obj.height,
            }
            for obj in self._objects
        ]

        particles_data = [
            {
                "x": p.x,
                "y": p.y,
                "size": p.size,
                "color": p.color,
                "alpha": p.alpha,
            }
            for p in self._particles.particles
        ]

        player = self._player
        return {
            "viewport_width": self._viewport_width,
            "viewport_height": self._viewport_height,
            "ground_height": self._viewport_height * self._config.viewport.ground_fraction,
            "phase": self._rules.phase.value,
            "loading": self.is_loading,
            "player": {
                "x": player.x,
                "y": player.y,
                "width": player.width,
                "height": player.height,
                "invulnerable": self.is_invulnerable,
            },
            "objects": objects_data,
            "particles": particles_data,
            "score": self._scorer.score,
            "best_score": self._store.best,
            "lives": self._scorer.lives,
            "milestone_reached": self._scorer.milestone_reached,
            "shake_amount": self._shake.amount,
            "player_hitbox_shrink": self._config.player.hitbox_shrink,
            "object_hitbox_shrink": self._config.objects.hitbox_shrink,
        }
