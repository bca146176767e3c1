"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Catch the Gifts game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from catch_gifts.gifts_core.config_loader import GameConfig, load_config
from catch_gifts.gifts_core.game import CoreGame
from catch_gifts.gifts_core.state_snapshot import GameSnapshot

# Discrete actions: move left, stay, move right
ACTION_KEYS = {
    0: (True, False),
    1: (False, False),
    2: (False, True),
}


class CatchEnv(gym.Env):
    """
    Catch the Gifts as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = hold left, 1 = no input, 2 = hold right.
        Each env step holds the action for `observation.frame_skip` fixed steps.

    Observation Space:
        Dict containing structured game state and optional RGB image.

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    Info:
        Contains score, lives, delta_score, lives_lost, terminated_reason, etc.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        render_style: str = "solid",
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Preloaded configuration; overrides config_path.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            render_style: "solid" for hitbox rendering, "full" for pygame sprites.
            image_obs: If True, include frame_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        self._config = config if config is not None else load_config(config_path)

        self.render_mode = render_mode
        self._render_style = render_style
        self._image_obs = image_obs
        self._debug = debug

        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height
        self._frame_skip = self._config.observation.frame_skip
        self._max_steps = self._config.observation.max_env_steps
        self._steps = 0

        self._game = CoreGame(config=self._config)

        # Initialize renderer (lazy)
        self._renderer = None

        self.action_space = spaces.Discrete(len(ACTION_KEYS))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print("[DEBUG] CatchEnv initialized")
            print(f"[DEBUG]   Viewport: {self._config.viewport.width}x{self._config.viewport.height}")
            print(f"[DEBUG]   Frame skip: {self._frame_skip}")
            print(f"[DEBUG]   Max objects: {self._config.observation.max_objects}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obj = self._config.observation.max_objects
        viewport = self._config.viewport
        lives = self._config.rules.starting_lives
        int_max = np.iinfo(np.int64).max

        obs_dict = {
            # Core state
            "phase": spaces.Box(low=0, high=2, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=int_max, shape=(), dtype=np.int64),
            "lives": spaces.Box(low=0, high=lives, shape=(), dtype=np.int32),
            "best_score": spaces.Box(low=0, high=int_max, shape=(), dtype=np.int64),
            "invulnerable": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "elapsed": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "spawn_interval": spaces.Box(
                low=self._config.spawn.min_interval,
                high=self._config.spawn.base_interval,
                shape=(),
                dtype=np.float32
            ),
            "objects_count": spaces.Box(low=0, high=max_obj, shape=(), dtype=np.int32),

            # Viewport info
            "viewport_width": spaces.Box(low=0, high=10000, shape=(), dtype=np.float32),
            "viewport_height": spaces.Box(low=0, high=10000, shape=(), dtype=np.float32),

            # Player
            "player_x": spaces.Box(low=0, high=viewport.width, shape=(), dtype=np.float32),
            "player_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),

            # Object arrays
            "obj_kind": spaces.Box(low=-1, high=1, shape=(max_obj,), dtype=np.int8),
            "obj_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_speed": spaces.Box(low=0, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_mask": spaces.MultiBinary(max_obj),
        }

        if self._image_obs:
            obs_dict["frame_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a new session.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)
        self._game.start()
        self._steps = 0

        obs = self._snapshot_to_obs(self._game.build_snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0
        info["lives_lost"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 0 (left), 1 (stay) or 2 (right).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = action.item()
        action = int(action)
        if action not in ACTION_KEYS:
            raise ValueError(f"Invalid action {action}; expected one of {sorted(ACTION_KEYS)}")

        self._game.set_keys(*ACTION_KEYS[action])

        delta_score = 0
        lives_lost = 0
        terminated = False
        for _ in range(self._frame_skip):
            result = self._game.step()
            delta_score += result.delta_score
            lives_lost += result.lives_lost
            if result.terminated or self._game.is_over:
                terminated = True
                break

        self._steps += 1
        truncated = not terminated and self._steps >= self._max_steps

        obs = self._snapshot_to_obs(self._game.build_snapshot())

        # Reward is always 0.0 - agents compute their own
        reward = 0.0

        info = self._game.get_info()
        info["delta_score"] = delta_score
        info["lives_lost"] = lives_lost
        info["env_steps"] = self._steps

        if self._debug:
            print(f"[DEBUG] Step: action={action}, delta_score={delta_score}, "
                  f"lives={info['lives']}, objects={info['objects_count']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["frame_rgb"] = self._render_to_array()

        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render the game to an RGB array."""
        if self._renderer is None:
            self._init_renderer()

        render_data = self._game.get_render_data()
        return self._renderer.render(
            render_data,
            self._img_width,
            self._img_height
        )

    def _init_renderer(self) -> None:
        """Initialize renderer based on style."""
        if self._render_style == "full" or self.render_mode == "human":
            try:
                from catch_gifts.gifts_core.render_pygame import PygameRenderer
                self._renderer = PygameRenderer(self._config)
            except ImportError:
                # Fall back to solid if pygame not available
                from catch_gifts.gifts_core.render_solid import SolidRenderer
                self._renderer = SolidRenderer(self._config)
        else:
            from catch_gifts.gifts_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            if self._renderer is None:
                self._init_renderer()

            render_data = self._game.get_render_data()
            self._renderer.render_to_screen(render_data)
            self._renderer.present()
            return None

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
