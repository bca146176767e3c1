"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class ViewportConfig:
    """Logical drawing area and ground band."""
    width: int
    height: int
    ground_fraction: float       # Share of the height taken by the ground band


@dataclass(frozen=True)
class PlayerConfig:
    """Player sprite size and motion tuning."""
    width: float
    height: float
    max_speed: float             # Units per reference frame
    ease_factor: float           # Proportional gain toward a pointer target
    snap_distance: float
    hitbox_shrink: float


@dataclass(frozen=True)
class ObjectsConfig:
    """Falling object size, speed range and type mix."""
    size: float
    speed_min: float
    speed_max: float
    gift_probability: float
    hitbox_shrink: float


@dataclass(frozen=True)
class SpawnConfig:
    """Difficulty curve parameters (milliseconds)."""
    base_interval: float
    min_interval: float
    ramp_duration: float
    max_objects: int
    spawn_on_start: bool = True  # First object appears on the first playing step


@dataclass(frozen=True)
class RulesConfig:
    """Lives, scoring and invulnerability."""
    starting_lives: int
    catch_points: int
    invulnerability: float       # Milliseconds after a hit with no further life loss
    milestone_score: int


@dataclass(frozen=True)
class TimingConfig:
    """Fixed timestep settings (milliseconds)."""
    fixed_step: float
    reference_frame: float
    max_frame: float

    @property
    def step_ratio(self) -> float:
        """Velocity scale applied per fixed step."""
        return self.fixed_step / self.reference_frame


@dataclass(frozen=True)
class EffectsConfig:
    """Cosmetic particle burst and screen shake parameters."""
    burst_count: int
    particle_life: float
    particle_speed_min: float
    particle_speed_max: float
    particle_size_min: float
    particle_size_max: float
    particle_gravity: float
    max_particles: int
    shake_duration: float
    shake_intensity: float


@dataclass(frozen=True)
class ColorsConfig:
    """Palette for placeholders, effects and UI."""
    background: Color
    ground: Color
    text: Color
    player: Color
    gift: Color
    charcoal: Color
    gift_burst: Color
    charcoal_burst: Color
    invulnerable_glow: Color
    banner_start: Color
    banner_end: Color


@dataclass(frozen=True)
class AssetsConfig:
    """Asset file names by logical name."""
    directory: str
    images: Dict[str, str]
    sounds: Dict[str, str]
    volumes: Dict[str, float]

    def volume(self, name: str) -> float:
        return self.volumes.get(name, 1.0)


@dataclass(frozen=True)
class PersistenceConfig:
    """Best score storage."""
    path: Optional[str]          # None keeps the best score in memory only
    key: str


@dataclass(frozen=True)
class ObservationConfig:
    """Agent environment parameters."""
    max_objects: int
    frame_skip: int
    max_env_steps: int
    image_width: int
    image_height: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    viewport: ViewportConfig
    player: PlayerConfig
    objects: ObjectsConfig
    spawn: SpawnConfig
    rules: RulesConfig
    timing: TimingConfig
    effects: EffectsConfig
    colors: ColorsConfig
    assets: AssetsConfig
    persistence: PersistenceConfig
    observation: ObservationConfig

    @property
    def ground_height(self) -> float:
        """Height of the ground band for the configured viewport."""
        return self.viewport.height * self.viewport.ground_fraction


def _parse_color(color_data: List) -> Color:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _validate_fraction(name: str, value: float) -> None:
    if not 0.0 <= value < 1.0:
        raise ValueError(f"{name} must be in [0, 1), got {value}")


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    spawn = config.spawn
    if spawn.min_interval <= 0:
        raise ValueError(f"spawn.min_interval must be positive, got {spawn.min_interval}")
    if spawn.min_interval > spawn.base_interval:
        raise ValueError(
            f"spawn.min_interval ({spawn.min_interval}) exceeds "
            f"spawn.base_interval ({spawn.base_interval})"
        )
    if spawn.ramp_duration <= 0:
        raise ValueError(f"spawn.ramp_duration must be positive, got {spawn.ramp_duration}")

    objects = config.objects
    if objects.speed_min > objects.speed_max:
        raise ValueError(
            f"objects.speed_min ({objects.speed_min}) exceeds "
            f"objects.speed_max ({objects.speed_max})"
        )
    if not 0.0 <= objects.gift_probability <= 1.0:
        raise ValueError(f"objects.gift_probability must be in [0, 1], got {objects.gift_probability}")

    _validate_fraction("player.hitbox_shrink", config.player.hitbox_shrink)
    _validate_fraction("objects.hitbox_shrink", objects.hitbox_shrink)
    _validate_fraction("viewport.ground_fraction", config.viewport.ground_fraction)

    if config.rules.starting_lives < 1:
        raise ValueError(f"rules.starting_lives must be at least 1, got {config.rules.starting_lives}")

    timing = config.timing
    if timing.fixed_step <= 0 or timing.reference_frame <= 0:
        raise ValueError("timing.fixed_step and timing.reference_frame must be positive")
    if timing.max_frame < timing.fixed_step:
        raise ValueError(
            f"timing.max_frame ({timing.max_frame}) is shorter than "
            f"timing.fixed_step ({timing.fixed_step})"
        )

    # Validate observation max_objects matches the spawn cap
    if config.observation.max_objects != spawn.max_objects:
        raise ValueError(
            f"observation.max_objects ({config.observation.max_objects}) must match "
            f"spawn.max_objects ({spawn.max_objects})"
        )

    for name in ("player", "gift", "charcoal"):
        if name not in config.assets.images:
            raise ValueError(f"assets.images is missing '{name}'")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    viewport_data = raw["viewport"]
    viewport = ViewportConfig(
        width=int(viewport_data["width"]),
        height=int(viewport_data["height"]),
        ground_fraction=float(viewport_data.get("ground_fraction", 0.2))
    )

    player_data = raw["player"]
    player = PlayerConfig(
        width=float(player_data["width"]),
        height=float(player_data["height"]),
        max_speed=float(player_data["max_speed"]),
        ease_factor=float(player_data.get("ease_factor", 0.2)),
        snap_distance=float(player_data.get("snap_distance", 1.0)),
        hitbox_shrink=float(player_data.get("hitbox_shrink", 0.2))
    )

    objects_data = raw["objects"]
    objects = ObjectsConfig(
        size=float(objects_data["size"]),
        speed_min=float(objects_data["speed_min"]),
        speed_max=float(objects_data["speed_max"]),
        gift_probability=float(objects_data.get("gift_probability", 0.7)),
        hitbox_shrink=float(objects_data.get("hitbox_shrink", 0.2))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        base_interval=float(spawn_data["base_interval"]),
        min_interval=float(spawn_data["min_interval"]),
        ramp_duration=float(spawn_data["ramp_duration"]),
        max_objects=int(spawn_data.get("max_objects", 64)),
        spawn_on_start=bool(spawn_data.get("spawn_on_start", True))
    )

    rules_data = raw["rules"]
    rules = RulesConfig(
        starting_lives=int(rules_data["starting_lives"]),
        catch_points=int(rules_data.get("catch_points", 1)),
        invulnerability=float(rules_data["invulnerability"]),
        milestone_score=int(rules_data["milestone_score"])
    )

    timing_data = raw["timing"]
    timing = TimingConfig(
        fixed_step=float(timing_data["fixed_step"]),
        reference_frame=float(timing_data.get("reference_frame", timing_data["fixed_step"])),
        max_frame=float(timing_data.get("max_frame", 100.0))
    )

    # Effects are optional - defaults reproduce the classic burst and shake
    fx_data = raw.get("effects", {})
    effects = EffectsConfig(
        burst_count=int(fx_data.get("burst_count", 12)),
        particle_life=float(fx_data.get("particle_life", 400.0)),
        particle_speed_min=float(fx_data.get("particle_speed_min", 1.0)),
        particle_speed_max=float(fx_data.get("particle_speed_max", 3.0)),
        particle_size_min=float(fx_data.get("particle_size_min", 4.0)),
        particle_size_max=float(fx_data.get("particle_size_max", 7.0)),
        particle_gravity=float(fx_data.get("particle_gravity", 0.02)),
        max_particles=int(fx_data.get("max_particles", 256)),
        shake_duration=float(fx_data.get("shake_duration", 200.0)),
        shake_intensity=float(fx_data.get("shake_intensity", 4.0))
    )

    colors_data = raw["colors"]
    colors = ColorsConfig(
        **{name: _parse_color(colors_data[name]) for name in ColorsConfig.__dataclass_fields__}
    )

    assets_data = raw.get("assets", {})
    assets = AssetsConfig(
        directory=str(assets_data.get("directory", "assets")),
        images={str(k): str(v) for k, v in assets_data.get("images", {}).items()},
        sounds={str(k): str(v) for k, v in assets_data.get("sounds", {}).items()},
        volumes={str(k): float(v) for k, v in assets_data.get("volumes", {}).items()}
    )

    persistence_data = raw.get("persistence", {})
    raw_path = persistence_data.get("path")
    persistence = PersistenceConfig(
        path=str(raw_path) if raw_path is not None else None,
        key=str(persistence_data.get("key", "catch_the_gifts_best_score"))
    )

    obs_data = raw["observation"]
    observation = ObservationConfig(
        max_objects=int(obs_data["max_objects"]),
        frame_skip=int(obs_data.get("frame_skip", 4)),
        max_env_steps=int(obs_data.get("max_env_steps", 10000)),
        image_width=int(obs_data.get("image_width", 200)),
        image_height=int(obs_data.get("image_height", 400))
    )

    config = GameConfig(
        viewport=viewport,
        player=player,
        objects=objects,
        spawn=spawn,
        rules=rules,
        timing=timing,
        effects=effects,
        colors=colors,
        assets=assets,
        persistence=persistence,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
