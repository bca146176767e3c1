"""
Gifts Core - Game loop, rules and rendering for Catch the Gifts.

Main exports:
- CoreGame: Fixed-timestep game simulation and session state machine
- CatchEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
- BestScoreStore: Persistent best score
- AssetProvider / SilentAssets: Background media loading, or none
"""

from catch_gifts.gifts_core.config_loader import GameConfig, load_config
from catch_gifts.gifts_core.entities import FallingObject, ObjectKind, Player
from catch_gifts.gifts_core.rules import SessionPhase
from catch_gifts.gifts_core.persistence import BestScoreStore
from catch_gifts.gifts_core.assets import AssetProvider, SilentAssets
from catch_gifts.gifts_core.game import CoreGame, StepResult
from catch_gifts.gifts_core.env_gym import CatchEnv

__all__ = [
    "GameConfig",
    "load_config",
    "FallingObject",
    "ObjectKind",
    "Player",
    "SessionPhase",
    "BestScoreStore",
    "AssetProvider",
    "SilentAssets",
    "CoreGame",
    "StepResult",
    "CatchEnv",
]
