"""
Ski Core - The simulation engine.

This module provides the per-frame simulation, the pause/overlay state
machine, rendering and a Gymnasium environment wrapper.

Main exports:
- SkiGame: Tick-level game simulation
- GameLoop: Per-frame driver gated by pause state
- SkiEnv: Gymnasium environment for agent training
- GameConfig: Configuration loaded from game_config.yaml
- load_assets / placeholder_assets: Build the shared sprite table
"""

from ski_adventure.ski_core.config_loader import GameConfig, load_config
from ski_adventure.ski_core.sprite_loader import (
    AssetLoadError,
    AssetTable,
    Sprite,
    load_assets,
    load_assets_async,
    placeholder_assets,
)
from ski_adventure.ski_core.state import InputEvent, SimulationState
from ski_adventure.ski_core.overlay import OverlayPhase, PauseController
from ski_adventure.ski_core.game import SkiGame, TickResult
from ski_adventure.ski_core.game_loop import GameLoop
from ski_adventure.ski_core.env_gym import SkiEnv

__all__ = [
    "GameConfig",
    "load_config",
    "AssetLoadError",
    "AssetTable",
    "Sprite",
    "load_assets",
    "load_assets_async",
    "placeholder_assets",
    "InputEvent",
    "SimulationState",
    "OverlayPhase",
    "PauseController",
    "SkiGame",
    "TickResult",
    "GameLoop",
    "SkiEnv",
]
