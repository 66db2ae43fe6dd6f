"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the ski game.
Reward is always 0.0 - agents compute their own from info["delta_score"].
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from ski_adventure.ski_core.config_loader import GameConfig, load_config
from ski_adventure.ski_core.game import SkiGame
from ski_adventure.ski_core.sprite_loader import placeholder_assets
from ski_adventure.ski_core.state import InputEvent

logger = logging.getLogger(__name__)

ACTION_LEFT = 0
ACTION_STAY = 1
ACTION_RIGHT = 2

_ACTION_EVENTS = {
    ACTION_LEFT: InputEvent.MOVE_LEFT_BEGIN,
    ACTION_STAY: InputEvent.MOVE_LEFT_END,
    ACTION_RIGHT: InputEvent.MOVE_RIGHT_BEGIN,
}

KIND_NONE = -1
KIND_FISH = 0
KIND_OBSTACLE = 1


class SkiEnv(gym.Env):
    """
    Ski game as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = steer left, 1 = go straight, 2 = steer right.

    Observation Space:
        Dict with the skier position, score, level, hit flash and padded
        per-entity arrays (kind, x, y, w, h, mask). Entity x/y are box
        top-left corners for both kinds.

    Overlays are dismissed automatically, so every step advances one tick.
    Episodes never terminate; they truncate after observation.max_ticks.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
    ):
        """
        Initialize ski environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self._config = load_config(config_path)
        self.render_mode = render_mode

        # Only draw placeholder surfaces when frames are actually rendered
        self._assets = placeholder_assets(self._config, draw=render_mode is not None)
        self._game = SkiGame(self._assets, config=self._config)
        self._renderer = None

        self.action_space = spaces.Discrete(3)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_ent = self._config.observation.max_entities
        board = self._config.board

        return spaces.Dict({
            "player_x": spaces.Box(low=0, high=board.width, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "flash_frames": spaces.Box(
                low=0, high=self._config.scoring.hit_flash_ticks, shape=(), dtype=np.int32
            ),
            "ent_kind": spaces.Box(low=KIND_NONE, high=KIND_OBSTACLE, shape=(max_ent,), dtype=np.int8),
            "ent_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_ent,), dtype=np.float32),
            "ent_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_ent,), dtype=np.float32),
            "ent_w": spaces.Box(low=0, high=np.inf, shape=(max_ent,), dtype=np.float32),
            "ent_h": spaces.Box(low=0, high=np.inf, shape=(max_ent,), dtype=np.float32),
            "ent_mask": spaces.MultiBinary(max_ent),
        })

    def _build_obs(self) -> Dict[str, np.ndarray]:
        state = self._game.state
        max_ent = self._config.observation.max_entities

        kind = np.full(max_ent, KIND_NONE, dtype=np.int8)
        xs = np.zeros(max_ent, dtype=np.float32)
        ys = np.zeros(max_ent, dtype=np.float32)
        ws = np.zeros(max_ent, dtype=np.float32)
        hs = np.zeros(max_ent, dtype=np.float32)
        mask = np.zeros(max_ent, dtype=np.int8)

        entities = [(KIND_FISH, f) for f in state.fishes]
        entities += [(KIND_OBSTACLE, o) for o in state.obstacles]
        # Closest to the skier first (largest y), so truncation drops the far ones
        entities.sort(key=lambda item: -item[1].box.bottom)

        for i, (k, entity) in enumerate(entities[:max_ent]):
            box = entity.box
            kind[i] = k
            xs[i] = box.left
            ys[i] = box.top
            ws[i] = box.width
            hs[i] = box.height
            mask[i] = 1

        return {
            "player_x": np.float32(state.player.x),
            "score": np.int64(state.score),
            "level": np.int32(state.level),
            "flash_frames": np.int32(state.flash_frames),
            "ent_kind": kind,
            "ent_x": xs,
            "ent_y": ys,
            "ent_w": ws,
            "ent_h": hs,
            "ent_mask": mask,
        }

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)
        self._game.reset(seed=seed)

        info = self._game.get_info()
        info["delta_score"] = 0
        info["overlays_dismissed"] = 0
        return self._build_obs(), info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        if action not in _ACTION_EVENTS:
            raise ValueError(f"Invalid action: {action}")

        dismissed = 0
        while self._game.is_paused:
            self._game.handle_input(InputEvent.DISMISS)
            dismissed += 1

        self._game.handle_input(_ACTION_EVENTS[action])
        result = self._game.tick()

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["delta_level"] = result.delta_level
        info["caught"] = [c.species_name for c in result.collisions.catches]
        info["hits"] = len(result.collisions.hits)
        info["overlays_dismissed"] = dismissed

        truncated = self._game.state.ticks >= self._config.observation.max_ticks
        return self._build_obs(), 0.0, False, truncated, info

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode != "rgb_array":
            return None

        if self._renderer is None:
            from ski_adventure.ski_core.render_pygame import SceneRenderer
            self._renderer = SceneRenderer(self._config)
        return self._renderer.render_rgb(self._game.state, self._assets)

    def close(self) -> None:
        """Clean up resources."""
        self._renderer = None

    @property
    def game(self) -> SkiGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
