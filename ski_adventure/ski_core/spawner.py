"""
Entity Spawner
==============

Best-effort procedural generation of fish and obstacles at the top edge.
Each attempt draws once against the level's spawn chance.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from ski_adventure.ski_core.config_loader import GameConfig, get_config
from ski_adventure.ski_core.difficulty import fish_spawn_chance, obstacle_spawn_chance
from ski_adventure.ski_core.entities import Fish, Obstacle
from ski_adventure.ski_core.sprite_loader import AssetTable
from ski_adventure.ski_core.state import SimulationState

logger = logging.getLogger(__name__)


class EntitySpawner:
    """
    Spawns fish and obstacles with a seeded RNG.

    A missing sprite makes the attempt a silent no-op; the startup asset
    check already guarantees every configured key is present.
    """

    def __init__(
        self,
        assets: AssetTable,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            assets: Shared sprite table used for entity sizes.
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._assets = assets
        self._rng = random.Random(seed)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reseed the generator. Keeps current state if seed is None."""
        if seed is not None:
            self._rng = random.Random(seed)

    def try_spawn_fish(self, state: SimulationState) -> Optional[Fish]:
        """Maybe add a fish just above the top edge. Returns it if spawned."""
        if self._rng.random() >= fish_spawn_chance(state.level, self._config.difficulty):
            return None

        species = self._rng.choice(self._config.species)
        sprite = self._assets.get(species.key)
        if sprite is None:
            logger.debug(f"Skipping fish spawn, sprite '{species.key}' not loaded")
            return None

        w, h = sprite.scaled_size(self._config.spawn.fish_scale)
        fish = Fish(
            x=self._rng.random() * (state.width - w) + w / 2,
            y=-h / 2,
            w=w,
            h=h,
            sprite_key=species.key,
            species=species
        )
        state.fishes.append(fish)
        return fish

    def try_spawn_obstacle(self, state: SimulationState) -> Optional[Obstacle]:
        """Maybe add a tree or snowman just above the top edge."""
        if self._rng.random() >= obstacle_spawn_chance(state.level, self._config.difficulty):
            return None

        tree_key, snowman_key = self._config.obstacle_keys
        key = tree_key if self._rng.random() < self._config.spawn.tree_weight else snowman_key
        sprite = self._assets.get(key)
        if sprite is None:
            logger.debug(f"Skipping obstacle spawn, sprite '{key}' not loaded")
            return None

        w, h = sprite.scaled_size(self._config.spawn.obstacle_scale)
        obstacle = Obstacle(
            x=self._rng.random() * (state.width - w),
            y=-h,
            w=w,
            h=h,
            sprite_key=key
        )
        state.obstacles.append(obstacle)
        return obstacle
