"""
Difficulty Model
================

Linear ramps mapping the current level to scroll speed and spawn chances.
All functions are pure; level 1 yields the base values.
"""

from __future__ import annotations

from ski_adventure.ski_core.config_loader import DifficultyConfig


def _steps(level: int) -> int:
    """Number of level increments above level 1."""
    return max(1, level) - 1


def scroll_speed(level: int, config: DifficultyConfig) -> float:
    """Pixels every entity moves down per tick at this level."""
    return config.base_scroll + _steps(level) * config.scroll_step


def fish_spawn_chance(level: int, config: DifficultyConfig) -> float:
    """Per-tick probability of spawning a fish at this level."""
    return config.base_fish_chance + _steps(level) * config.fish_step


def obstacle_spawn_chance(level: int, config: DifficultyConfig) -> float:
    """Per-tick probability of spawning an obstacle at this level."""
    return config.base_obstacle_chance + _steps(level) * config.obstacle_step
