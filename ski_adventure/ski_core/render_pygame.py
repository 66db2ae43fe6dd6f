"""
Pygame Renderer
===============

Draws the slope: fish, obstacles, the skier and the red hit flash.
Supports both a display window (human play) and headless RGB output.

Rendering only reads the simulation state; overlays and the scoreboard are
drawn by the caller on top of the finished frame.
"""

from __future__ import annotations

from typing import Dict, Optional, Protocol, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from ski_adventure.ski_core.config_loader import GameConfig, get_config
from ski_adventure.ski_core.sprite_loader import AssetTable
from ski_adventure.ski_core.state import SimulationState

Rect = Tuple[float, float, float, float]
RGBA = Tuple[int, int, int, float]


class DrawingSurface(Protocol):
    """Minimal 2D drawing surface the scene is rendered onto."""

    def clear(self) -> None: ...

    def draw_image(self, key: str, rect: Rect, opacity: float) -> None: ...

    def fill_rect(self, rect: Rect, rgba: RGBA) -> None: ...


class PygameSurface:
    """DrawingSurface backed by a pygame.Surface and the shared sprite table."""

    def __init__(
        self,
        surface: "pygame.Surface",
        assets: AssetTable,
        background_color: Tuple[int, int, int] = (255, 255, 255)
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameSurface")

        self._surface = surface
        self._assets = assets
        self._background = background_color
        self._scaled_cache: Dict[Tuple[str, int, int], pygame.Surface] = {}

    @property
    def surface(self) -> "pygame.Surface":
        return self._surface

    def clear(self) -> None:
        self._surface.fill(self._background)

    def _scaled(self, key: str, w: int, h: int) -> Optional["pygame.Surface"]:
        cache_key = (key, w, h)
        if cache_key not in self._scaled_cache:
            sprite = self._assets.get(key)
            if sprite is None or sprite.surface is None:
                return None
            self._scaled_cache[cache_key] = pygame.transform.smoothscale(sprite.surface, (w, h))
        return self._scaled_cache[cache_key]

    def draw_image(self, key: str, rect: Rect, opacity: float) -> None:
        x, y, w, h = rect
        w, h = max(1, int(round(w))), max(1, int(round(h)))
        image = self._scaled(key, w, h)
        if image is None:
            return
        if opacity < 1.0:
            image = image.copy()
            image.set_alpha(int(255 * opacity))
        self._surface.blit(image, (int(round(x)), int(round(y))))

    def fill_rect(self, rect: Rect, rgba: RGBA) -> None:
        x, y, w, h = (int(round(v)) for v in rect)
        r, g, b, a = rgba
        tint = pygame.Surface((max(1, w), max(1, h)), pygame.SRCALPHA)
        tint.fill((r, g, b, int(255 * max(0.0, min(1.0, a)))))
        self._surface.blit(tint, (x, y))


class SceneRenderer:
    """
    Renders one simulation frame.

    Draw order: fish, obstacles, player (all semi-transparent), then a
    full-surface red tint whose opacity fades with the hit flash countdown.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._alpha = config.render.entity_alpha

    def flash_opacity(self, flash_frames: int) -> float:
        """Tint opacity for the remaining hit flash ticks."""
        if flash_frames <= 0:
            return 0.0
        ticks = self._config.scoring.hit_flash_ticks
        return self._config.render.flash_max_opacity * (flash_frames / ticks)

    def render(self, state: SimulationState, surface: DrawingSurface) -> None:
        """Draw `state` onto `surface` without modifying it."""
        surface.clear()

        for fish in state.fishes:
            surface.draw_image(fish.sprite_key, fish.box.as_rect(), self._alpha)

        for obstacle in state.obstacles:
            surface.draw_image(obstacle.sprite_key, obstacle.box.as_rect(), self._alpha)

        surface.draw_image("skier", state.player.box.as_rect(), self._alpha)

        opacity = self.flash_opacity(state.flash_frames)
        if opacity > 0:
            r, g, b = self._config.render.flash_color
            surface.fill_rect((0, 0, state.width, state.height), (r, g, b, opacity))

    def render_rgb(self, state: SimulationState, assets: AssetTable) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Returns:
            (height, width, 3) uint8 array.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for RGB rendering")

        target = pygame.Surface((int(state.width), int(state.height)))
        self.render(state, PygameSurface(target, assets, self._config.render.background_color))
        array = pygame.surfarray.array3d(target)
        return np.transpose(array, (1, 0, 2))
