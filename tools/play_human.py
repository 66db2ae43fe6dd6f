"""
Human Play Mode
================

Play Ski Adventure in a pygame window.

Controls:
    - Left/Right or A/D: Steer
    - Space: Dismiss the catch / level-up message
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--placeholder-sprites]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from ski_adventure.ski_core.config_loader import GameConfig, load_config
from ski_adventure.ski_core.game import SkiGame
from ski_adventure.ski_core.game_loop import GameLoop
from ski_adventure.ski_core.render_pygame import PygameSurface, SceneRenderer
from ski_adventure.ski_core.sprite_loader import (
    AssetLoadError,
    AssetTable,
    load_assets_async,
    placeholder_assets,
)
from ski_adventure.ski_core.state import InputEvent

logger = logging.getLogger(__name__)

KEYDOWN_EVENTS = {
    "left": InputEvent.MOVE_LEFT_BEGIN,
    "a": InputEvent.MOVE_LEFT_BEGIN,
    "right": InputEvent.MOVE_RIGHT_BEGIN,
    "d": InputEvent.MOVE_RIGHT_BEGIN,
    "space": InputEvent.DISMISS,
}

KEYUP_EVENTS = {
    "left": InputEvent.MOVE_LEFT_END,
    "a": InputEvent.MOVE_LEFT_END,
    "right": InputEvent.MOVE_RIGHT_END,
    "d": InputEvent.MOVE_RIGHT_END,
}


class WindowOverlay:
    """Overlay sink that remembers what to draw over the frozen frame."""

    def __init__(self):
        self.current: Optional[Tuple[str, str]] = None

    def show(self, message: str, image: str) -> None:
        self.current = (message, image)

    def hide(self) -> None:
        self.current = None


class Scoreboard:
    """Scoreboard sink holding the latest text."""

    def __init__(self):
        self.text = ""

    def __call__(self, text: str) -> None:
        self.text = text


class HudRenderer:
    """Draws the scoreboard and the modal overlay panel."""

    def __init__(self, assets: AssetTable, width: int, height: int):
        self._assets = assets
        self._width = width
        self._height = height

        # Colors - snowy palette
        self._panel_fill = (250, 252, 255)
        self._panel_border = (90, 120, 160)
        self._text_dark = (30, 40, 60)
        self._text_light = (90, 100, 120)
        self._dim = (0, 0, 0, 140)

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 36)
        self._font_medium = pygame.font.Font(None, 28)
        self._font_small = pygame.font.Font(None, 22)

    def draw_scoreboard(self, screen: pygame.Surface, text: str) -> None:
        label = self._font_medium.render(text, True, self._text_dark)
        x, y = 12, self._height - label.get_height() - 12
        back = pygame.Surface((label.get_width() + 16, label.get_height() + 10), pygame.SRCALPHA)
        back.fill((255, 255, 255, 190))
        screen.blit(back, (x - 8, y - 5))
        screen.blit(label, (x, y))

    def _wrap(self, text: str, font: pygame.font.Font, max_width: int) -> List[str]:
        lines: List[str] = []
        line = ""
        for word in text.split():
            candidate = f"{line} {word}".strip()
            if font.size(candidate)[0] <= max_width or not line:
                line = candidate
            else:
                lines.append(line)
                line = word
        if line:
            lines.append(line)
        return lines

    def draw_overlay(self, screen: pygame.Surface, message: str, image: str) -> None:
        dim = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        dim.fill(self._dim)
        screen.blit(dim, (0, 0))

        box_w = min(560, self._width - 40)
        image_size = 180
        lines = self._wrap(message, self._font_large, box_w - 40)
        line_h = self._font_large.get_linesize()
        box_h = 40 + image_size + 20 + line_h * len(lines) + 50
        box_x = (self._width - box_w) // 2
        box_y = (self._height - box_h) // 2

        pygame.draw.rect(screen, self._panel_fill, (box_x, box_y, box_w, box_h), border_radius=16)
        pygame.draw.rect(screen, self._panel_border, (box_x, box_y, box_w, box_h), 3, border_radius=16)

        sprite = self._assets.get(image)
        if sprite is not None and sprite.surface is not None:
            scale = image_size / max(sprite.width, sprite.height)
            size = (max(1, int(sprite.width * scale)), max(1, int(sprite.height * scale)))
            picture = pygame.transform.smoothscale(sprite.surface, size)
            screen.blit(picture, (box_x + (box_w - size[0]) // 2, box_y + 20 + (image_size - size[1]) // 2))

        y = box_y + 40 + image_size
        for line in lines:
            text = self._font_large.render(line, True, self._text_dark)
            screen.blit(text, (box_x + (box_w - text.get_width()) // 2, y))
            y += line_h

        hint = self._font_small.render("Press SPACE to continue", True, self._text_light)
        screen.blit(hint, (box_x + (box_w - hint.get_width()) // 2, box_y + box_h - 35))


class HumanPlayer:
    """Interactive ski game in a pygame window."""

    def __init__(
        self,
        assets: AssetTable,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: Optional[int] = None
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._fps = target_fps or config.render.target_fps
        width, height = config.board.width, config.board.height

        pygame.init()
        self._screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Ski Adventure")
        self._clock = pygame.time.Clock()

        self._overlay = WindowOverlay()
        self._scoreboard = Scoreboard()
        self._game = SkiGame(
            assets,
            config=config,
            seed=seed,
            overlay_sink=self._overlay,
            scoreboard_sink=self._scoreboard
        )

        # The scene is drawn off-screen so a paused frame can be re-shown under the overlay
        self._scene = pygame.Surface((width, height))
        self._scene_surface = PygameSurface(self._scene, assets, config.render.background_color)
        self._renderer = SceneRenderer(config)
        self._hud = HudRenderer(assets, width, height)

        self._loop = GameLoop(
            self._game,
            render=self._render_scene,
            before_frame=self._handle_events,
            after_frame=self._present
        )
        self._render_scene()

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Ski Adventure ===")
        print("Left/Right or A/D to steer, Space to continue after a message")
        print("ESC to quit")
        print()

        self._loop.run(self._clock, self._fps)
        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Translate pygame events into game input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._loop.stop()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._loop.stop()
                    continue
                mapped = KEYDOWN_EVENTS.get(pygame.key.name(event.key))
                if mapped is not None:
                    self._game.handle_input(mapped)
            elif event.type == pygame.KEYUP:
                mapped = KEYUP_EVENTS.get(pygame.key.name(event.key))
                if mapped is not None:
                    self._game.handle_input(mapped)

    def _render_scene(self) -> None:
        self._renderer.render(self._game.state, self._scene_surface)

    def _present(self) -> None:
        """Show the last simulated frame plus scoreboard or overlay."""
        self._screen.blit(self._scene, (0, 0))
        if self._overlay.current is not None:
            self._hud.draw_overlay(self._screen, *self._overlay.current)
        elif self._game.pause.scoreboard_visible:
            self._hud.draw_scoreboard(self._screen, self._scoreboard.text)
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Ski Adventure interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=None, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--assets-dir", type=Path, default=None, help="Directory with sprite images")
    parser.add_argument(
        "--placeholder-sprites",
        action="store_true",
        help="Draw simple generated sprites instead of loading images"
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    try:
        config = load_config(args.config)
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")
        pygame.init()
        if args.placeholder_sprites:
            assets = placeholder_assets(config)
        else:
            assets = asyncio.run(load_assets_async(config, args.assets_dir))

        player = HumanPlayer(assets, config=config, seed=args.seed, target_fps=args.fps)
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except AssetLoadError as e:
        logger.error(f"Cannot start: {e}")
        return 1
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
