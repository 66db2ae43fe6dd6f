"""
Sprite Loader
==============

Loads every sprite the game needs into an immutable asset table.

Loading is all-or-nothing: if any required image fails, AssetLoadError is
raised and the session must not start. Placeholder sprites can be generated
instead of read from disk for headless runs and for playing without artwork.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from ski_adventure.ski_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)

ASSETS_ROOT = Path(__file__).parent.parent.parent

# Natural (unscaled) sizes used for generated placeholder sprites
PLACEHOLDER_SIZES: Dict[str, Tuple[int, int]] = {
    "skier": (600, 900),
    "tree": (700, 1000),
    "snowman": (600, 800),
    "catch": (320, 320),
    "levelup": (320, 320),
}
PLACEHOLDER_FISH_SIZE = (900, 500)

PLACEHOLDER_COLORS: Dict[str, Tuple[int, int, int]] = {
    "skier": (200, 40, 40),
    "tree": (30, 110, 50),
    "snowman": (235, 240, 250),
    "catch": (60, 90, 170),
    "levelup": (220, 160, 40),
    "salmon": (240, 130, 110),
    "steelhead": (120, 150, 190),
    "sturgeon": (110, 100, 90),
    "bass": (90, 140, 70),
    "panfish": (200, 180, 80),
    "catfish": (130, 110, 80),
}


class AssetLoadError(RuntimeError):
    """One or more required sprites could not be loaded."""

    def __init__(self, failures: Dict[str, str]):
        self.failures = dict(failures)
        details = ", ".join(f"{key} ({reason})" for key, reason in sorted(self.failures.items()))
        super().__init__(f"Failed to load sprites: {details}")


@dataclass(frozen=True)
class Sprite:
    """A loaded image: natural size plus a drawable handle."""
    width: int
    height: int
    surface: Any = None  # pygame.Surface, or None for size-only tables

    def scaled_size(self, scale: float) -> Tuple[float, float]:
        """Bounding box of this sprite drawn at the given scale."""
        return (self.width * scale, self.height * scale)


class AssetTable(Mapping):
    """
    Read-only mapping of sprite key -> Sprite.

    Built once before the first tick and shared by reference with every
    entity and the renderer.
    """

    def __init__(self, sprites: Dict[str, Sprite]):
        self._sprites = dict(sprites)

    def __getitem__(self, key: str) -> Sprite:
        return self._sprites[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sprites)

    def __len__(self) -> int:
        return len(self._sprites)

    def __repr__(self) -> str:
        return f"AssetTable({sorted(self._sprites)})"

    def missing(self, keys) -> Tuple[str, ...]:
        """Keys from `keys` that are not present in the table."""
        return tuple(k for k in keys if k not in self._sprites)

    @classmethod
    def from_sizes(cls, sizes: Dict[str, Tuple[int, int]]) -> "AssetTable":
        """Build a table with natural sizes only (no drawable surfaces)."""
        return cls({key: Sprite(int(w), int(h)) for key, (w, h) in sizes.items()})


def _resolve_paths(config: GameConfig, assets_dir: Optional[Path]) -> Dict[str, Path]:
    base = Path(assets_dir) if assets_dir is not None else ASSETS_ROOT / config.assets.directory
    return {key: base / filename for key, filename in config.assets.files.items()}


def _ensure_display() -> None:
    """Set up a hidden display so loaded images can be converted."""
    if pygame.display.get_surface() is None:
        try:
            pygame.display.set_mode((1, 1), pygame.HIDDEN)
        except (pygame.error, AttributeError):
            pass


def _read_image(path: Path):
    """Read one image file; raises on any failure."""
    if not path.exists():
        raise FileNotFoundError(f"no such file: {path}")
    return pygame.image.load(str(path))


def _to_sprite(image) -> Sprite:
    if pygame.display.get_surface() is not None:
        image = image.convert_alpha()
    width, height = image.get_size()
    return Sprite(width, height, image)


def _finish(config: GameConfig, sprites: Dict[str, Sprite], failures: Dict[str, str]) -> AssetTable:
    for key in config.required_sprites:
        if key not in sprites and key not in failures:
            failures[key] = "not configured"
    if failures:
        raise AssetLoadError(failures)
    logger.info(f"Loaded {len(sprites)} sprites")
    return AssetTable(sprites)


def load_assets(
    config: Optional[GameConfig] = None,
    assets_dir: Optional[Path] = None
) -> AssetTable:
    """
    Load every configured sprite from disk.

    Args:
        config: Game configuration. Uses default if None.
        assets_dir: Directory holding the image files. Uses the configured
            directory next to the package if None.

    Returns:
        AssetTable containing every required sprite.

    Raises:
        AssetLoadError: If any sprite fails to load.
    """
    if not PYGAME_AVAILABLE:
        raise ImportError("pygame required for sprite loading")

    if config is None:
        config = get_config()

    _ensure_display()

    sprites: Dict[str, Sprite] = {}
    failures: Dict[str, str] = {}
    for key, path in _resolve_paths(config, assets_dir).items():
        try:
            sprites[key] = _to_sprite(_read_image(path))
        except (pygame.error, OSError) as e:
            failures[key] = str(e)

    return _finish(config, sprites, failures)


async def load_assets_async(
    config: Optional[GameConfig] = None,
    assets_dir: Optional[Path] = None
) -> AssetTable:
    """
    Load every configured sprite concurrently and join on all of them.

    File reads run in worker threads; surface conversion happens on the
    calling thread once every read has finished.

    Raises:
        AssetLoadError: If any sprite fails to load.
    """
    if not PYGAME_AVAILABLE:
        raise ImportError("pygame required for sprite loading")

    if config is None:
        config = get_config()

    paths = _resolve_paths(config, assets_dir)
    keys = list(paths)
    results = await asyncio.gather(
        *(asyncio.to_thread(_read_image, paths[key]) for key in keys),
        return_exceptions=True
    )

    _ensure_display()

    sprites: Dict[str, Sprite] = {}
    failures: Dict[str, str] = {}
    for key, result in zip(keys, results):
        if isinstance(result, (pygame.error, OSError)):
            failures[key] = str(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            sprites[key] = _to_sprite(result)

    return _finish(config, sprites, failures)


def _placeholder_size(key: str, config: GameConfig) -> Tuple[int, int]:
    if key in PLACEHOLDER_SIZES:
        return PLACEHOLDER_SIZES[key]
    if key in {s.key for s in config.species}:
        return PLACEHOLDER_FISH_SIZE
    return (400, 400)


def _draw_placeholder(key: str, size: Tuple[int, int]):
    """Draw a simple shape standing in for a sprite."""
    w, h = size
    surface = pygame.Surface((w, h), pygame.SRCALPHA)
    color = PLACEHOLDER_COLORS.get(key, (180, 180, 180))
    outline = tuple(max(0, c - 70) for c in color)
    border = max(2, min(w, h) // 30)

    if key == "tree":
        trunk_w = w // 6
        pygame.draw.rect(surface, (100, 70, 40), (w // 2 - trunk_w // 2, h * 3 // 4, trunk_w, h // 4))
        pygame.draw.polygon(surface, color, [(w // 2, 0), (w - 1, h * 3 // 4), (0, h * 3 // 4)])
    elif key == "snowman":
        r_low, r_high = w // 2, w // 3
        pygame.draw.circle(surface, color, (w // 2, h - r_low), r_low)
        pygame.draw.circle(surface, outline, (w // 2, h - r_low), r_low, border)
        pygame.draw.circle(surface, color, (w // 2, r_high), r_high)
        pygame.draw.circle(surface, outline, (w // 2, r_high), r_high, border)
    elif key == "skier":
        pygame.draw.ellipse(surface, color, (w // 5, h // 6, w * 3 // 5, h * 2 // 3))
        pygame.draw.circle(surface, (240, 200, 170), (w // 2, h // 8), w // 6)
        pygame.draw.rect(surface, (40, 40, 40), (w // 10, h - h // 12, w * 8 // 10, h // 24))
    elif key in ("catch", "levelup"):
        pygame.draw.rect(surface, color, (0, 0, w, h), border_radius=w // 8)
        pygame.draw.circle(surface, (255, 255, 255), (w // 2, h // 2), w // 4, border)
    else:
        # Fish: body plus tail
        pygame.draw.ellipse(surface, color, (w // 6, h // 6, w * 2 // 3, h * 2 // 3))
        pygame.draw.ellipse(surface, outline, (w // 6, h // 6, w * 2 // 3, h * 2 // 3), border)
        pygame.draw.polygon(surface, color, [(w // 6, h // 2), (0, h // 8), (0, h * 7 // 8)])
        pygame.draw.circle(surface, (30, 30, 30), (w * 2 // 3, h * 2 // 5), max(2, h // 14))

    return surface


def placeholder_assets(config: Optional[GameConfig] = None, draw: bool = True) -> AssetTable:
    """
    Build an asset table of generated sprites for every configured key.

    Args:
        config: Game configuration. Uses default if None.
        draw: If False, only natural sizes are recorded (no pygame needed).
    """
    if config is None:
        config = get_config()

    sizes = {key: _placeholder_size(key, config) for key in config.required_sprites}
    if not draw:
        return AssetTable.from_sizes(sizes)

    if not PYGAME_AVAILABLE:
        raise ImportError("pygame required for placeholder sprites")

    sprites = {
        key: Sprite(w, h, _draw_placeholder(key, (w, h)))
        for key, (w, h) in sizes.items()
    }
    logger.info(f"Generated {len(sprites)} placeholder sprites")
    return AssetTable(sprites)
