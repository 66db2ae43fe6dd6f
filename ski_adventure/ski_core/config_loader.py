"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Slope (canvas) geometry."""
    width: int                   # Canvas width in pixels
    height: int                  # Canvas height in pixels


@dataclass(frozen=True)
class PlayerConfig:
    """Skier movement and sizing."""
    speed: float                 # Horizontal speed in pixels per frame
    scale: float                 # Multiplier on the skier sprite's natural size
    y_ratio: float               # Fixed vertical position as a fraction of height


@dataclass(frozen=True)
class DifficultyConfig:
    """Linear difficulty ramps, indexed by level."""
    base_scroll: float
    scroll_step: float
    base_fish_chance: float
    fish_step: float
    base_obstacle_chance: float
    obstacle_step: float


@dataclass(frozen=True)
class SpawnConfig:
    """Entity sizing and obstacle kind weighting."""
    fish_scale: float
    obstacle_scale: float
    tree_weight: float           # Probability an obstacle is a tree (else a snowman)


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring and leveling parameters."""
    fishes_per_level: int
    hit_flash_ticks: int


@dataclass(frozen=True)
class RenderConfig:
    """Drawing parameters."""
    entity_alpha: float
    flash_max_opacity: float
    flash_color: Tuple[int, int, int]
    background_color: Tuple[int, int, int]
    target_fps: int


@dataclass(frozen=True)
class AssetsConfig:
    """Sprite files, keyed by logical sprite name."""
    directory: str
    files: Dict[str, str]


@dataclass(frozen=True)
class ObservationConfig:
    """Gymnasium observation parameters."""
    max_entities: int
    max_ticks: int


@dataclass(frozen=True)
class SpeciesConfig:
    """A catchable fish species and the sprite it is drawn with."""
    name: str
    key: str


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    player: PlayerConfig
    difficulty: DifficultyConfig
    spawn: SpawnConfig
    scoring: ScoringConfig
    render: RenderConfig
    assets: AssetsConfig
    observation: ObservationConfig
    species: Tuple[SpeciesConfig, ...]
    level_up_messages: Tuple[str, ...]

    @property
    def obstacle_keys(self) -> Tuple[str, str]:
        """Sprite keys of the two obstacle kinds (tree, snowman)."""
        return ("tree", "snowman")

    @property
    def required_sprites(self) -> Tuple[str, ...]:
        """Every sprite key the game needs before the first tick."""
        return tuple(self.assets.files.keys())


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_species(species_data: dict) -> SpeciesConfig:
    """Parse a single species entry from YAML."""
    return SpeciesConfig(
        name=str(species_data["name"]),
        key=str(species_data["key"])
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.board.width <= 0 or config.board.height <= 0:
        raise ValueError(
            f"Board size must be positive, got {config.board.width}x{config.board.height}"
        )

    # Spawn chances must stay probabilities at level 1
    diff = config.difficulty
    for name, value in (
        ("base_fish_chance", diff.base_fish_chance),
        ("base_obstacle_chance", diff.base_obstacle_chance),
    ):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"difficulty.{name} must be in [0, 1], got {value}")

    if not 0.0 <= config.spawn.tree_weight <= 1.0:
        raise ValueError(f"spawn.tree_weight must be in [0, 1], got {config.spawn.tree_weight}")

    if config.scoring.fishes_per_level < 1:
        raise ValueError(
            f"scoring.fishes_per_level must be at least 1, got {config.scoring.fishes_per_level}"
        )

    if config.scoring.hit_flash_ticks < 1:
        raise ValueError(
            f"scoring.hit_flash_ticks must be at least 1, got {config.scoring.hit_flash_ticks}"
        )

    if not config.species:
        raise ValueError("At least one fish species is required")

    if not config.level_up_messages:
        raise ValueError("At least one level-up message is required")

    # Every sprite referenced by gameplay must have a file
    referenced = {"skier", "catch", "levelup", *config.obstacle_keys}
    referenced.update(s.key for s in config.species)
    missing = sorted(referenced - set(config.assets.files))
    if missing:
        raise ValueError(f"assets.files is missing sprite keys: {missing}")


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

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"])
    )

    player_data = raw["player"]
    player = PlayerConfig(
        speed=float(player_data["speed"]),
        scale=float(player_data["scale"]),
        y_ratio=float(player_data.get("y_ratio", 0.8))
    )

    diff_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        base_scroll=float(diff_data["base_scroll"]),
        scroll_step=float(diff_data["scroll_step"]),
        base_fish_chance=float(diff_data["base_fish_chance"]),
        fish_step=float(diff_data["fish_step"]),
        base_obstacle_chance=float(diff_data["base_obstacle_chance"]),
        obstacle_step=float(diff_data["obstacle_step"])
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        fish_scale=float(spawn_data["fish_scale"]),
        obstacle_scale=float(spawn_data["obstacle_scale"]),
        tree_weight=float(spawn_data.get("tree_weight", 0.6))
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        fishes_per_level=int(scoring_data["fishes_per_level"]),
        hit_flash_ticks=int(scoring_data.get("hit_flash_ticks", 15))
    )

    render_data = raw.get("render", {})
    render = RenderConfig(
        entity_alpha=float(render_data.get("entity_alpha", 0.8)),
        flash_max_opacity=float(render_data.get("flash_max_opacity", 0.3)),
        flash_color=_parse_color(render_data.get("flash_color", [255, 0, 0])),
        background_color=_parse_color(render_data.get("background_color", [255, 255, 255])),
        target_fps=int(render_data.get("target_fps", 60))
    )

    assets_data = raw["assets"]
    assets = AssetsConfig(
        directory=str(assets_data.get("directory", "images")),
        files={str(k): str(v) for k, v in assets_data["files"].items()}
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_entities=int(obs_data.get("max_entities", 32)),
        max_ticks=int(obs_data.get("max_ticks", 10000))
    )

    species = tuple(_parse_species(s) for s in raw["species"])
    messages = tuple(str(m) for m in raw["level_up_messages"])

    config = GameConfig(
        board=board,
        player=player,
        difficulty=difficulty,
        spawn=spawn,
        scoring=scoring,
        render=render,
        assets=assets,
        observation=observation,
        species=species,
        level_up_messages=messages
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
