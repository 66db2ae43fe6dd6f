"""
Core Game
=========

Main game orchestrator combining spawning, collisions, scoring and the
pause/overlay state machine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ski_adventure.ski_core.collision import CollisionResult, CollisionSystem
from ski_adventure.ski_core.config_loader import GameConfig, get_config
from ski_adventure.ski_core.difficulty import scroll_speed
from ski_adventure.ski_core.entities import Entity, Player
from ski_adventure.ski_core.overlay import OverlaySink, PauseController
from ski_adventure.ski_core.scoring import ScoreTracker
from ski_adventure.ski_core.spawner import EntitySpawner
from ski_adventure.ski_core.sprite_loader import AssetLoadError, AssetTable
from ski_adventure.ski_core.state import InputEvent, InputState, SimulationState

logger = logging.getLogger(__name__)

ScoreboardSink = Callable[[str], None]


@dataclass
class TickResult:
    """Result of a single simulation tick."""
    collisions: CollisionResult
    spawned: List[Entity] = field(default_factory=list)
    removed: int = 0
    delta_score: int = 0
    delta_level: int = 0


class SkiGame:
    """
    Main game simulation class.

    Orchestrates:
    - Player movement from the input state
    - Scrolling and removal of entities
    - Spawning under the difficulty curve
    - Collisions and scoring
    - The pause/overlay state machine

    One tick = one frame of simulation. Ticks only run while not paused.
    """

    def __init__(
        self,
        assets: AssetTable,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        overlay_sink: Optional[OverlaySink] = None,
        scoreboard_sink: Optional[ScoreboardSink] = None
    ):
        """
        Initialize game.

        Args:
            assets: Fully loaded sprite table.
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            overlay_sink: Receives overlay show/hide calls.
            scoreboard_sink: Receives the scoreboard text whenever it changes.

        Raises:
            AssetLoadError: If any required sprite is missing from `assets`.
        """
        if config is None:
            config = get_config()

        missing = assets.missing(config.required_sprites)
        if missing:
            raise AssetLoadError({key: "not loaded" for key in missing})

        self._config = config
        self._assets = assets
        self._seed = seed
        self._scoreboard_sink = scoreboard_sink

        # Initialize subsystems
        self._spawner = EntitySpawner(assets, config, seed)
        self._scorer = ScoreTracker(config)
        self._collisions = CollisionSystem(self._scorer)
        self._pause = PauseController(overlay_sink)
        self._input = InputState(speed=config.player.speed)

        self._state = self._new_state()
        self._publish_scoreboard()

    def _new_state(self) -> SimulationState:
        board = self._config.board
        w, h = self._assets["skier"].scaled_size(self._config.player.scale)
        player = Player(x=board.width / 2, y=board.height * self._config.player.y_ratio, w=w, h=h)
        return SimulationState(player=player, width=board.width, height=board.height)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def assets(self) -> AssetTable:
        """Shared sprite table."""
        return self._assets

    @property
    def state(self) -> SimulationState:
        """Live simulation state (read-only for callers)."""
        return self._state

    @property
    def pause(self) -> PauseController:
        """The overlay state machine."""
        return self._pause

    @property
    def is_paused(self) -> bool:
        return self._pause.is_paused

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def level(self) -> int:
        return self._state.level

    @property
    def scroll_speed(self) -> float:
        """Current scroll speed for the state's level."""
        return scroll_speed(self._state.level, self._config.difficulty)

    def reset(self, seed: Optional[int] = None) -> SimulationState:
        """
        Reset game to initial state.

        Args:
            seed: New random seed. Uses previous if None.

        Returns:
            The fresh simulation state.
        """
        if seed is not None:
            self._seed = seed

        self._spawner.reset(self._seed)
        self._scorer.reset()
        self._pause.reset()
        self._input.dx = 0.0
        self._state = self._new_state()
        self._publish_scoreboard()
        return self._state

    def handle_input(self, event: InputEvent) -> None:
        """Apply one discrete input event between ticks."""
        if event is InputEvent.DISMISS:
            self._pause.dismiss()
        else:
            self._input.apply(event)

    def tick(self) -> TickResult:
        """
        Advance the simulation by one tick.

        Order matters: entities move and spawn before collisions are checked,
        so a newly spawned entity never collides on its spawn frame.

        Does nothing while an overlay is showing.
        """
        if self._pause.is_paused:
            return TickResult(collisions=CollisionResult())

        state = self._state
        score_before = state.score
        level_before = state.level

        # 1. Player movement
        state.player.dx = self._input.dx
        state.player.move(state.width)

        # 2-3. Scroll entities and drop those past the bottom edge
        speed = self.scroll_speed
        removed = self._scroll(state, speed)

        # 4. Spawn attempts
        spawned: List[Entity] = []
        fish = self._spawner.try_spawn_fish(state)
        if fish is not None:
            spawned.append(fish)
        obstacle = self._spawner.try_spawn_obstacle(state)
        if obstacle is not None:
            spawned.append(obstacle)

        # 5. Collisions, scoring and overlay events
        collisions = self._collisions.resolve(state)
        for catch in collisions.catches:
            self._pause.fish_caught(catch.species_name, catch.score.level_up_message)

        # 6. Hit flash countdown
        if state.flash_frames > 0:
            state.flash_frames -= 1

        state.ticks += 1

        result = TickResult(
            collisions=collisions,
            spawned=spawned,
            removed=removed,
            delta_score=state.score - score_before,
            delta_level=state.level - level_before
        )
        if collisions.any:
            self._publish_scoreboard()
        return result

    @staticmethod
    def _scroll(state: SimulationState, speed: float) -> int:
        for entity in state.fishes:
            entity.y += speed
        for entity in state.obstacles:
            entity.y += speed

        before = state.entity_count
        state.fishes = [f for f in state.fishes if not f.is_past(state.height)]
        state.obstacles = [o for o in state.obstacles if not o.is_past(state.height)]
        return before - state.entity_count

    def _publish_scoreboard(self) -> None:
        if self._scoreboard_sink is not None:
            self._scoreboard_sink(self._state.scoreboard_text)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._state.score,
            "level": self._state.level,
            "ticks": self._state.ticks,
            "catches": self._scorer.catches,
            "hits": self._scorer.hits,
            "fish_count": len(self._state.fishes),
            "obstacle_count": len(self._state.obstacles),
            "paused": self._pause.is_paused,
        }
