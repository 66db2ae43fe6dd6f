"""
Simulation State
================

Everything the tick mutates, consolidated in one owned value, plus the
input state that discrete key events write into between ticks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List

from ski_adventure.ski_core.entities import Fish, Obstacle, Player


class InputEvent(Enum):
    """Discrete events delivered by the input source."""
    MOVE_LEFT_BEGIN = auto()
    MOVE_LEFT_END = auto()
    MOVE_RIGHT_BEGIN = auto()
    MOVE_RIGHT_END = auto()
    DISMISS = auto()


@dataclass
class InputState:
    """
    Most recent movement intent.

    Last writer wins: pressing a direction sets the velocity, releasing
    either direction stops the skier.
    """
    speed: float
    dx: float = 0.0

    def apply(self, event: InputEvent) -> None:
        if event is InputEvent.MOVE_LEFT_BEGIN:
            self.dx = -self.speed
        elif event is InputEvent.MOVE_RIGHT_BEGIN:
            self.dx = self.speed
        elif event in (InputEvent.MOVE_LEFT_END, InputEvent.MOVE_RIGHT_END):
            self.dx = 0.0


@dataclass
class SimulationState:
    """Score, level, the skier and every live entity."""
    player: Player
    width: float
    height: float
    score: int = 0
    level: int = 1
    fishes: List[Fish] = field(default_factory=list)
    obstacles: List[Obstacle] = field(default_factory=list)
    flash_frames: int = 0
    ticks: int = 0

    @property
    def entity_count(self) -> int:
        return len(self.fishes) + len(self.obstacles)

    @property
    def scoreboard_text(self) -> str:
        return f"Fish: {self.score} | Level: {self.level}"
