"""
Collision System
================

Axis-aligned overlap tests between the skier and every live entity.
Caught fish are removed; obstacles stay on the slope after a hit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from ski_adventure.ski_core.entities import Box, Fish, Obstacle
from ski_adventure.ski_core.scoring import ScoreEvent, ScoreTracker
from ski_adventure.ski_core.state import SimulationState


@dataclass
class CatchEvent:
    """A fish the skier ran into this tick."""
    fish: Fish
    score: ScoreEvent

    @property
    def species_name(self) -> str:
        return self.fish.species.name


@dataclass
class CollisionResult:
    """Everything the collision pass did during one tick."""
    catches: List[CatchEvent] = field(default_factory=list)
    hits: List[Obstacle] = field(default_factory=list)

    @property
    def level_up_messages(self) -> List[str]:
        return [c.score.level_up_message for c in self.catches if c.score.leveled_up]

    @property
    def any(self) -> bool:
        return bool(self.catches or self.hits)


def overlapping_fish(player_box: Box, fishes: Iterable[Fish]) -> List[Fish]:
    """Fish whose centred box overlaps the player's box."""
    return [f for f in fishes if player_box.overlaps(f.box)]


def overlapping_obstacles(player_box: Box, obstacles: Sequence[Obstacle]) -> List[Obstacle]:
    """Obstacles whose top-left anchored box overlaps the player's box."""
    return [o for o in obstacles if player_box.overlaps(o.box)]


class CollisionSystem:
    """
    Resolves collisions for one tick.

    Fish are checked first, most recently spawned first, so the first catch
    (the one the overlay names) is the newest fish. Each caught fish is
    scored on its own, so several catches in one tick can each gain a level.
    Every obstacle hit costs a point; the flash countdown is simply restarted.
    """

    def __init__(self, scorer: ScoreTracker):
        self._scorer = scorer

    def resolve(self, state: SimulationState) -> CollisionResult:
        result = CollisionResult()
        player_box = state.player.box

        for fish in overlapping_fish(player_box, reversed(state.fishes)):
            state.fishes.remove(fish)
            result.catches.append(CatchEvent(fish, self._scorer.apply_catch(state)))

        for obstacle in overlapping_obstacles(player_box, state.obstacles):
            self._scorer.apply_hit(state)
            result.hits.append(obstacle)

        return result
