"""
Scoring System
==============

Applies fish catches and obstacle hits to the simulation state and rotates
through the congratulatory level-up messages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ski_adventure.ski_core.config_loader import GameConfig, get_config
from ski_adventure.ski_core.state import SimulationState

logger = logging.getLogger(__name__)


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int                                # Applied score change (after flooring)
    level_up_message: Optional[str] = None     # Set when this event gained a level

    @property
    def leveled_up(self) -> bool:
        return self.level_up_message is not None

    def __repr__(self) -> str:
        if self.leveled_up:
            return f"ScoreEvent({self.points:+d}, level_up)"
        return f"ScoreEvent({self.points:+d})"


class ScoreTracker:
    """
    Mutates score and level on a SimulationState.

    Every fish is worth one point. Reaching a positive multiple of
    fishes_per_level gains one level; obstacle hits cost one point but never
    take the score below zero or the level down.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._message_index: int = 0
        self._catches: int = 0
        self._hits: int = 0

    @property
    def catches(self) -> int:
        """Total fish caught this session."""
        return self._catches

    @property
    def hits(self) -> int:
        """Total obstacle hits this session."""
        return self._hits

    def next_level_up_message(self) -> str:
        """Return the next congratulatory message, cycling through the list."""
        messages = self._config.level_up_messages
        message = messages[self._message_index % len(messages)]
        self._message_index = (self._message_index + 1) % len(messages)
        return message

    def apply_catch(self, state: SimulationState) -> ScoreEvent:
        """Score one caught fish, gaining a level on each multiple crossed."""
        state.score += 1
        self._catches += 1

        per_level = self._config.scoring.fishes_per_level
        if state.score > 0 and state.score % per_level == 0:
            state.level += 1
            logger.info(f"Level up: {state.level} (score {state.score})")
            return ScoreEvent(points=1, level_up_message=self.next_level_up_message())

        return ScoreEvent(points=1)

    def apply_hit(self, state: SimulationState) -> ScoreEvent:
        """Penalise one obstacle hit and restart the hit flash."""
        state.flash_frames = self._config.scoring.hit_flash_ticks
        self._hits += 1
        if state.score > 0:
            state.score -= 1
            return ScoreEvent(points=-1)
        return ScoreEvent(points=0)

    def reset(self) -> None:
        """Restart the message rotation and session counters."""
        self._message_index = 0
        self._catches = 0
        self._hits = 0
