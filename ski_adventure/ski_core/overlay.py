"""
Pause / Overlay State Machine
=============================

Decides whether the simulation advances and which modal overlay is shown.

A fish catch pauses the game behind a catch overlay. If that catch also
gained a level, the level-up message is queued and shown as soon as the
catch overlay is dismissed, with no running frame in between.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Deque, Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

CATCH_IMAGE = "catch"
LEVEL_UP_IMAGE = "levelup"


class OverlayPhase(Enum):
    RUNNING = auto()
    CATCH = auto()                  # Catch overlay, nothing queued
    CATCH_LEVEL_PENDING = auto()    # Catch overlay, level-up queued behind it
    LEVEL_UP = auto()               # Level-up overlay


class OverlayEvent(Enum):
    CATCH = auto()
    CATCH_WITH_LEVEL_UP = auto()
    DISMISS = auto()


_P = OverlayPhase
_E = OverlayEvent

TRANSITIONS: Dict[Tuple[OverlayPhase, OverlayEvent], OverlayPhase] = {
    (_P.RUNNING, _E.CATCH): _P.CATCH,
    (_P.RUNNING, _E.CATCH_WITH_LEVEL_UP): _P.CATCH_LEVEL_PENDING,
    (_P.RUNNING, _E.DISMISS): _P.RUNNING,

    (_P.CATCH, _E.CATCH): _P.CATCH,
    (_P.CATCH, _E.CATCH_WITH_LEVEL_UP): _P.CATCH_LEVEL_PENDING,
    (_P.CATCH, _E.DISMISS): _P.RUNNING,

    (_P.CATCH_LEVEL_PENDING, _E.CATCH): _P.CATCH_LEVEL_PENDING,
    (_P.CATCH_LEVEL_PENDING, _E.CATCH_WITH_LEVEL_UP): _P.CATCH_LEVEL_PENDING,
    (_P.CATCH_LEVEL_PENDING, _E.DISMISS): _P.LEVEL_UP,

    (_P.LEVEL_UP, _E.CATCH): _P.LEVEL_UP,
    (_P.LEVEL_UP, _E.CATCH_WITH_LEVEL_UP): _P.LEVEL_UP,
    # Falls through to LEVEL_UP again while messages remain queued
    (_P.LEVEL_UP, _E.DISMISS): _P.RUNNING,
}


@dataclass(frozen=True)
class Overlay:
    """A visible modal message and the image shown beside it."""
    message: str
    image: str


class OverlaySink(Protocol):
    """Whatever actually displays overlays (window, DOM, test double)."""

    def show(self, message: str, image: str) -> None: ...

    def hide(self) -> None: ...


class PauseController:
    """
    Runs the overlay transition table and notifies the overlay sink.

    Invariants: at most one overlay is visible; every queued level-up
    message is shown exactly once.
    """

    def __init__(self, sink: Optional[OverlaySink] = None):
        self._sink = sink
        self._phase = OverlayPhase.RUNNING
        self._overlay: Optional[Overlay] = None
        self._pending: Deque[str] = deque()

    @property
    def phase(self) -> OverlayPhase:
        return self._phase

    @property
    def overlay(self) -> Optional[Overlay]:
        """The overlay currently visible, or None while running."""
        return self._overlay

    @property
    def is_paused(self) -> bool:
        return self._phase is not OverlayPhase.RUNNING

    @property
    def scoreboard_visible(self) -> bool:
        return not self.is_paused

    @property
    def pending_level_ups(self) -> Tuple[str, ...]:
        return tuple(self._pending)

    def fish_caught(self, species_name: str, level_up_message: Optional[str] = None) -> None:
        """Pause behind a catch overlay, queueing a level-up notice if given."""
        if level_up_message is not None:
            self._pending.append(level_up_message)
            event = OverlayEvent.CATCH_WITH_LEVEL_UP
        else:
            event = OverlayEvent.CATCH

        was_running = not self.is_paused
        self._set_phase(TRANSITIONS[(self._phase, event)])
        if was_running:
            self._show(Overlay(f"You caught a {species_name}!", CATCH_IMAGE))

    def dismiss(self) -> OverlayPhase:
        """Close the visible overlay. No-op while running."""
        if not self.is_paused:
            return self._phase

        target = TRANSITIONS[(self._phase, OverlayEvent.DISMISS)]
        if target is OverlayPhase.RUNNING and self._pending:
            target = OverlayPhase.LEVEL_UP
        self._set_phase(target)

        if target is OverlayPhase.LEVEL_UP:
            self._show(Overlay(self._pending.popleft(), LEVEL_UP_IMAGE))
        else:
            self._overlay = None
            if self._sink is not None:
                self._sink.hide()
        return self._phase

    def reset(self) -> None:
        """Return to running with nothing queued."""
        if self._overlay is not None and self._sink is not None:
            self._sink.hide()
        self._phase = OverlayPhase.RUNNING
        self._overlay = None
        self._pending.clear()

    def _show(self, overlay: Overlay) -> None:
        self._overlay = overlay
        if self._sink is not None:
            self._sink.show(overlay.message, overlay.image)

    def _set_phase(self, phase: OverlayPhase) -> None:
        if phase is not self._phase:
            logger.debug(f"Overlay: {self._phase.name} -> {phase.name}")
        self._phase = phase
