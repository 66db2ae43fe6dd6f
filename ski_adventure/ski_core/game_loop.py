"""
Game Loop
=========

Per-frame driver: tick then render while running and not paused.

Timing follows the display refresh (clock.tick at the target FPS); the
game's speeds are tuned per frame rather than per second.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ski_adventure.ski_core.game import SkiGame

logger = logging.getLogger(__name__)


class GameLoop:
    """
    Drives a SkiGame one frame at a time.

    frame() returns False once stop() has been called, which ends
    scheduling. A frame already in progress always completes.
    """

    def __init__(
        self,
        game: SkiGame,
        render: Callable[[], None],
        before_frame: Optional[Callable[[], None]] = None,
        after_frame: Optional[Callable[[], None]] = None
    ):
        """
        Args:
            game: The simulation to advance.
            render: Draws the current state (only called for simulated frames).
            before_frame: Hook run first every frame, e.g. to pump input events.
            after_frame: Hook run last every frame, e.g. to draw overlays and flip.
        """
        self._game = game
        self._render = render
        self._before_frame = before_frame
        self._after_frame = after_frame
        self._running = True
        self._frames = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def frames(self) -> int:
        """Frames executed so far (paused frames included)."""
        return self._frames

    def stop(self) -> None:
        """Suppress every further frame. Cannot be undone."""
        if self._running:
            logger.info("Game loop stopping")
        self._running = False

    def frame(self) -> bool:
        """Run one frame. Returns True if another frame should be scheduled."""
        if not self._running:
            return False

        if self._before_frame is not None:
            self._before_frame()
            if not self._running:
                return False

        if not self._game.is_paused:
            self._game.tick()
            self._render()

        if self._after_frame is not None:
            self._after_frame()

        self._frames += 1
        return self._running

    def run(self, clock=None, fps: Optional[int] = None) -> int:
        """
        Keep calling frame() until stopped.

        Args:
            clock: Object with tick(fps), normally pygame.time.Clock().
            fps: Target frame rate. Uses the configured rate if None.

        Returns:
            Number of frames executed.
        """
        if fps is None:
            fps = self._game.config.render.target_fps

        logger.info(f"Game loop started at {fps} FPS")
        while self.frame():
            if clock is not None:
                clock.tick(fps)
        return self._frames
