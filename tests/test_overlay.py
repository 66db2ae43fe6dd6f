"""
Tests for the pause/overlay state machine.
"""

import pytest

from ski_adventure.ski_core.overlay import (
    CATCH_IMAGE,
    LEVEL_UP_IMAGE,
    TRANSITIONS,
    Overlay,
    OverlayEvent,
    OverlayPhase,
    PauseController,
)


class RecordingSink:
    """Overlay sink that records every call."""

    def __init__(self):
        self.calls = []

    def show(self, message, image):
        self.calls.append(("show", message, image))

    def hide(self):
        self.calls.append(("hide",))


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def controller(sink):
    return PauseController(sink)


class TestTransitionTable:
    """The table covers every phase/event pair."""

    def test_table_is_total(self):
        for phase in OverlayPhase:
            for event in OverlayEvent:
                assert (phase, event) in TRANSITIONS

    def test_dismiss_while_running_is_noop(self, controller, sink):
        assert controller.dismiss() is OverlayPhase.RUNNING
        assert controller.overlay is None
        assert sink.calls == []


class TestCatchOverlay:
    """Catch without a level-up."""

    def test_catch_pauses_with_species_message(self, controller, sink):
        controller.fish_caught("Sturgeon")

        assert controller.is_paused
        assert controller.phase is OverlayPhase.CATCH
        assert controller.overlay == Overlay("You caught a Sturgeon!", CATCH_IMAGE)
        assert sink.calls == [("show", "You caught a Sturgeon!", CATCH_IMAGE)]
        assert not controller.scoreboard_visible

    def test_dismiss_returns_to_running(self, controller, sink):
        controller.fish_caught("Sturgeon")
        controller.dismiss()

        assert controller.phase is OverlayPhase.RUNNING
        assert controller.overlay is None
        assert sink.calls[-1] == ("hide",)
        assert controller.scoreboard_visible

    def test_second_catch_same_tick_keeps_first_overlay(self, controller, sink):
        controller.fish_caught("Sturgeon")
        controller.fish_caught("Carp")

        assert controller.overlay.message == "You caught a Sturgeon!"
        assert len(sink.calls) == 1


class TestLevelUpQueue:
    """Queued level-up messages follow the catch overlay."""

    def test_level_up_shown_after_catch_dismissed(self, controller, sink):
        controller.fish_caught("Walleye", "Level two!")
        assert controller.phase is OverlayPhase.CATCH_LEVEL_PENDING
        assert controller.overlay.image == CATCH_IMAGE
        assert controller.pending_level_ups == ("Level two!",)

        controller.dismiss()
        assert controller.phase is OverlayPhase.LEVEL_UP
        assert controller.is_paused
        assert controller.overlay == Overlay("Level two!", LEVEL_UP_IMAGE)
        assert controller.pending_level_ups == ()

        controller.dismiss()
        assert controller.phase is OverlayPhase.RUNNING
        assert controller.overlay is None

    def test_no_running_frame_between_overlays(self, controller, sink):
        controller.fish_caught("Walleye", "Level two!")
        controller.dismiss()
        # The level-up overlay replaced the catch overlay directly
        assert ("hide",) not in sink.calls
        assert sink.calls[-1] == ("show", "Level two!", LEVEL_UP_IMAGE)

    def test_level_up_shown_exactly_once(self, controller, sink):
        controller.fish_caught("Walleye", "Level two!")
        controller.dismiss()
        controller.dismiss()
        controller.dismiss()

        shows = [c for c in sink.calls if c[0] == "show" and c[2] == LEVEL_UP_IMAGE]
        assert len(shows) == 1

    def test_level_up_from_later_catch_in_same_tick(self, controller):
        controller.fish_caught("Bluegill")
        controller.fish_caught("Crappie", "Level two!")

        assert controller.phase is OverlayPhase.CATCH_LEVEL_PENDING
        assert controller.overlay.message == "You caught a Bluegill!"
        controller.dismiss()
        assert controller.overlay.message == "Level two!"

    def test_several_queued_level_ups_all_shown(self, controller):
        controller.fish_caught("Carp", "Level two!")
        controller.fish_caught("Carp", "Level three!")

        controller.dismiss()
        assert controller.overlay.message == "Level two!"
        controller.dismiss()
        assert controller.phase is OverlayPhase.LEVEL_UP
        assert controller.overlay.message == "Level three!"
        controller.dismiss()
        assert controller.phase is OverlayPhase.RUNNING

    def test_reset_clears_queue(self, controller, sink):
        controller.fish_caught("Carp", "Level two!")
        controller.reset()

        assert controller.phase is OverlayPhase.RUNNING
        assert controller.pending_level_ups == ()
        assert sink.calls[-1] == ("hide",)

    def test_works_without_sink(self):
        controller = PauseController()
        controller.fish_caught("Carp", "Level two!")
        controller.dismiss()
        controller.dismiss()
        assert controller.phase is OverlayPhase.RUNNING
