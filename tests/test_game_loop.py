"""
Tests for the per-frame game loop driver.
"""

import dataclasses

import pytest

from ski_adventure.ski_core.config_loader import SpeciesConfig, load_config
from ski_adventure.ski_core.entities import Fish
from ski_adventure.ski_core.game import SkiGame
from ski_adventure.ski_core.game_loop import GameLoop
from ski_adventure.ski_core.overlay import OverlayPhase
from ski_adventure.ski_core.sprite_loader import placeholder_assets
from ski_adventure.ski_core.state import InputEvent

CARP = SpeciesConfig(name="Carp", key="catfish")


class FakeClock:
    def __init__(self):
        self.ticks = []

    def tick(self, fps):
        self.ticks.append(fps)


@pytest.fixture
def config():
    config = load_config()
    difficulty = dataclasses.replace(
        config.difficulty,
        base_fish_chance=0.0,
        fish_step=0.0,
        base_obstacle_chance=0.0,
        obstacle_step=0.0
    )
    return dataclasses.replace(config, difficulty=difficulty)


@pytest.fixture
def game(config):
    return SkiGame(placeholder_assets(config, draw=False), config=config, seed=0)


@pytest.fixture
def renders():
    return []


@pytest.fixture
def loop(game, renders):
    return GameLoop(game, render=lambda: renders.append(game.state.ticks))


def catch_next_tick(game, y_offset=0.0):
    player = game.state.player
    fish = Fish(x=player.x, y=player.y - game.scroll_speed + y_offset, w=40, h=20,
                sprite_key=CARP.key, species=CARP)
    game.state.fishes.append(fish)
    return fish


class TestFrame:
    """Test a single frame."""

    def test_running_frame_ticks_then_renders(self, loop, game, renders):
        assert loop.frame() is True
        assert game.state.ticks == 1
        assert renders == [1]

    def test_paused_frame_skips_tick_and_render(self, loop, game, renders):
        catch_next_tick(game)
        loop.frame()
        assert game.is_paused

        for _ in range(10):
            assert loop.frame() is True
        assert game.state.ticks == 1
        assert renders == [1]
        assert loop.frames == 11

    def test_stopped_loop_schedules_nothing(self, loop, game, renders):
        loop.stop()
        assert loop.frame() is False
        assert game.state.ticks == 0
        assert renders == []

    def test_stop_in_before_frame_suppresses_tick(self, game, renders):
        holder = {}

        def before():
            holder["loop"].stop()

        loop = GameLoop(game, render=lambda: renders.append(1), before_frame=before)
        holder["loop"] = loop

        assert loop.frame() is False
        assert game.state.ticks == 0

    def test_after_frame_runs_even_when_paused(self, game):
        calls = []
        loop = GameLoop(game, render=lambda: None, after_frame=lambda: calls.append(game.is_paused))
        catch_next_tick(game)
        loop.frame()
        loop.frame()
        assert calls == [True, True]


class TestPauseRoundTrip:
    """Pausing then dismissing resumes exactly where the game stopped."""

    def test_resume_without_skip_or_double_advance(self, loop, game):
        catch_next_tick(game)
        other = Fish(x=50, y=100, w=40, h=20, sprite_key=CARP.key, species=CARP)
        game.state.fishes.append(other)

        loop.frame()
        assert game.pause.phase is OverlayPhase.CATCH
        y_paused = other.y
        ticks_paused = game.state.ticks
        x_paused = game.state.player.x

        loop.frame()
        loop.frame()
        assert other.y == y_paused

        game.handle_input(InputEvent.DISMISS)
        assert game.pause.phase is OverlayPhase.RUNNING
        assert game.pause.overlay is None

        loop.frame()
        assert game.state.ticks == ticks_paused + 1
        assert other.y == y_paused + game.scroll_speed
        assert game.state.player.x == x_paused


class TestRun:
    """Test the scheduling loop."""

    def test_run_until_stopped(self, game):
        clock = FakeClock()
        holder = {}

        def after():
            if holder["loop"].frames >= 4:
                holder["loop"].stop()

        loop = GameLoop(game, render=lambda: None, after_frame=after)
        holder["loop"] = loop

        frames = loop.run(clock, fps=30)

        assert frames == 5
        assert game.state.ticks == 5
        assert clock.ticks == [30] * 4

    def test_run_uses_configured_fps(self, game, config):
        clock = FakeClock()
        holder = {}

        def after():
            if holder["loop"].frames >= 1:
                holder["loop"].stop()

        loop = GameLoop(game, render=lambda: None, after_frame=after)
        holder["loop"] = loop

        loop.run(clock)

        assert loop.frames == 2
        assert clock.ticks == [config.render.target_fps]
