"""
Tests for collision detection and scoring.
"""

import pytest

from ski_adventure.ski_core.collision import (
    CollisionSystem,
    overlapping_fish,
    overlapping_obstacles,
)
from ski_adventure.ski_core.config_loader import SpeciesConfig, load_config
from ski_adventure.ski_core.entities import Box, Entity, Fish, Obstacle, Player
from ski_adventure.ski_core.scoring import ScoreTracker
from ski_adventure.ski_core.state import SimulationState

SALMON = SpeciesConfig(name="Coho salmon", key="salmon")
WALLEYE = SpeciesConfig(name="Walleye", key="panfish")


def make_fish(x, y, w=60.0, h=30.0):
    return Fish(x=x, y=y, w=w, h=h, sprite_key=SALMON.key, species=SALMON)


def make_obstacle(x, y, w=50.0, h=80.0):
    return Obstacle(x=x, y=y, w=w, h=h, sprite_key="tree")


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def scorer(config):
    return ScoreTracker(config)


@pytest.fixture
def system(scorer):
    return CollisionSystem(scorer)


@pytest.fixture
def state():
    # Player box spans x 385..415, y 457.5..502.5
    player = Player(x=400, y=480, w=30, h=45)
    return SimulationState(player=player, width=800, height=600)


class TestBoxOverlap:
    """Test the AABB primitive."""

    def test_overlap(self):
        assert Box(0, 0, 10, 10).overlaps(Box(5, 5, 15, 15))

    def test_touching_edges_do_not_overlap(self):
        assert not Box(0, 0, 10, 10).overlaps(Box(10, 0, 20, 10))
        assert not Box(0, 0, 10, 10).overlaps(Box(0, 10, 10, 20))

    def test_disjoint(self):
        assert not Box(0, 0, 10, 10).overlaps(Box(50, 50, 60, 60))


class TestAnchoring:
    """Fish are centre-anchored, obstacles top-left anchored."""

    def test_fish_box_is_centred(self):
        fish = make_fish(100, 200, w=60, h=30)
        assert fish.box == Box(70, 185, 130, 215)

    def test_obstacle_box_is_top_left(self):
        obstacle = make_obstacle(100, 200, w=50, h=80)
        assert obstacle.box == Box(100, 200, 150, 280)

    def test_detection_uses_anchors(self, state):
        player_box = state.player.box
        # Centre just right of the player's right edge, half-width reaches back in
        assert overlapping_fish(player_box, [make_fish(440, 480)])
        # Same x as a top-left anchor starts right of the player
        assert not overlapping_obstacles(player_box, [make_obstacle(416, 450)])
        assert overlapping_obstacles(player_box, [make_obstacle(370, 450)])

    def test_entity_base_is_abstract(self):
        with pytest.raises(TypeError):
            Entity(x=0, y=0, w=10, h=10, sprite_key="tree")

    def test_fish_without_species(self):
        fish = Fish(x=1, y=2, w=10, h=10, sprite_key="bass")
        assert fish.species is None
        assert "?" in repr(fish)


class TestFishCatch:
    """Test fish catch scoring and leveling."""

    def test_catch_removes_fish_and_scores(self, system, state):
        fish = make_fish(400, 480)
        far = make_fish(50, 100)
        state.fishes.extend([fish, far])

        result = system.resolve(state)

        assert state.score == 1
        assert state.fishes == [far]
        assert [c.fish for c in result.catches] == [fish]
        assert result.catches[0].species_name == "Coho salmon"

    def test_newest_fish_caught_first(self, system, state):
        older = make_fish(400, 480)
        newer = Fish(x=405, y=475, w=60, h=30, sprite_key=WALLEYE.key, species=WALLEYE)
        state.fishes.extend([older, newer])

        result = system.resolve(state)

        assert [c.species_name for c in result.catches] == ["Walleye", "Coho salmon"]
        assert state.fishes == []

    def test_fifth_fish_levels_up(self, system, state, config):
        state.score = 4
        state.fishes.append(make_fish(400, 480))

        result = system.resolve(state)

        assert state.score == 5
        assert state.level == 2
        assert result.level_up_messages == [config.level_up_messages[0]]

    def test_two_fish_crossing_one_multiple_levels_once(self, system, state):
        state.score = 4
        state.fishes.extend([make_fish(400, 480), make_fish(405, 475)])

        result = system.resolve(state)

        assert state.score == 6
        assert state.level == 2
        assert len(result.catches) == 2
        assert len(result.level_up_messages) == 1

    def test_crossing_two_multiples_levels_twice(self, system, state):
        state.score = 4
        state.fishes.extend(make_fish(400, 480) for _ in range(6))

        system.resolve(state)

        assert state.score == 10
        assert state.level == 3

    def test_messages_rotate_cyclically(self, scorer, config):
        messages = config.level_up_messages
        seen = [scorer.next_level_up_message() for _ in range(len(messages) * 2)]
        assert seen == list(messages) * 2

    def test_catch_never_decreases_level(self, system, state):
        for i in range(23):
            level_before = state.level
            state.fishes.append(make_fish(400, 480))
            system.resolve(state)
            assert state.level >= level_before
        assert state.score == 23
        assert state.level == 5


class TestObstacleHit:
    """Test obstacle hit penalties."""

    def test_hit_sets_flash_and_costs_point(self, system, state, config):
        state.score = 3
        obstacle = make_obstacle(380, 450)
        state.obstacles.append(obstacle)

        result = system.resolve(state)

        assert state.flash_frames == config.scoring.hit_flash_ticks == 15
        assert state.score == 2
        assert result.hits == [obstacle]
        # Obstacles persist through collisions
        assert state.obstacles == [obstacle]

    def test_score_floored_at_zero(self, system, state):
        state.obstacles.append(make_obstacle(380, 450))
        for _ in range(5):
            system.resolve(state)
            assert state.score == 0

    def test_hit_never_changes_level(self, system, state):
        state.score = 5
        state.level = 2
        state.obstacles.append(make_obstacle(380, 450))
        for _ in range(10):
            system.resolve(state)
        assert state.level == 2
        assert state.score == 0

    def test_multiple_hits_reset_flash_without_stacking(self, system, state):
        state.score = 10
        state.flash_frames = 3
        state.obstacles.extend([make_obstacle(380, 450), make_obstacle(390, 460)])

        system.resolve(state)

        assert state.flash_frames == 15
        assert state.score == 8

    def test_catch_scored_alongside_hit(self, system, state):
        state.score = 2
        state.fishes.append(make_fish(400, 480))
        state.obstacles.append(make_obstacle(380, 450))

        result = system.resolve(state)

        assert result.catches[0].score.points == 1
        assert state.score == 2
