"""
Tests for rock gravity and crushing.
"""

import pytest

from willi.core.config_loader import load_config
from willi.core.game import CoreGame
from willi.core.gravity import GravityResolver, RockMove
from willi.core.map_loader import load_map
from willi.core.movement import Direction
from willi.core.tile_catalog import Tile


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def gravity():
    return GravityResolver()


def make_state(config, rows):
    """Build a grid state from a list of equal-length map rows."""
    return load_map("\n".join(rows), config=config, width=len(rows[0]), height=len(rows))


def make_game(config, rows):
    return CoreGame("\n".join(rows), config=config, width=len(rows[0]), height=len(rows))


def column(game, x):
    return [game.tile_at(x, y) for y in range(game.height)]


class TestFalling:
    """Test rocks falling after the player leaves a column."""
    
    def test_rock_falls_to_bottom(self, config):
        game = make_game(config, [
            "r ",
            "s ",
            "  ",
            "  ",
        ])
        
        game.walk(Direction.RIGHT)
        
        assert column(game, 0) == [None, None, None, Tile.ROCK]
        assert game.player_position() == (1, 1)
        assert not game.is_dead()
    
    def test_rock_rests_on_food(self, config):
        """Food stops a falling rock and is left in place."""
        game = make_game(config, [
            "r ",
            "s ",
            "  ",
            "f ",
        ])
        
        game.walk(Direction.RIGHT)
        
        assert column(game, 0) == [None, None, Tile.ROCK, Tile.FOOD]
        assert game.food_remaining == 1
    
    @pytest.mark.parametrize("support", ["d", "w", "f"])
    def test_supported_rock_stays(self, config, support):
        game = make_game(config, [
            "r ",
            support + " ",
            "s ",
        ])
        
        result = game.step(Direction.RIGHT)
        
        assert result.rock_moves == []
        assert game.tile_at(0, 0) is Tile.ROCK
    
    def test_stacked_rocks_settle_bottom_up(self, config):
        """Lower rocks settle first so upper rocks land on them."""
        game = make_game(config, [
            "r ",
            "r ",
            "s ",
            "  ",
            "  ",
        ])
        
        result = game.step(Direction.RIGHT)
        
        assert column(game, 0) == [None, None, None, Tile.ROCK, Tile.ROCK]
        assert result.rock_moves == [
            RockMove(x=0, from_y=1, to_y=4),
            RockMove(x=0, from_y=0, to_y=3),
        ]
        assert not game.is_dead()
    
    def test_only_vacated_column_settles(self, config):
        """Rocks in other columns are left hanging."""
        game = make_game(config, [
            "r r",
            "s  ",
            "   ",
        ])
        
        game.walk(Direction.RIGHT)
        
        assert game.tile_at(0, 2) is Tile.ROCK
        assert game.tile_at(2, 0) is Tile.ROCK
    
    def test_column_fully_settled_after_walk(self, config):
        """No rock in the vacated column has an empty non-player cell beneath it."""
        game = make_game(config, [
            "r  ",
            " r ",
            "rs ",
            "   ",
            " d ",
            "   ",
        ])
        
        game.walk(Direction.RIGHT)
        
        state = game.state
        for y in range(state.height - 1):
            if state.tile_at(1, y) is Tile.ROCK:
                assert not state.is_smooth(1, y + 1)
    
    def test_rock_on_bottom_row_never_moves(self, config, gravity):
        state = make_state(config, ["s", "r"])
        
        result = gravity.settle_column(state, 0)
        
        assert result.rocks_moved == 0
        assert state.tile_at(0, 1) is Tile.ROCK
    
    def test_out_of_range_column(self, config, gravity):
        state = make_state(config, ["sr"])
        
        assert gravity.settle_column(state, 5).moves == []
        assert gravity.settle_column(state, -1).moves == []
    
    def test_settling_is_idempotent(self, config, gravity):
        state = make_state(config, [
            "r ",
            "r ",
            "  ",
            " s",
        ])
        
        first = gravity.settle_column(state, 0)
        second = gravity.settle_column(state, 0)
        
        assert first.rocks_moved == 2
        assert second.rocks_moved == 0
        assert state.tile_at(0, 2) is Tile.ROCK
        assert state.tile_at(0, 3) is Tile.ROCK


class TestCrushing:
    """Test death when a rock lands on the player."""
    
    def test_stepping_down_under_rock_crushes(self, config):
        """Rock above the player falls into the vacated cell onto them."""
        game = make_game(config, [
            "r",
            "s",
            " ",
            " ",
        ])
        assert not game.is_dead()
        
        result = game.step(Direction.DOWN)
        
        assert game.is_dead()
        assert result.terminated
        assert result.termination_reason == "crushed"
        assert game.player_position() == (0, 2)
        assert column(game, 0) == [None, Tile.ROCK, None, None]
    
    def test_rock_dropped_onto_player(self, config, gravity):
        state = make_state(config, [
            "r",
            " ",
            "s",
        ])
        
        result = gravity.settle_column(state, 0)
        
        assert result.crushed
        assert state.player.dead
        assert state.tile_at(0, 1) is Tile.ROCK
    
    def test_rock_already_resting_on_player_is_harmless(self, config):
        """A rock that does not fall never crushes."""
        game = make_game(config, [
            "r",
            " ",
            "s",
            " ",
        ])
        
        game.walk(Direction.UP)
        
        assert game.player_position() == (0, 1)
        assert game.tile_at(0, 0) is Tile.ROCK
        assert not game.is_dead()
    
    def test_rock_settling_one_row_away_is_harmless(self, config, gravity):
        state = make_state(config, [
            "r",
            " ",
            "d",
            "s",
        ])
        
        result = gravity.settle_column(state, 0)
        
        assert result.rocks_moved == 1
        assert not result.crushed
        assert not state.player.dead
    
    def test_rock_in_other_column_is_harmless(self, config, gravity):
        """Landing in the player's row but another column does not crush."""
        state = make_state(config, [
            "r ",
            "  ",
            " s",
        ])
        
        result = gravity.settle_column(state, 0)
        
        assert state.tile_at(0, 2) is Tile.ROCK
        assert not result.crushed
        assert not state.player.dead
    
    def test_death_is_permanent(self, config):
        """Commands after death are ignored and dead stays set."""
        game = make_game(config, [
            "r ",
            "s ",
            "  ",
        ])
        game.walk(Direction.DOWN)
        assert game.is_dead()
        
        game.walk(Direction.RIGHT)
        
        assert game.is_dead()
        assert game.player_position() == (0, 2)
