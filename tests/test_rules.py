"""
Tests for win evaluation and termination.
"""

import dataclasses

import pytest

from willi.core.config_loader import CapsConfig, load_config
from willi.core.game import CoreGame
from willi.core.map_loader import load_map
from willi.core.movement import Direction
from willi.core.rules import TerminationRules, WinEvaluator


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def evaluator():
    return WinEvaluator()


def make_game(config, rows):
    return CoreGame("\n".join(rows), config=config, width=len(rows[0]), height=len(rows))


class TestWinEvaluator:
    """Test the food scan."""
    
    def test_no_food_is_won(self, config, evaluator):
        state = load_map("sdr", config=config, width=3, height=1)
        
        assert evaluator.is_won(state)
        assert evaluator.food_remaining(state) == 0
    
    def test_food_left_is_not_won(self, config, evaluator):
        state = load_map("sdf", config=config, width=3, height=1)
        
        assert not evaluator.is_won(state)
        assert evaluator.food_remaining(state) == 1
    
    def test_eating_last_food_wins(self, config):
        game = make_game(config, ["sfdf"])
        
        game.walk(Direction.RIGHT)
        assert not game.is_won()
        
        game.walk(Direction.RIGHT)
        game.walk(Direction.RIGHT)
        assert game.is_won()
        assert game.termination_reason == "won"
    
    def test_rock_burial_does_not_remove_food(self, config):
        """Food under a settled rock still has to be eaten."""
        game = make_game(config, [
            "r ",
            "s ",
            "f ",
        ])
        
        game.walk(Direction.RIGHT)
        
        assert not game.is_won()
        assert game.food_remaining == 1
    
    def test_won_query_after_death(self, config):
        """is_won stays answerable once the player is dead."""
        game = make_game(config, [
            "r",
            "s",
            "f",
        ])
        
        result = game.step(Direction.DOWN)
        
        assert game.is_dead()
        assert game.is_won()
        assert result.food_eaten
        assert result.termination_reason == "crushed"


class TestTerminationRules:
    """Test termination ordering and the move cap."""
    
    def test_in_progress(self, config):
        rules = TerminationRules(config)
        state = load_map("sf", config=config, width=2, height=1)
        
        result = rules.check_termination(state, moves_used=0)
        
        assert not result.terminated
        assert not result.truncated
        assert result.reason == ""
    
    def test_dead_beats_won(self, config):
        rules = TerminationRules(config)
        state = load_map("s", config=config, width=1, height=1)
        state.player.kill()
        
        result = rules.check_termination(state, moves_used=1)
        
        assert result.terminated
        assert result.reason == "crushed"
    
    def test_move_cap_truncates(self, config):
        capped = dataclasses.replace(config, caps=CapsConfig(max_moves=2))
        game = CoreGame("s dff", config=capped, width=5, height=1)
        
        game.walk(Direction.RIGHT)
        assert not game.is_over
        
        result = game.step(Direction.RIGHT)
        assert result.truncated
        assert not result.terminated
        assert result.termination_reason == "move_cap"
        
        # Further commands are ignored
        game.walk(Direction.RIGHT)
        assert game.player_position() == (2, 0)
        assert game.moves_used == 2
    
    def test_won_game_still_accepts_moves(self, config):
        game = make_game(config, ["s  "])
        assert game.is_won()
        
        game.walk(Direction.RIGHT)
        
        assert game.player_position() == (1, 0)
    
    def test_moves_after_win_are_not_counted(self, config):
        """The move counter stops once the last food is eaten."""
        capped = dataclasses.replace(config, caps=CapsConfig(max_moves=2))
        game = CoreGame("sf  ", config=capped, width=4, height=1)
        
        game.walk(Direction.RIGHT)
        assert game.is_won()
        assert game.moves_used == 1
        
        for _ in range(3):
            result = game.step(Direction.RIGHT)
            assert not result.truncated
        
        assert game.moves_used == 1
        assert game.player_position() == (3, 0)
