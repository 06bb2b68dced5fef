"""
Game Rules
==========

Win evaluation and termination conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from willi.core.config_loader import GameConfig, get_config
from willi.core.grid import GridState
from willi.core.tile_catalog import Tile


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    truncated: bool
    reason: str
    
    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")
    
    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, False, reason)
    
    @staticmethod
    def truncation(reason: str) -> "TerminationResult":
        return TerminationResult(False, True, reason)


class WinEvaluator:
    """The game is won once no food is left anywhere on the grid."""
    
    def food_remaining(self, state: GridState) -> int:
        return state.count(Tile.FOOD)
    
    def is_won(self, state: GridState) -> bool:
        for _, _, tile in state.cells():
            if tile is Tile.FOOD:
                return False
        return True


class TerminationRules:
    """
    Handles game termination conditions.
    
    - Crushed: a rock landed on the player
    - Won: all food eaten
    - Move cap: maximum moves per episode (truncation)
    """
    
    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.
        
        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()
        
        self._config = config
        self._max_moves = config.caps.max_moves
        self._win = WinEvaluator()
    
    @property
    def max_moves(self) -> int:
        """Maximum moves per episode."""
        return self._max_moves
    
    @property
    def win(self) -> WinEvaluator:
        return self._win
    
    def check_termination(
        self,
        state: GridState,
        moves_used: int
    ) -> TerminationResult:
        """
        Check all termination conditions.
        
        Death takes precedence over winning: a rock that crushes the player on
        the same step the last food is eaten still ends the game as a loss.
        
        Args:
            state: Current grid.
            moves_used: Number of walk commands issued so far.
        
        Returns:
            TerminationResult indicating game state.
        """
        if state.player.dead:
            return TerminationResult.game_over("crushed")
        
        if self._win.is_won(state):
            return TerminationResult.game_over("won")
        
        if moves_used >= self._max_moves:
            return TerminationResult.truncation("move_cap")
        
        return TerminationResult.none()
