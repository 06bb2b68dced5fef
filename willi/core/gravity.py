"""
Gravity Resolver
================

Lets unsupported rocks in a column fall and detects the player being crushed.

Rocks are settled from the bottom row upward, so every rock below the one
being processed has already come to rest. A rock falls through empty cells
only; the player, any other tile and the bottom edge all stop it. A rock that
falls at least one cell and comes to rest directly on top of the player
crushes them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from willi.core.grid import Coord, GridState
from willi.core.tile_catalog import Tile


@dataclass(frozen=True)
class RockMove:
    """A single rock falling within a column."""
    x: int
    from_y: int
    to_y: int
    
    @property
    def distance(self) -> int:
        return self.to_y - self.from_y


@dataclass
class SettleResult:
    """Outcome of settling one column."""
    column: int
    moves: List[RockMove] = field(default_factory=list)
    crushed: bool = False
    
    @property
    def rocks_moved(self) -> int:
        return len(self.moves)


class GravityResolver:
    """
    Settles rocks column by column.
    
    Each call leaves the column fully settled, so calling it again without the
    player moving changes nothing.
    """
    
    def drop_distance(self, state: GridState, x: int, y: int) -> int:
        """
        How far the rock at (x, y) can fall.
        
        Counts consecutive smooth cells directly beneath it.
        """
        distance = 0
        while state.is_smooth(x, y + distance + 1):
            distance += 1
        return distance
    
    def lands_on_player(self, state: GridState, x: int, rest_y: int) -> bool:
        """True if a rock resting at (x, rest_y) sits on the player's cell."""
        impact: Coord = (x, rest_y + 1)
        return state.player.position == impact
    
    def settle_column(self, state: GridState, x: int) -> SettleResult:
        """
        Drop every rock in column x to its resting row.
        
        Args:
            state: Grid to mutate.
            x: Column index.
        
        Returns:
            SettleResult listing the rocks that moved and whether the player
            was crushed.
        """
        result = SettleResult(column=x)
        if not 0 <= x < state.width:
            return result
        
        # The bottom row has nothing beneath it
        for y in range(state.height - 2, -1, -1):
            if state.tile_at(x, y) is not Tile.ROCK:
                continue
            
            distance = self.drop_distance(state, x, y)
            if distance == 0:
                continue
            
            rest_y = y + distance
            state.set_tile(x, y, None)
            state.set_tile(x, rest_y, Tile.ROCK)
            result.moves.append(RockMove(x=x, from_y=y, to_y=rest_y))
            
            if self.lands_on_player(state, x, rest_y):
                state.player.kill()
                result.crushed = True
        
        return result
