"""
Movement Resolver
=================

Validates and applies one-cell player moves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from willi.core.gravity import GravityResolver, SettleResult
from willi.core.grid import Coord, GridState
from willi.core.tile_catalog import Tile


class Direction(Enum):
    """Movement commands with their (dx, dy) offsets. y grows downward."""
    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    
    @property
    def dx(self) -> int:
        return self.value[0]
    
    @property
    def dy(self) -> int:
        return self.value[1]
    
    @classmethod
    def from_key(cls, key: str) -> "Direction":
        """Parse a direction from a name or its first letter (case-insensitive)."""
        key = key.strip().upper()
        for direction in cls:
            if key == direction.name or key == direction.name[0]:
                return direction
        raise ValueError(f"Unknown direction: {key!r}")


# Action index order used by the Gymnasium environment
ACTION_DIRECTIONS = (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)


@dataclass
class MoveResult:
    """Outcome of a single walk command."""
    direction: Direction
    origin: Coord
    target: Coord
    moved: bool
    eaten: Optional[Tile] = None
    settle: Optional[SettleResult] = None
    
    @staticmethod
    def blocked(direction: Direction, origin: Coord, target: Coord) -> "MoveResult":
        return MoveResult(direction, origin, target, moved=False)


class MovementResolver:
    """
    Applies player moves to a grid.
    
    Rock, wall and anything outside the grid are solid; stepping into them is
    a no-op. A legal step eats the destination tile and then lets gravity act
    on the column the player left.
    """
    
    def __init__(self, gravity: Optional[GravityResolver] = None):
        self._gravity = gravity if gravity is not None else GravityResolver()
    
    def target_of(self, state: GridState, direction: Direction) -> Coord:
        player = state.player
        return (player.x + direction.dx, player.y + direction.dy)
    
    def can_step(self, state: GridState, direction: Direction) -> bool:
        return not state.is_solid(*self.target_of(state, direction))
    
    def walk(self, state: GridState, direction: Direction) -> MoveResult:
        """
        Try to move the player one cell.
        
        Args:
            state: Grid to mutate.
            direction: Requested direction.
        
        Returns:
            MoveResult; ``moved`` is False when the target was solid.
        """
        origin = state.player.position
        target = self.target_of(state, direction)
        if state.is_solid(*target):
            return MoveResult.blocked(direction, origin, target)
        
        tx, ty = target
        tile = state.tile_at(tx, ty)
        eaten = tile if tile is not None and tile.is_edible else None
        state.player.x = tx
        state.player.y = ty
        # The player's cell is always empty
        state.set_tile(tx, ty, None)
        
        settle = self._gravity.settle_column(state, origin[0])
        return MoveResult(
            direction=direction,
            origin=origin,
            target=target,
            moved=True,
            eaten=eaten,
            settle=settle
        )
