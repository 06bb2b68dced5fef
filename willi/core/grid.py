"""
Grid Model
==========

Mutable board state: tile occupancy per cell, player position and dead flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from willi.core.tile_catalog import Tile

Coord = Tuple[int, int]  # (x, y), y grows downward


@dataclass
class Player:
    """Player position and alive state."""
    x: int
    y: int
    dead: bool = False
    
    @property
    def position(self) -> Coord:
        return (self.x, self.y)
    
    def kill(self) -> None:
        """Mark the player as crushed. Never reset."""
        self.dead = True


class GridState:
    """
    Fixed-size board of optional tiles plus the player.
    
    Cells are indexed as (x, y) with (0, 0) at the top-left corner. The
    player's own cell is always empty.
    """
    
    def __init__(
        self,
        width: int,
        height: int,
        cells: List[List[Optional[Tile]]],
        player: Player
    ):
        if len(cells) != height or any(len(row) != width for row in cells):
            raise ValueError(f"Cell rows do not match grid size {width}x{height}")
        
        self._width = width
        self._height = height
        self._cells = cells
        self.player = player
    
    @property
    def width(self) -> int:
        return self._width
    
    @property
    def height(self) -> int:
        return self._height
    
    def in_bounds(self, x: int, y: int) -> bool:
        """Half-open range check against [0, W) x [0, H)."""
        return 0 <= x < self._width and 0 <= y < self._height
    
    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Cell ({x}, {y}) outside grid [0, {self._width}) x [0, {self._height})"
            )
        return self._cells[y][x]
    
    def set_tile(self, x: int, y: int, tile: Optional[Tile]) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Cell ({x}, {y}) outside grid [0, {self._width}) x [0, {self._height})"
            )
        self._cells[y][x] = tile
    
    def is_player_at(self, x: int, y: int) -> bool:
        return self.player.x == x and self.player.y == y
    
    def is_solid(self, x: int, y: int) -> bool:
        """True if the player cannot step into (x, y)."""
        if not self.in_bounds(x, y):
            return True
        tile = self._cells[y][x]
        return tile is not None and tile.is_solid
    
    def is_smooth(self, x: int, y: int) -> bool:
        """True if a falling rock can pass through (x, y)."""
        if not self.in_bounds(x, y):
            return False
        return self._cells[y][x] is None and not self.is_player_at(x, y)
    
    def cells(self) -> Iterator[Tuple[int, int, Optional[Tile]]]:
        """Iterate over (x, y, tile) in row-major order."""
        for y, row in enumerate(self._cells):
            for x, tile in enumerate(row):
                yield x, y, tile
    
    def count(self, tile: Tile) -> int:
        """Number of cells holding the given tile."""
        return sum(row.count(tile) for row in self._cells)
    
    def rows(self) -> List[List[Optional[Tile]]]:
        """Copy of the cell rows."""
        return [list(row) for row in self._cells]
