"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from willi.core.config_loader import GameConfig, get_config
from willi.core.grid import GridState
from willi.core.tile_catalog import get_catalog


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot.
    
    ``tiles`` is indexed [y, x] and holds tile codes, 0 for empty cells. The
    player's cell is always 0; use ``player_x``/``player_y`` to locate them.
    """
    # Core state
    player_x: int
    player_y: int
    dead: bool
    won: bool
    moves_used: int
    
    # Derived features
    food_remaining: int
    rocks_moved_last_step: int
    
    # Board (H, W) int8
    tiles: np.ndarray
    
    @property
    def grid_height(self) -> int:
        return int(self.tiles.shape[0])
    
    @property
    def grid_width(self) -> int:
        return int(self.tiles.shape[1])
    
    def to_obs_dict(self, include_tiles: bool = True) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "player": np.array([self.player_x, self.player_y], dtype=np.int32),
            "dead": np.array(int(self.dead), dtype=np.int8),
            "won": np.array(int(self.won), dtype=np.int8),
            "moves_used": np.array(self.moves_used, dtype=np.int32),
            "food_remaining": np.array(self.food_remaining, dtype=np.int32),
            "rocks_moved_last_step": np.array(self.rocks_moved_last_step, dtype=np.int32),
        }
        
        if include_tiles:
            obs["tiles"] = self.tiles.copy()
        
        return obs


class SnapshotBuilder:
    """Builds game state snapshots with a pre-allocated tile array."""
    
    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()
        
        self._config = config
        self._catalog = get_catalog(config)
        self._tiles: Optional[np.ndarray] = None
    
    def _buffer_for(self, state: GridState) -> np.ndarray:
        shape = (state.height, state.width)
        if self._tiles is None or self._tiles.shape != shape:
            self._tiles = np.zeros(shape, dtype=np.int8)
        return self._tiles
    
    def build(
        self,
        state: GridState,
        won: bool,
        moves_used: int,
        food_remaining: int,
        rocks_moved_last_step: int = 0
    ) -> GameSnapshot:
        """Build a snapshot from current game state."""
        tiles = self._buffer_for(state)
        tiles.fill(0)
        
        for x, y, tile in state.cells():
            if tile is not None:
                tiles[y, x] = self._catalog.code_for(tile)
        
        player = state.player
        return GameSnapshot(
            player_x=player.x,
            player_y=player.y,
            dead=player.dead,
            won=won,
            moves_used=moves_used,
            food_remaining=food_remaining,
            rocks_moved_last_step=rocks_moved_last_step,
            # Snapshots outlive the next build, so hand out a copy
            tiles=tiles.copy()
        )
