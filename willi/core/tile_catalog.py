"""
Tile Catalog
============

Tile kinds and their map characters and observation codes, loaded from config.
An empty cell is represented as ``None`` rather than a tile kind.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from willi.core.config_loader import GameConfig, get_config


class Tile(Enum):
    """Contents of a non-empty grid cell."""
    DIRT = "dirt"
    ROCK = "rock"
    FOOD = "food"
    WALL = "wall"
    
    @property
    def is_solid(self) -> bool:
        """True if the player cannot step into this tile."""
        return self in (Tile.ROCK, Tile.WALL)
    
    @property
    def is_edible(self) -> bool:
        """True if stepping into this tile removes it."""
        return self in (Tile.DIRT, Tile.FOOD)


# Observation code for an empty cell
EMPTY_CODE = 0


class TileCatalog:
    """
    Lookup tables between tiles, map characters and observation codes.
    """
    
    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.
        
        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()
        
        self._config = config
        kinds = config.tiles.kinds
        self._by_char: Dict[str, Tile] = {
            kinds[tile.value].char: tile for tile in Tile
        }
        self._chars: Dict[Tile, str] = {
            tile: kinds[tile.value].char for tile in Tile
        }
        self._codes: Dict[Tile, int] = {
            tile: kinds[tile.value].code for tile in Tile
        }
        self._empty_char = config.tiles.empty_char
        self._start_char = config.tiles.start_char
    
    @property
    def empty_char(self) -> str:
        return self._empty_char
    
    @property
    def start_char(self) -> str:
        return self._start_char
    
    @property
    def max_code(self) -> int:
        """Largest observation code in use."""
        return max(self._codes.values())
    
    def is_known_char(self, char: str) -> bool:
        """Check if a character is part of the map alphabet."""
        return (
            char in self._by_char
            or char == self._empty_char
            or char == self._start_char
        )
    
    def tile_for_char(self, char: str) -> Optional[Tile]:
        """
        Get the tile a map character stands for.
        
        Empty and start characters map to None. Unknown characters raise KeyError.
        """
        if char == self._empty_char or char == self._start_char:
            return None
        return self._by_char[char]
    
    def char_for(self, tile: Optional[Tile]) -> str:
        """Map character for a tile, or the empty character for None."""
        if tile is None:
            return self._empty_char
        return self._chars[tile]
    
    def code_for(self, tile: Optional[Tile]) -> int:
        """Observation code for a tile, or EMPTY_CODE for None."""
        if tile is None:
            return EMPTY_CODE
        return self._codes[tile]


# Module-level singleton
_cached_catalog: Optional[TileCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> TileCatalog:
    """
    Get the tile catalog singleton.
    
    Args:
        config: Optional config to use. If None, uses cached or default config.
    
    Returns:
        TileCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = TileCatalog(config)
    return _cached_catalog
