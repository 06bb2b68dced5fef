"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml


# Characters that separate rows in a map file and never count as cells
LINE_ENDINGS = ("\r", "\n")


@dataclass(frozen=True)
class GridConfig:
    """Board geometry in tiles."""
    width: int                   # Tiles per row
    height: int                  # Number of rows


@dataclass(frozen=True)
class TileConfig:
    """Map character and observation code for a single tile kind."""
    name: str
    char: str
    code: int


@dataclass(frozen=True)
class TilesConfig:
    """Map alphabet."""
    dirt: TileConfig
    rock: TileConfig
    food: TileConfig
    wall: TileConfig
    empty_char: str
    start_char: str
    
    @property
    def kinds(self) -> Dict[str, TileConfig]:
        """Tile configs keyed by tile name."""
        return {
            "dirt": self.dirt,
            "rock": self.rock,
            "food": self.food,
            "wall": self.wall,
        }


@dataclass(frozen=True)
class LevelConfig:
    """Bundled level settings."""
    default_map: str             # Path relative to the willi package
    
    @property
    def default_map_path(self) -> Path:
        return Path(os.path.dirname(os.path.dirname(__file__))) / self.default_map


@dataclass(frozen=True)
class CapsConfig:
    """Game limits."""
    max_moves: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    include_tiles: bool


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.
    
    All values are immutable to prevent accidental modification during runtime.
    """
    grid: GridConfig
    tiles: TilesConfig
    level: LevelConfig
    caps: CapsConfig
    observation: ObservationConfig
    
    @property
    def cell_count(self) -> int:
        """Number of grid characters a map must provide."""
        return self.grid.width * self.grid.height


def _parse_tile(name: str, tile_data: dict) -> TileConfig:
    """Parse a single tile entry from YAML."""
    return TileConfig(
        name=name,
        char=str(tile_data["char"]),
        code=int(tile_data["code"])
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.grid.width <= 0 or config.grid.height <= 0:
        raise ValueError(
            f"Grid dimensions must be positive, got "
            f"{config.grid.width}x{config.grid.height}"
        )
    
    tiles = config.tiles
    chars = [t.char for t in tiles.kinds.values()]
    chars += [tiles.empty_char, tiles.start_char]
    for char in chars:
        if len(char) != 1:
            raise ValueError(f"Tile characters must be single characters, got {char!r}")
        if char in LINE_ENDINGS:
            raise ValueError(f"Line endings cannot be used as tile characters, got {char!r}")
    if len(set(chars)) != len(chars):
        raise ValueError(f"Tile characters must be unique, got {chars}")
    
    # Code 0 is reserved for empty cells in observations
    codes = [t.code for t in tiles.kinds.values()]
    if 0 in codes:
        raise ValueError("Tile code 0 is reserved for empty cells")
    if len(set(codes)) != len(codes):
        raise ValueError(f"Tile codes must be unique, got {codes}")
    
    if config.caps.max_moves <= 0:
        raise ValueError(f"caps.max_moves must be positive, got {config.caps.max_moves}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.
    
    Args:
        config_path: Path to game_config.yaml. If None, uses default location.
    
    Returns:
        Validated GameConfig instance.
    
    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )
    
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)
    
    grid_data = raw["grid"]
    grid = GridConfig(
        width=int(grid_data["width"]),
        height=int(grid_data["height"])
    )
    
    tiles_data = raw["tiles"]
    tiles = TilesConfig(
        dirt=_parse_tile("dirt", tiles_data["dirt"]),
        rock=_parse_tile("rock", tiles_data["rock"]),
        food=_parse_tile("food", tiles_data["food"]),
        wall=_parse_tile("wall", tiles_data["wall"]),
        empty_char=str(tiles_data.get("empty", {}).get("char", " ")),
        start_char=str(tiles_data.get("start_char", "s"))
    )
    
    level_data = raw.get("level", {})
    level = LevelConfig(
        default_map=str(level_data.get("default_map", "maps/level1.txt"))
    )
    
    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_moves=int(caps_data.get("max_moves", 1000))
    )
    
    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        include_tiles=bool(obs_data.get("include_tiles", True))
    )
    
    config = GameConfig(
        grid=grid,
        tiles=tiles,
        level=level,
        caps=caps,
        observation=observation
    )
    
    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
