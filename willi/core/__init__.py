"""
Willi Core - the grid simulation engine.

This module provides the game simulation, the Gymnasium environment wrapper
and all supporting systems (map loading, movement, gravity, rules).

Main exports:
- CoreGame: One simulation session (walk, is_dead, is_won, tile_at, ...)
- load_map / load_map_file: Parse map text into a GridState
- InvalidMap / MissingStart: Map loading errors
- WilliEnv: Gymnasium environment for agent training
- GameConfig: Configuration loaded from game_config.yaml
"""

from willi.core.config_loader import GameConfig, load_config
from willi.core.tile_catalog import Tile, TileCatalog
from willi.core.grid import GridState, Player
from willi.core.map_loader import (
    MapError,
    InvalidMap,
    MissingStart,
    load_map,
    load_map_file,
)
from willi.core.movement import Direction, MovementResolver
from willi.core.gravity import GravityResolver
from willi.core.rules import WinEvaluator
from willi.core.game import CoreGame, StepResult
from willi.core.env_gym import WilliEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Tile",
    "TileCatalog",
    "GridState",
    "Player",
    "MapError",
    "InvalidMap",
    "MissingStart",
    "load_map",
    "load_map_file",
    "Direction",
    "MovementResolver",
    "GravityResolver",
    "WinEvaluator",
    "CoreGame",
    "StepResult",
    "WilliEnv",
]
