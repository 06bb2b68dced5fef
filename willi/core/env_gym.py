"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Watch Out Willi game.
Reward is always 0.0 - agents must compute their own from info.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from willi.core.config_loader import GameConfig, load_config
from willi.core.game import CoreGame
from willi.core.movement import ACTION_DIRECTIONS
from willi.core.state_snapshot import GameSnapshot
from willi.core.tile_catalog import get_catalog


class WilliEnv(gym.Env):
    """
    Watch Out Willi as a Gymnasium environment.
    
    Action Space:
        Discrete(4): 0=Up, 1=Right, 2=Down, 3=Left.
    
    Observation Space:
        Dict containing the tile-code grid, player position and counters.
    
    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.
    
    Info:
        Contains player, dead, won, food_remaining, moves_used, etc.
    """
    
    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 10,
    }
    
    def __init__(
        self,
        config_path: Optional[str] = None,
        map_path: Union[str, Path, None] = None,
        map_text: Optional[str] = None,
        render_mode: Optional[str] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.
        
        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            map_path: Map file to play. Uses the configured level if None.
            map_text: Map contents; takes precedence over map_path.
            render_mode: "ansi" for text frames, None for headless.
            debug: If True, prints per-step diagnostics.
        """
        super().__init__()
        
        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode!r}")
        
        # Load config
        self._config = load_config(config_path)
        
        self.render_mode = render_mode
        self._debug = debug
        self._include_tiles = self._config.observation.include_tiles
        
        # Initialize game
        if map_text is not None:
            self._game = CoreGame(map_text, config=self._config)
        else:
            self._game = CoreGame.from_file(map_path, config=self._config)
        
        self.action_space = spaces.Discrete(len(ACTION_DIRECTIONS))
        self.observation_space = self._build_observation_space()
        
        if self._debug:
            print(f"[DEBUG] WilliEnv initialized")
            print(f"[DEBUG]   Grid: {self._game.width}x{self._game.height}")
            print(f"[DEBUG]   Food: {self._game.food_remaining}")
            print(f"[DEBUG]   Max moves: {self._config.caps.max_moves}")
    
    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        width = self._game.width
        height = self._game.height
        max_moves = self._config.caps.max_moves
        cells = width * height
        
        obs_dict = {
            "player": spaces.Box(
                low=0,
                high=np.array([width - 1, height - 1]),
                shape=(2,),
                dtype=np.int32
            ),
            "dead": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "won": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "moves_used": spaces.Box(low=0, high=max_moves, shape=(), dtype=np.int32),
            "food_remaining": spaces.Box(low=0, high=cells, shape=(), dtype=np.int32),
            "rocks_moved_last_step": spaces.Box(low=0, high=height, shape=(), dtype=np.int32),
        }
        
        if self._include_tiles:
            catalog = get_catalog(self._config)
            obs_dict["tiles"] = spaces.Box(
                low=0,
                high=catalog.max_code,
                shape=(height, width),
                dtype=np.int8
            )
        
        return spaces.Dict(obs_dict)
    
    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.
        
        Args:
            seed: Accepted for API compatibility; the game is deterministic.
            options: Additional options (unused).
        
        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)
        
        snapshot = self._game.reset()
        
        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["moved"] = False
        
        return obs, info
    
    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.
        
        Args:
            action: Index into ACTION_DIRECTIONS.
        
        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        # Convert action to scalar
        if isinstance(action, np.ndarray):
            action = int(action.item() if action.ndim == 0 else action[0])
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action}, expected 0..{self.action_space.n - 1}")
        
        direction = ACTION_DIRECTIONS[action]
        result = self._game.step(direction)
        
        obs = self._snapshot_to_obs(result.snapshot)
        
        # Reward is always 0.0 - agents compute their own
        reward = 0.0
        
        info = self._game.get_info()
        info["moved"] = result.moved
        info["food_eaten"] = result.food_eaten
        info["rocks_moved"] = len(result.rock_moves)
        
        if self._debug:
            print(f"[DEBUG] Step: action={direction.name}, moved={result.moved}, "
                  f"player={info['player']}, food_remaining={info['food_remaining']}")
            if result.terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")
        
        return obs, reward, result.terminated, result.truncated, info
    
    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict(include_tiles=self._include_tiles)
    
    def render(self) -> Optional[str]:
        """
        Render the current game state.
        
        Returns:
            Board text if render_mode is "ansi", None otherwise.
        """
        if self.render_mode == "ansi":
            return self._game.render_text() + "\n"
        return None
    
    def close(self) -> None:
        """Nothing to release; the map is read fully at construction."""
    
    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game
    
    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
