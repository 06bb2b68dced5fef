"""
Core Game
=========

Main game orchestrator combining map loading, movement, gravity and rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from willi.core.config_loader import GameConfig, get_config
from willi.core.gravity import RockMove
from willi.core.grid import Coord, GridState
from willi.core.map_loader import MapSource, load_map
from willi.core.movement import Direction, MovementResolver, MoveResult
from willi.core.rules import TerminationResult, TerminationRules
from willi.core.state_snapshot import GameSnapshot, SnapshotBuilder
from willi.core.tile_catalog import Tile, get_catalog


@dataclass
class StepResult:
    """Result of a single game step (walk + settle)."""
    snapshot: GameSnapshot
    moved: bool
    terminated: bool
    truncated: bool
    termination_reason: str
    food_eaten: bool = False
    rock_moves: List[RockMove] = field(default_factory=list)


class CoreGame:
    """
    One simulation session: grid, player and move counter.
    
    Orchestrates:
    - Map loading
    - Movement and eating
    - Gravity on the vacated column
    - Termination rules (crushed, won, move cap)
    - State snapshots
    
    One step = one walk command, fully resolved before returning. Commands
    issued after the player dies or the move cap is reached are ignored; a
    won game keeps accepting moves.
    """
    
    def __init__(
        self,
        map_text: str,
        config: Optional[GameConfig] = None,
        width: Optional[int] = None,
        height: Optional[int] = None
    ):
        """
        Initialize game from map text.
        
        Args:
            map_text: Full map contents.
            config: Game configuration. Uses default if None.
            width: Override grid width from config.
            height: Override grid height from config.
        
        Raises:
            InvalidMap: Map contains an unknown character or is too short.
            MissingStart: Map has no start marker.
        """
        if config is None:
            config = get_config()
        
        self._config = config
        self._map_text = map_text
        self._width = width
        self._height = height
        
        # Initialize subsystems
        self._catalog = get_catalog(config)
        self._movement = MovementResolver()
        self._rules = TerminationRules(config)
        self._snapshot_builder = SnapshotBuilder(config)
        
        self._state = self._load()
        self._reset_counters()
    
    @classmethod
    def from_source(
        cls,
        source: MapSource,
        config: Optional[GameConfig] = None,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> "CoreGame":
        """Create a game from map text or a readable text stream."""
        text = source if isinstance(source, str) else source.read()
        return cls(text, config=config, width=width, height=height)
    
    @classmethod
    def from_file(
        cls,
        path: Union[str, Path, None] = None,
        config: Optional[GameConfig] = None,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> "CoreGame":
        """
        Create a game from a map file.
        
        Args:
            path: Map file. Uses the configured default level if None.
        """
        if config is None:
            config = get_config()
        if path is None:
            path = config.level.default_map_path
        
        with open(path, "r", newline="") as f:
            return cls.from_source(f, config=config, width=width, height=height)
    
    def _load(self) -> GridState:
        return load_map(
            self._map_text,
            config=self._config,
            width=self._width,
            height=self._height
        )
    
    def _reset_counters(self) -> None:
        self._moves_used: int = 0
        self._last_rocks_moved: int = 0
        self._terminated: bool = False
        self._truncated: bool = False
        self._termination_reason: str = ""
        self._apply_termination(self._check_termination())
    
    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
    
    @property
    def state(self) -> GridState:
        """Underlying grid state."""
        return self._state
    
    @property
    def width(self) -> int:
        return self._state.width
    
    @property
    def height(self) -> int:
        return self._state.height
    
    @property
    def moves_used(self) -> int:
        """Walk commands issued before the game ended (legal or not)."""
        return self._moves_used
    
    @property
    def food_remaining(self) -> int:
        return self._rules.win.food_remaining(self._state)
    
    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return self._terminated or self._truncated
    
    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination_reason
    
    # Query surface used by renderers and input handlers
    
    def is_dead(self) -> bool:
        return self._state.player.dead
    
    def is_won(self) -> bool:
        return self._rules.win.is_won(self._state)
    
    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        """Tile at (x, y), or None if empty. Raises IndexError off the grid."""
        return self._state.tile_at(x, y)
    
    def player_position(self) -> Coord:
        return self._state.player.position
    
    def walk(self, direction: Union[Direction, str]) -> None:
        """Apply one move command. Effects are visible through the queries."""
        self.step(direction)
    
    def reset(self) -> GameSnapshot:
        """
        Reload the original map.
        
        Returns:
            Initial game snapshot.
        """
        self._state = self._load()
        self._reset_counters()
        return self._build_snapshot()
    
    def step(self, direction: Union[Direction, str]) -> StepResult:
        """
        Execute one game step: move, eat, settle the vacated column.
        
        Args:
            direction: Direction or a key accepted by Direction.from_key.
        
        Returns:
            StepResult with new state and metadata.
        """
        if isinstance(direction, str):
            direction = Direction.from_key(direction)
        
        if self.is_dead() or self._truncated:
            # Game already ended, return current state
            return StepResult(
                snapshot=self._build_snapshot(),
                moved=False,
                terminated=self._terminated,
                truncated=self._truncated,
                termination_reason=self._termination_reason
            )
        
        move: MoveResult = self._movement.walk(self._state, direction)
        # Moves after a win are played but no longer counted toward the cap
        if not self._terminated:
            self._moves_used += 1
        
        rock_moves: List[RockMove] = []
        if move.settle is not None:
            rock_moves = list(move.settle.moves)
        self._last_rocks_moved = len(rock_moves)
        
        self._apply_termination(self._check_termination())
        
        return StepResult(
            snapshot=self._build_snapshot(),
            moved=move.moved,
            terminated=self._terminated,
            truncated=self._truncated,
            termination_reason=self._termination_reason,
            food_eaten=move.eaten is Tile.FOOD,
            rock_moves=rock_moves
        )
    
    def _check_termination(self) -> TerminationResult:
        return self._rules.check_termination(self._state, self._moves_used)
    
    def _apply_termination(self, result: TerminationResult) -> None:
        self._terminated = result.terminated
        self._truncated = result.truncated
        self._termination_reason = result.reason
    
    def _build_snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            state=self._state,
            won=self.is_won(),
            moves_used=self._moves_used,
            food_remaining=self.food_remaining,
            rocks_moved_last_step=self._last_rocks_moved
        )
    
    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "player": self.player_position(),
            "dead": self.is_dead(),
            "won": self.is_won(),
            "moves_used": self._moves_used,
            "food_remaining": self.food_remaining,
            "terminated_reason": self._termination_reason,
        }
    
    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.
        
        Returns:
            Dict with grid size, row-major tile names and player info.
        """
        tiles: List[List[Optional[str]]] = [
            [tile.value if tile is not None else None for tile in row]
            for row in self._state.rows()
        ]
        return {
            "grid_width": self.width,
            "grid_height": self.height,
            "tiles": tiles,
            "player": self.player_position(),
            "dead": self.is_dead(),
            "won": self.is_won(),
            "moves_used": self._moves_used,
            "food_remaining": self.food_remaining,
        }
    
    def render_text(self) -> str:
        """Board as map text, with the player drawn as the start character."""
        lines: List[str] = []
        player: Tuple[int, int] = self.player_position()
        for y, row in enumerate(self._state.rows()):
            chars = []
            for x, tile in enumerate(row):
                if (x, y) == player:
                    chars.append(self._catalog.start_char)
                else:
                    chars.append(self._catalog.char_for(tile))
            lines.append("".join(chars))
        return "\n".join(lines)
