"""
Map Loader
==========

Parses a textual map into the initial grid state and player start position.

A map is a stream of exactly width * height cell characters in row-major
order. Line endings between rows are skipped and do not count as cells.
Anything after the last cell is ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Iterator, List, Optional, Tuple, Union

from willi.core.config_loader import LINE_ENDINGS, GameConfig, get_config
from willi.core.grid import Coord, GridState, Player
from willi.core.tile_catalog import Tile, get_catalog

MapSource = Union[str, IO[str]]


class MapError(ValueError):
    """Base class for map loading failures."""


class InvalidMap(MapError):
    """
    Unrecognised character in the map, or the map ended early.
    
    ``char`` is the offending character, or "" if input ran out.
    """
    
    def __init__(self, char: str, position: Coord, reason: Optional[str] = None):
        self.char = char
        self.position = position
        if reason is None:
            if char:
                reason = f"Unrecognised character {char!r} in map at {position}"
            else:
                reason = f"Map ended early at {position}"
        super().__init__(reason)


class MissingStart(MapError):
    """The map has no player start marker."""
    
    def __init__(self, start_char: str):
        self.start_char = start_char
        super().__init__(f"No player starting position given. Use {start_char!r}.")


def _iter_chars(source: MapSource) -> Iterator[str]:
    """Yield characters one at a time from a string or text stream."""
    if isinstance(source, str):
        yield from source
        return
    while True:
        char = source.read(1)
        if not char:
            return
        yield char


def _next_cell_char(chars: Iterator[str]) -> str:
    """Next non line-ending character, or "" at end of input."""
    for char in chars:
        if char not in LINE_ENDINGS:
            return char
    return ""


def load_map(
    source: MapSource,
    config: Optional[GameConfig] = None,
    width: Optional[int] = None,
    height: Optional[int] = None
) -> GridState:
    """
    Parse a map into a fresh grid state.
    
    Args:
        source: Map text, or a readable text stream positioned at the map.
        config: Game configuration. Uses default if None.
        width: Override grid width from config.
        height: Override grid height from config.
    
    Returns:
        GridState with the player placed on the start cell.
    
    Raises:
        InvalidMap: Unknown character, second start marker, or early end of input.
        MissingStart: No start marker anywhere in the map.
    """
    if config is None:
        config = get_config()
    
    catalog = get_catalog(config)
    width = config.grid.width if width is None else width
    height = config.grid.height if height is None else height
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    
    chars = _iter_chars(source)
    cells: List[List[Optional[Tile]]] = []
    start: Optional[Tuple[int, int]] = None
    
    for y in range(height):
        row: List[Optional[Tile]] = []
        for x in range(width):
            char = _next_cell_char(chars)
            if not char:
                raise InvalidMap("", (x, y))
            if not catalog.is_known_char(char):
                raise InvalidMap(char, (x, y))
            if char == catalog.start_char:
                if start is not None:
                    raise InvalidMap(
                        char, (x, y),
                        f"Second player start {char!r} at {(x, y)}, first at {start}"
                    )
                start = (x, y)
            row.append(catalog.tile_for_char(char))
        cells.append(row)
    
    if start is None:
        raise MissingStart(catalog.start_char)
    
    return GridState(width, height, cells, Player(x=start[0], y=start[1]))


def load_map_file(
    path: Union[str, Path],
    config: Optional[GameConfig] = None,
    width: Optional[int] = None,
    height: Optional[int] = None
) -> GridState:
    """Load a map from a text file. See load_map."""
    # newline="" keeps \r characters so they are skipped like \n
    with open(path, "r", newline="") as f:
        return load_map(f, config=config, width=width, height=height)
