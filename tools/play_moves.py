"""
Move Replay
===========

Replays a string of moves against a map and prints the board after each one.

Moves are letters U, R, D, L (case-insensitive); anything else is skipped
with a warning.

Usage:
    python -m tools.play_moves [--map FILE] [--moves MOVES] [--quiet]
"""

from __future__ import annotations

import argparse
import sys
from typing import List

from willi.core.config_loader import load_config
from willi.core.game import CoreGame
from willi.core.map_loader import MapError
from willi.core.movement import Direction


def parse_moves(moves: str) -> List[Direction]:
    """Turn a move string into directions, skipping unknown characters."""
    directions: List[Direction] = []
    for key in moves:
        if key.isspace():
            continue
        try:
            directions.append(Direction.from_key(key))
        except ValueError:
            print(f"Skipping unknown move {key!r}", file=sys.stderr)
    return directions


def replay(game: CoreGame, directions: List[Direction], quiet: bool = False) -> None:
    """Apply moves in order, stopping early once the player is crushed."""
    if not quiet:
        print(game.render_text())
        print()
    
    for i, direction in enumerate(directions, start=1):
        result = game.step(direction)
        if not quiet:
            status = "moved" if result.moved else "blocked"
            print(f"[{i}] {direction.name}: {status}, "
                  f"rocks fell: {len(result.rock_moves)}, "
                  f"food left: {result.snapshot.food_remaining}")
            print(game.render_text())
            print()
        if game.is_dead():
            break


def main():
    parser = argparse.ArgumentParser(description="Replay moves on a Watch Out Willi map")
    parser.add_argument("--map", type=str, default=None,
                        help="Map file (default: configured level)")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to game_config.yaml")
    parser.add_argument("--moves", type=str, default="",
                        help="Moves to play, e.g. RRDDL")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print the final result")
    args = parser.parse_args()
    
    config = load_config(args.config)
    try:
        game = CoreGame.from_file(args.map, config=config)
    except MapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    
    replay(game, parse_moves(args.moves), quiet=args.quiet)
    
    print("=" * 40)
    print(f"Player: {game.player_position()}")
    print(f"Moves: {game.moves_used}")
    print(f"Food left: {game.food_remaining}")
    if game.is_dead():
        print("Result: crushed")
    elif game.is_won():
        print("Result: won")
    else:
        print("Result: in progress")
    return 0


if __name__ == "__main__":
    sys.exit(main())
