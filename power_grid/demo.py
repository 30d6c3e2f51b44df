"""Simple command line demo for the power grid logic."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .game import LevelLoader, PowerGridGame, SolutionValidator
from .grid import Grid
from .tiles import ROTATION_STEPS, Direction

# Box drawing glyph for every combination of ports.
_GLYPHS = {
    frozenset(): " ",
    frozenset({Direction.NORTH}): "╵",
    frozenset({Direction.EAST}): "╶",
    frozenset({Direction.SOUTH}): "╷",
    frozenset({Direction.WEST}): "╴",
    frozenset({Direction.NORTH, Direction.SOUTH}): "│",
    frozenset({Direction.EAST, Direction.WEST}): "─",
    frozenset({Direction.NORTH, Direction.EAST}): "└",
    frozenset({Direction.EAST, Direction.SOUTH}): "┌",
    frozenset({Direction.SOUTH, Direction.WEST}): "┐",
    frozenset({Direction.WEST, Direction.NORTH}): "┘",
    frozenset({Direction.NORTH, Direction.EAST, Direction.SOUTH}): "├",
    frozenset({Direction.EAST, Direction.SOUTH, Direction.WEST}): "┬",
    frozenset({Direction.SOUTH, Direction.WEST, Direction.NORTH}): "┤",
    frozenset({Direction.WEST, Direction.NORTH, Direction.EAST}): "┴",
    frozenset(Direction): "┼",
}


def render_ascii(grid: Grid) -> str:
    """Draw the grid with one glyph per tile; unpowered tiles are wrapped in dots."""

    lines = []
    for row in range(grid.rows):
        parts = []
        for column in range(grid.columns):
            cell = grid.cell_at(row, column)
            glyph = _GLYPHS[cell.ports]
            if cell.is_empty:
                parts.append("   ")
            elif cell.powered:
                parts.append(f" {glyph} ")
            else:
                parts.append(f".{glyph}.")
        lines.append("".join(parts))
    return "\n".join(lines)


def play_solution(game: PowerGridGame, solution: Dict) -> None:
    """Click each listed tile until it reaches its target rotation.

    A tile gets at most one full turn, so an unreachable target stops the loop.
    """

    for rotation in solution.get("rotations", []):
        row, column = rotation["position"]
        for _ in range(ROTATION_STEPS):
            if game.finished or game.grid.cell_at(row, column).rotation == rotation["rotation"]:
                break
            game.rotate_cell(row, column)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Power grid terminal demo")
    parser.add_argument("--level", default="level_02_corner_loop")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    package_root = Path(__file__).resolve().parent
    level_loader = LevelLoader(package_root / "levels")
    validator = SolutionValidator(level_loader, package_root / "solutions")

    level = level_loader.load(args.level)
    game = PowerGridGame(level)

    print("=== Power Grid Demo ===")
    print(f"Level: {level.name} ({level.difficulty})")
    print(render_ascii(game.grid))

    solution = validator.load_solution(args.level)
    play_solution(game, solution)

    print("Solved:" if game.level_complete() else "Unsolved:")
    print(render_ascii(game.grid))
    print(f"Moves: {game.moves}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
