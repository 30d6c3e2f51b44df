"""Core game flow for the power grid puzzle."""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from .errors import InvalidOperationError, LevelDataError, PowerGridError
from .grid import Cell, Grid, LevelData, Position
from .propagation import is_complete, propagate, unpowered_positions
from .tiles import FIXED_TILE_TYPES, ROTATION_STEPS, decode_cell, encode_cell

logger = logging.getLogger(__name__)

COMPLETION_SCORE = 100

GameListener = Callable[[str, Dict[str, object]], None]


def apply_rotation_to_level(level: LevelData, rotation: Dict[str, object]) -> None:
    """Overwrite the rotation of one cell in the raw level data."""

    row, column = (int(v) for v in rotation["position"])
    if not (0 <= row < level.rows and 0 <= column < level.columns):
        raise LevelDataError(f"Solution position ({row}, {column}) is outside the level")
    index = row * level.columns + column
    tile_type, current = decode_cell(level.cells[index])
    target = int(rotation["rotation"])
    if tile_type in FIXED_TILE_TYPES and target != current:
        raise LevelDataError(
            f"Solution rotates fixed {tile_type.name} tile at ({row}, {column})"
        )
    level.cells[index] = encode_cell(tile_type, target)


class PowerGridGame:
    """High level game manager: rotation requests, propagation and win state."""

    def __init__(
        self,
        level: LevelData,
        *,
        level_index: int = 0,
        listeners: Iterable[GameListener] = (),
    ):
        self.level = level
        self.level_index = level_index
        self.listeners: List[GameListener] = list(listeners)
        self.reset()

    def subscribe(self, listener: GameListener) -> None:
        self.listeners.append(listener)

    def _emit(self, event: str, payload: Dict[str, object]) -> None:
        self.last_events.setdefault(event, []).append(payload)
        for listener in self.listeners:
            listener(event, payload)

    def reset(self) -> None:
        self.grid = Grid.load(self.level)
        self.finished = False
        self.moves = 0
        self.last_events: Dict[str, List[Dict[str, object]]] = {}
        self.propagate()

    def scramble(self, rng: Optional[random.Random] = None) -> None:
        """Give every rotatable tile a random orientation.

        Sources keep the rotation from the level file.
        """

        rng = rng or random.Random()
        for row, column in self.grid.positions():
            if self.grid.is_rotatable(row, column):
                self.grid.set_rotation(row, column, rng.randrange(ROTATION_STEPS))
        self.finished = False
        self.moves = 0
        self.propagate()

    def propagate(self) -> List[Position]:
        powered = propagate(self.grid)
        return sorted(powered)

    def level_complete(self) -> bool:
        if self.grid.needs_propagation:
            self.propagate()
        return is_complete(self.grid)

    def score(self) -> int:
        return COMPLETION_SCORE

    def rotate_cell(self, row: int, column: int) -> Cell:
        """Rotate one cell, then recompute power and check for completion."""

        try:
            if self.finished:
                raise InvalidOperationError("Level is already complete")
            cell = self.grid.rotate_cell(row, column)
        except PowerGridError as exc:
            logger.info("Rotation at (%s, %s) rejected: %s", row, column, exc)
            self._emit(
                "rejected",
                {"position": (row, column), "reason": str(exc)},
            )
            raise

        self.moves += 1
        powered = self.propagate()
        self._emit(
            "rotated",
            {
                "position": (row, column),
                "rotation": cell.rotation,
                "powered": len(powered),
                "moves": self.moves,
            },
        )
        if is_complete(self.grid):
            self._on_level_complete()
        return self.grid.cell_at(row, column)

    def _on_level_complete(self) -> None:
        self.finished = True
        score = self.score()
        logger.info(
            "Level %s (%s) completed in %d moves with score %d",
            self.level_index,
            self.level.name,
            self.moves,
            score,
        )
        self._emit(
            "completed",
            {
                "level_index": self.level_index,
                "name": self.level.name,
                "score": score,
                "moves": self.moves,
            },
        )

    def snapshot(self) -> LevelData:
        """Level data holding the current rotations, enough to resume play."""

        return LevelData(
            rows=self.grid.rows,
            columns=self.grid.columns,
            cells=self.grid.encode(),
            name=self.level.name,
            difficulty=self.level.difficulty,
        )

    def playthrough(self) -> Dict[str, object]:
        complete = self.level_complete()
        cells = [
            {
                "position": [row, column],
                "type": cell.tile_type.name,
                "rotation": cell.rotation,
                "powered": cell.powered,
            }
            for (row, column), cell in self.grid.items()
        ]
        return {
            "metadata": self.level.metadata,
            "cells": cells,
            "powered": [list(position) for position in self.grid.powered_positions()],
            "unpowered": [list(position) for position in unpowered_positions(self.grid)],
            "complete": complete,
            "moves": self.moves,
        }


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def available(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(path.stem for path in self.root.glob("*.json"))

    def level_count(self) -> int:
        return len(self.available())

    def load(self, name: str) -> LevelData:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise LevelDataError(f"{path} is not valid JSON: {exc}") from exc
        level = LevelData.from_dict(data, name=name)
        # Validate eagerly so a broken file is reported at load time.
        Grid.load(level)
        return level

    def load_index(self, index: int) -> LevelData:
        names = self.available()
        if not names:
            raise FileNotFoundError(f"No levels found in {self.root}")
        if not 0 <= index < len(names):
            logger.error(
                "Level index %d out of range (%d levels); falling back to the first level",
                index,
                len(names),
            )
            index = 0
        return self.load(names[index])


class SolutionValidator:
    """Check that a solution file leaves the level fully powered."""

    def __init__(self, level_loader: LevelLoader, solutions_root: Path):
        self.level_loader = level_loader
        self.solutions_root = Path(solutions_root)

    def load_solution(self, name: str) -> Dict:
        path = self.solutions_root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        return json.loads(path.read_text())

    def apply_solution(self, level: LevelData, solution: Dict) -> LevelData:
        for rotation in solution.get("rotations", []):
            apply_rotation_to_level(level, rotation)
        return level

    def validate(self, level_name: str, solution_name: Optional[str] = None) -> bool:
        level = self.level_loader.load(level_name)
        solution_data = self.load_solution(solution_name or level_name)
        level = self.apply_solution(level, solution_data)
        game = PowerGridGame(level)
        expected_powered = solution_data.get("expected_powered")
        if expected_powered is not None:
            if len(game.grid.powered_positions()) < expected_powered:
                return False
        return game.level_complete()


__all__ = [
    "COMPLETION_SCORE",
    "GameListener",
    "LevelLoader",
    "PowerGridGame",
    "SolutionValidator",
    "apply_rotation_to_level",
]
