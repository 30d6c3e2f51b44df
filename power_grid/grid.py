"""Grid state: level data, cells and the rotation step."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidOperationError, LevelDataError, OutOfRangeError
from .tiles import (
    FIXED_TILE_TYPES,
    ROTATION_STEPS,
    Direction,
    TileType,
    decode_cell,
    encode_cell,
    ports_for,
)

Position = Tuple[int, int]


@dataclass
class LevelData:
    """Level definition as stored on disk: dimensions plus row-major cell codes."""

    rows: int
    columns: int
    cells: List[int] = field(default_factory=list)
    name: str = ""
    difficulty: str = "Unknown"

    @classmethod
    def from_dict(cls, data: Dict, *, name: str = "") -> "LevelData":
        try:
            rows = data["rows"]
            columns = data["columns"]
            cells = list(data["cells"])
        except (KeyError, TypeError) as exc:
            raise LevelDataError(f"Level data is missing a required field: {exc}") from exc
        return cls(
            rows=rows,
            columns=columns,
            cells=cells,
            name=str(data.get("name", name)),
            difficulty=str(data.get("difficulty", "Unknown")),
        )

    @property
    def metadata(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "difficulty": self.difficulty,
            "dimensions": f"{self.rows}x{self.columns}",
        }

    def normalised(self) -> "LevelData":
        """Return a copy whose dimensions and cell list agree.

        Dimensions are clamped to at least one, missing cells are padded
        with empty tiles and surplus cells are dropped. Used when authoring
        levels; :meth:`Grid.load` refuses inconsistent data instead.
        """

        rows = max(1, int(self.rows))
        columns = max(1, int(self.columns))
        required = rows * columns
        cells = list(self.cells[:required])
        cells.extend([int(TileType.EMPTY)] * (required - len(cells)))
        return replace(self, rows=rows, columns=columns, cells=cells)


@dataclass
class Cell:
    """One tile on the board."""

    tile_type: TileType
    rotation: int = 0
    powered: bool = False

    @property
    def ports(self) -> FrozenSet[Direction]:
        return ports_for(self.tile_type, self.rotation)

    @property
    def is_empty(self) -> bool:
        return self.tile_type == TileType.EMPTY

    @property
    def encoded(self) -> int:
        return encode_cell(self.tile_type, self.rotation)


def rotate(cell: Cell, fixed_types: FrozenSet[TileType] = FIXED_TILE_TYPES) -> Cell:
    """Turn a cell one quarter clockwise.

    The powered flag is carried over untouched; it only changes on the next
    propagation pass.
    """

    if cell.tile_type in fixed_types:
        raise InvalidOperationError(f"{cell.tile_type.name} tiles cannot be rotated")
    return replace(cell, rotation=(cell.rotation + 1) % ROTATION_STEPS)


class Grid:
    """Authoritative puzzle state for one loaded level."""

    def __init__(
        self,
        rows: int,
        columns: int,
        cells: Sequence[Cell],
        *,
        fixed_types: Iterable[TileType] = FIXED_TILE_TYPES,
    ) -> None:
        if rows < 1 or columns < 1:
            raise LevelDataError(f"Grid dimensions must be positive, got {rows}x{columns}")
        if len(cells) != rows * columns:
            raise LevelDataError(
                f"A {rows}x{columns} grid needs {rows * columns} cells, got {len(cells)}"
            )
        self._rows = rows
        self._columns = columns
        self._cells: List[Cell] = list(cells)
        self.fixed_types: FrozenSet[TileType] = frozenset(fixed_types)
        self.needs_propagation = True

    @classmethod
    def load(
        cls,
        level: LevelData,
        *,
        fixed_types: Iterable[TileType] = FIXED_TILE_TYPES,
    ) -> "Grid":
        for label, value in (("rows", level.rows), ("columns", level.columns)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise LevelDataError(f"Level {label} must be an integer, got {value!r}")
        cells = []
        for index, code in enumerate(level.cells):
            try:
                tile_type, rotation = decode_cell(code)
            except LevelDataError as exc:
                raise LevelDataError(f"Cell {index}: {exc}") from exc
            cells.append(Cell(tile_type=tile_type, rotation=rotation, powered=False))
        return cls(level.rows, level.columns, cells, fixed_types=fixed_types)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    def __len__(self) -> int:
        return len(self._cells)

    def inside(self, row: int, column: int) -> bool:
        return 0 <= row < self._rows and 0 <= column < self._columns

    def _index(self, row: int, column: int) -> int:
        if not self.inside(row, column):
            raise OutOfRangeError(row, column, self._rows, self._columns)
        return row * self._columns + column

    def cell_at(self, row: int, column: int) -> Cell:
        return self._cells[self._index(row, column)]

    def is_rotatable(self, row: int, column: int) -> bool:
        return self.cell_at(row, column).tile_type not in self.fixed_types

    def rotate_cell(self, row: int, column: int) -> Cell:
        index = self._index(row, column)
        rotated = rotate(self._cells[index], self.fixed_types)
        self._cells[index] = rotated
        self.needs_propagation = True
        return rotated

    def set_rotation(self, row: int, column: int, rotation: int) -> Cell:
        """Place a cell at an absolute rotation, used when scrambling or resuming."""

        index = self._index(row, column)
        cell = self._cells[index]
        if cell.tile_type in self.fixed_types:
            raise InvalidOperationError(f"{cell.tile_type.name} tiles cannot be rotated")
        updated = replace(cell, rotation=rotation % ROTATION_STEPS)
        self._cells[index] = updated
        self.needs_propagation = True
        return updated

    def neighbour(self, row: int, column: int, direction: Direction) -> Optional[Position]:
        d_row, d_column = direction.vector
        target = (row + d_row, column + d_column)
        if not self.inside(*target):
            return None
        return target

    def positions(self) -> Iterator[Position]:
        for row in range(self._rows):
            for column in range(self._columns):
                yield row, column

    def items(self) -> Iterator[Tuple[Position, Cell]]:
        for index, cell in enumerate(self._cells):
            yield divmod(index, self._columns), cell

    def source_positions(self) -> List[Position]:
        return [
            position
            for position, cell in self.items()
            if cell.tile_type == TileType.SOURCE
        ]

    def powered_positions(self) -> List[Position]:
        return [position for position, cell in self.items() if cell.powered]

    def encode(self) -> List[int]:
        return [cell.encoded for cell in self._cells]


__all__ = ["Cell", "Grid", "LevelData", "Position", "rotate"]
