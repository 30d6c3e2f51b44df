"""Tile catalogue, level cell codec and port connectivity."""

from __future__ import annotations

from enum import Enum, IntEnum
from functools import lru_cache
from typing import Dict, FrozenSet, Tuple

from .errors import LevelDataError


ROTATION_STEPS = 4
TYPE_RADIX = 10


class Direction(Enum):
    """Edges of a tile, with (row, column) offsets. Row 0 is the top row."""

    NORTH = (-1, 0)
    EAST = (0, 1)
    SOUTH = (1, 0)
    WEST = (0, -1)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    def turn_right(self) -> "Direction":
        mapping = {
            Direction.NORTH: Direction.EAST,
            Direction.EAST: Direction.SOUTH,
            Direction.SOUTH: Direction.WEST,
            Direction.WEST: Direction.NORTH,
        }
        return mapping[self]

    def reverse(self) -> "Direction":
        mapping = {
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
            Direction.EAST: Direction.WEST,
            Direction.WEST: Direction.EAST,
        }
        return mapping[self]

    def rotated(self, steps: int) -> "Direction":
        direction = self
        for _ in range(steps % ROTATION_STEPS):
            direction = direction.turn_right()
        return direction


class TileType(IntEnum):
    """Wire tile kinds. The values are the type digit of the level format."""

    EMPTY = 0
    SOURCE = 1
    SINK = 2
    STRAIGHT = 3
    CORNER = 4
    T_JUNCTION = 5
    CROSS = 6


CANONICAL_PORTS: Dict[TileType, FrozenSet[Direction]] = {
    TileType.EMPTY: frozenset(),
    TileType.SOURCE: frozenset({Direction.NORTH}),
    TileType.SINK: frozenset({Direction.NORTH}),
    TileType.STRAIGHT: frozenset({Direction.NORTH, Direction.SOUTH}),
    TileType.CORNER: frozenset({Direction.NORTH, Direction.EAST}),
    TileType.T_JUNCTION: frozenset(
        {Direction.NORTH, Direction.EAST, Direction.SOUTH}
    ),
    TileType.CROSS: frozenset(
        {Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST}
    ),
}

# Sources stay where the level designer put them; sinks may be turned.
FIXED_TILE_TYPES: FrozenSet[TileType] = frozenset({TileType.EMPTY, TileType.SOURCE})


def is_rotatable(tile_type: TileType) -> bool:
    return tile_type not in FIXED_TILE_TYPES


def _coerce_int(value: object, what: str) -> int:
    # bool is an int subclass but never a valid level code.
    if isinstance(value, bool) or not isinstance(value, int):
        raise LevelDataError(f"{what} must be an integer, got {value!r}")
    return value


def _check_rotation(rotation: int) -> int:
    if not 0 <= rotation < ROTATION_STEPS:
        raise LevelDataError(
            f"Rotation must be between 0 and {ROTATION_STEPS - 1}, got {rotation}"
        )
    return rotation


def decode_cell(encoded: int) -> Tuple[TileType, int]:
    """Split a level cell code into its tile type and rotation.

    The low decimal digit holds the type, the remaining digits the number of
    quarter turns: ``34`` is a corner turned three times.
    """

    encoded = _coerce_int(encoded, "Cell code")
    type_code = encoded % TYPE_RADIX
    try:
        tile_type = TileType(type_code)
    except ValueError as exc:
        raise LevelDataError(
            f"Cell code {encoded} uses unknown tile type {type_code}"
        ) from exc
    rotation = _check_rotation(encoded // TYPE_RADIX)
    return tile_type, rotation


def encode_cell(tile_type: TileType, rotation: int = 0) -> int:
    """Inverse of :func:`decode_cell`."""

    type_code = _coerce_int(tile_type, "Tile type")
    try:
        tile_type = TileType(type_code)
    except ValueError as exc:
        raise LevelDataError(f"Unknown tile type {type_code}") from exc
    rotation = _check_rotation(_coerce_int(rotation, "Rotation"))
    return int(tile_type) + rotation * TYPE_RADIX


@lru_cache(maxsize=None)
def ports_for(tile_type: TileType, rotation: int) -> FrozenSet[Direction]:
    """Ports of ``tile_type`` after ``rotation`` clockwise quarter turns."""

    canonical = CANONICAL_PORTS[TileType(tile_type)]
    return frozenset(direction.rotated(rotation) for direction in canonical)


def active_ports(cell) -> FrozenSet[Direction]:
    """Ports currently exposed by anything with ``tile_type`` and ``rotation``."""

    return ports_for(cell.tile_type, cell.rotation)


def opposite(direction: Direction) -> Direction:
    return direction.reverse()


__all__ = [
    "CANONICAL_PORTS",
    "Direction",
    "FIXED_TILE_TYPES",
    "ROTATION_STEPS",
    "TileType",
    "active_ports",
    "decode_cell",
    "encode_cell",
    "is_rotatable",
    "opposite",
    "ports_for",
]
