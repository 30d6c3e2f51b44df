"""Power Grid puzzle package."""

from .errors import InvalidOperationError, LevelDataError, OutOfRangeError, PowerGridError
from .game import LevelLoader, PowerGridGame, SolutionValidator
from .grid import Cell, Grid, LevelData, rotate
from .propagation import is_complete, propagate
from .tiles import Direction, TileType, active_ports, decode_cell, encode_cell

__all__ = [
    "Cell",
    "Direction",
    "Grid",
    "InvalidOperationError",
    "LevelData",
    "LevelDataError",
    "LevelLoader",
    "OutOfRangeError",
    "PowerGridError",
    "PowerGridGame",
    "SolutionValidator",
    "TileType",
    "active_ports",
    "decode_cell",
    "encode_cell",
    "is_complete",
    "propagate",
    "rotate",
]
