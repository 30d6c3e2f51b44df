"""Layout constants for the power grid UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Tile metrics
TILE_SIZE: int = 96
GRID_PADDING: int = 24
BOARD_OUTER_PADDING: int = 32
WIRE_THICKNESS_RATIO: float = 0.14
NODE_RADIUS_RATIO: float = 0.2

# UI panel metrics
UI_PANEL_WIDTH: int = 320
UI_PANEL_PADDING: int = 24
UI_PANEL_SPACING: int = 18
STATUS_HEIGHT: int = 96

# Quarter turns per second for the rotation playback
ROTATION_SPEED: float = 5.0

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Tuple[int, int, int] = (12, 14, 26)
BOARD_BACKGROUND_COLOR: Tuple[int, int, int] = (20, 24, 44)
PANEL_BACKGROUND_COLOR: Tuple[int, int, int] = (32, 36, 60)
GRID_LINE_COLOR: Tuple[int, int, int] = (58, 64, 96)
TEXT_COLOR: Tuple[int, int, int] = (232, 236, 244)
POWERED_COLOR: Tuple[int, int, int] = (255, 214, 64)
UNPOWERED_COLOR: Tuple[int, int, int] = (78, 84, 110)
SOURCE_COLOR: Tuple[int, int, int] = (255, 94, 0)
SINK_COLOR: Tuple[int, int, int] = (140, 255, 180)


@dataclass(frozen=True)
class BoardGeometry:
    """Pixel rectangles for the major UI regions."""

    board: Tuple[int, int, int, int]
    panel: Tuple[int, int, int, int]
    window: Tuple[int, int]


def compute_geometry(rows: int, columns: int, tile_size: int = TILE_SIZE) -> BoardGeometry:
    """Compute the board, side panel and window sizes for a level."""

    board_width = columns * tile_size
    board_height = rows * tile_size

    board_x = BOARD_OUTER_PADDING
    board_y = BOARD_OUTER_PADDING

    panel_x = board_x + board_width + GRID_PADDING
    panel_height = max(board_height, STATUS_HEIGHT)

    window_width = panel_x + UI_PANEL_WIDTH + BOARD_OUTER_PADDING
    window_height = board_y + panel_height + BOARD_OUTER_PADDING

    return BoardGeometry(
        board=(board_x, board_y, board_width, board_height),
        panel=(panel_x, board_y, UI_PANEL_WIDTH, panel_height),
        window=(window_width, window_height),
    )
