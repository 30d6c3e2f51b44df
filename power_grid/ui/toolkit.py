"""Minimal pygame based UI helpers for headless testing.

Rendering is deterministic so it can be exercised in automated tests using
the SDL ``dummy`` video driver. Rotations are committed to the game at click
time; :class:`RotationAnimation` only replays the turn on screen.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from ..errors import PowerGridError
from ..tiles import CANONICAL_PORTS, Direction, TileType
from . import layout


# The import is performed lazily in ``ensure_pygame`` so test environments can
# control the SDL configuration before pygame initialises.
_PYGAME = None

_BASE_ANGLES = {
    Direction.NORTH: 0.0,
    Direction.EAST: 90.0,
    Direction.SOUTH: 180.0,
    Direction.WEST: 270.0,
}


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


def smoothstep(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return t * t * (3.0 - 2.0 * t)


@dataclass
class RotationAnimation:
    """Eases a tile from its previous angle to the committed one."""

    start_angle: float
    target_angle: float
    duration: float
    elapsed: float = 0.0

    def advance(self, delta: float) -> None:
        self.elapsed = min(self.duration, self.elapsed + max(0.0, delta))

    @property
    def done(self) -> bool:
        return self.elapsed >= self.duration

    @property
    def angle(self) -> float:
        if self.duration <= 0:
            return self.target_angle % 360.0
        t = smoothstep(self.elapsed / self.duration)
        return (self.start_angle + (self.target_angle - self.start_angle) * t) % 360.0


class PowerGridUI:
    """Very small pygame driven UI wrapper around a :class:`PowerGridGame`."""

    def __init__(
        self,
        game,
        *,
        cell_size: int = 32,
        surface=None,
        use_display: bool = False,
        rotation_speed: float = layout.ROTATION_SPEED,
    ) -> None:
        pygame = ensure_pygame()
        self.game = game
        self.cell_size = cell_size
        self.rotation_speed = rotation_speed
        width = self.game.grid.columns * cell_size
        height = self.game.grid.rows * cell_size
        self.surface = surface or pygame.Surface((width, height))
        self.screen = None
        if use_display:
            self.screen = pygame.display.set_mode((width, height))
        self.animations: Dict[Tuple[int, int], RotationAnimation] = {}
        self.status_message = ""

    # ------------------------------------------------------------------
    # Input handling
    def process_events(self, events: Iterable[object]) -> None:
        pygame = ensure_pygame()
        for event in events:
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.click(event.pos)

    def cell_from_pixel(self, pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        x, y = pos
        if x < 0 or y < 0:
            return None
        row = y // self.cell_size
        column = x // self.cell_size
        if not self.game.grid.inside(row, column):
            return None
        return row, column

    def is_animating(self, cell: Optional[Tuple[int, int]] = None) -> bool:
        if cell is None:
            return bool(self.animations)
        return cell in self.animations

    def click(self, pos: Tuple[int, int]) -> bool:
        """Rotate the tile under ``pos``. Returns True if the rotation was accepted."""

        cell = self.cell_from_pixel(pos)
        if cell is None or self.game.finished:
            return False
        if self.is_animating(cell):
            self.status_message = "Tile is still turning"
            return False
        before = self.game.grid.cell_at(*cell).rotation
        try:
            self.game.rotate_cell(*cell)
        except PowerGridError as exc:
            self.status_message = str(exc)
            return False
        start = before * 90.0
        self.animations[cell] = RotationAnimation(
            start_angle=start,
            target_angle=start + 90.0,
            duration=1.0 / self.rotation_speed if self.rotation_speed > 0 else 0.0,
        )
        self.status_message = "Level complete!" if self.game.finished else ""
        if self.animations[cell].done:
            del self.animations[cell]
        return True

    def update(self, delta: float) -> None:
        for cell in list(self.animations):
            animation = self.animations[cell]
            animation.advance(delta)
            if animation.done:
                del self.animations[cell]

    def display_angle(self, cell: Tuple[int, int]) -> float:
        animation = self.animations.get(cell)
        if animation is not None:
            return animation.angle
        return self.game.grid.cell_at(*cell).rotation * 90.0

    # ------------------------------------------------------------------
    # Rendering helpers
    def render(self):
        pygame = ensure_pygame()
        self.surface.fill(layout.BOARD_BACKGROUND_COLOR)
        for position, cell in self.game.grid.items():
            self._draw_cell(position, cell)
        if self.screen:
            self.screen.blit(self.surface, (0, 0))
            pygame.display.flip()
        return self.surface

    def _cell_rect(self, position: Tuple[int, int]):
        pygame = ensure_pygame()
        row, column = position
        return pygame.Rect(
            column * self.cell_size,
            row * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    def _draw_cell(self, position: Tuple[int, int], cell) -> None:
        pygame = ensure_pygame()
        rect = self._cell_rect(position)
        pygame.draw.rect(self.surface, layout.GRID_LINE_COLOR, rect, 1)
        if cell.tile_type == TileType.EMPTY:
            return

        color = layout.POWERED_COLOR if cell.powered else layout.UNPOWERED_COLOR
        center = rect.center
        half = self.cell_size / 2
        thickness = max(1, int(self.cell_size * layout.WIRE_THICKNESS_RATIO))
        angle = self.display_angle(position)
        for direction in CANONICAL_PORTS[cell.tile_type]:
            radians = math.radians(_BASE_ANGLES[direction] + angle)
            end = (
                round(center[0] + math.sin(radians) * half),
                round(center[1] - math.cos(radians) * half),
            )
            pygame.draw.line(self.surface, color, center, end, thickness)

        radius = max(2, int(self.cell_size * layout.NODE_RADIUS_RATIO))
        if cell.tile_type == TileType.SOURCE:
            pygame.draw.circle(self.surface, layout.SOURCE_COLOR, center, radius)
        elif cell.tile_type == TileType.SINK:
            node_color = layout.SINK_COLOR if cell.powered else layout.UNPOWERED_COLOR
            pygame.draw.circle(self.surface, node_color, center, radius, 2)


__all__ = ["PowerGridUI", "RotationAnimation", "ensure_pygame", "smoothstep"]
