"""Power propagation and the win condition."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Set

from .errors import InvalidOperationError
from .grid import Grid, Position
from .tiles import opposite


def propagate(grid: Grid) -> Set[Position]:
    """Recompute every powered flag with a breadth-first search from the sources.

    Two neighbouring cells are connected only when each exposes a port on
    their shared edge. Returns the positions that ended up powered.
    """

    for _, cell in grid.items():
        cell.powered = False

    queue: Deque[Position] = deque()
    visited: Set[Position] = set()
    for position in grid.source_positions():
        grid.cell_at(*position).powered = True
        visited.add(position)
        queue.append(position)

    while queue:
        row, column = queue.popleft()
        current = grid.cell_at(row, column)
        for direction in current.ports:
            target = grid.neighbour(row, column, direction)
            if target is None or target in visited:
                continue
            neighbour = grid.cell_at(*target)
            if opposite(direction) not in neighbour.ports:
                continue
            neighbour.powered = True
            visited.add(target)
            queue.append(target)

    grid.needs_propagation = False
    return visited


def unpowered_positions(grid: Grid) -> List[Position]:
    """Non-empty cells that are still dark."""

    return [
        position
        for position, cell in grid.items()
        if not cell.is_empty and not cell.powered
    ]


def is_complete(grid: Grid) -> bool:
    """True once every non-empty cell carries power.

    Only meaningful right after :func:`propagate`; stale flags are refused.
    """

    if grid.needs_propagation:
        raise InvalidOperationError(
            "Grid changed since the last propagation pass; propagate before checking"
        )
    return not unpowered_positions(grid)


__all__ = ["is_complete", "propagate", "unpowered_positions"]
