"""Interactive pygame front end and launcher for the power grid puzzle."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import pygame

from ..errors import InvalidOperationError, LevelDataError, PowerGridError
from ..game import LevelLoader, PowerGridGame
from ..progress import ProgressStore
from . import layout
from .audio import SoundBoard
from .toolkit import PowerGridUI

logger = logging.getLogger(__name__)

LEVEL_ENV_VAR = "POWER_GRID_LEVEL_ROOT"
SAVE_ENV_VAR = "POWER_GRID_SAVE_PATH"


@dataclass(frozen=True)
class UIDirectories:
    """Bundle with resolved locations required by the UI."""

    level_root: Path
    save_path: Path


def _default_level_root() -> Path:
    return Path(__file__).resolve().parents[1] / "levels"


def _default_save_path() -> Path:
    return Path.home() / ".power_grid" / "progress.json"


def _read_path(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> UIDirectories:
    """Resolve the level directory and progress file from the environment.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if the level directory
        does not exist. The progress file is created on first save.
    """

    level_root = _read_path(LEVEL_ENV_VAR, _default_level_root())
    save_path = _read_path(SAVE_ENV_VAR, _default_save_path())

    if check_exists and not level_root.exists():
        raise FileNotFoundError(
            f"Required level directory does not exist: {level_root}"
        )

    return UIDirectories(level_root=level_root, save_path=save_path)


def describe_levels(loader: LevelLoader, progress: Optional[ProgressStore] = None) -> List[str]:
    lines = []
    for index, name in enumerate(loader.available()):
        marker = ""
        if progress is not None:
            if progress.is_completed(index):
                marker = f" [done, score {progress.score(index)}]"
            elif not progress.is_unlocked(index):
                marker = " [locked]"
        lines.append(f"  {index + 1}. {name}{marker}")
    return lines


class PowerGridApp:
    """Pygame driven application for the power grid puzzle."""

    def __init__(
        self,
        directories: UIDirectories,
        *,
        sounds: Optional[SoundBoard] = None,
        start_level: Optional[str] = None,
    ) -> None:
        pygame.init()
        self.loader = LevelLoader(directories.level_root)
        self.progress = ProgressStore(directories.save_path)
        self.sounds = sounds or SoundBoard()
        self.level_names = self.loader.available()
        if not self.level_names:
            raise FileNotFoundError(f"No levels found in {directories.level_root}")
        self.level_index = 0
        if start_level is not None:
            if start_level not in self.level_names:
                raise FileNotFoundError(self.loader.root / f"{start_level}.json")
            self.level_index = self.level_names.index(start_level)
        self.font = pygame.font.Font(None, 28)
        self.small_font = pygame.font.Font(None, 22)
        self.clock = pygame.time.Clock()
        self.screen = None
        self.game: Optional[PowerGridGame] = None
        self.ui: Optional[PowerGridUI] = None
        self.geometry: Optional[layout.BoardGeometry] = None
        self.load_error: Optional[PowerGridError] = None
        if not self.load_level(self.level_index):
            raise self.load_error

    def load_level(self, index: int) -> bool:
        """Open level ``index``; on refusal keep the current level and record why."""

        if not self.progress.is_unlocked(index):
            logger.info("Level %d is locked", index)
            self.load_error = InvalidOperationError(
                f"Level {self.level_names[index]} is locked"
            )
            return False
        try:
            level = self.loader.load_index(index)
        except LevelDataError as exc:
            logger.error("Cannot start level %d: %s", index, exc)
            self.load_error = exc
            return False
        self.load_error = None
        self.level_index = index if 0 <= index < len(self.level_names) else 0
        self.game = PowerGridGame(
            level,
            level_index=self.level_index,
            listeners=(self.progress.record, self.sounds),
        )
        self.geometry = layout.compute_geometry(level.rows, level.columns)
        self.screen = pygame.display.set_mode(self.geometry.window)
        title = level.name or self.level_names[self.level_index]
        pygame.display.set_caption(f"Power Grid - {title}")
        board = pygame.Surface(self.geometry.board[2:])
        self.ui = PowerGridUI(self.game, cell_size=layout.TILE_SIZE, surface=board)
        return True

    def cycle_level(self, direction: int) -> None:
        target = (self.level_index + direction) % len(self.level_names)
        if self.load_level(target):
            return
        if isinstance(self.load_error, LevelDataError):
            self.ui.status_message = f"Level {target + 1} could not be loaded"
        else:
            self.ui.status_message = "Solve the previous level first"

    def restart(self) -> None:
        self.game.reset()
        self.ui.animations.clear()
        self.ui.status_message = ""

    def _board_position(self, position: Tuple[int, int]) -> Tuple[int, int]:
        board_x, board_y, _, _ = self.geometry.board
        return position[0] - board_x, position[1] - board_y

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            raise SystemExit
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                raise SystemExit
            if event.key in (pygame.K_RIGHT, pygame.K_n):
                self.cycle_level(1)
            elif event.key in (pygame.K_LEFT, pygame.K_p):
                self.cycle_level(-1)
            elif event.key == pygame.K_r:
                self.restart()
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.ui.click(self._board_position(event.pos))

    def draw(self) -> None:
        self.screen.fill(layout.BACKGROUND_COLOR)
        board_rect = pygame.Rect(*self.geometry.board)
        self.screen.blit(self.ui.render(), board_rect)

        panel_rect = pygame.Rect(*self.geometry.panel)
        pygame.draw.rect(self.screen, layout.PANEL_BACKGROUND_COLOR, panel_rect, border_radius=18)
        x = panel_rect.x + layout.UI_PANEL_PADDING
        y = panel_rect.y + layout.UI_PANEL_PADDING
        lines = [
            (self.font, f"Level {self.level_index + 1}: {self.game.level.name}"),
            (self.small_font, f"Moves: {self.game.moves}"),
            (self.small_font, f"Best score: {self.progress.score(self.level_index)}"),
        ]
        if self.game.finished:
            lines.append((self.font, f"Complete! Score {self.game.score()}"))
        if self.ui.status_message and not self.game.finished:
            lines.append((self.small_font, self.ui.status_message))
        lines.append((self.small_font, "N/P: next/previous  R: restart"))
        for font, text in lines:
            surface = font.render(text, True, layout.TEXT_COLOR)
            self.screen.blit(surface, (x, y))
            y += surface.get_height() + layout.UI_PANEL_SPACING
        pygame.display.flip()

    def run(self) -> None:
        last_time = time.perf_counter()
        while True:
            now = time.perf_counter()
            delta = now - last_time
            last_time = now
            for event in pygame.event.get():
                try:
                    self.handle_event(event)
                except SystemExit:
                    pygame.quit()
                    return
            self.ui.update(delta)
            self.draw()
            self.clock.tick(60)


def bootstrap_directories() -> UIDirectories:
    """Return resolved directories and print a short bootstrap message."""

    directories = resolve_directories()
    message = (
        "Power Grid UI bootstrap\n"
        f"  levels: {directories.level_root}\n"
        f"  progress: {directories.save_path}\n"
        f"Set {LEVEL_ENV_VAR} or {SAVE_ENV_VAR} to use custom locations."
    )
    print(message)
    return directories


def run(start_level: Optional[str] = None) -> None:
    """Entry point helper that instantiates and runs the UI."""

    app = PowerGridApp(resolve_directories(), start_level=start_level)
    app.run()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Power Grid UI launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved resource locations and exit without launching the UI.",
    )
    parser.add_argument(
        "--list-levels",
        action="store_true",
        help="List the available levels with their progress and exit.",
    )
    parser.add_argument("--level", help="Name of the level to open first.")
    parser.add_argument("--verbose", action="store_true", help="Enable info logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    directories = bootstrap_directories()
    if args.info:
        return 0
    if args.list_levels:
        loader = LevelLoader(directories.level_root)
        progress = ProgressStore(directories.save_path)
        print("Available levels:")
        for line in describe_levels(loader, progress):
            print(line)
        return 0

    try:
        run(start_level=args.level)
    except (PowerGridError, FileNotFoundError) as exc:
        print(f"Cannot start the game: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())
