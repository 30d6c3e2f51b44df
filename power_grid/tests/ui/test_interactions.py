"""Headless interaction tests for the pygame based UI wrapper.

Rendering uses a fixed ``cell_size`` and the SDL dummy driver configured in
``conftest.py``; animations are advanced explicitly via ``update``.
"""

from __future__ import annotations

import pytest

from power_grid.game import PowerGridGame
from power_grid.grid import LevelData
from power_grid.ui import PowerGridUI, RotationAnimation
from power_grid.ui import layout
from power_grid.ui.toolkit import smoothstep


def make_ui(pygame, cells, rows=1, columns=2, **kwargs):
    game = PowerGridGame(LevelData(rows=rows, columns=columns, cells=list(cells)))
    surface = pygame.Surface((columns * 32, rows * 32))
    return game, PowerGridUI(game, cell_size=32, surface=surface, **kwargs)


def click_event(pygame, pos):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos)


def test_click_rotates_cell_under_pointer(pygame_module):
    pygame = pygame_module
    game, ui = make_ui(pygame, [11, 2])

    ui.process_events([click_event(pygame, (48, 10))])

    assert game.grid.cell_at(0, 1).rotation == 1
    assert ui.is_animating((0, 1))
    assert game.moves == 1


def test_click_outside_board_is_ignored(pygame_module):
    pygame = pygame_module
    game, ui = make_ui(pygame, [11, 2])

    assert ui.cell_from_pixel((70, 10)) is None
    assert ui.cell_from_pixel((-1, 10)) is None
    assert not ui.click((70, 10))
    assert game.moves == 0


def test_click_during_playback_is_rejected(pygame_module):
    pygame = pygame_module
    game, ui = make_ui(pygame, [11, 2])

    assert ui.click((40, 4))
    assert not ui.click((40, 4))
    assert game.grid.cell_at(0, 1).rotation == 1
    assert ui.status_message

    ui.update(1.0)

    assert not ui.is_animating()
    assert ui.click((40, 4))
    assert game.grid.cell_at(0, 1).rotation == 2


def test_rotation_commits_power_before_playback_finishes(pygame_module):
    pygame = pygame_module
    game, ui = make_ui(pygame, [11, 22])

    assert ui.click((40, 4))

    assert ui.is_animating((0, 1))
    assert game.grid.cell_at(0, 1).powered
    assert game.finished
    assert ui.status_message == "Level complete!"
    ui.update(1.0)
    assert not ui.click((40, 4))


def test_fixed_tile_click_reports_reason(pygame_module):
    pygame = pygame_module
    game, ui = make_ui(pygame, [11, 2])

    assert not ui.click((4, 4))
    assert "cannot be rotated" in ui.status_message
    assert not ui.is_animating()


def test_display_angle_eases_between_rotations(pygame_module):
    pygame = pygame_module
    game, ui = make_ui(pygame, [11, 32], rotation_speed=2.0)

    ui.click((40, 4))
    assert ui.display_angle((0, 1)) == pytest.approx(270.0)

    ui.update(0.25)
    assert ui.display_angle((0, 1)) == pytest.approx(315.0)

    ui.update(0.25)
    assert ui.display_angle((0, 1)) == pytest.approx(0.0)
    assert not ui.is_animating()


def test_rotation_animation_smoothstep():
    animation = RotationAnimation(start_angle=90.0, target_angle=180.0, duration=0.2)
    animation.advance(0.05)

    assert animation.angle == pytest.approx(90.0 + 90.0 * smoothstep(0.25))
    assert not animation.done

    animation.advance(1.0)
    assert animation.done
    assert animation.angle == pytest.approx(180.0)


def test_render_dims_unpowered_wires(pygame_module):
    pygame = pygame_module
    game, ui = make_ui(pygame, [11, 2])

    surface = ui.render()

    # Wire from the source centre towards the east edge carries power.
    assert tuple(surface.get_at((24, 16)))[:3] == layout.POWERED_COLOR
    # The sink points north and is dark.
    assert tuple(surface.get_at((48, 4)))[:3] == layout.UNPOWERED_COLOR
    # Away from any wire the board colour shows through.
    assert tuple(surface.get_at((40, 28)))[:3] == layout.BOARD_BACKGROUND_COLOR
