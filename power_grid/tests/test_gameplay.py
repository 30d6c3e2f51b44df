import json
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from power_grid.errors import InvalidOperationError, LevelDataError, OutOfRangeError
from power_grid.game import (
    COMPLETION_SCORE,
    LevelLoader,
    PowerGridGame,
    SolutionValidator,
    apply_rotation_to_level,
)
from power_grid.grid import LevelData
from power_grid.tiles import TileType

LEVEL_NAMES = [
    "level_01_first_light",
    "level_02_corner_loop",
    "level_03_t_split",
    "level_04_crossroads",
]


def fixture_path(*parts: str) -> Path:
    return Path(__file__).resolve().parents[1].joinpath(*parts)


class Recorder:
    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))

    def names(self):
        return [event for event, _ in self.events]


def corner_loop() -> LevelData:
    return LevelData(rows=2, columns=2, cells=[11, 4, 2, 4], name="Loop")


def test_rotation_completes_single_link_level():
    recorder = Recorder()
    game = PowerGridGame(
        LevelData(rows=1, columns=2, cells=[11, 2], name="Link"),
        level_index=3,
        listeners=[recorder],
    )
    assert not game.level_complete()

    for _ in range(3):
        game.rotate_cell(0, 1)

    assert game.finished
    assert game.level_complete()
    assert game.moves == 3
    assert recorder.names() == ["rotated", "rotated", "rotated", "completed"]
    completed = recorder.events[-1][1]
    assert completed["level_index"] == 3
    assert completed["score"] == COMPLETION_SCORE
    assert completed["moves"] == 3


def test_rotation_after_completion_is_rejected():
    game = PowerGridGame(LevelData(rows=1, columns=2, cells=[11, 22]))
    game.rotate_cell(0, 1)
    assert game.finished

    with pytest.raises(InvalidOperationError):
        game.rotate_cell(0, 1)
    assert game.grid.cell_at(0, 1).rotation == 3


def test_rejections_are_reported_and_state_kept():
    recorder = Recorder()
    game = PowerGridGame(corner_loop(), listeners=[recorder])
    before = game.grid.encode()

    with pytest.raises(InvalidOperationError):
        game.rotate_cell(0, 0)
    with pytest.raises(OutOfRangeError):
        game.rotate_cell(2, 2)

    assert game.grid.encode() == before
    assert game.moves == 0
    assert recorder.names() == ["rejected", "rejected"]
    assert recorder.events[0][1]["position"] == (0, 0)
    assert game.last_events["rejected"][1]["position"] == (2, 2)


def test_rotated_event_reports_power():
    recorder = Recorder()
    game = PowerGridGame(corner_loop())
    game.subscribe(recorder)

    game.rotate_cell(0, 1)
    game.rotate_cell(0, 1)

    event, payload = recorder.events[-1]
    assert event == "rotated"
    assert payload["rotation"] == 2
    assert payload["powered"] == 3


def test_snapshot_resumes_current_rotations():
    game = PowerGridGame(corner_loop())
    game.rotate_cell(1, 1)

    resumed = PowerGridGame(game.snapshot())

    assert resumed.grid.encode() == game.grid.encode()
    assert resumed.level.name == "Loop"


def test_reset_restores_level_state():
    game = PowerGridGame(corner_loop())
    game.rotate_cell(1, 0)
    game.reset()

    assert game.grid.encode() == [11, 4, 2, 4]
    assert game.moves == 0
    assert not game.finished


def test_scramble_keeps_sources_and_types():
    game = PowerGridGame(LevelData(rows=2, columns=3, cells=[21, 4, 5, 0, 3, 2]))
    game.scramble(random.Random(7))

    assert game.grid.cell_at(0, 0).rotation == 2
    assert game.grid.cell_at(1, 0).tile_type == TileType.EMPTY
    assert [cell.tile_type for _, cell in game.grid.items()] == [
        TileType.SOURCE,
        TileType.CORNER,
        TileType.T_JUNCTION,
        TileType.EMPTY,
        TileType.STRAIGHT,
        TileType.SINK,
    ]
    assert not game.grid.needs_propagation


def test_playthrough_summary():
    game = PowerGridGame(LevelData(rows=1, columns=3, cells=[11, 32, 0], name="Tiny"))
    summary = game.playthrough()

    assert summary["complete"] is True
    assert summary["metadata"]["dimensions"] == "1x3"
    assert summary["powered"] == [[0, 0], [0, 1]]
    assert summary["unpowered"] == []
    assert summary["cells"][1] == {
        "position": [0, 1],
        "type": "SINK",
        "rotation": 3,
        "powered": True,
    }
    json.dumps(summary)


def test_apply_rotation_rejects_outside_positions():
    level = corner_loop()
    with pytest.raises(LevelDataError):
        apply_rotation_to_level(level, {"position": [3, 0], "rotation": 1})


def test_apply_rotation_keeps_fixed_tiles():
    level = LevelData(rows=1, columns=2, cells=[1, 32])
    apply_rotation_to_level(level, {"position": [0, 0], "rotation": 0})
    assert level.cells == [1, 32]

    with pytest.raises(LevelDataError):
        apply_rotation_to_level(level, {"position": [0, 0], "rotation": 1})
    assert level.cells == [1, 32]


def test_solution_rotating_source_is_rejected(tmp_path: Path):
    levels = tmp_path / "levels"
    solutions = tmp_path / "solutions"
    levels.mkdir()
    solutions.mkdir()
    (levels / "stuck.json").write_text(json.dumps({"rows": 1, "columns": 2, "cells": [1, 32]}))
    (solutions / "stuck.json").write_text(
        json.dumps({"rotations": [{"position": [0, 0], "rotation": 1}]})
    )
    validator = SolutionValidator(LevelLoader(levels), solutions)

    with pytest.raises(LevelDataError):
        validator.validate("stuck")


def test_loader_lists_packaged_levels():
    loader = LevelLoader(fixture_path("levels"))
    assert loader.available() == LEVEL_NAMES
    assert loader.level_count() == len(LEVEL_NAMES)


def test_loader_falls_back_to_first_level(caplog: pytest.LogCaptureFixture):
    loader = LevelLoader(fixture_path("levels"))
    level = loader.load_index(99)

    assert level.name == "First Light"
    assert "out of range" in caplog.text


def test_loader_missing_level():
    loader = LevelLoader(fixture_path("levels"))
    with pytest.raises(FileNotFoundError):
        loader.load("level_missing")


def test_loader_rejects_malformed_files(tmp_path: Path):
    (tmp_path / "broken.json").write_text("{not json")
    (tmp_path / "short.json").write_text(json.dumps({"rows": 2, "columns": 2, "cells": [1]}))
    (tmp_path / "unknown.json").write_text(json.dumps({"rows": 1, "columns": 1, "cells": [9]}))
    loader = LevelLoader(tmp_path)

    for name in ("broken", "short", "unknown"):
        with pytest.raises(LevelDataError):
            loader.load(name)


@pytest.mark.parametrize("level_name", LEVEL_NAMES)
def test_packaged_levels_start_unsolved(level_name: str):
    level = LevelLoader(fixture_path("levels")).load(level_name)
    game = PowerGridGame(level)
    assert not game.level_complete()


@pytest.mark.parametrize("level_name", LEVEL_NAMES)
def test_solution_validator_accepts_solutions(level_name: str):
    loader = LevelLoader(fixture_path("levels"))
    validator = SolutionValidator(loader, fixture_path("solutions"))

    assert validator.validate(level_name)


def test_solution_validator_rejects_wrong_solution(tmp_path: Path):
    (tmp_path / "level_02_corner_loop.json").write_text(
        json.dumps({"rotations": [{"position": [0, 1], "rotation": 2}]})
    )
    loader = LevelLoader(fixture_path("levels"))
    validator = SolutionValidator(loader, tmp_path)

    assert not validator.validate("level_02_corner_loop")


def test_playing_solution_through_game_completes():
    loader = LevelLoader(fixture_path("levels"))
    validator = SolutionValidator(loader, fixture_path("solutions"))
    level = loader.load("level_03_t_split")
    solution = validator.load_solution("level_03_t_split")
    recorder = Recorder()
    game = PowerGridGame(level, listeners=[recorder])

    for rotation in solution["rotations"]:
        row, column = rotation["position"]
        while (
            not game.finished
            and game.grid.cell_at(row, column).rotation != rotation["rotation"]
        ):
            game.rotate_cell(row, column)

    assert game.finished
    assert recorder.names().count("completed") == 1
    assert len(game.grid.powered_positions()) == solution["expected_powered"]
