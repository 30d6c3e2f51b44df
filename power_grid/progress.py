"""Persistent level progress: unlocks, completion flags and best scores."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)


@dataclass
class SaveData:
    highest_unlocked: int = 1
    completed: List[bool] = field(default_factory=list)
    scores: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "SaveData":
        return cls(
            highest_unlocked=max(1, int(data.get("highest_unlocked", 1))),
            completed=[bool(value) for value in data.get("completed", [])],
            scores=[int(value) for value in data.get("scores", [])],
        )


class ProgressStore:
    """JSON backed record of which levels are unlocked and solved."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.data = self._load()

    def _load(self) -> SaveData:
        if not self.path.exists():
            data = SaveData()
            self._write(data)
            return data
        try:
            return SaveData.from_dict(json.loads(self.path.read_text()))
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            logger.error("Failed to load progress from %s: %s", self.path, exc)
            return SaveData()

    def _write(self, data: SaveData) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(asdict(data), indent=2))
        except OSError as exc:
            logger.error("Failed to save progress to %s: %s", self.path, exc)

    def save(self) -> None:
        self._write(self.data)

    @property
    def highest_unlocked(self) -> int:
        return self.data.highest_unlocked

    def is_unlocked(self, index: int) -> bool:
        if index == 0:
            return True
        return index < self.data.highest_unlocked

    def is_completed(self, index: int) -> bool:
        if not 0 <= index < len(self.data.completed):
            return False
        return self.data.completed[index]

    def score(self, index: int) -> int:
        if not 0 <= index < len(self.data.scores):
            return 0
        return self.data.scores[index]

    def complete_level(self, index: int, score: int = 0) -> None:
        while len(self.data.completed) <= index:
            self.data.completed.append(False)
        while len(self.data.scores) <= index:
            self.data.scores.append(0)

        self.data.completed[index] = True
        if score > self.data.scores[index]:
            self.data.scores[index] = score

        if index + 1 >= self.data.highest_unlocked:
            self.data.highest_unlocked = index + 2

        self.save()

    def reset(self) -> None:
        self.data = SaveData()
        self.save()

    def record(self, event: str, payload: Dict[str, object]) -> None:
        """Game listener that stores completion events."""

        if event != "completed":
            return
        self.complete_level(int(payload["level_index"]), int(payload.get("score", 0)))


__all__ = ["ProgressStore", "SaveData"]
