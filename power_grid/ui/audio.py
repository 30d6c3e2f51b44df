"""Sound cues for rotation and level completion."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class SoundBoard:
    """Plays a click when a tile turns and a fanfare when the level is solved.

    Sounds are anything with ``play()`` and ``set_volume()``, normally
    ``pygame.mixer.Sound`` objects. Instances are game listeners.
    """

    def __init__(self, click=None, win=None, volume: float = 1.0) -> None:
        self.click = click
        self.win = win
        self.volume = _clamp01(volume)
        self.muted = False

    @classmethod
    def load(
        cls,
        click_path: Optional[Path] = None,
        win_path: Optional[Path] = None,
        volume: float = 1.0,
    ) -> "SoundBoard":
        """Build a board from sound files, or a silent one without a mixer."""

        import pygame

        if not pygame.mixer.get_init():
            try:
                pygame.mixer.init()
            except pygame.error as exc:
                logger.warning("Audio disabled: %s", exc)
                return cls(volume=volume)
        sounds = {}
        for key, path in (("click", click_path), ("win", win_path)):
            sounds[key] = pygame.mixer.Sound(str(path)) if path else None
        return cls(volume=volume, **sounds)

    def set_volume(self, volume: float) -> None:
        self.volume = _clamp01(volume)

    def mute(self, muted: bool = True) -> None:
        self.muted = muted

    def _play(self, sound) -> None:
        if sound is None or self.muted:
            return
        sound.set_volume(self.volume)
        sound.play()

    def __call__(self, event: str, payload: Dict[str, object]) -> None:
        if event == "rotated":
            self._play(self.click)
        elif event == "completed":
            self._play(self.win)


__all__ = ["SoundBoard"]
