"""User interface package for the power grid puzzle."""

from .audio import SoundBoard
from .main import (
    LEVEL_ENV_VAR,
    SAVE_ENV_VAR,
    PowerGridApp,
    UIDirectories,
    main,
    resolve_directories,
    run,
)
from .toolkit import PowerGridUI, RotationAnimation

__all__ = [
    "LEVEL_ENV_VAR",
    "SAVE_ENV_VAR",
    "PowerGridApp",
    "PowerGridUI",
    "RotationAnimation",
    "SoundBoard",
    "UIDirectories",
    "main",
    "resolve_directories",
    "run",
]
