"""Game session layer for the Queens puzzle."""

from .models import GeneratorConfig, MoveRecord
from .game import Game, InvalidMoveError, MAX_UNDO_STEPS

__all__ = [
    "GeneratorConfig",
    "MoveRecord",
    "Game",
    "InvalidMoveError",
    "MAX_UNDO_STEPS",
]
