"""
Pydantic models for the environment layer.

Configuration for generation runs and the record kept for every applied
move. The Game session itself lives in game.py.
"""

from typing import Optional
from pydantic import BaseModel, Field

from ..core.constants import Complexity, DEFAULT_GRID_SIZE, MIN_GRID_SIZE, MAX_GRID_SIZE, get_complexity_config
from ..core.models import Position, CellState


class GeneratorConfig(BaseModel):
    """Configuration for a generation run."""
    grid_size: int = Field(default=DEFAULT_GRID_SIZE, ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    complexity: Complexity = "medium"
    max_attempts: Optional[int] = Field(default=None, ge=1)
    seed: Optional[int] = None
    store_path: Optional[str] = None  # JSON level store; None disables storage

    @property
    def attempt_budget(self) -> int:
        """Attempt budget, falling back to the complexity default."""
        if self.max_attempts is not None:
            return self.max_attempts
        return get_complexity_config(self.complexity)["max_attempts"]


class MoveRecord(BaseModel):
    """One applied move, kept for undo."""
    move_number: int
    position: Position
    previous_state: CellState
    new_state: CellState
