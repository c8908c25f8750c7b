"""Board, region and game-state models for the Queens puzzle."""

from .constants import (
    Complexity,
    COMPLEXITY_LEVELS,
    REGION_COLORS,
    MIN_GRID_SIZE,
    MAX_GRID_SIZE,
    DEFAULT_GRID_SIZE,
    get_complexity_config,
    region_color,
)
from .models import (
    Position,
    CellState,
    CELL_STATES,
    Cell,
    Region,
    Board,
    GameState,
    are_adjacent,
    manhattan_distance,
    orthogonal_neighbors,
    in_bounds,
    format_position,
)

__all__ = [
    # Constants
    "Complexity",
    "COMPLEXITY_LEVELS",
    "REGION_COLORS",
    "MIN_GRID_SIZE",
    "MAX_GRID_SIZE",
    "DEFAULT_GRID_SIZE",
    "get_complexity_config",
    "region_color",
    # Models
    "Position",
    "CellState",
    "CELL_STATES",
    "Cell",
    "Region",
    "Board",
    "GameState",
    # Geometry helpers
    "are_adjacent",
    "manhattan_distance",
    "orthogonal_neighbors",
    "in_bounds",
    "format_position",
]
