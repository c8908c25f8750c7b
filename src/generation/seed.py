"""Random full placements used to seed puzzle generation."""

import random
from typing import List, Optional, Set

from ..core.models import Position, are_adjacent


class NoSolutionError(ValueError):
    """Raised when a grid size admits no valid full placement."""


def solve_seed(grid_size: int, rng: Optional[random.Random] = None) -> List[Position]:
    """
    Find one placement of ``grid_size`` queens, one per row and column, none touching.

    Columns are tried in a shuffled order at every row, so repeated calls with
    an unseeded (or differently seeded) random source give different seeds.

    Args:
        grid_size: Board width and height
        rng: Random source; a fresh system-seeded one is used when omitted

    Returns:
        One position per row, in row order

    Raises:
        NoSolutionError: If no placement exists (grid_size <= 0, or 2 and 3)
    """
    if grid_size <= 0:
        raise NoSolutionError(f"Cannot seed a {grid_size}x{grid_size} board")

    rng = rng or random.Random()
    placement: List[Position] = []
    used_cols: Set[int] = set()

    def is_valid(row: int, col: int) -> bool:
        if col in used_cols:
            return False
        candidate = Position(row, col)
        return not any(are_adjacent(candidate, queen) for queen in placement)

    def backtrack(row: int) -> bool:
        if row >= grid_size:
            return True

        cols = list(range(grid_size))
        rng.shuffle(cols)

        for col in cols:
            if is_valid(row, col):
                placement.append(Position(row, col))
                used_cols.add(col)
                if backtrack(row + 1):
                    return True
                placement.pop()
                used_cols.discard(col)
        return False

    if not backtrack(0):
        raise NoSolutionError(f"No valid placement exists for a {grid_size}x{grid_size} board")

    return placement
