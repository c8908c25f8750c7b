"""
Solution counting for a region partition.

The search places one queen per region, in region id order, and only keeps
candidates that share no row or column with the queens already placed and
touch none of them. It stops as soon as ``limit`` solutions are known, which
is all generation needs to tell "none", "exactly one" and "more than one"
apart.
"""

from typing import List

from ..core.models import Position, Region, are_adjacent


def find_solutions(grid_size: int, regions: List[Region], limit: int = 2) -> List[List[Position]]:
    """
    Find up to ``limit`` valid placements for the puzzle.

    Args:
        grid_size: Board width and height
        regions: Region partition; searched in id order
        limit: Stop after this many solutions (values <= 0 return no solutions)

    Returns:
        Placements as lists of positions, one per region in id order
    """
    if limit <= 0:
        return []

    ordered = sorted(regions, key=lambda region: region.id)
    region_cells = [region.sorted_cells() for region in ordered]
    solutions: List[List[Position]] = []
    placed: List[Position] = []
    used_rows = set()
    used_cols = set()

    def is_valid(candidate: Position) -> bool:
        if candidate.row in used_rows or candidate.col in used_cols:
            return False
        return not any(are_adjacent(candidate, queen) for queen in placed)

    def search(index: int) -> None:
        if index >= len(region_cells):
            if len(placed) == grid_size:
                solutions.append(list(placed))
            return

        for candidate in region_cells[index]:
            if not is_valid(candidate):
                continue
            placed.append(candidate)
            used_rows.add(candidate.row)
            used_cols.add(candidate.col)

            search(index + 1)

            placed.pop()
            used_rows.discard(candidate.row)
            used_cols.discard(candidate.col)

            if len(solutions) >= limit:
                return

    search(0)
    return solutions


def count_solutions(grid_size: int, regions: List[Region], cutoff: int = 2) -> int:
    """Number of solutions, capped at ``cutoff``."""
    return len(find_solutions(grid_size, regions, limit=cutoff))


def has_unique_solution(grid_size: int, regions: List[Region]) -> bool:
    return count_solutions(grid_size, regions, cutoff=2) == 1
