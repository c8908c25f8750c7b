"""Structural checks on a region partition and the board built from it."""

from collections import deque
from typing import Dict, Iterable, List, Set

from ..core.models import Board, Position, Region, format_position, in_bounds
from .models import ConflictIssue


def is_region_connected(cells: Iterable[Position]) -> bool:
    """True if every cell can reach every other through orthogonal steps inside the set."""
    cell_set: Set[Position] = {Position(*cell) for cell in cells}
    if len(cell_set) <= 1:
        return True

    start = next(iter(cell_set))
    visited = {start}
    queue = deque([start])

    while queue:
        row, col = queue.popleft()
        for neighbor in (
            Position(row - 1, col),
            Position(row + 1, col),
            Position(row, col - 1),
            Position(row, col + 1),
        ):
            if neighbor in cell_set and neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)

    return len(visited) == len(cell_set)


def validate_regions(grid_size: int, regions: List[Region]) -> List[ConflictIssue]:
    """
    Check that the regions form an exact partition of connected pieces.

    Reports wrong region counts, cells outside the board, cells claimed by
    several regions, uncovered cells and disconnected regions.
    """
    issues: List[ConflictIssue] = []

    if len(regions) != grid_size:
        issues.append(ConflictIssue(
            code="REGION_COUNT",
            message=f"Expected {grid_size} regions, found {len(regions)}",
        ))

    owner: Dict[Position, int] = {}
    for region in regions:
        for cell in region.sorted_cells():
            if not in_bounds(cell, grid_size):
                issues.append(ConflictIssue(
                    code="CELL_OUT_OF_BOUNDS",
                    message=f"Region {region.id + 1} has cell ({cell.row}, {cell.col}) outside the board",
                    positions=[cell],
                ))
                continue
            if cell in owner:
                issues.append(ConflictIssue(
                    code="CELL_OVERLAP",
                    message=(
                        f"Cell {format_position(cell)} belongs to regions "
                        f"{owner[cell] + 1} and {region.id + 1}"
                    ),
                    positions=[cell],
                ))
                continue
            owner[cell] = region.id

    missing = [
        Position(row, col)
        for row in range(grid_size)
        for col in range(grid_size)
        if Position(row, col) not in owner
    ]
    if missing:
        issues.append(ConflictIssue(
            code="CELL_MISSING",
            message=f"{len(missing)} cell(s) belong to no region: {', '.join(format_position(p) for p in missing)}",
            positions=missing,
        ))

    for region in regions:
        if not is_region_connected(region.cells):
            issues.append(ConflictIssue(
                code="REGION_DISCONNECTED",
                message=f"Region {region.id + 1} ({region.color}) is not orthogonally connected",
                positions=region.sorted_cells(),
            ))

    return issues


def validate_game_state(board: Board, regions: List[Region]) -> List[ConflictIssue]:
    """
    Check the regions and that every board cell carries the id of the region that owns it.

    Returns:
        Issues found; empty if the board and regions agree and form a valid puzzle
    """
    grid_size = board.grid_size
    issues = validate_regions(grid_size, regions)

    owner = {cell: region.id for region in regions for cell in region.cells}
    for cell in board.iter_cells():
        expected = owner.get(cell.position)
        if expected is not None and expected != cell.region_id:
            issues.append(ConflictIssue(
                code="REGION_ID_MISMATCH",
                message=(
                    f"Cell {format_position(cell.position)} has region id {cell.region_id}, "
                    f"expected {expected}"
                ),
                positions=[cell.position],
            ))

    return issues
