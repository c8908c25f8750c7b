"""Checks for a single prospective queen placement, and hints built on them."""

from typing import List, Optional

from ..core.models import Board, Position, Region, are_adjacent, format_position, in_bounds
from .models import ConflictIssue, STRUCTURE, ROW, COLUMN, REGION, ADJACENCY


def _region_of(regions: List[Region], position: Position) -> Optional[Region]:
    for region in regions:
        if position in region.cells:
            return region
    return None


def validate_queen_placement(board: Board, regions: List[Region], position: Position) -> List[ConflictIssue]:
    """
    Check what placing a queen at ``position`` would violate.

    Queens already on ``position`` itself are ignored, so this also answers
    "is the queen already here in conflict".

    Returns:
        Issues, one per broken rule; empty if the placement is valid
    """
    position = Position(*position)
    grid_size = board.grid_size

    if not in_bounds(position, grid_size):
        return [ConflictIssue(
            code="OUT_OF_BOUNDS",
            message=f"Position ({position.row}, {position.col}) is outside the {grid_size}x{grid_size} board",
            positions=[position],
            level=STRUCTURE,
        )]

    others = [queen for queen in board.queens() if queen != position]
    issues: List[ConflictIssue] = []

    same_row = [queen for queen in others if queen.row == position.row]
    if same_row:
        issues.append(ConflictIssue(
            code="ROW_CONFLICT",
            message=f"Row {position.row + 1} already has a queen at {format_position(same_row[0])}",
            positions=same_row,
            level=ROW,
        ))

    same_col = [queen for queen in others if queen.col == position.col]
    if same_col:
        issues.append(ConflictIssue(
            code="COLUMN_CONFLICT",
            message=f"Column {chr(65 + position.col)} already has a queen at {format_position(same_col[0])}",
            positions=same_col,
            level=COLUMN,
        ))

    region = _region_of(regions, position)
    if region is not None:
        same_region = [queen for queen in others if queen in region.cells]
        if same_region:
            issues.append(ConflictIssue(
                code="REGION_CONFLICT",
                message=f"Region {region.id + 1} already has a queen at {format_position(same_region[0])}",
                positions=same_region,
                level=REGION,
            ))

    touching = [queen for queen in others if are_adjacent(position, queen)]
    if touching:
        issues.append(ConflictIssue(
            code="ADJACENT_QUEENS",
            message=f"{format_position(position)} touches the queen at {format_position(touching[0])}",
            positions=touching,
            level=ADJACENCY,
        ))

    return issues


def is_position_safe(board: Board, regions: List[Region], position: Position) -> bool:
    """True if the cell is empty and a queen there would break no rule."""
    position = Position(*position)
    if not in_bounds(position, board.grid_size):
        return False
    if board.cell(position.row, position.col).state != "empty":
        return False
    return not validate_queen_placement(board, regions, position)


def safe_positions(board: Board, regions: List[Region]) -> List[Position]:
    """Every empty cell where a queen could go without breaking a rule, row-major."""
    return [
        cell.position
        for cell in board.iter_cells()
        if is_position_safe(board, regions, cell.position)
    ]


def get_hint(
    board: Board,
    regions: List[Region],
    solution: Optional[List[Position]] = None,
) -> Optional[Position]:
    """
    Suggest the next queen to place.

    With a known solution, the first solution cell without a queen is
    returned. Otherwise the first safe position is suggested.

    Returns:
        A position, or None if there is nothing left to suggest
    """
    if solution:
        placed = set(board.queens())
        for position in solution:
            if Position(*position) not in placed:
                return Position(*position)
        return None

    candidates = safe_positions(board, regions)
    return candidates[0] if candidates else None


def completion_percentage(board: Board) -> float:
    """Share of the required queens already on the board, capped at 100."""
    if board.grid_size == 0:
        return 0.0
    return min(len(board.queens()) * 100.0 / board.grid_size, 100.0)
