"""
Conflict analysis for a board in any state of play.

Applies the four placement rules independently:
1. Row: more than one queen in a row
2. Column: more than one queen in a column
3. Region: more than one queen in a colored region
4. Adjacency: two queens touching, diagonals included

A queen or cell can be flagged by several rules at once. The board is
complete when it holds exactly ``grid_size`` queens and no rule fires.
"""

from collections import defaultdict
from typing import Dict, List, Set, Tuple

from ..core.models import Board, Position, Region, are_adjacent, format_position
from .models import ConflictIssue, ConflictReport, ROW, COLUMN, REGION, ADJACENCY


def _format_positions(positions: List[Position]) -> str:
    return ", ".join(format_position(p) for p in positions)


def analyze(board: Board, regions: List[Region]) -> ConflictReport:
    """
    Classify every rule violation on the board.

    Pure: the board is only read, and the same board always gives an equal
    report. Any board is accepted, including one with no queens.
    """
    grid_size = board.grid_size
    queens = board.queens()
    issues: List[ConflictIssue] = []

    conflicting_queens: Set[Position] = set()

    # Group queens by row and column
    by_row: Dict[int, List[Position]] = defaultdict(list)
    by_col: Dict[int, List[Position]] = defaultdict(list)
    for queen in queens:
        by_row[queen.row].append(queen)
        by_col[queen.col].append(queen)

    # Row rule
    row_conflicts: Set[int] = set()
    row_cells: Set[Position] = set()
    for row, members in sorted(by_row.items()):
        if len(members) > 1:
            row_conflicts.add(row)
            row_cells.update(Position(row, col) for col in range(grid_size))
            conflicting_queens.update(members)
            issues.append(ConflictIssue(
                code="ROW_CONFLICT",
                message=f"Row {row + 1} has {len(members)} queens ({_format_positions(members)})",
                positions=members,
                level=ROW,
            ))

    # Column rule
    column_conflicts: Set[int] = set()
    column_cells: Set[Position] = set()
    for col, members in sorted(by_col.items()):
        if len(members) > 1:
            column_conflicts.add(col)
            column_cells.update(Position(row, col) for row in range(grid_size))
            conflicting_queens.update(members)
            issues.append(ConflictIssue(
                code="COLUMN_CONFLICT",
                message=f"Column {chr(65 + col)} has {len(members)} queens ({_format_positions(members)})",
                positions=members,
                level=COLUMN,
            ))

    # Region rule
    region_conflicts: Set[int] = set()
    region_cells: Set[Position] = set()
    for region in sorted(regions, key=lambda r: r.id):
        members = [queen for queen in queens if queen in region.cells]
        if len(members) > 1:
            region_conflicts.add(region.id)
            region_cells.update(region.cells)
            conflicting_queens.update(members)
            issues.append(ConflictIssue(
                code="REGION_CONFLICT",
                message=f"Region {region.id + 1} has {len(members)} queens ({_format_positions(members)})",
                positions=members,
                level=REGION,
            ))

    # Adjacency rule
    adjacent_pairs: Set[Tuple[Position, Position]] = set()
    around_cells: Set[Position] = set()
    for i, first in enumerate(queens):
        for second in queens[i + 1:]:
            if not are_adjacent(first, second):
                continue
            adjacent_pairs.add((first, second))
            conflicting_queens.update((first, second))
            for queen in (first, second):
                for dr in (-1, 0, 1):
                    for dc in (-1, 0, 1):
                        r, c = queen.row + dr, queen.col + dc
                        if 0 <= r < grid_size and 0 <= c < grid_size:
                            around_cells.add(Position(r, c))
            issues.append(ConflictIssue(
                code="ADJACENT_QUEENS",
                message=f"Queens at {format_position(first)} and {format_position(second)} touch",
                positions=[first, second],
                level=ADJACENCY,
            ))

    is_completed = (
        len(queens) == grid_size
        and len(by_row) == grid_size
        and len(by_col) == grid_size
        and not row_conflicts
        and not column_conflicts
        and not region_conflicts
        and not adjacent_pairs
        and all(any(queen in region.cells for queen in queens) for region in regions)
    )

    return ConflictReport(
        grid_size=grid_size,
        queen_count=len(queens),
        row_conflicts=frozenset(row_conflicts),
        column_conflicts=frozenset(column_conflicts),
        region_conflicts=frozenset(region_conflicts),
        row_conflict_cells=frozenset(row_cells),
        column_conflict_cells=frozenset(column_cells),
        region_conflict_cells=frozenset(region_cells),
        around_conflict_cells=frozenset(around_cells),
        conflicting_queens=frozenset(conflicting_queens),
        adjacent_pairs=frozenset(adjacent_pairs),
        is_completed=is_completed,
        issues=issues,
    )


def is_completed(board: Board, regions: List[Region]) -> bool:
    """True if the board is a full solution with no conflicts."""
    return analyze(board, regions).is_completed
