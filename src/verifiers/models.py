"""Data models for board verification."""

from typing import List, FrozenSet, Tuple, Set
from pydantic import BaseModel, ConfigDict, Field

from ..core.models import Position


# Issue levels, most fundamental first
STRUCTURE = 0  # Malformed board or region set
ROW = 1
COLUMN = 2
REGION = 3
ADJACENCY = 4

# Cell flags consumed by the presentation layer
ROW_CONFLICT_LINE = "row-conflict-line"
COLUMN_CONFLICT_LINE = "column-conflict-line"
REGION_CONFLICT = "region-conflict"
AROUND_CONFLICT_QUEEN = "around-conflict-queen"
IN_CONFLICT = "in-conflict"


class ConflictIssue(BaseModel):
    """A single rule violation or structural problem."""
    code: str
    message: str
    positions: List[Position] = Field(default_factory=list)
    level: int = STRUCTURE


class ConflictReport(BaseModel):
    """
    Every rule violation on a board, recomputed from scratch on each call.

    Attributes:
        grid_size: Board width and height
        queen_count: Number of queens on the board
        row_conflicts: Rows holding more than one queen
        column_conflicts: Columns holding more than one queen
        region_conflicts: Region ids holding more than one queen
        row_conflict_cells: Every cell of a conflicting row
        column_conflict_cells: Every cell of a conflicting column
        region_conflict_cells: Every cell of a conflicting region
        around_conflict_cells: 3x3 neighbourhoods of queens that touch another queen
        conflicting_queens: Queens breaking at least one rule
        adjacent_pairs: Touching queen pairs, each ordered (first, second) in row-major order
        is_completed: Whether the board is a full, conflict-free solution
        issues: Human readable description of each violation
    """

    model_config = ConfigDict(frozen=True)

    grid_size: int
    queen_count: int = 0
    row_conflicts: FrozenSet[int] = frozenset()
    column_conflicts: FrozenSet[int] = frozenset()
    region_conflicts: FrozenSet[int] = frozenset()
    row_conflict_cells: FrozenSet[Position] = frozenset()
    column_conflict_cells: FrozenSet[Position] = frozenset()
    region_conflict_cells: FrozenSet[Position] = frozenset()
    around_conflict_cells: FrozenSet[Position] = frozenset()
    conflicting_queens: FrozenSet[Position] = frozenset()
    adjacent_pairs: FrozenSet[Tuple[Position, Position]] = frozenset()
    is_completed: bool = False
    issues: List[ConflictIssue] = Field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicting_queens)

    def flags_for(self, position: Position) -> Set[str]:
        """All highlight flags that apply to one cell."""
        flags: Set[str] = set()
        if position in self.row_conflict_cells:
            flags.add(ROW_CONFLICT_LINE)
        if position in self.column_conflict_cells:
            flags.add(COLUMN_CONFLICT_LINE)
        if position in self.region_conflict_cells:
            flags.add(REGION_CONFLICT)
        if position in self.around_conflict_cells:
            flags.add(AROUND_CONFLICT_QUEEN)
        if position in self.conflicting_queens:
            flags.add(IN_CONFLICT)
        return flags
