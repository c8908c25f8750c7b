"""
Data models shared by generation, verification and the game session.

Positions are plain value tuples; everything else is a frozen pydantic model.
Boards are never edited in place: a move produces a new Board that shares
every untouched row with the previous one.
"""

from typing import List, Optional, Literal, NamedTuple, FrozenSet, Tuple, Dict, Iterator
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .constants import Complexity


CellState = Literal["empty", "marked", "queen"]
CELL_STATES: Tuple[str, ...] = ("empty", "marked", "queen")


class Position(NamedTuple):
    """A cell coordinate on the board."""
    row: int
    col: int


def are_adjacent(a: Position, b: Position) -> bool:
    """True if the two positions touch, diagonals included (a cell never touches itself)."""
    row_diff = abs(a[0] - b[0])
    col_diff = abs(a[1] - b[1])
    return row_diff <= 1 and col_diff <= 1 and (row_diff, col_diff) != (0, 0)


def manhattan_distance(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def orthogonal_neighbors(position: Position, grid_size: int) -> Iterator[Position]:
    """Yield the in-bounds up/down/left/right neighbours of a position."""
    row, col = position
    for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
        r, c = row + dr, col + dc
        if 0 <= r < grid_size and 0 <= c < grid_size:
            yield Position(r, c)


def in_bounds(position: Position, grid_size: int) -> bool:
    return 0 <= position[0] < grid_size and 0 <= position[1] < grid_size


def format_position(position: Position) -> str:
    """Human readable coordinate, e.g. (2, 1) -> '3B'."""
    return f"{position[0] + 1}{chr(65 + position[1])}"


class Region(BaseModel):
    """A connected, colored group of cells that must hold exactly one queen."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0)
    color: str
    cells: FrozenSet[Position]
    anchor: Position

    @model_validator(mode="after")
    def _anchor_in_cells(self) -> "Region":
        if self.anchor not in self.cells:
            raise ValueError(f"Region {self.id} anchor {tuple(self.anchor)} is not one of its cells")
        return self

    @property
    def size(self) -> int:
        return len(self.cells)

    def sorted_cells(self) -> List[Position]:
        """Cells in row-major order."""
        return sorted(self.cells)


class Cell(BaseModel):
    """One square of the board."""

    model_config = ConfigDict(frozen=True)

    position: Position
    region_id: int = Field(..., ge=0)
    state: CellState = "empty"


class Board(BaseModel):
    """
    N×N grid of cells.

    Rows are tuples so a new board can reuse the rows a move did not touch.
    """

    model_config = ConfigDict(frozen=True)

    cells: Tuple[Tuple[Cell, ...], ...]

    @model_validator(mode="after")
    def _check_square(self) -> "Board":
        size = len(self.cells)
        for r, row in enumerate(self.cells):
            if len(row) != size:
                raise ValueError(f"Board row {r} has {len(row)} cells, expected {size}")
            for c, cell in enumerate(row):
                if tuple(cell.position) != (r, c):
                    raise ValueError(f"Cell at ({r}, {c}) reports position {tuple(cell.position)}")
        return self

    @classmethod
    def from_regions(cls, grid_size: int, regions: List[Region]) -> "Board":
        """
        Build an empty board from a region partition.

        Raises:
            ValueError: If a cell of the grid belongs to no region
        """
        owner: Dict[Position, int] = {}
        for region in regions:
            for cell in region.cells:
                owner[cell] = region.id

        rows = []
        for row in range(grid_size):
            cells = []
            for col in range(grid_size):
                position = Position(row, col)
                if position not in owner:
                    raise ValueError(f"No region found for position {format_position(position)}")
                cells.append(Cell(position=position, region_id=owner[position]))
            rows.append(tuple(cells))
        return cls(cells=tuple(rows))

    @property
    def grid_size(self) -> int:
        return len(self.cells)

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def queens(self) -> List[Position]:
        """Positions currently holding a queen, in row-major order."""
        return [cell.position for cell in self.iter_cells() if cell.state == "queen"]

    def with_cell_state(self, row: int, col: int, state: CellState) -> "Board":
        """Return a new board with one cell changed; other rows are shared."""
        old_row = self.cells[row]
        updated = old_row[col].model_copy(update={"state": state})
        new_row = old_row[:col] + (updated,) + old_row[col + 1:]
        return Board.model_construct(cells=self.cells[:row] + (new_row,) + self.cells[row + 1:])

    def cleared(self) -> "Board":
        """Return a copy of the board with every cell emptied."""
        rows = tuple(
            tuple(cell if cell.state == "empty" else cell.model_copy(update={"state": "empty"}) for cell in row)
            for row in self.cells
        )
        return Board.model_construct(cells=rows)


class GameState(BaseModel):
    """
    Everything needed to play one puzzle.

    Attributes:
        board: Current cells and their states
        regions: Region partition, ordered by id
        grid_size: Board width and height
        complexity: Complexity the level was generated with
        solution: Seed placement the regions were grown from
        verified: Whether the puzzle was proven to have exactly one solution
        move_count: Number of moves applied since the level was created or reset
    """

    model_config = ConfigDict(frozen=True)

    board: Board
    regions: List[Region]
    grid_size: int = Field(..., ge=1)
    complexity: Complexity = "medium"
    solution: Optional[List[Position]] = None
    verified: bool = False
    move_count: int = Field(default=0, ge=0)

    @classmethod
    def create(
        cls,
        grid_size: int,
        regions: List[Region],
        solution: Optional[List[Position]] = None,
        verified: bool = False,
        complexity: Complexity = "medium",
    ) -> "GameState":
        """Build a fresh state with an empty board for the given partition."""
        ordered = sorted(regions, key=lambda region: region.id)
        return cls(
            board=Board.from_regions(grid_size, ordered),
            regions=ordered,
            grid_size=grid_size,
            complexity=complexity,
            solution=list(solution) if solution is not None else None,
            verified=verified,
        )

    @property
    def queens_placed(self) -> int:
        return len(self.board.queens())
