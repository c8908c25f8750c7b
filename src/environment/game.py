import random
from typing import List, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict

from ..core.constants import Complexity, DEFAULT_GRID_SIZE
from ..core.models import GameState, Position, Region, CellState, CELL_STATES, format_position
from ..generation import generate, find_solutions
from ..verifiers import analyze, get_hint, completion_percentage
from ..verifiers.models import ConflictReport
from .models import GeneratorConfig, MoveRecord


# Oldest moves are dropped from the undo history past this depth
MAX_UNDO_STEPS = 20


class InvalidMoveError(ValueError):
    """Raised when a move targets a cell outside the board or an unknown state."""


class Game(BaseModel):
    """
    Manages one puzzle being played.

    Every move builds a new GameState (sharing untouched board rows) and
    swaps it in as a whole, so a reader holding the previous state never
    sees a half-applied move.

    Attributes:
        state: The current game state
        history: Recent moves, newest last, for undo
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: GameState
    history: List[MoveRecord] = Field(default_factory=list)

    @classmethod
    def create(
        cls,
        grid_size: int = DEFAULT_GRID_SIZE,
        complexity: Complexity = "medium",
        max_attempts: Optional[int] = None,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> "Game":
        """
        Factory method to create a game with a freshly generated level.

        Args:
            grid_size: Board width and height
            complexity: Complexity level
            max_attempts: Generation attempt budget (defaults per complexity)
            seed: Optional random seed for reproducibility
            verbose: If True, print generation progress

        Returns:
            A new Game on an empty board

        Raises:
            NoSolutionError: If the grid size cannot be seeded
        """
        result = generate(
            grid_size=grid_size,
            complexity=complexity,
            max_attempts=max_attempts,
            rng=random.Random(seed),
            verbose=verbose,
        )
        return cls(state=result.game_state)

    @classmethod
    def from_config(cls, config: GeneratorConfig, verbose: bool = False) -> "Game":
        return cls.create(
            grid_size=config.grid_size,
            complexity=config.complexity,
            max_attempts=config.attempt_budget,
            seed=config.seed,
            verbose=verbose,
        )

    @classmethod
    def from_regions(
        cls,
        grid_size: int,
        regions: List[Region],
        complexity: Complexity = "medium",
    ) -> "Game":
        """
        Create a game from an existing region partition (e.g. a stored level).

        Uniqueness is checked again; the first solution found (if any) is
        kept as the reference solution for hints.
        """
        ordered = sorted(regions, key=lambda region: region.id)
        solutions = find_solutions(grid_size, ordered, limit=2)
        state = GameState.create(
            grid_size=grid_size,
            regions=ordered,
            solution=solutions[0] if solutions else None,
            verified=len(solutions) == 1,
            complexity=complexity,
        )
        return cls(state=state)

    @property
    def grid_size(self) -> int:
        return self.state.grid_size

    @property
    def move_count(self) -> int:
        return self.state.move_count

    @property
    def queens_placed(self) -> int:
        return self.state.queens_placed

    @property
    def is_completed(self) -> bool:
        return self.conflicts().is_completed

    def _check_position(self, row: int, col: int) -> None:
        if isinstance(row, bool) or isinstance(col, bool) or not (isinstance(row, int) and isinstance(col, int)):
            raise InvalidMoveError(f"Row and column must be integers, got ({row!r}, {col!r})")
        if not (0 <= row < self.grid_size and 0 <= col < self.grid_size):
            raise InvalidMoveError(
                f"Position ({row}, {col}) is outside the {self.grid_size}x{self.grid_size} board"
            )

    def set_cell_state(self, row: int, col: int, state: CellState) -> GameState:
        """
        Apply a move: set one cell to ``empty``, ``marked`` or ``queen``.

        Setting a cell to the state it already has is not a move.

        Returns:
            The new current state

        Raises:
            InvalidMoveError: If the position is off the board or the state is unknown
        """
        self._check_position(row, col)
        if state not in CELL_STATES:
            raise InvalidMoveError(f"Unknown cell state '{state}' (expected one of {', '.join(CELL_STATES)})")

        previous = self.state.board.cell(row, col).state
        if previous == state:
            return self.state

        self.state = self.state.model_copy(update={
            "board": self.state.board.with_cell_state(row, col, state),
            "move_count": self.state.move_count + 1,
        })

        self.history.append(MoveRecord(
            move_number=self.state.move_count,
            position=Position(row, col),
            previous_state=previous,
            new_state=state,
        ))
        if len(self.history) > MAX_UNDO_STEPS:
            self.history = self.history[-MAX_UNDO_STEPS:]

        return self.state

    def toggle_marker(self, row: int, col: int) -> GameState:
        """Cycle empty <-> marked; a queen is left alone."""
        self._check_position(row, col)
        current = self.state.board.cell(row, col).state
        if current == "empty":
            return self.set_cell_state(row, col, "marked")
        if current == "marked":
            return self.set_cell_state(row, col, "empty")
        return self.state

    def toggle_queen(self, row: int, col: int) -> GameState:
        """Remove a queen, or place one (replacing any marker)."""
        self._check_position(row, col)
        current = self.state.board.cell(row, col).state
        return self.set_cell_state(row, col, "empty" if current == "queen" else "queen")

    def undo(self) -> bool:
        """
        Revert the most recent move.

        Returns:
            True if a move was undone, False if there was nothing to undo
        """
        if not self.history:
            return False
        move = self.history.pop()
        self.state = self.state.model_copy(update={
            "board": self.state.board.with_cell_state(move.position.row, move.position.col, move.previous_state),
            "move_count": max(0, self.state.move_count - 1),
        })
        return True

    def reset(self) -> GameState:
        """Clear every cell and the move count; the regions stay the same."""
        self.state = self.state.model_copy(update={
            "board": self.state.board.cleared(),
            "move_count": 0,
        })
        self.history = []
        return self.state

    def conflicts(self) -> ConflictReport:
        """Conflict report for the current board."""
        return analyze(self.state.board, self.state.regions)

    def hint(self) -> Optional[Position]:
        """Next suggested queen, using the reference solution when known."""
        return get_hint(self.state.board, self.state.regions, self.state.solution)

    def get_state(self) -> Dict:
        """
        Get the current game state as a dictionary.

        Useful for serialization and logging.

        Returns:
            Dictionary containing game state
        """
        report = self.conflicts()
        return {
            "grid_size": self.grid_size,
            "complexity": self.state.complexity,
            "verified": self.state.verified,
            "move_count": self.move_count,
            "queens_placed": report.queen_count,
            "completion_percentage": completion_percentage(self.state.board),
            "conflicting_queens": sorted(format_position(p) for p in report.conflicting_queens),
            "is_completed": report.is_completed,
        }
