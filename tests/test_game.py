"""Tests for the game session."""

import random
from unittest.mock import patch

import pytest

from src.core.models import Position
from src.environment import Game, InvalidMoveError, GeneratorConfig, MAX_UNDO_STEPS
from src.generation import solve_seed, grow_regions
from src.verifiers import load_board


UNIQUE_5X5 = """
AEEEE
EEBEE
EEEEC
EDEEE
EEEEE
"""
SOLUTION = [(0, 0), (1, 2), (2, 4), (3, 1), (4, 3)]


@pytest.fixture
def game():
    """A game on the 5x5 unique puzzle."""
    _, regions = load_board(UNIQUE_5X5)
    return Game.from_regions(5, regions)


class TestGameCreation:
    """Test game setup."""

    def test_create_generates_level(self):
        """create() builds a playable level of the requested size."""
        game = Game.create(grid_size=5, complexity="easy", seed=3)

        assert game.grid_size == 5
        assert len(game.state.regions) == 5
        assert game.move_count == 0
        assert game.queens_placed == 0
        assert game.state.complexity == "easy"

    def test_create_is_reproducible(self):
        """Equal seeds give equal levels."""
        first = Game.create(grid_size=6, seed=21)
        second = Game.create(grid_size=6, seed=21)
        assert first.state.regions == second.state.regions

    def test_from_config(self):
        """A config drives level generation."""
        config = GeneratorConfig(grid_size=5, complexity="hard", max_attempts=3, seed=8)
        with patch("src.generation.generator.count_solutions", return_value=2) as mock_count:
            game = Game.from_config(config)

        assert mock_count.call_count == 3
        assert game.grid_size == 5
        assert game.state.verified is False

    def test_from_regions_verifies(self, game):
        """A unique partition is marked verified with its solution kept."""
        assert game.state.verified is True
        assert game.state.solution == [Position(*p) for p in SOLUTION]

    def test_from_regions_ambiguous(self):
        """An ambiguous partition is not verified."""
        _, regions = load_board("AAAA\nBBBB\nCCCC\nDDDD")
        assert Game.from_regions(4, regions).state.verified is False


class TestMoves:
    """Test cell state changes."""

    def test_set_cell_state(self, game):
        """A move replaces the state and counts."""
        before = game.state
        after = game.set_cell_state(0, 0, "queen")

        assert after is game.state
        assert after.board.cell(0, 0).state == "queen"
        assert after.move_count == 1
        # The previous state is untouched
        assert before.board.cell(0, 0).state == "empty"
        assert before.move_count == 0

    def test_same_state_is_not_a_move(self, game):
        """Setting the current state changes nothing."""
        game.set_cell_state(0, 0, "empty")
        assert game.move_count == 0
        assert game.history == []

    def test_untouched_rows_shared(self, game):
        """Moves copy only the changed row."""
        before = game.state.board
        game.set_cell_state(2, 2, "marked")

        assert game.state.board.cells[0] is before.cells[0]
        assert game.state.board.cells[2] is not before.cells[2]

    @pytest.mark.parametrize("row,col", [(-1, 0), (0, 5), (5, 5), (0, -1)])
    def test_out_of_range(self, game, row, col):
        """Off-board moves are rejected."""
        with pytest.raises(InvalidMoveError):
            game.set_cell_state(row, col, "queen")
        assert game.move_count == 0

    @pytest.mark.parametrize("row,col", [(True, 0), (0, False), (1.0, 1), ("1", 1)])
    def test_non_integer_position(self, game, row, col):
        """Booleans and other non-integers are not coordinates."""
        with pytest.raises(InvalidMoveError):
            game.set_cell_state(row, col, "queen")
        assert game.move_count == 0

    def test_unknown_state(self, game):
        """Unknown cell states are rejected."""
        with pytest.raises(InvalidMoveError):
            game.set_cell_state(0, 0, "king")

    def test_invalid_move_is_value_error(self, game):
        """InvalidMoveError can be caught as ValueError."""
        with pytest.raises(ValueError):
            game.toggle_queen(9, 9)

    def test_toggle_marker(self, game):
        """Markers cycle empty -> marked -> empty."""
        game.toggle_marker(1, 1)
        assert game.state.board.cell(1, 1).state == "marked"
        game.toggle_marker(1, 1)
        assert game.state.board.cell(1, 1).state == "empty"
        assert game.move_count == 2

    def test_toggle_marker_leaves_queen(self, game):
        """A queen is not changed by the marker toggle."""
        game.toggle_queen(1, 1)
        game.toggle_marker(1, 1)

        assert game.state.board.cell(1, 1).state == "queen"
        assert game.move_count == 1

    def test_toggle_queen(self, game):
        """Queens toggle on and off, replacing markers."""
        game.toggle_marker(3, 3)
        game.toggle_queen(3, 3)
        assert game.state.board.cell(3, 3).state == "queen"
        game.toggle_queen(3, 3)
        assert game.state.board.cell(3, 3).state == "empty"


class TestUndoAndReset:
    """Test undo history and reset."""

    def test_undo(self, game):
        """Undo restores the previous cell state and count."""
        game.toggle_marker(0, 1)
        game.toggle_queen(0, 1)

        assert game.undo() is True
        assert game.state.board.cell(0, 1).state == "marked"
        assert game.move_count == 1

    def test_undo_empty(self, game):
        """Nothing to undo returns False."""
        assert game.undo() is False

    def test_history_depth(self, game):
        """Only the most recent moves are kept."""
        for _ in range(MAX_UNDO_STEPS + 5):
            game.toggle_marker(0, 1)

        assert len(game.history) == MAX_UNDO_STEPS
        assert game.history[-1].move_number == MAX_UNDO_STEPS + 5

    def test_reset(self, game):
        """Reset clears cells, moves and history but keeps regions."""
        regions = game.state.regions
        game.toggle_queen(0, 0)
        game.toggle_marker(4, 4)

        game.reset()
        assert game.queens_placed == 0
        assert game.state.board.cell(4, 4).state == "empty"
        assert game.move_count == 0
        assert game.history == []
        assert game.state.regions == regions


class TestGameQueries:
    """Test conflict, completion and hint queries."""

    def test_solve(self, game):
        """Placing the solution completes the game."""
        for row, col in SOLUTION:
            assert not game.is_completed
            game.toggle_queen(row, col)

        assert game.is_completed
        assert game.get_state()["completion_percentage"] == 100.0

    def test_conflicts(self, game):
        """Conflicting moves show up in the report."""
        game.toggle_queen(0, 0)
        game.toggle_queen(0, 1)

        report = game.conflicts()
        assert report.conflicting_queens == {Position(0, 0), Position(0, 1)}
        assert not game.is_completed

    def test_hint(self, game):
        """Hints follow the stored solution."""
        assert game.hint() == Position(0, 0)
        game.toggle_queen(0, 0)
        assert game.hint() == Position(1, 2)

    def test_get_state(self, game):
        """State summary reports progress and conflicts."""
        game.toggle_queen(0, 0)
        game.toggle_queen(1, 1)

        state = game.get_state()
        assert state["grid_size"] == 5
        assert state["move_count"] == 2
        assert state["queens_placed"] == 2
        assert state["completion_percentage"] == 40.0
        assert state["conflicting_queens"] == ["1A", "2B"]
        assert state["is_completed"] is False
        assert state["verified"] is True


class TestGeneratedGame:
    """Test a game on a generated level."""

    def test_play_seed(self):
        """The seed placement never conflicts on its own regions."""
        rng = random.Random(17)
        seed = solve_seed(6, rng)
        game = Game.from_regions(6, grow_regions(seed, 6, rng=rng))

        for position in seed:
            game.toggle_queen(position.row, position.col)

        report = game.conflicts()
        assert not report.has_conflicts
        assert report.is_completed
