"""Tests for conflict analysis."""

import pytest

from src.core.models import Position
from src.verifiers import (
    analyze,
    is_completed,
    load_board,
    ROW_CONFLICT_LINE,
    COLUMN_CONFLICT_LINE,
    REGION_CONFLICT,
    AROUND_CONFLICT_QUEEN,
    IN_CONFLICT,
)


UNIQUE_5X5 = """
AEEEE
EEBEE
EEEEC
EDEEE
EEEEE
"""
UNIQUE_5X5_SOLUTION = [(0, 0), (1, 2), (2, 4), (3, 1), (4, 3)]

COLUMNS_4X4 = """
ABCD
ABCD
ABCD
ABCD
"""

ROWS_4X4 = """
AAAA
BBBB
CCCC
DDDD
"""


def place(board, *positions):
    """Put queens on the given cells."""
    for row, col in positions:
        board = board.with_cell_state(row, col, "queen")
    return board


class TestEmptyBoard:
    """Test analysis of a board without queens."""

    def test_no_conflicts(self):
        """An empty board has no conflicts and is not complete."""
        board, regions = load_board(UNIQUE_5X5)
        report = analyze(board, regions)

        assert report.queen_count == 0
        assert not report.has_conflicts
        assert report.issues == []
        assert not report.is_completed

    def test_markers_are_not_queens(self):
        """Markers never count as queens."""
        board, regions = load_board(COLUMNS_4X4)
        board = board.with_cell_state(0, 0, "marked").with_cell_state(0, 1, "marked")
        report = analyze(board, regions)

        assert report.queen_count == 0
        assert not report.has_conflicts


class TestRowAndAdjacency:
    """Test two touching queens in one row."""

    def test_row_conflict_cells(self):
        """Every cell of row 0 is flagged as a row conflict line."""
        board, regions = load_board(COLUMNS_4X4)
        report = analyze(place(board, (0, 0), (0, 1)), regions)

        assert report.row_conflicts == {0}
        assert report.row_conflict_cells == {Position(0, c) for c in range(4)}

    def test_both_queens_in_conflict(self):
        """Both queens are flagged in-conflict."""
        board, regions = load_board(COLUMNS_4X4)
        report = analyze(place(board, (0, 0), (0, 1)), regions)

        assert report.conflicting_queens == {Position(0, 0), Position(0, 1)}
        assert IN_CONFLICT in report.flags_for(Position(0, 0))
        assert IN_CONFLICT in report.flags_for(Position(0, 1))

    def test_other_rules_independent(self):
        """Columns and regions stay clean; adjacency fires on its own."""
        board, regions = load_board(COLUMNS_4X4)
        report = analyze(place(board, (0, 0), (0, 1)), regions)

        assert report.column_conflicts == frozenset()
        assert report.column_conflict_cells == frozenset()
        assert report.region_conflicts == frozenset()
        assert report.adjacent_pairs == {(Position(0, 0), Position(0, 1))}

    def test_around_cells(self):
        """Neighbourhoods of both touching queens are flagged."""
        board, regions = load_board(COLUMNS_4X4)
        report = analyze(place(board, (0, 0), (0, 1)), regions)

        expected = {Position(r, c) for r in (0, 1) for c in (0, 1, 2)}
        assert report.around_conflict_cells == expected
        assert AROUND_CONFLICT_QUEEN in report.flags_for(Position(1, 2))
        assert report.flags_for(Position(3, 3)) == set()

    def test_issue_codes(self):
        """One issue per broken rule."""
        board, regions = load_board(COLUMNS_4X4)
        report = analyze(place(board, (0, 0), (0, 1)), regions)

        assert sorted(issue.code for issue in report.issues) == ["ADJACENT_QUEENS", "ROW_CONFLICT"]


class TestColumnAndRegion:
    """Test column and region rules."""

    def test_column_conflict(self):
        """Two queens in one column flag the whole column."""
        board, regions = load_board(ROWS_4X4)
        report = analyze(place(board, (0, 2), (3, 2)), regions)

        assert report.column_conflicts == {2}
        assert report.column_conflict_cells == {Position(r, 2) for r in range(4)}
        assert COLUMN_CONFLICT_LINE in report.flags_for(Position(1, 2))
        assert report.row_conflicts == frozenset()
        assert report.adjacent_pairs == frozenset()

    def test_region_conflict(self):
        """Two queens in one region flag every cell of that region."""
        board, regions = load_board(COLUMNS_4X4)
        report = analyze(place(board, (0, 1), (2, 1)), regions)

        assert report.region_conflicts == {1}
        assert report.region_conflict_cells == regions[1].cells
        assert REGION_CONFLICT in report.flags_for(Position(3, 1))
        # Same column too, since the regions are columns
        assert report.column_conflicts == {1}

    def test_row_flag_on_non_queen_cells(self):
        """Non-queen cells in a conflicting row carry the row flag only."""
        board, regions = load_board(ROWS_4X4)
        report = analyze(place(board, (1, 0), (1, 3)), regions)

        assert report.flags_for(Position(1, 1)) == {ROW_CONFLICT_LINE, REGION_CONFLICT}


class TestCompletion:
    """Test completion detection."""

    def test_solved_board(self):
        """The unique solution fully placed is complete with no conflicts."""
        board, regions = load_board(UNIQUE_5X5)
        report = analyze(place(board, *UNIQUE_5X5_SOLUTION), regions)

        assert report.row_conflicts == frozenset()
        assert report.column_conflicts == frozenset()
        assert report.region_conflicts == frozenset()
        assert report.adjacent_pairs == frozenset()
        assert report.is_completed
        assert is_completed(place(board, *UNIQUE_5X5_SOLUTION), regions)

    def test_extra_queen_breaks_completion(self):
        """Adding a conflicting queen to a solved board makes it incomplete."""
        board, regions = load_board(UNIQUE_5X5)
        solved = place(board, *UNIQUE_5X5_SOLUTION)
        assert analyze(solved, regions).is_completed

        report = analyze(place(solved, (4, 4)), regions)
        assert not report.is_completed
        assert report.has_conflicts

    def test_partial_board_not_complete(self):
        """Fewer than N queens is never complete."""
        board, regions = load_board(UNIQUE_5X5)
        report = analyze(place(board, *UNIQUE_5X5_SOLUTION[:4]), regions)

        assert not report.has_conflicts
        assert not report.is_completed

    def test_enough_queens_with_conflict(self):
        """N queens with a region conflict is not complete."""
        board, regions = load_board(UNIQUE_5X5)
        # Distinct rows and columns, none touching, but two in region E
        report = analyze(place(board, (0, 1), (1, 3), (2, 0), (3, 2), (4, 4)), regions)

        assert report.queen_count == 5
        assert report.region_conflicts
        assert not report.is_completed


class TestIdempotence:
    """Test that analysis is pure."""

    @pytest.mark.parametrize("queens", [[], [(0, 0), (0, 1)], UNIQUE_5X5_SOLUTION])
    def test_repeat_analysis_is_equal(self, queens):
        """Analyzing an unchanged board twice gives equal reports."""
        board, regions = load_board(UNIQUE_5X5)
        board = place(board, *queens)

        assert analyze(board, regions) == analyze(board, regions)

    def test_board_unchanged(self):
        """Analysis does not modify the board."""
        board, regions = load_board(UNIQUE_5X5)
        board = place(board, (0, 0), (0, 1))
        before = board.model_copy(deep=True)

        analyze(board, regions)
        assert board == before
