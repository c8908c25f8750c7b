"""Tests for region partition and board integrity checks."""

from src.core.models import Position, Region
from src.verifiers import is_region_connected, validate_regions, validate_game_state, load_board


ROWS_4X4 = """
AAAA
BBBB
CCCC
DDDD
"""


def region(region_id, cells, anchor=None):
    cells = [Position(*cell) for cell in cells]
    return Region(id=region_id, color="#000000", cells=frozenset(cells), anchor=anchor or cells[0])


def row_regions(size):
    return [region(r, [(r, c) for c in range(size)]) for r in range(size)]


def codes(issues):
    return [issue.code for issue in issues]


class TestRegionConnectivity:
    """Test orthogonal connectivity."""

    def test_single_cell(self):
        """A single cell is connected."""
        assert is_region_connected([Position(2, 2)])

    def test_empty(self):
        """An empty set is trivially connected."""
        assert is_region_connected([])

    def test_l_shape(self):
        """An L shape is connected."""
        assert is_region_connected([(0, 0), (1, 0), (2, 0), (2, 1)])

    def test_diagonal_only(self):
        """Diagonal contact does not connect cells."""
        assert not is_region_connected([(0, 0), (1, 1)])

    def test_two_islands(self):
        """Two separate groups are not connected."""
        assert not is_region_connected([(0, 0), (0, 1), (3, 3), (3, 2)])


class TestValidateRegions:
    """Test partition checks."""

    def test_valid_partition(self):
        """Row regions form a valid partition."""
        assert validate_regions(4, row_regions(4)) == []

    def test_wrong_region_count(self):
        """Fewer regions than rows is reported."""
        merged = row_regions(4)[:2] + [region(2, [(r, c) for r in (2, 3) for c in range(4)])]
        assert codes(validate_regions(4, merged)) == ["REGION_COUNT"]

    def test_missing_cells(self):
        """Uncovered cells are listed."""
        regions = row_regions(4)
        regions[3] = region(3, [(3, 0), (3, 1), (3, 2)])

        issues = validate_regions(4, regions)
        assert codes(issues) == ["CELL_MISSING"]
        assert issues[0].positions == [Position(3, 3)]

    def test_overlap(self):
        """A cell claimed twice is reported."""
        regions = row_regions(4)
        regions[1] = region(1, [(1, 0), (1, 1), (1, 2), (1, 3), (0, 3)], anchor=(1, 0))

        assert "CELL_OVERLAP" in codes(validate_regions(4, regions))

    def test_out_of_bounds(self):
        """Cells outside the board are reported."""
        regions = row_regions(4)
        regions[3] = region(3, [(3, 0), (3, 1), (3, 2), (3, 3), (4, 3)])

        assert "CELL_OUT_OF_BOUNDS" in codes(validate_regions(4, regions))

    def test_disconnected(self):
        """A split region is reported."""
        regions = row_regions(4)
        regions[0] = region(0, [(0, 0), (0, 1), (0, 3)])
        regions[1] = region(1, [(1, 0), (1, 1), (1, 2), (1, 3), (0, 2)], anchor=(1, 0))

        assert codes(validate_regions(4, regions)) == ["REGION_DISCONNECTED"]


class TestValidateGameState:
    """Test board and region agreement."""

    def test_parsed_board_is_consistent(self):
        """A parsed board agrees with its regions."""
        board, regions = load_board(ROWS_4X4)
        assert validate_game_state(board, regions) == []

    def test_region_id_mismatch(self):
        """Cells labelled with the wrong region are reported."""
        board, _ = load_board(ROWS_4X4)
        columns = [region(c, [(r, c) for r in range(4)]) for c in range(4)]

        issues = validate_game_state(board, columns)
        assert set(codes(issues)) == {"REGION_ID_MISMATCH"}
        # Only the diagonal cells happen to match
        assert len(issues) == 12
