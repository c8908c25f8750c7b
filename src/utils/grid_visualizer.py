from typing import Optional, List

from ..core.models import Board, Position
from ..verifiers import load_board, analyze
from ..verifiers.models import ConflictReport

# Second character of each rendered cell
STATE_MARKS = {"empty": ".", "marked": "x", "queen": "Q"}
CONFLICT_QUEEN = "!"
CONFLICT_CELL = "~"


def _cell_mark(board: Board, position: Position, report: Optional[ConflictReport]) -> str:
    state = board.cell(*position).state
    if report is None:
        return STATE_MARKS[state]
    if state == "queen":
        return CONFLICT_QUEEN if position in report.conflicting_queens else STATE_MARKS[state]
    if state == "empty" and report.flags_for(position):
        return CONFLICT_CELL
    return STATE_MARKS[state]


def render_board(board: Board, report: Optional[ConflictReport] = None) -> str:
    """
    Render the board as a text grid.

    Each cell is its region letter followed by a state mark: ``.`` empty,
    ``x`` marker, ``Q`` queen. With a conflict report, queens breaking a rule
    show as ``!`` and empty cells caught in a conflict show as ``~``.
    """
    size = board.grid_size
    lines: List[str] = ["   " + " ".join(f"{chr(65 + c):<2}" for c in range(size)).rstrip()]
    for r in range(size):
        cells = []
        for c in range(size):
            region_letter = chr(65 + board.cell(r, c).region_id)
            cells.append(region_letter + _cell_mark(board, Position(r, c), report))
        lines.append(f"{r + 1:>2} " + " ".join(cells))
    return '\n'.join(lines)


def visualize(spec: str) -> str:
    """Main function: parse a board description and render it with conflicts."""
    board, regions = load_board(spec)
    return render_board(board, analyze(board, regions))


if __name__ == '__main__':
    # Queens in 1B and 2C touch diagonally
    example = """
<regions>
AABB
ACCB
DDCB
DDDB
</regions>
<state>
.Q..
..Q.
....
....
</state>
"""

    print("Input spec:")
    print(example)
    print("\nRendered grid:")
    print(visualize(example))
