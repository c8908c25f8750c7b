"""
Plain-text board format.

A board is written as a ``<regions>`` block with one letter per cell
(``A`` is region 0, ``B`` region 1, ...) and an optional ``<state>`` block
with ``.`` for empty, ``x`` for a marker and ``Q`` for a queen::

    <regions>
    AABB
    ACCB
    DDCB
    DDDB
    </regions>
    <state>
    .Q..
    ...Q
    Q...
    ..Q.
    </state>

Text without tags is read as a bare regions block.
"""

import re
from typing import Dict, List, Optional, Tuple

from ..core.constants import region_color
from ..core.models import Board, Cell, Position, Region
from .models import ConflictIssue


STATE_SYMBOLS: Dict[str, str] = {".": "empty", "x": "marked", "q": "queen"}
SYMBOL_FOR_STATE: Dict[str, str] = {"empty": ".", "marked": "x", "queen": "Q"}


def extract_block(spec: str, tag: str) -> Optional[str]:
    """Extract content from between <tag> and </tag>, or None if the block is absent."""
    match = re.search(rf'<{tag}>(.*?)</{tag}>', spec, re.DOTALL | re.IGNORECASE)
    if match:
        return match.group(1).strip()
    return None


def _grid_lines(block: str) -> List[str]:
    return [line.replace(" ", "") for line in (raw.strip() for raw in block.split('\n')) if line]


def parse_board(spec: str) -> Tuple[Optional[Board], List[Region], List[ConflictIssue]]:
    """
    Parse a board description.

    Returns a tuple of (board, regions, issues). When issues were found the
    board is None and the region list is empty.
    """
    issues: List[ConflictIssue] = []

    regions_block = extract_block(spec, "regions")
    if regions_block is None:
        regions_block = re.sub(r'<state>.*?</state>', '', spec, flags=re.DOTALL | re.IGNORECASE).strip()
    rows = _grid_lines(regions_block)

    if not rows:
        issues.append(ConflictIssue(code="EMPTY_BOARD", message="Board specification is empty"))
        return None, [], issues

    grid_size = len(rows)
    region_ids: List[List[int]] = []
    for r, line in enumerate(rows):
        if len(line) != grid_size:
            issues.append(ConflictIssue(
                code="RAGGED_ROW",
                message=f"Region row {r + 1} has {len(line)} cells, expected {grid_size}",
            ))
            continue
        ids = []
        for c, symbol in enumerate(line):
            if not ('A' <= symbol.upper() <= 'Z'):
                issues.append(ConflictIssue(
                    code="UNKNOWN_REGION",
                    message=f"Invalid region symbol '{symbol}' at row {r + 1}, column {c + 1}",
                    positions=[Position(r, c)],
                ))
                ids.append(-1)
            else:
                ids.append(ord(symbol.upper()) - ord('A'))
        region_ids.append(ids)

    states = [["empty"] * grid_size for _ in range(grid_size)]
    state_block = extract_block(spec, "state")
    if state_block is not None:
        state_rows = _grid_lines(state_block)
        if len(state_rows) != grid_size:
            issues.append(ConflictIssue(
                code="BAD_STATE",
                message=f"State block has {len(state_rows)} rows, expected {grid_size}",
            ))
        for r, line in enumerate(state_rows[:grid_size]):
            if len(line) != grid_size:
                issues.append(ConflictIssue(
                    code="BAD_STATE",
                    message=f"State row {r + 1} has {len(line)} cells, expected {grid_size}",
                ))
                continue
            for c, symbol in enumerate(line):
                state = STATE_SYMBOLS.get(symbol.lower())
                if state is None:
                    issues.append(ConflictIssue(
                        code="BAD_STATE",
                        message=f"Invalid state symbol '{symbol}' at row {r + 1}, column {c + 1}",
                        positions=[Position(r, c)],
                    ))
                    continue
                states[r][c] = state

    if issues:
        return None, [], issues

    used_ids = sorted({region_id for ids in region_ids for region_id in ids})
    if used_ids != list(range(grid_size)):
        letters = ''.join(chr(ord('A') + region_id) for region_id in used_ids)
        issues.append(ConflictIssue(
            code="REGION_COUNT",
            message=f"A {grid_size}x{grid_size} board needs regions A-{chr(ord('A') + grid_size - 1)}, found {letters}",
        ))
        return None, [], issues

    members: Dict[int, List[Position]] = {}
    for r in range(grid_size):
        for c in range(grid_size):
            members.setdefault(region_ids[r][c], []).append(Position(r, c))

    # Anchor = first cell of the region in row-major order
    regions = [
        Region(id=region_id, color=region_color(region_id), cells=frozenset(cells), anchor=cells[0])
        for region_id, cells in sorted(members.items())
    ]

    board = Board(cells=tuple(
        tuple(
            Cell(position=Position(r, c), region_id=region_ids[r][c], state=states[r][c])
            for c in range(grid_size)
        )
        for r in range(grid_size)
    ))

    return board, regions, issues


def load_board(spec: str) -> Tuple[Board, List[Region]]:
    """
    Parse a board description, raising on malformed input.

    Raises:
        ValueError: If parsing fails
    """
    board, regions, issues = parse_board(spec)
    if issues:
        raise ValueError(f"Parse errors: {[issue.message for issue in issues]}")
    return board, regions


def dump_board(board: Board) -> str:
    """Write a board in the tagged text format read by :func:`parse_board`."""
    region_lines = [
        ''.join(chr(ord('A') + cell.region_id) for cell in row)
        for row in board.cells
    ]
    state_lines = [
        ''.join(SYMBOL_FOR_STATE[cell.state] for cell in row)
        for row in board.cells
    ]
    return "\n".join(
        ["<regions>", *region_lines, "</regions>", "<state>", *state_lines, "</state>"]
    )
