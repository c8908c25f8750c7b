"""
Standalone CLI for checking a board file.

Usage:
    python -m src.check board.txt
    python -m src.check board.txt --max-issues 10
"""

import argparse
import sys
from pathlib import Path

from .utils.grid_visualizer import render_board
from .verifiers import analyze, parse_board, summarize_issues, validate_game_state


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Check a Queens board for rule violations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Board file format:
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
        """
    )
    parser.add_argument(
        "board",
        help="Path to the board text file"
    )
    parser.add_argument(
        "--max-issues",
        type=int,
        default=5,
        help="Maximum number of issues to list (default: 5)"
    )

    args = parser.parse_args(argv)
    if args.max_issues < 2:
        parser.error("--max-issues must be at least 2")

    # Validate input file
    board_path = Path(args.board)
    if not board_path.exists():
        print(f"Error: Board file not found: {args.board}", file=sys.stderr)
        sys.exit(1)

    board, regions, issues = parse_board(board_path.read_text())
    if board is not None:
        issues = validate_game_state(board, regions)

    if issues:
        print("Board is malformed:")
        for issue in summarize_issues(issues, args.max_issues):
            print(f"  [{issue.code}] {issue.message}")
        return 1

    report = analyze(board, regions)
    print(render_board(board, report))
    print()
    print(f"Queens: {report.queen_count}/{report.grid_size}")

    if report.is_completed:
        print("Solved!")
        return 0

    if report.issues:
        print("Conflicts:")
        for issue in summarize_issues(report.issues, args.max_issues):
            print(f"  [{issue.code}] {issue.message}")
    else:
        print("No conflicts so far")
    return 0


if __name__ == "__main__":
    sys.exit(main())
