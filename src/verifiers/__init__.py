"""Board verification for the Queens puzzle."""

from .conflicts import analyze, is_completed
from .models import (
    ConflictIssue,
    ConflictReport,
    ROW_CONFLICT_LINE,
    COLUMN_CONFLICT_LINE,
    REGION_CONFLICT,
    AROUND_CONFLICT_QUEEN,
    IN_CONFLICT,
)
from .placement import (
    validate_queen_placement,
    is_position_safe,
    safe_positions,
    get_hint,
    completion_percentage,
)
from .integrity import is_region_connected, validate_regions, validate_game_state
from .parsing import parse_board, load_board, dump_board, extract_block
from .cascade import summarize_issues

__all__ = [
    # Conflict analysis
    "analyze",
    "is_completed",
    # Models
    "ConflictIssue",
    "ConflictReport",
    "ROW_CONFLICT_LINE",
    "COLUMN_CONFLICT_LINE",
    "REGION_CONFLICT",
    "AROUND_CONFLICT_QUEEN",
    "IN_CONFLICT",
    # Placement
    "validate_queen_placement",
    "is_position_safe",
    "safe_positions",
    "get_hint",
    "completion_percentage",
    # Integrity
    "is_region_connected",
    "validate_regions",
    "validate_game_state",
    # Parsing
    "parse_board",
    "load_board",
    "dump_board",
    "extract_block",
    # Display
    "summarize_issues",
]
