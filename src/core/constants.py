from typing import Dict, List, Literal, Any


Complexity = Literal["easy", "medium", "hard"]

MIN_GRID_SIZE = 4
MAX_GRID_SIZE = 12
DEFAULT_GRID_SIZE = 6

# One color per region; sizes above 12 reuse the palette
REGION_COLORS: List[str] = [
    "#26A69A", "#BA68C8", "#81C784", "#FFB74D",
    "#F06292", "#D4E157", "#4DD0E1", "#FA6464",
    "#B0A997", "#615F87", "#995D36", "#02F760",
]

# Per-complexity generation tuning.
#   region_size_range: (min, max) cells per region; the fallback grows regions to the min
#   max_attempts: default attempt budget for the verified generator
#   jitter: random spread added to growth scores (higher = less compact regions)
COMPLEXITY_LEVELS: Dict[str, Dict[str, Any]] = {
    "easy": {
        "name": "Easy",
        "description": "Larger, uniform regions",
        "region_size_range": (3, 6),
        "max_attempts": 5,
        "jitter": 10.0,
    },
    "medium": {
        "name": "Medium",
        "description": "Varied region sizes",
        "region_size_range": (2, 8),
        "max_attempts": 10,
        "jitter": 20.0,
    },
    "hard": {
        "name": "Hard",
        "description": "Irregular, challenging regions",
        "region_size_range": (1, 10),
        "max_attempts": 15,
        "jitter": 35.0,
    },
}


def get_complexity_config(complexity: str) -> Dict[str, Any]:
    """
    Look up the tuning table for a complexity level.

    Raises:
        ValueError: If the complexity name is unknown
    """
    if complexity not in COMPLEXITY_LEVELS:
        raise ValueError(
            f"Unknown complexity '{complexity}' (expected one of {', '.join(COMPLEXITY_LEVELS)})"
        )
    return COMPLEXITY_LEVELS[complexity]


def region_color(index: int) -> str:
    return REGION_COLORS[index % len(REGION_COLORS)]
