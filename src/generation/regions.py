"""
Region growth around a seed placement.

Every seed position becomes the anchor of one region. Regions then grow in
waves: each wave scores every free cell on every region's frontier, sorts
all of them together and hands out roughly the best third. The scoring
strategy changes every three waves. Whatever is left when the waves run
out is handed to the touching region with the closest anchor, so every
region stays orthogonally connected and the grid is always fully covered.
"""

import math
import random
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..core.constants import get_complexity_config, region_color
from ..core.models import Position, Region, manhattan_distance, orthogonal_neighbors, in_bounds


UNOWNED = -1
WAVES_PER_STRATEGY = 3


class GrowthStrategy(str, Enum):
    """Scoring heuristics used by the wave grower."""
    DISTANCE_WEIGHTED = "distance_weighted"
    RANDOM = "random"
    SIZE_BALANCING = "size_balancing"


STRATEGY_CYCLE: Tuple[GrowthStrategy, ...] = (
    GrowthStrategy.DISTANCE_WEIGHTED,
    GrowthStrategy.RANDOM,
    GrowthStrategy.SIZE_BALANCING,
)


# Candidate = (score, cell, region index)
Candidate = Tuple[float, Position, int]
Scorer = Callable[[Position, Position, int, float, float, random.Random], float]


def _score_distance_weighted(
    cell: Position, anchor: Position, region_size: int, target_size: float, jitter: float, rng: random.Random
) -> float:
    distance = math.hypot(cell.row - anchor.row, cell.col - anchor.col)
    return 100.0 - distance + rng.random() * jitter


def _score_random(
    cell: Position, anchor: Position, region_size: int, target_size: float, jitter: float, rng: random.Random
) -> float:
    return rng.random() * 100.0


def _score_size_balancing(
    cell: Position, anchor: Position, region_size: int, target_size: float, jitter: float, rng: random.Random
) -> float:
    return max(0.0, (target_size - region_size) * 10.0) + rng.random() * jitter * 1.5


SCORERS: Dict[GrowthStrategy, Scorer] = {
    GrowthStrategy.DISTANCE_WEIGHTED: _score_distance_weighted,
    GrowthStrategy.RANDOM: _score_random,
    GrowthStrategy.SIZE_BALANCING: _score_size_balancing,
}


def strategy_for_wave(wave: int) -> GrowthStrategy:
    """Strategy active during the given 0-based wave."""
    return STRATEGY_CYCLE[(wave // WAVES_PER_STRATEGY) % len(STRATEGY_CYCLE)]


def _validate_seed(seed: List[Position], grid_size: int) -> None:
    if not seed:
        raise ValueError("Cannot grow regions without at least one seed position")
    seen: Set[Position] = set()
    for position in seed:
        if not in_bounds(position, grid_size):
            raise ValueError(f"Seed position {tuple(position)} is outside a {grid_size}x{grid_size} board")
        if position in seen:
            raise ValueError(f"Seed position {tuple(position)} appears more than once")
        seen.add(position)


def _frontier(members: List[Position], ownership: List[List[int]], grid_size: int) -> List[Position]:
    """Unowned cells orthogonally adjacent to any of the given cells, without duplicates."""
    frontier: List[Position] = []
    seen: Set[Position] = set()
    for cell in members:
        for neighbor in orthogonal_neighbors(cell, grid_size):
            if ownership[neighbor.row][neighbor.col] == UNOWNED and neighbor not in seen:
                seen.add(neighbor)
                frontier.append(neighbor)
    return frontier


def _grow_wave(
    strategy: GrowthStrategy,
    anchors: List[Position],
    members: List[List[Position]],
    ownership: List[List[int]],
    grid_size: int,
    target_size: float,
    jitter: float,
    rng: random.Random,
) -> int:
    """Run one wave and return how many cells it assigned."""
    scorer = SCORERS[strategy]
    candidates: List[Candidate] = []

    for index, cells in enumerate(members):
        for cell in _frontier(cells, ownership, grid_size):
            score = scorer(cell, anchors[index], len(cells), target_size, jitter, rng)
            candidates.append((score, cell, index))

    if not candidates:
        return 0

    candidates.sort(key=lambda candidate: candidate[0], reverse=True)
    quota = max(1, len(candidates) // 3)

    assigned = 0
    for _, cell, index in candidates[:quota]:
        # A cell can sit on several frontiers; the first (best) claim wins
        if ownership[cell.row][cell.col] != UNOWNED:
            continue
        ownership[cell.row][cell.col] = index
        members[index].append(cell)
        assigned += 1

    return assigned


def _fill_unowned(
    anchors: List[Position],
    members: List[List[Position]],
    ownership: List[List[int]],
    grid_size: int,
) -> int:
    """
    Assign every remaining cell to the closest-anchor region among those touching it.

    Runs in passes; each pass only considers cells that touch an owned cell
    at the start of the pass. Ties go to the lowest region id.

    Returns:
        Number of cells assigned
    """
    assigned = 0
    while True:
        pending: List[Tuple[Position, int]] = []
        for row in range(grid_size):
            for col in range(grid_size):
                if ownership[row][col] != UNOWNED:
                    continue
                cell = Position(row, col)
                touching = {
                    ownership[n.row][n.col]
                    for n in orthogonal_neighbors(cell, grid_size)
                    if ownership[n.row][n.col] != UNOWNED
                }
                if touching:
                    best = min(touching, key=lambda index: (manhattan_distance(cell, anchors[index]), index))
                    pending.append((cell, best))

        if not pending:
            break

        for cell, index in pending:
            ownership[cell.row][cell.col] = index
            members[index].append(cell)
            assigned += 1

    return assigned


def _init_ownership(seed: List[Position], grid_size: int) -> Tuple[List[List[int]], List[List[Position]]]:
    ownership = [[UNOWNED] * grid_size for _ in range(grid_size)]
    members: List[List[Position]] = []
    for index, anchor in enumerate(seed):
        ownership[anchor.row][anchor.col] = index
        members.append([Position(*anchor)])
    return ownership, members


def _build_regions(anchors: List[Position], members: List[List[Position]]) -> List[Region]:
    return [
        Region(id=index, color=region_color(index), cells=frozenset(cells), anchor=anchors[index])
        for index, cells in enumerate(members)
    ]


def grow_regions(
    seed: List[Position],
    grid_size: int,
    complexity: str = "medium",
    rng: Optional[random.Random] = None,
) -> List[Region]:
    """
    Partition the board into one connected region per seed position.

    Args:
        seed: Anchor positions; region ``i`` is grown from ``seed[i]``
        grid_size: Board width and height
        complexity: Complexity level; scales the randomness of the scores
        rng: Random source; a fresh system-seeded one is used when omitted

    Returns:
        Regions ordered by id, covering every cell exactly once

    Raises:
        ValueError: If the seed is empty, repeats a position or leaves the board
    """
    _validate_seed(seed, grid_size)
    rng = rng or random.Random()
    jitter = get_complexity_config(complexity)["jitter"]

    anchors = [Position(*position) for position in seed]
    ownership, members = _init_ownership(anchors, grid_size)
    target_size = (grid_size * grid_size) / len(anchors)

    for wave in range(grid_size * 2):
        strategy = strategy_for_wave(wave)
        if _grow_wave(strategy, anchors, members, ownership, grid_size, target_size, jitter, rng) == 0:
            break

    _fill_unowned(anchors, members, ownership, grid_size)
    return _build_regions(anchors, members)


def grow_fallback_regions(
    seed: List[Position],
    grid_size: int,
    complexity: str = "medium",
    rng: Optional[random.Random] = None,
) -> List[Region]:
    """
    Cheap partition used when verified generation runs out of attempts.

    Each anchor first claims free orthogonal neighbours until its region
    reaches the smallest size allowed by the complexity; the rest of the grid
    is then filled the same way as in :func:`grow_regions`.
    """
    _validate_seed(seed, grid_size)
    rng = rng or random.Random()
    min_size = get_complexity_config(complexity)["region_size_range"][0]

    anchors = [Position(*position) for position in seed]
    ownership, members = _init_ownership(anchors, grid_size)

    for index, anchor in enumerate(anchors):
        neighbors = list(orthogonal_neighbors(anchor, grid_size))
        rng.shuffle(neighbors)
        for neighbor in neighbors:
            if len(members[index]) >= min_size:
                break
            if ownership[neighbor.row][neighbor.col] == UNOWNED:
                ownership[neighbor.row][neighbor.col] = index
                members[index].append(neighbor)

    _fill_unowned(anchors, members, ownership, grid_size)
    return _build_regions(anchors, members)
