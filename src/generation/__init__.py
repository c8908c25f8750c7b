"""Puzzle generation: seed placement, region growth and uniqueness checks."""

from .seed import solve_seed, NoSolutionError
from .regions import (
    GrowthStrategy,
    STRATEGY_CYCLE,
    grow_regions,
    grow_fallback_regions,
    strategy_for_wave,
)
from .uniqueness import find_solutions, count_solutions, has_unique_solution
from .generator import (
    CancellationToken,
    AttemptRecord,
    GenerationResult,
    GenerationStatus,
    LevelGenerator,
    generate,
    generate_async,
)

__all__ = [
    # Seed placement
    "solve_seed",
    "NoSolutionError",
    # Region growth
    "GrowthStrategy",
    "STRATEGY_CYCLE",
    "grow_regions",
    "grow_fallback_regions",
    "strategy_for_wave",
    # Uniqueness
    "find_solutions",
    "count_solutions",
    "has_unique_solution",
    # Orchestration
    "CancellationToken",
    "AttemptRecord",
    "GenerationResult",
    "GenerationStatus",
    "LevelGenerator",
    "generate",
    "generate_async",
]
