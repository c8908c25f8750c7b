"""
Level generation loop.

Each attempt seeds a placement, grows regions around it and counts the
solutions of the result. The first attempt with exactly one solution is
published as a verified level. When the attempt budget runs out the last
seed is reused with a cheap fallback growth and the level is published as
unverified. A run can be cancelled between attempts; a cancelled run never
publishes a game state.
"""

import asyncio
import random
import threading
from typing import Iterator, List, Literal, Optional, Union
from pydantic import BaseModel, Field, ConfigDict

from ..core.constants import Complexity, DEFAULT_GRID_SIZE, get_complexity_config
from ..core.models import GameState, Position, Region, format_position
from .seed import solve_seed
from .regions import grow_regions, grow_fallback_regions
from .uniqueness import count_solutions


GenerationStatus = Literal["verified", "unverified", "cancelled"]


class CancellationToken:
    """Flag a caller sets to stop a running generation at its next check."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class AttemptRecord(BaseModel):
    """Outcome of one seed/grow/verify attempt."""
    attempt: int
    seed: List[Position]
    solution_count: int
    accepted: bool = False


class GenerationResult(BaseModel):
    """
    Final outcome of a generation run.

    Attributes:
        status: "verified" (exactly one solution), "unverified" (fallback level)
            or "cancelled" (no level)
        game_state: The published level; None when cancelled
        attempts: Number of attempts that ran
        history: One record per attempt
    """
    status: GenerationStatus
    game_state: Optional[GameState] = None
    attempts: int = 0
    history: List[AttemptRecord] = Field(default_factory=list)

    @property
    def verified(self) -> bool:
        return self.status == "verified"

    @property
    def cancelled(self) -> bool:
        return self.status == "cancelled"


GenerationEvent = Union[AttemptRecord, GenerationResult]


class LevelGenerator(BaseModel):
    """
    Retry loop producing uniquely solvable levels.

    Attributes:
        grid_size: Board width and height
        complexity: Region growth tuning
        max_attempts: Attempt budget before falling back to an unverified level
        seed: Optional random seed for reproducible runs
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    grid_size: int = Field(default=DEFAULT_GRID_SIZE, ge=1)
    complexity: Complexity = "medium"
    max_attempts: int = Field(default=10, ge=1)
    seed: Optional[int] = None
    _rng: random.Random = None

    def model_post_init(self, __context) -> None:
        """Initialize the random generator after model creation."""
        self._rng = random.Random(self.seed)

    @classmethod
    def create(
        cls,
        grid_size: int = DEFAULT_GRID_SIZE,
        complexity: Complexity = "medium",
        max_attempts: Optional[int] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> "LevelGenerator":
        """
        Factory method filling the attempt budget from the complexity table.

        Args:
            grid_size: Board width and height
            complexity: Complexity level
            max_attempts: Attempt budget; defaults to the complexity's budget
            seed: Optional random seed
            rng: Explicit random source; takes precedence over ``seed``

        Returns:
            A configured LevelGenerator
        """
        if max_attempts is None:
            max_attempts = get_complexity_config(complexity)["max_attempts"]
        generator = cls(grid_size=grid_size, complexity=complexity, max_attempts=max_attempts, seed=seed)
        if rng is not None:
            generator._rng = rng
        return generator

    def _build_state(self, regions: List[Region], seed: List[Position], verified: bool) -> GameState:
        return GameState.create(
            grid_size=self.grid_size,
            regions=regions,
            solution=seed,
            verified=verified,
            complexity=self.complexity,
        )

    def _cancelled(self, history: List[AttemptRecord]) -> GenerationResult:
        return GenerationResult(status="cancelled", attempts=len(history), history=history)

    def iter_generate(
        self,
        cancel: Optional[CancellationToken] = None,
        verbose: bool = False,
    ) -> Iterator[GenerationEvent]:
        """
        Run the generation loop step by step.

        Yields an AttemptRecord after every attempt and finally a
        GenerationResult. The consumer may cancel the token between items;
        the loop checks it before each attempt and before publishing.

        Raises:
            NoSolutionError: If the grid size cannot be seeded at all
        """
        history: List[AttemptRecord] = []
        last_seed: Optional[List[Position]] = None

        for attempt in range(1, self.max_attempts + 1):
            if cancel is not None and cancel.cancelled:
                if verbose:
                    print(f"Generation cancelled before attempt {attempt}")
                yield self._cancelled(history)
                return

            seed = solve_seed(self.grid_size, self._rng)
            regions = grow_regions(seed, self.grid_size, self.complexity, self._rng)
            solution_count = count_solutions(self.grid_size, regions, cutoff=2)

            record = AttemptRecord(
                attempt=attempt,
                seed=seed,
                solution_count=solution_count,
                accepted=solution_count == 1,
            )
            history.append(record)
            last_seed = seed

            if verbose:
                sizes = ", ".join(str(region.size) for region in regions)
                print(
                    f"Attempt {attempt}/{self.max_attempts}: "
                    f"seed {' '.join(format_position(p) for p in seed)}, "
                    f"region sizes [{sizes}], "
                    f"{'unique' if record.accepted else f'{solution_count} solution(s)'}"
                )

            yield record

            if record.accepted:
                if cancel is not None and cancel.cancelled:
                    yield self._cancelled(history)
                    return
                yield GenerationResult(
                    status="verified",
                    game_state=self._build_state(regions, seed, verified=True),
                    attempts=len(history),
                    history=history,
                )
                return

        if cancel is not None and cancel.cancelled:
            yield self._cancelled(history)
            return

        if verbose:
            print(f"No unique level after {self.max_attempts} attempts, using fallback regions")

        regions = grow_fallback_regions(last_seed, self.grid_size, self.complexity, self._rng)
        yield GenerationResult(
            status="unverified",
            game_state=self._build_state(regions, last_seed, verified=False),
            attempts=len(history),
            history=history,
        )

    def generate(
        self,
        cancel: Optional[CancellationToken] = None,
        verbose: bool = False,
    ) -> GenerationResult:
        """Run the loop to completion and return its result."""
        result: Optional[GenerationResult] = None
        for event in self.iter_generate(cancel=cancel, verbose=verbose):
            if isinstance(event, GenerationResult):
                result = event
        return result

    async def generate_async(
        self,
        cancel: Optional[CancellationToken] = None,
        verbose: bool = False,
    ) -> GenerationResult:
        """
        Run the loop without starving the event loop.

        Control goes back to the event loop after every attempt and once more
        after the level is built, so other tasks (such as finishing the
        previous board's transition) keep running. A cancellation observed at
        that last yield still wins over the finished level.
        """
        result: Optional[GenerationResult] = None
        for event in self.iter_generate(cancel=cancel, verbose=verbose):
            await asyncio.sleep(0)
            if isinstance(event, GenerationResult):
                result = event

        if cancel is not None and cancel.cancelled and not result.cancelled:
            return self._cancelled(result.history)
        return result


def generate(
    grid_size: int = DEFAULT_GRID_SIZE,
    complexity: Complexity = "medium",
    max_attempts: Optional[int] = None,
    rng: Optional[random.Random] = None,
    cancel: Optional[CancellationToken] = None,
    verbose: bool = False,
) -> GenerationResult:
    """
    Generate a level, verifying uniqueness when the attempt budget allows.

    Args:
        grid_size: Board width and height
        complexity: Complexity level
        max_attempts: Attempt budget; defaults to the complexity's budget
        rng: Random source; a fresh system-seeded one is used when omitted
        cancel: Optional cancellation token
        verbose: If True, print progress to stdout

    Returns:
        GenerationResult tagged verified, unverified or cancelled
    """
    generator = LevelGenerator.create(grid_size, complexity, max_attempts, rng=rng)
    return generator.generate(cancel=cancel, verbose=verbose)


async def generate_async(
    grid_size: int = DEFAULT_GRID_SIZE,
    complexity: Complexity = "medium",
    max_attempts: Optional[int] = None,
    rng: Optional[random.Random] = None,
    cancel: Optional[CancellationToken] = None,
    verbose: bool = False,
) -> GenerationResult:
    """Awaitable variant of :func:`generate`."""
    generator = LevelGenerator.create(grid_size, complexity, max_attempts, rng=rng)
    return await generator.generate_async(cancel=cancel, verbose=verbose)
