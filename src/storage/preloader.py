"""
Background preparation of levels.

The preloader keeps at most one ready level per grid size. Handing a level
out starts the generation of the next one as an asyncio task, so a player
asking for a new board gets one without waiting for the uniqueness search.
"""

import asyncio
import random
from typing import Dict, Optional

from ..core.constants import Complexity
from ..core.models import GameState
from ..generation import CancellationToken, generate_async
from .level_store import LevelStore, fetch_stored_state


# Generation runs per background task before giving up on a new layout
DEFAULT_STORE_RETRIES = 10


class LevelPreloader:
    """
    Keeps one level ready per grid size.

    Must be used from inside a running event loop: background generation
    is scheduled with ``asyncio.create_task``.

    Attributes:
        store: Optional level store; new levels must be stored before they
            are kept ready, so a layout already in the store is retried
        complexity: Complexity of generated levels
        max_attempts: Attempt budget for each generation run
        store_retries: Generation runs per background task
        verbose: If True, print progress
    """

    def __init__(
        self,
        store: Optional[LevelStore] = None,
        complexity: Complexity = "medium",
        max_attempts: Optional[int] = None,
        store_retries: int = DEFAULT_STORE_RETRIES,
        rng: Optional[random.Random] = None,
        verbose: bool = False,
    ):
        if store_retries < 1:
            raise ValueError(f"store_retries must be at least 1, got {store_retries}")
        self.store = store
        self.complexity = complexity
        self.max_attempts = max_attempts
        self.store_retries = store_retries
        self.verbose = verbose
        self._rng = rng or random.Random()
        self._ready: Dict[int, GameState] = {}
        self._tasks: Dict[int, asyncio.Task] = {}
        self._tokens: Dict[int, CancellationToken] = {}

    async def get_instant_level(self, grid_size: int) -> GameState:
        """
        Hand out a level, then start preparing the next one.

        Sources, in order: the ready level for this size, a stored level,
        a level generated on the spot.
        """
        state = self._ready.pop(grid_size, None)
        if state is not None:
            if self.verbose:
                print(f"Using preloaded {grid_size}x{grid_size} level")
        else:
            state = fetch_stored_state(self.store, grid_size, self.complexity, verbose=self.verbose)

        if state is None:
            if self.verbose:
                print(f"Generating {grid_size}x{grid_size} level on demand")
            result = await generate_async(
                grid_size=grid_size,
                complexity=self.complexity,
                max_attempts=self.max_attempts,
                rng=self._rng,
                verbose=self.verbose,
            )
            state = result.game_state

        self.start_background_generation(grid_size)
        return state

    def start_background_generation(self, grid_size: int) -> asyncio.Task:
        """Schedule generation of the next level unless one is already running."""
        running = self._tasks.get(grid_size)
        if running is not None and not running.done():
            return running

        if self.verbose:
            print(f"Starting background generation for {grid_size}x{grid_size}")
        token = CancellationToken()
        task = asyncio.create_task(self._generate_and_store(grid_size, token))
        self._tasks[grid_size] = task
        self._tokens[grid_size] = token
        task.add_done_callback(lambda done, size=grid_size: self._forget(size, done))
        return task

    def _forget(self, grid_size: int, task: asyncio.Task) -> None:
        if self._tasks.get(grid_size) is task:
            del self._tasks[grid_size]
            del self._tokens[grid_size]

    async def _generate_and_store(self, grid_size: int, token: CancellationToken) -> None:
        for run in range(1, self.store_retries + 1):
            result = await generate_async(
                grid_size=grid_size,
                complexity=self.complexity,
                max_attempts=self.max_attempts,
                rng=self._rng,
                cancel=token,
            )
            if result.cancelled:
                if self.verbose:
                    print(f"Background generation for {grid_size}x{grid_size} cancelled")
                return
            if not result.verified:
                if self.verbose:
                    print(f"Run {run}/{self.store_retries}: no unique {grid_size}x{grid_size} level, retrying")
                continue

            state = result.game_state
            if self.store is not None:
                try:
                    stored = self.store.store_level(grid_size, state.regions, self.complexity)
                except (OSError, ValueError) as e:
                    if self.verbose:
                        print(f"Could not store level, keeping it in memory: {e}")
                else:
                    if not stored:
                        if self.verbose:
                            print(f"Run {run}/{self.store_retries}: level already in store, retrying")
                        continue

            self._ready[grid_size] = state
            if self.verbose:
                print(f"Preloaded {grid_size}x{grid_size} level after {run} run(s)")
            return

        if self.verbose:
            print(f"No new {grid_size}x{grid_size} level after {self.store_retries} runs")

    def has_preloaded_level(self, grid_size: int) -> bool:
        return grid_size in self._ready

    def generation_status(self) -> Dict[int, bool]:
        """Whether a background task is running, per grid size seen so far."""
        sizes = set(self._ready) | set(self._tasks)
        return {size: size in self._tasks for size in sorted(sizes)}

    def cancel_all_generations(self) -> None:
        """Ask every running task to stop; ready levels are kept."""
        for token in self._tokens.values():
            token.cancel()

    def clear_preloaded_levels(self) -> None:
        self._ready.clear()

    async def wait(self) -> None:
        """Wait until every background task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()))
