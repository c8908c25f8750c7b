"""
Persistent storage for generated levels.

Levels are kept in a single JSON document together with a hash index. The
hash ignores region numbering: ids are renumbered in row-major order of
first appearance before hashing, so two layouts that differ only by labels
count as the same level.
"""

import hashlib
import json
import random
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from ..core.constants import Complexity
from ..core.models import GameState, Position, Region
from ..generation import generate, has_unique_solution


class StoredPosition(BaseModel):
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)


class StoredRegion(BaseModel):
    """A region as written to disk."""
    id: int = Field(..., ge=0)
    color: str
    cells: List[StoredPosition]
    anchor_position: StoredPosition

    @classmethod
    def from_region(cls, region: Region) -> "StoredRegion":
        return cls(
            id=region.id,
            color=region.color,
            cells=[StoredPosition(row=p.row, col=p.col) for p in region.sorted_cells()],
            anchor_position=StoredPosition(row=region.anchor.row, col=region.anchor.col),
        )

    def to_region(self) -> Region:
        return Region(
            id=self.id,
            color=self.color,
            cells=frozenset(Position(p.row, p.col) for p in self.cells),
            anchor=Position(self.anchor_position.row, self.anchor_position.col),
        )


class StoredLevel(BaseModel):
    """One stored level."""
    grid_size: int = Field(..., ge=1)
    complexity: Complexity = "medium"
    regions: List[StoredRegion]
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())


class LevelStoreDocument(BaseModel):
    """On-disk layout: levels keyed by their layout hash."""
    levels: Dict[str, StoredLevel] = Field(default_factory=dict)


def level_hash(grid_size: int, regions: List[Region]) -> str:
    """
    SHA-256 of the region layout with ids renumbered by first appearance.

    Raises:
        ValueError: If a cell of the grid belongs to no region
    """
    owner: Dict[Position, int] = {}
    for region in regions:
        for cell in region.cells:
            owner[cell] = region.id

    relabel: Dict[int, int] = {}
    rows = []
    for row in range(grid_size):
        labels = []
        for col in range(grid_size):
            position = Position(row, col)
            if position not in owner:
                raise ValueError(f"Cannot hash level: no region at ({row}, {col})")
            region_id = owner[position]
            if region_id not in relabel:
                relabel[region_id] = len(relabel)
            labels.append(str(relabel[region_id]))
        rows.append(",".join(labels))

    normalized = f"{grid_size}:" + ";".join(rows)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


class LevelStore(Protocol):
    """Anything that can hand out and accept levels."""

    def fetch_candidate_level(
        self, grid_size: int, complexity: Optional[Complexity] = None
    ) -> Optional[List[Region]]:
        ...

    def store_level(self, grid_size: int, regions: List[Region], complexity: Complexity = "medium") -> bool:
        ...


class JsonLevelStore:
    """
    Level store backed by one JSON file.

    The file is read on every call and rewritten on every successful store,
    so several runs can share it one after another.
    """

    def __init__(self, path: str | Path, rng: Optional[random.Random] = None):
        self.path = Path(path)
        self._rng = rng or random.Random()

    def _load(self) -> LevelStoreDocument:
        if not self.path.exists():
            return LevelStoreDocument()
        with open(self.path) as f:
            data = json.load(f)
        return LevelStoreDocument(**data)

    def _save(self, document: LevelStoreDocument) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(document.model_dump(), f, indent=2)

    def __len__(self) -> int:
        return len(self._load().levels)

    def level_counts(self) -> Dict[int, int]:
        """Number of stored levels per grid size."""
        counts = Counter(level.grid_size for level in self._load().levels.values())
        return dict(sorted(counts.items()))

    def fetch_candidate_level(
        self, grid_size: int, complexity: Optional[Complexity] = None
    ) -> Optional[List[Region]]:
        """
        Pick a random stored level of the given size, or None when there is none.

        When ``complexity`` is given only levels stored with that complexity
        are considered.
        """
        candidates = [
            level for _, level in sorted(self._load().levels.items())
            if level.grid_size == grid_size
            and (complexity is None or level.complexity == complexity)
        ]
        if not candidates:
            return None
        level = self._rng.choice(candidates)
        return [stored.to_region() for stored in sorted(level.regions, key=lambda stored: stored.id)]

    def store_level(self, grid_size: int, regions: List[Region], complexity: Complexity = "medium") -> bool:
        """
        Add a level to the store.

        Returns:
            False if an equivalent layout is already stored, True otherwise
        """
        key = level_hash(grid_size, regions)
        document = self._load()
        if key in document.levels:
            return False

        document.levels[key] = StoredLevel(
            grid_size=grid_size,
            complexity=complexity,
            regions=[StoredRegion.from_region(region) for region in sorted(regions, key=lambda region: region.id)],
        )
        self._save(document)
        return True


def fetch_stored_state(
    store: Optional[LevelStore],
    grid_size: int,
    complexity: Complexity = "medium",
    verbose: bool = False,
) -> Optional[GameState]:
    """
    Build a game state from a stored level of the given size and complexity.

    An unreadable store counts as an empty one. The stored level has its
    uniqueness checked again.

    Returns:
        Game state with an empty board, or None when the store has nothing usable
    """
    if store is None:
        return None

    try:
        regions = store.fetch_candidate_level(grid_size, complexity)
    except (OSError, ValueError) as e:
        if verbose:
            print(f"Level store unavailable, generating instead: {e}")
        return None
    if regions is None:
        return None

    verified = has_unique_solution(grid_size, regions)
    if verbose:
        print(f"Loaded stored {grid_size}x{grid_size} {complexity} level ({'unique' if verified else 'not unique'})")
    return GameState.create(
        grid_size=grid_size,
        regions=regions,
        solution=[region.anchor for region in sorted(regions, key=lambda region: region.id)],
        verified=verified,
        complexity=complexity,
    )


def load_or_generate(
    store: Optional[LevelStore],
    grid_size: int,
    complexity: Complexity = "medium",
    max_attempts: Optional[int] = None,
    rng: Optional[random.Random] = None,
    verbose: bool = False,
) -> GameState:
    """
    Reuse a stored level when one exists, otherwise generate a new one.

    Only stored levels of the requested complexity are reused. A freshly
    generated level is stored only when it was verified.

    Args:
        store: Level store, or None to always generate
        grid_size: Board width and height
        complexity: Complexity of the level
        max_attempts: Generation attempt budget
        rng: Random source for generation
        verbose: If True, print progress

    Returns:
        Game state with an empty board
    """
    state = fetch_stored_state(store, grid_size, complexity, verbose=verbose)
    if state is not None:
        return state

    result = generate(
        grid_size=grid_size,
        complexity=complexity,
        max_attempts=max_attempts,
        rng=rng,
        verbose=verbose,
    )
    state = result.game_state

    if store is not None and result.verified:
        try:
            stored = store.store_level(grid_size, state.regions, complexity)
        except (OSError, ValueError) as e:
            if verbose:
                print(f"Could not store level: {e}")
        else:
            if verbose:
                print("Stored new level" if stored else "Level already in store")

    return state
