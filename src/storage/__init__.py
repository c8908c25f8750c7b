"""Level persistence and background preparation."""

from .level_store import (
    StoredPosition,
    StoredRegion,
    StoredLevel,
    LevelStore,
    JsonLevelStore,
    level_hash,
    fetch_stored_state,
    load_or_generate,
)
from .preloader import LevelPreloader, DEFAULT_STORE_RETRIES

__all__ = [
    # Store
    "StoredPosition",
    "StoredRegion",
    "StoredLevel",
    "LevelStore",
    "JsonLevelStore",
    "level_hash",
    "fetch_stored_state",
    "load_or_generate",
    # Preloading
    "LevelPreloader",
    "DEFAULT_STORE_RETRIES",
]
