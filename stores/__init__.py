# Store and game session
from .memory_store import MemoryStore
from .game_session import GameSession, PLAYER_COLORS

# Exceptions
from .exceptions import (
    StoreError,
    GridNotFound,
    GameStoreError,
    InvalidPseudo,
    InvalidMove,
    InvalidLetter,
    DefinitionCell,
    OutOfBounds,
)

__all__ = [
    "MemoryStore",
    "GameSession",
    "PLAYER_COLORS",
    # Exceptions
    "StoreError",
    "GridNotFound",
    "GameStoreError",
    "InvalidPseudo",
    "InvalidMove",
    "InvalidLetter",
    "DefinitionCell",
    "OutOfBounds",
    # Runtime singleton
    "get_store",
]


# Runtime singleton. State lives as long as the process.
from typing import Optional

store: Optional[MemoryStore] = None


def get_store() -> MemoryStore:
    """Get the process-wide store, creating it on first use."""
    global store
    if store is None:
        store = MemoryStore()
    return store
