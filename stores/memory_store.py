import logging

from models import Grid
from utils import ReadWriteLock, generate_id, now_utc

from .exceptions import GridNotFound
from .game_session import GameSession

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    Process-local registry of grids and game sessions.

    Nothing survives a restart. A single readers-writer lock guards both
    maps; it is never held while calling into a session or the broadcaster.
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        self._grids: dict[str, Grid] = {}
        self._sessions: dict[str, GameSession] = {}

    # -------------------------------------------------
    # Grids
    # -------------------------------------------------

    def save_grid(self, grid: Grid) -> Grid:
        """Assign an id and creation time to `grid`, store it and return the stored copy."""
        stored = grid.model_copy(update={"id": generate_id(), "created_at": now_utc()})
        with self._lock.exclusive():
            self._grids[stored.id] = stored
        logger.info(f"Saved grid {stored.id} ({stored.rows}x{stored.cols})")
        return stored

    def get_grid(self, grid_id: str) -> Grid | None:
        with self._lock.shared():
            return self._grids.get(grid_id)

    def list_grids(self) -> list[Grid]:
        """Return all grids, most recent first.

        Grids sharing a timestamp keep their insertion order.
        """
        with self._lock.shared():
            grids = list(self._grids.values())
        return sorted(grids, key=lambda g: g.created_at, reverse=True)

    # -------------------------------------------------
    # Sessions
    # -------------------------------------------------

    def create_session(self, grid_id: str) -> GameSession:
        """Create an empty game on an existing grid.

        Raises:
            GridNotFound: If the grid does not exist.
        """
        grid = self.get_grid(grid_id)
        if grid is None:
            raise GridNotFound(f"grid not found: {grid_id}")

        session = GameSession(generate_id(), grid.id, grid.rows, grid.cols)
        with self._lock.exclusive():
            self._sessions[session.id] = session
        logger.info(f"Created session {session.id} on grid {grid.id}")
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        with self._lock.shared():
            return self._sessions.get(session_id)
