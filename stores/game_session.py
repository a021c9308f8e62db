import logging
import threading
from datetime import datetime
from typing import Any

from models import Player
from utils import now_utc

logger = logging.getLogger(__name__)


# Colors handed out to players, in join order.
PLAYER_COLORS = [
    "#2563eb", "#dc2626", "#16a34a", "#9333ea",
    "#ea580c", "#0891b2", "#c026d3", "#ca8a04",
]


class GameSession:
    """
    One collaborative game on a grid.

    Invariants:
    - `state` always has the grid's dimensions
    - pseudos are unique within the session
    - every mutation and snapshot is serialised by the session mutex

    The session does not know about the grid's cell kinds; rejecting writes
    to definition cells is the caller's job.
    """

    def __init__(
        self,
        session_id: str,
        grid_id: str,
        rows: int,
        cols: int,
        *,
        created_at: datetime | None = None,
    ):
        self.id = session_id
        self.grid_id = grid_id
        self.rows = rows
        self.cols = cols
        self.created_at = created_at or now_utc()
        self._players: dict[str, Player] = {}
        self._state: list[list[str]] = [["" for _ in range(cols)] for _ in range(rows)]
        self._lock = threading.Lock()

    # -------------------------------------------------
    # Players
    # -------------------------------------------------

    def add_player(self, pseudo: str) -> Player:
        """Add a player, or return the existing record for a known pseudo."""
        with self._lock:
            player = self._players.get(pseudo)
            if player is not None:
                return player
            player = Player(
                pseudo=pseudo,
                color=PLAYER_COLORS[len(self._players) % len(PLAYER_COLORS)],
                joined_at=now_utc(),
            )
            self._players[pseudo] = player
        logger.info(f"Player {pseudo!r} joined session {self.id}")
        return player

    def remove_player(self, pseudo: str) -> None:
        with self._lock:
            removed = self._players.pop(pseudo, None)
        if removed is not None:
            logger.info(f"Player {pseudo!r} left session {self.id}")

    def snapshot_players(self) -> dict[str, Player]:
        # Player records are frozen, so a shallow copy of the roster is enough.
        with self._lock:
            return dict(self._players)

    # -------------------------------------------------
    # Letters
    # -------------------------------------------------

    def set_cell(self, row: int, col: int, value: str) -> bool:
        """Write `value` at (row, col). Returns False when out of bounds."""
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            return False
        with self._lock:
            self._state[row][col] = value
        return True

    def snapshot_state(self) -> list[list[str]]:
        with self._lock:
            return [list(row) for row in self._state]

    def to_dict(self) -> dict[str, Any]:
        """Serialisable view of the session, built from snapshots."""
        return {
            "id": self.id,
            "grid_id": self.grid_id,
            "players": {pseudo: p.model_dump(mode="json") for pseudo, p in self.snapshot_players().items()},
            "state": self.snapshot_state(),
            "created_at": self.created_at.isoformat(),
        }
