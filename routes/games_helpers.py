"""
Game business logic helpers.

These functions encapsulate game operations and are called from the HTTP
routes (routes/games.py). They operate on the store, sessions and the
broadcaster, not on HTTP requests, and report problems by raising store
exceptions.
"""

from models import Player
from infrastructure import Broadcaster
from services import encode_event, player_joined_event, cell_update_event
from stores import (
	MemoryStore,
	GameSession,
	InvalidPseudo,
	InvalidLetter,
	DefinitionCell,
	OutOfBounds,
)
from utils import sanitize_pseudo, normalize_letter, is_valid_letter


def join_game(
	session: GameSession,
	broadcaster: Broadcaster,
	pseudo: str,
) -> Player:
	"""
	Add a player to a session and tell the other subscribers.

	Joining twice with the same pseudo returns the existing player.

	Raises:
		InvalidPseudo: if nothing is left of the pseudo after sanitising
	"""
	pseudo = sanitize_pseudo(pseudo)
	if not pseudo:
		raise InvalidPseudo("Pseudo invalide")

	player = session.add_player(pseudo)
	broadcaster.publish(session.id, encode_event(player_joined_event(player)))
	return player


def apply_move(
	store: MemoryStore,
	session: GameSession,
	broadcaster: Broadcaster,
	*,
	pseudo: str,
	row: int,
	col: int,
	value: str,
) -> str:
	"""
	Write a letter (or erase with "") and publish the update.

	Returns the normalised value that was written.

	Raises:
		InvalidLetter: if the value is neither empty nor a single letter A-Z
		DefinitionCell: if (row, col) is a clue cell
		OutOfBounds: if (row, col) is outside the grid
	"""
	value = normalize_letter(value)
	if not is_valid_letter(value):
		raise InvalidLetter("Valeur invalide : une lettre A-Z ou vide")

	grid = store.get_grid(session.grid_id)
	if grid is not None and grid.is_definition_cell(row, col):
		raise DefinitionCell("Case de définition")

	if not session.set_cell(row, col, value):
		raise OutOfBounds("Position hors limites")

	broadcaster.publish(session.id, encode_event(cell_update_event(row, col, value, pseudo)))
	return value


def session_with_grid(store: MemoryStore, session: GameSession) -> dict:
	"""Session view augmented with its grid, as served by GET /api/games/{id}."""
	data = session.to_dict()
	grid = store.get_grid(session.grid_id)
	data["grid"] = grid.to_dict() if grid is not None else None
	return data
