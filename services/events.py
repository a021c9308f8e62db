"""Builders for the JSON events pushed to stream subscribers.

Every event is a dict with a `type` discriminator; `encode_event` turns it
into the string carried by a single SSE `data:` frame.
"""
import json

from fastapi.encoders import jsonable_encoder

from models import (
	Player,
	GameStateEvent,
	PlayerJoinedEvent,
	PlayerLeftEvent,
	CellUpdateEvent,
)
from stores import GameSession


def game_state_event(session: GameSession) -> GameStateEvent:
	return {
		"type": "game_state",
		"state": session.snapshot_state(),
		"players": session.snapshot_players(),
	}


def player_joined_event(player: Player) -> PlayerJoinedEvent:
	return {"type": "player_joined", "pseudo": player.pseudo, "color": player.color}


def player_left_event(pseudo: str) -> PlayerLeftEvent:
	return {"type": "player_left", "pseudo": pseudo}


def cell_update_event(row: int, col: int, value: str, pseudo: str) -> CellUpdateEvent:
	return {"type": "cell_update", "row": row, "col": col, "value": value, "pseudo": pseudo}


def encode_event(event: dict) -> str:
	"""Serialise an event to compact JSON (single line, safe for SSE)."""
	return json.dumps(jsonable_encoder(event), ensure_ascii=False, separators=(",", ":"))
