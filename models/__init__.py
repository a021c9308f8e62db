"""Data models used by the application.

Split into:
- `api_models`: Pydantic models used for request validation
- `domain_models`: grids, players and the events pushed to subscribers

Import submodules to make them available as `models.api_models`.
"""

from . import api_models, domain_models

from .api_models import (
	CreateGameRequest,
	JoinGameRequest,
	MoveRequest,
)

from .domain_models import (
	Direction,
	Definition,
	Cell,
	Grid,
	Player,
	GameStateEvent,
	PlayerJoinedEvent,
	PlayerLeftEvent,
	CellUpdateEvent,
)

__all__ = [
	# submodules
	"api_models",
	"domain_models",
	# api models
	"CreateGameRequest",
	"JoinGameRequest",
	"MoveRequest",
	# domain models
	"Direction",
	"Definition",
	"Cell",
	"Grid",
	"Player",
	"GameStateEvent",
	"PlayerJoinedEvent",
	"PlayerLeftEvent",
	"CellUpdateEvent",
]
