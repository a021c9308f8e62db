"""Domain-level models used by services and stores.

Grids and players are pydantic models so vision output can be validated on
the way in and serialised on the way out. Events are lightweight
`TypedDict`s that map directly to the JSON pushed to subscribers.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field, model_validator


MAX_DEFINITIONS_PER_CELL = 2


class Direction(str, Enum):
	RIGHT = "right"
	DOWN = "down"


class Definition(BaseModel):
	model_config = ConfigDict(frozen=True)

	text: str
	direction: Direction


class Cell(BaseModel):
	"""A grid cell: a clue cell (`black`) or a blank letter cell."""
	model_config = ConfigDict(frozen=True)

	black: bool = False
	definitions: list[Definition] | None = None

	@model_validator(mode="after")
	def check_definitions(self) -> "Cell":
		definitions = self.definitions or []
		if not self.black and definitions:
			raise ValueError("a letter cell cannot carry definitions")
		if len(definitions) > MAX_DEFINITIONS_PER_CELL:
			raise ValueError(f"a definition cell carries at most {MAX_DEFINITIONS_PER_CELL} definitions")
		return self

	@property
	def is_definition(self) -> bool:
		return self.black


class Grid(BaseModel):
	"""Crossword structure extracted from an image. Immutable once stored."""
	model_config = ConfigDict(frozen=True)

	id: str = ""
	rows: int = Field(gt=0)
	cols: int = Field(gt=0)
	cells: list[list[Cell]]
	created_at: datetime | None = None

	@model_validator(mode="after")
	def check_dimensions(self) -> "Grid":
		if len(self.cells) != self.rows:
			raise ValueError(f"expected {self.rows} cell rows, got {len(self.cells)}")
		for r, row in enumerate(self.cells):
			if len(row) != self.cols:
				raise ValueError(f"row {r}: expected {self.cols} cells, got {len(row)}")
		return self

	def in_bounds(self, row: int, col: int) -> bool:
		return 0 <= row < self.rows and 0 <= col < self.cols

	def is_definition_cell(self, row: int, col: int) -> bool:
		return self.in_bounds(row, col) and self.cells[row][col].is_definition

	def to_dict(self) -> dict[str, Any]:
		return self.model_dump(mode="json", exclude_none=True)


class Player(BaseModel):
	model_config = ConfigDict(frozen=True)

	pseudo: str
	color: str
	joined_at: datetime


# --- Events pushed to stream subscribers ---

class GameStateEvent(TypedDict):
	type: Literal["game_state"]
	state: list[list[str]]
	players: dict[str, Player]


class PlayerJoinedEvent(TypedDict):
	type: Literal["player_joined"]
	pseudo: str
	color: str


class PlayerLeftEvent(TypedDict):
	type: Literal["player_left"]
	pseudo: str


class CellUpdateEvent(TypedDict):
	type: Literal["cell_update"]
	row: int
	col: int
	value: str
	pseudo: str


__all__ = [
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
