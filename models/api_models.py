"""Pydantic request models for the FastAPI endpoints.

Keep transport concerns (validation, docs) here and keep business/domain
types in `models.domain_models`.
"""
from __future__ import annotations

from pydantic import BaseModel, field_validator


class CreateGameRequest(BaseModel):
	grid_id: str


class JoinGameRequest(BaseModel):
	pseudo: str


class MoveRequest(BaseModel):
	"""Missing coordinates default to 0; a null pseudo or value reads as empty (erase)."""
	pseudo: str = ""
	row: int = 0
	col: int = 0
	value: str = ""

	@field_validator("pseudo", "value", mode="before")
	@classmethod
	def null_as_empty(cls, v):
		return "" if v is None else v


__all__ = [
	"CreateGameRequest",
	"JoinGameRequest",
	"MoveRequest",
]
