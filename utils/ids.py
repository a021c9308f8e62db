"""Identifier generation for grids and game sessions."""
import secrets


ID_BYTES = 8


def generate_id() -> str:
	"""Return a short opaque identifier (16 hex characters)."""
	return secrets.token_hex(ID_BYTES)
