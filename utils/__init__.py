"""Utility helpers used across the project.

Make commonly used helpers available at the package level for convenience.

Exports:
- id helpers: `generate_id`
- lock helpers: `ReadWriteLock`
- time helpers: `now_utc`
- validation helpers: `sanitize_pseudo`, `normalize_letter`, `is_valid_letter`, `LETTER_RE`
"""

from .ids import generate_id
from .locks import ReadWriteLock
from .time import now_utc
from .validation import sanitize_pseudo, normalize_letter, is_valid_letter, LETTER_RE

__all__ = [
	"generate_id",
	"ReadWriteLock",
	"now_utc",
	"sanitize_pseudo",
	"normalize_letter",
	"is_valid_letter",
	"LETTER_RE",
]
