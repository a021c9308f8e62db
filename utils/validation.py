"""Validation and sanitization helpers.

This module provides the lightweight input normalisation used by route
handlers: player pseudos and letters written into the grid.
"""
import regex as re

import config


# A letter cell holds exactly one unaccented uppercase Latin letter.
LETTER_RE = re.compile(r"[A-Z]")

# Control and format characters never belong in a displayed name.
CONTROL_CHARS_RE = re.compile(r"[\p{Cc}\p{Cf}]", flags=re.UNICODE)


def sanitize_pseudo(s: str | None, max_length: int = config.PSEUDO_MAX_LENGTH) -> str:
	"""Trim surrounding whitespace and cut to `max_length` codepoints.

	Control characters are removed first. Returns an empty string when
	nothing usable is left.
	"""
	if not s:
		return ""
	s = CONTROL_CHARS_RE.sub("", s).strip()
	if len(s) > max_length:
		s = s[:max_length]
	return s


def normalize_letter(value: str | None) -> str:
	"""Uppercase and trim a submitted cell value."""
	if not value:
		return ""
	return value.strip().upper()


def is_valid_letter(value: str) -> bool:
	"""Return True if `value` may be written into a letter cell.

	The empty string is accepted and erases the cell.
	"""
	if value == "":
		return True
	return LETTER_RE.fullmatch(value) is not None
