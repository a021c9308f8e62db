"""
Shared exception definitions for the store and the game sessions it holds.

Hierarchy:
- StoreError (base for all store exceptions)
  - GridNotFound
  - GameStoreError (errors raised while mutating a game)
    - InvalidPseudo
    - InvalidMove
      - InvalidLetter, DefinitionCell, OutOfBounds
"""


# =========================
# Base exception
# =========================

class StoreError(Exception):
    """Base exception for all store-related errors."""


class GridNotFound(StoreError):
    pass


# =========================
# Game exceptions
# =========================

class GameStoreError(StoreError):
    """Base exception for errors raised while mutating a game."""


class InvalidPseudo(GameStoreError):
    pass


class InvalidMove(GameStoreError):
    pass


class InvalidLetter(InvalidMove):
    pass


class DefinitionCell(InvalidMove):
    pass


class OutOfBounds(InvalidMove):
    pass
