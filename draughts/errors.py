"""Exceptions raised by the draughts engine."""
from __future__ import annotations


class DraughtsError(Exception):
    """Base class for engine errors."""


class InvalidMoveError(DraughtsError, ValueError):
    """Raised when a move outside the current legal move list is played."""
