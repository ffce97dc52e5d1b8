"""
Type definitions and protocols shared by the draughts engine and the search.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterator, Protocol, Tuple

# Basic type aliases
Tile = int                   # Manoury tile number, 1..N
Position = Tuple[int, int]   # (row, col) coordinates, row 0 at the top
Direction = Tuple[int, int]  # (d_row, d_col) diagonal step


class PlayerId(Enum):
    """Identifier of a side. NONE doubles as "nobody to move" and "draw"."""

    ONE = 1   # the whites, bottom of the board, first to move
    TWO = 2   # the blacks, top of the board
    NONE = 0

    def adversary(self) -> 'PlayerId':
        if self is PlayerId.ONE:
            return PlayerId.TWO
        if self is PlayerId.TWO:
            return PlayerId.ONE
        return PlayerId.NONE


class Move(Protocol):
    """An opaque move: an ordered sequence of tile numbers with a display form."""

    def __iter__(self) -> Iterator[Tile]:
        ...

    def __len__(self) -> int:
        ...

    def __str__(self) -> str:
        ...
