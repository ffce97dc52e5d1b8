"""
Checkerboard topology and occupancy.

Tiles are numbered in Manoury order: 1..N over the dark squares, row by row
from the top of the board. The blacks start on the top rows and move down,
the whites start on the bottom rows and move up.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, List, Optional, Tuple

import numpy as np

from config import get_ui_settings
from .types import Direction, PlayerId, Position, Tile

# Piece codes (positive for the whites, negative for the blacks)
EMPTY = 0
WHITE_MAN = 1
WHITE_KING = 2
BLACK_MAN = -1
BLACK_KING = -2

NO_TILE: Tile = 0

UP_LEFT: Direction = (-1, -1)
UP_RIGHT: Direction = (-1, 1)
DOWN_LEFT: Direction = (1, -1)
DOWN_RIGHT: Direction = (1, 1)

UP_DIRS: List[Direction] = [UP_LEFT, UP_RIGHT]
DOWN_DIRS: List[Direction] = [DOWN_LEFT, DOWN_RIGHT]
ALL_DIRS: List[Direction] = UP_DIRS + DOWN_DIRS

_ASCII_SYMBOLS: Dict[int, str] = {WHITE_MAN: 'w', WHITE_KING: 'W', BLACK_MAN: 'b', BLACK_KING: 'B'}
_UNICODE_SYMBOLS: Dict[int, str] = {WHITE_MAN: '⛀', WHITE_KING: '⛁', BLACK_MAN: '⛂', BLACK_KING: '⛃'}


class BoardTopology:
    """Static geometry of a size x size board: tile numbering and diagonal neighbours."""

    def __init__(self, size: int = 8) -> None:
        if size < 4 or size % 2:
            raise ValueError(f"Board size must be an even number >= 4, got {size}")
        self.size: int = size
        self.tiles: int = size * size // 2
        self._rc_of: List[Optional[Position]] = [None] * (self.tiles + 1)
        self.idx_map: Dict[Position, Tile] = {}
        self._build_mappings()
        self._neighbors: Dict[Direction, List[Tile]] = {
            d: [NO_TILE] + [self._compute_neighbor(i, d) for i in range(1, self.tiles + 1)]
            for d in ALL_DIRS
        }

    def _build_mappings(self) -> None:
        i: int = 1
        for r in range(self.size):
            for c in range(self.size):
                if (r + c) % 2 == 1:
                    self._rc_of[i] = (r, c)
                    self.idx_map[(r, c)] = i
                    i += 1

    def _compute_neighbor(self, idx: Tile, direction: Direction) -> Tile:
        r, c = self.rc(idx)
        nr, nc = r + direction[0], c + direction[1]
        if 0 <= nr < self.size and 0 <= nc < self.size:
            return self.idx_map[(nr, nc)]
        return NO_TILE

    def rc(self, idx: Tile) -> Position:
        """Convert a tile number to row/column coordinates."""
        if not 1 <= idx <= self.tiles:
            raise IndexError(f"Tile {idx} is outside 1..{self.tiles}")
        return self._rc_of[idx]  # type: ignore[return-value]

    def neighbor(self, idx: Tile, direction: Direction) -> Tile:
        """Diagonal neighbour of a tile, or NO_TILE when off the board."""
        if idx == NO_TILE:
            return NO_TILE
        return self._neighbors[direction][idx]

    def square_between(self, a: Tile, b: Tile) -> Tile:
        """The tile jumped over when going from a to b, or NO_TILE for a simple step."""
        ra, ca = self.rc(a)
        rb, cb = self.rc(b)
        if abs(ra - rb) == 2 and abs(ca - cb) == 2:
            return self.idx_map[((ra + rb) // 2, (ca + cb) // 2)]
        return NO_TILE

    def in_top_row(self, idx: Tile) -> bool:
        return self.rc(idx)[0] == 0

    def in_bottom_row(self, idx: Tile) -> bool:
        return self.rc(idx)[0] == self.size - 1


@lru_cache(maxsize=None)
def get_topology(size: int = 8) -> BoardTopology:
    """Shared topology per board size; it is never mutated."""
    return BoardTopology(size)


class CheckerBoard:
    """Occupancy of every tile of a board (index 0 unused)."""

    def __init__(self, size: int = 8, setup: bool = True) -> None:
        self.topology: BoardTopology = get_topology(size)
        self.cells: List[int] = [EMPTY] * (self.topology.tiles + 1)
        if setup:
            self._setup()

    @classmethod
    def empty(cls, size: int = 8) -> 'CheckerBoard':
        return cls(size, setup=False)

    def _setup(self) -> None:
        """Initial position: (size - 2) / 2 rows of men per side."""
        rows = (self.size - 2) // 2
        for i in range(1, self.topology.tiles + 1):
            r, _ = self.topology.rc(i)
            if r < rows:
                self.cells[i] = BLACK_MAN
            elif r >= self.size - rows:
                self.cells[i] = WHITE_MAN

    @property
    def size(self) -> int:
        return self.topology.size

    def clone(self) -> 'CheckerBoard':
        other = CheckerBoard.__new__(CheckerBoard)
        other.topology = self.topology
        other.cells = self.cells.copy()
        return other

    # ----------------
    # Occupancy checks
    # ----------------
    def get(self, idx: Tile) -> int:
        return self.cells[idx]

    def place(self, idx: Tile, piece: int) -> None:
        """Put a piece code on a tile (used to build positions)."""
        self.topology.rc(idx)
        self.cells[idx] = piece

    def is_empty(self, idx: Tile) -> bool:
        return self.cells[idx] == EMPTY

    def is_white(self, idx: Tile) -> bool:
        return self.cells[idx] > 0

    def is_black(self, idx: Tile) -> bool:
        return self.cells[idx] < 0

    def is_king(self, idx: Tile) -> bool:
        return abs(self.cells[idx]) == 2

    def belongs_to(self, idx: Tile, side: PlayerId) -> bool:
        if side is PlayerId.ONE:
            return self.cells[idx] > 0
        if side is PlayerId.TWO:
            return self.cells[idx] < 0
        return False

    def in_promotion_row(self, idx: Tile, side: PlayerId) -> bool:
        """Whites promote on the top row, blacks on the bottom row."""
        if side is PlayerId.ONE:
            return self.topology.in_top_row(idx)
        if side is PlayerId.TWO:
            return self.topology.in_bottom_row(idx)
        return False

    def piece_ids_of(self, side: PlayerId) -> List[Tile]:
        """Tiles holding a piece of the given side, in increasing order."""
        return [i for i in range(1, self.topology.tiles + 1) if self.belongs_to(i, side)]

    def count_pieces(self) -> Tuple[int, int, int, int]:
        """Count pieces on the board.

        Returns:
            Tuple of (white_pieces, black_pieces, white_kings, black_kings)
        """
        cells = self.cells[1:]
        whites: int = sum(1 for v in cells if v > 0)
        blacks: int = sum(1 for v in cells if v < 0)
        wk: int = sum(1 for v in cells if v == WHITE_KING)
        bk: int = sum(1 for v in cells if v == BLACK_KING)
        return whites, blacks, wk, bk

    # --------
    # Mutators
    # --------
    def move_piece(self, src: Tile, dst: Tile) -> None:
        assert self.cells[src] != EMPTY, f"no piece on tile {src}"
        assert self.cells[dst] == EMPTY, f"tile {dst} is occupied"
        self.cells[dst] = self.cells[src]
        self.cells[src] = EMPTY

    def remove_piece(self, idx: Tile) -> None:
        assert self.cells[idx] != EMPTY, f"no piece on tile {idx}"
        self.cells[idx] = EMPTY

    def crown_piece(self, idx: Tile) -> None:
        v = self.cells[idx]
        assert v != EMPTY, f"no piece on tile {idx}"
        self.cells[idx] = WHITE_KING if v > 0 else BLACK_KING

    # ---------
    # Rendering
    # ---------
    def as_array(self) -> np.ndarray:
        """The board as a size x size grid of piece codes (light squares are 0)."""
        grid = np.zeros((self.size, self.size), dtype=np.int8)
        for (r, c), i in self.topology.idx_map.items():
            grid[r, c] = self.cells[i]
        return grid

    def board_view(self, use_unicode: Optional[bool] = None,
                   show_indices: Optional[bool] = None) -> str:
        """Human-readable board, one text line per row."""
        ui = get_ui_settings()
        if use_unicode is None:
            use_unicode = ui.use_unicode
        if show_indices is None:
            show_indices = ui.show_indices
        symbols = _UNICODE_SYMBOLS if use_unicode else _ASCII_SYMBOLS
        width = len(str(self.topology.tiles))
        grid = self.as_array()

        lines: List[str] = []
        for r in range(self.size):
            cells: List[str] = []
            for c in range(self.size):
                idx = self.topology.idx_map.get((r, c))
                if idx is None:
                    cells.append(' ' * width)
                elif grid[r, c] == EMPTY:
                    cells.append((str(idx) if show_indices else '.').rjust(width))
                else:
                    cells.append(symbols[int(grid[r, c])].rjust(width))
            lines.append('|' + ' '.join(cells) + '|')
        return '\n'.join(lines) + '\n'

    def __str__(self) -> str:
        """PDN-style position body, e.g. ``W21,22,K5:B1,2``."""
        def side(code: str, pieces: List[Tile]) -> str:
            return code + ','.join(('K' if self.is_king(i) else '') + str(i) for i in pieces)

        return side('W', self.piece_ids_of(PlayerId.ONE)) + ':' + side('B', self.piece_ids_of(PlayerId.TWO))
