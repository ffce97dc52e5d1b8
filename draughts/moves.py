from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, List, Optional, Tuple

from .board import ALL_DIRS, DOWN_DIRS, EMPTY, NO_TILE, UP_DIRS, CheckerBoard
from .types import Direction, PlayerId, Tile


@dataclass(frozen=True)
class DraughtsMove:
    """A move as the successive tiles visited by the moving piece.

    Equality and hashing use the tiles only, so a move parsed from text matches
    the generated one.
    """

    tiles: Tuple[Tile, ...]
    is_capture: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.tiles) < 2:
            raise ValueError("A move needs a starting tile and at least one landing tile")

    @property
    def source(self) -> Tile:
        return self.tiles[0]

    @property
    def destination(self) -> Tile:
        return self.tiles[-1]

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def __getitem__(self, i: int) -> Tile:
        return self.tiles[i]

    def __str__(self) -> str:
        sep: str = 'x' if self.is_capture else '-'
        return sep.join(str(t) for t in self.tiles)


def parse_move_str(s: str) -> Optional[Tuple[Tile, ...]]:
    """Parse ``11-15`` or ``22x15x6`` into a tile sequence."""
    s = s.strip().lower().replace('x', '-').replace(' ', '')
    if not s:
        return None
    parts: List[str] = [p for p in s.split('-') if p]
    try:
        seq: List[int] = [int(p) for p in parts]
    except ValueError:
        return None
    if len(seq) < 2 or not all(x >= 1 for x in seq):
        return None
    return tuple(seq)


class MoveGenerator:
    """Generates legal moves for the pieces of one side on a board.

    Captures are mandatory: when any capture exists only captures are
    returned, each one extended to its maximal length. The board is never
    mutated during generation; pieces taken earlier in a chain are carried
    in an explicit ``captured`` set instead.
    """

    def __init__(self, board: CheckerBoard) -> None:
        self.board = board
        self.topology = board.topology

    @staticmethod
    def _directions(piece: int) -> List[Direction]:
        if abs(piece) == 2:
            return ALL_DIRS
        return UP_DIRS if piece > 0 else DOWN_DIRS

    def _gen_simple_moves(self, idx: Tile) -> List[DraughtsMove]:
        cells = self.board.cells
        moves: List[DraughtsMove] = []
        for d in self._directions(cells[idx]):
            nb = self.topology.neighbor(idx, d)
            if nb != NO_TILE and cells[nb] == EMPTY:
                moves.append(DraughtsMove((idx, nb)))
        return moves

    def _gen_captures(self, prefix: Tuple[Tile, ...],
                      captured: FrozenSet[Tile]) -> List[DraughtsMove]:
        """Maximal capture chains extending ``prefix``.

        Returns an empty list when ``prefix`` cannot be extended by a jump.
        """
        cells = self.board.cells
        origin: Tile = prefix[0]
        current: Tile = prefix[-1]
        piece: int = cells[origin]
        sequences: List[DraughtsMove] = []

        for d in self._directions(piece):
            mid = self.topology.neighbor(current, d)
            if mid == NO_TILE or mid in captured or cells[mid] * piece >= 0:
                continue
            end = self.topology.neighbor(mid, d)
            # the moving piece has left its origin tile
            if end == NO_TILE or (cells[end] != EMPTY and end != origin):
                continue
            extended = prefix + (end,)
            longer = self._gen_captures(extended, captured | {mid})
            if longer:
                sequences.extend(longer)
            else:
                sequences.append(DraughtsMove(extended, is_capture=True))
        return sequences

    def capture_moves(self, idx: Tile) -> List[DraughtsMove]:
        """All maximal capture chains for the piece on ``idx``."""
        return self._gen_captures((idx,), frozenset())

    def simple_moves(self, idx: Tile) -> List[DraughtsMove]:
        return self._gen_simple_moves(idx)

    def legal_moves(self, side: PlayerId) -> List[DraughtsMove]:
        pieces = self.board.piece_ids_of(side)
        captures: List[DraughtsMove] = []
        for i in pieces:
            captures.extend(self._gen_captures((i,), frozenset()))
        if captures:
            return captures
        quiets: List[DraughtsMove] = []
        for i in pieces:
            quiets.extend(self._gen_simple_moves(i))
        return quiets


# Convenience functional API

def legal_moves(board: CheckerBoard, side: PlayerId) -> List[DraughtsMove]:
    return MoveGenerator(board).legal_moves(side)
