"""
Two-player turn-based game interface and its English draughts implementation.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from config import GameRulesSettings, get_game_rules
from .board import NO_TILE, CheckerBoard
from .errors import InvalidMoveError
from .moves import DraughtsMove, MoveGenerator
from .types import Move, PlayerId, Tile


class Game(ABC):
    """Capabilities the search needs from a game state."""

    @abstractmethod
    def possible_moves(self) -> List[Move]:  # pragma: no cover
        """Legal moves for the side to move (empty when it is blocked)."""
        raise NotImplementedError

    @abstractmethod
    def play(self, move: Move) -> None:  # pragma: no cover
        """Apply a move returned by :meth:`possible_moves` in place."""
        raise NotImplementedError

    @abstractmethod
    def player(self) -> PlayerId:  # pragma: no cover
        raise NotImplementedError

    @abstractmethod
    def winner(self) -> Optional[PlayerId]:  # pragma: no cover
        """The winning side, PlayerId.NONE for a draw, or None while undecided."""
        raise NotImplementedError

    @abstractmethod
    def clone(self) -> 'Game':  # pragma: no cover
        raise NotImplementedError

    def find_move(self, tiles: Sequence[Tile]) -> Optional[Move]:
        """The legal move visiting exactly ``tiles``, if any."""
        wanted = tuple(tiles)
        for move in self.possible_moves():
            if tuple(move) == wanted:
                return move
        return None

    def player_name(self, player_id: PlayerId) -> str:
        return {PlayerId.ONE: "Player one", PlayerId.TWO: "Player two"}.get(player_id, "Nobody")

    def view(self) -> str:
        return str(self)


def resolve_winner(game: Game) -> Optional[PlayerId]:
    """Like ``game.winner()``, but a side to move without legal moves loses."""
    winner = game.winner()
    if winner is not None:
        return winner
    if game.player() is PlayerId.NONE:
        return PlayerId.NONE
    if not game.possible_moves():
        return game.player().adversary()
    return None


class EnglishDraughts(Game):
    """English draughts on a size x size board.

    PlayerId.ONE plays the whites and moves first, PlayerId.TWO the blacks.
    """

    def __init__(self, board_size: Optional[int] = None,
                 rules: Optional[GameRulesSettings] = None) -> None:
        rules = rules or get_game_rules()
        size = board_size if board_size is not None else rules.board_size
        self.board: CheckerBoard = CheckerBoard(size)
        self.player_id: PlayerId = PlayerId.ONE
        # incremented after every move
        self.nb_turn: int = 1
        # consecutive king moves without any capture
        self.nb_king_moves_without_capture: int = 0
        self.draw_threshold: int = rules.draw_after_king_moves
        self._moves_cache: Optional[List[DraughtsMove]] = None

    @classmethod
    def from_board(cls, board: CheckerBoard, player_id: PlayerId = PlayerId.ONE,
                   rules: Optional[GameRulesSettings] = None) -> 'EnglishDraughts':
        """Start a game from an arbitrary position."""
        game = cls(board.size, rules)
        game.board = board.clone()
        game.player_id = player_id
        return game

    def clone(self) -> 'EnglishDraughts':
        other = EnglishDraughts.__new__(EnglishDraughts)
        other.board = self.board.clone()
        other.player_id = self.player_id
        other.nb_turn = self.nb_turn
        other.nb_king_moves_without_capture = self.nb_king_moves_without_capture
        other.draw_threshold = self.draw_threshold
        # moves are immutable and the list is never handed out
        other._moves_cache = self._moves_cache
        return other

    def _legal_moves(self) -> List[DraughtsMove]:
        if self._moves_cache is None:
            if self.player_id is PlayerId.NONE:
                self._moves_cache = []
            else:
                self._moves_cache = MoveGenerator(self.board).legal_moves(self.player_id)
        return self._moves_cache

    def possible_moves(self) -> List[DraughtsMove]:
        return list(self._legal_moves())

    def find_move(self, tiles: Sequence[Tile]) -> Optional[DraughtsMove]:
        """The legal move visiting exactly ``tiles``, if any."""
        wanted = tuple(tiles)
        for move in self._legal_moves():
            if move.tiles == wanted:
                return move
        return None

    def play(self, move: DraughtsMove) -> None:
        if self.player_id is PlayerId.NONE:
            raise InvalidMoveError("Nobody is to move")
        legal = self._legal_moves()
        try:
            move = legal[legal.index(move)]
        except ValueError:
            raise InvalidMoveError(
                f"{move} is not a legal move for {self.player_name(self.player_id)}") from None

        topology = self.board.topology
        was_king = self.board.is_king(move.source)
        captured = False
        for src, dst in zip(move.tiles, move.tiles[1:]):
            self.board.move_piece(src, dst)
            taken = topology.square_between(src, dst)
            if taken != NO_TILE:
                self.board.remove_piece(taken)
                captured = True

        dest = move.destination
        if not self.board.is_king(dest) and self.board.in_promotion_row(dest, self.player_id):
            self.board.crown_piece(dest)

        if captured:
            self.nb_king_moves_without_capture = 0
        elif was_king:
            self.nb_king_moves_without_capture += 1
        else:
            self.nb_king_moves_without_capture = 0

        self.player_id = self.player_id.adversary()
        self.nb_turn += 1
        self._moves_cache = None

    def player(self) -> PlayerId:
        return self.player_id

    def winner(self) -> Optional[PlayerId]:
        """Victory when the adversary has no pieces left, draw after too many king moves."""
        whites, blacks, _, _ = self.board.count_pieces()
        if blacks == 0:
            return PlayerId.ONE
        if whites == 0:
            return PlayerId.TWO
        if self.nb_king_moves_without_capture >= self.draw_threshold:
            return PlayerId.NONE
        return None

    def player_name(self, player_id: PlayerId) -> str:
        if player_id is PlayerId.ONE:
            return "Player with the whites"
        if player_id is PlayerId.TWO:
            return "Player with the blacks"
        return "Nobody"

    def view(self) -> str:
        return (self.board.board_view()
                + f"Turn #{self.nb_turn}. {self.player_name(self.player_id)} plays.\n")

    def __str__(self) -> str:
        side = 'W' if self.player_id is PlayerId.ONE else 'B'
        return f"{self.nb_turn}. {side}:{self.board}"
