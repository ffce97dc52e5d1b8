"""
Player strategies: uniform random, Monte-Carlo tree search and human input.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from config import SearchSettings, get_search_settings
from .game import Game
from .moves import parse_move_str
from .types import Move

logger = logging.getLogger(__name__)


class Player(ABC):
    """Abstract interface for anything that picks a move."""

    @abstractmethod
    def play(self, game: Game) -> Optional[Move]:  # pragma: no cover
        """Choose a move for the side to move, or None when there is none."""
        raise NotImplementedError


class RandomPlayer(Player):
    """Picks a legal move uniformly at random."""

    def __init__(self, rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None) -> None:
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng(seed)

    def play(self, game: Game) -> Optional[Move]:
        moves = game.possible_moves()
        if not moves:
            return None
        return moves[int(self.rng.integers(len(moves)))]


class MCTSPlayer(Player):
    """Builds a fresh search tree every turn and plays its best move."""

    def __init__(self, time_limit_ms: Optional[int] = None,
                 settings: Optional[SearchSettings] = None) -> None:
        self.settings: SearchSettings = settings or get_search_settings()
        self.time_limit_ms: int = time_limit_ms if time_limit_ms is not None else self.settings.time_limit_ms
        self.rng = np.random.default_rng(self.settings.seed)

    def play(self, game: Game) -> Optional[Move]:
        # Local import to avoid a circular import with the rollout policy
        from .mcts import MonteCarloTreeSearch

        mcts = MonteCarloTreeSearch(game, settings=self.settings, rng=self.rng)
        mcts.evaluate_tree_with_time_limit(self.time_limit_ms)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", mcts.stats())
        return mcts.get_best_move()


class HumanPlayer(Player):
    """Reads moves in ``11-15`` / ``22x15`` notation until a legal one is given."""

    def __init__(self, input_fn: Callable[[str], str] = input,
                 output_fn: Callable[[str], None] = print) -> None:
        self.input_fn = input_fn
        self.output_fn = output_fn

    def play(self, game: Game) -> Optional[Move]:
        moves = game.possible_moves()
        if not moves:
            return None
        self.output_fn("Possible moves: " + ", ".join(str(m) for m in moves))
        while True:
            tiles = parse_move_str(self.input_fn("Your move: "))
            move = game.find_move(tiles) if tiles is not None else None
            if move is not None:
                return move
            self.output_fn("Invalid move, try again.")


def get_player(kind: str, time_limit_ms: Optional[int] = None,
               seed: Optional[int] = None) -> Player:
    """Factory for the players available from the command line."""
    kind = kind.lower()
    if kind == 'human':
        return HumanPlayer()
    if kind == 'random':
        return RandomPlayer(seed=seed)
    if kind == 'mcts':
        settings = get_search_settings()
        if seed is not None:
            settings = settings.model_copy(update={'seed': seed})
        return MCTSPlayer(time_limit_ms, settings)
    raise ValueError(f"Unknown player kind: {kind!r}")
