"""Draughts package: English draughts rules and a Monte-Carlo tree search player.

Usage examples:
    from draughts import EnglishDraughts, MonteCarloTreeSearch
    from draughts import RandomPlayer, MCTSPlayer
"""
from __future__ import annotations

from .types import PlayerId, Move, Tile
from .errors import DraughtsError, InvalidMoveError
from .board import CheckerBoard, BoardTopology, get_topology
from .moves import DraughtsMove, MoveGenerator, legal_moves, parse_move_str
from .game import Game, EnglishDraughts, resolve_winner
from .players import Player, RandomPlayer, MCTSPlayer, HumanPlayer, get_player
from .mcts import (
    EvalNode,
    MonteCarloTreeSearch,
    RolloutResults,
    play_randomly_to_end,
    roll_out,
)

__all__ = [
    "PlayerId", "Move", "Tile",
    "DraughtsError", "InvalidMoveError",
    "CheckerBoard", "BoardTopology", "get_topology",
    "DraughtsMove", "MoveGenerator", "legal_moves", "parse_move_str",
    "Game", "EnglishDraughts", "resolve_winner",
    "Player", "RandomPlayer", "MCTSPlayer", "HumanPlayer", "get_player",
    "EvalNode", "MonteCarloTreeSearch", "RolloutResults", "play_randomly_to_end", "roll_out",
]
