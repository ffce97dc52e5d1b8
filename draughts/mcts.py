"""
Monte-Carlo Tree Search over any two-player :class:`~draughts.game.Game`.

Each iteration selects a leaf with the UCT tree policy, expands it with one
child per legal move, runs random playouts from it and adds the results to
every node on the selection path. Win credit is always counted for the side
to move at the root.
"""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from config import SearchSettings, get_search_settings
from .game import Game, resolve_winner
from .players import Player, RandomPlayer
from .types import Move, PlayerId

logger = logging.getLogger(__name__)


@dataclass
class RolloutResults:
    """Win counts per side over a number of playouts; a draw gives half a win to each."""

    win1: float = 0.0
    win2: float = 0.0
    n: int = 0

    def reset(self) -> None:
        self.win1 = 0.0
        self.win2 = 0.0
        self.n = 0

    def add(self, other: 'RolloutResults') -> None:
        self.win1 += other.win1
        self.win2 += other.win2
        self.n += other.n

    def update(self, winner: PlayerId) -> None:
        """Record one playout won by ``winner`` (PlayerId.NONE for a draw)."""
        if winner is PlayerId.ONE:
            self.win1 += 1.0
        elif winner is PlayerId.TWO:
            self.win2 += 1.0
        elif winner is PlayerId.NONE:
            self.win1 += 0.5
            self.win2 += 0.5
        else:
            raise ValueError(f"Not a playout outcome: {winner!r}")
        self.n += 1

    def nb_wins(self, player_id: PlayerId) -> float:
        if player_id is PlayerId.ONE:
            return self.win1
        if player_id is PlayerId.TWO:
            return self.win2
        return 0.0

    def nb_simulations(self) -> int:
        return self.n


def play_randomly_to_end(game: Game, player1: Optional[Player] = None,
                         player2: Optional[Player] = None) -> PlayerId:
    """Play ``game`` to its end in place and return the winner (NONE for a draw).

    A side to move without any legal move loses.
    """
    players = {
        PlayerId.ONE: player1 or RandomPlayer(),
        PlayerId.TWO: player2 or RandomPlayer(),
    }
    while True:
        winner = game.winner()
        if winner is not None:
            return winner
        side = game.player()
        if side is PlayerId.NONE:
            return PlayerId.NONE
        move = players[side].play(game)
        if move is None:
            return side.adversary()
        game.play(move)


def roll_out(game: Game, nb_runs: int, player: Optional[Player] = None) -> RolloutResults:
    """Run ``nb_runs`` playouts, each from a fresh clone of ``game``."""
    player = player or RandomPlayer()
    results = RolloutResults()
    for _ in range(nb_runs):
        results.update(play_randomly_to_end(game.clone(), player, player))
    return results


class EvalNode:
    """A node of the search tree.

    ``children`` is index-aligned with ``game.possible_moves()``; a node with
    no children is either unexpanded or terminal.
    """

    __slots__ = ('game', 'n', 'w', 'children')

    def __init__(self, game: Game) -> None:
        self.game: Game = game
        self.n: int = 0
        self.w: float = 0.0
        self.children: List[EvalNode] = []

    def is_leaf(self) -> bool:
        return not self.children

    def uct(self, parent_visits: int, exploration: float) -> float:
        """Upper Confidence Bound for Trees; unvisited nodes come first."""
        if self.n == 0:
            return math.inf
        return self.w / self.n + exploration * math.sqrt(math.log(max(parent_visits, 1)) / self.n)

    def score(self) -> float:
        """Estimated probability of winning through this node (0 when unvisited)."""
        if self.n == 0:
            return 0.0
        return self.w / self.n

    def update_stats(self, res: RolloutResults, player_id: PlayerId) -> None:
        self.n += res.nb_simulations()
        self.w += res.nb_wins(player_id)


class MonteCarloTreeSearch:
    """UCT search rooted at a copy of a game state."""

    def __init__(self, game: Game, settings: Optional[SearchSettings] = None,
                 rng: Optional[np.random.Generator] = None) -> None:
        settings = settings or get_search_settings()
        self.root: EvalNode = EvalNode(game.clone())
        # win credit is always counted for this side
        self.reference_player: PlayerId = self.root.game.player()
        self.exploration: float = settings.exploration_constant
        self.rollouts_per_leaf: int = settings.rollouts_per_leaf
        self.time_limit_ms: int = settings.time_limit_ms
        if rng is None:
            rng = np.random.default_rng(settings.seed)
        self.rollout_player: Player = RandomPlayer(rng)
        # total number of simulations run
        self.n_total: int = 0
        self._root_moves: Optional[List[Move]] = None

    def root_moves(self) -> List[Move]:
        if self._root_moves is None:
            self._root_moves = self.root.game.possible_moves()
        return self._root_moves

    def evaluate_tree_with_time_limit(self, time_limit_ms: Optional[int] = None) -> int:
        """Run iterations until the budget elapses or nothing is left to explore.

        Returns the number of iterations performed.
        """
        if time_limit_ms is None:
            time_limit_ms = self.time_limit_ms
        start = time.perf_counter()
        iterations = 0
        while (time.perf_counter() - start) * 1000.0 < time_limit_ms:
            iterations += 1
            if self.evaluate_tree_once():
                break

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        ratio = 100.0 * self.root.score()
        logger.info("Stopped search after %.0f ms (%d iterations). Root stats is %.1f/%d (%.2f%% wins for %s)",
                    elapsed_ms, iterations, self.root.w, self.root.n, ratio, self.reference_player.name)
        return iterations

    def evaluate_tree_once(self) -> bool:
        """One selection, expansion, simulation and backpropagation step.

        Returns True when the root is terminal and there is nothing to explore.
        """
        visited = self._select()
        node = visited[-1]

        terminal = resolve_winner(node.game) is not None
        if terminal and node is self.root:
            return True
        if not terminal:
            self._expand(node)

        res = roll_out(node.game, self.rollouts_per_leaf, self.rollout_player)
        self._backpropagate(visited, res)
        return False

    def _select(self) -> List[EvalNode]:
        node = self.root
        visited = [node]
        while node.children:
            node = self._best_child(node)
            visited.append(node)
        return visited

    def _best_child(self, node: EvalNode) -> EvalNode:
        # max() keeps the first of equal scores, so unvisited children go in move order
        return max(node.children, key=lambda child: child.uct(node.n, self.exploration))

    def _expand(self, node: EvalNode) -> None:
        for move in node.game.possible_moves():
            child_game = node.game.clone()
            child_game.play(move)
            node.children.append(EvalNode(child_game))

    def _backpropagate(self, visited: List[EvalNode], res: RolloutResults) -> None:
        for n in visited:
            n.update_stats(res, self.reference_player)
        self.n_total += res.nb_simulations()

    def get_best_move(self) -> Optional[Move]:
        """The root move with the best win ratio among visited children.

        Falls back to the first legal move when no child has statistics yet,
        and returns None when the root side has no legal move.
        """
        moves = self.root_moves()
        if not moves:
            return None
        best_index: Optional[int] = None
        best_score = -math.inf
        for i, child in enumerate(self.root.children):
            if child.n == 0:
                continue
            score = child.score()
            if score > best_score:
                best_score = score
                best_index = i
        if best_index is None:
            return moves[0]
        return moves[best_index]

    def stats(self) -> str:
        """Per-move scores and raw win/visit counts of the root children."""
        lines = [f"MCTS with {self.n_total} evals"]
        for move, node in zip(self.root_moves(), self.root.children):
            lines.append(f"{move} : {node.score():.4f} ({node.w:g}/{node.n})")
        return '\n'.join(lines) + '\n'
