import math

import numpy as np
import pytest

from config import GameRulesSettings, SearchSettings
from draughts.board import BLACK_MAN, WHITE_KING, WHITE_MAN, CheckerBoard
from draughts.game import EnglishDraughts, resolve_winner
from draughts.mcts import (
    EvalNode, MonteCarloTreeSearch, RolloutResults, play_randomly_to_end, roll_out,
)
from draughts.players import RandomPlayer
from draughts.types import PlayerId

# Helpers

def make_game(pieces, player=PlayerId.ONE, rules=None):
    board = CheckerBoard.empty()
    for idx, value in pieces.items():
        board.place(idx, value)
    return EnglishDraughts.from_board(board, player, rules)


def make_search(game, **overrides):
    settings = SearchSettings(seed=1234, **overrides)
    return MonteCarloTreeSearch(game, settings=settings)


def walk(node):
    yield node
    for child in node.children:
        yield from walk(child)


# RolloutResults

def test_rollout_results_update_and_add():
    res = RolloutResults()
    res.update(PlayerId.ONE)
    res.update(PlayerId.NONE)
    res.update(PlayerId.TWO)
    assert (res.win1, res.win2, res.n) == (1.5, 1.5, 3)
    assert res.nb_wins(PlayerId.ONE) == 1.5
    assert res.nb_wins(PlayerId.NONE) == 0.0

    other = RolloutResults(win1=2.0, win2=0.0, n=2)
    res.add(other)
    assert (res.win1, res.win2, res.nb_simulations()) == (3.5, 1.5, 5)
    res.reset()
    assert (res.win1, res.win2, res.n) == (0.0, 0.0, 0)


def test_rollout_results_rejects_unknown_outcome():
    with pytest.raises(ValueError):
        RolloutResults().update(None)


# Rollout policy

def test_play_randomly_to_end_finishes_game():
    game = EnglishDraughts()
    winner = play_randomly_to_end(game, RandomPlayer(seed=1), RandomPlayer(seed=2))
    assert winner in (PlayerId.ONE, PlayerId.TWO, PlayerId.NONE)
    assert resolve_winner(game) is not None


def test_blocked_side_loses_rollout():
    game = make_game({5: WHITE_MAN, 1: BLACK_MAN})
    assert play_randomly_to_end(game.clone()) is PlayerId.TWO
    res = roll_out(game, 4)
    assert (res.win1, res.win2, res.n) == (0.0, 4.0, 4)


def test_roll_out_of_finished_games():
    won = make_game({18: WHITE_MAN})
    assert roll_out(won, 3).win1 == 3.0

    drawn = make_game({18: WHITE_KING, 1: BLACK_MAN}, rules=GameRulesSettings(draw_after_king_moves=1))
    drawn.nb_king_moves_without_capture = 1
    res = roll_out(drawn, 2)
    assert (res.win1, res.win2, res.n) == (1.0, 1.0, 2)


def test_roll_out_leaves_game_untouched():
    game = EnglishDraughts()
    before = str(game)
    roll_out(game, 2, RandomPlayer(seed=5))
    assert str(game) == before


# EvalNode

def test_uct_of_unvisited_node_is_infinite():
    node = EvalNode(EnglishDraughts())
    assert node.uct(10, 1 / math.sqrt(2)) == math.inf
    assert node.score() == 0.0


def test_uct_formula():
    node = EvalNode(EnglishDraughts())
    node.n, node.w = 2, 1.0
    c = 1 / math.sqrt(2)
    assert node.uct(4, c) == pytest.approx(0.5 + c * math.sqrt(math.log(4) / 2))
    assert node.score() == 0.5


# Search

def test_first_iteration_expands_root():
    search = make_search(EnglishDraughts())
    assert search.evaluate_tree_once() is False
    root = search.root
    assert len(root.children) == 7
    assert root.n == 1
    assert 0.0 <= root.w <= 1.0
    assert all(child.n == 0 and not child.children for child in root.children)
    assert search.n_total == 1


def test_unvisited_children_are_selected_first():
    search = make_search(EnglishDraughts())
    for i in range(8):
        search.evaluate_tree_once()
        visited = [child.n for child in search.root.children]
        # children are visited once each, in move order
        assert visited == [1] * i + [0] * (7 - i)
    assert search.root.n == 8
    assert all(child.children for child in search.root.children)


def test_backpropagation_bounds():
    search = make_search(EnglishDraughts(), rollouts_per_leaf=3)
    for _ in range(30):
        search.evaluate_tree_once()
    root = search.root
    assert root.n == 90
    assert search.n_total == 90
    for node in walk(root):
        assert 0.0 <= node.w <= node.n
        if node.children and node is not root:
            assert node.n >= sum(child.n for child in node.children)
    assert root.n == 3 + sum(child.n for child in root.children)


def test_win_credit_uses_root_player():
    # black to move at the root, the only black piece is about to be lost
    game = make_game({14: BLACK_MAN, 18: WHITE_MAN, 23: WHITE_MAN}, player=PlayerId.TWO)
    search = make_search(game)
    assert search.reference_player is PlayerId.TWO
    search.evaluate_tree_once()
    search.evaluate_tree_once()
    assert search.root.n == 2


def test_terminal_root_stops_search():
    search = make_search(make_game({18: WHITE_MAN}))
    assert search.evaluate_tree_once() is True
    assert search.root.n == 0
    assert search.evaluate_tree_with_time_limit(50) == 1


def test_blocked_root():
    search = make_search(make_game({5: WHITE_MAN, 1: BLACK_MAN}))
    assert search.evaluate_tree_once() is True
    assert search.get_best_move() is None


def test_time_limited_search():
    search = make_search(EnglishDraughts())
    iterations = search.evaluate_tree_with_time_limit(50)
    assert iterations >= 1
    assert search.root.n == iterations
    assert search.get_best_move() in search.root.game.possible_moves()


def test_best_move_without_statistics_falls_back_to_first_move():
    game = EnglishDraughts()
    search = make_search(game)
    assert search.get_best_move() == game.possible_moves()[0]
    search.evaluate_tree_once()
    # children exist but none has been visited yet
    assert search.get_best_move() == game.possible_moves()[0]


def test_best_move_prefers_best_visited_ratio():
    game = EnglishDraughts()
    search = make_search(game)
    search.evaluate_tree_once()
    children = search.root.children
    children[1].n, children[1].w = 10, 2.0
    children[3].n, children[3].w = 10, 9.0
    children[5].n, children[5].w = 1, 0.0
    assert search.get_best_move() == game.possible_moves()[3]


def test_single_legal_move_is_returned():
    game = make_game({27: WHITE_MAN, 23: BLACK_MAN, 14: BLACK_MAN, 1: BLACK_MAN})
    search = make_search(game)
    search.evaluate_tree_with_time_limit(20)
    assert search.get_best_move().tiles == (27, 18, 9)


def test_search_does_not_touch_the_game():
    game = EnglishDraughts()
    before = str(game)
    make_search(game).evaluate_tree_with_time_limit(20)
    assert str(game) == before


def test_stats_lists_root_children():
    search = make_search(EnglishDraughts())
    search.evaluate_tree_once()
    search.evaluate_tree_once()
    lines = search.stats().splitlines()
    assert lines[0] == "MCTS with 2 evals"
    assert len(lines) == 8
    assert lines[1].startswith("21-17 : ")
    assert lines[1].endswith("/1)")
    assert lines[2] == "22-17 : 0.0000 (0/0)"


def test_search_uses_given_generator():
    rng = np.random.default_rng(0)
    search = MonteCarloTreeSearch(EnglishDraughts(), settings=SearchSettings(), rng=rng)
    search.evaluate_tree_once()
    assert search.rollout_player.rng is rng
