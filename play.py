from __future__ import annotations

import argparse
from typing import Optional

from config import get_config, setup_logging
from draughts import EnglishDraughts, PlayerId, get_player, resolve_winner


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Play a game of English draughts")
    ap.add_argument("--white", default="human", choices=["human", "random", "mcts"],
                    help="Player with the whites (moves first)")
    ap.add_argument("--black", default="mcts", choices=["human", "random", "mcts"],
                    help="Player with the blacks")
    ap.add_argument("--time-limit", type=int, default=None, help="MCTS budget per move in milliseconds")
    ap.add_argument("--board-size", type=int, default=None, help="Board side length (even)")
    ap.add_argument("--seed", type=int, default=None, help="Seed for random and MCTS players")
    ap.add_argument("--max-turns", type=int, default=0, help="Stop after this many moves (0 = no limit)")
    ap.add_argument("--quiet", action="store_true", help="Only print the result")
    return ap.parse_args(argv)


def main(argv: Optional[list] = None) -> PlayerId:
    setup_logging()
    args = parse_args(argv)
    config = get_config()

    game = EnglishDraughts(board_size=args.board_size or config.rules.board_size)
    players = {
        PlayerId.ONE: get_player(args.white, args.time_limit, args.seed),
        PlayerId.TWO: get_player(args.black, args.time_limit,
                                 None if args.seed is None else args.seed + 1),
    }

    winner = resolve_winner(game)
    while winner is None:
        if args.max_turns and game.nb_turn > args.max_turns:
            break
        if not args.quiet:
            print(game.view())
        move = players[game.player()].play(game)
        if not args.quiet:
            print(f"{game.player_name(game.player())} plays {move}\n")
        game.play(move)
        winner = resolve_winner(game)

    print(game.board.board_view())
    if winner is None:
        print(f"Stopped after {game.nb_turn - 1} moves without a result.")
        return PlayerId.NONE
    if winner is PlayerId.NONE:
        print(f"Draw after {game.nb_turn - 1} moves.")
    else:
        print(f"{game.player_name(winner)} wins after {game.nb_turn - 1} moves.")
    return winner


if __name__ == "__main__":
    main()
