"""Console game: a human plays one side against a built-in personality."""

import argparse
import logging

from reversi_engine.config import CONFIG
from reversi_engine.core.board import BLACK, CHAR_MAP, WHITE
from reversi_engine.core.utils import configure_logging
from reversi_engine.main import Engine
from reversi_engine.profiles import profile_ids

logger = logging.getLogger(__name__)


def parse_move(text):
    """'2 3' or '2,3' -> (2, 3); None if unparseable."""
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play Reversi against a computer personality.")
    parser.add_argument("--profile", default=CONFIG.ui.default_profile, choices=profile_ids())
    parser.add_argument("--white", action="store_true", help="play white (the engine moves first)")
    parser.add_argument("--log-level", default=CONFIG.log_level)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    game = Engine(profile=args.profile)
    logger.info("playing against %s", args.profile)
    human = WHITE if args.white else BLACK

    while not game.board.is_game_over():
        game.print_board()
        print("----------------------------")

        if game.board.turn == human:
            moves = game.board.get_legal_moves()
            print("Legal:", " ".join(f"{m.row},{m.col}" for m in moves))
            move = parse_move(input(f"Your move as {CHAR_MAP[human]} (row col): "))
            if move is None or not game.make_move(*move):
                print("Illegal move, try again.")
                continue
        else:
            move = game.play_ai_move()
            print(f"{game.profile['displayName']} plays: {move.row},{move.col}")

    game.print_board()
    black, white = game.board.score()
    print(f"Game Over  B {black} - W {white}")


if __name__ == "__main__":
    main()
