from typing import Any, Optional

from reversi_engine.config import CONFIG
from reversi_engine.core.board import Move, ReversiBoard
from reversi_engine.core.search import SearchEngine, SearchResult
from reversi_engine.profiles import get_profile


class Engine:
    """A game session against one computer personality."""

    def __init__(self, profile: Any = None, search: Optional[SearchEngine] = None):
        self.board = ReversiBoard()
        self.search = search or SearchEngine()
        if profile is None:
            profile = CONFIG.ui.default_profile
        self.profile = get_profile(profile) if isinstance(profile, str) else profile

    def analyse(self) -> SearchResult:
        return self.search.search(self.board.board, self.board.turn, self.profile)

    def get_best_move(self) -> Optional[Move]:
        if self.board.is_game_over():
            return None
        return self.analyse().move

    def play_ai_move(self) -> Optional[Move]:
        """Compute and apply the engine's move for the side to move."""
        move = self.get_best_move()
        if move is not None:
            self.board.play(move)
        return move

    def make_move(self, row: int, col: int) -> bool:
        return self.board.make_move(row, col)

    def print_board(self):
        self.board.print_board()
