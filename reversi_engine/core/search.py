import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from reversi_engine.core.board import (
    BOARD_SIZE,
    CORNERS,
    Board,
    Move,
    apply_move,
    count_empty,
    has_legal_move,
    is_terminal,
    legal_moves,
    validate_board,
    validate_side,
)
from reversi_engine.core.evaluator import (
    POSITION_WEIGHTS,
    Evaluator,
    evaluate_final,
    game_phase,
    move_number,
)
from reversi_engine.core.personality import SearchConfig, normalize_profile
from reversi_engine.core.utils import format_search_info

logger = logging.getLogger(__name__)

INF = float("inf")

CORNER_BONUS = 10000
X_SQUARE_PENALTY = 5000
C_SQUARE_PENALTY = 3000

X_SQUARES = frozenset({(1, 1), (1, 6), (6, 1), (6, 6)})
C_SQUARES = frozenset({
    (0, 1), (1, 0), (0, 6), (1, 7),
    (6, 0), (7, 1), (6, 7), (7, 6),
})


def _move_priority(row: int, col: int) -> int:
    priority = POSITION_WEIGHTS[row][col]
    if (row, col) in CORNERS:
        priority += CORNER_BONUS
    elif (row, col) in X_SQUARES:
        priority -= X_SQUARE_PENALTY
    elif (row, col) in C_SQUARES:
        priority -= C_SQUARE_PENALTY
    return priority


MOVE_PRIORITY = tuple(
    tuple(_move_priority(r, c) for c in range(BOARD_SIZE)) for r in range(BOARD_SIZE)
)


def order_moves(moves: List[Move]) -> List[Move]:
    """Corners first, X/C squares last, then static position weight. Stable."""
    return sorted(moves, key=lambda m: MOVE_PRIORITY[m.row][m.col], reverse=True)


class Deadline:
    """Wall-clock budget. Once expired it stays expired."""

    def __init__(self, start: float, limit_ms: int, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at = start + limit_ms / 1000.0
        self._expired = False

    def expired(self) -> bool:
        if not self._expired and self._clock() > self._expires_at:
            self._expired = True
        return self._expired


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    score: float
    order: int  # scan-order index, breaks score ties


@dataclass(frozen=True)
class SearchResult:
    move: Optional[Move]
    score: Optional[float]
    depth: int
    mode: str  # "pass" | "forced" | "iterative" | "endgame"
    nodes: int
    elapsed_ms: float


@dataclass
class _SearchContext:
    config: SearchConfig
    evaluator: Evaluator
    deadline: Deadline
    phase: str
    exact: bool = False
    nodes: int = 0


def rank_moves(scored: List[ScoredMove]) -> List[ScoredMove]:
    return sorted(scored, key=lambda s: (-s.score, s.order))


def select_move(ranked: List[ScoredMove], randomness: int, rng: random.Random) -> ScoredMove:
    """Pick uniformly among the top ``randomness + 1`` of ``ranked``."""
    top_n = min(randomness, len(ranked) - 1)
    if top_n <= 0:
        return ranked[0]
    return ranked[rng.randint(0, top_n)]


class SearchEngine:
    def __init__(self, rng: Optional[random.Random] = None, clock: Callable[[], float] = time.monotonic):
        self.rng = rng or random.Random()
        self._clock = clock

    def compute_move(self, board: Board, side: int, profile: Any) -> Optional[Move]:
        """Move for ``side``, or None when ``side`` must pass."""
        return self.search(board, side, profile).move

    def search(self, board: Board, side: int, profile: Any) -> SearchResult:
        start = self._clock()
        config = normalize_profile(profile)
        board = validate_board(board)
        side = validate_side(side)
        deadline = Deadline(start, config.time_limit_ms, self._clock)

        moves = legal_moves(board, side)
        if not moves:
            return SearchResult(None, None, 0, "pass", 0, self._elapsed_ms(start))
        if len(moves) == 1:
            return SearchResult(moves[0], None, 0, "forced", 0, self._elapsed_ms(start))

        empty = count_empty(board)
        phase = game_phase(move_number(board))
        ctx = _SearchContext(config, Evaluator(config.weights), deadline, phase)

        if 0 < config.endgame_solver_depth and empty <= config.endgame_solver_depth:
            logger.debug("endgame solve: %d empty, phase %s", empty, phase)
            ctx.exact = True
            move, score, depth = self._solve_endgame(ctx, board, side, moves, empty)
            mode = "endgame"
        else:
            logger.debug("iterative deepening to depth %d, phase %s", config.max_depth, phase)
            move, score, depth = self._iterative_deepening(ctx, board, side, moves, start)
            mode = "iterative"

        elapsed_ms = self._elapsed_ms(start)
        logger.debug(format_search_info(mode, depth, score, ctx.nodes, elapsed_ms / 1000.0, move))
        return SearchResult(move, score, depth, mode, ctx.nodes, elapsed_ms)

    def _elapsed_ms(self, start: float) -> float:
        return (self._clock() - start) * 1000.0

    # ------------------------------------------------------------------
    # Root drivers
    # ------------------------------------------------------------------
    def _iterative_deepening(self, ctx, board, side, moves, start):
        # fallback when not even depth 1 finishes
        best_move, best_score, completed = moves[0], None, 0
        ranked = None

        for depth in range(1, ctx.config.max_depth + 1):
            if ctx.deadline.expired():
                break

            ordered = order_moves(moves) if ctx.config.use_move_ordering and depth >= 2 else moves
            scored = self._score_root(ctx, board, side, moves, ordered, depth)
            if scored is None:
                logger.debug("depth %d abandoned on timeout", depth)
                break

            ranked = rank_moves(scored)
            completed = depth
            elapsed = self._clock() - start
            logger.debug(format_search_info("iterative", depth, ranked[0].score, ctx.nodes, elapsed, ranked[0].move))

        if ranked:
            choice = select_move(ranked, ctx.config.randomness, self.rng)
            best_move, best_score = choice.move, choice.score
        return best_move, best_score, completed

    def _score_root(self, ctx, board, side, moves, ordered, depth) -> Optional[List[ScoredMove]]:
        """Score every root move at ``depth`` with a full window, or None on timeout."""
        scan_index = {move: i for i, move in enumerate(moves)}
        scored = []
        for move in ordered:
            if ctx.deadline.expired():
                return None
            child = apply_move(board, move, side)
            score = -self._negamax(ctx, child, depth - 1, -INF, INF, -side)
            if ctx.deadline.expired():
                return None
            scored.append(ScoredMove(move, score, scan_index[move]))
        return scored

    def _solve_endgame(self, ctx, board, side, moves, empty):
        scan_index = {move: i for i, move in enumerate(moves)}
        ordered = order_moves(moves)
        scored = []
        for move in ordered:
            if ctx.deadline.expired():
                break
            child = apply_move(board, move, side)
            score = -self._negamax(ctx, child, empty - 1, -INF, INF, -side)
            # a subtree cut short by the deadline is not a resolved value
            if ctx.deadline.expired():
                break
            scored.append(ScoredMove(move, score, scan_index[move]))

        if not scored:
            logger.debug("endgame solve timed out before any move resolved")
            return ordered[0], None, 0
        choice = select_move(rank_moves(scored), ctx.config.randomness, self.rng)
        return choice.move, choice.score, empty

    # ------------------------------------------------------------------
    # Negamax with alpha-beta
    # ------------------------------------------------------------------
    def _negamax(self, ctx: _SearchContext, board: Board, depth: int, alpha: float, beta: float, side: int) -> float:
        ctx.nodes += 1
        # value is discarded by the root once the deadline has passed
        if ctx.deadline.expired():
            return 0

        if not ctx.exact and depth <= 0:
            if is_terminal(board):
                return evaluate_final(board, side)
            return ctx.evaluator.evaluate(board, side, ctx.phase)

        moves = legal_moves(board, side)
        if not moves:
            if not has_legal_move(board, -side):
                return evaluate_final(board, side)
            # pass: other side moves, nominal depth still drops
            return -self._negamax(ctx, board, depth - 1, -beta, -alpha, -side)

        if ctx.exact or (ctx.config.use_move_ordering and depth >= 2):
            moves = order_moves(moves)

        best = -INF
        for move in moves:
            child = apply_move(board, move, side)
            score = -self._negamax(ctx, child, depth - 1, -beta, -alpha, -side)
            if score > best:
                best = score
            if score > alpha:
                alpha = score
            if alpha >= beta:
                break
        return best


_default_engine = SearchEngine()


def compute_move(board: Board, side: int, profile: Any) -> Optional[Move]:
    """Module-level entry point backed by a shared engine."""
    return _default_engine.compute_move(board, side, profile)
