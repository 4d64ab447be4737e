"""Phase-weighted static evaluation. Scores are from ``side``'s point of view."""

from typing import Optional

from reversi_engine.core.board import (
    BOARD_SIZE,
    CORNERS,
    EMPTY,
    NEIGHBOURS,
    Board,
    count_discs,
    legal_moves,
)
from reversi_engine.core.personality import PhaseWeightSet

POSITION_WEIGHTS = (
    (500, -150, 30, 10, 10, 30, -150, 500),
    (-150, -250, 0, 0, 0, 0, -250, -150),
    (30, 0, 1, 2, 2, 1, 0, 30),
    (10, 0, 2, 16, 16, 2, 0, 10),
    (10, 0, 2, 16, 16, 2, 0, 10),
    (30, 0, 1, 2, 2, 1, 0, 30),
    (-150, -250, 0, 0, 0, 0, -250, -150),
    (500, -150, 30, 10, 10, 30, -150, 500),
)

# Last move number of each phase; anything later is endgame.
OPENING_LAST_MOVE = 20
MIDGAME_LAST_MOVE = 44

FINAL_SCORE_SCALE = 1000

# corner -> (step along its row edge, step along its column edge)
_CORNER_EDGES = (
    ((0, 0), 1, 1),
    ((0, 7), -1, 1),
    ((7, 0), 1, -1),
    ((7, 7), -1, -1),
)

_CORNER_CELL_VALUE = 3
_EDGE_CELL_VALUE = 2


def move_number(board: Board) -> int:
    black, white = count_discs(board)
    return black + white - 4 + 1


def game_phase(move_no: int) -> str:
    if move_no <= OPENING_LAST_MOVE:
        return "opening"
    if move_no <= MIDGAME_LAST_MOVE:
        return "midgame"
    return "endgame"


def position_score(board: Board, side: int) -> int:
    score = 0
    for r in range(BOARD_SIZE):
        row = board[r]
        weights = POSITION_WEIGHTS[r]
        for c in range(BOARD_SIZE):
            cell = row[c]
            if cell == side:
                score += weights[c]
            elif cell == -side:
                score -= weights[c]
    return score


def mobility_score(board: Board, side: int) -> int:
    return len(legal_moves(board, side)) - len(legal_moves(board, -side))


def stability_score(board: Board, side: int) -> int:
    """Corner-anchored stable discs: 3 per corner, 2 per contiguous edge disc."""
    mine = theirs = 0
    for (cr, cc), col_step, row_step in _CORNER_EDGES:
        owner = board[cr][cc]
        if owner == EMPTY:
            continue
        stable = _CORNER_CELL_VALUE
        c = cc + col_step
        while 0 <= c < BOARD_SIZE and board[cr][c] == owner:
            stable += _EDGE_CELL_VALUE
            c += col_step
        r = cr + row_step
        while 0 <= r < BOARD_SIZE and board[r][cc] == owner:
            stable += _EDGE_CELL_VALUE
            r += row_step
        if owner == side:
            mine += stable
        else:
            theirs += stable
    return mine - theirs


def disc_diff(board: Board, side: int) -> int:
    black, white = count_discs(board)
    return (black - white) * side


def corner_score(board: Board, side: int) -> int:
    score = 0
    for r, c in CORNERS:
        if board[r][c] == side:
            score += 1
        elif board[r][c] == -side:
            score -= 1
    return score


def frontier_score(board: Board, side: int) -> int:
    """Opponent frontier minus own frontier; fewer own frontier discs is better."""
    mine = theirs = 0
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            cell = board[r][c]
            if cell == EMPTY:
                continue
            if any(board[nr][nc] == EMPTY for nr, nc in NEIGHBOURS[r][c]):
                if cell == side:
                    mine += 1
                else:
                    theirs += 1
    return theirs - mine


def evaluate_final(board: Board, side: int) -> int:
    """Score of a finished game: disc difference scaled past any heuristic value."""
    return disc_diff(board, side) * FINAL_SCORE_SCALE


class Evaluator:
    def __init__(self, weights: PhaseWeightSet):
        self.weights = weights

    def evaluate(self, board: Board, side: int, phase: Optional[str] = None) -> float:
        """Weighted sum of the active phase's terms, skipping zero weights.

        ``phase`` defaults to the phase of ``board`` itself; the search pins
        it to the root position's phase.
        """
        w = self.weights.for_phase(phase or game_phase(move_number(board)))
        score = 0.0
        if w.position:
            score += position_score(board, side) * w.position
        if w.mobility:
            score += mobility_score(board, side) * w.mobility
        if w.stability:
            score += stability_score(board, side) * w.stability
        if w.disc_diff:
            score += disc_diff(board, side) * w.disc_diff
        if w.corner:
            score += corner_score(board, side) * w.corner
        if w.frontier:
            score += frontier_score(board, side) * w.frontier
        return score
