"""Reversi rules: legal moves, flips, and a game-session wrapper with history.

All rule checks go through one ray table (``RAYS``) and one traversal routine
(``_bracketed_run``). Search code calls ``legal_moves`` / ``apply_move`` on
plain nested lists; hosts use ``ReversiBoard`` to track turn order and passes.
"""

from typing import List, NamedTuple, Optional, Sequence, Tuple

from reversi_engine.errors import InvalidBoardError, InvalidMoveError

BOARD_SIZE = 8

EMPTY = 0
BLACK = 1   # moves first
WHITE = -1

CHAR_MAP = {EMPTY: ".", BLACK: "B", WHITE: "W"}

DIRECTIONS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)

CORNERS = ((0, 0), (0, 7), (7, 0), (7, 7))

Board = List[List[int]]


class Move(NamedTuple):
    row: int
    col: int


def _in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def _build_rays():
    rays = []
    for r in range(BOARD_SIZE):
        row_rays = []
        for c in range(BOARD_SIZE):
            cell_rays = []
            for dr, dc in DIRECTIONS:
                ray = []
                nr, nc = r + dr, c + dc
                while _in_bounds(nr, nc):
                    ray.append((nr, nc))
                    nr += dr
                    nc += dc
                # a flip needs one opposing disc plus a bracketing disc
                if len(ray) >= 2:
                    cell_rays.append(tuple(ray))
            row_rays.append(tuple(cell_rays))
        rays.append(tuple(row_rays))
    return tuple(rays)


def _build_neighbours():
    return tuple(
        tuple(
            tuple((r + dr, c + dc) for dr, dc in DIRECTIONS if _in_bounds(r + dr, c + dc))
            for c in range(BOARD_SIZE)
        )
        for r in range(BOARD_SIZE)
    )


# RAYS[r][c] holds, per direction, the cells walked outward from (r, c).
RAYS = _build_rays()
# NEIGHBOURS[r][c] holds the (up to 8) adjacent cells of (r, c).
NEIGHBOURS = _build_neighbours()


def _bracketed_run(board: Board, ray: Tuple[Tuple[int, int], ...], side: int):
    """Return the opposing run along ``ray`` closed by a ``side`` disc, else ()."""
    count = 0
    for r, c in ray:
        cell = board[r][c]
        if cell == -side:
            count += 1
        elif cell == side:
            return ray[:count]
        else:
            return ()
    return ()


def opponent(side: int) -> int:
    return -side


def new_board() -> Board:
    """Return the standard starting position."""
    board = [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    mid = BOARD_SIZE // 2
    board[mid - 1][mid - 1] = WHITE
    board[mid][mid] = WHITE
    board[mid - 1][mid] = BLACK
    board[mid][mid - 1] = BLACK
    return board


def copy_board(board: Board) -> Board:
    return [row[:] for row in board]


def flips_for(board: Board, row: int, col: int, side: int) -> List[Tuple[int, int]]:
    """Cells that flip if ``side`` plays at (row, col). Ignores cell occupancy."""
    flipped = []
    for ray in RAYS[row][col]:
        flipped.extend(_bracketed_run(board, ray, side))
    return flipped


def is_legal(board: Board, row: int, col: int, side: int) -> bool:
    if not _in_bounds(row, col) or board[row][col] != EMPTY:
        return False
    for ray in RAYS[row][col]:
        if _bracketed_run(board, ray, side):
            return True
    return False


def legal_moves(board: Board, side: int) -> List[Move]:
    """Legal moves for ``side`` in row-major scan order."""
    moves = []
    for r in range(BOARD_SIZE):
        row = board[r]
        for c in range(BOARD_SIZE):
            if row[c] == EMPTY and is_legal(board, r, c, side):
                moves.append(Move(r, c))
    return moves


def has_legal_move(board: Board, side: int) -> bool:
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            if board[r][c] == EMPTY and is_legal(board, r, c, side):
                return True
    return False


def apply_move(board: Board, move: Tuple[int, int], side: int) -> Board:
    """Return a new board with ``side`` played at ``move``.

    The move must be legal; the input board is left untouched.
    """
    row, col = move
    new = copy_board(board)
    new[row][col] = side
    for r, c in flips_for(board, row, col, side):
        new[r][c] = side
    return new


def is_terminal(board: Board) -> bool:
    return not has_legal_move(board, BLACK) and not has_legal_move(board, WHITE)


def count_discs(board: Board) -> Tuple[int, int]:
    """Return (black, white) disc counts."""
    black = sum(row.count(BLACK) for row in board)
    white = sum(row.count(WHITE) for row in board)
    return black, white


def count_empty(board: Board) -> int:
    return sum(row.count(EMPTY) for row in board)


def validate_board(raw: Sequence[Sequence[int]]) -> Board:
    """Copy ``raw`` into a fresh board, rejecting bad shapes and cell values."""
    if not isinstance(raw, (list, tuple)) or len(raw) != BOARD_SIZE:
        raise InvalidBoardError(f"board must have {BOARD_SIZE} rows")
    board = []
    for i, row in enumerate(raw):
        if not isinstance(row, (list, tuple)) or len(row) != BOARD_SIZE:
            raise InvalidBoardError(f"row {i} must have {BOARD_SIZE} cells")
        for cell in row:
            if isinstance(cell, bool) or cell not in (EMPTY, BLACK, WHITE):
                raise InvalidBoardError(f"invalid cell value {cell!r} in row {i}")
        board.append([int(cell) for cell in row])
    return board


def validate_side(side: int) -> int:
    if isinstance(side, bool) or side not in (BLACK, WHITE):
        raise InvalidBoardError(f"side must be {BLACK} or {WHITE}, got {side!r}")
    return int(side)


class HistoryEntry(NamedTuple):
    move: Optional[Move]      # None records a pass
    color: int
    board_before: Optional[Board]


class ReversiBoard:
    """Mutable game session: board, side to move, and move history.

    Turn advancement is serialized: a move is applied, the turn switches,
    and only then is the new side checked for a pass.
    """

    def __init__(self, board: Optional[Sequence[Sequence[int]]] = None, turn: int = BLACK):
        self.board = validate_board(board) if board is not None else new_board()
        self.turn = validate_side(turn)
        self.move_history: List[HistoryEntry] = []
        self.game_over = False
        self._settle_turn()

    def reset(self):
        """Reset to the initial position."""
        self.board = new_board()
        self.turn = BLACK
        self.move_history.clear()
        self.game_over = False

    def get_legal_moves(self) -> List[Move]:
        if self.game_over:
            return []
        return legal_moves(self.board, self.turn)

    def make_move(self, row: int, col: int) -> bool:
        """Play (row, col) for the side to move. Returns True if legal."""
        try:
            self.play(Move(row, col))
        except InvalidMoveError:
            return False
        return True

    def play(self, move: Tuple[int, int]):
        """Apply ``move`` for the side to move, raising InvalidMoveError if illegal."""
        if self.game_over:
            raise InvalidMoveError("game is already over")
        row, col = move
        if not is_legal(self.board, row, col, self.turn):
            raise InvalidMoveError(f"illegal move ({row}, {col}) for {CHAR_MAP[self.turn]}")
        self.move_history.append(HistoryEntry(Move(row, col), self.turn, copy_board(self.board)))
        self.board = apply_move(self.board, (row, col), self.turn)
        self.turn = -self.turn
        self._settle_turn()

    def _settle_turn(self):
        if has_legal_move(self.board, self.turn):
            return
        if has_legal_move(self.board, -self.turn):
            self.move_history.append(HistoryEntry(None, self.turn, None))
            self.turn = -self.turn
            return
        self.game_over = True

    def undo_move(self) -> bool:
        """Take back the last placed disc (and any passes recorded after it)."""
        while self.move_history and self.move_history[-1].move is None:
            self.move_history.pop()
        if not self.move_history:
            return False
        last = self.move_history.pop()
        self.board = last.board_before
        self.turn = last.color
        self.game_over = False
        return True

    def passes(self) -> int:
        return sum(1 for entry in self.move_history if entry.move is None)

    def is_game_over(self) -> bool:
        return self.game_over

    def score(self) -> Tuple[int, int]:
        return count_discs(self.board)

    def winner(self) -> int:
        """BLACK, WHITE, or EMPTY for a draw. Meaningful once the game is over."""
        black, white = self.score()
        if black > white:
            return BLACK
        if white > black:
            return WHITE
        return EMPTY

    def move_number(self) -> int:
        black, white = self.score()
        return black + white - 4 + 1

    def to_list(self) -> Board:
        return copy_board(self.board)

    def render(self) -> str:
        lines = ["  " + " ".join(str(c) for c in range(BOARD_SIZE))]
        for r in range(BOARD_SIZE):
            lines.append(f"{r} " + " ".join(CHAR_MAP[cell] for cell in self.board[r]))
        return "\n".join(lines)

    def print_board(self):
        """Print ASCII representation."""
        print(self.render())
