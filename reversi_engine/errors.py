"""Exception hierarchy for the Reversi engine.

Usage:
    from reversi_engine.errors import InvalidBoardError

    try:
        board = validate_board(raw)
    except InvalidBoardError as e:
        logger.warning("rejected board: %s", e)
"""

__all__ = [
    "ReversiError",
    "InvalidBoardError",
    "InvalidMoveError",
    "ProfileError",
]


class ReversiError(Exception):
    """Base exception for all engine errors."""


class InvalidBoardError(ReversiError, ValueError):
    """Board has the wrong shape or contains unknown cell values."""


class InvalidMoveError(ReversiError, ValueError):
    """A move was requested that is not legal for the side to move."""


class ProfileError(ReversiError, ValueError):
    """A personality profile could not be normalized into a search config."""
