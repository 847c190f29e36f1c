"""Exception types raised by the tic-tac-toe core and its driver."""

from __future__ import annotations


class TicTacToeError(Exception):
    """Base exception for all tic-tac-toe errors."""


class BoardParseError(TicTacToeError, ValueError):
    """Raised when board text is malformed (length, characters or X/O counts)."""


class InvalidStateError(TicTacToeError, ValueError):
    """Raised when a state is built from overlapping or out-of-range masks."""


class UnsupportedDepthError(TicTacToeError, NotImplementedError):
    """Raised when depth-limited scoring is requested."""

    def __init__(self, depth: int) -> None:
        self.depth = depth
        super().__init__(f"Bounded-depth scoring is not supported (depth={depth})")


class IllegalMoveError(TicTacToeError, IndexError):
    """Raised when a driver selects a move index outside the legal moves."""

    def __init__(self, index: int, n_moves: int) -> None:
        self.index = index
        self.n_moves = n_moves
        super().__init__(f"Move index {index} out of range; {n_moves} legal moves available.")


__all__ = [
    "TicTacToeError",
    "BoardParseError",
    "IllegalMoveError",
    "InvalidStateError",
    "UnsupportedDepthError",
]
