"""tictactoe package.

Immutable game state with exact minimax scoring, a text renderer, a
human/computer driver, a reachable-state census, and a simple CLI.

Convenience imports are exposed for common workflows.
"""

from .errors import (
    BoardParseError,
    IllegalMoveError,
    InvalidStateError,
    TicTacToeError,
    UnsupportedDepthError,
)
from .game import GameState, Player, Status, from_board, moves, new, score, to_board
from .play import GameResult, PlayerKind, play
from .render import render
from .solver import best_moves, choose, solve_state

__all__ = [
    "GameState",
    "Player",
    "Status",
    "new",
    "from_board",
    "to_board",
    "moves",
    "score",
    "render",
    "best_moves",
    "choose",
    "solve_state",
    "play",
    "PlayerKind",
    "GameResult",
    "TicTacToeError",
    "BoardParseError",
    "IllegalMoveError",
    "InvalidStateError",
    "UnsupportedDepthError",
]
