"""
Game state: encoding, win detection, move generation and exact minimax scoring.
Teaching notes:
- A state is an immutable value: whose turn it is plus two 9-bit occupancy masks.
- Bit i of a mask is cell i, row-major (0 = top-left, 8 = bottom-right).
- X always starts, so X is to move exactly when an even number of cells is filled.
- Scores are from X's point of view: +1 X wins, -1 O wins, 0 draw.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional

from .errors import BoardParseError, InvalidStateError, UnsupportedDepthError
from .render import render

FULL_MASK = 0b111111111

# Cell indices, then the same lines as bit masks.
WIN_PATTERNS = [
    [0, 1, 2], [3, 4, 5], [6, 7, 8],
    [0, 3, 6], [1, 4, 7], [2, 5, 8],
    [0, 4, 8], [2, 4, 6],
]
WIN_MASKS = [sum(1 << i for i in pat) for pat in WIN_PATTERNS]

BLANKS = frozenset(" -_")


class Player(Enum):
    X = "X"
    O = "O"

    @property
    def other(self) -> "Player":
        return Player.O if self is Player.X else Player.X

    @property
    def sign(self) -> int:
        """+1 for the maximizing side (X), -1 for the minimizing side (O)."""
        return 1 if self is Player.X else -1


class Status(Enum):
    LIVE = "live"
    X_WON = "x_won"
    O_WON = "o_won"
    DRAWN = "drawn"


def _has_line(mask: int) -> bool:
    return any(mask & line == line for line in WIN_MASKS)


def _cells(mask: int) -> FrozenSet[int]:
    return frozenset(i for i in range(9) if mask >> i & 1)


@dataclass(frozen=True)
class GameState:
    """One tic-tac-toe position.

    Equality and hashing come from (turn, x_mask, o_mask), so two states are
    equal exactly when their occupancy and side to move agree.
    """

    turn: Player
    x_mask: int = 0
    o_mask: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.turn, Player):
            raise InvalidStateError(f"turn must be a Player, got {self.turn!r}")
        for name, mask in (("x_mask", self.x_mask), ("o_mask", self.o_mask)):
            if not 0 <= mask <= FULL_MASK:
                raise InvalidStateError(f"{name} out of range: {mask:#x}")
        if self.x_mask & self.o_mask:
            raise InvalidStateError(
                f"cells claimed by both sides: {sorted(_cells(self.x_mask & self.o_mask))}"
            )

    # construction

    @classmethod
    def new(cls) -> "GameState":
        return cls(turn=Player.X)

    @classmethod
    def from_board(cls, text: str) -> "GameState":
        """Parse 9 characters of X, O or a blank marker (space, '-', '_').

        Turn is derived from parity, so a board that could never arise from
        alternating play is accepted as long as the X/O counts differ by at
        most one.
        """
        if len(text) != 9:
            raise BoardParseError(f"Board must have 9 cells, got {len(text)}: {text!r}")
        num_x = text.count("X")
        num_o = text.count("O")
        if abs(num_x - num_o) > 1:
            raise BoardParseError(
                f"X/O counts differ by more than one (X={num_x}, O={num_o}): {text!r}"
            )
        x_mask = o_mask = 0
        for i, c in enumerate(text):
            if c == "X":
                x_mask |= 1 << i
            elif c == "O":
                o_mask |= 1 << i
            elif c not in BLANKS:
                raise BoardParseError(f"Invalid character {c!r} at cell {i}: {text!r}")
        turn = Player.X if (num_x + num_o) % 2 == 0 else Player.O
        return cls(turn=turn, x_mask=x_mask, o_mask=o_mask)

    def to_board(self) -> str:
        out = []
        for i in range(9):
            bit = 1 << i
            if self.x_mask & bit:
                out.append("X")
            elif self.o_mask & bit:
                out.append("O")
            else:
                out.append("-")
        return "".join(out)

    # queries

    @property
    def x_occupied(self) -> FrozenSet[int]:
        return _cells(self.x_mask)

    @property
    def o_occupied(self) -> FrozenSet[int]:
        return _cells(self.o_mask)

    @property
    def filled(self) -> int:
        return bin(self.x_mask | self.o_mask).count("1")

    @property
    def packed(self) -> int:
        """32-bit packing: turn at bit 31 (1 = X), X cells at 30..22, O cells at 21..13."""
        value = (1 << 31) if self.turn is Player.X else 0
        for i in range(9):
            if self.x_mask >> i & 1:
                value |= 1 << (30 - i)
            if self.o_mask >> i & 1:
                value |= 1 << (21 - i)
        return value

    def winner(self) -> Optional[Player]:
        if _has_line(self.x_mask):
            return Player.X
        if _has_line(self.o_mask):
            return Player.O
        return None

    def status(self) -> Status:
        w = self.winner()
        if w is Player.X:
            return Status.X_WON
        if w is Player.O:
            return Status.O_WON
        if self.x_mask | self.o_mask == FULL_MASK:
            return Status.DRAWN
        return Status.LIVE

    def is_terminal(self) -> bool:
        return self.status() is not Status.LIVE

    def moves(self) -> List["GameState"]:
        """Successor states, one per empty cell in ascending cell order.

        Empty once either side has a line or the board is full.
        """
        if self.winner() is not None:
            return []
        occupied = self.x_mask | self.o_mask
        nxt = self.turn.other
        out: List[GameState] = []
        for i in range(9):
            bit = 1 << i
            if occupied & bit:
                continue
            if self.turn is Player.X:
                out.append(GameState(nxt, self.x_mask | bit, self.o_mask))
            else:
                out.append(GameState(nxt, self.x_mask, self.o_mask | bit))
        return out

    def move_cells(self) -> List[int]:
        """Cell index claimed by each entry of moves(), in the same order."""
        if self.winner() is not None:
            return []
        occupied = self.x_mask | self.o_mask
        return [i for i in range(9) if not occupied >> i & 1]

    def score(self, depth: Optional[int] = None) -> int:
        """Exact minimax value of the position: +1 X wins, -1 O wins, 0 draw.

        Walks the entire remaining game tree on every call. Bounded depth is
        not supported and raises UnsupportedDepthError.
        """
        if depth is not None:
            raise UnsupportedDepthError(depth)
        w = self.winner()
        if w is not None:
            return w.sign
        children = self.moves()
        if not children:
            return 0
        scores = [child.score() for child in children]
        return max(scores) if self.turn is Player.X else min(scores)

    def __str__(self) -> str:
        return render(self)


def new() -> GameState:
    return GameState.new()


def from_board(text: str) -> GameState:
    return GameState.from_board(text)


def to_board(state: GameState) -> str:
    return state.to_board()


def moves(state: GameState) -> List[GameState]:
    return state.moves()


def score(state: GameState, depth: Optional[int] = None) -> int:
    return state.score(depth)
