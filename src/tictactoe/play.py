"""
Turn orchestration: drives a game between human and computer players.
Teaching notes:
- The legal moves list of the current state is the only source of truth.
- A human picks an index into that list; the computer picks by exact score.
- The loop ends when the current state has no moves; its score is the result.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, TextIO

from .errors import IllegalMoveError
from .game import GameState, Player
from .solver import choose


class PlayerKind(Enum):
    HUMAN = "human"
    COMPUTER = "computer"


RESULT_TEXT = {1: "X wins!", -1: "O wins!", 0: "Draw!"}


@dataclass
class GameResult:
    final: GameState
    score: int
    plies: int

    @property
    def message(self) -> str:
        return RESULT_TEXT[self.score]


def pick_by_index(state: GameState, raw: str) -> GameState:
    """Return the successor at the index typed by a human player."""
    index = int(raw.strip())
    options = state.moves()
    if not 0 <= index < len(options):
        raise IllegalMoveError(index, len(options))
    return options[index]


def play(
    players: Dict[Player, PlayerKind],
    start: Optional[GameState] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> GameResult:
    inp = stdin if stdin is not None else sys.stdin
    out = stdout if stdout is not None else sys.stdout
    state = start if start is not None else GameState.new()
    plies = 0

    print(f"\n{state}", file=out)
    while state.moves():
        kind = players[state.turn]
        if kind is PlayerKind.HUMAN:
            line = inp.readline()
            if not line:
                raise EOFError("No move given on input")
            nxt = pick_by_index(state, line)
        else:
            nxt = choose(state)
        logging.debug("ply=%d %s(%s): %s -> %s", plies + 1, state.turn.value,
                      kind.value, state.to_board(), nxt.to_board())
        state = nxt
        plies += 1
        print(f"\n{state}", file=out)

    result = GameResult(final=state, score=state.score(), plies=plies)
    print(result.message, file=out)
    logging.info("result=%s plies=%d final=%s", result.score, plies, state.to_board())
    return result
