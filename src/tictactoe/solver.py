"""
Optimal move selection on top of the exact minimax score.
Tie-break policy for the computer player:
- X (maximizing) takes the last successor, in move order, with the highest score.
- O (minimizing) takes the first successor, in move order, with the lowest score.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from .errors import TicTacToeError
from .game import GameState, Player


def successor_scores(state: GameState) -> List[Tuple[int, GameState, int]]:
    """(cell, successor, score) for every legal move, in move order."""
    return [
        (cell, child, child.score())
        for cell, child in zip(state.move_cells(), state.moves())
    ]


def _optimal(state: GameState, scored: List[Tuple[int, GameState, int]]) -> int:
    values = [s for _, _, s in scored]
    return max(values) if state.turn is Player.X else min(values)


def best_moves(state: GameState) -> List[int]:
    scored = successor_scores(state)
    if not scored:
        return []
    target = _optimal(state, scored)
    return [cell for cell, _, s in scored if s == target]


def choose(state: GameState) -> GameState:
    scored = successor_scores(state)
    if not scored:
        raise TicTacToeError(f"No legal moves from terminal state {state.to_board()}")
    target = _optimal(state, scored)
    picks = [child for _, child, s in scored if s == target]
    return picks[-1] if state.turn is Player.X else picks[0]


def solve_state(state: GameState) -> Dict:
    """Score and optimal cells for the side to move."""
    scored = successor_scores(state)
    if scored:
        value = _optimal(state, scored)
        optimal = tuple(cell for cell, _, s in scored if s == value)
    else:
        value = state.score()
        optimal = tuple()
    return {
        'board': state.to_board(),
        'turn': state.turn.value,
        'status': state.status().value,
        'score': value,
        'best_moves': optimal,
    }
