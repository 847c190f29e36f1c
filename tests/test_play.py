import io

import pytest

from tictactoe.errors import IllegalMoveError
from tictactoe.game import GameState, Player
from tictactoe.play import PlayerKind, pick_by_index, play

COMPUTERS = {Player.X: PlayerKind.COMPUTER, Player.O: PlayerKind.COMPUTER}


def test_computer_finishes_a_won_position():
    out = io.StringIO()
    res = play(COMPUTERS, start=GameState.from_board("XOOXXO---"), stdout=out)
    assert res.final.to_board() == "XOOXXO--X"
    assert res.score == 1
    assert res.plies == 1
    assert res.message == "X wins!"
    assert out.getvalue().rstrip().endswith("X wins!")


def test_human_move_by_index_then_computer():
    players = {Player.X: PlayerKind.COMPUTER, Player.O: PlayerKind.HUMAN}
    out = io.StringIO()
    res = play(players, start=GameState.from_board("XXOOXX--O"),
               stdin=io.StringIO("1\n"), stdout=out)
    assert res.final.to_board() == "XXOOXXXOO"
    assert res.score == 0
    assert res.plies == 2
    assert "Draw!" in out.getvalue()


def test_human_blunder_is_scored():
    players = {Player.X: PlayerKind.COMPUTER, Player.O: PlayerKind.HUMAN}
    res = play(players, start=GameState.from_board("XXOOXX--O"),
               stdin=io.StringIO("0\n"), stdout=io.StringIO())
    assert res.final.to_board() == "XXOOXXOXO"
    assert res.score == 1


def test_terminal_start_reports_without_moving():
    out = io.StringIO()
    res = play(COMPUTERS, start=GameState.from_board("XXOOOXXOX"), stdout=out)
    assert res.plies == 0
    assert res.score == 0
    assert out.getvalue().rstrip().endswith("Draw!")


def test_out_of_range_index_is_fatal():
    s = GameState.from_board("XXOOXX--O")
    with pytest.raises(IllegalMoveError):
        pick_by_index(s, "2")
    with pytest.raises(IllegalMoveError):
        pick_by_index(s, "-1")
    assert pick_by_index(s, " 0 \n").to_board() == "XXOOXXO-O"


def test_non_numeric_input_is_fatal():
    players = {Player.X: PlayerKind.HUMAN, Player.O: PlayerKind.HUMAN}
    with pytest.raises(ValueError):
        play(players, stdin=io.StringIO("left\n"), stdout=io.StringIO())


def test_exhausted_input_is_fatal():
    players = {Player.X: PlayerKind.HUMAN, Player.O: PlayerKind.HUMAN}
    with pytest.raises(EOFError):
        play(players, stdin=io.StringIO("4\n"), stdout=io.StringIO())


def test_perfect_play_from_empty_board_is_a_draw():
    res = play(COMPUTERS, stdout=io.StringIO())
    assert res.score == 0
    assert res.plies == 9
    assert res.final.winner() is None
