import pytest

from tictactoe.errors import BoardParseError, InvalidStateError, UnsupportedDepthError
from tictactoe.game import GameState, Player, Status, from_board, moves, new, score, to_board


def test_new_is_empty_with_x_to_move():
    s = new()
    assert s.turn is Player.X
    assert s.x_occupied == frozenset()
    assert s.o_occupied == frozenset()
    assert to_board(s) == "---------"
    assert s.status() is Status.LIVE


def test_from_board_derives_turn_from_parity():
    assert from_board("---------").turn is Player.X
    assert from_board("X--------").turn is Player.O
    assert from_board("X---O----").turn is Player.X
    # more O than X is accepted while the difference stays within one
    assert from_board("OO-X-----").turn is Player.O


def test_from_board_accepts_all_blank_markers():
    a = from_board("X- _O-___")
    b = from_board("X---O----")
    assert a == b
    assert a.x_occupied == {0}
    assert a.o_occupied == {4}


@pytest.mark.parametrize("bad", [
    "",            # empty
    "XO",          # too short
    "XO--------",  # too long
    "XOZ------",   # invalid character
    "xo-------",   # lowercase is not a marker
    "XXX------",   # X three ahead of O
    "OO-------",   # O two ahead of X
])
def test_from_board_rejects_malformed_text(bad):
    with pytest.raises(BoardParseError):
        from_board(bad)


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        from_board("nope")


def test_direct_construction_rejects_overlap_and_range():
    with pytest.raises(InvalidStateError):
        GameState(Player.X, x_mask=0b1, o_mask=0b1)
    with pytest.raises(InvalidStateError):
        GameState(Player.X, x_mask=1 << 9)
    with pytest.raises(InvalidStateError):
        GameState("X")


def test_to_board_roundtrip_on_parsed_text():
    for text in ["XO-------", "XXOOXX--O", "XXOOOXXOX", "-O-X-X-O-"]:
        assert to_board(from_board(text)) == text


def test_equality_and_hash_follow_occupancy_and_turn():
    a = from_board("X---O----")
    b = GameState(Player.X, x_mask=0b1, o_mask=0b10000)
    c = GameState(Player.O, x_mask=0b1, o_mask=0b10000)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


def test_packed_layout():
    assert new().packed == 1 << 31
    s = from_board("X-------O")
    assert s.turn is Player.X
    assert s.packed == (1 << 31) | (1 << 30) | (1 << 13)
    assert from_board("X--------").packed == 1 << 30


def test_winner_rows_columns_diagonals():
    lines = [(0, 1, 2), (3, 4, 5), (6, 7, 8), (0, 3, 6),
             (1, 4, 7), (2, 5, 8), (0, 4, 8), (2, 4, 6)]
    for line in lines:
        mask = sum(1 << i for i in line)
        assert GameState(Player.O, x_mask=mask).winner() is Player.X
        assert GameState(Player.X, o_mask=mask).winner() is Player.O


def test_winner_ignores_turn_and_two_in_a_row():
    assert from_board("XX-OO----").winner() is None
    assert GameState(Player.X, x_mask=0b111).winner() is Player.X


def test_moves_order_and_single_cell_difference():
    s = from_board("X---O----")
    succ = moves(s)
    assert [to_board(m) for m in succ] == [
        "XX--O----",
        "X-X-O----",
        "X--XO----",
        "X---OX---",
        "X---O-X--",
        "X---O--X-",
        "X---O---X",
    ]
    assert s.move_cells() == [1, 2, 3, 5, 6, 7, 8]
    for m in succ:
        assert m.turn is Player.O
        assert m.o_occupied == s.o_occupied
        assert len(m.x_occupied - s.x_occupied) == 1


def test_moves_is_restartable():
    s = new()
    assert s.moves() == s.moves()
    assert len(s.moves()) == 9


def test_won_position_has_no_moves_despite_empty_cells():
    s = GameState(Player.O, x_mask=0b111)
    assert s.winner() is Player.X
    assert moves(s) == []
    assert s.move_cells() == []
    assert score(s) == 1
    assert s.status() is Status.X_WON


def test_parsed_x_win():
    s = from_board("XXXOO----")
    assert s.turn is Player.O
    assert s.moves() == []
    assert s.score() == 1


def test_o_win_scores_minus_one():
    s = from_board("OOOXX-X--")
    assert s.winner() is Player.O
    assert s.status() is Status.O_WON
    assert s.moves() == []
    assert s.score() == -1


def test_double_line_board_reports_x_first():
    # both sides hold a row; X is checked before O
    s = from_board("XXXOOO---")
    assert s.turn is Player.X
    assert s.winner() is Player.X
    assert s.status() is Status.X_WON
    assert s.moves() == []
    assert s.score() == 1


def test_full_board_without_line_is_draw():
    s = from_board("XXOOOXXOX")
    assert s.winner() is None
    assert s.moves() == []
    assert s.status() is Status.DRAWN
    assert s.is_terminal()
    assert s.score() == 0


def test_regression_board_scores_by_recursion():
    s = from_board("XXOOXX--O")
    # 7 filled cells: odd, so O moves next
    assert s.turn is Player.O
    assert s.winner() is None
    assert [to_board(m) for m in s.moves()] == ["XXOOXXO-O", "XXOOXX-OO"]
    assert [m.score() for m in s.moves()] == [1, 0]
    assert s.score() == 0


def test_x_to_move_takes_the_max():
    # X wins at 6 or 8; playing 7 lets O complete 2-5-8
    s = from_board("XOOXXO---")
    assert s.turn is Player.X
    assert [m.score() for m in s.moves()] == [1, -1, 1]
    assert s.score() == 1


def test_bounded_depth_is_unsupported():
    s = from_board("XXOOXX--O")
    with pytest.raises(UnsupportedDepthError) as ei:
        s.score(depth=2)
    assert ei.value.depth == 2
    with pytest.raises(NotImplementedError):
        score(s, 0)


def test_bounded_depth_is_rejected_even_on_terminal_states():
    with pytest.raises(UnsupportedDepthError):
        from_board("XXOOOXXOX").score(depth=1)


def test_empty_board_is_a_forced_draw():
    assert score(new()) == 0
