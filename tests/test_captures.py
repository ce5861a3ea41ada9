# tests/test_captures.py
from vgo.goban_model import Board, Stone
from vgo.rules import RuleEngine
from vgo.runtime import Runtime


def _play(board, rule, color, point):
    captured = rule.check(board, point, color)
    return board.play(Stone(point, color), captured)


def test_single_capture():
    # white in the centre of 3x3, black closes the four sides
    b = Board(3, 3)
    rule = RuleEngine()
    _play(b, rule, 'W', (1, 1))
    _play(b, rule, 'B', (1, 0))
    _play(b, rule, 'B', (0, 1))
    _play(b, rule, 'B', (2, 1))
    removed = _play(b, rule, 'B', (1, 2))  # last liberty
    assert b.get((1, 1)) is None
    assert removed == [Stone((1, 1), 'W')]
    assert b.ledger == {5: [Stone((1, 1), 'W')]}


def test_group_capture():
    b = Board(3, 3)
    rule = RuleEngine()
    _play(b, rule, 'W', (0, 0))
    _play(b, rule, 'W', (1, 0))
    _play(b, rule, 'B', (0, 1))
    _play(b, rule, 'B', (1, 1))
    removed = _play(b, rule, 'B', (2, 0))
    assert removed == [Stone((0, 0), 'W'), Stone((1, 0), 'W')]
    assert b.pretty() == "..B\nBB.\n..."


def test_only_dead_group_is_removed():
    b = Board(5, 5)
    rule = RuleEngine()
    _play(b, rule, 'W', (0, 0))
    _play(b, rule, 'B', (1, 0))
    _play(b, rule, 'W', (1, 1))
    _play(b, rule, 'B', (0, 1))
    assert b.get((0, 0)) is None
    assert b.get((1, 1)) == 'W'
    assert b.ledger == {4: [Stone((0, 0), 'W')]}


def test_take_back_restores_captured_stones():
    b = Board(3, 3)
    rule = RuleEngine()
    for color, point in [('W', (1, 1)), ('B', (1, 0)), ('B', (0, 1)), ('B', (2, 1))]:
        _play(b, rule, color, point)
    before = b.get_board()
    _play(b, rule, 'B', (1, 2))
    assert b.take_back() == Stone((1, 2), 'B')
    assert b.get_board() == before
    assert b.ledger == {}
    assert b.ply == 4


def test_take_back_of_quiet_ply_is_plain_removal():
    b = Board(3, 3)
    _play(b, RuleEngine(), 'B', (0, 0))
    b.take_back()
    assert b.get((0, 0)) is None
    assert b.take_back() is None


def test_surrounded_stone_captured_through_runtime():
    rt = Runtime(board_size=5)
    assert rt.put_stone((2, 2), 'W')
    for point in [(1, 2), (3, 2), (2, 1)]:
        assert rt.put_stone(point, 'B')
    assert rt.board.ledger == {}
    assert rt.put_stone((2, 3), 'B')
    assert rt.board.get((2, 2)) is None
    assert rt.board.ledger == {5: [Stone((2, 2), 'W')]}
