# tests/test_suicide_and_merge.py
import pytest
from vgo.goban_model import Board, Stone, Suicide
from vgo.rules import RuleEngine
from vgo.runtime import Runtime


def _board(size, stones):
    b = Board(size, size)
    for color, point in stones:
        b.play(Stone(point, color))
    return b


def test_simple_suicide_forbidden():
    # corner (0,0) closed by black
    b = _board(3, [('B', (1, 0)), ('B', (0, 1))])
    with pytest.raises(Suicide):
        RuleEngine().check(b, (0, 0), 'W')


def test_group_suicide_forbidden():
    b = _board(3, [('W', (0, 1)), ('B', (1, 0)), ('B', (1, 1)), ('B', (0, 2))])
    ev = RuleEngine().evaluate(b, (0, 0), 'W')
    assert not ev.legal
    assert isinstance(ev.reason, Suicide)


def test_capture_beats_suicide():
    # black fills a point with no liberties of its own but takes (1,0)
    b = _board(3, [('W', (1, 0)), ('B', (2, 0)), ('B', (1, 1)), ('W', (0, 1))])
    ev = RuleEngine().evaluate(b, (0, 0), 'B')
    assert ev.legal
    assert ev.captured == {(1, 0)}


def test_merge_prevents_suicide():
    b = _board(3, [('W', (0, 1)), ('B', (1, 0))])
    ev = RuleEngine().evaluate(b, (0, 0), 'W')
    assert ev.legal
    stones, libs = b.group_and_liberties((0, 1))
    assert libs == {(0, 0), (1, 1), (0, 2)}


def test_runtime_rejects_suicide_silently(events):
    rt = Runtime(board_size=3)
    rt.put_stone((1, 0), 'B')
    rt.put_stone((0, 1), 'B')
    events.attach(rt)
    shape = rt.tree.shape()
    assert rt.put_stone((0, 0), 'W') is False
    assert events.calls == []
    assert rt.tree.shape() == shape
    assert rt.route == (2,)
    assert rt.board.get((0, 0)) is None
