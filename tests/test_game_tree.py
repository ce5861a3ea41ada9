# tests/test_game_tree.py
import pytest
from vgo.game_tree import ABSENT, Branch, GameTree, Mark, ROOT, Single, Step
from vgo.goban_model import InvalidRoute, Stone


def s(x, y, color='B'):
    return Step((x, y), color)


def _linear():
    tree = GameTree()
    assert tree.insert((0,), s(0, 0, 'B'))
    assert tree.insert((1,), s(1, 0, 'W'))
    assert tree.insert((2,), s(2, 0, 'B'))
    return tree


def test_empty_tree():
    tree = GameTree()
    assert tree.get(ROOT) == ABSENT
    assert tree.get((1,)) == ABSENT
    assert tree.is_valid(ROOT)
    assert not tree.is_valid((1,))
    assert tree.path(ROOT) == []


def test_step_equality_ignores_ply_and_marks():
    a = Step((3, 3), 'B', 1)
    b = Step((3, 3), 'B', 7)
    b.add_mark(Mark((0, 0), 'TR'))
    assert a == b
    assert a != Step((3, 3), 'W', 1)
    assert a != Step((3, 4), 'B', 1)


def test_insert_only_at_a_leaf():
    tree = _linear()
    assert tree.get((2,)) == Single(s(1, 0, 'W'))
    assert tree.insert((1,), s(5, 5)) is False
    assert tree.size() == 3


def test_divide_single_step():
    tree = _linear()
    assert tree.divide((2,), s(5, 5, 'W')) == 1
    node = tree.get((2,))
    assert isinstance(node, Branch)
    assert node.steps == [s(1, 0, 'W'), s(5, 5, 'W')]
    assert tree.get((1, 0, 1)).step == s(1, 0, 'W')
    assert tree.get((1, 0, 2)).step == s(2, 0, 'B')
    assert tree.get((1, 1, 1)).step == s(5, 5, 'W')
    assert tree.get((1, 1, 2)) == ABSENT
    # the old address of the tail is gone
    assert not tree.is_valid((3,))


def test_divide_branch_appends_sibling():
    tree = _linear()
    tree.divide((2,), s(5, 5, 'W'))
    assert tree.divide((2,), s(6, 6, 'W')) == 2
    assert tree.branch_count((2,)) == 3


def test_divide_failure_sentinel():
    tree = _linear()
    assert tree.divide((4,), s(5, 5)) is None
    assert tree.divide((2,), s(1, 0, 'W')) is None
    tree.divide((2,), s(5, 5, 'W'))
    assert tree.divide((2,), s(5, 5, 'W')) is None


def test_divide_at_first_move():
    tree = _linear()
    assert tree.divide((1,), s(3, 3)) == 1
    assert tree.root.steps == []
    assert tree.get((0, 0, 1)).step == s(0, 0)
    assert tree.get((0, 1, 1)).step == s(3, 3)
    assert tree.path((0, 1, 1)) == [s(3, 3)]
    assert tree.path((0, 0, 3)) == [s(0, 0), s(1, 0, 'W'), s(2, 0)]


def test_find_wraps_around():
    tree = _linear()
    tree.divide((2,), s(5, 5, 'W'))
    tree.divide((2,), s(6, 6, 'W'))
    assert tree.find((2,), s(1, 0, 'W'), 2) == 0
    assert tree.find((2,), s(6, 6, 'W'), 0) == 2
    assert tree.find((2,), s(7, 7, 'W'), 1) is None
    assert tree.find((1,), s(0, 0), 0) is None


def test_delete_collapses_branch():
    tree = _linear()
    before = tree.shape()
    tree.divide((2,), s(5, 5, 'W'))
    assert tree.delete((1, 1, 1))
    assert tree.shape() == before
    assert tree.get((3,)).step == s(2, 0)


def test_delete_truncates_run():
    tree = _linear()
    assert tree.delete((2,))
    assert tree.shape() == ((Stone((0, 0), 'B'),), [])
    assert tree.get((2,)) == ABSENT


def test_delete_shifts_sibling_addresses():
    tree = _linear()
    tree.divide((2,), s(5, 5, 'W'))
    tree.divide((2,), s(6, 6, 'W'))
    assert tree.delete((1, 0, 1))
    assert tree.get((1, 0, 1)).step == s(5, 5, 'W')
    assert tree.get((1, 1, 1)).step == s(6, 6, 'W')
    assert not tree.is_valid((1, 2, 1))


def test_delete_branch_point_removes_all_variations():
    tree = _linear()
    tree.divide((2,), s(5, 5, 'W'))
    assert tree.delete((2,))
    assert tree.shape() == ((Stone((0, 0), 'B'),), [])


def test_delete_invalid_routes():
    tree = _linear()
    assert tree.delete(ROOT) is False
    assert tree.delete((9,)) is False
    assert tree.delete((1, 0, 1)) is False
    assert tree.size() == 3


def test_malformed_routes_are_absent():
    tree = _linear()
    for route in [(), (1, 0), (-1,), (1, 5, 1), ("x",)]:
        assert tree.get(route) == ABSENT
        assert not tree.is_valid(route)
        assert tree.path(route) is None


def test_require_raises_invalid_route():
    tree = _linear()
    assert tree.require((3,)) == s(2, 0)
    with pytest.raises(InvalidRoute):
        tree.require((4,))


def test_walk_visits_every_step_with_its_route():
    tree = _linear()
    tree.divide((2,), s(5, 5, 'W'))
    routes = [(route, step.stone) for route, step in tree.walk()]
    assert routes == [
        ((1,), Stone((0, 0), 'B')),
        ((1, 0, 1), Stone((1, 0), 'W')),
        ((1, 0, 2), Stone((2, 0), 'B')),
        ((1, 1, 1), Stone((5, 5), 'W')),
    ]
    for route, step in tree.walk():
        assert tree.get(route).step is step
