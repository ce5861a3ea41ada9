# tests/conftest.py
import pytest

from vgo.goban_model import Board
from vgo.rules import RuleEngine
from vgo.runtime import EVENTS
from vgo.viewer import Viewer


class EventLog:
    def __init__(self):
        self.calls = []

    def attach(self, runtime):
        for name in EVENTS:
            getattr(runtime, name)(self._recorder(name))
        return self

    def _recorder(self, name):
        return lambda *args: self.calls.append((name,) + args)

    def names(self):
        return [c[0] for c in self.calls]

    def clear(self):
        self.calls = []


class RecordingViewer(Viewer):
    def __init__(self):
        self.calls = []
        self.stones = {}
        self.marks = {}
        self.branch_points = []
        self.active_color = None

    def place_stone(self, x, y, color):
        self.calls.append(("place_stone", x, y, color))
        self.stones[(x, y)] = color

    def remove_stone(self, x, y):
        self.calls.append(("remove_stone", x, y))
        self.stones.pop((x, y), None)

    def draw_mark(self, mark):
        self.calls.append(("draw_mark", mark))
        self.marks[mark.point] = mark

    def clear_mark(self, x, y):
        self.calls.append(("clear_mark", x, y))
        self.marks.pop((x, y), None)

    def set_active_color(self, color):
        self.active_color = color

    def clear_branch_marks(self):
        self.branch_points = []

    def show_branch_marks(self, points):
        self.branch_points = list(points)


def replay(tree, route, width, height):
    """Board rebuilt from scratch by playing every step on the route."""
    board = Board(width, height)
    rule = RuleEngine()
    for step in tree.path(route):
        board.play(step.stone, rule.captures(board, step.point, step.color))
    return board


@pytest.fixture
def events():
    return EventLog()


@pytest.fixture
def viewer():
    return RecordingViewer()


@pytest.fixture
def replayed():
    return replay
