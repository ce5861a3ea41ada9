# rules.py
from collections import namedtuple
from typing import Set

from vgo.goban_model import Board, OccupiedPoint, Suicide, KoViolation, IllegalMove, opponent

# legal: bool; captured: frozenset of points; reason: IllegalMove instance or None
Evaluation = namedtuple('Evaluation', ['legal', 'captured', 'reason'])


class RuleEngine:
    """
    Legality and capture evaluation against a Board.
    The board is used as scratch space during a call and restored before
    returning; callers apply the returned captures themselves.
    """

    def __init__(self, ko=False):
        self.ko = ko

    def check(self, board: Board, point, color) -> Set[tuple]:
        """Raise IllegalMove subclass if illegal, otherwise return the captured points."""
        opponent(color)
        if board.get(point) is not None:
            raise OccupiedPoint("Point occupied")
        # place temporarily
        board.set_point(point, color)
        removed = []
        try:
            captured = set()
            for group in board.dead_groups_around(point, opponent(color)):
                captured |= group
            # remove them temporarily
            for p in captured:
                removed.append((p, board.get(p)))
                board.set_point(p, None)
            stones, libs = board.group_and_liberties(point)
        finally:
            # revert temporary placement and removals
            for p, col in removed:
                board.set_point(p, col)
            board.set_point(point, None)
        if len(libs) == 0:
            raise Suicide("Move would be suicide")
        if self.ko and self._retakes_ko(board, point, color, captured, stones, libs):
            raise KoViolation("Ko: immediate recapture")
        return captured

    def _retakes_ko(self, board: Board, point, color, captured, stones, libs):
        # a single stone taking a single stone, left in atari on the vacated point
        if len(captured) != 1 or len(stones) != 1 or libs != captured:
            return False
        last = board.last_stone()
        if last is None or last.point not in captured:
            return False
        # ... which itself just took exactly one of ours on this very point
        taken = board.captured_at(board.ply)
        return len(taken) == 1 and taken[0].point == point and taken[0].color == color

    def evaluate(self, board: Board, point, color) -> Evaluation:
        try:
            captured = self.check(board, point, color)
        except IllegalMove as e:
            return Evaluation(False, frozenset(), e)
        return Evaluation(True, frozenset(captured), None)

    def captures(self, board: Board, point, color) -> Set[tuple]:
        """Points captured by playing color at point, without any legality check."""
        if board.get(point) is not None:
            return set()
        board.set_point(point, color)
        try:
            captured = set()
            for group in board.dead_groups_around(point, opponent(color)):
                captured |= group
        finally:
            board.set_point(point, None)
        return captured
