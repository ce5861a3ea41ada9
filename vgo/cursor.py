# cursor.py
from typing import Dict, Tuple

from vgo.game_tree import ROOT, next_route, route_ply

DEBUG = False


class Cursor:
    """
    Active route into the game tree. Only route arithmetic lives here; the
    runtime re-syncs the board after every move of the cursor.
    """

    def __init__(self):
        self.route: Tuple[int, ...] = ROOT
        # branch point route -> last sibling index chosen there
        self._chosen: Dict[Tuple[int, ...], int] = {}

    @property
    def ply(self) -> int:
        return route_ply(self.route)

    def reset(self):
        self.route = ROOT
        self._chosen = {}

    def next(self) -> Tuple[int, ...]:
        return next_route(self.route)

    def continue_(self):
        self.route = self.next()

    def checkout(self, branch_index: int):
        self._chosen[self.route] = branch_index
        self.route = self.route + (branch_index, 1)

    def back(self) -> bool:
        if self.route == ROOT:
            return False
        last = self.route[-1] - 1
        if last == 0 and len(self.route) > 1:
            # left the variation: drop its selector too
            self.route = self.route[:-2]
        else:
            self.route = self.route[:-1] + (last,)
        return True

    def jump(self, route):
        self.route = self.canonical(route)
        if DEBUG:
            print("[Cursor] jump", self.route)

    def last_branch(self, route=None) -> int:
        return self._chosen.get(self.route if route is None else tuple(route), 0)

    @staticmethod
    def canonical(route) -> Tuple[int, ...]:
        route = tuple(route)
        if len(route) % 2 == 0:
            route = route[:-1]
        while len(route) > 1 and route[-1] == 0:
            route = route[:-2]
        return route or ROOT
