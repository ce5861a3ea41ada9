# goban_model.py
from collections import namedtuple
from typing import Dict, List, Optional, Tuple

DEBUG = False

BLACK = 'B'
WHITE = 'W'
COLORS = (BLACK, WHITE)


# Exceptions
class IllegalMove(Exception): pass


class OccupiedPoint(IllegalMove): pass


class Suicide(IllegalMove): pass


class KoViolation(IllegalMove): pass


class OutOfBounds(ValueError): pass


class InvalidRoute(LookupError): pass


Point = Tuple[int, int]

Stone = namedtuple('Stone', ['point', 'color'])


def opponent(color):
    if color not in COLORS:
        raise ValueError("Unknown color %r" % (color,))
    return WHITE if color == BLACK else BLACK


class Board:
    """
    Board projection: occupancy of the position reached by replaying the
    cursor's route, plus what is needed to walk it back one ply at a time.
      - played: one Stone per ply, in order
      - ledger: {ply: [Stone, ...]} stones removed by that ply's capture,
        present only for plies that captured something
    Points are (x, y) with 0 <= x < width, 0 <= y < height.
    """

    def __init__(self, width=19, height=19, front=None):
        self.width = width
        self.height = height
        self._board: List[List[Optional[str]]] = [[None] * width for _ in range(height)]
        self.played: List[Stone] = []
        self.ledger: Dict[int, List[Stone]] = {}
        self.front = front

    # --- helpers ---
    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def check_point(self, point):
        if point is None or len(point) != 2:
            raise OutOfBounds("Bad point %r" % (point,))
        x, y = point
        if not self.in_bounds(x, y):
            raise OutOfBounds("Point %r outside %dx%d board" % (point, self.width, self.height))

    def get(self, point):
        self.check_point(point)
        x, y = point
        return self._board[y][x]

    def set_point(self, point, color):
        """Raw write of one intersection; played and ledger are left alone."""
        x, y = point
        self._board[y][x] = color

    def neighbors(self, x, y):
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield nx, ny

    def group_and_liberties(self, start):
        """Return (stones_set, liberties_set) for group containing start."""
        color = self.get(start)
        if color is None: return set(), set()
        visited = set()
        liberties = set()
        stack = [start]
        while stack:
            p = stack.pop()
            if p in visited: continue
            visited.add(p)
            for n in self.neighbors(*p):
                v = self._board[n[1]][n[0]]
                if v is None:
                    liberties.add(n)
                elif v == color and n not in visited:
                    stack.append(n)
        return visited, liberties

    def dead_groups_around(self, point, enemy):
        """Enemy groups adjacent to point that have no liberties left."""
        seen = set()
        groups = []
        for n in self.neighbors(*point):
            if n in seen or self._board[n[1]][n[0]] != enemy:
                continue
            stones, libs = self.group_and_liberties(n)
            seen |= stones
            if len(libs) == 0:
                groups.append(stones)
        return groups

    # --- projection state ---
    @property
    def ply(self):
        return len(self.played)

    def last_stone(self) -> Optional[Stone]:
        return self.played[-1] if self.played else None

    def captured_at(self, ply) -> List[Stone]:
        return self.ledger.get(ply, [])

    def play(self, stone: Stone, captured=()):
        """
        Commit a placement already validated by the rule engine.
        Captured points are removed and written to the ledger under the new ply.
        """
        self.check_point(stone.point)
        self.set_point(stone.point, stone.color)
        self.played.append(stone)
        if self.front is not None:
            self.front.place_stone(stone.point[0], stone.point[1], stone.color)
        removed = []
        for p in sorted(captured):
            color = self.get(p)
            if color is None:
                continue
            removed.append(Stone(p, color))
            self.set_point(p, None)
            if self.front is not None:
                self.front.remove_stone(p[0], p[1])
        if removed:
            self.ledger[self.ply] = removed
        if DEBUG:
            print("[Board] play", stone, "ply", self.ply, "captured", removed)
        return removed

    def take_back(self) -> Optional[Stone]:
        """Undo the last ply, putting back whatever it captured."""
        if not self.played:
            return None
        ply = self.ply
        stone = self.played.pop()
        self.set_point(stone.point, None)
        if self.front is not None:
            self.front.remove_stone(stone.point[0], stone.point[1])
        for restored in self.ledger.pop(ply, []):
            self.set_point(restored.point, restored.color)
            if self.front is not None:
                self.front.place_stone(restored.point[0], restored.point[1], restored.color)
        if DEBUG:
            print("[Board] take_back", stone, "ply", ply)
        return stone

    def reset(self, width=None, height=None):
        if self.front is not None:
            for (x, y), _ in self.stones():
                self.front.remove_stone(x, y)
        self.width = width or self.width
        self.height = height or self.height
        self._board = [[None] * self.width for _ in range(self.height)]
        self.played = []
        self.ledger = {}

    def stones(self):
        for y, row in enumerate(self._board):
            for x, v in enumerate(row):
                if v is not None:
                    yield (x, y), v

    # utility for tests
    def pretty(self):
        rows = []
        for y in range(self.height):
            rows.append(''.join('.' if v is None else v for v in self._board[y]))
        return '\n'.join(rows)

    def get_board(self) -> List[List[Optional[str]]]:
        """Return a copy of the grid, rows indexed by y: list of lists with None/'B'/'W'."""
        return [row[:] for row in self._board]
