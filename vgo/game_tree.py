# game_tree.py
#
# Branch store for a game with variations.
#
# Storage: a Segment is a linear run of Steps, optionally followed by a branch
# point holding two or more child Segments. The first Step of each child is one
# sibling of that branch point.
#
# Addressing: a route is a tuple (n0, b1, n1, b2, n2, ...). n0 counts plies
# taken along the root Segment; each (b, n) pair picks child b at the branch
# point reached so far and walks n >= 1 plies into it. The empty position is
# (0,). Looking a route up gives one of:
#   Absent()        nothing played there yet
#   Single(step)    an unambiguous step
#   Branch(steps)   the siblings of a branch point (the route names the ply
#                   right after the end of a run that has children)
#
# Structural edits (divide, delete) shift the addresses of steps after the
# edited point; routes held across such an edit must be re-validated.
from collections import namedtuple
from typing import List, Optional, Tuple

from vgo.goban_model import InvalidRoute, Stone, opponent

DEBUG = False

ROOT = (0,)

MARK_KINDS = ('LB', 'TR', 'CR', 'SQ', 'MA', 'SL')

# label marks count A..Z, then a..z, then start over
LABEL_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

Absent = namedtuple('Absent', [])
Single = namedtuple('Single', ['step'])
Branch = namedtuple('Branch', ['steps'])

ABSENT = Absent()


class Mark:
    __slots__ = ("point", "kind", "label")

    def __init__(self, point, kind: str, label: Optional[str] = None):
        if kind not in MARK_KINDS:
            raise ValueError("Unknown mark kind %r" % (kind,))
        self.point = tuple(point)
        self.kind = kind
        self.label = label

    def __eq__(self, other):
        if not isinstance(other, Mark):
            return NotImplemented
        return (self.point, self.kind, self.label) == (other.point, other.kind, other.label)

    def __repr__(self):
        extra = f":{self.label}" if self.label else ""
        return f"<Mark {self.kind}{extra} {self.point}>"


class Step:
    """
    One ply: the stone, its ply index, marks in insertion order and an
    optional comment. Two steps are equal when they put the same color on the
    same point; ply, marks and comment do not take part.
    """
    __slots__ = ("stone", "ply", "marks", "comment")

    def __init__(self, point, color: str, ply: int = 0):
        opponent(color)
        self.stone = Stone(tuple(point), color)
        self.ply = ply
        self.marks: List[Mark] = []
        self.comment: Optional[str] = None

    @property
    def point(self):
        return self.stone.point

    @property
    def color(self):
        return self.stone.color

    def add_mark(self, mark: Mark):
        self.marks.append(mark)

    def pop_mark(self) -> Optional[Mark]:
        return self.marks.pop() if self.marks else None

    def label_count(self) -> int:
        return sum(1 for m in self.marks if m.kind == 'LB')

    def next_label(self) -> str:
        return LABEL_LETTERS[self.label_count() % len(LABEL_LETTERS)]

    def add_comment(self, text: str):
        self.comment = text

    def __eq__(self, other):
        if not isinstance(other, Step):
            return NotImplemented
        return self.stone == other.stone

    def __hash__(self):
        return hash(self.stone)

    def __repr__(self):
        return f"<Step {self.color} {self.point} ply={self.ply} marks={len(self.marks)}>"


class Segment:
    __slots__ = ("steps", "branches")

    def __init__(self, steps: Optional[List[Step]] = None, branches: Optional[List["Segment"]] = None):
        self.steps: List[Step] = list(steps or [])
        self.branches: List["Segment"] = list(branches or [])

    def __repr__(self):
        return f"<Segment steps={len(self.steps)} branches={len(self.branches)}>"


def next_route(route) -> tuple:
    route = tuple(route)
    return route[:-1] + (route[-1] + 1,)


def route_ply(route) -> int:
    return sum(route[0::2])


class GameTree:

    def __init__(self, root: Optional[Segment] = None):
        self.root: Segment = root if root is not None else Segment()

    def reset(self):
        self.root = Segment()

    def init(self, seed: Segment):
        self.root = seed

    # -------------------------
    # Addressing
    # -------------------------
    def _locate(self, route) -> Optional[Tuple[Segment, int, Optional[Segment], Optional[int]]]:
        """
        Resolve route to (segment, n, parent, branch_index), n being the ply
        count inside segment. Returns None if the route cannot address anything.
        """
        try:
            route = tuple(int(i) for i in route)
        except (TypeError, ValueError):
            return None
        if not route or len(route) % 2 == 0 or any(i < 0 for i in route):
            return None
        seg = self.root
        parent = None
        index = None
        n = route[0]
        for i in range(1, len(route), 2):
            b, m = route[i], route[i + 1]
            # a branch can only be entered from the end of the run
            if n != len(seg.steps) or b >= len(seg.branches) or m < 1:
                return None
            parent, index, seg, n = seg, b, seg.branches[b], m
        return seg, n, parent, index

    def get(self, route):
        loc = self._locate(route)
        if loc is None:
            return ABSENT
        seg, n, _, _ = loc
        if n == 0:
            return ABSENT
        if n <= len(seg.steps):
            return Single(seg.steps[n - 1])
        if n == len(seg.steps) + 1 and seg.branches:
            return Branch([b.steps[0] for b in seg.branches])
        return ABSENT

    def is_valid(self, route) -> bool:
        """True for the root and for routes naming a single step."""
        if self._locate(route) is None:
            return False
        return tuple(route) == ROOT or isinstance(self.get(route), Single)

    def require(self, route) -> Step:
        node = self.get(route)
        if not isinstance(node, Single):
            raise InvalidRoute("No step at route %r" % (tuple(route),))
        return node.step

    def path(self, route) -> Optional[List[Step]]:
        """Steps from the root down to route (inclusive), None for invalid routes."""
        if not self.is_valid(route):
            return None
        steps: List[Step] = []
        seg = self.root
        for i in range(1, len(route), 2):
            steps.extend(seg.steps)
            seg = seg.branches[route[i]]
        steps.extend(seg.steps[:route[-1]])
        return steps

    def branch_count(self, route) -> int:
        node = self.get(route)
        return len(node.steps) if isinstance(node, Branch) else 0

    # -------------------------
    # Mutation
    # -------------------------
    def insert(self, parent_route, step: Step) -> bool:
        """Store step as the sole continuation after parent_route, which must be a leaf."""
        loc = self._locate(parent_route)
        if loc is None:
            return False
        seg, n, _, _ = loc
        if n != len(seg.steps) or seg.branches:
            return False
        seg.steps.append(step)
        if DEBUG:
            print("[GameTree] insert", step, "after", tuple(parent_route))
        return True

    def divide(self, route, step: Step) -> Optional[int]:
        """
        Turn the continuation at route into a branch point that also holds step.
        Returns the sibling index of step, or None if there is nothing to
        diverge from (or step is already there).
        """
        loc = self._locate(route)
        if loc is None:
            return None
        seg, n, parent, index = loc
        if n == 1 and parent is not None:
            # first step of a variation: the branch point is the parent's
            seg, n = parent, len(parent.steps) + 1
        if 1 <= n <= len(seg.steps):
            if seg.steps[n - 1] == step:
                return None
            tail = Segment(seg.steps[n - 1:], seg.branches)
            seg.steps = seg.steps[:n - 1]
            seg.branches = [tail, Segment([step])]
            result = 1
        elif n == len(seg.steps) + 1 and seg.branches:
            if any(b.steps[0] == step for b in seg.branches):
                return None
            seg.branches.append(Segment([step]))
            result = len(seg.branches) - 1
        else:
            return None
        if DEBUG:
            print("[GameTree] divide at", tuple(route), "->", result, "of", len(seg.branches))
        return result

    def find(self, route, step: Step, from_index: int = 0) -> Optional[int]:
        """Index of the sibling equal to step, scanning from from_index and wrapping."""
        node = self.get(route)
        if not isinstance(node, Branch):
            return None
        count = len(node.steps)
        start = from_index if 0 <= from_index < count else 0
        for offset in range(count):
            i = (start + offset) % count
            if node.steps[i] == step:
                return i
        return None

    def delete(self, route) -> bool:
        """
        Remove the node at route with everything below it. A branch point left
        with a single child folds that child back into the parent run.
        """
        loc = self._locate(route)
        if loc is None:
            return False
        seg, n, parent, index = loc
        if n == 0:
            return False
        if n <= len(seg.steps):
            if n == 1 and parent is not None:
                del parent.branches[index]
                if len(parent.branches) == 1:
                    only = parent.branches[0]
                    parent.steps.extend(only.steps)
                    parent.branches = only.branches
            else:
                seg.steps = seg.steps[:n - 1]
                seg.branches = []
        elif n == len(seg.steps) + 1 and seg.branches:
            seg.branches = []
        else:
            return False
        if DEBUG:
            print("[GameTree] delete", tuple(route))
        return True

    # -------------------------
    # Introspection
    # -------------------------
    def walk(self, seg: Optional[Segment] = None, route=ROOT):
        """Yield (route, step) for every step, depth first, main line first."""
        seg = self.root if seg is None else seg
        base = tuple(route)
        for i, step in enumerate(seg.steps, start=1):
            yield base[:-1] + (base[-1] + i,), step
        end = base[:-1] + (base[-1] + len(seg.steps),)
        for b, child in enumerate(seg.branches):
            yield from self.walk(child, end + (b, 0))

    def size(self) -> int:
        return sum(1 for _ in self.walk())

    def shape(self, seg: Optional[Segment] = None):
        """Nested (stones, [child shapes]) description, for comparing trees."""
        seg = self.root if seg is None else seg
        return (tuple(s.stone for s in seg.steps), [self.shape(b) for b in seg.branches])
