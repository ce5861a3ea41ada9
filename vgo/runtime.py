# runtime.py
from typing import Callable, Dict, List, Optional, Tuple

from vgo import sgf
from vgo.config import Properties
from vgo.cursor import Cursor
from vgo.game_tree import Absent, Branch, GameTree, MARK_KINDS, Mark, ROOT, Segment, Single, Step
from vgo.goban_model import BLACK, Board, Stone, opponent
from vgo.rules import RuleEngine
from vgo.viewer import Viewer

DEBUG = False

EVENTS = (
    "on_stone_created",  # (route, step) a new step entered the tree
    "on_stone_deleted",  # (route, step) recall removed a step
    "on_branch_move",  # () the cursor switched variation
    "on_player_changed",  # (route) navigation moved the cursor
    "on_sgf_changed",  # (route, step) tree content or position changed
)


class Runtime:
    """
    Facade over rule engine, game tree, cursor and board projection.
    The board always equals a replay of the cursor's route from the root.
    """

    def __init__(self, rule: Optional[RuleEngine] = None, **options):
        self.properties = Properties(**options)
        self.rule = rule if rule is not None else RuleEngine(ko=self.properties.ko)
        self.front: Viewer = Viewer()
        self.board = Board(self.properties.x, self.properties.y)
        self.tree = GameTree()
        self.cursor = Cursor()
        self.handlers: Dict[str, Optional[Callable]] = {name: None for name in EVENTS}
        if self.properties.data:
            self.init_by_sgf(self.properties.data)

    # --- events ---
    def _fire(self, name: str, *args):
        handler = self.handlers.get(name)
        if handler is not None:
            handler(*args)

    def on_stone_created(self, callback: Optional[Callable]):
        self.handlers["on_stone_created"] = callback

    def on_stone_deleted(self, callback: Optional[Callable]):
        self.handlers["on_stone_deleted"] = callback

    def on_branch_move(self, callback: Optional[Callable]):
        self.handlers["on_branch_move"] = callback

    def on_player_changed(self, callback: Optional[Callable]):
        self.handlers["on_player_changed"] = callback

    def on_sgf_changed(self, callback: Optional[Callable]):
        self.handlers["on_sgf_changed"] = callback

    # --- front ---
    def set_front(self, front: Optional[Viewer]):
        self.front = front if front is not None else Viewer()
        self.board.front = self.front
        for (x, y), color in self.board.stones():
            self.front.place_stone(x, y, color)
        step = self.current_step()
        if step is not None:
            for mark in step.marks:
                self.front.draw_mark(mark)
        self._refresh_front()

    # --- loading / saving ---
    def _legal_moves(self, board: Board, segment: Segment) -> bool:
        """Play every stored line on a scratch board; False at the first illegal move."""
        played = 0
        try:
            for step in segment.steps:
                evaluation = self.rule.evaluate(board, step.point, step.color)
                if not evaluation.legal:
                    if DEBUG:
                        print("[Runtime] illegal stored move", step, evaluation.reason)
                    return False
                board.play(step.stone, evaluation.captured)
                played += 1
            return all(self._legal_moves(board, branch) for branch in segment.branches)
        finally:
            for _ in range(played):
                board.take_back()

    def _load(self, text: str) -> Optional[sgf.ParsedGame]:
        info = sgf.parse(text)
        if info is None:
            return None
        width, height = info.metadata["width"], info.metadata["height"]
        if not self._legal_moves(Board(width, height), info.tree):
            return None
        return info

    def _install(self, info: sgf.ParsedGame):
        self.properties.update(info.metadata)
        self.board.reset(self.properties.x, self.properties.y)
        self.tree.init(info.tree)
        self.cursor.reset()
        self._refresh_front()
        if DEBUG:
            print("[Runtime] loaded:", self.properties, "steps:", self.tree.size())

    def init_by_sgf(self, text: str) -> bool:
        """Load a game record; invalid text or an illegal stored move leaves state unchanged."""
        info = self._load(text)
        if info is None:
            if DEBUG:
                print("[Runtime] init_by_sgf: invalid SGF, state unchanged")
            return False
        self._install(info)
        return True

    def update_by_sgf(self, text: str) -> bool:
        """Replace the whole game; an invalid text leaves everything as it was."""
        info = self._load(text)
        if info is None:
            return False
        self.reset()
        self._install(info)
        return True

    def reset(self):
        self._clear_marks(self.current_step())
        self.board.reset()
        self.cursor.reset()
        self.tree.reset()
        self._refresh_front()

    def to_sgf(self) -> str:
        return sgf.serialize(self.properties.metadata(), self.tree.root)

    def __str__(self):
        return self.to_sgf()

    # --- queries ---
    @property
    def route(self) -> Tuple[int, ...]:
        return self.cursor.route

    def current_step(self) -> Optional[Step]:
        node = self.tree.get(self.cursor.route)
        return node.step if isinstance(node, Single) else None

    def current_player(self) -> str:
        step = self.current_step()
        return opponent(step.color) if step is not None else BLACK

    def branch_points(self) -> List[Tuple[int, int]]:
        node = self.tree.get(self.cursor.next())
        return [s.point for s in node.steps] if isinstance(node, Branch) else []

    # --- board sync ---
    def _sync_board(self):
        """Patch the board from its current stones to a replay of the cursor route."""
        target = self.tree.path(self.cursor.route) or []
        played = self.board.played
        common = 0
        while common < min(len(played), len(target)) and played[common] == target[common].stone:
            common += 1
        while self.board.ply > common:
            self.board.take_back()
        for step in target[common:]:
            if self.board.get(step.point) is not None and DEBUG:
                print("[Runtime] replay onto occupied point", step)
            self.board.play(step.stone, self.rule.captures(self.board, step.point, step.color))

    def _refresh_front(self):
        self.front.set_active_color(self.current_player())
        self.front.clear_branch_marks()
        points = self.branch_points()
        if points:
            self.front.show_branch_marks(points)

    def _clear_marks(self, step: Optional[Step]):
        if step is not None:
            for mark in step.marks:
                self.front.clear_mark(*mark.point)

    def _move_cursor(self, move: Callable[[], object]):
        previous = self.current_step()
        result = move()
        self._clear_marks(previous)
        self._sync_board()
        step = self.current_step()
        if step is not None:
            for mark in step.marks:
                self.front.draw_mark(mark)
        self._refresh_front()
        return result

    # --- placement ---
    def put_stone(self, point, color: str) -> bool:
        """
        Play color at point from the current position. Illegal moves change
        nothing and fire nothing; returns whether the move was accepted.
        """
        point = tuple(point)
        evaluation = self.rule.evaluate(self.board, point, color)
        if not evaluation.legal:
            if DEBUG:
                print("[Runtime] illegal move", color, point, evaluation.reason)
            return False
        previous = self.current_step()
        step = Step(point, color, self.cursor.ply + 1)
        created = False
        changed = False
        candidate = self.cursor.next()
        exist = self.tree.get(candidate)
        if isinstance(exist, Single):
            if exist.step == step:
                # replay of what is already there
                step = exist.step
                self.cursor.continue_()
            else:
                self.cursor.checkout(self.tree.divide(candidate, step))
                created = changed = True
        elif isinstance(exist, Branch):
            index = self.tree.find(candidate, step, self.cursor.last_branch())
            if index is None:
                index = self.tree.divide(candidate, step)
                created = True
            else:
                step = exist.steps[index]
            self.cursor.checkout(index)
            changed = True
        else:
            self.tree.insert(self.cursor.route, step)
            self.cursor.continue_()
            created = True

        self._clear_marks(previous)
        self.board.play(Stone(point, color), evaluation.captured)
        for mark in step.marks:
            self.front.draw_mark(mark)
        self._refresh_front()
        if DEBUG:
            print("[Runtime] put_stone", step, "route", self.cursor.route, "created", created, "changed", changed)

        if created:
            self._fire("on_stone_created", self.cursor.route, step)
        if changed:
            self._fire("on_branch_move")
        self._fire("on_sgf_changed", self.cursor.route, step)
        return True

    def del_stone(self, route) -> bool:
        """Delete the step at route and everything after it; the cursor moves to its parent."""
        route = tuple(route)
        if not self.tree.is_valid(route):
            return False
        parent = list(route)
        parent[-1] -= 1
        if parent[-1] < 0:
            parent.pop()
        self._clear_marks(self.current_step())
        self.cursor.jump(parent)
        deleted = self.tree.delete(route)
        self._move_cursor(lambda: None)
        if DEBUG:
            print("[Runtime] del_stone", route, "->", self.cursor.route, "deleted", deleted)
        self._fire("on_sgf_changed", self.cursor.route, self.current_step())
        return deleted

    def recall(self) -> bool:
        """Undo the last mark, or else the last step, at the end of a variation."""
        if self.cursor.ply == 0 or not isinstance(self.tree.get(self.cursor.next()), Absent):
            return False
        current = self.current_step()
        if current is None:
            return False
        if current.marks:
            mark = current.pop_mark()
            self.front.clear_mark(*mark.point)
            for left in current.marks:
                if left.point == mark.point:
                    self.front.draw_mark(left)
        else:
            deleted = self.cursor.route
            self._move_cursor(self.cursor.back)
            self.tree.delete(deleted)
            self._refresh_front()
            self._fire("on_stone_deleted", deleted, current)
        self._fire("on_sgf_changed", self.cursor.route, current)
        return True

    # --- annotations ---
    def put_mark(self, point, kind: str) -> bool:
        if kind not in MARK_KINDS:
            raise ValueError("Unknown mark kind %r" % (kind,))
        point = tuple(point)
        self.board.check_point(point)
        current = self.current_step()
        if current is None:
            return False
        label = current.next_label() if kind == 'LB' else None
        mark = Mark(point, kind, label)
        self.front.draw_mark(mark)
        current.add_mark(mark)
        self._fire("on_sgf_changed", self.cursor.route, current)
        return True

    def add_comment(self, text: str) -> bool:
        current = self.current_step()
        if current is None:
            return False
        current.add_comment(text)
        return True

    def get_comment(self) -> str:
        current = self.current_step()
        if current is None or not current.comment:
            return ''
        return current.comment

    # --- navigation ---
    def _navigated(self, moved) -> bool:
        if moved:
            self._fire("on_player_changed", self.cursor.route)
        return bool(moved)

    def _step_forward(self) -> bool:
        exist = self.tree.get(self.cursor.next())
        if isinstance(exist, Single):
            self.cursor.continue_()
        elif isinstance(exist, Branch):
            index = self.cursor.last_branch()
            self.cursor.checkout(index if index < len(exist.steps) else 0)
        else:
            return False
        return True

    def forward(self) -> bool:
        return self._navigated(self._move_cursor(self._step_forward))

    def backward(self) -> bool:
        return self._navigated(self._move_cursor(self.cursor.back))

    def go_to(self, route) -> bool:
        route = Cursor.canonical(route)
        if not self.tree.is_valid(route):
            return False

        def jump():
            moved = route != self.cursor.route
            self.cursor.jump(route)
            return moved

        return self._navigated(self._move_cursor(jump))

    def first(self) -> bool:
        return self.go_to(ROOT)

    def _to_leaf(self) -> bool:
        moved = False
        while self._step_forward():
            moved = True
        return moved

    def last(self) -> bool:
        """Follow the remembered variations down to the end."""
        return self._navigated(self._move_cursor(self._to_leaf))
