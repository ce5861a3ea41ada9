# ui/board_view.py
from typing import Callable, Dict, List, Optional, Tuple

import gi
import cairo

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gtk, Gdk

from ui.goban_draw import (
    compute_layout,
    draw_branch_marks,
    draw_grid,
    draw_hoshi,
    draw_labels,
    draw_marks,
    draw_panel,
    draw_stones,
    point_at,
)
from vgo.viewer import Viewer


class BoardView(Gtk.Box, Viewer):
    """Cairo goban that the runtime pushes stones, marks and branch hints into."""

    def __init__(self, width: int = 19, height: int = 19):
        super().__init__(orientation=Gtk.Orientation.VERTICAL)
        self.cols = width
        self.rows = height
        self._layout: Dict = {}

        # pushed state
        self.stones: Dict[Tuple[int, int], str] = {}
        self.marks: Dict[Tuple[int, int], object] = {}
        self.branch_points: List[Tuple[int, int]] = []
        self.active_color = 'B'

        self.darea = Gtk.DrawingArea()
        self.darea.set_hexpand(True)
        self.darea.set_vexpand(True)
        self.darea.set_draw_func(self.on_draw, None)

        click = Gtk.GestureClick.new()
        click.set_button(0)
        click.connect("pressed", self._on_pressed)
        self.darea.add_controller(click)
        self.append(self.darea)

        self._click_cb: Optional[Callable[[int, int], None]] = None
        self._ctrl_click_cb: Optional[Callable[[int, int], None]] = None

    # Public API
    def on_click(self, callback):
        self._click_cb = callback

    def on_ctrl_click(self, callback):
        self._ctrl_click_cb = callback

    # Viewer
    def place_stone(self, x: int, y: int, color: str):
        self.stones[(x, y)] = color
        self.darea.queue_draw()

    def remove_stone(self, x: int, y: int):
        self.stones.pop((x, y), None)
        self.darea.queue_draw()

    def draw_mark(self, mark):
        self.marks[mark.point] = mark
        self.darea.queue_draw()

    def clear_mark(self, x: int, y: int):
        self.marks.pop((x, y), None)
        self.darea.queue_draw()

    def set_active_color(self, color: str):
        self.active_color = color

    def clear_branch_marks(self):
        self.branch_points = []
        self.darea.queue_draw()

    def show_branch_marks(self, points):
        self.branch_points = list(points)
        self.darea.queue_draw()

    # Events
    def _on_pressed(self, gesture, n_press, px, py):
        if not self._layout:
            return
        pt = point_at(self._layout, px, py)
        if pt is None:
            return
        ctrl = False
        ev = gesture.get_current_event()
        if ev is not None:
            state = ev.get_modifier_state()
            ctrl = bool(state & Gdk.ModifierType.CONTROL_MASK)
        callback = self._ctrl_click_cb if ctrl else self._click_cb
        if callback is not None:
            callback(*pt)

    # Drawing
    def on_draw(self, area, cr: cairo.Context, width: int, height: int, user_data):
        self._layout = compute_layout(self.cols, self.rows, width, height)
        draw_panel(cr, self._layout, width, height)
        draw_grid(cr, self._layout)
        draw_hoshi(cr, self._layout)
        draw_labels(cr, self._layout)
        draw_stones(cr, self._layout, self.stones)
        draw_branch_marks(cr, self._layout, [p for p in self.branch_points if p not in self.stones])
        draw_marks(cr, self._layout, self.marks)
