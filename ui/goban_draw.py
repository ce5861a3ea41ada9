# ui/goban_draw.py
"""
Cairo draw functions for a width x height goban:
- compute_layout
- draw_panel, draw_grid, draw_hoshi, draw_labels
- draw_stones, draw_marks, draw_branch_marks

Style comes from goban.env via python-dotenv.
"""
import math
import os
from typing import Dict, List, Tuple

import gi
import cairo

gi.require_version("Pango", "1.0")
gi.require_version("PangoCairo", "1.0")
from gi.repository import Pango, PangoCairo
from dotenv import load_dotenv

DEFAULT_STYLE = {}
DEFAULT_STYLE['env_path'] = os.path.join(os.path.dirname(__file__), "goban.env")
if os.path.exists(DEFAULT_STYLE['env_path']):
    load_dotenv(DEFAULT_STYLE['env_path'], override=False)


def getf(name: str, default: float) -> float:
    v = os.getenv(name)
    return float(v) if v is not None else float(default)


def gets(name: str, default: str) -> str:
    v = os.getenv(name)
    return v if v is not None else default


def get_rgb(name: str, default: str) -> Tuple[float, float, float]:
    rgb = gets(name, default).strip().lstrip('#')
    assert len(rgb) == 6
    return tuple(int(rgb[j:j + 2], 16) / 255 for j in range(0, 6, 2))


DEFAULT_STYLE['outer_margin_fixed'] = getf("OUTER_MARGIN_FIXED", 3)
DEFAULT_STYLE['inner_padding_fixed'] = getf("INNER_PADDING_FIXED", 6)
DEFAULT_STYLE['font_scale'] = getf("FONT_SCALE", 0.34)
DEFAULT_STYLE['stone_radius_factor'] = getf("STONE_RADIUS_FACTOR", 0.46)
DEFAULT_STYLE['hoshi_radius_factor'] = getf("HOSHI_RADIUS_FACTOR", 0.12)
DEFAULT_STYLE['line_width_factor'] = getf("LINE_WIDTH_FACTOR", 0.03)
DEFAULT_STYLE['mark_size_factor'] = getf("MARK_SIZE_FACTOR", 0.28)

DEFAULT_STYLE['neutral_outside'] = get_rgb("NEUTRAL_OUTSIDE", "#EBEBEB")
DEFAULT_STYLE['board_bg'] = get_rgb("BOARD_BG", "#C0742A")
DEFAULT_STYLE['line_color'] = get_rgb("LINE_COLOR", "#141414")
DEFAULT_STYLE['stone_black'] = get_rgb("STONE_BLACK", "#080808")
DEFAULT_STYLE['stone_white'] = get_rgb("STONE_WHITE", "#FCFCFC")
DEFAULT_STYLE['mark_color'] = get_rgb("MARK_COLOR", "#D02020")
DEFAULT_STYLE['branch_color'] = get_rgb("BRANCH_COLOR", "#2060D0")

DEFAULT_STYLE['font_family'] = gets("FONT_FAMILY", "Sans")


# Utility: column labels A.. (skip I)
def column_labels(n: int) -> List[str]:
    labels = []
    ch = ord('A')
    while len(labels) < n:
        c = chr(ch)
        ch += 1
        if c == 'I':
            continue
        labels.append(c)
    return labels


def row_labels(n: int) -> List[str]:
    return [str(n - i) for i in range(n)]


def create_layout(cr: cairo.Context, font_size: int, text: str):
    layout = PangoCairo.create_layout(cr)
    desc = Pango.font_description_from_string(f"{DEFAULT_STYLE['font_family']} {font_size}")
    layout.set_font_description(desc)
    layout.set_text(text, -1)
    return layout


def draw_text_cr(cr: cairo.Context, x: float, y: float, text: str,
                 font_size: int, align: str = "center", valign: str = "center", color=(0, 0, 0)):
    layout = create_layout(cr, font_size, text)
    w, h = layout.get_pixel_size()
    ox = {"center": x - w / 2.0, "left": x, "right": x - w}[align]
    oy = {"center": y - h / 2.0, "top": y, "bottom": y - h}[valign]
    cr.set_source_rgb(*color)
    cr.move_to(ox, oy)
    PangoCairo.show_layout(cr, layout)


def compute_layout(cols: int, rows: int, width: int, height: int) -> Dict:
    # label band on every side is one cell wide
    margin = DEFAULT_STYLE['outer_margin_fixed'] + DEFAULT_STYLE['inner_padding_fixed']
    cell = max(1.0, min((width - 2 * margin) / (cols + 2), (height - 2 * margin) / (rows + 2)))
    board_w = (cols + 2) * cell
    board_h = (rows + 2) * cell
    left = (width - board_w) / 2.0
    top = (height - board_h) / 2.0
    x0 = left + 1.5 * cell
    y0 = top + 1.5 * cell
    return {
        "viewport": (left, top, board_w, board_h),
        "cell": cell,
        "origin": (x0, y0),
        "size": (cols, rows),
        "font_px": max(8, int(round(cell * DEFAULT_STYLE['font_scale']))),
    }


def point_center(layout, x: int, y: int) -> Tuple[float, float]:
    x0, y0 = layout["origin"]
    cell = layout["cell"]
    return x0 + x * cell, y0 + y * cell


def point_at(layout, px: float, py: float):
    x0, y0 = layout["origin"]
    cell = layout["cell"]
    cols, rows = layout["size"]
    x = int(round((px - x0) / cell))
    y = int(round((py - y0) / cell))
    if 0 <= x < cols and 0 <= y < rows:
        return x, y
    return None


def draw_panel(cr: cairo.Context, layout, width: int, height: int):
    cr.set_source_rgb(*DEFAULT_STYLE['neutral_outside'])
    cr.rectangle(0, 0, width, height)
    cr.fill()
    cr.set_source_rgb(*DEFAULT_STYLE['board_bg'])
    cr.rectangle(*layout["viewport"])
    cr.fill()


def draw_grid(cr: cairo.Context, layout):
    cols, rows = layout["size"]
    cell = layout["cell"]
    x0, y0 = layout["origin"]
    cr.set_source_rgb(*DEFAULT_STYLE['line_color'])
    cr.set_line_width(max(1.0, cell * DEFAULT_STYLE['line_width_factor']))
    for i in range(cols):
        cr.move_to(x0 + i * cell, y0)
        cr.line_to(x0 + i * cell, y0 + (rows - 1) * cell)
    for j in range(rows):
        cr.move_to(x0, y0 + j * cell)
        cr.line_to(x0 + (cols - 1) * cell, y0 + j * cell)
    cr.stroke()


def hoshi_points(cols: int, rows: int) -> List[Tuple[int, int]]:
    def lines(n):
        if n < 7:
            return []
        edge = 2 if n < 13 else 3
        mid = [n // 2] if n % 2 == 1 and n >= 9 else []
        return [edge] + mid + [n - 1 - edge]

    return [(x, y) for x in lines(cols) for y in lines(rows)]


def draw_hoshi(cr: cairo.Context, layout):
    cols, rows = layout["size"]
    radius = max(1.0, layout["cell"] * DEFAULT_STYLE['hoshi_radius_factor'])
    cr.set_source_rgb(*DEFAULT_STYLE['line_color'])
    for x, y in hoshi_points(cols, rows):
        cx, cy = point_center(layout, x, y)
        cr.arc(cx, cy, radius, 0, 2.0 * math.pi)
        cr.fill()


def draw_labels(cr: cairo.Context, layout):
    cols, rows = layout["size"]
    cell = layout["cell"]
    font_px = layout["font_px"]
    for i, label in enumerate(column_labels(cols)):
        cx, cy = point_center(layout, i, 0)
        draw_text_cr(cr, cx, cy - cell, label, font_px)
        draw_text_cr(cr, cx, cy + rows * cell, label, font_px)
    for j, label in enumerate(row_labels(rows)):
        cx, cy = point_center(layout, 0, j)
        draw_text_cr(cr, cx - cell, cy, label, font_px)
        draw_text_cr(cr, cx + cols * cell, cy, label, font_px)
    cr.new_path()


def draw_stones(cr: cairo.Context, layout, stones: Dict[Tuple[int, int], str]):
    cell = layout["cell"]
    stone_r = cell * DEFAULT_STYLE['stone_radius_factor']
    line_width = max(1.0, cell * DEFAULT_STYLE['line_width_factor'])
    for (x, y), color in stones.items():
        cx, cy = point_center(layout, x, y)
        if color == 'B':
            cr.set_source_rgb(*DEFAULT_STYLE['stone_black'])
            cr.arc(cx, cy, stone_r, 0, 2.0 * math.pi)
            cr.fill()
        else:
            cr.set_source_rgb(*DEFAULT_STYLE['stone_white'])
            cr.arc(cx, cy, stone_r, 0, 2.0 * math.pi)
            cr.fill_preserve()
            cr.set_source_rgb(0, 0, 0)
            cr.set_line_width(max(1.0, line_width * 0.9))
            cr.stroke()


def draw_marks(cr: cairo.Context, layout, marks: Dict[Tuple[int, int], object]):
    cell = layout["cell"]
    size = cell * DEFAULT_STYLE['mark_size_factor']
    cr.set_source_rgb(*DEFAULT_STYLE['mark_color'])
    cr.set_line_width(max(1.0, cell * 0.06))
    for (x, y), mark in marks.items():
        cx, cy = point_center(layout, x, y)
        if mark.kind == 'LB':
            draw_text_cr(cr, cx, cy, mark.label or '', layout["font_px"], color=DEFAULT_STYLE['mark_color'])
            continue
        if mark.kind == 'TR':
            cr.move_to(cx, cy - size)
            cr.line_to(cx + size * 0.87, cy + size * 0.5)
            cr.line_to(cx - size * 0.87, cy + size * 0.5)
            cr.close_path()
        elif mark.kind == 'CR':
            cr.arc(cx, cy, size * 0.8, 0, 2.0 * math.pi)
        elif mark.kind == 'SQ':
            cr.rectangle(cx - size * 0.7, cy - size * 0.7, size * 1.4, size * 1.4)
        elif mark.kind == 'MA':
            cr.move_to(cx - size * 0.7, cy - size * 0.7)
            cr.line_to(cx + size * 0.7, cy + size * 0.7)
            cr.move_to(cx + size * 0.7, cy - size * 0.7)
            cr.line_to(cx - size * 0.7, cy + size * 0.7)
        elif mark.kind == 'SL':
            cr.arc(cx, cy, size * 0.35, 0, 2.0 * math.pi)
            cr.fill()
            continue
        cr.stroke()


def draw_branch_marks(cr: cairo.Context, layout, points: List[Tuple[int, int]]):
    cell = layout["cell"]
    for i, (x, y) in enumerate(points):
        cx, cy = point_center(layout, x, y)
        cr.set_source_rgb(*DEFAULT_STYLE['branch_color'])
        cr.arc(cx, cy, cell * 0.3, 0, 2.0 * math.pi)
        cr.fill()
        draw_text_cr(cr, cx, cy, chr(ord('a') + i % 26), layout["font_px"], color=(1, 1, 1))
