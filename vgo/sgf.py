# sgf.py
# Minimal SGF parser/serializer for the game tree.
#
# - parse() tokenizes parentheses, semicolons, property identifiers and
#   bracketed values into plain nodes, then folds them into Segments.
# - serialize() writes a header node followed by the main line, with every
#   branch point emitted as parenthesised variations.
#
# Passes and setup-only nodes are not moves here: they are skipped and their
# children attached to the nearest move above them.
import re
from typing import Dict, List, Optional, Tuple

from vgo.config import format_board_size, parse_board_size
from vgo.game_tree import MARK_KINDS, Mark, Segment, Step

DEBUG = False

COORD_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

HEADER_KEYS = {
    "AP": "application",
    "SZ": "board_size",
    "CA": "encoding",
    "FF": "file_format",
    "GM": "game_mode",
}


class MalformedSGF(ValueError): pass


class ParsedGame:
    __slots__ = ("metadata", "tree")

    def __init__(self, metadata: Dict, tree: Segment):
        self.metadata = metadata
        self.tree = tree

    def __repr__(self):
        return f"<ParsedGame {self.metadata} {self.tree}>"


class _Node:
    """One semicolon entry: props as list of (key, [values]) in file order."""
    __slots__ = ("props", "children")

    def __init__(self):
        self.props: List[Tuple[str, List[str]]] = []
        self.children: List["_Node"] = []

    def get_prop(self, key: str) -> Optional[List[str]]:
        for k, vals in self.props:
            if k == key:
                return vals
        return None


# -------------------------
# Parsing
# -------------------------
_PROP_RE = re.compile(r"[A-Z]+")


def _read_bracket_value(text: str, idx: int) -> Tuple[str, int]:
    # assumes text[idx] == '['
    n = len(text)
    idx += 1
    buf_chars = []
    while idx < n:
        ch = text[idx]
        if ch == "\\":
            # escape next char (including newline)
            idx += 1
            if idx < n:
                buf_chars.append(text[idx])
                idx += 1
            continue
        if ch == "]":
            return "".join(buf_chars), idx + 1
        buf_chars.append(ch)
        idx += 1
    raise MalformedSGF("Unterminated property value")


def _tokenize(text: str) -> _Node:
    """Build the node tree under a synthetic root; raises MalformedSGF."""
    root = _Node()
    # stack holds the node new variations hang from
    stack: List[_Node] = []
    current: Optional[_Node] = None
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "(":
            stack.append(current if current is not None else root)
            current = None
            i += 1
        elif ch == ")":
            if not stack:
                raise MalformedSGF("Unbalanced ')'")
            current = stack.pop()
            i += 1
        elif ch == ";":
            if not stack:
                raise MalformedSGF("Node outside of a game tree")
            parent = current if current is not None else stack[-1]
            current = _Node()
            parent.children.append(current)
            i += 1
            # parse properties for this node
            while i < n:
                if text[i].isspace():
                    i += 1
                    continue
                if text[i] in ";()":
                    break
                m = _PROP_RE.match(text, i)
                if not m:
                    raise MalformedSGF("Unexpected character %r at %d" % (text[i], i))
                prop_id = m.group(0)
                i = m.end()
                while i < n and text[i].isspace():
                    i += 1
                values: List[str] = []
                while i < n and text[i] == "[":
                    val, i = _read_bracket_value(text, i)
                    values.append(val)
                    while i < n and text[i].isspace():
                        i += 1
                if not values:
                    raise MalformedSGF("Property %s without value" % prop_id)
                current.props.append((prop_id, values))
        elif ch.isspace():
            i += 1
        else:
            raise MalformedSGF("Unexpected character %r at %d" % (ch, i))
    if stack:
        raise MalformedSGF("Unbalanced '('")
    if not root.children:
        raise MalformedSGF("No game tree")
    return root


def _to_point(value: str, width: int, height: int) -> Tuple[int, int]:
    if len(value) != 2 or value[0] not in COORD_LETTERS or value[1] not in COORD_LETTERS:
        raise MalformedSGF("Bad point %r" % value)
    x, y = COORD_LETTERS.index(value[0]), COORD_LETTERS.index(value[1])
    if x >= width or y >= height:
        raise MalformedSGF("Point %r outside %dx%d board" % (value, width, height))
    return x, y


def _from_point(point) -> str:
    return COORD_LETTERS[point[0]] + COORD_LETTERS[point[1]]


def _node_move(node: _Node, width: int, height: int) -> Optional[Tuple[str, Tuple[int, int]]]:
    for color in ("B", "W"):
        vals = node.get_prop(color)
        if vals is None:
            continue
        value = vals[0]
        # pass: empty value, or "tt" on boards up to 19
        if value == "" or (value == "tt" and width <= 19 and height <= 19):
            return None
        return color, _to_point(value, width, height)
    return None


def _to_step(node: _Node, move, ply: int, width: int, height: int) -> Step:
    color, point = move
    step = Step(point, color, ply)
    for key, vals in node.props:
        if key == "C":
            step.add_comment(vals[0])
        elif key in MARK_KINDS:
            for v in vals:
                label = None
                if key == "LB":
                    v, _, label = v.partition(":")
                step.add_mark(Mark(_to_point(v, width, height), key, label or None))
    return step


def _grow(segment: Segment, node: _Node, ply: int, width: int, height: int):
    while True:
        kids = _move_children(node, width, height)
        if not kids:
            return
        if len(kids) == 1:
            node, move = kids[0]
            ply += 1
            segment.steps.append(_to_step(node, move, ply, width, height))
            continue
        for kid, move in kids:
            branch = Segment([_to_step(kid, move, ply + 1, width, height)])
            _grow(branch, kid, ply + 1, width, height)
            segment.branches.append(branch)
        return


def _move_children(node: _Node, width: int, height: int):
    out = []
    for child in node.children:
        move = _node_move(child, width, height)
        if move is not None:
            out.append((child, move))
        else:
            out.extend(_move_children(child, width, height))
    return out


def _read_metadata(header: _Node) -> Dict:
    metadata: Dict = {}
    for key, name in HEADER_KEYS.items():
        vals = header.get_prop(key)
        if vals:
            metadata[name] = vals[0].strip()
    # no SZ means the standard 19x19 board
    metadata.setdefault("board_size", "19")
    try:
        metadata["width"], metadata["height"] = parse_board_size(metadata["board_size"])
    except ValueError as e:
        raise MalformedSGF(str(e))
    for key in ("file_format", "game_mode"):
        if key in metadata:
            try:
                metadata[key] = int(metadata[key])
            except ValueError:
                raise MalformedSGF("Bad %s %r" % (key, metadata[key]))
    return metadata


def parse(text: str) -> Optional[ParsedGame]:
    """SGF text -> ParsedGame, or None if the text is not a usable game record."""
    try:
        root = _tokenize(text or "")
        header = root.children[0]
        metadata = _read_metadata(header)
        width = metadata["width"]
        height = metadata["height"]
        tree = Segment()
        # a header that is itself a move starts the main line
        first = _node_move(header, width, height)
        if first is not None:
            tree.steps.append(_to_step(header, first, 1, width, height))
            _grow(tree, header, 1, width, height)
        else:
            _grow(tree, header, 0, width, height)
    except MalformedSGF as e:
        if DEBUG:
            print("[SGF] parse failed:", e)
        return None
    return ParsedGame(metadata, tree)


# -------------------------
# Serialization
# -------------------------
def _escape_value(v: str) -> str:
    v = v.replace("\\", "\\\\")
    v = v.replace("]", "\\]")
    return v


def _serialize_step(step: Step) -> str:
    parts = [f";{step.color}[{_from_point(step.point)}]"]
    if step.comment:
        parts.append(f"C[{_escape_value(step.comment)}]")
    by_kind: Dict[str, List[str]] = {}
    for mark in step.marks:
        value = _from_point(mark.point)
        if mark.kind == "LB":
            value += ":" + (mark.label or "")
        by_kind.setdefault(mark.kind, []).append(value)
    for kind, values in by_kind.items():
        parts.append(kind + "".join(f"[{_escape_value(v)}]" for v in values))
    return "".join(parts)


def _serialize_segment(segment: Segment) -> str:
    parts = [_serialize_step(s) for s in segment.steps]
    for branch in segment.branches:
        parts.append("(" + _serialize_segment(branch) + ")")
    return "".join(parts)


def serialize(metadata: Dict, tree: Segment) -> str:
    """Header node plus tree content; a pure function of both."""
    width = metadata.get("width") or 19
    height = metadata.get("height") or width
    header = [
        ("GM", metadata.get("game_mode", 1)),
        ("FF", metadata.get("file_format", 4)),
        ("CA", metadata.get("encoding", "UTF-8")),
        ("AP", metadata.get("application")),
        ("SZ", format_board_size(width, height)),
    ]
    head = "".join(f"{k}[{_escape_value(str(v))}]" for k, v in header if v is not None)
    return "(;" + head + _serialize_segment(tree) + ")"
