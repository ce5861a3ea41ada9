# config.py
"""
Runtime properties.

Explicit construction options win; anything left out falls back to the
environment, which is seeded from vgo.env next to this module via
python-dotenv (existing variables are not overridden).
"""
import os
import re
from importlib.metadata import PackageNotFoundError, version
from typing import Optional, Tuple

from dotenv import load_dotenv

ENV_PATH = os.path.join(os.path.dirname(__file__), "vgo.env")
if os.path.exists(ENV_PATH):
    load_dotenv(ENV_PATH, override=False)


# Helpers to read env with defaults
def geti(name: str, default: int) -> int:
    v = os.getenv(name)
    return int(v) if v is not None else int(default)


def gets(name: str, default: str) -> str:
    v = os.getenv(name)
    return v if v is not None else default


def getb(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return bool(default)
    return v.strip().lower() in ("1", "true", "yes", "on")


def _package_version() -> str:
    try:
        return version("vgo")
    except PackageNotFoundError:
        return "0.1"


DEFAULT_APPLICATION = f"vgo:{_package_version()}"

_SIZE_RE = re.compile(r"^\s*(\d+)\s*(?:[x:X]\s*(\d+))?\s*$")


def parse_board_size(value) -> Tuple[int, int]:
    """'19' -> (19, 19); '9x13' and '9:13' -> (9, 13)."""
    if isinstance(value, int):
        width = height = value
    else:
        m = _SIZE_RE.match(str(value))
        if not m:
            raise ValueError("Bad board size %r" % (value,))
        width = int(m.group(1))
        height = int(m.group(2)) if m.group(2) else width
    if not (1 <= width <= 52 and 1 <= height <= 52):
        raise ValueError("Board size out of range: %r" % (value,))
    return width, height


def format_board_size(width: int, height: int) -> str:
    return str(width) if width == height else f"{width}:{height}"


class Properties:
    """Board and file properties of one game session."""

    def __init__(self, x: Optional[int] = None, y: Optional[int] = None, board_size=None,
                 ko: Optional[bool] = None, encoding: Optional[str] = None,
                 application: Optional[str] = None, file_format: Optional[int] = None,
                 game_mode: Optional[int] = None, data: Optional[str] = None):
        if board_size is not None:
            self.x, self.y = parse_board_size(board_size)
        elif x is not None or y is not None:
            self.x = int(x if x is not None else y)
            self.y = int(y if y is not None else x)
            parse_board_size(f"{self.x}:{self.y}")
        else:
            self.x, self.y = parse_board_size(gets("VGO_BOARD_SIZE", "19"))
        self.ko = getb("VGO_KO", False) if ko is None else bool(ko)
        self.encoding = encoding or gets("VGO_ENCODING", "UTF-8")
        self.application = application or gets("VGO_APPLICATION", DEFAULT_APPLICATION)
        self.file_format = int(file_format) if file_format is not None else geti("VGO_FILE_FORMAT", 4)
        self.game_mode = int(game_mode) if game_mode is not None else geti("VGO_GAME_MODE", 1)
        self.data = data or None

    @property
    def board_size(self) -> str:
        return format_board_size(self.x, self.y)

    def metadata(self) -> dict:
        return {
            "application": self.application,
            "board_size": self.board_size,
            "width": self.x,
            "height": self.y,
            "encoding": self.encoding,
            "file_format": self.file_format,
            "game_mode": self.game_mode,
        }

    def update(self, metadata: dict):
        """Apply parsed file metadata; missing keys keep their current value."""
        if metadata.get("width"):
            self.x = metadata["width"]
        if metadata.get("height"):
            self.y = metadata["height"]
        for key in ("application", "encoding", "file_format", "game_mode"):
            if metadata.get(key):
                setattr(self, key, metadata[key])

    def __repr__(self):
        return (f"<Properties {self.board_size} ko={self.ko} CA={self.encoding} AP={self.application} "
                f"FF={self.file_format} GM={self.game_mode}>")
