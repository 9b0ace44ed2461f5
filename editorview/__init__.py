from .editor import Editor
from .markup import Point, Segment, Style, escape, plain_text
from .search import find, replace
from .terminal import Display, TerminalDisplay

__all__ = [
    "Editor",
    "Display",
    "TerminalDisplay",
    "Point",
    "Segment",
    "Style",
    "escape",
    "plain_text",
    "find",
    "replace",
]
