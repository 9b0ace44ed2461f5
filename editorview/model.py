"""Raw buffer, cursor and navigation."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from . import search
from .constants import EditorConstants
from .markup import WHITESPACE_PATTERN, Point, escape, join_lines, plain_lines, split_lines
from .view import ScreenView

logger = logging.getLogger(__name__)

_ENTITY_SPANS = ("&amp;", "&lt;", "&gt;")

Predicate = Callable[[Point], bool]


class Direction(Enum):
    UP = "up"
    LEFT = "left"
    DOWN = "down"
    RIGHT = "right"


def clamp(value: int, lo: int, hi: int) -> int:
    """Clamp ``value`` into ``[lo, hi)``; ``lo`` wins when the range is empty."""
    return max(lo, min(value, hi - 1))


def is_whitespace(ch: str) -> bool:
    return bool(ch) and WHITESPACE_PATTERN.match(ch) is not None


class TextModel:
    """Owns the raw buffer and a screen-space cursor over its rendering.

    The cursor is relative to the viewport: row ``cursor.y`` shows screen line
    ``cursor.y + view.line_offset``. Every buffer mutation re-renders.
    """

    def __init__(self, view: ScreenView, lines: Optional[list[str]] = None,
                 tab_width: int = EditorConstants.TAB_WIDTH):
        self.view = view
        self.lines: list[str] = list(lines) if lines else [""]
        self.cursor = Point(0, 0)
        self.tab_width = tab_width

    # Buffer

    def content(self) -> str:
        return join_lines(self.lines)

    def set_content(self, text: str):
        self.lines = split_lines(text)
        self.render()
        self.clamp_cursor()

    def render(self):
        self.view.render(self.lines)

    def resize(self, width: int, height: int):
        self.view.resize(width, height)
        self.render()
        self.view.line_offset = min(self.view.line_offset,
                                    max(0, self.view.line_count - height // 2))
        self.clamp_cursor()

    def _raw_point(self, cursor: Optional[Point]) -> Optional[Point]:
        point = self.view.raw_point(self.cursor if cursor is None else cursor)
        if point is None:
            logger.debug("no raw position under %r", cursor)
        return point

    def write_at(self, text: str, cursor: Optional[Point] = None):
        """Insert raw ``text`` at the raw position under ``cursor``."""
        p = self._raw_point(cursor)
        if p is None:
            return
        line = self.lines[p.y]
        if p.x < 0:
            self.lines[p.y] = line + text
        else:
            self.lines[p.y] = line[:p.x] + text + line[p.x:]
        self.render()

    def add_line_at(self, cursor: Optional[Point] = None):
        """Split the raw line under ``cursor``."""
        p = self._raw_point(cursor)
        if p is None:
            return
        if p.x < 0:
            self.lines.insert(p.y + 1, "")
        else:
            line = self.lines[p.y]
            self.lines[p.y:p.y + 1] = [line[:p.x], line[p.x:]]
        self.render()

    def delete_at(self, cursor: Optional[Point] = None):
        """Delete the character under ``cursor``; at a line end, join with the next line."""
        p = self._raw_point(cursor)
        if p is None:
            return
        if p.x < 0:
            if p.y + 1 < len(self.lines):
                self.lines[p.y:p.y + 2] = [self.lines[p.y] + self.lines[p.y + 1]]
                self.render()
            return
        line = self.lines[p.y]
        width = 1
        for entity in _ENTITY_SPANS:
            if line.startswith(entity, p.x):
                width = len(entity)
                break
        self.lines[p.y] = line[:p.x] + line[p.x + width:]
        self.render()

    def insert_raw(self, raw: Point, text: str):
        """Insert ``text`` at a raw point; ``x == -1`` means the end of the line."""
        line = self.lines[raw.y]
        x = len(line) if raw.x < 0 else raw.x
        self.lines[raw.y] = line[:x] + text + line[x:]

    def replace(self, pattern: search.PatternLike, replacement: str,
                decide: search.Decision, raw: bool = True) -> bool:
        """Run a search and replace over the buffer, re-rendering on change."""
        changed = False

        def query(text, raw_segment, screen_segment):
            nonlocal changed
            accepted = decide(text, raw_segment, screen_segment)
            changed = changed or accepted
            return accepted

        lines = search.replace(self.lines, pattern, replacement, query, raw=raw)
        if changed:
            self.lines = lines
            self.render()
        return changed

    def rune_at(self, cursor: Optional[Point] = None) -> str:
        """Return the screen character under ``cursor``.

        Past the end of a row this is ``"\\n"``; past the end of the buffer it
        is the empty string.
        """
        cursor = self.cursor if cursor is None else cursor
        row = cursor.y + self.view.line_offset
        if 0 <= row < self.view.line_count:
            text = self.view.result.lines[row]
            if cursor.x < len(text):
                return text[cursor.x]
            return "\n"
        return ""

    # Navigation

    def can_move_cursor(self, direction: Direction) -> bool:
        c = self.cursor
        if direction is Direction.UP:
            return c.y > 0
        if direction is Direction.LEFT:
            return c.x > 0
        if direction is Direction.DOWN:
            return (c.y + 1 < self.view.height
                    and c.y + self.view.line_offset < self.view.line_count - 1)
        if direction is Direction.RIGHT:
            return c.x + 1 < self.view.width and c.x < self.view.line_width(c.y)
        return False

    def can_scroll(self, direction: Direction) -> bool:
        if direction is Direction.UP:
            return self.view.line_offset > 0
        if direction is Direction.DOWN:
            return self.view.line_offset + 1 < self.view.line_count - self.view.height // 2
        return False

    def scroll(self, direction: Direction):
        if not self.view.renderable:
            return
        offset = self.view.line_offset
        if direction is Direction.UP:
            offset -= 1
        elif direction is Direction.DOWN:
            offset += 1
        self.view.line_offset = clamp(offset, 0, self.view.line_count - self.view.height // 2)
        self.render()

    def clamp_cursor(self):
        """Keep the cursor on a rendered row and at most one past its last character."""
        view = self.view
        if not view.renderable:
            return
        y = clamp(self.cursor.y, 0, min(view.height, view.line_count - view.line_offset))
        x = clamp(self.cursor.x, 0, min(view.width, view.line_width(y) + 1))
        self.cursor = Point(x, y)

    def move_to_raw(self, raw: Point):
        """Put the cursor on the cell showing ``raw``, scrolling it into view."""
        view = self.view
        point = view.screen_point(raw)
        if point is None:
            logger.debug("no screen position for raw %r", raw)
            self.clamp_cursor()
            return
        if point.y < view.line_offset:
            view.line_offset = point.y
        elif point.y >= view.line_offset + view.height:
            view.line_offset = point.y - view.height + 1
        self.cursor = Point(point.x, point.y - view.line_offset)
        self.clamp_cursor()

    def move_cursor(self, direction: Direction) -> bool:
        """Move one step; return False when no movement was possible."""
        try:
            return self._step(direction)
        finally:
            self.clamp_cursor()

    def _step(self, direction: Direction) -> bool:
        c = self.cursor
        if direction is Direction.UP:
            if self.can_move_cursor(Direction.UP):
                self.cursor = c.moved(dy=-1)
                return True
            if self.can_scroll(Direction.UP):
                self.scroll(Direction.UP)
                return True
        elif direction is Direction.LEFT:
            if self.can_move_cursor(Direction.LEFT):
                self.cursor = c.moved(dx=-1)
                return True
            if self.can_move_cursor(Direction.UP):
                y = c.y - 1
                self.cursor = Point(self.view.line_width(y), y)
                return True
            if self.can_scroll(Direction.UP):
                self.scroll(Direction.UP)
                self.cursor = Point(self.view.line_width(c.y), c.y)
                return self.move_cursor(Direction.LEFT)
        elif direction is Direction.DOWN:
            if self.can_move_cursor(Direction.DOWN):
                self.cursor = c.moved(dy=1)
                return True
            if self.can_scroll(Direction.DOWN):
                self.scroll(Direction.DOWN)
                return True
        elif direction is Direction.RIGHT:
            if self.can_move_cursor(Direction.RIGHT):
                self.cursor = c.moved(dx=1)
                return True
            if self.can_move_cursor(Direction.DOWN):
                self.cursor = Point(0, c.y + 1)
                return True
            if (c.y + self.view.line_offset + 1 < self.view.line_count
                    and self.can_scroll(Direction.DOWN)):
                self.scroll(Direction.DOWN)
                self.cursor = Point(0, c.y)
                return True
        return False

    def move_cursor_until(self, direction: Direction, predicate: Optional[Predicate] = None):
        """Step in ``direction`` until movement fails or ``predicate(cursor)`` holds."""
        if predicate is None:
            self.move_cursor(direction)
            return
        while self.move_cursor(direction):
            if predicate(self.cursor):
                break

    def different_whitespaceness(self, cursor: Optional[Point] = None) -> Predicate:
        start = is_whitespace(self.rune_at(cursor))
        return lambda point: is_whitespace(self.rune_at(point)) != start

    def indentation(self, y: int) -> int:
        """Column of the first visible non-whitespace character of the line shown on row ``y``."""
        row = y + self.view.line_offset
        if not (0 <= row < len(self.view.result.index)):
            return 0
        raw_y = self.view.result.index[row][0].y
        line = plain_lines([self.lines[raw_y]])[0]
        return len(line) - len(line.lstrip())

    def different_indentation(self, cursor: Optional[Point] = None) -> Predicate:
        cursor = self.cursor if cursor is None else cursor
        start = self.indentation(cursor.y)
        return lambda point: self.indentation(point.y) != start

    def move_home(self):
        self.cursor = Point(0, 0)
        self.view.line_offset = 0
        self.render()
        self.clamp_cursor()

    def move_end(self):
        view = self.view
        if not view.renderable or not view.line_count:
            return
        view.line_offset = max(0, view.line_count - view.height // 2)
        y = view.line_count - view.line_offset - 1
        self.cursor = Point(len(view.result.lines[y + view.line_offset]), y)
        self.render()
        self.clamp_cursor()

    def page(self, direction: Direction):
        """Move a viewport height up or down."""
        for _ in range(self.view.height):
            if not self.move_cursor(direction):
                break

    # Editing

    def insert_char(self, ch: str):
        self.write_at(escape(ch))
        self.move_cursor(Direction.RIGHT)

    def new_line(self):
        self.add_line_at()
        self.move_cursor(Direction.RIGHT)

    def tab(self):
        """Insert spaces up to the next multiple of the tab width."""
        self.write_at(" ")
        if not self.move_cursor(Direction.RIGHT):
            return
        while self.cursor.x % self.tab_width != 0:
            self.write_at(" ")
            if not self.move_cursor(Direction.RIGHT):
                break

    def backspace(self):
        if self.move_cursor(Direction.LEFT):
            self.delete_at()

    def delete_word_backward(self):
        """Delete the run of whitespace or non-whitespace before the cursor."""
        if not self.move_cursor(Direction.LEFT):
            return
        whitespace = is_whitespace(self.rune_at())
        self.delete_at()
        while self.move_cursor(Direction.LEFT):
            if is_whitespace(self.rune_at()) != whitespace:
                self.move_cursor(Direction.RIGHT)
                break
            self.delete_at()
