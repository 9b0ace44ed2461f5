"""Selection markers and the paste buffer.

A selection lives inside the raw buffer as a ``<select-from>`` marker at the
anchor and a ``<select-to>`` marker at the cursor. This module is the only
place that inserts or strips them.
"""

from __future__ import annotations

import logging
from typing import Optional

from .markup import (
    SELECT_FROM_PATTERN,
    SELECT_FROM_TOKEN,
    SELECT_TO_PATTERN,
    SELECT_TO_TOKEN,
    SELECTION_PATTERN,
    Point,
    Segment,
    escape,
    plain_lines,
    split_lines,
)
from .model import Direction, TextModel
from . import search

logger = logging.getLogger(__name__)


def _accept(*_):
    return True


class SelectionManager:
    def __init__(self, model: TextModel):
        self.model = model
        self.active = False
        self.paste_buffer: list[str] = []

    def _strip(self, *patterns):
        for pattern in patterns:
            self.model.replace(pattern, "", _accept)

    def unmarked_lines(self) -> list[str]:
        """The raw buffer with both selection markers removed."""
        lines = self.model.lines
        for pattern in (SELECT_TO_PATTERN, SELECT_FROM_PATTERN):
            lines = search.replace(lines, pattern, "", _accept)
        return lines

    def begin(self, anchor_raw: Point):
        """Select from the raw point ``anchor_raw`` to the cursor."""
        self._strip(SELECT_TO_PATTERN, SELECT_FROM_PATTERN)
        cursor_raw = self.model.view.raw_point(self.model.cursor)
        if cursor_raw is None:
            logger.debug("cannot select from %r to %r", anchor_raw, self.model.cursor)
            return
        self.active = True
        marks = [(cursor_raw, SELECT_TO_TOKEN), (anchor_raw, SELECT_FROM_TOKEN)]
        # Later point first so the earlier raw point stays valid.
        for raw, token in sorted(marks, key=lambda mark: self._order_key(mark[0]), reverse=True):
            self.model.insert_raw(raw, token)
        self.model.render()

    def _order_key(self, raw: Point) -> tuple[int, int]:
        x = len(self.model.lines[raw.y]) if raw.x < 0 else raw.x
        return raw.y, x

    def extend(self):
        """Move ``<select-to>`` to the cursor."""
        self._strip(SELECT_TO_PATTERN)
        self.model.write_at(SELECT_TO_TOKEN)

    def clear(self):
        self.active = False
        self._strip(SELECT_TO_PATTERN, SELECT_FROM_PATTERN)

    def after_event(self, anchor_raw: Optional[Point]):
        """Advance the selection after one key event.

        ``anchor_raw`` is the raw point under the cursor before a
        shift-modified movement, or None for any other key, which ends the
        selection.
        """
        if anchor_raw is None:
            self.clear()
        elif self.active:
            self.extend()
        else:
            self.begin(anchor_raw)

    def _selected_text(self) -> Optional[str]:
        matches = search.find(self.model.lines, SELECTION_PATTERN, raw=True)
        if not matches:
            return None
        return SELECTION_PATTERN.fullmatch(matches[0].text).group(2)

    def copy(self) -> bool:
        """Store the selected plain text in the paste buffer."""
        selected = self._selected_text()
        if selected is None:
            return False
        self.paste_buffer = plain_lines(split_lines(selected))
        return True

    def remove(self, copy: bool = False) -> Optional[Segment]:
        """Delete the selected span including its markers.

        Returns the removed raw segment, end exclusive, or None when nothing
        was selected.
        """
        removed: Optional[Segment] = None

        def take(text, raw_segment, screen_segment):
            nonlocal removed
            if copy:
                self.paste_buffer = plain_lines(split_lines(SELECTION_PATTERN.fullmatch(text).group(2)))
            removed = raw_segment
            return True

        self.model.replace(SELECTION_PATTERN, "", take)
        return removed

    def _cursor_raw(self) -> Optional[Point]:
        raw = self.model.view.raw_point(self.model.cursor)
        if raw is not None and raw.x < 0:
            raw = Point(len(self.model.lines[raw.y]), raw.y)
        return raw

    def cut(self) -> bool:
        cursor_raw = self._cursor_raw()
        segment = self.remove(copy=True)
        if segment is None:
            return False
        self.back_cursor(segment, cursor_raw)
        return True

    def delete(self) -> bool:
        """Remove the selection without copying; False if there was none."""
        cursor_raw = self._cursor_raw()
        segment = self.remove(copy=False)
        if segment is None:
            return False
        self.back_cursor(segment, cursor_raw)
        return True

    def back_cursor(self, segment: Segment, cursor_raw: Optional[Point]):
        """Reposition the cursor after the raw ``segment`` was deleted.

        A cursor inside the span or at its end moves to the span start.
        After the span on its last line it backs up by the removed columns;
        on a later line it backs up by the removed line count.
        """
        start, end = segment.start, segment.end
        if cursor_raw is None or start <= cursor_raw <= end:
            target = start
        elif cursor_raw < start:
            target = cursor_raw
        elif cursor_raw.y == end.y:
            target = Point(start.x + cursor_raw.x - end.x, start.y)
        else:
            target = cursor_raw.moved(dy=start.y - end.y)
        self.model.move_to_raw(target)

    def paste(self):
        """Write the paste buffer at the cursor, one line break between lines."""
        last = len(self.paste_buffer) - 1
        for i, line in enumerate(self.paste_buffer):
            self.model.write_at(escape(line))
            for _ in line:
                self.model.move_cursor(Direction.RIGHT)
            if i < last:
                self.model.new_line()
