"""Screen renderer: hard-wraps the raw buffer into styled display rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .markup import DEFAULT_STYLE, Point, Style, TokenKind, tokenize

if TYPE_CHECKING:
    from .terminal import Display


@dataclass(frozen=True)
class RenderResult:
    """Wrapped screen rows with their raw coordinates and cell styles.

    ``index[y]`` holds one raw point per character of ``lines[y]`` followed by
    a sentinel ``Point(-1, raw_line)`` for the append position.
    """
    lines: tuple[str, ...] = ()
    index: tuple[tuple[Point, ...], ...] = ()
    styles: tuple[tuple[Style, ...], ...] = ()


EMPTY_RENDER = RenderResult()


def render_buffer(lines: list[str], width: int, default_style: Style = DEFAULT_STYLE) -> RenderResult:
    """Fold the token stream of ``lines`` into a ``RenderResult``.

    Text starts in ``default_style``; a selection is drawn in its inversion.
    """
    if width <= 0:
        return EMPTY_RENDER

    rows: list[list[str]] = []
    index: list[list[Point]] = []
    styles: list[list[Style]] = []
    style = saved = default_style
    selected = default_style.inverted()

    def begin_line():
        rows.append([])
        index.append([])
        styles.append([])

    def end_line(raw_y: int):
        index[-1].append(Point(-1, raw_y))

    for token in tokenize(lines):
        kind = token.kind
        if kind is TokenKind.START:
            begin_line()
        elif kind is TokenKind.NEWLINE:
            end_line(token.pos.y)
            begin_line()
        elif kind is TokenKind.CHARACTER:
            rows[-1].append(token.char)
            index[-1].append(token.pos)
            styles[-1].append(style)
            if len(rows[-1]) > width - 1:
                end_line(token.pos.y)
                begin_line()
        elif kind is TokenKind.STYLE:
            style = token.style
        elif kind is TokenKind.SELECTION_START:
            saved, style = style, selected
        elif kind is TokenKind.SELECTION_END:
            style = saved
        elif kind is TokenKind.EOF:
            end_line(token.pos.y)

    return RenderResult(
        lines=tuple("".join(row) for row in rows),
        index=tuple(tuple(points) for points in index),
        styles=tuple(tuple(row) for row in styles),
    )


class ScreenView:
    """The rendered buffer plus the viewport onto it."""

    def __init__(self, default_style: Style = DEFAULT_STYLE):
        self.default_style = default_style
        self.result: RenderResult = EMPTY_RENDER
        self.width = 0
        self.height = 0
        self.line_offset = 0

    @property
    def renderable(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def line_count(self) -> int:
        return len(self.result.lines)

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height

    def render(self, lines: list[str]):
        """Rebuild the screen rows from scratch for the current viewport."""
        if not self.renderable:
            self.result = EMPTY_RENDER
            return
        self.result = render_buffer(lines, self.width, self.default_style)

    def line(self, y: int) -> str:
        """Return the visible row ``y`` (relative to the viewport)."""
        row = y + self.line_offset
        if 0 <= row < self.line_count:
            return self.result.lines[row]
        return ""

    def line_width(self, y: int) -> int:
        return len(self.line(y))

    def raw_point(self, cursor: Point) -> Optional[Point]:
        """Map a viewport cursor to its raw buffer point, or None if unmapped."""
        row = cursor.y + self.line_offset
        if not (0 <= row < len(self.result.index)):
            return None
        points = self.result.index[row]
        if not (0 <= cursor.x < len(points)):
            return None
        return points[cursor.x]

    def screen_point(self, raw: Point) -> Optional[Point]:
        """Map a raw point to the screen cell showing it, as an absolute row.

        Markup at ``raw`` maps to the first character after it; past the last
        character of its line, to the append position of the line's last row.
        """
        line_end = None
        for row, points in enumerate(self.result.index):
            for x, point in enumerate(points):
                if point.y != raw.y:
                    continue
                if raw.x >= 0 and point.x >= raw.x:
                    return Point(x, row)
                if point.x < 0:
                    line_end = Point(x, row)
        return line_end

    def draw(self, display: "Display"):
        """Push the visible rows to ``display``."""
        if not self.renderable:
            return
        visible = self.result.lines[self.line_offset:self.line_offset + self.height]
        for y, text in enumerate(visible):
            row_styles = self.result.styles[y + self.line_offset]
            for x, ch in enumerate(text[:self.width]):
                display.set_cell(x, y, ch, row_styles[x])
            for x in range(len(text), self.width):
                display.set_cell(x, y, " ", None)
        for y in range(len(visible), self.height):
            for x in range(self.width):
                display.set_cell(x, y, " ", None)
