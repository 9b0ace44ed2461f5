"""Markup grammar of the raw buffer and its tokenizer.

The raw buffer is a list of lines. Each line may carry escaped entities
(``&amp;``, ``&lt;``, ``&gt;``), color tags (``<color:RRGGBB:RRGGBB>``) and the
zero-width selection markers ``<select-from>`` / ``<select-to>``. Anything
else between ``&``/``;`` or ``<``/``>`` is absorbed without a visible effect.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

from .constants import EditorConstants

logger = logging.getLogger(__name__)


SELECT_FROM_TOKEN = "<select-from>"
SELECT_TO_TOKEN = "<select-to>"

WHITESPACE_PATTERN = re.compile(r"\s+")
SELECT_FROM_PATTERN = re.compile(re.escape(SELECT_FROM_TOKEN))
SELECT_TO_PATTERN = re.compile(re.escape(SELECT_TO_TOKEN))
_MARKER = f"{re.escape(SELECT_FROM_TOKEN)}|{re.escape(SELECT_TO_TOKEN)}"
SELECTION_PATTERN = re.compile(f"({_MARKER})(.*?)({_MARKER})", re.DOTALL)
COLOR_TAG_PATTERN = re.compile(r"<color:([0-9A-Fa-f]{6}):([0-9A-Fa-f]{6})>")

_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
}


@dataclass(frozen=True)
class Point:
    """A zero-based column/row pair, ordered in document order."""
    x: int = 0
    y: int = 0

    def __lt__(self, other):
        if self.y != other.y:
            return self.y < other.y
        return self.x < other.x

    def __le__(self, other):
        return self == other or self < other

    def __gt__(self, other):
        return other < self

    def __ge__(self, other):
        return not self < other

    def dist(self, other: "Point") -> int:
        return round(math.hypot(self.x - other.x, self.y - other.y))

    def moved(self, dx: int = 0, dy: int = 0) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Segment:
    start: Point
    end: Point

    @property
    def length(self) -> int:
        return self.start.dist(self.end)


@dataclass(frozen=True)
class Style:
    """Foreground/background pair of 24-bit RGB colors."""
    fg: int
    bg: int

    def inverted(self) -> "Style":
        return Style(fg=self.bg, bg=self.fg)

    @classmethod
    def from_hex(cls, fg: str, bg: str) -> "Style":
        return cls(fg=int(fg, 16), bg=int(bg, 16))


DEFAULT_STYLE = Style(EditorConstants.DEFAULT_FOREGROUND, EditorConstants.DEFAULT_BACKGROUND)
SELECTED_STYLE = DEFAULT_STYLE.inverted()


class TokenKind(Enum):
    START = "start"
    CHARACTER = "character"
    NEWLINE = "newline"
    STYLE = "style"
    SELECTION_START = "selection_start"
    SELECTION_END = "selection_end"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    """One parsed unit of the raw buffer.

    ``pos`` is the raw point where ``buffer`` starts. ``skipped`` holds markup
    that was absorbed immediately before this token on the same line.
    """
    kind: TokenKind
    pos: Point
    buffer: str = ""
    char: Optional[str] = None
    style: Optional[Style] = None
    skipped: str = ""


class _State(Enum):
    VISIBLE = "visible"
    ESCAPE = "escape"
    TAG = "tag"


def tokenize(lines: list[str]) -> Iterator[Token]:
    """Yield the token stream for a raw buffer."""
    if not lines:
        lines = [""]
    in_selection = False
    yield Token(TokenKind.START, Point(0, 0))
    last = len(lines) - 1
    for y, line in enumerate(lines):
        state = _State.VISIBLE
        skipped = ""
        buffer = ""
        start = 0
        for x, ch in enumerate(line):
            if state is _State.VISIBLE:
                if ch == "&":
                    state, buffer, start = _State.ESCAPE, ch, x
                elif ch == "<":
                    state, buffer, start = _State.TAG, ch, x
                else:
                    yield Token(TokenKind.CHARACTER, Point(x, y), ch, char=ch, skipped=skipped)
                    skipped = ""
                continue

            buffer += ch
            if state is _State.ESCAPE and ch == ";":
                state = _State.VISIBLE
                decoded = _ENTITIES.get(buffer)
                if decoded is None:
                    logger.debug("dropping unknown escape %r at %d,%d", buffer, start, y)
                    skipped += buffer
                    continue
                yield Token(TokenKind.CHARACTER, Point(start, y), buffer, char=decoded, skipped=skipped)
                skipped = ""
            elif state is _State.TAG and ch == ">":
                state = _State.VISIBLE
                if buffer in (SELECT_FROM_TOKEN, SELECT_TO_TOKEN):
                    kind = TokenKind.SELECTION_END if in_selection else TokenKind.SELECTION_START
                    in_selection = not in_selection
                    yield Token(kind, Point(start, y), buffer, skipped=skipped)
                    skipped = ""
                    continue
                match = COLOR_TAG_PATTERN.fullmatch(buffer)
                if match is None:
                    logger.debug("dropping unknown tag %r at %d,%d", buffer, start, y)
                    skipped += buffer
                    continue
                style = Style.from_hex(match.group(1), match.group(2))
                yield Token(TokenKind.STYLE, Point(start, y), buffer, style=style, skipped=skipped)
                skipped = ""

        if state is not _State.VISIBLE:
            logger.debug("dropping unterminated markup %r at %d,%d", buffer, start, y)
            skipped += buffer
        kind = TokenKind.NEWLINE if y < last else TokenKind.EOF
        yield Token(kind, Point(len(line), y), "\n" if kind is TokenKind.NEWLINE else "", skipped=skipped)


def escape(text: str) -> str:
    """Escape the characters that carry meaning in markup."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(lines)


def plain_lines(lines: list[str]) -> list[str]:
    """Strip markup from raw lines and return the decoded lines."""
    result: list[str] = []
    for token in tokenize(lines):
        if token.kind in (TokenKind.START, TokenKind.NEWLINE):
            result.append("")
        elif token.kind is TokenKind.CHARACTER:
            result[-1] += token.char
    return result


def plain_text(text: str) -> str:
    """Return the decoded text of a markup string."""
    return join_lines(plain_lines(split_lines(text)))
