"""Flatten the raw buffer into linear raw/screen strings with reverse indexes."""

from __future__ import annotations

from dataclasses import dataclass, field

from .markup import Point, TokenKind, tokenize


@dataclass(frozen=True)
class FlatIndex:
    """Maps one flat offset back to raw and screen coordinates."""
    raw: Point
    screen: Point
    flat_raw: int


@dataclass
class Flattened:
    """Result of flattening a raw buffer.

    ``raw_index[i]`` describes ``flat_raw[i]`` and ``screen_index[i]`` describes
    ``flat_screen[i]``; both tables carry one trailing end-of-input entry.
    ``screen_ends[i]`` is the flat raw offset just past the raw span that
    produced ``flat_screen[i]``.
    """
    flat_raw: str = ""
    flat_screen: str = ""
    raw_index: list[FlatIndex] = field(default_factory=list)
    screen_index: list[FlatIndex] = field(default_factory=list)
    screen_ends: list[int] = field(default_factory=list)


def flatten_with_index(lines: list[str]) -> Flattened:
    raw_parts: list[str] = []
    screen_parts: list[str] = []
    raw_index: list[FlatIndex] = []
    screen_index: list[FlatIndex] = []
    screen_ends: list[int] = []
    offset = 0
    screen = Point(0, 0)

    def index_span(pos: Point, span: str):
        nonlocal offset
        for i in range(len(span)):
            raw_index.append(FlatIndex(Point(pos.x + i, pos.y), screen, offset + i))
        raw_parts.append(span)
        offset += len(span)

    for token in tokenize(lines):
        if token.skipped:
            index_span(token.pos.moved(dx=-len(token.skipped)), token.skipped)

        if token.kind is TokenKind.CHARACTER:
            screen_index.append(FlatIndex(token.pos, screen, offset))
            index_span(token.pos, token.buffer)
            screen_ends.append(offset)
            screen_parts.append(token.char)
            screen = screen.moved(dx=1)
        elif token.kind is TokenKind.NEWLINE:
            entry = FlatIndex(token.pos, screen, offset)
            raw_index.append(entry)
            screen_index.append(entry)
            raw_parts.append("\n")
            screen_parts.append("\n")
            offset += 1
            screen_ends.append(offset)
            screen = Point(0, screen.y + 1)
        elif token.kind is TokenKind.EOF:
            entry = FlatIndex(token.pos, screen, offset)
            raw_index.append(entry)
            screen_index.append(entry)
            screen_ends.append(offset)
        elif token.kind is not TokenKind.START:
            index_span(token.pos, token.buffer)

    return Flattened(
        flat_raw="".join(raw_parts),
        flat_screen="".join(screen_parts),
        raw_index=raw_index,
        screen_index=screen_index,
        screen_ends=screen_ends,
    )
