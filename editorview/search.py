"""Regex search and replace over the flattened raw or screen text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterator, Union

from .flatten import FlatIndex, Flattened, flatten_with_index
from .markup import Segment, split_lines

PatternLike = Union[str, "re.Pattern[str]"]
Decision = Callable[[str, Segment, Segment], bool]


@dataclass(frozen=True)
class SearchMatch:
    text: str
    raw_segment: Segment
    screen_segment: Segment


def _compile(pattern: PatternLike) -> "re.Pattern[str]":
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


def _scan(regex: "re.Pattern[str]", flat: Flattened, raw: bool) -> Iterator[tuple["re.Match[str]", FlatIndex, FlatIndex]]:
    """Yield non-overlapping matches with the index entries at both ends."""
    haystack = flat.flat_raw if raw else flat.flat_screen
    index = flat.raw_index if raw else flat.screen_index
    last = len(index) - 1
    offset = 0
    while offset < len(haystack):
        match = regex.search(haystack, offset)
        if match is None:
            return
        yield match, index[min(match.start(), last)], index[min(match.end(), last)]
        offset = match.end() if match.end() > match.start() else match.end() + 1


def find(lines: list[str], pattern: PatternLike, raw: bool = False) -> list[SearchMatch]:
    """Return every match of ``pattern`` without modifying the buffer."""
    flat = flatten_with_index(lines)
    return [
        SearchMatch(
            match.group(0),
            Segment(start.raw, end.raw),
            Segment(start.screen, end.screen),
        )
        for match, start, end in _scan(_compile(pattern), flat, raw)
    ]


def replace(
    lines: list[str],
    pattern: PatternLike,
    replacement: str,
    decide: Decision,
    raw: bool = True,
) -> list[str]:
    """Replace matches of ``pattern`` that ``decide`` accepts.

    Args:
        lines: Raw buffer lines.
        pattern: Regular expression searched in the flattened raw text when
            ``raw`` is true, otherwise in the flattened plain screen text.
        replacement: Template expanded with ``Match.expand`` (``\\1``, ``\\g<name>``).
        decide: Called as ``decide(matched_text, raw_segment, screen_segment)``
            for each match in document order; returning True replaces it.
        raw: Which flattened space to search.

    Returns:
        The rewritten raw buffer lines. Rejected matches and everything
        between matches are carried over verbatim.
    """
    flat = flatten_with_index(lines)
    pieces: list[str] = []
    kept = 0
    for match, start, end in _scan(_compile(pattern), flat, raw):
        if not decide(match.group(0), Segment(start.raw, end.raw), Segment(start.screen, end.screen)):
            continue
        span_start = start.flat_raw
        if raw:
            span_end = end.flat_raw
        elif match.end() > match.start():
            span_end = flat.screen_ends[match.end() - 1]
        else:
            span_end = span_start
        pieces.append(flat.flat_raw[kept:span_start])
        pieces.append(match.expand(replacement))
        kept = span_end
    if not pieces:
        return list(lines) if lines else [""]
    pieces.append(flat.flat_raw[kept:])
    return split_lines("".join(pieces))
