"""Display collaborator: Blessed for output and Curtsies for input."""

from __future__ import annotations

import logging
import os
import select
import signal
import sys
import termios
from abc import ABC, abstractmethod
from typing import Optional

import blessed
from curtsies import Input

from .constants import EditorConstants
from .keyboard import Event, KeyboardHandler, ResizeEvent
from .markup import Style

logger = logging.getLogger(__name__)


class Display(ABC):
    """A grid of styled character cells plus an input source.

    A ``(0, 0)`` size means the display cannot be drawn on yet.
    """

    def open(self):
        """Acquire the device before the first draw."""

    @abstractmethod
    def size(self) -> tuple[int, int]:
        """Return ``(width, height)`` in cells."""

    @abstractmethod
    def set_cell(self, x: int, y: int, char: str, style: Optional[Style]):
        """Set one cell; a ``None`` style means the device default."""

    @abstractmethod
    def show_cursor(self, x: int, y: int):
        pass

    @abstractmethod
    def hide_cursor(self):
        pass

    @abstractmethod
    def flush(self):
        """Make pending cell changes visible."""

    @abstractmethod
    def poll_event(self) -> Optional[Event]:
        """Block until the next key press or resize."""

    @abstractmethod
    def close(self):
        """Release the device."""


Cell = tuple[str, Optional[Style]]


class TerminalDisplay(Display):
    """Full-screen terminal display."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        self.term = terminal or blessed.Terminal()
        self.keyboard = KeyboardHandler()
        self.is_fullscreen = False
        self._input: Optional[Input] = None
        self._cells: dict[tuple[int, int], Cell] = {}
        self._shown: dict[tuple[int, int], Cell] = {}
        self._shown_size: Optional[tuple[int, int]] = None
        self._cursor: Optional[tuple[int, int]] = None
        self._old_termios = None
        self._old_winch_handler = None
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None

    def open(self):
        """Enter fullscreen mode, raw input and resize signalling."""
        print(self.term.enter_fullscreen + self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        # Enter raw mode immediately so reads work
        self._input = Input(keynames='curtsies')
        self._input.__enter__()
        self._disable_flow_control()
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self._old_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

    def _disable_flow_control(self):
        # Deliver Ctrl-Q/Ctrl-S/Ctrl-Z/Ctrl-V as keys instead of tty actions
        try:
            self._old_termios = termios.tcgetattr(sys.stdin)
            new_settings = list(self._old_termios)
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            if hasattr(termios, 'IEXTEN'):
                new_settings[3] &= ~(termios.ISIG | termios.IEXTEN)
            else:
                new_settings[3] &= ~termios.ISIG
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
        except (termios.error, AttributeError, OSError) as e:
            logger.debug("could not adjust termios flags: %s", e)
            self._old_termios = None

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def close(self):
        """Exit fullscreen mode and restore terminal."""
        if self._old_winch_handler is not None:
            signal.signal(signal.SIGWINCH, self._old_winch_handler)
            self._old_winch_handler = None
        if self._resize_pipe_r is not None:
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self._resize_pipe_r = self._resize_pipe_w = None
        if self._old_termios is not None:
            try:
                termios.tcsetattr(sys.stdin, termios.TCSANOW, self._old_termios)
            except (termios.error, OSError) as e:
                logger.debug("could not restore termios flags: %s", e)
            self._old_termios = None
        if self._input is not None:
            self._input.__exit__(None, None, None)
            self._input = None
        if self.is_fullscreen:
            print(self.term.normal + self.term.exit_fullscreen + self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False

    def size(self) -> tuple[int, int]:
        return self.term.width or 0, self.term.height or 0

    def set_cell(self, x: int, y: int, char: str, style: Optional[Style]):
        self._cells[(x, y)] = (char, style)

    def show_cursor(self, x: int, y: int):
        self._cursor = (x, y)

    def hide_cursor(self):
        self._cursor = None

    def _styled(self, char: str, style: Optional[Style]) -> str:
        if style is None:
            return self.term.normal + char
        fg, bg = style.fg, style.bg
        return (self.term.color_rgb((fg >> 16) & 0xFF, (fg >> 8) & 0xFF, fg & 0xFF)
                + self.term.on_color_rgb((bg >> 16) & 0xFF, (bg >> 8) & 0xFF, bg & 0xFF)
                + char)

    def flush(self):
        """Write the cells that changed since the last flush."""
        size = self.size()
        out = []
        if size != self._shown_size:
            # Full repaint after a resize
            out.append(self.term.normal + self.term.home + self.term.clear)
            self._shown = {}
            self._shown_size = size
        for (x, y), cell in sorted(self._cells.items(), key=lambda item: (item[0][1], item[0][0])):
            if self._shown.get((x, y)) == cell:
                continue
            out.append(self.term.move_xy(x, y) + self._styled(*cell))
            self._shown[(x, y)] = cell
        out.append(self.term.normal)
        if self._cursor is None:
            out.append(self.term.hide_cursor)
        else:
            out.append(self.term.move_xy(*self._cursor) + self.term.normal_cursor)
        print(''.join(out), end='', flush=True)

    def poll_event(self) -> Optional[Event]:
        """Wait for input on stdin or the resize pipe."""
        while True:
            ready, _, _ = select.select([sys.stdin, self._resize_pipe_r], [], [])
            if self._resize_pipe_r in ready:
                # Clear the pipe
                os.read(self._resize_pipe_r, 1024)
                self._cells.clear()
                width, height = self.size()
                return ResizeEvent(width, height)
            key = self._input.send(0)
            event = self.keyboard.key_event(key)
            if event is not None:
                return event
