"""Editing session: event loop, undo recording and the public API."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .commands import CommandRegistry
from .constants import EditorConstants
from .keyboard import Event, KeyEvent, ResizeEvent
from .markup import Point, join_lines
from .model import TextModel
from .selection import SelectionManager
from .settings import EditorSettings, get_settings
from .terminal import Display, TerminalDisplay
from .undo import UndoManager
from .view import ScreenView

logger = logging.getLogger(__name__)

EventFilter = Callable[[Event], list[Event]]


class Editor:
    """An embeddable editor over a character-grid ``Display``.

    ``event_filter`` may expand each polled event into zero or more events,
    processed in order within the same turn.
    """

    def __init__(self, display: Optional[Display] = None,
                 settings: Optional[EditorSettings] = None,
                 event_filter: Optional[EventFilter] = None):
        self.display = display if display is not None else TerminalDisplay()
        self.settings = settings or get_settings()
        self.event_filter = event_filter
        self.view = ScreenView(self.settings.default_style)
        self.model = TextModel(self.view, tab_width=self.settings.tab_width)
        self.selection = SelectionManager(self.model)
        self.undo_manager = UndoManager(max_entries=self.settings.undo_limit)
        self.command_registry = CommandRegistry(EditorConstants.QUIT_KEY)
        self.select_anchor: Optional[Point] = None
        self.running = False

    # Public API

    def content(self) -> str:
        return self.model.content()

    def set_content(self, text: str):
        """Replace the raw buffer and redraw."""
        self._sync_size()
        self.model.set_content(text)
        self._show()

    def edit(self, initial_text: str = "") -> tuple[str, Optional[Exception]]:
        """Run a blocking session until the quit key.

        Returns ``("", None)``; read the edited text with ``content()``.
        """
        self.display.open()
        try:
            self.undo_manager.clear()
            self.set_content(initial_text)
            self.running = True
            while self.running:
                event = self.display.poll_event()
                if event is None:
                    continue
                events = self.event_filter(event) if self.event_filter else [event]
                for ev in events:
                    self.process_event(ev)
                    if not self.running:
                        break
        finally:
            self.running = False
            self.display.close()
        return "", None

    # Event handling

    def _snapshot(self) -> str:
        return join_lines(self.selection.unmarked_lines())

    def process_event(self, event: Event):
        """Handle one logical event and update the display."""
        prev_content = self._snapshot()
        prev_cursor = self.model.cursor
        self.select_anchor = None

        if isinstance(event, ResizeEvent):
            self._sync_size()
            self._show()
            return

        command = self.command_registry.get_command(event) if isinstance(event, KeyEvent) else None
        if command is not None:
            command.execute(self, event)
        else:
            logger.debug("no command for %r", event)
        self.selection.after_event(self.select_anchor)

        new_content = self._snapshot()
        changed = new_content != prev_content
        if command is None or command.records_undo:
            self.undo_manager.record(prev_content, new_content, prev_cursor)
        if changed and (command is None or command.clears_redo):
            self.undo_manager.clear_redo()
        if logger.isEnabledFor(logging.DEBUG):
            for line in self.model.lines:
                logger.debug("%r", line)
        self._show()

    def undo(self):
        restored = self.undo_manager.undo(self.content(), self.model.cursor)
        if restored is not None:
            self._restore(*restored)

    def redo(self):
        restored = self.undo_manager.redo(self.content())
        if restored is not None:
            self._restore(*restored)

    def _restore(self, text: str, cursor: Point):
        self.model.cursor = cursor
        self.model.set_content(text)

    # Display

    def _sync_size(self):
        width, height = self.display.size()
        self.model.resize(width, height)

    def _show(self):
        """Draw the viewport and cursor, then flush."""
        self.view.draw(self.display)
        if self.view.renderable:
            self.display.show_cursor(self.model.cursor.x, self.model.cursor.y)
        else:
            self.display.hide_cursor()
        self.display.flush()
