"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .keyboard import KeyType
from .model import Direction

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands.

    ``records_undo``: a content change is pushed onto the undo stack.
    ``clears_redo``: a content change invalidates the redo stack.
    """

    records_undo = True
    clears_redo = True

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent'):
        if key_event.is_shift:
            # Resolve before moving; the movement may scroll
            editor.select_anchor = editor.model.view.raw_point(editor.model.cursor)
        self._move(editor, key_event)

    @abstractmethod
    def _move(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the movement."""
        pass


class ArrowCommand(MovementCommand):
    def __init__(self, direction: Direction):
        self.direction = direction

    def _move(self, editor, key_event):
        model = editor.model
        if key_event.is_ctrl:
            if self.direction in (Direction.UP, Direction.DOWN):
                predicate = model.different_indentation()
            else:
                predicate = model.different_whitespaceness()
            model.move_cursor_until(self.direction, predicate)
        else:
            model.move_cursor(self.direction)


class PageCommand(MovementCommand):
    def __init__(self, direction: Direction):
        self.direction = direction

    def _move(self, editor, key_event):
        editor.model.page(self.direction)


class HomeCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_home()


class EndCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_end()


class EditCommand(EditorCommand):
    """Base class for editing commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent'):
        self._edit(editor, key_event)

    @abstractmethod
    def _edit(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the edit."""
        pass


class InsertCharCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.model.insert_char(key_event.value)


class NewLineCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.model.new_line()


class TabCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.model.tab()


class BackspaceCommand(EditCommand):
    """Delete the selection, or else the character before the cursor."""

    def _edit(self, editor, key_event):
        if not editor.selection.delete():
            editor.model.backspace()


class DeleteCharCommand(EditCommand):
    """Delete the selection, or else the character under the cursor."""

    def _edit(self, editor, key_event):
        if not editor.selection.delete():
            editor.model.delete_at()


class KillWordCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.model.delete_word_backward()


class CopyCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.selection.copy()


class CutCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.selection.cut()


class PasteCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.selection.paste()


class ClearSelectionCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.selection.clear()


class SystemCommand(EditorCommand):
    """Base class for system commands (undo, redo, quit)."""
    pass


class UndoCommand(SystemCommand):
    records_undo = False
    clears_redo = False

    def execute(self, editor, key_event):
        editor.selection.clear()
        editor.undo()


class RedoCommand(SystemCommand):
    records_undo = False
    clears_redo = False

    def execute(self, editor, key_event):
        editor.selection.clear()
        editor.redo()


class QuitCommand(SystemCommand):
    records_undo = False
    clears_redo = False

    def execute(self, editor, key_event):
        editor.running = False


class CommandRegistry:
    """Registry mapping key events to commands."""

    def __init__(self, quit_key: str = 'q'):
        self.commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self.insert_command = InsertCharCommand()
        self._register_default_commands(quit_key)

    def _register_default_commands(self, quit_key: str):
        for name, direction in (('up', Direction.UP), ('down', Direction.DOWN),
                                ('left', Direction.LEFT), ('right', Direction.RIGHT)):
            arrow = ArrowCommand(direction)
            self.register(KeyType.SPECIAL, name, arrow)
            self.register(KeyType.SHIFT_SPECIAL, name, arrow)

        for key_type in (KeyType.SPECIAL, KeyType.SHIFT_SPECIAL):
            self.register(key_type, 'page_up', PageCommand(Direction.UP))
            self.register(key_type, 'page_down', PageCommand(Direction.DOWN))
            self.register(key_type, 'home', HomeCommand())
            self.register(key_type, 'end', EndCommand())

        self.register(KeyType.SPECIAL, 'enter', NewLineCommand())
        self.register(KeyType.SPECIAL, 'backspace', BackspaceCommand())
        self.register(KeyType.SPECIAL, 'delete', DeleteCharCommand())
        self.register(KeyType.SPECIAL, 'tab', TabCommand())
        self.register(KeyType.SPECIAL, 'escape', ClearSelectionCommand())
        self.register(KeyType.ALT, 'backspace', KillWordCommand())

        self.register(KeyType.CTRL, 'z', UndoCommand())
        self.register(KeyType.CTRL, 'y', RedoCommand())
        self.register(KeyType.CTRL, 'c', CopyCommand())
        self.register(KeyType.CTRL, 'x', CutCommand())
        self.register(KeyType.CTRL, 'v', PasteCommand())
        self.register(KeyType.CTRL, quit_key, QuitCommand())

    def register(self, key_type: KeyType, value: str, command: EditorCommand):
        """Register a command for a key combination."""
        self.commands[(key_type, value)] = command

    def get_command(self, key_event: 'KeyEvent') -> Optional[EditorCommand]:
        """Get the command for a key event, if any."""
        command = self.commands.get((key_event.key_type, key_event.value))
        if command is None and key_event.key_type == KeyType.REGULAR and key_event.value.isprintable():
            return self.insert_command
        return command
