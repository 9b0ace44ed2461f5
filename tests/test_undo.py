"""Tests for diff-based undo and redo."""

from editorview.markup import Point
from editorview.undo import PatchCodec, UndoManager

from fake_display import make_editor, run_keys


def test_record_ignores_unchanged_content():
    undo = UndoManager()
    assert not undo.record("abc", "abc", Point(0, 0))
    assert not undo.can_undo()


def test_undo_restores_previous_text_and_cursor():
    undo = UndoManager()
    assert undo.record("hello", "hello world", Point(5, 0))
    assert undo.undo("hello world", Point(11, 0)) == ("hello", Point(5, 0))
    assert not undo.can_undo()
    assert undo.can_redo()
    assert undo.redo("hello") == ("hello world", Point(11, 0))


def test_history_is_capped():
    undo = UndoManager(max_entries=2)
    undo.record("a", "ab", Point(1, 0))
    undo.record("ab", "abc", Point(2, 0))
    undo.record("abc", "abcd", Point(3, 0))
    text = "abcd"
    count = 0
    while undo.can_undo():
        restored = undo.undo(text, Point(0, 0))
        text = restored[0]
        count += 1
    assert count == 2
    assert text == "ab"


def test_empty_stacks_return_none():
    undo = UndoManager()
    assert undo.undo("x", Point(0, 0)) is None
    assert undo.redo("x") is None


def test_failed_patch_is_consumed():
    undo = UndoManager()
    undo.record("hello there", "hello world", Point(0, 0))
    assert undo.undo("qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqq", Point(0, 0)) is None
    assert not undo.can_undo()
    assert not undo.can_redo()


def test_clear_empties_both_stacks():
    undo = UndoManager()
    undo.record("a", "b", Point(0, 0))
    undo.undo("b", Point(0, 0))
    undo.record("b", "c", Point(0, 0))
    undo.clear()
    assert not undo.can_undo()
    assert not undo.can_redo()


def test_codec_reports_success():
    codec = PatchCodec()
    patches = codec.make("one two", "one three")
    assert codec.apply(patches, "one two") == ("one three", True)


class TestEditorUndo:
    def test_typing_undo_and_redo(self):
        editor = make_editor("abc")
        run_keys(editor, 'x', 'y')
        assert editor.content() == "xyabc"
        run_keys(editor, '<Ctrl-z>')
        assert editor.content() == "xabc"
        assert editor.model.cursor == Point(1, 0)
        run_keys(editor, '<Ctrl-z>')
        assert editor.content() == "abc"
        assert editor.model.cursor == Point(0, 0)
        run_keys(editor, '<Ctrl-y>', '<Ctrl-y>')
        assert editor.content() == "xyabc"

    def test_redo_is_not_recorded_for_undo(self):
        editor = make_editor("")
        run_keys(editor, 'x', '<Ctrl-z>', '<Ctrl-y>')
        assert editor.content() == "x"
        assert not editor.undo_manager.can_undo()
        assert not editor.undo_manager.can_redo()

    def test_undo_with_empty_history_is_noop(self):
        editor = make_editor("abc")
        run_keys(editor, '<Ctrl-z>', '<Ctrl-y>')
        assert editor.content() == "abc"

    def test_new_edit_clears_redo(self):
        editor = make_editor("")
        run_keys(editor, 'a', '<Ctrl-z>')
        assert editor.undo_manager.can_redo()
        run_keys(editor, 'b')
        assert not editor.undo_manager.can_redo()

    def test_movement_keeps_redo(self):
        editor = make_editor("")
        run_keys(editor, 'a', '<Ctrl-z>', '<RIGHT>')
        assert editor.undo_manager.can_redo()

    def test_undo_drops_selection_markers(self):
        editor = make_editor("hello")
        run_keys(editor, 'x', '<Shift-RIGHT>', '<Ctrl-z>')
        assert editor.content() == "hello"
