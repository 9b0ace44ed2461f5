from editorview.markup import DEFAULT_STYLE, SELECTED_STYLE, Point, Segment
from editorview.selection import SelectionManager

from fake_display import make_editor, make_model, run_keys


def select_right(editor, count):
    run_keys(editor, *(['<Shift-RIGHT>'] * count))


def test_shift_movement_embeds_markers():
    editor = make_editor("hello world")
    select_right(editor, 2)
    assert editor.content() == "<select-from>he<select-to>llo world"
    assert editor.selection.active
    assert editor.display.style_at(0, 0) == SELECTED_STYLE
    assert editor.display.style_at(1, 0) == SELECTED_STYLE
    assert editor.display.style_at(2, 0) == DEFAULT_STYLE


def test_selecting_backwards_keeps_marker_at_cursor():
    editor = make_editor("hello")
    editor.model.cursor = Point(4, 0)
    run_keys(editor, '<Shift-LEFT>', '<Shift-LEFT>')
    assert editor.content() == "he<select-to>ll<select-from>o"
    assert editor.display.style_at(2, 0) == SELECTED_STYLE
    assert editor.display.style_at(4, 0) == DEFAULT_STYLE


def test_plain_movement_clears_selection():
    editor = make_editor("hello")
    select_right(editor, 3)
    run_keys(editor, '<RIGHT>')
    assert editor.content() == "hello"
    assert not editor.selection.active


def test_escape_clears_selection():
    editor = make_editor("hello")
    select_right(editor, 3)
    run_keys(editor, '<ESC>')
    assert editor.content() == "hello"


def test_copy_and_paste():
    editor = make_editor("hello world")
    select_right(editor, 5)
    run_keys(editor, '<Ctrl-c>')
    assert editor.selection.paste_buffer == ["hello"]
    assert editor.content() == "hello world"
    run_keys(editor, '<Ctrl-v>')
    assert editor.content() == "hellohello world"
    assert editor.model.cursor == Point(10, 0)


def test_cut_removes_span_and_moves_cursor_to_start():
    editor = make_editor("hello world")
    select_right(editor, 5)
    run_keys(editor, '<Ctrl-x>')
    assert editor.content() == " world"
    assert editor.selection.paste_buffer == ["hello"]
    assert editor.model.cursor == Point(0, 0)


def test_cut_multiline_and_paste_restores_lines():
    editor = make_editor("ab\ncd\nef")
    editor.model.cursor = Point(1, 0)
    run_keys(editor, '<Shift-DOWN>', '<Ctrl-x>')
    assert editor.content() == "ad\nef"
    assert editor.selection.paste_buffer == ["b", "c"]
    run_keys(editor, '<Ctrl-v>')
    assert editor.content() == "ab\ncd\nef"


def test_paste_escapes_markup_characters():
    editor = make_editor("")
    editor.selection.paste_buffer = ["<a&b>"]
    run_keys(editor, '<Ctrl-v>')
    assert editor.content() == "&lt;a&amp;b&gt;"
    assert editor.model.cursor == Point(5, 0)


def test_copy_strips_markup():
    m = make_model("x<select-from>a&lt;<color:ff0000:000000>b<select-to>y")
    selection = SelectionManager(m)
    assert selection.copy()
    assert selection.paste_buffer == ["a<b"]
    assert m.content() == "x<select-from>a&lt;<color:ff0000:000000>b<select-to>y"


def test_copy_without_selection():
    selection = SelectionManager(make_model("abc"))
    assert not selection.copy()
    assert selection.paste_buffer == []


def test_backspace_deletes_selection():
    editor = make_editor("hello world")
    editor.model.cursor = Point(6, 0)
    select_right(editor, 5)
    run_keys(editor, '<BACKSPACE>')
    assert editor.content() == "hello "
    assert editor.model.cursor == Point(6, 0)


def test_delete_key_deletes_selection():
    editor = make_editor("hello world")
    select_right(editor, 6)
    run_keys(editor, '<DELETE>')
    assert editor.content() == "world"


def test_typing_ends_selection_without_deleting():
    editor = make_editor("abc")
    select_right(editor, 1)
    run_keys(editor, 'x')
    assert editor.content() == "axbc"


def test_selection_gestures_do_not_create_undo_entries():
    editor = make_editor("hello")
    select_right(editor, 3)
    run_keys(editor, '<Ctrl-c>')
    assert not editor.undo_manager.can_undo()


def test_cut_on_wrapped_row_keeps_cursor_at_span_start():
    editor = make_editor("abcdefghij", width=5)
    editor.model.cursor = Point(1, 1)
    select_right(editor, 2)
    run_keys(editor, '<Ctrl-x>')
    assert editor.content() == "abcdefij"
    assert editor.selection.paste_buffer == ["gh"]
    assert editor.model.cursor == Point(1, 1)


def test_cut_in_scrolled_view_keeps_cursor_at_span_start():
    editor = make_editor("\n".join(str(i) for i in range(10)), height=4)
    editor.view.line_offset = 3
    editor.model.cursor = Point(0, 0)
    select_right(editor, 2)
    run_keys(editor, '<Ctrl-x>')
    assert editor.model.lines[3] == "4"
    assert editor.view.line_offset == 3
    assert editor.model.cursor == Point(0, 0)


def test_shift_down_that_scrolls_anchors_on_original_row():
    editor = make_editor("\n".join(str(i) for i in range(10)), height=4)
    editor.model.cursor = Point(0, 3)
    run_keys(editor, '<Shift-DOWN>')
    assert editor.view.line_offset == 1
    assert editor.model.lines[3:5] == ["<select-from>3", "<select-to>4"]
    run_keys(editor, '<Ctrl-c>')
    assert editor.selection.paste_buffer == ["3", ""]


def test_shift_home_selects_back_to_document_start():
    editor = make_editor("\n".join(str(i) for i in range(10)), height=4)
    run_keys(editor, '<END>', '<Shift-HOME>')
    assert editor.model.cursor == Point(0, 0)
    assert editor.content().startswith("<select-to>0")
    assert editor.content().endswith("9<select-from>")


class TestBackCursor:
    def make(self, text="abcdef\nghij\nkl"):
        return SelectionManager(make_model(text))

    def test_cursor_inside_removed_span_moves_to_start(self):
        s = self.make()
        s.back_cursor(Segment(Point(1, 0), Point(5, 0)), Point(3, 0))
        assert s.model.cursor == Point(1, 0)

    def test_cursor_at_span_end_moves_to_start(self):
        s = self.make()
        s.back_cursor(Segment(Point(1, 0), Point(5, 0)), Point(5, 0))
        assert s.model.cursor == Point(1, 0)

    def test_cursor_before_span_stays(self):
        s = self.make()
        s.back_cursor(Segment(Point(1, 1), Point(3, 1)), Point(2, 0))
        assert s.model.cursor == Point(2, 0)

    def test_cursor_after_span_on_same_line_backs_up(self):
        s = self.make()
        s.back_cursor(Segment(Point(1, 0), Point(3, 0)), Point(6, 0))
        assert s.model.cursor == Point(4, 0)

    def test_cursor_after_multiline_span_on_its_last_line(self):
        s = self.make("abij\nkl")
        s.back_cursor(Segment(Point(1, 0), Point(2, 1)), Point(3, 1))
        assert s.model.cursor == Point(2, 0)

    def test_cursor_below_span_backs_up_rows(self):
        s = self.make()
        s.back_cursor(Segment(Point(1, 0), Point(2, 1)), Point(1, 2))
        assert s.model.cursor == Point(1, 1)

    def test_unknown_cursor_goes_to_span_start(self):
        s = self.make()
        s.back_cursor(Segment(Point(2, 1), Point(4, 1)), None)
        assert s.model.cursor == Point(2, 1)

    def test_target_below_viewport_scrolls_into_view(self):
        s = SelectionManager(make_model("\n".join(str(i) for i in range(10)), height=4))
        s.back_cursor(Segment(Point(0, 6), Point(1, 6)), Point(1, 6))
        assert s.model.view.line_offset == 3
        assert s.model.cursor == Point(0, 3)
