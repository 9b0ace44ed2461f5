import pytest

from editorview.markup import Point
from editorview.model import Direction, TextModel, clamp
from editorview.view import ScreenView

from fake_display import make_model


def test_clamp_uses_exclusive_upper_bound():
    assert clamp(5, 0, 3) == 2
    assert clamp(-1, 0, 3) == 0
    assert clamp(4, 0, 0) == 0


def test_up_at_top_without_scroll_room_is_no_movement():
    m = make_model("abc\ndef", cursor=(1, 0))
    assert m.move_cursor(Direction.UP) is False
    assert m.cursor == Point(1, 0)


def test_down_and_up():
    m = make_model("abc\ndef")
    assert m.move_cursor(Direction.DOWN)
    assert m.cursor == Point(0, 1)
    assert not m.move_cursor(Direction.DOWN)
    assert m.move_cursor(Direction.UP)
    assert m.cursor == Point(0, 0)


def test_left_wraps_to_end_of_previous_row():
    m = make_model("abc\nde", cursor=(0, 1))
    assert m.move_cursor(Direction.LEFT)
    assert m.cursor == Point(3, 0)


def test_right_wraps_to_start_of_next_row():
    m = make_model("abc\nde", cursor=(3, 0))
    assert m.move_cursor(Direction.RIGHT)
    assert m.cursor == Point(0, 1)


def test_right_at_end_of_buffer_fails():
    m = make_model("abc", cursor=(3, 0))
    assert not m.move_cursor(Direction.RIGHT)
    assert m.cursor == Point(3, 0)


def test_cursor_can_sit_one_past_last_character():
    m = make_model("ab", cursor=(9, 3))
    m.clamp_cursor()
    assert m.cursor == Point(2, 0)


def test_moving_down_past_viewport_scrolls():
    m = make_model("\n".join(str(i) for i in range(10)), height=4)
    for _ in range(4):
        assert m.move_cursor(Direction.DOWN)
    assert m.cursor == Point(0, 3)
    assert m.view.line_offset == 1
    assert m.rune_at() == "4"


def test_line_offset_stays_bounded():
    m = make_model("\n".join(str(i) for i in range(10)), height=4)
    while m.move_cursor(Direction.DOWN):
        pass
    assert 0 <= m.view.line_offset <= max(0, m.view.line_count - m.view.height // 2)
    for _ in range(20):
        m.scroll(Direction.DOWN)
    assert m.view.line_offset <= m.view.line_count - m.view.height // 2


def test_moving_up_scrolls_back():
    m = make_model("\n".join(str(i) for i in range(10)), height=4)
    m.view.line_offset = 2
    m.render()
    assert m.move_cursor(Direction.UP)
    assert m.view.line_offset == 1
    assert m.cursor == Point(0, 0)


def test_rune_at():
    m = make_model("ab\n")
    assert m.rune_at(Point(1, 0)) == "b"
    assert m.rune_at(Point(2, 0)) == "\n"
    assert m.rune_at(Point(0, 4)) == ""


def test_control_right_leaves_whitespace_run():
    m = make_model("ab   cd", cursor=(3, 0))
    m.move_cursor_until(Direction.RIGHT, m.different_whitespaceness())
    assert m.cursor == Point(5, 0)


def test_control_right_stops_at_word_end():
    m = make_model("ab   cd")
    m.move_cursor_until(Direction.RIGHT, m.different_whitespaceness())
    assert m.cursor == Point(2, 0)


def test_control_right_through_trailing_whitespace_reaches_end():
    m = make_model("ab  ", cursor=(2, 0))
    m.move_cursor_until(Direction.RIGHT, m.different_whitespaceness())
    assert m.cursor == Point(4, 0)


def test_control_down_stops_at_indentation_change():
    m = make_model("a\nb\n  c\nd")
    m.move_cursor_until(Direction.DOWN, m.different_indentation())
    assert m.cursor == Point(0, 2)
    assert m.indentation(2) == 2


def test_indentation_ignores_leading_markup():
    m = make_model("<color:ff0000:000000>  a\nb")
    assert m.indentation(0) == 2
    assert m.indentation(1) == 0


def test_control_down_follows_visible_indentation():
    m = make_model("  a\n<color:ff0000:000000>  b\nc")
    m.move_cursor_until(Direction.DOWN, m.different_indentation())
    assert m.cursor == Point(0, 2)


def test_move_until_without_predicate_is_single_step():
    m = make_model("abc")
    m.move_cursor_until(Direction.RIGHT)
    assert m.cursor == Point(1, 0)


def test_home_and_end():
    m = make_model("\n".join(str(i) for i in range(10)), height=4)
    m.move_end()
    assert m.view.line_offset == 8
    assert m.cursor == Point(1, 1)
    assert m.rune_at() == "\n"
    m.move_home()
    assert m.view.line_offset == 0
    assert m.cursor == Point(0, 0)


def test_page_moves_a_viewport_height():
    m = make_model("\n".join(str(i) for i in range(20)), height=5)
    m.page(Direction.DOWN)
    assert m.cursor.y + m.view.line_offset == 5
    m.page(Direction.UP)
    assert m.cursor.y + m.view.line_offset == 0


def test_navigation_is_inert_without_a_viewport():
    view = ScreenView()
    m = TextModel(view, ["abc"])
    m.render()
    assert not m.move_cursor(Direction.RIGHT)
    m.write_at("x")
    assert m.lines == ["abc"]


@pytest.mark.parametrize("direction", list(Direction))
def test_empty_buffer_never_moves(direction):
    m = make_model("")
    assert not m.move_cursor(direction)
    assert m.cursor == Point(0, 0)
