"""Tests for the text buffer editor and editor pane scrolling."""

import pytest

from mockingbird.editor import Direction, EditorPane, TextBuffer
from mockingbird.errors import InvalidInput


def _buffer(lines: list[str], row: int = 0, col: int = 0) -> TextBuffer:
    return TextBuffer(lines=list(lines), row=row, col=col)


class TestInsert:
    def test_insert_at_cursor(self):
        buf = _buffer(["ac"], 0, 1)
        buf.insert_char("b")
        assert buf.lines == ["abc"]
        assert buf.cursor == (0, 2)

    def test_insert_tab_allowed(self):
        buf = TextBuffer()
        buf.insert_char("\t")
        assert buf.lines == ["\t"]
        assert buf.cursor == (0, 1)

    @pytest.mark.parametrize("ch", ["\x00", "\x1b", "\n", "\x7f"])
    def test_control_characters_rejected(self, ch):
        buf = _buffer(["abc"], 0, 1)
        with pytest.raises(InvalidInput):
            buf.insert_char(ch)
        assert buf == _buffer(["abc"], 0, 1)

    def test_multi_character_rejected(self):
        buf = TextBuffer()
        with pytest.raises(InvalidInput):
            buf.insert_char("ab")
        assert buf == TextBuffer()

    def test_insert_text_splits_lines(self):
        buf = TextBuffer()
        buf.insert_text("def f():\r\n    pass")
        assert buf.lines == ["def f():", "    pass"]
        assert buf.cursor == (1, 8)

    def test_insert_text_validates_before_mutating(self):
        buf = _buffer(["x"], 0, 1)
        with pytest.raises(InvalidInput):
            buf.insert_text("ok\x00")
        assert buf == _buffer(["x"], 0, 1)


class TestNewlineAndBackspace:
    def test_newline_at_end_then_backspace(self):
        buf = _buffer(["ab"], 0, 2)
        buf.newline()
        assert buf.lines == ["ab", ""]
        assert buf.cursor == (1, 0)
        buf.backspace()
        assert buf.lines == ["ab"]
        assert buf.cursor == (0, 2)

    def test_newline_splits_mid_line(self):
        buf = _buffer(["hello world"], 0, 5)
        buf.newline()
        assert buf.lines == ["hello", " world"]
        assert buf.cursor == (1, 0)

    def test_backspace_deletes_previous_char(self):
        buf = _buffer(["abc"], 0, 2)
        buf.backspace()
        assert buf.lines == ["ac"]
        assert buf.cursor == (0, 1)

    def test_backspace_merges_into_previous_line(self):
        buf = _buffer(["foo", "bar"], 1, 0)
        buf.backspace()
        assert buf.lines == ["foobar"]
        assert buf.cursor == (0, 3)

    def test_backspace_at_origin_is_noop(self):
        buf = _buffer(["abc", "d"], 0, 0)
        buf.backspace()
        assert buf == _buffer(["abc", "d"], 0, 0)

    @pytest.mark.parametrize("lines,row,col", [
        ([""], 0, 0),
        (["abc"], 0, 0),
        (["abc"], 0, 3),
        (["abc", "def"], 1, 1),
        (["    x", ""], 1, 0),
    ])
    def test_backspace_undoes_insert(self, lines, row, col):
        buf = _buffer(lines, row, col)
        before = _buffer(lines, row, col)
        buf.insert_char("z")
        buf.backspace()
        assert buf == before

    def test_delete_under_cursor_and_join(self):
        buf = _buffer(["ab", "cd"], 0, 1)
        buf.delete()
        assert buf.lines == ["a", "cd"]
        buf.delete()
        assert buf.lines == ["acd"]
        assert buf.cursor == (0, 1)

    def test_delete_at_end_of_buffer_is_noop(self):
        buf = _buffer(["ab"], 0, 2)
        buf.delete()
        assert buf == _buffer(["ab"], 0, 2)


class TestIndent:
    def test_indent_inserts_at_line_start(self):
        buf = _buffer(["return x"], 0, 3)
        buf.indent()
        assert buf.lines == ["    return x"]
        assert buf.cursor == (0, 7)

    def test_outdent_removes_four(self):
        buf = _buffer(["      x"], 0, 7)
        buf.outdent()
        assert buf.lines == ["  x"]
        assert buf.cursor == (0, 3)

    def test_outdent_removes_fewer_than_four(self):
        buf = _buffer(["  x"], 0, 3)
        buf.outdent()
        assert buf.lines == ["x"]
        assert buf.cursor == (0, 1)

    def test_outdent_floors_cursor_at_zero(self):
        buf = _buffer(["    x"], 0, 2)
        buf.outdent()
        assert buf.lines == ["x"]
        assert buf.cursor == (0, 0)

    def test_outdent_without_leading_spaces_is_noop(self):
        buf = _buffer(["x  "], 0, 1)
        buf.outdent()
        assert buf == _buffer(["x  "], 0, 1)


class TestMoveCursor:
    def test_right_wraps_to_next_line(self):
        buf = _buffer(["ab", "cd"], 0, 2)
        buf.move_cursor(Direction.RIGHT)
        assert buf.cursor == (1, 0)

    def test_right_at_end_of_buffer_stays(self):
        buf = _buffer(["ab"], 0, 2)
        buf.move_cursor(Direction.RIGHT)
        assert buf.cursor == (0, 2)

    def test_left_wraps_to_previous_line_end(self):
        buf = _buffer(["abc", "d"], 1, 0)
        buf.move_cursor(Direction.LEFT)
        assert buf.cursor == (0, 3)

    def test_left_at_origin_stays(self):
        buf = _buffer(["abc"], 0, 0)
        buf.move_cursor(Direction.LEFT)
        assert buf.cursor == (0, 0)

    def test_up_down_clamp_column(self):
        buf = _buffer(["long line", "ab", "another"], 0, 7)
        buf.move_cursor(Direction.DOWN)
        assert buf.cursor == (1, 2)
        buf.move_cursor(Direction.DOWN)
        assert buf.cursor == (2, 2)
        buf.move_cursor(Direction.UP)
        buf.move_cursor(Direction.UP)
        assert buf.cursor == (0, 2)

    def test_up_on_first_line_is_noop(self):
        buf = _buffer(["abc", "def"], 0, 1)
        buf.move_cursor(Direction.UP)
        assert buf.cursor == (0, 1)


class TestSubmit:
    def test_submit_returns_trimmed_text_and_resets(self):
        buf = _buffer(["", "  print(1)", "x = 2  ", ""], 2, 3)
        assert buf.submit() == "print(1)\nx = 2"
        assert buf == TextBuffer()

    def test_submit_blank_is_noop(self):
        buf = _buffer(["   ", ""], 1, 0)
        assert buf.is_blank
        assert buf.submit() is None
        assert buf == _buffer(["   ", ""], 1, 0)


class TestEditorPane:
    def test_cursor_row_kept_visible(self):
        pane = EditorPane(height=3)
        for _ in range(5):
            pane.edit(pane.buffer.newline)
        # 6 lines, cursor on row 5, window shows rows 3-5
        assert pane.scroll.offset == 3
        assert [row for row, _ in pane.visible_lines()] == [3, 4, 5]
        assert pane.lines_above == 3
        assert pane.lines_below == 0

    def test_moving_up_scrolls_window_up(self):
        pane = EditorPane(height=2)
        pane.buffer.lines = ["a", "b", "c", "d"]
        pane.buffer.row = 3
        pane.follow_cursor()
        assert pane.scroll.offset == 2
        for _ in range(3):
            pane.edit(pane.buffer.move_cursor, Direction.UP)
        assert pane.scroll.offset == 0

    def test_page_scrolls_without_moving_cursor(self):
        pane = EditorPane(height=2)
        pane.buffer.lines = ["a", "b", "c", "d", "e"]
        pane.page(1)
        assert pane.scroll.offset == 2
        assert pane.buffer.cursor == (0, 0)
        pane.page(5)
        assert pane.scroll.offset == 3

    def test_rejected_edit_returns_false(self):
        pane = EditorPane(height=2)
        assert pane.edit(pane.buffer.insert_char, "\x01") is False
        assert pane.buffer == TextBuffer()

    def test_submit_resets_scroll(self):
        pane = EditorPane(height=1)
        pane.edit(pane.buffer.insert_text, "a\nb\nc")
        assert pane.scroll.offset == 2
        assert pane.submit() == "a\nb\nc"
        assert pane.scroll.offset == 0
