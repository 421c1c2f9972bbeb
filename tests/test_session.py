from pathlib import Path

import pytest

from md_engine.buffer import DocumentIOError, EditorSession
from md_engine.config import EditorConfig
from md_engine.markdown import Heading, Paragraph


def make_session(text: str = "", **config) -> EditorSession:
    return EditorSession.from_text(text, config=EditorConfig(**config))


def test_new_session_is_clean() -> None:
    session = EditorSession()

    assert session.text() == ""
    assert session.cursor_position() == (0, 0)
    assert not session.is_dirty()
    assert not session.can_undo()
    assert not session.can_redo()


def test_insert_text_advances_cursor() -> None:
    session = make_session()

    session.insert_text("Hello")
    session.insert_text("\nWorld")

    assert session.text() == "Hello\nWorld"
    assert session.cursor_position() == (1, 5)
    assert session.cursor_offset() == 11
    assert session.is_dirty()


def test_insert_records_reversible_edit() -> None:
    session = make_session("ab")
    session.set_cursor(0, 1)

    edit = session.insert_text("X")

    assert edit is not None
    assert edit.old_text == ""
    assert edit.new_text == "X"
    assert edit.position == 1
    assert edit.cursor_before == (0, 1)
    assert edit.cursor_after == (0, 2)


def test_undo_redo_restore_text_and_cursor() -> None:
    session = make_session("Hello")
    session.set_cursor(0, 5)
    session.insert_text(", World")

    assert session.undo()
    assert session.text() == "Hello"
    assert session.cursor_position() == (0, 5)

    assert session.redo()
    assert session.text() == "Hello, World"
    assert session.cursor_position() == (0, 12)


def test_undo_redo_symmetry() -> None:
    session = make_session("start\n")
    session.set_cursor(1, 0)
    session.insert_text("one")
    session.insert_newline()
    session.insert_text("twø")
    session.replace_range(0, 5, "begin")
    session.set_cursor(0, 2)
    session.backspace()
    session.delete_forward()
    final = session.text()

    undone = 0
    while session.can_undo():
        assert session.undo()
        undone += 1
    assert session.text() == "start\n"
    assert not session.can_undo()
    assert session.can_redo()

    for _ in range(undone):
        assert session.redo()
    assert session.text() == final
    assert not session.can_redo()


def test_undo_and_redo_on_empty_history_are_noops() -> None:
    session = make_session("text")

    assert session.undo() is False
    assert session.redo() is False
    assert session.text() == "text"
    assert not session.is_dirty()


def test_new_edit_invalidates_redo() -> None:
    session = make_session()
    session.insert_text("a")
    session.undo()
    assert session.can_redo()

    session.insert_text("b")

    assert not session.can_redo()


def test_history_limit_comes_from_config() -> None:
    session = make_session(history_limit=2)
    for char in "abc":
        session.insert_text(char)

    assert session.undo()
    assert session.undo()
    assert not session.undo()
    assert session.text() == "a"


def test_set_text_resets_history_and_dirty_flag() -> None:
    session = make_session()
    session.insert_text("draft")

    session.set_text("fresh")

    assert session.text() == "fresh"
    assert not session.is_dirty()
    assert not session.can_undo()
    assert session.cursor_position() == (0, 0)


def test_backspace_removes_whole_utf8_character() -> None:
    session = make_session("aé")
    session.set_cursor_offset(3)

    session.backspace()

    assert session.text() == "a"
    assert session.cursor_position() == (0, 1)


def test_backspace_joins_lines() -> None:
    session = make_session("ab\ncd")
    session.set_cursor(1, 0)

    session.backspace()

    assert session.text() == "abcd"
    assert session.cursor_position() == (0, 2)


def test_backspace_at_start_does_nothing() -> None:
    session = make_session("ab")

    assert session.backspace() is None
    assert not session.can_undo()


def test_delete_forward_keeps_cursor() -> None:
    session = make_session("abc")
    session.set_cursor(0, 1)

    session.delete_forward()

    assert session.text() == "ac"
    assert session.cursor_position() == (0, 1)


def test_insert_replaces_selection() -> None:
    session = make_session("hello world")
    session.select(5, 0)
    assert session.selected_text() == "hello"

    session.insert_text("bye")

    assert session.text() == "bye world"
    assert session.selection is None
    assert session.cursor_position() == (0, 3)


def test_backspace_deletes_selection() -> None:
    session = make_session("hello world")
    session.select(5, 11)

    session.backspace()

    assert session.text() == "hello"


def test_replace_range_clamps_and_orders_offsets() -> None:
    session = make_session("abcdef")

    session.replace_range(100, 3, "X")

    assert session.text() == "abcX"


def test_insert_newline_auto_indents() -> None:
    session = make_session("    - item")
    session.set_cursor(0, 10)

    session.insert_newline()

    assert session.text() == "    - item\n    "
    assert session.cursor_position() == (1, 4)


def test_insert_newline_without_auto_indent() -> None:
    session = make_session("    item", auto_indent=False)
    session.set_cursor(0, 8)

    session.insert_newline()

    assert session.text() == "    item\n"


def test_insert_tab_follows_config() -> None:
    spaces = make_session(tab_size=2)
    spaces.insert_tab()
    tabs = make_session(use_spaces_for_tabs=False)
    tabs.insert_tab()

    assert spaces.text() == "  "
    assert tabs.text() == "\t"


def test_vertical_movement_keeps_column() -> None:
    session = make_session("long line\nab\nanother line")
    session.set_cursor(0, 7)

    assert session.move_down() == (1, 2)
    assert session.move_down() == (2, 7)
    assert session.move_up() == (1, 2)
    assert session.move_up() == (0, 7)
    assert session.move_up() == (0, 7)


def test_horizontal_movement_and_line_bounds() -> None:
    session = make_session("aé\nb")

    assert session.move_right() == (0, 1)
    assert session.move_right() == (0, 3)
    assert session.move_right() == (1, 0)
    assert session.move_left() == (0, 3)
    assert session.move_line_start() == (0, 0)
    assert session.move_line_end() == (0, 3)


def test_set_cursor_clamps_past_the_end() -> None:
    session = make_session("ab\ncd")

    assert session.set_cursor(10, 0) == (1, 2)


def test_render_uses_current_text() -> None:
    session = make_session("# Doc")
    session.set_cursor(0, 5)
    session.insert_text("\n\nbody")

    assert session.render() == (Heading(1, "Doc"), Paragraph("body"))


def test_snapshot() -> None:
    session = make_session("x")
    session.insert_text("y")

    view = session.snapshot()

    assert view.text == "yx"
    assert view.cursor == (0, 1)
    assert view.dirty
    assert view.version == session.version


def test_open_and_save_round_trip(tmp_path: Path) -> None:
    source = tmp_path / "note.md"
    source.write_bytes("# Title\r\nbody ✓\n".encode("utf-8"))
    session = EditorSession()

    session.open_file(source)
    assert session.text() == "# Title\r\nbody ✓\n"
    assert not session.is_dirty()

    session.set_cursor(1, 0)
    session.insert_text("more ")
    target = tmp_path / "out.md"
    session.save_file(target)

    assert target.read_bytes() == "# Title\r\nmore body ✓\n".encode("utf-8")
    assert not session.is_dirty()
    assert session.path == target


def test_open_missing_file_raises_document_error(tmp_path: Path) -> None:
    session = EditorSession()
    missing = tmp_path / "missing.md"

    with pytest.raises(DocumentIOError) as info:
        session.open_file(missing)

    assert info.value.path == missing
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_open_invalid_utf8_raises_document_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.md"
    broken.write_bytes(b"\xff\xfe\x00")
    session = make_session("keep")

    with pytest.raises(DocumentIOError):
        session.open_file(broken)

    assert session.text() == "keep"


def test_save_without_path_raises() -> None:
    with pytest.raises(DocumentIOError):
        EditorSession().save_file()


def test_replace_inside_multibyte_char_snaps_to_char_start() -> None:
    session = make_session("é")

    session.replace_range(1, 1, "x")

    assert session.text() == "xé"
    assert session.undo()
    assert session.text() == "é"


def test_delete_range_never_splits_characters() -> None:
    session = make_session("a✓b")

    session.delete_range(2, 4)

    assert session.text() == "ab"


def test_cursor_and_selection_snap_to_char_start() -> None:
    session = make_session("é✓")

    assert session.set_cursor_offset(1) == (0, 0)
    assert session.set_cursor(0, 4) == (0, 2)

    session.select(1, 4)
    assert session.selection == (0, 2)
    assert session.selected_text() == "é"

    session.insert_text("e")
    assert session.text() == "e✓"
