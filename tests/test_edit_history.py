import pytest

from md_engine.buffer import Edit, EditHistory


def make_edit(index: int) -> Edit:
    return Edit(
        old_text="",
        new_text=str(index),
        position=index,
        cursor_before=(0, index),
        cursor_after=(0, index + 1),
    )


def test_empty_history_is_noop() -> None:
    history = EditHistory()

    assert not history.can_undo()
    assert not history.can_redo()
    assert history.undo() is None
    assert history.redo() is None


def test_undo_redo_move_edits_between_stacks() -> None:
    history = EditHistory()
    first, second = make_edit(1), make_edit(2)
    history.push(first)
    history.push(second)

    assert history.undo() is second
    assert history.can_redo()
    assert history.undo() is first
    assert not history.can_undo()

    assert history.redo() is first
    assert history.redo() is second
    assert not history.can_redo()
    assert history.undo_depth == 2


def test_push_clears_redo_stack() -> None:
    history = EditHistory()
    history.push(make_edit(1))
    history.undo()
    assert history.can_redo()

    history.push(make_edit(2))

    assert not history.can_redo()
    assert history.redo_depth == 0


def test_history_cap_evicts_oldest() -> None:
    history = EditHistory(max_size=3)
    for index in range(5):
        history.push(make_edit(index))

    assert history.undo_depth == 3
    undone = [history.undo() for _ in range(4)]
    assert [edit.position if edit else None for edit in undone] == [4, 3, 2, None]


def test_clear() -> None:
    history = EditHistory()
    history.push(make_edit(1))
    history.push(make_edit(2))
    history.undo()

    history.clear()

    assert not history.can_undo()
    assert not history.can_redo()


def test_invalid_max_size() -> None:
    with pytest.raises(ValueError):
        EditHistory(max_size=0)


def test_edit_lengths_are_utf8_bytes() -> None:
    edit = Edit("é", "✓✓", 0, (0, 0), (0, 6))

    assert edit.old_length == 2
    assert edit.new_length == 6
