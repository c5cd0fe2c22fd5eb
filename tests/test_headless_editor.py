"""Tests for the in-memory editor host."""

from __future__ import annotations

import pytest

from smartpaste.core.registers import RegisterKind
from smartpaste.editor.headless import HeadlessEditor
from smartpaste.editor.host import EditorHost, FormatOptions, IndentExpressionProvider, StructureProvider


def test_headless_editor_satisfies_host_protocols(editor: HeadlessEditor) -> None:
    host: EditorHost = editor
    assert isinstance(host, IndentExpressionProvider)
    assert isinstance(host, StructureProvider)


def test_buffers_always_keep_one_line(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(["a", "b"])

    editor.delete_range(buffer_id, 0, 2)

    assert editor.lines() == [""]
    assert editor.line_count(buffer_id) == 1
    assert editor.create_buffer([]) != buffer_id
    assert editor.lines() == [""]


def test_unknown_buffer_raises(editor: HeadlessEditor) -> None:
    with pytest.raises(KeyError):
        editor.buffer(42)


def test_current_buffer_is_created_on_demand(editor: HeadlessEditor) -> None:
    buffer_id = editor.current_buffer()

    assert editor.lines(buffer_id) == [""]


def test_registers(editor: HeadlessEditor) -> None:
    assert editor.set_register("a", "x\ny\n").kind is RegisterKind.LINEWISE
    assert editor.set_register("b", "x\ny").kind is RegisterKind.CHARWISE
    assert editor.set_register("c", "x\ny", kind="V").lines == ("x", "y")
    assert editor.set_register("d", ["x"]).kind is RegisterKind.LINEWISE
    editor.set_register("_", ["swallowed"])

    assert editor.get_register("_") is None
    assert editor.get_register("z") is None


def test_atomic_block_is_one_undo_step(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(["a", "b", "c"])

    with editor.atomic(buffer_id):
        editor.delete_range(buffer_id, 0, 1)
        editor.set_cursor(buffer_id, 0)
        editor.insert_lines(buffer_id, ["x", "y"], linewise=True, after=True, follow=False)

    assert editor.lines() == ["b", "x", "y", "c"]
    assert editor.undo_depth() == 1
    assert editor.undo()
    assert editor.lines() == ["a", "b", "c"]
    assert editor.redo()
    assert editor.lines() == ["b", "x", "y", "c"]
    assert not editor.redo()


def test_edits_without_changes_leave_no_history(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(["a"])

    editor.delete_range(buffer_id, 3, 5)
    with editor.atomic(buffer_id):
        pass

    assert editor.undo_depth() == 0
    assert not editor.undo()


def test_history_is_capped(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(["a"])

    for _ in range(HeadlessEditor.MAX_HISTORY + 5):
        editor.insert_lines(buffer_id, ["x"], linewise=True, after=True, follow=False)

    assert editor.undo_depth() == HeadlessEditor.MAX_HISTORY


def test_charwise_insert_goes_after_cursor_column(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(["ab"])

    editor.insert_lines(buffer_id, ["X"], linewise=False, after=True, follow=False)
    assert editor.lines() == ["aXb"]

    editor.insert_lines(buffer_id, ["1", "2"], linewise=False, after=False, follow=False)
    assert editor.lines() == ["a1", "2Xb"]


def test_schedule_apply_runs_token_and_remembers_it(editor: HeadlessEditor) -> None:
    calls: list[int] = []
    editor.set_pending("a", 4)

    result = editor.schedule_apply(lambda: calls.append(len(calls)) or "done")

    assert result == "done"
    assert editor.pending_invocation() == ('"', 1)
    editor.repeat_last()
    assert calls == [0, 1]


def test_repeat_without_token(editor: HeadlessEditor) -> None:
    assert editor.repeat_last() is None


def test_indent_capabilities(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(["    a", ""], shift_width=4, indent_expression="indent(1) + sw")

    assert editor.evaluate_indent_expression(buffer_id, 1) == 8
    assert editor.get_structural_parse(buffer_id) is None

    editor.set_indent_expression(None)
    assert editor.evaluate_indent_expression(buffer_id, 1) is None

    python_id = editor.create_buffer(["if x:", "    y"], filetype="python")
    tree = editor.get_structural_parse(python_id)
    assert tree is not None
    assert editor.smallest_node_at(tree, 1).type == "name"


def test_format_options(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(["a"], use_spaces=False, tab_width=4, shift_width=0)

    options = editor.get_format_options(buffer_id)

    assert options == FormatOptions(use_spaces=False, tab_width=4, shift_width=0)
    assert options.effective_shift_width == 4
    editor.set_format_options(FormatOptions())
    assert editor.get_format_options(buffer_id).effective_shift_width == 8
