"""Replacing a linewise selection with re-indented register content."""

from __future__ import annotations

from smartpaste.editor.headless import HeadlessEditor
from smartpaste.paste.orchestrator import NativeReplay, PasteOrchestrator, PastePlan, SelectionKind

FUNCTION = ["def f():", "    a = 1", "    b = 2", "    c = 3"]


def _replace(editor: HeadlessEditor, start: int, end: int, *, kind: SelectionKind | str = "V", **kwargs):
    editor.select_rows(start, end)
    return PasteOrchestrator(editor).apply_to_selection(kwargs.pop("register", '"'), "p", kind, **kwargs)


def test_replace_middle_rows(editor: HeadlessEditor) -> None:
    editor.create_buffer(FUNCTION, shift_width=4)
    editor.set_register('"', ["x = 9", "y = 8"])

    plan = _replace(editor, 1, 2)

    assert editor.lines() == ["def f():", "    x = 9", "    y = 8", "    c = 3"]
    assert isinstance(plan, PastePlan)
    assert plan.target_indent == 4


def test_replace_tail_rows(editor: HeadlessEditor) -> None:
    editor.create_buffer(FUNCTION, shift_width=4)
    editor.set_register('"', ["x = 9", "y = 8"])

    _replace(editor, 2, 3)

    assert editor.lines() == ["def f():", "    a = 1", "    x = 9", "    y = 8"]


def test_replace_whole_buffer_trims_artifact(editor: HeadlessEditor) -> None:
    editor.create_buffer(["    a", "    b"], shift_width=4)
    editor.set_register('"', ["x"])

    _replace(editor, 0, 1)

    assert editor.lines() == ["    x"]
    assert editor.undo_depth() == 1
    editor.undo()
    assert editor.lines() == ["    a", "    b"]


def test_target_comes_from_first_selected_row(editor: HeadlessEditor) -> None:
    editor.create_buffer(["x", "        a", "b"], shift_width=4, indent_expression=lambda row: 20)
    editor.set_register('"', ["  y", "    z"])

    _replace(editor, 1, 1)

    assert editor.lines() == ["x", "        y", "          z", "b"]


def test_blank_first_row_uses_resolver(editor: HeadlessEditor) -> None:
    editor.create_buffer(["    a", "", "b"], shift_width=4)
    editor.set_register('"', ["x"])

    _replace(editor, 1, 1)

    assert editor.lines() == ["    a", "    x", "b"]


def test_reversed_selection_rows(editor: HeadlessEditor) -> None:
    editor.create_buffer(FUNCTION, shift_width=4)
    editor.set_register('"', ["x = 9"])

    _replace(editor, 3, 1)

    assert editor.lines() == ["def f():", "    x = 9"]


def test_count_override(editor: HeadlessEditor) -> None:
    editor.create_buffer(FUNCTION, shift_width=4)
    editor.set_register('"', ["x = 9"])

    _replace(editor, 1, 1, count_override=2)

    assert editor.lines() == ["def f():", "    x = 9", "    x = 9", "    b = 2", "    c = 3"]


def test_pending_count_applies_without_override(editor: HeadlessEditor) -> None:
    editor.create_buffer(["a", "b"], shift_width=4)
    editor.set_register('"', ["x"])
    editor.set_pending('"', 3)

    _replace(editor, 0, 0)

    assert editor.lines() == ["x", "x", "x", "b"]


def test_characterwise_selection_is_native(editor: HeadlessEditor) -> None:
    editor.create_buffer(FUNCTION, shift_width=4)
    editor.set_register('"', ["x = 9"])

    outcome = _replace(editor, 1, 2, kind=SelectionKind.CHARWISE)

    assert isinstance(outcome, NativeReplay)
    assert outcome.visual
    assert editor.native_replays[-1].visual
    assert editor.lines() == FUNCTION


def test_charwise_register_over_linewise_selection_is_native(editor: HeadlessEditor) -> None:
    editor.create_buffer(FUNCTION, shift_width=4)
    editor.set_register('"', "abc")

    outcome = _replace(editor, 1, 2)

    assert outcome.reason == "register_charwise"
    assert editor.lines() == FUNCTION


def test_registers_survive_selection_replace(editor: HeadlessEditor) -> None:
    editor.create_buffer(FUNCTION, shift_width=4)
    snapshot = editor.set_register('"', ["x = 9"])

    _replace(editor, 1, 2)

    assert editor.get_register('"') is snapshot
    assert snapshot.lines == ("x = 9",)


def test_noop_without_selection_or_content(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(FUNCTION, shift_width=4)
    orchestrator = PasteOrchestrator(editor)

    assert _replace(editor, 1, 2) is None
    editor.set_register('"', ["x"])
    editor.clear_selection(buffer_id)
    assert orchestrator.apply_to_selection('"', "p", "V") is None
    assert editor.lines() == FUNCTION
    assert editor.undo_depth() == 0


def test_selection_kind_coercion() -> None:
    assert SelectionKind.coerce("V") is SelectionKind.LINEWISE
    assert SelectionKind.coerce("v") is SelectionKind.CHARWISE
    assert SelectionKind.coerce("\x16") is SelectionKind.BLOCKWISE
    assert SelectionKind.coerce(SelectionKind.LINEWISE) is SelectionKind.LINEWISE
