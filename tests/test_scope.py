"""Tests for scope-boundary detection around the insertion point."""

from __future__ import annotations

import pytest

from smartpaste.editor.headless import HeadlessEditor
from smartpaste.indent.resolver import IndentResolver
from smartpaste.indent.scope import ScopeBoundaryResolver, ScopeClassification, classify_line, closes


def _scope(editor: HeadlessEditor) -> ScopeBoundaryResolver:
    return ScopeBoundaryResolver(editor, IndentResolver.for_host(editor))


def _target(editor: HeadlessEditor, lines: list[str], row: int, *, after: bool, **options) -> int:
    options.setdefault("shift_width", 4)
    buffer_id = editor.create_buffer(lines, **options)
    return _scope(editor).resolve_target(buffer_id, row, after)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("if (x) {", ScopeClassification.OPENER),
        ("  items = [", ScopeClassification.OPENER),
        ("def f():", ScopeClassification.OPENER),
        ("} else {", ScopeClassification.OPENER),
        ("for i = 1, 3 do", ScopeClassification.OPENER),
        ("if x then", ScopeClassification.OPENER),
        ("local function foo(a)", ScopeClassification.OPENER),
        ("<div>", ScopeClassification.OPENER),
        ('  class="wide">', ScopeClassification.OPENER),
        ("  onClick={handler}>", ScopeClassification.OPENER),
        ("  >", ScopeClassification.OPENER),
        ("}", ScopeClassification.CLOSER),
        ("  );", ScopeClassification.CLOSER),
        ("</div>", ScopeClassification.CLOSER),
        ("  />", ScopeClassification.CLOSER),
        ("end", ScopeClassification.CLOSER),
        ("x = 1", ScopeClassification.NEITHER),
        ("if a >", ScopeClassification.NEITHER),
        ("  return x ->", ScopeClassification.NEITHER),
        ('  data-x="1" />', ScopeClassification.NEITHER),
        ("<br>", ScopeClassification.NEITHER),
        ('<img src="a">', ScopeClassification.NEITHER),
        ("<div>text</div>", ScopeClassification.NEITHER),
        ("", ScopeClassification.NEITHER),
    ],
)
def test_classify_line(line: str, expected: ScopeClassification) -> None:
    assert classify_line(line) is expected


def test_closing_pairs() -> None:
    assert closes("{", "}")
    assert closes("tag", "tag")
    assert not closes("(", "}")
    assert not closes(":", "}")


def test_opener_followed_by_blank_line_indents_one_level(editor: HeadlessEditor) -> None:
    assert _target(editor, ["function f() {", "", "}"], 0, after=True) == 4


def test_empty_block_indents_one_level(editor: HeadlessEditor) -> None:
    assert _target(editor, ["if (x) {", "}"], 0, after=True) == 4


def test_opener_with_deeper_neighbour_uses_neighbour(editor: HeadlessEditor) -> None:
    assert _target(editor, ["if (x) {", "  foo();", "}"], 0, after=True) == 2


def test_opener_on_last_line(editor: HeadlessEditor) -> None:
    assert _target(editor, ["  if (x) {"], 0, after=True) == 6


def test_mismatched_closer_keeps_baseline(editor: HeadlessEditor) -> None:
    assert _target(editor, ["foo(", "}"], 0, after=True) == 0


def test_tag_block(editor: HeadlessEditor) -> None:
    assert _target(editor, ["<div>", "</div>"], 0, after=True) == 4


def test_python_opener(editor: HeadlessEditor) -> None:
    assert _target(editor, ["def f():", "    pass"], 0, after=True) == 4
    assert _target(editor, ["def f():"], 0, after=True) == 4


def test_plain_line_keeps_its_indent(editor: HeadlessEditor) -> None:
    assert _target(editor, ["    x = 1", "y"], 0, after=True) == 4
    assert _target(editor, ["    x = 1", "y"], 1, after=False) == 0


def test_closer_after_opener_indents_one_level(editor: HeadlessEditor) -> None:
    assert _target(editor, ["if (x) {", "}"], 1, after=False) == 4


def test_closer_after_blank_line(editor: HeadlessEditor) -> None:
    assert _target(editor, ["if (x) {", "", "}"], 2, after=False) == 4


def test_closer_after_deeper_line(editor: HeadlessEditor) -> None:
    assert _target(editor, ["if (x) {", "      a();", "}"], 2, after=False) == 6


def test_closer_on_first_row(editor: HeadlessEditor) -> None:
    assert _target(editor, ["  }", "x"], 0, after=False) == 2


def test_auto_shiftwidth_uses_tabstop(editor: HeadlessEditor) -> None:
    assert _target(editor, ["{", "}"], 0, after=True, shift_width=0, tab_width=2) == 2


def test_baseline_indent(editor: HeadlessEditor) -> None:
    buffer_id = editor.create_buffer(["\tx", ""], tab_width=4, shift_width=4, indent_expression=lambda row: 20)
    scope = _scope(editor)

    assert scope.baseline_indent(buffer_id, 0) == 4
    assert scope.baseline_indent(buffer_id, 1) == 4
