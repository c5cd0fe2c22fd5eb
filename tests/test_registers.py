"""Tests for register snapshots and the eligibility classifier."""

from __future__ import annotations

import pytest

from smartpaste.core.registers import Eligible, Ineligible, RegisterKind, RegisterSnapshot, classify, replicate


@pytest.mark.parametrize(
    ("tag", "kind"),
    [
        ("V", RegisterKind.LINEWISE),
        ("linewise", RegisterKind.LINEWISE),
        ("v", RegisterKind.CHARWISE),
        ("\x165", RegisterKind.BLOCKWISE),
        ("blockwise", RegisterKind.BLOCKWISE),
    ],
)
def test_kind_from_tag(tag: str, kind: RegisterKind) -> None:
    assert RegisterKind.from_tag(tag) is kind


def test_snapshot_from_clipboard_text() -> None:
    linewise = RegisterSnapshot.from_text("a\n  b\n")
    charwise = RegisterSnapshot.from_text("abc")

    assert linewise.kind is RegisterKind.LINEWISE
    assert linewise.lines == ("a", "  b")
    assert linewise.as_text() == "a\n  b\n"
    assert charwise.kind is RegisterKind.CHARWISE
    assert charwise.lines == ("abc",)
    assert charwise.as_text() == "abc"


def test_empty_snapshots() -> None:
    assert RegisterSnapshot.of("v", [""]).is_empty
    assert RegisterSnapshot.of("V", []).is_empty
    assert not RegisterSnapshot.of("V", [""]).is_empty
    assert RegisterSnapshot.of("v", ["x"]).is_single_segment


def test_linewise_is_eligible() -> None:
    verdict = classify(RegisterSnapshot.of("V", ["  a", "  b"]))

    assert verdict == Eligible(lines=("  a", "  b"), converted_charwise=False)


def test_blockwise_is_never_eligible() -> None:
    verdict = classify(RegisterSnapshot.of("\x162", ["ab", "cd"]), register="a", count=3, key="P", charwise_newline=True)

    assert verdict == Ineligible(register="a", count=3, key="P", reason="blockwise")


def test_charwise_needs_newline_conversion() -> None:
    snapshot = RegisterSnapshot.of("v", ["foo"])

    assert classify(snapshot) == Ineligible(register='"', count=1, key="p", reason="charwise")
    assert classify(snapshot, charwise_newline=True) == Eligible(lines=("foo",), converted_charwise=True)


def test_replicate_repeats_in_order() -> None:
    assert replicate(["a", "b"], 3) == ["a", "b", "a", "b", "a", "b"]
    assert replicate(["a"], 0) == ["a"]
