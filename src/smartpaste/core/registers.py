"""Register snapshots and the eligibility gate for smart pasting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence


class RegisterKind(Enum):
    """Shape of the text held by a register."""

    LINEWISE = "linewise"
    CHARWISE = "charwise"
    BLOCKWISE = "blockwise"

    @classmethod
    def from_tag(cls, tag: str) -> "RegisterKind":
        """Map a Vim-style ``regtype`` tag (``V``, ``v``, ``^V<width>``) to a kind."""

        if tag.startswith("V") or tag == cls.LINEWISE.value:
            return cls.LINEWISE
        if tag.startswith("\x16") or tag == cls.BLOCKWISE.value:
            return cls.BLOCKWISE
        return cls.CHARWISE


@dataclass(frozen=True, slots=True)
class RegisterSnapshot:
    """Immutable copy of a register's type tag and ordered lines."""

    kind: RegisterKind
    lines: tuple[str, ...] = ()

    @classmethod
    def of(cls, kind: RegisterKind | str, lines: Iterable[str]) -> "RegisterSnapshot":
        resolved = kind if isinstance(kind, RegisterKind) else RegisterKind.from_tag(kind)
        return cls(kind=resolved, lines=tuple(lines))

    @classmethod
    def from_text(cls, text: str) -> "RegisterSnapshot":
        """Build a snapshot from clipboard text.

        Text ending in a newline is linewise, anything else is charwise.
        """

        if text.endswith("\n"):
            return cls(RegisterKind.LINEWISE, tuple(text[:-1].split("\n")))
        return cls(RegisterKind.CHARWISE, tuple(text.split("\n")))

    @property
    def is_empty(self) -> bool:
        if not self.lines:
            return True
        return self.kind is RegisterKind.CHARWISE and self.lines == ("",)

    @property
    def is_single_segment(self) -> bool:
        return len(self.lines) == 1

    def as_text(self) -> str:
        body = "\n".join(self.lines)
        return body + "\n" if self.kind is RegisterKind.LINEWISE else body


@dataclass(frozen=True, slots=True)
class Eligible:
    """Register content that goes through the smart indentation pipeline."""

    lines: tuple[str, ...]
    converted_charwise: bool = False


@dataclass(frozen=True, slots=True)
class Ineligible:
    """Register content that must be pasted by the host's native behaviour."""

    register: str
    count: int
    key: str
    reason: str


def classify(
    snapshot: RegisterSnapshot,
    *,
    register: str = '"',
    count: int = 1,
    key: str = "p",
    charwise_newline: bool = False,
) -> Eligible | Ineligible:
    """Decide whether ``snapshot`` is handled by the smart pipeline."""

    if snapshot.kind is RegisterKind.LINEWISE:
        return Eligible(lines=snapshot.lines)
    if snapshot.kind is RegisterKind.BLOCKWISE:
        return Ineligible(register=register, count=count, key=key, reason="blockwise")
    if charwise_newline:
        return Eligible(lines=snapshot.lines, converted_charwise=True)
    return Ineligible(register=register, count=count, key=key, reason="charwise")


def replicate(lines: Sequence[str], count: int) -> list[str]:
    """Repeat ``lines`` ``count`` times, keeping their order in each copy."""

    out: list[str] = []
    for _ in range(max(1, count)):
        out.extend(lines)
    return out


__all__ = [
    "Eligible",
    "Ineligible",
    "RegisterKind",
    "RegisterSnapshot",
    "classify",
    "replicate",
]
