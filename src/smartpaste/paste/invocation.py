"""Key entries, the invocation slot, and replay tokens."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping

DEFAULT_REGISTER = '"'


@dataclass(frozen=True, slots=True)
class KeyEntry:
    """Normalized paste key: which side to insert on and where the cursor ends up."""

    lhs: str
    after: bool = True
    follow: bool = False
    charwise_newline: bool = False


INFERRED_FLAGS: Mapping[str, KeyEntry] = {
    "p": KeyEntry("p", after=True),
    "P": KeyEntry("P", after=False),
    "gp": KeyEntry("gp", after=True, follow=True),
    "gP": KeyEntry("gP", after=False, follow=True),
    "]p": KeyEntry("]p", after=True, charwise_newline=True),
    "[p": KeyEntry("[p", after=False, charwise_newline=True),
}

VISUAL_ELIGIBLE: frozenset[str] = frozenset({"p", "P"})


def key_entry_for(lhs: str) -> KeyEntry:
    """Return the inferred entry for ``lhs``; unknown keys paste after."""

    return INFERRED_FLAGS.get(lhs) or KeyEntry(lhs)


@dataclass(slots=True)
class InvocationState:
    """The single slot describing the paste being performed."""

    register: str = DEFAULT_REGISTER
    count: int = 1
    key: str = "p"
    after: bool = True
    follow: bool = False
    charwise_newline: bool = False

    @classmethod
    def from_entry(cls, entry: KeyEntry, register: str | None, count: int | None) -> "InvocationState":
        return cls(
            register=register or DEFAULT_REGISTER,
            count=count if count and count > 0 else 1,
            key=entry.lhs,
            after=entry.after,
            follow=entry.follow,
            charwise_newline=entry.charwise_newline,
        )

    def copy(self) -> "InvocationState":
        return replace(self)


@dataclass(frozen=True, slots=True)
class ReplayToken:
    """Opaque trigger handed to the host.

    Calling the token runs the apply step for the captured state; the host's
    repeat facility calls it again to replay the paste at a new cursor.
    """

    state: InvocationState
    runner: Callable[[InvocationState], Any]

    def __call__(self) -> Any:
        return self.runner(self.state.copy())


__all__ = [
    "DEFAULT_REGISTER",
    "INFERRED_FLAGS",
    "InvocationState",
    "KeyEntry",
    "ReplayToken",
    "VISUAL_ELIGIBLE",
    "key_entry_for",
]
