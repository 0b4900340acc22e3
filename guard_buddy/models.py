"""Data models for guard-buddy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ProtectionKind(Enum):
    """Kinds of double-inclusion protection a header can carry.

    Attributes:
        NONE: No recognised protection.
        GUARD: Classic ``#ifndef``/``#define``/``#endif`` include guard.
        PRAGMA_ONCE: A ``#pragma once`` directive.
    """

    NONE = auto()
    GUARD = auto()
    PRAGMA_ONCE = auto()


class Operation(Enum):
    """Rewrite operations offered to the user."""

    INSERT_GUARD = auto()
    USE_PRAGMA_ONCE = auto()
    TOGGLE = auto()


@dataclass(frozen=True)
class GuardInfo:
    """Location of a classic include guard inside a document.

    Attributes:
        macro: Guard macro name taken from the ``#ifndef`` line.
        ifndef_line: Zero-based index of the ``#ifndef`` line.
        define_line: Zero-based index of the matching ``#define`` line.
        endif_line: Zero-based index of the ``#endif`` attributed to the guard.
    """

    macro: str
    ifndef_line: int
    define_line: int
    endif_line: int


@dataclass(frozen=True)
class ProtectionState:
    """Protection found in a document, computed fresh for every query.

    Attributes:
        kind: Which protection is present.
        guard: Guard location when `kind` is `ProtectionKind.GUARD`, else None.
    """

    kind: ProtectionKind
    guard: GuardInfo | None = None

    @classmethod
    def none(cls) -> ProtectionState:
        return cls(ProtectionKind.NONE)

    @classmethod
    def pragma_once(cls) -> ProtectionState:
        return cls(ProtectionKind.PRAGMA_ONCE)

    @classmethod
    def from_guard(cls, guard: GuardInfo) -> ProtectionState:
        return cls(ProtectionKind.GUARD, guard)


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line/character position in a document."""

    line: int
    character: int = 0


@dataclass(frozen=True)
class TextEdit:
    """A single insertion or deletion, addressed in pre-edit positions.

    Attributes:
        start: First position covered by the edit.
        end: Position just past the covered range; equal to `start` for inserts.
        new_text: Text placed at `start`; empty for deletions.
    """

    start: Position
    end: Position
    new_text: str = ""

    @classmethod
    def insert(cls, position: Position, text: str) -> TextEdit:
        return cls(position, position, text)

    @classmethod
    def delete(cls, start: Position, end: Position) -> TextEdit:
        return cls(start, end, "")

    @property
    def is_insert(self) -> bool:
        return self.start == self.end


@dataclass
class OperationResult:
    """Outcome of planning (and possibly applying) an operation.

    Attributes:
        operation: The operation requested by the caller.
        edits: Ordered edits that make up the single atomic change.
        state_before: Protection detected before the change.
        state_after: Kind of protection the document carries afterwards.
        macro: Guard macro inserted by the change, if any.
    """

    operation: Operation
    edits: list[TextEdit] = field(default_factory=list)
    state_before: ProtectionState = field(default_factory=ProtectionState.none)
    state_after: ProtectionKind = ProtectionKind.NONE
    macro: str | None = None


@dataclass(frozen=True)
class DisplayText:
    """Text shown by a host's status indicator."""

    text: str
    tooltip: str


@dataclass(frozen=True)
class CommandResult:
    """User-facing outcome of a dispatched command.

    Attributes:
        ok: True when the document was changed.
        message: Notification text for the user.
        severity: One of ``"info"``, ``"warning"`` or ``"error"``.
    """

    ok: bool
    message: str
    severity: str = "info"
