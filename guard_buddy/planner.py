"""Planning and applying include-guard / ``#pragma once`` rewrites."""

from __future__ import annotations

import logging
from pathlib import PurePath

from .constants import PRAGMA_ONCE_DIRECTIVE
from .detector import detect_state, find_pragma_once, is_eligible
from .document import Document
from .exceptions import AlreadyProtectedError, NotAHeaderError
from .models import (
    GuardInfo,
    Operation,
    OperationResult,
    Position,
    ProtectionKind,
    ProtectionState,
    TextEdit,
)
from .naming import compute_macro

logger = logging.getLogger(__name__)


def _end_of_document(document: Document) -> Position:
    return Position(document.line_count, 0)


def _delete_lines(first: int, last: int) -> TextEdit:
    """Delete whole lines ``first..last`` including their line breaks."""
    return TextEdit.delete(Position(first, 0), Position(last + 1, 0))


def _guard_insertion(document: Document, macro: str) -> list[TextEdit]:
    eol = document.eol
    return [
        TextEdit.insert(Position(0, 0), f"#ifndef {macro}{eol}#define {macro}{eol}{eol}"),
        TextEdit.insert(_end_of_document(document), f"{eol}#endif // {macro}{eol}"),
    ]


def _pragma_insertion(document: Document) -> TextEdit:
    eol = document.eol
    return TextEdit.insert(Position(0, 0), f"{PRAGMA_ONCE_DIRECTIVE}{eol}{eol}")


def _guard_removal(guard: GuardInfo) -> list[TextEdit]:
    return [
        _delete_lines(guard.ifndef_line, guard.define_line),
        _delete_lines(guard.endif_line, guard.endif_line),
    ]


def _pragma_removal(document: Document) -> list[TextEdit]:
    index = find_pragma_once(document)
    if index is None:
        return []
    last = index
    if index + 1 < document.line_count and not document.line_at(index + 1).strip():
        last = index + 1
    return [_delete_lines(index, last)]


def _describe(state: ProtectionState) -> str:
    if state.kind is ProtectionKind.PRAGMA_ONCE:
        return "#pragma once"
    return f"an include guard ({state.guard.macro})"


def plan_operation(
    document: Document,
    operation: Operation,
    workspace_root: PurePath | str | None = None,
    prefix: str = "",
) -> OperationResult:
    """Compute the edits an operation would make, without touching the document.

    Args:
        document: Document to inspect.
        operation: Requested rewrite.
        workspace_root: Project root used to derive the guard macro name.
        prefix: Optional project prefix for the guard macro name.

    Returns:
        OperationResult: The edits forming one atomic change and the states
            before and after it.

    Raises:
        NotAHeaderError: If the document is not a C/C++ header.
        AlreadyProtectedError: If the document already carries the requested
            protection (or, for guard insertion, any protection).

    Examples:
        plan_operation(TextDocument("", "math.h"), Operation.INSERT_GUARD).macro
        # "MATH_H"
    """
    if not is_eligible(document.path):
        raise NotAHeaderError(document.path)

    state = detect_state(document)
    result = OperationResult(operation=operation, state_before=state)

    if operation is Operation.TOGGLE and state.kind is ProtectionKind.NONE:
        operation = Operation.INSERT_GUARD

    if operation is Operation.INSERT_GUARD:
        if state.kind is not ProtectionKind.NONE:
            raise AlreadyProtectedError(document.path, _describe(state))
        result.macro = compute_macro(document.path, workspace_root, prefix)
        result.edits = _guard_insertion(document, result.macro)
        result.state_after = ProtectionKind.GUARD
        return result

    if operation is Operation.USE_PRAGMA_ONCE and state.kind is ProtectionKind.PRAGMA_ONCE:
        raise AlreadyProtectedError(document.path, _describe(state))

    if state.kind is ProtectionKind.PRAGMA_ONCE:
        # Toggle: pragma once -> include guard
        result.macro = compute_macro(document.path, workspace_root, prefix)
        result.edits = _pragma_removal(document) + _guard_insertion(document, result.macro)
        result.state_after = ProtectionKind.GUARD
        return result

    result.edits = [_pragma_insertion(document)]
    if state.guard is not None:
        result.edits += _guard_removal(state.guard)
    result.state_after = ProtectionKind.PRAGMA_ONCE
    return result


def apply_operation(
    document: Document,
    operation: Operation,
    workspace_root: PurePath | str | None = None,
    prefix: str = "",
) -> OperationResult:
    """Plan an operation and commit its edits in a single transaction.

    Args:
        document: Document to rewrite.
        operation: Requested rewrite.
        workspace_root: Project root used to derive the guard macro name.
        prefix: Optional project prefix for the guard macro name.

    Returns:
        OperationResult: Description of the committed change.

    Raises:
        NotAHeaderError: If the document is not a C/C++ header.
        AlreadyProtectedError: If the requested protection already exists.
        EditConflictError: If the document rejects the batch of edits.
    """
    result = plan_operation(document, operation, workspace_root, prefix)
    document.apply_edits(result.edits)
    logger.debug(
        "%s on %s: %s -> %s",
        operation.name,
        document.path,
        result.state_before.kind.name,
        result.state_after.name,
    )
    return result
