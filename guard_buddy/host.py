"""Entry points an editor host (or the CLI) calls into.

The host owns documents, notifications and the status indicator. It forwards
document events to `on_document_changed` and command invocations to
`run_command`, then displays whatever they return.
"""

from __future__ import annotations

from pathlib import PurePath

from .config import GuardConfig
from .constants import (
    INSERT_GUARD_COMMAND,
    STATUS_TOOLTIP,
    TOGGLE_COMMAND,
    USE_PRAGMA_ONCE_COMMAND,
)
from .detector import detect_state, is_eligible
from .document import Document
from .exceptions import (
    AlreadyProtectedError,
    EditConflictError,
    NoEditorOpenError,
    NotAHeaderError,
    UnknownCommandError,
)
from .models import (
    CommandResult,
    DisplayText,
    Operation,
    OperationResult,
    ProtectionKind,
    ProtectionState,
)
from .planner import apply_operation

COMMANDS = {
    INSERT_GUARD_COMMAND: Operation.INSERT_GUARD,
    USE_PRAGMA_ONCE_COMMAND: Operation.USE_PRAGMA_ONCE,
    TOGGLE_COMMAND: Operation.TOGGLE,
}

_STATE_LABELS = {
    ProtectionKind.PRAGMA_ONCE: "pragma once",
    ProtectionKind.GUARD: "include guard",
    ProtectionKind.NONE: "none",
}


def render_state(state: ProtectionState) -> DisplayText:
    return DisplayText(_STATE_LABELS[state.kind], STATUS_TOOLTIP)


def on_document_changed(document: Document | None) -> DisplayText | None:
    """Recompute the indicator after a document was opened, saved or focused.

    Returns:
        DisplayText | None: Indicator contents, or None when it should be hidden.
    """
    if document is None or not is_eligible(document.path):
        return None
    return render_state(detect_state(document))


def describe_result(result: OperationResult) -> str:
    """Build the status message for a successful operation."""
    before = result.state_before.kind
    if result.operation is Operation.TOGGLE and before is ProtectionKind.PRAGMA_ONCE:
        return "Replaced #pragma once with include guard."
    if result.operation is Operation.TOGGLE and before is ProtectionKind.GUARD:
        return "Replaced include guard with #pragma once."
    if result.state_after is ProtectionKind.GUARD:
        return f"Inserted include guard: {result.macro}"
    return "Inserted #pragma once"


def run_command(
    name: str,
    document: Document | None,
    workspace_root: PurePath | str | None = None,
    config: GuardConfig | None = None,
) -> CommandResult:
    """Run a registered command against the active document.

    Args:
        name: Registered command name, such as ``"guard-buddy.toggle"``.
        document: Active document, or None when no editor is open.
        workspace_root: Root of the project containing the document, if known.
        config: Settings for macro naming. Defaults to a new `GuardConfig`.

    Returns:
        CommandResult: Notification for the user. Failures leave the
            document unchanged.

    Raises:
        UnknownCommandError: If `name` is not a registered command.

    Examples:
        run_command("guard-buddy.insertGuard", TextDocument("", "math.h"))
        # CommandResult(ok=True, message="Inserted include guard: MATH_H", ...)
    """
    operation = COMMANDS.get(name)
    if operation is None:
        raise UnknownCommandError(name)

    config = config or GuardConfig()
    if not config.use_workspace_root:
        workspace_root = None

    if document is None:
        return CommandResult(False, str(NoEditorOpenError()), "info")

    try:
        result = apply_operation(document, operation, workspace_root, config.macro_prefix)
    except NotAHeaderError as error:
        return CommandResult(False, str(error), "warning")
    except AlreadyProtectedError as error:
        if operation is Operation.USE_PRAGMA_ONCE:
            return CommandResult(False, "#pragma once is already present.", "info")
        return CommandResult(False, f"{error.path} already has include protection.", "info")
    except EditConflictError as error:
        return CommandResult(False, f"Could not apply the edit: {error}", "error")

    return CommandResult(True, describe_result(result), "info")
