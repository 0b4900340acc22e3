"""
guard-buddy: include guard and `#pragma once` management for C/C++ headers.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    guard-buddy toggle include/math.h

Library Usage:
    from guard_buddy import Operation, TextDocument, apply_operation, detect_state

    doc = TextDocument(Path("include/math.h").read_text(), path="include/math.h")
    apply_operation(doc, Operation.INSERT_GUARD)
    detect_state(doc).guard.macro  # "MATH_H"
"""

from .detector import detect_state, extract_guard, find_pragma_once, has_pragma_once, is_eligible
from .document import Document, TextDocument
from .exceptions import (
    AlreadyProtectedError,
    EditConflictError,
    GuardError,
    NoEditorOpenError,
    NotAHeaderError,
    UnknownCommandError,
)
from .host import on_document_changed, render_state, run_command
from .models import (
    CommandResult,
    DisplayText,
    GuardInfo,
    Operation,
    OperationResult,
    Position,
    ProtectionKind,
    ProtectionState,
    TextEdit,
)
from .naming import compute_macro
from .planner import apply_operation, plan_operation

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "is_eligible",
    "has_pragma_once",
    "find_pragma_once",
    "extract_guard",
    "detect_state",
    "compute_macro",
    "plan_operation",
    "apply_operation",
    # Host adapter
    "render_state",
    "on_document_changed",
    "run_command",
    # Data models
    "Document",
    "TextDocument",
    "GuardInfo",
    "ProtectionKind",
    "ProtectionState",
    "Operation",
    "OperationResult",
    "Position",
    "TextEdit",
    "DisplayText",
    "CommandResult",
    # Exceptions
    "GuardError",
    "NotAHeaderError",
    "AlreadyProtectedError",
    "NoEditorOpenError",
    "EditConflictError",
    "UnknownCommandError",
    # Version
    "__version__",
]
