"""Package-specific exception types."""

from __future__ import annotations

from pathlib import PurePath

from .constants import HEADER_EXTENSIONS


class GuardError(ValueError):
    """Base class for errors raised while inspecting or rewriting a header.

    Every subclass is user-recoverable: the document is left unchanged.
    """


class NotAHeaderError(GuardError):
    """Raised when a file's extension is not a C/C++ header suffix.

    Args:
        path: Path of the rejected file.
    """

    def __init__(self, path: PurePath | str):
        self.path = path
        super().__init__(
            f"{path} does not look like a C/C++ header "
            f"({'/'.join(HEADER_EXTENSIONS)})."
        )


class AlreadyProtectedError(GuardError):
    """Raised when the requested protection, or any protection, already exists.

    Args:
        path: Path of the document.
        description: Human readable name of the protection that was found.
    """

    def __init__(self, path: PurePath | str, description: str):
        self.path = path
        self.description = description
        super().__init__(f"{path} already has {description}.")


class NoEditorOpenError(GuardError):
    """Raised when a command is dispatched without an active document."""

    def __init__(self):
        super().__init__(
            f"Open a C/C++ header file ({', '.join(HEADER_EXTENSIONS)})."
        )


class EditConflictError(GuardError):
    """Raised when a batch of edits cannot be committed as one transaction.

    The batch is rejected as a whole; no edit from it is applied.
    """


class UnknownCommandError(GuardError):
    """Raised when a host dispatches a command name that is not registered.

    Args:
        name: The unrecognised command name.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown command: {name}")
