"""Detection of include guards and ``#pragma once`` in header documents."""

from __future__ import annotations

import logging
from pathlib import PurePath

from .constants import (
    DEFINE_LOOKAHEAD,
    ENDIF_PATTERN,
    GUARD_SCAN_LINES,
    HEADER_EXTENSIONS,
    IFNDEF_PATTERN,
    PRAGMA_ONCE_PATTERN,
    PRAGMA_SCAN_LINES,
    annotated_endif_pattern,
    define_pattern,
)
from .document import Document
from .models import GuardInfo, ProtectionState

logger = logging.getLogger(__name__)


def is_eligible(path: PurePath | str) -> bool:
    """Tell whether a path names a C/C++ header.

    Args:
        path: File path; only the suffix is inspected.

    Returns:
        bool: True when the suffix, ignoring case, is a header extension.

    Examples:
        is_eligible("src/math.HPP")  # True
        is_eligible("src/math.cpp")  # False
    """
    return PurePath(path).suffix.lower() in HEADER_EXTENSIONS


def _is_substantive(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(("//", "/*"))


def find_pragma_once(document: Document) -> int | None:
    """Locate ``#pragma once`` ahead of the first line of real code.

    Blank lines and lines opening a ``//`` or ``/*`` comment are skipped; the
    first other line ends the search.

    Args:
        document: Document to scan.

    Returns:
        int | None: Zero-based index of the directive, or None when absent.
    """
    for index in range(min(PRAGMA_SCAN_LINES, document.line_count)):
        line = document.line_at(index)
        if PRAGMA_ONCE_PATTERN.match(line):
            return index
        if _is_substantive(line):
            break
    return None


def has_pragma_once(document: Document) -> bool:
    return find_pragma_once(document) is not None


def _find_guard_header(document: Document) -> tuple[str, int, int] | None:
    # Only the first #ifndef counts, paired or not.
    bound = min(GUARD_SCAN_LINES, document.line_count)
    for index in range(bound):
        match = IFNDEF_PATTERN.match(document.line_at(index))
        if not match:
            continue
        macro = match.group(1)
        pattern = define_pattern(macro)
        for candidate in range(index + 1, min(index + 1 + DEFINE_LOOKAHEAD, bound)):
            if pattern.match(document.line_at(candidate)):
                return macro, index, candidate
        return None
    return None


def _find_guard_endif(document: Document, macro: str) -> int | None:
    annotated = annotated_endif_pattern(macro)
    for index in range(document.line_count - 1, -1, -1):
        if annotated.match(document.line_at(index)):
            return index
    # Heuristic: the last bare #endif may close something unrelated.
    for index in range(document.line_count - 1, -1, -1):
        if ENDIF_PATTERN.match(document.line_at(index)):
            return index
    return None


def extract_guard(document: Document) -> GuardInfo | None:
    """Find a classic ``#ifndef``/``#define``/``#endif`` include guard.

    The first ``#ifndef MACRO`` within the leading 60 lines must be followed
    within five lines by ``#define MACRO``. The closing line is the last
    ``#endif`` mentioning the macro, or failing that the last ``#endif`` of
    any kind.

    Args:
        document: Document to scan.

    Returns:
        GuardInfo | None: Guard location, or None when no complete guard exists.

    Examples:
        extract_guard(TextDocument("#ifndef A_H\\n#define A_H\\n#endif\\n"))
        # GuardInfo(macro="A_H", ifndef_line=0, define_line=1, endif_line=2)
    """
    header = _find_guard_header(document)
    if header is None:
        return None
    macro, ifndef_line, define_line = header

    endif_line = _find_guard_endif(document, macro)
    if endif_line is None:
        return None
    return GuardInfo(macro, ifndef_line, define_line, endif_line)


def detect_state(document: Document) -> ProtectionState:
    """Compute the protection currently present in a document.

    ``#pragma once`` takes precedence over an include guard.
    """
    if has_pragma_once(document):
        state = ProtectionState.pragma_once()
    else:
        guard = extract_guard(document)
        state = ProtectionState.from_guard(guard) if guard else ProtectionState.none()
    logger.debug("Detected %s in %s", state.kind.name, document.path)
    return state
