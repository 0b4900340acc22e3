"""Constants used across the guard-buddy package."""

from __future__ import annotations

import re

# Header suffixes accepted by the classifier (compared case-insensitively)
HEADER_EXTENSIONS = (".h", ".hpp", ".hh", ".hxx")

# Scan windows
PRAGMA_SCAN_LINES = 50
GUARD_SCAN_LINES = 60
DEFINE_LOOKAHEAD = 5

# Preprocessor directive patterns
PRAGMA_ONCE_PATTERN = re.compile(r"^\s*#\s*pragma\s+once\b")
IFNDEF_PATTERN = re.compile(r"^\s*#\s*ifndef\s+([A-Z0-9_]+)")
ENDIF_PATTERN = re.compile(r"^\s*#\s*endif\b")
MACRO_SUFFIX_PATTERN = re.compile(r"_H(PP|H|XX)?$")
NON_IDENTIFIER_PATTERN = re.compile(r"[^A-Za-z0-9]")

PRAGMA_ONCE_DIRECTIVE = "#pragma once"

# Host command names
INSERT_GUARD_COMMAND = "guard-buddy.insertGuard"
USE_PRAGMA_ONCE_COMMAND = "guard-buddy.usePragmaOnce"
TOGGLE_COMMAND = "guard-buddy.toggle"

STATUS_TOOLTIP = "Click to toggle header protection"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


def define_pattern(macro: str) -> re.Pattern[str]:
    """Pattern for the ``#define`` line that pairs with ``#ifndef <macro>``."""
    return re.compile(rf"^\s*#\s*define\s+{re.escape(macro)}\b")


def annotated_endif_pattern(macro: str) -> re.Pattern[str]:
    """Pattern for an ``#endif`` that names `macro` anywhere after the directive."""
    return re.compile(rf"^\s*#\s*endif\b.*\b{re.escape(macro)}\b")
