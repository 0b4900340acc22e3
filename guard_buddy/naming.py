"""Guard macro name derivation."""

from __future__ import annotations

from pathlib import PurePath

from .constants import MACRO_SUFFIX_PATTERN, NON_IDENTIFIER_PATTERN


def _sanitize(text: str) -> str:
    return NON_IDENTIFIER_PATTERN.sub("_", text).upper()


def compute_macro(
    path: PurePath | str,
    workspace_root: PurePath | str | None = None,
    prefix: str = "",
) -> str:
    """Derive the include guard macro for a header path.

    Uses the path relative to `workspace_root` when the file lies inside it,
    otherwise the bare filename. Every character outside ``[A-Za-z0-9]``
    becomes ``_``, the result is uppercased, and ``_H`` is appended unless it
    already ends in ``_H``, ``_HPP``, ``_HH`` or ``_HXX``.

    Args:
        path: Path of the header file.
        workspace_root: Optional project root the name is made relative to.
        prefix: Optional project prefix joined in front with ``_``.

    Returns:
        str: Macro made of ``[A-Z0-9_]`` characters.

    Examples:
        compute_macro("src/utils/math.h")  # "MATH_H"
        compute_macro("/ws/src/utils/math.h", "/ws")  # "SRC_UTILS_MATH_H"
        compute_macro("/ws/lib/vec.hpp", "/ws", prefix="acme")  # "ACME_LIB_VEC_HPP"
        compute_macro("version")  # "VERSION_H"
    """
    path = PurePath(path)
    relative = None
    if workspace_root is not None:
        try:
            relative = path.relative_to(workspace_root)
        except ValueError:
            relative = None
    name = relative.as_posix() if relative is not None else path.name

    macro = _sanitize(name)
    if prefix:
        macro = f"{_sanitize(prefix)}_{macro}"
    if not MACRO_SUFFIX_PATTERN.search(macro):
        macro += "_H"
    return macro
