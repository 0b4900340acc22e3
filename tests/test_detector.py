from __future__ import annotations

import textwrap

import pytest

from guard_buddy.detector import (
    detect_state,
    extract_guard,
    find_pragma_once,
    has_pragma_once,
    is_eligible,
)
from guard_buddy.document import TextDocument
from guard_buddy.models import GuardInfo, ProtectionKind


def _doc(content: str, path: str = "foo.h") -> TextDocument:
    return TextDocument(textwrap.dedent(content).lstrip("\n"), path=path)


@pytest.mark.parametrize("path", ["a.h", "dir/b.hpp", "C.HH", "d.Hxx", "/abs/e.h"])
def test_header_extensions_are_eligible(path):
    assert is_eligible(path)


@pytest.mark.parametrize("path", ["a.c", "b.cpp", "c.hxx.bak", "Makefile", "d.h5", "e.inl"])
def test_other_extensions_are_not_eligible(path):
    assert not is_eligible(path)


def test_pragma_once_at_top():
    doc = _doc(
        """
        #pragma once

        int f();
        """
    )
    assert has_pragma_once(doc)
    assert find_pragma_once(doc) == 0
    assert extract_guard(doc) is None


def test_pragma_once_after_block_comment_body_is_ignored():
    doc = _doc(
        """
        // Copyright header

        /* licence
         * text */
        #  pragma   once
        """
    )
    # " * text */" is a substantive line, so the scan stops before the pragma
    assert not has_pragma_once(doc)


def test_pragma_once_after_line_comments():
    doc = _doc(
        """
        // one
        /* two */

          #pragma once
        """
    )
    assert find_pragma_once(doc) == 3


def test_pragma_once_after_code_is_ignored():
    doc = _doc(
        """
        #include <stdio.h>
        #pragma once
        """
    )
    assert not has_pragma_once(doc)


def test_pragma_once_beyond_scan_window_is_ignored():
    doc = TextDocument("\n" * 50 + "#pragma once\n", path="late.h")
    assert not has_pragma_once(doc)


def test_pragma_once_requires_word_boundary():
    assert not has_pragma_once(_doc("#pragma onceler\n"))
    assert not has_pragma_once(_doc("#pragma pack(1)\n"))


def test_extract_guard_with_annotated_endif():
    doc = _doc(
        """
        #ifndef FOO_H
        #define FOO_H

        int foo();

        #endif // FOO_H"""
    )
    assert extract_guard(doc) == GuardInfo(
        macro="FOO_H", ifndef_line=0, define_line=1, endif_line=doc.line_count - 1
    )


def test_extract_guard_with_bare_endif():
    doc = _doc(
        """
        #ifndef FOO_H
        #define FOO_H
        int foo();
        #endif
        """
    )
    guard = extract_guard(doc)
    assert guard is not None
    assert guard.endif_line == 3


def test_annotated_endif_preferred_over_later_bare_endif():
    doc = _doc(
        """
        #ifndef FOO_H
        #define FOO_H
        #endif /* FOO_H */
        #ifdef BAR
        #endif
        """
    )
    assert extract_guard(doc).endif_line == 2


def test_bare_endif_fallback_takes_last_endif():
    doc = _doc(
        """
        #ifndef FOO_H
        #define FOO_H
        #ifdef DEBUG
        #endif
        int x;
        #endif
        """
    )
    assert extract_guard(doc).endif_line == 5


def test_annotated_endif_needs_whole_word():
    doc = _doc(
        """
        #ifndef FOO_H
        #define FOO_H
        #endif // FOO_HPP
        #endif
        """
    )
    # FOO_HPP does not name FOO_H, so the last bare #endif wins
    assert extract_guard(doc).endif_line == 3


def test_define_within_lookahead_window():
    doc = _doc(
        """
        #ifndef FOO_H
        // a
        // b
        // c
        // d
        #define FOO_H
        #endif
        """
    )
    assert extract_guard(doc).define_line == 5


def test_define_outside_lookahead_window():
    doc = _doc(
        """
        #ifndef FOO_H
        // a
        // b
        // c
        // d
        // e
        #define FOO_H
        #endif
        """
    )
    assert extract_guard(doc) is None


def test_define_must_repeat_the_macro():
    doc = _doc(
        """
        #ifndef FOO_H
        #define FOO_HX
        #endif
        """
    )
    assert extract_guard(doc) is None


def test_only_first_ifndef_is_considered():
    doc = _doc(
        """
        #ifndef NOT_A_GUARD
        #error unexpected
        #endif
        #ifndef FOO_H
        #define FOO_H
        #endif // FOO_H
        """
    )
    assert extract_guard(doc) is None


def test_lowercase_macro_is_not_a_guard():
    doc = _doc(
        """
        #ifndef foo_h
        #define foo_h
        #endif
        """
    )
    assert extract_guard(doc) is None


def test_guard_without_endif_is_not_found():
    doc = _doc(
        """
        #ifndef FOO_H
        #define FOO_H
        int x;
        """
    )
    assert extract_guard(doc) is None


def test_guard_after_licence_comment_with_indented_directives():
    doc = _doc(
        """
        /*
         * Licence
         */
          #  ifndef   LIB_VEC_HPP
          #  define   LIB_VEC_HPP
        #endif
        """
    )
    assert extract_guard(doc) == GuardInfo("LIB_VEC_HPP", 3, 4, 5)


def test_ifndef_beyond_scan_window_is_ignored():
    doc = TextDocument("\n" * 60 + "#ifndef FOO_H\n#define FOO_H\n#endif\n", path="foo.h")
    assert extract_guard(doc) is None


def test_detect_state_prefers_pragma_once():
    doc = _doc(
        """
        #pragma once
        #ifndef FOO_H
        #define FOO_H
        #endif
        """
    )
    assert detect_state(doc).kind is ProtectionKind.PRAGMA_ONCE


def test_detect_state_guard_and_none():
    guarded = detect_state(_doc("#ifndef A_H\n#define A_H\n#endif\n"))
    assert guarded.kind is ProtectionKind.GUARD
    assert guarded.guard.macro == "A_H"

    assert detect_state(_doc("int x;\n")).kind is ProtectionKind.NONE
    assert detect_state(TextDocument("", path="empty.h")).guard is None
