"""Line-addressable text documents with atomic multi-region edits."""

from __future__ import annotations

import logging
from bisect import bisect_right
from pathlib import PurePath
from typing import Protocol, Sequence

from .exceptions import EditConflictError
from .models import Position, TextEdit

logger = logging.getLogger(__name__)


class Document(Protocol):
    """What the engine needs from a host document.

    Lines are addressed by zero-based index; `line_at` returns the line text
    without its line break.
    """

    path: PurePath

    @property
    def line_count(self) -> int: ...

    @property
    def eol(self) -> str: ...

    def line_at(self, index: int) -> str: ...

    def apply_edits(self, edits: Sequence[TextEdit]) -> None: ...


class TextDocument:
    """In-memory document implementing the `Document` protocol.

    Lines are separated by ``\\n``; a ``\\r`` preceding it is part of the line
    break. A text ending in a line break has a trailing empty line, so
    ``"a\\n"`` has two lines and ``""`` has one.

    A leading byte-order mark is not part of the text; `bom` records whether
    one was present so it can be written back.

    Examples:
        doc = TextDocument("#pragma once\\n", path="foo.h")
        doc.line_count  # 2
        TextDocument("\\ufeff#pragma once\\n").bom  # True
    """

    def __init__(self, text: str = "", path: PurePath | str = "untitled.h"):
        self.path = PurePath(path)
        self.bom = text.startswith("\ufeff")
        self._set_text(text[1:] if self.bom else text)

    def _set_text(self, text: str) -> None:
        self._text = text
        self._line_starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

    @property
    def text(self) -> str:
        return self._text

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    @property
    def eol(self) -> str:
        """Line break used by the document, ``\\n`` when it has none."""
        if self.line_count > 1:
            first_break = self._line_starts[1] - 1
            if first_break > 0 and self._text[first_break - 1] == "\r":
                return "\r\n"
        return "\n"

    @property
    def lines(self) -> list[str]:
        return [self.line_at(index) for index in range(self.line_count)]

    def line_at(self, index: int) -> str:
        if not 0 <= index < self.line_count:
            raise IndexError(f"line {index} out of range (0..{self.line_count - 1})")
        start = self._line_starts[index]
        if index + 1 < self.line_count:
            end = self._line_starts[index + 1] - 1
            if end > start and self._text[end - 1] == "\r":
                end -= 1
        else:
            end = len(self._text)
        return self._text[start:end]

    def offset_at(self, position: Position) -> int:
        """Convert a position into a text offset, clamping out-of-range values.

        Lines past the end clamp to the end of the document; characters past the
        end of a line clamp to the end of that line.
        """
        if position.line < 0:
            return 0
        if position.line >= self.line_count:
            return len(self._text)
        line_text = self.line_at(position.line)
        character = min(max(position.character, 0), len(line_text))
        return self._line_starts[position.line] + character

    def position_at(self, offset: int) -> Position:
        offset = min(max(offset, 0), len(self._text))
        line = bisect_right(self._line_starts, offset) - 1
        return Position(line, offset - self._line_starts[line])

    def apply_edits(self, edits: Sequence[TextEdit]) -> None:
        """Commit a batch of edits as one transaction.

        All positions refer to the document before the batch. Edits are ordered
        by start offset; an insertion sorts ahead of a deletion starting at the
        same offset and insertions at the same offset keep their given order.

        Args:
            edits: Insertions and deletions making up the change.

        Raises:
            EditConflictError: If two edits overlap. The document is unchanged.
        """
        resolved = [
            (self.offset_at(edit.start), self.offset_at(edit.end), edit.new_text)
            for edit in edits
        ]
        for start, end, _ in resolved:
            if end < start:
                raise EditConflictError(f"Edit range is reversed ({start} > {end})")
        resolved.sort(key=lambda item: (item[0], item[1]))

        parts: list[str] = []
        cursor = 0
        for start, end, new_text in resolved:
            if start < cursor:
                raise EditConflictError(
                    f"Overlapping edits at {self.position_at(start)}; nothing was applied"
                )
            parts.append(self._text[cursor:start])
            parts.append(new_text)
            cursor = end
        parts.append(self._text[cursor:])

        self._set_text("".join(parts))
        logger.debug("Committed %d edit(s) to %s", len(resolved), self.path)
