"""Line-indexed access to the host document.

The engine only needs three things per line: its text, the index of its
first non-whitespace character, and where the line starts. Hosts adapt
their own document type to the TextDocument protocol; StringDocument is the
in-memory implementation used by tests and by hosts that hand over plain
text.

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from glosa.location import Position


@dataclass(frozen=True, slots=True)
class LineInfo:
    """One line of the host document.

    Attributes:
        lineno: Line number (0-indexed)
        text: Line text without the line terminator
        first_non_whitespace_index: Index of the first non-whitespace
            character, or len(text) for blank lines
    """

    lineno: int
    text: str
    first_non_whitespace_index: int

    @property
    def line_start(self) -> Position:
        return Position(self.lineno, 0)

    @property
    def first_char(self) -> str:
        """First non-whitespace character, or "" for blank lines."""
        if self.first_non_whitespace_index >= len(self.text):
            return ""
        return self.text[self.first_non_whitespace_index]

    @property
    def is_blank(self) -> bool:
        return self.first_non_whitespace_index >= len(self.text)

    @classmethod
    def from_text(cls, lineno: int, text: str) -> LineInfo:
        stripped = text.lstrip()
        return cls(lineno, text, len(text) - len(stripped))


class TextDocument(Protocol):
    """Protocol for the host document a pass reads from."""

    @property
    def line_count(self) -> int:
        """Number of lines in the document."""
        ...

    def line_at(self, lineno: int) -> LineInfo:
        """Return line ``lineno`` (0-indexed)."""
        ...


class StringDocument:
    """TextDocument over an in-memory string.

    Lines are split like an editor splits them: a trailing newline yields
    a final empty line.

    Example:
        >>> doc = StringDocument("let x = 1;\\n# @annotate [4-5]\\n")
        >>> doc.line_count
        3
        >>> doc.line_at(1).first_char
        '#'
    """

    __slots__ = ("_lines",)

    def __init__(self, source: str | Sequence[str] = "") -> None:
        if isinstance(source, str):
            lines = source.replace("\r\n", "\n").split("\n")
        else:
            lines = list(source)
        self._lines: tuple[LineInfo, ...] = tuple(
            LineInfo.from_text(i, text) for i, text in enumerate(lines)
        )

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, lineno: int) -> LineInfo:
        return self._lines[lineno]

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self._lines)

    def insert_line(self, lineno: int, text: str) -> StringDocument:
        """Return a new document with ``text`` inserted before ``lineno``.

        ``text`` may end with a newline; it is not part of the line.
        """
        lines = [line.text for line in self._lines]
        lines.insert(lineno, text.rstrip("\n"))
        return StringDocument(lines)

    def __repr__(self) -> str:
        return f"StringDocument(lines={len(self._lines)})"
