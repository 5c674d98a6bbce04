"""Positions and ranges inside a host document.

Positions are 0-indexed ``(line, character)`` pairs, matching what editor
hosts report for selections and accept for decorations.

Thread Safety:
Position, Range and Selection are frozen (immutable) and safe to share.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A 0-indexed line/character position.

    Examples:
        >>> Position(3, 4).translate(characters=2)
        Position(line=3, character=6)
    """

    line: int
    character: int

    def translate(self, lines: int = 0, characters: int = 0) -> Position:
        """Return a position shifted by the given deltas."""
        return Position(self.line + lines, self.character + characters)

    def __str__(self) -> str:
        return f"{self.line}:{self.character}"


@dataclass(frozen=True, slots=True)
class Range:
    """A half-open character range between two positions.

    Attributes:
        start: First covered position
        end: Position just past the last covered character
    """

    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> Self:
        """Create a single-line range from column numbers."""
        return cls(Position(line, start), Position(line, end))

    @property
    def is_single_line(self) -> bool:
        return self.start.line == self.end.line

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True, slots=True)
class Selection(Range):
    """The user's current selection as reported by the host.

    Same shape as Range; kept separate so signatures say which one they mean.
    """
