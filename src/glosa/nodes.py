"""Data records flowing through an annotation pass.

Annotation (raw, from a comment line)
  -> ResolvedDecoration (positioned, colored, ready to render)
FoldingRange (independent, from line classification)

Thread Safety:
All records are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass, replace
from enum import Enum

from glosa.location import Range


@dataclass(frozen=True, slots=True)
class Annotation:
    """One highlighted range on an anchor line, as written in the source.

    Attributes:
        start: Raw start column (before rangeFn and clamp)
        end: Raw end column
        color: Explicit color token, or None for the default rotation
        text: Markdown hover note, or None
        lineno: Line the annotation (or offending directive) was read from
        forced: Error annotation; its range is authoritative and is never
            remapped, clamped or dropped

    """

    start: int
    end: int
    color: str | None = None
    text: str | None = None
    lineno: int = -1
    forced: bool = False

    @classmethod
    def error(cls, message: str, *, lineno: int = -1, color: str = "red", end: int = 9999) -> "Annotation":
        """Build the full-line red annotation used to surface an error."""
        return cls(0, end, color, message, lineno, forced=True)

    def with_columns(self, start: int, end: int) -> "Annotation":
        return replace(self, start=start, end=end)


@dataclass(frozen=True, slots=True)
class MarkdownHover:
    """Hover content attached to a decoration.

    Annotation text is authored by the document owner, so it is rendered as
    trusted markdown with theme icons enabled.
    """

    value: str
    is_trusted: bool = True
    support_theme_icons: bool = True


@dataclass(frozen=True, slots=True)
class ResolvedDecoration:
    """A final, clamped, positioned range ready for rendering.

    Attributes:
        range: Single-line range on the anchor line
        color: Color key the decoration is grouped under
        hover: Hover content, or None when the annotation had no text

    """

    range: Range
    color: str
    hover: MarkdownHover | None = None

    @property
    def hover_text(self) -> str | None:
        return self.hover.value if self.hover is not None else None


class FoldingRangeKind(Enum):
    COMMENT = "comment"


@dataclass(frozen=True, slots=True)
class FoldingRange:
    """Inclusive line range the host may collapse.

    Attributes:
        start: First line (the anchor above the annotation block)
        end: Last line of the annotation block
        kind: Always COMMENT for annotation blocks

    """

    start: int
    end: int
    kind: FoldingRangeKind = FoldingRangeKind.COMMENT
