"""Classification results produced by the line classifier.

Thread Safety:
ClassifiedLine is frozen (immutable) and safe to share.

"""

from __future__ import annotations

from dataclasses import dataclass

from glosa.lexer.modes import LineKind


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    """One classified line.

    Only the fields of the matching kind are meaningful.

    Attributes:
        kind: Line kind
        start: Raw start column (ANNOTATION)
        end: Raw end column (ANNOTATION)
        color: Explicit color token, "" when absent (ANNOTATION)
        text: Free-text hover note, "" when absent (ANNOTATION)
        options: Remainder of the line after the directive marker
            (CONFIG_DIRECTIVE)

    """

    kind: LineKind
    start: int = 0
    end: int = 0
    color: str = ""
    text: str = ""
    options: str = ""

    @property
    def is_anchor(self) -> bool:
        return self.kind is LineKind.ANCHOR

    def __repr__(self) -> str:
        if self.kind is LineKind.ANNOTATION:
            return (
                f"ClassifiedLine(ANNOTATION, [{self.start}-{self.end}], "
                f"color={self.color!r}, text={self.text!r})"
            )
        if self.kind is LineKind.CONFIG_DIRECTIVE:
            return f"ClassifiedLine(CONFIG_DIRECTIVE, {self.options!r})"
        return "ClassifiedLine(ANCHOR)"


# Shared instance; anchors carry no data
ANCHOR_LINE = ClassifiedLine(LineKind.ANCHOR)
