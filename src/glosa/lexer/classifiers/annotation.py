"""Annotation line classifier mixin."""

from __future__ import annotations

from glosa.lexer.lines import ClassifiedLine
from glosa.lexer.modes import ANNOTATION_MARKER, COLOR_TOKEN_CHARS, LineKind


def _skip_whitespace(text: str, pos: int) -> int:
    length = len(text)
    while pos < length and text[pos].isspace():
        pos += 1
    return pos


def _scan_digits(text: str, pos: int) -> int:
    """Return the position after a run of ASCII digits starting at ``pos``."""
    length = len(text)
    while pos < length and "0" <= text[pos] <= "9":
        pos += 1
    return pos


class AnnotationClassifierMixin:
    """Mixin recognizing ``@annotate [start-end] [color] text`` lines.

    Grammar, after the marker:

        ws? '[' digits ws? '-' ws? digits ']' ws? ('[' color-token ']')? ws? text

    The marker may appear anywhere on the line; if the first occurrence does
    not continue with the grammar, later occurrences are tried.

    """

    def _try_classify_annotation(self, text: str) -> ClassifiedLine | None:
        """Try to classify a line as an annotation.

        Args:
            text: Full line text

        Returns:
            ANNOTATION ClassifiedLine if the grammar matches, None otherwise.
        """
        idx = text.find(ANNOTATION_MARKER)
        while idx != -1:
            result = self._match_annotation_at(text, idx + len(ANNOTATION_MARKER))
            if result is not None:
                return result
            idx = text.find(ANNOTATION_MARKER, idx + 1)
        return None

    def _match_annotation_at(self, text: str, pos: int) -> ClassifiedLine | None:
        length = len(text)

        pos = _skip_whitespace(text, pos)
        if pos >= length or text[pos] != "[":
            return None
        pos += 1

        digits_end = _scan_digits(text, pos)
        if digits_end == pos:
            return None
        start = int(text[pos:digits_end])
        pos = _skip_whitespace(text, digits_end)

        if pos >= length or text[pos] != "-":
            return None
        pos = _skip_whitespace(text, pos + 1)

        digits_end = _scan_digits(text, pos)
        if digits_end == pos:
            return None
        end = int(text[pos:digits_end])
        pos = digits_end

        if pos >= length or text[pos] != "]":
            return None
        pos = _skip_whitespace(text, pos + 1)

        color, pos = self._scan_color_token(text, pos)
        pos = _skip_whitespace(text, pos)

        return ClassifiedLine(
            LineKind.ANNOTATION,
            start=start,
            end=end,
            color=color,
            text=text[pos:],
        )

    def _scan_color_token(self, text: str, pos: int) -> tuple[str, int]:
        """Scan an optional ``[color]`` token.

        Returns:
            (color, position after the token), or ("", pos) unchanged when
            no well-formed color token starts at ``pos``.
        """
        length = len(text)
        if pos >= length or text[pos] != "[":
            return "", pos

        end = pos + 1
        while end < length and text[end] in COLOR_TOKEN_CHARS:
            end += 1

        if end == pos + 1 or end >= length or text[end] != "]":
            # Not a color token; the bracket is part of the free text
            return "", pos
        return text[pos + 1 : end], end + 1
