"""Line classifier: decides what each document line is to the parser.

Classification is two-stage:
1. Cheap filter: the first non-whitespace character must be a marker
   character (``/``, ``#`` or ``*`` by default). Any other line is an anchor
   and is never scanned further, which keeps large documents responsive.
2. Grammar scan: annotation grammar first, then the directive marker.

No regex in the hot path.

Thread Safety:
LineClassifier holds only an immutable marker set. Safe to share.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from glosa.config import get_engine_config
from glosa.document import LineInfo, TextDocument
from glosa.lexer.classifiers import (
    AnnotationClassifierMixin,
    DirectiveClassifierMixin,
)
from glosa.lexer.lines import ANCHOR_LINE, ClassifiedLine
from glosa.lexer.modes import LineKind


class LineClassifier(
    AnnotationClassifierMixin,
    DirectiveClassifierMixin,
):
    """Classify lines as annotation, config directive or anchor.

    Usage:
        >>> classifier = LineClassifier()
        >>> classifier.classify_text("# @annotate [4-5] note").kind
        <LineKind.ANNOTATION: 1>
        >>> classifier.classify_text("let x = 1;").kind
        <LineKind.ANCHOR: 3>

    """

    __slots__ = ("_markers",)

    def __init__(self, marker_characters: Iterable[str] | None = None) -> None:
        """Initialize classifier.

        Args:
            marker_characters: Leading characters that make a line eligible
                for matching. Defaults to the active EngineConfig's set.
        """
        if marker_characters is None:
            marker_characters = get_engine_config().marker_characters
        self._markers = frozenset(marker_characters)

    @property
    def marker_characters(self) -> frozenset[str]:
        return self._markers

    def classify(self, line: LineInfo) -> ClassifiedLine:
        """Classify a document line.

        Args:
            line: Line from the host document

        Returns:
            ClassifiedLine; ANCHOR_LINE for anything that is not an
            annotation or directive.
        """
        if line.first_char not in self._markers:
            return ANCHOR_LINE
        return self._classify_eligible(line.text)

    def classify_text(self, text: str) -> ClassifiedLine:
        """Classify a bare line of text (convenience for tests and tools)."""
        return self.classify(LineInfo.from_text(0, text))

    def is_annotation_or_directive(self, line: LineInfo) -> bool:
        return self.classify(line).kind is not LineKind.ANCHOR

    def iter_document(
        self, document: TextDocument, start_line: int = 0, end_line: int | None = None
    ) -> Iterator[tuple[LineInfo, ClassifiedLine]]:
        """Classify lines ``[start_line, end_line)`` of a document in order.

        ``end_line`` defaults to the document's line count and is capped at it.
        """
        line_count = document.line_count
        stop = line_count if end_line is None else min(end_line, line_count)
        for lineno in range(max(0, start_line), stop):
            line = document.line_at(lineno)
            yield line, self.classify(line)

    def _classify_eligible(self, text: str) -> ClassifiedLine:
        annotation = self._try_classify_annotation(text)
        if annotation is not None:
            return annotation
        directive = self._try_classify_directive(text)
        if directive is not None:
            return directive
        return ANCHOR_LINE
