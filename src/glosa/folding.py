"""Folding ranges over annotation blocks.

Each maximal run of annotation/directive lines becomes one foldable region
that also includes the anchor line just above it, so collapsing the region
leaves the annotated code visible with its annotations tucked away:

    0  let x = 1;            -+ fold [0, 2]
    1  # @annotate [4-5] A    |
    2  # @annotate [8-9] B   -+
    3  let y = 2;

Independent of the annotation parser; runs over the same classification.
"""

from __future__ import annotations

from glosa.document import TextDocument
from glosa.lexer import LineClassifier, LineKind
from glosa.nodes import FoldingRange, FoldingRangeKind


def compute_folding_ranges(
    document: TextDocument,
    classifier: LineClassifier | None = None,
) -> list[FoldingRange]:
    """Compute one COMMENT fold per run of annotation/directive lines.

    Args:
        document: Host document
        classifier: Line classifier (active EngineConfig markers when None)

    Returns:
        Disjoint folding ranges in document order.
    """
    classifier = classifier or LineClassifier()
    ranges: list[FoldingRange] = []
    region_start: int | None = None

    for line, classified in classifier.iter_document(document):
        if classified.kind is not LineKind.ANCHOR:
            if region_start is None:
                region_start = max(0, line.lineno - 1)
        elif region_start is not None:
            ranges.append(FoldingRange(region_start, line.lineno - 1, FoldingRangeKind.COMMENT))
            region_start = None

    if region_start is not None:
        ranges.append(
            FoldingRange(region_start, document.line_count - 1, FoldingRangeKind.COMMENT)
        )

    return ranges
