"""Line classification for glosa.

Turns document lines into ANNOTATION, CONFIG_DIRECTIVE or ANCHOR records for
the annotation parser and the folding range computer.
"""

from glosa.lexer.core import LineClassifier
from glosa.lexer.lines import ANCHOR_LINE, ClassifiedLine
from glosa.lexer.modes import ANNOTATION_MARKER, DIRECTIVE_MARKER, LineKind

__all__ = [
    "ANCHOR_LINE",
    "ANNOTATION_MARKER",
    "DIRECTIVE_MARKER",
    "ClassifiedLine",
    "LineClassifier",
    "LineKind",
]
