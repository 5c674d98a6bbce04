"""Line kinds and marker constants for the line classifier."""

from __future__ import annotations

from enum import Enum, auto


class LineKind(Enum):
    """What a document line is to the annotation parser.

    - ANNOTATION: ``# @annotate [s-e] ...``
    - CONFIG_DIRECTIVE: ``# @annotate-cfg [key=value] ...``
    - ANCHOR: everything else, including blank lines

    """

    ANNOTATION = auto()
    CONFIG_DIRECTIVE = auto()
    ANCHOR = auto()


ANNOTATION_MARKER = "@annotate"
DIRECTIVE_MARKER = "@annotate-cfg"

# Characters allowed inside a [color] token
COLOR_TOKEN_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789#")
