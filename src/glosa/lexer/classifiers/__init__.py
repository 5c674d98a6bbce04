"""Line classifiers for the glosa lexer.

Each classifier is a mixin that recognizes one kind of comment line. They
are pure functions of the line text and never touch parser state.
"""

from glosa.lexer.classifiers.annotation import (
    AnnotationClassifierMixin,
)
from glosa.lexer.classifiers.directive import (
    DirectiveClassifierMixin,
)

__all__ = [
    "AnnotationClassifierMixin",
    "DirectiveClassifierMixin",
]
