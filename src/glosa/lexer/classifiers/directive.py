"""Config directive classifier mixin."""

from __future__ import annotations

from glosa.lexer.lines import ClassifiedLine
from glosa.lexer.modes import DIRECTIVE_MARKER, LineKind


class DirectiveClassifierMixin:
    """Mixin recognizing ``@annotate-cfg [key=value] ...`` lines.

    Only the marker is checked here. The option groups after it are parsed
    by glosa.directives.options when the parser applies the directive, so a
    line with malformed options is still a directive (and yields error
    annotations) rather than an anchor.

    """

    def _try_classify_directive(self, text: str) -> ClassifiedLine | None:
        """Try to classify a line as a config directive.

        Args:
            text: Full line text

        Returns:
            CONFIG_DIRECTIVE ClassifiedLine carrying the text after the
            marker, or None if the marker is absent.
        """
        idx = text.find(DIRECTIVE_MARKER)
        if idx == -1:
            return None
        return ClassifiedLine(
            LineKind.CONFIG_DIRECTIVE,
            options=text[idx + len(DIRECTIVE_MARKER) :],
        )
