"""Single forward pass over document lines, collecting annotations per anchor.

Annotation comments sit *below* the line they describe:

    let x = compute(y);          <- anchor
    # @annotate [4-5] the x      <- pending
    # @annotate [16-17] the y    <- pending
    let z = 2;                   <- next anchor: flush pending against line 0

When an anchor is reached, everything pending is flushed against the
*previous* anchor. Pending annotations left at the end of the range are
flushed against the last anchor seen. Annotations above the first anchor
have nothing to describe and are dropped, except directive errors, which
attach to the first anchor so a bad directive at the top of a file is
still shown.

Directive lines mutate the pass's AnnotationConfig as they are read; their
errors join the pending list so they render like any other annotation.

Thread Safety:
Parser instances are single-use and not thread-safe. Create one per pass.

"""

from __future__ import annotations

from collections.abc import Callable

from glosa.config import AnnotationConfig, EngineConfig, get_engine_config
from glosa.directives.options import apply_directive
from glosa.document import LineInfo, TextDocument
from glosa.lexer import LineClassifier, LineKind
from glosa.nodes import Annotation
from glosa.utils.logger import get_logger

logger = get_logger(__name__)

# (anchor line, pending annotations, config snapshot)
FlushCallback = Callable[[LineInfo, list[Annotation], AnnotationConfig], None]


class AnnotationParser:
    """Forward pass over a half-open line range.

    Usage:
        >>> doc = StringDocument(["let x = 1;", "# @annotate [4-5]", "let y = 2;"])
        >>> batches = []
        >>> AnnotationParser(doc).parse(on_flush=lambda a, p, c: batches.append((a.lineno, p)))
        >>> batches[0][0]
        0

    """

    __slots__ = (
        "_document",
        "_config",
        "_classifier",
        "_settings",
        "_pending",
        "_last_anchor",
        "_lines_scanned",
    )

    def __init__(
        self,
        document: TextDocument,
        config: AnnotationConfig | None = None,
        *,
        classifier: LineClassifier | None = None,
        engine_config: EngineConfig | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            document: Host document to read
            config: Directive state to mutate; may be pre-seeded. A fresh
                AnnotationConfig is used when None.
            classifier: Line classifier (built from engine_config when None)
            engine_config: Host settings (active EngineConfig when None)
        """
        self._settings = engine_config or get_engine_config()
        self._document = document
        self._config = config if config is not None else AnnotationConfig()
        self._classifier = classifier or LineClassifier(self._settings.marker_characters)
        self._pending: list[Annotation] = []
        self._last_anchor: LineInfo | None = None
        self._lines_scanned = 0

    @property
    def config(self) -> AnnotationConfig:
        """Directive state as of the last line parsed."""
        return self._config

    @property
    def lines_scanned(self) -> int:
        return self._lines_scanned

    def parse(
        self,
        start_line: int = 0,
        end_line: int | None = None,
        on_flush: FlushCallback | None = None,
    ) -> AnnotationConfig:
        """Parse lines ``[start_line, end_line)``.

        Args:
            start_line: First line to read
            end_line: Line to stop before (document end when None)
            on_flush: Called once per anchor with its annotations. None makes
                this a config-only pass.

        Returns:
            The AnnotationConfig after the last line.
        """
        for line, classified in self._classifier.iter_document(
            self._document, start_line, end_line
        ):
            self._lines_scanned += 1

            if classified.kind is LineKind.ANNOTATION:
                self._pending.append(
                    Annotation(
                        classified.start,
                        classified.end,
                        classified.color or None,
                        classified.text or None,
                        line.lineno,
                    )
                )
            elif classified.kind is LineKind.CONFIG_DIRECTIVE:
                self._pending.extend(
                    apply_directive(
                        classified.options,
                        self._config,
                        lineno=line.lineno,
                        engine_config=self._settings,
                    )
                )
            else:
                self._on_anchor(line, on_flush)

        if self._pending and self._last_anchor is not None:
            self._flush(self._last_anchor, on_flush)
        elif self._pending:
            self._drop_orphans(keep_errors=False)

        return self._config

    def _on_anchor(self, line: LineInfo, on_flush: FlushCallback | None) -> None:
        if self._pending:
            if self._last_anchor is not None:
                self._flush(self._last_anchor, on_flush)
            else:
                self._drop_orphans(keep_errors=True)
        self._last_anchor = line

    def _flush(self, anchor: LineInfo, on_flush: FlushCallback | None) -> None:
        pending = self._pending
        self._pending = []
        if on_flush is not None:
            on_flush(anchor, pending, self._config.snapshot())

    def _drop_orphans(self, *, keep_errors: bool) -> None:
        # Nothing above these annotations to attach them to
        kept = [a for a in self._pending if a.forced] if keep_errors else []
        dropped = len(self._pending) - len(kept)
        if dropped:
            logger.debug(
                "Dropping %d annotation(s) above the first anchor (line %d)",
                dropped,
                self._pending[0].lineno,
            )
        self._pending = kept


def config_at(
    document: TextDocument,
    line: int,
    *,
    classifier: LineClassifier | None = None,
    engine_config: EngineConfig | None = None,
) -> AnnotationConfig:
    """Directive state in effect at ``line``.

    Parses ``[0, line)`` without emitting decorations.

    Args:
        document: Host document
        line: Line to compute the state for (exclusive)

    Returns:
        Fresh AnnotationConfig built from every directive above ``line``.
    """
    parser = AnnotationParser(document, classifier=classifier, engine_config=engine_config)
    return parser.parse(0, line)
