"""AnnotationEngine — one per open document surface.

Ties the pieces together for a full pass:

    parser (line classifier + directive state)
      -> resolver (rangeFn, clamp, drop empty)
      -> color assigner (explicit or default rotation, per anchor)
      -> color registry (per-color batches, lazy resources)
      -> renderer
    folding ranges (independent scan)

Every pass is a total recompute from line 0; nothing is carried between
passes except the color registry's render resources.

Thread Safety:
Not thread-safe. Passes for one surface must not interleave; the session's
scheduler guarantees that.

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from itertools import chain

from glosa.colors import ColorAssigner, ColorGroupRegistry
from glosa.config import AnnotationConfig, EngineConfig, get_engine_config
from glosa.document import LineInfo, TextDocument
from glosa.folding import compute_folding_ranges
from glosa.lexer import LineClassifier
from glosa.location import Selection
from glosa.nodes import Annotation, FoldingRange, ResolvedDecoration
from glosa.parser import AnnotationParser, config_at
from glosa.profiling import get_pass_accumulator
from glosa.renderers.protocol import DecorationRenderer
from glosa.resolver import RangeResolver
from glosa.snippet import InsertionRequest, build_annotation_snippet
from glosa.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PassResult:
    """What one full pass produced.

    Attributes:
        batches: Non-empty decoration batches keyed by color
        folding_ranges: Foldable annotation blocks
        config: Directive state after the last line
        lines_scanned: Lines read by the annotation parser

    """

    batches: Mapping[str, tuple[ResolvedDecoration, ...]]
    folding_ranges: tuple[FoldingRange, ...]
    config: AnnotationConfig = field(default_factory=AnnotationConfig)
    lines_scanned: int = 0

    @property
    def decorations(self) -> tuple[ResolvedDecoration, ...]:
        """All decorations, sorted by position."""
        return tuple(
            sorted(
                chain.from_iterable(self.batches.values()),
                key=lambda d: (d.range.start, d.range.end, d.color),
            )
        )


class AnnotationEngine:
    """Annotation engine for one document surface.

    Usage:
        >>> renderer = RecordingRenderer()
        >>> engine = AnnotationEngine(StringDocument(source), renderer)
        >>> result = engine.update()
        >>> result.batches["default0"]
        (ResolvedDecoration(range=..., color='default0', hover=None),)
        >>> engine.dispose()

    """

    __slots__ = (
        "_document",
        "_renderer",
        "_registry",
        "_settings",
        "_classifier",
        "_resolver",
        "_assigner",
        "_disposed",
    )

    def __init__(
        self,
        document: TextDocument,
        renderer: DecorationRenderer,
        *,
        registry: ColorGroupRegistry | None = None,
        engine_config: EngineConfig | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            document: Document shown on this surface
            renderer: Host rendering surface
            registry: Color registry owned by this surface; a new one over
                ``renderer`` when None
            engine_config: Host settings; snapshot of the active
                EngineConfig when None
        """
        self._settings = engine_config or get_engine_config()
        self._document = document
        self._renderer = renderer
        self._registry = registry if registry is not None else ColorGroupRegistry(renderer)
        self._classifier = LineClassifier(self._settings.marker_characters)
        self._resolver = RangeResolver(self._settings)
        self._assigner = ColorAssigner(self._settings.default_color_count)
        self._disposed = False

    @property
    def document(self) -> TextDocument:
        return self._document

    @document.setter
    def document(self, document: TextDocument) -> None:
        self._document = document

    @property
    def registry(self) -> ColorGroupRegistry:
        return self._registry

    @property
    def settings(self) -> EngineConfig:
        return self._settings

    @property
    def disposed(self) -> bool:
        return self._disposed

    def update(self) -> PassResult:
        """Run a full pass and render its decorations.

        Returns:
            PassResult with the rendered batches and folding ranges.
        """
        self._check_alive()

        parser = AnnotationParser(
            self._document,
            classifier=self._classifier,
            engine_config=self._settings,
        )
        config = parser.parse(on_flush=self._on_flush)
        batches = self._registry.commit()
        folds = tuple(compute_folding_ranges(self._document, self._classifier))

        decoration_count = sum(len(batch) for batch in batches.values())
        logger.debug(
            "Pass over %d line(s): %d decoration(s) in %d color(s), %d fold(s)",
            parser.lines_scanned,
            decoration_count,
            len(batches),
            len(folds),
        )
        acc = get_pass_accumulator()
        if acc is not None:
            acc.record_pass(parser.lines_scanned, decoration_count, len(folds))

        return PassResult(batches, folds, config, parser.lines_scanned)

    def folding_ranges(self) -> list[FoldingRange]:
        return compute_folding_ranges(self._document, self._classifier)

    def config_at(self, line: int) -> AnnotationConfig:
        """Directive state in effect at ``line``."""
        return config_at(
            self._document, line, classifier=self._classifier, engine_config=self._settings
        )

    def annotate_selection(self, selection: Selection) -> InsertionRequest:
        """Build the annotation line for the current selection.

        Raises:
            EmptySelectionError: Nothing is selected.
        """
        self._check_alive()
        return build_annotation_snippet(
            self._document,
            selection,
            classifier=self._classifier,
            engine_config=self._settings,
        )

    def dispose(self) -> None:
        """Clear this surface's decorations and release its resources."""
        if self._disposed:
            return
        self._registry.dispose()
        self._disposed = True

    def _on_flush(
        self, anchor: LineInfo, annotations: list[Annotation], config: AnnotationConfig
    ) -> None:
        resolutions = [self._resolver.resolve(anchor, a, config) for a in annotations]
        self._registry.extend(self._assigner.assign(resolutions))

    def _check_alive(self) -> None:
        if self._disposed:
            raise RuntimeError("AnnotationEngine has been disposed")
