"""Range resolution: raw annotation columns to a positioned decoration.

Per annotation, given the directive state at flush time:

1. rangeFn remaps ``(start, end)``. A failing formula replaces the
   annotation with a red ``[0, 9999]`` error annotation and skips to step 4.
2. clamp bounds the result: ``start = max(start, low)``,
   ``end = min(end, high)``.
3. ``end <= start`` drops the annotation silently.
4. Columns are offset from the anchor line's start position.

Forced annotations (directive errors) skip steps 1-3.

Thread Safety:
RangeResolver holds only immutable settings. Safe to share.

"""

from __future__ import annotations

from dataclasses import dataclass

from glosa.config import AnnotationConfig, EngineConfig, get_engine_config
from glosa.document import LineInfo
from glosa.errors import ExpressionError
from glosa.location import Range
from glosa.nodes import Annotation, MarkdownHover, ResolvedDecoration
from glosa.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving one annotation.

    ``annotation`` is the possibly-replaced annotation (final columns, or the
    error annotation); ``range`` is None when the annotation was dropped.
    """

    annotation: Annotation
    range: Range | None

    @property
    def dropped(self) -> bool:
        return self.range is None


class RangeResolver:
    """Apply rangeFn and clamp to annotations and position them."""

    __slots__ = ("_settings",)

    def __init__(self, engine_config: EngineConfig | None = None) -> None:
        self._settings = engine_config or get_engine_config()

    def resolve(
        self, anchor: LineInfo, annotation: Annotation, config: AnnotationConfig
    ) -> Resolution:
        """Resolve one annotation against its anchor line.

        Args:
            anchor: Line the annotation describes
            annotation: Raw annotation
            config: Directive state snapshot from the flush

        Returns:
            Resolution; its range is None when the annotation is dropped.
        """
        if not annotation.forced:
            start, end = annotation.start, annotation.end

            if config.range_fn is not None:
                try:
                    start, end = config.range_fn.apply(start, end)
                except ExpressionError as e:
                    logger.debug("rangeFn failed for line %d: %s", annotation.lineno, e)
                    annotation = Annotation.error(
                        f"Error: {e}",
                        lineno=annotation.lineno,
                        color=self._settings.error_color,
                        end=self._settings.error_range_end,
                    )
                    return Resolution(annotation, self._position(anchor, annotation))

            if config.clamp is not None:
                low, high = config.clamp
                start = max(start, low)
                end = min(end, high)

            if end <= start:
                return Resolution(annotation.with_columns(start, end), None)

            annotation = annotation.with_columns(start, end)

        return Resolution(annotation, self._position(anchor, annotation))

    def _position(self, anchor: LineInfo, annotation: Annotation) -> Range:
        origin = anchor.line_start
        return Range(
            origin.translate(characters=annotation.start),
            origin.translate(characters=annotation.end),
        )


def make_decoration(resolution: Resolution, color: str) -> ResolvedDecoration:
    """Build the renderable decoration for a kept resolution."""
    if resolution.range is None:
        raise ValueError("Dropped annotations have no decoration")
    text = resolution.annotation.text
    hover = MarkdownHover(text) if text else None
    return ResolvedDecoration(resolution.range, color, hover)
