"""
glosa — Comment-embedded source annotations.

Recognizes a small annotation syntax inside comments of any text document,
resolves the annotated column ranges (with optional remapping formulas and
clamping), groups them by color for rendering, and computes foldable
annotation blocks.

Quick Start:
    >>> from glosa import annotate
    >>> result = annotate("let x = 1;\\n# @annotate [4-5] the x\\nlet y = 2;")
    >>> decoration = result.batches["default0"][0]
    >>> decoration.range.start.character, decoration.range.end.character
    (4, 5)
    >>> decoration.hover_text
    'the x'

Syntax:
    # @annotate [4-5] note            default color rotation
    # @annotate [4-5] [#ff000040] note explicit color
    # @annotate-cfg [clamp=[0,80]] [rangeFn={start = start * 2; end = end * 2}]

Hosts:
    >>> from glosa import AnnotationSession, RecordingRenderer, StringDocument
    >>> session = AnnotationSession(lambda surface_id: RecordingRenderer())
    >>> session.on_active_surface_changed("a.py", StringDocument(source))

Installation:
    pip install glosa                 # zero runtime dependencies
"""

from glosa.colors import ColorAssigner, ColorGroupRegistry, DecorationStyle, style_for_color
from glosa.config import (
    AnnotationConfig,
    EngineConfig,
    engine_config_context,
    get_engine_config,
    reset_engine_config,
    set_engine_config,
)
from glosa.directives import apply_directive, scan_option_groups
from glosa.document import LineInfo, StringDocument, TextDocument
from glosa.engine import AnnotationEngine, PassResult
from glosa.errors import (
    ConfigDirectiveError,
    EmptySelectionError,
    ExpressionError,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
    GlosaError,
    InvalidOptionValueError,
    UnknownFieldError,
)
from glosa.expression import Expression, ExpressionContext, compile_expression
from glosa.folding import compute_folding_ranges
from glosa.lexer import ClassifiedLine, LineClassifier, LineKind
from glosa.location import Position, Range, Selection
from glosa.nodes import (
    Annotation,
    FoldingRange,
    FoldingRangeKind,
    MarkdownHover,
    ResolvedDecoration,
)
from glosa.parser import AnnotationParser, config_at
from glosa.profiling import PassAccumulator, get_pass_accumulator, profiled_pass
from glosa.renderers import DecorationRenderer, RecordingRenderer
from glosa.resolver import RangeResolver, Resolution
from glosa.scheduling import UpdateScheduler
from glosa.serialization import to_dict, to_json
from glosa.session import AnnotationSession
from glosa.snippet import InsertionRequest, build_annotation_snippet, inverse_map

__version__ = "0.1.0"


def annotate(
    source: str | TextDocument,
    *,
    engine_config: EngineConfig | None = None,
) -> PassResult:
    """Run one full pass over a document without a host.

    Args:
        source: Document text, or any TextDocument
        engine_config: Host settings (active EngineConfig when None)

    Returns:
        PassResult with decoration batches and folding ranges.

    Example:
        >>> result = annotate("abcdefgh\\n# @annotate-cfg [clamp=[0,5]]\\n# @annotate [3-10]")
        >>> [(d.range.start.character, d.range.end.character) for d in result.decorations]
        [(3, 5)]
    """
    document = StringDocument(source) if isinstance(source, str) else source
    engine = AnnotationEngine(document, RecordingRenderer(), engine_config=engine_config)
    try:
        return engine.update()
    finally:
        engine.dispose()


__all__ = [  # noqa: RUF022
    # Version
    "__version__",
    # Core API
    "annotate",
    "compute_folding_ranges",
    "config_at",
    "build_annotation_snippet",
    "inverse_map",
    # Engine and host integration
    "AnnotationEngine",
    "AnnotationSession",
    "PassResult",
    "UpdateScheduler",
    "InsertionRequest",
    # Documents and positions
    "TextDocument",
    "StringDocument",
    "LineInfo",
    "Position",
    "Range",
    "Selection",
    # Parsing components
    "LineClassifier",
    "LineKind",
    "ClassifiedLine",
    "AnnotationParser",
    "apply_directive",
    "scan_option_groups",
    "RangeResolver",
    "Resolution",
    # Expressions
    "Expression",
    "ExpressionContext",
    "compile_expression",
    # Colors and rendering
    "ColorAssigner",
    "ColorGroupRegistry",
    "DecorationStyle",
    "style_for_color",
    "DecorationRenderer",
    "RecordingRenderer",
    # Records
    "Annotation",
    "ResolvedDecoration",
    "MarkdownHover",
    "FoldingRange",
    "FoldingRangeKind",
    # Configuration (ContextVar-based)
    "AnnotationConfig",
    "EngineConfig",
    "get_engine_config",
    "set_engine_config",
    "reset_engine_config",
    "engine_config_context",
    # Profiling
    "PassAccumulator",
    "profiled_pass",
    "get_pass_accumulator",
    # Serialization
    "to_dict",
    "to_json",
    # Errors
    "GlosaError",
    "ExpressionError",
    "ExpressionSyntaxError",
    "ExpressionEvaluationError",
    "ConfigDirectiveError",
    "UnknownFieldError",
    "InvalidOptionValueError",
    "EmptySelectionError",
]
