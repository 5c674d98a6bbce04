"""Building the line inserted by the "add annotation" action.

The user selects text; the host asks for a ready-to-insert annotation line.
Two things make this more than string formatting:

- With a rangeFn active, the written columns are *raw* columns that the
  formula maps onto the line. The selection has to be mapped backwards,
  and formulas have no closed-form inverse, so raw candidates are searched
  in increasing order until the mapped range first covers the selection.
  The search is bounded by the selection's own extent; formulas that move
  columns further than that fall back to the raw selection columns.
- The new line goes below any annotation lines already attached to the
  selected line, so existing annotations keep their default colors.

"""

from __future__ import annotations

from dataclasses import dataclass

from glosa.config import EngineConfig, get_engine_config
from glosa.document import TextDocument
from glosa.errors import EmptySelectionError, ExpressionError
from glosa.expression import Expression
from glosa.lexer import ANNOTATION_MARKER, LineClassifier, LineKind
from glosa.location import Position, Selection
from glosa.parser import config_at
from glosa.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class InsertionRequest:
    """One line for the host to insert.

    Attributes:
        line: Insert before this line (column 0)
        text: Line text including its trailing newline
        cursor_offset: Where to place the cursor inside ``text``

    """

    line: int
    text: str
    cursor_offset: int

    @property
    def position(self) -> Position:
        return Position(self.line, 0)

    @property
    def cursor(self) -> Position:
        return Position(self.line, self.cursor_offset)


def inverse_map(
    range_fn: Expression,
    selection_start: int,
    selection_end: int,
    *,
    slack: int = 0,
) -> tuple[int, int]:
    """Find raw columns whose mapped range covers ``[start, end)``.

    The raw start is the largest candidate whose mapped start does not pass
    the selection start; the raw end is then the smallest candidate for
    which the mapped pair covers the selection on both sides. Formulas may
    tie the mapped start to the end.

    Args:
        range_fn: Active formula
        selection_start: Selected start column
        selection_end: Selected end column
        slack: Extra candidates to search beyond the default bound

    Returns:
        Raw ``(start, end)``; the selection itself when no candidate fits
        or the formula fails.
    """
    length = selection_end - selection_start
    limit = selection_end + length + slack
    fallback = (selection_start, selection_end)

    try:
        raw_start: int | None = None
        for candidate in range(limit + 1):
            mapped_start, _ = range_fn.apply(candidate, candidate + length)
            if mapped_start > selection_start:
                break
            raw_start = candidate
        if raw_start is None:
            return fallback

        for candidate in range(raw_start + 1, limit + length + 1):
            mapped_start, mapped_end = range_fn.apply(raw_start, candidate)
            if mapped_start <= selection_start and mapped_end >= selection_end:
                return raw_start, candidate
    except ExpressionError as e:
        logger.debug("rangeFn failed during inverse search: %s", e)
        return fallback

    logger.debug(
        "No raw range maps onto [%d-%d] within %d columns", selection_start, selection_end, limit
    )
    return fallback


def find_insertion_line(
    document: TextDocument, selection_line: int, classifier: LineClassifier
) -> int:
    """First line below ``selection_line`` that is not an annotation or directive."""
    line = selection_line + 1
    while line < document.line_count:
        if classifier.classify(document.line_at(line)).kind is LineKind.ANCHOR:
            break
        line += 1
    return min(line, document.line_count)


def build_annotation_snippet(
    document: TextDocument,
    selection: Selection,
    *,
    classifier: LineClassifier | None = None,
    engine_config: EngineConfig | None = None,
) -> InsertionRequest:
    """Build the annotation line for a selection.

    Multi-line selections are truncated to the end of their first line.

    Args:
        document: Host document
        selection: Current selection
        classifier: Line classifier (built from engine_config when None)
        engine_config: Host settings (active EngineConfig when None)

    Returns:
        InsertionRequest for the host.

    Raises:
        EmptySelectionError: Nothing is selected on the first line.
    """
    settings = engine_config or get_engine_config()
    classifier = classifier or LineClassifier(settings.marker_characters)

    line = selection.start.line
    start = selection.start.character
    end = selection.end.character
    if selection.end.line != line:
        end = len(document.line_at(line).text)
    if end <= start:
        raise EmptySelectionError()

    insert_at = find_insertion_line(document, line, classifier)
    state = config_at(document, insert_at, classifier=classifier, engine_config=settings)
    if state.range_fn is not None:
        start, end = inverse_map(
            state.range_fn, start, end, slack=settings.inverse_search_slack
        )

    body = f"{settings.comment_prefix} {ANNOTATION_MARKER} [{start}-{end}] "
    return InsertionRequest(insert_at, body + "\n", len(body))
