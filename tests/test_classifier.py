"""Tests for the line classifier.

Validates the marker-character fast path, the annotation grammar, the
directive marker, and document iteration.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from glosa.config import EngineConfig, engine_config_context
from glosa.document import LineInfo, StringDocument
from glosa.lexer import ANCHOR_LINE, LineClassifier, LineKind


@pytest.fixture
def classifier() -> LineClassifier:
    return LineClassifier()


class TestAnnotationLines:
    """Test the ``@annotate [s-e] [color] text`` grammar."""

    def test_minimal(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate [4-5]")
        assert line.kind is LineKind.ANNOTATION
        assert (line.start, line.end) == (4, 5)
        assert line.color == ""
        assert line.text == ""

    def test_text_and_color(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("// @annotate [10-20] [#ff000040] the **callee**")
        assert (line.start, line.end) == (10, 20)
        assert line.color == "#ff000040"
        assert line.text == "the **callee**"

    def test_named_color(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate [1-2] [blue] note")
        assert line.color == "blue"
        assert line.text == "note"

    def test_whitespace_inside_range(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("#   @annotate   [ 4 - 15 ]")
        # Whitespace is allowed around '-', not after '['
        assert line.kind is LineKind.ANCHOR
        line = classifier.classify_text("#   @annotate   [4 -  15]")
        assert line.kind is LineKind.ANNOTATION
        assert (line.start, line.end) == (4, 15)

    def test_unicode_whitespace_separates_tokens(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate\u00a0[1 -\u20032]\u00a0note")
        assert line.kind is LineKind.ANNOTATION
        assert (line.start, line.end) == (1, 2)
        assert line.text == "note"

    def test_marker_need_not_be_first(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("* note: @annotate [2-3] here")
        assert line.kind is LineKind.ANNOTATION
        assert line.text == "here"

    def test_later_marker_is_tried(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate later: @annotate [0-1] x")
        assert line.kind is LineKind.ANNOTATION
        assert (line.start, line.end) == (0, 1)
        assert line.text == "x"

    def test_bracket_without_color_is_text(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate [1-2] [not a color] rest")
        assert line.color == ""
        assert line.text == "[not a color] rest"

    def test_empty_brackets_are_text(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate [1-2] [] rest")
        assert line.color == ""
        assert line.text == "[] rest"

    def test_start_may_exceed_end(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate [9-3]")
        assert line.kind is LineKind.ANNOTATION
        assert (line.start, line.end) == (9, 3)

    @pytest.mark.parametrize(
        "text",
        [
            "# @annotate",
            "# @annotate [4]",
            "# @annotate [a-b]",
            "# @annotate [4-5",
            "# @annotate [-5]",
            "# annotate [4-5]",
        ],
    )
    def test_malformed_is_anchor(self, classifier: LineClassifier, text: str) -> None:
        assert classifier.classify_text(text) is ANCHOR_LINE


class TestDirectiveLines:
    """Test ``@annotate-cfg`` recognition."""

    def test_directive_carries_options(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate-cfg [clamp=[0,5]]")
        assert line.kind is LineKind.CONFIG_DIRECTIVE
        assert line.options == " [clamp=[0,5]]"

    def test_directive_without_groups(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate-cfg")
        assert line.kind is LineKind.CONFIG_DIRECTIVE
        assert line.options == ""

    def test_annotation_wins_when_both_match(self, classifier: LineClassifier) -> None:
        line = classifier.classify_text("# @annotate [1-2] see @annotate-cfg")
        assert line.kind is LineKind.ANNOTATION


class TestMarkerCharacters:
    """Test the first-character fast path."""

    @pytest.mark.parametrize("prefix", ["#", "//", "/*", " * ", "\t#"])
    def test_default_markers(self, classifier: LineClassifier, prefix: str) -> None:
        assert classifier.classify_text(f"{prefix} @annotate [0-1]").kind is LineKind.ANNOTATION

    @pytest.mark.parametrize("prefix", ["--", ";", "x = 1 #", "'"])
    def test_other_leaders_are_anchors(self, classifier: LineClassifier, prefix: str) -> None:
        assert classifier.classify_text(f"{prefix} @annotate [0-1]") is ANCHOR_LINE

    def test_blank_lines_are_anchors(self, classifier: LineClassifier) -> None:
        assert classifier.classify_text("") is ANCHOR_LINE
        assert classifier.classify_text("    ") is ANCHOR_LINE

    def test_custom_markers(self) -> None:
        classifier = LineClassifier("-;")
        assert classifier.classify_text("-- @annotate [0-1]").kind is LineKind.ANNOTATION
        assert classifier.classify_text("# @annotate [0-1]") is ANCHOR_LINE

    def test_markers_from_engine_config(self) -> None:
        with engine_config_context(EngineConfig.from_dict({"marker_characters": "%"})):
            classifier = LineClassifier()
        assert classifier.marker_characters == frozenset("%")
        assert classifier.classify_text("% @annotate [0-1]").kind is LineKind.ANNOTATION


class TestIterDocument:
    """Test classifying a whole document."""

    def test_yields_every_line(self, classifier: LineClassifier) -> None:
        doc = StringDocument(["code", "# @annotate [0-1]", "# @annotate-cfg [clamp=[0,1]]"])
        kinds = [c.kind for _, c in classifier.iter_document(doc)]
        assert kinds == [LineKind.ANCHOR, LineKind.ANNOTATION, LineKind.CONFIG_DIRECTIVE]

    def test_range_is_capped(self, classifier: LineClassifier) -> None:
        doc = StringDocument(["a", "b", "c"])
        linenos = [line.lineno for line, _ in classifier.iter_document(doc, 1, 10)]
        assert linenos == [1, 2]

    def test_is_annotation_or_directive(self, classifier: LineClassifier) -> None:
        assert classifier.is_annotation_or_directive(LineInfo.from_text(0, "# @annotate-cfg"))
        assert not classifier.is_annotation_or_directive(LineInfo.from_text(0, "# comment"))


class TestClassifierProperties:
    """Property-based classification checks."""

    @given(st.text(max_size=200))
    @settings(max_examples=200)
    def test_never_raises(self, text: str) -> None:
        LineClassifier().classify_text(text)

    @given(st.text(alphabet=st.characters(exclude_characters="/#*"), max_size=80))
    @settings(max_examples=100)
    def test_unmarked_lines_are_anchors(self, text: str) -> None:
        assert LineClassifier().classify_text(text) is ANCHOR_LINE

    @given(
        st.integers(min_value=0, max_value=10**6),
        st.integers(min_value=0, max_value=10**6),
        st.text(alphabet="abc xyz.,!", max_size=30),
    )
    @settings(max_examples=50)
    def test_columns_round_trip(self, start: int, end: int, note: str) -> None:
        line = LineClassifier().classify_text(f"# @annotate [{start}-{end}] {note}")
        assert line.kind is LineKind.ANNOTATION
        assert (line.start, line.end) == (start, end)
        assert line.text == note.lstrip(" ")
