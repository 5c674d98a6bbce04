"""Tests for the annotation parser's anchor and flush semantics."""

from glosa.config import AnnotationConfig
from glosa.document import LineInfo, StringDocument
from glosa.nodes import Annotation
from glosa.parser import AnnotationParser, config_at


def _collect(lines: list[str]) -> list[tuple[int, list[Annotation], AnnotationConfig]]:
    flushes: list[tuple[int, list[Annotation], AnnotationConfig]] = []

    def on_flush(anchor: LineInfo, pending: list[Annotation], config: AnnotationConfig) -> None:
        flushes.append((anchor.lineno, pending, config))

    AnnotationParser(StringDocument(lines)).parse(on_flush=on_flush)
    return flushes


class TestAnchorFlush:
    """Test which anchor pending annotations attach to."""

    def test_annotation_attaches_to_line_above(self) -> None:
        flushes = _collect(["let x = 1;", "# @annotate [4-5]", "let y = 2;"])
        assert len(flushes) == 1
        anchor, pending, _ = flushes[0]
        assert anchor == 0
        assert [(a.start, a.end, a.lineno) for a in pending] == [(4, 5, 1)]

    def test_block_flushes_once(self) -> None:
        flushes = _collect(["code", "# @annotate [0-1] A", "# @annotate [2-3] B", "more"])
        assert len(flushes) == 1
        assert [a.text for a in flushes[0][1]] == ["A", "B"]

    def test_each_anchor_gets_its_own_batch(self) -> None:
        flushes = _collect(["a", "# @annotate [0-1]", "b", "# @annotate [0-1]", "c"])
        assert [anchor for anchor, _, _ in flushes] == [0, 2]

    def test_trailing_annotations_flush_at_end(self) -> None:
        flushes = _collect(["code", "# @annotate [0-4]"])
        assert [anchor for anchor, _, _ in flushes] == [0]

    def test_blank_line_is_an_anchor(self) -> None:
        flushes = _collect(["code", "", "# @annotate [0-1]"])
        assert flushes[0][0] == 1

    def test_annotations_above_first_anchor_are_dropped(self) -> None:
        flushes = _collect(["# @annotate [0-1]", "code", "# @annotate [2-3]"])
        assert len(flushes) == 1
        assert flushes[0][0] == 1
        assert [a.start for a in flushes[0][1]] == [2]

    def test_document_of_only_annotations(self) -> None:
        assert _collect(["# @annotate [0-1]", "# @annotate [0-1]"]) == []

    def test_directive_errors_above_first_anchor_attach_to_it(self) -> None:
        flushes = _collect(
            ["# @annotate-cfg [foo=1]", "# @annotate [0-1]", "let x = 1;", "let y = 2;"]
        )
        assert len(flushes) == 1
        anchor, pending, _ = flushes[0]
        assert anchor == 2
        assert [(a.text, a.forced, a.lineno) for a in pending] == [
            ("Unknown field: foo", True, 0)
        ]

    def test_directive_errors_without_any_anchor_are_dropped(self) -> None:
        assert _collect(["# @annotate-cfg [foo=1]"]) == []

    def test_anchor_without_annotations_does_not_flush(self) -> None:
        assert _collect(["a", "b", "c"]) == []

    def test_color_and_text_fields(self) -> None:
        flushes = _collect(["code", "# @annotate [0-1] [green] hello"])
        (annotation,) = flushes[0][1]
        assert annotation.color == "green"
        assert annotation.text == "hello"
        assert not annotation.forced

    def test_missing_color_and_text_are_none(self) -> None:
        flushes = _collect(["code", "# @annotate [0-1]"])
        (annotation,) = flushes[0][1]
        assert annotation.color is None
        assert annotation.text is None


class TestDirectiveState:
    """Test how directives thread through a pass."""

    def test_flush_sees_state_at_flush_time(self) -> None:
        flushes = _collect(
            [
                "code",
                "# @annotate [0-9]",
                "# @annotate-cfg [clamp=[1,3]]",
                "next",
            ]
        )
        # The directive precedes the flush, so it applies to the whole block
        assert flushes[0][2].clamp == (1, 3)

    def test_flush_config_is_a_snapshot(self) -> None:
        flushes = _collect(
            [
                "a",
                "# @annotate [0-9]",
                "b",
                "# @annotate-cfg [clamp=[1,3]]",
                "# @annotate [0-9]",
            ]
        )
        assert flushes[0][2].clamp is None
        assert flushes[1][2].clamp == (1, 3)

    def test_directive_errors_join_pending(self) -> None:
        flushes = _collect(["code", "# @annotate [0-1]", "# @annotate-cfg [foo=1]", "next"])
        pending = flushes[0][1]
        assert [a.forced for a in pending] == [False, True]
        assert pending[1].text == "Unknown field: foo"
        assert pending[1].lineno == 2

    def test_state_persists_across_anchors(self) -> None:
        parser = AnnotationParser(
            StringDocument(["# @annotate-cfg [clamp=[0,5]]", "a", "b", "c"])
        )
        config = parser.parse()
        assert config.clamp == (0, 5)
        assert parser.lines_scanned == 4
        assert parser.config is config

    def test_preseeded_config(self) -> None:
        seed = AnnotationConfig(clamp=(2, 4))
        config = AnnotationParser(StringDocument(["a"]), seed).parse()
        assert config is seed
        assert config.clamp == (2, 4)


class TestConfigAt:
    """Test computing the directive state for a line."""

    def test_only_lines_above_count(self) -> None:
        doc = StringDocument(
            [
                "# @annotate-cfg [clamp=[0,5]]",
                "code",
                "# @annotate-cfg [clamp=[1,2]]",
                "code",
            ]
        )
        assert config_at(doc, 0).clamp is None
        assert config_at(doc, 1).clamp == (0, 5)
        assert config_at(doc, 2).clamp == (0, 5)
        assert config_at(doc, 3).clamp == (1, 2)

    def test_line_beyond_document(self) -> None:
        doc = StringDocument(["# @annotate-cfg [clamp=[0,5]]"])
        assert config_at(doc, 50).clamp == (0, 5)

    def test_partial_range_parse(self) -> None:
        doc = StringDocument(["a", "# @annotate [0-1]", "b", "# @annotate-cfg [clamp=[3,4]]"])
        parser = AnnotationParser(doc)
        parser.parse(1, 3)
        assert parser.lines_scanned == 2
        assert parser.config.clamp is None


class TestLogging:
    """Test debug records emitted by a pass."""

    def test_orphans_are_logged(self, caplog) -> None:
        import logging

        with caplog.at_level(logging.DEBUG, logger="glosa"):
            _collect(["# @annotate [0-1]", "code"])
        assert any("above the first anchor" in r.getMessage() for r in caplog.records)
        assert all(r.name.startswith("glosa.") for r in caplog.records)
