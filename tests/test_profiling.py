"""Tests for glosa.profiling — pass profiling API."""

from glosa import annotate
from glosa.document import StringDocument
from glosa.engine import AnnotationEngine
from glosa.profiling import (
    PassAccumulator,
    get_pass_accumulator,
    profiled_pass,
)
from glosa.renderers import RecordingRenderer

SOURCE = "code\n# @annotate [0-1]\n# @annotate [1-2]\nmore"


class TestGetPassAccumulator:
    def test_returns_none_when_disabled(self) -> None:
        assert get_pass_accumulator() is None

    def test_returns_none_outside_context(self) -> None:
        with profiled_pass():
            pass
        assert get_pass_accumulator() is None


class TestProfiledPass:
    def test_yields_accumulator(self) -> None:
        with profiled_pass() as acc:
            assert isinstance(acc, PassAccumulator)

    def test_accumulator_available_inside_context(self) -> None:
        with profiled_pass() as acc:
            assert get_pass_accumulator() is acc

    def test_records_pass(self) -> None:
        with profiled_pass() as acc:
            annotate(SOURCE)
        assert acc.passes == 1
        assert acc.lines_scanned == 4
        assert acc.decorations == 2
        assert acc.folding_ranges == 1

    def test_records_multiple_passes(self) -> None:
        engine = AnnotationEngine(StringDocument(SOURCE), RecordingRenderer())
        with profiled_pass() as acc:
            engine.update()
            engine.update()
            engine.update()
        assert acc.passes == 3
        assert acc.lines_scanned == 12

    def test_passes_outside_context_not_recorded(self) -> None:
        with profiled_pass() as acc:
            pass
        annotate(SOURCE)
        assert acc.passes == 0

    def test_total_duration_non_negative(self) -> None:
        with profiled_pass() as acc:
            annotate(SOURCE)
        assert acc.total_duration_ms >= 0


class TestSummary:
    def test_empty_summary(self) -> None:
        summary = PassAccumulator().summary()
        assert summary["passes"] == 0
        assert summary["lines_scanned"] == 0
        assert summary["decorations"] == 0
        assert summary["folding_ranges"] == 0

    def test_summary_after_pass(self) -> None:
        with profiled_pass() as acc:
            annotate(SOURCE)
        summary = acc.summary()
        assert summary["passes"] == 1
        assert summary["decorations"] == 2
        assert "total_ms" in summary
