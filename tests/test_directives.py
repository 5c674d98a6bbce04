"""Tests for ``@annotate-cfg`` option parsing and application."""

import pytest

from glosa.config import AnnotationConfig, EngineConfig
from glosa.directives import (
    OptionGroup,
    apply_directive,
    apply_option,
    parse_clamp,
    scan_option_groups,
)
from glosa.errors import InvalidOptionValueError, UnknownFieldError
from glosa.expression import compile_expression


# =============================================================================
# Option group scanning
# =============================================================================


class TestScanOptionGroups:
    """Test splitting directive text into ``[key=value]`` groups."""

    def test_plain_value(self) -> None:
        (group,) = scan_option_groups(" [foo=1]")
        assert group == OptionGroup("foo", "1", 1)

    def test_bracketed_value(self) -> None:
        (group,) = scan_option_groups("[clamp=[0,80]]")
        assert group.key == "clamp"
        assert group.value == "[0,80]"
        assert group.terminated

    def test_braced_value_keeps_inner_brackets(self) -> None:
        (group,) = scan_option_groups("[rangeFn={start = min(start, 2); end = end}]")
        assert group.value == "{start = min(start, 2); end = end}"

    def test_multiple_groups_in_order(self) -> None:
        groups = list(scan_option_groups(" [clamp=[1-4]] and [rangeFn={start = 1}] [x=y]"))
        assert [g.key for g in groups] == ["clamp", "rangeFn", "x"]

    def test_whitespace_around_key_and_value(self) -> None:
        (group,) = scan_option_groups("[ clamp = [0,5] ]")
        assert group.key == "clamp"
        assert group.value == "[0,5]"

    def test_brackets_without_equals_are_skipped(self) -> None:
        groups = list(scan_option_groups("[note] [clamp=[0,1]]"))
        assert [g.key for g in groups] == ["clamp"]

    def test_unterminated_brace(self) -> None:
        (group,) = scan_option_groups("[rangeFn={start = 1")
        assert group.key == "rangeFn"
        assert not group.terminated

    def test_unterminated_plain_value(self) -> None:
        (group,) = scan_option_groups("[foo=bar")
        assert group == OptionGroup("foo", "bar", 0, terminated=False)

    def test_no_groups(self) -> None:
        assert list(scan_option_groups("")) == []
        assert list(scan_option_groups("just words")) == []


# =============================================================================
# Value parsing
# =============================================================================


class TestParseClamp:
    """Test clamp value grammar."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("[0,80]", (0, 80)),
            ("[3-5]", (3, 5)),
            ("[ 2 , 9 ]", (2, 9)),
            ("[10,1]", (10, 1)),
        ],
    )
    def test_valid(self, value: str, expected: tuple[int, int]) -> None:
        assert parse_clamp(value) == expected

    @pytest.mark.parametrize("value", ["5", "[5]", "[a,b]", "[-1,3]", "(0,5)", "[1,2,3]", "[²,3]"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidOptionValueError) as exc_info:
            parse_clamp(value)
        assert str(exc_info.value) == f"Invalid clamp value: {value}"


class TestApplyOption:
    """Test applying a single group."""

    def test_unknown_key(self) -> None:
        with pytest.raises(UnknownFieldError) as exc_info:
            apply_option(OptionGroup("foo", "1", 0), AnnotationConfig())
        assert str(exc_info.value) == "Unknown field: foo"
        assert exc_info.value.key == "foo"

    def test_range_fn_requires_braces(self) -> None:
        with pytest.raises(InvalidOptionValueError, match="wrapped in braces"):
            apply_option(OptionGroup("rangeFn", "start = 1", 0), AnnotationConfig())

    def test_unterminated_known_key(self) -> None:
        group = OptionGroup("clamp", "[0,5", 0, terminated=False)
        with pytest.raises(InvalidOptionValueError, match="Unterminated value for clamp"):
            apply_option(group, AnnotationConfig())

    def test_keys_are_case_sensitive(self) -> None:
        with pytest.raises(UnknownFieldError):
            apply_option(OptionGroup("rangefn", "{start = 1}", 0), AnnotationConfig())


# =============================================================================
# Whole directives
# =============================================================================


class TestApplyDirective:
    """Test applying a directive line to the config state."""

    def test_sets_clamp(self) -> None:
        config = AnnotationConfig()
        assert apply_directive(" [clamp=[0,5]]", config) == []
        assert config.clamp == (0, 5)

    def test_sets_range_fn(self) -> None:
        config = AnnotationConfig()
        assert apply_directive(" [rangeFn={start = start * 2}]", config) == []
        assert config.range_fn == compile_expression("start = start * 2")

    def test_later_directive_overwrites_named_fields_only(self) -> None:
        config = AnnotationConfig()
        apply_directive("[clamp=[0,5]] [rangeFn={start = 1}]", config)
        apply_directive("[clamp=[1,2]]", config)
        assert config.clamp == (1, 2)
        assert config.range_fn == compile_expression("start = 1")

    def test_unknown_field_becomes_error_annotation(self) -> None:
        (error,) = apply_directive("[foo=1]", AnnotationConfig(), lineno=7)
        assert error.text == "Unknown field: foo"
        assert error.color == "red"
        assert (error.start, error.end) == (0, 9999)
        assert error.lineno == 7
        assert error.forced

    def test_compile_error_keeps_previous_range_fn(self) -> None:
        config = AnnotationConfig(range_fn=compile_expression("start = 1"))
        (error,) = apply_directive("[rangeFn={start = }]", config)
        assert error.text == (
            "Error: Expected a number, variable or '(', found end of formula at column 9"
        )
        assert config.range_fn == compile_expression("start = 1")

    def test_invalid_clamp_keeps_previous_clamp(self) -> None:
        config = AnnotationConfig(clamp=(0, 5))
        (error,) = apply_directive("[clamp=[x,y]]", config)
        assert error.text == "Error: Invalid clamp value: [x,y]"
        assert config.clamp == (0, 5)

    def test_bad_group_does_not_block_siblings(self) -> None:
        config = AnnotationConfig()
        errors = apply_directive("[foo=1] [clamp=[2,8]] [bar=2]", config)
        assert [e.text for e in errors] == ["Unknown field: foo", "Unknown field: bar"]
        assert config.clamp == (2, 8)

    def test_error_style_from_engine_config(self) -> None:
        settings = EngineConfig(error_color="#ff0000", error_range_end=120)
        (error,) = apply_directive("[foo=1]", AnnotationConfig(), engine_config=settings)
        assert error.color == "#ff0000"
        assert error.end == 120

    def test_empty_directive_is_a_no_op(self) -> None:
        config = AnnotationConfig(clamp=(0, 1))
        assert apply_directive("", config) == []
        assert config.clamp == (0, 1)
