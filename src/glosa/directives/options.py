"""Option groups of ``@annotate-cfg`` directives.

A directive line carries zero or more ``[key=value]`` groups:

    # @annotate-cfg [clamp=[0,80]] [rangeFn={start = start + 4; end = end + 4}]

Values come in three shapes:
- braced ``{...}`` (braces balanced), used by rangeFn
- bracketed ``[...]`` (brackets balanced), used by clamp
- plain text up to the closing ``]``

Every group is applied independently: a bad group turns into an error
annotation and never blocks its siblings on the same line.

Thread Safety:
OptionGroup is frozen. apply_directive mutates only the config it is given.

"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from glosa.config import AnnotationConfig, EngineConfig, get_engine_config
from glosa.errors import (
    ConfigDirectiveError,
    ExpressionError,
    InvalidOptionValueError,
    UnknownFieldError,
)
from glosa.expression import compile_expression
from glosa.nodes import Annotation
from glosa.utils.logger import get_logger

logger = get_logger(__name__)

_CLOSERS = {"{": "}", "[": "]"}


@dataclass(frozen=True, slots=True)
class OptionGroup:
    """One ``[key=value]`` group.

    Attributes:
        key: Option key, whitespace-stripped
        value: Raw value text, including its braces or brackets
        column: Offset of the opening ``[`` in the option text
        terminated: False when the line ended inside the group

    """

    key: str
    value: str
    column: int
    terminated: bool = True


def _find_balanced(text: str, pos: int) -> int:
    """Return the index of the closer matching the opener at ``pos``, or -1."""
    opener = text[pos]
    closer = _CLOSERS[opener]
    depth = 0
    for i in range(pos, len(text)):
        ch = text[i]
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
    return -1


def scan_option_groups(options: str) -> Iterator[OptionGroup]:
    """Yield the ``[key=value]`` groups of a directive's option text.

    Text between groups is ignored, as are bracketed groups without ``=``.
    Scanning stops at a group the line ends inside of; that group is yielded
    with ``terminated=False``.

    Args:
        options: Line text after the ``@annotate-cfg`` marker

    Yields:
        OptionGroup records in source order.
    """
    length = len(options)
    pos = options.find("[")
    while pos != -1:
        group_start = pos
        eq = options.find("=", pos + 1)
        close = options.find("]", pos + 1)
        if eq == -1 or (close != -1 and close < eq):
            # Bracketed text without '=': not an option group
            if close == -1:
                return
            pos = options.find("[", close + 1)
            continue

        key = options[pos + 1 : eq].strip()
        value_start = eq + 1
        while value_start < length and options[value_start] == " ":
            value_start += 1

        if value_start < length and options[value_start] in _CLOSERS:
            value_end = _find_balanced(options, value_start)
            if value_end == -1:
                yield OptionGroup(key, options[value_start:], group_start, terminated=False)
                return
            value = options[value_start : value_end + 1]
            close = options.find("]", value_end + 1)
        else:
            close = options.find("]", value_start)
            if close == -1:
                yield OptionGroup(key, options[value_start:].strip(), group_start, terminated=False)
                return
            value = options[value_start:close].strip()

        if close == -1:
            yield OptionGroup(key, value, group_start, terminated=False)
            return

        yield OptionGroup(key, value, group_start)
        pos = options.find("[", close + 1)


def _apply_range_fn(group: OptionGroup, config: AnnotationConfig) -> None:
    value = group.value.strip()
    if not (value.startswith("{") and value.endswith("}")):
        msg = f"rangeFn value must be wrapped in braces: {value}"
        raise InvalidOptionValueError(group.key, msg)
    # Compile before assigning so a bad formula keeps the previous one
    config.range_fn = compile_expression(value[1:-1])


def _apply_clamp(group: OptionGroup, config: AnnotationConfig) -> None:
    config.clamp = parse_clamp(group.value)


def _is_column(text: str) -> bool:
    text = text.strip()
    return text.isascii() and text.isdigit()


def parse_clamp(value: str) -> tuple[int, int]:
    """Parse a clamp value: ``[low-high]`` or ``[low,high]``.

    Raises:
        InvalidOptionValueError: Anything else.
    """
    text = value.strip()
    if text.startswith("[") and text.endswith("]"):
        inner = text[1:-1]
        for separator in (",", "-"):
            low, sep, high = inner.partition(separator)
            if sep and _is_column(low) and _is_column(high):
                return int(low), int(high)
    raise InvalidOptionValueError("clamp", f"Invalid clamp value: {value}")


OptionHandler = Callable[[OptionGroup, AnnotationConfig], None]

OPTION_HANDLERS: dict[str, OptionHandler] = {
    "rangeFn": _apply_range_fn,
    "clamp": _apply_clamp,
}


def apply_option(group: OptionGroup, config: AnnotationConfig) -> None:
    """Apply one option group to ``config`` in place.

    Raises:
        UnknownFieldError: Key is not rangeFn or clamp.
        InvalidOptionValueError: Value is malformed or unterminated.
        ExpressionSyntaxError: rangeFn formula does not compile.
    """
    handler = OPTION_HANDLERS.get(group.key)
    if handler is None:
        raise UnknownFieldError(group.key)
    if not group.terminated:
        raise InvalidOptionValueError(group.key, f"Unterminated value for {group.key}")
    handler(group, config)


def apply_directive(
    options: str,
    config: AnnotationConfig,
    *,
    lineno: int = -1,
    engine_config: EngineConfig | None = None,
) -> list[Annotation]:
    """Apply every option group of a directive line to ``config``.

    Errors never propagate: each failing group becomes a forced error
    annotation, to be flushed against the next anchor like any other
    annotation.

    Args:
        options: Line text after the ``@annotate-cfg`` marker
        config: Directive state to mutate
        lineno: Line of the directive, recorded on error annotations
        engine_config: Settings for the error color and range

    Returns:
        Error annotations, empty when every group applied cleanly.
    """
    settings = engine_config or get_engine_config()
    errors: list[Annotation] = []

    for group in scan_option_groups(options):
        try:
            apply_option(group, config)
        except UnknownFieldError as e:
            message = str(e)
        except (ConfigDirectiveError, ExpressionError) as e:
            message = f"Error: {e}"
        else:
            continue

        logger.debug("Directive on line %d: %s", lineno, message)
        errors.append(
            Annotation.error(
                message,
                lineno=lineno,
                color=settings.error_color,
                end=settings.error_range_end,
            )
        )

    return errors


__all__ = [
    "OPTION_HANDLERS",
    "OptionGroup",
    "apply_directive",
    "apply_option",
    "parse_clamp",
    "scan_option_groups",
]
