"""Exception classes for glosa.

Expression and config-directive errors never reach the host: the parser and
resolver catch them and turn them into red error annotations. They are still
real exceptions so each component can be tested in isolation.
"""

from __future__ import annotations


class GlosaError(Exception):
    """Base exception for all glosa errors.

    Subclass this for specific error categories.
    """

    pass


class ExpressionError(GlosaError):
    """Error while compiling or evaluating a ``rangeFn`` expression.

    The message is what ends up after ``Error:`` in the error annotation,
    so it carries the column (1-indexed) inside the formula when known.
    """

    def __init__(self, message: str, column: int | None = None) -> None:
        """Initialize expression error with optional position.

        Args:
            message: Error description
            column: Column inside the expression source (1-indexed)
        """
        self.message = message
        self.column = column
        location = f" at column {column}" if column is not None else ""
        super().__init__(f"{message}{location}")


class ExpressionSyntaxError(ExpressionError):
    """Malformed formula, unknown variable or unknown function."""

    pass


class ExpressionEvaluationError(ExpressionError):
    """Formula compiled but failed while running (division by zero, overflow)."""

    pass


class ConfigDirectiveError(GlosaError):
    """Error in an ``@annotate-cfg`` option group."""

    def __init__(self, key: str, message: str, lineno: int | None = None) -> None:
        """Initialize directive error.

        Args:
            key: Option key as written in the directive
            message: Description of the problem
            lineno: Line number of the directive (0-indexed, optional)
        """
        self.key = key
        self.message = message
        self.lineno = lineno
        super().__init__(message)


class UnknownFieldError(ConfigDirectiveError):
    """Option key is neither ``rangeFn`` nor ``clamp``."""

    def __init__(self, key: str, lineno: int | None = None) -> None:
        super().__init__(key, f"Unknown field: {key}", lineno)


class InvalidOptionValueError(ConfigDirectiveError):
    """Option key is known but its value does not follow the value grammar."""

    pass


class EmptySelectionError(GlosaError):
    """Add-annotation was requested without any selected text."""

    def __init__(self, message: str = "Nothing is selected") -> None:
        super().__init__(message)
