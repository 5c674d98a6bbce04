"""Recursive descent compiler and tree-walking evaluator for rangeFn formulas.

A formula is a sequence of statements over two variables, ``start`` and
``end``. Statements assign into those variables; evaluation mutates an
ExpressionContext in place:

    >>> expr = compile_expression("start = start * 2; end = end * 2 + 1")
    >>> ctx = ExpressionContext(start=3, end=5)
    >>> expr.evaluate(ctx)
    ExpressionContext(start=6, end=11)

Names other than ``start``/``end`` and the builtin functions are rejected at
compile time. The grammar has no looping construct and exponents are
bounded, so evaluation always terminates.

Thread Safety:
Expression is immutable after compilation and safe to share. Each
evaluation works on a caller-owned context.

"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from glosa.errors import ExpressionEvaluationError, ExpressionSyntaxError
from glosa.expression.lexer import tokenize
from glosa.expression.nodes import (
    VARIABLES,
    Assign,
    BinaryOp,
    Call,
    Expr,
    ExprStatement,
    Number,
    Statement,
    UnaryOp,
    Variable,
)
from glosa.expression.tokens import ASSIGNMENT_TOKENS, Token, TokenType

MAX_EXPONENT = 64
MAX_INT_BITS = 1024


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# name -> (callable, min arity, max arity or None for variadic)
FUNCTIONS: dict[str, tuple[Callable[..., float | int], int, int | None]] = {
    "min": (min, 1, None),
    "max": (max, 1, None),
    "abs": (abs, 1, 1),
    "floor": (math.floor, 1, 1),
    "ceil": (math.ceil, 1, 1),
    "round": (_round_half_up, 1, 1),
}

_BINARY_OPS: dict[TokenType, str] = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
    TokenType.PERCENT: "%",
}

_ASSIGN_OPS: dict[TokenType, str] = {
    TokenType.ASSIGN: "",
    TokenType.PLUS_ASSIGN: "+",
    TokenType.MINUS_ASSIGN: "-",
    TokenType.STAR_ASSIGN: "*",
    TokenType.SLASH_ASSIGN: "/",
    TokenType.PERCENT_ASSIGN: "%",
}


@dataclass(slots=True)
class ExpressionContext:
    """The two variables a formula reads and writes."""

    start: float | int
    end: float | int


class _FormulaParser:
    """Recursive descent parser over the token list of one formula.

    Single-use: create one per formula.
    """

    __slots__ = ("_tokens", "_pos")

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _expect(self, token_type: TokenType, what: str) -> Token:
        token = self._current
        if token.type is not token_type:
            raise self._unexpected(token, f"Expected {what}")
        return self._advance()

    def _unexpected(self, token: Token, message: str) -> ExpressionSyntaxError:
        if token.type is TokenType.EOF:
            return ExpressionSyntaxError(f"{message}, found end of formula", token.column)
        return ExpressionSyntaxError(f"{message}, found {token.value!r}", token.column)

    def _skip_separators(self) -> None:
        while self._current.type is TokenType.SEPARATOR:
            self._advance()

    def parse_program(self) -> tuple[Statement, ...]:
        statements: list[Statement] = []
        self._skip_separators()
        while self._current.type is not TokenType.EOF:
            statements.append(self._parse_statement())
            if self._current.type not in (TokenType.SEPARATOR, TokenType.EOF):
                raise self._unexpected(self._current, "Expected ';' between statements")
            self._skip_separators()
        return tuple(statements)

    def _parse_statement(self) -> Statement:
        token = self._current
        if token.type is TokenType.NAME and self._peek().type in ASSIGNMENT_TOKENS:
            if token.value not in VARIABLES:
                raise ExpressionSyntaxError(f"Unknown variable '{token.value}'", token.column)
            self._advance()
            op = _ASSIGN_OPS[self._advance().type]
            value = self._parse_expr()
            return Assign(token.column, token.value, op, value)  # type: ignore[arg-type]
        return ExprStatement(token.column, self._parse_expr())

    def _parse_expr(self) -> Expr:
        left = self._parse_term()
        while self._current.type in (TokenType.PLUS, TokenType.MINUS):
            op_token = self._advance()
            right = self._parse_term()
            left = BinaryOp(op_token.column, _BINARY_OPS[op_token.type], left, right)  # type: ignore[arg-type]
        return left

    def _parse_term(self) -> Expr:
        left = self._parse_unary()
        while self._current.type in (TokenType.STAR, TokenType.SLASH, TokenType.PERCENT):
            op_token = self._advance()
            right = self._parse_unary()
            left = BinaryOp(op_token.column, _BINARY_OPS[op_token.type], left, right)  # type: ignore[arg-type]
        return left

    def _parse_unary(self) -> Expr:
        token = self._current
        if token.type in (TokenType.MINUS, TokenType.PLUS):
            self._advance()
            return UnaryOp(token.column, token.value, self._parse_unary())  # type: ignore[arg-type]
        return self._parse_power()

    def _parse_power(self) -> Expr:
        base = self._parse_atom()
        if self._current.type is TokenType.POWER:
            op_token = self._advance()
            # Right-associative: 2 ** 3 ** 2 == 2 ** 9
            return BinaryOp(op_token.column, "**", base, self._parse_unary())
        return base

    def _parse_atom(self) -> Expr:
        token = self._current

        if token.type is TokenType.NUMBER:
            self._advance()
            text = token.value
            value: float | int = float(text) if "." in text else int(text)
            return Number(token.column, value)

        if token.type is TokenType.NAME:
            self._advance()
            if self._current.type is TokenType.LPAREN:
                return self._parse_call(token)
            if token.value not in VARIABLES:
                raise ExpressionSyntaxError(f"Unknown variable '{token.value}'", token.column)
            return Variable(token.column, token.value)  # type: ignore[arg-type]

        if token.type is TokenType.LPAREN:
            self._advance()
            inner = self._parse_expr()
            self._expect(TokenType.RPAREN, "')'")
            return inner

        raise self._unexpected(token, "Expected a number, variable or '('")

    def _parse_call(self, name_token: Token) -> Call:
        name = name_token.value
        if name not in FUNCTIONS:
            raise ExpressionSyntaxError(f"Unknown function '{name}'", name_token.column)
        self._expect(TokenType.LPAREN, "'('")

        args: list[Expr] = []
        if self._current.type is not TokenType.RPAREN:
            args.append(self._parse_expr())
            while self._current.type is TokenType.COMMA:
                self._advance()
                args.append(self._parse_expr())
        self._expect(TokenType.RPAREN, "')'")

        _, min_arity, max_arity = FUNCTIONS[name]
        if len(args) < min_arity or (max_arity is not None and len(args) > max_arity):
            expected = str(min_arity) if max_arity == min_arity else f"at least {min_arity}"
            raise ExpressionSyntaxError(
                f"{name}() takes {expected} argument(s), got {len(args)}", name_token.column
            )
        return Call(name_token.column, name, tuple(args))


class Expression:
    """A compiled rangeFn formula.

    Create with compile_expression(). Immutable after creation; equality and
    hashing follow the formula source.
    """

    __slots__ = ("_source", "_statements")

    def __init__(self, source: str, statements: tuple[Statement, ...]) -> None:
        self._source = source
        self._statements = statements

    @property
    def source(self) -> str:
        return self._source

    @property
    def statements(self) -> tuple[Statement, ...]:
        return self._statements

    def evaluate(self, context: ExpressionContext) -> ExpressionContext:
        """Run the formula, assigning into ``context`` in place.

        Args:
            context: Variables to read and write

        Returns:
            The same context, for chaining.

        Raises:
            ExpressionEvaluationError: Division by zero, overflow, or a
                non-finite value assigned to a variable.
        """
        for statement in self._statements:
            match statement:
                case Assign(target=target, op=op, value=value):
                    result = _eval(value, context)
                    if op:
                        result = _apply_binary(op, getattr(context, target), result, statement.column)
                    if isinstance(result, float) and not math.isfinite(result):
                        raise ExpressionEvaluationError(
                            f"'{target}' is not a finite number", statement.column
                        )
                    setattr(context, target, result)
                case ExprStatement(expr=expr):
                    _eval(expr, context)
        return context

    def apply(self, start: int, end: int) -> tuple[int, int]:
        """Map a raw column pair through the formula.

        Results are floored to whole columns.
        """
        context = self.evaluate(ExpressionContext(start=start, end=end))
        return math.floor(context.start), math.floor(context.end)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expression):
            return NotImplemented
        return self._source == other._source

    def __hash__(self) -> int:
        return hash(self._source)

    def __repr__(self) -> str:
        return f"Expression({self._source!r})"


def compile_expression(source: str) -> Expression:
    """Compile a formula once into an Expression.

    Args:
        source: Formula text without the surrounding braces

    Returns:
        Compiled Expression

    Raises:
        ExpressionSyntaxError: Malformed formula, unknown variable or function.
    """
    parser = _FormulaParser(tokenize(source))
    return Expression(source, parser.parse_program())


def _eval(node: Expr, context: ExpressionContext) -> float | int:
    match node:
        case Number(value=value):
            return value
        case Variable(name=name):
            return getattr(context, name)
        case UnaryOp(op=op, operand=operand):
            value = _eval(operand, context)
            return -value if op == "-" else value
        case BinaryOp(op=op, left=left, right=right):
            return _apply_binary(op, _eval(left, context), _eval(right, context), node.column)
        case Call(name=name, args=args):
            func = FUNCTIONS[name][0]
            values = [_eval(arg, context) for arg in args]
            try:
                return func(*values)
            except (OverflowError, ValueError) as e:
                raise ExpressionEvaluationError(f"{name}() failed: {e}", node.column) from e
        case _:
            raise ExpressionEvaluationError(f"Unsupported node {type(node).__name__}", node.column)


def _apply_binary(op: str, left: float | int, right: float | int, column: int) -> float | int:
    try:
        match op:
            case "+":
                result = left + right
            case "-":
                result = left - right
            case "*":
                result = left * right
            case "/":
                result = left / right
            case "%":
                result = left % right
            case "**":
                if abs(right) > MAX_EXPONENT:
                    raise ExpressionEvaluationError(
                        f"Exponent {right} exceeds {MAX_EXPONENT}", column
                    )
                result = left**right
                if isinstance(result, complex):
                    raise ExpressionEvaluationError("Result is not a real number", column)
            case _:
                raise ExpressionEvaluationError(f"Unknown operator '{op}'", column)
    except ZeroDivisionError as e:
        raise ExpressionEvaluationError("Division by zero", column) from e
    except OverflowError as e:
        raise ExpressionEvaluationError("Numeric overflow", column) from e

    # Chained ** on integers would otherwise grow without limit
    if isinstance(result, int) and result.bit_length() > MAX_INT_BITS:
        raise ExpressionEvaluationError("Numeric overflow", column)
    return result
