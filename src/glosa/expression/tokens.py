"""Token and TokenType definitions for the rangeFn expression lexer.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Token types produced by the expression lexer."""

    # Structure
    EOF = auto()
    SEPARATOR = auto()  # ; or newline

    # Operands
    NUMBER = auto()  # 12, 1.5
    NAME = auto()  # start, end, min

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    POWER = auto()  # **

    # Assignment
    ASSIGN = auto()  # =
    PLUS_ASSIGN = auto()  # +=
    MINUS_ASSIGN = auto()  # -=
    STAR_ASSIGN = auto()  # *=
    SLASH_ASSIGN = auto()  # /=
    PERCENT_ASSIGN = auto()  # %=

    # Grouping
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()


# Longest operators first so "**" wins over "*" and "+=" over "+"
OPERATORS: tuple[tuple[str, TokenType], ...] = (
    ("**", TokenType.POWER),
    ("+=", TokenType.PLUS_ASSIGN),
    ("-=", TokenType.MINUS_ASSIGN),
    ("*=", TokenType.STAR_ASSIGN),
    ("/=", TokenType.SLASH_ASSIGN),
    ("%=", TokenType.PERCENT_ASSIGN),
    ("+", TokenType.PLUS),
    ("-", TokenType.MINUS),
    ("*", TokenType.STAR),
    ("/", TokenType.SLASH),
    ("%", TokenType.PERCENT),
    ("=", TokenType.ASSIGN),
    ("(", TokenType.LPAREN),
    (")", TokenType.RPAREN),
    (",", TokenType.COMMA),
    (";", TokenType.SEPARATOR),
    ("\n", TokenType.SEPARATOR),
)

ASSIGNMENT_TOKENS = frozenset(
    {
        TokenType.ASSIGN,
        TokenType.PLUS_ASSIGN,
        TokenType.MINUS_ASSIGN,
        TokenType.STAR_ASSIGN,
        TokenType.SLASH_ASSIGN,
        TokenType.PERCENT_ASSIGN,
    }
)


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the expression lexer.

    Attributes:
        type: The token type
        value: The raw text from the formula
        column: Start column inside the formula (1-indexed)
    """

    type: TokenType
    value: str
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, col {self.column})"
