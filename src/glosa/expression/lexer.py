"""Scanner for rangeFn formulas.

Single forward pass over the formula, no regex. Every iteration consumes at
least one character, so scanning is O(n) by construction.
"""

from __future__ import annotations

from glosa.errors import ExpressionSyntaxError
from glosa.expression.tokens import OPERATORS, Token, TokenType

_DIGITS = frozenset("0123456789")


def tokenize(source: str) -> list[Token]:
    """Split a formula into tokens.

    Args:
        source: Formula text, e.g. ``"start = start + 2; end = end * 2"``

    Returns:
        Token list, always terminated by an EOF token.

    Raises:
        ExpressionSyntaxError: On a character that starts no token.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(source)

    while pos < length:
        ch = source[pos]

        if ch in " \t\r":
            pos += 1
            continue

        if ch in _DIGITS or (ch == "." and pos + 1 < length and source[pos + 1] in _DIGITS):
            start = pos
            while pos < length and source[pos] in _DIGITS:
                pos += 1
            if pos < length and source[pos] == ".":
                pos += 1
                while pos < length and source[pos] in _DIGITS:
                    pos += 1
            tokens.append(Token(TokenType.NUMBER, source[start:pos], start + 1))
            continue

        if ch.isalpha() or ch == "_":
            start = pos
            while pos < length and (source[pos].isalnum() or source[pos] == "_"):
                pos += 1
            tokens.append(Token(TokenType.NAME, source[start:pos], start + 1))
            continue

        for text, token_type in OPERATORS:
            if source.startswith(text, pos):
                tokens.append(Token(token_type, text, pos + 1))
                pos += len(text)
                break
        else:
            raise ExpressionSyntaxError(f"Unexpected character {ch!r}", pos + 1)

    tokens.append(Token(TokenType.EOF, "", length + 1))
    return tokens
