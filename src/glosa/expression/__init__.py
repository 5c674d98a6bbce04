"""The rangeFn expression language.

Formulas remap the raw columns of an annotation before clamping:

    # @annotate-cfg [rangeFn={start = start * 2; end = end * 2}]

Only ``start`` and ``end`` exist as variables. See compiler.py for the
grammar and evaluation rules.
"""

from glosa.expression.compiler import (
    FUNCTIONS,
    Expression,
    ExpressionContext,
    compile_expression,
)
from glosa.expression.lexer import tokenize
from glosa.expression.tokens import Token, TokenType

__all__ = [
    "FUNCTIONS",
    "Expression",
    "ExpressionContext",
    "Token",
    "TokenType",
    "compile_expression",
    "tokenize",
]
