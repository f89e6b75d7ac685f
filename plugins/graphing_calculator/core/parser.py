"""Recursive-descent parser producing an expression tree.

Grammar, lowest precedence first::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := "-" unary | power
    power      := function ("^" power)?
    function   := name "(" expression ")" | atom
    atom       := number | constant | variable | "(" expression ")"

``+ - * /`` fold to the left while ``^`` recurses to the right, so
``2^3^2`` is ``2^(3^2)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from .errors import ExpectedToken, ExpressionTooComplex, TrailingTokens, UnexpectedEndOfInput
from .lexer import (
    Constant,
    FunctionName,
    LeftParen,
    Number,
    Operator,
    RightParen,
    Token,
    Variable,
)


@dataclass(frozen=True, slots=True)
class BinaryExpr:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True, slots=True)
class UnaryExpr:
    op: str
    operand: "Node"


@dataclass(frozen=True, slots=True)
class FunctionCall:
    name: str
    argument: "Node"


@dataclass(frozen=True, slots=True)
class Atom:
    token: Number | Constant | Variable


Node = Union[BinaryExpr, UnaryExpr, FunctionCall, Atom]

MAX_NESTING_DEPTH = 64


class Parser:
    """Single-use parser over a token sequence.

    Groups, function arguments, unary minus and exponents each count as one
    level of nesting; input deeper than ``max_depth`` is rejected.
    """

    def __init__(self, tokens: Sequence[Token], *, max_depth: int = MAX_NESTING_DEPTH) -> None:
        self._tokens = tuple(tokens)
        self._position = 0
        self._depth = 0
        self._max_depth = max_depth

    def parse(self) -> Node:
        node = self._expression()
        if self._position != len(self._tokens):
            leftover = " ".join(str(token) for token in self._tokens[self._position :])
            raise TrailingTokens(f"Unexpected input after expression: '{leftover}'")
        return node

    def _peek(self) -> Token | None:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise UnexpectedEndOfInput("Unexpected end of input while parsing expression")
        self._position += 1
        return token

    def _expect(self, expected: Token) -> None:
        token = self._next()
        if token != expected:
            raise ExpectedToken(str(expected), token)

    def _at_operator(self, *symbols: str) -> str | None:
        token = self._peek()
        if isinstance(token, Operator) and token.symbol in symbols:
            return token.symbol
        return None

    def _expression(self) -> Node:
        left = self._term()
        symbol = self._at_operator("+", "-")
        while symbol is not None:
            self._position += 1
            left = BinaryExpr(symbol, left, self._term())
            symbol = self._at_operator("+", "-")
        return left

    def _term(self) -> Node:
        left = self._unary()
        symbol = self._at_operator("*", "/")
        while symbol is not None:
            self._position += 1
            left = BinaryExpr(symbol, left, self._unary())
            symbol = self._at_operator("*", "/")
        return left

    def _descend(self) -> None:
        self._depth += 1
        if self._depth > self._max_depth:
            raise ExpressionTooComplex(f"Expression nests deeper than {self._max_depth} levels")

    def _unary(self) -> Node:
        if self._at_operator("-") is not None:
            self._position += 1
            self._descend()
            node = UnaryExpr("-", self._unary())
            self._depth -= 1
            return node
        return self._power()

    def _power(self) -> Node:
        base = self._function()
        if self._at_operator("^") is not None:
            self._position += 1
            self._descend()
            node = BinaryExpr("^", base, self._power())
            self._depth -= 1
            return node
        return base

    def _function(self) -> Node:
        token = self._peek()
        if isinstance(token, FunctionName):
            self._position += 1
            self._expect(LeftParen())
            self._descend()
            argument = self._expression()
            self._depth -= 1
            self._expect(RightParen())
            return FunctionCall(token.name, argument)
        return self._atom()

    def _atom(self) -> Node:
        token = self._next()
        if isinstance(token, (Number, Constant, Variable)):
            return Atom(token)
        if isinstance(token, LeftParen):
            self._descend()
            inner = self._expression()
            self._depth -= 1
            self._expect(RightParen())
            return inner
        raise ExpectedToken("expression", token)


def parse(tokens: Sequence[Token]) -> Node:
    """Parse ``tokens`` into a tree, rejecting any unconsumed input."""

    return Parser(tokens).parse()


__all__ = ["MAX_NESTING_DEPTH", "Atom", "BinaryExpr", "FunctionCall", "Node", "Parser", "UnaryExpr", "parse"]
