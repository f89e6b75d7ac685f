"""Exception hierarchy for the graphing calculator core."""

from __future__ import annotations


class GraphingError(ValueError):
    """Base class for every error raised by the graphing core."""


class LexError(GraphingError):
    """Raised when an expression cannot be split into tokens."""

    def __init__(self, message: str, *, text: str, position: int):
        super().__init__(message)
        self.text = text
        self.position = position


class InvalidCharacter(LexError):
    """A character outside the expression alphabet."""


class InvalidNumberLiteral(LexError):
    """A numeric literal with more than one decimal point."""


class UnrecognizedWord(LexError):
    """A run of letters that names no constant, function or variable."""


class ParseError(GraphingError):
    """Raised when a token sequence does not match the expression grammar."""


class UnexpectedEndOfInput(ParseError):
    """Tokens ran out in the middle of a production."""


class ExpectedToken(ParseError):
    """A token of the wrong kind appeared where the grammar requires another."""

    def __init__(self, expected: str, found: object):
        super().__init__(f"Expected {expected}, found '{found}'")
        self.expected = expected
        self.found = found


class TrailingTokens(ParseError):
    """A complete expression parsed but input remains unconsumed."""


class ExpressionTooComplex(ParseError):
    """The expression is longer or nests deeper than the parser accepts."""


class ProgramError(GraphingError):
    """Raised when an instruction sequence leaves the operand stack malformed."""


class CacheMiss(GraphingError):
    """Raised when a sample cache cannot answer a query from stored samples."""


class SessionError(GraphingError):
    """Raised for invalid plot session requests."""


__all__ = [
    "GraphingError",
    "LexError",
    "InvalidCharacter",
    "InvalidNumberLiteral",
    "UnrecognizedWord",
    "ParseError",
    "UnexpectedEndOfInput",
    "ExpectedToken",
    "TrailingTokens",
    "ExpressionTooComplex",
    "ProgramError",
    "CacheMiss",
    "SessionError",
]
