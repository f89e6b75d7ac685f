"""Exports for the graphing calculator core."""

from .cache import Sample, SampleCache
from .compiler import CompiledExpression, compile_ast, compile_source
from .errors import (
    CacheMiss,
    ExpectedToken,
    ExpressionTooComplex,
    GraphingError,
    InvalidCharacter,
    InvalidNumberLiteral,
    LexError,
    ParseError,
    ProgramError,
    SessionError,
    TrailingTokens,
    UnexpectedEndOfInput,
    UnrecognizedWord,
)
from .evaluator import ANGLE_UNITS, StackMachine, evaluate
from .lexer import Lexer, scan
from .parser import parse
from .session import CompileOutcome, PlotSession, Series
from .settings import GraphingSettings, load_settings

__all__ = [
    "ANGLE_UNITS",
    "CacheMiss",
    "CompileOutcome",
    "CompiledExpression",
    "ExpectedToken",
    "ExpressionTooComplex",
    "GraphingError",
    "GraphingSettings",
    "InvalidCharacter",
    "InvalidNumberLiteral",
    "LexError",
    "Lexer",
    "ParseError",
    "PlotSession",
    "ProgramError",
    "Sample",
    "SampleCache",
    "Series",
    "SessionError",
    "StackMachine",
    "TrailingTokens",
    "UnexpectedEndOfInput",
    "UnrecognizedWord",
    "compile_ast",
    "compile_source",
    "evaluate",
    "load_settings",
    "parse",
    "scan",
]
