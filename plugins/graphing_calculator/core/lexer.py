"""Tokenizer for single-variable plotting expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from .errors import InvalidCharacter, InvalidNumberLiteral, UnrecognizedWord

FUNCTIONS: tuple[str, ...] = ("sin", "cos", "tan", "log", "ln", "sqrt", "abs")
CONSTANTS: tuple[str, ...] = ("e", "pi")
VARIABLES: tuple[str, ...] = ("x",)
OPERATORS: tuple[str, ...] = ("+", "-", "*", "/", "^")


@dataclass(frozen=True, slots=True)
class Number:
    value: float

    def __str__(self) -> str:
        return f"{self.value:g}"


@dataclass(frozen=True, slots=True)
class Variable:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Constant:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class FunctionName:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class LeftParen:
    def __str__(self) -> str:
        return "("


@dataclass(frozen=True, slots=True)
class RightParen:
    def __str__(self) -> str:
        return ")"


@dataclass(frozen=True, slots=True)
class Operator:
    symbol: str

    def __str__(self) -> str:
        return self.symbol


Token = Union[Number, Variable, Constant, FunctionName, LeftParen, RightParen, Operator]


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


class Lexer:
    """Split expression text into tokens against fixed word vocabularies.

    Words are matched greedily one letter at a time and the scan stops at the
    first exact vocabulary hit, so ``sinx`` lexes as ``sin`` followed by ``x``.
    With the default vocabularies no word is a prefix of another; callers that
    extend them should keep that property or accept the shortest match.
    """

    def __init__(
        self,
        *,
        functions: Iterable[str] = FUNCTIONS,
        constants: Iterable[str] = CONSTANTS,
        variables: Iterable[str] = VARIABLES,
    ) -> None:
        # Lookup order doubles as the classification priority for a word.
        self._vocabularies: tuple[tuple[type, tuple[str, ...]], ...] = (
            (Constant, tuple(constants)),
            (FunctionName, tuple(functions)),
            (Variable, tuple(variables)),
        )

    def scan(self, text: str) -> list[Token]:
        tokens: list[Token] = []
        position = 0
        length = len(text)
        while position < length:
            char = text[position]
            if char.isspace():
                position += 1
            elif char == "(":
                tokens.append(LeftParen())
                position += 1
            elif char == ")":
                tokens.append(RightParen())
                position += 1
            elif char in OPERATORS:
                tokens.append(Operator(char))
                position += 1
            elif _is_digit(char):
                token, position = self._scan_number(text, position)
                tokens.append(token)
            elif char.isalpha():
                token, position = self._scan_word(text, position)
                tokens.append(token)
            else:
                raise InvalidCharacter(
                    f"Invalid character '{char}' at position {position}",
                    text=char,
                    position=position,
                )
        return tokens

    def _scan_number(self, text: str, start: int) -> tuple[Number, int]:
        position = start
        seen_point = False
        while position < len(text):
            char = text[position]
            if char == ".":
                if seen_point:
                    raise InvalidNumberLiteral(
                        "Numbers may only contain one decimal point",
                        text=text[start : position + 1],
                        position=start,
                    )
                seen_point = True
            elif not _is_digit(char):
                break
            position += 1
        return Number(float(text[start:position])), position

    def _scan_word(self, text: str, start: int) -> tuple[Token, int]:
        position = start
        word = ""
        candidates = [words for _, words in self._vocabularies]
        while position < len(text) and text[position].isalpha():
            word += text[position]
            position += 1
            candidates = [tuple(w for w in words if w.startswith(word)) for words in candidates]
            for (kind, _), words in zip(self._vocabularies, candidates):
                if word in words:
                    return kind(word), position
            if not any(candidates):
                break
        raise UnrecognizedWord(f"Unrecognized word '{word}'", text=word, position=start)


_DEFAULT_LEXER = Lexer()


def scan(text: str) -> list[Token]:
    """Tokenize ``text`` with the default vocabularies."""

    return _DEFAULT_LEXER.scan(text)


__all__ = [
    "CONSTANTS",
    "FUNCTIONS",
    "OPERATORS",
    "VARIABLES",
    "Constant",
    "FunctionName",
    "LeftParen",
    "Lexer",
    "Number",
    "Operator",
    "RightParen",
    "Token",
    "Variable",
    "scan",
]
