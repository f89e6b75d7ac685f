"""Lower expression trees to postfix stack-machine programs."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Union

from .errors import ExpressionTooComplex
from .lexer import Constant, Number, Variable, scan
from .parser import Atom, BinaryExpr, FunctionCall, Node, UnaryExpr, parse

CONSTANT_VALUES: dict[str, float] = {"pi": math.pi, "e": math.e}
MAX_EXPRESSION_LENGTH = 1024


@dataclass(frozen=True, slots=True)
class PushConstant:
    value: float


@dataclass(frozen=True, slots=True)
class PushVariable:
    pass


@dataclass(frozen=True, slots=True)
class Add:
    pass


@dataclass(frozen=True, slots=True)
class Sub:
    pass


@dataclass(frozen=True, slots=True)
class Mul:
    pass


@dataclass(frozen=True, slots=True)
class Div:
    pass


@dataclass(frozen=True, slots=True)
class Pow:
    pass


@dataclass(frozen=True, slots=True)
class CallFunction:
    name: str


Instruction = Union[PushConstant, PushVariable, Add, Sub, Mul, Div, Pow, CallFunction]

_BINARY_INSTRUCTIONS: dict[str, Instruction] = {
    "+": Add(),
    "-": Sub(),
    "*": Mul(),
    "/": Div(),
    "^": Pow(),
}

_MNEMONICS: dict[type, str] = {Add: "add", Sub: "sub", Mul: "mul", Div: "div", Pow: "pow"}


@dataclass(frozen=True, slots=True)
class CompiledExpression:
    """Postfix program plus the tolerance used for poles and zero divisors."""

    instructions: tuple[Instruction, ...]
    epsilon: float = 0.0

    def __post_init__(self) -> None:
        if not self.epsilon >= 0:
            raise ValueError("epsilon must be a non-negative number")

    def with_epsilon(self, epsilon: float) -> "CompiledExpression":
        return replace(self, epsilon=epsilon)

    def listing(self) -> list[str]:
        """Return a human readable line per instruction."""

        lines: list[str] = []
        for instruction in self.instructions:
            if isinstance(instruction, PushConstant):
                lines.append(f"push {instruction.value:.12g}")
            elif isinstance(instruction, PushVariable):
                lines.append("push x")
            elif isinstance(instruction, CallFunction):
                lines.append(f"call {instruction.name}")
            else:
                lines.append(_MNEMONICS[type(instruction)])
        return lines

    def __len__(self) -> int:
        return len(self.instructions)


def _emit(node: Node, out: list[Instruction]) -> None:
    # Explicit work list: left-folded chains can be as long as the source.
    pending: list[Node | Instruction] = [node]
    while pending:
        item = pending.pop()
        if isinstance(item, BinaryExpr):
            instruction = _BINARY_INSTRUCTIONS.get(item.op)
            if instruction is not None:
                pending.append(instruction)
            pending.append(item.right)
            pending.append(item.left)
        elif isinstance(item, UnaryExpr):
            # Negation is multiplication by -1.
            pending.extend([Mul(), item.operand, PushConstant(-1.0)])
        elif isinstance(item, FunctionCall):
            pending.extend([CallFunction(item.name), item.argument])
        elif isinstance(item, Atom):
            token = item.token
            if isinstance(token, Variable):
                out.append(PushVariable())
            elif isinstance(token, Number):
                out.append(PushConstant(token.value))
            elif isinstance(token, Constant) and token.name in CONSTANT_VALUES:
                out.append(PushConstant(CONSTANT_VALUES[token.name]))
        else:
            out.append(item)


def compile_ast(node: Node, epsilon: float = 0.0) -> CompiledExpression:
    """Flatten ``node`` into a :class:`CompiledExpression` by post-order walk."""

    instructions: list[Instruction] = []
    _emit(node, instructions)
    return CompiledExpression(tuple(instructions), epsilon)


def compile_source(text: str, epsilon: float = 0.0) -> CompiledExpression:
    """Scan, parse and compile ``text``.

    Raises :class:`~.errors.LexError` or :class:`~.errors.ParseError` for
    malformed input; compilation itself never fails.
    """

    if len(text) > MAX_EXPRESSION_LENGTH:
        raise ExpressionTooComplex(f"Expression is longer than {MAX_EXPRESSION_LENGTH} characters")
    return compile_ast(parse(scan(text)), epsilon)


__all__ = [
    "CONSTANT_VALUES",
    "Add",
    "CallFunction",
    "CompiledExpression",
    "Div",
    "Instruction",
    "MAX_EXPRESSION_LENGTH",
    "Mul",
    "Pow",
    "PushConstant",
    "PushVariable",
    "Sub",
    "compile_ast",
    "compile_source",
]
