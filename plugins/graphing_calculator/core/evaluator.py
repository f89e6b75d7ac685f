"""Stack machine executing compiled expressions.

Points where the function is undefined evaluate to ``None`` rather than
raising: zero divisors and tangent poles (within the program's epsilon),
powers that leave the reals, logarithms of non-positive numbers, square
roots of negative numbers, and calls to functions the machine does not know.
"""

from __future__ import annotations

import math
from typing import Callable

from .compiler import (
    Add,
    CallFunction,
    CompiledExpression,
    Div,
    Mul,
    Pow,
    PushConstant,
    PushVariable,
    Sub,
)
from .errors import ProgramError, SessionError

ANGLE_UNITS: tuple[str, ...] = ("radian", "degree")


def validate_angle_unit(angle_unit: str) -> str:
    if angle_unit not in ANGLE_UNITS:
        raise SessionError("angle_unit must be 'radian' or 'degree'")
    return angle_unit


def _periodic(fn: Callable[[float], float]) -> Callable[[float], float]:
    # math.sin(inf) raises where IEEE arithmetic yields NaN.
    def wrapped(value: float) -> float:
        if math.isinf(value):
            return math.nan
        return fn(value)

    return wrapped


_sin = _periodic(math.sin)
_cos = _periodic(math.cos)
_tan = _periodic(math.tan)


def _power(base: float, exponent: float) -> float:
    """IEEE ``pow``: overflow and zero to a negative power give infinities."""

    odd_integer = float(exponent).is_integer() and math.fmod(exponent, 2.0) != 0.0
    try:
        return math.pow(base, exponent)
    except OverflowError:
        negative = base < 0 and odd_integer
        return -math.inf if negative else math.inf
    except ValueError:
        if base == 0.0:
            return math.copysign(math.inf, base) if odd_integer else math.inf
        return math.nan


class StackMachine:
    """Evaluates one compiled program for arbitrary ``x`` values.

    The operand stack is owned by the machine and reset on every call, so a
    single instance can be reused across a whole sampling sweep.
    """

    def __init__(self, program: CompiledExpression, *, angle_unit: str = "radian") -> None:
        self.program = program
        self.angle_unit = validate_angle_unit(angle_unit)
        self._stack: list[float] = []
        self._degrees = angle_unit == "degree"

    def __call__(self, x: float) -> float | None:
        return self.evaluate(x)

    def _pop(self) -> float:
        try:
            return self._stack.pop()
        except IndexError as exc:
            raise ProgramError("Operand stack underflow") from exc

    def _apply(self, name: str, arg: float) -> float | None:
        if name in ("sin", "cos", "tan") and self._degrees:
            arg = math.radians(arg)
        if name == "sin":
            return _sin(arg)
        if name == "cos":
            return _cos(arg)
        if name == "tan":
            if abs(_cos(arg)) <= self.program.epsilon:
                return None
            return _tan(arg)
        if name in ("log", "ln"):
            if arg <= 0:
                return None
            if math.isnan(arg):
                return math.nan
            return math.log10(arg) if name == "log" else math.log(arg)
        if name == "sqrt":
            if arg < 0:
                return None
            return math.sqrt(arg)
        if name == "abs":
            return abs(arg)
        return None

    def evaluate(self, x: float) -> float | None:
        """Run the program at ``x``; ``None`` marks an undefined point, NaN included."""

        x = float(x)
        stack = self._stack
        stack.clear()
        epsilon = self.program.epsilon
        for instruction in self.program.instructions:
            if isinstance(instruction, PushConstant):
                stack.append(instruction.value)
            elif isinstance(instruction, PushVariable):
                stack.append(x)
            elif isinstance(instruction, CallFunction):
                value = self._apply(instruction.name, self._pop())
                if value is None:
                    return None
                stack.append(value)
            else:
                right = self._pop()
                left = self._pop()
                if isinstance(instruction, Add):
                    stack.append(left + right)
                elif isinstance(instruction, Sub):
                    stack.append(left - right)
                elif isinstance(instruction, Mul):
                    stack.append(left * right)
                elif isinstance(instruction, Div):
                    if abs(right) <= epsilon:
                        return None
                    stack.append(left / right)
                elif isinstance(instruction, Pow):
                    value = _power(left, right)
                    if math.isnan(value):
                        return None
                    stack.append(value)
                else:
                    raise ProgramError(f"Unknown instruction {instruction!r}")
        if len(stack) != 1:
            raise ProgramError(f"Program left {len(stack)} values on the stack")
        if math.isnan(stack[0]):
            return None
        return stack[0]


def evaluate(program: CompiledExpression, x: float, *, angle_unit: str = "radian") -> float | None:
    """Evaluate ``program`` once at ``x``."""

    return StackMachine(program, angle_unit=angle_unit).evaluate(x)


__all__ = ["ANGLE_UNITS", "StackMachine", "evaluate", "validate_angle_unit"]
