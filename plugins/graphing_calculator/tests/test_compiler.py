import math

import pytest

from plugins.graphing_calculator.core import CompiledExpression, ExpressionTooComplex, compile_ast, compile_source
from plugins.graphing_calculator.core.compiler import (
    MAX_EXPRESSION_LENGTH,
    Add,
    CallFunction,
    Div,
    Mul,
    Pow,
    PushConstant,
    PushVariable,
    Sub,
)
from plugins.graphing_calculator.core.lexer import Constant
from plugins.graphing_calculator.core.parser import Atom


def test_postfix_program_for_reference_expression():
    program = compile_source("2*sin(x)/e")
    assert program.instructions == (
        PushConstant(2.0),
        PushVariable(),
        CallFunction("sin"),
        Mul(),
        PushConstant(math.e),
        Div(),
    )
    assert program.listing() == ["push 2", "push x", "call sin", "mul", "push 2.71828182846", "div"]


def test_every_binary_operator():
    program = compile_source("x+1-2*3/4^5")
    assert [type(item) for item in program.instructions] == [
        PushVariable,
        PushConstant,
        Add,
        PushConstant,
        PushConstant,
        Mul,
        PushConstant,
        PushConstant,
        Pow,
        Div,
        Sub,
    ]


def test_unary_minus_multiplies_by_negative_one():
    assert compile_source("-x").instructions == (PushConstant(-1.0), PushVariable(), Mul())


def test_named_constants_resolve_at_compile_time():
    assert compile_source("pi").instructions == (PushConstant(math.pi),)
    assert compile_source("e").instructions == (PushConstant(math.e),)


def test_unknown_constant_emits_nothing():
    assert compile_ast(Atom(Constant("tau"))).instructions == ()


def test_epsilon_is_carried_and_replaced_immutably():
    program = compile_source("1/x", 0.25)
    assert program.epsilon == 0.25
    finer = program.with_epsilon(0.125)
    assert finer.epsilon == 0.125
    assert program.epsilon == 0.25
    assert finer.instructions == program.instructions


def test_negative_epsilon_rejected():
    with pytest.raises(ValueError):
        CompiledExpression((PushVariable(),), -1.0)


def test_compiled_length_counts_instructions():
    assert len(compile_source("sin(x)")) == 2


def test_long_flat_chain_compiles():
    text = "+".join(["x"] * 500)
    program = compile_source(text)
    assert len(program) == 500 + 499
    assert program.instructions[:3] == (PushVariable(), PushVariable(), Add())


def test_overlong_source_rejected():
    with pytest.raises(ExpressionTooComplex):
        compile_source("1+" * MAX_EXPRESSION_LENGTH + "1")
