import pytest

from plugins.graphing_calculator.core import (
    InvalidCharacter,
    InvalidNumberLiteral,
    Lexer,
    UnrecognizedWord,
    scan,
)
from plugins.graphing_calculator.core.lexer import (
    FUNCTIONS,
    Constant,
    FunctionName,
    LeftParen,
    Number,
    Operator,
    RightParen,
    Variable,
)


def test_scan_mixed_expression():
    assert scan("x * sin(x) / e") == [
        Variable("x"),
        Operator("*"),
        FunctionName("sin"),
        LeftParen(),
        Variable("x"),
        RightParen(),
        Operator("/"),
        Constant("e"),
    ]


def test_empty_and_blank_input_yield_no_tokens():
    assert scan("") == []
    assert scan(" \t\n") == []


def test_single_character_tokens():
    assert scan("()+-*/^") == [
        LeftParen(),
        RightParen(),
        Operator("+"),
        Operator("-"),
        Operator("*"),
        Operator("/"),
        Operator("^"),
    ]


def test_number_literals():
    assert scan("123.45") == [Number(123.45)]
    assert scan("2.") == [Number(2.0)]
    assert scan("007") == [Number(7.0)]


def test_number_stops_at_non_digit():
    assert scan("2x") == [Number(2.0), Variable("x")]


def test_second_decimal_point_is_rejected():
    with pytest.raises(InvalidNumberLiteral):
        scan("1.2.3")


def test_invalid_character_reports_position():
    with pytest.raises(InvalidCharacter) as excinfo:
        scan("2 $ x")
    assert excinfo.value.position == 2
    assert excinfo.value.text == "$"


def test_leading_decimal_point_is_invalid():
    with pytest.raises(InvalidCharacter):
        scan(".5")


def test_words_stop_at_first_exact_match():
    assert scan("sinx") == [FunctionName("sin"), Variable("x")]
    assert scan("pix") == [Constant("pi"), Variable("x")]
    assert scan("ex") == [Constant("e"), Variable("x")]


def test_every_builtin_word_is_recognized():
    tokens = scan("sin cos tan log ln sqrt abs e pi x")
    assert [str(token) for token in tokens] == [
        "sin", "cos", "tan", "log", "ln", "sqrt", "abs", "e", "pi", "x",
    ]


@pytest.mark.parametrize("text, word", [("foo", "f"), ("s", "s"), ("co2", "co"), ("sqr(x)", "sqr")])
def test_unrecognized_words(text, word):
    with pytest.raises(UnrecognizedWord) as excinfo:
        scan(text)
    assert excinfo.value.text == word


def test_shortest_match_wins_with_extended_vocabulary():
    lexer = Lexer(functions=FUNCTIONS + ("sinh",))
    # "sin" matches before "sinh" can, leaving a dangling "h".
    with pytest.raises(UnrecognizedWord) as excinfo:
        lexer.scan("sinh(x)")
    assert excinfo.value.text == "h"


def test_custom_vocabulary():
    lexer = Lexer(functions=("exp",), constants=("tau",), variables=("y",))
    assert lexer.scan("exp(tau*y)") == [
        FunctionName("exp"),
        LeftParen(),
        Constant("tau"),
        Operator("*"),
        Variable("y"),
        RightParen(),
    ]
    with pytest.raises(UnrecognizedWord):
        lexer.scan("x")
