from __future__ import annotations

import pytest

from axiomgraph.environment import Environment
from axiomgraph.config import EngineConfig
from axiomgraph.errors import NestingTooDeep, ParseError, UnclosedParameter, UnexpectedToken
from axiomgraph.expression_ast import (
    BinaryOp,
    FunctionCall,
    NumberLiteral,
    ParameterizedFunctionCall,
    Reference,
    UnaryOp,
    Variable,
    called_functions,
    referenced_names,
)
from axiomgraph.parser import Parser, parse
from axiomgraph.tokenizer import Tokenizer


def test_tokenizer_reads_numbers_names_and_operators() -> None:
    tok = Tokenizer("  3.25 * abc")
    assert tok.read_number() == 3.25
    assert tok.eat("*") is True
    assert tok.eat("+") is False
    assert tok.read_name() == "abc"
    assert tok.at_end()


def test_tokenizer_parameter_suffix() -> None:
    tok = Tokenizer("{12}(x)")
    assert tok.read_parameter() == 12.0
    assert tok.peek() == "("
    assert Tokenizer("(x)").read_parameter() is None


@pytest.mark.parametrize("text", ["root{3(x)", "root{}(x)", "log{2"])
def test_unclosed_parameter(text: str) -> None:
    with pytest.raises(UnclosedParameter):
        parse(text)


def test_precedence_and_associativity() -> None:
    assert parse("2+3*4") == BinaryOp(
        NumberLiteral(2.0), "+", BinaryOp(NumberLiteral(3.0), "*", NumberLiteral(4.0))
    )
    # right-associative power
    assert parse("2^3^2") == BinaryOp(
        NumberLiteral(2.0), "^", BinaryOp(NumberLiteral(3.0), "^", NumberLiteral(2.0))
    )
    # unary minus applies after the power
    assert parse("-2^2") == UnaryOp("-", BinaryOp(NumberLiteral(2.0), "^", NumberLiteral(2.0)))


def test_left_associative_subtraction() -> None:
    assert parse("8-3-1") == BinaryOp(
        BinaryOp(NumberLiteral(8.0), "-", NumberLiteral(3.0)), "-", NumberLiteral(1.0)
    )


def test_function_argument_is_a_single_factor() -> None:
    expected = FunctionCall("sin", BinaryOp(Variable(), "^", NumberLiteral(2.0)))
    assert parse("sin x^2") == expected
    assert parse("sin(x^2)") == expected
    assert parse("sin(x)^2") == expected
    assert parse("sin(x)*2") == BinaryOp(FunctionCall("sin", Variable()), "*", NumberLiteral(2.0))


def test_constants_and_variable() -> None:
    assert isinstance(parse("pi"), NumberLiteral)
    assert parse("e").value == pytest.approx(2.718281828459045)
    assert parse("x") == Variable()


def test_parameterized_call() -> None:
    assert parse("root{3}(x)") == ParameterizedFunctionCall("root", Variable(), 3.0)
    assert parse("log{2} 8") == ParameterizedFunctionCall("log", NumberLiteral(8.0), 2.0)


def test_names_resolve_against_environment() -> None:
    env = Environment()
    env.set_value("a", 2.0)
    env.define_function("f", "x+1")
    assert parse("a", env) == Reference("a")
    tree = parse("f(a)", env)
    assert tree == FunctionCall("f", Reference("a"))
    assert referenced_names(tree) == frozenset({"a"})
    assert called_functions(tree) == frozenset({"f"})


def test_unknown_names() -> None:
    assert parse("foo") == Reference("foo")
    assert parse("foo(x)") == FunctionCall("foo", Variable())


@pytest.mark.parametrize(
    ("text", "character", "position"),
    [
        ("2+", None, 2),
        ("(1+2", None, 4),
        ("2 $", "$", 2),
        ("2x", "x", 1),
        ("X+1", "X", 0),
        ("1+*2", "*", 2),
    ],
)
def test_unexpected_token_reports_character_and_position(text: str, character, position: int) -> None:
    with pytest.raises(UnexpectedToken) as excinfo:
        parse(text)
    assert excinfo.value.character == character
    assert excinfo.value.position == position
    assert isinstance(excinfo.value, ParseError)


def test_malformed_number() -> None:
    with pytest.raises(UnexpectedToken, match="position 0"):
        parse("1.2.3")


def test_end_of_input_message() -> None:
    with pytest.raises(UnexpectedToken, match="end of input"):
        parse("3*")


def test_only_ascii_space_is_whitespace() -> None:
    assert parse("1 + 2") == BinaryOp(NumberLiteral(1.0), "+", NumberLiteral(2.0))
    with pytest.raises(UnexpectedToken) as excinfo:
        parse("1\t+2")
    assert excinfo.value.character == "\t"


def test_deep_nesting_fails_fast() -> None:
    text = "(" * 400 + "x" + ")" * 400
    with pytest.raises(NestingTooDeep) as excinfo:
        parse(text)
    assert excinfo.value.limit == EngineConfig().max_nesting_depth
    with pytest.raises(NestingTooDeep):
        parse("-" * 400 + "x")


def test_nesting_limit_is_configurable() -> None:
    assert Parser("((x))", config=EngineConfig(max_nesting_depth=3)).parse() == Variable()
    with pytest.raises(NestingTooDeep):
        Parser("(((x)))", config=EngineConfig(max_nesting_depth=3)).parse()
