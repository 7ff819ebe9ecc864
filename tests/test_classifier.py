from __future__ import annotations

import math

import pytest

from axiomgraph.classifier import RULES, classify
from axiomgraph.definitions import (
    Constant,
    Equation,
    ExplicitSet,
    Inequation,
    Parameter,
    Point,
    RangeSet,
    RegularFunction,
    display_string,
)
from axiomgraph.environment import Environment
from axiomgraph.errors import (
    DefinitionError,
    InvalidRange,
    MalformedParameter,
    MalformedPoint,
    MalformedSet,
    UndefinedReference,
)


def test_rule_order() -> None:
    assert [label for label, _ in RULES] == [
        "inequation",
        "equation",
        "named function",
        "parameter",
        "set",
        "point",
        "constant",
        "anonymous function",
    ]


def test_equation() -> None:
    assert classify("(x^2=2*x+1)") == Equation(None, "x^2", "2*x+1")
    assert classify("  ( sin(x) = 0.5 )  ") == Equation(None, "sin(x)", "0.5")


@pytest.mark.parametrize(
    ("line", "left", "op", "right"),
    [
        ("(x^2>=4)", "x^2", ">=", "4"),
        ("(x <= 1)", "x", "<=", "1"),
        ("(x>2)", "x", ">", "2"),
        ("(sin(x) < cos(x))", "sin(x)", "<", "cos(x)"),
    ],
)
def test_inequation_operators(line: str, left: str, op: str, right: str) -> None:
    assert classify(line) == Inequation(None, left, op, right)


def test_two_character_operator_is_not_split_as_single() -> None:
    result = classify("(x>=2)")
    assert isinstance(result, Inequation)
    assert result.operator == ">="
    assert result.right == "2"


def test_inequation_rule_skips_sides_with_equals_sign() -> None:
    result = classify("(x<2=3)")
    assert not isinstance(result, Inequation)
    assert result == Equation(None, "x<2", "3")
    assert classify("(x=2<3)") == Equation(None, "x", "2<3")


def test_named_function_registers_in_environment() -> None:
    env = Environment()
    assert classify("F(x) = x+1", env) == RegularFunction("f", "x+1")
    assert env.function_source("f") == "x+1"


def test_parameters() -> None:
    assert classify("a=[1:5]") == Parameter("a", 1.0, 5.0, discrete=False)
    assert classify("a = [-2.5 : 3]") == Parameter("a", -2.5, 3.0, discrete=False)
    assert classify("n=[1..5]") == Parameter("n", 1.0, 5.0, discrete=True)


@pytest.mark.parametrize("line", ["name=[5:2]", "name=[2:2]", "n=[5..1]"])
def test_parameter_range_must_increase(line: str) -> None:
    with pytest.raises(InvalidRange):
        classify(line)


def test_malformed_parameter() -> None:
    with pytest.raises(MalformedParameter):
        classify("a=[x:2]")


def test_sets() -> None:
    assert classify("s={1,2,5}") == ExplicitSet("s", (1.0, 2.0, 5.0))
    assert classify("s={1.5, -2, .5}") == ExplicitSet("s", (1.5, -2.0, 0.5))
    assert classify("s={}") == ExplicitSet("s", ())


def test_range_set_normalizes_order() -> None:
    result = classify("name={5:2}")
    assert result == RangeSet("name", 2, 5)
    assert result.values == (2.0, 3.0, 4.0, 5.0)


def test_malformed_set() -> None:
    with pytest.raises(MalformedSet):
        classify("s={1,a}")


def test_points() -> None:
    assert classify("p=(1,2)") == Point("p", "1", "2")
    assert classify("p=(f(1,2), 3)") == Point("p", "f(1,2)", "3")
    assert classify("p=( a , sin(x)*2 )") == Point("p", "a", "sin(x)*2")


@pytest.mark.parametrize("line", ["p=(1,2,3)", "p=(1,)", "p=((1,2)"])
def test_malformed_points(line: str) -> None:
    with pytest.raises(MalformedPoint):
        classify(line)


def test_constants() -> None:
    k = classify("k=2*pi")
    assert isinstance(k, Constant)
    assert k.value == pytest.approx(2 * math.pi)
    # parentheses without a comma are an expression, not a point
    assert classify("k=(1+2)").value == 3.0
    assert classify("k=(1+2)*(3)").value == 9.0


def test_constant_reads_current_values() -> None:
    env = Environment()
    env.set_value("a", 2.0)
    assert classify("k=a*3", env) == Constant("k", "a*3", 6.0)
    with pytest.raises(UndefinedReference):
        classify("k=b+1")


def test_fallback_is_anonymous_function() -> None:
    assert classify("  x^2+1  ") == RegularFunction(None, "x^2+1")
    assert classify("(x+1)*(x-1)") == RegularFunction(None, "(x+1)*(x-1)")
    assert classify("y=x^2") == RegularFunction(None, "y=x^2")


@pytest.mark.parametrize("line", ["sin(x)=x", "pi=[1:2]", "x=3", "e={1,2}"])
def test_reserved_names_are_rejected(line: str) -> None:
    with pytest.raises(DefinitionError, match="reserved"):
        classify(line)


@pytest.mark.parametrize(
    "line",
    ["(x^2 = 2*x+1)", "(x >= 1)", "f(x)=x^2", "a=[1:5]", "n=[1..5]", "s={1,4,9}", "p=(1, 2)"],
)
def test_display_string_reclassifies_to_same_definition(line: str) -> None:
    definition = classify(line)
    assert classify(display_string(definition)) == definition


def test_display_string_collapses_consecutive_runs() -> None:
    assert display_string(ExplicitSet("s", (3.0, 1.0, 2.0))) == "s={1:3}"
    assert display_string(RangeSet("r", 1, 4)) == "r={1:4}"
    assert display_string(ExplicitSet("s", (1.0, 3.0))) == "s={1,3}"
    assert display_string(Parameter("a", 0.5, 2.0)) == "a=[0.5:2]"
    assert display_string(Constant("k", "1+1", 2.0)) == "k=2"
