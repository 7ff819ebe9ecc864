from __future__ import annotations

import math

import numpy as np
import pytest

from axiomgraph.classifier import classify
from axiomgraph.config import EngineConfig
from axiomgraph.environment import Environment
from axiomgraph.errors import (
    EvalError,
    InvalidFunctionParameter,
    RecursionLimit,
    UndefinedReference,
    UnknownFunction,
)
from axiomgraph.evaluator import Evaluator, evaluate
from axiomgraph.sampling import sample_curve
from axiomgraph.workspace import Workspace


@pytest.mark.parametrize("x", [-3.0, 0.0, 7.5])
def test_operator_precedence_is_independent_of_x(x: float) -> None:
    assert evaluate("2+3*4", x) == 14.0
    assert evaluate("-2^2", x) == -4.0


def test_builtins() -> None:
    assert abs(evaluate("sin(pi)", 0.0)) < 1e-10
    assert evaluate("cos(0)", 0.0) == 1.0
    assert evaluate("log(100)", 0.0) == pytest.approx(2.0)
    assert evaluate("ln(e)", 0.0) == pytest.approx(1.0)
    assert evaluate("abs(x)", -3.0) == 3.0
    assert evaluate("sqrt(16)", 0.0) == 4.0
    assert evaluate("tan(0)", 0.0) == 0.0


def test_parameterized_builtins() -> None:
    assert evaluate("root{3}(27)", 0.0) == pytest.approx(3.0)
    assert evaluate("log{2}(x)", 8.0) == pytest.approx(3.0)
    with pytest.raises(UnknownFunction, match=r"foo\{2\}"):
        evaluate("foo{2}(3)", 0.0)


def test_power_is_right_associative() -> None:
    assert evaluate("2^3^2", 0.0) == 512.0


def test_ieee_results_are_not_errors() -> None:
    assert math.isinf(evaluate("1/x", 0.0))
    assert math.isnan(evaluate("sqrt(x)", -1.0))
    assert math.isnan(evaluate("ln(x)", -1.0))
    assert math.isnan(evaluate("(0-8)^(1/3)", 0.0))


def test_vectorized_evaluation_matches_shape() -> None:
    xs = np.array([-1.0, 0.0, 1.0])
    ys = evaluate("1/x", xs)
    assert ys.shape == xs.shape
    assert ys[0] == -1.0 and math.isinf(ys[1]) and ys[2] == 1.0
    # constant expressions broadcast over x
    assert evaluate("5", xs).tolist() == [5.0, 5.0, 5.0]


def test_scalar_input_returns_float() -> None:
    assert isinstance(evaluate("x+1", 1.0), float)


def test_parameter_reference() -> None:
    env = Environment()
    env.set_value("a", 2.0)
    assert evaluate("a*x", 3.0, env) == 6.0
    env.set_value("a", -1.0)
    assert evaluate("a*x", 3.0, env) == -3.0


def test_undefined_reference_and_unknown_function() -> None:
    with pytest.raises(UndefinedReference) as excinfo:
        evaluate("b+1", 0.0)
    assert excinfo.value.name == "b"
    with pytest.raises(UnknownFunction):
        evaluate("foo(x)", 0.0)


def test_named_function_then_use() -> None:
    env = Environment()
    classify("f(x)=x^2", env)
    assert evaluate("f(x)+1", 3.0, env) == 10.0


def test_user_function_names_are_case_insensitive() -> None:
    env = Environment()
    env.define_function("G", "2*x")
    assert evaluate("g(4)", 0.0, env) == 8.0


def test_nested_user_functions() -> None:
    env = Environment()
    env.define_function("f", "x+1")
    env.define_function("h", "f(x)*f(x)")
    assert evaluate("h(2)", 0.0, env) == 9.0


def test_direct_recursion_hits_depth_guard() -> None:
    env = Environment()
    env.define_function("f", "f(x)+1")
    with pytest.raises(RecursionLimit) as excinfo:
        evaluate("f(1)", 0.0, env)
    assert excinfo.value.depth == EngineConfig().max_call_depth
    assert isinstance(excinfo.value, EvalError)


def test_mutual_recursion_hits_configured_depth() -> None:
    env = Environment()
    env.define_function("f", "g(x)")
    env.define_function("g", "f(x)")
    evaluator = Evaluator(env, config=EngineConfig(max_call_depth=5))
    with pytest.raises(RecursionLimit) as excinfo:
        evaluator.evaluate("f(0)", 0.0)
    assert excinfo.value.depth == 5


def test_function_callable() -> None:
    fn = Evaluator().function("x^2")
    assert fn(3.0) == 9.0
    assert fn(np.array([1.0, 2.0])).tolist() == [1.0, 4.0]


def test_root_of_degree_zero_is_an_eval_error() -> None:
    with pytest.raises(InvalidFunctionParameter) as excinfo:
        evaluate("root{0}(8)", 0.0)
    assert excinfo.value.parameter == 0.0
    assert isinstance(excinfo.value, EvalError)


def test_root_of_degree_zero_breaks_sampling_not_the_caller() -> None:
    assert sample_curve(Evaluator().function("root{0}(x)"), -1.0, 1.0, 20).points == []
    ws = Workspace()
    ws.add("root{0}(x)")
    assert ws.points_for("#1").points == []
    with pytest.raises(EvalError):
        ws.add("k=root{0}(8)")
    assert "k" not in ws


def test_log_with_base_zero_falls_back_to_base_ten() -> None:
    assert evaluate("log{0}(100)", 0.0) == pytest.approx(2.0)


def test_long_operator_chain_fails_as_eval_error() -> None:
    text = "+".join(["x"] * 5000)
    with pytest.raises(EvalError):
        evaluate(text, 1.0)


def test_depth_guard_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    env = Environment()
    env.define_function("f", "f(x)")
    with caplog.at_level("DEBUG", logger="axiomgraph.evaluator"):
        with pytest.raises(RecursionLimit):
            Evaluator(env, config=EngineConfig(max_call_depth=3)).evaluate("f(0)", 0.0)
    assert "Call depth limit 3 hit in f(...)" in caplog.text
