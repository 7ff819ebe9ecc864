"""Property-based tests for conversion, evaluation and sampling invariants."""

from __future__ import annotations

import math

import pytest

from axiomgraph.classifier import classify
from axiomgraph.definitions import Parameter, RangeSet
from axiomgraph.domain import DiscreteDomain, IntervalDomain
from axiomgraph.evaluator import evaluate
from axiomgraph.InputConvert import InputConvert
from axiomgraph.sampling import sample_count

try:
    from hypothesis import given
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - environment-specific fallback
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)


FINITE_FLOATS = st.floats(allow_nan=False, allow_infinity=False, width=64)
NON_NEGATIVE = st.floats(min_value=0.0, max_value=1e12, allow_nan=False, allow_infinity=False)


@given(value=NON_NEGATIVE)
def test_numeric_literal_roundtrip(value: float) -> None:
    text = repr(value)
    if "e" in text:
        text = f"{value:.17f}"
    assert evaluate(text, 0.0) == float(text)


@given(value=FINITE_FLOATS)
def test_inputconvert_float_roundtrip_for_finite_reals(value: float) -> None:
    assert InputConvert(value, float, truncate=False) == value


@given(
    pixel_width=st.integers(min_value=0, max_value=5000),
    wide=st.floats(min_value=1e-6, max_value=1e6),
    factor=st.floats(min_value=1e-3, max_value=1.0),
)
def test_sample_count_monotone_and_bounded(pixel_width: int, wide: float, factor: float) -> None:
    narrow = wide * factor
    assert sample_count(pixel_width, narrow) >= sample_count(pixel_width, wide)
    assert 50 <= sample_count(pixel_width, wide) <= 5000


@given(
    lo=st.floats(min_value=-1e6, max_value=1e6),
    hi=st.floats(min_value=-1e6, max_value=1e6),
    n=st.integers(min_value=-5, max_value=20_000),
)
def test_interval_samples_stay_in_view(lo: float, hi: float, n: int) -> None:
    points = IntervalDomain().sample_points(lo, hi, n)
    if lo > hi:
        assert points.size == 0
    else:
        assert 2 <= points.size <= 10_000
        assert points[0] == lo and points[-1] == hi


@given(values=st.lists(st.integers(min_value=-50, max_value=50)), lo=st.integers(-60, 60), hi=st.integers(-60, 60))
def test_discrete_samples_are_visible_subsequence(values, lo: int, hi: int) -> None:
    points = DiscreteDomain(values).sample_points(lo, hi).tolist()
    assert points == [float(v) for v in values if lo <= v <= hi]


@given(a=st.integers(-1000, 1000), b=st.integers(-1000, 1000))
def test_range_set_normalizes_and_parameter_rejects(a: int, b: int) -> None:
    result = classify(f"s={{{a}:{b}}}")
    assert result == RangeSet("s", min(a, b), max(a, b))
    if a < b:
        assert classify(f"n=[{a}..{b}]") == Parameter("n", float(a), float(b), discrete=True)


@given(x=st.floats(min_value=-1e3, max_value=1e3))
def test_precedence_holds_for_any_x(x: float) -> None:
    assert evaluate("2+3*4", x) == 14.0
    assert evaluate("-2^2", x) == -4.0
    assert math.isclose(evaluate("x*2-x", x), x, rel_tol=1e-12, abs_tol=1e-9)
