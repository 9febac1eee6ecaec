"""
Tests for the built-in functions, variables and operators.
"""

import math

import pytest

from opexpr import (
    DEFAULT_VARIABLES,
    ExpressionBuilder,
    MinArgsFunction,
    MissingFunctionArgumentsError,
    MissingFunctionError,
    bi_function,
    call_function,
    default_functions,
    mono_function,
    with_min_args,
)


def eval_expr(expression: str, builder: ExpressionBuilder | None = None) -> float:
    """Helper to build and evaluate an expression."""
    builder = builder or ExpressionBuilder()
    return builder.build(expression).evaluate()


def comparative_builder() -> ExpressionBuilder:
    return ExpressionBuilder().with_comparative_operators()


class TestFunctionWrappers:
    """Tests for function adapters."""

    def test_mono_function(self):
        double = mono_function("double", lambda x: x * 2)
        assert double([4.0]) == 8.0
        assert double([4.0, 9.0]) == 8.0

    def test_mono_function_requires_argument(self):
        double = mono_function("double", lambda x: x * 2)
        with pytest.raises(MissingFunctionArgumentsError):
            double([])

    def test_bi_function(self):
        minus = bi_function("minus", lambda a, b: a - b)
        assert minus([5.0, 3.0]) == 2.0
        with pytest.raises(MissingFunctionArgumentsError):
            minus([5.0])

    def test_with_min_args(self):
        function = with_min_args("f", sum, 2)
        assert isinstance(function, MinArgsFunction)
        assert function([1.0, 2.0]) == 3.0

    def test_without_min_args(self):
        assert with_min_args("f", sum, None) is sum
        assert with_min_args("f", sum, 0) is sum

    def test_call_function(self):
        assert call_function("max", [1.0, 3.0], default_functions()) == 3.0

    def test_call_missing_function(self):
        with pytest.raises(MissingFunctionError):
            call_function("nope", [], default_functions())

    def test_default_functions_are_fresh(self):
        functions = default_functions()
        functions["cos"] = sum
        assert default_functions()["cos"] is not sum


class TestDefaultVariables:
    """Tests for the default variables."""

    def test_constants(self):
        assert DEFAULT_VARIABLES["π"] == math.pi
        assert DEFAULT_VARIABLES["e"] == math.e
        assert DEFAULT_VARIABLES["φ"] == pytest.approx(1.618033988749895)
        assert DEFAULT_VARIABLES["∞"] == math.inf

    def test_aliases(self):
        assert DEFAULT_VARIABLES["pi"] == DEFAULT_VARIABLES["π"]
        assert DEFAULT_VARIABLES["phi"] == DEFAULT_VARIABLES["ϕ"] == DEFAULT_VARIABLES["φ"]
        assert DEFAULT_VARIABLES["inf"] == DEFAULT_VARIABLES["∞"]


class TestDefaultFunctions:
    """Tests for the default functions."""

    def test_trigonometry(self):
        assert eval_expr("cos(0)") == 1
        assert eval_expr("sin(0)") == 0
        assert eval_expr("tan(0)") == 0

    def test_trigonometry_of_infinity(self):
        assert math.isnan(eval_expr("sin(inf)"))

    def test_roots(self):
        assert eval_expr("sqrt(16)") == 4
        assert eval_expr("cbrt(27)") == pytest.approx(3)

    def test_negative_square_root(self):
        assert math.isnan(eval_expr("sqrt(-1)"))

    def test_logarithms(self):
        assert eval_expr("log(e)") == pytest.approx(1)
        assert eval_expr("log10(1000)") == pytest.approx(3)
        assert eval_expr("log(0)") == -math.inf
        assert math.isnan(eval_expr("log(-1)"))

    def test_fibonacci(self):
        assert eval_expr("fib(10)") == 55
        assert eval_expr("fib(1)") == 1
        assert eval_expr("fib(0)") == 0

    def test_rounding(self):
        assert eval_expr("floor(2.7)") == 2
        assert eval_expr("ceiling(2.1)") == 3
        assert eval_expr("ceil(2.1)") == 3
        assert eval_expr("truncate(-2.7)") == -2
        assert eval_expr("trunc(2.7)") == 2

    def test_round_half_up(self):
        assert eval_expr("round(2.5)") == 3
        assert eval_expr("round(-2.5)") == -2
        assert eval_expr("round(2.4)") == 2

    def test_rounding_passes_infinity_through(self):
        assert eval_expr("floor(inf)") == math.inf

    def test_min_max(self):
        assert eval_expr("min(4, 2, 8)") == 2
        assert eval_expr("max(4, 2, 8)") == 8

    def test_average(self):
        assert eval_expr("avg(5, 8, 9, 11)") == pytest.approx(8.25)

    def test_median(self):
        assert eval_expr("median(3, 1, 2)") == 2
        assert eval_expr("median(4, 1, 3, 2)") == 2.5


class TestArithmeticEdgeCases:
    """Tests for IEEE-style results where Python would raise."""

    def test_division_by_zero(self):
        assert eval_expr("1 / 0") == math.inf
        assert eval_expr("-1 / 0") == -math.inf
        assert math.isnan(eval_expr("0 / 0"))

    def test_modulo_by_zero(self):
        assert math.isnan(eval_expr("5 % 0"))

    def test_modulo_sign_follows_dividend(self):
        assert eval_expr("-7 % 3") == -1

    def test_power_overflow(self):
        assert eval_expr("10 ^ 400") == math.inf

    def test_zero_to_negative_power(self):
        assert eval_expr("0 ^ -1") == math.inf

    def test_fractional_power_of_negative(self):
        assert math.isnan(eval_expr("(0 - 8) ^ 0.5"))


class TestComparativeOperators:
    """Tests for comparison, equality and logical operators."""

    def test_comparisons(self):
        builder = comparative_builder()
        assert eval_expr("3 < 5", builder) == 1
        assert eval_expr("3 > 5", builder) == 0
        assert eval_expr("3 <= 3", builder) == 1
        assert eval_expr("3 ≤ 2", builder) == 0
        assert eval_expr("4 >= 5", builder) == 0
        assert eval_expr("5 ≥ 5", builder) == 1

    def test_equality(self):
        builder = comparative_builder()
        assert eval_expr("2 = 2", builder) == 1
        assert eval_expr("2 != 2", builder) == 0
        assert eval_expr("2 ≠ 3", builder) == 1
        assert eval_expr("2 =/= 3", builder) == 1

    def test_equality_tolerates_rounding(self):
        assert eval_expr("0.1 + 0.2 = 0.3", comparative_builder()) == 1

    def test_logic(self):
        builder = comparative_builder()
        assert eval_expr("1 && 0", builder) == 0
        assert eval_expr("1 || 0", builder) == 1
        assert eval_expr("!0", builder) == 1
        assert eval_expr("!1", builder) == 0

    def test_priorities(self):
        builder = comparative_builder()
        assert eval_expr("1 < 2 && 3 > 4", builder) == 0
        assert eval_expr("1 < 2 || 3 > 4", builder) == 1
        assert eval_expr("1 + 1 = 2", builder) == 1

    def test_conditional_on_comparison(self):
        assert eval_expr("2 > 1 ? 10 : 20", comparative_builder()) == 10

    def test_without_defaults(self):
        builder = ExpressionBuilder(include_defaults=False).with_comparative_operators()
        assert eval_expr("1 ? 2 < 3 : 0", builder) == 1
