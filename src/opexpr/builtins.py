"""
Built-in functions, variables and operators.

All built-in functions are pure and deterministic, and follow IEEE 754
semantics where Python's math module would otherwise raise: out-of-domain
inputs give NaN and overflow gives an infinity.
"""

import math
from typing import Callable, Dict, Optional, Sequence, Tuple

from .errors import MissingFunctionArgumentsError, MissingFunctionError
from .operators import (
    Associativity,
    InfixOperator,
    Operator,
    PostfixOperator,
    PrefixOperator,
)
from .tokens import Token

# Signature of a function callable from expressions.
ExprFunction = Callable[[Sequence[float]], float]

# Function registry for built-in and injected functions.
FunctionRegistry = Dict[str, ExprFunction]

# Variable registry.
VariableRegistry = Dict[str, float]

PHI = (1 + math.sqrt(5)) / 2


class MinArgsFunction:
    """Wraps a function so that calling it with too few arguments fails."""

    def __init__(self, name: str, function: ExprFunction, min_args: int):
        self.name = name
        self.function = function
        self.min_args = min_args

    def __call__(self, args: Sequence[float]) -> float:
        if len(args) < self.min_args:
            raise MissingFunctionArgumentsError(self.name, self.min_args, len(args))
        return self.function(args)

    def __repr__(self) -> str:
        return f"MinArgsFunction({self.name!r}, min_args={self.min_args})"


def with_min_args(name: str, function: ExprFunction, min_args: Optional[int]) -> ExprFunction:
    """Wraps ``function`` with a minimum argument count, if one is given."""
    if min_args is None or min_args <= 0:
        return function
    return MinArgsFunction(name, function, min_args)


def mono_function(name: str, function: Callable[[float], float]) -> ExprFunction:
    """Adapts a single-argument function; further arguments are ignored."""
    return MinArgsFunction(name, lambda args: function(args[0]), 1)


def bi_function(name: str, function: Callable[[float, float], float]) -> ExprFunction:
    """Adapts a two-argument function; further arguments are ignored."""
    return MinArgsFunction(name, lambda args: function(args[0], args[1]), 2)


# ============================================================
# Arithmetic Helpers
# ============================================================


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _modulo(left: float, right: float) -> float:
    # Sign follows the dividend.
    if right == 0 or math.isinf(left) or math.isnan(left) or math.isnan(right):
        return math.nan
    return math.fmod(left, right)


def _power(base: float, exponent: float) -> float:
    if base == 0 and exponent < 0:
        return math.inf
    if base < 0 and math.isfinite(exponent) and not float(exponent).is_integer():
        return math.nan
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and float(exponent).is_integer() and exponent % 2 == 1:
            return -math.inf
        return math.inf


def _nth_root(n: float, x: float) -> float:
    return _power(x, _divide(1.0, n))


def _sqrt(x: float) -> float:
    return math.nan if x < 0 else math.sqrt(x)


def _log(x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0 or math.isnan(x):
        return math.nan
    return math.log(x)


def _log10(x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0 or math.isnan(x):
        return math.nan
    return math.log10(x)


def _trig(function: Callable[[float], float]) -> Callable[[float], float]:
    def apply(x: float) -> float:
        return math.nan if math.isinf(x) else function(x)

    return apply


def _finite_only(function: Callable[[float], int]) -> Callable[[float], float]:
    """Applies an integer-producing function to finite values, passing others through."""

    def apply(x: float) -> float:
        return float(function(x)) if math.isfinite(x) else x

    return apply


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def _fib(n: float) -> float:
    result = (_power(PHI, n) - _power(-PHI, -n)) / math.sqrt(5)
    if math.isfinite(n) and math.isfinite(result) and math.fmod(n, 1) == 0:
        return float(_round_half_up(result))
    return result


def _min(args: Sequence[float]) -> float:
    return min(args)


def _max(args: Sequence[float]) -> float:
    return max(args)


def _avg(args: Sequence[float]) -> float:
    # Running mean, to avoid overflowing on large sums.
    avg = args[0]
    for i in range(1, len(args)):
        avg += (args[i] - avg) / (i + 1)
    return avg


def _median(args: Sequence[float]) -> float:
    ordered = sorted(args)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle] + ordered[middle - 1]) / 2
    return ordered[middle]


def _truthy(x: float) -> bool:
    return x >= 0.5


def _equal(left: float, right: float) -> bool:
    # Equal to within two units in the last place of the left operand.
    delta = math.ulp(left) * 2
    return left - delta < right < left + delta


# ============================================================
# Registries
# ============================================================


def _binary(
    token: str,
    priority: float,
    action: Callable[[float, float], float],
    associativity: Associativity = Associativity.LEFT,
) -> InfixOperator:
    return InfixOperator((Token(token),), priority, action, associativity)


# Default operators, in registration order.
DEFAULT_OPERATORS: Tuple[Operator, ...] = (
    _binary("-", 100, lambda a, b: a - b),
    _binary("+", 100, lambda a, b: a + b),
    _binary("/", 200, _divide),
    _binary("÷", 200, _divide),
    _binary("*", 200, lambda a, b: a * b),
    _binary("×", 200, lambda a, b: a * b),
    _binary("%", 300, _modulo),
    PrefixOperator((Token("-"),), 500, lambda x: -x),
    PrefixOperator((Token("+"),), 500, lambda x: +x),
    _binary("√", 600, _nth_root, Associativity.RIGHT),
    PrefixOperator((Token("√"),), 700, _sqrt),
    _binary("^", 800, _power, Associativity.RIGHT),
    PostfixOperator((Token("%"),), 900, lambda x: x / 100),
    InfixOperator(
        (Token("?"), Token(":")),
        -600,
        lambda a, b, c: b if _truthy(a) else c,
        Associativity.RIGHT,
    ),
)


def _not_equal(left: float, right: float) -> float:
    return 0.0 if _equal(left, right) else 1.0


def _and(left: float, right: float) -> float:
    return 1.0 if _truthy(left) and _truthy(right) else 0.0


def _or(left: float, right: float) -> float:
    return 1.0 if _truthy(left) or _truthy(right) else 0.0


# Comparison, equality and logical operators. Results are 1 for true and 0
# for false; operands of 0.5 or more count as true. Tokens that contain
# another token are registered after it, so they're split first.
COMPARATIVE_OPERATORS: Tuple[Operator, ...] = (
    PrefixOperator((Token("!"),), -100, lambda x: 0.0 if _truthy(x) else 1.0),
    _binary("<", -200, lambda a, b: 1.0 if a < b else 0.0),
    _binary(">", -200, lambda a, b: 1.0 if a > b else 0.0),
    _binary("=", -300, lambda a, b: 1.0 if _equal(a, b) else 0.0),
    _binary("<=", -200, lambda a, b: 1.0 if a <= b else 0.0),
    _binary("≤", -200, lambda a, b: 1.0 if a <= b else 0.0),
    _binary(">=", -200, lambda a, b: 1.0 if a >= b else 0.0),
    _binary("≥", -200, lambda a, b: 1.0 if a >= b else 0.0),
    _binary("!=", -300, _not_equal),
    _binary("≠", -300, _not_equal),
    _binary("=/=", -300, _not_equal),
    _binary("&&", -400, _and),
    _binary("∧", -400, _and),
    _binary("⋀", -400, _and),
    _binary("⋏", -400, _and),
    _binary("||", -500, _or),
    _binary("∨", -500, _or),
    _binary("⋁", -500, _or),
    _binary("⋎", -500, _or),
    InfixOperator(
        (Token("?"), Token(":")),
        -600,
        lambda a, b, c: b if _truthy(a) else c,
        Associativity.RIGHT,
    ),
)


def default_functions() -> FunctionRegistry:
    """Returns a new registry of the default functions."""
    functions: FunctionRegistry = {}

    for name, function in (
        ("cos", _trig(math.cos)),
        ("sin", _trig(math.sin)),
        ("tan", _trig(math.tan)),
        ("sqrt", _sqrt),
        ("cbrt", math.cbrt),
        ("log", _log),
        ("log10", _log10),
        ("fib", _fib),
        ("floor", _finite_only(math.floor)),
        ("ceiling", _finite_only(math.ceil)),
        ("ceil", _finite_only(math.ceil)),
        ("truncate", _finite_only(math.trunc)),
        ("trunc", _finite_only(math.trunc)),
        ("round", _finite_only(_round_half_up)),
    ):
        functions[name] = mono_function(name, function)

    for name, variadic in (
        ("min", _min),
        ("max", _max),
        ("avg", _avg),
        ("median", _median),
    ):
        functions[name] = MinArgsFunction(name, variadic, 1)

    return functions


# Registry of the default variables.
DEFAULT_VARIABLES: VariableRegistry = {
    "π": math.pi,
    "pi": math.pi,
    "e": math.e,
    "ϕ": PHI,
    "φ": PHI,
    "phi": PHI,
    "∞": math.inf,
    "inf": math.inf,
}


def call_function(
    name: str,
    args: Sequence[float],
    functions: FunctionRegistry,
) -> float:
    """
    Calls a registered function by name.

    Args:
        name: The function name
        args: The evaluated arguments
        functions: The function registry to look the name up in

    Returns:
        The function result

    Raises:
        MissingFunctionError: If the function isn't registered
        MissingFunctionArgumentsError: If too few arguments were given
    """
    function = functions.get(name)
    if function is None:
        raise MissingFunctionError(name)
    return float(function(args))
