import math

from ..config import FACTORIAL_LIMIT
from ..config import MAX_MAGNITUDE
from ..types import MathError
from ..types import MathReason


def check_representable(value: float) -> float:
    """Return ``value`` if the display can show it, else raise MathError.

    NaN means the operation had no real answer (domain); infinities and
    magnitudes at or beyond MAX_MAGNITUDE are overflow.
    """
    if math.isnan(value):
        raise MathError(MathReason.DOMAIN, "Result is not a real number")
    if math.isinf(value) or abs(value) >= MAX_MAGNITUDE:
        raise MathError(MathReason.OVERFLOW, f"Result exceeds ±{MAX_MAGNITUDE:g}")
    if value == 0:
        return 0.0  # drop the sign of -0.0
    return float(value)


def require_nonnegative_integer(value: float, what: str) -> int:
    """Convert ``value`` to int, raising MathError(domain) unless it is a whole number >= 0."""
    if value < 0 or not float(value).is_integer():
        raise MathError(
            MathReason.DOMAIN, f"{what} must be a non-negative integer, got {value!r}"
        )
    return int(value)


def factorial(value: float) -> float:
    n = require_nonnegative_integer(value, "Factorial argument")
    if n > FACTORIAL_LIMIT:
        raise MathError(MathReason.OVERFLOW, f"{n}! exceeds the display range")
    return float(math.factorial(n))


def _check_combinatoric_args(n_value: float, r_value: float) -> tuple[int, int]:
    n = require_nonnegative_integer(n_value, "n")
    r = require_nonnegative_integer(r_value, "r")
    if r > n:
        raise MathError(MathReason.DOMAIN, f"r ({r}) must not exceed n ({n})")
    return n, r


def combinations(n_value: float, r_value: float) -> float:
    """nCr computed as a telescoped product so no factorial is ever formed.

    Every partial product C(n, i+1) = C(n, i) * (n - i) / (i + 1) is an exact
    integer, and the partials grow monotonically for i < r <= n/2, so the
    loop can stop as soon as one leaves the display range.
    """
    n, r = _check_combinatoric_args(n_value, r_value)
    r = min(r, n - r)
    result = 1
    for i in range(r):
        result = result * (n - i) // (i + 1)
        if result >= MAX_MAGNITUDE:
            raise MathError(MathReason.OVERFLOW, f"{n}C{r} exceeds the display range")
    return float(result)


def permutations(n_value: float, r_value: float) -> float:
    """nPr = n·(n-1)···(n-r+1)."""
    n, r = _check_combinatoric_args(n_value, r_value)
    result = 1
    for factor in range(n, n - r, -1):
        result *= factor
        if result >= MAX_MAGNITUDE:
            raise MathError(MathReason.OVERFLOW, f"{n}P{r} exceeds the display range")
    return float(result)


def power(base: float, exponent: float) -> float:
    """Real-valued exponentiation with calculator error semantics."""
    if base == 0:
        if exponent < 0:
            raise MathError(MathReason.DIVIDE_BY_ZERO, "0 raised to a negative power")
        if exponent == 0:
            raise MathError(MathReason.DOMAIN, "0^0 is undefined")
        return 0.0
    if base < 0 and not float(exponent).is_integer():
        raise MathError(
            MathReason.DOMAIN, "Fractional power of a negative number is not real"
        )
    try:
        result = math.pow(base, exponent)
    except OverflowError:
        raise MathError(MathReason.OVERFLOW, "Power exceeds the display range") from None
    return check_representable(result)
