"""Display formatting for evaluation results.

These helpers only decide how a finished number looks on the display.
They never change the value, and the evaluator never depends on them.
"""

import logging
import math
from enum import Enum

import sympy as sp

from ..config import DISPLAY_DIGITS
from ..config import FRACTION_MAX_DENOMINATOR

logger = logging.getLogger(__name__)

# NORMAL switches to exponent form outside this window
NORMAL_MIN = 1e-9
NORMAL_MAX = 1e10
NORMAL_MAX_EXPONENT = int(math.log10(NORMAL_MAX))


class DisplayFormat(Enum):
    NORMAL = "norm"
    SCIENTIFIC = "sci"
    ENGINEERING = "eng"
    FIX = "fix"


def _trim(num_str: str) -> str:
    """Remove trailing zeros and a dangling decimal point."""
    if "." in num_str:
        num_str = num_str.rstrip("0").rstrip(".")
    return num_str


def _split_scientific(value: float, digits: int) -> tuple[str, int]:
    """Round to ``digits`` significant digits; return (mantissa, exponent)."""
    mantissa, exponent = f"{value:.{digits - 1}e}".split("e")
    return mantissa, int(exponent)


def format_scientific(value: float, digits: int = DISPLAY_DIGITS) -> str:
    if value == 0:
        return "0"
    mantissa, exponent = _split_scientific(value, digits)
    return f"{_trim(mantissa)}×10^{exponent}"


def format_engineering(value: float, digits: int = DISPLAY_DIGITS) -> str:
    """Scientific notation with the exponent snapped down to a multiple of 3."""
    if value == 0:
        return "0"
    _, exponent = _split_scientific(value, digits)
    eng_exponent = exponent - exponent % 3
    shift = exponent - eng_exponent  # 0, 1 or 2 digits before the point move left
    rounded = float(f"{value:.{digits - 1}e}")
    mantissa = rounded / 10.0**eng_exponent
    decimals = max(0, digits - 1 - shift)
    return f"{_trim(f'{mantissa:.{decimals}f}')}×10^{eng_exponent}"


def format_normal(value: float, digits: int = DISPLAY_DIGITS) -> str:
    if value == 0:
        return "0"
    magnitude = abs(value)
    if magnitude < NORMAL_MIN or magnitude >= NORMAL_MAX:
        return format_scientific(value, digits)
    _, exponent = _split_scientific(value, digits)
    if exponent >= NORMAL_MAX_EXPONENT:
        # rounding carried 9999999999.9 up to 1×10^10
        return format_scientific(value, digits)
    decimals = max(0, digits - 1 - exponent)
    return _trim(f"{value:.{decimals}f}")


def format_fixed(value: float, places: int) -> str:
    text = f"{value:.{places}f}"
    if float(text) == 0:
        text = text.lstrip("-")
    return text


def format_result(
    value: float,
    fmt: DisplayFormat = DisplayFormat.NORMAL,
    fix_digits: int = 2,
) -> str:
    """Render ``value`` the way the display would in the given mode."""
    if fmt is DisplayFormat.SCIENTIFIC:
        return format_scientific(value)
    if fmt is DisplayFormat.ENGINEERING:
        return format_engineering(value)
    if fmt is DisplayFormat.FIX:
        return format_fixed(value, fix_digits)
    return format_normal(value)


def format_fraction(
    value: float, max_denominator: int = FRACTION_MAX_DENOMINATOR
) -> str:
    """S<->D key: show ``value`` as p/q when a short fraction matches it.

    Falls back to the NORMAL decimal rendering when no fraction with a
    denominator up to ``max_denominator`` reproduces the displayed digits.
    """
    exact = sp.Rational(repr(value))
    approx = exact.limit_denominator(max_denominator)
    tolerance = 10.0 ** -(DISPLAY_DIGITS - 1) * max(1.0, abs(value))
    if abs(float(approx) - value) > tolerance:
        logger.debug("No fraction for %r within denominator %d", value, max_denominator)
        return format_normal(value)
    if approx.q == 1:
        return str(approx.p)
    return f"{approx.p}/{approx.q}"
