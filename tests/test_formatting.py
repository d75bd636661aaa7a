import math

import pytest

from scicalc_pkg.utils.formatting import DisplayFormat
from scicalc_pkg.utils.formatting import format_engineering
from scicalc_pkg.utils.formatting import format_fraction
from scicalc_pkg.utils.formatting import format_normal
from scicalc_pkg.utils.formatting import format_result
from scicalc_pkg.utils.formatting import format_scientific


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.0, "0"),
        (120.0, "120"),
        (-2.5, "-2.5"),
        (1 / 3, "0.3333333333"),
        (2 / 3, "0.6666666667"),
        (0.1 + 0.2, "0.3"),
        (123456789.0, "123456789"),
        (1e10, "1×10^10"),
        (9999999999.99, "1×10^10"),
        (1.5e-10, "1.5×10^-10"),
    ],
)
def test_normal(value, expected):
    assert format_normal(value) == expected


def test_scientific():
    assert format_scientific(12345.0) == "1.2345×10^4"
    assert format_scientific(-0.00025) == "-2.5×10^-4"
    assert format_scientific(0.0) == "0"


def test_engineering_exponent_multiple_of_three():
    assert format_engineering(12345.0) == "12.345×10^3"
    assert format_engineering(0.00012) == "120×10^-6"
    assert format_engineering(1.5) == "1.5×10^0"
    assert format_engineering(-4.7e7) == "-47×10^6"


def test_fixed():
    assert format_result(math.pi, DisplayFormat.FIX, 4) == "3.1416"
    assert format_result(-0.0001, DisplayFormat.FIX, 2) == "0.00"


def test_format_result_dispatch():
    assert format_result(1500.0) == "1500"
    assert format_result(1500.0, DisplayFormat.SCIENTIFIC) == "1.5×10^3"
    assert format_result(1500.0, DisplayFormat.ENGINEERING) == "1.5×10^3"


def test_fraction():
    assert format_fraction(0.5) == "1/2"
    assert format_fraction(1 / 3) == "1/3"
    assert format_fraction(-0.75) == "-3/4"
    assert format_fraction(4.0) == "4"


def test_fraction_falls_back_to_decimal():
    assert format_fraction(math.pi) == format_normal(math.pi)
