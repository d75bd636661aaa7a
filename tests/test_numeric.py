import math
import unittest

from scicalc_pkg.types import MathError
from scicalc_pkg.types import MathReason
from scicalc_pkg.utils.numeric import check_representable
from scicalc_pkg.utils.numeric import combinations
from scicalc_pkg.utils.numeric import factorial
from scicalc_pkg.utils.numeric import permutations
from scicalc_pkg.utils.numeric import power


class TestCombinatorics(unittest.TestCase):
    def test_matches_math_comb(self):
        for n in range(0, 30):
            for r in range(0, n + 1):
                self.assertEqual(combinations(n, r), float(math.comb(n, r)))
                self.assertEqual(permutations(n, r), float(math.perm(n, r)))

    def test_accepts_integral_floats(self):
        self.assertEqual(combinations(10.0, 3.0), 120)

    def test_huge_n_small_r_is_fast(self):
        self.assertEqual(combinations(1e9, 1), 1e9)

    def test_huge_n_large_r_overflows_quickly(self):
        with self.assertRaises(MathError) as cm:
            combinations(1e9, 5e8)
        self.assertEqual(cm.exception.reason, MathReason.OVERFLOW)
        with self.assertRaises(MathError) as cm:
            permutations(1e9, 1e9)
        self.assertEqual(cm.exception.reason, MathReason.OVERFLOW)


class TestFactorial(unittest.TestCase):
    def test_values(self):
        self.assertEqual(factorial(0), 1)
        self.assertEqual(factorial(10), 3628800)

    def test_limit(self):
        self.assertEqual(factorial(69), float(math.factorial(69)))
        with self.assertRaises(MathError) as cm:
            factorial(70)
        self.assertEqual(cm.exception.reason, MathReason.OVERFLOW)


class TestPower(unittest.TestCase):
    def test_integer_power_of_negative_base(self):
        self.assertEqual(power(-3, 2), 9)

    def test_math_overflow_error_is_mapped(self):
        with self.assertRaises(MathError) as cm:
            power(10, 400)
        self.assertEqual(cm.exception.reason, MathReason.OVERFLOW)


class TestCheckRepresentable(unittest.TestCase):
    def test_nan_is_domain(self):
        with self.assertRaises(MathError) as cm:
            check_representable(float("nan"))
        self.assertEqual(cm.exception.reason, MathReason.DOMAIN)

    def test_inf_is_overflow(self):
        with self.assertRaises(MathError) as cm:
            check_representable(float("-inf"))
        self.assertEqual(cm.exception.reason, MathReason.OVERFLOW)

    def test_boundary(self):
        self.assertEqual(check_representable(9.999999999e99), 9.999999999e99)
        with self.assertRaises(MathError):
            check_representable(1e100)


if __name__ == "__main__":
    unittest.main()
