import unittest

from scicalc_pkg import api
from scicalc_pkg.state import AngleMode
from scicalc_pkg.state import CalculatorContext
from scicalc_pkg.types import CalcSyntaxError
from scicalc_pkg.types import MathError
from scicalc_pkg.utils.formatting import DisplayFormat


class TestEvaluateExpression(unittest.TestCase):
    def setUp(self):
        self.ctx = CalculatorContext()

    def test_value(self):
        self.assertEqual(api.evaluate_expression("nCr(5,2)+1", self.ctx), 11)

    def test_errors_propagate_typed(self):
        with self.assertRaises(CalcSyntaxError):
            api.evaluate_expression("2(", self.ctx)
        with self.assertRaises(MathError):
            api.evaluate_expression("1/0", self.ctx)

    def test_does_not_touch_history_or_ans(self):
        api.evaluate_expression("2+2", self.ctx)
        self.assertEqual(api.get_history(self.ctx), [])
        self.assertEqual(self.ctx.ans, 0)


class TestEvaluateSafely(unittest.TestCase):
    def setUp(self):
        self.ctx = CalculatorContext()

    def test_ok(self):
        result = api.evaluate_safely("1/3", self.ctx)
        self.assertTrue(result.ok)
        self.assertEqual(result.display, "0.3333333333")

    def test_syntax_error_display(self):
        result = api.evaluate_safely("sin()", self.ctx)
        self.assertFalse(result.ok)
        self.assertEqual(result.display, "Syntax ERROR")
        self.assertEqual(result.error_code, "ARITY_MISMATCH")

    def test_math_error_display(self):
        result = api.evaluate_safely("1/0", self.ctx)
        self.assertFalse(result.ok)
        self.assertEqual(result.display, "Math ERROR")
        self.assertEqual(result.error_code, "DIVIDE_BY_ZERO")
        self.assertIsNone(result.value)

    def test_unrecognized_character_is_syntax_error(self):
        result = api.evaluate_safely("2#3", self.ctx)
        self.assertEqual(result.display, "Syntax ERROR")
        self.assertEqual(result.error_code, "UNRECOGNIZED_CHARACTER")

    def test_display_follows_context_format(self):
        self.ctx.display_format = DisplayFormat.FIX
        self.ctx.fix_digits = 3
        self.assertEqual(api.evaluate_safely("2/3", self.ctx).display, "0.667")

    def test_to_dict(self):
        data = api.evaluate_safely("1+1", self.ctx).to_dict()
        self.assertEqual(data, {"ok": True, "display": "2", "result": 2.0})


class TestExecute(unittest.TestCase):
    def setUp(self):
        self.ctx = CalculatorContext()

    def test_updates_ans_and_history(self):
        api.execute("3×4", self.ctx)
        self.assertEqual(self.ctx.ans, 12)
        result = api.execute("Ans+1", self.ctx)
        self.assertEqual(result.value, 13)
        history = api.get_history(self.ctx)
        self.assertEqual([(h.expression, h.result) for h in history], [("3×4", 12), ("Ans+1", 13)])

    def test_failure_leaves_state(self):
        api.execute("5", self.ctx)
        api.execute("5/0", self.ctx)
        self.assertEqual(self.ctx.ans, 5)
        self.assertEqual(len(api.get_history(self.ctx)), 1)

    def test_history_capped_at_fifty(self):
        for i in range(51):
            api.execute(f"{i}+1", self.ctx)
        history = api.get_history(self.ctx)
        self.assertEqual(len(history), 50)
        self.assertEqual(history[0].expression, "1+1")
        self.assertEqual(history[-1].result, 51)

    def test_sto_then_recall(self):
        api.execute("7→A", self.ctx)
        self.assertEqual(api.recall_variable(self.ctx, "A"), 7)
        self.assertEqual(api.recall_variable(self.ctx, "B"), 0)


class TestStateFunctions(unittest.TestCase):
    def setUp(self):
        self.ctx = CalculatorContext()

    def test_angle_mode(self):
        api.set_angle_mode(self.ctx, "rad")
        self.assertIs(api.get_angle_mode(self.ctx), AngleMode.RADIANS)
        api.set_angle_mode(self.ctx, AngleMode.GRADIANS)
        self.assertIs(api.get_angle_mode(self.ctx), AngleMode.GRADIANS)

    def test_store_variable(self):
        api.store_variable(self.ctx, "Y", 2.5)
        self.assertEqual(api.evaluate_expression("2Y", self.ctx), 5)

    def test_memory(self):
        self.assertEqual(api.memory_add(self.ctx, 10), 10)
        self.assertEqual(api.memory_subtract(self.ctx, 4), 6)
        self.assertEqual(api.evaluate_expression("M", self.ctx), 6)

    def test_memory_overflow_is_math_error(self):
        api.memory_add(self.ctx, 9e99)
        with self.assertRaises(MathError):
            api.memory_add(self.ctx, 9e99)
        result = api.evaluate_safely("M", self.ctx)
        self.assertTrue(result.ok)
        self.assertEqual(result.value, 9e99)

    def test_store_variable_rejects_non_finite(self):
        with self.assertRaises(MathError):
            api.store_variable(self.ctx, "A", float("inf"))
        result = api.evaluate_safely("A", self.ctx)
        self.assertTrue(result.ok)
        self.assertEqual(result.value, 0)

    def test_out_of_range_ans_is_reported(self):
        self.ctx.ans = float("inf")
        result = api.evaluate_safely("Ans", self.ctx)
        self.assertFalse(result.ok)
        self.assertEqual(result.error_code, "OVERFLOW")
        self.assertEqual(result.display, "Math ERROR")

    def test_push_history(self):
        entry = api.push_history(self.ctx, "1+2", 3)
        self.assertEqual(entry.index, 0)
        self.assertEqual(api.get_history(self.ctx), [entry])


if __name__ == "__main__":
    unittest.main()
