import unittest

from scicalc_pkg.state import AngleMode
from scicalc_pkg.state import AngleModeContext
from scicalc_pkg.state import CalculatorContext
from scicalc_pkg.state import HistoryLog
from scicalc_pkg.state import VariableStore
from scicalc_pkg.types import MathError
from scicalc_pkg.types import MathReason
from scicalc_pkg.utils.formatting import DisplayFormat


class TestAngleModeContext(unittest.TestCase):
    def test_default_is_degrees(self):
        self.assertIs(AngleModeContext().get_mode(), AngleMode.DEGREES)

    def test_set_and_get(self):
        ctx = AngleModeContext()
        ctx.set_mode(AngleMode.GRADIANS)
        self.assertIs(ctx.get_mode(), AngleMode.GRADIANS)

    def test_cycle(self):
        ctx = AngleModeContext()
        self.assertEqual(
            [ctx.cycle(), ctx.cycle(), ctx.cycle()],
            [AngleMode.RADIANS, AngleMode.GRADIANS, AngleMode.DEGREES],
        )

    def test_parse(self):
        self.assertIs(AngleMode.parse("Rad"), AngleMode.RADIANS)
        self.assertIs(AngleMode.parse("degrees"), AngleMode.DEGREES)
        self.assertIs(AngleMode.parse("G"), AngleMode.GRADIANS)
        with self.assertRaises(ValueError):
            AngleMode.parse("turns")

    def test_labels(self):
        self.assertEqual([m.label for m in AngleMode], ["D", "R", "G"])


class TestVariableStore(unittest.TestCase):
    def setUp(self):
        self.store = VariableStore()

    def test_initial_zero(self):
        for identifier in "ABCDEFXYM":
            self.assertEqual(self.store.recall(identifier), 0.0)

    def test_store_recall_round_trip(self):
        self.store.store("A", 7)
        self.assertEqual(self.store.recall("A"), 7)

    def test_memory_accumulates(self):
        self.store.memory_add(10)
        self.store.memory_add(5)
        self.store.memory_sub(3)
        self.assertEqual(self.store.recall("M"), 12)

    def test_memory_ops_leave_other_registers(self):
        self.store.store("X", 2)
        self.store.memory_add(4)
        self.assertEqual(self.store.recall("X"), 2)

    def test_clear_memory(self):
        self.store.store("A", 1)
        self.store.memory_add(9)
        self.store.clear_memory()
        self.assertEqual(self.store.recall("M"), 0)
        self.assertEqual(self.store.recall("A"), 1)

    def test_reset_all(self):
        self.store.store("F", 3)
        self.store.memory_add(1)
        self.store.reset_all()
        self.assertEqual(set(self.store.snapshot().values()), {0.0})

    def test_memory_overflow_keeps_old_total(self):
        self.assertEqual(self.store.memory_add(9e99), 9e99)
        with self.assertRaises(MathError) as cm:
            self.store.memory_add(9e99)
        self.assertEqual(cm.exception.reason, MathReason.OVERFLOW)
        self.assertEqual(self.store.recall("M"), 9e99)
        with self.assertRaises(MathError):
            self.store.memory_sub(-9e99)
        self.assertEqual(self.store.recall("M"), 9e99)

    def test_store_rejects_unrepresentable_values(self):
        self.store.store("A", 3)
        with self.assertRaises(MathError) as cm:
            self.store.store("A", float("inf"))
        self.assertEqual(cm.exception.reason, MathReason.OVERFLOW)
        with self.assertRaises(MathError) as cm:
            self.store.store("A", float("nan"))
        self.assertEqual(cm.exception.reason, MathReason.DOMAIN)
        with self.assertRaises(MathError):
            self.store.store("A", 1e100)
        self.assertEqual(self.store.recall("A"), 3)

    def test_unknown_register(self):
        with self.assertRaises(KeyError):
            self.store.store("Z", 1)


class TestHistoryLog(unittest.TestCase):
    def test_push_and_order(self):
        log = HistoryLog()
        log.push("1+1", 2)
        log.push("2+2", 4)
        self.assertEqual([e.expression for e in log.entries()], ["1+1", "2+2"])

    def test_fifo_eviction_at_capacity(self):
        log = HistoryLog()
        for i in range(51):
            log.push(f"{i}+0", i)
        entries = log.entries()
        self.assertEqual(len(entries), 50)
        self.assertEqual(entries[0].expression, "1+0")
        self.assertEqual(entries[-1].expression, "50+0")
        self.assertEqual([e.index for e in entries], list(range(1, 51)))

    def test_custom_capacity(self):
        log = HistoryLog(capacity=3)
        for i in range(5):
            log.push(str(i), i)
        self.assertEqual([e.result for e in log.entries()], [2, 3, 4])

    def test_entries_is_a_copy(self):
        log = HistoryLog()
        log.push("1", 1)
        log.entries().clear()
        self.assertEqual(len(log), 1)


class TestCalculatorContext(unittest.TestCase):
    def test_reset(self):
        ctx = CalculatorContext()
        ctx.angle.set_mode(AngleMode.RADIANS)
        ctx.variables.store("B", 5)
        ctx.history.push("5", 5)
        ctx.ans = 5
        ctx.display_format = DisplayFormat.ENGINEERING
        ctx.reset()
        self.assertIs(ctx.angle.get_mode(), AngleMode.DEGREES)
        self.assertEqual(ctx.variables.recall("B"), 0)
        self.assertEqual(len(ctx.history), 0)
        self.assertEqual(ctx.ans, 0)
        self.assertIs(ctx.display_format, DisplayFormat.NORMAL)

    def test_contexts_are_independent(self):
        a, b = CalculatorContext(), CalculatorContext()
        a.variables.store("A", 1)
        self.assertEqual(b.variables.recall("A"), 0)


if __name__ == "__main__":
    unittest.main()
