"""Tree-walking evaluator for the calculator AST.

Every intermediate value passes through ``check_representable`` so that no
NaN or infinity ever reaches the caller; instead a ``MathError`` names the
reason (divide-by-zero, domain or overflow). Transcendental functions are
evaluated with numpy under ``np.errstate`` set to raise, so floating-point
trouble surfaces as an exception rather than a silent inf/nan. Underflow
is not an error: it just rounds to zero.
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

from .config import ANS_IDENTIFIER
from .config import SNAP_TOLERANCE
from .logging_config import get_logger
from .parser import Assignment
from .parser import BinaryKind
from .parser import BinaryOp
from .parser import FunctionCall
from .parser import Literal
from .parser import Node
from .parser import UnaryKind
from .parser import UnaryOp
from .parser import VariableRef
from .state import AngleMode
from .state import VariableStore
from .types import MathError
from .types import MathReason
from .utils.numeric import check_representable
from .utils.numeric import combinations
from .utils.numeric import factorial
from .utils.numeric import permutations
from .utils.numeric import power

logger = get_logger("evaluator")


def _domain(message: str) -> MathError:
    return MathError(MathReason.DOMAIN, message)


def _snap(value: float) -> float:
    """Round trig noise such as sin(180°) = 1.2e-16 to the exact value."""
    if abs(value) < SNAP_TOLERANCE:
        return 0.0
    if abs(abs(value) - 1.0) < SNAP_TOLERANCE:
        return math.copysign(1.0, value)
    return value


def _apply_ufunc(func: Callable, *args: float) -> float:
    try:
        with np.errstate(over="raise", divide="raise", invalid="raise", under="ignore"):
            result = func(*(np.float64(a) for a in args))
    except FloatingPointError as e:
        if "overflow" in str(e):
            raise MathError(MathReason.OVERFLOW, str(e)) from None
        if "divide" in str(e):
            raise MathError(MathReason.DIVIDE_BY_ZERO, str(e)) from None
        raise _domain(str(e)) from None
    return check_representable(float(result))


# Domain guards run before the ufunc so the error names the real cause
def _positive(name: str) -> Callable[[float], None]:
    def guard(x: float) -> None:
        if x <= 0:
            raise _domain(f"{name} requires a positive argument, got {x!r}")

    return guard


def _non_negative(name: str) -> Callable[[float], None]:
    def guard(x: float) -> None:
        if x < 0:
            raise _domain(f"{name} of a negative number is not real")

    return guard


def _unit_interval(name: str) -> Callable[[float], None]:
    def guard(x: float) -> None:
        if abs(x) > 1:
            raise _domain(f"{name} requires |x| <= 1, got {x!r}")

    return guard


def _at_least_one(x: float) -> None:
    if x < 1:
        raise _domain(f"acosh requires x >= 1, got {x!r}")


def _open_unit_interval(x: float) -> None:
    if abs(x) >= 1:
        raise _domain(f"atanh requires |x| < 1, got {x!r}")


# Angle-independent unary functions: name -> (ufunc, optional guard)
UNARY_FUNCTIONS: dict[str, tuple[Callable, Callable[[float], None] | None]] = {
    "sinh": (np.sinh, None),
    "cosh": (np.cosh, None),
    "tanh": (np.tanh, None),
    "asinh": (np.arcsinh, None),
    "acosh": (np.arccosh, _at_least_one),
    "atanh": (np.arctanh, _open_unit_interval),
    "log": (np.log10, _positive("log")),
    "log2": (np.log2, _positive("log2")),
    "ln": (np.log, _positive("ln")),
    "sqrt": (np.sqrt, _non_negative("sqrt")),
    "cbrt": (np.cbrt, None),
    "abs": (np.abs, None),
    "exp": (np.exp, None),
}

TRIG_FUNCTIONS: dict[str, Callable] = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
}

INVERSE_TRIG_FUNCTIONS: dict[str, tuple[Callable, Callable[[float], None] | None]] = {
    "asin": (np.arcsin, _unit_interval("asin")),
    "acos": (np.arccos, _unit_interval("acos")),
    "atan": (np.arctan, None),
}


class Evaluator:
    """Evaluate AST nodes against an angle mode and a register store.

    Args:
        angle_mode: Unit used by trig functions, read on every call
        store: Registers read by VariableRef and written by Assignment
        ans: Value returned for the ``Ans`` register
    """

    def __init__(self, angle_mode: AngleMode, store: VariableStore, ans: float = 0.0):
        self.angle_mode = angle_mode
        self.store = store
        self.ans = ans

    def evaluate(self, node: Node) -> float:
        if isinstance(node, Literal):
            return check_representable(node.value)
        if isinstance(node, VariableRef):
            return check_representable(self._recall(node.name))
        if isinstance(node, UnaryOp):
            return self._unary(node.kind, self.evaluate(node.operand))
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self._binary(node.kind, left, right)
        if isinstance(node, FunctionCall):
            args = [self.evaluate(arg) for arg in node.args]  # left to right
            return self._call(node.name, args)
        if isinstance(node, Assignment):
            value = self.evaluate(node.value)
            self.store.store(node.target, value)
            logger.debug("STO %s <- %r", node.target, value)
            return value
        raise TypeError(f"Unknown AST node: {type(node).__name__}")

    def _recall(self, name: str) -> float:
        if name == ANS_IDENTIFIER:
            return self.ans
        return self.store.recall(name)

    # -- operators -----------------------------------------------------

    def _unary(self, kind: UnaryKind, x: float) -> float:
        if kind is UnaryKind.NEGATE:
            return check_representable(-x)
        if kind is UnaryKind.PERCENT:
            return check_representable(x / 100.0)
        if kind is UnaryKind.FACTORIAL:
            return factorial(x)
        if kind is UnaryKind.SQUARE:
            return power(x, 2.0)
        if kind is UnaryKind.CUBE:
            return power(x, 3.0)
        if kind is UnaryKind.RECIPROCAL:
            return self._divide(1.0, x)
        if kind is UnaryKind.SQRT:
            return self._call("sqrt", [x])
        if kind is UnaryKind.CBRT:
            return self._call("cbrt", [x])
        raise TypeError(f"Unknown unary operator: {kind}")

    @staticmethod
    def _divide(left: float, right: float) -> float:
        if right == 0:
            raise MathError(MathReason.DIVIDE_BY_ZERO, "Division by zero")
        return check_representable(left / right)

    def _binary(self, kind: BinaryKind, left: float, right: float) -> float:
        if kind is BinaryKind.ADD:
            return check_representable(left + right)
        if kind is BinaryKind.SUB:
            return check_representable(left - right)
        if kind is BinaryKind.MUL:
            return check_representable(left * right)
        if kind is BinaryKind.DIV:
            return self._divide(left, right)
        if kind is BinaryKind.POW:
            return power(left, right)
        raise TypeError(f"Unknown binary operator: {kind}")

    # -- functions -----------------------------------------------------

    def _call(self, name: str, args: list[float]) -> float:
        if name in TRIG_FUNCTIONS:
            return self._trig(name, args[0])
        if name in INVERSE_TRIG_FUNCTIONS:
            func, guard = INVERSE_TRIG_FUNCTIONS[name]
            if guard is not None:
                guard(args[0])
            radians = _apply_ufunc(func, args[0])
            return check_representable(self.angle_mode.from_radians(radians))
        if name in UNARY_FUNCTIONS:
            func, guard = UNARY_FUNCTIONS[name]
            if guard is not None:
                guard(args[0])
            return _apply_ufunc(func, args[0])
        if name == "nCr":
            return combinations(*args)
        if name == "nPr":
            return permutations(*args)
        if name == "Pol":
            return _apply_ufunc(np.hypot, *args)
        if name == "Rec":
            r, theta = args
            return check_representable(r * self._trig("cos", theta))
        raise TypeError(f"Unknown function: {name}")

    def _trig(self, name: str, angle: float) -> float:
        radians = self.angle_mode.to_radians(angle)
        if name == "tan":
            # odd multiples of a right angle have no tangent
            if _snap(math.cos(radians)) == 0.0:
                raise _domain(f"tan is undefined at {angle!r}")
        value = _apply_ufunc(TRIG_FUNCTIONS[name], radians)
        if abs(radians) <= SNAP_TOLERANCE:
            return value
        return _snap(value)
