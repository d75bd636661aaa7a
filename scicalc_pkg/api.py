"""Public API for the calculator core.

This is the boundary a UI talks to: evaluate a line of input, and read or
change the session state held in a ``CalculatorContext``. Every function
takes the context explicitly; there is no hidden global state.

Two evaluation styles are offered:

- ``evaluate_expression`` raises ``CalcSyntaxError`` / ``MathError``.
- ``evaluate_safely`` never raises for bad input and returns an
  ``EvalResult`` carrying either the value or the error details, which is
  what an event loop usually wants.

``execute`` is the "=" key: it evaluates, updates Ans and records the
line in the history log.
"""

from __future__ import annotations

from .evaluator import Evaluator
from .logging_config import get_logger
from .parser import parse
from .state import AngleMode
from .state import CalculatorContext
from .state import HistoryEntry
from .tokenizer import tokenize
from .types import EngineError
from .types import EvalResult
from .utils.formatting import format_result

logger = get_logger("api")


def evaluate_expression(text: str, context: CalculatorContext) -> float:
    """Tokenize, parse and evaluate ``text`` against ``context``.

    STO forms ("5→A", "A=5") write their register as a side effect and
    return the stored value.

    Raises:
        CalcSyntaxError: the input is malformed
        MathError: the input has no real, representable value
    """
    tokens = tokenize(text)
    tree = parse(tokens)
    evaluator = Evaluator(context.angle.get_mode(), context.variables, context.ans)
    return evaluator.evaluate(tree)


def evaluate_safely(text: str, context: CalculatorContext) -> EvalResult:
    """Like ``evaluate_expression`` but reports errors in the result."""
    try:
        value = evaluate_expression(text, context)
    except EngineError as e:
        logger.debug("Evaluation of %r failed: %s (%s)", text, e, e.code)
        return EvalResult.from_error(e)
    return EvalResult(ok=True, value=value, display=format_value(value, context))


def execute(text: str, context: CalculatorContext) -> EvalResult:
    """The "=" key: evaluate, then update Ans and history on success."""
    result = evaluate_safely(text, context)
    if result.ok:
        context.ans = result.value
        push_history(context, text, result.value)
    return result


def format_value(value: float, context: CalculatorContext) -> str:
    """Render ``value`` in the context's current display mode."""
    return format_result(value, context.display_format, context.fix_digits)


def set_angle_mode(context: CalculatorContext, mode: AngleMode | str) -> None:
    if isinstance(mode, str):
        mode = AngleMode.parse(mode)
    context.angle.set_mode(mode)


def get_angle_mode(context: CalculatorContext) -> AngleMode:
    return context.angle.get_mode()


def store_variable(context: CalculatorContext, identifier: str, value: float) -> None:
    """STO from outside an expression.

    Raises:
        MathError: ``value`` is NaN, infinite or outside the display range
    """
    context.variables.store(identifier, value)


def recall_variable(context: CalculatorContext, identifier: str) -> float:
    return context.variables.recall(identifier)


def memory_add(context: CalculatorContext, value: float) -> float:
    """M+: returns the new memory total.

    Raises:
        MathError: the new total would overflow; M keeps its old value
    """
    return context.variables.memory_add(value)


def memory_subtract(context: CalculatorContext, value: float) -> float:
    """M-: returns the new memory total. Raises like ``memory_add``."""
    return context.variables.memory_sub(value)


def push_history(
    context: CalculatorContext, expression: str, result: float
) -> HistoryEntry:
    return context.history.push(expression, result)


def get_history(context: CalculatorContext) -> list[HistoryEntry]:
    return context.history.entries()
