"""scicalc package: tokenizer, parser, evaluator and session state of a scientific calculator."""

__version__ = "1.0.0"

from . import api, cli, config, evaluator, logging_config, parser, state, tokenizer, types
from .api import (
    evaluate_expression,
    evaluate_safely,
    execute,
    get_angle_mode,
    get_history,
    memory_add,
    memory_subtract,
    push_history,
    recall_variable,
    set_angle_mode,
    store_variable,
)
from .state import AngleMode, CalculatorContext
from .types import CalcSyntaxError, EngineError, MathError

__all__ = [
    "api",
    "cli",
    "config",
    "evaluator",
    "logging_config",
    "parser",
    "state",
    "tokenizer",
    "types",
    "evaluate_expression",
    "evaluate_safely",
    "execute",
    "get_angle_mode",
    "set_angle_mode",
    "store_variable",
    "recall_variable",
    "memory_add",
    "memory_subtract",
    "push_history",
    "get_history",
    "AngleMode",
    "CalculatorContext",
    "EngineError",
    "CalcSyntaxError",
    "MathError",
]
