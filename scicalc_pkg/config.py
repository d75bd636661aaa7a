"""Centralized configuration for the scientific calculator core.

This module defines:
- Input validation limits (length, nesting depth)
- The representable numeric range of the emulated display
- History capacity and display precision
- Regex patterns used by the tokenizer

Configuration can be overridden via:
- CLI flags (see cli/app.py)
- Environment variables (prefixed with SCICALC_)
"""

import os
import re

VERSION = "1.0.0"

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("SCICALC_MAX_INPUT_LENGTH", "256"))  # characters
MAX_NESTING_DEPTH = int(
    os.getenv("SCICALC_MAX_NESTING_DEPTH", "64")
)  # parser recursion levels

# Representable range: a 10-digit display tops out at 9.999999999×10^99
MAX_MAGNITUDE = float(os.getenv("SCICALC_MAX_MAGNITUDE", "1e100"))
FACTORIAL_LIMIT = int(
    os.getenv("SCICALC_FACTORIAL_LIMIT", "69")
)  # 69! < 1e100 < 70!

# Session state
HISTORY_CAPACITY = int(os.getenv("SCICALC_HISTORY_CAPACITY", "50"))
DEFAULT_ANGLE_MODE = os.getenv("SCICALC_DEFAULT_ANGLE_MODE", "deg")

# Display
DISPLAY_DIGITS = int(
    os.getenv("SCICALC_DISPLAY_DIGITS", "10")
)  # significant digits shown
FRACTION_MAX_DENOMINATOR = int(
    os.getenv("SCICALC_FRACTION_MAX_DENOMINATOR", "10000")
)

# Trig results this close to 0 or ±1 are snapped to the exact value
SNAP_TOLERANCE = float(os.getenv("SCICALC_SNAP_TOLERANCE", "1e-12"))

# Names recognized by the tokenizer. Order does not matter, matching is
# longest-first.
UNARY_FUNCTIONS = frozenset(
    {
        "sin",
        "cos",
        "tan",
        "asin",
        "acos",
        "atan",
        "sinh",
        "cosh",
        "tanh",
        "asinh",
        "acosh",
        "atanh",
        "log",
        "log2",
        "ln",
        "sqrt",
        "cbrt",
        "abs",
        "exp",
    }
)
BINARY_FUNCTIONS = frozenset({"nCr", "nPr", "Pol", "Rec"})

# Traditional notation aliases
FUNCTION_ALIASES = {
    "arcsin": "asin",
    "arccos": "acos",
    "arctan": "atan",
    "log₂": "log2",
}

CONSTANT_NAMES = {"π": "pi", "pi": "pi", "e": "e"}

STORE_IDENTIFIERS = ("A", "B", "C", "D", "E", "F", "X", "Y")
MEMORY_IDENTIFIER = "M"
ANS_IDENTIFIER = "Ans"

NUMBER_RE = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)((?:e|ᴇ)[+\-−]?[0-9]+)?")
