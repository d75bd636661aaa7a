"""Result and error types shared across the calculator core.

Every error a user can provoke is an ``EngineError``. The two families
mirror the two messages a real calculator shows: ``CalcSyntaxError`` for
malformed input ("Syntax ERROR") and ``MathError`` for arithmetic that
has no real, representable answer ("Math ERROR").
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SYNTAX_ERROR_DISPLAY = "Syntax ERROR"
MATH_ERROR_DISPLAY = "Math ERROR"


class SyntaxReason(Enum):
    UNTERMINATED_PAREN = "unterminated-paren"
    MISSING_OPERAND = "missing-operand"
    TRAILING_INPUT = "trailing-input"
    ARITY_MISMATCH = "arity-mismatch"
    UNRECOGNIZED_CHARACTER = "unrecognized-character"
    NESTING_TOO_DEEP = "nesting-too-deep"
    INPUT_TOO_LONG = "input-too-long"


class MathReason(Enum):
    DIVIDE_BY_ZERO = "divide-by-zero"
    DOMAIN = "domain"
    OVERFLOW = "overflow"


class EngineError(Exception):
    """Base class for every error the engine reports to its caller."""

    display_message = "ERROR"

    def __init__(self, reason: Enum, message: str = "", position: int | None = None):
        self.reason = reason
        self.position = position
        super().__init__(message or reason.value)

    @property
    def code(self) -> str:
        """Stable machine-readable code, e.g. ``DIVIDE_BY_ZERO``."""
        return self.reason.name


class CalcSyntaxError(EngineError):
    """Input could not be tokenized or parsed."""

    display_message = SYNTAX_ERROR_DISPLAY

    def __init__(
        self, reason: SyntaxReason, message: str = "", position: int | None = None
    ):
        super().__init__(reason, message, position)


class MathError(EngineError):
    """Input parsed, but has no real representable value."""

    display_message = MATH_ERROR_DISPLAY

    def __init__(self, reason: MathReason, message: str = ""):
        super().__init__(reason, message)


@dataclass
class EvalResult:
    ok: bool
    value: float | None = None
    display: str | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def from_error(cls, error: EngineError) -> "EvalResult":
        return cls(
            ok=False,
            error=str(error),
            error_code=error.code,
            display=error.display_message,
        )

    def to_dict(self) -> dict:
        data = {"ok": self.ok, "display": self.display}
        if self.ok:
            data["result"] = self.value
        else:
            data["error"] = self.error
            data["error_code"] = self.error_code
        return data
