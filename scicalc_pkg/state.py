"""Calculator session state: angle mode, registers and history.

None of these objects are module-level singletons. A caller (the REPL, a
GUI, a test) owns one ``CalculatorContext`` and passes it to every engine
entry point. Nothing here is locked: the context is meant to be driven by
a single thread, and a caller that shares it must serialize access itself.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from dataclasses import field
from enum import Enum

from .config import DEFAULT_ANGLE_MODE
from .config import HISTORY_CAPACITY
from .config import MEMORY_IDENTIFIER
from .config import STORE_IDENTIFIERS
from .utils.formatting import DisplayFormat
from .utils.numeric import check_representable


class AngleMode(Enum):
    DEGREES = "deg"
    RADIANS = "rad"
    GRADIANS = "gra"

    @property
    def label(self) -> str:
        """Status-bar indicator: D, R or G."""
        return {"deg": "D", "rad": "R", "gra": "G"}[self.value]

    def to_radians(self, angle: float) -> float:
        if self is AngleMode.DEGREES:
            return math.radians(angle)
        if self is AngleMode.GRADIANS:
            return angle * math.pi / 200.0
        return angle

    def from_radians(self, angle: float) -> float:
        if self is AngleMode.DEGREES:
            return math.degrees(angle)
        if self is AngleMode.GRADIANS:
            return angle * 200.0 / math.pi
        return angle

    @classmethod
    def parse(cls, text: str) -> "AngleMode":
        """Accept 'deg', 'degrees', 'D', 'rad', ... case-insensitively."""
        key = text.strip().lower()
        for mode in cls:
            if key in (mode.value, mode.name.lower(), mode.label.lower()):
                return mode
        raise ValueError(f"Unknown angle mode: {text!r}")


_CYCLE = {
    AngleMode.DEGREES: AngleMode.RADIANS,
    AngleMode.RADIANS: AngleMode.GRADIANS,
    AngleMode.GRADIANS: AngleMode.DEGREES,
}


class AngleModeContext:
    """Holds the active angle unit; read by every trig evaluation."""

    def __init__(self, mode: AngleMode | None = None):
        self._mode = mode if mode is not None else AngleMode.parse(DEFAULT_ANGLE_MODE)

    def set_mode(self, mode: AngleMode) -> None:
        self._mode = AngleMode(mode)

    def get_mode(self) -> AngleMode:
        return self._mode

    def cycle(self) -> AngleMode:
        """MODE key: Deg -> Rad -> Gra -> Deg."""
        self._mode = _CYCLE[self._mode]
        return self._mode


class VariableStore:
    """Registers A-F, X, Y plus the independent memory M.

    All registers start at 0. STO overwrites a register; M+ and M- only
    ever touch M. A write that would leave a register outside the display
    range raises MathError and keeps the old value.
    """

    IDENTIFIERS = STORE_IDENTIFIERS + (MEMORY_IDENTIFIER,)

    def __init__(self):
        self._registers: dict[str, float] = {}
        self.reset_all()

    def _check(self, identifier: str) -> None:
        if identifier not in self._registers:
            raise KeyError(f"Unknown register: {identifier!r}")

    def store(self, identifier: str, value: float) -> None:
        self._check(identifier)
        self._registers[identifier] = check_representable(float(value))

    def recall(self, identifier: str) -> float:
        self._check(identifier)
        return self._registers[identifier]

    def memory_add(self, value: float) -> float:
        total = check_representable(self._registers[MEMORY_IDENTIFIER] + float(value))
        self._registers[MEMORY_IDENTIFIER] = total
        return total

    def memory_sub(self, value: float) -> float:
        return self.memory_add(-float(value))

    def clear_memory(self) -> None:
        self._registers[MEMORY_IDENTIFIER] = 0.0

    def reset_all(self) -> None:
        self._registers = {identifier: 0.0 for identifier in self.IDENTIFIERS}

    def snapshot(self) -> dict[str, float]:
        return dict(self._registers)


@dataclass(frozen=True)
class HistoryEntry:
    expression: str
    result: float
    index: int  # monotonically increasing push counter


class HistoryLog:
    """Bounded FIFO of successful evaluations, oldest first."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self.capacity = capacity
        self._entries: deque[HistoryEntry] = deque(maxlen=capacity)
        self._next_index = 0

    def push(self, expression: str, result: float) -> HistoryEntry:
        entry = HistoryEntry(expression, float(result), self._next_index)
        self._next_index += 1
        self._entries.append(entry)  # deque drops the oldest at capacity
        return entry

    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class CalculatorContext:
    """Everything a calculator session remembers between key presses."""

    angle: AngleModeContext = field(default_factory=AngleModeContext)
    variables: VariableStore = field(default_factory=VariableStore)
    history: HistoryLog = field(default_factory=HistoryLog)
    ans: float = 0.0
    display_format: DisplayFormat = DisplayFormat.NORMAL
    fix_digits: int = 2

    def reset(self) -> None:
        """ON key: back to power-on defaults."""
        self.angle = AngleModeContext()
        self.variables.reset_all()
        self.history.clear()
        self.ans = 0.0
        self.display_format = DisplayFormat.NORMAL
        self.fix_digits = 2
