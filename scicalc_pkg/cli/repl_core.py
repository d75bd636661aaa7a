import json
import logging
from typing import Optional

from ..api import execute
from ..api import format_value
from ..api import get_history
from ..api import memory_add
from ..api import memory_subtract
from ..api import set_angle_mode
from ..config import VERSION
from ..logging_config import ROOT_LOGGER_NAME
from ..state import CalculatorContext
from ..types import EngineError
from ..types import EvalResult
from ..utils.formatting import DisplayFormat
from ..utils.formatting import format_fraction
from .context import ReplContext

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Type an expression and press Enter to evaluate it, e.g. 2sin(30)+3!

  mode [deg|rad|gra]   show or set the angle unit (no argument cycles)
  m+ EXPR / m- EXPR    evaluate EXPR (or Ans) and add/subtract it to M
  mc                   clear memory M
  EXPR→A  or  A=EXPR   store into register A-F, X, Y or M
  vars                 list registers
  history              list previous calculations
  display MODE [N]     norm | sci | eng | fix N
  frac [on|off]        show Ans as a fraction, or show every result as one
  debug [on|off]       append error codes to errors, log at DEBUG
  ac                   reset everything (power-on state)
  quit                 leave"""


class REPL:
    """Line-oriented driver for a calculator session.

    ``process_input`` maps one line to the text that should be shown, so the
    same object can be driven by ``start`` or by tests.
    """

    def __init__(
        self,
        context: Optional[ReplContext] = None,
        calculator: Optional[CalculatorContext] = None,
    ):
        self.ctx = context if context else ReplContext()
        self.calc = calculator if calculator else CalculatorContext()
        self.running = True
        self._commands = {
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
            "help": self._cmd_help,
            "mode": self._cmd_mode,
            "m+": self._cmd_memory_add,
            "m-": self._cmd_memory_subtract,
            "mc": self._cmd_memory_clear,
            "vars": self._cmd_vars,
            "history": self._cmd_history,
            "display": self._cmd_display,
            "frac": self._cmd_fraction,
            "debug": self._cmd_debug,
            "ac": self._cmd_reset,
        }

    def start(self):
        """Main loop entry point."""
        print(f"scicalc v{VERSION}. Type 'help' for commands, 'quit' to exit.")
        while self.running:
            self.loop_once()

    def loop_once(self):
        """Single iteration of the read-eval-print loop."""
        try:
            prompt = f"[{self.calc.angle.get_mode().label}] >>> "
            try:
                raw = input(prompt)
            except EOFError:
                self.running = False
                return
            output = self.process_input(raw)
            if output:
                print(output)
        except KeyboardInterrupt:
            print("\n[Interrupted]")
        except Exception as e:
            logger.exception("Unexpected error in REPL loop")
            print(f"Error: {e}")

    def process_input(self, text: str) -> str:
        """Dispatch one line to a command or to the evaluator."""
        text = text.strip()
        if not text or text.startswith("#"):
            return ""

        head, _, rest = text.partition(" ")
        handler = self._commands.get(head.lower())
        if handler is not None:
            return handler(rest.strip())
        return self.render(execute(text, self.calc))

    def render(self, result: EvalResult) -> str:
        if self.ctx.output_format == "json":
            return json.dumps(result.to_dict(), ensure_ascii=False)
        if not result.ok and self.ctx.debug_mode:
            return f"{result.display} [{result.error_code}: {result.error}]"
        if result.ok and self.ctx.show_fraction:
            return format_fraction(result.value)
        return result.display

    # -- commands ------------------------------------------------------

    def _cmd_quit(self, _arg: str) -> str:
        self.running = False
        return ""

    def _cmd_help(self, _arg: str) -> str:
        return HELP_TEXT

    def _cmd_mode(self, arg: str) -> str:
        if not arg:
            mode = self.calc.angle.cycle()
        else:
            try:
                set_angle_mode(self.calc, arg)
            except ValueError as e:
                return f"Error: {e}"
            mode = self.calc.angle.get_mode()
        return f"Angle mode: {mode.name.capitalize()} ({mode.label})"

    def _memory_update(self, arg: str, update) -> str:
        result = execute(arg or "Ans", self.calc)
        if not result.ok:
            return self.render(result)
        try:
            total = update(self.calc, result.value)
        except EngineError as e:
            return self.render(EvalResult.from_error(e))
        return f"M = {format_value(total, self.calc)}"

    def _cmd_memory_add(self, arg: str) -> str:
        return self._memory_update(arg, memory_add)

    def _cmd_memory_subtract(self, arg: str) -> str:
        return self._memory_update(arg, memory_subtract)

    def _cmd_memory_clear(self, _arg: str) -> str:
        self.calc.variables.clear_memory()
        return "M = 0"

    def _cmd_vars(self, _arg: str) -> str:
        registers = self.calc.variables.snapshot()
        lines = [f"{name} = {format_value(value, self.calc)}" for name, value in registers.items()]
        lines.append(f"Ans = {format_value(self.calc.ans, self.calc)}")
        return "\n".join(lines)

    def _cmd_history(self, _arg: str) -> str:
        entries = get_history(self.calc)
        if not entries:
            return "(no history)"
        return "\n".join(
            f"{entry.index:>4}: {entry.expression} = {format_value(entry.result, self.calc)}"
            for entry in entries
        )

    def _cmd_display(self, arg: str) -> str:
        parts = arg.split()
        if not parts:
            return f"Display: {self.calc.display_format.value}"
        try:
            fmt = DisplayFormat(parts[0].lower())
        except ValueError:
            return f"Error: unknown display mode {parts[0]!r} (norm, sci, eng, fix)"
        if fmt is DisplayFormat.FIX:
            if len(parts) < 2 or not parts[1].isdigit() or int(parts[1]) > 9:
                return "Error: fix needs a digit count 0-9, e.g. 'display fix 4'"
            self.calc.fix_digits = int(parts[1])
        self.calc.display_format = fmt
        return f"Display: {fmt.value}"

    def _cmd_fraction(self, arg: str) -> str:
        if arg:
            return self._toggle(arg, "show_fraction", "Fraction display", "frac")
        return format_fraction(self.calc.ans)

    def _cmd_debug(self, arg: str) -> str:
        message = self._toggle(arg, "debug_mode", "Debug mode", "debug")
        if arg.lower() in ("on", "off"):
            level = logging.DEBUG if self.ctx.debug_mode else logging.WARNING
            logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
        return message

    def _toggle(self, arg: str, attr: str, name: str, command: str) -> str:
        state = arg.lower()
        if not state:
            return f"{name} is {'ON' if getattr(self.ctx, attr) else 'OFF'}"
        if state not in ("on", "off"):
            return f"Usage: {command} <on|off>"
        setattr(self.ctx, attr, state == "on")
        return f"{name}: {state.upper()}"

    def _cmd_reset(self, _arg: str) -> str:
        self.calc.reset()
        return "0"
