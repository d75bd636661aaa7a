"""Command-line entry point: one-shot evaluation or the interactive REPL."""

import argparse
import json
import logging

from ..api import execute
from ..config import VERSION
from ..logging_config import setup_logging
from ..state import AngleMode
from ..state import AngleModeContext
from ..state import CalculatorContext
from ..utils.formatting import DisplayFormat
from .context import ReplContext
from .repl_core import REPL

logger = logging.getLogger(__name__)


def repl_loop(
    calculator: CalculatorContext | None = None, output_format: str = "human"
) -> None:
    REPL(ReplContext(output_format=output_format), calculator).start()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scicalc", description="Scientific calculator engine"
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--angle",
        type=str,
        choices=[mode.value for mode in AngleMode],
        help="Initial angle mode (default: deg)",
    )
    parser.add_argument(
        "--display",
        type=str,
        choices=[fmt.value for fmt in DisplayFormat],
        default="norm",
        help="Display mode for results",
    )
    parser.add_argument(
        "--fix", type=int, default=2, help="Decimal places for --display fix"
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    return parser


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the scicalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = _build_parser().parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0

    calculator = CalculatorContext()
    if args.angle:
        calculator.angle = AngleModeContext(AngleMode(args.angle))
    calculator.display_format = DisplayFormat(args.display)
    calculator.fix_digits = max(0, args.fix)

    if args.eval_expr is not None:
        expr = args.eval_expr.strip()
        # Remove ">>>" prompt if present
        if expr.startswith(">>>"):
            expr = expr[3:].strip()
        result = execute(expr, calculator)
        if args.format == "json":
            print(json.dumps(result.to_dict(), ensure_ascii=False))
        else:
            print(result.display)
        return 0 if result.ok else 1

    repl_loop(calculator, output_format=args.format)
    return 0
