from .app import main_entry
from .app import repl_loop
from .repl_core import REPL

__all__ = ["main_entry", "repl_loop", "REPL"]
