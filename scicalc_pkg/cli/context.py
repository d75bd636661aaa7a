from dataclasses import dataclass


@dataclass
class ReplContext:
    """Holds the presentation settings of the interactive REPL session."""
    output_format: str = "human"  # "human" or "json"
    show_fraction: bool = False
    debug_mode: bool = False
