"""Console adapters: terminal probe and line printers."""

from __future__ import annotations

from .printer import DEFAULT_INDENT, DEFAULT_WIDTH, SimplePrinter, TerminalPrinter, effect_codes, is_known_effect, write_line
from .terminal import RichTerminal, enable_virtual_terminal_processing

__all__ = [
    "DEFAULT_INDENT",
    "DEFAULT_WIDTH",
    "RichTerminal",
    "SimplePrinter",
    "TerminalPrinter",
    "effect_codes",
    "enable_virtual_terminal_processing",
    "is_known_effect",
    "write_line",
]
