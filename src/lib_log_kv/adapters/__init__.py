"""Adapter implementations for the application ports."""

from __future__ import annotations

from .clock import SystemClock
from .console import RichTerminal, SimplePrinter, TerminalPrinter

__all__ = ["RichTerminal", "SimplePrinter", "SystemClock", "TerminalPrinter"]
