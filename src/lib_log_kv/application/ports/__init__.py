"""Protocols the application layer depends on."""

from __future__ import annotations

from .handler import HandlerPort
from .printer import PrinterPort
from .terminal import TerminalPort
from .time import ClockPort

__all__ = ["ClockPort", "HandlerPort", "PrinterPort", "TerminalPort"]
