"""Printer port describing how a parsed line reaches its sink.

Purpose
-------
Let the writer render entries without knowing whether the sink is an
interactive terminal (wrapping, colour) or a plain stream.

Contents
--------
* :class:`PrinterPort` - runtime-checkable protocol with a single ``render``.

System Role
-----------
Implemented by :class:`~lib_log_kv.adapters.console.printer.TerminalPrinter`
and :class:`~lib_log_kv.adapters.console.printer.SimplePrinter`; selected by the
runtime composition helpers.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_kv.domain.entry import LogEntry


@runtime_checkable
class PrinterPort(Protocol):
    """Write one entry to the sink as a single newline-terminated line."""

    def render(self, entry: LogEntry) -> None:
        """Render ``entry`` and write it in one call."""


__all__ = ["PrinterPort"]
