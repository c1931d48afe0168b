"""Printer selection for a sink."""

from __future__ import annotations

from typing import IO, Any

from lib_log_kv.adapters.console.printer import SimplePrinter, TerminalPrinter
from lib_log_kv.adapters.console.terminal import RichTerminal
from lib_log_kv.application.ports import PrinterPort
from lib_log_kv.domain.pool import BufferPool


def create_printer(
    sink: IO[Any],
    *,
    color: bool | None = None,
    width: int | None = None,
    terminal: bool | None = None,
    pool: BufferPool | None = None,
) -> PrinterPort:
    """Return the printer suited to ``sink``.

    Parameters
    ----------
    sink:
        Stream receiving rendered lines.
    color:
        ``None`` detects colour support, ``True`` forces colour (and terminal
        rendering), ``False`` disables it.
    width:
        Fixed width instead of querying the terminal each line.
    terminal:
        ``None`` detects interactivity; ``True``/``False`` force the terminal or
        the simple printer.
    pool:
        Buffer pool for rendered lines.

    Examples
    --------
    >>> from io import StringIO
    >>> type(create_printer(StringIO())).__name__
    'SimplePrinter'
    >>> type(create_printer(StringIO(), width=80, terminal=True)).__name__
    'TerminalPrinter'
    """

    probe = RichTerminal(sink, no_color=color is False)
    interactive = terminal if terminal is not None else (probe.is_terminal() or color is True)
    if not interactive:
        return SimplePrinter(sink, pool=pool)
    use_color = probe.supports_color() if color is None else color
    if use_color:
        probe.enable_ansi()
    return TerminalPrinter(sink, terminal=probe, width=width, color=use_color, pool=pool)


__all__ = ["create_printer"]
