"""Rich-backed terminal probe implementing :class:`TerminalPort`.

Purpose
-------
Decide whether a sink is an interactive terminal, whether it should receive
colour, and how wide it is.

Contents
--------
* :class:`RichTerminal` - adapter around :class:`rich.console.Console`.
* :func:`enable_virtual_terminal_processing` - Windows console switch.

System Role
-----------
Rich already knows how to read ``NO_COLOR``, ``FORCE_COLOR`` and dumb
terminals, so terminal and colour detection defer to it. The width comes from
the sink's own file descriptor because Rich only measures the standard
streams.
"""

from __future__ import annotations

import os
import sys
from typing import IO, Any

from rich.console import Console

from lib_log_kv.application.ports.terminal import TerminalPort

_ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004


def enable_virtual_terminal_processing(sink: IO[Any]) -> bool:
    """Enable ANSI escape handling for ``sink`` on Windows consoles.

    Other platforms interpret escapes natively and return ``True``. Returns
    ``False`` when the sink is not a console or the call is refused.
    """

    if sys.platform != "win32":
        return True
    import ctypes
    import msvcrt

    try:
        handle = msvcrt.get_osfhandle(sink.fileno())
    except (AttributeError, OSError, ValueError):
        return False
    kernel32 = ctypes.windll.kernel32
    mode = ctypes.c_uint32()
    if not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
        return False
    if mode.value & _ENABLE_VIRTUAL_TERMINAL_PROCESSING:
        return True
    return bool(kernel32.SetConsoleMode(handle, mode.value | _ENABLE_VIRTUAL_TERMINAL_PROCESSING))


class RichTerminal(TerminalPort):
    """Probe ``sink`` through a Rich console bound to it."""

    def __init__(self, sink: IO[Any], *, console: Console | None = None, no_color: bool = False) -> None:
        self._sink = sink
        self._console = console if console is not None else Console(file=sink, no_color=no_color or None)

    @property
    def console(self) -> Console:
        return self._console

    def is_terminal(self) -> bool:
        return self._console.is_terminal

    def supports_color(self) -> bool:
        return self._console.color_system is not None and not self._console.no_color

    def width(self) -> int | None:
        return os.get_terminal_size(self._sink.fileno()).columns

    def enable_ansi(self) -> bool:
        return enable_virtual_terminal_processing(self._sink)


__all__ = ["RichTerminal", "enable_virtual_terminal_processing"]
