"""Terminal capability port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TerminalPort(Protocol):
    """Answer questions about the sink a printer writes to."""

    def is_terminal(self) -> bool:
        """Return ``True`` when the sink is an interactive terminal."""

    def supports_color(self) -> bool:
        """Return ``True`` when ANSI colour should be written."""

    def width(self) -> int | None:
        """Return the current column count, ``None`` when unknown. May raise."""

    def enable_ansi(self) -> bool:
        """Best-effort switch enabling ANSI escape processing on the sink."""


__all__ = ["TerminalPort"]
