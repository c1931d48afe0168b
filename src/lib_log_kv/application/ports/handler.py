"""Handler port for observers of rendered lines.

Handlers see a copy of every line they accept. They cannot change or block
rendering: the writer ignores their return values and logs their exceptions.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_kv.domain.entry import HandlerMessage


@runtime_checkable
class HandlerPort(Protocol):
    """Observe lines selected by prefix and level."""

    def handles(self, prefix: str, level: str) -> bool:
        """Return ``True`` to receive lines with this prefix and level."""

    def handle(self, message: HandlerMessage) -> None:
        """Receive an owned copy of an accepted line."""


__all__ = ["HandlerPort"]
