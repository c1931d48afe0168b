"""Process-wide standard writer and access helpers."""

from __future__ import annotations

from threading import RLock

from ._writer import Writer

_STANDARD: Writer | None = None
_STATE_LOCK = RLock()


def standard_writer() -> Writer:
    """Return the shared writer on :data:`sys.stderr`, creating it on first use."""

    global _STANDARD
    with _STATE_LOCK:
        if _STANDARD is None:
            _STANDARD = Writer()
        return _STANDARD


def set_standard_writer(writer: Writer | None) -> None:
    """Install ``writer`` as the shared writer; ``None`` resets it."""

    global _STANDARD
    with _STATE_LOCK:
        _STANDARD = writer


def has_standard_writer() -> bool:
    with _STATE_LOCK:
        return _STANDARD is not None


__all__ = ["has_standard_writer", "set_standard_writer", "standard_writer"]
