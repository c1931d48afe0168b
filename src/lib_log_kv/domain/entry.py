"""Per-line records passed from the writer to printers and handlers.

Purpose
-------
Carry one classified, parsed line through the writer pipeline.

Contents
--------
* :class:`LogEntry` - transient record wrapping the pooled :class:`Message`.
* :class:`HandlerMessage` - immutable copy handed to handlers.

System Role
-----------
A :class:`LogEntry` lives only while the writer holds its lock: once the
printer is done the underlying message is released and the entry reads empty.
Handlers therefore receive a :class:`HandlerMessage` that owns its data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .header import HeaderParts
from .message import Message


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts


@dataclass(slots=True, frozen=True)
class LogEntry:
    """One line on its way to the printer.

    Attributes
    ----------
    timestamp:
        Time the writer received the line (timezone-aware).
    header:
        Prefix, date, time and file segments stripped from the line.
    level:
        Matched level name as configured, or ``""``.
    effect:
        Display effect of the level, or ``""``.
    message:
        Parsed text and pairs; released after rendering.
    """

    timestamp: datetime
    header: HeaderParts
    level: str
    effect: str
    message: Message

    def __post_init__(self) -> None:
        _ensure_aware(self.timestamp)

    @property
    def prefix(self) -> str:
        return self.header.prefix

    @property
    def date(self) -> str:
        return self.header.date

    @property
    def time(self) -> str:
        return self.header.time

    @property
    def file(self) -> str:
        return self.header.file

    @property
    def text(self) -> str:
        return self.message.text

    @property
    def pairs(self) -> list[tuple[str, str]]:
        return self.message.pairs

    def to_handler_message(self) -> "HandlerMessage":
        """Copy everything a handler may keep beyond this call."""

        return HandlerMessage(
            timestamp=self.timestamp,
            prefix=self.prefix,
            file=self.file,
            level=self.level,
            text=self.text,
            keyvals=tuple(self.message.keyvals),
        )


@dataclass(slots=True, frozen=True)
class HandlerMessage:
    """Immutable snapshot of a rendered line for handlers.

    ``keyvals`` alternates keys and values as parsed (all strings).
    """

    timestamp: datetime
    prefix: str
    file: str
    level: str
    text: str
    keyvals: tuple[str, ...] = field(default_factory=tuple)

    @property
    def pairs(self) -> list[tuple[str, str]]:
        items = self.keyvals
        return [(items[index], items[index + 1]) for index in range(0, len(items) - 1, 2)]

    def to_dict(self) -> dict[str, Any]:
        """Serialise the message with an ISO8601 UTC timestamp."""

        return {
            "timestamp": self.timestamp.astimezone(timezone.utc).isoformat(),
            "prefix": self.prefix,
            "file": self.file,
            "level": self.level,
            "text": self.text,
            "pairs": dict(self.pairs),
        }


__all__ = ["HandlerMessage", "LogEntry"]
