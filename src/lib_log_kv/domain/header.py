"""Header grammar for lines written by a configured logger.

Purpose
-------
A logger configured with a prefix and date/time/file flags writes a header in
front of every message. :class:`HeaderFormat` captures that shape once so the
writer can peel the header off each line and render its parts separately.

Contents
--------
* :class:`LogFlags` - which header parts a logger writes.
* :class:`HeaderParts` - the parts found on one line.
* :class:`HeaderStrip` - parts, remaining body and a drift flag.
* :class:`HeaderFormat` - derive, strip and render headers.

System Role
-----------
Used by :class:`lib_log_kv.runtime.LineWriter`. When a line no longer matches
the derived shape (someone changed the logger's flags after attaching) the
strip result reports ``changed`` and the line writer re-derives the format.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntFlag
from typing import Any

_DATE = re.compile(r"\d{4}/\d\d/\d\d")
_TIME = re.compile(r"\d\d:\d\d:\d\d(\.\d+)?")
_FILE = re.compile(r"([a-zA-Z]:)?[^:]+:\d+")
_COLON = re.compile(r"[ \t]*:?[ \t]*")

UNKNOWN_FILE = "???:0"


class LogFlags(IntFlag):
    """Header parts written in front of each message."""

    NONE = 0
    DATE = 1
    TIME = 2
    MICROSECONDS = 4
    LONGFILE = 8
    SHORTFILE = 16
    UTC = 32
    STD = DATE | TIME


@dataclass(frozen=True, slots=True)
class HeaderParts:
    """Header segments found on one line; empty strings when absent."""

    prefix: str = ""
    date: str = ""
    time: str = ""
    file: str = ""


@dataclass(frozen=True, slots=True)
class HeaderStrip:
    """Outcome of :meth:`HeaderFormat.strip`."""

    parts: HeaderParts
    body: str
    changed: bool = False


def _skip_blanks(line: str, pos: int) -> int:
    while pos < len(line) and line[pos] in " \t":
        pos += 1
    return pos


@dataclass(frozen=True, slots=True)
class HeaderFormat:
    """Shape of the header a logger writes.

    Examples
    --------
    >>> fmt = HeaderFormat(prefix="app ", flags=LogFlags.STD | LogFlags.SHORTFILE)
    >>> result = fmt.strip("app 2099/12/31 12:34:56 main.py:42: info: ready")
    >>> result.parts.date, result.parts.time, result.parts.file, result.body
    ('2099/12/31', '12:34:56', 'main.py:42', 'info: ready')
    >>> fmt.strip("info: no header").changed
    True
    """

    prefix: str = ""
    flags: LogFlags = LogFlags.NONE

    @classmethod
    def from_source(cls, source: Any) -> "HeaderFormat":
        """Derive the format from an object exposing ``prefix`` and ``flags``."""

        if source is None:
            return cls()
        prefix = getattr(source, "prefix", "") or ""
        flags = LogFlags(int(getattr(source, "flags", 0) or 0))
        return cls(prefix=str(prefix), flags=flags)

    @property
    def has_date(self) -> bool:
        return bool(self.flags & LogFlags.DATE)

    @property
    def has_time(self) -> bool:
        return bool(self.flags & (LogFlags.TIME | LogFlags.MICROSECONDS))

    @property
    def has_file(self) -> bool:
        return bool(self.flags & (LogFlags.LONGFILE | LogFlags.SHORTFILE))

    def strip(self, line: str) -> HeaderStrip:
        """Split ``line`` into header parts and body.

        Every part the format expects but the line lacks marks the result as
        ``changed``; stripping continues with the remaining parts.
        """

        changed = False
        pos = 0
        prefix = date = time = file = ""
        if self.prefix:
            if line.startswith(self.prefix):
                prefix = self.prefix
                pos = len(self.prefix)
            else:
                changed = True
        pos = _skip_blanks(line, pos)
        if self.has_date:
            match = _DATE.match(line, pos)
            if match:
                date = match.group()
                pos = _skip_blanks(line, match.end())
            else:
                changed = True
        if self.has_time:
            match = _TIME.match(line, pos)
            if match:
                time = match.group()
                pos = _skip_blanks(line, match.end())
            else:
                changed = True
        if self.has_file:
            match = _FILE.match(line, pos)
            if match:
                file = match.group()
                pos = _COLON.match(line, match.end()).end()
            else:
                changed = True
        body = line[_skip_blanks(line, pos) :]
        return HeaderStrip(HeaderParts(prefix, date, time, file), body, changed)

    def format_file(self, pathname: str | None, lineno: int | None) -> str:
        """Return the ``file:line`` segment a logger with these flags writes."""

        if not pathname:
            return UNKNOWN_FILE
        name = os.path.basename(pathname) if self.flags & LogFlags.SHORTFILE else pathname
        return f"{name}:{lineno or 0}"

    def render(self, when: datetime, file: str | None = None) -> str:
        """Return the header text for a message logged at ``when``.

        Examples
        --------
        >>> from datetime import datetime, timezone
        >>> fmt = HeaderFormat(flags=LogFlags.TIME | LogFlags.UTC | LogFlags.SHORTFILE)
        >>> fmt.render(datetime(2099, 12, 31, 12, 34, 56, tzinfo=timezone.utc), "main.py:7")
        '12:34:56 main.py:7: '
        """

        when = when.astimezone(timezone.utc) if self.flags & LogFlags.UTC else when.astimezone()
        parts = [self.prefix]
        if self.has_date:
            parts.append(when.strftime("%Y/%m/%d "))
        if self.has_time:
            parts.append(when.strftime("%H:%M:%S"))
            if self.flags & LogFlags.MICROSECONDS:
                parts.append(f".{when.microsecond:06d}")
            parts.append(" ")
        if self.has_file:
            parts.append(f"{file or UNKNOWN_FILE}: ")
        return "".join(parts)


__all__ = ["HeaderFormat", "HeaderParts", "HeaderStrip", "LogFlags", "UNKNOWN_FILE"]
