"""Printers implementing :class:`PrinterPort` for terminals and plain streams.

Purpose
-------
Render a :class:`~lib_log_kv.domain.entry.LogEntry` as one line: word-wrapped,
indented and coloured on terminals; compact logfmt everywhere else.

Contents
--------
* :func:`effect_codes` - resolve a level effect to ANSI SGR parameters.
* :func:`write_line` - single-call write of a rendered line to any sink.
* :class:`TerminalPrinter` - width-aware coloured renderer.
* :class:`SimplePrinter` - unwrapped renderer for files and pipes.

System Role
-----------
Selected by :func:`lib_log_kv.runtime.create_printer` depending on whether the
sink is a terminal. Both printers build the line in a pooled buffer and hand it
to the sink in one write so concurrent writers never interleave partial lines.
"""

from __future__ import annotations

import io
import re
from collections.abc import Callable
from functools import lru_cache
from typing import IO, Any

from rich.color import Color, ColorParseError

from lib_log_kv.application.ports.printer import PrinterPort
from lib_log_kv.application.ports.terminal import TerminalPort
from lib_log_kv.domain._codec import decode_text, encode_text
from lib_log_kv.domain.entry import LogEntry
from lib_log_kv.domain.levels import EFFECT_NONE, is_suppress_effect
from lib_log_kv.domain.logfmt import write_key_value
from lib_log_kv.domain.pool import BufferPool, default_pool

DEFAULT_WIDTH = 120
DEFAULT_INDENT = 4
FILE_EFFECT = "bright black"
VALUE_EFFECT = "bright cyan"

_SGR = re.compile(r"^[0-9]+(;[0-9]+)*$")
_ALIASES = {"gray": "1;30", "grey": "1;30"}
_WHITESPACE = re.compile(r"\s+")
_BLACKSPACE = re.compile(r"[^\s,]+")
_RESET = b"\x1b[0m"


@lru_cache(maxsize=256)
def effect_codes(effect: str) -> str | None:
    """Return the SGR parameters for ``effect`` or ``None`` for no colour.

    Numeric SGR strings pass through; colour names resolve through Rich, so
    ``"bright cyan"``, ``"color(202)"`` and ``"#ff8800"`` all work.

    Examples
    --------
    >>> effect_codes("red"), effect_codes("bright black"), effect_codes("32;1")
    ('31', '90', '32;1')
    >>> effect_codes("none") is None, effect_codes("no such colour") is None
    (True, True)
    """

    name = effect.strip().lower()
    if not name or name == EFFECT_NONE or is_suppress_effect(name):
        return None
    if _SGR.match(name):
        return name
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        color = Color.parse(name.replace(" ", "_"))
    except ColorParseError:
        return None
    return ";".join(color.get_ansi_codes(foreground=True)) or None


def is_known_effect(effect: str) -> bool:
    """Return ``True`` when ``effect`` is a colour, ``none`` or a suppress alias."""

    name = effect.strip().lower()
    return name == EFFECT_NONE or is_suppress_effect(name) or effect_codes(name) is not None


def _utf8_stream(sink: Any) -> bool:
    encoding = (getattr(sink, "encoding", None) or "").lower().replace("-", "").replace("_", "")
    return encoding == "utf8"


def write_line(sink: IO[Any], data: bytes | bytearray) -> None:
    """Write ``data`` to ``sink`` in one call and flush.

    Text streams backed by a UTF-8 byte buffer receive the raw bytes so
    undecodable input passes through unchanged; other text streams receive the
    decoded text; binary streams receive bytes.
    """

    payload = bytes(data)
    if isinstance(sink, io.TextIOBase) or hasattr(sink, "encoding"):
        buffer = getattr(sink, "buffer", None)
        if buffer is not None and _utf8_stream(sink):
            sink.flush()
            buffer.write(payload)
            buffer.flush()
            return
        sink.write(decode_text(payload))
    else:
        sink.write(payload)
    flush = getattr(sink, "flush", None)
    if callable(flush):
        flush()


def _finish(buf: bytearray) -> None:
    end = len(buf)
    while end and buf[end - 1] in b" \t":
        end -= 1
    del buf[end:]
    buf += b"\n"


class _Line:
    """Column-tracking view over the output buffer for one rendered line."""

    __slots__ = ("buf", "col", "color")

    def __init__(self, buf: bytearray, color: bool) -> None:
        self.buf = buf
        self.col = 0
        self.color = color

    def write(self, text: str) -> None:
        self.buf += encode_text(text)
        self.col += len(text)

    def newline(self, indent: int) -> None:
        self.buf += b"\n"
        self.buf += b" " * indent
        self.col = indent

    def styled(self, codes: str | None, text: str) -> None:
        if self.color and codes:
            self.buf += f"\x1b[0;{codes}m".encode("ascii")
            self.write(text)
            self.buf += _RESET
        else:
            self.write(text)


class TerminalPrinter(PrinterPort):
    """Render entries for an interactive terminal.

    Text wraps at word boundaries and pairs wrap as whole units, with
    continuation lines indented to the column after prefix, date and time (or
    four spaces). The file and level segments and every value are coloured
    when ``color`` is enabled.

    Examples
    --------
    >>> from io import StringIO
    >>> from datetime import datetime, timezone
    >>> from lib_log_kv.domain.entry import LogEntry
    >>> from lib_log_kv.domain.header import HeaderParts
    >>> from lib_log_kv.domain.message import parse
    >>> sink = StringIO()
    >>> printer = TerminalPrinter(sink, width=40)
    >>> with parse("this is the message key1=value1 key2=value2 key3=value3") as msg:
    ...     printer.render(LogEntry(datetime.now(timezone.utc), HeaderParts(), "", "", msg))
    >>> print(sink.getvalue(), end="")
    this is the message key1=value1
        key2=value2 key3=value3
    """

    def __init__(
        self,
        sink: IO[Any],
        *,
        terminal: TerminalPort | None = None,
        width: int | Callable[[], int | None] | None = None,
        color: bool = False,
        pool: BufferPool | None = None,
    ) -> None:
        self._sink = sink
        self._terminal = terminal
        self._width_source = width
        self._color = color
        self._pool = pool if pool is not None else default_pool()

    @property
    def color(self) -> bool:
        return self._color

    def _query_width(self) -> int | None:
        source = self._width_source
        if isinstance(source, int):
            return source
        if callable(source):
            return source()
        if self._terminal is not None:
            return self._terminal.width()
        return None

    def available_width(self) -> int:
        """Return the usable width for the next line, falling back to 120."""

        try:
            width = self._query_width()
        except (OSError, ValueError, AttributeError):
            return DEFAULT_WIDTH
        if width is None or width - 1 <= 0:
            return DEFAULT_WIDTH
        return width - 1

    def render(self, entry: LogEntry) -> None:
        width = self.available_width()
        buf = self._pool.acquire()
        try:
            line = _Line(buf, self._color)
            if entry.prefix:
                line.write(entry.prefix)
            if entry.date:
                line.write(entry.date + " ")
            if entry.time:
                line.write(entry.time + " ")
            indent = line.col or DEFAULT_INDENT
            if entry.file:
                line.styled(effect_codes(FILE_EFFECT), entry.file + ": ")
            if entry.level:
                line.styled(effect_codes(entry.effect), entry.level + ": ")
            _write_text(line, entry.text, width, indent)
            value_codes = effect_codes(VALUE_EFFECT)
            for key, value in entry.message.iter_pairs():
                _write_pair(line, key, value, width, indent, value_codes)
            _finish(buf)
            write_line(self._sink, buf)
        finally:
            self._pool.release(buf)


def _write_text(line: _Line, text: str, width: int, indent: int) -> None:
    pos = 0
    size = len(text)
    while pos < size:
        spaced = False
        blank = _WHITESPACE.match(text, pos)
        if blank:
            spaced = True
            pos = blank.end()
            if pos >= size:
                break
        word_match = _BLACKSPACE.match(text, pos)
        word = word_match.group() if word_match else ""
        pos += len(word)
        if pos < size and not text[pos].isspace():
            word += text[pos]
            pos += 1
        gap = 1 if spaced else 0
        if line.col > indent and line.col + gap + len(word) > width:
            line.newline(indent)
        elif spaced:
            line.write(" ")
        line.write(word)


def _write_pair(line: _Line, key: str, value: str, width: int, indent: int, value_codes: str | None) -> None:
    gap = 1 if line.col > indent else 0
    if line.col > indent and line.col + gap + len(key) + 1 + len(value) > width:
        line.newline(indent)
        gap = 0
    if gap:
        line.write(" ")
    line.write(key + "=")
    line.styled(value_codes, value)


class SimplePrinter(PrinterPort):
    """Render entries on one line with logfmt pairs, no colour or wrapping.

    Examples
    --------
    >>> from io import StringIO
    >>> from datetime import datetime, timezone
    >>> from lib_log_kv.domain.entry import LogEntry
    >>> from lib_log_kv.domain.header import HeaderParts
    >>> from lib_log_kv.domain.message import parse
    >>> sink = StringIO()
    >>> with parse('starting path="/tmp/a b" n=1') as msg:
    ...     SimplePrinter(sink).render(LogEntry(datetime.now(timezone.utc), HeaderParts(time="12:00:00"), "info", "cyan", msg))
    >>> sink.getvalue()
    '12:00:00 info: starting path="/tmp/a b" n=1\\n'
    """

    def __init__(self, sink: IO[Any], *, pool: BufferPool | None = None) -> None:
        self._sink = sink
        self._pool = pool if pool is not None else default_pool()

    def render(self, entry: LogEntry) -> None:
        buf = self._pool.acquire()
        try:
            if entry.prefix:
                buf += encode_text(entry.prefix)
            if entry.date:
                buf += encode_text(entry.date + " ")
            if entry.time:
                buf += encode_text(entry.time + " ")
            if entry.file:
                buf += encode_text(entry.file + ": ")
            if entry.level:
                buf += encode_text(entry.level + ": ")
            buf += encode_text(entry.text)
            for key, value in entry.message.iter_pairs():
                if buf and buf[-1:] != b" ":
                    buf += b" "
                write_key_value(buf, key, value)
            _finish(buf)
            write_line(self._sink, buf)
        finally:
            self._pool.release(buf)


__all__ = [
    "DEFAULT_INDENT",
    "DEFAULT_WIDTH",
    "SimplePrinter",
    "TerminalPrinter",
    "effect_codes",
    "is_known_effect",
    "write_line",
]
