"""Bridge from the stdlib :mod:`logging` package to a :class:`Writer`.

Purpose
-------
Let applications keep using ``logging.getLogger(...)`` while their output is
classified, parsed and rendered like any other line.

Contents
--------
* :class:`KvlogHandler` - ``logging.Handler`` formatting records as
  ``<header><level>: <message>`` lines.

System Role
-----------
Installed by :meth:`lib_log_kv.runtime.Writer.attach`. The handler owns a
:class:`LineWriter` whose header shape follows the handler's own ``prefix`` and
``flags`` attributes, so changing them later is detected as drift.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from lib_log_kv.domain.header import HeaderFormat, LogFlags
from lib_log_kv.domain.levels import LogLevel

from ._line_writer import LineWriter

if TYPE_CHECKING:
    from ._writer import Writer

PACKAGE_LOGGER = "lib_log_kv"

_EXCEPTION_FORMATTER = logging.Formatter()


def _is_foreign(record: logging.LogRecord) -> bool:
    """Drop records emitted by this package to avoid feeding diagnostics back in."""

    return not (record.name == PACKAGE_LOGGER or record.name.startswith(PACKAGE_LOGGER + "."))


class KvlogHandler(logging.Handler):
    """Render stdlib log records through a :class:`Writer`.

    Examples
    --------
    >>> import io
    >>> from lib_log_kv.runtime import Writer
    >>> sink = io.StringIO()
    >>> demo = logging.getLogger("kvlog.demo")
    >>> demo.propagate = False
    >>> handler = Writer(sink, terminal=False).attach(demo, flags=LogFlags.NONE)
    >>> demo.warning("disk low free=%s", "5%")
    >>> sink.getvalue()
    'warning: disk low free=5%\\n'
    >>> demo.removeHandler(handler)
    """

    def __init__(
        self,
        writer: "Writer",
        *,
        prefix: str = "",
        flags: LogFlags = LogFlags.STD,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self.writer = writer
        self.prefix = prefix
        self.flags = LogFlags(flags)
        self.addFilter(_is_foreign)
        self._lines = LineWriter(writer, source=self)

    @property
    def lines(self) -> LineWriter:
        return self._lines

    def format_line(self, record: logging.LogRecord) -> str:
        """Return the line a plain logger with this prefix and these flags would write."""

        header = HeaderFormat(self.prefix, LogFlags(self.flags))
        when = datetime.fromtimestamp(record.created).astimezone()
        file = header.format_file(record.pathname, record.lineno) if header.has_file else None
        text = f"{LogLevel.from_python_level(record.levelno).prefix}: {record.getMessage()}"
        formatter = self.formatter or _EXCEPTION_FORMATTER
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = formatter.formatException(record.exc_info)
        if record.exc_text:
            text = f"{text}\n{record.exc_text}"
        if record.stack_info:
            text = f"{text}\n{formatter.formatStack(record.stack_info)}"
        return header.render(when, file) + text

    def handle(self, record: logging.LogRecord) -> logging.LogRecord | bool:
        """Filter and emit ``record`` without taking the handler lock.

        :meth:`emit` serialises on the writer lock. A writer handler that logs
        back into this logger already holds that lock, so the handler lock must
        never be held while waiting for it.
        """

        result = self.filter(record)
        if isinstance(result, logging.LogRecord):
            record = result
        if result:
            self.emit(record)
        return result

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._lines.write(self.format_line(record))
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.writer.flush()

    def __repr__(self) -> str:
        level = logging.getLevelName(self.level)
        return f"<{type(self).__name__} prefix={self.prefix!r} flags={self.flags!r} ({level})>"


__all__ = ["KvlogHandler", "PACKAGE_LOGGER"]
