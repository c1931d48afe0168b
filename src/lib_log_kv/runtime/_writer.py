"""The :class:`Writer`: per-line classification, parsing and rendering.

Purpose
-------
Own the configuration (level table, printer, handlers) and the lock that
serialises every line through :func:`process_line`.

Contents
--------
* :class:`Writer` - thread-safe front door for raw lines.

System Role
-----------
Composition point of the runtime layer. It picks a printer for its sink,
creates the default level table lazily, and exposes the configuration
surface used by the module-level helpers in :mod:`lib_log_kv.runtime`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from datetime import datetime
from threading import RLock
from typing import IO, Any

from lib_log_kv.adapters.clock import SystemClock
from lib_log_kv.adapters.console.printer import is_known_effect
from lib_log_kv.application.ports import ClockPort, HandlerPort, PrinterPort
from lib_log_kv.application.use_cases.process_line import ProcessResult, process_line
from lib_log_kv.domain._codec import decode_text
from lib_log_kv.domain.header import HeaderParts, LogFlags
from lib_log_kv.domain.levels import EFFECT_NONE, LEVEL_THEMES, LevelTable, is_suppress_effect
from lib_log_kv.domain.pool import BufferPool, default_pool

from ._composition import create_printer
from ._logging import KvlogHandler
from ._settings import WriterSettings

logger = logging.getLogger(__name__)

_EMPTY_HEADER = HeaderParts()


def _warn_unknown_effects(levels: Mapping[str, str]) -> None:
    for name, effect in levels.items():
        normalized = effect.strip()
        if normalized.lower() == EFFECT_NONE or is_suppress_effect(normalized) or is_known_effect(normalized):
            continue
        logger.warning("unknown effect %r for level %r; rendering it without colour", effect, name)


class Writer:
    """Render raw log lines with level colours, wrapping and key/value pairs.

    Parameters
    ----------
    sink:
        Output stream; defaults to :data:`sys.stderr` at construction time.
    levels:
        Level table as ``{name: effect}``; the built-in table is used until
        one is configured.
    color / width / terminal:
        Printer selection, see :func:`create_printer`.
    clock:
        Timestamp source for entries handed to handlers.
    pool:
        Buffer pool shared by parsing and rendering.
    printer:
        Explicit printer, bypassing detection.

    Examples
    --------
    >>> import io
    >>> sink = io.StringIO()
    >>> writer = Writer(sink, terminal=False)
    >>> writer.write("info: listening port=8080\\n")
    26
    >>> writer.suppress("debug")
    >>> writer.write("debug: noisy")
    12
    >>> sink.getvalue()
    'info: listening port=8080\\n'
    """

    def __init__(
        self,
        sink: IO[Any] | None = None,
        *,
        levels: Mapping[str, str] | None = None,
        color: bool | None = None,
        width: int | None = None,
        terminal: bool | None = None,
        clock: ClockPort | None = None,
        pool: BufferPool | None = None,
        printer: PrinterPort | None = None,
    ) -> None:
        self._lock = RLock()
        self._sink = sink if sink is not None else sys.stderr
        self._color = color
        self._width = width
        self._terminal = terminal
        self._clock = clock or SystemClock()
        self._pool = pool if pool is not None else default_pool()
        self._levels: LevelTable | None = None
        if levels is not None:
            _warn_unknown_effects(levels)
            self._levels = LevelTable(levels)
        self._handlers: list[HandlerPort] = []
        self._dispatching = False
        self._printer = printer if printer is not None else self._build_printer()

    @classmethod
    def from_settings(cls, settings: WriterSettings, sink: IO[Any] | None = None, **kwargs: Any) -> "Writer":
        """Build a writer from :class:`WriterSettings`.

        The theme provides the base table, explicit levels override it and
        suppressed names are hidden last.
        """

        writer = cls(sink, color=settings.color, width=settings.width, **kwargs)
        if settings.theme:
            writer.use_theme(settings.theme)
        for name, effect in settings.levels.items():
            writer.set_level(name, effect)
        if settings.suppress:
            writer.suppress(*settings.suppress)
        return writer

    def _build_printer(self) -> PrinterPort:
        return create_printer(self._sink, color=self._color, width=self._width, terminal=self._terminal, pool=self._pool)

    def _level_table(self) -> LevelTable:
        if self._levels is None:
            self._levels = LevelTable()
        return self._levels

    @property
    def lock(self) -> RLock:
        return self._lock

    @property
    def sink(self) -> IO[Any]:
        return self._sink

    @property
    def printer(self) -> PrinterPort:
        return self._printer

    def now(self) -> datetime:
        return self._clock.now()

    def levels(self) -> dict[str, str]:
        """Return a copy of the level table as ``{name: effect}``."""

        with self._lock:
            return self._level_table().as_dict()

    def set_levels(self, levels: Mapping[str, str]) -> None:
        """Replace the whole level table."""

        _warn_unknown_effects(levels)
        table = LevelTable(levels)
        with self._lock:
            self._levels = table

    def set_level(self, name: str, effect: str) -> None:
        """Set the effect of a single level, adding it when new."""

        _warn_unknown_effects({name: effect})
        with self._lock:
            self._levels = self._level_table().with_level(name, effect)

    def suppress(self, *names: str) -> None:
        """Hide every line starting with one of ``names``."""

        with self._lock:
            self._levels = self._level_table().with_suppressed(*names)

    def is_suppressed(self, name: str) -> bool:
        with self._lock:
            return self._level_table().is_suppressed(name)

    def use_theme(self, name: str) -> None:
        """Replace the level table with the named theme."""

        try:
            theme = LEVEL_THEMES[name]
        except KeyError as exc:
            known = ", ".join(sorted(LEVEL_THEMES))
            raise ValueError(f"Unknown level theme {name!r}; expected one of: {known}") from exc
        self.set_levels(theme)

    def handle(self, handler: HandlerPort) -> None:
        """Register ``handler`` to observe rendered lines."""

        with self._lock:
            self._handlers.append(handler)

    def remove_handler(self, handler: HandlerPort) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def handlers(self) -> tuple[HandlerPort, ...]:
        with self._lock:
            return tuple(self._handlers)

    def set_output(self, sink: IO[Any]) -> None:
        """Send further lines to ``sink``, choosing a printer for it."""

        with self._lock:
            self._sink = sink
            self._printer = self._build_printer()

    def set_color(self, enabled: bool | None) -> None:
        """Force colour on or off; ``None`` returns to detection."""

        with self._lock:
            self._color = enabled
            self._printer = self._build_printer()

    def set_printer(self, printer: PrinterPort) -> None:
        with self._lock:
            self._printer = printer

    def process(self, body: str, header: HeaderParts = _EMPTY_HEADER) -> ProcessResult:
        """Run one header-stripped line through the pipeline.

        Lines written while handlers are being notified (a handler logging
        back into this writer) are rendered without notifying handlers again.
        """

        with self._lock:
            outermost = not self._dispatching
            self._dispatching = True
            try:
                return process_line(
                    body,
                    header=header,
                    levels=self._level_table(),
                    printer=self._printer,
                    handlers=self._handlers,
                    clock=self._clock,
                    pool=self._pool,
                    dispatch=outermost and bool(self._handlers),
                )
            finally:
                if outermost:
                    self._dispatching = False

    def write(self, data: str | bytes) -> int:
        """Render one raw line and return the number of input units consumed.

        A single trailing newline is ignored. Suppressed lines are consumed
        without output.
        """

        size = len(data)
        line = decode_text(data) if isinstance(data, (bytes, bytearray)) else data
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        self.process(line)
        return size

    def flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if callable(flush):
            flush()

    def writable(self) -> bool:
        return True

    def attach(
        self,
        logger: logging.Logger | str | None = None,
        *,
        prefix: str = "",
        flags: LogFlags = LogFlags.STD,
        level: int = logging.NOTSET,
    ) -> KvlogHandler:
        """Route ``logger`` (the root logger by default) through this writer.

        Any bridge handler already installed on that logger is replaced, so a
        logger feeds at most one writer.
        """

        target = logger if isinstance(logger, logging.Logger) else logging.getLogger(logger)
        detach(target)
        handler = KvlogHandler(self, prefix=prefix, flags=flags, level=level)
        target.addHandler(handler)
        return handler

    def __repr__(self) -> str:
        return f"<{type(self).__name__} sink={self._sink!r} printer={type(self._printer).__name__}>"


def detach(logger: logging.Logger | str | None = None) -> list[KvlogHandler]:
    """Remove every :class:`KvlogHandler` from ``logger`` and return them."""

    target = logger if isinstance(logger, logging.Logger) else logging.getLogger(logger)
    removed = [handler for handler in list(target.handlers) if isinstance(handler, KvlogHandler)]
    for handler in removed:
        target.removeHandler(handler)
        handler.close()
    return removed


__all__ = ["Writer", "detach"]
