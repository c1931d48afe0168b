"""Use case turning one header-stripped line into rendered output.

Purpose
-------
Apply level suppression and classification, parse the body, notify handlers
and render, releasing the pooled message on every path.

Contents
--------
* :func:`process_line` - the per-line pipeline.
* :data:`ProcessResult` - diagnostic dictionary returned to the writer.

System Role
-----------
Called by :class:`lib_log_kv.runtime.Writer` while it holds its lock; all
collaborators are passed in so tests can drive the pipeline with fakes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from lib_log_kv.application.ports import ClockPort, HandlerPort, PrinterPort
from lib_log_kv.domain.entry import HandlerMessage, LogEntry
from lib_log_kv.domain.header import HeaderParts
from lib_log_kv.domain.levels import LevelTable
from lib_log_kv.domain.message import parse
from lib_log_kv.domain.pool import BufferPool

logger = logging.getLogger(__name__)

ProcessResult = dict[str, Any]


def process_line(
    body: str,
    *,
    header: HeaderParts,
    levels: LevelTable,
    printer: PrinterPort,
    handlers: Sequence[HandlerPort],
    clock: ClockPort,
    pool: BufferPool | None = None,
    dispatch: bool = True,
) -> ProcessResult:
    """Classify, parse, dispatch and render ``body``.

    Parameters
    ----------
    body:
        Line text after the logger header has been removed.
    header:
        Header segments stripped from the line.
    levels:
        Table deciding suppression and the level effect.
    printer:
        Adapter writing the rendered line.
    handlers:
        Observers offered a copy of the line.
    clock:
        Source of the entry timestamp.
    pool:
        Buffer pool backing the parsed message.
    dispatch:
        ``False`` skips handlers (used for lines written while handlers run).

    Returns
    -------
    dict
        ``{"ok": True, "suppressed": bool, ...}`` with the matched ``level``
        and the number of handlers that received the line.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> class Clock:
    ...     def now(self):
    ...         return datetime(2099, 12, 31, tzinfo=timezone.utc)
    >>> class Printer:
    ...     def render(self, entry):
    ...         print(entry.level, entry.text, entry.pairs)
    >>> result = process_line("warning: low disk free=5%", header=HeaderParts(),
    ...     levels=LevelTable(), printer=Printer(), handlers=[], clock=Clock())
    warning low disk [('free', '5%')]
    >>> result["suppressed"], result["level"]
    (False, 'warning')
    >>> process_line("debug: x", header=HeaderParts(), levels=LevelTable({"debug": "hide"}),
    ...     printer=Printer(), handlers=[], clock=Clock())["suppressed"]
    True
    """

    if levels.is_line_suppressed(body):
        return {"ok": True, "suppressed": True}
    match = levels.match(body)
    level = effect = ""
    if match is not None:
        level, effect = match.level, match.effect
        body = body[match.end :]
    with parse(body, pool=pool) as message:
        entry = LogEntry(timestamp=clock.now(), header=header, level=level, effect=effect, message=message)
        handled = _dispatch_handlers(handlers, entry) if dispatch else 0
        printer.render(entry)
    return {"ok": True, "suppressed": False, "level": level, "handled": handled}


def _dispatch_handlers(handlers: Sequence[HandlerPort], entry: LogEntry) -> int:
    snapshot: HandlerMessage | None = None
    handled = 0
    for handler in handlers:
        try:
            if not handler.handles(entry.prefix, entry.level):
                continue
            if snapshot is None:
                snapshot = entry.to_handler_message()
            handler.handle(snapshot)
        except Exception:
            logger.warning("log line handler %r failed", handler, exc_info=True)
            continue
        handled += 1
    return handled


__all__ = ["ProcessResult", "process_line"]
