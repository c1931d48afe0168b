"""Runtime composition: the :class:`Writer`, the logging bridge and the
process-wide standard writer.

The module-level helpers delegate to :func:`standard_writer`, which writes to
:data:`sys.stderr` until :func:`set_output` points it elsewhere.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import IO, Any

from lib_log_kv.application.ports import HandlerPort
from lib_log_kv.domain.header import LogFlags

from ._composition import create_printer
from ._line_writer import DRIFT_NOTICE, LineWriter
from ._logging import KvlogHandler
from ._settings import WriterSettings, build_writer_settings
from ._state import has_standard_writer, set_standard_writer, standard_writer
from ._writer import Writer, detach


def attach(
    logger: logging.Logger | str | None = None,
    *,
    prefix: str = "",
    flags: LogFlags = LogFlags.STD,
    level: int = logging.NOTSET,
) -> KvlogHandler:
    """Route ``logger`` through the standard writer."""

    return standard_writer().attach(logger, prefix=prefix, flags=flags, level=level)


def suppress(*names: str) -> None:
    standard_writer().suppress(*names)


def set_output(sink: IO[Any]) -> None:
    standard_writer().set_output(sink)


def set_levels(levels: Mapping[str, str]) -> None:
    standard_writer().set_levels(levels)


def set_level(name: str, effect: str) -> None:
    standard_writer().set_level(name, effect)


def set_color(enabled: bool | None) -> None:
    standard_writer().set_color(enabled)


def levels() -> dict[str, str]:
    return standard_writer().levels()


def handle(handler: HandlerPort) -> None:
    standard_writer().handle(handler)


def write(data: str | bytes) -> int:
    return standard_writer().write(data)


__all__ = [
    "DRIFT_NOTICE",
    "KvlogHandler",
    "LineWriter",
    "Writer",
    "WriterSettings",
    "attach",
    "build_writer_settings",
    "create_printer",
    "detach",
    "handle",
    "has_standard_writer",
    "levels",
    "set_color",
    "set_level",
    "set_levels",
    "set_output",
    "set_standard_writer",
    "standard_writer",
    "suppress",
    "write",
]
