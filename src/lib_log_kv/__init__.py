"""Public package surface for key/value aware log rendering.

Import :class:`Writer` to render raw lines, :func:`attach` to route a stdlib
logger through the process-wide writer, and :func:`keyvals` / :func:`flatten`
to normalise variadic key/value arguments.
"""

from __future__ import annotations

from . import __init__conf__
from .domain import (
    BufferPool,
    HandlerMessage,
    KeyvalList,
    LogFlags,
    LogLevel,
    Message,
    Pair,
    flatten,
    format_key_value,
    format_keyvals,
    keyvals,
    pair,
    parse,
)
from .runtime import (
    KvlogHandler,
    LineWriter,
    Writer,
    WriterSettings,
    attach,
    build_writer_settings,
    detach,
    handle,
    levels,
    set_color,
    set_level,
    set_levels,
    set_output,
    standard_writer,
    suppress,
    write,
)

__version__ = __init__conf__.version

__all__ = [
    "BufferPool",
    "HandlerMessage",
    "KeyvalList",
    "KvlogHandler",
    "LineWriter",
    "LogFlags",
    "LogLevel",
    "Message",
    "Pair",
    "Writer",
    "WriterSettings",
    "__version__",
    "attach",
    "build_writer_settings",
    "detach",
    "flatten",
    "format_key_value",
    "format_keyvals",
    "handle",
    "keyvals",
    "levels",
    "pair",
    "parse",
    "set_color",
    "set_level",
    "set_levels",
    "set_output",
    "standard_writer",
    "suppress",
    "write",
]
