"""logfmt encoding for single key/value pairs.

Purpose
-------
Render one key/value pair as ``key=value`` text that the message parser can
read back, whatever the caller passed as key or value.

Contents
--------
* :class:`TextMarshaler` - protocol for values offering an explicit
  ``to_text()`` conversion.
* :func:`write_key_value` / :func:`format_key_value` - pair encoders.
* :func:`write_keyvals` / :func:`format_keyvals` - space-separated encoders for
  flattened sequences.
* :func:`value_text` - the value-to-text conversion shared with the renderers.

System Role
-----------
Leaf of the domain layer. Used by :class:`lib_log_kv.domain.keyvals.KeyvalList`
for its text form, by the simple printer for non-terminal sinks, and by the CLI
``fmt`` command. Rendering never raises: conversion failures become the
``ERROR`` and ``PANIC`` sentinels.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from ._codec import decode_text, encode_text, is_escaped_byte
from .pool import acquire_buffer, release_buffer

NULL_TEXT = "null"
ERROR_TEXT = "ERROR"
PANIC_TEXT = "PANIC"

_KEY_UNSAFE = re.compile(r'[\s="\x00-\x1f\x7f]')
_QUOTE_TRIGGER = re.compile(r'[\s=":\x00-\x1f\x7f]')

_ESCAPES: dict[int, str] = {code: f"\\x{code:02x}" for code in (*range(0x20), 0x7F)}
_ESCAPES.update({ord('"'): '\\"', ord("\\"): "\\\\", ord("\n"): "\\n", ord("\r"): "\\r", ord("\t"): "\\t"})


@runtime_checkable
class TextMarshaler(Protocol):
    """Value that knows its own text representation."""

    def to_text(self) -> str | bytes: ...


def value_text(value: Any) -> tuple[str | None, bool]:
    """Return ``(text, force_quote)`` for ``value``; ``None`` text means null.

    Examples
    --------
    >>> value_text("plain")
    ('plain', False)
    >>> value_text(None)
    (None, False)
    >>> value_text(True)
    ('true', False)
    >>> value_text({"a": 1})
    ("{'a': 1}", True)
    """

    if value is None:
        return None, False
    if isinstance(value, str):
        return value, False
    if isinstance(value, (bytes, bytearray, memoryview)):
        return decode_text(value), False
    if isinstance(value, TextMarshaler):
        try:
            raw = value.to_text()
        except Exception:
            return ERROR_TEXT, False
        if isinstance(raw, (bytes, bytearray, memoryview)):
            return decode_text(raw), False
        return str(raw), False
    if isinstance(value, bool):
        return ("true" if value else "false"), False
    structured = isinstance(value, (Mapping, list, tuple, set, frozenset))
    try:
        text = str(value)
    except Exception:
        return PANIC_TEXT, False
    if isinstance(value, BaseException) and not text:
        text = type(value).__name__
    return text, structured


def _key_text(key: Any) -> str:
    text, _ = value_text(key)
    if not text:
        return NULL_TEXT
    if _KEY_UNSAFE.search(text) is None and text.isprintable():
        return text
    return "".join(
        "_" if _KEY_UNSAFE.match(char) or not (char.isprintable() or is_escaped_byte(char)) else char
        for char in text
    )


def _needs_quotes(text: str) -> bool:
    if not text or _QUOTE_TRIGGER.search(text):
        return True
    if text.isprintable():
        return False
    return any(not char.isprintable() and not is_escaped_byte(char) for char in text)


def _escape(text: str) -> str:
    escaped = text.translate(_ESCAPES)
    if escaped.isprintable():
        return escaped
    parts = []
    for char in escaped:
        if char.isprintable() or is_escaped_byte(char):
            parts.append(char)
        elif ord(char) > 0xFFFF:
            parts.append(f"\\U{ord(char):08x}")
        else:
            parts.append(f"\\u{ord(char):04x}")
    return "".join(parts)


def write_value(buf: bytearray, value: Any) -> None:
    """Append the encoded form of ``value`` to ``buf``."""

    text, force_quote = value_text(value)
    if text is None:
        buf += b"null"
        return
    if force_quote or _needs_quotes(text):
        text = f'"{_escape(text)}"'
    buf += encode_text(text)


def write_key_value(buf: bytearray, key: Any, value: Any) -> None:
    """Append ``key=value`` to ``buf``.

    Keys are sanitised (whitespace, ``=``, ``"`` and control characters become
    ``_``); values are quoted and escaped when they would not survive a
    round trip through the parser unquoted.
    """

    buf += encode_text(_key_text(key))
    buf += b"="
    write_value(buf, value)


def format_key_value(key: Any, value: Any) -> str:
    """Return ``key=value`` text for one pair.

    Examples
    --------
    >>> format_key_value("the key", "the value")
    'the_key="the value"'
    >>> format_key_value("tab", "a\\tb")
    'tab="a\\\\tb"'
    >>> format_key_value(None, "")
    'null=""'
    """

    buf = acquire_buffer()
    try:
        write_key_value(buf, key, value)
        return decode_text(buf)
    finally:
        release_buffer(buf)


def format_value(value: Any) -> str:
    """Return the encoded value text on its own (quoted when needed)."""

    buf = acquire_buffer()
    try:
        write_value(buf, value)
        return decode_text(buf)
    finally:
        release_buffer(buf)


def _iter_pairs(keyvals: Sequence[Any]) -> Iterable[tuple[Any, Any]]:
    for index in range(0, len(keyvals), 2):
        value = keyvals[index + 1] if index + 1 < len(keyvals) else None
        yield keyvals[index], value


def write_keyvals(buf: bytearray, keyvals: Sequence[Any]) -> None:
    """Append space-separated pairs from an alternating sequence."""

    for index, (key, value) in enumerate(_iter_pairs(keyvals)):
        if index:
            buf += b" "
        write_key_value(buf, key, value)


def format_keyvals(keyvals: Sequence[Any]) -> str:
    """Return space-separated logfmt text for an alternating sequence.

    Examples
    --------
    >>> format_keyvals(["key1", 1, "key2", "two words"])
    'key1=1 key2="two words"'
    """

    buf = acquire_buffer()
    try:
        write_keyvals(buf, keyvals)
        return decode_text(buf)
    finally:
        release_buffer(buf)


__all__ = [
    "ERROR_TEXT",
    "NULL_TEXT",
    "PANIC_TEXT",
    "TextMarshaler",
    "format_key_value",
    "format_keyvals",
    "format_value",
    "value_text",
    "write_key_value",
    "write_keyvals",
    "write_value",
]
