"""Normalisation of loosely keyed logging arguments.

Purpose
-------
Logging call sites pass whatever is at hand: a bare message, a trailing error,
dictionaries, explicit pairs or nested lists. :func:`flatten` turns all of that
into one strictly alternating ``[key, value, ...]`` list with a ``str`` at every
key position, naming orphaned values on the way.

Contents
--------
* :class:`Pair` / :func:`pair` - explicit key/value argument.
* :class:`KeyvalList` / :func:`keyvals` - flattened list with logfmt text form.
* :func:`flatten` - the normaliser.

System Role
-----------
Domain layer, independent from the parser. ``KeyvalList`` renders through
:mod:`lib_log_kv.domain.logfmt`, so ``logging.info("started %s", keyvals(...))``
produces a line the writer parses back into pairs.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterable

from .logfmt import format_key_value, format_keyvals
from .message import parse

_RECOGNIZED_KEYS = frozenset({"msg", "message", "error", "err", "level", "lvl", "time", "ts", "caller", "id"})
_PLAUSIBLE_KEY = re.compile(r"^[a-z_][A-Za-z0-9_.\-]*$")


@dataclass(frozen=True, slots=True)
class Pair:
    """One explicit key/value argument.

    Examples
    --------
    >>> str(Pair("user", "jane doe"))
    'user="jane doe"'
    """

    key: str
    value: Any

    def keyvals(self) -> list[Any]:
        return [self.key, self.value]

    def __str__(self) -> str:
        return format_key_value(self.key, self.value)


def pair(key: str, value: Any) -> Pair:
    """Return a :class:`Pair`."""

    return Pair(key, value)


class _Placeholder:
    """Synthetic key inserted before an orphaned value; renamed at the end."""

    __slots__ = ()


def _is_composite(item: Any) -> bool:
    if isinstance(item, (str, bytes, bytearray)):
        return False
    if isinstance(item, (Pair, Mapping, list, tuple)):
        return True
    return callable(getattr(item, "keyvals", None))


def _is_valid_run(items: Sequence[Any]) -> bool:
    if len(items) % 2:
        return False
    return all(isinstance(items[index], str) for index in range(0, len(items), 2))


def _looks_like_key(item: Any) -> bool:
    if not isinstance(item, str):
        return False
    return item.lower() in _RECOGNIZED_KEYS or _PLAUSIBLE_KEY.match(item) is not None


def _keyed(items: Sequence[Any]) -> bool:
    if len(items) % 2:
        return False
    return all(_looks_like_key(items[index]) for index in range(0, len(items), 2))


def _orphan_rank(item: Any) -> int:
    # lower ranks are more likely to be a value that lost its key
    if isinstance(item, BaseException):
        return 1
    if not isinstance(item, str):
        return 0
    if not _looks_like_key(item):
        return 2
    return 3


def _single_orphan(run: list[Any]) -> int | None:
    """Return where one placeholder makes ``run`` well keyed, if anywhere.

    A leading string that is not a well-known key name is taken as the
    message. Otherwise, among the usable positions the rightmost non-text
    value wins, then the rightmost exception, then the rightmost plain text
    value, then the first position.
    """

    candidates = [
        index for index in range(0, len(run), 2) if _keyed(run[:index]) and _keyed(run[index + 1 :])
    ]
    if not candidates:
        return None
    first = run[candidates[0]]
    if candidates[0] == 0 and isinstance(first, str) and first.lower() not in _RECOGNIZED_KEYS:
        return 0
    for rank in range(3):
        for index in reversed(candidates):
            if _orphan_rank(run[index]) == rank:
                return index
    return candidates[0]


def _pair_backwards(run: list[Any]) -> list[Any]:
    fixed: list[Any] = []
    index = len(run) - 1
    while index >= 0:
        fixed.append(run[index])
        if index >= 1 and _looks_like_key(run[index - 1]):
            fixed.append(run[index - 1])
            index -= 2
        else:
            fixed.append(_Placeholder())
            index -= 1
    fixed.reverse()
    return fixed


def _fix_run(run: list[Any]) -> list[Any]:
    """Insert placeholders so ``run`` alternates keys and values.

    An odd run is fixed with a single placeholder when one position works.
    Otherwise the run is walked backwards, pairing each value with the element
    before it when that element looks like a key and giving every other value
    a placeholder of its own.
    """

    if len(run) % 2:
        index = _single_orphan(run)
        if index is not None:
            return [*run[:index], _Placeholder(), *run[index:]]
    return _pair_backwards(run)


def _append_run(out: list[Any], run: list[Any]) -> None:
    if not run:
        return
    if _is_valid_run(run):
        out.extend(run)
    else:
        out.extend(_fix_run(run))


def _as_key(key: Any) -> str:
    return key if isinstance(key, str) else str(key)


def _expand(out: list[Any], item: Any) -> None:
    if isinstance(item, Pair):
        out.extend((_as_key(item.key), item.value))
    elif isinstance(item, Mapping):
        for key, value in item.items():
            out.extend((_as_key(key), value))
    elif isinstance(item, (list, tuple)):
        _flatten_into(out, item)
    else:
        _flatten_into(out, list(item.keyvals()))


def _flatten_into(out: list[Any], items: Iterable[Any]) -> None:
    run: list[Any] = []
    for item in items:
        if _is_composite(item):
            _append_run(out, run)
            run = []
            _expand(out, item)
        else:
            run.append(item)
    _append_run(out, run)


def _name_placeholders(out: list[Any]) -> None:
    has_msg = any(isinstance(item, str) and item.lower() == "msg" for item in out)
    text_named = False
    error_named = False
    counter = 0
    for index in range(0, len(out), 2):
        if not isinstance(out[index], _Placeholder):
            continue
        value = out[index + 1]
        name: str | None = None
        if isinstance(value, str) and not text_named:
            text_named = True
            if not has_msg:
                name, has_msg = "msg", True
        elif isinstance(value, BaseException) and not error_named:
            error_named = True
            if has_msg:
                name = "error"
            else:
                name, has_msg = "msg", True
        if name is None:
            counter += 1
            name = f"_p{counter}"
        out[index] = name


def flatten(args: Sequence[Any]) -> list[Any]:
    """Return ``args`` as an alternating key/value list.

    Mappings, :class:`Pair` objects, nested lists/tuples and objects with a
    ``keyvals()`` method are expanded in place. Runs of plain values that do
    not alternate get placeholder keys, renamed afterwards: the first one in
    front of a string becomes ``msg`` (unless a ``msg`` is already present),
    the first one in front of an exception becomes ``msg`` or ``error``, the
    rest become ``_p1``, ``_p2`` and so on. Already valid lists are returned
    unchanged.

    Examples
    --------
    >>> flatten(["key1", "val1", "key2", 2])
    ['key1', 'val1', 'key2', 2]
    >>> flatten(["not found", "id", "A12345678"])
    ['msg', 'not found', 'id', 'A12345678']
    >>> flatten([1, 2, 3])
    ['_p1', 1, '_p2', 2, '_p3', 3]
    >>> flatten(["installing", {"pkg": "rich"}])
    ['msg', 'installing', 'pkg', 'rich']
    """

    items = args if isinstance(args, list) else list(args)
    if _is_valid_run(items) and not any(_is_composite(item) for item in items):
        return items
    out: list[Any] = []
    _flatten_into(out, items)
    _name_placeholders(out)
    return out


class KeyvalList(list):
    """Flattened key/value list whose text form is logfmt.

    Examples
    --------
    >>> kv = keyvals("starting", "port", 8080)
    >>> str(kv)
    'msg=starting port=8080'
    >>> str(kv.with_("tls", True))
    'msg=starting port=8080 tls=true'
    """

    def keyvals(self) -> "KeyvalList":
        return self

    def with_(self, *args: Any) -> "KeyvalList":
        """Return a new list with ``args`` flattened and appended."""

        result = KeyvalList(self)
        result.extend(flatten(list(args)))
        return result

    def dedup(self) -> "KeyvalList":
        """Return a copy keeping only the first occurrence of each key."""

        seen: set[str] = set()
        result = KeyvalList()
        for index in range(0, len(self) - 1, 2):
            key = self[index]
            if key in seen:
                continue
            seen.add(key)
            result.extend((key, self[index + 1]))
        return result

    def to_text(self) -> str:
        return format_keyvals(self)

    def __str__(self) -> str:
        return format_keyvals(self)

    def __repr__(self) -> str:
        return f"KeyvalList({list.__repr__(self)})"

    @classmethod
    def from_text(cls, text: str | bytes) -> "KeyvalList":
        """Parse a log line; non-empty free text becomes a leading ``msg`` pair."""

        with parse(text) as message:
            items: list[Any] = ["msg", message.text] if message.text else []
            items.extend(message.keyvals)
        return cls(items)


def keyvals(*args: Any) -> KeyvalList:
    """Flatten ``args`` into a :class:`KeyvalList`."""

    return KeyvalList(flatten(list(args)))


__all__ = ["KeyvalList", "Pair", "flatten", "keyvals", "pair"]
