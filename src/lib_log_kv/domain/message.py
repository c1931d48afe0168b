"""Structured view of one log line: free text followed by key/value pairs.

Purpose
-------
Turn raw log-line text into a :class:`Message` holding the message text and
the trailing ``key=value`` pairs, stored in one pooled byte buffer.

Contents
--------
* :class:`Message` - pooled text/pairs container with explicit release.
* :func:`parse` - two-pass parser built on :class:`~lib_log_kv.domain.lexer.Lexer`.

System Role
-----------
The writer parses every line that survives level suppression and releases the
message once it has been rendered. Only the last unbroken run of pairs counts
as structure; anything before it, including earlier pair-like fragments, is
message text.
"""

from __future__ import annotations

from types import TracebackType
from typing import Iterator

from ._codec import decode_text, encode_text
from .lexer import Lexer, TokenKind, unquote
from .logfmt import format_keyvals
from .pool import BufferPool, default_pool

_Span = tuple[int, int]
_EMPTY_SPAN: _Span = (0, 0)


class Message:
    """Parsed log line backed by a pooled buffer.

    ``text`` and ``pairs`` decode from the buffer on access. After
    :meth:`release` the buffer is zero-filled and handed back to the pool and
    every field reads as empty. Use the message as a context manager to release
    it on every exit path.

    Examples
    --------
    >>> with parse('listening addr=":8080" tls=off') as msg:
    ...     msg.text, msg.pairs
    ('listening', [('addr', ':8080'), ('tls', 'off')])
    >>> msg.text, msg.pairs
    ('', [])
    """

    __slots__ = ("_pool", "_buffer", "_text", "_spans", "_filled")

    def __init__(self, *, pool: BufferPool | None = None) -> None:
        self._pool = pool if pool is not None else default_pool()
        self._buffer: bytearray | None = self._pool.acquire()
        self._text: _Span = _EMPTY_SPAN
        self._spans: list[_Span] = []
        self._filled = 0

    def _append(self, text: str) -> _Span:
        buf = self._buffer
        if buf is None:
            raise RuntimeError("message has been released")
        start = len(buf)
        buf += encode_text(text)
        return start, len(buf)

    def _set_text(self, text: str) -> None:
        self._text = self._append(text)

    def _reserve(self, pair_count: int) -> None:
        self._spans = [_EMPTY_SPAN] * (pair_count * 2)
        self._filled = 0

    def _add_pair(self, key: str, value: str) -> None:
        if self._filled + 2 > len(self._spans):
            self._spans.extend((_EMPTY_SPAN, _EMPTY_SPAN))
        self._spans[self._filled] = self._append(key)
        self._spans[self._filled + 1] = self._append(value)
        self._filled += 2

    def _decode(self, span: _Span) -> str:
        if self._buffer is None:
            return ""
        start, end = span
        return decode_text(self._buffer[start:end])

    @property
    def released(self) -> bool:
        return self._buffer is None

    @property
    def text(self) -> str:
        """Free text preceding the pairs, whitespace-trimmed."""

        return self._decode(self._text)

    @property
    def keyvals(self) -> list[str]:
        """Pairs as one alternating ``[key, value, key, value, ...]`` list."""

        return [self._decode(span) for span in self._spans[: self._filled]]

    @property
    def pairs(self) -> list[tuple[str, str]]:
        """Pairs as ``(key, value)`` tuples in input order."""

        return list(self.iter_pairs())

    def iter_pairs(self) -> Iterator[tuple[str, str]]:
        spans = self._spans
        for index in range(0, self._filled, 2):
            yield self._decode(spans[index]), self._decode(spans[index + 1])

    def __len__(self) -> int:
        """Number of pairs."""

        return self._filled // 2

    def release(self) -> None:
        """Zero the backing buffer and return it to the pool; safe to repeat."""

        buf = self._buffer
        if buf is None:
            return
        self._buffer = None
        self._text = _EMPTY_SPAN
        self._spans = []
        self._filled = 0
        self._pool.release(buf)

    def __enter__(self) -> "Message":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __str__(self) -> str:
        text = self.text
        if not self._filled:
            return text
        rendered = format_keyvals(self.keyvals)
        return f"{text} {rendered}" if text else rendered

    def __repr__(self) -> str:
        if self.released:
            return "Message(<released>)"
        return f"Message(text={self.text!r}, pairs={self.pairs!r})"


def _skip_pair(lex: Lexer) -> None:
    lex.advance()
    if lex.kind is TokenKind.WORD or lex.kind is TokenKind.QUOTED:
        lex.advance()
    lex.skip_whitespace()


def _locate_pairs(lex: Lexer) -> tuple[int, int]:
    """Return the start offset and pair count of the last run of pairs."""

    run_start = -1
    count = 0
    lex.advance()
    while lex.kind is not TokenKind.EOF:
        if not lex.is_key():
            run_start, count = -1, 0
            lex.advance()
            continue
        if run_start < 0:
            run_start = lex.start
        count += 1
        _skip_pair(lex)
    return run_start, count


def _key_lexeme(lex: Lexer) -> str:
    return unquote(lex.lexeme) if lex.kind is TokenKind.QUOTED_KEY else lex.lexeme


def _value_lexeme(lex: Lexer) -> str:
    if lex.kind is TokenKind.WORD:
        value = lex.lexeme
    elif lex.kind is TokenKind.QUOTED:
        value = unquote(lex.lexeme)
    else:
        return ""
    lex.advance()
    return value


def parse(data: str | bytes | bytearray | memoryview, *, pool: BufferPool | None = None) -> Message:
    """Parse one log line into a :class:`Message`.

    Bytes are decoded as UTF-8 with invalid sequences preserved. The caller owns
    the returned message and must :meth:`~Message.release` it.

    Examples
    --------
    >>> msg = parse("error: disk full path=/var free=0: retrying id=7")
    >>> msg.text
    'error: disk full path=/var free=0: retrying'
    >>> msg.keyvals
    ['id', '7']
    >>> msg.release()
    """

    if isinstance(data, (bytes, bytearray, memoryview)):
        text = decode_text(data)
    else:
        text = str(data)
    text = text.strip()
    message = Message(pool=pool)
    if not text:
        return message
    lex = Lexer(text)
    run_start, pair_count = _locate_pairs(lex)
    if run_start < 0:
        message._set_text(text)
        return message
    message._set_text(text[:run_start].rstrip())
    message._reserve(pair_count)
    lex.rewind()
    while lex.advance() and lex.start < run_start:
        pass
    while lex.is_key():
        key = _key_lexeme(lex)
        lex.advance()
        message._add_pair(key, _value_lexeme(lex))
        lex.skip_whitespace()
    return message


__all__ = ["Message", "parse"]
