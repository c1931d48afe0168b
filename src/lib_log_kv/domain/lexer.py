"""Tokenizer for log-line text made of free words and ``key=value`` pairs.

Purpose
-------
Split one log line into tokens without copying characters: every token is an
index range into the original text, so the parser can make two passes over the
same input cheaply.

Contents
--------
* :class:`TokenKind` - token classification.
* :class:`Lexer` - index-based scanner with ``advance``/``rewind``.
* :func:`unquote` - lenient decoder for quoted lexemes.

System Role
-----------
Consumed only by :mod:`lib_log_kv.domain.message`. The heuristics here decide
what counts as a key: ``word=`` must be followed by a non-space, non-``=``
character, so padded base64 values and stray ``=`` signs stay plain words.
"""

from __future__ import annotations

from enum import Enum


class TokenKind(Enum):
    """Kinds of token produced by :class:`Lexer`."""

    EOF = "eof"
    WORD = "word"
    WHITESPACE = "whitespace"
    KEY = "key"
    QUOTED = "quoted"
    QUOTED_KEY = "quoted_key"


_KEY_KINDS = frozenset({TokenKind.KEY, TokenKind.QUOTED_KEY})


class Lexer:
    """Scan ``text`` one token at a time.

    After :meth:`advance` the current token is described by :attr:`kind`,
    :attr:`start` and :attr:`end`; :attr:`lexeme` slices it out of the input.
    For keys the trailing ``=`` is not part of the lexeme.

    Examples
    --------
    >>> lex = Lexer('msg k="v 1" x=2')
    >>> tokens = []
    >>> while lex.advance():
    ...     tokens.append((lex.kind.value, lex.lexeme))
    >>> tokens
    [('word', 'msg'), ('whitespace', ' '), ('key', 'k'), ('quoted', '"v 1"'), ('whitespace', ' '), ('key', 'x'), ('word', '2')]
    """

    __slots__ = ("_text", "_pos", "_in_value", "kind", "start", "end")

    def __init__(self, text: str) -> None:
        self._text = text
        self.rewind()

    def rewind(self) -> None:
        """Return to the start of the input."""

        self._pos = 0
        self._in_value = False
        self.kind = TokenKind.EOF
        self.start = 0
        self.end = 0

    @property
    def lexeme(self) -> str:
        return self._text[self.start : self.end]

    def is_key(self) -> bool:
        return self.kind in _KEY_KINDS

    def skip_whitespace(self) -> None:
        """Advance past the current token when it is whitespace."""

        if self.kind is TokenKind.WHITESPACE:
            self.advance()

    def advance(self) -> bool:
        """Scan the next token; return ``False`` once the input is exhausted."""

        text = self._text
        pos = self._pos
        in_value = self._in_value
        self._in_value = False
        self.start = pos
        if pos >= len(text):
            self.kind = TokenKind.EOF
            self.end = self._pos = len(text)
            return False
        char = text[pos]
        if char.isspace():
            pos += 1
            while pos < len(text) and text[pos].isspace():
                pos += 1
            self._finish(TokenKind.WHITESPACE, pos, pos)
        elif char == '"':
            self._scan_quoted(pos, in_value)
        elif in_value:
            self._scan_value(pos)
        else:
            self._scan_word(pos)
        return True

    def _finish(self, kind: TokenKind, end: int, resume: int) -> None:
        self.kind = kind
        self.end = end
        self._pos = resume
        if kind in _KEY_KINDS:
            self._in_value = True

    def _starts_value(self, pos: int) -> bool:
        # ``key=`` is only a key when something other than space or ``=`` follows
        text = self._text
        return pos < len(text) and not text[pos].isspace() and text[pos] != "="

    def _scan_quoted(self, pos: int, in_value: bool) -> None:
        text = self._text
        end = pos + 1
        while end < len(text):
            char = text[end]
            if char == "\\":
                end += 2
                continue
            end += 1
            if char == '"':
                break
        end = min(end, len(text))
        resume = end
        if resume < len(text):
            if text[resume] == ":":
                resume += 1
            elif text[resume] == "=" and not in_value and self._starts_value(resume + 1):
                self._finish(TokenKind.QUOTED_KEY, end, resume + 1)
                return
        self._finish(TokenKind.QUOTED, end, resume)

    def _scan_word(self, pos: int) -> None:
        text = self._text
        end = pos
        while end < len(text):
            char = text[end]
            if char.isspace():
                break
            if char == "=":
                if end > pos and self._starts_value(end + 1):
                    self._finish(TokenKind.KEY, end, end + 1)
                    return
                while end < len(text) and text[end] == "=":
                    end += 1
                continue
            end += 1
        self._finish(TokenKind.WORD, end, end)

    def _scan_value(self, pos: int) -> None:
        text = self._text
        end = pos
        while end < len(text):
            char = text[end]
            if char.isspace():
                break
            if char == ":" and end > pos and (end + 1 == len(text) or text[end + 1].isspace()):
                break
            end += 1
        self._finish(TokenKind.WORD, end, end)


_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "/": "/",
}

_HEX_ESCAPES = {"x": 2, "u": 4, "U": 8}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _hex_char(digits: str, width: int) -> str | None:
    if len(digits) != width or not all(char in _HEX_DIGITS for char in digits):
        return None
    code = int(digits, 16)
    if width == 2 and code >= 0x80:
        # a raw byte; keep it as the surrogate escape so it re-encodes unchanged
        return chr(0xDC00 + code)
    if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return None
    return chr(code)


def unquote(lexeme: str) -> str:
    """Decode a quoted lexeme, tolerating missing quotes and bad escapes.

    Unknown or truncated escapes are kept verbatim.

    Examples
    --------
    >>> unquote('"a\\\\tb"')
    'a\\tb'
    >>> unquote('"\\\\x41\\\\u0042')
    'AB'
    """

    body = lexeme[1:] if lexeme.startswith('"') else lexeme
    if body.endswith('"') and not _escaped_at(body, len(body) - 1):
        body = body[:-1]
    if "\\" not in body:
        return body
    parts: list[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\" or index + 1 >= len(body):
            parts.append(char)
            index += 1
            continue
        code = body[index + 1]
        if code in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[code])
            index += 2
            continue
        width = _HEX_ESCAPES.get(code)
        decoded = _hex_char(body[index + 2 : index + 2 + width], width) if width else None
        if decoded is None:
            parts.append(char)
            index += 1
            continue
        parts.append(decoded)
        index += 2 + width
    return "".join(parts)


def _escaped_at(text: str, index: int) -> bool:
    backslashes = 0
    while index - backslashes - 1 >= 0 and text[index - backslashes - 1] == "\\":
        backslashes += 1
    return backslashes % 2 == 1


__all__ = ["Lexer", "TokenKind", "unquote"]
