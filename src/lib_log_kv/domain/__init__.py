"""Domain entities and value objects for parsing, normalising and encoding lines."""

from __future__ import annotations

from .entry import HandlerMessage, LogEntry
from .header import HeaderFormat, HeaderParts, HeaderStrip, LogFlags
from .keyvals import KeyvalList, Pair, flatten, keyvals, pair
from .lexer import Lexer, TokenKind, unquote
from .levels import DEFAULT_LEVELS, LEVEL_THEMES, LevelMatch, LevelRule, LevelTable, LogLevel
from .logfmt import TextMarshaler, format_key_value, format_keyvals, write_key_value
from .message import Message, parse
from .pool import BufferPool, acquire_buffer, release_buffer

__all__ = [
    "BufferPool",
    "DEFAULT_LEVELS",
    "HandlerMessage",
    "HeaderFormat",
    "HeaderParts",
    "HeaderStrip",
    "KeyvalList",
    "LEVEL_THEMES",
    "LevelMatch",
    "LevelRule",
    "LevelTable",
    "Lexer",
    "LogEntry",
    "LogFlags",
    "LogLevel",
    "Message",
    "Pair",
    "TextMarshaler",
    "TokenKind",
    "acquire_buffer",
    "flatten",
    "format_key_value",
    "format_keyvals",
    "keyvals",
    "pair",
    "parse",
    "release_buffer",
    "unquote",
    "write_key_value",
]
