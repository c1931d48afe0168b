from __future__ import annotations

from typing import Any

import pytest

from lib_log_kv.domain.logfmt import format_key_value, format_keyvals, format_value, value_text


class _Marshaler:
    def __init__(self, text: str | bytes) -> None:
        self.text = text

    def to_text(self) -> str | bytes:
        return self.text


class _FailingMarshaler:
    def to_text(self) -> str:
        raise ValueError("cannot marshal")


class _ExplodingStr:
    def __str__(self) -> str:
        raise RuntimeError("boom")


@pytest.mark.parametrize(
    "key, value, expected",
    [
        ("key", "value", "key=value"),
        ("the key", "the value", 'the_key="the value"'),
        ("tab", "a\tb", 'tab="a\\tb"'),
        ("nl", "a\nb", 'nl="a\\nb"'),
        ("quote", 'say "hi"', 'quote="say \\"hi\\""'),
        ("bell", "a\x07b", 'bell="a\\x07b"'),
        ("eq", "a=b", 'eq="a=b"'),
        ("colon", "12:30", 'colon="12:30"'),
        ("empty", "", 'empty=""'),
        ("none", None, "none=null"),
        (None, "v", "null=v"),
        ("", "v", "null=v"),
        ("k=v", 1, "k_v=1"),
        ('a"b', 1, "a_b=1"),
        ("int", 42, "int=42"),
        ("float", 1.5, "float=1.5"),
        ("bool", False, "bool=false"),
        ("bytes", b"raw", "bytes=raw"),
        ("text", _Marshaler("marshaled"), "text=marshaled"),
        ("textb", _Marshaler(b"bytes"), "textb=bytes"),
        ("bad", _FailingMarshaler(), "bad=ERROR"),
        ("panic", _ExplodingStr(), "panic=PANIC"),
        ("list", [1, 2], 'list="[1, 2]"'),
        ("err", KeyError(), "err=KeyError"),
        ("err", ValueError("bad input"), 'err="bad input"'),
        ("unicode", "grüße", "unicode=grüße"),
    ],
)
def test_format_key_value(key: Any, value: Any, expected: str) -> None:
    assert format_key_value(key, value) == expected


def test_non_printable_unicode_is_escaped() -> None:
    assert format_value("a\u200bb") == '"a\\u200bb"'


def test_invalid_utf8_bytes_survive() -> None:
    rendered = format_value(b"\xfe\xff")
    assert rendered.encode("utf-8", "surrogateescape") == b"\xfe\xff"


def test_value_text_reports_structured_values() -> None:
    assert value_text((1, 2)) == ("(1, 2)", True)
    assert value_text(3) == ("3", False)


def test_format_keyvals_joins_pairs() -> None:
    assert format_keyvals(["a", 1, "b", "two words"]) == 'a=1 b="two words"'
    assert format_keyvals([]) == ""


def test_format_keyvals_odd_tail_renders_null() -> None:
    assert format_keyvals(["a", 1, "dangling"]) == "a=1 dangling=null"
