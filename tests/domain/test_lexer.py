from __future__ import annotations

import pytest

from lib_log_kv.domain.lexer import Lexer, TokenKind, unquote


def _tokens(text: str) -> list[tuple[TokenKind, str]]:
    lex = Lexer(text)
    tokens = []
    while lex.advance():
        tokens.append((lex.kind, lex.lexeme))
    return tokens


def test_words_keys_and_values() -> None:
    assert _tokens("msg a=1") == [
        (TokenKind.WORD, "msg"),
        (TokenKind.WHITESPACE, " "),
        (TokenKind.KEY, "a"),
        (TokenKind.WORD, "1"),
    ]


@pytest.mark.parametrize(
    "text",
    ["a8r5t=", "key1==", "==", "=value"],
)
def test_equals_without_value_stays_in_word(text: str) -> None:
    assert _tokens(text) == [(TokenKind.WORD, text)]


def test_quoted_key() -> None:
    assert _tokens('"my key"="v"') == [(TokenKind.QUOTED_KEY, '"my key"'), (TokenKind.QUOTED, '"v"')]


def test_quoted_followed_by_spaced_equals_is_not_a_key() -> None:
    kinds = [kind for kind, _ in _tokens('"key1"= "1"')]
    assert TokenKind.QUOTED_KEY not in kinds


def test_value_keeps_equals_and_inner_colons() -> None:
    assert _tokens("t=12:30 b=x=y") == [
        (TokenKind.KEY, "t"),
        (TokenKind.WORD, "12:30"),
        (TokenKind.WHITESPACE, " "),
        (TokenKind.KEY, "b"),
        (TokenKind.WORD, "x=y"),
    ]


def test_value_colon_before_space_ends_value() -> None:
    tokens = _tokens("a=1: more")
    assert tokens[1] == (TokenKind.WORD, "1")
    assert tokens[2] == (TokenKind.WORD, ":")


def test_leading_colon_value_is_kept() -> None:
    assert _tokens("addr=:6060")[1] == (TokenKind.WORD, ":6060")


def test_unterminated_quote_runs_to_end() -> None:
    assert _tokens('k="abc') == [(TokenKind.KEY, "k"), (TokenKind.QUOTED, '"abc')]


def test_rewind_restarts_scan() -> None:
    lex = Lexer("one two")
    while lex.advance():
        pass
    lex.rewind()
    assert lex.advance()
    assert lex.lexeme == "one"


def test_is_key_and_skip_whitespace() -> None:
    lex = Lexer("  k=v")
    lex.advance()
    assert lex.kind is TokenKind.WHITESPACE
    lex.skip_whitespace()
    assert lex.is_key()


@pytest.mark.parametrize(
    "lexeme, expected",
    [
        ('"no escape"', "no escape"),
        ('"\\"escape\\""', '"escape"'),
        ('"unicode \\u0041"', "unicode A"),
        ('"unicode \\u20Ac"', "unicode €"),
        ('"a\\r\\n"', "a\r\n"),
        ('"\\x41\\u0042"', "AB"),
        ('"too long\\n to fit"', "too long\n to fit"),
        ('"missing end', "missing end"),
        ('"bad \\q escape"', "bad \\q escape"),
        ('"short \\u12"', "short \\u12"),
        ('"surrogate \\ud800"', "surrogate \\ud800"),
        ('"big \\U00110000"', "big \\U00110000"),
        ('"emoji \\U0001F600"', "emoji \U0001f600"),
    ],
)
def test_unquote(lexeme: str, expected: str) -> None:
    assert unquote(lexeme) == expected


def test_unquote_high_hex_byte_is_raw_byte() -> None:
    assert unquote('"\\xfe"').encode("utf-8", "surrogateescape") == b"\xfe"
