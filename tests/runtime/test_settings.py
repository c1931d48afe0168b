from __future__ import annotations

import pytest

from lib_log_kv.runtime._settings import (
    WriterSettings,
    build_writer_settings,
    parse_flag,
    parse_levels,
    parse_names,
    parse_width,
)


def test_defaults_without_environment() -> None:
    assert build_writer_settings(environ={}) == WriterSettings()


def test_environment_fills_every_field() -> None:
    settings = build_writer_settings(
        environ={
            "LOG_KV_LEVELS": "info=green,notice=magenta",
            "LOG_KV_SUPPRESS": "trace, debug",
            "LOG_KV_THEME": "neon",
            "LOG_KV_FORCE_COLOR": "yes",
            "LOG_KV_WIDTH": "120",
        }
    )
    assert settings.levels == {"info": "green", "notice": "magenta"}
    assert settings.suppress == ("trace", "debug")
    assert settings.theme == "neon"
    assert settings.color is True
    assert settings.width == 120


def test_explicit_arguments_win_over_environment() -> None:
    settings = build_writer_settings(
        levels={"info": "blue"},
        suppress=[],
        width=40,
        no_color=True,
        environ={"LOG_KV_LEVELS": "info=green", "LOG_KV_SUPPRESS": "debug", "LOG_KV_WIDTH": "120", "LOG_KV_FORCE_COLOR": "1"},
    )
    assert settings.levels == {"info": "blue"}
    assert settings.suppress == ()
    assert settings.width == 40
    assert settings.color is False


def test_reads_process_environment_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_KV_NO_COLOR", "true")
    assert build_writer_settings().color is False


@pytest.mark.parametrize(
    "environ, message",
    [
        ({"LOG_KV_LEVELS": "info"}, "LOG_KV_LEVELS entries must look like NAME=EFFECT"),
        ({"LOG_KV_LEVELS": "=red"}, "LOG_KV_LEVELS entries must look like NAME=EFFECT"),
        ({"LOG_KV_WIDTH": "wide"}, "LOG_KV_WIDTH must be an integer"),
        ({"LOG_KV_WIDTH": "0"}, "LOG_KV_WIDTH must be positive"),
        ({"LOG_KV_FORCE_COLOR": "maybe"}, "LOG_KV_FORCE_COLOR must be a boolean"),
        ({"LOG_KV_THEME": "sepia"}, "Unknown level theme 'sepia'"),
    ],
)
def test_malformed_environment_values_are_rejected(environ: dict[str, str], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        build_writer_settings(environ=environ)


def test_explicit_width_must_be_positive() -> None:
    with pytest.raises(ValueError, match="width must be positive"):
        build_writer_settings(width=0, environ={})


def test_parse_levels_names_the_source() -> None:
    with pytest.raises(ValueError, match="--level entries"):
        parse_levels("broken", source="--level")
    assert parse_levels(" , info=green ,") == {"info": "green"}


def test_parse_names_skips_blanks() -> None:
    assert parse_names(" trace,, debug ,") == ("trace", "debug")


@pytest.mark.parametrize("value, expected", [("1", True), ("On", True), ("no", False), ("", False)])
def test_parse_flag(value: str, expected: bool) -> None:
    assert parse_flag(value, source="X") is expected


def test_parse_width_accepts_integers() -> None:
    assert parse_width(" 72 ") == 72
