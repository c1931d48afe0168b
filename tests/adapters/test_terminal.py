from __future__ import annotations

import io
import sys

import pytest
from rich.console import Console

from lib_log_kv.adapters.console.terminal import RichTerminal, enable_virtual_terminal_processing


def test_plain_stream_is_not_a_terminal() -> None:
    terminal = RichTerminal(io.StringIO())
    assert terminal.is_terminal() is False
    assert terminal.supports_color() is False


def test_forced_terminal_console_supports_colour() -> None:
    sink = io.StringIO()
    terminal = RichTerminal(sink, console=Console(file=sink, force_terminal=True, color_system="standard"))
    assert terminal.is_terminal() is True
    assert terminal.supports_color() is True


def test_no_color_disables_colour(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FORCE_COLOR", "1")
    terminal = RichTerminal(io.StringIO(), no_color=True)
    assert terminal.supports_color() is False


def test_width_without_file_descriptor_raises() -> None:
    terminal = RichTerminal(io.StringIO())
    with pytest.raises((OSError, ValueError)):
        terminal.width()


@pytest.mark.skipif(sys.platform == "win32", reason="escape handling is native outside Windows")
def test_enable_ansi_is_noop_outside_windows() -> None:
    assert enable_virtual_terminal_processing(io.StringIO()) is True
    assert RichTerminal(io.StringIO()).enable_ansi() is True
