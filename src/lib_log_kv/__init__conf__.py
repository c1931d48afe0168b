"""Static package metadata surfaced by the CLI banner.

Keep these values in sync with ``pyproject.toml``.
"""

from __future__ import annotations

from typing import Callable

name = "lib_log_kv"
title = "Key/value aware log line writer with terminal rendering"
version = "0.1.0"
homepage = "https://github.com/bitranox/lib_log_kv"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_kv"


def _default_writer(text: str) -> None:
    print(text, end="")


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Write the metadata banner through ``writer`` (``print`` by default).

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_kv:\\n'
    """

    emit = writer or _default_writer
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    emit(f"Info for {name}:\n")
    emit("\n")
    for label, value in fields:
        emit(f"    {label.ljust(pad)} = {value}\n")


__all__ = [
    "author",
    "author_email",
    "homepage",
    "name",
    "print_info",
    "shell_command",
    "title",
    "version",
]
