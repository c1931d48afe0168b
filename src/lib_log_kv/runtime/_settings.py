"""Writer settings resolved from arguments and environment variables.

Explicit arguments win; ``LOG_KV_*`` variables fill the gaps. Malformed
environment values raise :class:`ValueError` naming the variable.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from lib_log_kv.domain.levels import LEVEL_THEMES

LEVELS_ENV = "LOG_KV_LEVELS"
SUPPRESS_ENV = "LOG_KV_SUPPRESS"
THEME_ENV = "LOG_KV_THEME"
FORCE_COLOR_ENV = "LOG_KV_FORCE_COLOR"
NO_COLOR_ENV = "LOG_KV_NO_COLOR"
WIDTH_ENV = "LOG_KV_WIDTH"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True, slots=True)
class WriterSettings:
    """Resolved configuration for a :class:`~lib_log_kv.runtime.Writer`."""

    levels: Mapping[str, str] = field(default_factory=dict)
    suppress: tuple[str, ...] = ()
    theme: str | None = None
    color: bool | None = None
    width: int | None = None


def parse_levels(value: str, *, source: str = LEVELS_ENV) -> dict[str, str]:
    """Parse ``"name=effect,name=effect"`` into a mapping.

    Examples
    --------
    >>> parse_levels("info=green, debug=hide")
    {'info': 'green', 'debug': 'hide'}
    """

    levels: dict[str, str] = {}
    for chunk in value.split(","):
        item = chunk.strip()
        if not item:
            continue
        name, sep, effect = item.partition("=")
        if not sep or not name.strip() or not effect.strip():
            raise ValueError(f"{source} entries must look like NAME=EFFECT, got {item!r}")
        levels[name.strip()] = effect.strip()
    return levels


def parse_names(value: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in value.split(",") if name.strip())


def parse_flag(value: str, *, source: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"{source} must be a boolean (1/0, true/false, yes/no, on/off), got {value!r}")


def parse_width(value: str, *, source: str = WIDTH_ENV) -> int:
    try:
        width = int(value)
    except ValueError as exc:
        raise ValueError(f"{source} must be an integer, got {value!r}") from exc
    if width <= 0:
        raise ValueError(f"{source} must be positive, got {width}")
    return width


def _resolve_color(force_color: bool | None, no_color: bool | None, env: Mapping[str, str]) -> bool | None:
    if force_color is None and FORCE_COLOR_ENV in env:
        force_color = parse_flag(env[FORCE_COLOR_ENV], source=FORCE_COLOR_ENV)
    if no_color is None and NO_COLOR_ENV in env:
        no_color = parse_flag(env[NO_COLOR_ENV], source=NO_COLOR_ENV)
    if no_color:
        return False
    if force_color:
        return True
    return None


def build_writer_settings(
    *,
    levels: Mapping[str, str] | None = None,
    suppress: Iterable[str] | None = None,
    theme: str | None = None,
    force_color: bool | None = None,
    no_color: bool | None = None,
    width: int | None = None,
    environ: Mapping[str, str] | None = None,
) -> WriterSettings:
    """Merge explicit options with ``LOG_KV_*`` environment variables.

    Examples
    --------
    >>> settings = build_writer_settings(environ={"LOG_KV_SUPPRESS": "trace,debug", "LOG_KV_WIDTH": "100"})
    >>> settings.suppress, settings.width, settings.color
    (('trace', 'debug'), 100, None)
    """

    env = os.environ if environ is None else environ
    resolved_levels = dict(levels) if levels is not None else parse_levels(env.get(LEVELS_ENV, ""))
    resolved_suppress = tuple(suppress) if suppress is not None else parse_names(env.get(SUPPRESS_ENV, ""))
    resolved_theme = theme if theme is not None else (env.get(THEME_ENV) or None)
    if resolved_theme is not None and resolved_theme not in LEVEL_THEMES:
        known = ", ".join(sorted(LEVEL_THEMES))
        raise ValueError(f"Unknown level theme {resolved_theme!r}; expected one of: {known}")
    if width is None and env.get(WIDTH_ENV):
        width = parse_width(env[WIDTH_ENV])
    elif width is not None and width <= 0:
        raise ValueError(f"width must be positive, got {width}")
    return WriterSettings(
        levels=resolved_levels,
        suppress=resolved_suppress,
        theme=resolved_theme,
        color=_resolve_color(force_color, no_color, env),
        width=width,
    )


__all__ = [
    "FORCE_COLOR_ENV",
    "LEVELS_ENV",
    "NO_COLOR_ENV",
    "SUPPRESS_ENV",
    "THEME_ENV",
    "WIDTH_ENV",
    "WriterSettings",
    "build_writer_settings",
    "parse_flag",
    "parse_levels",
    "parse_names",
    "parse_width",
]
