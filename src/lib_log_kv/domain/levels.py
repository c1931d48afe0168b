"""Severity prefixes and the level-to-effect table.

Purpose
-------
Describe which line prefixes count as severity levels (``info:``,
``error:`` ...), how each one is displayed, and which ones are suppressed.

Contents
--------
* :class:`LogLevel` - stdlib-compatible severities with their line prefixes.
* :class:`LevelRule` - one configured level name and its effect.
* :class:`LevelTable` - immutable table split into suppress set and display list.
* :data:`DEFAULT_LEVELS` / :data:`LEVEL_THEMES` - built-in tables.

System Role
-----------
The writer consults its :class:`LevelTable` for every line: a suppressed prefix
drops the line before parsing, a display rule selects the effect the printer
applies to the ``level:`` segment. :class:`LogLevel` translates stdlib
``logging`` records into those prefixes.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

EFFECT_NONE = "none"
SUPPRESS_EFFECTS = frozenset({"hide", "suppress", "ignore"})

_COLON = re.compile(r"\s*:\s*")


class LogLevel(Enum):
    """Enumerated logging levels with the line prefix each one writes."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @property
    def prefix(self) -> str:
        """Return the level name written in front of a line (without colon)."""

        return _PREFIX_TABLE[self]

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Translate a stdlib level number, rounding custom levels down.

        Levels below ``TRACE`` map to ``TRACE``.

        Examples
        --------
        >>> LogLevel.from_python_level(25)
        <LogLevel.INFO: 20>
        """

        chosen = cls.TRACE
        for member in cls:
            if member.value <= level:
                chosen = member
        return chosen


_PREFIX_TABLE = {
    LogLevel.TRACE: "trace",
    LogLevel.DEBUG: "debug",
    LogLevel.INFO: "info",
    LogLevel.WARNING: "warning",
    LogLevel.ERROR: "error",
    LogLevel.CRITICAL: "fatal",
}


DEFAULT_LEVELS: Mapping[str, str] = MappingProxyType(
    {
        "trace": EFFECT_NONE,
        "debug": EFFECT_NONE,
        "info": "cyan",
        "warning": "yellow",
        "error": "red",
        "alert": "red",
        "fatal": "red",
    }
)

#: Effects applied when a writer is created without explicit levels.

LEVEL_THEMES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "classic": DEFAULT_LEVELS,
        "neon": MappingProxyType(
            {
                "trace": "bright black",
                "debug": "bright magenta",
                "info": "bright cyan",
                "warning": "bright yellow",
                "error": "bright red",
                "alert": "bright red",
                "fatal": "31;1",
            }
        ),
        "pastel": MappingProxyType(
            {
                "trace": "#9e9e9e",
                "debug": "#b39ddb",
                "info": "#80cbc4",
                "warning": "#ffe082",
                "error": "#ef9a9a",
                "alert": "#ef9a9a",
                "fatal": "#e57373",
            }
        ),
        "mono": MappingProxyType(
            {
                "trace": EFFECT_NONE,
                "debug": EFFECT_NONE,
                "info": EFFECT_NONE,
                "warning": "1",
                "error": "1",
                "alert": "1;4",
                "fatal": "1;4",
            }
        ),
    }
)


def normalize_level_name(name: str) -> str:
    """Trim whitespace and any trailing colon from a configured level name."""

    return name.strip().rstrip(": \t")


def is_suppress_effect(effect: str) -> bool:
    return effect.strip().lower() in SUPPRESS_EFFECTS


@dataclass(frozen=True, slots=True)
class LevelRule:
    """A level name and the effect used to display it."""

    name: str
    effect: str

    @property
    def suppressed(self) -> bool:
        return is_suppress_effect(self.effect)


@dataclass(frozen=True, slots=True)
class LevelMatch:
    """Result of matching a line against the display list."""

    rule: LevelRule
    end: int

    @property
    def level(self) -> str:
        return self.rule.name

    @property
    def effect(self) -> str:
        return self.rule.effect


def _prefix_end(text: str, name: str) -> int | None:
    """Return where the body starts when ``text`` begins with ``name`` and a colon."""

    size = len(name)
    if len(text) <= size or text[:size].lower() != name:
        return None
    colon = _COLON.match(text, size)
    return colon.end() if colon else None


class LevelTable:
    """Immutable mapping from level names to effects.

    Names compare case-insensitively. Rules whose effect is ``hide``,
    ``suppress`` or ``ignore`` form the suppress set; the rest form the ordered
    display list where the first matching rule wins.

    Examples
    --------
    >>> table = LevelTable({"info": "cyan", "debug": "hide"})
    >>> table.is_line_suppressed("DEBUG: noisy")
    True
    >>> match = table.match("Info:  ready")
    >>> match.level, match.effect, "Info:  ready"[match.end:]
    ('info', 'cyan', 'ready')
    """

    __slots__ = ("_rules", "_display", "_suppressed")

    def __init__(self, levels: Mapping[str, str] | None = None) -> None:
        source = DEFAULT_LEVELS if levels is None else levels
        rules: dict[str, LevelRule] = {}
        for name, effect in source.items():
            normalized = normalize_level_name(name)
            if not normalized:
                continue
            rules[normalized.lower()] = LevelRule(normalized, effect.strip())
        self._rules = rules
        self._display = tuple((key, rule) for key, rule in rules.items() if not rule.suppressed)
        self._suppressed = tuple(key for key, rule in rules.items() if rule.suppressed)

    def as_dict(self) -> dict[str, str]:
        """Return a copy of the table as ``{name: effect}``."""

        return {rule.name: rule.effect for rule in self._rules.values()}

    def rules(self) -> tuple[LevelRule, ...]:
        return tuple(self._rules.values())

    def get(self, name: str) -> LevelRule | None:
        return self._rules.get(normalize_level_name(name).lower())

    def with_level(self, name: str, effect: str) -> "LevelTable":
        """Return a copy with ``name`` set to ``effect``."""

        levels = self.as_dict()
        existing = self.get(name)
        if existing is not None:
            del levels[existing.name]
        levels[normalize_level_name(name)] = effect
        return LevelTable(levels)

    def with_suppressed(self, *names: str) -> "LevelTable":
        """Return a copy where every name in ``names`` is hidden."""

        table = self
        for name in names:
            table = table.with_level(name, "hide")
        return table

    def is_suppressed(self, name: str) -> bool:
        rule = self.get(name)
        return rule is not None and rule.suppressed

    def is_line_suppressed(self, text: str) -> bool:
        """Return ``True`` when ``text`` starts with a suppressed level and colon."""

        return any(_prefix_end(text, name) is not None for name in self._suppressed)

    def match(self, text: str) -> LevelMatch | None:
        """Return the first display rule whose name and colon start ``text``."""

        for name, rule in self._display:
            end = _prefix_end(text, name)
            if end is not None:
                return LevelMatch(rule, end)
        return None

    def __len__(self) -> int:
        return len(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LevelTable):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    __hash__ = None  # type: ignore[assignment]


__all__ = [
    "DEFAULT_LEVELS",
    "EFFECT_NONE",
    "LEVEL_THEMES",
    "LevelMatch",
    "LevelRule",
    "LevelTable",
    "LogLevel",
    "SUPPRESS_EFFECTS",
    "is_suppress_effect",
    "normalize_level_name",
]
