"""Optional ``.env`` loading for the command line interface.

Purpose
-------
Let operators keep ``LOG_KV_*`` settings in a ``.env`` file next to their
project instead of exporting them in every shell.

Contents
--------
* :func:`enable_dotenv` - load the nearest ``.env`` once per process.
* :func:`should_use_dotenv` - decide from the CLI flag and ``LOG_KV_USE_DOTENV``.

System Role
-----------
Called by :mod:`lib_log_kv.cli` before any writer settings are resolved.
Values already present in the environment always win over ``.env`` entries.
"""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LOG_KV_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

_LOCK = Lock()
_LOADED: Path | None = None
_ATTEMPTED = False


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Return whether ``.env`` loading is requested.

    An explicit CLI choice wins; otherwise ``env_value`` (the content of
    ``LOG_KV_USE_DOTENV``) decides.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(path: str | Path | None = None) -> Path | None:
    """Load ``path`` or the nearest ``.env`` above the working directory.

    Returns the resolved file that was loaded, or ``None`` when none exists.
    Repeated calls reuse the first result.
    """

    global _LOADED, _ATTEMPTED
    with _LOCK:
        if _ATTEMPTED:
            return _LOADED
        _ATTEMPTED = True
        candidate = str(path) if path is not None else find_dotenv(usecwd=True)
        if not candidate or not Path(candidate).is_file():
            logger.debug("no .env file found")
            return None
        load_dotenv(candidate, override=False)
        _LOADED = Path(candidate).resolve()
        logger.debug("loaded environment from %s", _LOADED)
        return _LOADED


def _reset_dotenv_state_for_testing() -> None:
    global _LOADED, _ATTEMPTED
    with _LOCK:
        _LOADED = None
        _ATTEMPTED = False


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
