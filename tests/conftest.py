from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone

import pytest

from lib_log_kv.domain.pool import BufferPool
from lib_log_kv.runtime import set_standard_writer

_ENV_VARS = (
    "LOG_KV_LEVELS",
    "LOG_KV_SUPPRESS",
    "LOG_KV_THEME",
    "LOG_KV_FORCE_COLOR",
    "LOG_KV_NO_COLOR",
    "LOG_KV_WIDTH",
    "LOG_KV_USE_DOTENV",
    "FORCE_COLOR",
    "NO_COLOR",
    "TTY_COMPATIBLE",
    "TTY_INTERACTIVE",
)


class FixedClock:
    def __init__(self, when: datetime | None = None) -> None:
        self.when = when or datetime(2099, 12, 31, 12, 34, 56, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.when


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_standard_writer() -> Iterator[None]:
    yield
    set_standard_writer(None)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def pool() -> BufferPool:
    return BufferPool()
