"""Wall-clock adapter implementing :class:`ClockPort`."""

from __future__ import annotations

from datetime import datetime

from lib_log_kv.application.ports.time import ClockPort


class SystemClock(ClockPort):
    """Return the current local time as an aware datetime."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


__all__ = ["SystemClock"]
