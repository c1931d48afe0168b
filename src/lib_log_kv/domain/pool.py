"""Reusable byte buffers shared by the parser and the renderers.

Purpose
-------
Avoid a fresh allocation for every parsed line or rendered pair by recycling
``bytearray`` scratch buffers between calls.

Contents
--------
* :class:`BufferPool` - thread-safe free list of byte buffers.
* :func:`acquire_buffer` / :func:`release_buffer` - helpers bound to the shared
  default pool.

System Role
-----------
Backs :class:`lib_log_kv.domain.message.Message` and the logfmt encoder. The
pool is locked independently of any writer so formatting code running outside a
writer's critical section can use it safely.
"""

from __future__ import annotations

from threading import Lock

_DEFAULT_MAX_IDLE = 64


class BufferPool:
    """Thread-safe pool of reusable :class:`bytearray` buffers.

    Released buffers are zero-filled before they become available again, so
    log content never survives in an idle buffer.

    Examples
    --------
    >>> pool = BufferPool()
    >>> buf = pool.acquire()
    >>> buf += b"secret"
    >>> pool.release(buf)
    >>> bytes(buf)
    b'\\x00\\x00\\x00\\x00\\x00\\x00'
    >>> pool.acquire() is buf
    True
    """

    def __init__(self, *, max_idle: int = _DEFAULT_MAX_IDLE) -> None:
        if max_idle < 0:
            raise ValueError("max_idle must be >= 0")
        self._idle: list[bytearray] = []
        self._max_idle = max_idle
        self._lock = Lock()

    def acquire(self) -> bytearray:
        """Return an empty buffer, recycled when one is idle."""

        with self._lock:
            buf = self._idle.pop() if self._idle else None
        if buf is None:
            return bytearray()
        del buf[:]
        return buf

    def release(self, buf: bytearray | None) -> None:
        """Zero-fill ``buf`` and keep it for reuse; ``None`` is ignored."""

        if buf is None:
            return
        buf[:] = bytes(len(buf))
        with self._lock:
            if len(self._idle) < self._max_idle and not any(idle is buf for idle in self._idle):
                self._idle.append(buf)

    def __len__(self) -> int:
        with self._lock:
            return len(self._idle)


_DEFAULT_POOL = BufferPool()


def default_pool() -> BufferPool:
    """Return the process-wide pool used when callers do not supply one."""

    return _DEFAULT_POOL


def acquire_buffer() -> bytearray:
    """Acquire a buffer from the default pool."""

    return _DEFAULT_POOL.acquire()


def release_buffer(buf: bytearray | None) -> None:
    """Release ``buf`` back to the default pool."""

    _DEFAULT_POOL.release(buf)


__all__ = ["BufferPool", "acquire_buffer", "default_pool", "release_buffer"]
