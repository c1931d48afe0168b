from __future__ import annotations

import threading

import pytest

from lib_log_kv.domain.pool import BufferPool, acquire_buffer, default_pool, release_buffer


def test_acquire_returns_empty_buffer(pool: BufferPool) -> None:
    buf = pool.acquire()
    assert isinstance(buf, bytearray)
    assert len(buf) == 0


def test_release_zero_fills_and_recycles(pool: BufferPool) -> None:
    buf = pool.acquire()
    buf += b"password=hunter2"
    pool.release(buf)

    assert bytes(buf) == bytes(16)
    again = pool.acquire()
    assert again is buf
    assert len(again) == 0


def test_release_none_is_ignored(pool: BufferPool) -> None:
    pool.release(None)
    assert len(pool) == 0


def test_double_release_keeps_one_copy(pool: BufferPool) -> None:
    buf = pool.acquire()
    pool.release(buf)
    pool.release(buf)
    assert len(pool) == 1


def test_max_idle_bounds_the_free_list() -> None:
    pool = BufferPool(max_idle=2)
    buffers = [pool.acquire() for _ in range(4)]
    for buf in buffers:
        pool.release(buf)
    assert len(pool) == 2


def test_negative_max_idle_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_idle"):
        BufferPool(max_idle=-1)


def test_module_helpers_use_default_pool() -> None:
    buf = acquire_buffer()
    buf += b"x"
    release_buffer(buf)
    assert default_pool().acquire() is buf


def test_concurrent_acquire_release(pool: BufferPool) -> None:
    errors: list[BaseException] = []

    def worker() -> None:
        try:
            for index in range(200):
                buf = pool.acquire()
                assert len(buf) == 0
                buf += str(index).encode()
                pool.release(buf)
        except BaseException as exc:  # pragma: no cover - surfaced through the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
