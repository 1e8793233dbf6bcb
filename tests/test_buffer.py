# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_fancylog

import threading
from datetime import datetime, timezone

import pytest

from coreason_fancylog import colors
from coreason_fancylog.buffer import RFC3339, BufferPool, default_pool


def test_append_primitives(pool: BufferPool) -> None:
    buf = pool.acquire()
    buf.append(b"a")
    buf.append_space()
    buf.append_byte(ord("b"))
    buf.append_spaces(2)
    buf.append_spaces(-1)
    buf.append_int(42)
    assert buf.to_bytes() == b"a b  42"
    assert len(buf) == 7
    buf.release()


def test_append_colored_respects_color_flag(pool: BufferPool) -> None:
    with pool.borrow(color=False) as plain:
        plain.append_colored(b"x", colors.RED)
        plain.color_on(colors.RED)
        plain.color_off()
        assert plain.to_bytes() == b"x"

    with pool.borrow(color=True) as colored:
        colored.append_colored(b"x", colors.RED)
        assert colored.to_bytes() == colors.RED + b"x" + colors.OFF


def test_append_timestamp_layouts(pool: BufferPool) -> None:
    when = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    with pool.borrow() as buf:
        buf.append_timestamp(when, RFC3339)
        buf.append_space()
        buf.append_timestamp(when, "%H:%M:%S")
        assert buf.to_bytes() == b"2024-01-02T03:04:05+00:00 03:04:05"


def test_borrow_releases_on_exception(pool: BufferPool) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with pool.borrow() as buf:
            buf.append(b"data")
            raise RuntimeError("boom")
    assert buf.released
    assert pool.outstanding == 0


def test_double_release_raises(pool: BufferPool) -> None:
    buf = pool.acquire()
    buf.release()
    with pytest.raises(RuntimeError, match="released twice"):
        buf.release()
    assert pool.outstanding == 0


def test_released_storage_is_reused_empty() -> None:
    pool = BufferPool(max_retained=1)
    first = pool.acquire()
    first.append(b"leftover")
    first.release()
    assert pool.retained == 1

    second = pool.acquire()
    assert second.to_bytes() == b""
    second.release()


def test_pool_drops_oversized_storage() -> None:
    pool = BufferPool(max_capacity=4)
    buf = pool.acquire()
    buf.append(b"too large")
    buf.release()
    assert pool.retained == 0


def test_pool_retains_bounded_count() -> None:
    pool = BufferPool(max_retained=2)
    buffers = [pool.acquire() for _ in range(5)]
    for buf in buffers:
        buf.release()
    assert pool.retained == 2
    assert pool.outstanding == 0


def test_pool_concurrent_use(pool: BufferPool) -> None:
    def worker() -> None:
        for i in range(200):
            with pool.borrow() as buf:
                buf.append_int(i)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert pool.outstanding == 0


def test_default_pool_is_shared() -> None:
    assert default_pool() is default_pool()
