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
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from coreason_fancylog.colors import OFF, Color, mix

# Layout handled by datetime.isoformat instead of strftime.
RFC3339 = "RFC3339"


class RenderBuffer:
    """
    Growable byte buffer used to assemble a single log line.

    Buffers come from a BufferPool and must be released exactly once.
    """

    def __init__(self, pool: "BufferPool", storage: bytearray):
        self._pool = pool
        self._data = storage
        self._released = False
        self.color = False

    def append(self, data: bytes) -> None:
        self._data += data

    def append_byte(self, value: int) -> None:
        self._data.append(value)

    def append_colored(self, data: bytes, color: Color) -> None:
        """Appends data wrapped in color, or plain data when color is off."""
        if self.color:
            self._data += mix(data, color)
        else:
            self._data += data

    def color_on(self, color: Color) -> None:
        """Starts a colored run; no-op when color is off."""
        if self.color:
            self._data += color

    def color_off(self) -> None:
        if self.color:
            self._data += OFF

    def append_space(self) -> None:
        self._data.append(0x20)

    def append_spaces(self, count: int) -> None:
        if count > 0:
            self._data += b" " * count

    def append_int(self, value: int) -> None:
        self._data += str(int(value)).encode("ascii")

    def append_timestamp(self, when: datetime, layout: str) -> None:
        if layout == RFC3339:
            text = when.isoformat(timespec="seconds")
        else:
            text = when.strftime(layout)
        self._data += text.encode("utf-8")

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Returns the underlying storage to the pool."""
        if self._released:
            raise RuntimeError("RenderBuffer released twice")
        self._released = True
        self._pool._put(self._data)


class BufferPool:
    """
    Thread-safe pool of reusable byte storage for RenderBuffers.

    Released storage is cleared and kept for reuse up to `max_retained`
    entries; storage that grew beyond `max_capacity` bytes is discarded.
    """

    def __init__(self, max_retained: int = 64, max_capacity: int = 64 * 1024):
        self.max_retained = max_retained
        self.max_capacity = max_capacity
        self._free: List[bytearray] = []
        self._lock = threading.Lock()
        self._outstanding = 0

    def acquire(self, color: bool = False) -> RenderBuffer:
        with self._lock:
            storage = self._free.pop() if self._free else bytearray()
            self._outstanding += 1
        buf = RenderBuffer(self, storage)
        buf.color = color
        return buf

    @contextmanager
    def borrow(self, color: bool = False) -> Iterator[RenderBuffer]:
        """Acquires a buffer and releases it on every exit path."""
        buf = self.acquire(color)
        try:
            yield buf
        finally:
            buf.release()

    @property
    def outstanding(self) -> int:
        """Number of buffers acquired and not yet released."""
        with self._lock:
            return self._outstanding

    @property
    def retained(self) -> int:
        with self._lock:
            return len(self._free)

    def _put(self, storage: bytearray) -> None:
        keep = len(storage) <= self.max_capacity
        storage.clear()
        with self._lock:
            self._outstanding -= 1
            if keep and len(self._free) < self.max_retained:
                self._free.append(storage)


_default_pool: Optional[BufferPool] = None
_default_pool_lock = threading.Lock()


def default_pool() -> BufferPool:
    """Returns the process-wide BufferPool, creating it on first use."""
    global _default_pool
    with _default_pool_lock:
        if _default_pool is None:
            _default_pool = BufferPool()
        return _default_pool
