# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_fancylog

import io
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, List, Tuple

import pytest

from coreason_fancylog.alignment import AlignmentRegistry
from coreason_fancylog.buffer import RFC3339, BufferPool
from coreason_fancylog.config import LoggerSettings
from coreason_fancylog.levels import PrefixRegistry
from coreason_fancylog.logger import Logger
from coreason_fancylog.utils.logger import disable_diagnostics, enable_diagnostics

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

# --- Mocks ---


class ListSink:
    """
    Binary sink that keeps every write as a separate entry.
    """

    def __init__(self) -> None:
        self.writes: List[bytes] = []
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        with self._lock:
            self.writes.append(data)
        return len(data)


class BrokenSink:
    """Sink whose writes always fail."""

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def write(self, data: Any) -> int:
        raise self.exc


def fixed_time() -> Tuple[datetime, str]:
    return FIXED_TIME, RFC3339


# --- Fixtures ---


@pytest.fixture
def alignment() -> AlignmentRegistry:
    return AlignmentRegistry()


@pytest.fixture
def prefixes(alignment: AlignmentRegistry) -> PrefixRegistry:
    return PrefixRegistry(alignment=alignment)


@pytest.fixture
def pool() -> BufferPool:
    return BufferPool()


@pytest.fixture
def out() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def err() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def make_logger(
    out: io.BytesIO, err: io.BytesIO, prefixes: PrefixRegistry, pool: BufferPool
) -> Callable[..., Logger]:
    """
    Builds loggers writing to the `out`/`err` BytesIO fixtures with pinned
    registries, no color and no timestamp unless overridden.
    """

    def _make(name: str = "", **overrides: Any) -> Logger:
        values = {"name": name, "color": False, "timestamp": False}
        values.update(overrides)
        return Logger(out, err, settings=LoggerSettings(**values), prefixes=prefixes, pool=pool)

    return _make


@pytest.fixture
def diagnostics() -> Iterator[List[str]]:
    """Captures the package's own loguru records at DEBUG."""
    messages: List[str] = []
    enable_diagnostics("DEBUG", sink=lambda message: messages.append(str(message)))
    yield messages
    disable_diagnostics()
