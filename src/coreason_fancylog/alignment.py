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
from typing import Iterable, Optional, Tuple

from coreason_fancylog.utils.logger import logger


class AlignmentRegistry:
    """
    Shared column widths for logger names and level labels.

    Every logger referencing the same registry pads to the same columns, so
    registering a wider name or level widens the output of all of them.
    Widths only grow.
    """

    def __init__(self, name_width: int = 0, prefix_width: int = 0):
        self._name_width = name_width
        self._prefix_width = prefix_width
        self._lock = threading.Lock()

    @property
    def name_width(self) -> int:
        with self._lock:
            return self._name_width

    @property
    def prefix_width(self) -> int:
        with self._lock:
            return self._prefix_width

    def snapshot(self) -> Tuple[int, int]:
        """Returns (name_width, prefix_width) read together."""
        with self._lock:
            return self._name_width, self._prefix_width

    def register_name(self, name: str) -> int:
        with self._lock:
            if len(name) > self._name_width:
                logger.debug(f"Name column widened to {len(name)} by {name!r}")
                self._name_width = len(name)
            return self._name_width

    def register_level(self, level: str) -> int:
        with self._lock:
            if len(level) > self._prefix_width:
                logger.debug(f"Level column widened to {len(level)} by {level!r}")
                self._prefix_width = len(level)
            return self._prefix_width

    def scan(self, levels: Iterable[str]) -> int:
        """Registers the label text of every given level."""
        width = self.prefix_width
        for level in levels:
            width = self.register_level(level)
        return width

    def reset(self) -> None:
        """Drops both widths back to zero. Meant for teardown only."""
        with self._lock:
            self._name_width = 0
            self._prefix_width = 0


_default_alignment: Optional[AlignmentRegistry] = None
_default_alignment_lock = threading.Lock()


def default_alignment() -> AlignmentRegistry:
    """Returns the process-wide AlignmentRegistry."""
    global _default_alignment
    with _default_alignment_lock:
        if _default_alignment is None:
            _default_alignment = AlignmentRegistry()
        return _default_alignment
