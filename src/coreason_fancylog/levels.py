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
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from coreason_fancylog import colors
from coreason_fancylog.alignment import AlignmentRegistry, default_alignment
from coreason_fancylog.colors import Color
from coreason_fancylog.utils.logger import logger

Level = str

FATAL: Level = "FATAL"
ERROR: Level = "ERROR"
WARN: Level = "WARN"
INFO: Level = "INFO"
DEBUG: Level = "DEBUG"
TRACE: Level = "TRACE"

STANDARD_LEVELS: List[Level] = [FATAL, ERROR, WARN, INFO, DEBUG, TRACE]

STANDARD_COLORS: Dict[Level, Color] = {
    FATAL: colors.FATAL_RED,
    ERROR: colors.RED,
    WARN: colors.ORANGE,
    INFO: colors.GREEN,
    DEBUG: colors.PURPLE,
    TRACE: colors.CYAN,
}

# Levels whose calls capture the caller's stack.
DEFAULT_STACK_TRACE_LEVELS: FrozenSet[Level] = frozenset({FATAL, DEBUG, TRACE})


class Prefix(BaseModel):
    """
    A level bound to its display color and stack-trace flag.
    """

    model_config = ConfigDict(frozen=True)

    level: Level
    color: Color
    stack_trace: bool = False

    @property
    def label(self) -> bytes:
        """The bracketed label text, e.g. b"[INFO]"."""
        return f"[{self.level}]".encode("utf-8")


def standard_prefixes(stack_trace_levels: Iterable[Level] = DEFAULT_STACK_TRACE_LEVELS) -> List[Prefix]:
    """Builds the six standard prefixes using the given stack-trace table."""
    traced = frozenset(stack_trace_levels)
    return [Prefix(level=level, color=STANDARD_COLORS[level], stack_trace=level in traced) for level in STANDARD_LEVELS]


class PrefixRegistry:
    """
    Thread-safe mapping of Level -> Prefix.

    Holds the standard prefixes plus any custom ones merged in. Every change
    rescans the label widths into the attached AlignmentRegistry.
    """

    def __init__(
        self,
        alignment: Optional[AlignmentRegistry] = None,
        stack_trace_levels: Optional[Iterable[Level]] = None,
    ):
        self.alignment = alignment if alignment is not None else default_alignment()
        self._stack_trace_levels = frozenset(
            stack_trace_levels if stack_trace_levels is not None else DEFAULT_STACK_TRACE_LEVELS
        )
        self._prefixes: Dict[Level, Prefix] = {}
        self._lock = threading.Lock()
        self.merge(standard_prefixes(self._stack_trace_levels))

    @property
    def stack_trace_levels(self) -> FrozenSet[Level]:
        with self._lock:
            return self._stack_trace_levels

    def get(self, level: Level) -> Prefix:
        """
        Returns the prefix registered for a level.

        Raises:
            KeyError: If the level is not registered.
        """
        with self._lock:
            try:
                return self._prefixes[level]
            except KeyError:
                raise KeyError(f"Unknown level: {level}") from None

    def __contains__(self, level: object) -> bool:
        with self._lock:
            return level in self._prefixes

    def levels(self) -> List[Level]:
        with self._lock:
            return list(self._prefixes)

    def register(self, prefix: Prefix, overwrite: bool = True) -> Prefix:
        """Registers a single prefix and returns the one now in effect."""
        return self.merge([prefix], overwrite=overwrite)[prefix.level]

    def merge(
        self, prefixes: Union[Iterable[Prefix], Mapping[Level, Prefix]], overwrite: bool = True
    ) -> Dict[Level, Prefix]:
        """
        Merges prefixes into the registry.

        With overwrite=False, levels that are already registered keep their
        current prefix. Returns the effective prefix of every merged level.
        """
        items = list(prefixes.values()) if isinstance(prefixes, Mapping) else list(prefixes)
        effective: Dict[Level, Prefix] = {}
        with self._lock:
            for prefix in items:
                if prefix.level in self._prefixes and not overwrite:
                    effective[prefix.level] = self._prefixes[prefix.level]
                    continue
                self._prefixes[prefix.level] = prefix
                effective[prefix.level] = prefix
            known = list(self._prefixes)
        self.alignment.scan(known)
        logger.debug(f"Prefix registry now holds {len(known)} levels")
        return effective

    def set_stack_trace_levels(self, levels: Iterable[Level]) -> None:
        """Re-flags every registered prefix so exactly `levels` capture stacks."""
        traced = frozenset(levels)
        with self._lock:
            self._stack_trace_levels = traced
            for level, prefix in self._prefixes.items():
                flag = level in traced
                if prefix.stack_trace != flag:
                    self._prefixes[level] = prefix.model_copy(update={"stack_trace": flag})


_default_prefixes: Optional[PrefixRegistry] = None
_default_prefixes_lock = threading.Lock()


def default_prefixes() -> PrefixRegistry:
    """Returns the process-wide PrefixRegistry bound to the default alignment."""
    global _default_prefixes
    with _default_prefixes_lock:
        if _default_prefixes is None:
            _default_prefixes = PrefixRegistry()
        return _default_prefixes
