# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_fancylog

import os
from datetime import datetime
from typing import Any, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from coreason_fancylog.alignment import AlignmentRegistry
from coreason_fancylog.buffer import RFC3339
from coreason_fancylog.colors import Color
from coreason_fancylog.interfaces import TimestampFunc
from coreason_fancylog.levels import DEFAULT_STACK_TRACE_LEVELS, Level, PrefixRegistry

DEFAULT_NAME_FORMAT = "<{name}>"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def default_time_fn() -> Tuple[datetime, str]:
    return datetime.now().astimezone(), RFC3339


class LoggerSettings(BaseModel):
    """
    Immutable configuration snapshot of a Logger.

    Loggers never mutate a settings object; every toggle swaps in a copy,
    so a render always sees one consistent snapshot.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = ""
    name_format: Optional[str] = None
    color: bool = False
    debug: bool = False
    trace: bool = False
    timestamp: bool = True
    timestamp_color: Optional[Color] = None
    timestamp_fn: Optional[TimestampFunc] = None
    quiet: bool = False

    @field_validator("name_format")
    @classmethod
    def _check_name_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and "{name}" not in value:
            raise ValueError(f"Name format must contain '{{name}}': {value!r}")
        return value

    def render_name(self) -> str:
        """Formats the display name using the template, if any."""
        template = self.name_format if self.name_format is not None else DEFAULT_NAME_FORMAT
        return template.format(name=self.name)

    def time_fn(self) -> TimestampFunc:
        return self.timestamp_fn if self.timestamp_fn is not None else default_time_fn

    @classmethod
    def from_env(cls, color_default: bool = False, **overrides: Any) -> "LoggerSettings":
        """
        Builds settings from FANCYLOG_* environment variables.

        FANCYLOG_COLOR unset means `color_default` (normally terminal detection).
        Explicit keyword overrides win over the environment.
        """
        values: dict[str, Any] = {
            "name": os.getenv("FANCYLOG_NAME", ""),
            "color": _env_bool("FANCYLOG_COLOR", color_default),
            "debug": _env_bool("FANCYLOG_DEBUG", False),
            "trace": _env_bool("FANCYLOG_TRACE", False),
            "timestamp": _env_bool("FANCYLOG_TIMESTAMP", True),
            "quiet": _env_bool("FANCYLOG_QUIET", False),
        }
        values.update(overrides)
        return cls(**values)


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"Invalid boolean for {key}: {raw!r}")


def stack_trace_levels_from_env() -> FrozenSet[Level]:
    """Reads FANCYLOG_STACK_TRACE_LEVELS, e.g. "FATAL,DEBUG"."""
    raw = os.getenv("FANCYLOG_STACK_TRACE_LEVELS")
    if raw is None:
        return DEFAULT_STACK_TRACE_LEVELS
    return frozenset(part.strip().upper() for part in raw.split(",") if part.strip())


def prefixes_from_env(alignment: Optional[AlignmentRegistry] = None) -> PrefixRegistry:
    """Builds a PrefixRegistry whose stack-trace table comes from the environment."""
    return PrefixRegistry(alignment=alignment, stack_trace_levels=stack_trace_levels_from_env())
