# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_fancylog

"""
coreason-fancylog
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .alignment import AlignmentRegistry, default_alignment
from .buffer import BufferPool, RenderBuffer, default_pool
from .colors import Color, color_by_name, mix, register_color, unchecked_custom_color
from .config import LoggerSettings, prefixes_from_env, stack_trace_levels_from_env
from .httplog import HttpLogger
from .levels import (
    DEBUG,
    DEFAULT_STACK_TRACE_LEVELS,
    ERROR,
    FATAL,
    INFO,
    TRACE,
    WARN,
    Level,
    Prefix,
    PrefixRegistry,
    default_prefixes,
)
from .logger import Logger
from .utils.logger import disable_diagnostics, enable_diagnostics

__all__ = [
    "AlignmentRegistry",
    "BufferPool",
    "Color",
    "DEBUG",
    "DEFAULT_STACK_TRACE_LEVELS",
    "ERROR",
    "FATAL",
    "HttpLogger",
    "INFO",
    "Level",
    "Logger",
    "LoggerSettings",
    "Prefix",
    "PrefixRegistry",
    "RenderBuffer",
    "TRACE",
    "WARN",
    "color_by_name",
    "enable_diagnostics",
    "default_alignment",
    "default_pool",
    "disable_diagnostics",
    "default_prefixes",
    "mix",
    "prefixes_from_env",
    "register_color",
    "stack_trace_levels_from_env",
    "unchecked_custom_color",
]
