# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_fancylog

import dataclasses
import os
import traceback
from typing import Any, List, Mapping

from pydantic import BaseModel

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_MAX_DEPTH = 6


def format_value(value: Any) -> str:
    """
    Renders any field value as verbose text.

    Models, dataclasses and mappings render as `{field:value ...}`, sequences
    as `[a b]`. Mapping and set entries are sorted so output is stable.
    """
    return _format(value, 0)


def _format(value: Any, depth: int) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if value is None or isinstance(value, (bool, int, float)):
        return str(value)
    if depth >= _MAX_DEPTH:
        return "..."
    if isinstance(value, BaseModel):
        pairs = [(name, getattr(value, name)) for name in type(value).model_fields]
        return _format_pairs(pairs, depth)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        pairs = [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]
        return _format_pairs(pairs, depth)
    if isinstance(value, Mapping):
        pairs = sorted(((str(k), v) for k, v in value.items()), key=lambda kv: kv[0])
        return _format_pairs(pairs, depth)
    if isinstance(value, (set, frozenset)):
        return "[" + " ".join(sorted(_format(v, depth + 1) for v in value)) + "]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format(v, depth + 1) for v in value) + "]"
    if isinstance(value, BaseException):
        text = str(value)
        return text if text else type(value).__name__
    return str(value)


def _format_pairs(pairs: List[Any], depth: int) -> str:
    return "{" + " ".join(f"{k}:{_format(v, depth + 1)}" for k, v in pairs) + "}"


def format_inner_value(value: Any) -> str:
    """Renders a value inside a nested group; lists join their items with commas."""
    if isinstance(value, (list, tuple)):
        return ",".join(format_value(v) for v in value)
    return format_value(value)


def is_nested(value: Any) -> bool:
    """True for values rendered as a bracketed sub-group."""
    return isinstance(value, Mapping)


def _is_internal(filename: str) -> bool:
    return os.path.abspath(filename).startswith(_PACKAGE_DIR + os.sep)


def capture_stack() -> List[traceback.FrameSummary]:
    """
    Captures the current call stack, outermost first.

    Frames from this package are dropped so the trace ends at the caller
    of the logger.
    """
    return [frame for frame in traceback.extract_stack() if not _is_internal(frame.filename)]
