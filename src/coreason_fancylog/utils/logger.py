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
import sys
from contextlib import suppress
from typing import Any, Optional

from loguru import logger as _logger

__all__ = ["logger", "enable_diagnostics", "disable_diagnostics"]

PACKAGE = "coreason_fancylog"

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

_handler_id: Optional[int] = None


def enable_diagnostics(level: str = "WARNING", sink: Any = None) -> int:
    """
    Turns on the package's own diagnostics (dropped writes, format errors).

    Adds one handler that only receives records from this package. Handlers
    the host application has configured are left untouched. Calling again
    replaces the previous handler.

    Returns:
        The loguru handler id.
    """
    global _handler_id
    disable_diagnostics()
    _logger.enable(PACKAGE)
    _handler_id = _logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        format=_FORMAT,
        filter=PACKAGE,
    )
    return _handler_id


def disable_diagnostics() -> None:
    """Silences the package's records and removes its handler, if any."""
    global _handler_id
    if _handler_id is not None:
        # The host may already have removed every handler.
        with suppress(ValueError):
            _logger.remove(_handler_id)
        _handler_id = None
    _logger.disable(PACKAGE)


# Rendered log lines never pass through here.
_level = os.getenv("FANCYLOG_DIAGNOSTICS_LEVEL")
if _level:
    enable_diagnostics(_level)
else:
    _logger.disable(PACKAGE)

logger: Any = _logger
