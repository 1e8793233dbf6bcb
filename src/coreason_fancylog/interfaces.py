# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_fancylog

from datetime import datetime
from typing import Any, Callable, Protocol, Tuple


class Sink(Protocol):
    """
    Protocol for log destinations.

    Text streams receive decoded text, anything else receives bytes.
    """

    def write(self, data: Any) -> Any:
        """
        Writes one rendered log line.
        """
        ...


# Timestamp source: returns the time to render and the layout to render it with.
TimestampFunc = Callable[[], Tuple[datetime, str]]
