# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_fancylog

from typing import Any, Dict, Optional

from coreason_fancylog import colors
from coreason_fancylog.alignment import AlignmentRegistry
from coreason_fancylog.buffer import BufferPool
from coreason_fancylog.colors import Color
from coreason_fancylog.config import LoggerSettings
from coreason_fancylog.interfaces import Sink
from coreason_fancylog.levels import Level, Prefix, PrefixRegistry
from coreason_fancylog.logger import FieldMap, Logger

HTTP_NAME_FORMAT = "{{{name}}}"

HTTP_METHODS = ["GET", "DELETE", "CONNECT", "HEAD", "OPTIONS", "POST", "PUT", "TRACE", "PATCH"]

HTTP_PREFIXES: Dict[Level, Prefix] = {method: Prefix(level=method, color=colors.CYAN) for method in HTTP_METHODS}

HEADERS_KEY = "headers"
STATUS_KEY = "status"


def status_color(status: int) -> Optional[Color]:
    """Label color for a response status class; None outside 100-599."""
    if 100 <= status <= 199:
        return colors.CYAN
    if 200 <= status <= 299:
        return colors.GREEN
    if 300 <= status <= 399:
        return colors.ORANGE
    if 400 <= status <= 499:
        return colors.RED
    if 500 <= status <= 599:
        return colors.FATAL_RED
    return None


class HttpLogger(Logger):
    """
    Logger with one call per HTTP method.

    Adapters fill a field map (uri, method, clientIp, size, headers, ...)
    and call the method matching the request. The status is added to the
    rendered fields and colors the method label by status class.

    HTTP levels are merged into the prefix registry without replacing
    levels that already exist there, so the standard TRACE level keeps its
    own prefix while `trace_method` uses the HTTP one.
    """

    def __init__(
        self,
        out: Optional[Sink] = None,
        err: Optional[Sink] = None,
        name: str = "",
        *,
        settings: Optional[LoggerSettings] = None,
        prefixes: Optional[PrefixRegistry] = None,
        alignment: Optional[AlignmentRegistry] = None,
        pool: Optional[BufferPool] = None,
    ):
        super().__init__(out, err, name, settings=settings, prefixes=prefixes, alignment=alignment, pool=pool)
        self._prefixes.merge(HTTP_PREFIXES, overwrite=False)
        self._sync_alignment()
        # A caller-chosen name template wins. Trace is always on.
        self._update(name_format=self.settings.name_format or HTTP_NAME_FORMAT, trace=True)
        self._debug_headers = False

    def with_headers(self) -> "HttpLogger":
        """Includes the `headers` field in rendered lines."""
        self._debug_headers = True
        return self

    def without_headers(self) -> "HttpLogger":
        self._debug_headers = False
        return self

    @property
    def debug_headers(self) -> bool:
        return self._debug_headers

    def method(self, method: str, fields: FieldMap, status: int) -> bytes:
        """
        Logs a request under the label of its HTTP method.

        The caller's mapping is copied, never modified.
        """
        level = method.upper()
        prefix = HTTP_PREFIXES.get(level)
        if prefix is None:
            prefix = self._prefixes.register(Prefix(level=level, color=colors.CYAN), overwrite=False)
            self._sync_alignment()
        payload: Dict[str, Any] = dict(fields)
        if not self._debug_headers:
            payload.pop(HEADERS_KEY, None)
        payload[STATUS_KEY] = status
        return self.render_fields(
            prefix, payload, color_override=status_color(status), key_colors={STATUS_KEY: colors.ORANGE}
        )

    def get(self, fields: FieldMap, status: int) -> bytes:
        return self.method("GET", fields, status)

    def delete(self, fields: FieldMap, status: int) -> bytes:
        return self.method("DELETE", fields, status)

    def connect(self, fields: FieldMap, status: int) -> bytes:
        return self.method("CONNECT", fields, status)

    def head(self, fields: FieldMap, status: int) -> bytes:
        return self.method("HEAD", fields, status)

    def options(self, fields: FieldMap, status: int) -> bytes:
        return self.method("OPTIONS", fields, status)

    def post(self, fields: FieldMap, status: int) -> bytes:
        return self.method("POST", fields, status)

    def put(self, fields: FieldMap, status: int) -> bytes:
        return self.method("PUT", fields, status)

    def patch(self, fields: FieldMap, status: int) -> bytes:
        return self.method("PATCH", fields, status)

    def trace_method(self, fields: FieldMap, status: int) -> bytes:
        return self.method("TRACE", fields, status)
