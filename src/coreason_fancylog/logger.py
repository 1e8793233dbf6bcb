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
import os
import sys
import threading
import traceback
from typing import Any, List, Mapping, Optional, Tuple, Union

from coreason_fancylog import colors
from coreason_fancylog.alignment import AlignmentRegistry
from coreason_fancylog.buffer import BufferPool, RenderBuffer, default_pool
from coreason_fancylog.colors import Color
from coreason_fancylog.config import LoggerSettings, prefixes_from_env
from coreason_fancylog.formatting import capture_stack, format_inner_value, format_value, is_nested
from coreason_fancylog.interfaces import Sink, TimestampFunc
from coreason_fancylog.levels import (
    DEBUG,
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
from coreason_fancylog.utils.logger import logger

_NEWLINE = 0x0A
_UNNAMED_GUTTER = 3

FieldMap = Mapping[str, Any]


def is_terminal(sink: Any) -> bool:
    """True if the sink reports itself as an interactive terminal."""
    isatty = getattr(sink, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False


def _join(args: Tuple[Any, ...]) -> str:
    return " ".join(str(a) for a in args)


def _sprintf(fmt: str, args: Tuple[Any, ...]) -> str:
    if not args:
        return fmt
    try:
        return fmt % args
    except (TypeError, ValueError) as e:
        logger.debug(f"Bad format string {fmt!r}: {e}")
        return _join((fmt,) + args)


class Logger:
    """
    Leveled, colorized console logger.

    Each call renders one line into a pooled buffer and writes it to the
    normal sink (WARN and below) or the error sink (ERROR, FATAL). Column
    widths come from a shared AlignmentRegistry so every logger attached to
    it lines up.

    Configuration toggles return the logger itself and may be called from
    any thread while other threads are logging.
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
        self._out: Sink = out if out is not None else sys.stdout
        self._err: Sink = err if err is not None else self._out

        if prefixes is None:
            prefixes = PrefixRegistry(alignment=alignment) if alignment is not None else default_prefixes()
        self._prefixes = prefixes
        self._alignment = alignment if alignment is not None else prefixes.alignment
        self._sync_alignment()
        self._pool = pool if pool is not None else default_pool()

        if settings is None:
            settings = LoggerSettings(name=name, color=is_terminal(self._out))
        elif name:
            settings = settings.model_copy(update={"name": name})
        self._settings = settings
        self._lock = threading.Lock()
        self._alignment.register_name(settings.name)

    @classmethod
    def from_env(
        cls,
        out: Optional[Sink] = None,
        err: Optional[Sink] = None,
        name: str = "",
        alignment: Optional[AlignmentRegistry] = None,
    ) -> "Logger":
        """Builds a logger configured from FANCYLOG_* environment variables."""
        sink = out if out is not None else sys.stdout
        settings = LoggerSettings.from_env(color_default=is_terminal(sink))
        return cls(sink, err, name, settings=settings, prefixes=prefixes_from_env(alignment))

    # --- Configuration ---

    def _sync_alignment(self) -> None:
        """Copies the registry's label widths into a separately supplied alignment."""
        if self._alignment is not self._prefixes.alignment:
            self._alignment.scan(self._prefixes.levels())

    @property
    def settings(self) -> LoggerSettings:
        """The current configuration snapshot."""
        with self._lock:
            return self._settings

    @property
    def prefixes(self) -> PrefixRegistry:
        return self._prefixes

    @property
    def alignment(self) -> AlignmentRegistry:
        return self._alignment

    @property
    def name(self) -> str:
        return self.settings.name

    def _update(self, **changes: Any) -> "Logger":
        with self._lock:
            self._settings = LoggerSettings(**{**dict(self._settings), **changes})
        return self

    def with_color(self) -> "Logger":
        return self._update(color=True)

    def without_color(self) -> "Logger":
        return self._update(color=False)

    def with_debug(self) -> "Logger":
        return self._update(debug=True)

    def without_debug(self) -> "Logger":
        return self._update(debug=False)

    def with_trace(self) -> "Logger":
        return self._update(trace=True)

    def without_trace(self) -> "Logger":
        return self._update(trace=False)

    def with_timestamp(self) -> "Logger":
        return self._update(timestamp=True)

    def without_timestamp(self) -> "Logger":
        return self._update(timestamp=False)

    def quiet(self) -> "Logger":
        """Suppresses all output. Fatal calls still exit."""
        return self._update(quiet=True)

    def no_quiet(self) -> "Logger":
        return self._update(quiet=False)

    def with_name(self, name: str) -> "Logger":
        self._alignment.register_name(name)
        return self._update(name=name)

    def with_name_format(self, name_format: Optional[str]) -> "Logger":
        """Sets the display template, e.g. "{{{name}}}". None restores "<{name}>"."""
        return self._update(name_format=name_format)

    def with_timestamp_color(self, color: Optional[Color]) -> "Logger":
        return self._update(timestamp_color=color)

    def with_timestamp_fn(self, timestamp_fn: Optional[TimestampFunc]) -> "Logger":
        return self._update(timestamp_fn=timestamp_fn)

    def is_color(self) -> bool:
        return self.settings.color

    def is_debug(self) -> bool:
        return self.settings.debug

    def is_trace(self) -> bool:
        return self.settings.trace

    def is_quiet(self) -> bool:
        return self.settings.quiet

    # --- Call surface ---

    def fatal(self, *args: Any) -> None:
        """Logs to the error sink, then exits with status 1."""
        self.fatal_with_code(1, *args)

    def fatalf(self, fmt: str, *args: Any) -> None:
        self.fatalf_with_code(1, fmt, *args)

    def fatal_map(self, fields: FieldMap) -> None:
        self.fatal_map_with_code(1, fields)

    def fatal_with_code(self, exit_code: int, *args: Any) -> None:
        self.render_line(self._prefixes.get(FATAL), _join(args), is_error=True)
        self._terminate(exit_code)

    def fatalf_with_code(self, exit_code: int, fmt: str, *args: Any) -> None:
        self.render_line(self._prefixes.get(FATAL), _sprintf(fmt, args), is_error=True)
        self._terminate(exit_code)

    def fatal_map_with_code(self, exit_code: int, fields: FieldMap) -> None:
        self.render_fields(self._prefixes.get(FATAL), fields, is_error=True)
        self._terminate(exit_code)

    def _terminate(self, exit_code: int) -> None:
        """
        Ends the process after a Fatal render.

        On the main thread this raises SystemExit. From any other thread
        SystemExit would only end that thread, so the sinks are flushed and
        the process exits immediately.
        """
        if threading.current_thread() is threading.main_thread():
            sys.exit(exit_code)
        for sink in (self._out, self._err, sys.stdout, sys.stderr):
            flush = getattr(sink, "flush", None)
            if flush is None:
                continue
            try:
                flush()
            except (OSError, ValueError) as e:
                logger.debug(f"Flush before exit failed: {e}")
        os._exit(exit_code)

    def error(self, *args: Any) -> None:
        self.render_line(self._prefixes.get(ERROR), _join(args), is_error=True)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.render_line(self._prefixes.get(ERROR), _sprintf(fmt, args), is_error=True)

    def error_map(self, fields: FieldMap) -> None:
        self.render_fields(self._prefixes.get(ERROR), fields, is_error=True)

    def warn(self, *args: Any) -> None:
        self.render_line(self._prefixes.get(WARN), _join(args))

    def warnf(self, fmt: str, *args: Any) -> None:
        self.render_line(self._prefixes.get(WARN), _sprintf(fmt, args))

    def warn_map(self, fields: FieldMap) -> None:
        self.render_fields(self._prefixes.get(WARN), fields)

    def info(self, *args: Any) -> None:
        self.render_line(self._prefixes.get(INFO), _join(args))

    def infof(self, fmt: str, *args: Any) -> None:
        self.render_line(self._prefixes.get(INFO), _sprintf(fmt, args))

    def info_map(self, fields: FieldMap) -> None:
        self.render_fields(self._prefixes.get(INFO), fields)

    def debug(self, *args: Any) -> None:
        """Logs only when debug output is enabled."""
        snapshot = self.settings
        if snapshot.debug:
            self._render_line(snapshot, self._prefixes.get(DEBUG), _join(args), False, None)

    def debugf(self, fmt: str, *args: Any) -> None:
        snapshot = self.settings
        if snapshot.debug:
            self._render_line(snapshot, self._prefixes.get(DEBUG), _sprintf(fmt, args), False, None)

    def debug_map(self, fields: FieldMap) -> None:
        snapshot = self.settings
        if snapshot.debug:
            self._render_fields(snapshot, self._prefixes.get(DEBUG), fields, False, None, None)

    def trace(self, *args: Any) -> None:
        """Logs only when trace output is enabled."""
        snapshot = self.settings
        if snapshot.trace:
            self._render_line(snapshot, self._prefixes.get(TRACE), _join(args), False, None)

    def tracef(self, fmt: str, *args: Any) -> None:
        snapshot = self.settings
        if snapshot.trace:
            self._render_line(snapshot, self._prefixes.get(TRACE), _sprintf(fmt, args), False, None)

    def trace_map(self, fields: FieldMap) -> None:
        snapshot = self.settings
        if snapshot.trace:
            self._render_fields(snapshot, self._prefixes.get(TRACE), fields, False, None, None)

    def log(self, prefix: Union[Prefix, Level], *args: Any, is_error: bool = False) -> None:
        """Logs with a custom prefix (or the name of a registered level)."""
        self.render_line(self._resolve(prefix), _join(args), is_error=is_error)

    def logf(self, prefix: Union[Prefix, Level], fmt: str, *args: Any, is_error: bool = False) -> None:
        self.render_line(self._resolve(prefix), _sprintf(fmt, args), is_error=is_error)

    def log_map(self, prefix: Union[Prefix, Level], fields: FieldMap, is_error: bool = False) -> None:
        self.render_fields(self._resolve(prefix), fields, is_error=is_error)

    def _resolve(self, prefix: Union[Prefix, Level]) -> Prefix:
        if isinstance(prefix, Prefix):
            return prefix
        return self._prefixes.get(prefix)

    # --- Rendering ---

    def render_line(
        self,
        prefix: Prefix,
        message: Union[str, bytes],
        is_error: bool = False,
        color_override: Optional[Color] = None,
    ) -> bytes:
        """
        Renders a free-form message and writes it to the selected sink.

        Returns:
            The bytes written, or b"" when the logger is quiet.
        """
        return self._render_line(self.settings, prefix, message, is_error, color_override)

    def render_fields(
        self,
        prefix: Prefix,
        fields: FieldMap,
        is_error: bool = False,
        color_override: Optional[Color] = None,
        key_colors: Optional[Mapping[str, Color]] = None,
    ) -> bytes:
        """
        Renders a field map as sorted `key=value` pairs and writes it.

        Keys are sorted so the same fields always produce the same bytes.
        Nested mappings render as `key[ inner:value ]` groups. `key_colors`
        overrides the color of individual keys.

        Returns:
            The bytes written, or b"" when the logger is quiet.
        """
        return self._render_fields(self.settings, prefix, fields, is_error, color_override, key_colors)

    def _render_line(
        self,
        settings: LoggerSettings,
        prefix: Prefix,
        message: Union[str, bytes],
        is_error: bool,
        color_override: Optional[Color],
    ) -> bytes:
        if settings.quiet:
            return b""
        stack = capture_stack() if prefix.stack_trace else None

        with self._pool.borrow(settings.color) as buf:
            self._write_preamble(buf, settings, prefix, color_override)
            data = message if isinstance(message, bytes) else message.encode("utf-8")
            buf.append(data)
            if not data.endswith(b"\n"):
                buf.append_byte(_NEWLINE)
            if stack:
                self._write_stack(buf, stack)
            rendered = buf.to_bytes()
            self._dispatch(rendered, is_error)
        return rendered

    def _render_fields(
        self,
        settings: LoggerSettings,
        prefix: Prefix,
        fields: FieldMap,
        is_error: bool,
        color_override: Optional[Color],
        key_colors: Optional[Mapping[str, Color]],
    ) -> bytes:
        if settings.quiet:
            return b""
        stack = capture_stack() if prefix.stack_trace else None

        with self._pool.borrow(settings.color) as buf:
            self._write_preamble(buf, settings, prefix, color_override)
            for key in sorted(fields, key=str):
                override = key_colors.get(key) if key_colors else None
                value = fields[key]
                if is_nested(value):
                    self._write_group(buf, str(key), value, override)
                else:
                    self._write_pair(buf, str(key), value, override)
            buf.append_byte(_NEWLINE)
            if stack:
                self._write_stack(buf, stack)
            rendered = buf.to_bytes()
            self._dispatch(rendered, is_error)
        return rendered

    def _write_preamble(
        self, buf: RenderBuffer, settings: LoggerSettings, prefix: Prefix, color_override: Optional[Color]
    ) -> None:
        if self._alignment is not self._prefixes.alignment:
            self._alignment.register_level(prefix.level)
        name_width, prefix_width = self._alignment.snapshot()

        # Name column
        if settings.name:
            buf.append_colored(settings.render_name().encode("utf-8"), colors.NICE_PURPLE)
            buf.append_space()
        else:
            buf.append_spaces(_UNNAMED_GUTTER)
        buf.append_spaces(name_width - len(settings.name))

        # Level column
        buf.append_colored(prefix.label, color_override if color_override is not None else prefix.color)
        buf.append_spaces(prefix_width - len(prefix.level))
        buf.append_space()

        if settings.timestamp:
            when, layout = settings.time_fn()()
            buf.color_on(settings.timestamp_color if settings.timestamp_color is not None else colors.BLUE)
            buf.append_timestamp(when, layout)
            buf.color_off()
            buf.append_space()

    @staticmethod
    def _scheme(override: Optional[Color]) -> Tuple[Color, Color, Color]:
        if override is not None:
            return override, override, override
        return colors.PURPLE, colors.ORANGE, colors.CYAN

    def _write_pair(self, buf: RenderBuffer, key: str, value: Any, override: Optional[Color]) -> None:
        key_color, sep_color, value_color = self._scheme(override)
        buf.append_colored(key.encode("utf-8"), key_color)
        buf.append_colored(b"=", sep_color)
        buf.append_colored(format_value(value).encode("utf-8"), value_color)
        buf.append_space()

    def _write_group(self, buf: RenderBuffer, key: str, group: Mapping[Any, Any], override: Optional[Color]) -> None:
        key_color, sep_color, value_color = self._scheme(override)
        buf.append_colored(key.encode("utf-8"), key_color)
        buf.append_colored(b"[", sep_color)
        for inner in sorted(group, key=str):
            buf.append_space()
            buf.append_colored(str(inner).encode("utf-8"), key_color)
            buf.append_colored(b":", sep_color)
            buf.append_colored(format_inner_value(group[inner]).encode("utf-8"), value_color)
            buf.append_space()
        buf.append_colored(b"]", sep_color)
        buf.append_space()

    @staticmethod
    def _write_stack(buf: RenderBuffer, stack: List[traceback.FrameSummary]) -> None:
        for frame in stack:
            buf.color_on(colors.ORANGE)
            buf.append(f'  File "{frame.filename}", line '.encode("utf-8"))
            buf.append_int(frame.lineno or 0)
            buf.append(f", in {frame.name}".encode("utf-8"))
            buf.color_off()
            buf.append_byte(_NEWLINE)
            if frame.line:
                buf.append(f"    {frame.line.strip()}".encode("utf-8"))
                buf.append_byte(_NEWLINE)

    def _dispatch(self, data: bytes, is_error: bool) -> None:
        sink = self._err if is_error else self._out
        try:
            if isinstance(sink, io.TextIOBase):
                sink.write(data.decode("utf-8", errors="replace"))
            else:
                sink.write(data)
            flush = getattr(sink, "flush", None)
            if flush is not None:
                flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Dropped log line ({len(data)} bytes): {e}")
