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
from typing import Annotated, Any, Dict, List, Optional

import typer

from coreason_fancylog import __version__
from coreason_fancylog.alignment import AlignmentRegistry
from coreason_fancylog.httplog import HttpLogger
from coreason_fancylog.levels import DEBUG, ERROR, FATAL, TRACE, PrefixRegistry
from coreason_fancylog.logger import Logger
from coreason_fancylog.utils.logger import enable_diagnostics, logger

app = typer.Typer(
    name="coreason-fancylog",
    help="CLI for coreason-fancylog: leveled, colorized console logging.",
    add_completion=False,
)


def parse_fields(pairs: List[str]) -> Dict[str, Any]:
    """
    Parses repeated `key=value` options into a field map.

    Raises:
        ValueError: If a pair has no '=' or an empty key.
    """
    fields: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid field (expected key=value): {pair!r}")
        fields[key.strip()] = value
    return fields


@app.command()
def emit(
    level: Annotated[str, typer.Argument(help="Level to log at (info, warn, error, debug, trace, fatal, ...)")],
    message: Annotated[Optional[List[str]], typer.Argument(help="Message text")] = None,
    name: Annotated[str, typer.Option("--name", "-n", help="Logger name")] = "",
    color: Annotated[
        Optional[bool], typer.Option("--color/--no-color", help="Force color on or off (default: detect terminal)")
    ] = None,
    timestamp: Annotated[bool, typer.Option("--timestamp/--no-timestamp", help="Render a timestamp")] = True,
    field: Annotated[Optional[List[str]], typer.Option("--field", "-f", help="key=value field (repeatable)")] = None,
    exit_code: Annotated[int, typer.Option("--exit-code", help="Exit status for the fatal level")] = 1,
) -> None:
    """
    Render a single log line to stdout (stderr for error and fatal).
    """
    try:
        fields = parse_fields(field or [])
        log = Logger.from_env(sys.stdout, sys.stderr, name)
    except ValueError:
        logger.exception("Invalid emit arguments")
        sys.exit(1)

    if color is True:
        log.with_color()
    elif color is False:
        log.without_color()
    if not timestamp:
        log.without_timestamp()

    level_name = level.upper()
    try:
        prefix = log.prefixes.get(level_name)
    except KeyError:
        logger.error(f"Unknown level: {level}")
        sys.exit(1)

    if level_name == DEBUG:
        log.with_debug()
    elif level_name == TRACE:
        log.with_trace()

    text = " ".join(message or [])
    if fields and text:
        fields["msg"] = text

    if level_name == FATAL:
        if fields:
            log.fatal_map_with_code(exit_code, fields)
        else:
            log.fatal_with_code(exit_code, text)

    is_error = level_name == ERROR
    if fields:
        log.log_map(prefix, fields, is_error=is_error)
    else:
        log.log(prefix, text, is_error=is_error)


@app.command()
def demo(
    color: Annotated[
        Optional[bool], typer.Option("--color/--no-color", help="Force color on or off (default: detect terminal)")
    ] = None,
) -> None:
    """
    Render every standard level, a field map and an HTTP request line.
    """
    alignment = AlignmentRegistry()
    prefixes = PrefixRegistry(alignment=alignment)
    log = Logger(sys.stdout, sys.stdout, "demo", prefixes=prefixes).with_debug().with_trace()
    http = HttpLogger(sys.stdout, name="http", prefixes=prefixes)
    for each in (log, http):
        if color is True:
            each.with_color()
        elif color is False:
            each.without_color()

    log.info("service started")
    log.warnf("cache at %d%% capacity", 87)
    log.error("upstream refused connection")
    log.debug("loaded", 3, "plugins")
    log.trace("entering request loop")
    log.info_map({"user": "alice", "attempt": 2, "headers": {"Accept": ["text/html", "application/json"]}})
    http.get({"uri": "/health", "clientIp": "127.0.0.1", "size": 2}, 200)
    http.post({"uri": "/orders", "clientIp": "10.0.0.7", "size": 0}, 503)


@app.command()
def version() -> None:
    """Print the version of coreason-fancylog."""
    typer.echo(f"coreason-fancylog v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    if not os.getenv("FANCYLOG_DIAGNOSTICS_LEVEL"):
        enable_diagnostics("WARNING")
    app()


if __name__ == "__main__":
    main()  # pragma: no cover
