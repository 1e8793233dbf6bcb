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
ANSI color sequences and the on/off mixer used by the renderer.
"""

import threading
from typing import Dict

Color = bytes

OFF: Color = b"\x1b[0m"
RED: Color = b"\x1b[0;31m"
GREEN: Color = b"\x1b[0;32m"
ORANGE: Color = b"\x1b[0;33m"
BLUE: Color = b"\x1b[0;34m"
PURPLE: Color = b"\x1b[0;35m"
CYAN: Color = b"\x1b[0;36m"
GRAY: Color = b"\x1b[0;37m"

FATAL_RED: Color = b"\x1b[1m\x1b[31m\x1b[7m"
DARK_ORANGE: Color = b"\x1b[1m\x1b[38;5;202m"
BRIGHT_WHITE: Color = b"\x1b[1m\x1b[38;5;255m"
NICE_PURPLE: Color = b"\x1b[1m\x1b[38;5;99m"

_named: Dict[str, Color] = {
    "off": OFF,
    "red": RED,
    "green": GREEN,
    "orange": ORANGE,
    "blue": BLUE,
    "purple": PURPLE,
    "cyan": CYAN,
    "gray": GRAY,
    "fatal_red": FATAL_RED,
    "dark_orange": DARK_ORANGE,
    "bright_white": BRIGHT_WHITE,
    "nice_purple": NICE_PURPLE,
}
_named_lock = threading.Lock()


def mix(data: bytes, color: Color) -> bytes:
    """Wraps data with the color-on sequence and the reset sequence."""
    return color + data + OFF


def unchecked_custom_color(sequence: bytes) -> Color:
    """
    Wraps an arbitrary byte sequence as a Color.

    No validation is done: a malformed sequence garbles terminal output
    but never raises.
    """
    return Color(sequence)


def register_color(name: str, sequence: bytes) -> Color:
    """Registers (or replaces) a named color and returns it."""
    color = unchecked_custom_color(sequence)
    with _named_lock:
        _named[name.lower()] = color
    return color


def color_by_name(name: str) -> Color:
    """
    Looks up a color by its case-insensitive name.

    Raises:
        KeyError: If no color is registered under that name.
    """
    with _named_lock:
        try:
            return _named[name.lower()]
        except KeyError:
            raise KeyError(f"Unknown color: {name}") from None
