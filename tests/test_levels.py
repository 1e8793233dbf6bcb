# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_fancylog

import pytest
from pydantic import ValidationError

from coreason_fancylog import colors
from coreason_fancylog.alignment import AlignmentRegistry
from coreason_fancylog.levels import (
    DEBUG,
    DEFAULT_STACK_TRACE_LEVELS,
    ERROR,
    FATAL,
    INFO,
    STANDARD_LEVELS,
    TRACE,
    WARN,
    Prefix,
    PrefixRegistry,
    default_prefixes,
    standard_prefixes,
)


def test_prefix_label() -> None:
    assert Prefix(level=INFO, color=colors.GREEN).label == b"[INFO]"


def test_prefix_is_frozen() -> None:
    prefix = Prefix(level=INFO, color=colors.GREEN)
    with pytest.raises(ValidationError):
        prefix.level = "OTHER"  # type: ignore[misc]


def test_standard_prefixes_defaults() -> None:
    by_level = {p.level: p for p in standard_prefixes()}
    assert list(by_level) == STANDARD_LEVELS
    assert by_level[FATAL].color == colors.FATAL_RED
    assert by_level[ERROR].color == colors.RED
    assert by_level[WARN].color == colors.ORANGE
    assert by_level[INFO].color == colors.GREEN
    assert by_level[DEBUG].color == colors.PURPLE
    assert by_level[TRACE].color == colors.CYAN
    traced = {level for level, p in by_level.items() if p.stack_trace}
    assert traced == DEFAULT_STACK_TRACE_LEVELS == {FATAL, DEBUG, TRACE}


def test_standard_prefixes_custom_table() -> None:
    traced = {p.level for p in standard_prefixes([FATAL]) if p.stack_trace}
    assert traced == {FATAL}


def test_registry_scans_standard_widths() -> None:
    alignment = AlignmentRegistry()
    PrefixRegistry(alignment=alignment)
    assert alignment.prefix_width == len("ERROR")


def test_registry_get_unknown_level() -> None:
    registry = PrefixRegistry(alignment=AlignmentRegistry())
    with pytest.raises(KeyError, match="Unknown level"):
        registry.get("NOPE")


def test_custom_level_widens_alignment() -> None:
    alignment = AlignmentRegistry()
    registry = PrefixRegistry(alignment=alignment)
    critical = Prefix(level="CRITICAL", color=colors.DARK_ORANGE, stack_trace=True)

    assert registry.register(critical) == critical
    assert "CRITICAL" in registry
    assert registry.get("CRITICAL") == critical
    assert alignment.prefix_width == len("CRITICAL")


def test_merge_without_overwrite_keeps_existing() -> None:
    registry = PrefixRegistry(alignment=AlignmentRegistry())
    original = registry.get(TRACE)
    replacement = Prefix(level=TRACE, color=colors.GRAY)
    added = Prefix(level="GET", color=colors.CYAN)

    effective = registry.merge({TRACE: replacement, "GET": added}, overwrite=False)

    assert effective[TRACE] == original
    assert effective["GET"] == added
    assert registry.get(TRACE) == original


def test_merge_with_overwrite_replaces() -> None:
    registry = PrefixRegistry(alignment=AlignmentRegistry())
    replacement = Prefix(level=INFO, color=colors.BLUE)
    registry.merge([replacement])
    assert registry.get(INFO).color == colors.BLUE


def test_set_stack_trace_levels() -> None:
    registry = PrefixRegistry(alignment=AlignmentRegistry())
    registry.set_stack_trace_levels([FATAL, ERROR])

    assert registry.stack_trace_levels == {FATAL, ERROR}
    traced = {level for level in registry.levels() if registry.get(level).stack_trace}
    assert traced == {FATAL, ERROR}


def test_registry_constructed_with_table() -> None:
    registry = PrefixRegistry(alignment=AlignmentRegistry(), stack_trace_levels=[])
    assert not any(registry.get(level).stack_trace for level in STANDARD_LEVELS)


def test_default_prefixes_is_shared() -> None:
    assert default_prefixes() is default_prefixes()
