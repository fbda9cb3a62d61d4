"""Validation helpers for config editing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


@dataclass
class PatternInfo:
    normalized: str | None
    error: str | None = None


def parse_pattern(raw_value: str) -> PatternInfo:
    """Check that a pattern is non-empty and compiles with Python's re."""

    if not raw_value.strip():
        return PatternInfo(None, "pattern is required")
    try:
        re.compile(raw_value)
    except re.error as exc:
        return PatternInfo(None, f"invalid regex: {exc}")
    return PatternInfo(raw_value)


def parse_positive_number(raw_value: str) -> tuple[Optional[float], Optional[str]]:
    """Parse a strictly positive number (used for the poll interval)."""

    stripped = raw_value.strip()
    if not stripped:
        return None, None
    try:
        value = float(stripped)
    except ValueError:
        return None, "Enter a number"
    if value <= 0:
        return None, "Must be greater than zero"
    if value.is_integer():
        return int(value), None
    return value, None


def parse_log_path(raw_value: str) -> tuple[Optional[str], Optional[str]]:
    stripped = raw_value.strip()
    if not stripped:
        return None, "log_path is required"
    if not stripped.startswith("/"):
        return None, "log_path must be absolute"
    return stripped, None
