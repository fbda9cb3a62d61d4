"""Shared constants for the Textual UI."""

from __future__ import annotations

import os
from pathlib import Path

ALERT_RED = "#E5484D"
PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_PATH = Path(os.getenv("LOGINWATCH_CONFIG") or PROJECT_ROOT / "config.json")
