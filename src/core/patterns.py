"""Pattern compilation and line matching logic (core domain)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

LOGGER = logging.getLogger(__name__)

# Failed-login signatures for common sshd, PAM and login(1) messages.
DEFAULT_PATTERNS: Tuple[str, ...] = (
    r"Failed password for .* from .* port \d+ ssh\d*",
    r"Failed password for invalid user .* from .* port \d+",
    r"authentication failure.*rhost=",
    r"FAILED LOGIN .* FOR .*",
    r"user unknown .* from",
)


@dataclass(frozen=True)
class RejectedPattern:
    """A configured pattern that failed to compile."""

    source: str
    error: str


@dataclass(frozen=True)
class PatternSet:
    """Ordered, immutable set of compiled patterns.

    Order is priority: the first pattern that matches a line wins.
    """

    patterns: Tuple[re.Pattern, ...]
    rejected: Tuple[RejectedPattern, ...] = ()

    def __len__(self) -> int:
        return len(self.patterns)

    def match(self, line: str) -> Optional[re.Pattern]:
        """Return the first pattern that matches anywhere in ``line``."""

        for pattern in self.patterns:
            if pattern.search(line):
                return pattern
        return None


def build_patterns(sources: Iterable[str]) -> PatternSet:
    """Compile pattern strings, dropping (and logging) the invalid ones."""

    compiled: List[re.Pattern] = []
    rejected: List[RejectedPattern] = []
    for source in sources:
        try:
            compiled.append(re.compile(source))
        except re.error as exc:
            LOGGER.warning("Invalid regex pattern: %s - %s", source, exc)
            rejected.append(RejectedPattern(source=source, error=str(exc)))

    if not compiled:
        LOGGER.warning("No valid patterns configured; lines will never match")

    return PatternSet(patterns=tuple(compiled), rejected=tuple(rejected))
