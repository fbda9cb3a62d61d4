"""Deduplication helpers (core domain)."""

from __future__ import annotations

import hashlib
import time
from collections import OrderedDict
from typing import Callable, Optional

from core.config import DedupConfig


def compute_fingerprint(raw_line: bytes) -> str:
    """Return the SHA-256 hex digest of the exact line bytes."""

    return hashlib.sha256(raw_line).hexdigest()


class SeenEvents:
    """In-memory set of fingerprints that already produced an alert.

    Entries are kept in insertion order, which is also first-seen order, so
    both eviction policies only ever drop from the front.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, float]" = OrderedDict()

    @classmethod
    def from_config(cls, config: DedupConfig) -> "SeenEvents":
        return cls(ttl_seconds=config.ttl_seconds, max_entries=config.max_entries)

    def __contains__(self, fingerprint: object) -> bool:
        self.purge()
        return fingerprint in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, fingerprint: str) -> bool:
        """Record a fingerprint. Returns False when it was already present."""

        self.purge()
        if fingerprint in self._entries:
            return False
        self._entries[fingerprint] = self._clock()
        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
        return True

    def purge(self) -> int:
        """Drop expired fingerprints and return how many were removed."""

        if self._ttl is None:
            return 0
        cutoff = self._clock() - self._ttl
        removed = 0
        while self._entries:
            oldest = next(iter(self._entries.values()))
            if oldest > cutoff:
                break
            self._entries.popitem(last=False)
            removed += 1
        return removed
