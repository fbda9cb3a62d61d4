"""Polling tail monitor for append-only log files.

The monitor is the only owner of the read cursor and the seen-event set:
1) Every poll reopens the file and stats it
2) A shrunken file (or, optionally, a replaced one) resets the cursor to zero
3) Bytes appended since the cursor are split into lines
4) Each line is matched against the pattern set, first match wins
5) Matching lines are deduplicated by content digest and handed to the alert
   callback, which is awaited before the next line is looked at
6) The cursor moves to the observed size, even when the read failed halfway

Per-cycle I/O failures are logged and retried on the next poll; only the
caller's stop event ends the loop.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple, Union

from core.dedup import SeenEvents, compute_fingerprint
from core.models import MonitorStatus
from core.patterns import PatternSet, build_patterns

LOGGER = logging.getLogger(__name__)

AlertCallback = Callable[[str], Awaitable[None]]

_READ_CHUNK = 64 * 1024


class OpenError(OSError):
    """The target file could not be opened when the session started."""


def split_lines(data: bytes) -> List[bytes]:
    """Split raw bytes into lines, keeping a trailing fragment as a line."""

    lines = data.split(b"\n")
    if lines and not lines[-1]:
        lines.pop()
    return [line.rstrip(b"\r") for line in lines]


class TailMonitor:
    """Watch one file for newly appended lines that match a pattern set."""

    def __init__(
        self,
        path: str,
        patterns: Union[PatternSet, Iterable[str]],
        poll_interval: float,
        on_match: AlertCallback,
        seen: Optional[SeenEvents] = None,
        detect_replacement: bool = False,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval!r}")
        self._path = path
        self._patterns = patterns if isinstance(patterns, PatternSet) else build_patterns(patterns)
        self._poll_interval = poll_interval
        self._on_match = on_match
        self._seen = seen if seen is not None else SeenEvents()
        self._detect_replacement = detect_replacement
        self._cursor: Optional[int] = None
        self._identity: Optional[Tuple[int, int]] = None
        self._running = False
        self._alerts_sent = 0

    @property
    def cursor(self) -> Optional[int]:
        return self._cursor

    @property
    def patterns(self) -> PatternSet:
        return self._patterns

    def start(self) -> int:
        """Position the cursor at the current end of file.

        Raises OpenError when the file cannot be opened or stat'ed; the
        session cannot begin without a baseline.
        """

        try:
            with open(self._path, "rb") as handle:
                stat = os.fstat(handle.fileno())
        except OSError as exc:
            raise OpenError(f"Failed to open {self._path}: {exc}") from exc

        self._cursor = stat.st_size
        self._identity = (stat.st_dev, stat.st_ino)
        LOGGER.info("Tailing %s from offset %s with %s pattern(s)", self._path, self._cursor, len(self._patterns))
        return self._cursor

    async def run(self, stop: asyncio.Event) -> None:
        """Poll until ``stop`` is set. Returns once the loop has exited."""

        if self._cursor is None:
            self.start()

        self._running = True
        LOGGER.info("Starting log monitoring at %s", self._path)
        try:
            while not stop.is_set():
                await self.poll_once()
                if await self._sleep(stop):
                    break
        finally:
            self._running = False
            LOGGER.info("Log monitoring stopped at %s (alerts=%s)", self._path, self._alerts_sent)

    async def poll_once(self) -> int:
        """Run one poll cycle and return the number of new matches dispatched."""

        if self._cursor is None:
            raise RuntimeError("start() must be called before polling")

        alerts = 0
        for raw_line in self._read_new_lines():
            if await self._handle_line(raw_line):
                alerts += 1
        return alerts

    def status(self) -> MonitorStatus:
        """Return an immutable snapshot of the session state."""

        return MonitorStatus(
            log_path=self._path,
            running=self._running,
            cursor=self._cursor,
            patterns=len(self._patterns),
            seen_events=len(self._seen),
            alerts_sent=self._alerts_sent,
            poll_interval=self._poll_interval,
        )

    def _read_new_lines(self) -> List[bytes]:
        try:
            handle = open(self._path, "rb")
        except OSError as exc:
            LOGGER.warning("Failed to open %s: %s", self._path, exc)
            return []

        with handle:
            try:
                stat = os.fstat(handle.fileno())
            except OSError as exc:
                LOGGER.warning("Failed to get file info for %s: %s", self._path, exc)
                return []

            current_size = stat.st_size
            identity = (stat.st_dev, stat.st_ino)
            if current_size < self._cursor:
                LOGGER.info("%s shrank from %s to %s bytes, rescanning from start", self._path, self._cursor, current_size)
                self._cursor = 0
            elif self._detect_replacement and identity != self._identity:
                LOGGER.info("%s was replaced, rescanning from start", self._path)
                self._cursor = 0
            self._identity = identity

            if current_size <= self._cursor:
                return []

            try:
                handle.seek(self._cursor)
            except OSError as exc:
                LOGGER.warning("Failed to seek %s to %s: %s", self._path, self._cursor, exc)
                return []

            chunks: List[bytes] = []
            remaining = current_size - self._cursor
            try:
                while remaining > 0:
                    chunk = handle.read(min(remaining, _READ_CHUNK))
                    if not chunk:
                        break
                    chunks.append(chunk)
                    remaining -= len(chunk)
            except OSError as exc:
                LOGGER.warning("Read error on %s: %s", self._path, exc)

            # Unreadable bytes are skipped, never retried.
            self._cursor = current_size

        return split_lines(b"".join(chunks))

    async def _handle_line(self, raw_line: bytes) -> bool:
        line = raw_line.decode("utf-8", errors="replace")
        if self._patterns.match(line) is None:
            return False

        if not self._seen.add(compute_fingerprint(raw_line)):
            LOGGER.debug("Dedup skip (same line): %s", line)
            return False

        LOGGER.info("Failed login detected: %s", line)
        try:
            await self._on_match(line)
        except Exception:
            LOGGER.exception("Alert handling failed for line: %s", line)
        else:
            self._alerts_sent += 1
        return True

    async def _sleep(self, stop: asyncio.Event) -> bool:
        """Wait one poll interval. Returns True when stop was requested."""

        try:
            await asyncio.wait_for(stop.wait(), timeout=self._poll_interval)
        except asyncio.TimeoutError:
            return False
        return True
