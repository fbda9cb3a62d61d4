from __future__ import annotations

import pytest

from core.config import DedupConfig
from core.dedup import SeenEvents, compute_fingerprint


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_fingerprint_is_fixed_width_and_byte_exact() -> None:
    first = compute_fingerprint(b"Failed password for root")
    assert len(first) == 64
    assert first == compute_fingerprint(b"Failed password for root")
    assert first != compute_fingerprint(b"Failed password for root ")


def test_add_reports_duplicates() -> None:
    seen = SeenEvents()
    assert seen.add("a") is True
    assert seen.add("a") is False
    assert "a" in seen
    assert len(seen) == 1


def test_ttl_expires_old_entries() -> None:
    clock = FakeClock()
    seen = SeenEvents(ttl_seconds=60, clock=clock)
    seen.add("a")
    clock.now += 30
    seen.add("b")

    clock.now += 31
    assert "a" not in seen
    assert "b" in seen
    assert seen.add("a") is True


def test_max_entries_drops_oldest_first() -> None:
    seen = SeenEvents(max_entries=2)
    for key in ("a", "b", "c"):
        seen.add(key)

    assert "a" not in seen
    assert "b" in seen and "c" in seen


def test_unbounded_by_default() -> None:
    seen = SeenEvents.from_config(DedupConfig())
    for index in range(1000):
        seen.add(str(index))
    assert len(seen) == 1000
    assert seen.purge() == 0


@pytest.mark.parametrize("kwargs", [{"ttl_seconds": 0}, {"max_entries": -1}])
def test_invalid_limits_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SeenEvents(**kwargs)
