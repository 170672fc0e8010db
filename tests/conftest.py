from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class ManualClock:
    """Clock that only moves when a test tells it to."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current

    def at(self, **kwargs) -> datetime:
        """Absolute time relative to the clock's start, T0."""
        return T0 + timedelta(**kwargs)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    (tmp_path / "a.png").write_bytes(b"A")
    (tmp_path / "b.gif").write_bytes(b"B")
    (tmp_path / "c.txt").write_bytes(b"C")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "hidden.txt").write_bytes(b"H")
    return tmp_path
