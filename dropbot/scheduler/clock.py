"""
Module: dropbot/scheduler/clock.py

Time source used by the subscription registry and poller.
"""
from datetime import datetime, UTC
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock returning timezone-aware UTC datetimes."""

    def now(self) -> datetime:
        return datetime.now(UTC)
