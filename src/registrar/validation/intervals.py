"""Weekly time-slot overlap checks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import time


class TimeSlot(Protocol):
    """Anything with a day of week and a [start, end) time range."""

    day_of_week: str
    start_time: time
    end_time: time


def overlaps(day1: str, start1: time, end1: time, day2: str, start2: time, end2: time) -> bool:
    """Check whether two weekly slots conflict.

    Slots are half-open ``[start, end)``: ranges that only touch at an
    endpoint do not conflict, and slots on different days never do.
    """
    return day1 == day2 and start1 < end2 and start2 < end1


def schedules_overlap(first: TimeSlot, second: TimeSlot) -> bool:
    """Apply ``overlaps`` to two schedule-like objects."""
    return overlaps(
        first.day_of_week,
        first.start_time,
        first.end_time,
        second.day_of_week,
        second.start_time,
        second.end_time,
    )
