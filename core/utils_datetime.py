"""
DateTime utilities for reservation slot alignment and report time windows.

All values are naive local date-times: a restaurant's reservations and
operating hours share one wall clock.
"""
import math
from datetime import datetime, timedelta
from typing import Iterator, Tuple


def truncate_to_slot(dt: datetime, slot_minutes: int) -> datetime:
    """
    Truncate a datetime down to the slot boundary at or before it.

    Slots are counted from the top of the hour; seconds and microseconds
    are discarded.
    """
    slot_start = (dt.minute // slot_minutes) * slot_minutes
    base = dt.replace(minute=0, second=0, microsecond=0)
    return base + timedelta(minutes=slot_start)


def is_on_slot_boundary(dt: datetime, slot_minutes: int) -> bool:
    """Check whether a datetime already sits exactly on a slot boundary."""
    return dt.minute % slot_minutes == 0 and dt.second == 0 and dt.microsecond == 0


def align_start_to_nearest_slot(dt: datetime, slot_minutes: int) -> datetime:
    """
    Round a start time to the nearest slot boundary.

    Exactly half a slot rounds up. Example with 60-minute slots:
    12:17 -> 12:00, 12:30 -> 13:00, 12:45 -> 13:00.

    Args:
        dt: Requested start time
        slot_minutes: Slot length of the space

    Returns:
        Aligned start time
    """
    remainder = dt.minute % slot_minutes
    aligned = truncate_to_slot(dt, slot_minutes)

    if remainder >= slot_minutes / 2.0:
        return aligned + timedelta(minutes=slot_minutes)
    return aligned


def align_end_to_slot_ceiling(dt: datetime, slot_minutes: int) -> datetime:
    """
    Round an end time up to the next slot boundary.

    A time already on a boundary is returned unchanged. Example with
    60-minute slots: 14:10 -> 15:00, 14:00 -> 14:00.

    Args:
        dt: Requested end time
        slot_minutes: Slot length of the space

    Returns:
        Aligned end time
    """
    if is_on_slot_boundary(dt, slot_minutes):
        return dt
    return truncate_to_slot(dt, slot_minutes) + timedelta(minutes=slot_minutes)


def duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two datetimes."""
    return int((end - start).total_seconds() // 60)


def days_between(start: datetime, end: datetime) -> int:
    """Number of complete 24-hour days between two datetimes."""
    return (end - start).days


def truncate_to_hour(dt: datetime) -> datetime:
    """Drop minutes, seconds and microseconds."""
    return dt.replace(minute=0, second=0, microsecond=0)


def intervals_overlap(
    start: datetime,
    end: datetime,
    other_start: datetime,
    other_end: datetime,
) -> bool:
    """Half-open interval overlap: touching endpoints do not overlap."""
    return start < other_end and end > other_start


def iter_time_slots(
    start: datetime,
    end: datetime,
    slot_minutes: int,
) -> Iterator[Tuple[datetime, datetime]]:
    """
    Yield consecutive [slot_start, slot_end) windows covering [start, end).

    The first window begins at the top of the hour containing ``start``.
    The last window may extend past ``end``.
    """
    step = timedelta(minutes=slot_minutes)
    current = truncate_to_hour(start)
    while current < end:
        slot_end = current + step
        yield current, slot_end
        current = slot_end


def round_two(value: float) -> float:
    """Round half up to two decimal places."""
    # built-in round() is half-to-even
    return math.floor(value * 100 + 0.5) / 100.0
