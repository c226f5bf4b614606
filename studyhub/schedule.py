"""
Weekly schedule resolver.

Days follow the Sunday = 0 convention used by the schedule data.
Same-day ordering compares the "HH:MM" start strings directly, which is
correct because every time in the dataset is zero padded 24h.
"""

from __future__ import annotations

import datetime
from typing import List, Optional, Sequence

from studyhub.constants import SCHEDULE
from studyhub.models import (
    STATUS_ACTIVE,
    STATUS_FREE,
    STATUS_UPCOMING,
    CurrentStatus,
    ScheduleItem,
)


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    parts = str(hhmm).strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def format_time(hhmm: str) -> str:
    if not hhmm:
        return ""
    minutes = time_to_minutes(hhmm)
    hour, minute = divmod(minutes, 60)
    ampm = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    return f"{hour12}:{minute:02d} {ampm}"


def greeting(name: str, hour: int) -> str:
    if hour < 12:
        return f"Good morning, {name}! ☀️"
    if hour < 18:
        return f"Good afternoon, {name}! ✨"
    return f"Good evening, {name}! 🌙"


def day_of_week(now: datetime.datetime) -> int:
    # datetime.weekday() is Monday = 0
    return now.isoweekday() % 7


def minute_of_day(now: datetime.datetime) -> int:
    return now.hour * 60 + now.minute


def classes_on(day: int, schedule: Sequence[ScheduleItem] = SCHEDULE) -> List[ScheduleItem]:
    return sorted((c for c in schedule if c.day == day), key=lambda c: c.start_time)


def course_codes(schedule: Sequence[ScheduleItem] = SCHEDULE) -> List[str]:
    """Distinct course codes, in schedule order."""
    seen: List[str] = []
    for c in schedule:
        if c.code not in seen:
            seen.append(c.code)
    return seen


def find_course(code: str, schedule: Sequence[ScheduleItem] = SCHEDULE) -> Optional[ScheduleItem]:
    for c in schedule:
        if c.code == code:
            return c
    return None


# -------------------------------
# Status resolution
# -------------------------------

def resolve_status_at(day: int, minute: int, schedule: Sequence[ScheduleItem] = SCHEDULE) -> CurrentStatus:
    for item in schedule:
        if item.day != day:
            continue
        if time_to_minutes(item.start_time) <= minute < time_to_minutes(item.end_time):
            return CurrentStatus(type=STATUS_ACTIVE, item=item)

    upcoming = [c for c in classes_on(day, schedule) if time_to_minutes(c.start_time) > minute]
    if upcoming:
        nxt = upcoming[0]
        return CurrentStatus(
            type=STATUS_UPCOMING,
            item=nxt,
            minutes_until=time_to_minutes(nxt.start_time) - minute,
        )

    return CurrentStatus(type=STATUS_FREE)


def resolve_current_status(
    now: Optional[datetime.datetime] = None,
    schedule: Sequence[ScheduleItem] = SCHEDULE,
) -> CurrentStatus:
    now = now or datetime.datetime.now()
    return resolve_status_at(day_of_week(now), minute_of_day(now), schedule)


def find_next_class_global(
    day: int,
    minute: int,
    schedule: Sequence[ScheduleItem] = SCHEDULE,
) -> Optional[ScheduleItem]:
    for offset in range(7):
        classes = classes_on((day + offset) % 7, schedule)
        if not classes:
            continue
        if offset == 0:
            for c in classes:
                if time_to_minutes(c.start_time) > minute:
                    return c
        else:
            return classes[0]
    return None


def next_class_after(
    status: CurrentStatus,
    day: int,
    minute: int,
    schedule: Sequence[ScheduleItem] = SCHEDULE,
) -> Optional[ScheduleItem]:
    """
    The class shown as "next engagement" next to the current status.
    """
    today = classes_on(day, schedule)

    if status.type == STATUS_ACTIVE and status.item is not None:
        active_end = time_to_minutes(status.item.end_time)
        after = [c for c in today if time_to_minutes(c.start_time) >= active_end]
        if after:
            return after[0]

    elif status.type == STATUS_UPCOMING:
        upcoming = [c for c in today if time_to_minutes(c.start_time) > minute]
        if len(upcoming) > 1:
            return upcoming[1]

    return find_next_class_global(day, minute, schedule)
