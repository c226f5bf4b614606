"""
Attendance counting and projection.

The attendance map is keyed "<code>-YYYY-MM-DD" for logged days and
"<code>-MANUAL-<epoch ms>" for manual adjustments. A missing key means the
day was never recorded.
"""

from __future__ import annotations

import datetime
import math
import time
from typing import Dict, List, Optional

from studyhub.constants import ATTENDANCE_THRESHOLD, MANUAL_MARKER, SKIP_MARGIN_CAP


def _percentage(present: int, total: int) -> int:
    if total == 0:
        return 0
    # half-up, round() would be banker's rounding
    return int(math.floor(present / total * 100 + 0.5))


def course_attendance_details(attendance: Dict[str, bool], code: str) -> Dict[str, int]:
    values = [v for k, v in attendance.items() if k.startswith(code)]
    total = len(values)
    present = sum(1 for v in values if v is True)
    return {
        "total": total,
        "present": present,
        "absent": total - present,
        "percentage": _percentage(present, total),
    }


def total_attendance_stats(attendance: Dict[str, bool]) -> Dict[str, int]:
    values = list(attendance.values())
    return {
        "total": len(values),
        "present": sum(1 for v in values if v is True),
        "absent": sum(1 for v in values if v is False),
    }


def safe_skip_margin(attendance: Dict[str, bool], code: str) -> int:
    """
    How many more classes of `code` can be missed while staying at or above
    the attendance threshold, assuming nothing else changes.
    """
    details = course_attendance_details(attendance, code)
    present = details["present"]
    total = details["total"]
    if total == 0:
        return 0

    skips = 0
    while skips < SKIP_MARGIN_CAP and present / (total + skips + 1) >= ATTENDANCE_THRESHOLD:
        skips += 1
    return skips


def is_low(attendance: Dict[str, bool], code: str) -> bool:
    return course_attendance_details(attendance, code)["percentage"] < ATTENDANCE_THRESHOLD * 100


# -------------------------------
# Mutations (return a new map)
# -------------------------------

def day_key(code: str, day: datetime.date) -> str:
    return f"{code}-{day.isoformat()}"


def mark_attendance(attendance: Dict[str, bool], code: str, present: bool, day: datetime.date) -> Dict[str, bool]:
    """
    Log present/absent for one day. Logging the value already recorded
    clears the day instead.
    """
    out = dict(attendance)
    key = day_key(code, day)
    if out.get(key) is present:
        del out[key]
    else:
        out[key] = bool(present)
    return out


def adjust_attendance_manual(
    attendance: Dict[str, bool],
    code: str,
    increment: bool,
    is_present: bool,
    now_ms: Optional[int] = None,
) -> Dict[str, bool]:
    out = dict(attendance)

    if increment:
        stamp = int(now_ms if now_ms is not None else time.time() * 1000)
        key = f"{code}-{MANUAL_MARKER}-{stamp}"
        # two clicks in the same millisecond must not overwrite each other
        while key in out:
            stamp += 1
            key = f"{code}-{MANUAL_MARKER}-{stamp}"
        out[key] = bool(is_present)
        return out

    prefix = f"{code}-{MANUAL_MARKER}"
    candidates = sorted(
        (k for k, v in out.items() if k.startswith(prefix) and v is is_present),
        reverse=True,
    )
    if candidates:
        del out[candidates[0]]
    return out


def date_window(center: datetime.date, days: int = 7) -> List[datetime.date]:
    return [center + datetime.timedelta(days=i) for i in range(-days, days + 1)]
