"""
Unit tests for the weekly schedule resolver.

Schedule facts used here (day 0 = Sunday):
- Sunday: MKT 2127 11:00-12:30, GED 1117 13:00-14:30, BIS 2122 16:00-17:30
- Monday: MAT 1110 11:00-12:30
- Tuesday: same as Sunday
- Wednesday: MAT 1110 11:00-12:30
- Thursday to Saturday: no classes
"""

import datetime
import unittest

from studyhub.models import STATUS_ACTIVE, STATUS_FREE, STATUS_UPCOMING
from studyhub.schedule import (
    course_codes,
    day_of_week,
    find_next_class_global,
    format_time,
    greeting,
    next_class_after,
    resolve_current_status,
    resolve_status_at,
    time_to_minutes,
)


def hm(h: int, m: int = 0) -> int:
    return h * 60 + m


class TestResolveStatus(unittest.TestCase):
    def test_active_class_sunday_morning(self) -> None:
        status = resolve_status_at(0, hm(11, 15))
        self.assertEqual(status.type, STATUS_ACTIVE)
        assert status.item is not None
        self.assertEqual(status.item.code, "MKT 2127")
        self.assertIsNone(status.minutes_until)

    def test_upcoming_class_before_first_lecture(self) -> None:
        status = resolve_status_at(0, hm(10))
        self.assertEqual(status.type, STATUS_UPCOMING)
        assert status.item is not None
        self.assertEqual(status.item.code, "MKT 2127")
        self.assertEqual(status.minutes_until, 60)

    def test_end_time_is_exclusive(self) -> None:
        status = resolve_status_at(0, hm(12, 30))
        self.assertEqual(status.type, STATUS_UPCOMING)
        assert status.item is not None
        self.assertEqual(status.item.code, "GED 1117")
        self.assertEqual(status.minutes_until, 30)

    def test_start_time_is_inclusive(self) -> None:
        status = resolve_status_at(0, hm(13))
        self.assertEqual(status.type, STATUS_ACTIVE)
        assert status.item is not None
        self.assertEqual(status.item.code, "GED 1117")

    def test_free_after_last_class(self) -> None:
        status = resolve_status_at(0, hm(18))
        self.assertEqual(status.type, STATUS_FREE)
        self.assertIsNone(status.item)

    def test_free_on_day_without_classes(self) -> None:
        self.assertEqual(resolve_status_at(5, hm(9)).type, STATUS_FREE)

    def test_from_timestamp(self) -> None:
        # 2026-10-18 is a Sunday
        status = resolve_current_status(datetime.datetime(2026, 10, 18, 11, 15))
        self.assertEqual(status.type, STATUS_ACTIVE)
        assert status.item is not None
        self.assertEqual(status.item.code, "MKT 2127")


class TestNextClass(unittest.TestCase):
    def test_later_today(self) -> None:
        nxt = find_next_class_global(0, hm(10))
        assert nxt is not None
        self.assertEqual(nxt.code, "MKT 2127")

    def test_tomorrow_first_class(self) -> None:
        nxt = find_next_class_global(0, hm(18))
        assert nxt is not None
        self.assertEqual(nxt.day, 1)
        self.assertEqual(nxt.code, "MAT 1110")

    def test_wraps_over_empty_days(self) -> None:
        # Wednesday afternoon -> nothing until Sunday
        nxt = find_next_class_global(3, hm(13))
        assert nxt is not None
        self.assertEqual(nxt.day, 0)
        self.assertEqual(nxt.code, "MKT 2127")

    def test_empty_schedule_returns_none(self) -> None:
        self.assertIsNone(find_next_class_global(0, hm(9), schedule=()))

    def test_after_active_class_same_day(self) -> None:
        status = resolve_status_at(0, hm(11, 15))
        nxt = next_class_after(status, 0, hm(11, 15))
        assert nxt is not None
        self.assertEqual(nxt.code, "GED 1117")

    def test_after_active_last_class_of_day(self) -> None:
        # Monday has a single class; the next one is Tuesday morning
        status = resolve_status_at(1, hm(11, 15))
        nxt = next_class_after(status, 1, hm(11, 15))
        assert nxt is not None
        self.assertEqual(nxt.day, 2)
        self.assertEqual(nxt.code, "MKT 2127")

    def test_after_upcoming_is_second_upcoming(self) -> None:
        status = resolve_status_at(0, hm(10))
        nxt = next_class_after(status, 0, hm(10))
        assert nxt is not None
        self.assertEqual(nxt.code, "GED 1117")

    def test_when_free(self) -> None:
        status = resolve_status_at(0, hm(18))
        nxt = next_class_after(status, 0, hm(18))
        assert nxt is not None
        self.assertEqual(nxt.code, "MAT 1110")


class TestHelpers(unittest.TestCase):
    def test_time_to_minutes(self) -> None:
        self.assertEqual(time_to_minutes("00:00"), 0)
        self.assertEqual(time_to_minutes("16:30"), 990)

    def test_time_to_minutes_rejects_garbage(self) -> None:
        for bad in ["", "1100", "25:00", "10:61", "ab:cd"]:
            with self.assertRaises(ValueError):
                time_to_minutes(bad)

    def test_format_time(self) -> None:
        self.assertEqual(format_time("13:05"), "1:05 PM")
        self.assertEqual(format_time("00:30"), "12:30 AM")
        self.assertEqual(format_time("12:00"), "12:00 PM")
        self.assertEqual(format_time(""), "")

    def test_day_of_week_starts_on_sunday(self) -> None:
        self.assertEqual(day_of_week(datetime.datetime(2026, 10, 18)), 0)
        self.assertEqual(day_of_week(datetime.datetime(2026, 10, 19)), 1)
        self.assertEqual(day_of_week(datetime.datetime(2026, 10, 24)), 6)

    def test_greeting(self) -> None:
        self.assertTrue(greeting("Ishana", 9).startswith("Good morning"))
        self.assertTrue(greeting("Ishana", 12).startswith("Good afternoon"))
        self.assertTrue(greeting("Ishana", 18).startswith("Good evening"))

    def test_course_codes_distinct_in_order(self) -> None:
        self.assertEqual(course_codes(), ["MKT 2127", "GED 1117", "BIS 2122", "MAT 1110"])


if __name__ == "__main__":
    unittest.main()
