import unittest
from datetime import date, datetime, timedelta

from planner.analytics.progress import (
    average_session_length,
    completion_rate,
    recent_sessions,
    status_counts,
    study_time_by_course,
    sum_duration,
    total_study_minutes,
    weekly_study_minutes,
)
from planner.analytics.streak import streak
from planner.core.entities import Assignment, Course, StudySession

NOW = datetime(2026, 10, 18, 20, 0)


def session(id, when, duration=30, course_id=1):
    return StudySession(id=id, course_id=course_id, date=when, duration=duration)


class CompletionTests(unittest.TestCase):
    def test_completion_rate(self):
        self.assertEqual(completion_rate([]), 0)
        items = [Assignment(id=1, status="completed"), Assignment(id=2, status="pending")]
        self.assertEqual(completion_rate(items), 50)

    def test_completion_rate_rounds_half_up(self):
        items = [Assignment(id=i, status="completed" if i < 1 else "pending") for i in range(8)]
        # 12.5% -> 13
        self.assertEqual(completion_rate(items), 13)

    def test_status_counts(self):
        items = [Assignment(id=1, status="completed"), Assignment(id=2, status="pending")]
        self.assertEqual(status_counts(items), {"pending": 1, "in-progress": 0, "completed": 1})


class StudyTimeTests(unittest.TestCase):
    def test_sums(self):
        sessions = [
            session(1, NOW - timedelta(days=1), 45),
            session(2, NOW - timedelta(days=8), 60),
            session(3, NOW - timedelta(hours=2), 0),
            session(4, NOW - timedelta(hours=1), -15),
        ]
        self.assertEqual(total_study_minutes(sessions), 105)
        self.assertEqual(weekly_study_minutes(sessions, NOW), 45)
        self.assertEqual(sum_duration(sessions, lambda s: s.id == 2), 60)
        self.assertEqual(sum_duration([]), 0)

    def test_weekly_cutoff_is_exclusive(self):
        sessions = [session(1, NOW - timedelta(days=7), 30)]
        self.assertEqual(weekly_study_minutes(sessions, NOW), 0)

    def test_average_session_length(self):
        self.assertEqual(average_session_length([]), 0)
        sessions = [session(1, NOW, 25), session(2, NOW, 50)]
        self.assertEqual(average_session_length(sessions), 38)

    def test_by_course_skips_orphans(self):
        courses = [Course(id=1, name="Algebra"), Course(id=2, name="History")]
        sessions = [session(1, NOW, 25), session(2, NOW, 50, course_id=1), session(3, NOW, 40, course_id=9)]
        rows = study_time_by_course(courses, sessions)
        self.assertEqual(rows, [
            {"course_id": 1, "minutes": 75, "sessions": 2},
            {"course_id": 2, "minutes": 0, "sessions": 0},
        ])

    def test_recent_sessions(self):
        sessions = [session(i, NOW - timedelta(days=i)) for i in range(6)]
        self.assertEqual([s.id for s in recent_sessions(sessions)], [0, 1, 2, 3])
        self.assertEqual([s.id for s in recent_sessions(sessions, limit=2)], [0, 1])


class StreakTests(unittest.TestCase):
    def days_ago(self, *offsets):
        return [session(i, NOW - timedelta(days=offset)) for i, offset in enumerate(offsets)]

    def test_no_session_today(self):
        self.assertEqual(streak(self.days_ago(1, 2, 3), NOW), 3)

    def test_through_today(self):
        self.assertEqual(streak(self.days_ago(0, 1, 2), NOW), 3)

    def test_gap_stops_the_scan(self):
        self.assertEqual(streak(self.days_ago(0, 1, 3), NOW), 2)

    def test_capped_at_lookback(self):
        self.assertEqual(streak(self.days_ago(*range(31)), NOW), 30)
        self.assertEqual(streak(self.days_ago(*range(31)), NOW, lookback_days=10), 10)

    def test_empty(self):
        self.assertEqual(streak([], NOW), 0)

    def test_day_bounds_are_calendar_days(self):
        today = NOW.date()
        sessions = [
            session(1, datetime.combine(today - timedelta(days=1), datetime.min.time())),
            session(2, datetime.combine(today - timedelta(days=2), datetime.max.time())),
        ]
        self.assertEqual(streak(sessions, today), 2)
        self.assertEqual(streak(sessions, date(2026, 10, 18)), 2)
