import unittest
from datetime import datetime, time, timedelta, timezone

from planner.analytics.schedule import Weekday
from planner.core.db import Database
from planner.core.errors import NotFoundError, ValidationError
from planner.core.planner_store import PlannerStore
from planner.core.plugin_manager import PluginManager


def make_store():
    manager = PluginManager()
    database = Database("sqlite://")
    database.create_all()
    return PlannerStore(database, manager.stores)


class CourseStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = make_store()
        self.addCleanup(self.store.database.dispose)

    def test_create_assigns_ids_and_parses_schedule(self):
        course = self.store.courses.create({"name": "Calculus", "code": "MATH101", "schedule": "TTh 2:00-3:15 PM"})
        self.assertEqual(course.id, 1)
        self.assertEqual(course.color, "blue")
        self.assertEqual(course.credits, 3)
        self.assertEqual(course.meeting_days, frozenset({Weekday.TUE, Weekday.THU}))
        self.assertEqual(course.start_time, time(14, 0))
        self.assertEqual(course.end_time, time(15, 15))
        self.assertEqual(self.store.courses.get(course.id), course)

    def test_partial_update_keeps_other_fields(self):
        course = self.store.courses.create({"name": "Calculus", "professor": "Dr. Lee", "schedule": "MWF 9:00-9:50 AM"})
        updated = self.store.courses.update(course.id, {"credits": 4})
        self.assertEqual(updated.credits, 4)
        self.assertEqual(updated.professor, "Dr. Lee")
        self.assertEqual(updated.meeting_days, course.meeting_days)

        moved = self.store.courses.update(course.id, {"schedule": "Sa 10:00-12:00 PM"})
        self.assertEqual(moved.meeting_days, frozenset({Weekday.SAT}))

    def test_ids_are_not_reused(self):
        first = self.store.courses.create({"name": "A"})
        second = self.store.courses.create({"name": "B"})
        self.assertEqual(self.store.courses.delete(second.id), second.id)
        third = self.store.courses.create({"name": "C"})
        self.assertGreater(third.id, second.id)
        self.assertEqual([c.id for c in self.store.courses.list()], [first.id, third.id])

    def test_missing_id(self):
        with self.assertRaises(NotFoundError):
            self.store.courses.get(42)
        with self.assertRaises(NotFoundError):
            self.store.courses.update(42, {"name": "X"})
        with self.assertRaises(NotFoundError):
            self.store.courses.delete(42)

    def test_validation(self):
        with self.assertRaises(ValidationError):
            self.store.courses.create({"code": "NONAME"})
        with self.assertRaises(ValidationError):
            self.store.courses.create({"name": "A", "credits": 0})
        with self.assertRaises(ValidationError):
            self.store.courses.create({"name": "A", "color": "orange"})
        with self.assertRaises(ValidationError) as ctx:
            self.store.courses.create({"name": "A", "room": "204"})
        self.assertEqual(ctx.exception.field, "room")
        self.assertEqual(self.store.courses.list(), [])


class CourseScopedStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = make_store()
        self.addCleanup(self.store.database.dispose)
        self.course = self.store.courses.create({"name": "Physics"})

    def test_non_finite_numbers_are_rejected(self):
        for bad in ("inf", float("nan"), "-inf"):
            with self.assertRaises(ValidationError) as ctx:
                self.store.grades.create({"course_id": self.course.id, "category": "Exams", "weight": bad, "score": 0})
            self.assertEqual(ctx.exception.field, "weight")
        with self.assertRaises(ValidationError):
            self.store.study_sessions.create({"course_id": self.course.id, "date": datetime.now(), "duration": "inf"})
        with self.assertRaises(ValidationError):
            self.store.courses.update(self.course.id, {"credits": float("inf")})
        self.assertEqual(self.store.grades.list(), [])

    def test_foreign_key_is_checked(self):
        due = datetime(2026, 10, 20, 23, 59)
        with self.assertRaises(ValidationError) as ctx:
            self.store.assignments.create({"title": "Lab", "course_id": 99, "due_date": due})
        self.assertEqual(ctx.exception.field, "course_id")
        with self.assertRaises(ValidationError):
            self.store.grades.create({"course_id": 99, "category": "Exams", "weight": 50, "score": 40})
        with self.assertRaises(ValidationError):
            self.store.study_sessions.create({"course_id": 99, "date": due, "duration": 30})

    def test_assignment_defaults_and_status(self):
        a = self.store.assignments.create({
            "title": "Lab report", "course_id": self.course.id, "due_date": "2026-10-20T23:59:00",
        })
        self.assertEqual(a.priority, "medium")
        self.assertEqual(a.status, "pending")
        self.assertEqual(a.due_date, datetime(2026, 10, 20, 23, 59))
        self.assertEqual(self.store.assignments.set_status(a.id, "completed").status, "completed")
        with self.assertRaises(ValidationError):
            self.store.assignments.set_status(a.id, "done")
        with self.assertRaises(ValidationError):
            self.store.assignments.update(a.id, {"grade": 120})

    def test_aware_dates_become_naive(self):
        aware = datetime(2026, 10, 20, 12, 0, tzinfo=timezone.utc)
        a = self.store.assignments.create({"title": "Quiz", "course_id": self.course.id, "due_date": aware})
        self.assertIsNone(a.due_date.tzinfo)
        self.assertEqual(a.due_date, aware.astimezone().replace(tzinfo=None))

    def test_grade_rules(self):
        g = self.store.grades.create({"course_id": self.course.id, "category": "Exams", "weight": 40, "score": 86})
        self.assertEqual(g.total, 100)
        with self.assertRaises(ValidationError):
            self.store.grades.create({"course_id": self.course.id, "category": "Exams", "weight": 40, "score": 8, "total": 0})
        with self.assertRaises(ValidationError):
            self.store.grades.update(g.id, {"weight": -1})
        self.assertEqual(self.store.grades.for_course(self.course.id), [g])

    def test_study_session_rules(self):
        with self.assertRaises(ValidationError):
            self.store.study_sessions.create({"course_id": self.course.id, "date": datetime.now(), "duration": 0})
        done = datetime(2026, 10, 18, 9, 30)
        s = self.store.study_sessions.log_session(self.course.id, 25, completed_at=done)
        self.assertEqual(s.duration, 25)
        self.assertEqual(s.date, done)
        self.assertEqual(s.notes, "25 minute study session")

    def test_deleting_a_course_leaves_orphans(self):
        due = datetime(2026, 10, 20, 23, 59)
        a = self.store.assignments.create({"title": "Lab", "course_id": self.course.id, "due_date": due})
        self.store.courses.delete(self.course.id)
        self.assertEqual(self.store.assignments.get(a.id).course_id, self.course.id)
        # Orphans can still be edited as long as course_id is left alone
        self.assertEqual(self.store.assignments.update(a.id, {"title": "Lab 2"}).title, "Lab 2")
        with self.assertRaises(ValidationError):
            self.store.assignments.update(a.id, {"course_id": self.course.id})

    def test_snapshot(self):
        self.assertFalse(self.store.is_empty())
        self.store.grades.create({"course_id": self.course.id, "category": "Quizzes", "weight": 10, "score": 9, "total": 10})
        snapshot = self.store.snapshot()
        self.assertEqual([c.name for c in snapshot.courses], ["Physics"])
        self.assertEqual(len(snapshot.grades), 1)
        self.assertEqual(snapshot.assignments, [])
        self.assertEqual(snapshot.study_sessions, [])

    def test_empty_store(self):
        store = make_store()
        self.addCleanup(store.database.dispose)
        self.assertTrue(store.is_empty())


class PlannerStoreTests(unittest.TestCase):
    def test_missing_kind_is_rejected(self):
        database = Database("sqlite://")
        self.addCleanup(database.dispose)
        with self.assertRaises(RuntimeError):
            PlannerStore(database, {})
