import shutil
import tempfile
import unittest
from pathlib import Path

import yaml

from planner.core.app import PlannerApp
from planner.core.errors import ValidationError
from planner.core.seed import apply_seed, load_seed_file

SEED = {
    "courses": [
        {"name": "Data Structures", "code": "CS201", "schedule": "MWF 10:00-10:50 AM", "credits": 4},
        {"name": "Linear Algebra", "code": "MATH220", "schedule": "TTh 2:00-3:15 PM"},
    ],
    "assignments": [
        {"title": "Linked list lab", "course_code": "CS201", "due_date": "2026-10-21T23:59:00", "priority": "high"},
    ],
    "grades": [
        {"course_code": "MATH220", "category": "Quizzes", "weight": 100, "score": 18, "total": 20},
    ],
    "study_sessions": [
        {"course_code": "CS201", "date": "2026-10-16T19:30:00", "duration": 50},
    ],
}


class SeedTests(unittest.TestCase):
    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.tmp, True)
        self.seed_file = self.tmp / "seed.yaml"
        self.seed_file.write_text(yaml.dump(SEED))

    def make_app(self, config):
        config_file = self.tmp / "config.yaml"
        config_file.write_text(yaml.dump(config))
        app = PlannerApp(config_path=str(config_file), db_url="sqlite://", watch_config=False)
        self.addCleanup(app.close)
        return app

    def test_apply_seed_resolves_course_codes(self):
        app = self.make_app({})
        self.assertTrue(app.store.is_empty())
        created = apply_seed(app.store, load_seed_file(self.seed_file))
        self.assertEqual(created, {"courses": 2, "assignments": 1, "grades": 1, "study_sessions": 1})

        codes = {c.code: c.id for c in app.store.courses.list()}
        self.assertEqual(app.store.assignments.list()[0].course_id, codes["CS201"])
        self.assertEqual(app.store.grades.list()[0].course_id, codes["MATH220"])

    def test_unknown_course_code(self):
        app = self.make_app({})
        with self.assertRaises(ValidationError):
            apply_seed(app.store, {"grades": [{"course_code": "NOPE", "category": "Exams", "weight": 1, "score": 1}]})

    def test_failed_seed_writes_nothing(self):
        app = self.make_app({})
        bad = {
            "courses": [{"name": "A", "code": "A1"}],
            "grades": [{"course_code": "NOPE", "category": "Exams", "weight": 1, "score": 1}],
        }
        with self.assertRaises(ValidationError):
            apply_seed(app.store, bad)
        self.assertTrue(app.store.is_empty())

        bad["grades"] = [{"course_code": "A1", "category": "Exams", "weight": "inf", "score": 1}]
        with self.assertRaises(ValidationError):
            apply_seed(app.store, bad)
        self.assertTrue(app.store.is_empty())

        created = apply_seed(app.store, load_seed_file(self.seed_file))
        self.assertEqual(created["courses"], 2)

    def test_seed_from_config_only_fills_an_empty_store(self):
        app = self.make_app({"seed": str(self.seed_file)})
        self.assertEqual(len(app.store.courses.list()), 2)
        app._load_seed()
        self.assertEqual(len(app.store.courses.list()), 2)

    def test_seed_file_must_be_a_mapping(self):
        bad = self.tmp / "bad.yaml"
        bad.write_text("- one\n- two\n")
        with self.assertRaises(ValidationError):
            load_seed_file(bad)
