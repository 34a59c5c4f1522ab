import unittest

from planner.analytics.grades import (
    average_grade,
    bucket_gpa,
    bucketed_gpa,
    course_grade,
    course_grade_report,
    has_grades,
    linear_course_gpa,
    linear_gpa,
    round_half_up,
)
from planner.core.entities import Course, Grade


def grade(course_id, score, total, weight, category="Exams"):
    return Grade(id=None, course_id=course_id, category=category, weight=weight, score=score, total=total)


class CourseGradeTests(unittest.TestCase):
    def test_weighted_percentage(self):
        grades = [grade(1, 90, 100, 60), grade(1, 80, 100, 40)]
        self.assertEqual(course_grade(1, grades), 86)

    def test_weights_are_renormalized(self):
        grades = [grade(1, 9, 10, 30), grade(1, 16, 20, 20)]
        # (0.9*30 + 0.8*20) / 50 = 0.86
        self.assertEqual(course_grade(1, grades), 86)

    def test_zero_total_weight_is_zero(self):
        grades = [grade(1, 90, 100, 0), grade(1, 50, 100, 0)]
        self.assertEqual(course_grade(1, grades), 0)

    def test_no_grades_is_zero(self):
        self.assertEqual(course_grade(1, []), 0)
        self.assertEqual(course_grade(1, [grade(2, 100, 100, 100)]), 0)
        self.assertFalse(has_grades(1, [grade(2, 100, 100, 100)]))
        self.assertTrue(has_grades(2, [grade(2, 100, 100, 100)]))

    def test_non_positive_total_counts_as_zero_achievement(self):
        grades = [grade(1, 10, 0, 50), grade(1, 100, 100, 50)]
        self.assertEqual(course_grade(1, grades), 50)

    def test_rounds_half_up(self):
        self.assertEqual(round_half_up(86.5), 87)
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(2.49), 2)


class GpaTests(unittest.TestCase):
    def test_bucket_breakpoints(self):
        self.assertEqual(bucket_gpa(97), 4.0)
        self.assertEqual(bucket_gpa(96), 3.7)
        self.assertEqual(bucket_gpa(93), 3.7)
        self.assertEqual(bucket_gpa(90), 3.3)
        self.assertEqual(bucket_gpa(86), 2.7)
        self.assertEqual(bucket_gpa(67), 1.0)
        self.assertEqual(bucket_gpa(66), 0.0)
        self.assertEqual(bucket_gpa(0), 0.0)

    def test_no_courses_has_no_gpa(self):
        self.assertIsNone(linear_gpa([], []))
        self.assertIsNone(bucketed_gpa([], []))
        self.assertEqual(average_grade([], []), 0)

    def test_linear_and_bucketed_differ(self):
        courses = [Course(id=1, name="Algebra")]
        grades = [grade(1, 90, 100, 60), grade(1, 80, 100, 40)]
        # 4 * (0.9*0.6 + 0.8*0.4) = 3.44
        self.assertEqual(linear_gpa(courses, grades), 3.44)
        self.assertEqual(bucketed_gpa(courses, grades), 2.7)

    def test_linear_course_gpa_uses_raw_weights(self):
        grades = [grade(1, 100, 100, 50)]
        self.assertAlmostEqual(linear_course_gpa(1, grades), 2.0)
        self.assertEqual(linear_course_gpa(2, grades), 0.0)

    def test_ungraded_courses_pull_the_average_down(self):
        courses = [Course(id=1, name="Algebra"), Course(id=2, name="History")]
        grades = [grade(1, 97, 100, 100)]
        self.assertEqual(bucketed_gpa(courses, grades), 2.0)
        self.assertEqual(linear_gpa(courses, grades), 1.94)
        self.assertEqual(average_grade(courses, grades), 49)

    def test_orphan_grades_are_ignored(self):
        courses = [Course(id=1, name="Algebra")]
        grades = [grade(1, 80, 100, 100), grade(99, 10, 100, 100)]
        self.assertEqual(average_grade(courses, grades), 80)

    def test_course_grade_report(self):
        courses = [Course(id=1, name="Algebra"), Course(id=2, name="History")]
        grades = [grade(1, 93, 100, 100)]
        report = course_grade_report(courses, grades)
        self.assertEqual(report[0], {
            "course_id": 1, "percentage": 93, "gpa_points": 3.7, "graded": True, "component_count": 1,
        })
        self.assertEqual(report[1]["graded"], False)
        self.assertEqual(report[1]["gpa_points"], 0.0)

    def test_functions_do_not_mutate_input(self):
        grades = [grade(1, 90, 100, 60), grade(1, 80, 100, 40)]
        before = list(grades)
        first = course_grade(1, grades)
        self.assertEqual(course_grade(1, grades), first)
        self.assertEqual(grades, before)


class MalformedNumberTests(unittest.TestCase):
    def test_non_finite_components_contribute_nothing(self):
        grades = [
            grade(1, 90, 100, float("inf")),
            grade(1, float("nan"), 100, 50),
            grade(1, 80, float("inf"), 25),
            grade(1, 100, 100, 25),
        ]
        # only the last two weights count; the inf total gives zero achievement
        self.assertEqual(course_grade(1, grades), 25)
        self.assertEqual(average_grade([Course(id=1, name="Algebra")], grades), 25)
        self.assertEqual(linear_course_gpa(1, [grade(1, 90, 100, float("inf"))]), 0.0)

    def test_only_non_finite_weights_is_zero(self):
        grades = [grade(1, 90, 100, float("inf")), grade(1, 90, 100, float("nan"))]
        self.assertEqual(course_grade(1, grades), 0)
        self.assertEqual(bucketed_gpa([Course(id=1, name="Algebra")], grades), 0.0)


class GpaRoundingTests(unittest.TestCase):
    def test_bucketed_gpa_ties_round_up(self):
        percentages = [97, 97, 97, 97, 87, 87, 87, 0]
        courses = [Course(id=i, name=f"C{i}") for i in range(len(percentages))]
        grades = [grade(i, p, 100, 100) for i, p in enumerate(percentages)]
        # (4 * 4.0 + 3 * 3.0 + 0.0) / 8 = 3.125
        self.assertEqual(bucketed_gpa(courses, grades), 3.13)

    def test_linear_gpa_ties_round_up(self):
        courses = [Course(id=1, name="A"), Course(id=2, name="B")]
        # 4 * 0.5 = 2.0 and 4 * 0.0625 = 0.25, mean 1.125
        grades = [grade(1, 50, 100, 100), grade(2, 625, 10000, 100)]
        self.assertEqual(linear_gpa(courses, grades), 1.13)
