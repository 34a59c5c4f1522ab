"""
Grade aggregation: weighted course percentages and the two GPA conversions.

Two GPA policies coexist on purpose:
- linear_gpa: the dashboard "Current GPA", built from raw grade rows
  (sum of score/total * weight/100, times 4). Not derived from course_grade.
- bucketed_gpa: the grades view "Overall GPA", course_grade mapped through
  fixed letter-grade breakpoints.
Both average over every course, so a course with no grades pulls the mean down.
"""
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from planner.core.entities import Course, Grade

# (minimum percentage, grade points), checked top-down
GPA_BUCKETS = (
    (97, 4.0),
    (93, 3.7),
    (90, 3.3),
    (87, 3.0),
    (83, 2.7),
    (80, 2.3),
    (77, 2.0),
    (73, 1.7),
    (70, 1.3),
    (67, 1.0),
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, like a spreadsheet would."""
    return int(math.floor(value + 0.5))


def _finite(value) -> float:
    """Missing, NaN and infinite numbers count as 0."""
    if value is None or not math.isfinite(value):
        return 0.0
    return value


def _weight(grade: Grade) -> float:
    return _finite(grade.weight)


def _achievement(grade: Grade) -> float:
    """score/total; a non-positive or non-finite total or score contributes nothing."""
    total = _finite(grade.total)
    if total <= 0:
        return 0.0
    return _finite(grade.score) / total


def grades_for_course(course_id: int, grades: Iterable[Grade]) -> List[Grade]:
    return [g for g in grades if g.course_id == course_id]


def has_grades(course_id: int, grades: Iterable[Grade]) -> bool:
    """True when the course has at least one grade row. course_grade() returns 0 either way."""
    return any(g.course_id == course_id for g in grades)


def course_grade(course_id: int, grades: Iterable[Grade]) -> int:
    """
    Weighted percentage for one course, 0..100.
    Weights are renormalized by their sum, so they need not add up to 100.
    Returns 0 with no grades or a zero total weight.
    """
    course_grades = grades_for_course(course_id, grades)
    if not course_grades:
        return 0
    total_weight = sum(_weight(g) for g in course_grades)
    if total_weight <= 0:
        return 0
    weighted = sum(_achievement(g) * _weight(g) for g in course_grades)
    percentage = weighted / total_weight * 100
    if not math.isfinite(percentage):
        return 0
    return round_half_up(percentage)


def bucket_gpa(percentage: float) -> float:
    """Map a course percentage to grade points on the 4.0 scale."""
    for minimum, points in GPA_BUCKETS:
        if percentage >= minimum:
            return points
    return 0.0


def linear_course_gpa(course_id: int, grades: Iterable[Grade]) -> float:
    course_grades = grades_for_course(course_id, grades)
    if not course_grades:
        return 0.0
    weighted = sum(_achievement(g) * (_weight(g) / 100) for g in course_grades)
    return _finite(weighted * 4)


def _average(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    # Two decimals, ties upward: 3.125 -> 3.13
    mean = Decimal(str(sum(values) / len(values)))
    return float(mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def linear_gpa(courses: Sequence[Course], grades: Sequence[Grade]) -> Optional[float]:
    """Dashboard GPA. None when there are no courses at all."""
    return _average([linear_course_gpa(c.id, grades) for c in courses])


def bucketed_gpa(courses: Sequence[Course], grades: Sequence[Grade]) -> Optional[float]:
    """Grades-view GPA. None when there are no courses at all."""
    return _average([bucket_gpa(course_grade(c.id, grades)) for c in courses])


def average_grade(courses: Sequence[Course], grades: Sequence[Grade]) -> int:
    if not courses:
        return 0
    total = sum(course_grade(c.id, grades) for c in courses)
    return round_half_up(total / len(courses))


def course_grade_report(courses: Sequence[Course], grades: Sequence[Grade]) -> List[Dict[str, Any]]:
    """One row per course: percentage, grade points, and whether any grade exists."""
    report = []
    for course in courses:
        percentage = course_grade(course.id, grades)
        report.append({
            "course_id": course.id,
            "percentage": percentage,
            "gpa_points": bucket_gpa(percentage),
            "graded": has_grades(course.id, grades),
            "component_count": len(grades_for_course(course.id, grades)),
        })
    return report
