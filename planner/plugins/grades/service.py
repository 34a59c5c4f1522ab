"""
Service layer: grade store.
"""
from typing import Any, Dict

from planner.core.entities import Grade
from planner.core.errors import ValidationError
from planner.core.store import EntityStore, to_float, to_int, to_text
from planner.plugins.courses.service import ensure_course_exists
from planner.plugins.grades.models import GradeRecord

GRADE_CATEGORIES = (
    "Homework",
    "Exams",
    "Quizzes",
    "Projects",
    "Labs",
    "Participation",
    "Essays",
    "Final Exam",
)


class GradeStore(EntityStore):
    model = GradeRecord
    kind = "Grade"
    fields = ("course_id", "category", "weight", "score", "total")
    required = ("course_id", "category", "weight", "score")
    order_by = ("course_id", "id")

    def _normalize(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if values.get("course_id") is not None:
            values["course_id"] = to_int(values["course_id"], "course_id")
        if "category" in values:
            values["category"] = to_text(values["category"], "category", required=True)
        for name in ("weight", "score", "total"):
            if values.get(name) is not None:
                values[name] = to_float(values[name], name)
        if "total" in values and values["total"] is None:
            del values["total"]
        return values

    def _validate(self, session, values: Dict[str, Any], changes: Dict[str, Any]) -> None:
        total = values.get("total")
        if total is not None and total <= 0:
            raise ValidationError("total must be greater than 0", field="total")
        weight = values.get("weight")
        if weight is not None and weight < 0:
            raise ValidationError("weight must not be negative", field="weight")
        score = values.get("score")
        if score is not None and score < 0:
            raise ValidationError("score must not be negative", field="score")
        if "course_id" in changes:
            ensure_course_exists(session, values.get("course_id"))

    def _to_entity(self, row: GradeRecord) -> Grade:
        return Grade(
            id=row.id,
            course_id=row.course_id,
            category=row.category,
            weight=row.weight,
            score=row.score,
            total=row.total,
        )

    def for_course(self, course_id: int):
        return [g for g in self.list() if g.course_id == course_id]
