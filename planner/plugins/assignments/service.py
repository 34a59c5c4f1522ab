"""
Service layer: assignment store.
"""
from typing import Any, Dict

from planner.core.entities import PRIORITIES, STATUSES, Assignment
from planner.core.errors import ValidationError
from planner.core.store import EntityStore, to_choice, to_datetime, to_float, to_int, to_text
from planner.plugins.assignments.models import AssignmentRecord
from planner.plugins.courses.service import ensure_course_exists


class AssignmentStore(EntityStore):
    model = AssignmentRecord
    kind = "Assignment"
    fields = ("title", "course_id", "due_date", "priority", "status", "description", "grade")
    required = ("title", "course_id", "due_date")
    order_by = ("due_date", "id")

    def _normalize(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if "title" in values:
            values["title"] = to_text(values["title"], "title", required=True)
        if values.get("course_id") is not None:
            values["course_id"] = to_int(values["course_id"], "course_id")
        if values.get("due_date") is not None:
            values["due_date"] = to_datetime(values["due_date"], "due_date")
        if "priority" in values:
            values["priority"] = to_choice(values["priority"], PRIORITIES, "priority")
        if "status" in values:
            values["status"] = to_choice(values["status"], STATUSES, "status")
        if "description" in values:
            values["description"] = to_text(values["description"], "description")
        if values.get("grade") is not None:
            values["grade"] = to_float(values["grade"], "grade")
        return values

    def _validate(self, session, values: Dict[str, Any], changes: Dict[str, Any]) -> None:
        grade = values.get("grade")
        if grade is not None and not 0 <= grade <= 100:
            raise ValidationError("grade must be between 0 and 100", field="grade")
        if "course_id" in changes:
            ensure_course_exists(session, values.get("course_id"))

    def _to_entity(self, row: AssignmentRecord) -> Assignment:
        return Assignment(
            id=row.id,
            title=row.title,
            course_id=row.course_id,
            due_date=row.due_date,
            priority=row.priority,
            status=row.status,
            description=row.description,
            grade=row.grade,
        )

    def set_status(self, record_id: int, status: str) -> Assignment:
        """Toggle helper for the assignment list (pending / in-progress / completed)."""
        return self.update(record_id, {"status": status})
