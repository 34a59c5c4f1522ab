"""
Service layer: study session store.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from planner.core.entities import StudySession
from planner.core.errors import ValidationError
from planner.core.store import EntityStore, to_datetime, to_int, to_text
from planner.plugins.courses.service import ensure_course_exists
from planner.plugins.study_sessions.models import StudySessionRecord


class StudySessionStore(EntityStore):
    model = StudySessionRecord
    kind = "StudySession"
    fields = ("course_id", "date", "duration", "notes")
    required = ("course_id", "date", "duration")
    order_by = ("date", "id")

    def _normalize(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if values.get("course_id") is not None:
            values["course_id"] = to_int(values["course_id"], "course_id")
        if values.get("date") is not None:
            values["date"] = to_datetime(values["date"], "date")
        if values.get("duration") is not None:
            values["duration"] = to_int(values["duration"], "duration")
        if "notes" in values:
            values["notes"] = to_text(values["notes"], "notes")
        return values

    def _validate(self, session, values: Dict[str, Any], changes: Dict[str, Any]) -> None:
        duration = values.get("duration")
        if duration is not None and duration <= 0:
            raise ValidationError("duration must be greater than 0", field="duration")
        if "course_id" in changes:
            ensure_course_exists(session, values.get("course_id"))

    def _to_entity(self, row: StudySessionRecord) -> StudySession:
        return StudySession(
            id=row.id,
            course_id=row.course_id,
            date=row.date,
            duration=row.duration,
            notes=row.notes,
        )

    def log_session(self, course_id: int, duration: int, completed_at: Optional[datetime] = None) -> StudySession:
        """Record a finished timer run; the note mirrors the timer's wording."""
        return self.create({
            "course_id": course_id,
            "date": completed_at or datetime.now(),
            "duration": duration,
            "notes": f"{duration} minute study session",
        })
