"""
Service layer: course store. Parses the schedule text into weekdays and times
on every write so matching never has to re-read the free text.
"""
from datetime import time
from typing import Any, Dict, Optional

from planner.analytics.schedule import Weekday, parse_schedule
from planner.core.entities import COURSE_COLORS, Course
from planner.core.errors import ValidationError
from planner.core.store import EntityStore, to_choice, to_int, to_text
from planner.plugins.courses.models import CourseRecord


def _time_to_str(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


def _str_to_time(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    hour, minute = value.split(":")
    return time(int(hour), int(minute))


def ensure_course_exists(session, course_id: Any) -> None:
    """Foreign-key check used by the course-scoped stores."""
    if course_id is None or session.get(CourseRecord, course_id) is None:
        raise ValidationError(f"Course {course_id} does not exist", field="course_id")


class CourseStore(EntityStore):
    model = CourseRecord
    kind = "Course"
    fields = ("name", "code", "professor", "schedule", "color", "credits", "semester")
    required = ("name",)
    order_by = ("name", "id")

    def _normalize(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if "name" in values:
            values["name"] = to_text(values["name"], "name", required=True)
        for name in ("code", "professor", "schedule", "semester"):
            if name in values:
                values[name] = to_text(values[name], name)
        if "color" in values:
            values["color"] = to_choice(values["color"], COURSE_COLORS, "color")
        if "credits" in values:
            values["credits"] = to_int(values["credits"], "credits")
        return values

    def _validate(self, session, values: Dict[str, Any], changes: Dict[str, Any]) -> None:
        credits = values.get("credits")
        if credits is not None and credits <= 0:
            raise ValidationError("credits must be greater than 0", field="credits")

    def _to_columns(self, values: Dict[str, Any]) -> Dict[str, Any]:
        columns = dict(values)
        if "schedule" in values:
            parsed = parse_schedule(values["schedule"])
            columns["meeting_days"] = sorted(int(day) for day in parsed.days)
            columns["start_time"] = _time_to_str(parsed.start)
            columns["end_time"] = _time_to_str(parsed.end)
        return columns

    def _to_entity(self, row: CourseRecord) -> Course:
        meeting_days = None
        if row.meeting_days is not None:
            meeting_days = frozenset(Weekday(day) for day in row.meeting_days)
        return Course(
            id=row.id,
            name=row.name,
            code=row.code,
            professor=row.professor,
            schedule=row.schedule,
            color=row.color,
            credits=row.credits,
            semester=row.semester,
            meeting_days=meeting_days,
            start_time=_str_to_time(row.start_time),
            end_time=_str_to_time(row.end_time),
        )
