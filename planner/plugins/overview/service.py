"""
Dashboard overview built from one snapshot of all four collections.
Shared by the /api/overview route and the `summary` CLI command.
"""
from datetime import datetime
from typing import Any, Dict, List

from planner.analytics.deadlines import days_until_due, upcoming
from planner.analytics.grades import linear_gpa
from planner.analytics.progress import (
    completion_rate,
    recent_sessions,
    status_counts,
    weekly_study_minutes,
)
from planner.analytics.schedule import classes_on, course_schedule
from planner.core.config import AnalyticsSettings
from planner.core.entities import PlannerSnapshot


def _iso(value: Any) -> Any:
    return value.isoformat() if value is not None else None


def build_overview(snapshot: PlannerSnapshot, now: datetime, settings: AnalyticsSettings) -> Dict[str, Any]:
    """
    Plain-data dashboard: numbers, ids and ISO strings only.
    current_gpa is the linear-scale GPA and is None when there are no courses.
    """
    courses = snapshot.courses
    by_id = {c.id: c for c in courses}
    counts = status_counts(snapshot.assignments)

    upcoming_rows: List[Dict[str, Any]] = []
    for a in upcoming(snapshot.assignments, now, settings.upcoming_window_days, settings.upcoming_limit):
        course = by_id.get(a.course_id)
        upcoming_rows.append({
            "id": a.id,
            "title": a.title,
            "course_id": a.course_id,
            "course_name": course.name if course else None,
            "due_date": _iso(a.due_date),
            "priority": a.priority,
            "days_until_due": days_until_due(a, now),
        })

    todays_classes = []
    for course in classes_on(courses, now):
        schedule = course_schedule(course)
        todays_classes.append({
            "id": course.id,
            "name": course.name,
            "code": course.code,
            "schedule": course.schedule,
            "start_time": _iso(schedule.start),
            "end_time": _iso(schedule.end),
        })

    recent = []
    for s in recent_sessions(snapshot.study_sessions, settings.recent_sessions_limit):
        course = by_id.get(s.course_id)
        recent.append({
            "id": s.id,
            "course_id": s.course_id,
            "course_name": course.name if course else None,
            "date": _iso(s.date),
            "duration": s.duration,
        })

    return {
        "generated_at": _iso(now),
        "current_gpa": linear_gpa(courses, snapshot.grades),
        "active_courses": len(courses),
        "pending_assignments": counts["pending"] + counts["in-progress"],
        "weekly_study_minutes": weekly_study_minutes(
            snapshot.study_sessions, now, settings.weekly_window_days
        ),
        "completion_rate": completion_rate(snapshot.assignments),
        "status_counts": counts,
        "upcoming_assignments": upcoming_rows,
        "todays_classes": todays_classes,
        "recent_sessions": recent,
    }
