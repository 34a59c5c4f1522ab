"""
Completion ratios and study-time sums.
"""
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from planner.analytics.grades import round_half_up
from planner.core.entities import STATUSES, Assignment, Course, StudySession

SessionPredicate = Callable[[StudySession], bool]


def completion_rate(assignments: Sequence[Assignment]) -> int:
    """Percent of assignments completed, 0 for an empty collection."""
    if not assignments:
        return 0
    completed = sum(1 for a in assignments if a.status == "completed")
    return round_half_up(completed / len(assignments) * 100)


def status_counts(assignments: Iterable[Assignment]) -> Dict[str, int]:
    counts = {status: 0 for status in STATUSES}
    for assignment in assignments:
        if assignment.status in counts:
            counts[assignment.status] += 1
    return counts


def _minutes(session: StudySession) -> int:
    # Non-positive durations count as nothing
    if not session.duration or session.duration < 0:
        return 0
    return session.duration


def sum_duration(sessions: Iterable[StudySession], predicate: Optional[SessionPredicate] = None) -> int:
    """Total minutes over sessions matching predicate (all sessions when None)."""
    return sum(_minutes(s) for s in sessions if predicate is None or predicate(s))


def since(now: datetime, days: float) -> SessionPredicate:
    """Predicate: session recorded strictly after now - days."""
    cutoff = now - timedelta(days=days)
    return lambda session: session.date is not None and session.date > cutoff


def total_study_minutes(sessions: Iterable[StudySession]) -> int:
    return sum_duration(sessions)


def weekly_study_minutes(sessions: Iterable[StudySession], now: datetime, days: float = 7) -> int:
    return sum_duration(sessions, since(now, days))


def average_session_length(sessions: Sequence[StudySession]) -> int:
    if not sessions:
        return 0
    return round_half_up(total_study_minutes(sessions) / len(sessions))


def study_time_by_course(courses: Sequence[Course], sessions: Sequence[StudySession]) -> List[Dict[str, Any]]:
    """Minutes and session count per course. Sessions of unknown courses are skipped."""
    rows = []
    for course in courses:
        course_sessions = [s for s in sessions if s.course_id == course.id]
        rows.append({
            "course_id": course.id,
            "minutes": sum_duration(course_sessions),
            "sessions": len(course_sessions),
        })
    return rows


def recent_sessions(sessions: Iterable[StudySession], limit: int = 4) -> List[StudySession]:
    """Most recently recorded sessions first."""
    dated = [s for s in sessions if s.date is not None]
    dated.sort(key=lambda s: s.date, reverse=True)
    return dated[:max(limit, 0)]
