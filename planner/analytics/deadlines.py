"""
Deadline windowing and the assignment-list orderings.
"""
import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from planner.core.entities import Assignment

COMPLETED = "completed"
PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}
SORT_KEYS = ("due_date", "priority", "status")


def _open(assignments: Iterable[Assignment]) -> List[Assignment]:
    return [a for a in assignments if a.status != COMPLETED and a.due_date is not None]


def upcoming(
    assignments: Iterable[Assignment],
    now: datetime,
    window_days: float = 7,
    limit: Optional[int] = 5,
) -> List[Assignment]:
    """
    Open assignments due strictly inside (now, now + window_days), soonest first.
    An assignment due exactly at now or exactly at the window edge is excluded.
    limit=None returns every match.
    """
    window_end = now + timedelta(days=window_days)
    selected = [a for a in _open(assignments) if now < a.due_date < window_end]
    selected.sort(key=lambda a: a.due_date)
    if limit is not None:
        selected = selected[:max(limit, 0)]
    return selected


def days_until_due(assignment: Assignment, now: datetime) -> int:
    """Whole days until due, rounded up; negative once overdue."""
    delta = assignment.due_date - now
    return math.ceil(delta.total_seconds() / 86400)


def overdue(assignments: Iterable[Assignment], now: datetime) -> List[Assignment]:
    """Open assignments whose due date has passed, oldest first."""
    late = [a for a in _open(assignments) if a.due_date < now]
    late.sort(key=lambda a: a.due_date)
    return late


def due_soon(assignment: Assignment, now: datetime, days: int = 3) -> bool:
    remaining = days_until_due(assignment, now)
    return 0 <= remaining <= days


def filter_by_status(assignments: Iterable[Assignment], status: str = "all") -> List[Assignment]:
    if status == "all":
        return list(assignments)
    return [a for a in assignments if a.status == status]


def sort_assignments(assignments: Sequence[Assignment], by: str = "due_date") -> List[Assignment]:
    """Order for the assignment list: by due date, by priority (high first), or by status name."""
    if by == "due_date":
        return sorted(assignments, key=lambda a: (a.due_date is None, a.due_date or datetime.min))
    if by == "priority":
        return sorted(assignments, key=lambda a: PRIORITY_ORDER.get(a.priority, 0), reverse=True)
    if by == "status":
        return sorted(assignments, key=lambda a: a.status or "")
    raise ValueError(f"Unknown sort key: {by!r} (expected one of {', '.join(SORT_KEYS)})")
