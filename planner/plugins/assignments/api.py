"""
Per-plugin API for assignments. Mounted at /api/assignments/.
- /data: CRUD (see planner.api.crud).
- /list: assignment list view, ?status=all|pending|in-progress|completed&sort_by=due_date|priority|status.
- /upcoming: open assignments due inside the next window_days (defaults from config).
- /overdue: open assignments past their due date.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from planner.analytics.deadlines import (
    days_until_due,
    due_soon,
    filter_by_status,
    overdue,
    sort_assignments,
    upcoming,
)
from planner.api.crud import add_crud_routes
from planner.core.entities import Assignment
from planner.core.store import naive_local


class AssignmentCreate(BaseModel):
    """Payload for POST /data."""

    title: str
    course_id: int
    due_date: datetime
    priority: str = "medium"
    status: str = "pending"
    description: Optional[str] = None
    grade: Optional[float] = None


class AssignmentUpdate(BaseModel):
    """Payload for PATCH /data/{id}; only the fields sent are changed."""

    title: Optional[str] = None
    course_id: Optional[int] = None
    due_date: Optional[datetime] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    grade: Optional[float] = None


class AssignmentResponse(BaseModel):
    """One assignment."""

    id: int
    title: str
    course_id: int
    due_date: datetime
    priority: str
    status: str
    description: Optional[str] = None
    grade: Optional[float] = None


class DeadlineResponse(AssignmentResponse):
    """Assignment with its distance to the due date, relative to the request's now."""

    days_until_due: int
    due_soon: bool = False


def assignment_response(assignment: Assignment) -> AssignmentResponse:
    return AssignmentResponse(**assignment._asdict())


def deadline_response(assignment: Assignment, now: datetime) -> DeadlineResponse:
    return DeadlineResponse(
        **assignment._asdict(),
        days_until_due=days_until_due(assignment, now),
        due_soon=due_soon(assignment, now),
    )


def get_router(planner_app) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api/assignments."""
    router = APIRouter(tags=["Assignments"])

    add_crud_routes(
        router,
        lambda: planner_app.store.assignments,
        AssignmentCreate,
        AssignmentUpdate,
        AssignmentResponse,
        assignment_response,
    )

    @router.get("/list", response_model=List[AssignmentResponse])
    def list_view(status: str = "all", sort_by: str = "due_date") -> List[AssignmentResponse]:
        """Filtered and sorted assignment list."""
        assignments = filter_by_status(planner_app.store.assignments.list(), status)
        try:
            ordered = sort_assignments(assignments, sort_by)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return [assignment_response(a) for a in ordered]

    @router.get("/upcoming", response_model=List[DeadlineResponse])
    def upcoming_view(
        window_days: Optional[float] = None,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[DeadlineResponse]:
        """Open assignments due strictly within (now, now + window_days), soonest first."""
        settings = planner_app.analytics_settings
        now = naive_local(now) if now else datetime.now()
        selected = upcoming(
            planner_app.store.assignments.list(),
            now,
            window_days if window_days is not None else settings.upcoming_window_days,
            limit if limit is not None else settings.upcoming_limit,
        )
        return [deadline_response(a, now) for a in selected]

    @router.get("/overdue", response_model=List[DeadlineResponse])
    def overdue_view(now: Optional[datetime] = None) -> List[DeadlineResponse]:
        """Open assignments whose due date has passed, oldest first."""
        now = naive_local(now) if now else datetime.now()
        return [deadline_response(a, now) for a in overdue(planner_app.store.assignments.list(), now)]

    return router
