"""
Per-plugin API for study sessions. Mounted at /api/study_sessions/.
- /data: CRUD (see planner.api.crud).
- /timer: record a finished study-timer run.
- /summary: total, weekly and average study time, streak, and minutes per course.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel

from planner.analytics.progress import (
    average_session_length,
    study_time_by_course,
    total_study_minutes,
    weekly_study_minutes,
)
from planner.analytics.streak import streak
from planner.api.crud import add_crud_routes
from planner.core.entities import StudySession
from planner.core.store import naive_local


class StudySessionCreate(BaseModel):
    """Payload for POST /data."""

    course_id: int
    date: datetime
    duration: int
    notes: Optional[str] = None


class StudySessionUpdate(BaseModel):
    """Payload for PATCH /data/{id}; only the fields sent are changed."""

    course_id: Optional[int] = None
    date: Optional[datetime] = None
    duration: Optional[int] = None
    notes: Optional[str] = None


class StudySessionResponse(BaseModel):
    """One study session; duration in minutes."""

    id: int
    course_id: int
    date: datetime
    duration: int
    notes: Optional[str] = None


class TimerRun(BaseModel):
    """Payload for POST /timer."""

    course_id: int
    duration: int = 25
    completed_at: Optional[datetime] = None


class CourseStudyTime(BaseModel):
    course_id: int
    course_name: Optional[str] = None
    minutes: int
    sessions: int


class StudySummaryResponse(BaseModel):
    """Response for GET /summary; all times in minutes."""

    total_minutes: int = 0
    weekly_minutes: int = 0
    average_minutes: int = 0
    streak_days: int = 0
    courses: List[CourseStudyTime] = []


def session_response(session: StudySession) -> StudySessionResponse:
    return StudySessionResponse(**session._asdict())


def get_router(planner_app) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api/study_sessions."""
    router = APIRouter(tags=["Study Sessions"])

    add_crud_routes(
        router,
        lambda: planner_app.store.study_sessions,
        StudySessionCreate,
        StudySessionUpdate,
        StudySessionResponse,
        session_response,
    )

    @router.post("/timer", response_model=StudySessionResponse, status_code=status.HTTP_201_CREATED)
    def finish_timer(run: TimerRun) -> StudySessionResponse:
        completed_at = naive_local(run.completed_at) if run.completed_at else None
        session = planner_app.store.study_sessions.log_session(run.course_id, run.duration, completed_at)
        return session_response(session)

    @router.get("/summary", response_model=StudySummaryResponse)
    def summary(now: Optional[datetime] = None) -> StudySummaryResponse:
        """Study-time figures relative to now (defaults to the server clock)."""
        settings = planner_app.analytics_settings
        now = naive_local(now) if now else datetime.now()
        courses = planner_app.store.courses.list()
        sessions = planner_app.store.study_sessions.list()
        names = {c.id: c.name for c in courses}
        return StudySummaryResponse(
            total_minutes=total_study_minutes(sessions),
            weekly_minutes=weekly_study_minutes(sessions, now, settings.weekly_window_days),
            average_minutes=average_session_length(sessions),
            streak_days=streak(sessions, now, settings.streak_lookback_days),
            courses=[
                CourseStudyTime(course_name=names.get(row["course_id"]), **row)
                for row in study_time_by_course(courses, sessions)
            ],
        )

    return router
