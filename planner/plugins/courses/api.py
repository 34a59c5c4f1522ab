"""
Per-plugin API for courses. Mounted at /api/courses/.
- /data: CRUD (see planner.api.crud).
- /today: courses meeting today (or on ?day=mon / ?day=2024-09-02).
"""
from datetime import date, time
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from planner.analytics.schedule import classes_on
from planner.api.crud import add_crud_routes
from planner.core.entities import Course


class CourseCreate(BaseModel):
    """Payload for POST /data."""

    name: str
    code: Optional[str] = None
    professor: Optional[str] = None
    schedule: Optional[str] = None
    color: str = "blue"
    credits: int = 3
    semester: Optional[str] = None


class CourseUpdate(BaseModel):
    """Payload for PATCH /data/{id}; only the fields sent are changed."""

    name: Optional[str] = None
    code: Optional[str] = None
    professor: Optional[str] = None
    schedule: Optional[str] = None
    color: Optional[str] = None
    credits: Optional[int] = None
    semester: Optional[str] = None


class CourseResponse(BaseModel):
    """Course with its parsed meeting days (0 = Monday) and times."""

    id: int
    name: str
    code: Optional[str] = None
    professor: Optional[str] = None
    schedule: Optional[str] = None
    color: Optional[str] = None
    credits: Optional[int] = None
    semester: Optional[str] = None
    meeting_days: List[int] = []
    start_time: Optional[time] = None
    end_time: Optional[time] = None


def course_response(course: Course) -> CourseResponse:
    data = course._asdict()
    data["meeting_days"] = sorted(int(day) for day in (course.meeting_days or ()))
    return CourseResponse(**data)


def _parse_day(day: Optional[str]):
    if day is None:
        return date.today()
    try:
        return date.fromisoformat(day)
    except ValueError:
        return day


def get_router(planner_app) -> Optional[APIRouter]:
    """Return router for this plugin; mounted with prefix /api/courses."""
    router = APIRouter(tags=["Courses"])

    add_crud_routes(
        router,
        lambda: planner_app.store.courses,
        CourseCreate,
        CourseUpdate,
        CourseResponse,
        course_response,
    )

    @router.get("/today", response_model=List[CourseResponse])
    def todays_classes(day: Optional[str] = None) -> List[CourseResponse]:
        """Courses meeting on the given day, earliest first."""
        try:
            courses = classes_on(planner_app.store.courses.list(), _parse_day(day))
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return [course_response(c) for c in courses]

    return router
